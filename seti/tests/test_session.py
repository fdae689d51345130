"""
Tests for sessions and the game loop.

Tests:
- Session lifecycle (create, get, end, cleanup)
- Loop states
- Rejections reported as error codes
"""

import pytest

from ..engine_core.interaction import PlacingObjectiveMarker
from ..session import GameLoop, LoopState, SessionManager, SessionState


class TestSessionManager:
    """Tests for SessionManager."""

    def test_create_session(self, session_manager):
        """A new session wraps a freshly set up game."""
        session = session_manager.create_session(["Alice", "Bob"], seed=5)

        assert session.state == SessionState.CREATED
        assert session.game.id == "game_5"
        assert session.is_active()
        assert session_manager.get_session(session.session_id) is session

    def test_invalid_player_count(self, session_manager):
        with pytest.raises(ValueError):
            session_manager.create_session(["Alice"])

        assert session_manager.list_active_sessions() == []

    def test_list_active_sessions(self, session_manager):
        first = session_manager.create_session(["Alice", "Bob"])
        second = session_manager.create_session(["Carol", "Dave", "Eve"])

        assert set(session_manager.list_active_sessions()) == {first.session_id, second.session_id}

    def test_end_unfinished_session(self, session_manager):
        """Ending a game that is not over abandons it."""
        session = session_manager.create_session(["Alice", "Bob"])

        ended = session_manager.end_session(session.session_id)

        assert ended.state == SessionState.ABANDONED
        assert session_manager.get_session(session.session_id) is None

    def test_end_finished_session(self, session_manager):
        session = session_manager.create_session(["Alice", "Bob"])
        session.engine.game.current_round = session.game.max_rounds
        loop = GameLoop(session)
        for player_id in ("player_0", "player_1"):
            keep = [c.id for c in session.game.get_player(player_id).hand[:4]]
            loop.submit_action("PASS", player_id, {"keepCardIds": keep})

        ended = session_manager.end_session(session.session_id)

        assert ended.state == SessionState.GAME_OVER

    def test_end_unknown_session(self, session_manager):
        assert session_manager.end_session("nope") is None

    def test_cleanup_stale_sessions(self, session_manager):
        session = session_manager.create_session(["Alice", "Bob"])
        session.last_activity -= 10

        removed = session_manager.cleanup_stale_sessions(max_age_seconds=5)

        assert removed == [session.session_id]
        assert session_manager.list_active_sessions() == []

    def test_cleanup_keeps_recent_sessions(self, session_manager):
        session_manager.create_session(["Alice", "Bob"])

        assert session_manager.cleanup_stale_sessions(max_age_seconds=60) == []


class TestGameLoop:
    """Tests for GameLoop."""

    def test_initial_state(self, game_loop):
        snapshot = game_loop.snapshot()

        assert game_loop.state == LoopState.WAITING_FOR_ACTION
        assert snapshot.success
        assert snapshot.current_player_id == "player_0"
        assert snapshot.pending_interaction is None
        assert snapshot.winners == []

    def test_submit_action(self, game_loop):
        result = game_loop.submit_action("LAUNCH_PROBE", "player_0")

        assert result.success
        assert result.loop_state == LoopState.WAITING_FOR_ACTION
        assert result.history[0] == {
            "message": "lance une sonde depuis la Terre",
            "playerId": "player_0",
            "sequenceId": "seq_1",
        }
        assert game_loop.session.state == SessionState.ACTIVE

    def test_unknown_action(self, game_loop):
        result = game_loop.submit_action("JUMP", "player_0")

        assert not result.success
        assert result.error_code == "INVALID_ACTION"
        assert result.errors == ["Unknown action type: JUMP"]
        assert game_loop.session.state == SessionState.CREATED

    def test_rule_refusal(self, game_loop):
        """Rule refusals keep the engine's code and messages."""
        result = game_loop.submit_action("LAUNCH_PROBE", "player_1")

        assert not result.success
        assert result.error_code == "NOT_PLAYER_TURN"
        assert result.errors == ["Ce n'est pas votre tour"]

    def test_waiting_for_choice(self, game_loop):
        game_loop.engine.queue.push(PlacingObjectiveMarker(milestone=25, player_id="player_0"))

        assert game_loop.state == LoopState.WAITING_FOR_CHOICE
        assert game_loop.legal_actions() == []
        assert game_loop.snapshot().pending_interaction["type"] == "PLACING_OBJECTIVE_MARKER"

    def test_submit_choice(self, game_loop):
        game_loop.engine.queue.push(PlacingObjectiveMarker(milestone=25, player_id="player_0"))
        tile_id = game_loop.engine.game.board.objective_tiles[0].id

        result = game_loop.submit_choice({"targetId": tile_id}, "player_0")

        assert result.success
        assert result.loop_state == LoopState.WAITING_FOR_ACTION

    def test_invalid_choice(self, game_loop):
        result = game_loop.submit_choice({"targetId": "nope"})

        assert not result.success
        assert result.error_code == "INVALID_CHOICE"
        assert result.errors == ["Aucune interaction en attente"]

    def test_end_turn(self, game_loop):
        game_loop.submit_action("LAUNCH_PROBE", "player_0")

        result = game_loop.end_turn("player_0")

        assert result.success
        assert result.current_player_id == "player_1"

    def test_end_turn_refused(self, game_loop):
        result = game_loop.end_turn()

        assert result.error_code == "CANNOT_END_TURN"

    def test_undo(self, game_loop):
        game_loop.submit_action("LAUNCH_PROBE", "player_0")

        result = game_loop.undo()

        assert result.success
        assert game_loop.engine.game.get_player("player_0").probes == []

    def test_nothing_to_undo(self, game_loop):
        result = game_loop.undo()

        assert result.error_code == "NOTHING_TO_UNDO"

    def test_legal_actions_are_wire_dicts(self, game_loop):
        actions = game_loop.legal_actions()

        assert {"type": "LAUNCH_PROBE", "playerId": "player_0"} in actions
