"""
Tests for the game engine.

Tests:
- Turn flow and end_turn guards
- Undo through the ledger
- Missions claimed across turns
- Round and game end
- Milestones queued after a step
"""

import pytest

from ..engine_core.action_generator import is_legal
from ..engine_core.actions import ActionType, build_action
from ..engine_core.interaction import AcquiringCard, ChoosingMediaOrMove, InteractionType
from ..engine_core.interaction_resolver import Choice


def _pass(engine, player_id, round_card=False):
    player = engine.game.get_player(player_id)
    params = {"keepCardIds": [c.id for c in player.hand[:4]]}
    if round_card:
        params["roundCardId"] = engine.game.decks.round_decks[engine.game.current_round][0].id
    return engine.execute_action(build_action("PASS", player_id, params))


class TestTurnFlow:
    """Tests for end_turn."""

    def test_needs_main_action(self, engine):
        result = engine.end_turn()

        assert not result.success
        assert result.error_code == "CANNOT_END_TURN"
        assert result.error == "Vous devez effectuer une action principale"
        assert len(engine.ledger) == 0

    def test_interaction_pending(self, engine):
        engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))
        engine.queue.push(AcquiringCard())

        result = engine.end_turn("player_0")

        assert result.error_code == "INTERACTION_PENDING"

    def test_end_turn(self, engine):
        engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))

        result = engine.end_turn("player_0")

        assert result.success
        assert engine.game.current_player.id == "player_1"
        assert not engine.game.get_player("player_1").has_performed_main_action
        assert result.history_entries[-1].message == "commence son tour"
        assert engine.ledger.peek().label == "END_TURN"

    def test_sequence_ids_increase(self, engine):
        first = engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))
        second = engine.end_turn()

        assert first.history_entries[0].sequence_id == "seq_1"
        assert second.history_entries[0].sequence_id == "seq_2"

    def test_legal_actions(self, engine):
        types = {a.type for a in engine.legal_actions()}

        assert ActionType.LAUNCH_PROBE in types
        assert ActionType.BUY_CARD in types
        assert all(a.player_id == "player_0" for a in engine.legal_actions())

    def test_is_legal(self, engine):
        assert is_legal(engine.game, build_action("LAUNCH_PROBE", "player_0"), engine.queue)
        assert not is_legal(engine.game, build_action("LAUNCH_PROBE", "player_1"), engine.queue)


class TestUndo:
    """Tests for undo."""

    def test_undo_restores_state(self, engine):
        engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))

        game = engine.undo()

        player = game.get_player("player_0")
        assert player.credits == 4
        assert player.probes == []
        assert not player.has_performed_main_action
        assert len(engine.ledger) == 0

    def test_undo_restores_queue(self, engine):
        engine.queue.push(ChoosingMediaOrMove())
        engine.resolve(Choice(option="media"))

        engine.undo()

        assert engine.pending_interaction.type == InteractionType.CHOOSING_MEDIA_OR_MOVE
        assert engine.game.get_player("player_0").media == 4

    def test_nothing_to_undo(self, engine):
        with pytest.raises(ValueError, match="Nothing to undo"):
            engine.undo()


class TestMissionFlow:
    """A triggered mission claimed on a later turn."""

    def test_launch_program(self, engine, give):
        give(engine.game, "player_0", "214")
        assert engine.execute_action(build_action("PLAY_CARD", "player_0", {"cardId": "214"})).success
        assert engine.end_turn().success
        assert engine.execute_action(build_action("LAUNCH_PROBE", "player_1")).success
        assert engine.end_turn().success

        launched = engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))

        assert "peut accomplir une condition de la mission \"Programme de Lancement\"" in [
            e.message for e in launched.history_entries
        ]
        assert any(a.type == ActionType.ACCOMPLISH_MISSION for a in engine.legal_actions())

        media = engine.game.get_player("player_0").media
        result = engine.execute_action(build_action(
            "ACCOMPLISH_MISSION", "player_0", {"missionId": "mission_1", "requirementId": "mission_1:0"}))

        assert result.success
        player = engine.game.get_player("player_0")
        assert player.missions[0].completed
        assert player.media == media + 1
        assert "termine la mission \"Programme de Lancement\"" in [e.message for e in result.history_entries]

    def test_unfulfilled_requirement(self, engine, give):
        give(engine.game, "player_0", "214")
        engine.execute_action(build_action("PLAY_CARD", "player_0", {"cardId": "214"}))

        result = engine.execute_action(build_action(
            "ACCOMPLISH_MISSION", "player_0", {"missionId": "mission_1"}))

        assert result.error_code == "REQUIREMENT_NOT_FULFILLABLE"

    def test_conditional_mission_checked_after_step(self, engine, give):
        """Crossing 8 media makes Campagne Publique claimable."""
        give(engine.game, "player_0", "204", "110")
        engine.execute_action(build_action("PLAY_CARD", "player_0", {"cardId": "204"}))
        engine.end_turn()
        engine.execute_action(build_action("LAUNCH_PROBE", "player_1"))
        engine.end_turn()
        engine.game.get_player("player_0").media = 5

        result = engine.execute_action(build_action("PLAY_CARD", "player_0", {"cardId": "110"}))

        mission = engine.game.get_player("player_0").missions[0]
        assert mission.fulfillable_requirement_ids == ["mission_1:0"]
        assert "peut accomplir une condition de la mission \"Campagne Publique\"" in [
            e.message for e in result.history_entries
        ]


class TestRounds:
    """Tests for the end of rounds and of the game."""

    def test_round_ends_when_everybody_passed(self, engine):
        assert _pass(engine, "player_0").success
        result = _pass(engine, "player_1")

        game = engine.game
        alice = game.get_player("player_0")
        assert result.success
        assert game.current_round == 2
        assert game.current_player.id == "player_1"
        assert (alice.credits, alice.energy, len(alice.hand)) == (7, 5, 5)
        assert not alice.has_passed
        assert "Début de la manche 2" in [e.message for e in result.history_entries]

    def test_round_card(self, engine):
        round_card = engine.game.decks.round_decks[1][0]

        _pass(engine, "player_0", round_card=True)

        assert round_card in engine.game.get_player("player_0").hand
        assert round_card not in engine.game.decks.round_decks[1]

    def test_game_over(self, engine):
        engine.game.current_round = engine.game.max_rounds

        _pass(engine, "player_0")
        result = _pass(engine, "player_1")

        assert result.success
        assert engine.is_game_over
        assert engine.winners() == ["player_1"]
        assert engine.game.final_scores["player_1"]["total"] == 2
        assert engine.legal_actions() == []

    def test_no_action_after_game_over(self, engine):
        engine.game.current_round = engine.game.max_rounds
        _pass(engine, "player_0")
        _pass(engine, "player_1")

        result = engine.execute_action(build_action("LAUNCH_PROBE", "player_1"))

        assert result.error_code == "INVALID_TURN"

    def test_no_winner_while_playing(self, engine):
        assert engine.winners() == []


class TestMilestones:
    """Golden milestones reached during a step."""

    def test_marker_prompt(self, engine):
        engine.game.get_player("player_0").score = 25

        result = engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))

        pending = result.pending_interaction
        assert pending.type == InteractionType.PLACING_OBJECTIVE_MARKER
        assert pending.player_id == "player_0"
        assert pending.sequence_id == "seq_1"
        assert engine.end_turn().error_code == "INTERACTION_PENDING"

    def test_place_marker_then_end_turn(self, engine):
        engine.game.get_player("player_0").score = 25
        engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))
        tile = engine.game.board.objective_tiles[0]

        engine.resolve(Choice(target_id=tile.id), "player_0")

        assert engine.queue.is_idle()
        assert engine.end_turn().success
