"""
Tests for player actions.

Tests:
- build_action parsing of wire requests
- Abstract action hooks
- Shared validation (turn, pass, pending interaction, main action)
- Validation and execution of card, probe, trade and pass actions
"""

import pytest

from ..engine_core.actions import (
    ActionType,
    BaseAction,
    BuyCardAction,
    MoveProbeAction,
    PassAction,
    PlayCardAction,
    build_action,
)
from ..engine_core.enums import ProbeState
from ..engine_core.interaction import AcquiringCard


class TestBuildAction:
    """Tests for build_action."""

    def test_camel_case_params(self):
        action = build_action("play_card", "player_0", {"cardId": "110"})

        assert isinstance(action, PlayCardAction)
        assert action.card_id == "110"
        assert action.is_main

    def test_list_params(self):
        action = build_action("PASS", "player_0", {"keepCardIds": ["1", "2"], "roundCardId": "3"})

        assert isinstance(action, PassAction)
        assert action.keep_card_ids == ["1", "2"]
        assert action.round_card_id == "3"

    def test_target_becomes_cell(self):
        action = build_action(ActionType.MOVE_PROBE, "player_0", {"probeId": "probe_1", "target": ["B", "4"]})

        assert isinstance(action, MoveProbeAction)
        assert action.target == ("B", 4)
        assert not action.is_main

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown action type: JUMP"):
            build_action("JUMP", "player_0")

    def test_unknown_param(self):
        with pytest.raises(ValueError, match="Invalid parameters"):
            build_action("BUY_CARD", "player_0", {"color": "red"})

    def test_to_dict(self):
        action = build_action("BUY_CARD", "player_0", {"cardId": "110"})

        assert action.to_dict() == {"type": "BUY_CARD", "playerId": "player_0", "cardId": "110"}


class TestActionHooks:
    """Tests for the abstract hooks of BaseAction."""

    def test_base_action_is_abstract(self):
        with pytest.raises(TypeError):
            BaseAction(player_id="player_0")

    def test_missing_execute_fails_on_creation(self):
        class ValidateOnly(BaseAction):
            type = ActionType.LAUNCH_PROBE

            def _validate(self, game):
                return None

        with pytest.raises(TypeError):
            ValidateOnly(player_id="player_0")


class TestCommonValidation:
    """Checks shared by every action."""

    def test_unknown_player(self, engine):
        result = engine.execute_action(build_action("LAUNCH_PROBE", "player_9"))

        assert not result.success
        assert result.error_code == "PLAYER_NOT_FOUND"
        assert result.error == "Joueur non trouvé"

    def test_not_player_turn(self, engine):
        result = engine.execute_action(build_action("LAUNCH_PROBE", "player_1"))

        assert result.error_code == "NOT_PLAYER_TURN"
        assert result.error == "Ce n'est pas votre tour"

    def test_player_passed(self, engine):
        engine.game.get_player("player_0").has_passed = True

        result = engine.execute_action(build_action("BUY_CARD", "player_0"))

        assert result.error_code == "PLAYER_PASSED"

    def test_interaction_pending(self, engine):
        engine.queue.push(AcquiringCard())

        result = engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))

        assert result.error_code == "INTERACTION_PENDING"
        assert result.error == "Une interaction est en attente (ACQUIRING_CARD)"

    def test_one_main_action_per_turn(self, engine):
        assert engine.execute_action(build_action("LAUNCH_PROBE", "player_0")).success

        result = engine.execute_action(build_action("PLAY_CARD", "player_0", {"cardId": "x"}))

        assert result.error_code == "ALREADY_PERFORMED_MAIN_ACTION"

    def test_free_actions_after_main(self, engine):
        engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))

        result = engine.execute_action(build_action("BUY_CARD", "player_0"))

        assert result.success

    def test_rejection_changes_nothing(self, engine):
        before = engine.game

        engine.execute_action(build_action("LAUNCH_PROBE", "player_1"))

        assert engine.game is before
        assert len(engine.ledger) == 0
        assert engine.game.counters.get("seq") is None


class TestCardActions:
    """Tests for BUY_CARD and PLAY_CARD."""

    def test_buy_needs_media(self, engine):
        engine.game.get_player("player_0").media = 2

        result = engine.execute_action(build_action("BUY_CARD", "player_0"))

        assert not result.success
        assert result.error_code == "INSUFFICIENT_MEDIAS"
        assert result.error == "Médias insuffisants (Requis: 3)"
        assert [e.code for e in result.errors] == ["INSUFFICIENT_MEDIAS"]

    def test_buy_from_row(self, engine):
        row_card = engine.game.decks.card_row[1]

        result = engine.execute_action(build_action("BUY_CARD", "player_0", {"cardId": row_card.id}))

        player = engine.game.get_player("player_0")
        assert result.success
        assert player.media == 1
        assert row_card in player.hand
        assert len(engine.game.decks.card_row) == 3
        assert result.history_entries[0].message == f"achète \"{row_card.name}\" pour 3 Médias"

    def test_buy_unknown_row_card(self, engine):
        result = engine.execute_action(BuyCardAction(player_id="player_0", card_id="nope"))

        assert result.error_code == "CARD_NOT_FOUND"

    def test_play_unknown_card(self, engine):
        result = engine.execute_action(build_action("PLAY_CARD", "player_0", {"cardId": "nope"}))

        assert result.error_code == "CARD_NOT_FOUND"
        assert result.error == "Carte non trouvée"

    def test_play_needs_credits(self, engine, give):
        give(engine.game, "player_0", "110")
        engine.game.get_player("player_0").credits = 0

        result = engine.execute_action(build_action("PLAY_CARD", "player_0", {"cardId": "110"}))

        assert result.error_code == "INSUFFICIENT_CREDITS"
        assert result.error == "Crédits insuffisants (Requis: 1)"

    def test_play_action_card(self, engine, give):
        """The card is paid, its gains applied and it goes to the discard pile."""
        give(engine.game, "player_0", "110")

        result = engine.execute_action(build_action("PLAY_CARD", "player_0", {"cardId": "110"}))

        player = engine.game.get_player("player_0")
        assert result.success
        assert player.credits == 3
        assert player.media == 7
        assert player.has_performed_main_action
        assert engine.game.decks.discard_pile[-1].id == "110"
        messages = [e.message for e in result.history_entries]
        assert messages[0] == "joue \"Conférence de Presse\""
        assert "gagne 3 Médias" in messages
        assert all(e.sequence_id == "seq_1" for e in result.history_entries)

    def test_play_data_card(self, engine, give):
        give(engine.game, "player_0", "137")

        engine.execute_action(build_action("PLAY_CARD", "player_0", {"cardId": "137"}))

        assert engine.game.get_player("player_0").data == 2

    def test_play_mission_card(self, engine, give):
        """Mission cards stay in play as tracked missions."""
        give(engine.game, "player_0", "214")

        result = engine.execute_action(build_action("PLAY_CARD", "player_0", {"cardId": "214"}))

        player = engine.game.get_player("player_0")
        assert [m.card_id for m in player.missions] == ["214"]
        assert player.missions[0].id == "mission_1"
        assert "lance la mission \"Programme de Lancement\"" in [e.message for e in result.history_entries]
        assert all(c.id != "214" for c in engine.game.decks.discard_pile)


class TestProbeActions:
    """Tests for LAUNCH_PROBE."""

    def test_launch(self, engine):
        result = engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))

        player = engine.game.get_player("player_0")
        assert result.success
        assert player.credits == 2
        assert [p.id for p in player.probes] == ["probe_1"]
        assert player.probes[0].state == ProbeState.IN_SOLAR_SYSTEM
        assert result.history_entries[0].message == "lance une sonde depuis la Terre"

    def test_launch_needs_credits(self, engine):
        engine.game.get_player("player_0").credits = 1

        result = engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))

        assert result.error_code == "CANNOT_LAUNCH"
        assert result.error == "Crédits insuffisants (Requis: 2)"

    def test_probe_limit(self, engine):
        engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))
        engine.game.get_player("player_0").has_performed_main_action = False

        result = engine.execute_action(build_action("LAUNCH_PROBE", "player_0"))

        assert result.error_code == "CANNOT_LAUNCH"
        assert result.error == "Limite de sondes atteinte (1)"


class TestTradeAction:
    """Tests for TRADE_RESOURCES."""

    def test_credits_for_energy(self, engine):
        result = engine.execute_action(
            build_action("TRADE_RESOURCES", "player_0", {"spend": "credit", "gain": "energy"}))

        player = engine.game.get_player("player_0")
        assert result.success
        assert (player.credits, player.energy) == (2, 4)
        assert result.history_entries[0].message == "échange 2 Crédits contre 1 Énergie"

    def test_cards_for_credit(self, engine):
        hand = engine.game.get_player("player_0").hand
        card_ids = [hand[0].id, hand[1].id]

        engine.execute_action(build_action(
            "TRADE_RESOURCES", "player_0", {"spend": "card", "gain": "credit", "cardIds": card_ids}))

        player = engine.game.get_player("player_0")
        assert len(player.hand) == 3
        assert player.credits == 5
        assert [c.id for c in engine.game.decks.discard_pile[-2:]] == card_ids

    def test_same_resource(self, engine):
        result = engine.execute_action(
            build_action("TRADE_RESOURCES", "player_0", {"spend": "energy", "gain": "energy"}))

        assert result.error_code == "CANNOT_TRADE"

    def test_not_enough(self, engine):
        engine.game.get_player("player_0").energy = 1

        result = engine.execute_action(
            build_action("TRADE_RESOURCES", "player_0", {"spend": "energy", "gain": "credit"}))

        assert result.error_code == "CANNOT_TRADE"


class TestPassAction:
    """Tests for PASS."""

    def test_too_many_cards(self, engine):
        result = engine.execute_action(build_action("PASS", "player_0"))

        assert result.error_code == "TOO_MANY_CARDS"
        assert result.error == "Vous devez garder au plus 4 cartes"

    def test_invalid_kept_cards(self, engine):
        result = engine.execute_action(build_action("PASS", "player_0", {"keepCardIds": ["nope"]}))

        assert result.error_code == "INVALID_CARDS"

    def test_invalid_round_card(self, engine):
        keep = [c.id for c in engine.game.get_player("player_0").hand[:4]]

        result = engine.execute_action(
            build_action("PASS", "player_0", {"keepCardIds": keep, "roundCardId": "nope"}))

        assert result.error_code == "INVALID_ROUND_CARD"

    def test_pass(self, engine):
        """Passing trims the hand, turns the system and hands over the turn."""
        player = engine.game.get_player("player_0")
        keep = [c.id for c in player.hand[:4]]
        rotation = list(engine.game.board.solar_system.rotation)
        round_card = engine.game.decks.round_decks[1][0]

        result = engine.execute_action(
            build_action("PASS", "player_0", {"keepCardIds": keep, "roundCardId": round_card.id}))

        player = engine.game.get_player("player_0")
        assert result.success
        assert player.has_passed
        assert not player.has_performed_main_action
        assert [c.id for c in player.hand] == keep + [round_card.id]
        assert engine.game.is_first_to_pass
        assert engine.game.board.solar_system.rotation != rotation
        assert engine.game.current_player.id == "player_1"
        messages = [e.message for e in result.history_entries]
        assert "passe son tour" in messages
        assert "commence son tour" in messages
