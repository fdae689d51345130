"""
Tests for the rule systems.

Tests:
- Mission lifecycle (triggered and conditional)
- Technology availability by scope
- Score milestones
- Round end and revenues
- Final scoring and winners
"""

import pytest

from ..engine_core.enums import GamePhase, ObjectiveCategory, SectorType, TechnologyCategory
from ..engine_core.interaction import PlacingObjectiveMarker
from ..engine_core.state import ObjectiveTile
from ..engine_core.systems import cards, milestones, missions, probes, scoring, turns


class TestMissions:
    """Tests for missions."""

    def test_triggered_requirement(self, game, give):
        """A launch makes the GAIN_ON_LAUNCH requirement claimable."""
        give(game, "player_0", "214")
        game = cards.play_card(game, "player_0", "214").game
        mission = game.get_player("player_0").missions[0]
        assert mission.fulfillable_requirement_ids == []

        step, _ = probes.launch_probe(game, "player_0")

        mission = step.game.get_player("player_0").missions[0]
        assert mission.fulfillable_requirement_ids == [mission.requirement_id(0)]
        assert "peut accomplir une condition de la mission \"Programme de Lancement\"" in [
            e.message for e in step.history_entries
        ]

    def test_accomplish(self, game, give):
        give(game, "player_0", "214")
        game = cards.play_card(game, "player_0", "214").game
        launched, _ = probes.launch_probe(game, "player_0")
        game = launched.game

        step = missions.accomplish_requirement(game, "player_0", "mission_1")

        mission = step.game.get_player("player_0").missions[0]
        assert mission.completed
        assert mission.completed_requirement_ids == ["mission_1:0"]
        assert step.bonus.media == 1
        assert step.history_entries[-1].message == "termine la mission \"Programme de Lancement\""

    def test_cannot_accomplish_unfulfilled(self, game, give):
        give(game, "player_0", "214")
        game = cards.play_card(game, "player_0", "214").game
        player = game.get_player("player_0")

        assert missions.can_accomplish(player, "mission_1") == (False, "REQUIREMENT_NOT_FULFILLABLE")
        assert missions.can_accomplish(player, "mission_9") == (False, "MISSION_NOT_FOUND")
        with pytest.raises(ValueError):
            missions.accomplish_requirement(game, "player_0", "mission_1")

    def test_conditional_requirement(self, game, give):
        """GAIN_IF requirements become claimable once the condition holds."""
        give(game, "player_0", "204")
        game = cards.play_card(game, "player_0", "204").game

        assert missions.check_conditions(game, "player_0").history_entries == []

        game.get_player("player_0").media = 8
        step = missions.check_conditions(game, "player_0")

        assert missions.fulfillable(step.game.get_player("player_0")) == [("mission_1", "mission_1:0")]
        reward = missions.accomplish_requirement(step.game, "player_0", "mission_1", "mission_1:0").bonus
        assert reward.pv == 4

    def test_requirement_reward(self, cards_by_id):
        requirement = cards_by_id["208"].permanent_effects[0]

        assert missions.requirement_reward(requirement).media == 2


class TestTechnologyBoard:
    """Tests for technology availability by scope."""

    def test_exploration_or_observation(self, game):
        available = game.board.technology_board.available(TechnologyCategory.EXPLORATION_OR_OBSERVATION)

        assert available
        assert {t.category for t in available} == {TechnologyCategory.EXPLORATION, TechnologyCategory.OBSERVATION}

    def test_any_scope(self, game):
        board = game.board.technology_board

        assert board.available(TechnologyCategory.ANY) == board.available()


class TestMilestones:
    """Tests for score milestones."""

    def test_golden_milestone(self, game):
        game.get_player("player_0").score = 26

        step = milestones.check_milestones(game, "player_0", "seq_4")

        assert step.interactions == [PlacingObjectiveMarker(sequence_id="seq_4", milestone=25, player_id="player_0")]
        player = step.game.get_player("player_0")
        assert player.claimed_golden_milestones == [25]
        assert 20 in player.claimed_neutral_milestones

    def test_milestone_claimed_once(self, game):
        game.get_player("player_0").score = 25
        game = milestones.check_milestones(game, "player_0").game

        step = milestones.check_milestones(game, "player_0")

        assert step.interactions == []

    def test_no_open_tile(self, game):
        game.get_player("player_0").score = 25
        for tile in game.board.objective_tiles:
            tile.markers.append("player_0")

        step = milestones.check_milestones(game, "player_0")

        assert step.interactions == []
        assert step.game.get_player("player_0").claimed_golden_milestones == [25]

    def test_marker_once_per_tile(self, game):
        tile = game.board.objective_tiles[0]
        game = milestones.place_objective_marker(game, "player_0", tile.id).game

        ok, _ = milestones.can_place_objective_marker(game, "player_0", tile.id)

        assert not ok
        assert game.board.objective_tiles[0].markers == ["player_0"]


class TestRounds:
    """Tests for turn order and the end of a round."""

    def test_end_turn_needs_main_action(self, game):
        assert turns.can_end_turn(game, "player_0") == (False, "Vous devez effectuer une action principale")

    def test_end_round(self, game):
        step = turns.end_round(game)

        game = step.game
        alice = game.get_player("player_0")
        assert game.current_round == 2
        assert game.first_player_index == 1
        assert game.current_player.id == "player_1"
        assert (alice.credits, alice.energy, len(alice.hand)) == (7, 5, 6)
        assert step.history_entries[0].message == "Fin de la manche 1"

    def test_last_round_ends_the_game(self, game):
        game.current_round = game.max_rounds

        step = turns.end_round(game)

        assert step.game.phase == GamePhase.FINAL_SCORING
        assert set(step.game.final_scores) == {"player_0", "player_1"}


class TestScoring:
    """Tests for final scoring."""

    def test_breakdown_without_bonuses(self, game):
        breakdown = scoring.score_breakdown(game, "player_1")

        assert breakdown.to_dict() == {
            "base": 2, "mission_end_game": 0, "objective_tiles": 0, "species_bonuses": 0, "total": 2,
        }

    def test_end_game_card(self, game, cards_by_id):
        """Grand Relevé du Ciel pays 2 pv per red sector with the player's presence."""
        player = game.get_player("player_0")
        player.played_cards.append(cards_by_id["222"])
        red = [s for s in game.board.sectors if s.color == SectorType.RED]
        red[0].covered_by.append("player_0")

        assert scoring.score_breakdown(game, "player_0").mission_end_game == 2

    def test_objective_tile_by_position(self, game):
        """Second marker gets the second reward times the number of sets."""
        game.board.objective_tiles = [ObjectiveTile(
            id="objective-revenue", category=ObjectiveCategory.REVENUE, side="B",
            name="Revenus", rewards=(5, 3, 2), markers=["player_1", "player_0"],
        )]
        game.get_player("player_0").revenue_credits += 2

        assert scoring.score_breakdown(game, "player_0").objective_tiles == 6

    def test_apply_final_scores(self, game):
        game.get_player("player_0").score = 10

        step = scoring.apply_final_scores(game)

        assert step.game.final_scores["player_0"]["total"] == 10
        assert step.game.get_player("player_0").score == 10
        assert scoring.winners(step.game) == ["player_0"]

    def test_tied_winners(self, game):
        game.get_player("player_0").score = 5
        game.get_player("player_1").score = 5

        assert scoring.winners(game) == ["player_0", "player_1"]
