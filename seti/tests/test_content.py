"""
Tests for game setup.
"""

import pytest

from ..content import builtin_cards, create_game
from ..engine_core.enums import GamePhase


class TestCreateGame:
    """Tests for create_game."""

    def test_player_count_bounds(self):
        with pytest.raises(ValueError, match="Nombre de joueurs invalide"):
            create_game(["Solo"])
        with pytest.raises(ValueError, match="min 2, max 4"):
            create_game(["A", "B", "C", "D", "E"])

    def test_players(self, game):
        """Seat order sets ids and the starting score."""
        assert game.id == "game_42"
        assert [p.id for p in game.players] == ["player_0", "player_1"]
        assert [p.name for p in game.players] == ["Alice", "Bob"]
        assert [p.score for p in game.players] == [1, 2]
        alice = game.players[0]
        assert (alice.credits, alice.energy, alice.data, alice.media) == (4, 3, 0, 4)
        assert (alice.revenue_credits, alice.revenue_energy, alice.revenue_cards) == (3, 2, 1)

    def test_decks(self, game):
        """Row, round decks and hands are dealt from the shuffled deck."""
        assert all(len(p.hand) == 5 for p in game.players)
        assert len(game.decks.card_row) == 3
        assert sorted(game.decks.round_decks) == [1, 2, 3, 4]
        assert all(len(deck) == 3 for deck in game.decks.round_decks.values())
        assert len(game.decks.cards) == 67 - 3 - 12 - 10
        assert game.decks.discard_pile == []

    def test_board(self, game):
        assert game.phase == GamePhase.PLAYING
        assert game.current_player.id == "player_0"
        assert len(game.species) == 2
        assert len(game.board.objective_tiles) == 4
        assert all(t.id.startswith("objective-") for t in game.board.objective_tiles)
        assert all(len(stack) == 2 for stack in game.board.technology_board.stacks.values())
        assert game.board.sectors

    def test_history(self, game):
        messages = [e.message for e in game.history]

        assert messages[0] == "Alice a rejoint la partie (1er joueur) avec 1 PV"
        assert messages[1] == "Bob a rejoint la partie (2ème joueur) avec 2 PV"
        assert "pioche 5 cartes (Main de départ)" in messages
        assert game.history[-1].message == "--- DÉBUT DE LA PARTIE ---"
        assert game.history[-1].player_id == "system"

    def test_seed_is_reproducible(self):
        first = create_game(["Alice", "Bob"], seed=3)
        second = create_game(["Alice", "Bob"], seed=3)

        assert [c.id for c in first.players[0].hand] == [c.id for c in second.players[0].hand]
        assert [s.name for s in first.species] == [s.name for s in second.species]

    def test_custom_deck(self):
        cards = builtin_cards()[:40]

        game = create_game(["Alice", "Bob", "Carol"], cards=cards, seed=1)

        assert len(game.decks.round_decks[1]) == 4
        assert len(game.decks.cards) == 40 - 3 - 16 - 15
        assert game.neutral_milestones_available == {20: 1, 30: 1}
