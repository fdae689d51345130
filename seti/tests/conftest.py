"""
Pytest fixtures for SETI engine tests.
"""

import pytest

from ..content import builtin_cards, create_game
from ..engine_core.engine import GameEngine
from ..engine_core.state import Card, Game
from ..session import GameLoop, SessionManager


@pytest.fixture
def cards_by_id() -> dict[str, Card]:
    """Built-in deck indexed by card id."""
    return {card.id: card for card in builtin_cards()}


@pytest.fixture
def game() -> Game:
    """A fresh, seeded 2-player game."""
    return create_game(["Alice", "Bob"], seed=42)


@pytest.fixture
def engine(game: Game) -> GameEngine:
    """Engine driving the seeded 2-player game."""
    return GameEngine(game)


@pytest.fixture
def give(cards_by_id):
    """Put built-in cards into a player's hand, in place."""
    def _give(game: Game, player_id: str, *card_ids: str) -> None:
        player = game.get_player(player_id)
        for card_id in card_ids:
            player.hand.insert(0, cards_by_id[card_id])
    return _give


@pytest.fixture
def session_manager() -> SessionManager:
    return SessionManager()


@pytest.fixture
def game_loop(session_manager: SessionManager) -> GameLoop:
    """Game loop over a seeded 2-player session."""
    session = session_manager.create_session(["Alice", "Bob"], seed=7)
    return GameLoop(session)
