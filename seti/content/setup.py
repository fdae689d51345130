"""
Game Setup - Creates the initial game state.

This module handles:
- Creating players with seat-based starting scores
- Shuffling the action deck with a seed for determinism
- Dealing the card row, the round decks and the starting hands
- Laying out the board: sectors, planets, technology stacks, alien boards
  and objective tiles

The setup follows the base game rules for 2-4 players.
"""

from __future__ import annotations
import logging
import random

from .. import config
from ..effects.card_loader import load_cards
from ..engine_core.constants import (
    CARD_ROW_SIZE, INITIAL_CREDITS, INITIAL_DATA, INITIAL_ENERGY, INITIAL_HAND_SIZE,
    INITIAL_MEDIA_COVERAGE, INITIAL_REVENUE_CARDS, INITIAL_REVENUE_CREDITS, INITIAL_REVENUE_ENERGY,
    MAX_PLAYERS, MAX_ROUNDS, MIN_PLAYERS, NEUTRAL_MILESTONES, ROUND_DECK_ROUNDS,
)
from ..engine_core.enums import GamePhase
from ..engine_core.state import Board, Card, Decks, Game, Player
from ..engine_core.systems.computer import create_computer
from .board import create_alien_boards, create_planets, create_sectors
from .cards import builtin_cards
from .objectives import create_objective_tiles
from .species import draw_species
from .technologies import create_technology_board

logger = logging.getLogger(__name__)

PLAYER_COLORS = ("#4a90e2", "#e24a4a", "#f5c542", "#4ae28a")


def create_game(
    player_names: list[str],
    cards: list[Card] | None = None,
    seed: int | None = None,
) -> Game:
    """
    Set up a new game.

    Args:
        player_names: Names in seat order (2-4)
        cards: Action deck; defaults to SETI_CARDS_PATH, then the built-in deck
        seed: Seed for deterministic shuffling

    Returns:
        Initial Game ready for play
    """
    if not MIN_PLAYERS <= len(player_names) <= MAX_PLAYERS:
        raise ValueError(f"Nombre de joueurs invalide (min {MIN_PLAYERS}, max {MAX_PLAYERS})")

    rng = random.Random(seed)
    game_seed = seed if seed is not None else rng.randint(0, 999999)

    players = _create_players(player_names)
    deck = list(cards) if cards is not None else _default_cards()
    rng.shuffle(deck)

    species = draw_species(rng)
    board = Board(
        sectors=create_sectors(),
        planets=create_planets(),
        technology_board=create_technology_board(rng, copies=len(players)),
        alien_boards=create_alien_boards([s.name for s in species]),
        objective_tiles=create_objective_tiles(rng),
    )

    game = Game(
        id=f"game_{game_seed}",
        players=players,
        board=board,
        decks=_deal_decks(deck, len(players)),
        species=species,
        max_rounds=MAX_ROUNDS,
        phase=GamePhase.SETUP,
        neutral_milestones_available={m: MAX_PLAYERS - len(players) for m in NEUTRAL_MILESTONES},
        seed=game_seed,
    )

    for index, player in enumerate(game.players):
        rank = "1er" if index == 0 else f"{index + 1}ème"
        game.log(f"{player.name} a rejoint la partie ({rank} joueur) avec {player.score} PV", player.id)
    _deal_hands(game)
    game.log("--- DÉBUT DE LA PARTIE ---", "system")

    game.phase = GamePhase.PLAYING
    logger.info("Created game %s for %d players", game.id, len(players))
    return game


def _default_cards() -> list[Card]:
    if config.SETI_CARDS_PATH:
        report = load_cards(config.SETI_CARDS_PATH)
        logger.info("Loaded %d cards from %s", len(report.cards), config.SETI_CARDS_PATH)
        return report.cards
    return builtin_cards()


def _create_players(player_names: list[str]) -> list[Player]:
    """Create players; the seat index sets the starting score."""
    return [
        Player(
            id=f"player_{index}",
            name=name,
            credits=INITIAL_CREDITS,
            energy=INITIAL_ENERGY,
            data=INITIAL_DATA,
            media=INITIAL_MEDIA_COVERAGE,
            revenue_credits=INITIAL_REVENUE_CREDITS,
            revenue_energy=INITIAL_REVENUE_ENERGY,
            revenue_cards=INITIAL_REVENUE_CARDS,
            computer=create_computer(),
            score=index + 1,
            color=PLAYER_COLORS[index % len(PLAYER_COLORS)],
        )
        for index, name in enumerate(player_names)
    ]


def _deal_decks(deck: list[Card], num_players: int) -> Decks:
    """Split the shuffled deck into the card row, round decks and draw pile."""
    row, deck = deck[:CARD_ROW_SIZE], deck[CARD_ROW_SIZE:]
    round_decks = {}
    per_round = num_players + 1
    for round_number in range(1, ROUND_DECK_ROUNDS + 1):
        round_decks[round_number], deck = deck[:per_round], deck[per_round:]
    return Decks(cards=deck, card_row=row, round_decks=round_decks)


def _deal_hands(game: Game) -> None:
    """Deal the starting hands from the draw pile. In place."""
    for player in game.players:
        dealt = game.decks.cards[:INITIAL_HAND_SIZE]
        game.decks.cards = game.decks.cards[INITIAL_HAND_SIZE:]
        player.hand.extend(dealt)
        game.log(f"pioche {len(dealt)} cartes (Main de départ)", player.id)
