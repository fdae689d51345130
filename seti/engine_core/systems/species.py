"""
Species - Life traces, alien boards and species discovery.

Each alien board has a triangle with one slot per trace color. A board is
discovered once all three colors are present; the first trace of each color
(neutral markers excluded) earns its owner a card of the revealed species.
After discovery, traces may also go on the species track, whose slots carry
their own bonuses (a negative token amount is a cost).
"""

from __future__ import annotations
import logging

from ...effects.catalog import EffectType
from ..bonus import Bonus
from ..enums import AlienBoardType, LifeTraceType, TRACE_COLORS
from ..results import StepResult
from ..state import AlienBoard, Game, LifeTrace, NEUTRAL_PLAYER_ID, Species
from .triggers import LIFETRACE_TRIGGERS, fire_triggers

logger = logging.getLogger(__name__)

TRIANGLE = "triangle"
SPECIES_TRACK = "species"


def _board(game: Game, board_index: int) -> AlienBoard:
    if not 0 <= board_index < len(game.board.alien_boards):
        raise ValueError(f"Plateau alien introuvable: {board_index}")
    return game.board.alien_boards[board_index]


def _board_side(board_index: int) -> str:
    return "gauche" if board_index == 0 else "droit"


def has_all_colors(board: AlienBoard) -> bool:
    present = {t.type for t in board.life_traces}
    return all(color in present for color in TRACE_COLORS)


def species_slot_bonus(species: Species, color: LifeTraceType, slot_index: int) -> Bonus:
    fixed = species.fixed_slots.get(color, [])
    if slot_index < len(fixed):
        return fixed[slot_index]
    return species.infinite_slots.get(color, Bonus())


def _slot_taken(board: AlienBoard, color: LifeTraceType, slot_index: int) -> bool:
    return any(
        t.type == color and t.location == SPECIES_TRACK and t.slot_index == slot_index
        for t in board.life_traces
    )


def next_species_slot(board: AlienBoard, color: LifeTraceType) -> int:
    index = 0
    while _slot_taken(board, color, index):
        index += 1
    return index


def can_place_life_trace(game: Game, board_index: int, color: LifeTraceType, player_id: str,
                         location: str = TRIANGLE, slot_index: int | None = None) -> tuple[bool, str]:
    if not 0 <= board_index < len(game.board.alien_boards):
        return False, "Plateau alien introuvable"
    if color == LifeTraceType.ANY:
        return False, "Couleur de trace requise"
    if location == TRIANGLE:
        return True, ""
    if location != SPECIES_TRACK:
        return False, f"Emplacement inconnu: {location}"
    board = game.board.alien_boards[board_index]
    species = game.species_for_board(board)
    if not board.is_discovered or species is None:
        return False, "Impossible de placer sur la piste d'espèce avant sa découverte"
    index = next_species_slot(board, color) if slot_index is None else slot_index
    if _slot_taken(board, color, index):
        return False, "Emplacement déjà occupé"
    cost = -species_slot_bonus(species, color, index).token
    player = game.get_player(player_id)
    if cost > 0 and player.tokens < cost:
        return False, "Pas assez de tokens pour placer la trace"
    return True, ""


def _discover(game: Game, board_index: int) -> list[str]:
    """Reveal a board's species. In place; returns log messages."""
    board = game.board.alien_boards[board_index]
    species = game.species_for_board(board)
    board.is_discovered = True
    messages = [f"L'espèce {board.species_id.value} est découverte !"]
    if species is None:
        return messages
    species.discovered = True

    for color in TRACE_COLORS:
        first = next((t for t in board.life_traces if t.type == color), None)
        if first is None or first.player_id == NEUTRAL_PLAYER_ID:
            continue
        player = game.get_player(first.player_id)
        if player is not None and species.cards:
            card = species.cards.pop(0)
            player.hand.append(card)
            messages.append(f"{player.name} pioche 1 carte Alien \"{card.name}\" (Découverte)")

    if not species.card_row and species.cards:
        species.card_row.append(species.cards.pop(0))

    if board.species_id == AlienBoardType.OUMUAMUA:
        extra = game.board.solar_system.extra_objects
        if "oumuamua" not in extra:
            extra.append("oumuamua")
        messages.append("L'astéroïde Oumuamua apparaît dans le système solaire !")
    logger.info("Species %s discovered", board.species_id.value)
    return messages


def place_life_trace(game: Game, board_index: int, color: LifeTraceType, player_id: str,
                     location: str = TRIANGLE, slot_index: int | None = None,
                     sequence_id: str = "") -> StepResult:
    """
    Place a life trace and return the slot bonus.

    The triangle pays the board's first bonus for the player's first trace
    of that color there, its next bonus afterwards.
    """
    ok, reason = can_place_life_trace(game, board_index, color, player_id, location, slot_index)
    if not ok:
        raise ValueError(reason)

    game = game.clone()
    board = _board(game, board_index)
    player = game.get_player(player_id)
    species = game.species_for_board(board)
    result = StepResult(game)

    if location == TRIANGLE:
        mine = [t for t in board.life_traces
                if t.player_id == player_id and t.type == color and t.location == TRIANGLE]
        bonus = board.first_bonus if not mine else board.next_bonus
        slot_index = None
    else:
        slot_index = next_species_slot(board, color) if slot_index is None else slot_index
        bonus = species_slot_bonus(species, color, slot_index)
    bonus = bonus.merge(None)

    cost_text = ""
    if bonus.token < 0:
        player.tokens += bonus.token
        cost_text = f" et paye {-bonus.token} token(s)"
        bonus.token = 0

    trace = LifeTrace(id=game.next_id("trace"), type=color, player_id=player_id,
                      location=location, slot_index=slot_index)
    board.life_traces.append(trace)
    player.life_traces.append(trace)
    result.log(
        f"place une trace de vie {color.value} sur le plateau Alien {_board_side(board_index)}{cost_text}",
        player_id, sequence_id,
    )

    if not board.is_discovered and has_all_colors(board):
        for message in _discover(game, board_index):
            result.log(message, player_id, sequence_id)

    if species is not None:
        bonus.species_id = species.id
    result.add_bonus(bonus)
    gained, entries = fire_triggers(
        game, player_id, LIFETRACE_TRIGGERS[color], EffectType.GAIN_ON_ANY_LIFETRACE, sequence_id=sequence_id)
    result.add_bonus(gained)
    result.history_entries.extend(entries)
    return result


def place_neutral_milestone(game: Game, milestone: int, sequence_id: str = "") -> tuple[StepResult, str]:
    """
    Place a neutral marker for a crossed neutral milestone.

    Uses the first free triangle color, board by board. Returns the result and
    one of NO_MARKERS, NO_SPACE, PLACED or DISCOVERED.
    """
    game = game.clone()
    result = StepResult(game)
    if game.neutral_milestones_available.get(milestone, 0) <= 0:
        return result, "NO_MARKERS"
    game.neutral_milestones_available[milestone] -= 1

    for board_index, board in enumerate(game.board.alien_boards):
        for color in TRACE_COLORS:
            if any(t.type == color for t in board.life_traces):
                continue
            board.life_traces.append(LifeTrace(
                id=game.next_id("trace"), type=color, player_id=NEUTRAL_PLAYER_ID))
            result.log(
                f"Un marqueur neutre ({milestone} PV) est placé sur le plateau Alien {_board_side(board_index)}",
                NEUTRAL_PLAYER_ID, sequence_id,
            )
            if not board.is_discovered and has_all_colors(board):
                for message in _discover(game, board_index):
                    result.log(message, NEUTRAL_PLAYER_ID, sequence_id)
                return result, "DISCOVERED"
            return result, "PLACED"
    return result, "NO_SPACE"


def _species(game: Game, species_id: str) -> Species:
    species = next((s for s in game.species if s.id == species_id), None)
    if species is None:
        raise ValueError(f"Espèce introuvable: {species_id}")
    return species


def acquire_alien_card(game: Game, player_id: str, species_id: str, source: str,
                       sequence_id: str = "") -> StepResult:
    """Take a species card from its deck ('deck') or its row; the row refills."""
    game = game.clone()
    species = _species(game, species_id)
    player = game.get_player(player_id)
    if source == "deck":
        if not species.cards:
            raise ValueError("La pioche Alien est vide")
        card = species.cards.pop(0)
    else:
        card = next((c for c in species.card_row if c.id == source), None)
        if card is None:
            raise ValueError(f"Carte Alien introuvable: {source}")
        species.card_row.remove(card)
        if species.cards:
            species.card_row.append(species.cards.pop(0))
    player.hand.append(card)
    result = StepResult(game)
    result.log(f"acquiert la carte Alien \"{card.name}\"", player_id, sequence_id)
    return result


def claim_centaurien_reward(game: Game, player_id: str, index: int, sequence_id: str = "") -> StepResult:
    """Take one of the remaining Centaurien message rewards."""
    game = game.clone()
    species = next((s for s in game.species if s.name == AlienBoardType.CENTAURIENS), None)
    if species is None or not 0 <= index < len(species.message_rewards):
        raise ValueError(f"Récompense Centaurienne indisponible: {index}")
    bonus = species.message_rewards.pop(index)
    result = StepResult(game)
    result.log("reçoit un message Centaurien", player_id, sequence_id)
    result.add_bonus(bonus)
    return result
