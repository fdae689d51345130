"""
Milestones - Score thresholds crossed during play.

Golden milestones (25, 50, 70) let the player put a marker on an objective
tile of their choice. Neutral milestones (20, 30) place neutral life traces
on the alien boards while neutral markers remain.
"""

from __future__ import annotations
import logging

from ..constants import GOLDEN_MILESTONES, NEUTRAL_MILESTONES
from ..interaction import PlacingObjectiveMarker
from ..results import StepResult
from ..state import Game, ObjectiveTile, Player
from .species import place_neutral_milestone

logger = logging.getLogger(__name__)


def open_tiles(game: Game, player: Player) -> list[ObjectiveTile]:
    """Objective tiles the player has not marked yet."""
    return [t for t in game.board.objective_tiles if player.id not in t.markers]


def check_milestones(game: Game, player_id: str, sequence_id: str = "") -> StepResult:
    """
    Claim every milestone the player's score has reached.

    Each golden milestone queues one PLACING_OBJECTIVE_MARKER; it is still
    claimed when no tile is left open, without a marker.
    """
    game = game.clone()
    player = game.get_player(player_id)
    result = StepResult(game)
    if player is None:
        return result

    for milestone in GOLDEN_MILESTONES:
        if player.score < milestone or milestone in player.claimed_golden_milestones:
            continue
        player.claimed_golden_milestones.append(milestone)
        if open_tiles(game, player):
            result.log(f"atteint le palier de {milestone} PV", player_id, sequence_id)
            result.interactions.append(PlacingObjectiveMarker(
                sequence_id=sequence_id or None, milestone=milestone, player_id=player_id))
        else:
            result.log(f"atteint le palier de {milestone} PV mais aucune tuile objectif n'est libre",
                       player_id, sequence_id)

    crossed = [m for m in NEUTRAL_MILESTONES
               if player.score >= m and m not in player.claimed_neutral_milestones]
    player.claimed_neutral_milestones.extend(crossed)
    for milestone in crossed:
        placed, outcome = place_neutral_milestone(result.game, milestone, sequence_id)
        result = result.then(placed)
        logger.debug("Neutral milestone %d for %s: %s", milestone, player_id, outcome)
    return result


def can_place_objective_marker(game: Game, player_id: str, tile_id: str) -> tuple[bool, str]:
    tile = next((t for t in game.board.objective_tiles if t.id == tile_id), None)
    if tile is None:
        return False, f"Tuile objectif introuvable: {tile_id}"
    if player_id in tile.markers:
        return False, "Vous avez déjà un marqueur sur cette tuile"
    return True, ""


def place_objective_marker(game: Game, player_id: str, tile_id: str, sequence_id: str = "") -> StepResult:
    ok, reason = can_place_objective_marker(game, player_id, tile_id)
    if not ok:
        raise ValueError(reason)
    game = game.clone()
    tile = next(t for t in game.board.objective_tiles if t.id == tile_id)
    tile.markers.append(player_id)
    result = StepResult(game)
    result.log(f"place un marqueur sur l'objectif \"{tile.name}\" (position {len(tile.markers)})",
               player_id, sequence_id)
    return result
