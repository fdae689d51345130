"""
Scoring - End-of-game score categories and winners.

Design principles:
- The final score is the in-game score plus three bonus categories:
  end-game cards, objective tiles and species bonuses
- Objective tiles pay by marker position (first, second, others) times the
  number of sets the player completed for the tile's side
- Ties are shared: every player at the top total wins
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, asdict

from ...effects.catalog import CardEffect, EffectType, SCORING_EFFECTS
from ..constants import INITIAL_REVENUE_CARDS, INITIAL_REVENUE_CREDITS, INITIAL_REVENUE_ENERGY
from ..enums import (
    CardType, CelestialType, LifeTraceType, ObjectiveCategory, ProbeState, SectorType,
    TECH_COLORS, TRACE_COLORS,
)
from ..results import StepResult
from ..state import Game, ObjectiveTile, Player
from .missions import completed_missions
from .probes import probe_cell, solar_geometry

logger = logging.getLogger(__name__)


@dataclass
class ScoreBreakdown:
    base: int = 0
    mission_end_game: int = 0
    objective_tiles: int = 0
    species_bonuses: int = 0
    total: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


# ============================================================================
# Objective tiles
# ============================================================================

def _tech_sets(player: Player) -> int:
    """Greedy count of sets of three distinct technology categories."""
    counts = {}
    for tech in player.technologies:
        counts[tech.category] = counts.get(tech.category, 0) + 1
    ordered = sorted(counts.values(), reverse=True) + [0, 0, 0]
    sets = 0
    while ordered[2] > 0:
        sets += 1
        ordered[0] -= 1
        ordered[1] -= 1
        ordered[2] -= 1
        ordered.sort(reverse=True)
    return sets


def _trace_sets(player: Player) -> int:
    return min(sum(1 for t in player.life_traces if t.type == color) for color in TRACE_COLORS)


def _end_game_cards(player: Player) -> list:
    return [c for c in player.played_cards if c.type == CardType.END_GAME]


def _placed_probes(player: Player) -> int:
    return sum(1 for p in player.probes if p.state in (ProbeState.IN_ORBIT, ProbeState.LANDED))


def _covered_by(game: Game, player: Player) -> int:
    return sum(1 for s in game.board.sectors if player.id in s.covered_by)


def objective_count(game: Game, player: Player, tile: ObjectiveTile) -> int:
    """Number of scoring sets the player has for a tile."""
    side_a = tile.side == "A"
    if tile.category == ObjectiveCategory.TECHNOLOGY:
        return _tech_sets(player) if side_a else len(player.technologies) // 2
    if tile.category == ObjectiveCategory.MISSION:
        done = len(completed_missions(player))
        return done if side_a else (done + len(_end_game_cards(player))) // 2
    if tile.category == ObjectiveCategory.REVENUE:
        reserved = (
            max(0, player.revenue_credits - INITIAL_REVENUE_CREDITS),
            max(0, player.revenue_energy - INITIAL_REVENUE_ENERGY),
            max(0, player.revenue_cards - INITIAL_REVENUE_CARDS),
        )
        return min(reserved) if side_a else max(reserved)
    if side_a:
        return _trace_sets(player)
    return min(_covered_by(game, player), _placed_probes(player))


def objective_tiles_score(game: Game, player: Player) -> int:
    total = 0
    for tile in game.board.objective_tiles:
        if player.id not in tile.markers:
            continue
        position = tile.markers.index(player.id)
        reward = tile.rewards[min(position, 2)]
        total += reward * objective_count(game, player, tile)
    return total


# ============================================================================
# End-game cards
# ============================================================================

_TRACE_TARGETS = {"red": LifeTraceType.RED, "yellow": LifeTraceType.YELLOW, "blue": LifeTraceType.BLUE}
_SECTOR_TARGETS = {
    "red": SectorType.RED, "yellow": SectorType.YELLOW,
    "blue": SectorType.BLUE, "black": SectorType.BLACK,
}


def _sector_matches(sector, target: str | None) -> bool:
    color = _SECTOR_TARGETS.get((target or "").lower())
    return color is None or sector.color == color


def _planet_probes(game: Game, player: Player, target: str | None) -> int:
    target = (target or "any").lower()
    return sum(
        1 for p in player.probes
        if p.state in (ProbeState.IN_ORBIT, ProbeState.LANDED)
        and (target == "any" or p.planet_id == target)
    )


def _unique_planets(game: Game, player: Player) -> int:
    """Planets where only this player has an orbiter or a lander."""
    count = 0
    for planet in game.board.planets:
        owners = set()
        for other in game.players:
            if any(p.planet_id == planet.id and p.state != ProbeState.IN_SOLAR_SYSTEM for p in other.probes):
                owners.add(other.id)
        if owners == {player.id}:
            count += 1
    return count


def _probe_on_asteroid(game: Game, player: Player) -> bool:
    geometry = solar_geometry(game)
    rotation = game.board.solar_system.rotation
    return any(
        geometry.has_type(probe_cell(p), rotation, CelestialType.ASTEROID)
        for p in player.probes_in_system()
    )


def _species_traces(game: Game, player: Player, target: str | None) -> int:
    target = (target or "any").lower()
    return sum(
        1 for board in game.board.alien_boards
        if target == "any" or board.species_id.value.lower() == target
        for t in board.life_traces if t.player_id == player.id
    )


def card_effect_score(game: Game, player: Player, effect: CardEffect) -> int:
    """Points one end-game scoring effect is worth to its owner."""
    value = int(effect.value or 0)
    target = effect.target
    if effect.type == EffectType.SCORE_IF_UNIQUE:
        return value * _unique_planets(game, player)
    if effect.type == EffectType.SCORE_PER_SECTOR:
        return value * sum(
            1 for s in game.board.sectors
            if _sector_matches(s, target) and (s.marked_by(player.id) or player.id in s.covered_by)
        )
    if effect.type == EffectType.SCORE_PER_ORBITER_LANDER:
        return value * _planet_probes(game, player, target)
    if effect.type == EffectType.SCORE_PER_COVERED_SECTOR:
        return value * sum(
            s.covered_by.count(player.id) for s in game.board.sectors if _sector_matches(s, target)
        )
    if effect.type == EffectType.SCORE_PER_LIFETRACE:
        color = _TRACE_TARGETS.get((target or "").lower())
        return value * sum(1 for t in player.life_traces if color is None or t.type == color)
    if effect.type == EffectType.SCORE_PER_SIGNAL:
        return value * sum(s.marked_by(player.id) for s in game.board.sectors if _sector_matches(s, target))
    if effect.type == EffectType.SCORE_SOLVAY:
        # 3 pv per full series: technology set, trace set, placed probe
        return 3 * min(_tech_sets(player), _trace_sets(player), _placed_probes(player))
    if effect.type == EffectType.SCORE_PER_TECH_CATEGORY:
        category = TECH_COLORS.get((target or "").lower())
        return value * sum(1 for t in player.technologies if category is None or t.category == category)
    if effect.type == EffectType.SCORE_IF_PROBE_ON_ASTEROID:
        return value if _probe_on_asteroid(game, player) else 0
    if effect.type == EffectType.SCORE_PER_TRACE:
        return value * _species_traces(game, player, target)
    return 0


def end_game_cards_score(game: Game, player: Player) -> int:
    return sum(
        card_effect_score(game, player, effect)
        for card in _end_game_cards(player)
        for effect in card.passive_effects
        if effect.type in SCORING_EFFECTS
    )


# ============================================================================
# Species
# ============================================================================

def species_score(game: Game, player: Player) -> int:
    """Scoring modifiers of discovered species the player left a trace on."""
    total = 0
    for board in game.board.alien_boards:
        species = game.species_for_board(board)
        if species is None or not species.discovered:
            continue
        if any(t.player_id == player.id for t in board.life_traces):
            total += sum(species.scoring_modifiers.values())
    return total


# ============================================================================
# Final scoring
# ============================================================================

def score_breakdown(game: Game, player_id: str) -> ScoreBreakdown:
    player = game.get_player(player_id)
    if player is None:
        raise ValueError(f"Joueur introuvable: {player_id}")
    breakdown = ScoreBreakdown(
        base=player.score,
        mission_end_game=end_game_cards_score(game, player),
        objective_tiles=objective_tiles_score(game, player),
        species_bonuses=species_score(game, player),
    )
    breakdown.total = (breakdown.base + breakdown.mission_end_game
                       + breakdown.objective_tiles + breakdown.species_bonuses)
    return breakdown


def apply_final_scores(game: Game, sequence_id: str = "") -> StepResult:
    """Add the bonus categories to every score and record the breakdowns."""
    game = game.clone()
    result = StepResult(game)
    for player in game.players:
        breakdown = score_breakdown(game, player.id)
        game.final_scores[player.id] = breakdown.to_dict()
        player.score = breakdown.total
        result.log(f"termine la partie avec {breakdown.total} PV", player.id, sequence_id)
    logger.info("Final scores: %s", {pid: s["total"] for pid, s in game.final_scores.items()})
    return result


def winners(game: Game) -> list[str]:
    if not game.players:
        return []
    best = max(p.score for p in game.players)
    return [p.id for p in game.players if p.score == best]
