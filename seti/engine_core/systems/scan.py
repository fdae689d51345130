"""
Scan - Signals, sector majorities and sector coverage.

A sector is covered once all of its data signals are marked. The player with
the most markers wins it (ties go to whoever marked last), every participant
gains 1 media, the signals reset and the runner-up keeps one marker.
"""

from __future__ import annotations
import logging

from ...effects.catalog import EffectType
from ..bonus import Bonus, bonus_for_target
from ..constants import (
    SCAN_COST_CREDITS, SCAN_COST_ENERGY, TECH_OBS_ADJACENT, TECH_OBS_DISCARD,
    TECH_OBS_MERCURY, TECH_OBS_PROBE,
)
from ..enums import COLOR_SECTORS, PLANET_SCOPES, STAR_SCOPES, SectorType, SignalType
from ..interaction import (
    ChoosingObs2, ChoosingObs3, ChoosingObs4, InteractionState, ResolvingSector,
    SelectingScanCard, SelectingScanSector,
)
from ..results import StepResult
from ..state import Game, Player, Sector
from .probes import can_launch, solar_geometry
from .resources import add_media
from .triggers import SIGNAL_TRIGGERS, fire_triggers

logger = logging.getLogger(__name__)


# ============================================================================
# Sector lookup
# ============================================================================

def _get_sector(game: Game, sector_id: str) -> Sector:
    sector = game.board.get_sector(sector_id)
    if sector is None:
        raise ValueError(f"Secteur introuvable: {sector_id}")
    return sector


def object_sector(game: Game, object_id: str) -> Sector | None:
    """The star sector a celestial object currently lines up with."""
    cell = solar_geometry(game).object_cell(object_id, game.board.solar_system.rotation)
    if cell is None:
        return None
    return game.board.sector_at(cell[1])


def earth_sector(game: Game) -> Sector:
    return object_sector(game, "earth")


def sector_for_scope(game: Game, scope: SectorType) -> Sector | None:
    """Resolve a planet or named-star signal scope to a board sector."""
    if scope in PLANET_SCOPES:
        return object_sector(game, PLANET_SCOPES[scope])
    if scope == SectorType.OUMUAMUA:
        return object_sector(game, "oumuamua")
    if scope in STAR_SCOPES:
        return next((s for s in game.board.sectors if s.name == scope.value), None)
    return None


def probe_sectors(game: Game, player: Player | None) -> list[Sector]:
    """Sectors holding a probe of `player` (any player's when None)."""
    probes = player.probes_in_system() if player else game.all_probes_in_system()
    indices = {p.sector for p in probes}
    return [s for s in game.board.sectors if s.index in indices]


def eligible_sectors(game: Game, player_id: str, state: SelectingScanSector) -> list[Sector]:
    """Sectors a SELECTING_SCAN_SECTOR interaction accepts."""
    if state.only_probes or state.color == SectorType.PROBE:
        owner = None if state.any_probe else game.get_player(player_id)
        return probe_sectors(game, owner)
    if state.color == SectorType.EARTH:
        base = earth_sector(game)
        if not state.adjacents:
            return [base]
        indices = {base.index, *solar_geometry(game).adjacent_sectors(base.index)}
        return [s for s in game.board.sectors if s.index in indices]
    if state.color in COLOR_SECTORS:
        return [s for s in game.board.sectors if s.color == state.color]
    scoped = sector_for_scope(game, state.color)
    if scoped is not None:
        return [scoped]
    return list(game.board.sectors)


# ============================================================================
# Signals
# ============================================================================

def is_covered(sector: Sector) -> bool:
    data_signals = [s for s in sector.signals if s.type == SignalType.DATA]
    return bool(data_signals) and all(s.marked for s in data_signals)


def scan_sector(game: Game, player_id: str, sector_id: str, no_data: bool = False,
                sequence_id: str = "") -> StepResult:
    """Mark the first free signal of a sector."""
    game = game.clone()
    sector = _get_sector(game, sector_id)
    result = StepResult(game)

    signal = next((s for s in sector.signals if not s.marked), None)
    if signal is None:
        result.log(f"tente de scanner le secteur {sector.name} mais il est plein", player_id, sequence_id)
        return result

    signal.marked = True
    signal.marked_by = player_id
    sector.player_markers.append(player_id)
    result.log(f"marque un signal dans le secteur {sector.name}", player_id, sequence_id)

    if signal.type == SignalType.DATA and not no_data:
        result.add_bonus(Bonus(data=1))
    result.add_bonus(signal.bonus)

    trigger = SIGNAL_TRIGGERS.get(sector.color)
    if trigger is not None:
        gained, entries = fire_triggers(game, player_id, trigger, sequence_id=sequence_id)
        result.add_bonus(gained)
        result.history_entries.extend(entries)
    return result


def signal_and_cover(game: Game, player_id: str, sector_id: str, no_data: bool = False,
                     sequence_id: str = "") -> StepResult:
    """Mark a signal and queue RESOLVING_SECTOR when it completes the sector."""
    result = scan_sector(game, player_id, sector_id, no_data, sequence_id)
    sector = result.game.board.get_sector(sector_id)
    if is_covered(sector):
        result.log(f"complète le secteur {sector.name}", player_id, sequence_id)
        result.interactions.append(ResolvingSector(sequence_id=sequence_id or None, sector_id=sector_id))
    return result


def majorities(sector: Sector) -> list[str]:
    """Participants ordered by marker count; ties favour the latest marker."""
    last_mark: dict[str, int] = {}
    for index, player_id in enumerate(sector.player_markers):
        last_mark[player_id] = index
    counts = {pid: sector.marked_by(pid) for pid in last_mark}
    ranked = [pid for pid in counts if counts[pid] > 0]
    return sorted(ranked, key=lambda pid: (-counts[pid], -last_mark[pid]))


def cover_sector(game: Game, player_id: str, sector_id: str,
                 sequence_id: str = "") -> tuple[StepResult, str | None]:
    """
    Award a completed sector.

    The sector bonus is returned for the winner (bonus_player_id). Returns
    the result and the winner id.
    """
    game = game.clone()
    sector = _get_sector(game, sector_id)
    result = StepResult(game)
    ranking = majorities(sector)
    if not ranking:
        return result, None

    winner_id = ranking[0]
    winner = game.get_player(winner_id)
    bonus = sector.next_bonus if sector.is_covered else sector.first_bonus
    bonus = bonus.merge(None)

    for participant_id in ranking:
        participant = game.get_player(participant_id)
        if participant is not None and add_media(participant, 1):
            result.log(f"gagne 1 Média (secteur {sector.name})", participant_id, sequence_id)

    if winner_id == player_id:
        for buff in [b for b in winner.active_buffs if b.type == EffectType.BONUS_IF_COVERED]:
            bonus = bonus.merge(bonus_for_target(buff.target or "", int(buff.value)))
            winner.active_buffs.remove(buff)

    sector.is_covered = True
    sector.covered_by.append(winner_id)
    for signal in sector.signals:
        signal.marked = False
        signal.marked_by = None
    sector.player_markers = []
    if len(ranking) > 1 and sector.signals:
        runner_up = ranking[1]
        sector.signals[0].marked = True
        sector.signals[0].marked_by = runner_up
        sector.player_markers.append(runner_up)

    result.log(f"remporte le secteur {sector.name}", winner_id, sequence_id)
    result.bonus = bonus if not bonus.is_empty() else None
    result.bonus_player_id = winner_id
    logger.info("Sector %s covered by %s", sector.id, winner_id)
    return result, winner_id


# ============================================================================
# Scan action
# ============================================================================

def can_scan(player: Player, is_bonus: bool = False) -> tuple[bool, str]:
    if is_bonus:
        return True, ""
    if player.credits < SCAN_COST_CREDITS or player.energy < SCAN_COST_ENERGY:
        return False, (
            f"Ressources insuffisantes (Requis: {SCAN_COST_CREDITS} Crédit, {SCAN_COST_ENERGY} Énergies)"
        )
    return True, ""


def _observation_prompts(game: Game, player: Player, sequence_id: str) -> tuple[list[InteractionState], list[str]]:
    seq = sequence_id or None
    prompts: list[InteractionState] = []
    skipped: list[str] = []
    if player.has_technology(TECH_OBS_MERCURY):
        if player.media > 0:
            prompts.append(ChoosingObs2(sequence_id=seq))
        else:
            skipped.append("II")
    if player.has_technology(TECH_OBS_DISCARD):
        if player.hand:
            prompts.append(ChoosingObs3(sequence_id=seq))
        else:
            skipped.append("III")
    if player.has_technology(TECH_OBS_PROBE):
        launchable = player.energy >= 1 and can_launch(player, free=True)[0]
        if launchable or player.probes_in_system():
            prompts.append(ChoosingObs4(sequence_id=seq))
        else:
            skipped.append("IV")
    return prompts, skipped


def perform_scan_action(game: Game, player_id: str, is_bonus: bool = False,
                        sequence_id: str = "") -> StepResult:
    """
    The full scan sequence.

    Marks Earth's sector (or lets observation-1 pick an adjacent one), then
    queues the row-card pick and the observation technology prompts.
    """
    player = game.get_player(player_id)
    ok, reason = can_scan(player, is_bonus)
    if not ok:
        raise ValueError(reason)

    game = game.clone()
    player = game.get_player(player_id)
    if not is_bonus:
        player.credits -= SCAN_COST_CREDITS
        player.energy -= SCAN_COST_ENERGY
    result = StepResult(game)
    result.log("lance un scan", player_id, sequence_id)
    seq = sequence_id or None

    if player.has_technology(TECH_OBS_ADJACENT):
        result.interactions.append(SelectingScanSector(
            sequence_id=seq, color=SectorType.EARTH, adjacents=True,
            message="Marquez un signal dans le secteur de la Terre ou un secteur adjacent",
        ))
    else:
        result = result.then(signal_and_cover(game, player_id, earth_sector(game).id, sequence_id=sequence_id))

    game = result.game
    player = game.get_player(player_id)
    result.interactions.append(SelectingScanCard(sequence_id=seq))

    prompts, skipped = _observation_prompts(game, player, sequence_id)
    result.interactions.extend(prompts)
    for level in skipped:
        result.log(f"ne peut pas utiliser Observation {level}", player_id, sequence_id)

    gained, entries = fire_triggers(game, player_id, EffectType.GAIN_ON_SCAN, sequence_id=sequence_id)
    result.add_bonus(gained)
    result.history_entries.extend(entries)
    return result
