"""
Probes - Launch, movement, orbit, landing and the rotating solar system.

Positions are (disk, absolute sector) cells; everything about what sits on a
cell is asked of the geometry oracle for the current rotation state.

Costs:
- Launch: 2 credits, at most 1 probe in the system (2 with exploration-1)
- Move: 1 energy per adjacent step, +1 when leaving an asteroid field
  (waived with exploration-2), free movements pay first
- Orbit: 1 credit + 1 energy
- Land: 3 energy, -1 when any orbiter circles the planet, -1 with exploration-3
"""

from __future__ import annotations
import logging

from ...effects.catalog import EffectType
from ..bonus import Bonus, LifeTraceGrant
from ..constants import (
    LAND_COST_ENERGY, MAX_PROBES_PER_SYSTEM, MAX_PROBES_PER_SYSTEM_WITH_TECHNOLOGY,
    MOVE_COST_ENERGY, ORBIT_COST_CREDITS, ORBIT_COST_ENERGY, ORBITER_REMOVAL_PV,
    PROBE_LAUNCH_COST, TECH_ASTEROID, TECH_EXTRA_PROBE, TECH_LAND_DISCOUNT, TECH_SATELLITES,
)
from ..enums import CelestialType, LifeTraceType, ProbeState
from ..geometry import Cell, RingGeometry, geometry_for, wrap_sector
from ..results import StepResult
from ..state import Game, Planet, Player, Probe
from .resources import add_media
from .triggers import VISIT_TRIGGERS, fire_triggers

logger = logging.getLogger(__name__)

_TRACE_TARGETS = {"red": LifeTraceType.RED, "yellow": LifeTraceType.YELLOW, "blue": LifeTraceType.BLUE}


def solar_geometry(game: Game) -> RingGeometry:
    return geometry_for(game.board.solar_system.extra_objects)


def probe_cell(probe: Probe) -> Cell | None:
    if probe.state != ProbeState.IN_SOLAR_SYSTEM or probe.disk is None:
        return None
    return probe.disk, probe.sector


def _player_probe(game: Game, player_id: str, probe_id: str) -> tuple[Player, Probe]:
    player = game.get_player(player_id)
    probe = player.get_probe(probe_id) if player else None
    if probe is None:
        raise ValueError(f"Sonde introuvable: {probe_id}")
    return player, probe


# ============================================================================
# Launch
# ============================================================================

def max_probes(player: Player) -> int:
    if player.has_technology(TECH_EXTRA_PROBE):
        return MAX_PROBES_PER_SYSTEM_WITH_TECHNOLOGY
    return MAX_PROBES_PER_SYSTEM


def can_launch(player: Player, free: bool = False, ignore_limit: bool = False) -> tuple[bool, str]:
    if not ignore_limit and len(player.probes_in_system()) >= max_probes(player):
        return False, f"Limite de sondes atteinte ({max_probes(player)})"
    if not free and player.credits < PROBE_LAUNCH_COST:
        return False, f"Crédits insuffisants (Requis: {PROBE_LAUNCH_COST})"
    return True, ""


def launch_probe(game: Game, player_id: str, free: bool = False, ignore_limit: bool = False,
                 sequence_id: str = "") -> tuple[StepResult, str]:
    """Put a new probe on Earth's cell. Returns the result and the probe id."""
    game = game.clone()
    player = game.get_player(player_id)
    ok, reason = can_launch(player, free, ignore_limit)
    if not ok:
        raise ValueError(reason)
    if not free:
        player.credits -= PROBE_LAUNCH_COST

    disk, sector = solar_geometry(game).earth_cell(game.board.solar_system.rotation)
    probe = Probe(id=game.next_id("probe"), owner_id=player_id, disk=disk, sector=sector)
    player.probes.append(probe)

    result = StepResult(game)
    result.log("lance une sonde depuis la Terre", player_id, sequence_id)
    gained, entries = fire_triggers(game, player_id, EffectType.GAIN_ON_LAUNCH, sequence_id=sequence_id)
    result.add_bonus(gained)
    result.history_entries.extend(entries)
    logger.debug("Player %s launched %s at %s%d", player_id, probe.id, disk, sector)
    return result, probe.id


# ============================================================================
# Movement
# ============================================================================

def _has_buff(player: Player, effect_type: EffectType) -> bool:
    return any(b.type == effect_type for b in player.active_buffs)


def movement_cost(game: Game, player: Player, probe: Probe) -> int:
    cost = MOVE_COST_ENERGY
    cell = probe_cell(probe)
    leaving_asteroids = cell is not None and solar_geometry(game).has_type(
        cell, game.board.solar_system.rotation, CelestialType.ASTEROID)
    if (leaving_asteroids and not player.has_technology(TECH_ASTEROID)
            and not _has_buff(player, EffectType.ASTEROID_EXIT_COST)):
        cost += 1
    return cost


def can_move(game: Game, player_id: str, probe_id: str, target: Cell,
             free_movements: int = 0) -> tuple[bool, str]:
    player = game.get_player(player_id)
    probe = player.get_probe(probe_id) if player else None
    if probe is None:
        return False, "Sonde introuvable"
    cell = probe_cell(probe)
    if cell is None:
        return False, "La sonde n'est plus dans le système solaire"
    if tuple(target) not in solar_geometry(game).adjacent_cells(cell):
        return False, "Case non adjacente"
    energy_cost = max(movement_cost(game, player, probe) - free_movements, 0)
    if player.energy < energy_cost:
        return False, f"Énergie insuffisante (nécessite {energy_cost})"
    return True, ""


def visit_media(game: Game, player: Player, cell: Cell) -> int:
    """Media earned by arriving on a cell."""
    geometry = solar_geometry(game)
    media = 0
    for obj in geometry.cell_contents(cell, game.board.solar_system.rotation):
        if obj.type == CelestialType.COMET:
            media += 1
        elif obj.type == CelestialType.PLANET and obj.id != "earth":
            media += 1
        elif obj.type == CelestialType.ASTEROID and player.has_technology(TECH_ASTEROID):
            media += 1
    return media


def _consume_buff(player: Player, effect) -> None:
    if effect in player.active_buffs:
        player.active_buffs.remove(effect)


def _visit_buffs(player: Player, from_cell: Cell, target: Cell, contents) -> Bonus:
    bonus = Bonus()
    planets = [o.id for o in contents if o.type == CelestialType.PLANET]
    has_asteroid = any(o.type == CelestialType.ASTEROID for o in contents)
    has_comet = any(o.type == CelestialType.COMET for o in contents)

    for buff in list(player.active_buffs):
        if buff.type == EffectType.VISIT_BONUS and buff.target in planets:
            bonus = bonus.merge(Bonus(pv=int(buff.value)))
            _consume_buff(player, buff)
        elif buff.type == EffectType.VISIT_UNIQUE:
            fresh = [p for p in planets if p not in player.visited_this_turn]
            bonus = bonus.merge(Bonus(pv=int(buff.value) * len(fresh)))
        elif buff.type == EffectType.VISIT_ASTEROID and has_asteroid:
            bonus = bonus.merge(Bonus(data=int(buff.value)))
            _consume_buff(player, buff)
        elif buff.type == EffectType.VISIT_COMET and has_comet:
            bonus = bonus.merge(Bonus(pv=int(buff.value)))
            _consume_buff(player, buff)
        elif buff.type == EffectType.SAME_DISK_MOVE and from_cell[0] == target[0]:
            bonus = bonus.merge(Bonus(pv=buff.value["pv"], media=buff.value["media"]))
            _consume_buff(player, buff)
        elif buff.type == EffectType.GAIN_LIFETRACE_IF_ASTEROID and has_asteroid:
            color = _TRACE_TARGETS.get(buff.target or "", LifeTraceType.ANY)
            bonus = bonus.merge(Bonus(lifetraces=[LifeTraceGrant(int(buff.value), color)]))
            _consume_buff(player, buff)
    return bonus


def move_probe(game: Game, player_id: str, probe_id: str, target: Cell,
               free_movements: int = 0, sequence_id: str = "") -> StepResult:
    """
    Move a probe one step.

    Free movements are spent before energy. Arrival gains (media, turn buffs,
    visit triggers) are returned as the bonus.
    """
    target = tuple(target)
    ok, reason = can_move(game, player_id, probe_id, target, free_movements)
    if not ok:
        raise ValueError(reason)

    game = game.clone()
    player, probe = _player_probe(game, player_id, probe_id)
    from_cell = probe_cell(probe)
    player.energy -= max(movement_cost(game, player, probe) - free_movements, 0)
    probe.disk, probe.sector = target

    contents = solar_geometry(game).cell_contents(target, game.board.solar_system.rotation)
    result = StepResult(game)
    names = ", ".join(o.name for o in contents) or "espace vide"
    result.log(f"déplace une sonde vers {target[0]}{target[1]} ({names})", player_id, sequence_id)

    bonus = Bonus(media=visit_media(game, player, target))
    bonus = bonus.merge(_visit_buffs(player, from_cell, target, contents))

    triggers = []
    for obj in contents:
        if obj.type == CelestialType.PLANET:
            if obj.id in VISIT_TRIGGERS:
                triggers.append(VISIT_TRIGGERS[obj.id])
            if obj.id != "earth":
                triggers.append(EffectType.GAIN_ON_VISIT_PLANET)
            if obj.id not in player.visited_this_turn:
                player.visited_this_turn.append(obj.id)
        elif obj.type == CelestialType.ASTEROID:
            triggers.append(EffectType.GAIN_ON_VISIT_ASTEROID)
    if probe.id not in player.moved_this_turn:
        player.moved_this_turn.append(probe.id)

    gained, entries = fire_triggers(game, player_id, *triggers, sequence_id=sequence_id)
    result.add_bonus(bonus.merge(gained))
    result.history_entries.extend(entries)
    return result


def reachable_cells(game: Game, player_id: str, probe_id: str, free_movements: int = 0) -> list[Cell]:
    player = game.get_player(player_id)
    probe = player.get_probe(probe_id) if player else None
    cell = probe_cell(probe) if probe else None
    if cell is None:
        return []
    return [
        c for c in solar_geometry(game).adjacent_cells(cell)
        if can_move(game, player_id, probe_id, c, free_movements)[0]
    ]


# ============================================================================
# Orbit & landing
# ============================================================================

def planet_under(game: Game, probe: Probe) -> Planet | None:
    """The board planet (Earth excluded) sharing the probe's cell."""
    cell = probe_cell(probe)
    if cell is None:
        return None
    obj = solar_geometry(game).planet_at(cell, game.board.solar_system.rotation)
    if obj is None or obj.id == "earth":
        return None
    return game.board.get_planet(obj.id)


def can_orbit(game: Game, player_id: str, probe_id: str, free: bool = False) -> tuple[bool, str]:
    player = game.get_player(player_id)
    probe = player.get_probe(probe_id) if player else None
    if probe is None:
        return False, "Sonde introuvable"
    if planet_under(game, probe) is None:
        return False, "La sonde n'est pas sur une planète"
    if not free and (player.credits < ORBIT_COST_CREDITS or player.energy < ORBIT_COST_ENERGY):
        return False, f"Ressources insuffisantes (Requis: {ORBIT_COST_CREDITS} Crédit, {ORBIT_COST_ENERGY} Énergie)"
    return True, ""


def orbit_probe(game: Game, player_id: str, probe_id: str, free: bool = False,
                sequence_id: str = "") -> StepResult:
    ok, reason = can_orbit(game, player_id, probe_id, free)
    if not ok:
        raise ValueError(reason)

    game = game.clone()
    player, probe = _player_probe(game, player_id, probe_id)
    planet = planet_under(game, probe)
    if not free:
        player.credits -= ORBIT_COST_CREDITS
        player.energy -= ORBIT_COST_ENERGY

    first = not planet.orbiters
    probe.state = ProbeState.IN_ORBIT
    probe.planet_id = planet.id
    probe.disk = probe.sector = None
    planet.orbiters.append(probe.id)

    result = StepResult(game)
    result.log(f"met une sonde en orbite autour de {planet.name}", player_id, sequence_id)
    if first:
        result.add_bonus(planet.orbit_first_bonus)
    result.add_bonus(planet.orbit_next_bonus)
    gained, entries = fire_triggers(
        game, player_id, EffectType.GAIN_ON_ORBIT, EffectType.GAIN_ON_ORBIT_OR_LAND, sequence_id=sequence_id)
    result.add_bonus(gained)
    result.history_entries.extend(entries)
    return result


def land_cost(game: Game, player: Player, planet: Planet) -> int:
    cost = LAND_COST_ENERGY
    if planet.orbiters:
        cost -= 1
    if player.has_technology(TECH_LAND_DISCOUNT):
        cost -= 1
    return cost


def can_land(game: Game, player_id: str, probe_id: str, satellite_id: str | None = None,
             free: bool = False, ignore_satellite_limit: bool = False) -> tuple[bool, str]:
    player = game.get_player(player_id)
    probe = player.get_probe(probe_id) if player else None
    if probe is None:
        return False, "Sonde introuvable"
    planet = planet_under(game, probe)
    if planet is None:
        return False, "La sonde n'est pas sur une planète"
    if satellite_id is not None:
        satellite = next((s for s in planet.satellites if s.id == satellite_id), None)
        if satellite is None:
            return False, "Lune introuvable"
        if not player.has_technology(TECH_SATELLITES):
            return False, "Technologie requise pour atterrir sur une lune"
        if satellite.landers and not ignore_satellite_limit:
            return False, "Lune déjà occupée"
    if not free and player.energy < land_cost(game, player, planet):
        return False, f"Énergie insuffisante (nécessite {land_cost(game, player, planet)})"
    return True, ""


def land_probe(game: Game, player_id: str, probe_id: str, satellite_id: str | None = None,
               free: bool = False, ignore_satellite_limit: bool = False,
               sequence_id: str = "") -> StepResult:
    ok, reason = can_land(game, player_id, probe_id, satellite_id, free, ignore_satellite_limit)
    if not ok:
        raise ValueError(reason)

    game = game.clone()
    player, probe = _player_probe(game, player_id, probe_id)
    planet = planet_under(game, probe)
    if not free:
        player.energy -= land_cost(game, player, planet)

    probe.state = ProbeState.LANDED
    probe.planet_id = planet.id
    probe.disk = probe.sector = None
    result = StepResult(game)

    if satellite_id is not None:
        satellite = game.board.find_satellite(satellite_id)
        satellite.landers.append(probe.id)
        result.log(f"pose une sonde sur {satellite.name}", player_id, sequence_id)
        result.add_bonus(satellite.land_bonus)
    else:
        position = len(planet.landers)
        planet.landers.append(probe.id)
        result.log(f"pose une sonde sur {planet.name}", player_id, sequence_id)
        if position == 0:
            result.add_bonus(planet.land_first_bonus)
        elif position == 1:
            result.add_bonus(planet.land_second_bonus)
        result.add_bonus(planet.land_next_bonus)

    gained, entries = fire_triggers(
        game, player_id, EffectType.GAIN_ON_LAND, EffectType.GAIN_ON_ORBIT_OR_LAND, sequence_id=sequence_id)
    result.add_bonus(gained)
    result.history_entries.extend(entries)
    return result


def remove_orbiter(game: Game, player_id: str, probe_id: str, sequence_id: str = "") -> StepResult:
    """Return an orbiter to the supply for 3 pv, 1 data and 1 card."""
    game = game.clone()
    player, probe = _player_probe(game, player_id, probe_id)
    if probe.state != ProbeState.IN_ORBIT:
        raise ValueError(f"La sonde {probe_id} n'est pas en orbite")
    planet = game.board.get_planet(probe.planet_id)
    planet.orbiters.remove(probe.id)
    player.probes.remove(probe)
    result = StepResult(game, bonus=Bonus(pv=ORBITER_REMOVAL_PV, data=1, card=1))
    result.log(f"retire son orbiteur de {planet.name}", player_id, sequence_id)
    return result


def remove_lander(game: Game, player_id: str, probe_id: str, sequence_id: str = "") -> StepResult:
    game = game.clone()
    player, probe = _player_probe(game, player_id, probe_id)
    if probe.state != ProbeState.LANDED:
        raise ValueError(f"La sonde {probe_id} n'est pas posée")
    planet = game.board.get_planet(probe.planet_id)
    if probe.id in planet.landers:
        planet.landers.remove(probe.id)
    for satellite in planet.satellites:
        if probe.id in satellite.landers:
            satellite.landers.remove(probe.id)
    player.probes.remove(probe)
    result = StepResult(game)
    result.log(f"retire son atterrisseur de {planet.name}", player_id, sequence_id)
    return result


# ============================================================================
# Rotation
# ============================================================================

def rotate_solar_system(game: Game, player_id: str, sequence_id: str = "") -> StepResult:
    """
    Turn the next rotating level one step and advance the level cycle.

    Probes on a turning surface ride along. Probes newly covered by a turning
    level are pushed one sector forward and score arrival media.
    """
    game = game.clone()
    solar = game.board.solar_system
    geometry = solar_geometry(game)
    level = solar.next_ring_level
    old_rotation = list(solar.rotation)
    new_rotation = geometry.rotate(old_rotation, level)

    result = StepResult(game)
    for player in game.players:
        for probe in player.probes_in_system():
            cell = probe_cell(probe)
            old_level = geometry.surface_level(cell, old_rotation)
            if 0 < old_level <= level:
                cell = geometry.carried_cell(cell, old_rotation, new_rotation)
            if geometry.surface_level(cell, new_rotation) != old_level:
                cell = (cell[0], wrap_sector(cell[1] + 1))
                solar.rotation = new_rotation
                gained = add_media(player, visit_media(game, player, cell))
                solar.rotation = old_rotation
                result.log(f"voit sa sonde poussée en {cell[0]}{cell[1]}", player.id, sequence_id)
                if gained:
                    result.log(f"gagne {gained} Média(s)", player.id, sequence_id)
            probe.disk, probe.sector = cell

    solar.rotation = new_rotation
    solar.next_ring_level = level % 3 + 1
    result.log(f"fait tourner le niveau {level} du système solaire", player_id, sequence_id)
    logger.debug("Rotated level %d: %s -> %s", level, old_rotation, new_rotation)
    return result
