"""
Missions - Cards in play whose requirements are claimed one by one.

Two kinds exist:
- Conditional missions carry GAIN_IF_<COND>:<arg>:<reward>:<amount> codes,
  fulfillable as soon as the player's state meets the condition
- Triggered missions carry GAIN_ON_* codes, fulfillable once the event fires

Claiming a fulfillable requirement pays its reward; the mission completes
when every requirement is claimed.
"""

from __future__ import annotations
import logging
from typing import Callable

from ...effects.catalog import CardEffect, EffectType, TRIGGER_EFFECTS, trigger_amount
from ..bonus import Bonus, bonus_for_target
from ..enums import CardType, LifeTraceType, ProbeState, TECH_COLORS
from ..results import StepResult
from ..state import Card, Game, Mission, Player

logger = logging.getLogger(__name__)


# ============================================================================
# Conditions
# ============================================================================

def _as_int(arg: str, default: int = 1) -> int:
    try:
        return int(arg)
    except ValueError:
        return default


def _has_probe_at(player: Player, state: ProbeState, arg: str) -> bool:
    return any(
        p.state == state and (arg in ("any", "") or p.planet_id == arg)
        for p in player.probes
    )


def _has_tech(player: Player, arg: str) -> bool:
    category = TECH_COLORS.get(arg)
    if category is None:
        return bool(player.technologies)
    return any(t.category == category for t in player.technologies)


_TRACE_COLORS = {"red": LifeTraceType.RED, "yellow": LifeTraceType.YELLOW, "blue": LifeTraceType.BLUE}


def _has_trace(player: Player, arg: str) -> bool:
    color = _TRACE_COLORS.get(arg)
    return any(color is None or t.type == color for t in player.life_traces)


def _covered(game: Game, player: Player, arg: str) -> bool:
    count = sum(1 for s in game.board.sectors if player.id in s.covered_by)
    return count >= _as_int(arg)


CONDITIONS: dict[str, Callable[[Game, Player, str], bool]] = {
    "ORBITER": lambda g, p, a: _has_probe_at(p, ProbeState.IN_ORBIT, a),
    "LANDER": lambda g, p, a: _has_probe_at(p, ProbeState.LANDED, a),
    "TECH": lambda g, p, a: _has_tech(p, a),
    "TECHS": lambda g, p, a: len(p.technologies) >= _as_int(a),
    "LIFETRACE": lambda g, p, a: _has_trace(p, a),
    "COVERED": _covered,
    "MEDIA": lambda g, p, a: p.media >= _as_int(a),
    "CREDITS": lambda g, p, a: p.credits >= _as_int(a),
    "ENERGY": lambda g, p, a: p.energy >= _as_int(a),
    "DATA": lambda g, p, a: p.data >= _as_int(a),
    "PROBES": lambda g, p, a: len(p.probes_in_system()) >= _as_int(a),
    "CARDS": lambda g, p, a: len(p.hand) >= _as_int(a),
}


def _code_parts(requirement: CardEffect) -> list[str]:
    return requirement.value.split(":") if isinstance(requirement.value, str) else []


def condition_met(game: Game, player: Player, requirement: CardEffect) -> bool:
    """Evaluate a GAIN_IF requirement. Unknown conditions are never met."""
    check = CONDITIONS.get((requirement.target or "").upper())
    if check is None:
        return False
    parts = _code_parts(requirement)
    arg = parts[1] if len(parts) > 1 else ""
    return check(game, player, arg)


def requirement_reward(requirement: CardEffect) -> Bonus:
    if requirement.type == EffectType.GAIN_IF:
        parts = _code_parts(requirement)
        target = parts[2] if len(parts) > 2 else "pv"
        return bonus_for_target(target, trigger_amount(requirement))
    return bonus_for_target(requirement.target or "", trigger_amount(requirement))


# ============================================================================
# Lifecycle
# ============================================================================

def create_mission(game: Game, player: Player, card: Card) -> Mission | None:
    """Build the Mission tracked for a played mission card."""
    if card.type == CardType.CONDITIONAL_MISSION:
        requirements = [e for e in card.permanent_effects if e.type == EffectType.GAIN_IF]
    elif card.type == CardType.TRIGGERED_MISSION:
        requirements = [e for e in card.permanent_effects if e.type in TRIGGER_EFFECTS]
    else:
        return None
    return Mission(
        id=game.next_id("mission"),
        card_id=card.id,
        name=card.name,
        owner_id=player.id,
        requirements=requirements,
    )


def check_conditions(game: Game, player_id: str, sequence_id: str = "") -> StepResult:
    """Mark conditional requirements whose condition now holds."""
    game = game.clone()
    result = StepResult(game)
    player = game.get_player(player_id)
    for mission in player.missions:
        if mission.completed:
            continue
        for index, requirement in enumerate(mission.requirements):
            requirement_id = mission.requirement_id(index)
            if (requirement.type != EffectType.GAIN_IF
                    or requirement_id in mission.completed_requirement_ids
                    or requirement_id in mission.fulfillable_requirement_ids):
                continue
            if condition_met(game, player, requirement):
                mission.fulfillable_requirement_ids.append(requirement_id)
                result.log(f"peut accomplir une condition de la mission \"{mission.name}\"", player_id, sequence_id)
    return result


def fulfillable(player: Player) -> list[tuple[str, str]]:
    """(mission id, requirement id) pairs the player can claim now."""
    return [
        (m.id, r)
        for m in player.missions if not m.completed
        for r in m.fulfillable_requirement_ids
    ]


def can_accomplish(player: Player, mission_id: str, requirement_id: str | None = None) -> tuple[bool, str]:
    mission = player.get_mission(mission_id)
    if mission is None or mission.completed:
        return False, "MISSION_NOT_FOUND"
    if requirement_id is None:
        return (bool(mission.fulfillable_requirement_ids), "REQUIREMENT_NOT_FULFILLABLE")
    if requirement_id not in mission.fulfillable_requirement_ids:
        return False, "REQUIREMENT_NOT_FULFILLABLE"
    return True, ""


def accomplish_requirement(game: Game, player_id: str, mission_id: str,
                           requirement_id: str | None = None, sequence_id: str = "") -> StepResult:
    """
    Claim one fulfillable requirement and return its reward as a bonus.

    Without `requirement_id` the first fulfillable one is claimed.
    """
    game = game.clone()
    player = game.get_player(player_id)
    ok, code = can_accomplish(player, mission_id, requirement_id)
    if not ok:
        raise ValueError(f"{code}: {mission_id}/{requirement_id}")

    mission = player.get_mission(mission_id)
    requirement_id = requirement_id or mission.fulfillable_requirement_ids[0]
    mission.fulfillable_requirement_ids.remove(requirement_id)
    mission.completed_requirement_ids.append(requirement_id)

    result = StepResult(game)
    result.add_bonus(requirement_reward(mission.requirement(requirement_id)))
    result.log(f"accomplit une condition de la mission \"{mission.name}\"", player_id, sequence_id)

    if len(mission.completed_requirement_ids) == len(mission.requirements):
        mission.completed = True
        result.log(f"termine la mission \"{mission.name}\"", player_id, sequence_id)
        logger.info("Player %s completed mission %s", player_id, mission.card_id)
    return result


def completed_missions(player: Player) -> list[Mission]:
    return [m for m in player.missions if m.completed]
