"""
Triggers - Standing card effects that fire on game events.

A played card's permanent effects live in Player.permanent_buffs and pay out
automatically. A triggered mission's GAIN_ON_* requirements instead become
fulfillable and are claimed later with ACCOMPLISH_MISSION.

fire_triggers works in place on a Game the caller already cloned.
"""

from __future__ import annotations
import logging

from ...effects.catalog import EffectType, trigger_amount
from ..bonus import Bonus, bonus_for_target, format_bonus
from ..enums import LifeTraceType, SectorType, TechnologyCategory
from ..state import Game, HistoryEntry

logger = logging.getLogger(__name__)

SIGNAL_TRIGGERS = {
    SectorType.YELLOW: EffectType.GAIN_ON_YELLOW_SIGNAL,
    SectorType.RED: EffectType.GAIN_ON_RED_SIGNAL,
    SectorType.BLUE: EffectType.GAIN_ON_BLUE_SIGNAL,
    SectorType.OUMUAMUA: EffectType.GAIN_ON_OUMUAMUA_SIGNAL,
}

TECH_TRIGGERS = {
    TechnologyCategory.EXPLORATION: EffectType.GAIN_ON_YELLOW_TECH,
    TechnologyCategory.OBSERVATION: EffectType.GAIN_ON_RED_TECH,
    TechnologyCategory.COMPUTING: EffectType.GAIN_ON_BLUE_TECH,
}

LIFETRACE_TRIGGERS = {
    LifeTraceType.YELLOW: EffectType.GAIN_ON_YELLOW_LIFETRACE,
    LifeTraceType.RED: EffectType.GAIN_ON_RED_LIFETRACE,
    LifeTraceType.BLUE: EffectType.GAIN_ON_BLUE_LIFETRACE,
}

VISIT_TRIGGERS = {
    "jupiter": EffectType.GAIN_ON_VISIT_JUPITER,
    "saturn": EffectType.GAIN_ON_VISIT_SATURN,
    "mercury": EffectType.GAIN_ON_VISIT_MERCURY,
    "venus": EffectType.GAIN_ON_VISIT_VENUS,
    "uranus": EffectType.GAIN_ON_VISIT_URANUS,
    "neptune": EffectType.GAIN_ON_VISIT_NEPTUNE,
    "oumuamua": EffectType.GAIN_ON_VISIT_OUMUAMUA,
}

PLAY_TRIGGERS = {
    1: EffectType.GAIN_ON_PLAY_1_CREDIT,
    2: EffectType.GAIN_ON_PLAY_2_CREDITS,
    3: EffectType.GAIN_ON_PLAY_3_CREDITS,
}


def fire_triggers(game: Game, player_id: str, *effect_types: EffectType,
                  sequence_id: str = "") -> tuple[Bonus, list[HistoryEntry]]:
    """
    Fire every standing effect of `player_id` matching `effect_types`.

    Returns the automatic gains (to be resolved by the caller) and history.
    Mission requirements are marked fulfillable in place.
    """
    player = game.get_player(player_id)
    wanted = set(effect_types)
    bonus = Bonus()
    entries: list[HistoryEntry] = []
    if player is None or not wanted:
        return bonus, entries

    for effect in player.permanent_buffs:
        if effect.type in wanted:
            bonus = bonus.merge(bonus_for_target(effect.target or "", trigger_amount(effect)))

    for mission in player.missions:
        if mission.completed:
            continue
        for index, requirement in enumerate(mission.requirements):
            requirement_id = mission.requirement_id(index)
            if (requirement.type in wanted
                    and requirement_id not in mission.completed_requirement_ids
                    and requirement_id not in mission.fulfillable_requirement_ids):
                mission.fulfillable_requirement_ids.append(requirement_id)
                entries.append(HistoryEntry(
                    f"peut accomplir une condition de la mission \"{mission.name}\"",
                    player_id, sequence_id,
                ))

    if not bonus.is_empty():
        entries.append(HistoryEntry(f"gagne {format_bonus(bonus)} (effet permanent)", player_id, sequence_id))
        logger.debug("Triggers %s paid %s to %s", sorted(t.value for t in wanted), bonus.to_dict(), player_id)
    return bonus, entries
