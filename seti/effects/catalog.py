"""
Effect Catalog - The closed set of effect kinds a card can carry.

Card text is parsed into CardEffect records whose `type` is always a member of
EffectType. Immediate effects use GAIN/ACTION with a target naming the
resource; passive and permanent effects map 1:1 from their textual code.

Effects fall into three families:
- Immediate: applied once when the card is played (converted to a Bonus)
- Passive: turn buffs, bonus flags, mission requirements or end-game scoring
- Permanent: standing triggers ("gain 1 media whenever you orbit")
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any


class EffectType(str, Enum):
    """Every effect kind the engine understands."""
    # Immediate
    GAIN = "GAIN"
    ACTION = "ACTION"

    # Passive: turn buffs
    VISIT_BONUS = "VISIT_BONUS"
    VISIT_UNIQUE = "VISIT_UNIQUE"
    VISIT_ASTEROID = "VISIT_ASTEROID"
    VISIT_COMET = "VISIT_COMET"
    SAME_DISK_MOVE = "SAME_DISK_MOVE"
    ASTEROID_EXIT_COST = "ASTEROID_EXIT_COST"
    GAIN_LIFETRACE_IF_ASTEROID = "GAIN_LIFETRACE_IF_ASTEROID"
    BONUS_IF_COVERED = "BONUS_IF_COVERED"
    MEDIA_IF_SHARED_TECH = "MEDIA_IF_SHARED_TECH"
    SCORE_PER_TECH_TYPE = "SCORE_PER_TECH_TYPE"

    # Passive: flags folded into the played card's bonus
    REVEAL_AND_TRIGGER_FREE_ACTION = "REVEAL_AND_TRIGGER_FREE_ACTION"
    SCORE_PER_MEDIA = "SCORE_PER_MEDIA"
    SHARED_TECH_ONLY_NO_BONUS = "SHARED_TECH_ONLY_NO_BONUS"
    ATMOSPHERIC_ENTRY = "ATMOSPHERIC_ENTRY"
    IGNORE_PROBE_LIMIT = "IGNORE_PROBE_LIMIT"
    CHOICE_MEDIA_OR_MOVE = "CHOICE_MEDIA_OR_MOVE"
    GAIN_SIGNAL_FROM_HAND = "GAIN_SIGNAL_FROM_HAND"
    KEEP_CARD_IF_ONLY = "KEEP_CARD_IF_ONLY"
    NO_DATA = "NO_DATA"
    ANY_PROBE = "ANY_PROBE"
    GAIN_SIGNAL_ADJACENTS = "GAIN_SIGNAL_ADJACENTS"
    IGNORE_SATELLITE_LIMIT = "IGNORE_SATELLITE_LIMIT"

    # Passive: one-shot card specials
    REVEAL_MOVEMENT_CARDS_FOR_BONUS = "REVEAL_MOVEMENT_CARDS_FOR_BONUS"
    GAIN_ENERGY_PER_ENERGY_REVENUE = "GAIN_ENERGY_PER_ENERGY_REVENUE"
    GAIN_ENERGY_PER_REVENUE_ENERGY_AND_RESERVE = "GAIN_ENERGY_PER_REVENUE_ENERGY_AND_RESERVE"
    GAIN_MEDIA_PER_REVENUE_CARD_AND_RESERVE = "GAIN_MEDIA_PER_REVENUE_CARD_AND_RESERVE"
    GAIN_PV_PER_REVENUE_CREDIT_AND_RESERVE = "GAIN_PV_PER_REVENUE_CREDIT_AND_RESERVE"
    OPTIMAL_LAUNCH_WINDOW = "OPTIMAL_LAUNCH_WINDOW"
    OSIRIS_REX_BONUS = "OSIRIS_REX_BONUS"
    DISCARD_ROW_FOR_FREE_ACTIONS = "DISCARD_ROW_FOR_FREE_ACTIONS"

    # Passive: end-game scoring
    SCORE_IF_UNIQUE = "SCORE_IF_UNIQUE"
    SCORE_PER_SECTOR = "SCORE_PER_SECTOR"
    SCORE_PER_ORBITER_LANDER = "SCORE_PER_ORBITER_LANDER"
    SCORE_PER_COVERED_SECTOR = "SCORE_PER_COVERED_SECTOR"
    SCORE_PER_LIFETRACE = "SCORE_PER_LIFETRACE"
    SCORE_PER_SIGNAL = "SCORE_PER_SIGNAL"
    SCORE_SOLVAY = "SCORE_SOLVAY"
    SCORE_PER_TECH_CATEGORY = "SCORE_PER_TECH_CATEGORY"
    SCORE_IF_PROBE_ON_ASTEROID = "SCORE_IF_PROBE_ON_ASTEROID"
    SCORE_PER_TRACE = "SCORE_PER_TRACE"

    # Permanent triggers
    GAIN_ON_ORBIT = "GAIN_ON_ORBIT"
    GAIN_ON_LAND = "GAIN_ON_LAND"
    GAIN_ON_ORBIT_OR_LAND = "GAIN_ON_ORBIT_OR_LAND"
    GAIN_ON_LAUNCH = "GAIN_ON_LAUNCH"
    GAIN_ON_SCAN = "GAIN_ON_SCAN"
    GAIN_ON_YELLOW_SIGNAL = "GAIN_ON_YELLOW_SIGNAL"
    GAIN_ON_RED_SIGNAL = "GAIN_ON_RED_SIGNAL"
    GAIN_ON_BLUE_SIGNAL = "GAIN_ON_BLUE_SIGNAL"
    GAIN_ON_OUMUAMUA_SIGNAL = "GAIN_ON_OUMUAMUA_SIGNAL"
    GAIN_ON_YELLOW_TECH = "GAIN_ON_YELLOW_TECH"
    GAIN_ON_RED_TECH = "GAIN_ON_RED_TECH"
    GAIN_ON_BLUE_TECH = "GAIN_ON_BLUE_TECH"
    GAIN_ON_YELLOW_LIFETRACE = "GAIN_ON_YELLOW_LIFETRACE"
    GAIN_ON_RED_LIFETRACE = "GAIN_ON_RED_LIFETRACE"
    GAIN_ON_BLUE_LIFETRACE = "GAIN_ON_BLUE_LIFETRACE"
    GAIN_ON_ANY_LIFETRACE = "GAIN_ON_ANY_LIFETRACE"
    GAIN_ON_VISIT_JUPITER = "GAIN_ON_VISIT_JUPITER"
    GAIN_ON_VISIT_SATURN = "GAIN_ON_VISIT_SATURN"
    GAIN_ON_VISIT_MERCURY = "GAIN_ON_VISIT_MERCURY"
    GAIN_ON_VISIT_VENUS = "GAIN_ON_VISIT_VENUS"
    GAIN_ON_VISIT_URANUS = "GAIN_ON_VISIT_URANUS"
    GAIN_ON_VISIT_NEPTUNE = "GAIN_ON_VISIT_NEPTUNE"
    GAIN_ON_VISIT_PLANET = "GAIN_ON_VISIT_PLANET"
    GAIN_ON_VISIT_ASTEROID = "GAIN_ON_VISIT_ASTEROID"
    GAIN_ON_VISIT_OUMUAMUA = "GAIN_ON_VISIT_OUMUAMUA"
    GAIN_ON_PLAY_1_CREDIT = "GAIN_ON_PLAY_1_CREDIT"
    GAIN_ON_PLAY_2_CREDITS = "GAIN_ON_PLAY_2_CREDITS"
    GAIN_ON_PLAY_3_CREDITS = "GAIN_ON_PLAY_3_CREDITS"
    GAIN_ON_DISCARD_MEDIA = "GAIN_ON_DISCARD_MEDIA"
    GAIN_ON_DISCARD_DATA = "GAIN_ON_DISCARD_DATA"
    GAIN_ON_DISCARD_MOVE = "GAIN_ON_DISCARD_MOVE"
    GAIN_ON_TOKEN = "GAIN_ON_TOKEN"
    GAIN_ON_TOKEN_AND_LAND = "GAIN_ON_TOKEN_AND_LAND"

    # Conditional mission requirement (target holds the condition name)
    GAIN_IF = "GAIN_IF"

    UNKNOWN = "UNKNOWN"


# Immediate effect targets
class EffectTarget(str, Enum):
    MEDIA = "MEDIA"
    CREDIT = "CREDIT"
    ENERGY = "ENERGY"
    DATA = "DATA"
    PROBE = "PROBE"
    CARD = "CARD"
    SIGNAL = "SIGNAL"
    ANYCARD = "ANYCARD"
    MOVEMENT = "MOVEMENT"
    ROTATION = "ROTATION"
    LAND = "LAND"
    SCAN = "SCAN"
    TECH = "TECH"
    LIFETRACE = "LIFETRACE"


BONUS_FLAG_EFFECTS = frozenset({
    EffectType.REVEAL_AND_TRIGGER_FREE_ACTION,
    EffectType.SCORE_PER_MEDIA,
    EffectType.SHARED_TECH_ONLY_NO_BONUS,
    EffectType.ATMOSPHERIC_ENTRY,
    EffectType.IGNORE_PROBE_LIMIT,
    EffectType.CHOICE_MEDIA_OR_MOVE,
    EffectType.GAIN_SIGNAL_FROM_HAND,
    EffectType.KEEP_CARD_IF_ONLY,
    EffectType.NO_DATA,
    EffectType.ANY_PROBE,
    EffectType.GAIN_SIGNAL_ADJACENTS,
    EffectType.IGNORE_SATELLITE_LIMIT,
})

TURN_BUFF_EFFECTS = frozenset({
    EffectType.VISIT_BONUS,
    EffectType.VISIT_UNIQUE,
    EffectType.VISIT_ASTEROID,
    EffectType.VISIT_COMET,
    EffectType.SAME_DISK_MOVE,
    EffectType.ASTEROID_EXIT_COST,
    EffectType.GAIN_LIFETRACE_IF_ASTEROID,
    EffectType.BONUS_IF_COVERED,
    EffectType.MEDIA_IF_SHARED_TECH,
    EffectType.SCORE_PER_TECH_TYPE,
})

SPECIAL_EFFECTS = frozenset({
    EffectType.REVEAL_MOVEMENT_CARDS_FOR_BONUS,
    EffectType.GAIN_ENERGY_PER_ENERGY_REVENUE,
    EffectType.GAIN_ENERGY_PER_REVENUE_ENERGY_AND_RESERVE,
    EffectType.GAIN_MEDIA_PER_REVENUE_CARD_AND_RESERVE,
    EffectType.GAIN_PV_PER_REVENUE_CREDIT_AND_RESERVE,
    EffectType.OPTIMAL_LAUNCH_WINDOW,
    EffectType.OSIRIS_REX_BONUS,
    EffectType.DISCARD_ROW_FOR_FREE_ACTIONS,
})

SCORING_EFFECTS = frozenset({
    EffectType.SCORE_IF_UNIQUE,
    EffectType.SCORE_PER_SECTOR,
    EffectType.SCORE_PER_ORBITER_LANDER,
    EffectType.SCORE_PER_COVERED_SECTOR,
    EffectType.SCORE_PER_LIFETRACE,
    EffectType.SCORE_PER_SIGNAL,
    EffectType.SCORE_SOLVAY,
    EffectType.SCORE_PER_TECH_CATEGORY,
    EffectType.SCORE_IF_PROBE_ON_ASTEROID,
    EffectType.SCORE_PER_TRACE,
})

TRIGGER_EFFECTS = frozenset(t for t in EffectType if t.value.startswith("GAIN_ON_"))


@dataclass(frozen=True)
class CardEffect:
    """
    A single structured effect.

    `value` is an int for counts, a dict for scoped grants
    ({"amount": n, "scope": ...}) and the raw code string for permanent
    triggers and conditional requirements.
    """
    type: EffectType
    value: Any = None
    target: str | None = None

    def to_dict(self) -> dict:
        value = self.value
        if isinstance(value, dict):
            value = {k: (v.value if isinstance(v, Enum) else v) for k, v in value.items()}
        return {"type": self.type.value, "target": self.target, "value": value}


def trigger_amount(effect: CardEffect) -> int:
    """Read the gained amount from the raw code of a trigger or requirement."""
    raw = effect.value if isinstance(effect.value, str) else ""
    try:
        return int(raw.split(":")[-1])
    except ValueError:
        return 1
