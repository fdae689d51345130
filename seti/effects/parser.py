"""
Effect Parser - Turns card text into structured CardEffect records.

Three grammars are supported:

- Immediate: free-form fragments joined by '+', matched by keyword
  ("2 Données + 1 Rotation + 1 Tech Informatique").
- Passive: strict colon codes ("VISIT_PLANET:mars:4", "SCORE_PER_MEDIA:1").
- Permanent: strict colon codes whose value is the raw code
  ("GAIN_ON_ORBIT:media:2", "GAIN_ON_SIGNAL:yellow:media:1").

Parsing is pure and never raises. A fragment no grammar recognizes is logged
at WARNING level and reported in ParseResult.misses as an UNKNOWN effect.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from typing import Callable

from .catalog import CardEffect, EffectType, EffectTarget
from ..engine_core.enums import SectorType, TechnologyCategory, LifeTraceType

logger = logging.getLogger(__name__)

_AMOUNT_RE = re.compile(r"^(\d+)\s+(.+)$")


@dataclass
class ParseResult:
    effects: list[CardEffect] = field(default_factory=list)
    misses: list[CardEffect] = field(default_factory=list)

    def extend(self, other: ParseResult) -> None:
        self.effects.extend(other.effects)
        self.misses.extend(other.misses)


def _miss(fragment: str, grammar: str) -> CardEffect:
    logger.warning("Unrecognized %s effect fragment: %r", grammar, fragment)
    return CardEffect(EffectType.UNKNOWN, value=fragment, target=grammar)


def _split(text: str | None) -> list[str]:
    if not text or not isinstance(text, str):
        return []
    return [part.strip() for part in text.split("+") if part.strip()]


# ============================================================================
# Immediate grammar
# ============================================================================

# Checked in order; the first keyword contained in the fragment wins.
_SIGNAL_SCOPES: list[tuple[tuple[str, ...], SectorType]] = [
    (("rangée", "rangee"), SectorType.ROW),
    (("terre",), SectorType.EARTH),
    (("mercure",), SectorType.MERCURY),
    (("vénus", "venus"), SectorType.VENUS),
    (("jupiter",), SectorType.JUPITER),
    (("saturne",), SectorType.SATURN),
    (("mars",), SectorType.MARS),
    (("sonde",), SectorType.PROBE),
    (("jaune",), SectorType.YELLOW),
    (("bleu",), SectorType.BLUE),
    (("rouge",), SectorType.RED),
    (("noir",), SectorType.BLACK),
    (("deck",), SectorType.DECK),
    (("kepler",), SectorType.KEPLER),
    (("virginis",), SectorType.VIRGINIS),
    (("barnard",), SectorType.BARNARD),
    (("proxima",), SectorType.PROXIMA),
    (("procyon",), SectorType.PROCYON),
    (("sirius",), SectorType.SIRIUS),
    (("véga", "vega"), SectorType.VEGA),
    (("pictoris",), SectorType.PICTORIS),
]

_TECH_SCOPES: list[tuple[tuple[str, ...], TechnologyCategory]] = [
    (("exploorobs",), TechnologyCategory.EXPLORATION_OR_OBSERVATION),
    (("informatique", "bleu"), TechnologyCategory.COMPUTING),
    (("exploration", "jaune"), TechnologyCategory.EXPLORATION),
    (("observation", "rouge"), TechnologyCategory.OBSERVATION),
]

_TRACE_SCOPES: list[tuple[tuple[str, ...], LifeTraceType]] = [
    (("rouge", "red"), LifeTraceType.RED),
    (("bleu", "blue"), LifeTraceType.BLUE),
    (("jaune", "yellow"), LifeTraceType.YELLOW),
]


def _first_scope(lower: str, table, default):
    for keywords, scope in table:
        if any(k in lower for k in keywords):
            return scope
    return default


def _has(lower: str, *keywords: str) -> bool:
    return any(k in lower for k in keywords)


def _parse_immediate_fragment(part: str) -> CardEffect | None:
    lower = part.lower()
    match = _AMOUNT_RE.match(lower)
    amount = int(match.group(1)) if match else 1

    if _has(lower, "média", "media"):
        return CardEffect(EffectType.GAIN, amount, EffectTarget.MEDIA.value)
    if _has(lower, "crédit", "credit"):
        return CardEffect(EffectType.GAIN, amount, EffectTarget.CREDIT.value)
    if _has(lower, "energie", "énergie"):
        return CardEffect(EffectType.GAIN, amount, EffectTarget.ENERGY.value)
    if _has(lower, "donnée", "data"):
        return CardEffect(EffectType.GAIN, amount, EffectTarget.DATA.value)
    if _has(lower, "signal", "signaux"):
        scope = _first_scope(lower, _SIGNAL_SCOPES, SectorType.ANY)
        return CardEffect(EffectType.ACTION, {"amount": amount, "scope": scope}, EffectTarget.SIGNAL.value)
    if "sonde" in lower:
        return CardEffect(EffectType.GAIN, amount, EffectTarget.PROBE.value)
    if "pioche" in lower:
        return CardEffect(EffectType.GAIN, amount, EffectTarget.CARD.value)
    if "carte" in lower:
        return CardEffect(EffectType.ACTION, amount, EffectTarget.ANYCARD.value)
    if _has(lower, "déplacement", "deplacement"):
        return CardEffect(EffectType.ACTION, amount, EffectTarget.MOVEMENT.value)
    if "rotation" in lower:
        return CardEffect(EffectType.ACTION, amount, EffectTarget.ROTATION.value)
    if "atterrissage" in lower:
        return CardEffect(EffectType.ACTION, amount, EffectTarget.LAND.value)
    if "scan" in lower:
        return CardEffect(EffectType.ACTION, amount, EffectTarget.SCAN.value)
    if "tech" in lower:
        scope = _first_scope(lower, _TECH_SCOPES, TechnologyCategory.ANY)
        return CardEffect(EffectType.ACTION, {"amount": amount, "scope": scope}, EffectTarget.TECH.value)
    if "trace" in lower:
        scope = _first_scope(lower, _TRACE_SCOPES, LifeTraceType.ANY)
        return CardEffect(EffectType.ACTION, {"amount": amount, "scope": scope}, EffectTarget.LIFETRACE.value)
    return None


def parse_immediate(text: str | None) -> ParseResult:
    """Parse an immediate-gain column such as '2 Sondes + 1 Média'."""
    result = ParseResult()
    for part in _split(text):
        effect = _parse_immediate_fragment(part)
        if effect is None:
            result.misses.append(_miss(part, "immediate"))
        else:
            result.effects.append(effect)
    return result


# ============================================================================
# Passive grammar
# ============================================================================

def _int(text: str) -> int | None:
    try:
        return int(text)
    except ValueError:
        return None


def _typed(effect_type: EffectType) -> Callable[[list[str]], CardEffect | None]:
    """CODE:int"""
    def build(parts: list[str]) -> CardEffect | None:
        value = _int(parts[1])
        return None if value is None else CardEffect(effect_type, value)
    return build


def _targeted(effect_type: EffectType) -> Callable[[list[str]], CardEffect | None]:
    """CODE:target:int"""
    def build(parts: list[str]) -> CardEffect | None:
        value = _int(parts[2])
        return None if value is None else CardEffect(effect_type, value, parts[1])
    return build


def _same_disk(parts: list[str]) -> CardEffect | None:
    pv, media = _int(parts[1]), _int(parts[2])
    if pv is None or media is None:
        return None
    return CardEffect(EffectType.SAME_DISK_MOVE, {"pv": pv, "media": media})


# code -> (field count, builder)
_PASSIVE_CODES: dict[str, tuple[int, Callable[[list[str]], CardEffect | None]]] = {
    "VISIT_PLANET": (3, _targeted(EffectType.VISIT_BONUS)),
    "VISIT_UNIQUE": (2, _typed(EffectType.VISIT_UNIQUE)),
    "ASTEROID_EXIT_COST": (2, _typed(EffectType.ASTEROID_EXIT_COST)),
    "VISIT_ASTEROID": (2, _typed(EffectType.VISIT_ASTEROID)),
    "VISIT_COMET": (2, _typed(EffectType.VISIT_COMET)),
    "SAME_DISK_MOVE": (3, _same_disk),
    "GAIN_LIFETRACE_IF_ASTEROID": (3, _targeted(EffectType.GAIN_LIFETRACE_IF_ASTEROID)),
    "SCORE_PER_MEDIA": (2, _typed(EffectType.SCORE_PER_MEDIA)),
    "SCORE_PER_TECH_TYPE": (2, _typed(EffectType.SCORE_PER_TECH_TYPE)),
    "MEDIA_IF_SHARED_TECH": (2, _typed(EffectType.MEDIA_IF_SHARED_TECH)),
    "GAIN_SIGNAL_FROM_HAND": (2, _typed(EffectType.GAIN_SIGNAL_FROM_HAND)),
    "BONUS_IF_COVERED": (2, lambda parts: CardEffect(EffectType.BONUS_IF_COVERED, 1, parts[1])),
    "SCORE_IF_UNIQUE": (2, _typed(EffectType.SCORE_IF_UNIQUE)),
    "SCORE_PER_SECTOR": (3, _targeted(EffectType.SCORE_PER_SECTOR)),
    "SCORE_PER_ORBITER_LANDER": (3, _targeted(EffectType.SCORE_PER_ORBITER_LANDER)),
    "SCORE_PER_COVERED_SECTOR": (3, _targeted(EffectType.SCORE_PER_COVERED_SECTOR)),
    "SCORE_PER_LIFETRACE": (3, _targeted(EffectType.SCORE_PER_LIFETRACE)),
    "SCORE_PER_SIGNAL": (3, _targeted(EffectType.SCORE_PER_SIGNAL)),
    "SCORE_PER_TECH_CATEGORY": (3, _targeted(EffectType.SCORE_PER_TECH_CATEGORY)),
    "SCORE_IF_PROBE_ON_ASTEROID": (2, _typed(EffectType.SCORE_IF_PROBE_ON_ASTEROID)),
    "SCORE_PER_TRACE": (3, _targeted(EffectType.SCORE_PER_TRACE)),
}

# Bare codes with no fields
_PASSIVE_FLAGS: dict[str, tuple[EffectType, object]] = {
    "REVEAL_AND_TRIGGER_FREE_ACTION": (EffectType.REVEAL_AND_TRIGGER_FREE_ACTION, 1),
    "REVEAL_MOVEMENT_CARDS_FOR_BONUS": (EffectType.REVEAL_MOVEMENT_CARDS_FOR_BONUS, 1),
    "GAIN_ENERGY_PER_ENERGY_REVENUE": (EffectType.GAIN_ENERGY_PER_ENERGY_REVENUE, 1),
    "GAIN_ENERGY_PER_REVENUE_ENERGY_AND_RESERVE": (EffectType.GAIN_ENERGY_PER_REVENUE_ENERGY_AND_RESERVE, 1),
    "GAIN_MEDIA_PER_REVENUE_CARD_AND_RESERVE": (EffectType.GAIN_MEDIA_PER_REVENUE_CARD_AND_RESERVE, 1),
    "GAIN_PV_PER_REVENUE_CREDIT_AND_RESERVE": (EffectType.GAIN_PV_PER_REVENUE_CREDIT_AND_RESERVE, 1),
    "SHARED_TECH_ONLY_NO_BONUS": (EffectType.SHARED_TECH_ONLY_NO_BONUS, 1),
    "OPTIMAL_LAUNCH_WINDOW": (EffectType.OPTIMAL_LAUNCH_WINDOW, 1),
    "OSIRIS_REX_BONUS": (EffectType.OSIRIS_REX_BONUS, 1),
    "DISCARD_ROW_FOR_FREE_ACTIONS": (EffectType.DISCARD_ROW_FOR_FREE_ACTIONS, 1),
    "ATMOSPHERIC_ENTRY": (EffectType.ATMOSPHERIC_ENTRY, 1),
    "IGNORE_PROBE_LIMIT": (EffectType.IGNORE_PROBE_LIMIT, True),
    "CHOICE_MEDIA_OR_MOVE": (EffectType.CHOICE_MEDIA_OR_MOVE, True),
    "KEEP_CARD_IF_ONLY": (EffectType.KEEP_CARD_IF_ONLY, True),
    "NO_DATA": (EffectType.NO_DATA, True),
    "ANY_PROBE": (EffectType.ANY_PROBE, True),
    "GAIN_SIGNAL_ADJACENTS": (EffectType.GAIN_SIGNAL_ADJACENTS, True),
    "IGNORE_SATELLITE_LIMIT": (EffectType.IGNORE_SATELLITE_LIMIT, True),
    "SCORE_SOLVAY": (EffectType.SCORE_SOLVAY, 1),
}


def _parse_passive_fragment(fragment: str) -> CardEffect | None:
    if fragment in _PASSIVE_FLAGS:
        effect_type, value = _PASSIVE_FLAGS[fragment]
        return CardEffect(effect_type, value)
    parts = fragment.split(":")
    entry = _PASSIVE_CODES.get(parts[0])
    if entry is None:
        return None
    count, build = entry
    if len(parts) != count:
        return None
    return build(parts)


def parse_passive(code: str | None) -> ParseResult:
    """Parse passive codes; wrong field counts are misses."""
    result = ParseResult()
    for fragment in _split(code):
        effect = _parse_passive_fragment(fragment)
        if effect is None:
            result.misses.append(_miss(fragment, "passive"))
        else:
            result.effects.append(effect)
    return result


# ============================================================================
# Permanent grammar
# ============================================================================

_THREE_PART_TRIGGERS = {
    "GAIN_ON_ORBIT": EffectType.GAIN_ON_ORBIT,
    "GAIN_ON_LAND": EffectType.GAIN_ON_LAND,
    "GAIN_ON_ORBIT_OR_LAND": EffectType.GAIN_ON_ORBIT_OR_LAND,
    "GAIN_ON_LAUNCH": EffectType.GAIN_ON_LAUNCH,
    "GAIN_ON_SCAN": EffectType.GAIN_ON_SCAN,
    "GAIN_ON_TOKEN": EffectType.GAIN_ON_TOKEN,
    "GAIN_ON_TOKEN_AND_LAND": EffectType.GAIN_ON_TOKEN_AND_LAND,
}

# code -> qualifier -> effect type, for CODE:qualifier:target:value
_FOUR_PART_TRIGGERS: dict[str, dict[str, EffectType]] = {
    "GAIN_ON_SIGNAL": {
        "yellow": EffectType.GAIN_ON_YELLOW_SIGNAL,
        "red": EffectType.GAIN_ON_RED_SIGNAL,
        "blue": EffectType.GAIN_ON_BLUE_SIGNAL,
        "oumuamua": EffectType.GAIN_ON_OUMUAMUA_SIGNAL,
    },
    "GAIN_ON_TECH": {
        "yellow": EffectType.GAIN_ON_YELLOW_TECH,
        "red": EffectType.GAIN_ON_RED_TECH,
        "blue": EffectType.GAIN_ON_BLUE_TECH,
    },
    "GAIN_ON_LIFETRACE": {
        "yellow": EffectType.GAIN_ON_YELLOW_LIFETRACE,
        "red": EffectType.GAIN_ON_RED_LIFETRACE,
        "blue": EffectType.GAIN_ON_BLUE_LIFETRACE,
        "any": EffectType.GAIN_ON_ANY_LIFETRACE,
    },
    "GAIN_ON_VISIT": {
        "jupiter": EffectType.GAIN_ON_VISIT_JUPITER,
        "saturn": EffectType.GAIN_ON_VISIT_SATURN,
        "mercury": EffectType.GAIN_ON_VISIT_MERCURY,
        "venus": EffectType.GAIN_ON_VISIT_VENUS,
        "uranus": EffectType.GAIN_ON_VISIT_URANUS,
        "neptune": EffectType.GAIN_ON_VISIT_NEPTUNE,
        "planet": EffectType.GAIN_ON_VISIT_PLANET,
        "asteroid": EffectType.GAIN_ON_VISIT_ASTEROID,
        "oumuamua": EffectType.GAIN_ON_VISIT_OUMUAMUA,
    },
    "GAIN_ON_PLAY": {
        "1": EffectType.GAIN_ON_PLAY_1_CREDIT,
        "2": EffectType.GAIN_ON_PLAY_2_CREDITS,
        "3": EffectType.GAIN_ON_PLAY_3_CREDITS,
    },
    "GAIN_ON_DISCARD": {
        "media": EffectType.GAIN_ON_DISCARD_MEDIA,
        "data": EffectType.GAIN_ON_DISCARD_DATA,
        "move": EffectType.GAIN_ON_DISCARD_MOVE,
    },
}


def _parse_permanent_fragment(fragment: str) -> CardEffect | None:
    parts = [p.strip() for p in fragment.split(":")]
    head = parts[0]
    if head in _THREE_PART_TRIGGERS:
        if len(parts) != 3:
            return None
        return CardEffect(_THREE_PART_TRIGGERS[head], fragment, parts[1])
    if head in _FOUR_PART_TRIGGERS:
        if len(parts) != 4:
            return None
        effect_type = _FOUR_PART_TRIGGERS[head].get(parts[1])
        if effect_type is None:
            return None
        return CardEffect(effect_type, fragment, parts[2])
    if head.startswith("GAIN_IF_") and len(parts) >= 2:
        return CardEffect(EffectType.GAIN_IF, fragment, head[len("GAIN_IF_"):])
    return None


def parse_permanent(code: str | None) -> ParseResult:
    """Parse permanent trigger codes; the effect value is the raw code."""
    result = ParseResult()
    for fragment in _split(code):
        effect = _parse_permanent_fragment(fragment)
        if effect is None:
            result.misses.append(_miss(fragment, "permanent"))
        else:
            result.effects.append(effect)
    return result


def parse_constraints(code: str | None) -> tuple[ParseResult, ParseResult, list[CardEffect]]:
    """
    Parse a constraint column with both strict grammars.

    Returns (passive, permanent, misses) where misses are fragments neither
    grammar recognized.
    """
    passive, permanent, misses = ParseResult(), ParseResult(), []
    for fragment in _split(code):
        as_passive = _parse_passive_fragment(fragment)
        as_permanent = _parse_permanent_fragment(fragment)
        if as_passive is not None:
            passive.effects.append(as_passive)
        if as_permanent is not None:
            permanent.effects.append(as_permanent)
        if as_passive is None and as_permanent is None:
            misses.append(_miss(fragment, "constraint"))
    return passive, permanent, misses


def parse_effect_code(code: str | None) -> ParseResult:
    """
    Parse any effect text, picking the grammar per fragment.

    Upper-case colon codes go through the strict grammars; everything else is
    read as immediate card text. Never raises.
    """
    result = ParseResult()
    for fragment in _split(code):
        if re.match(r"^[A-Z][A-Z0-9_]*(:|$)", fragment):
            passive, permanent, misses = parse_constraints(fragment)
            result.effects.extend(passive.effects)
            result.effects.extend(permanent.effects)
            result.misses.extend(misses)
        else:
            result.extend(parse_immediate(fragment))
    return result
