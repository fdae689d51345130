"""
Effects - Card text parsing and the closed catalog of effect kinds.

The card loader lives in `effects.card_loader` and is imported explicitly
since it depends on the engine state model.
"""

from .catalog import CardEffect, EffectType, EffectTarget
from .parser import (
    ParseResult,
    parse_immediate,
    parse_passive,
    parse_permanent,
    parse_constraints,
    parse_effect_code,
)

__all__ = [
    "CardEffect",
    "EffectType",
    "EffectTarget",
    "ParseResult",
    "parse_immediate",
    "parse_passive",
    "parse_permanent",
    "parse_constraints",
    "parse_effect_code",
]
