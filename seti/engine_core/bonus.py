"""
Bonus - A compound resource delta produced by board positions and cards.

A Bonus is a transient value object: created by a sector, planet slot, alien
board slot or played card and consumed exactly once by the BonusResolver.
Scalar fields are applied directly; grant lists and count fields become
pending interactions.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Iterable

from .enums import SectorType, TechnologyCategory, LifeTraceType
from ..effects.catalog import CardEffect, EffectType, EffectTarget


@dataclass(frozen=True)
class SignalGrant:
    amount: int
    scope: SectorType = SectorType.ANY


@dataclass(frozen=True)
class TechGrant:
    amount: int
    scope: TechnologyCategory = TechnologyCategory.ANY


@dataclass(frozen=True)
class LifeTraceGrant:
    amount: int
    scope: LifeTraceType = LifeTraceType.ANY


@dataclass
class Bonus:
    """Resource delta. Zero/False/empty fields are absent."""
    pv: int = 0
    credits: int = 0
    energy: int = 0
    media: int = 0
    data: int = 0
    token: int = 0
    rotation: int = 0
    card: int = 0
    probe: int = 0
    signals: list[SignalGrant] = field(default_factory=list)
    scan: int = 0
    anycard: int = 0
    reservation: int = 0
    technologies: list[TechGrant] = field(default_factory=list)
    movements: int = 0
    landing: int = 0
    lifetraces: list[LifeTraceGrant] = field(default_factory=list)
    species_card: int = 0
    species_id: str | None = None
    score_per_media: int = 0
    reveal_and_trigger_free_action: bool = False
    choice_media_or_move: bool = False
    atmospheric_entry: bool = False
    gain_signal_from_hand: int = 0

    # Modifiers
    ignore_probe_limit: bool = False
    shared_only: bool = False
    no_tile_bonus: bool = False
    keep_card_if_only: bool = False
    no_data: bool = False
    any_probe: bool = False
    gain_signal_adjacents: bool = False
    ignore_satellite_limit: bool = False
    choose_tech_type: bool = False
    source_card_id: str | None = None

    def is_empty(self) -> bool:
        return all(
            not getattr(self, f.name)
            for f in fields(self)
            if f.name not in ("species_id", "source_card_id")
        )

    def merge(self, other: Bonus | None) -> Bonus:
        """Accumulate numbers, concatenate grants and OR flags."""
        if other is None:
            return replace(self)
        values = {}
        for f in fields(self):
            mine, theirs = getattr(self, f.name), getattr(other, f.name)
            if isinstance(mine, bool):
                values[f.name] = mine or theirs
            elif isinstance(mine, int):
                values[f.name] = mine + theirs
            elif isinstance(mine, list):
                values[f.name] = mine + theirs
            else:
                values[f.name] = mine if mine is not None else theirs
        return Bonus(**values)

    @classmethod
    def from_effects(cls, effects: Iterable[CardEffect]) -> Bonus:
        """Convert immediate effects (and bonus-flag passives) to a Bonus."""
        bonus = cls()
        for effect in effects:
            bonus = bonus.merge(_effect_to_bonus(effect))
        return bonus

    def summary(self) -> list[str]:
        """Human-readable labels, one per present component."""
        labels = []
        for key in ("pv", "media", "credits", "energy", "data", "card", "probe"):
            amount = getattr(self, key)
            if amount:
                labels.append(format_resource(amount, key))
        for grant in self.signals:
            labels.append(f"{grant.amount} Signal ({grant.scope.value})")
        if self.scan:
            labels.append("Scan")
        if self.anycard:
            labels.append(f"{self.anycard} Carte au choix")
        if self.reservation:
            labels.append(f"{self.reservation} Réservation")
        for grant in self.technologies:
            labels.append(f"{grant.amount} Technologie ({grant.scope.value})")
        if self.movements:
            labels.append(f"{self.movements} Déplacement(s)")
        if self.landing:
            labels.append(f"{self.landing} Atterrissage")
        for grant in self.lifetraces:
            labels.append(f"{grant.amount} Trace de vie ({grant.scope.value})")
        if self.rotation:
            labels.append(f"{self.rotation} Rotation")
        if self.token:
            labels.append(f"{self.token} Token")
        if self.species_card:
            labels.append(f"{self.species_card} Carte alien")
        return labels

    def to_dict(self) -> dict:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if not value:
                continue
            if isinstance(value, list):
                value = [{"amount": g.amount, "scope": g.scope.value} for g in value]
            elif isinstance(value, Enum):
                value = value.value
            result[f.name] = value
        return result


_RESOURCE_LABELS = {
    "pv": ("PV", "PV"),
    "media": ("Média", "Médias"),
    "data": ("Donnée", "Données"),
    "credits": ("Crédit", "Crédits"),
    "energy": ("Énergie", "Énergies"),
    "card": ("Carte", "Cartes"),
    "probe": ("Sonde", "Sondes"),
    "token": ("Token", "Tokens"),
}


def format_resource(amount: int, key: str) -> str:
    """Format '<n> <label>' with the plural label when n > 1."""
    singular, plural = _RESOURCE_LABELS.get(key, (key, key))
    return f"{amount} {plural if abs(amount) > 1 else singular}"


def format_bonus(bonus: Bonus | None) -> str:
    if bonus is None or bonus.is_empty():
        return ""
    return ", ".join(bonus.summary())


_GAIN_FIELDS = {
    EffectTarget.MEDIA.value: "media",
    EffectTarget.CREDIT.value: "credits",
    EffectTarget.ENERGY.value: "energy",
    EffectTarget.DATA.value: "data",
    EffectTarget.PROBE.value: "probe",
    EffectTarget.CARD.value: "card",
}

_ACTION_FIELDS = {
    EffectTarget.ANYCARD.value: "anycard",
    EffectTarget.MOVEMENT.value: "movements",
    EffectTarget.ROTATION.value: "rotation",
    EffectTarget.LAND.value: "landing",
    EffectTarget.SCAN.value: "scan",
}

_FLAG_FIELDS = {
    EffectType.REVEAL_AND_TRIGGER_FREE_ACTION: "reveal_and_trigger_free_action",
    EffectType.ATMOSPHERIC_ENTRY: "atmospheric_entry",
    EffectType.IGNORE_PROBE_LIMIT: "ignore_probe_limit",
    EffectType.CHOICE_MEDIA_OR_MOVE: "choice_media_or_move",
    EffectType.KEEP_CARD_IF_ONLY: "keep_card_if_only",
    EffectType.NO_DATA: "no_data",
    EffectType.ANY_PROBE: "any_probe",
    EffectType.GAIN_SIGNAL_ADJACENTS: "gain_signal_adjacents",
    EffectType.IGNORE_SATELLITE_LIMIT: "ignore_satellite_limit",
}


def _effect_to_bonus(effect: CardEffect) -> Bonus | None:
    if effect.type == EffectType.GAIN and effect.target in _GAIN_FIELDS:
        return Bonus(**{_GAIN_FIELDS[effect.target]: int(effect.value)})
    if effect.type == EffectType.ACTION:
        if effect.target in _ACTION_FIELDS:
            return Bonus(**{_ACTION_FIELDS[effect.target]: int(effect.value)})
        value = effect.value or {}
        amount = value.get("amount", 1)
        if effect.target == EffectTarget.SIGNAL.value:
            return Bonus(signals=[SignalGrant(amount, value.get("scope", SectorType.ANY))])
        if effect.target == EffectTarget.TECH.value:
            return Bonus(technologies=[TechGrant(amount, value.get("scope", TechnologyCategory.ANY))])
        if effect.target == EffectTarget.LIFETRACE.value:
            return Bonus(lifetraces=[LifeTraceGrant(amount, value.get("scope", LifeTraceType.ANY))])
        return None
    if effect.type in _FLAG_FIELDS:
        return Bonus(**{_FLAG_FIELDS[effect.type]: True})
    if effect.type == EffectType.SCORE_PER_MEDIA:
        return Bonus(score_per_media=int(effect.value or 1))
    if effect.type == EffectType.GAIN_SIGNAL_FROM_HAND:
        return Bonus(gain_signal_from_hand=int(effect.value or 1))
    if effect.type == EffectType.SHARED_TECH_ONLY_NO_BONUS:
        return Bonus(shared_only=True, no_tile_bonus=True)
    return None


def bonus_for_target(target: str, amount: int) -> Bonus:
    """
    Build a Bonus from a trigger reward target ("media", "pv", "card", ...).

    Unknown targets produce an empty Bonus.
    """
    key = target.lower()
    mapping = {
        "media": "media", "pv": "pv", "credit": "credits", "credits": "credits",
        "energy": "energy", "data": "data", "card": "card", "probe": "probe",
        "move": "movements", "movement": "movements", "token": "token",
        "anycard": "anycard", "reservation": "reservation", "landing": "landing",
    }
    if key in mapping:
        return Bonus(**{mapping[key]: amount})
    if key == "signal":
        return Bonus(signals=[SignalGrant(amount)])
    if key == "lifetrace":
        return Bonus(lifetraces=[LifeTraceGrant(amount)])
    return Bonus()
