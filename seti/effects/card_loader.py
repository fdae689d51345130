"""
Card Loader - Ingests ';'-separated card files into Card templates.

Column layout:

    id;name;type;text;freeAction;scanSector;revenue;cost;gain;constraint

A leading header row (starting with "id") is skipped, as are blank lines.
Malformed values degrade to UNDEFINED enum members or zero costs; only an
unreadable file raises CardLoadError.
"""

from __future__ import annotations
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from .catalog import CardEffect
from .parser import parse_immediate, parse_constraints
from ..engine_core.enums import CardType, CostType, FreeActionType, SectorType, RevenueType
from ..engine_core.state import Card

logger = logging.getLogger(__name__)

COLUMNS = (
    "id", "name", "type", "text", "freeAction", "scanSector",
    "revenue", "cost", "gain", "constraint",
)


class CardLoadError(Exception):
    """Raised when a card source cannot be read at all."""
    pass


@dataclass
class CardLoadReport:
    cards: list[Card] = field(default_factory=list)
    misses: dict[str, list[CardEffect]] = field(default_factory=dict)
    skipped_rows: list[int] = field(default_factory=list)


def map_card_type(value: str) -> CardType:
    v = value.lower()
    if "action" in v:
        return CardType.ACTION
    if "conditionnelle" in v:
        return CardType.CONDITIONAL_MISSION
    if "déclenchable" in v or "declenchable" in v:
        return CardType.TRIGGERED_MISSION
    if "fin" in v:
        return CardType.END_GAME
    if "exertien" in v:
        return CardType.EXERTIEN
    if "centaurien" in v:
        return CardType.CENTAURIEN
    return CardType.UNDEFINED


def map_free_action(value: str) -> FreeActionType:
    v = value.lower()
    # Combined actions first, they also contain the single keywords
    if re.search(r"1\s*pv \+ 1 d[ée]placement", v):
        return FreeActionType.PV_MOVEMENT
    if re.search(r"1\s*pv \+ 1 (donnée|data)", v):
        return FreeActionType.PV_DATA
    if "2 médias" in v or "2 medias" in v or "2 média" in v:
        return FreeActionType.TWO_MEDIA
    if "déplacement" in v or "deplacement" in v or "movement" in v:
        return FreeActionType.MOVEMENT
    if "donnée" in v or "data" in v:
        return FreeActionType.DATA
    if "média" in v or "media" in v:
        return FreeActionType.MEDIA
    return FreeActionType.UNDEFINED


def map_sector(value: str) -> SectorType:
    v = value.lower()
    if "bleu" in v or "blue" in v:
        return SectorType.BLUE
    if "rouge" in v or "red" in v:
        return SectorType.RED
    if "jaune" in v or "yellow" in v:
        return SectorType.YELLOW
    if "noir" in v or "black" in v:
        return SectorType.BLACK
    return SectorType.UNDEFINED


def map_revenue(value: str) -> RevenueType:
    v = value.lower()
    if "energie" in v or "énergie" in v or "energy" in v:
        return RevenueType.ENERGY
    if "pioche" in v or "card" in v:
        return RevenueType.CARD
    if "crédit" in v or "credit" in v:
        return RevenueType.CREDIT
    if "donnée" in v or "data" in v:
        return RevenueType.DATA
    if "média" in v or "media" in v:
        return RevenueType.MEDIA
    return RevenueType.UNDEFINED


def parse_cost(value: str) -> tuple[int, CostType]:
    v = value.strip().lower()
    digits = re.sub(r"[^0-9]", "", v)
    amount = int(digits) if digits else 0
    if "energie" in v or "énergie" in v or "energy" in v:
        return amount, CostType.ENERGY
    return amount, CostType.CREDIT


def parse_row(columns: list[str]) -> tuple[Card, list[CardEffect]]:
    """Build one card from split columns. Missing trailing columns are empty."""
    padded = [c.strip() for c in columns] + [""] * (len(COLUMNS) - len(columns))
    card_id, name, type_, text, free_action, scan, revenue, cost, gain, constraint = padded[:len(COLUMNS)]

    immediate = parse_immediate(gain)
    passive, permanent, constraint_misses = parse_constraints(constraint)
    amount, cost_type = parse_cost(cost)

    card = Card(
        id=card_id,
        name=name,
        description=text,
        type=map_card_type(type_),
        cost=amount,
        cost_type=cost_type,
        free_action=map_free_action(free_action),
        scan_sector=map_sector(scan),
        revenue=map_revenue(revenue),
        immediate_effects=tuple(immediate.effects),
        passive_effects=tuple(passive.effects),
        permanent_effects=tuple(permanent.effects),
    )
    return card, immediate.misses + constraint_misses


def parse_cards(content: str) -> CardLoadReport:
    """Parse card rows from text content."""
    report = CardLoadReport()
    lines = content.splitlines()
    start = 1 if lines and lines[0].strip().lower().startswith("id") else 0

    for line_no, raw in enumerate(lines[start:], start=start + 1):
        line = raw.strip()
        if not line:
            continue
        columns = line.split(";")
        if not columns[0].strip():
            logger.warning("Skipping card row %d without id", line_no)
            report.skipped_rows.append(line_no)
            continue
        card, misses = parse_row(columns)
        report.cards.append(card)
        if misses:
            report.misses[card.id] = misses

    logger.debug("Parsed %d cards (%d with misses)", len(report.cards), len(report.misses))
    return report


def load_cards(path: str | Path) -> CardLoadReport:
    """Load a card file from disk."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise CardLoadError(f"Cannot read card file {path}: {exc}") from exc
    return parse_cards(content)
