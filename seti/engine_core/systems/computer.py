"""
Computer - The player's data computer.

The top row (1a to 6a) fills left to right, one data per slot. Bottom slots
(under columns 1, 3, 5 and 6) open when a computing technology is installed
on their column and their top slot is filled. Filling 6a enables analysis.
"""

from __future__ import annotations
import logging

from ..bonus import Bonus
from ..constants import ANALYZE_COST_ENERGY
from ..enums import LifeTraceType
from ..interaction import PlacingLifeTrace
from ..results import StepResult
from ..state import ComputerSlot, DataComputer, Game, Player, Technology

logger = logging.getLogger(__name__)

TOP_BONUSES = {1: None, 2: "media", 3: None, 4: "reservation", 5: None, 6: None}
BOTTOM_COLUMNS = (1, 3, 5, 6)

# Bottom slot reward per computing technology
TECH_SLOT_BONUSES = {
    "computing-1": "credit",
    "computing-2": "card",
    "computing-3": "energy",
    "computing-4": "media",
}

_SLOT_REWARDS = {
    "media": Bonus(media=1),
    "reservation": Bonus(reservation=1),
    "2pv": Bonus(pv=2),
    "credit": Bonus(credits=1),
    "energy": Bonus(energy=1),
    "card": Bonus(card=1),
}


def create_computer() -> DataComputer:
    slots = {}
    for col, bonus in TOP_BONUSES.items():
        slots[f"{col}a"] = ComputerSlot(id=f"{col}a", type="top", col=col, bonus=bonus)
    for col in BOTTOM_COLUMNS:
        slots[f"{col}b"] = ComputerSlot(id=f"{col}b", type="bottom", col=col, parent_id=f"{col}a")
    return DataComputer(slots=slots)


def can_fill_slot(player: Player, slot_id: str) -> bool:
    slots = player.computer.slots
    slot = slots.get(slot_id)
    if slot is None or slot.filled or player.data < 1:
        return False
    if slot.type == "bottom":
        return bool(slot.bonus) and slots[slot.parent_id].filled
    if slot.col > 1:
        previous = slots.get(f"{slot.col - 1}a")
        if previous is not None and not previous.filled:
            return False
    return True


def fillable_slots(player: Player) -> list[str]:
    return [slot_id for slot_id in player.computer.slots if can_fill_slot(player, slot_id)]


def fill_slot(game: Game, player_id: str, slot_id: str, sequence_id: str = "") -> StepResult:
    """Transfer one data onto a slot; the slot reward is returned as the bonus."""
    game = game.clone()
    player = game.get_player(player_id)
    if not can_fill_slot(player, slot_id):
        raise ValueError(f"Emplacement indisponible: {slot_id}")

    slot = player.computer.slots[slot_id]
    player.data -= 1
    slot.filled = True
    result = StepResult(game)
    result.log(f"transfère une donnée sur l'emplacement {slot_id}", player_id, sequence_id)
    if slot.bonus in _SLOT_REWARDS:
        result.add_bonus(_SLOT_REWARDS[slot.bonus])
    if slot_id == "6a":
        player.computer.can_analyze = True
        result.log("peut désormais analyser ses données", player_id, sequence_id)
    return result


def available_columns(player: Player) -> list[int]:
    slots = player.computer.slots
    return [
        col for col in BOTTOM_COLUMNS
        if f"{col}b" in slots and slots[f"{col}b"].technology_id is None
    ]


def assign_technology(player: Player, tech: Technology, column: int) -> None:
    """Install a computing technology on a column. In place."""
    if column not in available_columns(player):
        raise ValueError(f"Colonne indisponible: {column}")
    slots = player.computer.slots
    slots[f"{column}a"].bonus = "2pv"
    bottom = slots[f"{column}b"]
    bottom.bonus = TECH_SLOT_BONUSES.get(tech.id)
    bottom.technology_id = tech.id


def clear_computer(player: Player) -> None:
    for slot in player.computer.slots.values():
        slot.filled = False
    player.computer.can_analyze = False


def can_analyze(player: Player) -> tuple[bool, str]:
    if player.energy < ANALYZE_COST_ENERGY:
        return False, f"Énergie insuffisante (nécessite {ANALYZE_COST_ENERGY})"
    if not player.computer.can_analyze:
        return False, "La ligne supérieure de l'ordinateur doit être remplie"
    return True, ""


def analyze_data(game: Game, player_id: str, sequence_id: str = "") -> StepResult:
    """Clear the computer and queue a blue life trace."""
    game = game.clone()
    player = game.get_player(player_id)
    clear_computer(player)
    result = StepResult(game)
    result.log("analyse ses données", player_id, sequence_id)
    result.interactions.append(PlacingLifeTrace(sequence_id=sequence_id or None, color=LifeTraceType.BLUE))
    logger.debug("Player %s analyzed data", player_id)
    return result
