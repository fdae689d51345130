"""
Interaction State Machine - What the current player must resolve next.

An action or bonus can spawn choices ("pick a technology", "select a sector
to mark") which can spawn further choices. Each distinct choice is one
InteractionState variant carrying exactly the fields it needs plus an
optional sequence id correlating it with the action that caused it.

The set of variants is closed: every InteractionType has exactly one
registered dataclass, checked when this module is imported.

InteractionQueue keeps the current state at the front. IDLE is never stored;
an empty queue reads as IDLE.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, ClassVar

from .enums import SectorType, TechnologyCategory, LifeTraceType


class InteractionType(str, Enum):
    IDLE = "IDLE"
    RESERVING_CARD = "RESERVING_CARD"
    DISCARDING_CARD = "DISCARDING_CARD"
    TRADING_CARD = "TRADING_CARD"
    ACQUIRING_CARD = "ACQUIRING_CARD"
    MOVING_PROBE = "MOVING_PROBE"
    LANDING_PROBE = "LANDING_PROBE"
    ACQUIRING_TECH = "ACQUIRING_TECH"
    SELECTING_COMPUTER_SLOT = "SELECTING_COMPUTER_SLOT"
    ANALYZING = "ANALYZING"
    PLACING_LIFE_TRACE = "PLACING_LIFE_TRACE"
    PLACING_OBJECTIVE_MARKER = "PLACING_OBJECTIVE_MARKER"
    SELECTING_SCAN_CARD = "SELECTING_SCAN_CARD"
    SELECTING_SCAN_SECTOR = "SELECTING_SCAN_SECTOR"
    CHOOSING_MEDIA_OR_MOVE = "CHOOSING_MEDIA_OR_MOVE"
    CHOOSING_OBS2_ACTION = "CHOOSING_OBS2_ACTION"
    CHOOSING_OBS3_ACTION = "CHOOSING_OBS3_ACTION"
    CHOOSING_OBS4_ACTION = "CHOOSING_OBS4_ACTION"
    DISCARDING_FOR_SIGNAL = "DISCARDING_FOR_SIGNAL"
    REMOVING_ORBITER = "REMOVING_ORBITER"
    REMOVING_LANDER = "REMOVING_LANDER"
    CHOOSING_BONUS_ACTION = "CHOOSING_BONUS_ACTION"
    RESOLVING_SECTOR = "RESOLVING_SECTOR"
    TRIGGER_CARD_EFFECT = "TRIGGER_CARD_EFFECT"
    DRAW_AND_SCAN = "DRAW_AND_SCAN"
    CLAIMING_MISSION_REQUIREMENT = "CLAIMING_MISSION_REQUIREMENT"
    ACQUIRING_ALIEN_CARD = "ACQUIRING_ALIEN_CARD"
    CHOOSING_CENTAURIEN_REWARD = "CHOOSING_CENTAURIEN_REWARD"


INTERACTION_VARIANTS: dict[InteractionType, type[InteractionState]] = {}

# Variants the player may abandon with an explicit decline
DECLINABLE = frozenset({
    InteractionType.CHOOSING_MEDIA_OR_MOVE,
    InteractionType.CHOOSING_OBS2_ACTION,
    InteractionType.CHOOSING_OBS3_ACTION,
    InteractionType.CHOOSING_OBS4_ACTION,
    InteractionType.MOVING_PROBE,
    InteractionType.LANDING_PROBE,
    InteractionType.ACQUIRING_TECH,
    InteractionType.ACQUIRING_CARD,
})


def _variant(kind: InteractionType):
    def register(cls):
        cls.type = kind
        INTERACTION_VARIANTS[kind] = cls
        return cls
    return register


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, InteractionState):
        return value.to_dict()
    if isinstance(value, BonusChoice):
        return {"id": value.id, "label": value.label, "state": value.state.to_dict(), "done": value.done}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


@dataclass(frozen=True)
class InteractionState:
    """Base of all variants."""
    type: ClassVar[InteractionType]
    sequence_id: str | None = None

    def with_sequence(self, sequence_id: str | None) -> InteractionState:
        if self.sequence_id or not sequence_id:
            return self
        return replace(self, sequence_id=sequence_id)

    def to_dict(self) -> dict:
        data = {"type": self.type.value}
        for f in fields(self):
            data[f.name] = _plain(getattr(self, f.name))
        return data


@_variant(InteractionType.IDLE)
@dataclass(frozen=True)
class Idle(InteractionState):
    pass


@_variant(InteractionType.RESERVING_CARD)
@dataclass(frozen=True)
class ReservingCard(InteractionState):
    count: int = 1
    selected_cards: tuple[str, ...] = ()


@_variant(InteractionType.DISCARDING_CARD)
@dataclass(frozen=True)
class DiscardingCard(InteractionState):
    count: int = 1
    selected_cards: tuple[str, ...] = ()


@_variant(InteractionType.TRADING_CARD)
@dataclass(frozen=True)
class TradingCard(InteractionState):
    count: int = 2
    target_gain: str = "credit"
    selected_cards: tuple[str, ...] = ()


@_variant(InteractionType.ACQUIRING_CARD)
@dataclass(frozen=True)
class AcquiringCard(InteractionState):
    count: int = 1
    is_free: bool = False
    trigger_free_action: bool = False


@_variant(InteractionType.MOVING_PROBE)
@dataclass(frozen=True)
class MovingProbe(InteractionState):
    count: int = 1
    auto_select_probe_id: str | None = None


@_variant(InteractionType.LANDING_PROBE)
@dataclass(frozen=True)
class LandingProbe(InteractionState):
    count: int = 1
    source: str | None = None
    ignore_satellite_limit: bool = False


@_variant(InteractionType.ACQUIRING_TECH)
@dataclass(frozen=True)
class AcquiringTech(InteractionState):
    is_bonus: bool = False
    category: TechnologyCategory | None = None
    shared_only: bool = False
    no_tile_bonus: bool = False


@_variant(InteractionType.SELECTING_COMPUTER_SLOT)
@dataclass(frozen=True)
class SelectingComputerSlot(InteractionState):
    tech_id: str = ""


@_variant(InteractionType.ANALYZING)
@dataclass(frozen=True)
class Analyzing(InteractionState):
    pass


@_variant(InteractionType.PLACING_LIFE_TRACE)
@dataclass(frozen=True)
class PlacingLifeTrace(InteractionState):
    color: LifeTraceType = LifeTraceType.ANY
    player_id: str | None = None


@_variant(InteractionType.PLACING_OBJECTIVE_MARKER)
@dataclass(frozen=True)
class PlacingObjectiveMarker(InteractionState):
    milestone: int = 0
    player_id: str | None = None


@_variant(InteractionType.SELECTING_SCAN_CARD)
@dataclass(frozen=True)
class SelectingScanCard(InteractionState):
    pass


@_variant(InteractionType.SELECTING_SCAN_SECTOR)
@dataclass(frozen=True)
class SelectingScanSector(InteractionState):
    color: SectorType = SectorType.ANY
    no_data: bool = False
    only_probes: bool = False
    any_probe: bool = False
    adjacents: bool = False
    keep_card_if_only: bool = False
    card_id: str | None = None
    message: str | None = None
    mark_adjacents: bool = False
    used_probe_ids: tuple[str, ...] = ()


@_variant(InteractionType.CHOOSING_MEDIA_OR_MOVE)
@dataclass(frozen=True)
class ChoosingMediaOrMove(InteractionState):
    remaining_moves: int = 0


@_variant(InteractionType.CHOOSING_OBS2_ACTION)
@dataclass(frozen=True)
class ChoosingObs2(InteractionState):
    pass


@_variant(InteractionType.CHOOSING_OBS3_ACTION)
@dataclass(frozen=True)
class ChoosingObs3(InteractionState):
    pass


@_variant(InteractionType.CHOOSING_OBS4_ACTION)
@dataclass(frozen=True)
class ChoosingObs4(InteractionState):
    pass


@_variant(InteractionType.DISCARDING_FOR_SIGNAL)
@dataclass(frozen=True)
class DiscardingForSignal(InteractionState):
    count: int = 1
    selected_cards: tuple[str, ...] = ()


@_variant(InteractionType.REMOVING_ORBITER)
@dataclass(frozen=True)
class RemovingOrbiter(InteractionState):
    pass


@_variant(InteractionType.REMOVING_LANDER)
@dataclass(frozen=True)
class RemovingLander(InteractionState):
    pass


@dataclass(frozen=True)
class BonusChoice:
    """One independently resolvable component of a compound bonus."""
    id: str
    label: str
    state: InteractionState
    done: bool = False


@_variant(InteractionType.CHOOSING_BONUS_ACTION)
@dataclass(frozen=True)
class ChoosingBonusAction(InteractionState):
    bonuses_summary: str = ""
    choices: tuple[BonusChoice, ...] = ()

    @property
    def all_done(self) -> bool:
        return all(c.done for c in self.choices)


@_variant(InteractionType.RESOLVING_SECTOR)
@dataclass(frozen=True)
class ResolvingSector(InteractionState):
    sector_id: str = ""


@_variant(InteractionType.TRIGGER_CARD_EFFECT)
@dataclass(frozen=True)
class TriggerCardEffect(InteractionState):
    effect_type: str = ""
    value: int = 0


@_variant(InteractionType.DRAW_AND_SCAN)
@dataclass(frozen=True)
class DrawAndScan(InteractionState):
    count: int = 1


@_variant(InteractionType.CLAIMING_MISSION_REQUIREMENT)
@dataclass(frozen=True)
class ClaimingMissionRequirement(InteractionState):
    mission_id: str = ""
    requirement_id: str = ""


@_variant(InteractionType.ACQUIRING_ALIEN_CARD)
@dataclass(frozen=True)
class AcquiringAlienCard(InteractionState):
    count: int = 1
    species_id: str | None = None


@_variant(InteractionType.CHOOSING_CENTAURIEN_REWARD)
@dataclass(frozen=True)
class ChoosingCentaurienReward(InteractionState):
    pass


_unregistered = set(InteractionType) - set(INTERACTION_VARIANTS)
if _unregistered:
    raise RuntimeError(f"Interaction types without a variant: {sorted(t.value for t in _unregistered)}")


IDLE = Idle()


# ============================================================================
# Queue
# ============================================================================

@dataclass
class InteractionQueue:
    """
    Pending interactions, current first.

    push() puts a state in front; enqueue() appends behind everything.
    """
    items: list[InteractionState] = field(default_factory=list)

    @property
    def current(self) -> InteractionState:
        return self.items[0] if self.items else IDLE

    def is_idle(self) -> bool:
        return not self.items

    def push(self, state: InteractionState) -> None:
        if state.type != InteractionType.IDLE:
            self.items.insert(0, state)

    def push_all(self, states: list[InteractionState]) -> None:
        """Push a batch so that its first state becomes current, order kept."""
        batch = [s for s in states if s.type != InteractionType.IDLE]
        self.items[0:0] = batch

    def enqueue(self, state: InteractionState) -> None:
        if state.type != InteractionType.IDLE:
            self.items.append(state)

    def pop(self) -> InteractionState:
        if not self.items:
            raise ValueError("No pending interaction to pop")
        return self.items.pop(0)

    def replace_current(self, state: InteractionState) -> None:
        if not self.items:
            raise ValueError("No pending interaction to replace")
        self.items[0] = state

    def pending(self) -> list[InteractionState]:
        return list(self.items)

    def snapshot(self) -> list[InteractionState]:
        # States are frozen; a shallow copy is a full snapshot
        return list(self.items)

    def restore(self, items: list[InteractionState]) -> None:
        self.items = list(items)

    def __len__(self) -> int:
        return len(self.items)
