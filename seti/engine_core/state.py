"""
Game State - The authoritative data model of a match.

Design principles:
- Immutable by convention: systems clone the Game and return the new value
- Serializable: every entity can be rendered to plain dicts for the API
- Addressable: entities are looked up by stable ids (player, probe, card, sector)
- Card and Technology are immutable templates shared between snapshots
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass, field

from .bonus import Bonus
from .enums import (
    GamePhase, ProbeState, SignalType, SectorType, TechnologyCategory,
    LifeTraceType, CardType, CostType, FreeActionType, RevenueType,
    AlienBoardType, ObjectiveCategory, PlayerType,
)
from ..effects.catalog import CardEffect

NEUTRAL_PLAYER_ID = "neutral"


@dataclass(frozen=True)
class Card:
    """
    A card template.

    Cards are never mutated; moving a card between zones moves the reference.
    """
    id: str
    name: str
    description: str = ""
    type: CardType = CardType.ACTION
    cost: int = 0
    cost_type: CostType = CostType.CREDIT
    free_action: FreeActionType = FreeActionType.UNDEFINED
    scan_sector: SectorType = SectorType.UNDEFINED
    revenue: RevenueType = RevenueType.UNDEFINED
    immediate_effects: tuple[CardEffect, ...] = ()
    passive_effects: tuple[CardEffect, ...] = ()
    permanent_effects: tuple[CardEffect, ...] = ()

    def __deepcopy__(self, memo):
        return self


@dataclass(frozen=True)
class Technology:
    """A technology tile. Immutable; the stack bonus is baked in at setup."""
    id: str
    name: str
    category: TechnologyCategory
    description: str = ""
    bonus: Bonus = field(default_factory=Bonus)

    @property
    def level(self) -> int:
        return int(self.id.split("-")[1])

    def __deepcopy__(self, memo):
        return self


@dataclass
class Probe:
    """A probe on the solar system, in orbit or landed."""
    id: str
    owner_id: str
    state: ProbeState = ProbeState.IN_SOLAR_SYSTEM
    disk: str | None = None
    sector: int | None = None
    planet_id: str | None = None


@dataclass
class Signal:
    id: str
    type: SignalType = SignalType.DATA
    marked: bool = False
    marked_by: str | None = None
    bonus: Bonus | None = None


@dataclass
class Sector:
    """A star sector around the solar system where signals are scanned."""
    id: str
    name: str
    color: SectorType
    index: int
    signals: list[Signal] = field(default_factory=list)
    player_markers: list[str] = field(default_factory=list)
    is_covered: bool = False
    covered_by: list[str] = field(default_factory=list)
    first_bonus: Bonus = field(default_factory=Bonus)
    next_bonus: Bonus = field(default_factory=Bonus)

    def marked_by(self, player_id: str) -> int:
        return sum(1 for s in self.signals if s.marked and s.marked_by == player_id)


@dataclass
class Satellite:
    id: str
    name: str
    planet_id: str
    landers: list[str] = field(default_factory=list)
    land_bonus: Bonus = field(default_factory=Bonus)


@dataclass
class Planet:
    id: str
    name: str
    orbiters: list[str] = field(default_factory=list)
    landers: list[str] = field(default_factory=list)
    orbit_first_bonus: Bonus = field(default_factory=Bonus)
    orbit_next_bonus: Bonus = field(default_factory=Bonus)
    land_first_bonus: Bonus = field(default_factory=Bonus)
    land_second_bonus: Bonus = field(default_factory=Bonus)
    land_next_bonus: Bonus = field(default_factory=Bonus)
    satellites: list[Satellite] = field(default_factory=list)


@dataclass
class TechnologyBoard:
    """
    One stack of tiles per technology id; the first tile is the visible top.

    Several players may own the same technology, one tile each.
    """
    stacks: dict[str, list[Technology]] = field(default_factory=dict)

    def available(self, category: TechnologyCategory | None = None) -> list[Technology]:
        return [
            stack[0] for stack in self.stacks.values()
            if stack and (category is None or category.covers(stack[0].category))
        ]

    def find(self, tech_id: str) -> Technology | None:
        stack = self.stacks.get(tech_id)
        return stack[0] if stack else None

    def take(self, tech_id: str) -> Technology:
        """Remove and return the top tile of a stack."""
        stack = self.stacks.get(tech_id)
        if not stack:
            raise ValueError(f"Technologie indisponible: {tech_id}")
        return stack.pop(0)


@dataclass
class ComputerSlot:
    id: str
    type: str  # "top" | "bottom"
    col: int
    bonus: str | None = None
    filled: bool = False
    parent_id: str | None = None
    technology_id: str | None = None


@dataclass
class DataComputer:
    slots: dict[str, ComputerSlot] = field(default_factory=dict)
    can_analyze: bool = False


@dataclass
class LifeTrace:
    id: str
    type: LifeTraceType
    player_id: str
    location: str = "triangle"  # "triangle" | "species"
    slot_index: int | None = None


@dataclass
class AlienBoard:
    species_id: AlienBoardType
    life_traces: list[LifeTrace] = field(default_factory=list)
    first_bonus: Bonus = field(default_factory=Bonus)
    next_bonus: Bonus = field(default_factory=Bonus)
    is_first_board: bool = False
    is_discovered: bool = False


@dataclass
class Species:
    id: str
    name: AlienBoardType
    description: str = ""
    fixed_slots: dict[LifeTraceType, list[Bonus]] = field(default_factory=dict)
    infinite_slots: dict[LifeTraceType, Bonus] = field(default_factory=dict)
    cards: list[Card] = field(default_factory=list)
    card_row: list[Card] = field(default_factory=list)
    discovered: bool = False
    scoring_modifiers: dict[str, int] = field(default_factory=dict)
    message_rewards: list[Bonus] = field(default_factory=list)


@dataclass
class ObjectiveTile:
    id: str
    category: ObjectiveCategory
    side: str
    name: str
    description: str = ""
    rewards: tuple[int, int, int] = (0, 0, 0)  # first, second, others
    markers: list[str] = field(default_factory=list)


@dataclass
class Mission:
    """A card in play whose requirements are tracked until completed."""
    id: str
    card_id: str
    name: str
    owner_id: str
    requirements: list[CardEffect] = field(default_factory=list)
    completed_requirement_ids: list[str] = field(default_factory=list)
    fulfillable_requirement_ids: list[str] = field(default_factory=list)
    completed: bool = False

    def requirement_id(self, index: int) -> str:
        return f"{self.id}:{index}"

    def requirement(self, requirement_id: str) -> CardEffect | None:
        for index, effect in enumerate(self.requirements):
            if self.requirement_id(index) == requirement_id:
                return effect
        return None


@dataclass
class SolarSystem:
    """Rotation state of the three rotating levels plus the next level to turn."""
    rotation: list[int] = field(default_factory=lambda: [0, 1, 0])
    next_ring_level: int = 1
    extra_objects: list[str] = field(default_factory=list)


@dataclass
class Board:
    solar_system: SolarSystem = field(default_factory=SolarSystem)
    sectors: list[Sector] = field(default_factory=list)
    planets: list[Planet] = field(default_factory=list)
    technology_board: TechnologyBoard = field(default_factory=TechnologyBoard)
    alien_boards: list[AlienBoard] = field(default_factory=list)
    objective_tiles: list[ObjectiveTile] = field(default_factory=list)

    def get_sector(self, sector_id: str) -> Sector | None:
        return next((s for s in self.sectors if s.id == sector_id), None)

    def sector_at(self, index: int) -> Sector:
        return next(s for s in self.sectors if s.index == index)

    def get_planet(self, planet_id: str) -> Planet | None:
        return next((p for p in self.planets if p.id == planet_id), None)

    def find_satellite(self, satellite_id: str) -> Satellite | None:
        for planet in self.planets:
            for satellite in planet.satellites:
                if satellite.id == satellite_id:
                    return satellite
        return None


@dataclass
class Decks:
    cards: list[Card] = field(default_factory=list)
    card_row: list[Card] = field(default_factory=list)
    discard_pile: list[Card] = field(default_factory=list)
    round_decks: dict[int, list[Card]] = field(default_factory=dict)


@dataclass(frozen=True)
class HistoryEntry:
    """A presentation-level log line; never parsed back by the engine."""
    message: str
    player_id: str
    sequence_id: str = ""

    def to_dict(self) -> dict:
        return {"message": self.message, "playerId": self.player_id, "sequenceId": self.sequence_id}


@dataclass
class Player:
    """A seat at the table."""
    id: str
    name: str
    credits: int = 0
    energy: int = 0
    data: int = 0
    tokens: int = 0
    media: int = 0
    revenue_credits: int = 0
    revenue_energy: int = 0
    revenue_cards: int = 0
    probes: list[Probe] = field(default_factory=list)
    technologies: list[Technology] = field(default_factory=list)
    hand: list[Card] = field(default_factory=list)
    played_cards: list[Card] = field(default_factory=list)
    reserved_cards: list[Card] = field(default_factory=list)
    missions: list[Mission] = field(default_factory=list)
    computer: DataComputer = field(default_factory=DataComputer)
    life_traces: list[LifeTrace] = field(default_factory=list)
    score: int = 0
    has_passed: bool = False
    has_performed_main_action: bool = False
    type: PlayerType = PlayerType.HUMAN
    color: str = ""
    claimed_golden_milestones: list[int] = field(default_factory=list)
    claimed_neutral_milestones: list[int] = field(default_factory=list)
    visited_this_turn: list[str] = field(default_factory=list)
    moved_this_turn: list[str] = field(default_factory=list)
    active_buffs: list[CardEffect] = field(default_factory=list)
    permanent_buffs: list[CardEffect] = field(default_factory=list)

    def has_technology(self, prefix: str) -> bool:
        return any(t.id.startswith(prefix) for t in self.technologies)

    def get_probe(self, probe_id: str) -> Probe | None:
        return next((p for p in self.probes if p.id == probe_id), None)

    def probes_in_system(self) -> list[Probe]:
        return [p for p in self.probes if p.state == ProbeState.IN_SOLAR_SYSTEM]

    def get_card(self, card_id: str) -> Card | None:
        return next((c for c in self.hand if c.id == card_id), None)

    def get_mission(self, mission_id: str) -> Mission | None:
        return next((m for m in self.missions if m.id == mission_id), None)


@dataclass
class Game:
    """
    Root aggregate of a match.

    Systems never mutate a Game they did not clone themselves.
    """
    id: str
    players: list[Player] = field(default_factory=list)
    board: Board = field(default_factory=Board)
    decks: Decks = field(default_factory=Decks)
    species: list[Species] = field(default_factory=list)
    current_round: int = 1
    max_rounds: int = 5
    current_player_index: int = 0
    first_player_index: int = 0
    phase: GamePhase = GamePhase.SETUP
    history: list[HistoryEntry] = field(default_factory=list)
    is_first_to_pass: bool = False
    is_round_end: bool = False
    neutral_milestones_available: dict[int, int] = field(default_factory=dict)
    seed: int = 0
    counters: dict[str, int] = field(default_factory=dict)
    final_scores: dict[str, dict[str, int]] = field(default_factory=dict)

    def clone(self) -> Game:
        """Deep copy; cards and static content are shared."""
        return deepcopy(self)

    def get_player(self, player_id: str) -> Player | None:
        return next((p for p in self.players if p.id == player_id), None)

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    def next_id(self, kind: str) -> str:
        """Allocate a deterministic id; mutates the counters of this instance."""
        value = self.counters.get(kind, 0) + 1
        self.counters[kind] = value
        return f"{kind}_{value}"

    def all_probes_in_system(self) -> list[Probe]:
        return [p for player in self.players for p in player.probes_in_system()]

    def species_for_board(self, board: AlienBoard) -> Species | None:
        return next((s for s in self.species if s.name == board.species_id), None)

    def log(self, message: str, player_id: str, sequence_id: str = "") -> None:
        self.history.append(HistoryEntry(message, player_id, sequence_id))
