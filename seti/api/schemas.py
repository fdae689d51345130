"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a client (table app, web UI)
and the engine. All responses include explicit types for OpenAPI schema
generation.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has expired
- VALIDATION_ERROR: Request body is malformed (bad player count, etc.)
- INVALID_ACTION: Unknown action type or parameters
- ACTION_REJECTED: The rules forbid the action now; details carry the rule code
- INVALID_CHOICE: The pending interaction cannot accept the choice
- NOTHING_TO_UNDO: The undo ledger is empty
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field


# =============================================================================
# Enums
# =============================================================================

class SessionStatus(str, Enum):
    """Session status values."""
    CREATED = "created"
    ACTIVE = "active"
    GAME_OVER = "game_over"
    ABANDONED = "abandoned"


class LoopStatus(str, Enum):
    """What the client must send next."""
    WAITING_FOR_ACTION = "waiting_for_action"
    WAITING_FOR_CHOICE = "waiting_for_choice"
    GAME_OVER = "game_over"


class ErrorCode(str, Enum):
    """Machine-readable error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ACTION = "INVALID_ACTION"
    ACTION_REJECTED = "ACTION_REJECTED"
    INVALID_CHOICE = "INVALID_CHOICE"
    NOTHING_TO_UNDO = "NOTHING_TO_UNDO"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Nested Models
# =============================================================================

class CardInfo(BaseModel):
    """A card as shown to the client."""
    id: str
    name: str
    type: str
    cost: int = 0
    cost_type: str = "CREDIT"
    description: str = ""

    model_config = {"from_attributes": True}


class ProbeInfo(BaseModel):
    """A probe and where it is."""
    id: str
    state: str
    sector: Optional[int] = None
    planet_id: Optional[str] = None


class MissionInfo(BaseModel):
    id: str
    name: str
    completed: bool = False
    completed_requirements: list[str] = Field(default_factory=list)


class PlayerInfo(BaseModel):
    """Information about a player."""
    player_id: str
    name: str
    color: str = ""
    score: int = 0
    credits: int = 0
    energy: int = 0
    data: int = 0
    media: int = 0
    tokens: int = 0
    revenue: dict[str, int] = Field(default_factory=dict)
    hand: list[CardInfo] = Field(default_factory=list)
    hand_count: int = 0
    reserved_cards: list[CardInfo] = Field(default_factory=list)
    probes: list[ProbeInfo] = Field(default_factory=list)
    technologies: list[str] = Field(default_factory=list)
    missions: list[MissionInfo] = Field(default_factory=list)
    has_passed: bool = False
    has_performed_main_action: bool = False
    is_current_turn: bool = False


class SectorInfo(BaseModel):
    """A sector of the board and its signal track."""
    id: str
    name: str
    color: str
    signals_total: int
    signals_marked: int
    player_markers: list[str] = Field(default_factory=list)
    is_covered: bool = False


class PlanetInfo(BaseModel):
    id: str
    name: str
    orbiters: list[str] = Field(default_factory=list)
    landers: list[str] = Field(default_factory=list)


class TechnologyInfo(BaseModel):
    """Top tile of a technology stack."""
    id: str
    name: str
    category: str
    remaining: int


class HistoryEntryInfo(BaseModel):
    """One line of game history."""
    message: str
    player_id: str
    sequence_id: str = ""


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to create a new game session."""
    player_names: list[str] = Field(
        ..., min_length=2, max_length=4, description="Player names in seat order"
    )
    seed: Optional[int] = Field(None, description="Seed for reproducible games")


class ActionRequest(BaseModel):
    """Request to perform a main or free action."""
    type: str = Field(..., description="Action type, e.g. LAUNCH_PROBE")
    player_id: str = Field(..., description="Acting player")
    params: dict[str, Any] = Field(
        default_factory=dict, description="Action parameters; camelCase or snake_case"
    )


class ChoiceRequest(BaseModel):
    """Answer to the pending interaction."""
    player_id: Optional[str] = None
    card_ids: list[str] = Field(default_factory=list)
    target_id: Optional[str] = None
    option: Optional[str] = None
    decline: bool = False
    params: dict[str, Any] = Field(default_factory=dict)


class EndTurnRequest(BaseModel):
    player_id: Optional[str] = Field(None, description="Defaults to the current player")


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class SessionResponse(BaseModel):
    """Response containing session information."""
    session_id: str
    status: SessionStatus
    game_id: str
    players: list[PlayerInfo] = Field(default_factory=list)
    current_player_id: Optional[str] = None
    round: int = 1
    phase: str = "PLAYING"
    created_at: float = 0.0
    api_version: str = "v1"


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    session_id: str
    status: SessionStatus
    loop_state: LoopStatus
    game_id: str
    phase: str
    round: int
    max_rounds: int
    current_player_id: str
    first_player_id: str
    players: list[PlayerInfo] = Field(default_factory=list)
    card_row: list[CardInfo] = Field(default_factory=list)
    deck_size: int = 0
    sectors: list[SectorInfo] = Field(default_factory=list)
    planets: list[PlanetInfo] = Field(default_factory=list)
    technologies: list[TechnologyInfo] = Field(default_factory=list)
    solar_system_rotation: list[int] = Field(default_factory=list)
    pending_interaction: Optional[dict[str, Any]] = None
    history: list[HistoryEntryInfo] = Field(default_factory=list)
    winners: list[str] = Field(default_factory=list)
    final_scores: dict[str, dict[str, int]] = Field(default_factory=dict)
    api_version: str = "v1"


class TurnResponse(BaseModel):
    """Result of an action, choice, end of turn or undo."""
    session_id: str
    success: bool
    loop_state: LoopStatus
    history: list[HistoryEntryInfo] = Field(default_factory=list)
    pending_interaction: Optional[dict[str, Any]] = None
    current_player_id: Optional[str] = None
    winners: list[str] = Field(default_factory=list)
    api_version: str = "v1"


class LegalActionsResponse(BaseModel):
    """Actions the current player may perform now."""
    session_id: str
    current_player_id: str
    actions: list[dict[str, Any]] = Field(default_factory=list)
    count: int = 0


class SessionListResponse(BaseModel):
    """Response listing active sessions."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Response after ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str
    environment: str
