"""
API Module - Client interface.

Exposes the engine via REST API. A client:
1. Creates a game session
2. Reads the game state and the legal actions
3. Performs actions and answers pending interactions
4. Ends turns, undoes mistakes, and ends the session

All state is session-scoped. No persistent user accounts required.
"""

from .schemas import (
    # Requests
    ActionRequest,
    ChoiceRequest,
    CreateSessionRequest,
    EndTurnRequest,
    # Responses
    ErrorResponse,
    GameStateResponse,
    LegalActionsResponse,
    SessionResponse,
    TurnResponse,
    # Enums
    ErrorCode,
    LoopStatus,
    SessionStatus,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "ActionRequest",
    "ChoiceRequest",
    "CreateSessionRequest",
    "EndTurnRequest",
    # Responses
    "ErrorResponse",
    "GameStateResponse",
    "LegalActionsResponse",
    "SessionResponse",
    "TurnResponse",
    # Enums
    "ErrorCode",
    "LoopStatus",
    "SessionStatus",
    # Service
    "APIService",
    "create_app",
]
