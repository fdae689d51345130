"""
FastAPI Application - REST API for table and web clients.

Endpoints:
    GET    /health                                Service health
    POST   /api/v1/sessions                       Create game session
    GET    /api/v1/sessions                       List active sessions
    GET    /api/v1/sessions/{id}                  Get session status
    DELETE /api/v1/sessions/{id}                  End session
    GET    /api/v1/sessions/{id}/state            Get game state
    GET    /api/v1/sessions/{id}/actions          Legal actions for the current player
    POST   /api/v1/sessions/{id}/actions          Perform an action
    POST   /api/v1/sessions/{id}/interaction      Answer the pending interaction
    POST   /api/v1/sessions/{id}/end-turn         End the current turn
    POST   /api/v1/sessions/{id}/undo             Undo the last step

Play Flow:
    1. POST /actions performs a main or free action
    2. If the response has a pending_interaction, POST /interaction until
       loop_state is back to waiting_for_action
    3. POST /end-turn once the main action is done

All bodies are JSON with explicit Pydantic schemas.
"""

from typing import Annotated, Optional, Union
import logging

from fastapi import FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__, config
from .service import APIService
from .schemas import (
    # Request models
    ActionRequest,
    ChoiceRequest,
    CreateSessionRequest,
    EndTurnRequest,
    # Response models
    EndSessionResponse,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    LegalActionsResponse,
    SessionListResponse,
    SessionResponse,
    TurnResponse,
    # Enums
    ErrorCode,
)

logger = logging.getLogger(__name__)


def create_app(service: Optional[APIService] = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    config.configure_logging()

    app = FastAPI(
        title="SETI Engine API",
        description="""
Rules engine for a SETI-style board game.

## Interactions

Actions and bonuses can leave choices for the player (pick a card, a
technology, a sector...). While `loop_state` is `waiting_for_choice`, only
`POST /interaction` is accepted.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `VALIDATION_ERROR` | Malformed request |
| `INVALID_ACTION` | Unknown action type or parameters |
| `ACTION_REJECTED` | The rules forbid it now; `details.rule_code` says why |
| `INVALID_CHOICE` | The pending interaction cannot accept the choice |
| `NOTHING_TO_UNDO` | Undo history is empty |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[dict] = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    def error_or(response):
        """Pass models through; turn ErrorResponse into a JSON error."""
        if isinstance(response, ErrorResponse):
            status_code = 404 if response.error_code == ErrorCode.SESSION_NOT_FOUND else 400
            return make_error_response(
                response.error_code, response.error, status_code, response.details
            )
        return response

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
        return make_error_response(ErrorCode.VALIDATION_ERROR, str(exc))

    # =========================================================================
    # Health
    # =========================================================================

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            service="seti-engine",
            version=__version__,
            environment=config.SETI_ENV,
        )

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=SessionResponse,
        responses={400: {"model": ErrorResponse, "description": "Invalid parameters"}},
        tags=["Sessions"],
        summary="Create a new game session",
    )
    async def create_session(body: CreateSessionRequest) -> Union[SessionResponse, JSONResponse]:
        """
        Create a new game session.

        Players are seated in the given order; pass `seed` for a reproducible setup.
        """
        return error_or(api_service.create_session(body))

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List active sessions",
    )
    async def list_sessions() -> SessionListResponse:
        """List all active session IDs."""
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.get(
        "/api/v1/sessions/{session_id}",
        response_model=SessionResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Sessions"],
        summary="Get session status",
    )
    async def get_session(session_id: str) -> Union[SessionResponse, JSONResponse]:
        """Get the current status of a game session."""
        return error_or(api_service.get_session(session_id))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a game session",
    )
    async def end_session(
        session_id: str,
        reason: Annotated[str, Query(description="Reason for ending")] = "user_ended",
    ) -> EndSessionResponse:
        """End a game session and release resources."""
        success = api_service.end_session(session_id, reason)
        return EndSessionResponse(success=success, session_id=session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the full game state",
    )
    async def get_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        return error_or(api_service.get_game_state(session_id))

    @app.get(
        "/api/v1/sessions/{session_id}/actions",
        response_model=LegalActionsResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="List legal actions for the current player",
    )
    async def legal_actions(session_id: str) -> Union[LegalActionsResponse, JSONResponse]:
        """Empty while an interaction is pending."""
        return error_or(api_service.legal_actions(session_id))

    @app.post(
        "/api/v1/sessions/{session_id}/actions",
        response_model=TurnResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Action rejected"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game"],
        summary="Perform an action",
    )
    async def perform_action(session_id: str, body: ActionRequest) -> Union[TurnResponse, JSONResponse]:
        """
        Perform a main or free action.

        **Request Body:**
        ```json
        {"type": "ORBIT", "player_id": "player_0", "params": {"probeId": "probe_1"}}
        ```
        """
        return error_or(api_service.perform_action(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/interaction",
        response_model=TurnResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Choice rejected"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game"],
        summary="Answer the pending interaction",
    )
    async def resolve_interaction(session_id: str, body: ChoiceRequest) -> Union[TurnResponse, JSONResponse]:
        return error_or(api_service.resolve_interaction(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/end-turn",
        response_model=TurnResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Turn cannot end yet"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game"],
        summary="End the current turn",
    )
    async def end_turn(
        session_id: str,
        body: Optional[EndTurnRequest] = None,
    ) -> Union[TurnResponse, JSONResponse]:
        return error_or(api_service.end_turn(session_id, body))

    @app.post(
        "/api/v1/sessions/{session_id}/undo",
        response_model=TurnResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Nothing to undo"},
            404: {"model": ErrorResponse, "description": "Session not found"},
        },
        tags=["Game"],
        summary="Undo the last step",
    )
    async def undo(session_id: str) -> Union[TurnResponse, JSONResponse]:
        """Restores the game and the interaction queue as they were before the last step."""
        return error_or(api_service.undo(session_id))

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "SETI Engine API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/health",
        }

    return app


# For running directly: uvicorn seti.api.app:app
app = create_app()
