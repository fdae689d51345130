"""
Tests for API Pydantic schemas.

Validates that:
- Request models reject malformed bodies
- Responses serialize enums as plain strings
- Error codes are properly structured
- The OpenAPI schema lists the response models
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    ChoiceRequest,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    LoopStatus,
    PlayerInfo,
    SessionResponse,
    SessionStatus,
    TurnResponse,
)


class TestPydanticSchemas:
    """Tests for Pydantic schema validation."""

    def test_player_count_bounds(self):
        """CreateSessionRequest takes 2 to 4 names."""
        with pytest.raises(ValidationError):
            CreateSessionRequest(player_names=["Solo"])
        with pytest.raises(ValidationError):
            CreateSessionRequest(player_names=["A", "B", "C", "D", "E"])

        assert CreateSessionRequest(player_names=["A", "B"]).seed is None

    def test_choice_defaults(self):
        choice = ChoiceRequest()

        assert choice.card_ids == []
        assert not choice.decline
        assert choice.model_dump(exclude={"player_id"}) == {
            "card_ids": [], "target_id": None, "option": None, "decline": False, "params": {},
        }

    def test_session_response_schema(self):
        """SessionResponse has all required fields."""
        response = SessionResponse(
            session_id="session-123",
            status=SessionStatus.ACTIVE,
            game_id="game_1",
            players=[PlayerInfo(player_id="player_0", name="Alice", score=1, hand_count=5)],
        )

        data = response.model_dump(mode="json")
        assert data["status"] == "active"
        assert data["players"][0]["hand"] == []
        assert data["api_version"] == "v1"

    def test_turn_response_schema(self):
        data = TurnResponse(
            session_id="s", success=True, loop_state=LoopStatus.WAITING_FOR_CHOICE,
            pending_interaction={"type": "ACQUIRING_CARD"},
        ).model_dump(mode="json")

        assert data["loop_state"] == "waiting_for_choice"
        assert data["pending_interaction"] == {"type": "ACQUIRING_CARD"}

    def test_error_response_schema(self):
        data = ErrorResponse(
            error="Ce n'est pas votre tour",
            error_code=ErrorCode.ACTION_REJECTED,
            details={"rule_code": "NOT_PLAYER_TURN"},
        ).model_dump(mode="json")

        assert data["error_code"] == "ACTION_REJECTED"
        assert data["details"]["rule_code"] == "NOT_PLAYER_TURN"


class TestErrorCodes:
    """Tests for error code coverage."""

    def test_all_error_codes_defined(self):
        """All required error codes are defined."""
        required_codes = [
            "SESSION_NOT_FOUND",
            "VALIDATION_ERROR",
            "INVALID_ACTION",
            "ACTION_REJECTED",
            "INVALID_CHOICE",
            "NOTHING_TO_UNDO",
        ]

        for code in required_codes:
            assert hasattr(ErrorCode, code), f"Missing error code: {code}"
            assert ErrorCode[code].value == code

    def test_error_code_values_are_strings(self):
        """Error codes are string enums for JSON serialization."""
        for code in ErrorCode:
            assert isinstance(code.value, str)
            assert code.value == code.value.upper()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_response_models_in_schema(self):
        """Response models appear in OpenAPI schema."""
        from fastapi.openapi.utils import get_openapi
        from ..api.app import app

        schema = get_openapi(title=app.title, version=app.version, routes=app.routes)

        assert "/api/v1/sessions/{session_id}/interaction" in schema["paths"]
        schemas = schema["components"]["schemas"]
        for name in ["SessionResponse", "GameStateResponse", "TurnResponse", "ErrorResponse"]:
            assert name in schemas, f"Missing schema: {name}"
