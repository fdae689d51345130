"""
Tests for API layer.

Tests:
- API service methods
- Error code mapping
- HTTP endpoints through the FastAPI test client
"""

import pytest
from fastapi.testclient import TestClient

from .. import __version__
from ..api.app import create_app
from ..api.schemas import (
    ActionRequest,
    ChoiceRequest,
    CreateSessionRequest,
    EndTurnRequest,
    ErrorCode,
    ErrorResponse,
    LoopStatus,
    SessionStatus,
)
from ..api.service import APIService


class TestAPIService:
    """Tests for APIService."""

    @pytest.fixture
    def service(self):
        """Create a fresh API service."""
        return APIService()

    @pytest.fixture
    def session_id(self, service):
        response = service.create_session(CreateSessionRequest(player_names=["Alice", "Bob"], seed=11))
        return response.session_id

    def test_create_session(self, service):
        """Can create a session; hands stay hidden."""
        response = service.create_session(CreateSessionRequest(player_names=["Alice", "Bob"], seed=11))

        assert response.status == SessionStatus.CREATED
        assert response.game_id == "game_11"
        assert [p.name for p in response.players] == ["Alice", "Bob"]
        assert all(p.hand == [] and p.hand_count == 5 for p in response.players)
        assert response.current_player_id == "player_0"

    def test_create_session_bad_count(self, service):
        request = CreateSessionRequest.model_construct(player_names=["A", "B", "C", "D", "E"], seed=None)

        response = service.create_session(request)

        assert isinstance(response, ErrorResponse)
        assert response.error_code == ErrorCode.VALIDATION_ERROR

    def test_get_nonexistent_session(self, service):
        """Getting nonexistent session returns error."""
        response = service.get_session("nonexistent-id")

        assert response.error_code == ErrorCode.SESSION_NOT_FOUND
        assert response.error == "Session nonexistent-id not found"

    def test_game_state(self, service, session_id):
        state = service.get_game_state(session_id)

        assert state.loop_state == LoopStatus.WAITING_FOR_ACTION
        assert state.round == 1
        assert state.max_rounds == 5
        assert state.first_player_id == "player_0"
        assert len(state.card_row) == 3
        assert len(state.players[0].hand) == 5
        assert state.history[-1].message == "--- DÉBUT DE LA PARTIE ---"

    def test_perform_action(self, service, session_id):
        response = service.perform_action(session_id, ActionRequest(type="LAUNCH_PROBE", player_id="player_0"))

        assert response.success
        assert response.history[0].message == "lance une sonde depuis la Terre"
        assert response.history[0].sequence_id == "seq_1"
        assert service.get_session(session_id).status == SessionStatus.ACTIVE

    def test_rule_refusal(self, service, session_id):
        """Rule refusals carry the engine's code in details."""
        response = service.perform_action(session_id, ActionRequest(type="LAUNCH_PROBE", player_id="player_1"))

        assert response.error_code == ErrorCode.ACTION_REJECTED
        assert response.details["rule_code"] == "NOT_PLAYER_TURN"
        assert response.error == "Ce n'est pas votre tour"

    def test_invalid_action(self, service, session_id):
        response = service.perform_action(session_id, ActionRequest(type="JUMP", player_id="player_0"))

        assert response.error_code == ErrorCode.INVALID_ACTION
        assert "rule_code" not in response.details

    def test_invalid_choice(self, service, session_id):
        response = service.resolve_interaction(session_id, ChoiceRequest(target_id="nope"))

        assert response.error_code == ErrorCode.INVALID_CHOICE

    def test_end_turn(self, service, session_id):
        service.perform_action(session_id, ActionRequest(type="LAUNCH_PROBE", player_id="player_0"))

        response = service.end_turn(session_id, EndTurnRequest(player_id="player_0"))

        assert response.current_player_id == "player_1"

    def test_undo(self, service, session_id):
        assert service.undo(session_id).error_code == ErrorCode.NOTHING_TO_UNDO

        service.perform_action(session_id, ActionRequest(type="LAUNCH_PROBE", player_id="player_0"))
        response = service.undo(session_id)

        assert response.success
        assert service.get_game_state(session_id).players[0].probes == []

    def test_legal_actions(self, service, session_id):
        response = service.legal_actions(session_id)

        assert response.current_player_id == "player_0"
        assert response.count == len(response.actions)
        assert {"type": "LAUNCH_PROBE", "playerId": "player_0"} in response.actions

    def test_end_session(self, service, session_id):
        """Can end a session."""
        assert service.end_session(session_id)
        assert service.list_sessions() == []
        assert not service.end_session(session_id)


class TestHTTP:
    """Tests for the HTTP endpoints."""

    @pytest.fixture
    def client(self):
        return TestClient(create_app(APIService()))

    @pytest.fixture
    def session_id(self, client):
        response = client.post("/api/v1/sessions", json={"player_names": ["Alice", "Bob"], "seed": 3})
        return response.json()["session_id"]

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "seti-engine"
        assert body["version"] == __version__

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/health"

    def test_create_session(self, client):
        response = client.post("/api/v1/sessions", json={"player_names": ["Alice", "Bob"], "seed": 3})

        assert response.status_code == 200
        assert response.json()["game_id"] == "game_3"
        assert response.json()["status"] == "created"

    def test_create_session_bad_count(self, client):
        response = client.post("/api/v1/sessions", json={"player_names": ["Alice"]})

        assert response.status_code == 422

    def test_list_sessions(self, client, session_id):
        body = client.get("/api/v1/sessions").json()

        assert body == {"sessions": [session_id], "count": 1}

    def test_unknown_session(self, client):
        response = client.get("/api/v1/sessions/nope/state")

        assert response.status_code == 404
        assert response.json()["error_code"] == "SESSION_NOT_FOUND"

    def test_state(self, client, session_id):
        body = client.get(f"/api/v1/sessions/{session_id}/state").json()

        assert body["current_player_id"] == "player_0"
        assert body["loop_state"] == "waiting_for_action"
        assert body["pending_interaction"] is None

    def test_play_a_turn(self, client, session_id):
        response = client.post(
            f"/api/v1/sessions/{session_id}/actions",
            json={"type": "LAUNCH_PROBE", "player_id": "player_0"},
        )
        assert response.status_code == 200
        assert response.json()["history"][0]["player_id"] == "player_0"

        response = client.post(f"/api/v1/sessions/{session_id}/end-turn", json={"player_id": "player_0"})

        assert response.status_code == 200
        assert response.json()["current_player_id"] == "player_1"

    def test_rejected_action(self, client, session_id):
        response = client.post(
            f"/api/v1/sessions/{session_id}/actions",
            json={"type": "LAUNCH_PROBE", "player_id": "player_1"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "ACTION_REJECTED"
        assert body["details"]["rule_code"] == "NOT_PLAYER_TURN"

    def test_end_turn_without_main_action(self, client, session_id):
        response = client.post(f"/api/v1/sessions/{session_id}/end-turn")

        assert response.status_code == 400
        assert response.json()["details"]["rule_code"] == "CANNOT_END_TURN"

    def test_interaction_without_pending(self, client, session_id):
        response = client.post(f"/api/v1/sessions/{session_id}/interaction", json={"target_id": "x"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_CHOICE"

    def test_undo(self, client, session_id):
        response = client.post(f"/api/v1/sessions/{session_id}/undo")

        assert response.status_code == 400
        assert response.json()["error_code"] == "NOTHING_TO_UNDO"

    def test_legal_actions(self, client, session_id):
        body = client.get(f"/api/v1/sessions/{session_id}/actions").json()

        assert body["count"] > 0

    def test_delete_session(self, client, session_id):
        response = client.delete(f"/api/v1/sessions/{session_id}", params={"reason": "left"})

        assert response.json() == {"success": True, "session_id": session_id}
        assert client.get(f"/api/v1/sessions/{session_id}").status_code == 404
