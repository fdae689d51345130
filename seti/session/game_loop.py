"""
Game Loop - Turns client requests into engine operations.

FLOW:
1. Client submits an action (type + params) or a choice for the pending
   interaction
2. Loop builds the request, hands it to the engine and collects the result
3. Loop reports the new history entries and what the client must answer next
4. When final scoring is reached the session is marked GAME_OVER

The loop never mutates the game itself; the engine owns the state.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging

from ..engine_core.actions import build_action
from ..engine_core.engine import ActionResult
from ..engine_core.interaction_resolver import Choice, InteractionError
from .manager import Session, SessionState

logger = logging.getLogger(__name__)


class LoopState(Enum):
    """State of the game loop."""
    WAITING_FOR_ACTION = "waiting_for_action"  # Current player may act
    WAITING_FOR_CHOICE = "waiting_for_choice"  # An interaction is pending
    GAME_OVER = "game_over"


@dataclass
class TurnResult:
    """
    Result of one loop operation.

    Contains:
    - Whether the request was accepted
    - New history entries, as wire dicts
    - The interaction the client must answer next (if any)
    - Errors (if rejected)
    - Winners (if the game ended)
    """
    success: bool
    loop_state: LoopState
    history: list[dict] = field(default_factory=list)
    pending_interaction: dict | None = None
    current_player_id: str | None = None
    errors: list[str] = field(default_factory=list)
    error_code: str | None = None
    winners: list[str] = field(default_factory=list)


class GameLoop:
    """
    Drives one session.

    Usage:
        loop = GameLoop(session)
        result = loop.submit_action("LAUNCH_PROBE", "player_0")
        while result.loop_state == LoopState.WAITING_FOR_CHOICE:
            result = loop.submit_choice({"targetId": ...}, "player_0")
        loop.end_turn("player_0")
    """

    def __init__(self, session: Session):
        self.session = session

    @property
    def engine(self):
        return self.session.engine

    @property
    def state(self) -> LoopState:
        if self.engine.is_game_over:
            return LoopState.GAME_OVER
        if not self.engine.queue.is_idle():
            return LoopState.WAITING_FOR_CHOICE
        return LoopState.WAITING_FOR_ACTION

    # ========================================================================
    # Operations
    # ========================================================================

    def submit_action(
        self,
        action_type: str,
        player_id: str,
        params: dict[str, Any] | None = None,
    ) -> TurnResult:
        """Build and execute an action. Malformed requests are rejected, not raised."""
        try:
            action = build_action(action_type, player_id, params)
        except ValueError as e:
            return self._rejected(str(e), "INVALID_ACTION")
        try:
            result = self.engine.execute_action(action)
        except ValueError as e:
            logger.warning("Action %s by %s failed: %s", action_type, player_id, e)
            return self._rejected(str(e), "INVALID_ACTION")
        return self._report(result)

    def submit_choice(self, choice: dict[str, Any] | Choice, player_id: str | None = None) -> TurnResult:
        """Answer the pending interaction."""
        if not isinstance(choice, Choice):
            choice = Choice.from_dict(choice)
        try:
            result = self.engine.resolve(choice, player_id)
        except InteractionError as e:
            return self._rejected(str(e), "INVALID_CHOICE")
        return self._report(result)

    def end_turn(self, player_id: str | None = None) -> TurnResult:
        return self._report(self.engine.end_turn(player_id))

    def undo(self) -> TurnResult:
        try:
            self.engine.undo()
        except ValueError as e:
            return self._rejected(str(e), "NOTHING_TO_UNDO")
        self.session.touch()
        return self.snapshot()

    def snapshot(self) -> TurnResult:
        """Current loop status without changing anything."""
        return TurnResult(
            success=True,
            loop_state=self.state,
            pending_interaction=self._pending(),
            current_player_id=self.engine.game.current_player.id,
            winners=self.engine.winners(),
        )

    def legal_actions(self) -> list[dict]:
        return [action.to_dict() for action in self.engine.legal_actions()]

    # ========================================================================
    # Helpers
    # ========================================================================

    def _pending(self) -> dict | None:
        if self.engine.queue.is_idle():
            return None
        return self.engine.pending_interaction.to_dict()

    def _rejected(self, error: str, error_code: str) -> TurnResult:
        return TurnResult(
            success=False,
            loop_state=self.state,
            pending_interaction=self._pending(),
            current_player_id=self.engine.game.current_player.id,
            errors=[error],
            error_code=error_code,
        )

    def _report(self, result: ActionResult) -> TurnResult:
        if not result.success:
            rejected = self._rejected(result.error or "Action refusée", result.error_code or "INVALID_ACTION")
            if result.errors:
                rejected.errors = [e.message for e in result.errors]
            return rejected

        self.session.touch()
        if self.engine.is_game_over:
            self.session.state = SessionState.GAME_OVER
            logger.info("Session %s: game over", self.session.session_id)
        elif self.session.state == SessionState.CREATED:
            self.session.state = SessionState.ACTIVE

        return TurnResult(
            success=True,
            loop_state=self.state,
            history=[entry.to_dict() for entry in result.history_entries],
            pending_interaction=self._pending(),
            current_player_id=self.engine.game.current_player.id,
            winners=self.engine.winners(),
        )
