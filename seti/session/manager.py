"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Client starts a session → a game is created and an engine wraps it
2. During the game:
   - Client submits actions and interaction choices
   - Engine validates and updates the canonical state
   - Client renders the state and the pending interaction
3. Game ends or the client leaves → session is ended

PERSISTENCE RULES:
- Sessions live in memory only
- The engine's undo ledger is session-scoped
- Inactive sessions are reaped after SETI_SESSION_TTL seconds
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import logging
import time
import uuid

from .. import config
from ..content import create_game
from ..engine_core.engine import GameEngine
from ..engine_core.state import Card

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    CREATED = "created"  # Game set up, no action yet
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Final scoring reached
    ABANDONED = "abandoned"  # Ended before the game finished


@dataclass
class Session:
    """
    A game session.

    Contains:
    - The engine that owns the game, its interaction queue and undo ledger
    - Session metadata and activity timestamps
    """
    session_id: str
    engine: GameEngine
    created_at: float
    state: SessionState = SessionState.CREATED
    last_activity: float = 0.0
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def game(self):
        return self.engine.game

    def is_active(self) -> bool:
        """Check if session is still active."""
        return self.state in {SessionState.CREATED, SessionState.ACTIVE}

    def touch(self) -> None:
        self.last_activity = time.time()


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with a freshly set up game
    - Track active sessions
    - Clean up completed and stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_session(
        self,
        player_names: list[str],
        seed: int | None = None,
        cards: list[Card] | None = None,
    ) -> Session:
        """
        Create a new game session.

        Args:
            player_names: Names in seat order (2-4)
            seed: Seed for deterministic setup
            cards: Optional action deck

        Returns:
            New Session ready to play

        Raises:
            ValueError: if the player count is invalid
        """
        session_id = str(uuid.uuid4())
        game = create_game(player_names, cards=cards, seed=seed)
        now = time.time()
        session = Session(
            session_id=session_id,
            engine=GameEngine(game),
            created_at=now,
            last_activity=now,
        )
        self._sessions[session_id] = session
        logger.info("Session %s created for game %s", session_id, game.id)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> Session | None:
        """
        End a session and remove it from memory.

        Returns the ended session, or None if it did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session:
            if reason == "completed" and session.engine.is_game_over:
                session.state = SessionState.GAME_OVER
            else:
                session.state = SessionState.ABANDONED
            logger.info("Session %s ended (%s)", session_id, reason)
        return session

    def list_active_sessions(self) -> list[str]:
        """List IDs of active sessions."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def cleanup_stale_sessions(self, max_age_seconds: int | None = None) -> list[str]:
        """
        Clean up sessions without activity for longer than max_age.

        Called periodically to free memory. Returns the removed IDs.
        """
        max_age = config.SETI_SESSION_TTL if max_age_seconds is None else max_age_seconds
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_activity > max_age or not session.is_active()
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return to_remove
