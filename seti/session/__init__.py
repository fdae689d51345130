"""
Session Module - Manages in-memory game sessions.

A session represents one play-through of a game:
- Created when a client starts a game
- Holds the engine, and through it the game, interaction queue and undo ledger
- Processes actions and interaction choices
- Destroyed when the game ends or the session goes stale

Sessions are EPHEMERAL:
- No persistence to database
- Undo history lives and dies with the session
"""

from .manager import SessionManager, Session, SessionState
from .game_loop import GameLoop, LoopState, TurnResult

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "GameLoop",
    "LoopState",
    "TurnResult",
]
