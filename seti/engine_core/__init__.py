"""
Engine Core - Deterministic game state management and rule resolution.

The engine is the runtime that:
1. Owns the authoritative Game
2. Validates and executes player actions
3. Resolves bonuses into state changes and pending interactions
4. Resolves interactions step-by-step
5. Generates legal actions and supports undo
"""

from .state import Game, Player, Board, Card, HistoryEntry
from .bonus import Bonus
from .interaction import InteractionQueue, InteractionState, InteractionType, IDLE
from .results import StepResult, BonusResolution
from .bonus_resolver import BonusResolver, BonusContext
from .interaction_resolver import InteractionResolver, InteractionError, Choice
from .actions import ActionType, BaseAction, ValidationError, ValidationResult, build_action
from .history import HistoryLedger
from .engine import GameEngine, ActionResult
from .action_generator import ActionGenerator, is_legal, legal_actions

__all__ = [
    "Game",
    "Player",
    "Board",
    "Card",
    "HistoryEntry",
    "Bonus",
    "InteractionQueue",
    "InteractionState",
    "InteractionType",
    "IDLE",
    "StepResult",
    "BonusResolution",
    "BonusResolver",
    "BonusContext",
    "InteractionResolver",
    "InteractionError",
    "Choice",
    "ActionType",
    "BaseAction",
    "ValidationError",
    "ValidationResult",
    "build_action",
    "HistoryLedger",
    "GameEngine",
    "ActionResult",
    "ActionGenerator",
    "legal_actions",
    "is_legal",
]
