"""
Action Protocol - Player actions, validation results and shared checks.

Every player-initiated action is one BaseAction subclass:

- validate(game, queue) is pure; it reports rule violations as
  ValidationError(code, message) pairs and never raises for them
- execute(game) assumes a valid action, runs the owning systems, routes
  earned bonuses through the BonusResolver and returns the new Game

History entries and spawned interactions are exposed after execute through
`history_entries` and `interactions`; the engine appends and queues them.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar

from ..bonus_resolver import BonusContext, BonusResolver
from ..enums import GamePhase
from ..interaction import InteractionQueue, InteractionState
from ..results import StepResult
from ..state import Game, HistoryEntry

logger = logging.getLogger(__name__)


class ActionType(Enum):
    """Types of player actions."""
    # Main actions (one per turn)
    LAUNCH_PROBE = "LAUNCH_PROBE"
    ORBIT = "ORBIT"
    LAND = "LAND"
    SCAN_SECTOR = "SCAN_SECTOR"
    ANALYZE_DATA = "ANALYZE_DATA"
    PLAY_CARD = "PLAY_CARD"
    RESEARCH_TECH = "RESEARCH_TECH"
    PASS = "PASS"

    # Free actions
    MOVE_PROBE = "MOVE_PROBE"
    TRANSFERE_DATA = "TRANSFERE_DATA"
    DISCARD_CARD = "DISCARD_CARD"
    BUY_CARD = "BUY_CARD"
    TRADE_RESOURCES = "TRADE_RESOURCES"
    ACCOMPLISH_MISSION = "ACCOMPLISH_MISSION"


MAIN_ACTIONS = frozenset({
    ActionType.LAUNCH_PROBE,
    ActionType.ORBIT,
    ActionType.LAND,
    ActionType.SCAN_SECTOR,
    ActionType.ANALYZE_DATA,
    ActionType.PLAY_CARD,
    ActionType.RESEARCH_TECH,
    ActionType.PASS,
})


@dataclass(frozen=True)
class ValidationError:
    code: str
    message: str

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


@dataclass
class ValidationResult:
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @classmethod
    def ok(cls, warnings: list[str] | None = None) -> ValidationResult:
        return cls(valid=True, warnings=warnings or [])

    @classmethod
    def fail(cls, code: str, message: str) -> ValidationResult:
        return cls(valid=False, errors=[ValidationError(code, message)])

    @property
    def first_error(self) -> ValidationError | None:
        return self.errors[0] if self.errors else None

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": list(self.warnings),
        }


class ActionValidator:
    """Checks shared by every action."""

    @staticmethod
    def common(game: Game, player_id: str, queue: InteractionQueue | None = None,
               main_action: bool = False) -> ValidationResult | None:
        """Returns a failed result, or None when the common checks pass."""
        player = game.get_player(player_id)
        if player is None:
            return ValidationResult.fail("PLAYER_NOT_FOUND", "Joueur non trouvé")
        if game.phase != GamePhase.PLAYING:
            return ValidationResult.fail("INVALID_TURN", "Tour invalide")
        if game.current_player.id != player_id:
            return ValidationResult.fail("NOT_PLAYER_TURN", "Ce n'est pas votre tour")
        if player.has_passed:
            return ValidationResult.fail("PLAYER_PASSED", "Vous avez déjà passé ce tour")
        if queue is not None and not queue.is_idle():
            return ValidationResult.fail(
                "INTERACTION_PENDING", f"Une interaction est en attente ({queue.current.type.value})")
        if main_action and player.has_performed_main_action:
            return ValidationResult.fail(
                "ALREADY_PERFORMED_MAIN_ACTION", "Vous avez déjà effectué une action principale ce tour")
        return None


@dataclass
class BaseAction(ABC):
    """
    Base of all actions.

    Subclasses implement _validate and _execute; the public methods add the
    shared checks and collect the side channels.
    """
    type: ClassVar[ActionType]

    player_id: str
    sequence_id: str = ""
    history_entries: list[HistoryEntry] = field(default_factory=list, init=False, repr=False)
    interactions: list[InteractionState] = field(default_factory=list, init=False, repr=False)
    resolver: BonusResolver = field(default_factory=BonusResolver, init=False, repr=False, compare=False)

    @property
    def is_main(self) -> bool:
        return self.type in MAIN_ACTIONS

    def validate(self, game: Game, queue: InteractionQueue | None = None) -> ValidationResult:
        failed = ActionValidator.common(game, self.player_id, queue, self.is_main)
        if failed is not None:
            return failed
        return self._validate(game)

    def execute(self, game: Game) -> Game:
        self.history_entries = []
        self.interactions = []
        game = self._execute(game)
        if self.is_main and self.type != ActionType.PASS:
            player = game.get_player(self.player_id)
            player.has_performed_main_action = True
        logger.debug("Executed %s for %s", self.type.value, self.player_id)
        return game

    @abstractmethod
    def _validate(self, game: Game) -> ValidationResult:
        pass

    @abstractmethod
    def _execute(self, game: Game) -> Game:
        pass

    def _finish(self, step: StepResult) -> Game:
        """Collect a system step and resolve the bonus it earned."""
        self.history_entries.extend(step.history_entries)
        self.interactions.extend(s.with_sequence(self.sequence_id) for s in step.interactions)
        game = step.game
        if step.bonus is not None and not step.bonus.is_empty():
            resolution = self.resolver.resolve(
                step.bonus, game, step.bonus_player_id or self.player_id,
                BonusContext(self.sequence_id, step.bonus.source_card_id),
            )
            self.history_entries.extend(resolution.history_entries)
            self.interactions.extend(resolution.interactions)
            game = resolution.game
        return game

    def to_dict(self) -> dict:
        data = {"type": self.type.value, "playerId": self.player_id}
        for name, value in self.params().items():
            data[name] = value
        return data

    def params(self) -> dict:
        return {}
