"""
Game Engine - The driver that owns a match.

The engine holds the authoritative Game, the interaction queue and the undo
ledger. All state changes flow through it:

- execute_action(): validate, snapshot, execute, record history, queue the
  spawned interactions
- resolve(): answer the current interaction
- end_turn() / undo()

After every step, sector resolutions left at the front of the queue are
settled automatically, then conditional missions and score milestones are
checked for every player.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .action_generator import ActionGenerator
from .actions import BaseAction, ValidationError, ValidationResult
from .enums import GamePhase
from .history import HistoryLedger
from .interaction import InteractionQueue, InteractionState, InteractionType
from .interaction_resolver import Choice, InteractionError, InteractionResolver
from .bonus_resolver import BonusResolver
from .results import StepResult
from .state import Game, HistoryEntry
from .systems import milestones, missions, turns
from .systems.scoring import winners

logger = logging.getLogger(__name__)

# Interactions that need no player input
_AUTOMATIC = frozenset({InteractionType.RESOLVING_SECTOR})


@dataclass
class ActionResult:
    """
    Result of an engine operation.

    Contains:
    - Whether it succeeded
    - The new game (if succeeded)
    - Errors (if failed)
    - History entries produced and the interaction now pending
    """
    success: bool
    new_state: Game | None = None
    error: str | None = None
    error_code: str | None = None
    errors: list[ValidationError] = field(default_factory=list)
    history_entries: list[HistoryEntry] = field(default_factory=list)
    pending_interaction: InteractionState | None = None

    @classmethod
    def failure(cls, error: str, error_code: str | None = None,
                errors: list[ValidationError] | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code, errors=errors or [])

    @classmethod
    def success_with_state(
        cls,
        state: Game,
        entries: list[HistoryEntry] | None = None,
        pending: InteractionState | None = None,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(
            success=True,
            new_state=state,
            history_entries=entries or [],
            pending_interaction=pending,
        )


class GameEngine:
    """Single-threaded driver of one game."""

    def __init__(self, game: Game, queue: InteractionQueue | None = None,
                 ledger: HistoryLedger | None = None):
        self.game = game
        self.queue = queue or InteractionQueue()
        self.ledger = ledger or HistoryLedger()
        self.bonus_resolver = BonusResolver()
        self.interaction_resolver = InteractionResolver(self.bonus_resolver)

    # ------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------

    @property
    def pending_interaction(self) -> InteractionState:
        return self.queue.current

    @property
    def is_game_over(self) -> bool:
        return self.game.phase == GamePhase.FINAL_SCORING

    def winners(self) -> list[str]:
        return winners(self.game) if self.is_game_over else []

    def validate(self, action: BaseAction) -> ValidationResult:
        return action.validate(self.game, self.queue)

    def legal_actions(self) -> list[BaseAction]:
        return ActionGenerator().generate(self.game, self.queue)

    # ------------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------------

    def _next_sequence(self) -> str:
        """Allocate the next sequence id; call after the snapshot is taken."""
        return self.game.next_id("seq")

    def _peek_sequence(self) -> str:
        return f"seq_{self.game.counters.get('seq', 0) + 1}"

    def execute_action(self, action: BaseAction) -> ActionResult:
        validation = self.validate(action)
        if not validation.valid:
            error = validation.first_error
            logger.debug("Rejected %s for %s: %s", action.type.value, action.player_id, error.code)
            return ActionResult.failure(error.message, error.code, validation.errors)

        self.ledger.record(self._peek_sequence(), self.game, self.queue.snapshot(), action.type.value)
        action.sequence_id = self._next_sequence()
        try:
            game = action.execute(self.game)
        except ValueError:
            self._rollback()
            raise

        game.history.extend(action.history_entries)
        self.game = game
        self.queue.push_all(action.interactions)
        entries = list(action.history_entries) + self._after_step(action.sequence_id)
        logger.info("Game %s: %s by %s", self.game.id, action.type.value, action.player_id)
        return ActionResult.success_with_state(self.game, entries, self.queue.current)

    def resolve(self, choice: Choice, player_id: str | None = None) -> ActionResult:
        """Answer the current interaction. Invalid choices raise InteractionError."""
        if self.queue.is_idle():
            raise InteractionError("Aucune interaction en attente")
        current = self.queue.current
        self.ledger.record(current.sequence_id or "", self.game, self.queue.snapshot(), current.type.value)
        try:
            step = self.interaction_resolver.resolve(self.game, self.queue, choice, player_id)
        except ValueError:
            self._rollback()
            raise
        entries = self._adopt(step) + self._after_step(current.sequence_id or "")
        return ActionResult.success_with_state(self.game, entries, self.queue.current)

    def end_turn(self, player_id: str | None = None) -> ActionResult:
        player_id = player_id or self.game.current_player.id
        if not self.queue.is_idle():
            return ActionResult.failure("Une interaction est en attente", "INTERACTION_PENDING")
        ok, reason = turns.can_end_turn(self.game, player_id)
        if not ok:
            return ActionResult.failure(reason, "CANNOT_END_TURN")
        self.ledger.record(self._peek_sequence(), self.game, self.queue.snapshot(), "END_TURN")
        sequence_id = self._next_sequence()
        entries = self._adopt(turns.end_turn(self.game, player_id, sequence_id))
        entries += self._after_step(sequence_id)
        logger.info("Game %s: %s ended the turn", self.game.id, player_id)
        return ActionResult.success_with_state(self.game, entries, self.queue.current)

    def undo(self) -> Game:
        snapshot = self.ledger.undo()
        self.game = snapshot.game
        self.queue.restore(list(snapshot.queue))
        logger.info("Game %s: undo %s", self.game.id, snapshot.label)
        return self.game

    # ------------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------------

    def _rollback(self) -> None:
        snapshot = self.ledger.undo()
        self.game = snapshot.game
        self.queue.restore(list(snapshot.queue))

    def _adopt(self, step: StepResult) -> list[HistoryEntry]:
        """Make a resolved step current; its interactions are already queued."""
        game = step.game
        game.history.extend(step.history_entries)
        self.game = game
        return list(step.history_entries)

    def _after_step(self, sequence_id: str) -> list[HistoryEntry]:
        entries: list[HistoryEntry] = []
        while self.queue.current.type in _AUTOMATIC:
            entries += self._adopt(self.interaction_resolver.resolve(self.game, self.queue, Choice()))

        if self.game.phase != GamePhase.PLAYING:
            return entries
        for player in list(self.game.players):
            step = missions.check_conditions(self.game, player.id, sequence_id)
            step = step.then(milestones.check_milestones(step.game, player.id, sequence_id))
            entries += self._adopt(step)
            self.queue.push_all([s.with_sequence(sequence_id) for s in step.interactions])
        return entries
