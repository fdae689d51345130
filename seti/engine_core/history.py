"""
History Ledger - Snapshots taken before each action, for undo.

Each record keeps a deep copy of the Game and the interaction queue as they
were before an action or choice was applied. undo() hands the latest record
back verbatim.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field

from .interaction import InteractionState
from .state import Game

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    sequence_id: str
    game: Game
    queue: tuple[InteractionState, ...]
    label: str = ""


@dataclass
class HistoryLedger:
    max_size: int = 200
    _records: list[Snapshot] = field(default_factory=list)

    def record(self, sequence_id: str, game: Game, queue: list[InteractionState], label: str = "") -> None:
        self._records.append(Snapshot(sequence_id, game.clone(), tuple(queue), label))
        if len(self._records) > self.max_size:
            self._records.pop(0)

    def undo(self) -> Snapshot:
        if not self._records:
            raise ValueError("Nothing to undo")
        snapshot = self._records.pop()
        logger.debug("Undo %s (%s)", snapshot.sequence_id, snapshot.label)
        return snapshot

    def peek(self) -> Snapshot | None:
        return self._records[-1] if self._records else None

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
