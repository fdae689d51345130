"""
Step results returned by systems, the bonus resolver and interaction handlers.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .bonus import Bonus
from .interaction import InteractionState
from .state import Game, HistoryEntry


@dataclass
class StepResult:
    """
    A new game value plus its side channels.

    `bonus` is a reward the step earned but did not apply; the caller routes
    it through the BonusResolver for `bonus_player_id` (defaults to the acting
    player).
    """
    game: Game
    history_entries: list[HistoryEntry] = field(default_factory=list)
    interactions: list[InteractionState] = field(default_factory=list)
    bonus: Bonus | None = None
    bonus_player_id: str | None = None

    def log(self, message: str, player_id: str, sequence_id: str = "") -> None:
        self.history_entries.append(HistoryEntry(message, player_id, sequence_id))

    def then(self, other: StepResult) -> StepResult:
        """Chain a later step: keep its game, concatenate side channels."""
        bonus = other.bonus
        if self.bonus is not None and other.bonus_player_id == self.bonus_player_id:
            bonus = self.bonus.merge(other.bonus) if other.bonus else self.bonus
        return StepResult(
            game=other.game,
            history_entries=self.history_entries + other.history_entries,
            interactions=self.interactions + other.interactions,
            bonus=bonus,
            bonus_player_id=other.bonus_player_id if other.bonus else self.bonus_player_id,
        )

    def add_bonus(self, bonus: Bonus | None) -> None:
        if bonus is None or bonus.is_empty():
            return
        self.bonus = bonus.merge(None) if self.bonus is None else self.bonus.merge(bonus)


@dataclass
class BonusResolution(StepResult):
    """Output of BonusResolver.resolve."""
    launched_probe_ids: list[str] = field(default_factory=list)
