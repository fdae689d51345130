"""
Free actions - Any number per turn, before or after the main action.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..state import Game
from ..systems import cards, computer, missions, probes, resources
from .base import ActionType, BaseAction, ValidationResult


@dataclass
class MoveProbeAction(BaseAction):
    """Move a probe one cell for 1 energy (2 when leaving an asteroid field)."""
    type = ActionType.MOVE_PROBE
    probe_id: str = ""
    target: tuple[str, int] = ("A", 1)

    def _validate(self, game: Game) -> ValidationResult:
        ok, reason = probes.can_move(game, self.player_id, self.probe_id, tuple(self.target))
        if not ok:
            return ValidationResult.fail("CANNOT_MOVE", reason)
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        return self._finish(probes.move_probe(
            game, self.player_id, self.probe_id, tuple(self.target), sequence_id=self.sequence_id))

    def params(self) -> dict:
        return {"probeId": self.probe_id, "target": list(self.target)}


@dataclass
class TransfereDataAction(BaseAction):
    type = ActionType.TRANSFERE_DATA
    slot_id: str = ""

    def _validate(self, game: Game) -> ValidationResult:
        if not computer.can_fill_slot(game.get_player(self.player_id), self.slot_id):
            return ValidationResult.fail("SLOT_UNAVAILABLE", f"Emplacement indisponible: {self.slot_id}")
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        return self._finish(computer.fill_slot(game, self.player_id, self.slot_id, self.sequence_id))

    def params(self) -> dict:
        return {"slotId": self.slot_id}


@dataclass
class DiscardCardAction(BaseAction):
    """Discard a hand card for the free action printed on it."""
    type = ActionType.DISCARD_CARD
    card_id: str = ""

    def _validate(self, game: Game) -> ValidationResult:
        if game.get_player(self.player_id).get_card(self.card_id) is None:
            return ValidationResult.fail("CARD_NOT_FOUND", "Carte non trouvée")
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        return self._finish(cards.discard_for_free_action(game, self.player_id, self.card_id, self.sequence_id))

    def params(self) -> dict:
        return {"cardId": self.card_id}


@dataclass
class BuyCardAction(BaseAction):
    """Spend 3 media for a row card, or the top of the deck when no card is named."""
    type = ActionType.BUY_CARD
    card_id: str | None = None

    def _validate(self, game: Game) -> ValidationResult:
        player = game.get_player(self.player_id)
        ok, reason = cards.can_buy_card(player)
        if not ok:
            return ValidationResult.fail("INSUFFICIENT_MEDIAS", reason)
        if self.card_id is not None and not any(c.id == self.card_id for c in game.decks.card_row):
            return ValidationResult.fail("CARD_NOT_FOUND", "Carte non trouvée")
        if self.card_id is None and not (game.decks.cards or game.decks.discard_pile):
            return ValidationResult.fail("CARD_NOT_FOUND", "La pioche est vide")
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        return self._finish(cards.buy_card(game, self.player_id, self.card_id, self.sequence_id))

    def params(self) -> dict:
        return {"cardId": self.card_id}


@dataclass
class TradeResourcesAction(BaseAction):
    """Two credits, energies or cards for one of another kind."""
    type = ActionType.TRADE_RESOURCES
    spend: str = "credit"
    gain: str = "energy"
    card_ids: list[str] | None = None

    def _validate(self, game: Game) -> ValidationResult:
        ok, reason = resources.can_trade(game.get_player(self.player_id), self.spend, self.gain, self.card_ids)
        if not ok:
            return ValidationResult.fail("CANNOT_TRADE", reason)
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        return self._finish(resources.trade(
            game, self.player_id, self.spend, self.gain, self.card_ids, self.sequence_id))

    def params(self) -> dict:
        return {"spend": self.spend, "gain": self.gain, "cardIds": self.card_ids}


_MISSION_MESSAGES = {
    "MISSION_NOT_FOUND": "Mission non trouvée",
    "REQUIREMENT_NOT_FULFILLABLE": "Condition de mission non remplie",
}


@dataclass
class AccomplishMissionAction(BaseAction):
    type = ActionType.ACCOMPLISH_MISSION
    mission_id: str = ""
    requirement_id: str | None = None

    def _validate(self, game: Game) -> ValidationResult:
        ok, code = missions.can_accomplish(game.get_player(self.player_id), self.mission_id, self.requirement_id)
        if not ok:
            return ValidationResult.fail(code, _MISSION_MESSAGES[code])
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        return self._finish(missions.accomplish_requirement(
            game, self.player_id, self.mission_id, self.requirement_id, self.sequence_id))

    def params(self) -> dict:
        return {"missionId": self.mission_id, "requirementId": self.requirement_id}


FREE_ACTION_CLASSES = {
    cls.type: cls for cls in (
        MoveProbeAction, TransfereDataAction, DiscardCardAction, BuyCardAction,
        TradeResourcesAction, AccomplishMissionAction,
    )
}

__all__ = [
    "MoveProbeAction", "TransfereDataAction", "DiscardCardAction", "BuyCardAction",
    "TradeResourcesAction", "AccomplishMissionAction", "FREE_ACTION_CLASSES",
]
