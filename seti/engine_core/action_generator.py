"""
Action Generator - Generates all legal actions from a game state.

The action generator is used by:
1. The API to list what the current player may do
2. Validation (is this action in legal_actions?)

Design: Generates action objects, not just action types. Candidates are
built per action kind and kept only when their own validate() accepts them.
"""

from __future__ import annotations
from dataclasses import dataclass

from .actions import (
    AccomplishMissionAction, AnalyzeDataAction, BaseAction, BuyCardAction, DiscardCardAction,
    LandAction, LaunchProbeAction, MoveProbeAction, OrbitAction, PassAction, PlayCardAction,
    ResearchTechAction, ScanSectorAction, TradeResourcesAction, TransfereDataAction,
)
from .constants import HAND_SIZE_AFTER_PASS
from .enums import FreeActionType, GamePhase
from .interaction import InteractionQueue
from .state import Game, Player
from .systems import computer, missions, probes
from .systems.resources import TRADE_RESOURCES


@dataclass
class ActionGenerator:
    """Generates legal actions for the current player."""

    def generate(self, game: Game, queue: InteractionQueue | None = None) -> list[BaseAction]:
        if game.phase != GamePhase.PLAYING:
            return []
        if queue is not None and not queue.is_idle():
            return []
        player = game.current_player
        if player.has_passed:
            return []

        candidates: list[BaseAction] = []
        if not player.has_performed_main_action:
            candidates.extend(self._main_actions(game, player))
        candidates.extend(self._free_actions(game, player))
        return [a for a in candidates if a.validate(game, queue).valid]

    def _main_actions(self, game: Game, player: Player) -> list[BaseAction]:
        pid = player.id
        actions: list[BaseAction] = [LaunchProbeAction(player_id=pid)]
        for probe in player.probes_in_system():
            actions.append(OrbitAction(player_id=pid, probe_id=probe.id))
            actions.append(LandAction(player_id=pid, probe_id=probe.id))
            planet = probes.planet_under(game, probe)
            if planet is not None:
                actions.extend(
                    LandAction(player_id=pid, probe_id=probe.id, satellite_id=s.id) for s in planet.satellites
                )
        actions.append(ScanSectorAction(player_id=pid))
        actions.append(AnalyzeDataAction(player_id=pid))
        actions.extend(PlayCardAction(player_id=pid, card_id=c.id) for c in player.hand)
        actions.append(ResearchTechAction(player_id=pid))
        keep = [c.id for c in player.hand[:HAND_SIZE_AFTER_PASS]] if len(player.hand) > HAND_SIZE_AFTER_PASS else None
        actions.append(PassAction(player_id=pid, keep_card_ids=keep))
        return actions

    def _free_actions(self, game: Game, player: Player) -> list[BaseAction]:
        pid = player.id
        actions: list[BaseAction] = []
        for probe in player.probes_in_system():
            actions.extend(
                MoveProbeAction(player_id=pid, probe_id=probe.id, target=cell)
                for cell in probes.reachable_cells(game, pid, probe.id)
            )
        actions.extend(TransfereDataAction(player_id=pid, slot_id=s) for s in computer.fillable_slots(player))
        actions.extend(
            DiscardCardAction(player_id=pid, card_id=c.id)
            for c in player.hand if c.free_action != FreeActionType.UNDEFINED
        )
        actions.append(BuyCardAction(player_id=pid))
        actions.extend(BuyCardAction(player_id=pid, card_id=c.id) for c in game.decks.card_row)
        actions.extend(
            TradeResourcesAction(player_id=pid, spend=spend, gain=gain)
            for spend in TRADE_RESOURCES for gain in TRADE_RESOURCES if spend != gain
        )
        actions.extend(
            AccomplishMissionAction(player_id=pid, mission_id=mission_id, requirement_id=requirement_id)
            for mission_id, requirement_id in missions.fulfillable(player)
        )
        return actions


def legal_actions(game: Game, queue: InteractionQueue | None = None) -> list[BaseAction]:
    """
    Convenience function to get legal actions.

    Creates an ActionGenerator and generates actions.
    """
    return ActionGenerator().generate(game, queue)


def is_legal(game: Game, action: BaseAction, queue: InteractionQueue | None = None) -> bool:
    """Check if a specific action is legal."""
    return any(a.to_dict() == action.to_dict() for a in legal_actions(game, queue))
