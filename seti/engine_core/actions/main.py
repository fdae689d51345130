"""
Main actions - One per turn.
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..constants import ANALYZE_COST_ENERGY, TECH_RESEARCH_COST_MEDIA
from ..interaction import AcquiringTech
from ..results import StepResult
from ..state import Game
from ..systems import cards, computer, probes, scan, technology, turns
from .base import ActionType, BaseAction, ValidationResult


@dataclass
class LaunchProbeAction(BaseAction):
    type = ActionType.LAUNCH_PROBE

    def _validate(self, game: Game) -> ValidationResult:
        ok, reason = probes.can_launch(game.get_player(self.player_id))
        if not ok:
            return ValidationResult.fail("CANNOT_LAUNCH", reason)
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        result, _ = probes.launch_probe(game, self.player_id, sequence_id=self.sequence_id)
        return self._finish(result)


@dataclass
class OrbitAction(BaseAction):
    type = ActionType.ORBIT
    probe_id: str = ""

    def _validate(self, game: Game) -> ValidationResult:
        ok, reason = probes.can_orbit(game, self.player_id, self.probe_id)
        if not ok:
            return ValidationResult.fail("CANNOT_ORBIT", reason)
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        return self._finish(probes.orbit_probe(game, self.player_id, self.probe_id, sequence_id=self.sequence_id))

    def params(self) -> dict:
        return {"probeId": self.probe_id}


@dataclass
class LandAction(BaseAction):
    type = ActionType.LAND
    probe_id: str = ""
    satellite_id: str | None = None

    def _validate(self, game: Game) -> ValidationResult:
        ok, reason = probes.can_land(game, self.player_id, self.probe_id, self.satellite_id)
        if not ok:
            return ValidationResult.fail("CANNOT_LAND", reason)
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        return self._finish(probes.land_probe(
            game, self.player_id, self.probe_id, self.satellite_id, sequence_id=self.sequence_id))

    def params(self) -> dict:
        return {"probeId": self.probe_id, "satelliteId": self.satellite_id}


@dataclass
class ScanSectorAction(BaseAction):
    type = ActionType.SCAN_SECTOR

    def _validate(self, game: Game) -> ValidationResult:
        ok, reason = scan.can_scan(game.get_player(self.player_id))
        if not ok:
            return ValidationResult.fail("CANNOT_SCAN", reason)
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        return self._finish(scan.perform_scan_action(game, self.player_id, sequence_id=self.sequence_id))


@dataclass
class AnalyzeDataAction(BaseAction):
    type = ActionType.ANALYZE_DATA

    def _validate(self, game: Game) -> ValidationResult:
        ok, reason = computer.can_analyze(game.get_player(self.player_id))
        if not ok:
            return ValidationResult.fail("CANNOT_ANALYZE", reason)
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        result = computer.analyze_data(game, self.player_id, self.sequence_id)
        result.game.get_player(self.player_id).energy -= ANALYZE_COST_ENERGY
        return self._finish(result)


@dataclass
class PlayCardAction(BaseAction):
    type = ActionType.PLAY_CARD
    card_id: str = ""

    def _validate(self, game: Game) -> ValidationResult:
        ok, code, message = cards.can_play_card(game.get_player(self.player_id), self.card_id)
        if not ok:
            return ValidationResult.fail(code, message)
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        return self._finish(cards.play_card(game, self.player_id, self.card_id, self.sequence_id))

    def params(self) -> dict:
        return {"cardId": self.card_id}


@dataclass
class ResearchTechAction(BaseAction):
    """
    Pay 6 media, turn the solar system, then take a technology.

    Without a tech id the pick is left to an ACQUIRING_TECH interaction.
    """
    type = ActionType.RESEARCH_TECH
    tech_id: str | None = None
    column: int | None = None

    def _validate(self, game: Game) -> ValidationResult:
        ok, reason = technology.can_research(game, self.player_id, self.tech_id)
        if not ok:
            return ValidationResult.fail("CANNOT_RESEARCH", reason)
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        game = game.clone()
        game.get_player(self.player_id).media -= TECH_RESEARCH_COST_MEDIA
        result = StepResult(game)
        result.log(f"dépense {TECH_RESEARCH_COST_MEDIA} Médias pour une technologie", self.player_id, self.sequence_id)
        game = self._finish(result.then(probes.rotate_solar_system(game, self.player_id, self.sequence_id)))
        if self.tech_id is None:
            self.interactions.append(AcquiringTech(sequence_id=self.sequence_id or None))
            return game
        return self._finish(technology.acquire_technology(
            game, self.player_id, self.tech_id, self.column, sequence_id=self.sequence_id))

    def params(self) -> dict:
        return {"techId": self.tech_id, "column": self.column}


@dataclass
class PassAction(BaseAction):
    """Pass for the round, keeping at most four cards and picking a round card."""
    type = ActionType.PASS
    keep_card_ids: list[str] | None = None
    round_card_id: str | None = None

    def _validate(self, game: Game) -> ValidationResult:
        ok, code, message = turns.can_pass(game, self.player_id, self.keep_card_ids, self.round_card_id)
        if not ok:
            return ValidationResult.fail(code, message)
        return ValidationResult.ok()

    def _execute(self, game: Game) -> Game:
        return self._finish(turns.pass_turn(
            game, self.player_id, self.keep_card_ids, self.round_card_id, self.sequence_id))

    def params(self) -> dict:
        return {"keepCardIds": self.keep_card_ids, "roundCardId": self.round_card_id}


MAIN_ACTION_CLASSES = {
    cls.type: cls for cls in (
        LaunchProbeAction, OrbitAction, LandAction, ScanSectorAction, AnalyzeDataAction,
        PlayCardAction, ResearchTechAction, PassAction,
    )
}

__all__ = [
    "LaunchProbeAction", "OrbitAction", "LandAction", "ScanSectorAction", "AnalyzeDataAction",
    "PlayCardAction", "ResearchTechAction", "PassAction", "MAIN_ACTION_CLASSES",
]
