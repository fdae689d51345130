"""
Interaction Resolver - Applies a player's choice to the current interaction.

Every InteractionType has exactly one handler; the table is checked when the
module is imported. A handler validates the choice against the state's own
constraints, delegates the game effect to the owning system and reports what
is left of the state:

- the same variant with advanced counters (one more card reserved, one
  movement spent) replaces the current state
- None pops it, so the next queued state (or IDLE) becomes current

States spawned by the resolution are pushed in front of the queue, and any
bonus earned is resolved through the BonusResolver before returning.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable

from .bonus import Bonus
from .bonus_resolver import BonusContext, BonusResolver
from .enums import LifeTraceType, SectorType
from .interaction import (
    DECLINABLE, InteractionQueue, InteractionState, InteractionType, MovingProbe,
    SelectingScanSector,
)
from .results import StepResult
from .state import Game
from .systems import cards, computer, milestones, missions, probes, resources, scan, species, technology

logger = logging.getLogger(__name__)


class InteractionError(ValueError):
    """A choice the current interaction cannot accept."""


@dataclass
class Choice:
    """A player's answer to the current interaction."""
    card_ids: list[str] = field(default_factory=list)
    target_id: str | None = None
    option: str | None = None
    decline: bool = False
    params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Choice:
        return cls(
            card_ids=list(data.get("card_ids") or data.get("cardIds") or []),
            target_id=data.get("target_id", data.get("targetId")),
            option=data.get("option"),
            decline=bool(data.get("decline", False)),
            params=dict(data.get("params") or {}),
        )


Outcome = tuple[StepResult, InteractionState | None]
Handler = Callable[[Game, InteractionState, Choice, str], Outcome]

_LOCATIONS = {"triangle": species.TRIANGLE, "species": species.SPECIES_TRACK}
_TRACE_COLORS = {c.name.lower(): c for c in LifeTraceType}


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise InteractionError(message)


def _int_param(choice: Choice, *names: str) -> int:
    for name in names:
        if name in choice.params and choice.params[name] is not None:
            try:
                return int(choice.params[name])
            except (TypeError, ValueError):
                raise InteractionError(f"Paramètre invalide: {name}") from None
    raise InteractionError(f"Paramètre manquant: {names[0]}")


class InteractionResolver:
    """Stateless; the engine owns the queue it updates."""

    def __init__(self, bonus_resolver: BonusResolver | None = None):
        self.bonus_resolver = bonus_resolver or BonusResolver()
        self._handlers: dict[InteractionType, Handler] = {
            InteractionType.IDLE: self._idle,
            InteractionType.RESERVING_CARD: self._reserving_card,
            InteractionType.DISCARDING_CARD: self._discarding_card,
            InteractionType.TRADING_CARD: self._trading_card,
            InteractionType.ACQUIRING_CARD: self._acquiring_card,
            InteractionType.MOVING_PROBE: self._moving_probe,
            InteractionType.LANDING_PROBE: self._landing_probe,
            InteractionType.ACQUIRING_TECH: self._acquiring_tech,
            InteractionType.SELECTING_COMPUTER_SLOT: self._selecting_computer_slot,
            InteractionType.ANALYZING: self._analyzing,
            InteractionType.PLACING_LIFE_TRACE: self._placing_life_trace,
            InteractionType.PLACING_OBJECTIVE_MARKER: self._placing_objective_marker,
            InteractionType.SELECTING_SCAN_CARD: self._selecting_scan_card,
            InteractionType.SELECTING_SCAN_SECTOR: self._selecting_scan_sector,
            InteractionType.CHOOSING_MEDIA_OR_MOVE: self._choosing_media_or_move,
            InteractionType.CHOOSING_OBS2_ACTION: self._choosing_obs2,
            InteractionType.CHOOSING_OBS3_ACTION: self._choosing_obs3,
            InteractionType.CHOOSING_OBS4_ACTION: self._choosing_obs4,
            InteractionType.DISCARDING_FOR_SIGNAL: self._discarding_for_signal,
            InteractionType.REMOVING_ORBITER: self._removing_orbiter,
            InteractionType.REMOVING_LANDER: self._removing_lander,
            InteractionType.CHOOSING_BONUS_ACTION: self._choosing_bonus_action,
            InteractionType.RESOLVING_SECTOR: self._resolving_sector,
            InteractionType.TRIGGER_CARD_EFFECT: self._trigger_card_effect,
            InteractionType.DRAW_AND_SCAN: self._draw_and_scan,
            InteractionType.CLAIMING_MISSION_REQUIREMENT: self._claiming_mission_requirement,
            InteractionType.ACQUIRING_ALIEN_CARD: self._acquiring_alien_card,
            InteractionType.CHOOSING_CENTAURIEN_REWARD: self._choosing_centaurien_reward,
        }

    @staticmethod
    def owner(game: Game, state: InteractionState) -> str:
        """The player expected to answer `state`."""
        return getattr(state, "player_id", None) or game.current_player.id

    def resolve(self, game: Game, queue: InteractionQueue, choice: Choice,
                player_id: str | None = None) -> StepResult:
        """
        Resolve the current interaction of `queue` with `choice`.

        The queue is updated in place; the returned result's `interactions`
        lists the states that were pushed.
        """
        state = queue.current
        if state.type == InteractionType.IDLE:
            raise InteractionError("Aucune interaction en attente")
        owner = self.owner(game, state)
        if player_id is not None and player_id != owner:
            raise InteractionError(f"L'interaction en cours appartient à {owner}")
        if choice.decline and state.type not in DECLINABLE:
            raise InteractionError(f"{state.type.value} ne peut pas être refusée")

        sequence_id = state.sequence_id or ""
        try:
            step, remaining = self._handlers[state.type](game, state, choice, owner)
        except InteractionError:
            raise
        except ValueError as exc:
            raise InteractionError(str(exc)) from exc

        step = self._settle(step, owner, sequence_id)
        spawned = [s.with_sequence(state.sequence_id) for s in step.interactions]
        if remaining is None:
            queue.pop()
        else:
            queue.replace_current(remaining)
        queue.push_all(spawned)
        step.interactions = spawned
        logger.debug("Resolved %s for %s (%d spawned)", state.type.value, owner, len(spawned))
        return step

    def _settle(self, step: StepResult, player_id: str, sequence_id: str) -> StepResult:
        """Resolve the bonus a handler earned."""
        if step.bonus is None or step.bonus.is_empty():
            return step
        resolution = self.bonus_resolver.resolve(
            step.bonus, step.game, step.bonus_player_id or player_id,
            BonusContext(sequence_id, step.bonus.source_card_id),
        )
        return StepResult(
            game=resolution.game,
            history_entries=step.history_entries + resolution.history_entries,
            interactions=step.interactions + resolution.interactions,
        )

    # ========================================================================
    # Cards
    # ========================================================================

    def _idle(self, game, state, choice, player_id):
        raise InteractionError("Aucune interaction en attente")

    def _card_batch(self, state, choice) -> list[str]:
        _require(bool(choice.card_ids), "Aucune carte sélectionnée")
        remaining = state.count - len(state.selected_cards)
        _require(len(choice.card_ids) <= remaining, f"Trop de cartes sélectionnées (maximum {remaining})")
        _require(len(set(choice.card_ids)) == len(choice.card_ids), "Carte sélectionnée deux fois")
        return list(choice.card_ids)

    @staticmethod
    def _advance_selection(game: Game, state, player_id: str, card_ids: list[str]):
        selected = tuple(state.selected_cards) + tuple(card_ids)
        hand = game.get_player(player_id).hand
        if len(selected) >= state.count or not hand:
            return None
        return replace(state, selected_cards=selected)

    def _reserving_card(self, game, state, choice, player_id):
        card_ids = self._card_batch(state, choice)
        result = StepResult(game)
        for card_id in card_ids:
            result = result.then(cards.reserve_card(result.game, player_id, card_id, state.sequence_id or ""))
        return result, self._advance_selection(result.game, state, player_id, card_ids)

    def _discarding_card(self, game, state, choice, player_id):
        card_ids = self._card_batch(state, choice)
        result = cards.discard_cards(game, player_id, card_ids, state.sequence_id or "")
        return result, self._advance_selection(result.game, state, player_id, card_ids)

    def _trading_card(self, game, state, choice, player_id):
        _require(len(choice.card_ids) == state.count, f"Sélectionnez exactement {state.count} cartes")
        return resources.trade(game, player_id, "card", state.target_gain, choice.card_ids,
                               state.sequence_id or ""), None

    def _acquiring_card(self, game, state, choice, player_id):
        if choice.decline:
            _require(not cards.cards_available(game, state.is_free),
                     "Une carte est disponible; le choix est obligatoire")
            result = StepResult(game)
            result.log("ne peut piocher aucune carte (pioche vide)", player_id, state.sequence_id or "")
            return result, None
        source = choice.target_id or cards.DECK
        result = cards.acquire_card(game, player_id, source, state.is_free, state.trigger_free_action,
                                    state.sequence_id or "")
        remaining = None
        if state.count > 1 and cards.cards_available(result.game, state.is_free):
            remaining = replace(state, count=state.count - 1)
        return result, remaining

    def _discarding_for_signal(self, game, state, choice, player_id):
        card_ids = self._card_batch(state, choice)
        player = game.get_player(player_id)
        colors = []
        for card_id in card_ids:
            card = player.get_card(card_id)
            _require(card is not None, f"Carte non trouvée: {card_id}")
            colors.append((card, card.scan_sector))
        result = cards.discard_cards(game, player_id, card_ids, state.sequence_id or "")
        for card, color in colors:
            result.interactions.append(SelectingScanSector(
                color=color, card_id=card.id,
                message=f"Marquez un signal dans un secteur {color.value} (Carte \"{card.name}\")",
            ))
        return result, self._advance_selection(result.game, state, player_id, card_ids)

    # ========================================================================
    # Probes
    # ========================================================================

    def _moving_probe(self, game, state, choice, player_id):
        if choice.decline:
            result = StepResult(game)
            result.log("renonce à ses déplacements gratuits", player_id, state.sequence_id or "")
            return result, None
        probe_id = choice.target_id or state.auto_select_probe_id
        _require(probe_id is not None, "Sonde requise")
        disk = choice.params.get("disk", choice.params.get("ring"))
        _require(disk is not None, "Paramètre manquant: disk")
        target = (str(disk), _int_param(choice, "sector"))
        result = probes.move_probe(game, player_id, probe_id, target, free_movements=1,
                                   sequence_id=state.sequence_id or "")
        remaining = replace(state, count=state.count - 1, auto_select_probe_id=probe_id) if state.count > 1 else None
        return result, remaining

    def _landing_probe(self, game, state, choice, player_id):
        if choice.decline:
            return StepResult(game), None
        _require(choice.target_id is not None, "Sonde requise")
        result = probes.land_probe(
            game, player_id, choice.target_id, choice.params.get("satellite_id"), free=True,
            ignore_satellite_limit=state.ignore_satellite_limit, sequence_id=state.sequence_id or "",
        )
        remaining = replace(state, count=state.count - 1) if state.count > 1 else None
        return result, remaining

    def _removing_orbiter(self, game, state, choice, player_id):
        _require(choice.target_id is not None, "Sonde requise")
        return probes.remove_orbiter(game, player_id, choice.target_id, state.sequence_id or ""), None

    def _removing_lander(self, game, state, choice, player_id):
        _require(choice.target_id is not None, "Sonde requise")
        return probes.remove_lander(game, player_id, choice.target_id, state.sequence_id or ""), None

    # ========================================================================
    # Technologies & computer
    # ========================================================================

    def _acquiring_tech(self, game, state, choice, player_id):
        available = technology.available_for(game, player_id, state.category, state.shared_only)
        if choice.decline:
            _require(not available, "Une technologie est disponible; le choix est obligatoire")
            result = StepResult(game)
            result.log("ne peut acquérir aucune technologie", player_id, state.sequence_id or "")
            return result, None
        _require(any(t.id == choice.target_id for t in available),
                 f"Technologie non disponible: {choice.target_id}")
        column = choice.params.get("column")
        result = technology.acquire_technology(
            game, player_id, choice.target_id, int(column) if column is not None else None,
            no_tile_bonus=state.no_tile_bonus, sequence_id=state.sequence_id or "",
        )
        return result, None

    def _selecting_computer_slot(self, game, state, choice, player_id):
        column = _int_param(choice, "column")
        game = game.clone()
        player = game.get_player(player_id)
        tech = next((t for t in player.technologies if t.id == state.tech_id), None)
        _require(tech is not None, f"Technologie non possédée: {state.tech_id}")
        computer.assign_technology(player, tech, column)
        result = StepResult(game)
        result.log(f"installe {tech.name} sur la colonne {column}", player_id, state.sequence_id or "")
        return result, None

    def _analyzing(self, game, state, choice, player_id):
        return computer.analyze_data(game, player_id, state.sequence_id or ""), None

    # ========================================================================
    # Life traces & objectives
    # ========================================================================

    def _placing_life_trace(self, game, state, choice, player_id):
        color = state.color
        if color == LifeTraceType.ANY:
            color = _TRACE_COLORS.get(str(choice.params.get("color", "")).lower(), LifeTraceType.ANY)
            _require(color != LifeTraceType.ANY, "Couleur de trace requise")
        location = _LOCATIONS.get(choice.option or species.TRIANGLE)
        _require(location is not None, f"Emplacement inconnu: {choice.option}")
        board_index = _int_param(choice, "board_index")
        slot_index = choice.params.get("slot_index")
        ok, reason = species.can_place_life_trace(
            game, board_index, color, player_id, location,
            int(slot_index) if slot_index is not None else None,
        )
        _require(ok, reason)
        result = species.place_life_trace(
            game, board_index, color, player_id, location,
            int(slot_index) if slot_index is not None else None, state.sequence_id or "",
        )
        return result, None

    def _placing_objective_marker(self, game, state, choice, player_id):
        _require(choice.target_id is not None, "Tuile objectif requise")
        ok, reason = milestones.can_place_objective_marker(game, player_id, choice.target_id)
        _require(ok, reason)
        return milestones.place_objective_marker(game, player_id, choice.target_id, state.sequence_id or ""), None

    # ========================================================================
    # Scanning
    # ========================================================================

    def _selecting_scan_card(self, game, state, choice, player_id):
        game = game.clone()
        card = next((c for c in game.decks.card_row if c.id == choice.target_id), None)
        _require(card is not None, f"Carte absente de la rangée: {choice.target_id}")
        game.decks.card_row.remove(card)
        game.decks.discard_pile.append(card)
        cards.refill_row(game)
        result = StepResult(game)
        result.log(f"défausse \"{card.name}\" de la rangée pour un signal", player_id, state.sequence_id or "")
        result.interactions.append(SelectingScanSector(
            color=card.scan_sector, card_id=card.id,
            message=f"Marquez un signal dans un secteur {card.scan_sector.value} (Carte \"{card.name}\")",
        ))
        return result, None

    def _selecting_scan_sector(self, game, state, choice, player_id):
        sector_id = choice.target_id
        eligible = scan.eligible_sectors(game, player_id, state)
        sector = next((s for s in eligible if s.id == sector_id), None)
        _require(sector is not None, f"Secteur non éligible: {sector_id}")
        seq = state.sequence_id or ""
        result = scan.signal_and_cover(game, player_id, sector.id, state.no_data, seq)

        if state.mark_adjacents:
            for index in probes.solar_geometry(game).adjacent_sectors(sector.index):
                adjacent = result.game.board.sector_at(index)
                settled = self._chain_bonus(result, player_id, seq)
                result = settled.then(
                    scan.signal_and_cover(settled.game, player_id, adjacent.id, state.no_data, seq))

        if state.keep_card_if_only and state.card_id:
            game = result.game
            if (game.board.get_sector(sector.id).marked_by(player_id) == 1
                    and any(c.id == state.card_id for c in game.decks.discard_pile)):
                settled = self._chain_bonus(result, player_id, seq)
                result = settled.then(
                    cards.recover_from_discard(settled.game, player_id, state.card_id, seq))
        return result, None

    def _chain_bonus(self, step: StepResult, player_id: str, sequence_id: str) -> StepResult:
        # then() only merges bonuses of the same player
        return self._settle(step, player_id, sequence_id)

    def _choosing_media_or_move(self, game, state, choice, player_id):
        result = StepResult(game)
        remaining = replace(state, remaining_moves=state.remaining_moves - 1) if state.remaining_moves > 0 else None
        if choice.decline:
            return result, None
        if choice.option == "media":
            result.add_bonus(Bonus(media=1))
        elif choice.option == "move":
            result.interactions.append(MovingProbe(count=1))
        else:
            raise InteractionError(f"Option inconnue: {choice.option}")
        return result, remaining

    def _choosing_obs2(self, game, state, choice, player_id):
        """Observation II: 1 media for a signal in Mercury's sector."""
        if choice.decline:
            return StepResult(game), None
        player = game.get_player(player_id)
        _require(player.media >= 1, "Médias insuffisants (Requis: 1)")
        sector = scan.sector_for_scope(game, SectorType.MERCURY)
        _require(sector is not None, "Secteur de Mercure introuvable")
        game = game.clone()
        game.get_player(player_id).media -= 1
        result = StepResult(game)
        result.log("paye 1 Média pour un signal sur Mercure", player_id, state.sequence_id or "")
        return result.then(scan.signal_and_cover(game, player_id, sector.id, sequence_id=state.sequence_id or "")), None

    def _choosing_obs3(self, game, state, choice, player_id):
        """Observation III: discard a card for a signal of its color."""
        if choice.decline:
            return StepResult(game), None
        _require(len(choice.card_ids) == 1, "Sélectionnez une carte")
        card = game.get_player(player_id).get_card(choice.card_ids[0])
        _require(card is not None, f"Carte non trouvée: {choice.card_ids[0]}")
        result = cards.discard_cards(game, player_id, [card.id], state.sequence_id or "")
        result.interactions.append(SelectingScanSector(
            color=card.scan_sector, card_id=card.id,
            message=f"Marquez un signal dans un secteur {card.scan_sector.value} (Carte \"{card.name}\")",
        ))
        return result, None

    def _choosing_obs4(self, game, state, choice, player_id):
        """Observation IV: 1 energy for a probe launch, or one free movement."""
        if choice.decline:
            return StepResult(game), None
        if choice.option == "probe":
            player = game.get_player(player_id)
            _require(player.energy >= 1, "Énergie insuffisante (nécessite 1)")
            ok, reason = probes.can_launch(player, free=True)
            _require(ok, reason)
            game = game.clone()
            game.get_player(player_id).energy -= 1
            step, _ = probes.launch_probe(game, player_id, free=True, sequence_id=state.sequence_id or "")
            return step, None
        if choice.option == "move":
            result = StepResult(game)
            result.interactions.append(MovingProbe(count=1))
            return result, None
        raise InteractionError(f"Option inconnue: {choice.option}")

    def _resolving_sector(self, game, state, choice, player_id):
        result, winner = scan.cover_sector(game, player_id, state.sector_id, state.sequence_id or "")
        logger.debug("Sector %s resolved, winner %s", state.sector_id, winner)
        return result, None

    def _draw_and_scan(self, game, state, choice, player_id):
        game = game.clone()
        result = StepResult(game)
        for _ in range(state.count):
            card = cards.reveal_deck_card(game)
            if card is None:
                result.log("ne peut pas révéler de carte (pioche vide)", player_id, state.sequence_id or "")
                break
            result.log(f"révèle \"{card.name}\" de la pioche", player_id, state.sequence_id or "")
            result.interactions.append(SelectingScanSector(
                color=card.scan_sector, card_id=card.id,
                message=f"Marquez un signal dans un secteur {card.scan_sector.value} (Carte \"{card.name}\")",
            ))
        return result, None

    # ========================================================================
    # Cards in play
    # ========================================================================

    def _choosing_bonus_action(self, game, state, choice, player_id):
        if "index" in choice.params:
            index = _int_param(choice, "index")
        else:
            index = next((i for i, c in enumerate(state.choices) if c.id == choice.target_id), -1)
        _require(0 <= index < len(state.choices), f"Choix invalide: {index}")
        picked = state.choices[index]
        _require(not picked.done, "Ce bonus a déjà été résolu")

        choices = tuple(replace(c, done=True) if i == index else c for i, c in enumerate(state.choices))
        wrapper = replace(state, choices=choices)
        result = StepResult(game)
        result.interactions.append(picked.state)
        return result, None if wrapper.all_done else wrapper

    def _trigger_card_effect(self, game, state, choice, player_id):
        _require(state.effect_type == "SCORE_PER_MEDIA", f"Effet inconnu: {state.effect_type}")
        player = game.get_player(player_id)
        return StepResult(game, bonus=Bonus(pv=state.value * player.media)), None

    def _claiming_mission_requirement(self, game, state, choice, player_id):
        return missions.accomplish_requirement(
            game, player_id, state.mission_id, state.requirement_id or None, state.sequence_id or ""), None

    def _acquiring_alien_card(self, game, state, choice, player_id):
        species_id = state.species_id or choice.params.get("species_id")
        _require(species_id is not None, "Espèce requise")
        result = species.acquire_alien_card(game, player_id, species_id, choice.target_id or "deck",
                                            state.sequence_id or "")
        remaining = replace(state, count=state.count - 1) if state.count > 1 else None
        return result, remaining

    def _choosing_centaurien_reward(self, game, state, choice, player_id):
        index = _int_param(choice, "index")
        return species.claim_centaurien_reward(game, player_id, index, state.sequence_id or ""), None


_missing = set(InteractionType) - set(InteractionResolver()._handlers)
if _missing:
    raise RuntimeError(f"Interaction types without a handler: {sorted(t.value for t in _missing)}")
