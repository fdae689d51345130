"""
Bonus Resolver - Turns a Bonus into state changes and pending interactions.

A Bonus is resolved component by component, in declaration order:
- Scalars (pv, credits, energy, media, data, token) are applied at once,
  media capped at 10 and data at 6
- Rotations, free probe launches, targeted signals and free scans resolve
  immediately through the systems, and whatever they earn is resolved in turn
- Every choice-bearing component becomes an InteractionState

When two or more components need the player's input, their states are
wrapped in a single CHOOSING_BONUS_ACTION so the player picks the order.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Callable

from .bonus import Bonus, format_bonus, format_resource
from .constants import MAX_DATA
from .enums import COLOR_SECTORS, PLANET_SCOPES, STAR_SCOPES, SectorType, TechnologyCategory
from .interaction import (
    AcquiringAlienCard, AcquiringCard, AcquiringTech, BonusChoice, ChoosingBonusAction,
    ChoosingMediaOrMove, DiscardingForSignal, InteractionState, InteractionType, LandingProbe,
    MovingProbe, PlacingLifeTrace, RemovingOrbiter, ReservingCard, SelectingScanCard,
    SelectingScanSector, TriggerCardEffect,
)
from .results import BonusResolution, StepResult
from .state import Game
from .systems.cards import cards_available, recover_from_discard, reveal_deck_card
from .systems.probes import can_launch, launch_probe, rotate_solar_system
from .systems.resources import add_data, add_media
from .systems.scan import perform_scan_action, sector_for_scope, signal_and_cover

logger = logging.getLogger(__name__)

# Follow-ups of an automatic step; never offered as an ordering choice
_CONSEQUENCES = frozenset({InteractionType.RESOLVING_SECTOR})

CHOICE_LABELS = {
    InteractionType.ACQUIRING_CARD: "Prendre une carte",
    InteractionType.RESERVING_CARD: "Réserver une carte",
    InteractionType.ACQUIRING_TECH: "Acquérir une technologie",
    InteractionType.MOVING_PROBE: "Déplacer une sonde",
    InteractionType.LANDING_PROBE: "Poser une sonde",
    InteractionType.PLACING_LIFE_TRACE: "Placer une trace de vie",
    InteractionType.SELECTING_SCAN_SECTOR: "Marquer un signal",
    InteractionType.SELECTING_SCAN_CARD: "Marquer un signal (rangée)",
    InteractionType.ACQUIRING_ALIEN_CARD: "Prendre une carte Alien",
    InteractionType.TRIGGER_CARD_EFFECT: "Appliquer l'effet de la carte",
    InteractionType.CHOOSING_MEDIA_OR_MOVE: "Média ou déplacement",
    InteractionType.REMOVING_ORBITER: "Retirer un orbiteur",
    InteractionType.DISCARDING_FOR_SIGNAL: "Défausser pour un signal",
}


@dataclass
class BonusContext:
    """Where a bonus comes from: the action's sequence id and source card."""
    sequence_id: str = ""
    source_id: str | None = None


class BonusResolver:
    """
    Applies bonuses. Stateless; every call returns a BonusResolution.

    The input game is never mutated.
    """

    def resolve(self, bonus: Bonus | None, game: Game, player_id: str,
                context: BonusContext | None = None) -> BonusResolution:
        context = context or BonusContext()
        if bonus is None or bonus.is_empty():
            return BonusResolution(game)
        if game.get_player(player_id) is None:
            raise ValueError(f"Joueur introuvable: {player_id}")

        source_id = bonus.source_card_id or context.source_id
        context = BonusContext(context.sequence_id, source_id)
        resolution = BonusResolution(game.clone())
        groups: list[list[InteractionState]] = []

        steps: list[Callable[[BonusResolution, Bonus, str, BonusContext], list[InteractionState]]] = [
            self._apply_scalars,
            self._apply_rotation,
            self._apply_card,
            self._apply_probes,
            self._apply_signals,
            self._apply_scan,
            self._apply_anycard,
            self._apply_reservation,
            self._apply_technologies,
            self._apply_movements,
            self._apply_landing,
            self._apply_lifetraces,
            self._apply_species_card,
            self._apply_score_per_media,
            self._apply_reveal_free_action,
            self._apply_media_or_move,
            self._apply_atmospheric_entry,
            self._apply_signal_from_hand,
        ]
        for step in steps:
            produced = step(resolution, bonus, player_id, context)
            if produced:
                groups.append([s.with_sequence(context.sequence_id) for s in produced])

        resolution.interactions = self._sequence(groups, bonus, context)
        return resolution

    # ------------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------------

    def _sequence(self, groups: list[list[InteractionState]], bonus: Bonus,
                  context: BonusContext) -> list[InteractionState]:
        consequences = [s for g in groups for s in g if s.type in _CONSEQUENCES]
        choosable = [[s for s in g if s.type not in _CONSEQUENCES] for g in groups]
        choosable = [g for g in choosable if g]
        if len(choosable) < 2:
            return consequences + [s for g in choosable for s in g]

        states = [s for g in choosable for s in g]
        choices = tuple(
            BonusChoice(id=f"choice_{index}", label=CHOICE_LABELS.get(state.type, state.type.value), state=state)
            for index, state in enumerate(states)
        )
        wrapper = ChoosingBonusAction(
            sequence_id=context.sequence_id or None,
            bonuses_summary=format_bonus(bonus),
            choices=choices,
        )
        logger.debug("Wrapped %d bonus interactions", len(choices))
        return consequences + [wrapper]

    def _absorb(self, resolution: BonusResolution, step: StepResult, player_id: str,
                context: BonusContext) -> list[InteractionState]:
        """Adopt a system step and resolve whatever it earned."""
        resolution.game = step.game
        resolution.history_entries.extend(step.history_entries)
        interactions = list(step.interactions)
        if step.bonus is not None and not step.bonus.is_empty():
            nested = self.resolve(step.bonus, step.game, step.bonus_player_id or player_id, context)
            resolution.game = nested.game
            resolution.history_entries.extend(nested.history_entries)
            resolution.launched_probe_ids.extend(nested.launched_probe_ids)
            interactions.extend(nested.interactions)
        return interactions

    # ------------------------------------------------------------------------
    # Immediate components
    # ------------------------------------------------------------------------

    def _apply_scalars(self, resolution, bonus, player_id, context):
        player = resolution.game.get_player(player_id)
        gains = []
        if bonus.pv:
            player.score += bonus.pv
            gains.append(format_resource(bonus.pv, "pv"))
        if bonus.credits:
            player.credits += bonus.credits
            gains.append(format_resource(bonus.credits, "credits"))
        if bonus.energy:
            player.energy += bonus.energy
            gains.append(format_resource(bonus.energy, "energy"))
        if bonus.media:
            gained = add_media(player, bonus.media)
            gains.append(format_resource(bonus.media, "media"))
            if gained < bonus.media:
                logger.debug("Media capped for %s (%d of %d)", player_id, gained, bonus.media)
        if bonus.data:
            gained = add_data(player, bonus.data)
            gains.append(format_resource(bonus.data, "data"))
            if gained < bonus.data:
                resolution.log(f"ne peut pas stocker plus de {MAX_DATA} Données", player_id, context.sequence_id)
        if bonus.token:
            player.tokens = max(0, player.tokens + bonus.token)
            gains.append(format_resource(bonus.token, "token"))
        if gains:
            resolution.log(f"gagne {', '.join(gains)}", player_id, context.sequence_id)
        return []

    def _apply_rotation(self, resolution, bonus, player_id, context):
        interactions = []
        for _ in range(bonus.rotation):
            step = rotate_solar_system(resolution.game, player_id, context.sequence_id)
            interactions.extend(self._absorb(resolution, step, player_id, context))
        return interactions

    def _apply_probes(self, resolution, bonus, player_id, context):
        interactions = []
        for _ in range(bonus.probe):
            player = resolution.game.get_player(player_id)
            ok, reason = can_launch(player, free=True, ignore_limit=bonus.ignore_probe_limit)
            if not ok:
                resolution.log(f"ne peut pas lancer de sonde ({reason})", player_id, context.sequence_id)
                continue
            step, probe_id = launch_probe(
                resolution.game, player_id, free=True,
                ignore_limit=bonus.ignore_probe_limit, sequence_id=context.sequence_id,
            )
            resolution.launched_probe_ids.append(probe_id)
            interactions.extend(self._absorb(resolution, step, player_id, context))
        return interactions

    def _apply_signals(self, resolution, bonus, player_id, context):
        seq = context.sequence_id or None
        interactions: list[InteractionState] = []
        for grant in bonus.signals:
            for _ in range(grant.amount):
                scope = grant.scope
                if scope in PLANET_SCOPES or scope in STAR_SCOPES:
                    sector = sector_for_scope(resolution.game, scope)
                    if sector is None:
                        resolution.log(f"ne trouve aucun secteur pour {scope.value}", player_id, context.sequence_id)
                        continue
                    step = signal_and_cover(resolution.game, player_id, sector.id, bonus.no_data, context.sequence_id)
                    interactions.extend(self._absorb(resolution, step, player_id, context))
                elif scope == SectorType.ROW:
                    interactions.append(SelectingScanCard(sequence_id=seq))
                elif scope == SectorType.DECK:
                    interactions.extend(self._deck_signal(resolution, player_id, context))
                elif scope == SectorType.PROBE:
                    interactions.extend(self._probe_signal(resolution, bonus, player_id, context))
                elif scope in COLOR_SECTORS or scope == SectorType.ANY:
                    interactions.append(SelectingScanSector(
                        sequence_id=seq, color=scope, no_data=bonus.no_data,
                        mark_adjacents=bonus.gain_signal_adjacents,
                    ))
        return interactions

    def _deck_signal(self, resolution, player_id, context):
        game = resolution.game.clone()
        card = reveal_deck_card(game)
        if card is None:
            resolution.log("ne peut pas révéler de carte (pioche vide)", player_id, context.sequence_id)
            return []
        resolution.game = game
        resolution.log(f"révèle \"{card.name}\" de la pioche", player_id, context.sequence_id)
        return [SelectingScanSector(
            sequence_id=context.sequence_id or None, color=card.scan_sector, card_id=card.id,
            message=f"Marquez un signal dans un secteur {card.scan_sector.value} (Carte \"{card.name}\")",
        )]

    def _probe_signal(self, resolution, bonus, player_id, context):
        player = resolution.game.get_player(player_id)
        probes = [p for p in player.probes_in_system() if p.sector is not None]
        if len(probes) != 1:
            return [SelectingScanSector(
                sequence_id=context.sequence_id or None, color=SectorType.PROBE, no_data=bonus.no_data,
                only_probes=True, any_probe=bonus.any_probe,
                keep_card_if_only=bonus.keep_card_if_only, card_id=context.source_id,
            )]

        sector = resolution.game.board.sector_at(probes[0].sector)
        step = signal_and_cover(resolution.game, player_id, sector.id, bonus.no_data, context.sequence_id)
        interactions = self._absorb(resolution, step, player_id, context)
        if bonus.keep_card_if_only and context.source_id:
            self._keep_source_card(resolution, player_id, sector.id, context)
        return interactions

    def _keep_source_card(self, resolution, player_id, sector_id, context):
        """Return the source card to hand when it is the player's only signal there."""
        game = resolution.game
        sector = game.board.get_sector(sector_id)
        if sector.marked_by(player_id) != 1:
            return
        if not any(c.id == context.source_id for c in game.decks.discard_pile):
            return
        step = recover_from_discard(game, player_id, context.source_id, context.sequence_id)
        self._absorb(resolution, step, player_id, context)

    def _apply_scan(self, resolution, bonus, player_id, context):
        interactions = []
        for _ in range(bonus.scan):
            step = perform_scan_action(resolution.game, player_id, is_bonus=True, sequence_id=context.sequence_id)
            interactions.extend(self._absorb(resolution, step, player_id, context))
        return interactions

    # ------------------------------------------------------------------------
    # Interactive components
    # ------------------------------------------------------------------------

    def _apply_card(self, resolution, bonus, player_id, context):
        if not bonus.card:
            return []
        return self._card_pick(resolution, bonus.card, False, player_id, context)

    def _apply_anycard(self, resolution, bonus, player_id, context):
        if not bonus.anycard:
            return []
        return self._card_pick(resolution, bonus.anycard, True, player_id, context)

    def _card_pick(self, resolution, amount, is_free, player_id, context):
        count = min(amount, cards_available(resolution.game, is_free))
        if count <= 0:
            resolution.log("ne peut piocher aucune carte (pioche vide)", player_id, context.sequence_id)
            return []
        return [AcquiringCard(count=count, is_free=is_free)]

    def _apply_reservation(self, resolution, bonus, player_id, context):
        if not bonus.reservation:
            return []
        count = min(bonus.reservation, len(resolution.game.get_player(player_id).hand))
        if count <= 0:
            resolution.log("n'a aucune carte à réserver", player_id, context.sequence_id)
            return []
        return [ReservingCard(count=count)]

    def _apply_technologies(self, resolution, bonus, player_id, context):
        states = []
        for grant in bonus.technologies:
            category = None if grant.scope == TechnologyCategory.ANY else grant.scope
            for _ in range(grant.amount):
                states.append(AcquiringTech(
                    is_bonus=True, category=category,
                    shared_only=bonus.shared_only, no_tile_bonus=bonus.no_tile_bonus,
                ))
        return states

    def _apply_movements(self, resolution, bonus, player_id, context):
        if not bonus.movements:
            return []
        last = resolution.launched_probe_ids[-1] if resolution.launched_probe_ids else None
        resolution.log(f"obtient {bonus.movements} déplacement(s) gratuit(s)", player_id, context.sequence_id)
        return [MovingProbe(count=bonus.movements, auto_select_probe_id=last)]

    def _apply_landing(self, resolution, bonus, player_id, context):
        if not bonus.landing:
            return []
        resolution.log(f"obtient {bonus.landing} atterrissage", player_id, context.sequence_id)
        return [LandingProbe(count=bonus.landing, source=context.source_id,
                             ignore_satellite_limit=bonus.ignore_satellite_limit)]

    def _apply_lifetraces(self, resolution, bonus, player_id, context):
        return [
            PlacingLifeTrace(color=grant.scope, player_id=player_id)
            for grant in bonus.lifetraces
            for _ in range(grant.amount)
        ]

    def _apply_species_card(self, resolution, bonus, player_id, context):
        if not bonus.species_card:
            return []
        return [AcquiringAlienCard(count=bonus.species_card, species_id=bonus.species_id)]

    def _apply_score_per_media(self, resolution, bonus, player_id, context):
        if not bonus.score_per_media:
            return []
        return [TriggerCardEffect(effect_type="SCORE_PER_MEDIA", value=bonus.score_per_media)]

    def _apply_reveal_free_action(self, resolution, bonus, player_id, context):
        if not bonus.reveal_and_trigger_free_action:
            return []
        return [AcquiringCard(count=1, is_free=True, trigger_free_action=True)]

    def _apply_media_or_move(self, resolution, bonus, player_id, context):
        return [ChoosingMediaOrMove()] if bonus.choice_media_or_move else []

    def _apply_atmospheric_entry(self, resolution, bonus, player_id, context):
        return [RemovingOrbiter()] if bonus.atmospheric_entry else []

    def _apply_signal_from_hand(self, resolution, bonus, player_id, context):
        if not bonus.gain_signal_from_hand:
            return []
        return [DiscardingForSignal(count=bonus.gain_signal_from_hand)]
