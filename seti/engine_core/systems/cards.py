"""
Cards - Deck, row, hand and play.

Design principles:
- Deterministic: an empty deck reshuffles the discard pile with an rng seeded
  from the game seed and a counter, so replays draw the same cards
- Cards move by reference between zones; templates are never mutated
- Playing a card converts its effects once: immediate effects and bonus flags
  become the returned Bonus, turn buffs and permanent triggers are registered
  on the player, missions are created for mission cards

In-place helpers (draw_into_hand, refill_row, ...) work on a Game the caller
already cloned; public operations clone and return a StepResult.
"""

from __future__ import annotations
import logging
import random

from ...effects.catalog import (
    EffectType, BONUS_FLAG_EFFECTS, TURN_BUFF_EFFECTS, SPECIAL_EFFECTS, TRIGGER_EFFECTS,
)
from ..bonus import Bonus
from ..constants import BUY_CARD_COST_MEDIA, CARD_ROW_SIZE, MAX_DATA, MAX_MEDIA_COVERAGE
from ..enums import CardType, CostType, CelestialType, FreeActionType, RevenueType
from ..geometry import geometry_for
from ..interaction import ChoosingCentaurienReward
from ..results import StepResult
from ..state import Card, Game, Player
from .missions import create_mission
from .triggers import PLAY_TRIGGERS, fire_triggers

logger = logging.getLogger(__name__)

DECK = "deck"


# ============================================================================
# Deck & row
# ============================================================================

def _reshuffle(game: Game) -> None:
    if not game.decks.discard_pile:
        return
    rng = random.Random(f"{game.seed}:{game.next_id('reshuffle')}")
    pile = list(game.decks.discard_pile)
    rng.shuffle(pile)
    game.decks.cards.extend(pile)
    game.decks.discard_pile.clear()
    logger.debug("Reshuffled %d cards into the deck", len(pile))


def _pop_deck(game: Game) -> Card | None:
    if not game.decks.cards:
        _reshuffle(game)
    if not game.decks.cards:
        return None
    return game.decks.cards.pop(0)


def draw_into_hand(game: Game, player: Player, count: int) -> list[Card]:
    """Draw up to `count` cards into the player's hand. In place."""
    drawn = []
    for _ in range(count):
        card = _pop_deck(game)
        if card is None:
            break
        player.hand.append(card)
        drawn.append(card)
    return drawn


def refill_row(game: Game) -> list[Card]:
    """Top the visible row back up to CARD_ROW_SIZE. In place."""
    added = []
    while len(game.decks.card_row) < CARD_ROW_SIZE:
        card = _pop_deck(game)
        if card is None:
            break
        game.decks.card_row.append(card)
        added.append(card)
    return added


def reveal_deck_card(game: Game) -> Card | None:
    """Flip the top deck card onto the discard pile. In place."""
    card = _pop_deck(game)
    if card is not None:
        game.decks.discard_pile.append(card)
    return card


def cards_available(game: Game, is_free: bool = False) -> int:
    """Cards a bonus pick can still take: deck and discard, plus the row for a free pick."""
    count = len(game.decks.cards) + len(game.decks.discard_pile)
    if is_free:
        count += len(game.decks.card_row)
    return count


def take_card(game: Game, player: Player, source: str) -> Card:
    """Take a row card by id, or the top deck card for 'deck'. In place."""
    if source == DECK:
        card = _pop_deck(game)
        if card is None:
            raise ValueError("La pioche est vide")
    else:
        card = next((c for c in game.decks.card_row if c.id == source), None)
        if card is None:
            raise ValueError(f"Carte absente de la rangée: {source}")
        game.decks.card_row.remove(card)
        refill_row(game)
    player.hand.append(card)
    return card


# ============================================================================
# Free actions
# ============================================================================

_FREE_ACTION_BONUSES = {
    FreeActionType.MOVEMENT: lambda: Bonus(movements=1),
    FreeActionType.DATA: lambda: Bonus(data=1),
    FreeActionType.MEDIA: lambda: Bonus(media=1),
    FreeActionType.PV_MOVEMENT: lambda: Bonus(pv=1, movements=1),
    FreeActionType.PV_DATA: lambda: Bonus(pv=1, data=1),
    FreeActionType.TWO_MEDIA: lambda: Bonus(media=2),
}

_DISCARD_TRIGGERS = {
    FreeActionType.MEDIA: EffectType.GAIN_ON_DISCARD_MEDIA,
    FreeActionType.TWO_MEDIA: EffectType.GAIN_ON_DISCARD_MEDIA,
    FreeActionType.DATA: EffectType.GAIN_ON_DISCARD_DATA,
    FreeActionType.PV_DATA: EffectType.GAIN_ON_DISCARD_DATA,
    FreeActionType.MOVEMENT: EffectType.GAIN_ON_DISCARD_MOVE,
    FreeActionType.PV_MOVEMENT: EffectType.GAIN_ON_DISCARD_MOVE,
}


def free_action_bonus(card: Card) -> Bonus:
    build = _FREE_ACTION_BONUSES.get(card.free_action)
    return build() if build else Bonus()


def discard_for_free_action(game: Game, player_id: str, card_id: str, sequence_id: str = "") -> StepResult:
    """Discard a hand card to use the free action printed on its corner."""
    game = game.clone()
    player = game.get_player(player_id)
    card = player.get_card(card_id)
    if card is None:
        raise ValueError(f"Carte non trouvée: {card_id}")
    player.hand.remove(card)
    game.decks.discard_pile.append(card)

    result = StepResult(game, bonus=free_action_bonus(card))
    result.log(f"défausse \"{card.name}\" pour son action gratuite", player_id, sequence_id)
    trigger = _DISCARD_TRIGGERS.get(card.free_action)
    if trigger is not None:
        gained, entries = fire_triggers(game, player_id, trigger, sequence_id=sequence_id)
        result.add_bonus(gained)
        result.history_entries.extend(entries)
    return result


def discard_cards(game: Game, player_id: str, card_ids: list[str], sequence_id: str = "") -> StepResult:
    game = game.clone()
    player = game.get_player(player_id)
    result = StepResult(game)
    for card_id in card_ids:
        card = player.get_card(card_id)
        if card is None:
            raise ValueError(f"Carte non trouvée: {card_id}")
        player.hand.remove(card)
        game.decks.discard_pile.append(card)
        result.log(f"défausse \"{card.name}\"", player_id, sequence_id)
    return result


def recover_from_discard(game: Game, player_id: str, card_id: str, sequence_id: str = "") -> StepResult:
    """Take a card back from the discard pile into the hand."""
    game = game.clone()
    card = next((c for c in game.decks.discard_pile if c.id == card_id), None)
    if card is None:
        raise ValueError(f"Carte absente de la défausse: {card_id}")
    game.decks.discard_pile.remove(card)
    game.get_player(player_id).hand.append(card)
    result = StepResult(game)
    result.log(f"récupère la carte \"{card.name}\" en main", player_id, sequence_id)
    return result


def trim_hand(game: Game, player_id: str, keep_ids: list[str], sequence_id: str = "") -> StepResult:
    """Discard every hand card not listed in `keep_ids`."""
    player = game.get_player(player_id)
    discarded = [c.id for c in player.hand if c.id not in keep_ids]
    return discard_cards(game, player_id, discarded, sequence_id)


# ============================================================================
# Acquisition
# ============================================================================

def acquire_card(game: Game, player_id: str, source: str, is_free: bool = False,
                 trigger_free_action: bool = False, sequence_id: str = "") -> StepResult:
    """
    Take one card granted by a bonus.

    A free pick may come from the row or the deck; otherwise only the deck.
    """
    if not is_free and source != DECK:
        raise ValueError("Seule la pioche est autorisée pour ce gain")
    game = game.clone()
    player = game.get_player(player_id)
    card = take_card(game, player, source)
    result = StepResult(game)
    origin = "de la pioche" if source == DECK else "de la rangée"
    result.log(f"prend \"{card.name}\" {origin}", player_id, sequence_id)
    if trigger_free_action:
        result.add_bonus(free_action_bonus(card))
        result.log(f"révèle \"{card.name}\" et bénéficie de son action gratuite", player_id, sequence_id)
    return result


def can_buy_card(player: Player) -> tuple[bool, str]:
    if player.media < BUY_CARD_COST_MEDIA:
        return False, f"Médias insuffisants (Requis: {BUY_CARD_COST_MEDIA})"
    return True, ""


def buy_card(game: Game, player_id: str, card_id: str | None = None, sequence_id: str = "") -> StepResult:
    """Spend 3 media for a row card (by id) or the top deck card."""
    game = game.clone()
    player = game.get_player(player_id)
    ok, reason = can_buy_card(player)
    if not ok:
        raise ValueError(reason)
    player.media -= BUY_CARD_COST_MEDIA
    card = take_card(game, player, card_id or DECK)
    result = StepResult(game)
    result.log(f"achète \"{card.name}\" pour {BUY_CARD_COST_MEDIA} Médias", player_id, sequence_id)
    return result


# ============================================================================
# Reservation
# ============================================================================

def _tuck(game: Game, player: Player, card: Card) -> str:
    """Slide a card under the revenue board: revenue +1 and an immediate gain."""
    player.reserved_cards.append(card)
    if card.revenue == RevenueType.CREDIT:
        player.revenue_credits += 1
        player.credits += 1
        return "1 Crédit"
    if card.revenue == RevenueType.ENERGY:
        player.revenue_energy += 1
        player.energy += 1
        return "1 Énergie"
    if card.revenue == RevenueType.CARD:
        player.revenue_cards += 1
        draw_into_hand(game, player, 1)
        return "1 Carte"
    if card.revenue == RevenueType.DATA:
        player.data = min(player.data + 1, MAX_DATA)
        return "1 Donnée"
    if card.revenue == RevenueType.MEDIA:
        player.media = min(player.media + 1, MAX_MEDIA_COVERAGE)
        return "1 Média"
    return "rien"


def reserve_card(game: Game, player_id: str, card_id: str, sequence_id: str = "") -> StepResult:
    game = game.clone()
    player = game.get_player(player_id)
    card = player.get_card(card_id)
    if card is None:
        raise ValueError(f"Carte non trouvée: {card_id}")
    player.hand.remove(card)
    gain = _tuck(game, player, card)
    result = StepResult(game)
    result.log(f"réserve \"{card.name}\" et gagne {gain}", player_id, sequence_id)
    return result


def reserved_of(player: Player, revenue: RevenueType) -> int:
    return sum(1 for c in player.reserved_cards if c.revenue == revenue)


# ============================================================================
# Play
# ============================================================================

def can_play_card(player: Player, card_id: str) -> tuple[bool, str, str]:
    """Returns (ok, error code, message)."""
    card = player.get_card(card_id)
    if card is None:
        return False, "CARD_NOT_FOUND", "Carte non trouvée"
    if card.cost_type == CostType.ENERGY:
        if player.energy < card.cost:
            return False, "INSUFFICIENT_ENERGY", f"Énergie insuffisante (Requis: {card.cost})"
    elif player.credits < card.cost:
        return False, "INSUFFICIENT_CREDITS", f"Crédits insuffisants (Requis: {card.cost})"
    return True, "", ""


def _optimal_launch_window(game: Game) -> Bonus:
    geometry = geometry_for(game.board.solar_system.extra_objects)
    rotation = game.board.solar_system.rotation
    _, earth_sector = geometry.earth_cell(rotation)
    count = 0
    for disk in ("A", "B", "C", "D"):
        for obj in geometry.cell_contents((disk, earth_sector), rotation):
            if obj.id != "earth" and obj.type in (CelestialType.PLANET, CelestialType.COMET):
                count += 1
    return Bonus(probe=1, movements=count)


def _osiris_rex(game: Game, player: Player) -> Bonus:
    """Best of the player's probes: 2 data on asteroids, 1 per adjacent asteroid cell."""
    geometry = geometry_for(game.board.solar_system.extra_objects)
    rotation = game.board.solar_system.rotation
    best = 0
    for probe in player.probes_in_system():
        cell = (probe.disk, probe.sector)
        gained = 2 if geometry.has_type(cell, rotation, CelestialType.ASTEROID) else 0
        gained += sum(
            1 for adjacent in geometry.adjacent_cells(cell)
            if geometry.has_type(adjacent, rotation, CelestialType.ASTEROID)
        )
        best = max(best, gained)
    return Bonus(data=best)


def _apply_special(game: Game, player: Player, card: Card, effect_type: EffectType) -> tuple[Bonus, bool]:
    """One-shot effects. Returns (bonus, card was reserved)."""
    if effect_type == EffectType.GAIN_ENERGY_PER_ENERGY_REVENUE:
        return Bonus(energy=sum(1 for c in player.hand if c.revenue == RevenueType.ENERGY)), False
    if effect_type == EffectType.GAIN_ENERGY_PER_REVENUE_ENERGY_AND_RESERVE:
        bonus = Bonus(energy=reserved_of(player, RevenueType.ENERGY))
        _tuck(game, player, card)
        return bonus, True
    if effect_type == EffectType.GAIN_MEDIA_PER_REVENUE_CARD_AND_RESERVE:
        bonus = Bonus(media=reserved_of(player, RevenueType.CARD))
        _tuck(game, player, card)
        return bonus, True
    if effect_type == EffectType.GAIN_PV_PER_REVENUE_CREDIT_AND_RESERVE:
        bonus = Bonus(pv=3 * reserved_of(player, RevenueType.CREDIT))
        _tuck(game, player, card)
        return bonus, True
    if effect_type == EffectType.REVEAL_MOVEMENT_CARDS_FOR_BONUS:
        count = sum(1 for c in player.hand if c.free_action == FreeActionType.MOVEMENT)
        return Bonus(probe=count, movements=count), False
    if effect_type == EffectType.OPTIMAL_LAUNCH_WINDOW:
        return _optimal_launch_window(game), False
    if effect_type == EffectType.OSIRIS_REX_BONUS:
        return _osiris_rex(game, player), False
    if effect_type == EffectType.DISCARD_ROW_FOR_FREE_ACTIONS:
        bonus = Bonus()
        for row_card in list(game.decks.card_row):
            bonus = bonus.merge(free_action_bonus(row_card))
            game.decks.discard_pile.append(row_card)
        game.decks.card_row.clear()
        refill_row(game)
        return bonus, False
    return Bonus(), False


def play_card(game: Game, player_id: str, card_id: str, sequence_id: str = "") -> StepResult:
    """
    Pay for and play a hand card.

    The returned bonus holds the immediate effects, the bonus flags and the
    one-shot specials, tagged with the card id.
    """
    game = game.clone()
    player = game.get_player(player_id)
    ok, _, message = can_play_card(player, card_id)
    if not ok:
        raise ValueError(message)

    card = player.get_card(card_id)
    player.hand.remove(card)
    if card.cost_type == CostType.ENERGY:
        player.energy -= card.cost
    else:
        player.credits -= card.cost

    result = StepResult(game)
    result.log(f"joue \"{card.name}\"", player_id, sequence_id)

    bonus = Bonus.from_effects(
        list(card.immediate_effects) + [e for e in card.passive_effects if e.type in BONUS_FLAG_EFFECTS]
    )
    # Standing effects of this card do not fire on its own play
    if card.cost_type == CostType.CREDIT and card.cost in PLAY_TRIGGERS:
        gained, entries = fire_triggers(game, player_id, PLAY_TRIGGERS[card.cost], sequence_id=sequence_id)
        bonus = bonus.merge(gained)
        result.history_entries.extend(entries)

    reserved = False
    for effect in card.passive_effects:
        if effect.type in TURN_BUFF_EFFECTS:
            player.active_buffs.append(effect)
        elif effect.type in SPECIAL_EFFECTS:
            gained, tucked = _apply_special(game, player, card, effect.type)
            bonus = bonus.merge(gained)
            reserved = reserved or tucked
    if reserved:
        result.log(f"réserve \"{card.name}\"", player_id, sequence_id)

    mission = create_mission(game, player, card)
    if mission is not None:
        player.missions.append(mission)
        player.played_cards.append(card)
        result.log(f"lance la mission \"{card.name}\"", player_id, sequence_id)
    else:
        player.permanent_buffs.extend(e for e in card.permanent_effects if e.type in TRIGGER_EFFECTS)
        if card.type in (CardType.END_GAME, CardType.EXERTIEN, CardType.CENTAURIEN):
            player.played_cards.append(card)
        elif not reserved:
            game.decks.discard_pile.append(card)

    if card.type == CardType.CENTAURIEN:
        result.interactions.append(ChoosingCentaurienReward(sequence_id=sequence_id or None))

    if not bonus.is_empty():
        bonus.source_card_id = card.id
        result.add_bonus(bonus)
    logger.debug("Player %s played %s", player_id, card.id)
    return result
