"""
Resources - Bounded counters and the 2-for-1 trade.
"""

from __future__ import annotations
import logging

from ..bonus import format_resource
from ..constants import MAX_DATA, MAX_MEDIA_COVERAGE, TRADE_COST
from ..results import StepResult
from ..state import Game, Player
from .cards import draw_into_hand

logger = logging.getLogger(__name__)

TRADE_RESOURCES = ("credit", "energy", "card")

_LABEL_KEYS = {"credit": "credits", "energy": "energy", "card": "card"}


def clamp_media(value: int) -> int:
    return max(0, min(value, MAX_MEDIA_COVERAGE))


def clamp_data(value: int) -> int:
    return max(0, min(value, MAX_DATA))


def add_media(player: Player, amount: int) -> int:
    """Add media in place; returns the amount actually gained."""
    before = player.media
    player.media = clamp_media(player.media + amount)
    return player.media - before


def add_data(player: Player, amount: int) -> int:
    """Add data in place; returns the amount actually gained."""
    before = player.data
    player.data = clamp_data(player.data + amount)
    return player.data - before


def resource_label(key: str, amount: int = 1) -> str:
    return format_resource(amount, _LABEL_KEYS.get(key, key))


def _holding(player: Player, resource: str) -> int:
    if resource == "credit":
        return player.credits
    if resource == "energy":
        return player.energy
    return len(player.hand)


def can_trade(player: Player, spend: str, gain: str, card_ids: list[str] | None = None) -> tuple[bool, str]:
    if spend not in TRADE_RESOURCES or gain not in TRADE_RESOURCES:
        return False, "Ressource d'échange inconnue"
    if spend == gain:
        return False, "Impossible d'échanger une ressource contre elle-même"
    if _holding(player, spend) < TRADE_COST:
        return False, f"Pas assez de {resource_label(spend, TRADE_COST)}"
    if spend == "card" and card_ids is not None:
        hand_ids = {c.id for c in player.hand}
        if len(card_ids) != TRADE_COST or not set(card_ids) <= hand_ids:
            return False, "Cartes invalides"
    return True, ""


def trade(game: Game, player_id: str, spend: str, gain: str,
          card_ids: list[str] | None = None, sequence_id: str = "") -> StepResult:
    """
    Spend 2 of one resource for 1 of another.

    Traded cards go to the discard pile (the first two when none are named).
    A card gain draws from the deck.
    """
    game = game.clone()
    player = game.get_player(player_id)
    ok, reason = can_trade(player, spend, gain, card_ids)
    if not ok:
        raise ValueError(reason)

    result = StepResult(game)
    if spend == "credit":
        player.credits -= TRADE_COST
    elif spend == "energy":
        player.energy -= TRADE_COST
    else:
        chosen = card_ids or [c.id for c in player.hand[:TRADE_COST]]
        for card_id in chosen:
            card = player.get_card(card_id)
            player.hand.remove(card)
            game.decks.discard_pile.append(card)

    if gain == "credit":
        player.credits += 1
    elif gain == "energy":
        player.energy += 1
    else:
        draw_into_hand(game, player, 1)

    result.log(
        f"échange {resource_label(spend, TRADE_COST)} contre {resource_label(gain)}",
        player_id, sequence_id,
    )
    logger.debug("Player %s traded %s for %s", player_id, spend, gain)
    return result
