"""
Turns - Turn order, passing and the end of a round.

A round ends once every player has passed. Revenues are paid, the first
player token moves one seat to the left and the next round starts; after the
last round the game enters final scoring.
"""

from __future__ import annotations
import logging

from ..constants import HAND_SIZE_AFTER_PASS
from ..enums import GamePhase
from ..results import StepResult
from ..state import Game, Player
from .cards import draw_into_hand, trim_hand
from .probes import rotate_solar_system
from .scoring import apply_final_scores

logger = logging.getLogger(__name__)


def _reset_turn(player: Player) -> None:
    player.visited_this_turn = []
    player.moved_this_turn = []
    player.active_buffs = []
    player.has_performed_main_action = False


def end_round(game: Game, sequence_id: str = "") -> StepResult:
    """Pay revenues, rotate the first player and open the next round."""
    game = game.clone()
    result = StepResult(game)
    result.log(f"Fin de la manche {game.current_round}", "system", sequence_id)

    for player in game.players:
        player.credits += player.revenue_credits
        player.energy += player.revenue_energy
        drawn = draw_into_hand(game, player, player.revenue_cards)
        player.has_passed = False
        _reset_turn(player)
        result.log(
            f"reçoit ses revenus: {player.revenue_credits} Crédit(s), "
            f"{player.revenue_energy} Énergie(s), {len(drawn)} Carte(s)",
            player.id, sequence_id,
        )

    game.first_player_index = (game.first_player_index + 1) % len(game.players)
    game.current_player_index = game.first_player_index
    game.is_first_to_pass = False
    game.is_round_end = False

    if game.current_round < game.max_rounds:
        game.current_round += 1
        result.log(f"Début de la manche {game.current_round}", "system", sequence_id)
        logger.info("Game %s: round %d starts", game.id, game.current_round)
        return result

    game.phase = GamePhase.FINAL_SCORING
    result.log("Fin de la partie", "system", sequence_id)
    logger.info("Game %s: final scoring", game.id)
    return result.then(apply_final_scores(game, sequence_id))


def next_player(game: Game, sequence_id: str = "") -> StepResult:
    """
    Hand the turn to the next player who has not passed.

    When everybody has passed the round ends instead.
    """
    if all(p.has_passed for p in game.players):
        return end_round(game, sequence_id)

    game = game.clone()
    count = len(game.players)
    index = game.current_player_index
    for _ in range(count):
        index = (index + 1) % count
        if not game.players[index].has_passed:
            break
    game.current_player_index = index
    player = game.players[index]
    _reset_turn(player)
    result = StepResult(game)
    result.log("commence son tour", player.id, sequence_id)
    return result


def can_end_turn(game: Game, player_id: str) -> tuple[bool, str]:
    player = game.get_player(player_id)
    if player is None:
        return False, "Joueur non trouvé"
    if game.phase != GamePhase.PLAYING:
        return False, "Tour invalide"
    if game.current_player.id != player_id:
        return False, "Ce n'est pas votre tour"
    if not player.has_performed_main_action and not player.has_passed:
        return False, "Vous devez effectuer une action principale"
    return True, ""


def end_turn(game: Game, player_id: str, sequence_id: str = "") -> StepResult:
    ok, reason = can_end_turn(game, player_id)
    if not ok:
        raise ValueError(reason)
    return next_player(game, sequence_id)


# ============================================================================
# Pass
# ============================================================================

def can_pass(game: Game, player_id: str, keep_ids: list[str] | None = None,
             round_card_id: str | None = None) -> tuple[bool, str, str]:
    """Returns (ok, error code, message)."""
    player = game.get_player(player_id)
    if player is None:
        return False, "PLAYER_NOT_FOUND", "Joueur non trouvé"
    hand_ids = [c.id for c in player.hand]
    if keep_ids is None:
        if len(hand_ids) > HAND_SIZE_AFTER_PASS:
            return False, "TOO_MANY_CARDS", f"Vous devez garder au plus {HAND_SIZE_AFTER_PASS} cartes"
    else:
        if len(keep_ids) > HAND_SIZE_AFTER_PASS:
            return False, "TOO_MANY_CARDS", f"Vous devez garder au plus {HAND_SIZE_AFTER_PASS} cartes"
        if len(set(keep_ids)) != len(keep_ids) or not set(keep_ids) <= set(hand_ids):
            return False, "INVALID_CARDS", "Cartes invalides"
    if round_card_id is not None:
        deck = game.decks.round_decks.get(game.current_round, [])
        if not any(c.id == round_card_id for c in deck):
            return False, "INVALID_ROUND_CARD", "Carte de manche invalide"
    return True, "", ""


def pass_turn(game: Game, player_id: str, keep_ids: list[str] | None = None,
              round_card_id: str | None = None, sequence_id: str = "") -> StepResult:
    """
    Pass for the rest of the round.

    The hand is trimmed to the kept cards, the optional round card is taken,
    and the first player to pass turns the solar system.
    """
    ok, _, message = can_pass(game, player_id, keep_ids, round_card_id)
    if not ok:
        raise ValueError(message)

    result = StepResult(game)
    if keep_ids is not None:
        result = trim_hand(game, player_id, keep_ids, sequence_id)

    game = result.game.clone()
    result = result.then(StepResult(game))
    player = game.get_player(player_id)
    if round_card_id is not None:
        deck = game.decks.round_decks[game.current_round]
        card = next(c for c in deck if c.id == round_card_id)
        deck.remove(card)
        player.hand.append(card)
        result.log(f"choisit la carte de manche \"{card.name}\"", player_id, sequence_id)

    first_to_pass = not any(p.has_passed for p in game.players)
    player.has_passed = True
    result.log("passe son tour", player_id, sequence_id)

    if first_to_pass:
        game.is_first_to_pass = True
        result = result.then(rotate_solar_system(game, player_id, sequence_id))

    result = result.then(next_player(result.game, sequence_id))
    logger.debug("Player %s passed", player_id)
    return result
