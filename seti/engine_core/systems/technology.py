"""
Technology - Researching and acquiring technology tiles.
"""

from __future__ import annotations
import logging

from ...effects.catalog import EffectType
from ..bonus import Bonus
from ..constants import TECH_RESEARCH_COST_MEDIA
from ..enums import TechnologyCategory
from ..interaction import SelectingComputerSlot
from ..results import StepResult
from ..state import Game, Player, Technology
from .computer import assign_technology
from .triggers import TECH_TRIGGERS, fire_triggers

logger = logging.getLogger(__name__)


def owns(player: Player, tech_id: str) -> bool:
    return any(t.id == tech_id for t in player.technologies)


def is_shared(game: Game, player_id: str, tech_id: str) -> bool:
    """True when another player already owns this technology."""
    return any(owns(p, tech_id) for p in game.players if p.id != player_id)


def available_for(game: Game, player_id: str, category: TechnologyCategory | None = None,
                  shared_only: bool = False) -> list[Technology]:
    player = game.get_player(player_id)
    return [
        t for t in game.board.technology_board.available(category)
        if not owns(player, t.id) and (not shared_only or is_shared(game, player_id, t.id))
    ]


def can_research(game: Game, player_id: str, tech_id: str | None = None) -> tuple[bool, str]:
    player = game.get_player(player_id)
    if player.media < TECH_RESEARCH_COST_MEDIA:
        return False, f"Médias insuffisants (Requis: {TECH_RESEARCH_COST_MEDIA})"
    if tech_id is None:
        if not available_for(game, player_id):
            return False, "Aucune technologie disponible"
        return True, ""
    if owns(player, tech_id):
        return False, "Technologie déjà possédée"
    if game.board.technology_board.find(tech_id) is None:
        return False, "Technologie indisponible"
    return True, ""


def _turn_buff_bonus(game: Game, player: Player, tech: Technology) -> Bonus:
    bonus = Bonus()
    for buff in list(player.active_buffs):
        if buff.type == EffectType.MEDIA_IF_SHARED_TECH and is_shared(game, player.id, tech.id):
            bonus = bonus.merge(Bonus(media=int(buff.value)))
            player.active_buffs.remove(buff)
        elif buff.type == EffectType.SCORE_PER_TECH_TYPE:
            # Counts the tile being acquired
            count = 1 + sum(1 for t in player.technologies if t.category == tech.category)
            bonus = bonus.merge(Bonus(pv=int(buff.value) * count))
            player.active_buffs.remove(buff)
    return bonus


def acquire_technology(game: Game, player_id: str, tech_id: str, column: int | None = None,
                       no_tile_bonus: bool = False, pay: bool = False,
                       sequence_id: str = "") -> StepResult:
    """
    Take the top tile of a technology stack.

    A computing technology needs a computer column; without one a
    SELECTING_COMPUTER_SLOT interaction is queued.
    """
    game = game.clone()
    player = game.get_player(player_id)
    if owns(player, tech_id):
        raise ValueError(f"Technologie déjà possédée: {tech_id}")

    # Shared check happens before the tile is ours
    bonus = Bonus()
    tech = game.board.technology_board.find(tech_id)
    if tech is None:
        raise ValueError(f"Technologie indisponible: {tech_id}")
    shared_media = _turn_buff_bonus(game, player, tech)

    tech = game.board.technology_board.take(tech_id)
    if pay:
        player.media -= TECH_RESEARCH_COST_MEDIA
    player.technologies.append(tech)

    result = StepResult(game)
    result.log(f"acquiert la technologie {tech.name}", player_id, sequence_id)
    if not no_tile_bonus:
        bonus = bonus.merge(tech.bonus)

    if tech.category == TechnologyCategory.COMPUTING:
        if column is None:
            result.interactions.append(SelectingComputerSlot(sequence_id=sequence_id or None, tech_id=tech.id))
        else:
            assign_technology(player, tech, column)
            result.log(f"installe {tech.name} sur la colonne {column}", player_id, sequence_id)

    bonus = bonus.merge(shared_media)
    gained, entries = fire_triggers(game, player_id, TECH_TRIGGERS[tech.category], sequence_id=sequence_id)
    result.add_bonus(bonus.merge(gained))
    result.history_entries.extend(entries)
    logger.debug("Player %s acquired %s", player_id, tech.id)
    return result
