"""
Content - The base game's components and setup.

This module contains:
- Board layout (sectors, planets, alien boards)
- Technology tiles
- Species pool
- Objective tiles
- Built-in action deck
- Game creation
"""

from .setup import create_game
from .cards import builtin_cards, BUILTIN_CARDS_CSV
from .technologies import TECHNOLOGIES, get_technology
from .species import SPECIES_FACTORIES, create_species

__all__ = [
    "create_game",
    "builtin_cards",
    "BUILTIN_CARDS_CSV",
    "TECHNOLOGIES",
    "get_technology",
    "SPECIES_FACTORIES",
    "create_species",
]
