"""
Objective Content - The four objective tiles, one per category.

Each tile is two-sided; setup draws a side at random. Rewards are the
points per scoring set for the first, second and later markers.
"""

from __future__ import annotations
import random

from ..engine_core.enums import ObjectiveCategory
from ..engine_core.state import ObjectiveTile

# category -> side -> (name, description, rewards)
OBJECTIVES: dict[ObjectiveCategory, dict[str, tuple[str, str, tuple[int, int, int]]]] = {
    ObjectiveCategory.TECHNOLOGY: {
        "A": ("Polyvalence", "Par série de technologies des trois types.", (3, 2, 1)),
        "B": ("Spécialisation", "Par paire de technologies.", (2, 1, 1)),
    },
    ObjectiveCategory.MISSION: {
        "A": ("Missions Accomplies", "Par mission terminée.", (3, 2, 1)),
        "B": ("Programme Spatial", "Par paire de missions terminées ou cartes de fin de partie.", (4, 3, 2)),
    },
    ObjectiveCategory.REVENUE: {
        "A": ("Économie Équilibrée", "Par série de revenus réservés des trois types.", (4, 3, 2)),
        "B": ("Investissement Ciblé", "Par revenu réservé du type le plus fourni.", (2, 1, 1)),
    },
    ObjectiveCategory.OTHER: {
        "A": ("Traces de Vie", "Par série de traces de vie des trois couleurs.", (4, 3, 2)),
        "B": ("Présence Spatiale", "Par paire secteur remporté et sonde posée.", (3, 2, 1)),
    },
}


def create_objective_tiles(rng: random.Random) -> list[ObjectiveTile]:
    tiles = []
    for category, sides in OBJECTIVES.items():
        side = rng.choice(sorted(sides))
        name, description, rewards = sides[side]
        tiles.append(ObjectiveTile(
            id=f"objective-{category.value.lower()}",
            category=category,
            side=side,
            name=name,
            description=description,
            rewards=rewards,
        ))
    return tiles
