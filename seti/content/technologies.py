"""
Technology Content - The twelve technology tiles.

Each technology has one stack with a tile per seat so that several players
can own it. Stacks of a category are laid out in a shuffled order and the
top tile of every stack carries the first-taker bonus.
"""

from __future__ import annotations
import random
from dataclasses import replace

from ..engine_core.bonus import Bonus
from ..engine_core.constants import TECH_STACK_BONUS_PV
from ..engine_core.enums import TechnologyCategory
from ..engine_core.state import Technology, TechnologyBoard

TECHNOLOGIES: tuple[Technology, ...] = (
    Technology(
        "exploration-1", "Exploration Niveau 1", TechnologyCategory.EXPLORATION,
        "Capacité de 2 sondes dans le système solaire.",
        Bonus(probe=1),
    ),
    Technology(
        "exploration-2", "Exploration Niveau 2", TechnologyCategory.EXPLORATION,
        "+1 Média en visitant un champ d'astéroïdes, qui se quitte pour 1 déplacement.",
        Bonus(media=1),
    ),
    Technology(
        "exploration-3", "Exploration Niveau 3", TechnologyCategory.EXPLORATION,
        "L'atterrissage coûte 1 énergie de moins.",
        Bonus(energy=1),
    ),
    Technology(
        "exploration-4", "Exploration Niveau 4", TechnologyCategory.EXPLORATION,
        "Autorise l'atterrissage sur les lunes.",
        Bonus(credits=1),
    ),
    Technology(
        "observation-1", "Observation Niveau 1", TechnologyCategory.OBSERVATION,
        "Le scan de la Terre peut viser un secteur adjacent.",
        Bonus(data=1),
    ),
    Technology(
        "observation-2", "Observation Niveau 2", TechnologyCategory.OBSERVATION,
        "Lors d'un scan, payez 1 Média pour marquer un signal sur Mercure.",
        Bonus(media=1),
    ),
    Technology(
        "observation-3", "Observation Niveau 3", TechnologyCategory.OBSERVATION,
        "Lors d'un scan, défaussez une carte pour marquer un signal de sa couleur.",
        Bonus(card=1),
    ),
    Technology(
        "observation-4", "Observation Niveau 4", TechnologyCategory.OBSERVATION,
        "Lors d'un scan, payez 1 énergie pour lancer une sonde ou gagnez 1 déplacement.",
        Bonus(energy=1),
    ),
    Technology(
        "computing-1", "Informatique Niveau 1", TechnologyCategory.COMPUTING,
        "Sous la colonne choisie : 1 crédit.",
        Bonus(pv=2),
    ),
    Technology(
        "computing-2", "Informatique Niveau 2", TechnologyCategory.COMPUTING,
        "Sous la colonne choisie : 1 carte.",
        Bonus(pv=2),
    ),
    Technology(
        "computing-3", "Informatique Niveau 3", TechnologyCategory.COMPUTING,
        "Sous la colonne choisie : 1 énergie.",
        Bonus(pv=2),
    ),
    Technology(
        "computing-4", "Informatique Niveau 4", TechnologyCategory.COMPUTING,
        "Sous la colonne choisie : 1 Média.",
        Bonus(pv=2),
    ),
)


def get_technology(tech_id: str) -> Technology | None:
    return next((t for t in TECHNOLOGIES if t.id == tech_id), None)


def _with_stack_bonus(tech: Technology) -> Technology:
    bonus = tech.bonus.merge(Bonus(pv=TECH_STACK_BONUS_PV))
    return replace(tech, bonus=bonus)


def create_technology_board(rng: random.Random, copies: int) -> TechnologyBoard:
    """
    Build the technology stacks.

    Args:
        rng: Seeded random source for the stack order
        copies: Tiles per stack, one per seat
    """
    stacks: dict[str, list[Technology]] = {}
    for category in (TechnologyCategory.EXPLORATION, TechnologyCategory.OBSERVATION,
                     TechnologyCategory.COMPUTING):
        techs = [t for t in TECHNOLOGIES if t.category == category]
        rng.shuffle(techs)
        for tech in techs:
            stacks[tech.id] = [_with_stack_bonus(tech)] + [tech] * (copies - 1)
    return TechnologyBoard(stacks=stacks)
