"""
Species Content - The alien species pool.

Two species are drawn per game, one per alien board. Each defines the
bonuses of its species track: a few fixed slots per trace color, then an
infinite slot. A negative token amount is the cost of the slot.
"""

from __future__ import annotations
import random

from ..effects.parser import parse_immediate
from ..engine_core.bonus import Bonus, LifeTraceGrant
from ..engine_core.enums import AlienBoardType, CardType, FreeActionType, LifeTraceType, RevenueType, SectorType
from ..engine_core.state import Card, Species

RED, YELLOW, BLUE = LifeTraceType.RED, LifeTraceType.YELLOW, LifeTraceType.BLUE


def _alien_cards(prefix: str, card_type: CardType, rewards: list[tuple[str, str]]) -> list[Card]:
    """Cards from (name, gain text) pairs; the gain text is parsed as immediate effects."""
    colors = (SectorType.RED, SectorType.YELLOW, SectorType.BLUE, SectorType.BLACK)
    return [
        Card(
            id=f"{prefix}-{index + 1}",
            name=name,
            description=text,
            immediate_effects=tuple(parse_immediate(text).effects),
            type=card_type,
            cost=1 + index % 3,
            free_action=FreeActionType.MEDIA,
            scan_sector=colors[index % len(colors)],
            revenue=RevenueType.CREDIT,
        )
        for index, (name, text) in enumerate(rewards)
    ]


def _anomalies() -> Species:
    return Species(
        id="species-anomalies",
        name=AlienBoardType.ANOMALIES,
        description="Des anomalies se déclenchent au passage de la Terre.",
        fixed_slots={
            RED: [Bonus(pv=4), Bonus(pv=3, data=1)],
            YELLOW: [Bonus(pv=4), Bonus(pv=3, media=1)],
            BLUE: [Bonus(pv=4), Bonus(pv=3, energy=1)],
        },
        infinite_slots={RED: Bonus(pv=2), YELLOW: Bonus(pv=2), BLUE: Bonus(pv=2)},
        cards=_alien_cards("anomalies", CardType.ACTION, [
            ("Résonance Anormale", "2 Données"),
            ("Écho Temporel", "1 Rotation + 1 Média"),
            ("Signal Fantôme", "2 Médias"),
        ]),
        scoring_modifiers={"anomalies": 3},
    )


def _oumuamua() -> Species:
    return Species(
        id="species-oumuamua",
        name=AlienBoardType.OUMUAMUA,
        description="Un objet interstellaire traverse le système solaire.",
        fixed_slots={
            RED: [Bonus(pv=5, token=-1), Bonus(pv=3)],
            YELLOW: [Bonus(pv=3, data=1), Bonus(pv=3)],
            BLUE: [Bonus(pv=3, media=1), Bonus(pv=3)],
        },
        infinite_slots={RED: Bonus(pv=2), YELLOW: Bonus(pv=2), BLUE: Bonus(pv=2)},
        cards=_alien_cards("oumuamua", CardType.ACTION, [
            ("Sonde Interstellaire", "1 Sonde"),
            ("Fragment de Glace", "1 Donnée + 1 Média"),
            ("Trajectoire Hyperbolique", "2 Déplacements"),
        ]),
        scoring_modifiers={"oumuamua": 2},
    )


def _exertiens() -> Species:
    return Species(
        id="species-exertiens",
        name=AlienBoardType.EXERTIENS,
        description="Les Exertiens récompensent les cartes jouées devant soi.",
        fixed_slots={
            RED: [Bonus(pv=3, species_card=1), Bonus(pv=2)],
            YELLOW: [Bonus(pv=3, species_card=1), Bonus(pv=2)],
            BLUE: [Bonus(pv=3, species_card=1), Bonus(pv=2)],
        },
        infinite_slots={RED: Bonus(pv=1), YELLOW: Bonus(pv=1), BLUE: Bonus(pv=1)},
        cards=_alien_cards("exertiens", CardType.EXERTIEN, [
            ("Pacte Exertien", "2 Médias + 1 Donnée"),
            ("Sphère de Dyson", "3 Energies"),
            ("Archive Exertienne", "2 Données + 1 Crédit"),
            ("Émissaire", "1 Signal + 1 Média"),
        ]),
        scoring_modifiers={"exertiens": 4},
    )


def _mascamites() -> Species:
    return Species(
        id="species-mascamites",
        name=AlienBoardType.MASCAMITES,
        description="Des spécimens à ramener depuis les planètes.",
        fixed_slots={
            RED: [Bonus(pv=4, lifetraces=[LifeTraceGrant(1, YELLOW)]), Bonus(pv=3)],
            YELLOW: [Bonus(pv=4, data=2), Bonus(pv=3)],
            BLUE: [Bonus(pv=4, credits=1), Bonus(pv=3)],
        },
        infinite_slots={RED: Bonus(pv=2), YELLOW: Bonus(pv=2), BLUE: Bonus(pv=2)},
        cards=_alien_cards("mascamites", CardType.ACTION, [
            ("Capsule de Retour", "1 Atterrissage"),
            ("Spécimen Rare", "2 Crédits"),
            ("Laboratoire Orbital", "1 Donnée + 1 Energie"),
        ]),
        scoring_modifiers={"mascamites": 3},
    )


def _centauriens() -> Species:
    return Species(
        id="species-centauriens",
        name=AlienBoardType.CENTAURIENS,
        description="Les Centauriens envoient des messages contre des récompenses.",
        fixed_slots={
            RED: [Bonus(pv=3, media=1), Bonus(pv=2)],
            YELLOW: [Bonus(pv=3, credits=1), Bonus(pv=2)],
            BLUE: [Bonus(pv=3, energy=1), Bonus(pv=2)],
        },
        infinite_slots={RED: Bonus(pv=1), YELLOW: Bonus(pv=1), BLUE: Bonus(pv=1)},
        cards=_alien_cards("centauriens", CardType.CENTAURIEN, [
            ("Message de Proxima", "1 Média"),
            ("Traduction Partielle", "1 Donnée"),
            ("Réponse Codée", "1 Crédit"),
        ]),
        message_rewards=[
            Bonus(pv=5),
            Bonus(pv=3, media=2),
            Bonus(pv=3, data=2),
            Bonus(pv=2, credits=2),
            Bonus(pv=2, energy=2),
        ],
        scoring_modifiers={"centauriens": 2},
    )


SPECIES_FACTORIES = {
    AlienBoardType.ANOMALIES: _anomalies,
    AlienBoardType.OUMUAMUA: _oumuamua,
    AlienBoardType.EXERTIENS: _exertiens,
    AlienBoardType.MASCAMITES: _mascamites,
    AlienBoardType.CENTAURIENS: _centauriens,
}


def create_species(species_id: AlienBoardType, rng: random.Random | None = None) -> Species:
    species = SPECIES_FACTORIES[species_id]()
    if rng is not None:
        rng.shuffle(species.cards)
    return species


def draw_species(rng: random.Random, count: int = 2) -> list[Species]:
    """Draw `count` distinct species for the alien boards."""
    drawn = rng.sample(list(SPECIES_FACTORIES), count)
    return [create_species(species_id, rng) for species_id in drawn]
