"""
Enumerations shared by the state model, bonuses and card parsing.

Values are the localized labels printed on the physical components; they are
what card files and history messages contain.
"""

from __future__ import annotations
from enum import Enum


class GamePhase(Enum):
    """High-level game phases."""
    SETUP = "SETUP"
    PLAYING = "PLAYING"
    ROUND_END = "ROUND_END"
    FINAL_SCORING = "FINAL_SCORING"


class ProbeState(Enum):
    IN_SOLAR_SYSTEM = "IN_SOLAR_SYSTEM"
    IN_ORBIT = "IN_ORBIT"
    LANDED = "LANDED"


class SignalType(Enum):
    DATA = "Donnée"
    MEDIA = "Média"
    TOKEN = "TOKEN"
    OTHER = "OTHER"


class SectorType(Enum):
    """Sector colors, plus the special scopes a signal grant can target."""
    BLUE = "Bleu"
    RED = "Rouge"
    YELLOW = "Jaune"
    BLACK = "Noir"
    DECK = "Pioche"
    ROW = "Rangée"
    PROBE = "Sonde"
    EARTH = "Terre"
    MERCURY = "Mercure"
    VENUS = "Venus"
    MARS = "Mars"
    JUPITER = "Jupiter"
    SATURN = "Saturne"
    VIRGINIS = "61 Virginis"
    KEPLER = "Kepler 22"
    PROXIMA = "Proxima Centauri"
    BARNARD = "Etoile de Barnard"
    SIRIUS = "Sirius A"
    PROCYON = "Procyon"
    VEGA = "Vega"
    PICTORIS = "Beta Pictoris"
    OUMUAMUA = "Oumuamua"
    ANY = "N'importe quelle couleur"
    UNDEFINED = "UNDEFINED"


COLOR_SECTORS = (SectorType.BLUE, SectorType.RED, SectorType.YELLOW, SectorType.BLACK)

PLANET_SCOPES = {
    SectorType.EARTH: "earth",
    SectorType.MERCURY: "mercury",
    SectorType.VENUS: "venus",
    SectorType.MARS: "mars",
    SectorType.JUPITER: "jupiter",
    SectorType.SATURN: "saturn",
}

STAR_SCOPES = (
    SectorType.VIRGINIS,
    SectorType.KEPLER,
    SectorType.PROXIMA,
    SectorType.BARNARD,
    SectorType.SIRIUS,
    SectorType.PROCYON,
    SectorType.VEGA,
    SectorType.PICTORIS,
    SectorType.OUMUAMUA,
)


class TechnologyCategory(Enum):
    EXPLORATION = "Exploration"
    OBSERVATION = "Observation"
    COMPUTING = "Informatique"
    EXPLORATION_OR_OBSERVATION = "Exploration ou Observation"
    ANY = "ANY"

    def covers(self, category: TechnologyCategory) -> bool:
        """Whether a tile of `category` fits a grant scoped to this value."""
        if self == TechnologyCategory.ANY:
            return True
        if self == TechnologyCategory.EXPLORATION_OR_OBSERVATION:
            return category in (TechnologyCategory.EXPLORATION, TechnologyCategory.OBSERVATION)
        return self == category


class LifeTraceType(Enum):
    RED = "Rouge"
    YELLOW = "Jaune"
    BLUE = "Bleu"
    ANY = "ANY"


TRACE_COLORS = (LifeTraceType.RED, LifeTraceType.YELLOW, LifeTraceType.BLUE)


class CardType(Enum):
    ACTION = "Action"
    CONDITIONAL_MISSION = "Mission Conditionnelle"
    TRIGGERED_MISSION = "Mission Déclenchable"
    END_GAME = "Fin de partie"
    EXERTIEN = "Exertien"
    CENTAURIEN = "Centaurien"
    UNDEFINED = "UNDEFINED"


class CostType(Enum):
    CREDIT = "CREDIT"
    ENERGY = "ENERGY"


class FreeActionType(Enum):
    MOVEMENT = "MOVEMENT"
    DATA = "DATA"
    MEDIA = "MEDIA"
    PV_MOVEMENT = "PV_MOVEMENT"
    PV_DATA = "PV_DATA"
    TWO_MEDIA = "TWO_MEDIA"
    UNDEFINED = "UNDEFINED"


class RevenueType(Enum):
    CREDIT = "CREDIT"
    ENERGY = "ENERGY"
    CARD = "CARD"
    DATA = "DATA"
    MEDIA = "MEDIA"
    UNDEFINED = "UNDEFINED"


class AlienBoardType(Enum):
    ANOMALIES = "Anomalies"
    OUMUAMUA = "Oumuamua"
    EXERTIENS = "Exertiens"
    MASCAMITES = "Mascamites"
    CENTAURIENS = "Centauriens"


class ObjectiveCategory(Enum):
    TECHNOLOGY = "TECHNOLOGY"
    MISSION = "MISSION"
    REVENUE = "REVENUE"
    OTHER = "OTHER"


class PlayerType(Enum):
    HUMAN = "human"
    ROBOT = "robot"


class CelestialType(Enum):
    PLANET = "planet"
    COMET = "comet"
    ASTEROID = "asteroid"
    HOLLOW = "hollow"
    EMPTY = "empty"


SECTOR_TO_TRACE = {
    SectorType.RED: LifeTraceType.RED,
    SectorType.YELLOW: LifeTraceType.YELLOW,
    SectorType.BLUE: LifeTraceType.BLUE,
}

# Tech colors used by card text and trigger codes
TECH_COLORS = {
    "yellow": TechnologyCategory.EXPLORATION,
    "red": TechnologyCategory.OBSERVATION,
    "blue": TechnologyCategory.COMPUTING,
}
