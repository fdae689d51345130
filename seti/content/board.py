"""
Board Content - Sectors, planets and alien boards of the base game.

Sector names are the star labels printed on the board; scan scopes that
target a named star find their sector by this name. Bonuses here stay
scalar or life traces since a covered sector pays its winner, who may not
be the active player.
"""

from __future__ import annotations

from ..engine_core.bonus import Bonus, LifeTraceGrant
from ..engine_core.enums import AlienBoardType, LifeTraceType, SectorType, SignalType
from ..engine_core.state import AlienBoard, Planet, Satellite, Sector, Signal

# index -> (star, color, data signals)
SECTOR_LAYOUT: dict[int, tuple[SectorType, SectorType, int]] = {
    1: (SectorType.VIRGINIS, SectorType.YELLOW, 5),
    2: (SectorType.BARNARD, SectorType.RED, 4),
    3: (SectorType.PROCYON, SectorType.BLUE, 5),
    4: (SectorType.VEGA, SectorType.BLACK, 4),
    5: (SectorType.KEPLER, SectorType.YELLOW, 4),
    6: (SectorType.PROXIMA, SectorType.RED, 5),
    7: (SectorType.SIRIUS, SectorType.BLUE, 4),
    8: (SectorType.PICTORIS, SectorType.BLACK, 5),
}

_TRACE_OF = {
    SectorType.YELLOW: LifeTraceType.YELLOW,
    SectorType.RED: LifeTraceType.RED,
    SectorType.BLUE: LifeTraceType.BLUE,
}

# Position of the bonus signal among the sector's signals
_BONUS_SIGNAL_POSITION = 2


def _sector_bonuses(color: SectorType) -> tuple[Bonus, Bonus]:
    trace = _TRACE_OF.get(color)
    if trace is None:
        # Black sectors pay in points only
        return Bonus(pv=5), Bonus(pv=3)
    return Bonus(pv=3, lifetraces=[LifeTraceGrant(1, trace)]), Bonus(pv=1, lifetraces=[LifeTraceGrant(1, trace)])


def create_sectors() -> list[Sector]:
    sectors = []
    for index, (star, color, data_signals) in SECTOR_LAYOUT.items():
        signals = [Signal(id=f"sector_{index}_signal_{n}") for n in range(data_signals)]
        bonus_signal = Signal(
            id=f"sector_{index}_signal_bonus",
            type=SignalType.MEDIA if index % 2 else SignalType.OTHER,
            bonus=Bonus(media=1) if index % 2 else Bonus(pv=2),
        )
        signals.insert(_BONUS_SIGNAL_POSITION, bonus_signal)
        first_bonus, next_bonus = _sector_bonuses(color)
        sectors.append(Sector(
            id=f"sector_{index}",
            name=star.value,
            color=color,
            index=index,
            signals=signals,
            first_bonus=first_bonus,
            next_bonus=next_bonus,
        ))
    return sectors


# ============================================================================
# Planets
# ============================================================================

def _planet(planet_id: str, name: str, orbit: Bonus, land: Bonus,
            satellites: dict[str, Bonus] | None = None) -> Planet:
    return Planet(
        id=planet_id,
        name=name,
        orbit_first_bonus=Bonus(pv=3),
        orbit_next_bonus=orbit,
        land_first_bonus=Bonus(data=2),
        land_second_bonus=Bonus(data=1),
        land_next_bonus=land,
        satellites=[
            Satellite(id=satellite_id, name=satellite_id.split("-")[1].capitalize(),
                      planet_id=planet_id, land_bonus=bonus)
            for satellite_id, bonus in (satellites or {}).items()
        ],
    )


def create_planets() -> list[Planet]:
    yellow = [LifeTraceGrant(1, LifeTraceType.YELLOW)]
    return [
        _planet("mercury", "Mercure", Bonus(pv=4), Bonus(pv=4, lifetraces=yellow)),
        _planet("venus", "Vénus", Bonus(pv=4, media=1), Bonus(pv=5, lifetraces=yellow)),
        _planet("mars", "Mars", Bonus(pv=4, credits=1), Bonus(pv=4, lifetraces=yellow),
                {"mars-phobos": Bonus(pv=8, lifetraces=yellow)}),
        _planet("jupiter", "Jupiter", Bonus(pv=5, energy=1), Bonus(pv=6, lifetraces=yellow), {
            "jupiter-io": Bonus(pv=9, lifetraces=yellow),
            "jupiter-europe": Bonus(pv=10, lifetraces=yellow),
            "jupiter-ganymede": Bonus(pv=9, data=1),
            "jupiter-callisto": Bonus(pv=9, energy=1),
        }),
        _planet("saturn", "Saturne", Bonus(pv=6, media=1), Bonus(pv=7, lifetraces=yellow), {
            "saturn-titan": Bonus(pv=11, lifetraces=yellow),
            "saturn-encelade": Bonus(pv=10, lifetraces=yellow),
        }),
        _planet("uranus", "Uranus", Bonus(pv=6, data=1), Bonus(pv=8, lifetraces=yellow),
                {"uranus-titania": Bonus(pv=12, lifetraces=yellow)}),
        _planet("neptune", "Neptune", Bonus(pv=6, credits=1), Bonus(pv=8, lifetraces=yellow),
                {"neptune-triton": Bonus(pv=12, lifetraces=yellow)}),
    ]


# ============================================================================
# Alien boards
# ============================================================================

def create_alien_boards(species_ids: list[AlienBoardType]) -> list[AlienBoard]:
    """One board per drawn species, left board first."""
    return [
        AlienBoard(
            species_id=species_id,
            first_bonus=Bonus(pv=5),
            next_bonus=Bonus(pv=3),
            is_first_board=index == 0,
        )
        for index, species_id in enumerate(species_ids)
    ]
