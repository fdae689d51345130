"""
Geometry - Positions of celestial objects on the rotating solar system.

The engine only consumes geometry through the GeometryOracle protocol:
where an object sits, what a cell contains, which cells are adjacent and how
the rotation state changes when a level turns.

RingGeometry is the default table-driven implementation. The board has four
concentric disks (A innermost to D) cut into 8 sectors. Level 0 is fixed;
levels 1 to 3 rotate and cover the lower levels except at their hollows.
A rotation state is the per-level step offset (level1, level2, level3).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol, Sequence

from .enums import CelestialType

SECTOR_COUNT = 8
DISKS = ("A", "B", "C", "D")

Cell = tuple[str, int]  # (disk, absolute sector 1..8)


@dataclass(frozen=True)
class CelestialObject:
    id: str
    type: CelestialType
    name: str
    disk: str
    sector: int  # relative to its level
    level: int = 0


class GeometryOracle(Protocol):
    """Pure position queries over a rotation state."""

    def object_cell(self, object_id: str, rotation: Sequence[int]) -> Cell | None:
        ...

    def cell_contents(self, cell: Cell, rotation: Sequence[int]) -> list[CelestialObject]:
        ...

    def earth_cell(self, rotation: Sequence[int]) -> Cell:
        ...

    def adjacent_cells(self, cell: Cell) -> list[Cell]:
        ...

    def adjacent_sectors(self, sector_index: int) -> list[int]:
        ...

    def surface_level(self, cell: Cell, rotation: Sequence[int]) -> int:
        ...

    def rotate(self, rotation: Sequence[int], level: int) -> list[int]:
        ...


def _obj(object_id: str, type_: CelestialType, name: str, disk: str, sector: int, level: int) -> CelestialObject:
    return CelestialObject(object_id, type_, name, disk, sector, level)


P, C, A, H = CelestialType.PLANET, CelestialType.COMET, CelestialType.ASTEROID, CelestialType.HOLLOW

CELESTIAL_OBJECTS: tuple[CelestialObject, ...] = (
    # Level 0 (fixed)
    _obj("neptune", P, "Neptune", "D", 3, 0),
    _obj("uranus", P, "Uranus", "D", 6, 0),
    _obj("comet-d1", C, "Comète", "D", 1, 0),
    _obj("comet-d7", C, "Comète", "D", 7, 0),
    _obj("comet-c4", C, "Comète", "C", 4, 0),
    _obj("comet-b2", C, "Comète", "B", 2, 0),
    _obj("comet-b5", C, "Comète", "B", 5, 0),
    _obj("comet-a5", C, "Comète", "A", 5, 0),
    _obj("comet-a7", C, "Comète", "A", 7, 0),
    _obj("comet-a8", C, "Comète", "A", 8, 0),
    _obj("asteroid-c2", A, "Astéroïdes", "C", 2, 0),
    _obj("asteroid-c3", A, "Astéroïdes", "C", 3, 0),
    _obj("asteroid-c5", A, "Astéroïdes", "C", 5, 0),
    _obj("asteroid-c7", A, "Astéroïdes", "C", 7, 0),
    _obj("asteroid-b4", A, "Astéroïdes", "B", 4, 0),
    _obj("asteroid-b8", A, "Astéroïdes", "B", 8, 0),
    _obj("asteroid-a2", A, "Astéroïdes", "A", 2, 0),
    _obj("asteroid-a3", A, "Astéroïdes", "A", 3, 0),
    _obj("asteroid-a6", A, "Astéroïdes", "A", 6, 0),
    # Level 1
    _obj("saturn", P, "Saturne", "C", 1, 1),
    _obj("jupiter", P, "Jupiter", "C", 5, 1),
    _obj("comet-b8-l1", C, "Comète", "B", 8, 1),
    _obj("comet-a7-l1", C, "Comète", "A", 7, 1),
    _obj("asteroid-b1-l1", A, "Astéroïdes", "B", 1, 1),
    _obj("asteroid-b4-l1", A, "Astéroïdes", "B", 4, 1),
    _obj("asteroid-a1-l1", A, "Astéroïdes", "A", 1, 1),
    _obj("asteroid-a2-l1", A, "Astéroïdes", "A", 2, 1),
    _obj("asteroid-a6-l1", A, "Astéroïdes", "A", 6, 1),
    # Level 2
    _obj("mars", P, "Mars", "B", 1, 2),
    _obj("asteroid-b5-l2", A, "Astéroïdes", "B", 5, 2),
    _obj("asteroid-a6-l2", A, "Astéroïdes", "A", 6, 2),
    _obj("asteroid-a8-l2", A, "Astéroïdes", "A", 8, 2),
    # Level 3
    _obj("earth", P, "Terre", "A", 2, 3),
    _obj("venus", P, "Vénus", "A", 4, 3),
    _obj("mercury", P, "Mercure", "A", 6, 3),
)

# Objects added during play (discovered species)
EXTRA_OBJECTS: dict[str, CelestialObject] = {
    "oumuamua": _obj("oumuamua", P, "Oumuamua", "C", 3, 1),
}

# Relative sectors where a rotating level is see-through, per disk it covers
HOLLOW_ZONES: dict[int, dict[str, tuple[int, ...]]] = {
    1: {"A": (4, 5), "B": (2, 5, 7), "C": (2, 3, 7, 8)},
    2: {"A": (2, 3, 4), "B": (2, 3, 4, 7, 8)},
    3: {"A": (3, 7, 8)},
}


def wrap_sector(sector: int) -> int:
    return (sector - 1) % SECTOR_COUNT + 1


class RingGeometry:
    """Table-driven GeometryOracle."""

    def __init__(self, objects: Sequence[CelestialObject] = CELESTIAL_OBJECTS,
                 extra_objects: Sequence[str] = ()):
        self._objects = list(objects) + [EXTRA_OBJECTS[i] for i in extra_objects if i in EXTRA_OBJECTS]
        self._by_id = {o.id: o for o in self._objects}

    def with_extra_objects(self, extra_objects: Sequence[str]) -> RingGeometry:
        return RingGeometry(CELESTIAL_OBJECTS, extra_objects)

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    @staticmethod
    def _steps(rotation: Sequence[int], level: int) -> int:
        return rotation[level - 1] if level > 0 else 0

    def absolute_sector(self, obj: CelestialObject, rotation: Sequence[int]) -> int:
        return wrap_sector(obj.sector + self._steps(rotation, obj.level))

    def object_cell(self, object_id: str, rotation: Sequence[int]) -> Cell | None:
        obj = self._by_id.get(object_id)
        if obj is None:
            return None
        return obj.disk, self.absolute_sector(obj, rotation)

    def surface_level(self, cell: Cell, rotation: Sequence[int]) -> int:
        """Highest level whose opaque part covers this cell (0 when none)."""
        disk, sector = cell
        for level in (3, 2, 1):
            hollows = HOLLOW_ZONES[level].get(disk)
            if hollows is None:
                continue
            relative = wrap_sector(sector - self._steps(rotation, level))
            if relative not in hollows:
                return level
        return 0

    def cell_contents(self, cell: Cell, rotation: Sequence[int]) -> list[CelestialObject]:
        """Objects visible on a cell: those of its surface level."""
        level = self.surface_level(cell, rotation)
        disk, sector = cell
        return [
            o for o in self._objects
            if o.level == level and o.disk == disk and o.type != CelestialType.HOLLOW
            and self.absolute_sector(o, rotation) == sector
        ]

    def earth_cell(self, rotation: Sequence[int]) -> Cell:
        cell = self.object_cell("earth", rotation)
        assert cell is not None
        return cell

    def planet_at(self, cell: Cell, rotation: Sequence[int]) -> CelestialObject | None:
        return next((o for o in self.cell_contents(cell, rotation) if o.type == CelestialType.PLANET), None)

    def has_type(self, cell: Cell, rotation: Sequence[int], type_: CelestialType) -> bool:
        return any(o.type == type_ for o in self.cell_contents(cell, rotation))

    # ------------------------------------------------------------------
    # Neighbourhood
    # ------------------------------------------------------------------

    def adjacent_cells(self, cell: Cell) -> list[Cell]:
        disk, sector = cell
        cells = [(disk, wrap_sector(sector - 1)), (disk, wrap_sector(sector + 1))]
        index = DISKS.index(disk)
        if index > 0:
            cells.append((DISKS[index - 1], sector))
        if index < len(DISKS) - 1:
            cells.append((DISKS[index + 1], sector))
        return cells

    def adjacent_sectors(self, sector_index: int) -> list[int]:
        return [wrap_sector(sector_index - 1), wrap_sector(sector_index + 1)]

    # ------------------------------------------------------------------
    # Rotation
    # ------------------------------------------------------------------

    def rotate(self, rotation: Sequence[int], level: int) -> list[int]:
        """Turn `level` one step; lower levels turn with it."""
        new_rotation = list(rotation)
        for lvl in range(1, level + 1):
            new_rotation[lvl - 1] += 1
        return new_rotation

    def carried_cell(self, cell: Cell, old_rotation: Sequence[int], new_rotation: Sequence[int]) -> Cell:
        """Where a probe sitting on `cell` ends up after a rotation."""
        level = self.surface_level(cell, old_rotation)
        if level == 0:
            return cell
        delta = self._steps(new_rotation, level) - self._steps(old_rotation, level)
        disk, sector = cell
        return disk, wrap_sector(sector + delta)


DEFAULT_GEOMETRY = RingGeometry()


def geometry_for(extra_objects: Sequence[str]) -> RingGeometry:
    if not extra_objects:
        return DEFAULT_GEOMETRY
    return DEFAULT_GEOMETRY.with_extra_objects(extra_objects)
