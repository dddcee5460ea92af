"""Geometry primitives -- grid positions and compass directions.

Directions follow the compass convention: North is 0 degrees and angles
increase clockwise, so East is 90, South 180 and West 270.  The eight
cells around any cell lie on the eight *canonical* directions, 45 degrees
apart, which agents scan in the fixed order N, NE, E, SE, S, SW, W, NW.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from numpy.random import Generator

NUM_DIRECTIONS = 8
ANGLE_INCREMENT = 360.0 / NUM_DIRECTIONS

_NAMES = {
    0.0: "NORTH",
    45.0: "NORTH_EAST",
    90.0: "EAST",
    135.0: "SOUTH_EAST",
    180.0: "SOUTH",
    225.0: "SOUTH_WEST",
    270.0: "WEST",
    315.0: "NORTH_WEST",
}


@dataclass(frozen=True)
class Position:
    """A (row, column) pair on the grid.

    Row 0 is the northern edge; rows increase southward and columns
    increase eastward.

    Attributes:
        row: Row index.
        column: Column index.
    """

    row: int
    column: int

    def __str__(self) -> str:
        return f"[{self.row},{self.column}]"


# Placement sentinel: -1 in an axis asks for a random value in that axis.
ANY = Position(-1, -1)


@dataclass(frozen=True)
class Direction:
    """An immutable compass heading in degrees, in ``[0, 360)``.

    Attributes:
        degrees: Clockwise angle from North.

    Raises:
        ValueError: If ``degrees`` is outside ``[0, 360)``.
    """

    degrees: float

    def __post_init__(self) -> None:
        if self.degrees < 0.0:
            msg = f"Can't have a direction < 0 degrees (got {self.degrees})"
            raise ValueError(msg)
        if self.degrees >= 360.0:
            msg = f"Can't have a direction >= 360 degrees (got {self.degrees})"
            raise ValueError(msg)

    @classmethod
    def adjacent(cls, index: int) -> Direction:
        """Return canonical direction ``index`` (0 = North, clockwise to 7)."""
        return cls(index * ANGLE_INCREMENT)

    @classmethod
    def random(cls, rng: Generator) -> Direction:
        """Return one of the eight canonical directions, chosen uniformly."""
        return cls.adjacent(int(rng.integers(NUM_DIRECTIONS)))

    @property
    def radians(self) -> float:
        """The angle in radians."""
        return math.radians(self.degrees)

    def relative(self, delta: float) -> Direction:
        """Return the direction ``delta`` degrees clockwise of this one."""
        degrees = (self.degrees + delta) % 360.0
        if degrees < 0.0:
            degrees += 360.0
        return Direction(degrees)

    def opposite(self) -> Direction:
        """Return the direction pointing the other way."""
        return self.relative(180.0)

    def angular_difference(self, other: Direction) -> float:
        """Return the shortest arc between two directions (0-180 degrees)."""
        difference = abs(self.degrees - other.degrees)
        if difference > 180.0:
            difference = 360.0 - difference
        return difference

    def step_offset(self) -> tuple[int, int]:
        """Return ``(d_row, d_column)`` of the grid neighbour nearest this heading."""
        radians = self.radians
        return -round(math.cos(radians)), round(math.sin(radians))

    def __str__(self) -> str:
        name = _NAMES.get(self.degrees)
        if name is not None:
            return f"Direction.{name}"
        return f"direction={self.degrees}"


NORTH = Direction(0.0)
NORTH_EAST = Direction(45.0)
EAST = Direction(90.0)
SOUTH_EAST = Direction(135.0)
SOUTH = Direction(180.0)
SOUTH_WEST = Direction(225.0)
WEST = Direction(270.0)
NORTH_WEST = Direction(315.0)

# Scan order used everywhere a cell looks at its neighbours.
ADJACENT_DIRECTIONS: tuple[Direction, ...] = tuple(
    Direction.adjacent(i) for i in range(NUM_DIRECTIONS)
)
