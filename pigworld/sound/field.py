"""SoundField -- per-cell sound levels for the whole grid.

Levels are non-negative integers held in one NumPy 2D array so that the
world-wide decay can run as a single array operation.  Each cell gets an
``Air`` view onto its own entry; propagation and decay live in
``propagation.py``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pigworld.sound import propagation

if TYPE_CHECKING:
    from pigworld.world.geometry import Position
    from pigworld.world.grid import Grid


@dataclass
class SoundField:
    """Sound intensity for every cell.

    Attributes:
        rows: Grid rows (must match Grid).
        columns: Grid columns (must match Grid).
        levels: Integer sound level per cell (>= 0), indexed ``[row, column]``.
    """

    rows: int
    columns: int
    levels: NDArray[np.int64] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.levels = np.zeros((self.rows, self.columns), dtype=np.int64)

    def read(self, row: int, column: int) -> int:
        return int(self.levels[row, column])

    def write(self, row: int, column: int, level: int) -> None:
        self.levels[row, column] = level

    def clear(self) -> None:
        """Silence every cell without notifying anyone."""
        self.levels.fill(0)

    def loudest(self) -> int:
        return int(self.levels.max())


@dataclass(eq=False)
class Air:
    """The sound in one cell.

    Attributes:
        grid: The grid owning the sound field.
        position: Which cell this air belongs to.
    """

    grid: Grid = field(repr=False)
    position: Position

    @property
    def level(self) -> int:
        """Current sound level in this cell."""
        return self.grid.sound.read(self.position.row, self.position.column)

    def transmit(self, level: int) -> None:
        """Make a sound here; it spreads outward, one level quieter per cell."""
        propagation.transmit(self.grid, self.position, level)

    def decay(self) -> None:
        """Drop this cell's level by one, if there is any sound."""
        propagation.decay_cell(self.grid, self.position)
