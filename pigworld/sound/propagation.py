"""Sound propagation and decay.

Operates on the ``SoundField`` owned by a ``Grid``.  Separated from
``field.py`` in the same way pheromone diffusion is kept apart from the
layers it updates.

Propagation is a priority flood fill: a cell takes a new level only if it
is strictly louder than what it already holds, then passes ``level - 1``
on to each neighbour it is not walled off from.  A cell can be rewritten
several times during one transmission when a louder path reaches it
after a quieter one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from pigworld.world.geometry import Position
    from pigworld.world.grid import Grid


def transmit(grid: Grid, position: Position, level: int) -> None:
    """Raise the sound at ``position`` to ``level`` and spread it.

    Args:
        grid: The grid the sound travels through.
        position: Where the sound is made.
        level: Loudness at the source.
    """
    sound = grid.sound
    if level <= sound.read(position.row, position.column):
        return
    sound.write(position.row, position.column, level)
    cell = grid.cell_at(position)
    grid.air_changed(cell)
    for _direction, neighbour in grid.neighbours(cell):
        transmit(grid, neighbour.position, level - 1)


def decay_cell(grid: Grid, position: Position) -> None:
    """Reduce one cell's sound level by one, floored at zero."""
    sound = grid.sound
    level = sound.read(position.row, position.column)
    if level > 0:
        sound.write(position.row, position.column, level - 1)
        grid.air_changed(grid.cell_at(position))


def decay_all(grid: Grid) -> None:
    """Reduce every positive sound level on the grid by one.

    The decrement is a single array operation; cells are only visited
    individually when debug display wants to hear about the change.
    """
    levels = grid.sound.levels
    audible = levels > 0
    if not audible.any():
        return
    levels[audible] -= 1
    if grid.show_debug_info:
        for row, column in np.argwhere(audible):
            grid.air_changed(grid.cells[int(row)][int(column)])
