"""Grid -- the cells of the world and the gaps between them.

Between every pair of orthogonally adjacent cells lies a ``Gap`` which
may be filled with a wall.  Horizontal gaps separate row ``r`` from row
``r + 1`` within one column; vertical gaps separate column ``c`` from
column ``c + 1`` within one row.  Walls block movement and sound, but not
radar.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from pigworld.simulation.events import EventBus, EventType
from pigworld.sound.field import Air, SoundField
from pigworld.world.cell import Cell
from pigworld.world.geometry import ADJACENT_DIRECTIONS, Direction, Position


class GapOrientation(Enum):
    """Which way a gap runs between cells."""

    HORIZONTAL = auto()
    VERTICAL = auto()


@dataclass(eq=False)
class Gap:
    """A slot between two adjacent cells that may hold a wall.

    Attributes:
        position: Row/column index of the gap in its orientation's array.
        orientation: Horizontal or vertical.
    """

    position: Position
    orientation: GapOrientation
    bus: EventBus | None = field(default=None, repr=False)
    _has_wall: bool = field(default=False, init=False)

    @property
    def has_wall(self) -> bool:
        return self._has_wall

    @has_wall.setter
    def has_wall(self, value: bool) -> None:
        self._has_wall = value
        if self.bus is not None:
            self.bus.publish(EventType.GAP_CHANGED, gap=self)

    def toggle(self) -> None:
        """Add a wall where there is none, or knock it down."""
        self.has_wall = not self._has_wall


@dataclass(eq=False)
class Grid:
    """A rows x columns array of cells joined by wall-able gaps.

    Attributes:
        rows: Number of rows.
        columns: Number of columns.
        bus: Where cell, item and gap changes are published.
        show_debug_info: While True, sound changes are published as
            cell changes so a display can show them.
        sound: Per-cell sound levels.
        cells: 2D list indexed as ``cells[row][column]``.
    """

    rows: int
    columns: int
    bus: EventBus = field(default_factory=EventBus, repr=False)
    show_debug_info: bool = False
    sound: SoundField = field(init=False, repr=False)
    cells: list[list[Cell]] = field(init=False, repr=False)
    horizontal_gaps: list[list[Gap]] = field(init=False, repr=False)
    vertical_gaps: list[list[Gap]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Create cells, their air, and every gap (all without walls)."""
        if self.rows < 1 or self.columns < 1:
            msg = f"Grid needs at least one row and column, got {self.rows}x{self.columns}"
            raise ValueError(msg)
        self.sound = SoundField(rows=self.rows, columns=self.columns)
        self.cells = []
        for row in range(self.rows):
            cell_row = []
            for column in range(self.columns):
                position = Position(row, column)
                cell_row.append(
                    Cell(grid=self, position=position, air=Air(self, position)),
                )
            self.cells.append(cell_row)
        self.horizontal_gaps = [
            [
                Gap(Position(row, column), GapOrientation.HORIZONTAL, self.bus)
                for column in range(self.columns)
            ]
            for row in range(self.rows - 1)
        ]
        self.vertical_gaps = [
            [
                Gap(Position(row, column), GapOrientation.VERTICAL, self.bus)
                for column in range(self.columns - 1)
            ]
            for row in range(self.rows)
        ]

    # -- Cells ---------------------------------------------------------------

    def in_bounds(self, position: Position) -> bool:
        return 0 <= position.row < self.rows and 0 <= position.column < self.columns

    def cell_at(self, position: Position) -> Cell:
        """Return the cell at ``position``.

        Raises:
            IndexError: If the position is off the grid.
        """
        if not self.in_bounds(position):
            msg = f"{position} out of bounds for {self.rows}x{self.columns}"
            raise IndexError(msg)
        return self.cells[position.row][position.column]

    def all_cells(self) -> list[Cell]:
        """Return every cell in row-major order."""
        return [cell for row in self.cells for cell in row]

    def adjacent_cell(self, cell: Cell, direction: Direction) -> Cell | None:
        """Return the neighbour of ``cell`` nearest to ``direction``.

        The direction is rounded to one of the eight neighbours.

        Returns:
            None if that neighbour is off the grid or walled off.
        """
        d_row, d_column = direction.step_offset()
        target = Position(cell.row + d_row, cell.column + d_column)
        if not self.in_bounds(target):
            return None
        neighbour = self.cells[target.row][target.column]
        if self.wall_between(cell, neighbour):
            return None
        return neighbour

    def neighbours(self, cell: Cell) -> list[tuple[Direction, Cell]]:
        """Return reachable neighbours as ``(direction, cell)`` in scan order."""
        result: list[tuple[Direction, Cell]] = []
        for direction in ADJACENT_DIRECTIONS:
            neighbour = self.adjacent_cell(cell, direction)
            if neighbour is not None:
                result.append((direction, neighbour))
        return result

    # -- Gaps and walls ------------------------------------------------------

    def gap_at(self, row: int, column: int, orientation: GapOrientation) -> Gap:
        """Return one gap.

        Raises:
            ValueError: If ``orientation`` is not a ``GapOrientation``.
            IndexError: If there is no such gap.
        """
        if orientation is GapOrientation.HORIZONTAL:
            gaps = self.horizontal_gaps
        elif orientation is GapOrientation.VERTICAL:
            gaps = self.vertical_gaps
        else:
            msg = f"Invalid gap orientation: {orientation!r}"
            raise ValueError(msg)
        if row < 0 or column < 0:
            msg = f"No {orientation.name.lower()} gap at ({row}, {column})"
            raise IndexError(msg)
        return gaps[row][column]

    def wall_between(self, first: Cell, second: Cell) -> bool:
        """Return True if a wall separates two adjacent cells.

        For a diagonal pair, a wall on either the row-separating or the
        column-separating gaps of *both* cells blocks the pair, so nothing
        slips past the corner of a wall.

        Raises:
            ValueError: If the cells are not adjacent.
        """
        a, b = first.position, second.position
        if abs(a.row - b.row) > 1 or abs(a.column - b.column) > 1:
            msg = f"{first} and {second} are not adjacent"
            raise ValueError(msg)

        if a.row != b.row:
            row = min(a.row, b.row)
            if self.horizontal_gaps[row][a.column].has_wall:
                return True
            if self.horizontal_gaps[row][b.column].has_wall:
                return True

        if a.column != b.column:
            column = min(a.column, b.column)
            if self.vertical_gaps[a.row][column].has_wall:
                return True
            if self.vertical_gaps[b.row][column].has_wall:
                return True

        return False

    def fill_horizontal_gap(self, row: int, column: int) -> None:
        """Put a wall between ``(row, column)`` and ``(row + 1, column)``."""
        self.gap_at(row, column, GapOrientation.HORIZONTAL).has_wall = True

    def fill_vertical_gap(self, row: int, column: int) -> None:
        """Put a wall between ``(row, column)`` and ``(row, column + 1)``."""
        self.gap_at(row, column, GapOrientation.VERTICAL).has_wall = True

    def remove_all_walls(self) -> None:
        for gaps in (self.horizontal_gaps, self.vertical_gaps):
            for row in gaps:
                for gap in row:
                    if gap.has_wall:
                        gap.has_wall = False

    def walls(self) -> list[Gap]:
        """Return every gap currently holding a wall."""
        return [
            gap
            for gaps in (self.horizontal_gaps, self.vertical_gaps)
            for row in gaps
            for gap in row
            if gap.has_wall
        ]

    # -- Sound notifications -------------------------------------------------

    def air_changed(self, cell: Cell) -> None:
        """Report a sound change on ``cell`` when debug info is visible."""
        if self.show_debug_info:
            self.bus.publish(EventType.CELL_CHANGED, cell=cell, reason="air")
