"""World -- the orchestrator that owns the grid, the entities and the clock.

One call to ``World.step`` is one atomic tick:

1. Advance the clock.
2. Every third tick, let all sound in the world fade by one level.
3. Give every entity that existed at the start of the tick one turn, in
   the order they were added.  Agents act (if they have not been deleted
   earlier in the tick); ground items ask for a redraw every sixth tick.

Entities born during a tick first act on the next one.  ``step`` is not
reentrant; anything driving it from a timer must serialise the calls.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.random import Generator

from pigworld.agents.pig import BoyPig, GirlPig
from pigworld.agents.tree import Tree
from pigworld.agents.wolf import Wolf
from pigworld.entities.entity import Entity
from pigworld.entities.items import PigFood
from pigworld.entities.kinds import Kind
from pigworld.simulation.events import EventBus, EventType
from pigworld.simulation.scenario import Scenario
from pigworld.sound.propagation import decay_all
from pigworld.world.cell import Cell
from pigworld.world.geometry import (
    ADJACENT_DIRECTIONS,
    ANY,
    EAST,
    NORTH,
    SOUTH,
    WEST,
    Direction,
    Position,
)
from pigworld.world.grid import Gap, GapOrientation, Grid

if TYPE_CHECKING:
    from collections.abc import Callable

    from pigworld.entities.entity import GroundItem
    from pigworld.simulation.config import SimulationConfig

logger = logging.getLogger(__name__)

# -- Constants ---------------------------------------------------------------

SOUND_DECAY_PERIOD = 3
PULSE_PERIOD = 6
DEFAULT_ROWS = 9
DEFAULT_COLUMNS = 9

# Kinds a user (or a scenario) may place by name.
_FACTORIES: dict[Kind, Callable[[], Entity]] = {
    Kind.BOY_PIG: BoyPig,
    Kind.GIRL_PIG: GirlPig,
    Kind.PIG_FOOD: PigFood,
    Kind.TREE: Tree,
    Kind.WOLF: Wolf,
}
PLACEABLE_KINDS: tuple[Kind, ...] = tuple(_FACTORIES)


@dataclass(eq=False)
class World:
    """The whole simulation.

    Attributes:
        rows: Number of grid rows.
        columns: Number of grid columns.
        seed: Seed for the world's random generator (None for entropy).
        bus: Where every visible change is published.
        enable_audio: When False, no ``SOUND_PLAYED`` events are published.
        grid: Cells and gaps.
        rng: The single random generator every decision draws from.
        now: Ticks elapsed since creation.
    """

    rows: int = DEFAULT_ROWS
    columns: int = DEFAULT_COLUMNS
    seed: int | None = None
    bus: EventBus = field(default_factory=EventBus, repr=False)
    enable_audio: bool = False
    grid: Grid = field(init=False, repr=False)
    rng: Generator = field(init=False, repr=False)
    now: int = field(default=0, init=False)
    _registry: dict[int, Entity] = field(default_factory=dict, init=False, repr=False)
    _last_id: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        self.grid = Grid(rows=self.rows, columns=self.columns, bus=self.bus)
        self.rng = np.random.default_rng(self.seed)

    @classmethod
    def from_config(cls, config: SimulationConfig) -> World:
        """Build a world (and its starting scenario, if any) from config."""
        world = cls(
            rows=config.rows,
            columns=config.columns,
            seed=config.seed,
            enable_audio=config.enable_audio,
        )
        world.show_debug_info = config.show_debug_info
        if config.scenario is not None:
            Scenario.from_yaml(config.scenario).apply(world)
        return world

    # -- Flags -----------------------------------------------------------------

    @property
    def show_debug_info(self) -> bool:
        return self.grid.show_debug_info

    @show_debug_info.setter
    def show_debug_info(self, value: bool) -> None:
        self.grid.show_debug_info = value
        self.bus.publish(EventType.DEBUG_FLAG_CHANGED, value=value)

    def play_sound(self, name: str, source: Entity | None = None) -> None:
        """Ask collaborators to play an audio cue, if audio is enabled."""
        if self.enable_audio:
            self.bus.publish(EventType.SOUND_PLAYED, name=name, entity=source)

    # -- Placement -------------------------------------------------------------

    def add(self, entity: Entity, position: Position = ANY) -> bool:
        """Put a detached entity into the world.

        ``-1`` in either axis of ``position`` picks a random row or column.
        If the target cell has no room, its neighbours are tried in scan
        order (N, NE, E, SE, S, SW, W, NW); the first with room wins.

        Returns:
            True if placed.  On False the entity stays detached for good
            and no id is used up.

        Raises:
            ValueError: If the entity is already in a world, or was
                deleted or failed placement before.
            IndexError: If ``position`` lies off the grid.
        """
        if entity.exists:
            msg = f"{entity} already exists in a world"
            raise ValueError(msg)
        if entity.retired:
            msg = f"{type(entity).__name__} was deleted or could not be placed"
            raise ValueError(msg)
        target = self.grid.cell_at(self._resolve(position))
        destination = self._find_room(entity, target)
        if destination is None:
            logger.debug("No room for %s near %s", entity.kind.label, target)
            entity.retired = True
            return False

        self._last_id += 1
        entity.id = self._last_id
        entity.world = self
        entity.creation_tick = self.now
        self._registry[entity.id] = entity
        destination.add(entity)
        logger.debug("Added %s %d at %s", entity.kind.label, entity.id, destination)
        self.bus.publish(EventType.ENTITY_ADDED, entity=entity)
        return True

    def add_entity_of_kind(self, kind: Kind, position: Position = ANY) -> Entity | None:
        """Create and place an entity of one of the user-placeable kinds.

        Returns:
            The new entity, or None if there was no room for it.

        Raises:
            ValueError: If ``kind`` is not a placeable kind.
        """
        factory = _FACTORIES.get(kind)
        if factory is None:
            msg = f"Unexpected kind {kind.name}"
            raise ValueError(msg)
        entity = factory()
        if not self.add(entity, position):
            return None
        return entity

    def _resolve(self, position: Position) -> Position:
        row, column = position.row, position.column
        if row == ANY.row:
            row = int(self.rng.integers(self.rows))
        if column == ANY.column:
            column = int(self.rng.integers(self.columns))
        return Position(row, column)

    def _find_room(self, entity: Entity, target: Cell) -> Cell | None:
        if target.has_room_for(entity):
            return target
        for direction in ADJACENT_DIRECTIONS:
            neighbour = self.grid.adjacent_cell(target, direction)
            if neighbour is not None and neighbour.has_room_for(entity):
                return neighbour
        return None

    # -- Removal ---------------------------------------------------------------

    def remove(self, entity: Entity) -> None:
        """Delete an entity along with everything that depends on it.

        Raises:
            ValueError: If the entity is not in this world.
        """
        if entity.world is not self or entity.id not in self._registry:
            msg = f"{entity} does not exist in this world"
            raise ValueError(msg)
        cell = entity.cell
        if cell is not None:
            cell.remove(entity)
        del self._registry[entity.id]
        entity.release_dependents()
        entity.world = None
        entity.cell = None
        entity.retired = True
        logger.debug("Removed %s %d from %s", entity.kind.label, entity.id, cell)
        self.bus.publish(EventType.ENTITY_REMOVED, entity=entity, cell=cell)

    def remove_all_entities(self) -> None:
        """Delete every entity and start ids from 1 again."""
        for entity in list(self._registry.values()):
            if entity.exists:
                entity.delete()
        self._last_id = 0
        logger.info("Removed all entities")

    def remove_all_walls(self) -> None:
        self.grid.remove_all_walls()

    def remove_all(self) -> None:
        """Empty the world: no entities, no walls."""
        self.remove_all_entities()
        self.remove_all_walls()

    # -- Walls -----------------------------------------------------------------

    def fill_horizontal_gap(self, row: int, column: int) -> None:
        self.grid.fill_horizontal_gap(row, column)

    def fill_vertical_gap(self, row: int, column: int) -> None:
        self.grid.fill_vertical_gap(row, column)

    def toggle_gap(self, row: int, column: int, orientation: GapOrientation) -> None:
        self.grid.gap_at(row, column, orientation).toggle()

    def gap_at(self, row: int, column: int, orientation: GapOrientation) -> Gap:
        return self.grid.gap_at(row, column, orientation)

    # -- Time ------------------------------------------------------------------

    def step(self) -> None:
        """Advance the world by one tick."""
        self.now += 1
        if self.now % SOUND_DECAY_PERIOD == 0:
            decay_all(self.grid)

        for entity in list(self._registry.values()):
            if entity.kind.is_agent:
                if entity.exists:
                    entity.handle_time()  # type: ignore[attr-defined]
            elif self.now % PULSE_PERIOD == 0 and entity.cell is not None:
                entity.cell.pulse()

        logger.debug("Tick %d: %d entities", self.now, len(self._registry))

    def run(self, ticks: int) -> None:
        """Advance the world by ``ticks`` ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.step()

    # -- Queries ---------------------------------------------------------------

    def cell_at(self, position: Position) -> Cell:
        return self.grid.cell_at(position)

    def entities(self) -> list[Entity]:
        """Return every entity in the world, in the order they were added."""
        return list(self._registry.values())

    def entity(self, entity_id: int | None) -> Entity | None:
        if entity_id is None:
            return None
        return self._registry.get(entity_id)

    def count(self, kind: Kind) -> int:
        """Return how many entities are ``kind`` or a more specific kind."""
        return sum(1 for entity in self._registry.values() if entity.kind.is_a(kind))

    def sound_level(self, position: Position) -> int:
        return self.grid.cell_at(position).air.level

    def items_at(self, position: Position, kind: Kind) -> list[GroundItem]:
        """Return the ground items of ``kind`` on a cell, oldest first."""
        return self.grid.cell_at(position).inspect_all(kind)

    # -- Geometry --------------------------------------------------------------

    def distance(self, source: Cell | Entity, target: Cell | Entity) -> int:
        """Chebyshev distance: diagonal steps count the same as straight ones."""
        a = _cell_of(source).position
        b = _cell_of(target).position
        return max(abs(b.row - a.row), abs(b.column - a.column))

    def bearing(self, source: Cell | Entity, target: Cell | Entity) -> Direction:
        """Compass direction from ``source`` to ``target``.

        Raises:
            ValueError: If both are on the same cell.
        """
        a = _cell_of(source).position
        b = _cell_of(target).position
        if a == b:
            msg = f"No bearing from {a} to itself"
            raise ValueError(msg)
        if a.column == b.column:
            return NORTH if a.row > b.row else SOUTH
        if a.row == b.row:
            return WEST if a.column > b.column else EAST
        angle = math.degrees(math.atan2(-(b.row - a.row), b.column - a.column))
        degrees = (90.0 - angle) % 360.0
        if degrees >= 360.0:
            degrees = 0.0
        return Direction(degrees)


def _cell_of(thing: Cell | Entity) -> Cell:
    if isinstance(thing, Cell):
        return thing
    if thing.cell is None:
        msg = f"{thing} is not on any cell"
        raise ValueError(msg)
    return thing.cell


def new_world(
    rows: int = DEFAULT_ROWS,
    columns: int = DEFAULT_COLUMNS,
    seed: int | None = None,
) -> World:
    """Create an empty world with no walls."""
    return World(rows=rows, columns=columns, seed=seed)
