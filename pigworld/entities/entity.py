"""Entity base classes -- anything that can be placed in the world.

An entity is created detached (no id, no cell, no world) and enters the
world through ``World.add``.  Only a successful placement commits an id
and a creation tick; an entity that could not be placed stays detached
forever.  Deleting an entity takes it off its cell, out of the registry,
deletes anything that depends on it, and detaches it for good.

Two families:

* ``Agent``: acts once per tick and occupies its cell's single occupant
  slot (pigs, wolves, trees).
* ``GroundItem``: inert, lies on a cell's floor (pig food, rope pieces).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from pigworld.entities.kinds import Kind
from pigworld.sensing.radar import find_nearest
from pigworld.simulation.events import EventType

if TYPE_CHECKING:
    from pigworld.sensing.radar import Echo
    from pigworld.simulation.engine import World
    from pigworld.world.cell import Cell
    from pigworld.world.geometry import Position


@dataclass(eq=False)
class Entity:
    """Common state of everything that lives in the world.

    Attributes:
        energy: Energy held; passed on to whoever eats this entity.
        id: Unique id, allocated by the world on successful placement.
        cell: The cell this entity sits on, or None while detached.
        world: The world this entity exists in, or None while detached.
        creation_tick: The world's ``now`` when this entity was placed.
        retired: Set once the entity is deleted or fails placement; a
            retired entity can never be added again.
    """

    kind: ClassVar[Kind] = Kind.THING

    energy: int = 0
    id: int | None = field(default=None, init=False)
    cell: Cell | None = field(default=None, init=False, repr=False)
    world: World | None = field(default=None, init=False, repr=False)
    creation_tick: int = field(default=0, init=False)
    retired: bool = field(default=False, init=False, repr=False)

    @property
    def exists(self) -> bool:
        """True from successful placement until deletion."""
        return self.world is not None

    @property
    def age(self) -> int:
        """Ticks since this entity was placed (0 while detached)."""
        if self.world is None:
            return 0
        return self.world.now - self.creation_tick

    @property
    def position(self) -> Position | None:
        if self.cell is None:
            return None
        return self.cell.position

    def require_world(self) -> World:
        """Return the world, failing loudly if this entity is detached."""
        if self.world is None:
            msg = f"{self} is not in a world"
            raise RuntimeError(msg)
        return self.world

    def require_cell(self) -> Cell:
        """Return the cell, failing loudly if this entity is detached."""
        if self.cell is None:
            msg = f"{self} is not on any cell"
            raise RuntimeError(msg)
        return self.cell

    def delete(self) -> None:
        """Remove this entity (and its dependents) from the world."""
        self.require_world().remove(self)

    def release_dependents(self) -> None:
        """Delete or unlink entities that cannot outlive this one.

        Called by the world during deletion, after this entity has left
        its cell and the registry.
        """

    def notify_changed(self) -> None:
        """Tell collaborators this entity's visible state changed."""
        if self.world is not None:
            self.world.bus.publish(EventType.ENTITY_CHANGED, entity=self)

    def __str__(self) -> str:
        return f"{type(self).__name__} at {self.cell}"


@dataclass(eq=False)
class Agent(Entity):
    """An entity that acts once per tick and occupies its cell.

    Attributes:
        last_action: Label of the most recent decision, for debug display.
    """

    kind: ClassVar[Kind] = Kind.LIFE_FORM

    last_action: str = field(default="", init=False)

    def handle_time(self) -> None:
        """Advance this agent by one tick."""
        self.act()

    def act(self) -> None:
        """Make this tick's decision.  Subclasses implement behaviour."""
        raise NotImplementedError

    def find_nearest(self, kind: Kind) -> Echo | None:
        """Sweep for entities of ``kind`` and return the nearest echo."""
        return find_nearest(self, kind)


@dataclass(eq=False)
class GroundItem(Entity):
    """An inert entity lying on a cell's floor.

    ``single_per_cell`` kinds allow at most one instance on any cell.
    """

    kind: ClassVar[Kind] = Kind.NONLIVING
    single_per_cell: ClassVar[bool] = True
