"""Cell -- a single square of land in the world grid.

What a cell may hold at any one time:

1. At most ONE agent, the *occupant* (a pig, a wolf or a tree).
2. Any number of ground items, kept per kind in placement order, oldest
   first.  A kind may allow only one instance per cell (pig food) or many
   (rope pieces).
3. A mobile occupant may share the cell with ground items.
4. A stationary occupant (a tree) may not: nothing can ever walk onto its
   cell, so items there would be unreachable.

Sound is not stored here; the cell's ``air`` is a view into the grid's
sound layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pigworld.simulation.events import EventType

if TYPE_CHECKING:
    from pigworld.entities.entity import Agent, Entity, GroundItem
    from pigworld.entities.kinds import Kind
    from pigworld.sound.field import Air
    from pigworld.world.geometry import Position
    from pigworld.world.grid import Grid


@dataclass(eq=False)
class Cell:
    """A single tile in the world grid.

    Attributes:
        grid: The grid this cell belongs to.
        position: Row/column of this cell.
        air: Sound level view for this cell.
        occupant: The agent standing here, if any.
    """

    grid: Grid = field(repr=False)
    position: Position
    air: Air = field(repr=False)
    occupant: Agent | None = None
    _items: dict[Kind, list[GroundItem]] = field(
        default_factory=dict,
        init=False,
        repr=False,
    )

    @property
    def row(self) -> int:
        return self.position.row

    @property
    def column(self) -> int:
        return self.position.column

    # -- Queries -------------------------------------------------------------

    def has(self, kind: Kind) -> bool:
        """Return True if at least one ground item of ``kind`` lies here."""
        return bool(self._items.get(kind))

    def inspect(self, kind: Kind) -> GroundItem | None:
        """Return the oldest ground item of ``kind`` here, or None."""
        items = self._items.get(kind)
        if not items:
            return None
        return items[0]

    def inspect_all(self, kind: Kind) -> list[GroundItem]:
        """Return every ground item of ``kind`` here, oldest first."""
        return list(self._items.get(kind, ()))

    def ground_items(self) -> list[GroundItem]:
        """Return all ground items on this cell, grouped by kind."""
        return [item for items in self._items.values() for item in items]

    def ground_item_count(self) -> int:
        return sum(len(items) for items in self._items.values())

    def is_room_for(self, agent: Agent) -> bool:
        """Return True if ``agent`` could become this cell's occupant."""
        if self.occupant is not None:
            return False
        return not (agent.kind.is_stationary and self.ground_item_count() > 0)

    def can_hold(self, item: GroundItem) -> bool:
        """Return True if ``item`` could be put down on this cell."""
        if self.occupant is not None and self.occupant.kind.is_stationary:
            return False
        return not (self.has(item.kind) and item.single_per_cell)

    def has_room_for(self, entity: Entity) -> bool:
        """Apply the agent or ground-item room rule, whichever fits."""
        if entity.kind.is_agent:
            return self.is_room_for(entity)  # type: ignore[arg-type]
        return self.can_hold(entity)  # type: ignore[arg-type]

    # -- Mutation ------------------------------------------------------------

    def add(self, entity: Entity) -> bool:
        """Place an agent or a ground item here, whichever ``entity`` is."""
        if entity.kind.is_agent:
            return self.occupy(entity)  # type: ignore[arg-type]
        return self.put_down(entity)  # type: ignore[arg-type]

    def remove(self, entity: Entity) -> None:
        """Take an agent or a ground item off this cell."""
        if entity.kind.is_agent:
            if self.occupant is entity:
                self.release()
        else:
            self.pick_up_item(entity)  # type: ignore[arg-type]

    def occupy(self, agent: Agent) -> bool:
        """Move ``agent`` from its current cell (if any) onto this one.

        Returns:
            False, leaving everything untouched, if there is no room.
        """
        if not self.is_room_for(agent):
            return False
        source = agent.cell
        if source is not None:
            source.release()
        self.occupant = agent
        agent.cell = self
        self.grid.bus.publish(EventType.CELL_CHANGED, cell=self, reason="occupant")
        return True

    def release(self) -> Agent | None:
        """Clear the occupant slot and return whoever was there."""
        removed = self.occupant
        if removed is not None:
            self.occupant = None
            removed.cell = None
            self.grid.bus.publish(
                EventType.CELL_CHANGED,
                cell=self,
                reason="occupant",
            )
        return removed

    def put_down(self, item: GroundItem) -> bool:
        """Put a ground item on this cell's floor.

        Returns:
            False if a tree stands here, or if the item's kind allows one
            per cell and one is already here.

        Raises:
            ValueError: If this very item is already on this cell.
        """
        if not self.can_hold(item):
            return False
        items = self._items.setdefault(item.kind, [])
        if any(existing is item for existing in items):
            msg = f"You can't put that {item.kind.label} on {self}. It's already there!"
            raise ValueError(msg)
        items.append(item)
        item.cell = self
        self.grid.bus.publish(EventType.ITEM_PUT_DOWN, cell=self, item=item)
        return True

    def pick_up(self, kind: Kind) -> GroundItem:
        """Pick up the oldest ground item of ``kind``.

        Raises:
            LookupError: If there is no such item; check ``has`` first.
        """
        item = self.inspect(kind)
        if item is None:
            msg = (
                f"There is no {kind.label} on {self}. "
                "Check with has() before trying to pick one up."
            )
            raise LookupError(msg)
        return self.pick_up_item(item)

    def pick_up_item(self, item: GroundItem) -> GroundItem:
        """Pick up one specific ground item.

        The item keeps existing in the world; delete it separately.

        Raises:
            LookupError: If the item is not on this cell.
        """
        items = self._items.get(item.kind, [])
        for index, existing in enumerate(items):
            if existing is item:
                del items[index]
                break
        else:
            msg = f"Can't pick that {item.kind.label} up from {self}. It's not there!"
            raise LookupError(msg)
        item.cell = None
        self.grid.bus.publish(EventType.ITEM_PICKED_UP, cell=self, item=item)
        return item

    def pulse(self) -> None:
        """Ask displays to redraw this cell."""
        self.grid.bus.publish(EventType.CELL_CHANGED, cell=self, reason="pulse")

    def __str__(self) -> str:
        return f"cell[{self.row},{self.column}]"
