"""Animal -- a mobile agent with a stomach and a need for sleep.

Every tick an animal makes one decision and then burns one unit of
energy.  Hunger has two watermarks: an animal becomes hungry once its
energy falls below ``STOMACH_EMPTY_LEVEL`` and stays hungry until eating
brings it all the way up to ``STOMACH_FULL_LEVEL``.  A well-fed animal
is in the mood for love.

Animals start out hungry with an empty stomach.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from pigworld.entities.entity import Agent
from pigworld.entities.kinds import Kind
from pigworld.world.geometry import ADJACENT_DIRECTIONS, Direction

if TYPE_CHECKING:
    from pigworld.entities.entity import Entity
    from pigworld.world.cell import Cell

logger = logging.getLogger(__name__)

# -- Constants ---------------------------------------------------------------

STOMACH_FULL_LEVEL = 60
STOMACH_EMPTY_LEVEL = 20
ENERGY_USED_PER_TICK = 1
DEFAULT_SLEEP = 100
_MAX_MOVE_ATTEMPTS = 20


@dataclass(eq=False)
class Animal(Agent):
    """Base class for pigs and wolves.

    Attributes:
        hungry: True while the animal is looking for food.
        tiredness: Ticks of rest still owed; the animal only rests while
            this is positive.
        heading: Persistent wandering direction, chosen on first use.
    """

    kind: ClassVar[Kind] = Kind.ANIMAL

    hungry: bool = field(default=True, init=False)
    tiredness: int = field(default=0, init=False)
    heading: Direction | None = field(default=None, init=False, repr=False)

    def handle_time(self) -> None:
        """Act, then pay the metabolic cost of the tick."""
        self.act()
        if self.exists:
            self.use_energy(ENERGY_USED_PER_TICK)

    # -- Energy ----------------------------------------------------------------

    def use_energy(self, amount: int) -> None:
        self.energy = max(self.energy - amount, 0)
        if self.energy < STOMACH_EMPTY_LEVEL:
            self.hungry = True
        self.notify_changed()

    def increase_energy(self, amount: int) -> None:
        """Add energy, up to a full stomach.  A full stomach ends hunger."""
        self.energy += amount
        if self.energy >= STOMACH_FULL_LEVEL:
            self.energy = STOMACH_FULL_LEVEL
            self.hungry = False
        self.notify_changed()

    @property
    def in_mood_for_love(self) -> bool:
        return not self.hungry

    def put_in_mood_for_love(self) -> None:
        self.increase_energy(STOMACH_FULL_LEVEL)

    def consume(self, food: Entity) -> None:
        """Eat ``food``: take its energy and delete it from the world."""
        self.last_action = "Eat"
        gained = food.energy
        food.delete()
        self.increase_energy(gained)

    # -- Rest ------------------------------------------------------------------

    @property
    def is_tired(self) -> bool:
        return self.tiredness > 0

    def increase_tiredness(self, amount: int) -> None:
        """Owe ``amount`` more ticks of rest.

        Raises:
            ValueError: If ``amount`` is negative.
        """
        if amount < 0:
            msg = f"increase_tiredness: amount ({amount}) < 0"
            raise ValueError(msg)
        self.tiredness += amount
        self.notify_changed()

    def rest(self) -> None:
        self.last_action = "Rest"
        if self.tiredness > 0:
            self.tiredness -= 1
            self.notify_changed()

    def sleep(self, amount: int = DEFAULT_SLEEP) -> None:
        """Send the animal to sleep for ``amount`` ticks."""
        self.increase_tiredness(amount)

    def wake_up(self) -> None:
        self.tiredness = 0
        self.notify_changed()

    # -- Senses ----------------------------------------------------------------

    def reach(self, direction: Direction) -> Agent | None:
        """Return the agent standing in the neighbouring cell, if reachable."""
        target = self._neighbour(direction)
        if target is None:
            return None
        return target.occupant

    def listen(self) -> Direction | None:
        """Return the direction of the loudest neighbouring cell.

        Ties go to the first direction in scan order.  Returns None when
        every reachable neighbour is silent.
        """
        loudest = 0
        loudest_direction: Direction | None = None
        for direction in ADJACENT_DIRECTIONS:
            neighbour = self._neighbour(direction)
            if neighbour is None:
                continue
            level = neighbour.air.level
            if level > loudest:
                loudest = level
                loudest_direction = direction
        return loudest_direction

    # -- Movement --------------------------------------------------------------

    def _neighbour(self, direction: Direction) -> Cell | None:
        if self.cell is None:
            return None
        return self.require_world().grid.adjacent_cell(self.cell, direction)

    def _open_neighbour(self, direction: Direction) -> Cell | None:
        """Return the neighbour toward ``direction`` if this animal fits there."""
        target = self._neighbour(direction)
        if target is None or not target.is_room_for(self):
            return None
        return target

    def can_move(self, direction: Direction) -> bool:
        return self._open_neighbour(direction) is not None

    def move(self, direction: Direction) -> bool:
        """Step one cell toward ``direction``.

        Returns:
            True if the animal moved; False if the way is off the grid,
            walled off, or taken.
        """
        target = self._neighbour(direction)
        if target is None:
            return False
        source = self.cell
        if not target.occupy(self):
            return False
        logger.debug("%s moved %s -> %s", type(self).__name__, source, target)
        return True

    def move_to(self, target: Cell) -> bool:
        """Step onto a neighbouring cell."""
        world = self.require_world()
        return self.move(world.bearing(self.require_cell(), target))

    def wander(self) -> bool:
        """Keep walking the current heading, picking a new one when blocked."""
        self.last_action = "Wander"
        rng = self.require_world().rng
        if self.heading is None:
            self.heading = Direction.random(rng)
        attempts = 0
        while not self.can_move(self.heading) and attempts < _MAX_MOVE_ATTEMPTS:
            self.heading = Direction.random(rng)
            attempts += 1
        return self.move(self.heading)

    def panic(self) -> bool:
        """Bolt in a random direction that is open, if one turns up."""
        rng = self.require_world().rng
        direction = Direction.random(rng)
        attempts = 1
        while not self.can_move(direction) and attempts < _MAX_MOVE_ATTEMPTS:
            direction = Direction.random(rng)
            attempts += 1
        return self.move(direction)
