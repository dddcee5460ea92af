"""Plants -- stationary agents.  Trees drop pig food now and then."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import ClassVar

from pigworld.entities.entity import Agent
from pigworld.entities.items import PigFood
from pigworld.entities.kinds import Kind

logger = logging.getLogger(__name__)

FOOD_DROP_PERIOD = 10
# A pig this close to the tree keeps it from dropping food.
PIG_CLEARANCE = 1


@dataclass(eq=False)
class Plant(Agent):
    """An agent that never moves; its cell never holds ground items."""

    kind: ClassVar[Kind] = Kind.PLANT

    def act(self) -> None:
        self.last_action = "Grow"


@dataclass(eq=False)
class Tree(Plant):
    """Drops a pig food every ``FOOD_DROP_PERIOD`` ticks when no pig is close.

    The food is placed on the tree's own position; since nothing can lie
    under a tree, the usual placement fallback puts it on the first free
    neighbour.

    Attributes:
        ticks_since_drop: Acts since the counter last wrapped.
    """

    kind: ClassVar[Kind] = Kind.TREE

    ticks_since_drop: int = field(default=0, init=False)

    def act(self) -> None:
        self.last_action = "Grow"
        nearest_pig = self.find_nearest(Kind.PIG)
        self.ticks_since_drop += 1
        if self.ticks_since_drop == FOOD_DROP_PERIOD:
            self.ticks_since_drop = 0
            if nearest_pig is None or nearest_pig.distance > PIG_CLEARANCE:
                self.drop_food()

    def drop_food(self) -> PigFood | None:
        """Place a new pig food at (or beside) the tree."""
        world = self.require_world()
        food = PigFood()
        if not world.add(food, self.require_cell().position):
            logger.debug("Tree %d has no room to drop food", self.id)
            return None
        self.last_action = "DropFood"
        return food
