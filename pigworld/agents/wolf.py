"""Wolf -- hunts the nearest pig."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import ClassVar

from pigworld.agents.animal import Animal
from pigworld.entities.kinds import Kind

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Wolf(Animal):
    """A predator that always heads for the nearest pig.

    If the neighbouring cell toward that pig is free the wolf steps into
    it; if a pig stands there the wolf eats it and takes its place.
    Wolves ignore hunger, mood and tiredness.
    """

    kind: ClassVar[Kind] = Kind.WOLF

    def act(self) -> None:
        self.last_action = "Hunt"
        echo = self.find_nearest(Kind.PIG)
        if echo is None:
            self.last_action = "Do nothing"
            return
        target = self._neighbour(echo.direction)
        if target is None:
            return
        prey = target.occupant
        if prey is None:
            self.move_to(target)
        elif prey.kind.is_a(Kind.PIG):
            logger.info("Wolf %d ate %s %d at %s", self.id, prey.kind.label, prey.id, target)
            self.consume(prey)
            self.move_to(target)
