"""Pigs -- prey that forage, flee wolves and raise piglets.

Each tick a pig runs down a fixed priority list and does the first thing
that applies:

1. **Rest** while it still owes rest (after mating, or when put to sleep).
2. **Flee** when a wolf is closer than ``SAFE_DISTANCE_FROM_WOLF``: step
   directly away from it, or panic if that way is closed.
3. **Forage** while hungry, leaving a rope trail behind it so it can tell
   which cells it has already tried.
4. **Court** when well fed: girls grunt, boys follow the grunting.
5. Otherwise do nothing.

Rope pieces are the pig's short-term memory while foraging.  A pig
prefers cells it has not roped yet; when every open neighbour is roped it
backtracks toward its oldest rope.  The rope is cleared as soon as the pig
eats or when there is no food left anywhere.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from pigworld.agents.animal import STOMACH_EMPTY_LEVEL, Animal
from pigworld.entities.items import PIG_FOOD_ENERGY, RopePiece
from pigworld.entities.kinds import Kind
from pigworld.world.geometry import ADJACENT_DIRECTIONS, NORTH

if TYPE_CHECKING:
    from pigworld.world.cell import Cell
    from pigworld.world.geometry import Direction

logger = logging.getLogger(__name__)

# -- Constants ---------------------------------------------------------------

SAFE_DISTANCE_FROM_WOLF = 2.5
OINK_SOUND_LEVEL = 20
MATING_ENERGY_COST = STOMACH_EMPTY_LEVEL
MATING_REST = 5
GRUNT_AGE_MODULUS = 6
GRUNT_TIMEOUT = 3


@dataclass(eq=False)
class Pig(Animal):
    """Common pig behaviour.

    Attributes:
        mother_id: Id of the girl pig that gave birth to this one.
        father_id: Id of the boy pig that fathered this one.
        rope: This pig's own rope pieces, oldest first.
    """

    kind: ClassVar[Kind] = Kind.PIG

    mother_id: int | None = None
    father_id: int | None = None
    rope: list[RopePiece] = field(default_factory=list, init=False, repr=False)

    def act(self) -> None:
        if self.is_tired:
            self.rest()
            return
        if self.run_from_wolf():
            return
        if self.hungry:
            self.look_for_food()
        elif self.in_mood_for_love:
            self.court()
        else:
            self.last_action = "Do nothing"

    def court(self) -> None:
        """Look for a partner.  Plain pigs have no courting behaviour."""
        self.last_action = "Do nothing"

    # -- Fleeing ---------------------------------------------------------------

    def run_from_wolf(self) -> bool:
        """Move away from a nearby wolf.

        Returns:
            True if a wolf was close enough to react to.
        """
        echo = self.find_nearest(Kind.WOLF)
        if echo is None or echo.distance >= SAFE_DISTANCE_FROM_WOLF:
            return False
        self.last_action = "RunFromWolf"
        if not self.move(echo.direction.opposite()):
            self.panic()
        return True

    # -- Foraging --------------------------------------------------------------

    def look_for_food(self) -> None:
        """Eat food underfoot, or take one rope-guided step toward food."""
        self.last_action = "LookForFood"
        food = self.require_cell().inspect(Kind.PIG_FOOD)
        if food is not None:
            self.consume(food)
            self.clear_rope()
            return

        echo = self.find_nearest(Kind.PIG_FOOD)
        if echo is None:
            self.clear_rope()
            self.wander()
            return

        target = self._open_neighbour(echo.direction)
        if target is not None and (
            target.has(Kind.PIG_FOOD) or self.my_rope_piece(target) is None
        ):
            self.drop_rope()
            self.move_to(target)
            return
        self.examine_surrounding_cells(echo.direction)

    def examine_surrounding_cells(self, food_direction: Direction) -> None:
        """Pick the best open neighbour when the direct way is closed or roped.

        Unroped neighbours win, closest in bearing to the food first (the
        earliest in scan order on a tie).  If every open neighbour is
        roped, backtrack toward the oldest rope piece.
        """
        lowest_difference: float | None = None
        closest_direction = NORTH
        oldest_rope = -1
        oldest_rope_direction = NORTH
        for direction in ADJACENT_DIRECTIONS:
            neighbour = self._open_neighbour(direction)
            if neighbour is None:
                continue
            piece = self.my_rope_piece(neighbour)
            if piece is None:
                difference = direction.angular_difference(food_direction)
                if lowest_difference is None or difference < lowest_difference:
                    lowest_difference = difference
                    closest_direction = direction
            else:
                age = piece.distance_from_owner
                if age > oldest_rope:
                    oldest_rope = age
                    oldest_rope_direction = direction

        self.drop_rope()
        if lowest_difference is not None:
            self.move(closest_direction)
        else:
            self.move(oldest_rope_direction)

    # -- Rope ------------------------------------------------------------------

    def drop_rope(self) -> RopePiece:
        """Leave a rope piece on the current cell.

        Raises:
            RuntimeError: If the piece could not be placed.
        """
        world = self.require_world()
        piece = RopePiece(owner_id=self.id)
        if not world.add(piece, self.require_cell().position):
            msg = f"Rope could not be created for {self}"
            raise RuntimeError(msg)
        self.rope.append(piece)
        return piece

    def my_rope_piece(self, cell: Cell) -> RopePiece | None:
        """Return this pig's newest rope piece on ``cell``, if any."""
        best: RopePiece | None = None
        for piece in cell.inspect_all(Kind.ROPE_PIECE):
            if not isinstance(piece, RopePiece) or piece.owner_id != self.id:
                continue
            if best is None or piece.distance_from_owner < best.distance_from_owner:
                best = piece
        return best

    def clear_rope(self) -> None:
        """Delete every rope piece this pig has dropped."""
        for piece in list(self.rope):
            if piece.exists:
                piece.delete()
        self.rope.clear()

    def release_dependents(self) -> None:
        self.clear_rope()

    # -- Family ----------------------------------------------------------------

    def is_parent(self, possible_parent: Pig) -> bool:
        """Return True if ``possible_parent`` is this pig's mother or father."""
        if possible_parent.id is None:
            return False
        return possible_parent.id in (self.mother_id, self.father_id)

    def is_sibling(self, pig: Pig) -> bool:
        """Return True if both pigs have the same recorded mother and father."""
        if pig.mother_id is None or pig.father_id is None:
            return False
        return self.mother_id == pig.mother_id and self.father_id == pig.father_id

    def feed(self) -> None:
        """Hand-feed the pig one helping of pig food."""
        self.increase_energy(PIG_FOOD_ENERGY)

    def pay_mating_cost(self) -> None:
        self.use_energy(MATING_ENERGY_COST)
        self.increase_tiredness(MATING_REST)


@dataclass(eq=False)
class BoyPig(Pig):
    """A boy pig follows grunting to find a girl."""

    kind: ClassVar[Kind] = Kind.BOY_PIG

    def court(self) -> None:
        """Head for the loudest sound; propose to a girl if she is there."""
        self.last_action = "LookForPig"
        direction = self.listen()
        if direction is None:
            self.wander()
            return
        neighbour = self.reach(direction)
        if isinstance(neighbour, GirlPig):
            if not self.is_tired and self.in_mood_for_love:
                neighbour.try_to_make_baby(self)
                self.pay_mating_cost()
        else:
            self.move(direction)


@dataclass(eq=False)
class GirlPig(Pig):
    """A girl pig grunts now and then to call boys over.

    Attributes:
        grunt_time_left: Ticks until she stops grunting.
    """

    kind: ClassVar[Kind] = Kind.GIRL_PIG

    grunt_time_left: int = field(default=0, init=False)

    def act(self) -> None:
        super().act()
        if self.grunt_time_left > 0:
            self.grunt_time_left -= 1

    @property
    def is_grunting(self) -> bool:
        return self.grunt_time_left > 0

    def court(self) -> None:
        self.last_action = "LookForPig"
        if self.age % GRUNT_AGE_MODULUS == 0:
            self.grunt()

    def grunt(self) -> None:
        """Make a loud oink that spreads through the neighbourhood."""
        self.grunt_time_left = GRUNT_TIMEOUT
        self.require_cell().air.transmit(OINK_SOUND_LEVEL)
        self.require_world().play_sound("grunt", self)

    def try_to_make_baby(self, boy: BoyPig) -> bool:
        """Try to have a piglet with ``boy``.

        Fails if either pig is tired or not in the mood, or if the pigs
        are siblings or one is the other's parent.  On success the piglet
        is placed on her cell (or the nearest free neighbour) and she pays
        the mating cost.

        Returns:
            True if the attempt succeeded.
        """
        if self.is_tired or not self.in_mood_for_love:
            return False
        if boy.is_tired or not boy.in_mood_for_love:
            return False
        if self.is_sibling(boy) or self.is_parent(boy) or boy.is_parent(self):
            return False

        world = self.require_world()
        cell = self.require_cell()
        baby_type: type[Pig] = BoyPig if world.rng.random() >= 0.5 else GirlPig
        baby = baby_type(mother_id=self.id, father_id=boy.id)
        if world.add(baby, cell.position):
            logger.info(
                "%s %d born to %d and %d at %s",
                baby.kind.label,
                baby.id,
                self.id,
                boy.id,
                baby.cell,
            )
        else:
            logger.debug("No room for a piglet near %s", cell)
        self.pay_mating_cost()
        world.play_sound("shriek", self)
        return True
