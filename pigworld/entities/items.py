"""Ground items: pig food and rope pieces."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from pigworld.entities.entity import GroundItem
from pigworld.entities.kinds import Kind

if TYPE_CHECKING:
    from pigworld.agents.pig import Pig

PIG_FOOD_ENERGY = 45


@dataclass(eq=False)
class PigFood(GroundItem):
    """Food dropped by trees; a pig that eats it gains its energy."""

    kind: ClassVar[Kind] = Kind.PIG_FOOD

    energy: int = PIG_FOOD_ENERGY


@dataclass(eq=False)
class RopePiece(GroundItem):
    """A trail marker a foraging pig leaves on cells it has walked through.

    Any number of rope pieces may share a cell.  The owner keeps its own
    pieces in a chain, oldest first; the oldest piece is the one furthest
    from the owner.

    Attributes:
        owner_id: Id of the pig that dropped this piece.
    """

    kind: ClassVar[Kind] = Kind.ROPE_PIECE
    single_per_cell: ClassVar[bool] = False

    owner_id: int | None = None

    @property
    def owner(self) -> Pig | None:
        """The owning pig, or None once it has left the world."""
        if self.world is None:
            return None
        return self.world.entity(self.owner_id)  # type: ignore[return-value]

    @property
    def index(self) -> int:
        """Position of this piece in its owner's chain (0 = oldest).

        Raises:
            LookupError: If the owner is gone or no longer holds this piece.
        """
        owner = self.owner
        if owner is None:
            msg = f"Rope piece {self.id} has no owner in the world"
            raise LookupError(msg)
        for index, piece in enumerate(owner.rope):
            if piece is self:
                return index
        msg = f"Rope piece {self.id} is not in pig {self.owner_id}'s rope"
        raise LookupError(msg)

    @property
    def distance_from_owner(self) -> int:
        """How many pieces back along the chain this one lies (1 = newest).

        Raises:
            LookupError: If the owner is gone or no longer holds this piece.
        """
        owner = self.owner
        if owner is None:
            msg = f"Rope piece {self.id} has no owner in the world"
            raise LookupError(msg)
        return len(owner.rope) - self.index

    def release_dependents(self) -> None:
        """Unlink this piece from its owner's chain."""
        owner = self.owner
        if owner is None:
            return
        owner.rope[:] = [piece for piece in owner.rope if piece is not self]
