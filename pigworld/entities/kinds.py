"""Kind tags -- what sort of thing an entity is.

Every entity class declares one concrete ``Kind``.  Kinds form a small
is-a lineage so that a query for ``PIG`` matches both boy and girl pigs,
and a query for ``ANIMAL`` matches pigs and wolves.  Placement rules and
radar matching read the capabilities below instead of inspecting
classes.
"""

from __future__ import annotations

from enum import Enum, auto


class Kind(Enum):
    """Entity kind tags, abstract and concrete."""

    THING = auto()
    LIFE_FORM = auto()
    ANIMAL = auto()
    PLANT = auto()
    NONLIVING = auto()
    PIG = auto()
    BOY_PIG = auto()
    GIRL_PIG = auto()
    WOLF = auto()
    TREE = auto()
    PIG_FOOD = auto()
    ROPE_PIECE = auto()

    @property
    def parent(self) -> Kind | None:
        """The next more general kind, or None for ``THING``."""
        return _PARENTS.get(self)

    def lineage(self) -> list[Kind]:
        """Return this kind followed by each ancestor up to ``THING``."""
        chain: list[Kind] = []
        kind: Kind | None = self
        while kind is not None:
            chain.append(kind)
            kind = kind.parent
        return chain

    def is_a(self, other: Kind) -> bool:
        """Return True if this kind is ``other`` or a more specific kind of it."""
        return other in self.lineage()

    @property
    def is_agent(self) -> bool:
        """Agents act every tick."""
        return self.is_a(Kind.LIFE_FORM)

    @property
    def is_mobile(self) -> bool:
        """Mobile agents can move between cells."""
        return self.is_a(Kind.ANIMAL)

    @property
    def is_stationary(self) -> bool:
        """Stationary agents never move; their cell holds no ground items."""
        return self.is_a(Kind.PLANT)

    @property
    def is_ground_item(self) -> bool:
        """Ground items sit on a cell's floor rather than in its occupant slot."""
        return self.is_a(Kind.NONLIVING)

    @property
    def is_concrete(self) -> bool:
        """Concrete kinds are the ones entities are actually created with."""
        return self in _CONCRETE

    @property
    def label(self) -> str:
        """Human-readable name, e.g. ``"Boy pig"``."""
        return self.name.replace("_", " ").capitalize()


_PARENTS: dict[Kind, Kind] = {
    Kind.LIFE_FORM: Kind.THING,
    Kind.NONLIVING: Kind.THING,
    Kind.ANIMAL: Kind.LIFE_FORM,
    Kind.PLANT: Kind.LIFE_FORM,
    Kind.PIG: Kind.ANIMAL,
    Kind.BOY_PIG: Kind.PIG,
    Kind.GIRL_PIG: Kind.PIG,
    Kind.WOLF: Kind.ANIMAL,
    Kind.TREE: Kind.PLANT,
    Kind.PIG_FOOD: Kind.NONLIVING,
    Kind.ROPE_PIECE: Kind.NONLIVING,
}

_CONCRETE = frozenset(
    {
        Kind.BOY_PIG,
        Kind.GIRL_PIG,
        Kind.WOLF,
        Kind.TREE,
        Kind.PIG_FOOD,
        Kind.ROPE_PIECE,
    },
)
