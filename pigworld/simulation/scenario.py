"""Scenario -- a starting layout of entities and walls, loaded from YAML.

Example file::

    entities:
      - {kind: boy_pig, row: 5, column: 2}
      - {kind: pig_food, row: 1, column: 1}
    walls:
      horizontal: [[6, 0], [6, 1]]
      vertical: [[1, 2]]

Entities are placed in file order (so earlier entries win contested
cells), then the walls go up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from pigworld.entities.kinds import Kind
from pigworld.world.geometry import Position

if TYPE_CHECKING:
    from pigworld.simulation.engine import World

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Placement:
    """One entity to add when the scenario is applied."""

    kind: Kind
    position: Position


@dataclass
class Scenario:
    """Entities and walls to build into an emptied world.

    Attributes:
        name: Label shown by the viewer (the file stem when loaded).
        placements: Entities to add, in order.
        horizontal_walls: ``(row, column)`` of each walled horizontal gap.
        vertical_walls: ``(row, column)`` of each walled vertical gap.
    """

    name: str = "empty"
    placements: list[Placement] = field(default_factory=list)
    horizontal_walls: list[tuple[int, int]] = field(default_factory=list)
    vertical_walls: list[tuple[int, int]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any], name: str = "scenario") -> Scenario:
        """Build a scenario from parsed YAML.

        Raises:
            ValueError: If an entity names an unknown kind.
        """
        placements = []
        for entry in data.get("entities") or []:
            kind_name = str(entry["kind"]).upper()
            try:
                kind = Kind[kind_name]
            except KeyError:
                msg = f"Unknown entity kind {entry['kind']!r} in scenario {name}"
                raise ValueError(msg) from None
            placements.append(
                Placement(kind, Position(int(entry["row"]), int(entry["column"]))),
            )
        walls = data.get("walls") or {}
        return cls(
            name=name,
            placements=placements,
            horizontal_walls=[(int(r), int(c)) for r, c in walls.get("horizontal") or []],
            vertical_walls=[(int(r), int(c)) for r, c in walls.get("vertical") or []],
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> Scenario:
        """Load a scenario from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data, name=path.stem)

    def apply(self, world: World) -> None:
        """Clear ``world`` and build this scenario into it."""
        world.remove_all()
        for placement in self.placements:
            if world.add_entity_of_kind(placement.kind, placement.position) is None:
                logger.warning(
                    "Scenario %s: no room for %s at %s",
                    self.name,
                    placement.kind.label,
                    placement.position,
                )
        for row, column in self.horizontal_walls:
            world.fill_horizontal_gap(row, column)
        for row, column in self.vertical_walls:
            world.fill_vertical_gap(row, column)
        logger.info(
            "Loaded scenario %s: %d entities, %d walls",
            self.name,
            len(world.entities()),
            len(self.horizontal_walls) + len(self.vertical_walls),
        )
