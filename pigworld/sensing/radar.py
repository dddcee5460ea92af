"""Radar -- a clockwise sweep that detects entities of one kind.

A radar reports targets one at a time in order of increasing bearing,
starting just before North.  Among targets at exactly the same bearing
only the nearest is reported; once the sweep moves past a bearing, the
farther targets on it are skipped for the rest of that sweep.  Walls do
not block radar.

Targets standing on the owner's own cell have no bearing and are never
reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pigworld.entities.entity import Entity
    from pigworld.entities.kinds import Kind
    from pigworld.world.geometry import Direction

# Sweep angle before the first ping of a sweep.
_SWEEP_START = -1.0


@dataclass(frozen=True)
class Echo:
    """One radar detection.

    Attributes:
        kind: Concrete kind of the detected entity.
        direction: Bearing from the radar's owner to the target.
        distance: Chebyshev distance from the owner to the target.
    """

    kind: Kind
    direction: Direction
    distance: int


@dataclass
class Radar:
    """A sweeping detector bound to an owner and a target kind.

    Matching is by lineage: a radar for ``Kind.PIG`` detects boy and girl
    pigs alike.

    Attributes:
        owner: The entity carrying the radar.
        target_kind: Kind (or ancestor kind) to detect.
        sweep_angle: Bearing of the last reported echo in this sweep.
    """

    owner: Entity
    target_kind: Kind
    sweep_angle: float = field(default=_SWEEP_START)

    def ping(self) -> Echo | None:
        """Report the next target clockwise of the current sweep angle.

        Returns:
            The echo, or None when the sweep is complete.  A None resets
            the sweep so the next ping starts over from North.
        """
        world = self.owner.require_world()
        owner_cell = self.owner.cell

        best: Entity | None = None
        best_direction: Direction | None = None
        best_distance = 0
        for entity in world.entities():
            if entity is self.owner or not entity.kind.is_a(self.target_kind):
                continue
            if entity.cell is None or entity.cell is owner_cell:
                continue
            direction = world.bearing(self.owner, entity)
            if direction.degrees <= self.sweep_angle:
                continue
            if best is None or best_direction is None or direction.degrees < best_direction.degrees:
                best = entity
                best_direction = direction
                best_distance = world.distance(self.owner, entity)
            elif direction.degrees == best_direction.degrees:
                distance = world.distance(self.owner, entity)
                if distance < best_distance:
                    best = entity
                    best_distance = distance

        if best is None or best_direction is None:
            self.sweep_angle = _SWEEP_START
            return None
        self.sweep_angle = best_direction.degrees
        return Echo(kind=best.kind, direction=best_direction, distance=best_distance)

    def sweep(self) -> list[Echo]:
        """Ping until the sweep completes and return every echo in order."""
        echoes: list[Echo] = []
        echo = self.ping()
        while echo is not None:
            echoes.append(echo)
            echo = self.ping()
        return echoes


def find_nearest(owner: Entity, kind: Kind) -> Echo | None:
    """Return the nearest target of ``kind`` seen in one full sweep.

    Ties on distance go to the first echo of the sweep (smallest bearing).
    """
    best: Echo | None = None
    for echo in Radar(owner, kind).sweep():
        if best is None or echo.distance < best.distance:
            best = echo
    return best
