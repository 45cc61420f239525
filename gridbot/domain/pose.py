"""Discrete headings and the immutable agent pose snapshot.

``AgentPose`` is what the motion engine publishes every animation frame.
``x``/``y`` are logical grid coordinates and may be fractional mid-animation;
``direction`` is fractional only while a turn is being interpolated.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum

from gridbot.config.constants import DIRECTION_COUNT


class Direction(IntEnum):
    """Cyclic headings ordered so that +1 is a 90 degree clockwise turn."""

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    @property
    def delta(self) -> tuple[int, int]:
        return _DELTAS[self]

    def turned(self, steps: int) -> Direction:
        return Direction((self.value + steps) % DIRECTION_COUNT)


_DELTAS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (0, 1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, -1),
    Direction.WEST: (-1, 0),
}


def shortest_turn(start: int, end: int) -> int:
    """Signed number of quarter turns from ``start`` to ``end`` along the shorter arc."""
    delta = (end - start + DIRECTION_COUNT) % DIRECTION_COUNT
    if delta > DIRECTION_COUNT // 2:
        delta -= DIRECTION_COUNT
    return delta


@dataclass(frozen=True)
class AgentPose:
    """Read-only snapshot of the agent."""

    x: float
    y: float
    direction: float
    carrying_cargo: bool = False
    scale_y: float = 1.0
    is_moving: bool = False

    @property
    def cell(self) -> tuple[int, int]:
        """Nearest logical cell, used for gameplay decisions."""
        return (round(self.x), round(self.y))

    @property
    def heading(self) -> Direction:
        """Nearest discrete heading."""
        return Direction(round(self.direction) % DIRECTION_COUNT)

    def cell_ahead(self) -> tuple[int, int]:
        i, j = self.cell
        dx, dy = self.heading.delta
        return (i + dx, j + dy)

    def settled(self) -> AgentPose:
        """Snap to the nearest cell and heading with no transient animation state."""
        i, j = self.cell
        return replace(
            self,
            x=float(i),
            y=float(j),
            direction=float(self.heading),
            scale_y=1.0,
            is_moving=False,
        )

    @classmethod
    def start(cls, grid_height: int, direction: Direction = Direction.EAST) -> AgentPose:
        """Default start pose: column 0, row ``height - 1``, facing east."""
        return cls(x=0.0, y=float(grid_height - 1), direction=float(direction))
