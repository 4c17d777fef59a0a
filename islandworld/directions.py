"""Compass directions and their grid offsets."""

from __future__ import annotations

import random
from enum import Enum
from typing import Optional, Tuple


class Direction(Enum):
    """Eight compass directions; the value is the ``(dx, dy)`` step (y grows south)."""

    NORTH = (0, -1)
    SOUTH = (0, 1)
    EAST = (1, 0)
    WEST = (-1, 0)
    NORTHEAST = (1, -1)
    NORTHWEST = (-1, -1)
    SOUTHEAST = (1, 1)
    SOUTHWEST = (-1, 1)

    @property
    def offset(self) -> Tuple[int, int]:
        return self.value

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def label(self) -> str:
        """Lower-case name used in look-around keys and commands ("northeast")."""
        return self.name.lower()

    def opposite(self) -> "Direction":
        return Direction((-self.dx, -self.dy))

    def turn_right(self) -> "Direction":
        return _RIGHT_TURNS[self]

    def turn_left(self) -> "Direction":
        return _LEFT_TURNS[self]

    @classmethod
    def from_offset(cls, dx: int, dy: int) -> Optional["Direction"]:
        """Direction for a unit step, or None for ``(0, 0)`` and non-unit offsets."""
        try:
            return cls((dx, dy))
        except ValueError:
            return None

    @classmethod
    def parse(cls, text: str) -> "Direction":
        """Parse a direction name case-insensitively ("North", "north-east", "SOUTHWEST").

        Raises:
            ValueError: If ``text`` names no direction.
        """
        key = text.strip().upper().replace("-", "").replace("_", "").replace(" ", "")
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown direction: {text!r}") from None

    @classmethod
    def random(cls, rng: Optional[random.Random] = None) -> "Direction":
        return (rng or random).choice(list(cls))


# Quarter turns
_RIGHT_TURNS = {
    Direction.NORTH: Direction.EAST,
    Direction.SOUTH: Direction.WEST,
    Direction.EAST: Direction.SOUTH,
    Direction.WEST: Direction.NORTH,
    Direction.NORTHEAST: Direction.SOUTHEAST,
    Direction.NORTHWEST: Direction.NORTHEAST,
    Direction.SOUTHEAST: Direction.SOUTHWEST,
    Direction.SOUTHWEST: Direction.NORTHWEST,
}

_LEFT_TURNS = {
    Direction.NORTH: Direction.WEST,
    Direction.SOUTH: Direction.EAST,
    Direction.EAST: Direction.NORTH,
    Direction.WEST: Direction.SOUTH,
    Direction.NORTHEAST: Direction.NORTHWEST,
    Direction.NORTHWEST: Direction.SOUTHWEST,
    Direction.SOUTHEAST: Direction.NORTHEAST,
    Direction.SOUTHWEST: Direction.SOUTHEAST,
}
