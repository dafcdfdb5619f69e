from __future__ import annotations

from enum import Enum, auto
from typing import NamedTuple, Tuple

import numpy as np

from .errors import ConfigurationError, InvariantViolation


class SquareContent(Enum):
    GRASS = auto()
    EMPTY = auto()
    CRATER = auto()
    FENCE = auto()
    MOWER = auto()

    @property
    def is_obstacle(self) -> bool:
        return self in (SquareContent.CRATER, SquareContent.FENCE)


class Direction(Enum):
    """Compass headings, clockwise from North. Values are (slot, dx, dy)."""

    NORTH = (0, 0, 1)
    NORTHEAST = (1, 1, 1)
    EAST = (2, 1, 0)
    SOUTHEAST = (3, 1, -1)
    SOUTH = (4, 0, -1)
    SOUTHWEST = (5, -1, -1)
    WEST = (6, -1, 0)
    NORTHWEST = (7, -1, 1)

    @property
    def slot(self) -> int:
        return self.value[0]

    @property
    def delta(self) -> Tuple[int, int]:
        return (self.value[1], self.value[2])

    @classmethod
    def from_slot(cls, slot: int) -> "Direction":
        for direction in cls:
            if direction.slot == slot:
                return direction
        raise InvariantViolation(f"No heading for view slot {slot!r}")

    @classmethod
    def from_name(cls, name: str) -> "Direction":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown heading {name!r}") from None


class Coordinate(NamedTuple):
    x: int
    y: int

    def step(self, direction: Direction) -> "Coordinate":
        dx, dy = direction.delta
        return Coordinate(self.x + dx, self.y + dy)


class Lawn:
    """Authoritative grid of squares. Every in-bounds square starts as grass."""

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ConfigurationError(f"Lawn dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        # Indexed [x, y].
        self.squares = np.full((width, height), SquareContent.GRASS, dtype=object)

    @property
    def area(self) -> int:
        return self.width * self.height

    def in_bounds(self, coord: Coordinate) -> bool:
        return 0 <= coord.x < self.width and 0 <= coord.y < self.height

    def lookup(self, coord: Coordinate) -> SquareContent:
        """Return the content at ``coord``; anything off the lawn reads as fence."""
        if not self.in_bounds(coord):
            return SquareContent.FENCE
        return self.squares[coord.x, coord.y]

    def set(self, coord: Coordinate, content: SquareContent) -> None:
        if not self.in_bounds(coord):
            raise InvariantViolation(f"Cannot write {content.name} outside the lawn at {tuple(coord)}")
        if content == SquareContent.GRASS and self.squares[coord.x, coord.y] != SquareContent.GRASS:
            raise InvariantViolation(f"Grass cannot regrow at {tuple(coord)}")
        self.squares[coord.x, coord.y] = content

    def grass_count(self) -> int:
        return int(np.count_nonzero(self.squares == SquareContent.GRASS))
