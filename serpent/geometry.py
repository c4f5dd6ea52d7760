"""
Board coordinates and the four movement directions.

The grid origin is the top-left cell: moving up decreases y, moving down
increases y.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# Enumeration order doubles as the tie-break order when choosing a move
ACTIONS: Tuple[Direction, ...] = tuple(Direction)

_OFFSETS: Dict[Direction, Tuple[int, int]] = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    @classmethod
    def from_json(cls, data: Dict) -> "Point":
        return cls(data["x"], data["y"])

    def to_json(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}

    def move(self, direction: Direction) -> "Point":
        dx, dy = _OFFSETS[Direction(direction)]
        return Point(self.x + dx, self.y + dy)

    def neighbours(self) -> Tuple["Point", ...]:
        return tuple(self.move(direction) for direction in ACTIONS)

    def __repr__(self):
        return f"({self.x}, {self.y})"
