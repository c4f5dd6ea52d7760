"""
Dense width x height spatial index used for walls, visited and food lookups.
"""

from typing import Any, Iterable, List, Optional

from .geometry import Point


class OutOfBoundsError(IndexError):
    """Raised when writing a cell outside the grid."""


class Grid:
    """Fixed-size 2D array of optional values.

    Reads outside the grid return None so callers can probe speculative
    positions; writes outside the grid raise OutOfBoundsError.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self._cells: List[Optional[Any]] = [None] * (width * height)

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x, y=None):
        if y is None:
            x, y = x.x, x.y
        if not self.contains(x, y):
            return None
        return self._cells[y * self.width + x]

    at = get

    def set(self, x, y=None, value=None):
        if isinstance(x, Point):
            # set(point, value)
            value = y
            x, y = x.x, x.y
        if not self.contains(x, y):
            raise OutOfBoundsError(
                f"point ({x}, {y}) out of range for {self.width}x{self.height} grid"
            )
        self._cells[y * self.width + x] = value

    def set_all(self, points: Iterable[Point], value: Any) -> None:
        for point in points:
            self.set(point, value)

    def __repr__(self):
        values = [repr(v) for v in self._cells]
        cell_width = max(len(v) for v in values) + 1 if values else 1
        rows = []
        for row in range(self.height):
            start = row * self.width
            rows.append("".join(v.ljust(cell_width) for v in values[start : start + self.width]))
        return f"<Grid {self.width}x{self.height}\n" + "\n".join(rows) + "\n>"
