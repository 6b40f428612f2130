"""Shared constants and spatial primitives for the crossword engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


VALID_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class CellType(str, Enum):
    """All supported cell states in the grid."""

    EMPTY = "EMPTY"
    BLACK = "BLACK"
    FILLED = "FILLED"


class Direction(str, Enum):
    """Word orientations, also used as the axis for stepping through the grid."""

    ACROSS = "ACROSS"
    DOWN = "DOWN"

    def rotate(self) -> "Direction":
        return Direction.DOWN if self is Direction.ACROSS else Direction.ACROSS

    @property
    def delta(self) -> Tuple[int, int]:
        return (0, 1) if self is Direction.ACROSS else (1, 0)


@dataclass(frozen=True, order=True)
class Location:
    """Signed (row, col) coordinate. Grids grow in every direction, so negatives are normal."""

    row: int
    col: int

    def relative(self, move_rows: int, move_cols: int) -> "Location":
        return Location(self.row + move_rows, self.col + move_cols)

    def step(self, move_size: int, direction: Direction) -> "Location":
        dr, dc = direction.delta
        return Location(self.row + dr * move_size, self.col + dc * move_size)

    def __repr__(self) -> str:
        return f"Location({self.row}, {self.col})"
