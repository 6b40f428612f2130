"""Rasterized grids and overlay compatibility.

A grid's bounding box, buffer included, is rasterized into an integer array where
0 is empty, 1 is a boundary cell and ``2 + index`` encodes a letter. Two rasters
can be overlaid at an offset when every cell they share holds the same value, they
share at least one letter, and the union of their letters contains no 2x2 block.
The last rule is only a heuristic for accidental parallel words, so an approved
overlay can still be refused by the real placement checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

from ..core.constants import VALID_CHARS, Location
from ..core.models import Cell
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from .grid import CrosswordGrid


LOGGER = get_logger(__name__)

EMPTY_CODE = 0
BLACK_CODE = 1
LETTER_OFFSET = 2


def cell_to_code(cell: Cell) -> int:
    if cell.is_empty():
        return EMPTY_CODE
    if cell.is_black():
        return BLACK_CODE
    return VALID_CHARS.index(cell.to_char()) + LETTER_OFFSET


def binarise(array: np.ndarray, threshold: int = 0) -> np.ndarray:
    return (array > threshold).astype(np.int32)


def count_squares(array: np.ndarray) -> int:
    """Number of 2x2 blocks whose four cells are all non-zero."""

    binary = binarise(np.asarray(array))
    if binary.shape[0] < 2 or binary.shape[1] < 2:
        return 0
    sums = binary[:-1, :-1] + binary[1:, :-1] + binary[:-1, 1:] + binary[1:, 1:]
    return int(np.count_nonzero(sums == 4))


@dataclass(frozen=True)
class MatrixCompatibility:
    row_shift: int
    col_shift: int
    compatible: bool
    num_overlaps: int


@dataclass
class CrosswordGridMatrix:
    """Raster of a grid plus the shift mapping grid coordinates to array indices."""

    matrix: np.ndarray
    row_shift: int
    col_shift: int

    @classmethod
    def empty(cls, nrows: int, ncols: int, row_shift: int, col_shift: int) -> "CrosswordGridMatrix":
        return cls(np.zeros((nrows, ncols), dtype=np.int32), row_shift, col_shift)

    @classmethod
    def from_grid(cls, grid: CrosswordGrid) -> "CrosswordGridMatrix":
        nrows, ncols = grid.get_grid_dimensions_with_buffer()
        raster = cls.empty(nrows, ncols, -grid.top_left.row, -grid.top_left.col)
        for row in range(grid.top_left.row, grid.bottom_right.row + 1):
            for col in range(grid.top_left.col, grid.bottom_right.col + 1):
                raster.set_coord(row, col, cell_to_code(grid.cell_map[Location(row, col)]))
        return raster

    @property
    def nrows(self) -> int:
        return int(self.matrix.shape[0])

    @property
    def ncols(self) -> int:
        return int(self.matrix.shape[1])

    def set_coord(self, row: int, col: int, value: int) -> None:
        self.matrix[row + self.row_shift, col + self.col_shift] = value

    def shifted(self, extra_rows: int, extra_cols: int) -> "CrosswordGridMatrix":
        """Copy with ``extra_rows`` empty rows above and ``extra_cols`` empty columns to the left."""

        matrix = np.zeros((self.nrows + extra_rows, self.ncols + extra_cols), dtype=np.int32)
        matrix[extra_rows:, extra_cols:] = self.matrix
        return CrosswordGridMatrix(matrix, self.row_shift + extra_rows, self.col_shift + extra_cols)

    def padded_to_size(self, nrows: int, ncols: int) -> "CrosswordGridMatrix":
        matrix = np.zeros((nrows, ncols), dtype=np.int32)
        matrix[: self.nrows, : self.ncols] = self.matrix
        return CrosswordGridMatrix(matrix, self.row_shift, self.col_shift)

    # ------------------------------------------------------------------
    # Compatibility
    # ------------------------------------------------------------------
    def assess_compatibility(self, other: "CrosswordGridMatrix", row_shift: int, col_shift: int) -> MatrixCompatibility:
        """Check ``other`` laid over this raster with its origin moved by (``row_shift``, ``col_shift``)."""

        shifted_self = self.shifted(max(0, -row_shift), max(0, -col_shift))
        shifted_other = other.shifted(max(0, row_shift), max(0, col_shift))
        nrows = max(shifted_self.nrows, shifted_other.nrows)
        ncols = max(shifted_self.ncols, shifted_other.ncols)
        first = shifted_self.padded_to_size(nrows, ncols).matrix
        second = shifted_other.padded_to_size(nrows, ncols).matrix

        shared = first * second
        mismatched = first - second
        num_overlaps = int(np.count_nonzero(shared > 1))
        no_mismatches = not np.any(shared * mismatched)
        squares = count_squares(binarise(first, 1) + binarise(second, 1))

        return MatrixCompatibility(
            row_shift=row_shift,
            col_shift=col_shift,
            compatible=num_overlaps > 0 and no_mismatches and squares == 0,
            num_overlaps=num_overlaps,
        )

    def compatible_with_matrix(self, other: "CrosswordGridMatrix", row_shift: int, col_shift: int) -> bool:
        return self.assess_compatibility(other, row_shift, col_shift).compatible

    def find_best_probably_compatible_configuration(
        self, other: "CrosswordGridMatrix"
    ) -> Optional[Tuple[Tuple[int, int], int]]:
        """Compatible offset with the most shared cells, first in scan order on ties."""

        best: Optional[MatrixCompatibility] = None
        for row_shift in range(-other.nrows, self.nrows + 1):
            for col_shift in range(-other.ncols, self.ncols + 1):
                result = self.assess_compatibility(other, row_shift, col_shift)
                if result.compatible and (best is None or result.num_overlaps > best.num_overlaps):
                    best = result
        if best is None:
            return None
        return (best.row_shift, best.col_shift), best.num_overlaps


def find_merge_configuration(grid: CrosswordGrid, other: CrosswordGrid) -> Optional[Tuple[Tuple[int, int], int]]:
    """Best overlay of ``other`` onto ``grid`` as a shift in grid coordinates, with its overlap count."""

    grid_matrix = CrosswordGridMatrix.from_grid(grid)
    other_matrix = CrosswordGridMatrix.from_grid(other)
    configuration = grid_matrix.find_best_probably_compatible_configuration(other_matrix)
    if configuration is None:
        LOGGER.debug("No compatible overlay found")
        return None

    (row_shift, col_shift), overlaps = configuration
    grid_shift = (
        row_shift - grid_matrix.row_shift + other_matrix.row_shift,
        col_shift - grid_matrix.col_shift + other_matrix.col_shift,
    )
    LOGGER.debug("Overlay at matrix shift %s, grid shift %s, %s overlaps", (row_shift, col_shift), grid_shift, overlaps)
    return grid_shift, overlaps
