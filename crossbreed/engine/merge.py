"""Union of two grids built from disjoint sets of placed words."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.constants import Location
from ..core.exceptions import GridInvariantError, PlacementError
from ..utils.logger import get_logger
from .matrix import find_merge_configuration

if TYPE_CHECKING:
    from .grid import CrosswordGrid


LOGGER = get_logger(__name__)


def _grow_to_fit_merge(grid: CrosswordGrid, other: CrosswordGrid, row_shift: int, col_shift: int) -> None:
    grid.expand_to_fit_cell(
        Location(
            min(other.top_left.row + row_shift, grid.top_left.row),
            min(other.top_left.col + col_shift, grid.top_left.col),
        )
    )
    grid.expand_to_fit_cell(
        Location(
            max(other.bottom_right.row + row_shift, grid.bottom_right.row),
            max(other.bottom_right.col + col_shift, grid.bottom_right.col),
        )
    )


def _place_other_words(grid: CrosswordGrid, other: CrosswordGrid, row_shift: int, col_shift: int) -> None:
    """Re-place every placed word of ``other`` through the normal placement path."""

    if not other.black_cells_valid():
        raise GridInvariantError("Boundary cells of the grid being merged in are stale")
    _grow_to_fit_merge(grid, other, row_shift, col_shift)
    grid.fill_black_cells()

    for word_id in other.placed_word_ids():
        placement = other.word_map[word_id].placement
        word = grid.word_map.get(word_id)
        if word is None or word.is_placed():
            raise GridInvariantError(f"Word {word_id} cannot be merged in: missing or already placed")
        grid.place_word_in_cell(placement.start.relative(row_shift, col_shift), word_id, 0, placement.direction)


def merge_with_grid(grid: CrosswordGrid, other: CrosswordGrid, row_shift: int, col_shift: int) -> None:
    """Overlay ``other`` onto ``grid`` at a shift the compatibility search approved.

    Any placement failure here means the approval was wrong and is treated as fatal.
    """

    try:
        _place_other_words(grid, other, row_shift, col_shift)
    except PlacementError as exc:
        raise GridInvariantError(f"Approved merge at ({row_shift}, {col_shift}) failed: {exc}") from exc
    grid.check_valid()


def try_merge_with_grid(grid: CrosswordGrid, other: CrosswordGrid, min_overlaps: int = 1) -> bool:
    """Merge ``other`` in at its best overlay if one exists; returns whether ``grid`` changed."""

    for word_id in other.placed_word_ids():
        word = grid.word_map.get(word_id)
        if word is None or word.is_placed():
            LOGGER.debug("Word %s is unknown or placed in both grids, not merging", word_id)
            return False

    configuration = find_merge_configuration(grid, other)
    if configuration is None:
        return False
    (row_shift, col_shift), overlaps = configuration
    if overlaps < min_overlaps:
        LOGGER.debug("Best overlay shares %s cells, need %s", overlaps, min_overlaps)
        return False

    scratch = grid.copy()
    try:
        _place_other_words(scratch, other, row_shift, col_shift)
    except PlacementError as exc:
        LOGGER.debug("Overlay at (%s, %s) refused on placement: %s", row_shift, col_shift, exc)
        return False
    scratch.check_valid()
    grid._adopt(scratch)
    return True
