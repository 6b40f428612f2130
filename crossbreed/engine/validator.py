"""Rule validation for crossword grids.

Two kinds of checks live here. The word-level checks (boundary cells and
neighbouring letters) raise recoverable :class:`PlacementError` subclasses and are
run after every tentative placement. The grid-level invariant checks raise
:class:`GridInvariantError` and only fail when the engine itself has a defect.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Set

from ..core.constants import Direction, Location
from ..core.exceptions import (
    AdjacentCellsMismatchedLinkWordError,
    AdjacentCellsNoLinkWordError,
    GridInvariantError,
    NonEmptyWordBoundaryError,
    PlacementError,
)
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from .grid import CrosswordGrid


LOGGER = get_logger(__name__)


@dataclass
class ValidationResult:
    ok: bool
    messages: List[str]


class GridValidator:
    """Runs validation over a single grid."""

    def __init__(self, grid: CrosswordGrid) -> None:
        self.grid = grid

    def validate(self) -> ValidationResult:
        """Non-raising summary of every check, for reporting."""

        messages: List[str] = []
        try:
            self.check_valid()
        except GridInvariantError as exc:
            messages.append(str(exc))
        if not self.black_cells_valid():
            messages.append("Boundary cells do not match placed words")
        try:
            self.check_all_word_placement_valid()
        except PlacementError as exc:
            messages.append(str(exc))
        for message in messages:
            LOGGER.error("Validation failed: %s", message)
        return ValidationResult(ok=not messages, messages=messages)

    # ------------------------------------------------------------------
    # Grid invariants
    # ------------------------------------------------------------------
    def check_valid(self) -> None:
        grid = self.grid
        top_left, bottom_right = grid.top_left, grid.bottom_right
        if top_left.row > bottom_right.row or top_left.col > bottom_right.col:
            raise GridInvariantError(f"Inverted bounding box {top_left} to {bottom_right}")

        for row in range(top_left.row, bottom_right.row + 1):
            for col in range(top_left.col, bottom_right.col + 1):
                if Location(row, col) not in grid.cell_map:
                    raise GridInvariantError(f"Cell not present in grid {row}, {col}")

        for location, cell in grid.cell_map.items():
            for word_id in (cell.across_word_id, cell.down_word_id):
                if word_id is not None and word_id not in grid.word_map:
                    raise GridInvariantError(f"Cell {location} references unknown word {word_id}")

        if not grid.to_graph().is_connected():
            LOGGER.debug("Disconnected grid:\n%s", grid.to_string())
            raise GridInvariantError("Placed words do not form a single connected grid")

    def expected_black_cells(self) -> List[Location]:
        black_cells: List[Location] = []
        for word in self.grid.word_map.values():
            if word.placement is None:
                continue
            direction = word.placement.direction
            black_cells.append(word.placement.start.step(-1, direction))
            black_cells.append(word.placement.end.step(1, direction))
        return black_cells

    def black_cells_valid(self) -> bool:
        """True if the boundary cells are exactly those implied by placed words."""

        expected: Set[Location] = set(self.expected_black_cells())
        for location, cell in self.grid.cell_map.items():
            if cell.is_black() and location not in expected:
                return False
        for location in expected:
            cell = self.grid.cell_map.get(location)
            if cell is None or not cell.is_black():
                return False
        return True

    # ------------------------------------------------------------------
    # Word placement checks
    # ------------------------------------------------------------------
    def check_all_word_placement_valid(self) -> None:
        for location in sorted(self.grid.cell_map):
            self.check_all_neighbours_compatible(location)

    def check_word_cells_valid(self, word_id: int) -> None:
        word = self.grid.get_word(word_id)
        if word.placement is None:
            return
        start, end, direction = word.placement.start, word.placement.end, word.placement.direction

        before_start = start.step(-1, direction)
        if self.grid.get_cell(before_start).contains_letter():
            raise NonEmptyWordBoundaryError(f"Cell {before_start} before word start {start} holds a letter")
        after_end = end.step(1, direction)
        if self.grid.get_cell(after_end).contains_letter():
            raise NonEmptyWordBoundaryError(f"Cell {after_end} after word end {end} holds a letter")

        for location in word.locations():
            self.check_all_neighbours_compatible(location)

    def check_all_neighbours_compatible(self, location: Location) -> None:
        if not self.grid.get_cell(location).contains_letter():
            return
        for direction in Direction:
            self.check_adjacent_cells_compatible(location, -1, direction)
            self.check_adjacent_cells_compatible(location, 1, direction)

    def check_adjacent_cells_compatible(self, location: Location, move_by: int, direction: Direction) -> None:
        """Two neighbouring letters along ``direction`` must belong to the same word in that direction."""

        neighbour_location = location.step(move_by, direction)
        cell = self.grid.get_cell(location)
        neighbour = self.grid.get_cell(neighbour_location)
        if not (cell.contains_letter() and neighbour.contains_letter()):
            return

        cell_word = cell.word_id(direction)
        neighbour_word = neighbour.word_id(direction)
        if cell_word is None or neighbour_word is None:
            raise AdjacentCellsNoLinkWordError(
                f"Letters at {location} and {neighbour_location} share no {direction.value.lower()} word"
            )
        if cell_word != neighbour_word:
            raise AdjacentCellsMismatchedLinkWordError(
                f"Letters at {location} and {neighbour_location} belong to words {cell_word} and {neighbour_word}"
            )
