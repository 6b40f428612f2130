"""Grid representation and placement helpers.

A :class:`CrosswordGrid` has no fixed shape. Cells live in a ``Location -> Cell``
map covering an inclusive bounding box that grows when a word needs room and
shrinks back so that exactly one empty buffer row and column surround the letters.
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..core.constants import Direction, Location
from ..core.exceptions import (
    CellError,
    CellNotFoundError,
    GridInvariantError,
    PlacementError,
    WordAlreadyPlacedError,
    WordDirectionNotAllowedError,
    WordNotFoundError,
)
from ..core.models import Cell, Word
from ..utils.logger import get_logger
from ..utils.seeding import seeded_rng
from .graph import Graph
from .validator import GridValidator


LOGGER = get_logger(__name__)

# (answer, clue, required direction), the shape of a seed list entry.
WordTriple = Tuple[str, str, Optional[Direction]]


class CrosswordGrid:
    """Encapsulates the crossword grid with placement helpers."""

    def __init__(self) -> None:
        self.cell_map: Dict[Location, Cell] = {Location(0, 0): Cell()}
        self.word_map: Dict[int, Word] = {}
        self.top_left = Location(0, 0)
        self.bottom_right = Location(0, 0)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def new_single_word(cls, text: str) -> "CrosswordGrid":
        from .builder import CrosswordGridBuilder

        return CrosswordGridBuilder().from_string(text)

    @classmethod
    def new_from_words_single_placed(
        cls,
        word_id: int,
        direction: Direction,
        words: Dict[int, Word],
    ) -> "CrosswordGrid":
        """Grid holding ``words`` with only ``word_id`` placed, starting at the origin."""

        grid = cls()
        grid.word_map = copy.deepcopy(words)
        for word in grid.word_map.values():
            word.remove_placement()

        word = grid.get_word(word_id)
        word.place(Location(0, 0), direction)
        grid.cell_map = {}
        for location, letter in zip(word.locations(), word.text):
            cell = Cell()
            cell.add_word(word_id, letter, direction)
            grid.cell_map[location] = cell
        grid.top_left = Location(0, 0)
        grid.bottom_right = word.placement.end
        grid.fit_to_size()
        return grid

    @classmethod
    def random_singleton_grids(cls, entries: Iterable[WordTriple], seed: int) -> List["CrosswordGrid"]:
        """One grid per entry, that word placed and every other word unplaced.

        The orientation of each placed word is drawn from ``seed`` unless the entry forces one.
        """

        words: Dict[int, Word] = {}
        for word_id, (answer, clue, required_direction) in enumerate(entries):
            words[word_id] = Word(answer, clue, required_direction)

        rng = seeded_rng(seed)
        grids: List[CrosswordGrid] = []
        for word_id, word in words.items():
            direction = word.required_direction or rng.choice([Direction.ACROSS, Direction.DOWN])
            grids.append(cls.new_from_words_single_placed(word_id, direction, words))
        LOGGER.debug("Built %s singleton grids", len(grids))
        return grids

    def copy(self) -> "CrosswordGrid":
        return copy.deepcopy(self)

    def _adopt(self, other: "CrosswordGrid") -> None:
        self.cell_map = other.cell_map
        self.word_map = other.word_map
        self.top_left = other.top_left
        self.bottom_right = other.bottom_right

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def get_cell(self, location: Location) -> Cell:
        try:
            return self.cell_map[location]
        except KeyError:
            raise CellNotFoundError(f"No cell at {location}") from None

    def get_word(self, word_id: int) -> Word:
        try:
            return self.word_map[word_id]
        except KeyError:
            raise WordNotFoundError(f"No word with id {word_id}") from None

    def placed_word_ids(self) -> List[int]:
        return sorted(word_id for word_id, word in self.word_map.items() if word.is_placed())

    def unplaced_word_ids(self) -> List[int]:
        return sorted(word_id for word_id, word in self.word_map.items() if not word.is_placed())

    # ------------------------------------------------------------------
    # Word bookkeeping
    # ------------------------------------------------------------------
    def _find_lowest_unused_word_id(self) -> int:
        word_id = 0
        while word_id in self.word_map:
            word_id += 1
        return word_id

    def add_unplaced_word_at_id(
        self,
        text: str,
        clue: str,
        word_id: int,
        required_direction: Optional[Direction] = None,
    ) -> None:
        self.word_map[word_id] = Word(text, clue, required_direction)

    def add_unplaced_word(self, text: str, clue: str = "", required_direction: Optional[Direction] = None) -> int:
        word_id = self._find_lowest_unused_word_id()
        self.add_unplaced_word_at_id(text, clue, word_id, required_direction)
        return word_id

    def update_word_id(self, old_word_id: int, new_word_id: int) -> None:
        word = self.get_word(old_word_id)
        if new_word_id in self.word_map:
            raise GridInvariantError(f"Word id {new_word_id} already in use")
        del self.word_map[old_word_id]
        self.word_map[new_word_id] = word
        for cell in self.cell_map.values():
            cell.update_word_id(old_word_id, new_word_id)

    def delete_word(self, word_id: int) -> None:
        self.unplace_word(word_id)
        self.word_map.pop(word_id, None)

    def unplace_word(self, word_id: int) -> None:
        for cell in self.cell_map.values():
            cell.remove_word(word_id)
        word = self.word_map.get(word_id)
        if word is not None:
            word.remove_placement()
        self.fit_to_size()

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------
    def place_word_in_cell(self, location: Location, word_id: int, index_in_word: int, direction: Direction) -> None:
        """Place ``word_id`` so that its ``index_in_word``-th letter lands on ``location``.

        On failure the matching :class:`PlacementError` is raised and the grid is left
        exactly as it was.
        """

        word = self.get_word(word_id)
        if word.is_placed():
            raise WordAlreadyPlacedError(f"Word {word_id} ({word.text}) is already placed")
        if not word.allows_direction(direction):
            raise WordDirectionNotAllowedError(
                f"Word {word_id} ({word.text}) must be placed {word.required_direction.value.lower()}"
            )

        start = location.step(-index_in_word, direction)
        end = start.step(len(word) - 1, direction)
        # Room for the boundary cells and the neighbours on both sides of the word.
        perpendicular = direction.rotate()
        self.expand_to_fit_cell(start.step(-1, direction).step(-1, perpendicular))
        self.expand_to_fit_cell(end.step(1, direction).step(1, perpendicular))

        updated: List[Location] = []
        try:
            for offset, letter in enumerate(word.text):
                cell_location = start.step(offset, direction)
                self.get_cell(cell_location).add_word(word_id, letter, direction)
                updated.append(cell_location)
        except CellError as exc:
            LOGGER.debug("Cannot place %s at %s %s: %s", word.text, start, direction.value, exc)
            for cell_location in updated:
                self.cell_map[cell_location].remove_word(word_id)
            self.fit_to_size()
            raise

        word.place(start, direction)
        try:
            GridValidator(self).check_word_cells_valid(word_id)
        except PlacementError as exc:
            LOGGER.debug("Rejected %s at %s %s: %s", word.text, start, direction.value, exc)
            self.unplace_word(word_id)
            raise
        self.fit_to_size()

    # ------------------------------------------------------------------
    # Spacing
    # ------------------------------------------------------------------
    def expand_to_fit_cell(self, location: Location) -> None:
        while location.row < self.top_left.row:
            self._add_empty_row(self.top_left.row - 1)
        while location.row > self.bottom_right.row:
            self._add_empty_row(self.bottom_right.row + 1)
        while location.col < self.top_left.col:
            self._add_empty_col(self.top_left.col - 1)
        while location.col > self.bottom_right.col:
            self._add_empty_col(self.bottom_right.col + 1)

    def _add_empty_row(self, new_row: int) -> None:
        for col in range(self.top_left.col, self.bottom_right.col + 1):
            self.cell_map[Location(new_row, col)] = Cell()
        if new_row > self.bottom_right.row:
            self.bottom_right = Location(new_row, self.bottom_right.col)
        elif new_row < self.top_left.row:
            self.top_left = Location(new_row, self.top_left.col)

    def _add_empty_col(self, new_col: int) -> None:
        for row in range(self.top_left.row, self.bottom_right.row + 1):
            self.cell_map[Location(row, new_col)] = Cell()
        if new_col > self.bottom_right.col:
            self.bottom_right = Location(self.bottom_right.row, new_col)
        elif new_col < self.top_left.col:
            self.top_left = Location(self.top_left.row, new_col)

    def _remove_row(self, row: int) -> None:
        for col in range(self.top_left.col, self.bottom_right.col + 1):
            self.cell_map.pop(Location(row, col), None)
        if row == self.bottom_right.row:
            self.bottom_right = self.bottom_right.relative(-1, 0)
        elif row == self.top_left.row:
            self.top_left = self.top_left.relative(1, 0)

    def _remove_col(self, col: int) -> None:
        for row in range(self.top_left.row, self.bottom_right.row + 1):
            self.cell_map.pop(Location(row, col), None)
        if col == self.bottom_right.col:
            self.bottom_right = self.bottom_right.relative(0, -1)
        elif col == self.top_left.col:
            self.top_left = self.top_left.relative(0, 1)

    def _count_filled_cells_row(self, row: int) -> int:
        count = 0
        for col in range(self.top_left.col, self.bottom_right.col + 1):
            cell = self.cell_map.get(Location(row, col))
            if cell is not None and cell.contains_letter():
                count += 1
        return count

    def _count_filled_cells_col(self, col: int) -> int:
        count = 0
        for row in range(self.top_left.row, self.bottom_right.row + 1):
            cell = self.cell_map.get(Location(row, col))
            if cell is not None and cell.contains_letter():
                count += 1
        return count

    def _ensure_buffer_exists(self) -> None:
        if self._count_filled_cells_row(self.top_left.row) > 0:
            self._add_empty_row(self.top_left.row - 1)
        if self._count_filled_cells_row(self.bottom_right.row) > 0:
            self._add_empty_row(self.bottom_right.row + 1)
        if self._count_filled_cells_col(self.top_left.col) > 0:
            self._add_empty_col(self.top_left.col - 1)
        if self._count_filled_cells_col(self.bottom_right.col) > 0:
            self._add_empty_col(self.bottom_right.col + 1)

    def _remove_excess_empty(self) -> None:
        while self._count_filled_cells_row(self.top_left.row + 1) == 0:
            self._remove_row(self.top_left.row)
        while self._count_filled_cells_row(self.bottom_right.row - 1) == 0:
            self._remove_row(self.bottom_right.row)
        while self._count_filled_cells_col(self.top_left.col + 1) == 0:
            self._remove_col(self.top_left.col)
        while self._count_filled_cells_col(self.bottom_right.col - 1) == 0:
            self._remove_col(self.bottom_right.col)

    def fit_to_size(self) -> None:
        """Leave exactly one empty row and column around the letters, then redraw boundary cells."""

        if self.count_filled_cells() > 0:
            self._ensure_buffer_exists()
            self._remove_excess_empty()
        self.fill_black_cells()

    def fill_black_cells(self) -> None:
        for cell in self.cell_map.values():
            if cell.is_black():
                cell.set_empty()

        for location in GridValidator(self).expected_black_cells():
            cell = self.cell_map.get(location)
            if cell is None:
                raise GridInvariantError(f"Boundary cell {location} is outside the grid")
            cell.set_black()

    # ------------------------------------------------------------------
    # Validity
    # ------------------------------------------------------------------
    def check_valid(self) -> None:
        GridValidator(self).check_valid()

    def black_cells_valid(self) -> bool:
        return GridValidator(self).black_cells_valid()

    def check_all_word_placement_valid(self) -> None:
        GridValidator(self).check_all_word_placement_valid()

    def check_word_cells_valid(self, word_id: int) -> None:
        GridValidator(self).check_word_cells_valid(word_id)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    def count_all_words(self) -> int:
        return len(self.word_map)

    def count_placed_words(self) -> int:
        return sum(1 for word in self.word_map.values() if word.is_placed())

    def count_unplaced_words(self) -> int:
        return self.count_all_words() - self.count_placed_words()

    def count_filled_cells(self) -> int:
        return sum(1 for cell in self.cell_map.values() if cell.contains_letter())

    def count_intersections(self) -> int:
        return sum(1 for cell in self.cell_map.values() if cell.is_intersection())

    def count_word_intersections(self, word_id: int) -> int:
        return sum(1 for location in self.get_word(word_id).locations() if self.cell_map[location].is_intersection())

    def get_grid_dimensions_with_buffer(self) -> Tuple[int, int]:
        nrows = self.bottom_right.row - self.top_left.row + 1
        ncols = self.bottom_right.col - self.top_left.col + 1
        return max(nrows, 0), max(ncols, 0)

    def get_grid_dimensions(self) -> Tuple[int, int]:
        nrows, ncols = self.get_grid_dimensions_with_buffer()
        return max(nrows - 2, 0), max(ncols - 2, 0)

    # ------------------------------------------------------------------
    # Graph views
    # ------------------------------------------------------------------
    def intersection_edges(self) -> List[Tuple[int, int]]:
        return sorted(
            (cell.across_word_id, cell.down_word_id)
            for cell in self.cell_map.values()
            if cell.is_intersection()
        )

    def to_graph(self) -> Graph:
        graph = Graph.from_edges(self.intersection_edges())
        for word_id in self.placed_word_ids():
            graph.add_node(word_id)
        return graph

    def to_adjacency_matrix(self, size: Optional[int] = None) -> np.ndarray:
        """Symmetric 0/1 matrix of intersecting word ids, indexed by word id."""

        if size is None:
            size = max(self.word_map, default=-1) + 1
        matrix = np.zeros((size, size), dtype=np.uint8)
        for across_id, down_id in self.intersection_edges():
            matrix[across_id, down_id] = 1
            matrix[down_id, across_id] = 1
        return matrix

    # ------------------------------------------------------------------
    # Search moves, implemented in sibling modules
    # ------------------------------------------------------------------
    def place_random_word(self, seed: int) -> bool:
        from .placement import place_random_word

        return place_random_word(self, seed)

    def remove_random_leaves(self, num_leaves: int, seed: int) -> int:
        from .placement import remove_random_leaves

        return remove_random_leaves(self, num_leaves, seed)

    def random_partition(self, seed: int) -> "CrosswordGrid":
        from .placement import random_partition

        return random_partition(self, seed)

    def find_best_probably_compatible_configuration(
        self, other: "CrosswordGrid"
    ) -> Optional[Tuple[Tuple[int, int], int]]:
        from .matrix import find_merge_configuration

        return find_merge_configuration(self, other)

    def merge_with_grid(self, other: "CrosswordGrid", row_shift: int, col_shift: int) -> None:
        from .merge import merge_with_grid

        merge_with_grid(self, other, row_shift, col_shift)

    def try_merge_with_grid(self, other: "CrosswordGrid", min_overlaps: int = 1) -> bool:
        from .merge import try_merge_with_grid

        return try_merge_with_grid(self, other, min_overlaps)

    # ------------------------------------------------------------------
    # Serialization helpers
    # ------------------------------------------------------------------
    def _rows(self, with_buffer: bool) -> Sequence[int]:
        inset = 0 if with_buffer else 1
        return range(self.top_left.row + inset, self.bottom_right.row + 1 - inset)

    def _cols(self, with_buffer: bool) -> Sequence[int]:
        inset = 0 if with_buffer else 1
        return range(self.top_left.col + inset, self.bottom_right.col + 1 - inset)

    def to_string(self) -> str:
        """Letters of the grid without its buffer, one line per row."""

        lines = []
        for row in self._rows(with_buffer=False):
            lines.append("".join(self.cell_map[Location(row, col)].to_char() for col in self._cols(with_buffer=False)))
        return "".join(line + "\n" for line in lines)

    def to_string_with_coords(self) -> str:
        cols = list(self._cols(with_buffer=True))
        lines = ["     " + "".join(f"{col:>3}" for col in cols)]
        for row in self._rows(with_buffer=True):
            symbols = []
            for col in cols:
                cell = self.cell_map.get(Location(row, col))
                if cell is None:
                    symbols.append("?")
                elif cell.is_black():
                    symbols.append("#")
                elif cell.contains_letter():
                    symbols.append(cell.letter or "?")
                else:
                    symbols.append(".")
            lines.append(f"{row:>4} " + "".join(f"{symbol:>3}" for symbol in symbols))
        return "\n".join(lines)

    def to_jsonable(self) -> Dict[str, Any]:
        rows: List[List[dict]] = []
        for row in self._rows(with_buffer=False):
            serialized_row: List[dict] = []
            for col in self._cols(with_buffer=False):
                cell = self.cell_map[Location(row, col)]
                serialized_row.append(
                    {
                        "type": cell.type.value,
                        "letter": cell.letter,
                        "across_word_id": cell.across_word_id,
                        "down_word_id": cell.down_word_id,
                    }
                )
            rows.append(serialized_row)

        words = []
        for word_id in sorted(self.word_map):
            word = self.word_map[word_id]
            entry: Dict[str, Any] = {
                "id": word_id,
                "text": word.text,
                "clue": word.clue,
                "required_direction": word.required_direction.value if word.required_direction else None,
                "placed": word.is_placed(),
            }
            if word.placement is not None:
                entry["start"] = [
                    word.placement.start.row - self.top_left.row - 1,
                    word.placement.start.col - self.top_left.col - 1,
                ]
                entry["direction"] = word.placement.direction.value
            words.append(entry)
        return {"cells": rows, "words": words}

    def __repr__(self) -> str:
        return (
            f"CrosswordGrid(top_left={self.top_left}, bottom_right={self.bottom_right}, "
            f"placed={self.count_placed_words()}/{self.count_all_words()})"
        )
