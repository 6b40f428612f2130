"""Build grids from their textual rendering.

Spaces are empty cells and every other character is a letter. Each maximal run of
two or more letters along a row becomes an across word and along a column a down
word; word ids are handed out in reading order, across before down.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from ..core.constants import Direction, Location
from ..core.models import Cell, Word
from ..utils.logger import get_logger
from .grid import CrosswordGrid


LOGGER = get_logger(__name__)


class CrosswordGridBuilder:
    def __init__(self) -> None:
        self.cell_map: Dict[Location, Cell] = {}
        self.word_map: Dict[int, Word] = {}
        self._next_word_id = 0

    def from_file(self, path: Path | str) -> CrosswordGrid:
        contents = Path(path).read_text(encoding="utf-8")
        LOGGER.debug("File contents:\n%s", contents)
        return self.from_string(contents)

    def from_string(self, text: str) -> CrosswordGrid:
        lines = text.split("\n")
        if lines and lines[-1] == "":
            lines.pop()
        if not lines:
            return CrosswordGrid()
        ncols = max(len(line) for line in lines)
        if ncols == 0:
            return CrosswordGrid()

        down_word_ids: Dict[int, Optional[int]] = {}
        for row, line in enumerate(lines):
            across_word_id: Optional[int] = None
            for col, char in enumerate(line.ljust(ncols)):
                location = Location(row, col)
                if char == " ":
                    across_word_id = None
                    down_word_ids[col] = None
                    self.cell_map[location] = Cell()
                    continue

                letter = char.upper()
                across_word_id = self._extend_or_start(across_word_id, letter, location, Direction.ACROSS)
                down_word_ids[col] = self._extend_or_start(
                    down_word_ids.get(col), letter, location, Direction.DOWN
                )
                self.cell_map[location] = Cell.filled(letter, across_word_id, down_word_ids[col])

        grid = CrosswordGrid()
        grid.cell_map = self.cell_map
        grid.word_map = self.word_map
        grid.top_left = Location(0, 0)
        grid.bottom_right = Location(len(lines) - 1, ncols - 1)
        self._drop_single_letter_words(grid)
        grid.fit_to_size()
        return grid

    def _extend_or_start(self, word_id: Optional[int], letter: str, location: Location, direction: Direction) -> int:
        if word_id is not None:
            self.word_map[word_id].extend(letter)
            return word_id
        word_id = self._next_word_id
        self._next_word_id += 1
        word = Word(letter)
        word.place(location, direction)
        self.word_map[word_id] = word
        return word_id

    @staticmethod
    def _drop_single_letter_words(grid: CrosswordGrid) -> None:
        """Remove one-letter runs and renumber the remaining words from zero."""

        singletons: List[int] = [word_id for word_id, word in grid.word_map.items() if len(word) == 1]
        for word_id in singletons:
            for location in grid.word_map[word_id].locations():
                grid.cell_map[location].remove_word(word_id)
            del grid.word_map[word_id]

        for new_word_id, old_word_id in enumerate(sorted(grid.word_map)):
            if new_word_id != old_word_id:
                grid.update_word_id(old_word_id, new_word_id)
