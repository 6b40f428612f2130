"""Read-only rendering of finished grids, and LaTeX output built on it.

:func:`render_grid` walks the grid without its buffer in row-major order and
numbers the first cell of every word, so printers never touch the grid itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

from ..core.constants import CellType, Location
from ..engine.grid import CrosswordGrid
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

DOCUMENT_START = (
    "\\documentclass{article}\n"
    "\\usepackage[unboxed]{cwpuzzle}\n"
    "\n"
    "\\newcommand{\\CrosswordClue}[3]{\\textbf{#1} \\quad #3 \\\\}\n"
    "\\begin{document}\n"
)
DOCUMENT_END = "\n\n\\end{document}"


@dataclass(frozen=True)
class RenderedCell:
    char: str
    status: CellType
    across_word_id: Optional[int] = None
    down_word_id: Optional[int] = None
    clue_number: Optional[int] = None


@dataclass(frozen=True)
class ClueEntry:
    number: int
    word_id: int
    clue: str
    answer: Optional[str] = None


@dataclass
class RenderedGrid:
    rows: List[List[RenderedCell]] = field(default_factory=list)
    across: List[ClueEntry] = field(default_factory=list)
    down: List[ClueEntry] = field(default_factory=list)

    @property
    def nrows(self) -> int:
        return len(self.rows)

    @property
    def ncols(self) -> int:
        return len(self.rows[0]) if self.rows else 0


def render_grid(grid: CrosswordGrid, show_answers: bool = True) -> RenderedGrid:
    rendered = RenderedGrid()
    visited: Set[int] = set()
    clue_number = 0

    for row in range(grid.top_left.row + 1, grid.bottom_right.row):
        rendered_row: List[RenderedCell] = []
        for col in range(grid.top_left.col + 1, grid.bottom_right.col):
            cell = grid.cell_map[Location(row, col)]
            new_across = cell.across_word_id is not None and cell.across_word_id not in visited
            new_down = cell.down_word_id is not None and cell.down_word_id not in visited

            number: Optional[int] = None
            if new_across or new_down:
                clue_number += 1
                number = clue_number
            for is_new, word_id, clues in (
                (new_across, cell.across_word_id, rendered.across),
                (new_down, cell.down_word_id, rendered.down),
            ):
                if not is_new:
                    continue
                visited.add(word_id)
                word = grid.word_map[word_id]
                clues.append(ClueEntry(number, word_id, word.clue, word.text if show_answers else None))

            rendered_row.append(RenderedCell(cell.to_char(), cell.type, cell.across_word_id, cell.down_word_id, number))
        rendered.rows.append(rendered_row)
    return rendered


class CrosswordPrinter:
    """Typesets a grid with the ``cwpuzzle`` LaTeX package."""

    def __init__(self, grid: CrosswordGrid, show_answers: bool = True) -> None:
        self.grid = grid
        self.show_answers = show_answers

    @staticmethod
    def _cell_code(cell: RenderedCell) -> str:
        if cell.status != CellType.FILLED:
            return "|*"
        if cell.clue_number is not None:
            return f"|[{cell.clue_number}]{cell.char}"
        return f"|{cell.char}"

    @staticmethod
    def _clue_line(entry: ClueEntry) -> str:
        return f"\\CrosswordClue{{{entry.number}}}{{{entry.answer or ''}}}{{{entry.clue}}}\n"

    def print(self) -> str:
        rendered = render_grid(self.grid, self.show_answers)
        puzzle = f"\\begin{{Puzzle}}{{{rendered.ncols}}}{{{rendered.nrows}}}\n"
        for row in rendered.rows:
            puzzle += "".join(self._cell_code(cell) for cell in row) + "|.\n"

        across = "\\section*{Across}\n" + "".join(self._clue_line(entry) for entry in rendered.across)
        down = "\\section*{Down}\n" + "".join(self._clue_line(entry) for entry in rendered.down)
        return f"{DOCUMENT_START}{puzzle}\\end{{Puzzle}}\n\n{across}\n{down}\n\n{DOCUMENT_END}"

    def print_to_file(self, path: Path | str) -> None:
        Path(path).write_text(self.print(), encoding="utf-8")
        LOGGER.info("Wrote LaTeX puzzle to %s", path)
