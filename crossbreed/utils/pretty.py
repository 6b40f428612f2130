"""Pretty-print helpers for crossword grids."""

from __future__ import annotations

import sys
from collections import Counter
from typing import TYPE_CHECKING, Optional

from ..core.constants import CellType, Location

if TYPE_CHECKING:
    from ..engine.grid import CrosswordGrid
    from ..engine.scoring import GridScore


SYMBOLS = {
    CellType.BLACK: "#",
    CellType.EMPTY: ".",
}


def cell_symbol(cell) -> str:
    if cell.type == CellType.FILLED:
        return cell.letter or "?"
    return SYMBOLS.get(cell.type, ".")


def format_grid(grid: CrosswordGrid) -> str:
    """Grid without its buffer, with row and column indices relative to the first letter row."""

    nrows, ncols = grid.get_grid_dimensions()
    header_cells = [f"{c:>2}" for c in range(ncols)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * max(3 * ncols - 1, 0))
    for r in range(nrows):
        row_cells = [
            cell_symbol(grid.cell_map[Location(grid.top_left.row + 1 + r, grid.top_left.col + 1 + c)])
            for c in range(ncols)
        ]
        row_render = " ".join(f"{symbol:>2}" for symbol in row_cells)
        lines.append(f"{r:>2} | {row_render}")
    return "\n".join(lines)


def print_grid_stats(
    grid: CrosswordGrid,
    score: Optional[GridScore] = None,
    *,
    stream=None,
) -> None:
    """Print grid + word and score stats for a generated crossword."""

    stream = stream or sys.stdout
    print(format_grid(grid), file=stream)

    nrows, ncols = grid.get_grid_dimensions()
    total_cells = nrows * ncols
    filled = grid.count_filled_cells()

    print(file=stream)
    print("--- Grid ---", file=stream)
    print(f"  Size:          {nrows} x {ncols} ({total_cells} cells)", file=stream)
    if total_cells:
        print(f"  Letters:       {filled} ({filled / total_cells * 100:.0f}%)", file=stream)
    print(f"  Intersections: {grid.count_intersections()}", file=stream)

    placed = [grid.word_map[word_id].text for word_id in grid.placed_word_ids()]
    lengths = Counter(len(text) for text in placed)
    print(file=stream)
    print("--- Words ---", file=stream)
    print(f"  Placed:        {len(placed)} of {grid.count_all_words()}", file=stream)
    if lengths:
        dist_parts = [f"{length}:{count}" for length, count in sorted(lengths.items())]
        print(f"  Distribution:  {' '.join(dist_parts)}", file=stream)
    unplaced = [grid.word_map[word_id].text for word_id in grid.unplaced_word_ids()]
    if unplaced:
        print(f"  Unplaced:      {', '.join(unplaced)}", file=stream)

    if score is not None:
        print(file=stream)
        print("--- Score ---", file=stream)
        print(f"  Summary:       {score.summary:.3f}", file=stream)
        print(f"  Cycles:        {score.num_cycles:.0f}", file=stream)
        print(f"  Non-square:    {score.non_square_penalty:.0f}", file=stream)
