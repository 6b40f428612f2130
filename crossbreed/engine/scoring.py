"""Grid fitness scores and diversity-aware selection."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Callable, List, Sequence, TypeVar

import numpy as np

from ..utils.logger import get_logger

if TYPE_CHECKING:
    from .generator import GeneratorConfig
    from .grid import CrosswordGrid


LOGGER = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class GridScore:
    total_cells: float = 0.0
    non_square_penalty: float = 0.0
    proportion_filled: float = 0.0
    proportion_intersections: float = 0.0
    words_placed: float = 0.0
    words_unplaced: float = 0.0
    filled_cells: float = 0.0
    num_cycles: float = 0.0
    num_intersections: float = 0.0
    avg_intersections: float = 0.0
    ancestor_summary: float = 0.0
    summary: float = 0.0

    @classmethod
    def from_grid(cls, grid: CrosswordGrid, config: GeneratorConfig) -> "GridScore":
        nrows, ncols = grid.get_grid_dimensions()
        total_cells = nrows * ncols
        non_square_penalty = max(nrows, ncols) ** 2 - total_cells
        filled_cells = grid.count_filled_cells()
        num_intersections = grid.count_intersections()
        words_placed = grid.count_placed_words()

        proportion_filled = filled_cells / total_cells if total_cells else 0.0
        # Intersection cells hold two letters, so count them twice.
        double_counted_filled = filled_cells + num_intersections
        proportion_intersections = 2 * num_intersections / double_counted_filled if double_counted_filled else 0.0
        num_cycles = grid.to_graph().count_cycles()

        placed_ids = grid.placed_word_ids()
        ratios = [grid.count_word_intersections(word_id) / len(grid.word_map[word_id]) for word_id in placed_ids]
        avg_intersections = sum(ratios) / len(ratios) if ratios else 0.0

        summary = (
            -non_square_penalty * config.weight_non_square
            + proportion_filled * config.weight_prop_filled
            + proportion_intersections * config.weight_prop_intersect
            + num_cycles * config.weight_num_cycles
            + num_intersections * config.weight_num_intersect
            + avg_intersections * config.weight_avg_intersect
        )
        return cls(
            total_cells=float(total_cells),
            non_square_penalty=float(non_square_penalty),
            proportion_filled=proportion_filled,
            proportion_intersections=proportion_intersections,
            words_placed=float(words_placed),
            words_unplaced=float(grid.count_unplaced_words()),
            filled_cells=float(filled_cells),
            num_cycles=float(num_cycles),
            num_intersections=float(num_intersections),
            avg_intersections=avg_intersections,
            ancestor_summary=summary + words_placed * config.weight_words_placed,
            summary=summary,
        )

    @classmethod
    def average(cls, scores: Sequence["GridScore"]) -> "GridScore":
        """Field-by-field mean; an empty sequence averages to all zeros."""

        if not scores:
            return cls()
        return cls(
            **{
                field.name: sum(getattr(score, field.name) for score in scores) / len(scores)
                for field in fields(cls)
            }
        )

    def __str__(self) -> str:
        return (
            f"GridScore[summary={self.summary:.3f} total_cells={self.total_cells:.0f} "
            f"filled_cells={self.filled_cells:.0f} non_square_penalty={self.non_square_penalty:.0f} "
            f"proportion_filled={self.proportion_filled:.3f} "
            f"proportion_intersections={self.proportion_intersections:.3f} "
            f"words_placed={self.words_placed:.0f} words_unplaced={self.words_unplaced:.0f} "
            f"num_cycles={self.num_cycles:.0f} num_intersections={self.num_intersections:.0f} "
            f"avg_intersections={self.avg_intersections:.3f}]"
        )


def adjacency_similarity(first: CrosswordGrid, second: CrosswordGrid) -> float:
    """Shared intersections over all intersections, comparing word-id adjacency matrices."""

    size = max(max(first.word_map, default=-1), max(second.word_map, default=-1)) + 1
    first_matrix = first.to_adjacency_matrix(size).astype(bool)
    second_matrix = second.to_adjacency_matrix(size).astype(bool)
    union = np.count_nonzero(first_matrix | second_matrix)
    if union == 0:
        return 0.0
    return float(np.count_nonzero(first_matrix & second_matrix)) / union


def pick_best_varied(
    candidates: Sequence[T],
    num_to_pick: int,
    score: Callable[[T], float],
    grid: Callable[[T], CrosswordGrid],
) -> List[T]:
    """Greedy top-``num_to_pick`` selection that penalises similarity to earlier picks.

    After each pick, every remaining candidate loses ``|raw score| * similarity`` from its
    adjusted score. Ties go to the earliest candidate.
    """

    remaining = list(range(len(candidates)))
    adjusted = [float(score(candidate)) for candidate in candidates]
    picked: List[T] = []

    while remaining and len(picked) < num_to_pick:
        best_index = remaining[0]
        for index in remaining[1:]:
            if adjusted[index] > adjusted[best_index]:
                best_index = index
        remaining.remove(best_index)
        chosen = candidates[best_index]
        picked.append(chosen)

        for index in remaining:
            similarity = adjacency_similarity(grid(chosen), grid(candidates[index]))
            adjusted[index] -= abs(score(candidates[index])) * similarity
    return picked
