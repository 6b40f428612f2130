"""Seeded random moves on a grid: greedy word placement, leaf pruning and partitioning.

Every move takes an explicit seed so that the same grid and seed always make the
same choice. The placement search is greedy: it stops at the first candidate that
fits and never backtracks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterator, List, Tuple

from ..core.constants import VALID_CHARS, Direction, Location
from ..core.exceptions import PlacementError
from ..utils.logger import get_logger
from ..utils.seeding import seeded_rng

if TYPE_CHECKING:
    from .grid import CrosswordGrid


LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class PlacementAttempt:
    word_id: int
    index_in_word: int
    location: Location
    direction: Direction


def open_slots_by_letter(grid: CrosswordGrid) -> Dict[str, List[Tuple[Location, Direction]]]:
    """Letter cells that still accept a crossing word, with the direction that word must take."""

    slots: Dict[str, List[Tuple[Location, Direction]]] = {letter: [] for letter in VALID_CHARS}
    for location, cell in grid.cell_map.items():
        if not cell.contains_letter() or cell.is_intersection():
            continue
        open_direction = Direction.DOWN if cell.across_word_id is not None else Direction.ACROSS
        slots.setdefault(cell.to_char(), []).append((location, open_direction))
    return slots


def placement_attempts(grid: CrosswordGrid, seed: int) -> Iterator[PlacementAttempt]:
    """Candidate placements in seeded order: word, then letter index, then open slot.

    The candidate lists are fixed when iteration starts, so the grid may be changed
    between attempts as long as failed attempts leave it as it was.
    """

    rng = seeded_rng(seed)
    slots = open_slots_by_letter(grid)
    for letter in VALID_CHARS:
        slots[letter].sort(key=lambda slot: (slot[1].value, slot[0].row, slot[0].col))
        rng.shuffle(slots[letter])

    word_ids = grid.unplaced_word_ids()
    rng.shuffle(word_ids)
    words = [(word_id, grid.word_map[word_id].text) for word_id in word_ids]

    for word_id, text in words:
        for index_in_word, letter in enumerate(text):
            for location, direction in slots.get(letter, []):
                yield PlacementAttempt(word_id, index_in_word, location, direction)


def place_random_word(grid: CrosswordGrid, seed: int) -> bool:
    """Place the first unplaced word that fits anywhere; returns whether one was placed."""

    for attempt in placement_attempts(grid, seed):
        try:
            grid.place_word_in_cell(attempt.location, attempt.word_id, attempt.index_in_word, attempt.direction)
        except PlacementError:
            continue
        LOGGER.debug("Placed word %s via %s", attempt.word_id, attempt)
        grid.check_valid()
        return True
    return False


def remove_random_leaves(grid: CrosswordGrid, num_leaves: int, seed: int) -> int:
    """Unplace up to ``num_leaves`` words of degree at most one, always keeping one word placed."""

    leaves = grid.to_graph().find_leaves()
    rng = seeded_rng(seed)
    rng.shuffle(leaves)

    removed = 0
    while removed < num_leaves and leaves and grid.count_placed_words() > 1:
        word_id = leaves.pop()
        LOGGER.debug("Removing leaf word %s", word_id)
        grid.unplace_word(word_id)
        removed += 1
    return removed


def random_partition(grid: CrosswordGrid, seed: int) -> CrosswordGrid:
    """Split ``grid`` in two around two random placed words.

    ``grid`` keeps the half grown from the first word and the returned copy holds the
    other half. Both halves keep every word, with the other half's words unplaced.
    """

    placed = grid.placed_word_ids()
    if len(placed) < 2:
        raise ValueError("Partitioning needs at least two placed words")

    rng = seeded_rng(seed)
    first, second = rng.sample(placed, 2)
    own_half, other_half = grid.to_graph().partition_nodes(first, second)
    LOGGER.debug("Partitioning around %s and %s into %s and %s", first, second, own_half, other_half)

    other = grid.copy()
    for word_id in other_half:
        grid.unplace_word(word_id)
    for word_id in own_half:
        other.unplace_word(word_id)

    grid.check_valid()
    other.check_valid()
    return other
