"""Main crossword generator orchestration.

Evolutionary search over grids, run in rounds:
  1. Expand ancestors: mutate each partial grid with seeded random moves and split
     it into two halves; every few rounds also recombine halves of different grids.
  2. Select ancestors by a diversity-adjusted score that favours placing more words.
  3. Fill: greedily place words into each ancestor until nothing else fits.
  4. Select complete grids by the same diversity-adjusted score.
The search stops when a round changes nothing or after ``max_rounds``.
"""

from __future__ import annotations

import copy
from collections import Counter
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..utils.logger import get_logger
from ..utils.seeding import derive_seed, seeded_rng
from .grid import CrosswordGrid
from .scoring import GridScore, pick_best_varied


LOGGER = get_logger(__name__)


class MoveType(str, Enum):
    PLACE_WORD = "PLACE_WORD"
    PRUNE_LEAVES = "PRUNE_LEAVES"
    PARTITION = "PARTITION"
    RECOMBINATION = "RECOMBINATION"


# Only these two are drawn at random; partition and recombination run on schedule.
RANDOM_MOVE_TYPES = (MoveType.PLACE_WORD, MoveType.PRUNE_LEAVES)

CONFIG_ALIASES = {"num-per-generation": "num-per-gen"}


@dataclass
class GeneratorConfig:
    seed: int = 13
    moves_between_scores: int = 4
    num_children: int = 15
    num_per_gen: int = 15
    max_rounds: int = 20
    min_rounds: int = 10
    weight_non_square: int = 2
    weight_prop_filled: int = 10
    weight_prop_intersect: int = 500
    weight_num_cycles: int = 1000
    weight_num_intersect: int = 100
    weight_avg_intersect: int = 100
    weight_words_placed: int = 10
    weight_place_word_move: int = 3
    weight_prune_leaves_move: int = 1
    leaves_per_prune: int = 1
    partitions_per_parent: int = 10
    recombination_interval: int = 5

    def __post_init__(self) -> None:
        if self.weight_place_word_move + self.weight_prune_leaves_move <= 0:
            raise ValueError("At least one move weight must be positive")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "GeneratorConfig":
        """Build from dashed keys such as ``max-rounds``; unknown keys are ignored."""

        known = {item.name for item in fields(cls)}
        values: Dict[str, int] = {}
        for key, value in mapping.items():
            name = CONFIG_ALIASES.get(key, key).replace("-", "_")
            if name not in known:
                LOGGER.debug("Ignoring unknown setting %s", key)
                continue
            values[name] = int(value)
        return cls(**values)

    @property
    def move_weights(self) -> List[int]:
        return [self.weight_place_word_move, self.weight_prune_leaves_move]

    def recombination_due(self, round_index: int) -> bool:
        interval = self.recombination_interval
        return interval > 0 and (round_index + 1) % interval == 0


@dataclass
class CrosswordGridAttempt:
    """A grid together with its score and the moves that produced it."""

    grid: CrosswordGrid
    score: GridScore
    move_counts: Counter = field(default_factory=Counter)

    @classmethod
    def new(
        cls,
        grid: CrosswordGrid,
        config: GeneratorConfig,
        move_counts: Optional[Counter] = None,
    ) -> "CrosswordGridAttempt":
        return cls(grid, GridScore.from_grid(grid, config), Counter(move_counts or {}))

    @property
    def summary_score(self) -> float:
        return self.score.summary

    @property
    def ancestor_summary_score(self) -> float:
        return self.score.ancestor_summary

    def increment_move_count(self, move_type: MoveType, amount: int = 1) -> None:
        self.move_counts[move_type] += amount

    def copy(self) -> "CrosswordGridAttempt":
        return copy.deepcopy(self)


def dedupe_by_rendering(attempts: Iterable[CrosswordGridAttempt]) -> List[CrosswordGridAttempt]:
    """Keep the first attempt for each distinct grid text."""

    seen = set()
    unique: List[CrosswordGridAttempt] = []
    for attempt in attempts:
        rendering = attempt.grid.to_string()
        if rendering in seen:
            continue
        seen.add(rendering)
        unique.append(attempt)
    return unique


class CrosswordGenerator:
    """Evolves a population of grids built from one word list."""

    def __init__(self, config: GeneratorConfig, seed_grids: Sequence[CrosswordGrid]) -> None:
        self.config = config
        self.round = 0
        self.ancestors: List[CrosswordGridAttempt] = [CrosswordGridAttempt.new(grid, config) for grid in seed_grids]
        self.complete: List[CrosswordGridAttempt] = []

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[Sequence[Any]],
        config: Optional[GeneratorConfig] = None,
    ) -> "CrosswordGenerator":
        """Start from one singleton grid per ``(answer, clue, direction)`` entry."""

        config = config or GeneratorConfig()
        grids = CrosswordGrid.random_singleton_grids(entries, config.seed)
        return cls(config, grids)

    @classmethod
    def from_words(cls, words: Iterable[str], config: Optional[GeneratorConfig] = None) -> "CrosswordGenerator":
        entries = [(word, "", None) for word in words]
        return cls.from_entries(entries, config)

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------
    def choose_random_move_type(self, seed: int) -> MoveType:
        rng = seeded_rng(self.config.seed, seed)
        return rng.choices(RANDOM_MOVE_TYPES, weights=self.config.move_weights)[0]

    def produce_child(self, attempt: CrosswordGridAttempt, seed: int) -> CrosswordGridAttempt:
        """Apply up to ``moves_between_scores`` random moves, stopping at the first failed placement."""

        grid = attempt.grid.copy()
        move_counts = Counter(attempt.move_counts)
        for move in range(self.config.moves_between_scores):
            extended_seed = derive_seed(seed, move)
            move_type = self.choose_random_move_type(extended_seed)
            if move_type is MoveType.PLACE_WORD:
                if not grid.place_random_word(extended_seed):
                    break
            else:
                grid.remove_random_leaves(self.config.leaves_per_prune, extended_seed)
            move_counts[move_type] += 1
        return CrosswordGridAttempt.new(grid, self.config, move_counts)

    def partition_children(self, attempt: CrosswordGridAttempt, seed: int, count: int) -> List[CrosswordGridAttempt]:
        halves: List[CrosswordGridAttempt] = []
        if attempt.grid.count_placed_words() < 2:
            return halves
        for index in range(count):
            grid = attempt.grid.copy()
            other_half = grid.random_partition(derive_seed(seed, index))
            for half in (grid, other_half):
                child = CrosswordGridAttempt.new(half, self.config, attempt.move_counts)
                child.increment_move_count(MoveType.PARTITION)
                halves.append(child)
        return halves

    def fill_grid(self, attempt: CrosswordGridAttempt, seed: int) -> CrosswordGridAttempt:
        """Place random words until none fits."""

        grid = attempt.grid.copy()
        move_counts = Counter(attempt.move_counts)
        moves = 0
        while grid.place_random_word(derive_seed(seed, moves)):
            moves += 1
        move_counts[MoveType.PLACE_WORD] += moves
        return CrosswordGridAttempt.new(grid, self.config, move_counts)

    # ------------------------------------------------------------------
    # Recombination
    # ------------------------------------------------------------------
    def generate_partitions(self, seed: int) -> List[CrosswordGridAttempt]:
        partitions: List[CrosswordGridAttempt] = []
        for parent in self.ancestors:
            parent_seed = derive_seed(seed, int(parent.summary_score))
            partitions.extend(self.partition_children(parent, parent_seed, self.config.partitions_per_parent))
        return pick_best_varied(
            dedupe_by_rendering(partitions),
            self.config.num_per_gen * 2,
            score=lambda attempt: attempt.ancestor_summary_score,
            grid=lambda attempt: attempt.grid,
        )

    def perform_recombination(self, seed: int) -> List[CrosswordGridAttempt]:
        """Merge pairs of half-grids with disjoint words into new ancestors.

        Each gamete may merge with several earlier gametes, but every further merge
        must share more cells than the last successful one.
        """

        gametes = self.generate_partitions(seed)
        recombined: List[CrosswordGridAttempt] = []
        for first_index, gamete in enumerate(gametes):
            min_overlaps = 1
            for second in gametes[:first_index]:
                merged = gamete.copy()
                if not merged.grid.try_merge_with_grid(second.grid, min_overlaps):
                    continue
                LOGGER.debug(
                    "Recombined with at least %s overlaps\n%s\n%s",
                    min_overlaps,
                    second.grid.to_string(),
                    merged.grid.to_string(),
                )
                child = CrosswordGridAttempt.new(merged.grid, self.config, merged.move_counts)
                child.increment_move_count(MoveType.RECOMBINATION)
                recombined.append(child)
                min_overlaps += 1
        LOGGER.info("Recombination produced %s grids from %s gametes", len(recombined), len(gametes))
        return recombined

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------
    def next_generation(self) -> None:
        next_ancestors: List[CrosswordGridAttempt] = []
        for attempt in self.ancestors:
            seed = derive_seed(int(attempt.summary_score), self.round)
            for child_index in range(self.config.num_children):
                next_ancestors.append(self.produce_child(attempt, derive_seed(seed, child_index)))
            next_ancestors.extend(self.partition_children(attempt, seed, self.config.num_children))

        if self.config.recombination_due(self.round):
            next_ancestors.extend(self.perform_recombination(derive_seed(self.config.seed, self.round)))

        # Previous ancestors compete with their children.
        next_ancestors.extend(self.ancestors)
        self.ancestors = pick_best_varied(
            dedupe_by_rendering(next_ancestors),
            self.config.num_per_gen,
            score=lambda attempt: attempt.ancestor_summary_score,
            grid=lambda attempt: attempt.grid,
        )
        LOGGER.info("Round %s. Kept %s of %s ancestors", self.round, len(self.ancestors), len(next_ancestors))

        next_complete: List[CrosswordGridAttempt] = []
        for attempt in self.ancestors:
            seed = int(attempt.summary_score)
            for child_index in range(self.config.num_children):
                next_complete.append(self.fill_grid(attempt, derive_seed(seed, child_index)))
        next_complete.extend(self.complete)
        self.complete = pick_best_varied(
            dedupe_by_rendering(next_complete),
            self.config.num_per_gen,
            score=lambda attempt: attempt.summary_score,
            grid=lambda attempt: attempt.grid,
        )
        LOGGER.info("Round %s. Kept %s of %s complete grids", self.round, len(self.complete), len(next_complete))

    def stringified_output(self) -> str:
        return "".join(attempt.grid.to_string() + "\n\n" for attempt in self.ancestors + self.complete)

    def current_best_score(self) -> float:
        return max((attempt.summary_score for attempt in self.complete), default=0.0)

    def average_scores(self) -> GridScore:
        return GridScore.average([attempt.score for attempt in self.complete])

    def generate(self) -> List[CrosswordGrid]:
        """Run rounds until the population stops changing; returns the complete grids, best first."""

        if not self.ancestors:
            LOGGER.info("No seed words, nothing to generate")
            return []

        last_stringified = self.stringified_output()
        converged = False
        while not converged and self.round < self.config.max_rounds:
            self.next_generation()
            LOGGER.info("Round %s. Average score is %s", self.round, self.average_scores())
            LOGGER.info("Round %s. Current best score is %.3f", self.round, self.current_best_score())

            stringified = self.stringified_output()
            if self.round > self.config.min_rounds:
                converged = stringified == last_stringified
            last_stringified = stringified
            self.round += 1

        if converged:
            LOGGER.info("Stopped after round %s since the population stopped changing", self.round - 1)
        if self.complete:
            LOGGER.info("Best final score is %s", self.complete[0].score)
        return [attempt.grid for attempt in self.complete]

    def output_best(self, num_to_output: int) -> List[CrosswordGrid]:
        return [attempt.grid.copy() for attempt in self.complete[:num_to_output]]
