import unittest
from collections import Counter

from crossbreed.core.constants import Direction
from crossbreed.engine.generator import (
    CrosswordGenerator,
    CrosswordGridAttempt,
    GeneratorConfig,
    MoveType,
    dedupe_by_rendering,
)
from crossbreed.engine.grid import CrosswordGrid


WORDS = ["BEAR", "BEE", "RABBIT", "EAR", "TEA", "ARE"]


def small_config(**overrides) -> GeneratorConfig:
    settings = dict(
        seed=7,
        moves_between_scores=2,
        num_children=2,
        num_per_gen=3,
        max_rounds=3,
        min_rounds=0,
        partitions_per_parent=2,
        recombination_interval=1,
    )
    settings.update(overrides)
    return GeneratorConfig(**settings)


class GeneratorConfigTests(unittest.TestCase):
    def test_from_mapping_accepts_dashed_keys(self) -> None:
        config = GeneratorConfig.from_mapping(
            {"max-rounds": "5", "num-per-generation": 4, "weight-num-cycles": 7, "bogus": 1}
        )
        self.assertEqual(config.max_rounds, 5)
        self.assertEqual(config.num_per_gen, 4)
        self.assertEqual(config.weight_num_cycles, 7)
        self.assertEqual(config.num_children, GeneratorConfig().num_children)

    def test_move_weights_must_allow_a_move(self) -> None:
        with self.assertRaises(ValueError):
            GeneratorConfig(weight_place_word_move=0, weight_prune_leaves_move=0)

    def test_recombination_schedule(self) -> None:
        config = GeneratorConfig(recombination_interval=5)
        self.assertEqual([r for r in range(12) if config.recombination_due(r)], [4, 9])
        self.assertFalse(GeneratorConfig(recombination_interval=0).recombination_due(4))


class AttemptTests(unittest.TestCase):
    def test_fill_grid_counts_placements(self) -> None:
        grid = CrosswordGrid.new_single_word("ALPHA")
        grid.add_unplaced_word("HARICOT")
        generator = CrosswordGenerator(small_config(), [grid])

        filled = generator.fill_grid(generator.ancestors[0], seed=3)
        self.assertEqual(filled.move_counts[MoveType.PLACE_WORD], 1)
        self.assertEqual(filled.grid.count_placed_words(), 2)
        self.assertEqual(generator.ancestors[0].grid.count_placed_words(), 1)

    def test_partition_children_come_in_pairs(self) -> None:
        grid = CrosswordGrid.new_single_word("ALPHA")
        grid.add_unplaced_word("HARICOT")
        grid.place_random_word(13)
        generator = CrosswordGenerator(small_config(), [grid])

        halves = generator.partition_children(generator.ancestors[0], seed=1, count=3)
        self.assertEqual(len(halves), 6)
        for half in halves:
            self.assertEqual(half.grid.count_placed_words(), 1)
            self.assertEqual(half.move_counts[MoveType.PARTITION], 1)

    def test_dedupe_keeps_first(self) -> None:
        config = small_config()
        first = CrosswordGridAttempt.new(CrosswordGrid.new_single_word("BEE"), config, Counter({MoveType.PLACE_WORD: 1}))
        second = CrosswordGridAttempt.new(CrosswordGrid.new_single_word("BEE"), config)
        unique = dedupe_by_rendering([first, second])
        self.assertEqual(len(unique), 1)
        self.assertIs(unique[0], first)

    def test_choose_random_move_type_respects_weights(self) -> None:
        generator = CrosswordGenerator(small_config(weight_prune_leaves_move=0), [])
        moves = {generator.choose_random_move_type(seed) for seed in range(20)}
        self.assertEqual(moves, {MoveType.PLACE_WORD})


class GenerateTests(unittest.TestCase):
    def test_no_words(self) -> None:
        self.assertEqual(CrosswordGenerator.from_words([], small_config()).generate(), [])

    def test_single_word(self) -> None:
        entries = [("ALPHA", "", Direction.ACROSS)]
        grids = CrosswordGenerator.from_entries(entries, small_config()).generate()
        self.assertEqual([grid.to_string() for grid in grids], ["ALPHA\n"])

    def test_single_word_any_direction(self) -> None:
        grids = CrosswordGenerator.from_words(["ALPHA"], small_config()).generate()
        self.assertEqual(len(grids), 1)
        self.assertEqual(grids[0].count_placed_words(), 1)
        self.assertEqual(grids[0].to_string().replace("\n", ""), "ALPHA")

    def test_generated_grids_are_valid(self) -> None:
        generator = CrosswordGenerator.from_words(WORDS, small_config())
        grids = generator.generate()

        self.assertTrue(grids)
        self.assertLessEqual(len(grids), 3)
        for grid in grids:
            grid.check_valid()
            self.assertTrue(grid.black_cells_valid())
            self.assertEqual(grid.count_all_words(), len(WORDS))
        self.assertGreaterEqual(grids[0].count_placed_words(), 2)
        self.assertEqual(generator.current_best_score(), max(a.summary_score for a in generator.complete))

    def test_same_seed_same_grids(self) -> None:
        first = CrosswordGenerator.from_words(WORDS, small_config()).generate()
        second = CrosswordGenerator.from_words(WORDS, small_config()).generate()
        self.assertEqual([grid.to_string() for grid in first], [grid.to_string() for grid in second])

    def test_same_seed_same_population_each_round(self) -> None:
        first = CrosswordGenerator.from_words(WORDS, small_config())
        second = CrosswordGenerator.from_words(WORDS, small_config())
        self.assertEqual(first.stringified_output(), second.stringified_output())
        for _ in range(3):
            first.next_generation()
            second.next_generation()
            self.assertEqual(first.stringified_output(), second.stringified_output())
            first.round += 1
            second.round += 1

    def test_required_direction_is_kept(self) -> None:
        entries = [("BEAR", "", Direction.DOWN), ("BEE", "", None), ("RABBIT", "", None)]
        generator = CrosswordGenerator.from_entries(entries, small_config())
        for grid in generator.generate():
            placement = grid.word_map[0].placement
            if placement is not None:
                self.assertEqual(placement.direction, Direction.DOWN)

    def test_output_best_returns_copies(self) -> None:
        generator = CrosswordGenerator.from_words(WORDS, small_config())
        generator.generate()
        best = generator.output_best(1)
        self.assertEqual(len(best), 1)
        self.assertIsNot(best[0], generator.complete[0].grid)
        self.assertEqual(best[0].to_string(), generator.complete[0].grid.to_string())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
