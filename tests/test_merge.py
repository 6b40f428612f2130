import unittest

from crossbreed.core.exceptions import GridInvariantError
from crossbreed.engine.builder import CrosswordGridBuilder
from crossbreed.engine.grid import CrosswordGrid


def bee_and_bear():
    """BEE across as word 0 and BEAR down as word 1, each placed in its own grid."""

    bee = CrosswordGrid.new_single_word("BEE")
    bee.add_unplaced_word_at_id("BEAR", "", 1)

    bear = CrosswordGridBuilder().from_string("B\nE\nA\nR\n")
    bear.update_word_id(0, 1)
    bear.add_unplaced_word_at_id("BEE", "", 0)
    return bee, bear


class TryMergeTests(unittest.TestCase):
    def test_merge_at_best_overlay(self) -> None:
        bee, bear = bee_and_bear()

        self.assertTrue(bee.try_merge_with_grid(bear))
        self.assertEqual(bee.to_string(), " B \nBEE\n A \n R \n")
        self.assertEqual(bee.placed_word_ids(), [0, 1])
        self.assertEqual(bee.count_intersections(), 1)
        self.assertTrue(bee.black_cells_valid())
        bee.check_valid()

    def test_other_grid_is_untouched(self) -> None:
        bee, bear = bee_and_bear()
        bee.try_merge_with_grid(bear)
        self.assertEqual(bear.to_string(), "B\nE\nA\nR\n")
        self.assertEqual(bear.placed_word_ids(), [1])

    def test_word_placed_in_both_is_refused(self) -> None:
        bee = CrosswordGrid.new_single_word("BEE")
        twin = bee.copy()

        self.assertFalse(bee.try_merge_with_grid(twin))
        self.assertEqual(bee.to_string(), "BEE\n")

    def test_unknown_word_is_refused(self) -> None:
        bee = CrosswordGrid.new_single_word("BEE")
        bear = CrosswordGridBuilder().from_string("B\nE\nA\nR\n")
        bear.update_word_id(0, 1)

        self.assertFalse(bee.try_merge_with_grid(bear))
        self.assertEqual(bee.count_placed_words(), 1)

    def test_minimum_overlap_is_enforced(self) -> None:
        bee, bear = bee_and_bear()
        self.assertFalse(bee.try_merge_with_grid(bear, min_overlaps=2))
        self.assertEqual(bee.to_string(), "BEE\n")

    def test_no_common_letter(self) -> None:
        bee = CrosswordGrid.new_single_word("BEE")
        bee.add_unplaced_word_at_id("CAT", "", 1)
        cat = CrosswordGridBuilder().from_string("C\nA\nT\n")
        cat.update_word_id(0, 1)
        cat.add_unplaced_word_at_id("BEE", "", 0)

        self.assertFalse(bee.try_merge_with_grid(cat))
        self.assertEqual(bee.to_string(), "BEE\n")


class MergeWithGridTests(unittest.TestCase):
    def test_explicit_shift(self) -> None:
        bee, bear = bee_and_bear()
        shift, overlaps = bee.find_best_probably_compatible_configuration(bear)
        self.assertEqual((shift, overlaps), ((-1, 1), 1))

        bee.merge_with_grid(bear, *shift)
        self.assertEqual(bee.to_string(), " B \nBEE\n A \n R \n")

    def test_first_letter_crossing(self) -> None:
        bee, bear = bee_and_bear()
        bee.merge_with_grid(bear, 0, 0)
        self.assertEqual(bee.to_string(), "BEE\nE  \nA  \nR  \n")

    def test_bad_shift_is_fatal(self) -> None:
        bee, bear = bee_and_bear()
        with self.assertRaises(GridInvariantError):
            bee.merge_with_grid(bear, 0, 1)

    def test_stale_boundaries_are_fatal(self) -> None:
        bee, bear = bee_and_bear()
        for cell in bear.cell_map.values():
            if cell.is_black():
                cell.set_empty()
        with self.assertRaises(GridInvariantError):
            bee.merge_with_grid(bear, 0, 0)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
