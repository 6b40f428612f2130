import unittest

import numpy as np

from crossbreed.engine.builder import CrosswordGridBuilder
from crossbreed.engine.grid import CrosswordGrid
from crossbreed.engine.matrix import (
    BLACK_CODE,
    CrosswordGridMatrix,
    binarise,
    count_squares,
    find_merge_configuration,
)


def bee_and_bear():
    bee = CrosswordGrid.new_single_word("BEE")
    bear = CrosswordGridBuilder().from_string("B\nE\nA\nR\n")
    return bee, bear


class CountSquaresTests(unittest.TestCase):
    def test_known_layouts(self) -> None:
        cases = [
            ([[0, 1, 1, 0], [0, 1, 1, 0], [0, 0, 0, 0]], 1),
            ([[1, 1, 1, 0], [0, 1, 1, 1], [1, 0, 1, 1]], 2),
            ([[0, 0, 0, 1], [1, 1, 1, 1], [1, 1, 0, 1]], 1),
            ([[0, 0, 0, 0], [0, 0, 1, 1], [0, 0, 1, 1]], 1),
            ([[1, 1, 0, 0], [1, 1, 1, 1], [0, 0, 1, 1]], 2),
            ([[0, 1, 0, 0], [1, 1, 1, 1], [0, 0, 1, 0]], 0),
        ]
        for array, expected in cases:
            with self.subTest(array=array):
                self.assertEqual(count_squares(np.array(array)), expected)

    def test_thin_arrays_have_no_squares(self) -> None:
        self.assertEqual(count_squares(np.ones((1, 5))), 0)
        self.assertEqual(count_squares(np.ones((4, 1))), 0)

    def test_binarise_threshold(self) -> None:
        array = np.array([[0, 1, 2], [5, 1, 0]])
        self.assertEqual(binarise(array).tolist(), [[0, 1, 1], [1, 1, 0]])
        self.assertEqual(binarise(array, 1).tolist(), [[0, 0, 1], [1, 0, 0]])


class RasterTests(unittest.TestCase):
    def test_raster_codes(self) -> None:
        bee, _ = bee_and_bear()
        raster = CrosswordGridMatrix.from_grid(bee)

        self.assertEqual((raster.nrows, raster.ncols), (3, 5))
        self.assertEqual((raster.row_shift, raster.col_shift), (1, 1))
        self.assertEqual(raster.matrix[1].tolist(), [BLACK_CODE, 3, 6, 6, BLACK_CODE])
        self.assertEqual(raster.matrix[0].tolist(), [0, 0, 0, 0, 0])

    def test_shifted_keeps_coordinates(self) -> None:
        bee, _ = bee_and_bear()
        raster = CrosswordGridMatrix.from_grid(bee)
        shifted = raster.shifted(2, 1)

        self.assertEqual((shifted.nrows, shifted.ncols), (5, 6))
        self.assertEqual(shifted.matrix[0 + shifted.row_shift, 0 + shifted.col_shift], 3)
        padded = raster.padded_to_size(4, 7)
        self.assertEqual(padded.matrix.shape, (4, 7))
        self.assertEqual(int(padded.matrix.sum()), int(raster.matrix.sum()))


class CompatibilityTests(unittest.TestCase):
    def test_bee_crosses_bear_at_three_offsets(self) -> None:
        bee, bear = bee_and_bear()
        bee_raster = CrosswordGridMatrix.from_grid(bee)
        bear_raster = CrosswordGridMatrix.from_grid(bear)

        compatible = [
            (row_shift, col_shift)
            for row_shift in range(-6, 7)
            for col_shift in range(-6, 7)
            if bee_raster.compatible_with_matrix(bear_raster, row_shift, col_shift)
        ]
        self.assertEqual(compatible, [(-1, 1), (-1, 2), (0, 0)])

    def test_compatibility_is_symmetric(self) -> None:
        bee, bear = bee_and_bear()
        bee_raster = CrosswordGridMatrix.from_grid(bee)
        bear_raster = CrosswordGridMatrix.from_grid(bear)

        for row_shift in range(-6, 7):
            for col_shift in range(-6, 7):
                with self.subTest(shift=(row_shift, col_shift)):
                    self.assertEqual(
                        bee_raster.compatible_with_matrix(bear_raster, row_shift, col_shift),
                        bear_raster.compatible_with_matrix(bee_raster, -row_shift, -col_shift),
                    )

    def test_mismatch_and_missing_overlap(self) -> None:
        bee, bear = bee_and_bear()
        bee_raster = CrosswordGridMatrix.from_grid(bee)
        bear_raster = CrosswordGridMatrix.from_grid(bear)

        clash = bee_raster.assess_compatibility(bear_raster, 0, 1)
        self.assertFalse(clash.compatible)
        self.assertEqual(clash.num_overlaps, 1)

        apart = bee_raster.assess_compatibility(bear_raster, 5, 5)
        self.assertFalse(apart.compatible)
        self.assertEqual(apart.num_overlaps, 0)

    def test_best_configuration_prefers_first_in_scan_order(self) -> None:
        bee, bear = bee_and_bear()
        bee_raster = CrosswordGridMatrix.from_grid(bee)
        bear_raster = CrosswordGridMatrix.from_grid(bear)

        self.assertEqual(bee_raster.find_best_probably_compatible_configuration(bear_raster), ((-1, 1), 1))
        self.assertEqual(find_merge_configuration(bee, bear), ((-1, 1), 1))

    def test_no_configuration_without_common_letters(self) -> None:
        bee = CrosswordGrid.new_single_word("BEE")
        cat = CrosswordGrid.new_single_word("CAT")
        self.assertIsNone(find_merge_configuration(bee, cat))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
