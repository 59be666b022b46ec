import random
import unittest

from wordsearch.core.constants import ALPHABET, DIRECTIONS, Bounds
from wordsearch.core.models import Placement
from wordsearch.engine.grid import (
    WordPlacer,
    cell_at,
    create_grid,
    place_words,
    read_placement,
    to_jsonable,
)


class CreateGridTests(unittest.TestCase):
    def test_cells_start_empty_with_coordinates(self) -> None:
        grid = create_grid(3, 4)
        self.assertEqual(len(grid), 3)
        self.assertEqual(len(grid[0]), 4)
        for r, row in enumerate(grid):
            for c, cell in enumerate(row):
                self.assertEqual((cell.row, cell.col), (r, c))
                self.assertEqual(cell.letter, "")
                self.assertFalse(cell.is_selected)
                self.assertFalse(cell.is_found)

    def test_cell_at_rejects_out_of_bounds(self) -> None:
        grid = create_grid(2, 2)
        self.assertIsNone(cell_at(grid, 2, 0))
        self.assertIsNone(cell_at(grid, 0, -1))
        self.assertIs(cell_at(grid, 1, 1), grid[1][1])


class WordPlacerTests(unittest.TestCase):
    WORDS = ["CLOUD", "SERVER", "CODE", "DATA", "PIXEL", "ROBOT"]

    def test_placed_words_read_back_exactly(self) -> None:
        for seed in range(20):
            grid = create_grid(10, 10)
            result = WordPlacer(rng=random.Random(seed)).place(grid, self.WORDS)
            for placement in result.placements:
                self.assertEqual(read_placement(grid, placement), placement.word)
                self.assertIn(placement.direction, DIRECTIONS)

    def test_later_words_never_corrupt_earlier_ones(self) -> None:
        for seed in range(20):
            grid = create_grid(6, 6)
            words = ["ALPHA", "BRAVO", "CHARLIE", "DELTA", "ECHO", "FOXTROT", "GOLF"]
            result = WordPlacer(rng=random.Random(seed)).place(grid, words)
            # Reading every placement after all commits proves no overwrite happened.
            for placement in result.placements:
                self.assertEqual(read_placement(grid, placement), placement.word)

    def test_every_cell_filled_with_uppercase_letter(self) -> None:
        grid = create_grid(8, 8)
        WordPlacer(rng=random.Random(3)).place(grid, self.WORDS)
        for row in grid:
            for cell in row:
                self.assertEqual(len(cell.letter), 1)
                self.assertIn(cell.letter, ALPHABET)

    def test_empty_word_list_yields_all_filler(self) -> None:
        grid = create_grid(4, 4)
        placed = place_words(grid, [], rng=random.Random(1))
        self.assertEqual(placed, set())
        self.assertTrue(all(cell.letter in ALPHABET for row in grid for cell in row))

    def test_word_longer_than_grid_is_dropped(self) -> None:
        grid = create_grid(4, 4)
        result = WordPlacer(rng=random.Random(7)).place(grid, ["ENCYCLOPEDIA", "CAT"])
        self.assertEqual(result.dropped, ["ENCYCLOPEDIA"])
        self.assertIn("CAT", result.placed_words)

    def test_placement_is_reproducible_with_seed(self) -> None:
        grid_a = create_grid(8, 8)
        grid_b = create_grid(8, 8)
        WordPlacer(rng=random.Random(42)).place(grid_a, self.WORDS)
        WordPlacer(rng=random.Random(42)).place(grid_b, self.WORDS)
        self.assertEqual(
            [[c.letter for c in row] for row in grid_a],
            [[c.letter for c in row] for row in grid_b],
        )

    def test_crossing_on_matching_letter_is_allowed(self) -> None:
        grid = create_grid(5, 5)
        grid[0][2].letter = "C"
        self.assertTrue(WordPlacer._can_place(grid, Bounds(5, 5), Placement("CAT", 0, 2, (1, 0))))

    def test_conflicting_letter_rejects_candidate(self) -> None:
        grid = create_grid(5, 5)
        grid[1][2].letter = "X"
        self.assertFalse(WordPlacer._can_place(grid, Bounds(5, 5), Placement("CAT", 0, 2, (1, 0))))
        self.assertFalse(WordPlacer._can_place(grid, Bounds(5, 5), Placement("CAT", 3, 2, (1, 0))))

    def test_duplicate_words_are_attempted_independently(self) -> None:
        grid = create_grid(6, 6)
        result = WordPlacer(rng=random.Random(5)).place(grid, ["CODE", "CODE"])
        self.assertEqual(len(result.placements), 2)
        self.assertEqual(result.placed_words, {"CODE"})

    def test_longest_words_placed_first(self) -> None:
        grid = create_grid(10, 10)
        result = WordPlacer(rng=random.Random(9)).place(grid, ["AB", "ABCDEF", "ABCD"])
        self.assertEqual([p.word for p in result.placements], ["ABCDEF", "ABCD", "AB"])

    def test_to_jsonable_shape(self) -> None:
        grid = create_grid(2, 3)
        place_words(grid, ["HI"], rng=random.Random(0))
        payload = to_jsonable(grid)
        self.assertEqual(len(payload), 2)
        self.assertEqual(set(payload[0][0]), {"letter", "row", "col", "selected", "found"})


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
