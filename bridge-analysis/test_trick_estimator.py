"""
Unit tests for the trick estimator.

Tests:
- Each estimate (play, other table, median, mode, best, double dummy)
- The choice of method, including overrides in both directions
- Head-to-head matches, where the field is not used
"""

import unittest

from board_data import Board, OverrideStore, Traveller
from double_dummy import DoubleDummyTable
from trick_estimator import (
    BEST, DOUBLE_DUMMY, MEDIAN, MODE, OTHER, OVERRIDE, PLAY, TrickEstimator, reliability,
)


class TestActualPlayFirst(unittest.TestCase):
    """4H by North made exactly; the rest of the field went one down"""

    def setUp(self):
        self.traveller = Traveller(1, '4H', 'N', 0)
        field = [Traveller(1, '4H', 'N', -1) for _ in range(5)]
        self.overrides = OverrideStore()
        self.board = Board(1, [self.traveller] + field)
        self.estimator = TrickEstimator(self.board, self.traveller, 'NS', overrides=self.overrides)

    def test_estimates(self):
        """Play from the table; median, mode and best from the field"""
        estimate = self.estimator.estimate('H', 'NS')
        self.assertEqual(estimate.get(PLAY), 10)
        self.assertEqual(estimate.get(MEDIAN), 9)
        self.assertEqual(estimate.get(MODE), 9)
        self.assertEqual(estimate.get(BEST), 9)
        self.assertEqual(estimate.mode_fraction, 1.0)
        self.assertIsNone(estimate.get(DOUBLE_DUMMY))

    def test_play_beats_unanimous_field(self):
        """Actual play is used even when the whole field agrees on something else"""
        self.assertEqual(self.estimator.use_method('H', 'NS'), PLAY)
        self.assertEqual(self.estimator.use_method_made('H', 'NS'), (PLAY, 10))

    def test_worse_override_used(self):
        """An override worse for the declarer than the play replaces it"""
        self.overrides.set(1, 'H', 'NS', 9)
        self.assertEqual(self.estimator.use_method('H', 'NS'), OVERRIDE)
        self.assertEqual(self.estimator.made('H', 'NS', OVERRIDE), 9)

    def test_better_override_ignored(self):
        """An override better for the declarer than the play does not replace it"""
        self.overrides.set(1, 'H', 'NS', 11)
        self.assertEqual(self.estimator.use_method('H', 'NS'), PLAY)
        self.assertEqual(self.estimator.use_method('H', 'NS', override_regardless=True), OVERRIDE)

    def test_override_worse_for_defenders(self):
        """Seen from the defence, more tricks for declarer is worse"""
        estimator = TrickEstimator(self.board, self.traveller, 'EW', overrides=self.overrides)
        self.overrides.set(1, 'H', 'NS', 11)
        self.assertEqual(estimator.use_method('H', 'NS'), OVERRIDE)
        self.overrides.set(1, 'H', 'NS', 9)
        self.assertEqual(estimator.use_method('H', 'NS'), PLAY)

    def test_override_without_play(self):
        """With nothing played in the strain an override is always used"""
        self.overrides.set(1, 'S', 'NS', 8)
        self.assertEqual(self.estimator.use_method('S', 'NS'), OVERRIDE)

    def test_play_needs_declaring_pair(self):
        """The same strain by the other side is not our play"""
        self.assertIsNone(self.estimator.made('H', 'EW', PLAY))


class TestFieldEstimates(unittest.TestCase):
    """Combinations not played at our table"""

    def setUp(self):
        self.traveller = Traveller(1, '3NT', 'S', 0)
        self.double_dummy = DoubleDummyTable({'N': {'S': 10, 'D': 8}, 'S': {'S': 9, 'D': -1}})

    def estimator(self, spades):
        field = [Traveller(1, '4S', 'N', tricks - 10) for tricks in spades]
        board = Board(1, [self.traveller] + field, double_dummy=self.double_dummy)
        return TrickEstimator(board, self.traveller, 'NS')

    def test_upper_median(self):
        """With an even number of results the upper median is used"""
        estimator = self.estimator([11, 8, 10, 9])
        self.assertEqual(estimator.made('S', 'NS', MEDIAN), 10)
        self.assertEqual(estimator.made('S', 'NS', BEST), 11)

    def test_mode_tie_goes_low(self):
        """Equally common results: the lowest trick count is the mode"""
        estimator = self.estimator([9, 10, 8, 9, 8])
        estimate = estimator.estimate('S', 'NS')
        self.assertEqual(estimate.get(MODE), 8)
        self.assertAlmostEqual(estimate.mode_fraction, 0.4)
        self.assertEqual(estimator.use_method('S', 'NS'), MODE)

    def test_scattered_field_uses_median(self):
        """No result shared by a quarter of the field: median instead of mode"""
        estimator = self.estimator([8, 9, 10, 11, 12])
        self.assertEqual(estimator.estimate('S', 'NS').mode_fraction, 0.2)
        self.assertEqual(estimator.use_method('S', 'NS'), MEDIAN)
        self.assertEqual(estimator.use_method_made('S', 'NS'), (MEDIAN, 10))

    def test_mode_threshold_configurable(self):
        field = [Traveller(1, '4S', 'N', tricks - 10) for tricks in [8, 9, 10, 11, 12]]
        board = Board(1, [self.traveller] + field)
        estimator = TrickEstimator(board, self.traveller, 'NS', mode_threshold=0.2)
        self.assertEqual(estimator.use_method('S', 'NS'), MODE)

    def test_double_dummy_fallback(self):
        """No field results: double dummy, the better seat of the pair"""
        estimator = self.estimator([])
        self.assertEqual(estimator.use_method_made('S', 'NS'), (DOUBLE_DUMMY, 10))
        self.assertEqual(estimator.use_method_made('D', 'NS'), (DOUBLE_DUMMY, 8))

    def test_nothing_known(self):
        estimator = self.estimator([])
        self.assertIsNone(estimator.use_method('H', 'EW'))
        self.assertIsNone(estimator.use_method_made('H', 'EW'))

    def test_analysed_result_not_in_field(self):
        """Our own result is not part of the field statistics"""
        estimator = self.estimator([])
        self.assertIsNone(estimator.made('NT', 'NS', MEDIAN))
        self.assertEqual(estimator.made('NT', 'NS', PLAY), 9)

    def test_estimate_for_other_board(self):
        estimator = self.estimator([9])
        self.assertIsNone(estimator.estimate_for(estimator.combination('S', 'NS')._replace(board=2)))
        self.assertEqual(estimator.estimate_for(estimator.combination('S', 'N')).get(MEDIAN), 9)


class TestHeadToHead(unittest.TestCase):
    """Two-table team match"""

    def setUp(self):
        self.ours = Traveller(1, '4S', 'N', 0, ranking_numbers={'NS': 1, 'EW': 2})
        self.theirs = Traveller(1, '4S', 'S', -1, ranking_numbers={'NS': 2, 'EW': 1})
        self.heart_game = Traveller(1, '4H', 'E', 0, ranking_numbers={'NS': 2, 'EW': 1})
        self.double_dummy = DoubleDummyTable({'E': {'H': 9}, 'N': {'S': 10}})

    def test_other_table_used(self):
        """Not played at our table but played at the other"""
        board = Board(1, [self.ours, self.heart_game], double_dummy=self.double_dummy)
        estimator = TrickEstimator(board, self.ours, 'NS', head_to_head=True, other_traveller=self.heart_game)
        self.assertEqual(estimator.use_method_made('H', 'EW'), (OTHER, 10))

    def test_play_preferred_to_other_table(self):
        board = Board(1, [self.ours, self.theirs])
        estimator = TrickEstimator(board, self.ours, 'NS', head_to_head=True, other_traveller=self.theirs)
        self.assertEqual(estimator.made('S', 'NS', OTHER), 9)
        self.assertEqual(estimator.use_method('S', 'NS'), PLAY)

    def test_field_ignored(self):
        """The one other result is not treated as a field"""
        board = Board(1, [self.ours, self.heart_game], double_dummy=self.double_dummy)
        estimator = TrickEstimator(board, self.ours, 'NS', head_to_head=True, other_traveller=None)
        self.assertEqual(estimator.made('H', 'EW', MEDIAN), 10)
        self.assertEqual(estimator.use_method('H', 'EW'), DOUBLE_DUMMY)


class TestReliability(unittest.TestCase):

    def test_ranking(self):
        self.assertGreater(reliability(OVERRIDE), reliability(PLAY))
        self.assertEqual(reliability(PLAY), reliability(MODE))
        self.assertGreater(reliability(MEDIAN), reliability(DOUBLE_DUMMY))
        self.assertGreater(reliability(DOUBLE_DUMMY), reliability(BEST))
        self.assertEqual(reliability(None), 0)


if __name__ == '__main__':
    unittest.main(verbosity=2)
