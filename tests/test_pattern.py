import unittest

from repcount.repdetect.extrema import ExtremumKind
from repcount.repdetect.pattern import SequencePattern

MIN = ExtremumKind.MINIMUM
MAX = ExtremumKind.MAXIMUM


class SequencePatternTests(unittest.TestCase):
    def test_returns_end_index_of_each_occurrence(self) -> None:
        pattern = SequencePattern([MIN, MAX])
        self.assertEqual(pattern.matches([MIN, MAX, MIN, MAX, MIN]), [1, 3])

    def test_pattern_longer_than_candidates_yields_nothing(self) -> None:
        pattern = SequencePattern([MIN, MAX, MIN])
        self.assertEqual(pattern.matches([MIN, MAX]), [])
        self.assertEqual(pattern.matches([]), [])

    def test_overlapping_occurrences_are_all_reported(self) -> None:
        pattern = SequencePattern([MIN, MAX, MIN])
        self.assertEqual(pattern.matches([MIN, MAX, MIN, MAX, MIN]), [2, 4])

        runs = SequencePattern("aa")
        self.assertEqual(runs.matches("aaaa"), [1, 2, 3])

    def test_no_match_returns_empty_list(self) -> None:
        pattern = SequencePattern([MAX, MAX])
        self.assertEqual(pattern.matches([MIN, MAX, MIN, MAX]), [])

    def test_repeated_calls_on_growing_sequence_are_consistent(self) -> None:
        pattern = SequencePattern([MIN, MAX])
        sequence = []
        results = []
        for kind in [MIN, MAX, MAX, MIN, MAX]:
            sequence.append(kind)
            results.append(pattern.matches(sequence))
        self.assertEqual(results, [[], [1], [1], [1], [1, 4]])

    def test_empty_pattern_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            SequencePattern([])

    def test_len_and_equality(self) -> None:
        self.assertEqual(len(SequencePattern([MIN, MAX, MIN])), 3)
        self.assertEqual(SequencePattern([MIN, MAX]), SequencePattern((MIN, MAX)))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
