import gc
import unittest

from repcount.config import DetectorConfig
from repcount.repdetect.extrema import (
    Extremum,
    ExtremaDetector,
    ExtremumKind,
    find_local,
    moving_average,
)
from repcount.signals.observation import Sample

MIN = ExtremumKind.MINIMUM
MAX = ExtremumKind.MAXIMUM

# Smoothing disabled so the smoothed history mirrors the raw values exactly.
UNSMOOTHED = DetectorConfig(window_size=1, peak_search_window_size=6)


class SteppingClock:
    def __init__(self, start: float = 0.0, step: float = 0.1) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> float:
        current = self.now
        self.now += self.step
        return current


class RecordingListener:
    def __init__(self) -> None:
        self.extrema = []

    def extremum_found(self, extremum: Extremum) -> None:
        self.extrema.append(extremum)

    def summary(self):
        return [(e.kind, e.position, e.sample.value) for e in self.extrema]


def triangle(n: int) -> int:
    return abs((n % 40) - 20)


class HelperTests(unittest.TestCase):
    def test_find_local_uses_strict_left_and_loose_right_comparison(self) -> None:
        samples = [Sample(float(i), v) for i, v in enumerate([0, 2, 2, 1, 1, 3])]
        self.assertEqual(find_local(MAX, samples), [1])
        self.assertEqual(find_local(MIN, samples), [3])

    def test_find_local_ignores_window_edges(self) -> None:
        samples = [Sample(float(i), v) for i, v in enumerate([5, 1, 5])]
        self.assertEqual(find_local(MAX, samples), [])
        self.assertEqual(find_local(MIN, samples), [1])
        self.assertEqual(find_local(MIN, samples[:2]), [])

    def test_moving_average_stamps_midpoint(self) -> None:
        smoothed = moving_average([Sample(1.0, 2.0), Sample(2.0, 4.0), Sample(4.0, 9.0)])
        self.assertAlmostEqual(smoothed.timestamp, 2.5)
        self.assertAlmostEqual(smoothed.value, 5.0)


class ExtremaDetectorTests(unittest.TestCase):
    def test_nothing_happens_before_window_fills(self) -> None:
        listener = RecordingListener()
        detector = ExtremaDetector(listener, clock=SteppingClock())

        for i in range(19):
            detector.append(float(i % 2))

        self.assertEqual(listener.extrema, [])
        self.assertEqual(detector.smoothed_samples, ())

        detector.append(0.0)
        self.assertEqual(len(detector.smoothed_samples), 1)
        self.assertEqual(listener.extrema, [])

    def test_one_smoothed_sample_per_append_once_warm(self) -> None:
        detector = ExtremaDetector(
            config=DetectorConfig(window_size=2, peak_search_window_size=3),
            clock=SteppingClock(step=1.0),
        )
        for value in (1.0, 3.0, 5.0):
            detector.append(value)

        self.assertEqual(
            detector.smoothed_samples,
            (Sample(timestamp=0.5, value=2.0), Sample(timestamp=1.5, value=4.0)),
        )

    def test_single_peak_is_reported_once(self) -> None:
        listener = RecordingListener()
        detector = ExtremaDetector(listener, config=UNSMOOTHED, clock=SteppingClock())

        values = [0, 1, 2, 3, 2, 1] + [-i for i in range(40)]
        for count, value in enumerate(values, start=1):
            detector.append(value)
            if count == 5:
                self.assertEqual(listener.extrema, [])

        self.assertEqual(listener.summary(), [(MAX, 3, 3.0)])
        self.assertAlmostEqual(listener.extrema[0].sample.timestamp, 0.3)

    def test_minimum_is_notified_before_maximum(self) -> None:
        listener = RecordingListener()
        detector = ExtremaDetector(listener, config=UNSMOOTHED, clock=SteppingClock())

        for value in [0, 2, 1, 3, 3, 3]:
            detector.append(value)

        self.assertEqual(listener.summary(), [(MIN, 2, 1.0), (MAX, 1, 2.0)])

    def test_smoothed_triangle_wave_alternates_extrema(self) -> None:
        listener = RecordingListener()
        detector = ExtremaDetector(listener, clock=SteppingClock())

        for n in range(200):
            detector.append(triangle(n))

        self.assertEqual(len(detector.smoothed_samples), 181)
        expected = [
            (MIN if i % 2 == 0 else MAX, 10 + 20 * i, 5.0 if i % 2 == 0 else 15.0)
            for i in range(9)
        ]
        self.assertEqual(listener.summary(), expected)
        # Raw samples 10..29 averaged: stamped halfway between t=1.0 and t=2.9.
        self.assertAlmostEqual(listener.extrema[0].sample.timestamp, 1.95)

    def test_reset_replays_identically(self) -> None:
        listener = RecordingListener()
        detector = ExtremaDetector(listener, clock=SteppingClock())

        for n in range(120):
            detector.append(triangle(n))
        first_run = listener.summary()
        self.assertTrue(first_run)

        detector.reset()
        self.assertEqual(detector.smoothed_samples, ())
        listener.extrema.clear()

        for n in range(120):
            detector.append(triangle(n))
        self.assertEqual(listener.summary(), first_run)

    def test_reset_is_idempotent_and_silent(self) -> None:
        listener = RecordingListener()
        detector = ExtremaDetector(listener, config=UNSMOOTHED, clock=SteppingClock())
        for value in [0, 1, 2, 3, 2]:
            detector.append(value)

        detector.reset()
        detector.reset()

        self.assertEqual(listener.extrema, [])
        self.assertEqual(detector.smoothed_samples, ())

    def test_listener_is_not_kept_alive(self) -> None:
        listener = RecordingListener()
        detector = ExtremaDetector(listener, config=UNSMOOTHED, clock=SteppingClock())
        self.assertIs(detector.listener, listener)

        del listener
        gc.collect()

        self.assertIsNone(detector.listener)
        for value in [0, 1, 2, 3, 2, 1]:
            detector.append(value)

    def test_invalid_window_configuration_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            DetectorConfig(window_size=0)
        with self.assertRaises(ValueError):
            DetectorConfig(peak_search_window_size=2)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
