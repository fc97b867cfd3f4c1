"""Shared configuration used across the counting pipeline."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DetectorConfig:
    """Tuning for :class:`repcount.repdetect.extrema.ExtremaDetector`.

    Attributes:
        window_size: Number of raw samples averaged into one smoothed sample.
            Nothing is smoothed until this many raw samples are available.
        peak_search_window_size: Number of trailing smoothed samples re-scanned
            for new extrema on every update. Needs at least one interior point.
    """

    window_size: int = 20
    peak_search_window_size: int = 6

    def __post_init__(self) -> None:
        if self.window_size < 1:
            raise ValueError("window_size must be at least 1")
        if self.peak_search_window_size < 3:
            raise ValueError("peak_search_window_size must be at least 3")


@dataclass(frozen=True)
class CounterConfig:
    """Tuning for :class:`repcount.repdetect.counter.RepetitionCounter`.

    Attributes:
        fault_tolerance: Longest gap (seconds) between two matching action
            signals that still counts as one continuous action window.
        significance_delta: Minimum value difference between consecutive
            accepted extrema; smaller swings are discarded as noise.
        coordinate_tolerance: Pose sizes within this distance of zero are
            treated as 1.0 when rescaling joint coordinates.
    """

    fault_tolerance: float = 0.5
    significance_delta: float = 0.03
    coordinate_tolerance: float = 1e-3

    def __post_init__(self) -> None:
        if self.fault_tolerance < 0:
            raise ValueError("fault_tolerance must be non-negative")
        if self.significance_delta < 0:
            raise ValueError("significance_delta must be non-negative")
        if self.coordinate_tolerance < 0:
            raise ValueError("coordinate_tolerance must be non-negative")
