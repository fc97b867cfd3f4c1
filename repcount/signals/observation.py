"""Timestamped scalar samples flowing through the counting pipeline."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

Clock = Callable[[], float]
"""Zero-argument callable returning the current time in seconds."""

DEFAULT_CLOCK: Clock = time.monotonic


@dataclass(frozen=True)
class Sample:
    """A single signal value observed at ``timestamp`` (seconds)."""

    timestamp: float
    value: float

    @staticmethod
    def mean(*samples: "Sample") -> "Sample":
        """Average timestamps and values of ``samples`` into one sample.

        Utility for callers post-processing extrema or windows; the detector
        itself averages through :func:`repcount.repdetect.extrema.moving_average`.
        """
        if not samples:
            raise ValueError("mean requires at least one sample")
        count = float(len(samples))
        return Sample(
            timestamp=sum(s.timestamp for s in samples) / count,
            value=sum(s.value for s in samples) / count,
        )
