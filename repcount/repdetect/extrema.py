"""Streaming detection of local extrema in a smoothed 1D signal.

Raw values are pushed one at a time. Once ``window_size`` raw samples exist,
every push produces one smoothed sample (trailing moving average stamped at the
midpoint of the averaged span). The last ``peak_search_window_size`` smoothed
samples are then re-scanned for interior extrema, and any extremum whose
absolute position has not been reported yet is delivered to the listener.
"""

from __future__ import annotations

import logging
import weakref
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional, Protocol, Sequence, Set, Tuple

import numpy as np

from repcount.config import DetectorConfig
from repcount.signals.observation import DEFAULT_CLOCK, Clock, Sample

logger = logging.getLogger(__name__)


class ExtremumKind(str, Enum):
    MINIMUM = "minimum"
    MAXIMUM = "maximum"

    @property
    def sign(self) -> float:
        """+1 for maxima, -1 for minima; flips the comparison in the scan."""
        return 1.0 if self is ExtremumKind.MAXIMUM else -1.0


@dataclass(frozen=True)
class Extremum:
    """A confirmed local extremum.

    Attributes:
        position: Index into the detector's smoothed-sample history.
        sample: The smoothed sample at ``position``.
        kind: Whether the point is a minimum or a maximum.
    """

    position: int
    sample: Sample
    kind: ExtremumKind


class ExtremumListener(Protocol):
    def extremum_found(self, extremum: Extremum) -> None:
        ...


def find_local(kind: ExtremumKind, samples: Sequence[Sample]) -> List[int]:
    """Return interior indices of ``samples`` that are local extrema of ``kind``.

    A point qualifies when it strictly beats its left neighbour and at least
    ties its right neighbour, with the comparison direction set by ``kind``.
    """
    k = kind.sign
    found: List[int] = []
    for i in range(1, len(samples) - 1):
        current = k * samples[i].value
        if current > k * samples[i - 1].value and current >= k * samples[i + 1].value:
            found.append(i)
    return found


def moving_average(samples: Sequence[Sample]) -> Sample:
    """Average ``samples`` into one sample stamped between the first and last."""
    values = np.fromiter((s.value for s in samples), dtype=float, count=len(samples))
    return Sample(
        timestamp=(samples[0].timestamp + samples[-1].timestamp) / 2.0,
        value=float(np.mean(values)),
    )


class ExtremaDetector:
    """Incremental extrema detector over a moving-average-smoothed stream.

    Notifications are delivered synchronously from inside :meth:`append`, at
    most one per kind per call and always minimum before maximum. The listener
    is held by weak reference.
    """

    def __init__(
        self,
        listener: Optional[ExtremumListener] = None,
        *,
        config: DetectorConfig = DetectorConfig(),
        clock: Clock = DEFAULT_CLOCK,
    ) -> None:
        self.config = config
        self._clock = clock
        self._raw: Deque[Sample] = deque(maxlen=config.window_size)
        self._smoothed: List[Sample] = []
        self._reported: Set[int] = set()
        self._listener_ref: Optional[weakref.ReferenceType] = None
        self.listener = listener

    @property
    def listener(self) -> Optional[ExtremumListener]:
        return self._listener_ref() if self._listener_ref is not None else None

    @listener.setter
    def listener(self, listener: Optional[ExtremumListener]) -> None:
        self._listener_ref = weakref.ref(listener) if listener is not None else None

    @property
    def smoothed_samples(self) -> Tuple[Sample, ...]:
        return tuple(self._smoothed)

    def append(self, value: float) -> None:
        """Push one raw value stamped with the current clock reading."""
        self._raw.append(Sample(timestamp=self._clock(), value=float(value)))
        if len(self._raw) < self.config.window_size:
            return

        self._smoothed.append(moving_average(self._raw))
        for kind in ExtremumKind:
            extremum = self._confirm(kind)
            if extremum is None:
                continue
            logger.debug(
                "Confirmed %s at position %d (value=%.4f, t=%.3f)",
                kind.value,
                extremum.position,
                extremum.sample.value,
                extremum.sample.timestamp,
            )
            listener = self.listener
            if listener is not None:
                listener.extremum_found(extremum)

    def reset(self) -> None:
        """Drop all history. Lost points are never reported."""
        self._raw.clear()
        self._smoothed.clear()
        self._reported.clear()

    def _confirm(self, kind: ExtremumKind) -> Optional[Extremum]:
        span = self.config.peak_search_window_size
        if len(self._smoothed) < span:
            return None

        offset = len(self._smoothed) - span
        candidates = find_local(kind, self._smoothed[offset:])
        if not candidates:
            return None

        position = candidates[0] + offset
        if position in self._reported:
            return None
        self._reported.add(position)
        return Extremum(position=position, sample=self._smoothed[position], kind=kind)
