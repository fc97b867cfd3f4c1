"""Repetition counting from confirmed extrema and action-classification signals.

Two independent streams feed a counter:

- pose snapshots, reduced to one coordinate and pushed through an
  :class:`~repcount.repdetect.extrema.ExtremaDetector`; confirmed extrema that
  differ enough from the previously accepted one are kept in order;
- "which action is happening" signals, which open, extend and close action
  windows on the counter's timeline.

After every accepted extremum the descriptor pattern is matched against the
accepted extremum kinds, and each match whose completing extremum falls inside
some action window counts as one repetition.

Listener callbacks run synchronously inside the triggering call. A listener
must not call back into the same counter from a callback; the resulting order
of updates is undefined. Instances are not thread-safe: feed one counter from
a single thread or serialize access externally.
"""

from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple

from repcount.config import CounterConfig, DetectorConfig
from repcount.repdetect.extrema import Extremum, ExtremaDetector
from repcount.repdetect.registry import (
    ActionDescriptor,
    DescriptorRegistry,
    UnknownActionTypeError,
)
from repcount.signals.kinematics import PoseSource, extract_axis_value
from repcount.signals.observation import DEFAULT_CLOCK, Clock

logger = logging.getLogger(__name__)

__all__ = [
    "ActionWindow",
    "CounterListener",
    "RepetitionCounter",
    "UnknownActionTypeError",
]


class CounterListener(Protocol):
    def repetitions_changed(self, counter: "RepetitionCounter", count: int) -> None:
        ...

    def action_began(self, counter: "RepetitionCounter", fault_tolerance: float) -> None:
        ...

    def action_ended(self, counter: "RepetitionCounter", fault_tolerance: float) -> None:
        ...


@dataclass(frozen=True)
class ActionWindow:
    """Closed interval ``[start, end]`` during which the action was in progress."""

    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    def contains(self, timestamp: float) -> bool:
        return self.start <= timestamp <= self.end


class RepetitionCounter:
    """Counts repetitions of one registered action type.

    Args:
        action_type: Key of the descriptor to count.
        registry: Registry the descriptor is looked up in.
        listener: Optional listener, held by weak reference.
        config: Timing and noise thresholds.
        detector_config: Smoothing and analysis window sizes.
        clock: Time source shared with the internal extrema detector.

    Raises:
        UnknownActionTypeError: if ``action_type`` is not registered.
    """

    def __init__(
        self,
        action_type: str,
        registry: DescriptorRegistry,
        listener: Optional[CounterListener] = None,
        *,
        config: CounterConfig = CounterConfig(),
        detector_config: DetectorConfig = DetectorConfig(),
        clock: Clock = DEFAULT_CLOCK,
    ) -> None:
        self.descriptor: ActionDescriptor = registry.lookup(action_type)
        self.action_type = action_type
        self.config = config
        self._clock = clock
        self._detector = ExtremaDetector(self, config=detector_config, clock=clock)

        self._extrema: List[Extremum] = []
        self._timeline: List[ActionWindow] = []
        self._last_signal_matched = False
        self._repetitions = 0

        self._listener_ref: Optional[weakref.ReferenceType] = None
        self.listener = listener

    @property
    def listener(self) -> Optional[CounterListener]:
        return self._listener_ref() if self._listener_ref is not None else None

    @listener.setter
    def listener(self, listener: Optional[CounterListener]) -> None:
        """Subscribe ``listener`` and immediately sync it with the current count."""
        self._listener_ref = weakref.ref(listener) if listener is not None else None
        if listener is not None:
            listener.repetitions_changed(self, self._repetitions)

    @property
    def repetitions(self) -> int:
        return self._repetitions

    @property
    def extrema(self) -> Tuple[Extremum, ...]:
        """Accepted extrema, oldest first."""
        return tuple(self._extrema)

    @property
    def action_windows(self) -> Tuple[ActionWindow, ...]:
        return tuple(self._timeline)

    @property
    def total_action_time(self) -> float:
        return sum(window.duration for window in self._timeline)

    @property
    def is_action_in_progress(self) -> bool:
        """Whether the most recent action signal matched this counter's type."""
        return self._last_signal_matched

    @property
    def detector(self) -> ExtremaDetector:
        return self._detector

    def register_pose(self, pose: Optional[PoseSource]) -> Optional[float]:
        """Feed one pose snapshot; return the extracted value, if any.

        Poses without a landmark for the tracked joints are skipped silently.
        """
        if pose is None:
            return None

        value = extract_axis_value(
            pose,
            self.descriptor.joints,
            self.descriptor.axis,
            tolerance=self.config.coordinate_tolerance,
        )
        if value is not None:
            self._detector.append(value)
        return value

    def append_value(self, value: float) -> None:
        """Feed an already extracted signal value."""
        self._detector.append(value)

    def register_action_detection(self, action_type: str) -> None:
        """Record that the classifier currently sees ``action_type``."""
        matched = action_type == self.action_type
        now = self._clock()
        tolerance = self.config.fault_tolerance

        if matched:
            last = self._timeline[-1] if self._timeline else None
            if last is not None and now - last.end <= tolerance:
                self._timeline[-1] = ActionWindow(last.start, now)
                logger.debug("Extended action window to [%.3f, %.3f]", last.start, now)
            else:
                self._timeline.append(ActionWindow(now, now))
                logger.info("Action %r began at %.3f", self.action_type, now)
                listener = self.listener
                if listener is not None:
                    listener.action_began(self, tolerance)
        elif self._last_signal_matched and self._timeline:
            last = self._timeline[-1]
            self._timeline[-1] = ActionWindow(last.start, now)
            logger.info("Action %r ended at %.3f", self.action_type, now)
            listener = self.listener
            if listener is not None:
                listener.action_ended(self, tolerance)

        self._last_signal_matched = matched

    def extremum_found(self, extremum: Extremum) -> None:
        """Accept ``extremum`` unless it is too close to the last accepted one."""
        if self._extrema:
            delta = abs(self._extrema[-1].sample.value - extremum.sample.value)
            if delta < self.config.significance_delta:
                logger.debug(
                    "Discarded %s at position %d: delta %.4f below %.4f",
                    extremum.kind.value,
                    extremum.position,
                    delta,
                    self.config.significance_delta,
                )
                return

        self._extrema.append(extremum)
        self._recalculate_repetitions()

    def reset(self) -> None:
        """Start a new session. The count drops to zero without a notification."""
        self._detector.reset()
        self._extrema.clear()
        self._timeline.clear()
        self._last_signal_matched = False
        self._repetitions = 0
        logger.info("Reset counter for %r", self.action_type)

    def _recalculate_repetitions(self) -> None:
        kinds = [extremum.kind for extremum in self._extrema]
        count = sum(
            1
            for index in self.descriptor.pattern.matches(kinds)
            if self._in_action_window(self._extrema[index].sample.timestamp)
        )
        if count == self._repetitions:
            return

        self._repetitions = count
        logger.info("Repetitions for %r: %d", self.action_type, count)
        listener = self.listener
        if listener is not None:
            listener.repetitions_changed(self, count)

    def _in_action_window(self, timestamp: float) -> bool:
        return any(window.contains(timestamp) for window in self._timeline)
