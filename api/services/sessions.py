"""
In-memory counting sessions backing the HTTP API.

Current strategy:
- One RepetitionCounter per session, keyed by a random hex id.
- Sessions and descriptors live in process memory only; a restart drops them.
- Route handlers are coroutines, so all counter access happens on the event loop thread.
"""

from __future__ import annotations

import logging
import os
import uuid
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Optional

from fastapi import HTTPException

from api.schemas import ActionWindowModel, EventKind, SessionEvent, SessionStatus
from repcount.config import CounterConfig, DetectorConfig
from repcount.repdetect.counter import RepetitionCounter
from repcount.repdetect.registry import DescriptorRegistry, UnknownActionTypeError
from repcount.signals.observation import DEFAULT_CLOCK, Clock

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = int(os.getenv("REPCOUNT_MAX_SESSIONS", "64"))
DEFAULT_MAX_EVENTS = int(os.getenv("REPCOUNT_MAX_EVENTS", "256"))


class EventRecorder:
    """
    Counter listener that keeps the most recent `max_events` notifications; older ones are dropped.
    """

    def __init__(self, clock: Clock, max_events: int = DEFAULT_MAX_EVENTS) -> None:
        self._clock = clock
        self.events: Deque[SessionEvent] = deque(maxlen=max_events)

    def repetitions_changed(self, counter: RepetitionCounter, count: int) -> None:
        self.events.append(SessionEvent(kind=EventKind.REPETITIONS, timestamp=self._clock(), repetitions=count))

    def action_began(self, counter: RepetitionCounter, fault_tolerance: float) -> None:
        self.events.append(
            SessionEvent(kind=EventKind.ACTION_BEGAN, timestamp=self._clock(), fault_tolerance=fault_tolerance)
        )

    def action_ended(self, counter: RepetitionCounter, fault_tolerance: float) -> None:
        self.events.append(
            SessionEvent(kind=EventKind.ACTION_ENDED, timestamp=self._clock(), fault_tolerance=fault_tolerance)
        )


@dataclass
class Session:
    session_id: str
    counter: RepetitionCounter
    # Strong reference: the counter only holds its listener weakly.
    recorder: EventRecorder = field(repr=False)

    def status(self) -> SessionStatus:
        return SessionStatus(
            session_id=self.session_id,
            action_type=self.counter.action_type,
            repetitions=self.counter.repetitions,
            action_in_progress=self.counter.is_action_in_progress,
            total_action_time=self.counter.total_action_time,
            windows=[ActionWindowModel(start=w.start, end=w.end) for w in self.counter.action_windows],
            events=list(self.recorder.events),
        )


class SessionStore:
    """
    Owns the descriptor registry and the live counting sessions.
    """

    def __init__(
        self,
        registry: Optional[DescriptorRegistry] = None,
        *,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        max_events: int = DEFAULT_MAX_EVENTS,
        clock: Clock = DEFAULT_CLOCK,
        config: CounterConfig = CounterConfig(),
        detector_config: DetectorConfig = DetectorConfig(),
    ) -> None:
        self.registry = registry if registry is not None else DescriptorRegistry()
        self.max_sessions = max_sessions
        self.max_events = max_events
        self.clock = clock
        self.config = config
        self.detector_config = detector_config
        self._sessions: Dict[str, Session] = {}

    def create(self, action_type: str) -> Session:
        if len(self._sessions) >= self.max_sessions:
            raise HTTPException(status_code=409, detail=f"Session limit of {self.max_sessions} reached")

        recorder = EventRecorder(self.clock, self.max_events)
        try:
            counter = RepetitionCounter(
                action_type,
                self.registry,
                recorder,
                config=self.config,
                detector_config=self.detector_config,
                clock=self.clock,
            )
        except UnknownActionTypeError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

        session = Session(session_id=uuid.uuid4().hex, counter=counter, recorder=recorder)
        self._sessions[session.session_id] = session
        logger.info("Created session %s for %r", session.session_id, action_type)
        return session

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}") from exc

    def close(self, session_id: str) -> None:
        self.get(session_id)
        del self._sessions[session_id]
        logger.info("Closed session %s", session_id)

    def __len__(self) -> int:
        return len(self._sessions)
