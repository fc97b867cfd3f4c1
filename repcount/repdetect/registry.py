"""Keyed table of action descriptors.

A descriptor tells a counter which joints to follow, which axis carries the
motion and which sequence of extremum kinds makes up one repetition (for a
squat tracked on the vertical hip position, minimum then maximum).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Iterator, Mapping

from repcount.repdetect.extrema import ExtremumKind
from repcount.repdetect.pattern import SequencePattern
from repcount.signals.kinematics import Axis

logger = logging.getLogger(__name__)


class UnknownActionTypeError(LookupError):
    """Raised when no descriptor is registered for an action type."""

    def __init__(self, action_type: str) -> None:
        super().__init__(f"Unknown action type: {action_type!r}")
        self.action_type = action_type


@dataclass(frozen=True)
class ActionDescriptor:
    """Static description of one countable action."""

    joints: FrozenSet[str]
    pattern: SequencePattern[ExtremumKind]
    axis: Axis

    @classmethod
    def build(
        cls, joints: Iterable[str], pattern: Iterable[ExtremumKind], axis: Axis
    ) -> "ActionDescriptor":
        """Convenience constructor accepting plain iterables."""
        return cls(joints=frozenset(joints), pattern=SequencePattern(tuple(pattern)), axis=axis)


class DescriptorRegistry:
    """Owned registry of descriptors keyed by action type.

    Not synchronized; callers sharing one registry across threads must
    serialize access themselves.
    """

    def __init__(self, descriptors: Mapping[str, ActionDescriptor] | None = None) -> None:
        self._descriptors: Dict[str, ActionDescriptor] = dict(descriptors or {})

    def register(self, action_type: str, descriptor: ActionDescriptor) -> None:
        """Register ``descriptor``, replacing any previous one for ``action_type``."""
        self._descriptors[action_type] = descriptor
        logger.info("Registered descriptor for %r", action_type)

    def register_many(self, descriptors: Mapping[str, ActionDescriptor]) -> None:
        for action_type, descriptor in descriptors.items():
            self.register(action_type, descriptor)

    def unregister(self, action_type: str) -> bool:
        """Remove ``action_type``; return whether it was registered."""
        removed = self._descriptors.pop(action_type, None) is not None
        if removed:
            logger.info("Unregistered descriptor for %r", action_type)
        return removed

    def lookup(self, action_type: str) -> ActionDescriptor:
        try:
            return self._descriptors[action_type]
        except KeyError as exc:
            raise UnknownActionTypeError(action_type) from exc

    def __contains__(self, action_type: object) -> bool:
        return action_type in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)
