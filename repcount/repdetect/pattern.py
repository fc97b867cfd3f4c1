"""Exact, contiguous sub-sequence search over token sequences."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, List, Sequence, Tuple, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SequencePattern(Generic[T]):
    """Ordered run of tokens to look for inside a longer sequence.

    Tokens are compared with ``==``; there are no wildcards. The pattern is
    stateless, so the same instance can be matched against a growing sequence
    as often as needed.
    """

    tokens: Tuple[T, ...]

    def __init__(self, tokens: Sequence[T]) -> None:
        tokens = tuple(tokens)
        if not tokens:
            raise ValueError("pattern must contain at least one token")
        object.__setattr__(self, "tokens", tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def matches(self, candidates: Sequence[T]) -> List[int]:
        """Return end indices of every occurrence of the pattern in ``candidates``.

        Indices are 0-based, point at the last token of each occurrence and are
        returned in ascending order. Overlapping occurrences are all reported.
        """
        length = len(self.tokens)
        if length > len(candidates):
            return []

        ends: List[int] = []
        for start in range(len(candidates) - length + 1):
            if tuple(candidates[start:start + length]) == self.tokens:
                ends.append(start + length - 1)
        return ends
