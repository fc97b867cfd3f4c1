"""Convert pose snapshots into the 1D signal fed to the extrema detector.

A pose producer only has to expose landmarks (joint name plus 2D location),
the overall pose size and an origin offset. The counter picks the first
landmark belonging to the tracked joint set, moves it into pose-relative
coordinates and keeps one axis of it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Optional, Protocol, Sequence, Tuple

Point = Tuple[float, float]
Size = Tuple[float, float]


class Axis(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class Landmark:
    """A named joint and its 2D location."""

    joint: str
    location: Point


class PoseSource(Protocol):
    """Capabilities a pose snapshot must provide to be counted."""

    @property
    def landmarks(self) -> Sequence[Landmark]:
        ...

    @property
    def size(self) -> Size:
        ...

    @property
    def offset(self) -> Point:
        ...


@dataclass(frozen=True)
class PoseSnapshot:
    """Pose data for a single tick of the tracking pipeline."""

    landmarks: Tuple[Landmark, ...]
    size: Size
    offset: Point = field(default=(0.0, 0.0))


def _replace_near_zero(value: float, replacement: float, tolerance: float) -> float:
    return replacement if -tolerance <= value <= tolerance else value


def scaling_factor(size: Size, *, tolerance: float = 1e-3) -> float:
    """Return the factor that maps pose-relative coordinates to unit scale.

    The larger dimension is taken as reference. Degenerate sizes (within
    ``tolerance`` of zero) count as 1.0, and the reference never exceeds 1.0,
    so pixel-sized poses pass through unscaled.
    """
    larger = max(size[0], size[1])
    return 1.0 / min(_replace_near_zero(larger, 1.0, tolerance), 1.0)


def extract_axis_value(
    pose: PoseSource,
    joints: AbstractSet[str],
    axis: Axis,
    *,
    tolerance: float = 1e-3,
) -> Optional[float]:
    """Extract the tracked coordinate of ``pose`` or ``None`` if no joint matches."""
    location = next(
        (lm.location for lm in pose.landmarks if lm.joint in joints),
        None,
    )
    if location is None:
        return None

    x = location[0] - pose.offset[0]
    y = location[1] - pose.offset[1]
    value = x if axis is Axis.HORIZONTAL else y
    return value * scaling_factor(pose.size, tolerance=tolerance)
