import math
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from repcount.repdetect.extrema import ExtremumKind
from repcount.repdetect.registry import ActionDescriptor
from repcount.signals.kinematics import Axis, Landmark, PoseSnapshot


class DescriptorPayload(BaseModel):
    """
    Descriptor registration payload. The pattern lists extremum kinds in the order one repetition produces them.
    """
    joints: List[str] = Field(..., min_length=1, description="Joint names; the first one present in a pose is tracked.")
    pattern: List[ExtremumKind] = Field(..., min_length=1, description="Extremum kinds making up one repetition.")
    axis: Axis = Field(Axis.VERTICAL, description="Coordinate axis carrying the motion.")

    @field_validator("joints")
    @classmethod
    def joints_not_blank(cls, v: List[str]) -> List[str]:
        if any(not joint.strip() for joint in v):
            raise ValueError("joint names must not be blank")
        return v

    def to_descriptor(self) -> ActionDescriptor:
        return ActionDescriptor.build(self.joints, self.pattern, self.axis)


class DescriptorListResponse(BaseModel):
    action_types: List[str]


class RemovalResponse(BaseModel):
    removed: bool


class SessionCreateRequest(BaseModel):
    action_type: str = Field(..., min_length=1, description="Registered action type to count.")


class LandmarkPayload(BaseModel):
    joint: str
    x: float
    y: float

    @field_validator("x", "y")
    @classmethod
    def finite(cls, v: float) -> float:
        if math.isnan(v) or math.isinf(v):
            raise ValueError("landmark coordinates must be finite")
        return v


class PosePayload(BaseModel):
    landmarks: List[LandmarkPayload] = Field(default_factory=list)
    width: float = Field(..., description="Pose bounding width.")
    height: float = Field(..., description="Pose bounding height.")
    offset_x: float = 0.0
    offset_y: float = 0.0

    @field_validator("width", "height", "offset_x", "offset_y")
    @classmethod
    def finite(cls, v: float) -> float:
        if math.isnan(v) or math.isinf(v):
            raise ValueError("pose geometry must be finite")
        return v

    @field_validator("width", "height")
    @classmethod
    def non_negative(cls, v: float) -> float:
        # Zero is allowed: degenerate sizes are rescaled as 1.0.
        if v < 0:
            raise ValueError("pose size must be non-negative")
        return v

    def to_snapshot(self) -> PoseSnapshot:
        return PoseSnapshot(
            landmarks=tuple(Landmark(joint=lm.joint, location=(lm.x, lm.y)) for lm in self.landmarks),
            size=(self.width, self.height),
            offset=(self.offset_x, self.offset_y),
        )


class ActionSignalPayload(BaseModel):
    action_type: str = Field(..., description="Action type reported by the classifier for this tick.")


class EventKind(str, Enum):
    REPETITIONS = "repetitions"
    ACTION_BEGAN = "action_began"
    ACTION_ENDED = "action_ended"


class SessionEvent(BaseModel):
    kind: EventKind
    timestamp: float
    repetitions: Optional[int] = None
    fault_tolerance: Optional[float] = None


class ActionWindowModel(BaseModel):
    start: float
    end: float


class SessionStatus(BaseModel):
    session_id: str
    action_type: str
    repetitions: int
    action_in_progress: bool
    total_action_time: float
    windows: List[ActionWindowModel] = Field(default_factory=list)
    events: List[SessionEvent] = Field(default_factory=list)


class PoseResponse(BaseModel):
    value: Optional[float] = Field(None, description="Extracted signal value; null when no tracked joint was found.")
    repetitions: int
