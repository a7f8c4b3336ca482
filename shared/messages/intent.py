"""Pydantic models for resolved intents consumed by the motion engine."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class IntentType(str, Enum):
    """Kinds of resolved commands."""
    POSE = "pose"
    DELTA = "delta"
    WAVE = "wave"
    RESET = "reset"
    PICK = "pick"
    DROP = "drop"
    MOVE = "move"
    NOOP = "noop"
    UNKNOWN = "unknown"


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class JointKind(str, Enum):
    SHOULDER = "shoulder"
    ELBOW = "elbow"
    HIP = "hip"
    KNEE = "knee"


class Axis(str, Enum):
    PITCH = "pitch"
    ROLL = "roll"
    FLEX = "flex"


class Intent(BaseModel):
    """A structured command, produced by a rule-based or external parser."""

    type: IntentType = Field(description="Command kind")
    side: Optional[Side] = Field(default=None, description="Body side for pose/delta/wave")
    joint: Optional[JointKind] = Field(default=None, description="Joint for pose/delta")
    axis: Optional[Axis] = Field(default=None, description="Joint axis for pose/delta")
    angle: Optional[float] = Field(default=None, description="Absolute angle in degrees (pose)")
    delta: Optional[float] = Field(default=None, description="Relative angle in degrees (delta)")
    object_id: Optional[str] = Field(default=None, description="Exact target object id (pick)")
    object_name: Optional[str] = Field(
        default=None,
        description="Free-text target description, e.g. 'red box' or 'green' (pick)",
    )
    target_position: Optional[list[float]] = Field(
        default=None, description="[x, y, z] target position (move)"
    )
    text: str = Field(default="", description="Original command text")

    class Config:
        json_schema_extra = {
            "example": {
                "type": "pick",
                "object_name": "red box",
                "text": "pick up the red box",
            }
        }

    @property
    def joint_name(self) -> Optional[str]:
        """Dotted Pose joint name (e.g. ``left_arm.shoulder_pitch``), if fully specified."""
        if self.side is None or self.joint is None:
            return None
        limb = "arm" if self.joint in (JointKind.SHOULDER, JointKind.ELBOW) else "leg"
        axis = self.axis
        if axis is None:
            axis = Axis.FLEX if self.joint in (JointKind.ELBOW, JointKind.KNEE) else Axis.PITCH
        if self.joint in (JointKind.ELBOW, JointKind.KNEE) and axis != Axis.FLEX:
            return None
        if self.joint in (JointKind.SHOULDER, JointKind.HIP) and axis == Axis.FLEX:
            return None
        return f"{self.side.value}_{limb}.{self.joint.value}_{axis.value}"
