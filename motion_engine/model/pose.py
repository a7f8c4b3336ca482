"""
Pose model for the articulated figure.

A Pose is a fully-populated value type: every joint always has a value.
Partial poses (e.g. from JSON or older callers that only know arm/leg pitch)
are filled with neutral 0.0 angles once, in ``Pose.from_dict``.

All angles in DEGREES. Positions are in scene units, +y up, x/z the ground plane.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

# Fixed joint order used by to_array()/from_array() and by JointLimits.
JOINT_NAMES: tuple[str, ...] = (
    "left_arm.shoulder_pitch",
    "left_arm.shoulder_roll",
    "left_arm.elbow_flex",
    "right_arm.shoulder_pitch",
    "right_arm.shoulder_roll",
    "right_arm.elbow_flex",
    "left_leg.hip_pitch",
    "left_leg.hip_roll",
    "left_leg.knee_flex",
    "right_leg.hip_pitch",
    "right_leg.hip_roll",
    "right_leg.knee_flex",
    "torso.pitch",
    "torso.roll",
)
NUM_JOINTS = len(JOINT_NAMES)

ARM_JOINT_INDICES = tuple(i for i, n in enumerate(JOINT_NAMES) if n.split(".")[0].endswith("_arm"))
LEG_JOINT_INDICES = tuple(i for i, n in enumerate(JOINT_NAMES) if n.split(".")[0].endswith("_leg"))
TORSO_JOINT_INDICES = tuple(i for i, n in enumerate(JOINT_NAMES) if n.startswith("torso."))


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    @classmethod
    def from_array(cls, arr) -> Vector3:
        a = np.asarray(arr, dtype=np.float64)
        if a.shape != (3,):
            raise ValueError(f"Expected 3 components, got shape {a.shape}")
        return cls(float(a[0]), float(a[1]), float(a[2]))

    def with_y(self, y: float) -> Vector3:
        return Vector3(self.x, y, self.z)

    def planar_distance_to(self, other: Vector3) -> float:
        """Distance on the ground plane, ignoring the vertical offset."""
        return float(np.hypot(other.x - self.x, other.z - self.z))

    def to_list(self) -> list[float]:
        return [self.x, self.y, self.z]


@dataclass(frozen=True)
class ArmAngles:
    shoulder_pitch: float = 0.0  # -45 = backward, 180 = full forward
    shoulder_roll: float = 0.0  # abduction, arm away from body
    elbow_flex: float = 0.0  # 0 = straight, forward bend only


@dataclass(frozen=True)
class LegAngles:
    hip_pitch: float = 0.0  # -30 = extension, 110 = sitting
    hip_roll: float = 0.0  # abduction, leg away from body
    knee_flex: float = 0.0  # 0 = straight, forward bend only


@dataclass(frozen=True)
class TorsoAngles:
    pitch: float = 0.0  # forward/backward lean
    roll: float = 0.0  # left/right tilt


@dataclass(frozen=True)
class Pose:
    """Joint angles of the whole figure."""

    left_arm: ArmAngles = field(default_factory=ArmAngles)
    right_arm: ArmAngles = field(default_factory=ArmAngles)
    left_leg: LegAngles = field(default_factory=LegAngles)
    right_leg: LegAngles = field(default_factory=LegAngles)
    torso: TorsoAngles = field(default_factory=TorsoAngles)

    # ------------------------------------------------------------------
    # numpy conversion
    # ------------------------------------------------------------------

    def to_array(self) -> np.ndarray:
        """Flatten into a (NUM_JOINTS,) array in JOINT_NAMES order."""
        la, ra, ll, rl, t = self.left_arm, self.right_arm, self.left_leg, self.right_leg, self.torso
        return np.array(
            [
                la.shoulder_pitch, la.shoulder_roll, la.elbow_flex,
                ra.shoulder_pitch, ra.shoulder_roll, ra.elbow_flex,
                ll.hip_pitch, ll.hip_roll, ll.knee_flex,
                rl.hip_pitch, rl.hip_roll, rl.knee_flex,
                t.pitch, t.roll,
            ],
            dtype=np.float64,
        )

    @classmethod
    def from_array(cls, arr) -> Pose:
        a = np.asarray(arr, dtype=np.float64)
        if a.shape != (NUM_JOINTS,):
            raise ValueError(f"Expected {NUM_JOINTS} joint angles, got shape {a.shape}")
        v = [float(x) for x in a]
        return cls(
            left_arm=ArmAngles(v[0], v[1], v[2]),
            right_arm=ArmAngles(v[3], v[4], v[5]),
            left_leg=LegAngles(v[6], v[7], v[8]),
            right_leg=LegAngles(v[9], v[10], v[11]),
            torso=TorsoAngles(v[12], v[13]),
        )

    # ------------------------------------------------------------------
    # Named access
    # ------------------------------------------------------------------

    def get(self, joint: str) -> float:
        """Read a joint by its dotted name, e.g. ``"left_arm.elbow_flex"``."""
        group, axis = _split_joint(joint)
        return float(getattr(getattr(self, group), axis))

    def with_joint(self, joint: str, value: float) -> Pose:
        """Return a copy with one joint replaced."""
        _split_joint(joint)
        arr = self.to_array()
        arr[JOINT_NAMES.index(joint)] = value
        return Pose.from_array(arr)

    def with_torso(self, pitch: Optional[float] = None, roll: Optional[float] = None) -> Pose:
        return Pose(
            left_arm=self.left_arm,
            right_arm=self.right_arm,
            left_leg=self.left_leg,
            right_leg=self.right_leg,
            torso=TorsoAngles(
                self.torso.pitch if pitch is None else pitch,
                self.torso.roll if roll is None else roll,
            ),
        )

    # ------------------------------------------------------------------
    # dict conversion
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {
            "left_arm": vars(self.left_arm).copy(),
            "right_arm": vars(self.right_arm).copy(),
            "left_leg": vars(self.left_leg).copy(),
            "right_leg": vars(self.right_leg).copy(),
            "torso": vars(self.torso).copy(),
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Pose:
        """Build a Pose from a possibly partial nested dict.

        Missing groups and missing axes default to 0.0; unknown keys are ignored.
        """
        data = data or {}

        def _group(name: str, kind):
            raw = data.get(name) or {}
            known = {k: float(v) for k, v in raw.items() if k in kind.__dataclass_fields__}
            return kind(**known)

        return cls(
            left_arm=_group("left_arm", ArmAngles),
            right_arm=_group("right_arm", ArmAngles),
            left_leg=_group("left_leg", LegAngles),
            right_leg=_group("right_leg", LegAngles),
            torso=_group("torso", TorsoAngles),
        )


def neutral_pose() -> Pose:
    """All joints at 0 degrees: upright, arms hanging."""
    return Pose()


def _split_joint(joint: str) -> tuple[str, str]:
    if joint not in JOINT_NAMES:
        raise KeyError(f"Unknown joint '{joint}'")
    group, axis = joint.split(".")
    return group, axis
