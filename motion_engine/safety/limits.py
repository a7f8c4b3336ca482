"""
Anatomical joint limits for the articulated figure.

Limits approximate a human range of motion.  Elbows and knees are
single-direction hinges: only forward flexion (>= 0) is allowed.

All values are in DEGREES.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from motion_engine.model.pose import JOINT_NAMES, NUM_JOINTS, Pose

logger = logging.getLogger(__name__)

# [min, max] per joint axis, degrees
JOINT_LIMITS_DEG: dict[str, tuple[float, float]] = {
    "shoulder_pitch": (-45.0, 180.0),  # -45 = backward, 180 = full forward
    "shoulder_roll": (-20.0, 120.0),
    "elbow_flex": (0.0, 140.0),  # 0 = straight, 140 = fully bent
    "hip_pitch": (-30.0, 110.0),  # -30 = extension, 110 = sitting
    "hip_roll": (-20.0, 45.0),
    "knee_flex": (0.0, 140.0),
    "pitch": (-30.0, 90.0),  # torso lean
    "roll": (-30.0, 30.0),  # torso tilt
}

# Hinge joints that only bend one way; magnitude is taken before clamping
HINGE_AXES = ("elbow_flex", "knee_flex")


def _axis(joint: str) -> str:
    return joint.split(".")[1]


HINGE_MASK = np.array([_axis(n) in HINGE_AXES for n in JOINT_NAMES], dtype=bool)


@dataclass
class JointLimits:
    """Per-joint position limits aligned with JOINT_NAMES."""

    position_min: np.ndarray = field(
        default_factory=lambda: np.array(
            [JOINT_LIMITS_DEG[_axis(n)][0] for n in JOINT_NAMES], dtype=np.float64
        )
    )
    position_max: np.ndarray = field(
        default_factory=lambda: np.array(
            [JOINT_LIMITS_DEG[_axis(n)][1] for n in JOINT_NAMES], dtype=np.float64
        )
    )

    def __post_init__(self):
        self.position_min = np.asarray(self.position_min, dtype=np.float64)
        self.position_max = np.asarray(self.position_max, dtype=np.float64)
        if self.position_min.shape != (NUM_JOINTS,) or self.position_max.shape != (NUM_JOINTS,):
            raise ValueError(f"Limits must have {NUM_JOINTS} entries")
        if np.any(self.position_min > self.position_max):
            raise ValueError("Every joint min must be <= max")

    def range_of(self, joint: str) -> tuple[float, float]:
        i = JOINT_NAMES.index(joint)
        return float(self.position_min[i]), float(self.position_max[i])

    def clamp_array(self, angles: np.ndarray) -> np.ndarray:
        """Fold hinge joints to their magnitude, then clip every joint into range."""
        a = np.array(angles, dtype=np.float64)
        a[HINGE_MASK] = np.abs(a[HINGE_MASK])
        return np.clip(a, self.position_min, self.position_max)

    def check_pose(self, pose: Pose) -> Optional[str]:
        """Return a message describing out-of-range joints, else None."""
        arr = pose.to_array()
        violations = []
        for i, name in enumerate(JOINT_NAMES):
            if arr[i] < self.position_min[i]:
                violations.append(f"{name}: {arr[i]:.2f} < min {self.position_min[i]:.2f}")
            elif arr[i] > self.position_max[i]:
                violations.append(f"{name}: {arr[i]:.2f} > max {self.position_max[i]:.2f}")
        if violations:
            return "Joint limit violations: " + "; ".join(violations)
        return None


DEFAULT_LIMITS = JointLimits()


def constrain_pose(pose: Pose, limits: Optional[JointLimits] = None) -> Pose:
    """Clamp *pose* into the valid envelope.

    Pure and total: out-of-range input degrades to the nearest valid value.
    Must be applied to every pose committed to actor state, since blends of
    two valid poses can still leave the envelope transiently.
    """
    limits = limits or DEFAULT_LIMITS
    raw = pose.to_array()
    clamped = limits.clamp_array(raw)
    if not np.array_equal(clamped, raw):
        logger.debug("Clamped pose to joint limits")
        return Pose.from_array(clamped)
    return pose


def is_within_limits(pose: Pose, limits: Optional[JointLimits] = None) -> bool:
    return (limits or DEFAULT_LIMITS).check_pose(pose) is None
