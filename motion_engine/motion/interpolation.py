"""Linear interpolation for scalars, vectors and whole poses."""

from __future__ import annotations

import numpy as np

from motion_engine.model.pose import Pose, Vector3


def lerp(a: float, b: float, t: float) -> float:
    # (1 - t) * a + t * b is exact at both ends, unlike a + (b - a) * t
    return (1.0 - t) * a + t * b


def lerp_array(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    return (1.0 - t) * np.asarray(a, dtype=np.float64) + t * np.asarray(b, dtype=np.float64)


def lerp_vec3(a: Vector3, b: Vector3, t: float) -> Vector3:
    return Vector3(lerp(a.x, b.x, t), lerp(a.y, b.y, t), lerp(a.z, b.z, t))


def lerp_pose(a: Pose, b: Pose, t: float) -> Pose:
    """Blend every joint of *a* toward *b*. No constraint is applied here."""
    if t == 0.0:
        return a
    if t == 1.0:
        return b
    return Pose.from_array(lerp_array(a.to_array(), b.to_array(), t))


def blend_joints(a: Pose, b: Pose, weights: np.ndarray) -> Pose:
    """Per-joint blend: joint i moves ``weights[i]`` of the way from a to b."""
    w = np.asarray(weights, dtype=np.float64)
    return Pose.from_array((1.0 - w) * a.to_array() + w * b.to_array())
