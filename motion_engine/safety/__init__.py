"""
Safety module for the motion engine.

Provides anatomical joint limits and the pose constraint applied on every
committed pose.
"""

from motion_engine.safety.limits import (
    DEFAULT_LIMITS,
    JOINT_LIMITS_DEG,
    JointLimits,
    constrain_pose,
    is_within_limits,
)

__all__ = [
    "DEFAULT_LIMITS",
    "JOINT_LIMITS_DEG",
    "JointLimits",
    "constrain_pose",
    "is_within_limits",
]
