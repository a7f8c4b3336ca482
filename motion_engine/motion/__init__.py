"""Interpolation, easing curves, the motion library and keyframe sequences."""

from motion_engine.motion.easing import EASINGS, get_easing
from motion_engine.motion.interpolation import blend_joints, lerp, lerp_pose, lerp_vec3
from motion_engine.motion.keyframes import Keyframe, MotionSequence, wave_sequence
from motion_engine.motion.library import MOTIONS, get_motion, walk_cycle

__all__ = [
    "EASINGS",
    "get_easing",
    "blend_joints",
    "lerp",
    "lerp_pose",
    "lerp_vec3",
    "Keyframe",
    "MotionSequence",
    "wave_sequence",
    "MOTIONS",
    "get_motion",
    "walk_cycle",
]
