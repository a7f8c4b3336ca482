"""
Motion library: named pose generators.

Static poses approximate a forward-leaning, counterbalanced human squat
and reach.  ``walk_cycle`` is a continuous function of phase with period 1.

All angles in DEGREES.
"""

from __future__ import annotations

import math
from typing import Callable

from motion_engine.model.pose import ArmAngles, LegAngles, Pose, TorsoAngles

# Walk cycle amplitudes
LEG_SWING_DEG = 35.0
KNEE_LIFT_DEG = 45.0
ARM_SWING_RATIO = 0.4
WALK_ELBOW_DEG = 15.0
TORSO_PITCH_SWAY_DEG = 2.0
TORSO_ROLL_SWAY_DEG = 3.0

# Torso lean in the full squat; lift straightens from here
SQUAT_TORSO_PITCH = 55.0

# Held objects heavier than this make the figure lean back further
HEAVY_WEIGHT_THRESHOLD = 0.5
HOLDING_TORSO_PITCH = -3.0
HOLDING_TORSO_PITCH_HEAVY = -8.0


def idle() -> Pose:
    return Pose()


def stand() -> Pose:
    """Upright with relaxed elbows."""
    return Pose(
        left_arm=ArmAngles(shoulder_pitch=0.0, elbow_flex=5.0),
        right_arm=ArmAngles(shoulder_pitch=0.0, elbow_flex=5.0),
    )


def walk_cycle(phase: float) -> Pose:
    """One full stride; the left leg leads at phase 0.25."""
    phase = phase % 1.0
    swing = math.sin(phase * 2.0 * math.pi)
    opposite = math.sin((phase + 0.5) * 2.0 * math.pi)

    left_hip = swing * LEG_SWING_DEG
    right_hip = opposite * LEG_SWING_DEG

    return Pose(
        # Arms swing opposite to the same-side leg
        left_arm=ArmAngles(shoulder_pitch=-left_hip * ARM_SWING_RATIO, elbow_flex=WALK_ELBOW_DEG),
        right_arm=ArmAngles(shoulder_pitch=left_hip * ARM_SWING_RATIO, elbow_flex=WALK_ELBOW_DEG),
        left_leg=LegAngles(hip_pitch=left_hip, knee_flex=max(0.0, swing) * KNEE_LIFT_DEG),
        right_leg=LegAngles(hip_pitch=right_hip, knee_flex=max(0.0, opposite) * KNEE_LIFT_DEG),
        torso=TorsoAngles(
            pitch=-swing * TORSO_PITCH_SWAY_DEG,
            roll=-swing * TORSO_ROLL_SWAY_DEG,
        ),
    )


def squat_prep() -> Pose:
    """Weight shift before the squat: hips back, torso forward, arms out."""
    return Pose(
        left_arm=ArmAngles(shoulder_pitch=25.0, elbow_flex=10.0),
        right_arm=ArmAngles(shoulder_pitch=25.0, elbow_flex=10.0),
        left_leg=LegAngles(hip_pitch=30.0, knee_flex=45.0),
        right_leg=LegAngles(hip_pitch=30.0, knee_flex=45.0),
        torso=TorsoAngles(pitch=25.0),
    )


def squat() -> Pose:
    # hip:knee close to 1:1.6 for a natural deep squat
    return Pose(
        left_arm=ArmAngles(shoulder_pitch=15.0, elbow_flex=5.0),
        right_arm=ArmAngles(shoulder_pitch=15.0, elbow_flex=5.0),
        left_leg=LegAngles(hip_pitch=70.0, knee_flex=110.0),
        right_leg=LegAngles(hip_pitch=70.0, knee_flex=110.0),
        torso=TorsoAngles(pitch=SQUAT_TORSO_PITCH),
    )


def reach_down() -> Pose:
    """Squatting with the right arm extended forward and down."""
    return Pose(
        left_arm=ArmAngles(shoulder_pitch=25.0, elbow_flex=10.0),
        right_arm=ArmAngles(shoulder_pitch=110.0, elbow_flex=25.0),
        left_leg=LegAngles(hip_pitch=70.0, knee_flex=110.0),
        right_leg=LegAngles(hip_pitch=70.0, knee_flex=110.0),
        torso=TorsoAngles(pitch=SQUAT_TORSO_PITCH),
    )


def holding(weight: float = 0.3, heavy_threshold: float = HEAVY_WEIGHT_THRESHOLD) -> Pose:
    """Standing with an object held in the right hand."""
    lean = HOLDING_TORSO_PITCH_HEAVY if weight > heavy_threshold else HOLDING_TORSO_PITCH
    return Pose(
        left_arm=ArmAngles(shoulder_pitch=10.0, elbow_flex=20.0),
        right_arm=ArmAngles(shoulder_pitch=40.0, elbow_flex=50.0),
        torso=TorsoAngles(pitch=lean),
    )


MOTIONS: dict[str, Callable[..., Pose]] = {
    "idle": idle,
    "stand": stand,
    "walk_cycle": walk_cycle,
    "squat_prep": squat_prep,
    "squat": squat,
    "reach_down": reach_down,
    "holding": holding,
}


def get_motion(name: str) -> Callable[..., Pose]:
    try:
        return MOTIONS[name]
    except KeyError:
        raise KeyError(f"Unknown motion '{name}'") from None
