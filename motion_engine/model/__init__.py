"""Data model: poses, actors, pickable objects and the scene container."""

from motion_engine.model.pose import (
    JOINT_NAMES,
    NUM_JOINTS,
    ArmAngles,
    LegAngles,
    Pose,
    TorsoAngles,
    Vector3,
    neutral_pose,
)
from motion_engine.model.scene import Actor, PickableObject, SceneState, ShapeType

__all__ = [
    "JOINT_NAMES",
    "NUM_JOINTS",
    "ArmAngles",
    "LegAngles",
    "Pose",
    "TorsoAngles",
    "Vector3",
    "neutral_pose",
    "Actor",
    "PickableObject",
    "SceneState",
    "ShapeType",
]
