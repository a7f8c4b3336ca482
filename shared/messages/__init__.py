"""Pydantic message schemas exchanged with the motion engine."""

from shared.messages.intent import Axis, Intent, IntentType, JointKind, Side
from shared.messages.scene_state import (
    ActorStateMessage,
    ObjectStateMessage,
    SceneSnapshotMessage,
)
from shared.messages.events import PlanEventMessage, PlanEventType

__all__ = [
    "Axis",
    "Intent",
    "IntentType",
    "JointKind",
    "Side",
    "ActorStateMessage",
    "ObjectStateMessage",
    "SceneSnapshotMessage",
    "PlanEventMessage",
    "PlanEventType",
]
