"""
Scene records and the single-writer scene state container.

Actor and PickableObject are immutable snapshots; every mutation goes through
SceneState, which swaps records under a lock so a renderer never observes a
half-applied tick.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from dataclasses import dataclass, field, replace
from typing import Optional

from motion_engine.model.pose import Pose, Vector3
from shared.messages.scene_state import (
    ActorStateMessage,
    ObjectStateMessage,
    SceneSnapshotMessage,
)

logger = logging.getLogger(__name__)


class ShapeType(str, enum.Enum):
    BOX = "box"
    SPHERE = "sphere"
    CYLINDER = "cylinder"


@dataclass(frozen=True)
class Actor:
    """The controlled figure."""

    id: str
    name: str = ""
    pose: Pose = field(default_factory=Pose)
    position: Vector3 = field(default_factory=Vector3)
    heading: float = 0.0  # degrees about +y
    holding_object_id: Optional[str] = None

    @property
    def is_holding(self) -> bool:
        return self.holding_object_id is not None


@dataclass(frozen=True)
class PickableObject:
    id: str
    name: str
    shape: ShapeType
    position: Vector3 = field(default_factory=Vector3)
    color: str = ""
    size: float = 0.3
    is_attached: bool = False


class SceneState:
    """Thread-safe container for actors and objects.

    All writes are read-modify-write under one lock, so interleaved ticks of
    two actors cannot lose each other's updates.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._actors: dict[str, Actor] = {}
        self._objects: dict[str, PickableObject] = {}

    # ------------------------------------------------------------------
    # Registration and reads
    # ------------------------------------------------------------------

    def add_actor(self, actor: Actor) -> None:
        with self._lock:
            self._actors[actor.id] = actor

    def add_object(self, obj: PickableObject) -> None:
        with self._lock:
            self._objects[obj.id] = obj

    def get_actor(self, actor_id: str) -> Actor:
        with self._lock:
            return self._actors[actor_id]

    def get_object(self, object_id: str) -> PickableObject:
        with self._lock:
            return self._objects[object_id]

    def find_object(self, object_id: Optional[str]) -> Optional[PickableObject]:
        if object_id is None:
            return None
        with self._lock:
            return self._objects.get(object_id)

    def actors(self) -> list[Actor]:
        with self._lock:
            return list(self._actors.values())

    def objects(self) -> list[PickableObject]:
        with self._lock:
            return list(self._objects.values())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update_actor(self, actor_id: str, **changes) -> Actor:
        """Replace fields of an actor atomically. Returns the new record."""
        with self._lock:
            updated = replace(self._actors[actor_id], **changes)
            self._actors[actor_id] = updated
            return updated

    def update_object(self, object_id: str, **changes) -> PickableObject:
        with self._lock:
            updated = replace(self._objects[object_id], **changes)
            self._objects[object_id] = updated
            return updated

    def attach(self, actor_id: str, object_id: str) -> bool:
        """Mark *object_id* as held by *actor_id*.

        Returns False without mutating anything if the actor already holds
        something or the object is attached elsewhere.
        """
        with self._lock:
            actor = self._actors[actor_id]
            obj = self._objects[object_id]
            if actor.holding_object_id is not None or obj.is_attached:
                logger.warning(
                    "Attach refused: actor %s holds %s, object %s attached=%s",
                    actor_id, actor.holding_object_id, object_id, obj.is_attached,
                )
                return False
            self._objects[object_id] = replace(obj, is_attached=True)
            self._actors[actor_id] = replace(actor, holding_object_id=object_id)
            return True

    def detach(self, actor_id: str, ground_y: float) -> Optional[str]:
        """Release whatever *actor_id* holds onto the ground beneath it.

        Returns the released object id, or None if the actor held nothing.
        """
        with self._lock:
            actor = self._actors[actor_id]
            object_id = actor.holding_object_id
            if object_id is None:
                return None
            obj = self._objects.get(object_id)
            if obj is not None:
                self._objects[object_id] = replace(
                    obj,
                    is_attached=False,
                    position=actor.position.with_y(ground_y),
                )
            self._actors[actor_id] = replace(actor, holding_object_id=None)
            return object_id

    # ------------------------------------------------------------------
    # Renderer view
    # ------------------------------------------------------------------

    def snapshot(self) -> SceneSnapshotMessage:
        with self._lock:
            actors = list(self._actors.values())
            objects = list(self._objects.values())
        return SceneSnapshotMessage(
            actors=[
                ActorStateMessage(
                    id=a.id,
                    name=a.name,
                    pose=a.pose.to_dict(),
                    position=a.position.to_list(),
                    heading_deg=a.heading,
                    holding_object_id=a.holding_object_id,
                )
                for a in actors
            ],
            objects=[
                ObjectStateMessage(
                    id=o.id,
                    name=o.name,
                    shape=o.shape.value,
                    position=o.position.to_list(),
                    color=o.color,
                    size=o.size,
                    is_attached=o.is_attached,
                )
                for o in objects
            ],
            timestamp=time.time(),
        )
