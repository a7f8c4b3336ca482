"""Pydantic models for the scene state read by the rendering layer."""

from typing import Optional

from pydantic import BaseModel, Field


class ActorStateMessage(BaseModel):
    """Actor state as seen by a renderer on a display frame."""

    id: str
    name: str = ""
    pose: dict[str, dict[str, float]] = Field(
        default_factory=dict,
        description="Joint groups -> axis -> degrees",
    )
    position: list[float] = Field(description="[x, y, z] in scene units")
    heading_deg: float = Field(default=0.0, description="Rotation about the vertical axis")
    holding_object_id: Optional[str] = None


class ObjectStateMessage(BaseModel):
    """Pickable object state as seen by a renderer."""

    id: str
    name: str
    shape: str = Field(description="box | sphere | cylinder")
    position: list[float] = Field(description="[x, y, z] in scene units")
    color: str = ""
    size: float = 0.3
    is_attached: bool = False


class SceneSnapshotMessage(BaseModel):
    """Full scene snapshot."""

    actors: list[ActorStateMessage] = Field(default_factory=list)
    objects: list[ObjectStateMessage] = Field(default_factory=list)
    timestamp: float = 0.0
