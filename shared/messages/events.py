"""Plan execution events emitted by the action executor."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PlanEventType(str, Enum):
    """Lifecycle events of a running plan."""

    PLAN_STARTED = "plan.started"
    STEP_STARTED = "step.started"
    STEP_COMPLETED = "step.completed"
    STEP_SKIPPED = "step.skipped"
    PLAN_COMPLETED = "plan.completed"
    PLAN_SUPERSEDED = "plan.superseded"


class PlanEventMessage(BaseModel):
    """A single executor lifecycle event."""

    event: PlanEventType
    plan_id: str
    actor_id: str
    step_index: Optional[int] = Field(default=None, description="Index of the step, if any")
    step_kind: Optional[str] = Field(default=None, description="navigate, align, ...")
    timestamp: float = Field(default=0.0, description="Scheduler clock, seconds")
