"""Plan execution: timer scheduling and the action executor."""

from motion_engine.control.executor import ActionExecutor, ExecutionCursor, PlanRun, PlanState
from motion_engine.control.scheduler import (
    AsyncioScheduler,
    ManualScheduler,
    Scheduler,
    TimerHandle,
)

__all__ = [
    "ActionExecutor",
    "ExecutionCursor",
    "PlanRun",
    "PlanState",
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
]
