"""
Action steps and action plans.

An ActionStep is one of a closed set of immutable step records; each kind
carries only the fields it needs plus a nominal duration in milliseconds.
An ActionPlan is an ordered, immutable sequence of steps: step order is
execution order.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union

from motion_engine.model.pose import Vector3

DEFAULT_STEP_MS = 500.0


class StepKind(str, enum.Enum):
    NAVIGATE = "navigate"
    ALIGN = "align"
    SQUAT = "squat"
    REACH = "reach"
    GRASP = "grasp"
    LIFT = "lift"
    DROP = "drop"
    STAND = "stand"


@dataclass(frozen=True)
class NavigateStep:
    """Walk to *target*; heading snaps to *heading* when given."""

    kind: ClassVar[StepKind] = StepKind.NAVIGATE
    target: Optional[Vector3]
    heading: Optional[float] = None
    duration_ms: float = DEFAULT_STEP_MS


@dataclass(frozen=True)
class AlignStep:
    kind: ClassVar[StepKind] = StepKind.ALIGN
    heading: Optional[float]
    duration_ms: float = DEFAULT_STEP_MS


@dataclass(frozen=True)
class SquatStep:
    kind: ClassVar[StepKind] = StepKind.SQUAT
    duration_ms: float = DEFAULT_STEP_MS


@dataclass(frozen=True)
class ReachStep:
    kind: ClassVar[StepKind] = StepKind.REACH
    duration_ms: float = DEFAULT_STEP_MS


@dataclass(frozen=True)
class GraspStep:
    kind: ClassVar[StepKind] = StepKind.GRASP
    object_id: Optional[str]
    duration_ms: float = DEFAULT_STEP_MS


@dataclass(frozen=True)
class LiftStep:
    kind: ClassVar[StepKind] = StepKind.LIFT
    duration_ms: float = DEFAULT_STEP_MS


@dataclass(frozen=True)
class DropStep:
    kind: ClassVar[StepKind] = StepKind.DROP
    duration_ms: float = DEFAULT_STEP_MS


@dataclass(frozen=True)
class StandStep:
    kind: ClassVar[StepKind] = StepKind.STAND
    duration_ms: float = DEFAULT_STEP_MS


ActionStep = Union[
    NavigateStep, AlignStep, SquatStep, ReachStep, GraspStep, LiftStep, DropStep, StandStep
]

STEP_TYPES: dict[StepKind, type] = {
    StepKind.NAVIGATE: NavigateStep,
    StepKind.ALIGN: AlignStep,
    StepKind.SQUAT: SquatStep,
    StepKind.REACH: ReachStep,
    StepKind.GRASP: GraspStep,
    StepKind.LIFT: LiftStep,
    StepKind.DROP: DropStep,
    StepKind.STAND: StandStep,
}


def is_well_formed(step: ActionStep) -> bool:
    """False when a step is missing the field its kind requires."""
    if isinstance(step, NavigateStep):
        return step.target is not None
    if isinstance(step, AlignStep):
        return step.heading is not None
    if isinstance(step, GraspStep):
        return bool(step.object_id)
    return True


def step_to_dict(step: ActionStep) -> dict[str, Any]:
    data: dict[str, Any] = {"type": step.kind.value, "duration": step.duration_ms}
    if isinstance(step, NavigateStep):
        data["target_position"] = step.target.to_list() if step.target else None
        if step.heading is not None:
            data["target_rotation"] = step.heading
    elif isinstance(step, AlignStep):
        data["target_rotation"] = step.heading
    elif isinstance(step, GraspStep):
        data["object_id"] = step.object_id
    return data


def step_from_dict(data: dict[str, Any]) -> ActionStep:
    """Build a step from a loose record such as ``{"type": "grasp", "object_id": "obj-1"}``.

    Missing required fields are kept as None, the executor skips such steps.
    Raises ValueError for an unknown step type.
    """
    try:
        kind = StepKind(data.get("type"))
    except ValueError:
        raise ValueError(f"Unknown step type {data.get('type')!r}") from None

    duration = data.get("duration")
    duration_ms = DEFAULT_STEP_MS if duration is None else float(duration)

    if kind == StepKind.NAVIGATE:
        raw = data.get("target_position")
        target = Vector3.from_array(raw) if raw is not None else None
        heading = data.get("target_rotation")
        return NavigateStep(
            target=target,
            heading=None if heading is None else float(heading),
            duration_ms=duration_ms,
        )
    if kind == StepKind.ALIGN:
        heading = data.get("target_rotation")
        return AlignStep(heading=None if heading is None else float(heading), duration_ms=duration_ms)
    if kind == StepKind.GRASP:
        return GraspStep(object_id=data.get("object_id"), duration_ms=duration_ms)
    return STEP_TYPES[kind](duration_ms=duration_ms)


@dataclass(frozen=True)
class ActionPlan:
    """Ordered steps for one high-level goal."""

    plan_id: str
    steps: tuple[ActionStep, ...] = field(default_factory=tuple)
    target_name: Optional[str] = None
    target_color: Optional[str] = None

    def __post_init__(self):
        # accept any iterable, store an immutable tuple
        object.__setattr__(self, "steps", tuple(self.steps))

    def __len__(self) -> int:
        return len(self.steps)

    @property
    def kinds(self) -> list[StepKind]:
        return [s.kind for s in self.steps]

    @property
    def total_duration_ms(self) -> float:
        return float(sum(s.duration_ms for s in self.steps))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.plan_id,
            "steps": [step_to_dict(s) for s in self.steps],
            "target_object_name": self.target_name,
            "target_object_color": self.target_color,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActionPlan:
        return cls(
            plan_id=str(data.get("id", "")),
            steps=tuple(step_from_dict(s) for s in data.get("steps", [])),
            target_name=data.get("target_object_name"),
            target_color=data.get("target_object_color"),
        )
