"""Planning module: action steps, action plans and the action planner."""

from motion_engine.planning.action_plan import (
    ActionPlan,
    ActionStep,
    AlignStep,
    DropStep,
    GraspStep,
    LiftStep,
    NavigateStep,
    ReachStep,
    SquatStep,
    StandStep,
    StepKind,
    step_from_dict,
    step_to_dict,
)
from motion_engine.planning.action_planner import (
    create_drop_plan,
    create_move_plan,
    create_pick_plan,
    find_target,
    heading_to,
    planar_distance,
)

__all__ = [
    "ActionPlan",
    "ActionStep",
    "AlignStep",
    "DropStep",
    "GraspStep",
    "LiftStep",
    "NavigateStep",
    "ReachStep",
    "SquatStep",
    "StandStep",
    "StepKind",
    "step_from_dict",
    "step_to_dict",
    "create_drop_plan",
    "create_move_plan",
    "create_pick_plan",
    "find_target",
    "heading_to",
    "planar_distance",
]
