"""
Action Planner: turn a resolved goal into an ordered ActionPlan.

    find_target(objects, "green")        -> green cylinder
    create_pick_plan(actor, cylinder)    -> [navigate, align, squat, reach, grasp, lift]
    create_drop_plan(actor)              -> [squat, drop, stand]

The planner does not check preconditions (already holding, nothing held,
unresolved target); the caller does that before asking for a plan.
"""

from __future__ import annotations

import logging
import math
import uuid
from typing import Iterable, Optional

from motion_engine.config.engine_config import MotionSettings, PlannerSettings
from motion_engine.model.pose import Vector3
from motion_engine.model.scene import Actor, PickableObject, ShapeType
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
)

logger = logging.getLogger("motion_engine.planning.action_planner")

# -----------------------------------------------------------------------
# Target resolution tables
# -----------------------------------------------------------------------

# Query keyword -> tokens matched against an object's color or name
COLOR_KEYWORDS: dict[str, tuple[str, ...]] = {
    "빨간": ("red", "#ef4444"),
    "빨강": ("red", "#ef4444"),
    "red": ("red", "#ef4444"),
    "파란": ("blue", "#3b82f6"),
    "파랑": ("blue", "#3b82f6"),
    "blue": ("blue", "#3b82f6"),
    "초록": ("green", "#10b981"),
    "green": ("green", "#10b981"),
    "노란": ("yellow", "#fbbf24"),
    "노랑": ("yellow", "#fbbf24"),
    "yellow": ("yellow", "#fbbf24"),
    "보라": ("purple", "#a855f7"),
    "purple": ("purple", "#a855f7"),
}

SHAPE_KEYWORDS: dict[ShapeType, tuple[str, ...]] = {
    ShapeType.BOX: ("상자", "box", "cube"),
    ShapeType.SPHERE: ("공", "ball", "sphere"),
    ShapeType.CYLINDER: ("실린더", "cylinder"),
}


def _eligible(objects: Iterable[PickableObject]) -> list[PickableObject]:
    return [o for o in objects if not o.is_attached]


def find_target(objects: Iterable[PickableObject], query: Optional[str]) -> Optional[PickableObject]:
    """Resolve a free-text query to one unattached object, or None.

    Tiers, first success wins: display name substring, color keyword,
    shape keyword.  An empty query selects the first eligible object.
    """
    candidates = _eligible(objects)
    desc = (query or "").strip().lower()
    if not desc:
        return candidates[0] if candidates else None

    # 1. Name
    for obj in candidates:
        if desc in obj.name.lower():
            return obj

    # 2. Color keyword
    for keyword, tokens in COLOR_KEYWORDS.items():
        if keyword in desc:
            for obj in candidates:
                color, name = obj.color.lower(), obj.name.lower()
                if any(tok in color or tok in name for tok in tokens):
                    return obj

    # 3. Shape keyword
    for shape, words in SHAPE_KEYWORDS.items():
        if any(w in desc for w in words):
            for obj in candidates:
                if obj.shape == shape:
                    return obj

    logger.debug("No eligible object matches %r", query)
    return None


# -----------------------------------------------------------------------
# Geometry
# -----------------------------------------------------------------------


def planar_distance(a: Vector3, b: Vector3) -> float:
    return a.planar_distance_to(b)


def heading_to(origin: Vector3, target: Vector3) -> float:
    """Heading in degrees that faces *target*; 0 faces -z (local forward)."""
    dx = target.x - origin.x
    dz = target.z - origin.z
    return math.degrees(math.atan2(dx, -dz))


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


# -----------------------------------------------------------------------
# Plans
# -----------------------------------------------------------------------


def create_pick_plan(
    actor: Actor,
    target: PickableObject,
    settings: Optional[PlannerSettings] = None,
    motion: Optional[MotionSettings] = None,
) -> ActionPlan:
    """Plan walking to, facing, crouching for, grasping and lifting *target*.

    Order encodes the precondition chain: near and facing before bending,
    reaching before grasping, grasping before lifting.
    """
    settings = settings or PlannerSettings.from_config()
    motion = motion or MotionSettings.from_config()

    ground_target = Vector3(target.position.x, motion.ground_y, target.position.z)
    dist = planar_distance(actor.position, ground_target)
    heading = heading_to(actor.position, ground_target)

    steps: list[ActionStep] = []
    if dist > settings.nav_threshold:
        steps.append(
            NavigateStep(
                target=ground_target,
                heading=heading,
                duration_ms=dist * settings.ms_per_unit,
            )
        )
    steps.append(AlignStep(heading=heading, duration_ms=settings.align_ms))
    steps.append(SquatStep(duration_ms=settings.squat_ms))
    steps.append(ReachStep(duration_ms=settings.reach_ms))
    steps.append(GraspStep(object_id=target.id, duration_ms=settings.grasp_ms))
    steps.append(LiftStep(duration_ms=settings.lift_ms))

    plan = ActionPlan(
        plan_id=_new_id(f"pick-{target.id}"),
        steps=tuple(steps),
        target_name=target.name,
        target_color=target.color,
    )
    logger.info(
        "Planned pick of %s for %s: %d steps, dist=%.2f heading=%.1f",
        target.name, actor.id, len(plan), dist, heading,
    )
    return plan


def create_move_plan(
    actor: Actor,
    destination: Vector3,
    settings: Optional[PlannerSettings] = None,
    motion: Optional[MotionSettings] = None,
) -> ActionPlan:
    """Plan a single walk to *destination*, projected onto the ground."""
    settings = settings or PlannerSettings.from_config()
    motion = motion or MotionSettings.from_config()

    ground_target = destination.with_y(motion.ground_y)
    dist = planar_distance(actor.position, ground_target)
    heading = heading_to(actor.position, ground_target) if dist > 0 else actor.heading
    plan = ActionPlan(
        plan_id=_new_id("move"),
        steps=(NavigateStep(target=ground_target, heading=heading, duration_ms=dist * settings.ms_per_unit),),
    )
    logger.info("Planned move for %s: dist=%.2f heading=%.1f", actor.id, dist, heading)
    return plan


def create_drop_plan(actor: Actor, settings: Optional[PlannerSettings] = None) -> ActionPlan:
    """Plan crouching, releasing the held object and standing back up."""
    settings = settings or PlannerSettings.from_config()
    plan = ActionPlan(
        plan_id=_new_id("drop"),
        steps=(
            SquatStep(duration_ms=settings.squat_ms),
            DropStep(duration_ms=settings.drop_ms),
            StandStep(duration_ms=settings.stand_ms),
        ),
    )
    logger.info("Planned drop for %s", actor.id)
    return plan
