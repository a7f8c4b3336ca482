"""Tests for target resolution and pick/drop/move planning."""

import math

import pytest

from motion_engine.config.engine_config import MotionSettings, PlannerSettings
from motion_engine.model.pose import Vector3
from motion_engine.model.scene import Actor, PickableObject, ShapeType
from motion_engine.planning.action_plan import GraspStep, NavigateStep, StepKind
from motion_engine.planning.action_planner import (
    create_drop_plan,
    create_move_plan,
    create_pick_plan,
    find_target,
    heading_to,
)

GROUND_Y = -0.35


def _actor(x=0.0, z=0.0, heading=0.0):
    return Actor(id="robot", position=Vector3(x, GROUND_Y, z), heading=heading)


def _obj(oid, name, shape, x, z, color, attached=False):
    return PickableObject(oid, name, shape, Vector3(x, -1.5, z), color, is_attached=attached)


@pytest.fixture
def objects():
    return [
        _obj("box-1", "Red Box", ShapeType.BOX, 1.0, 0.0, "#ef4444"),
        _obj("ball-1", "Blue Ball", ShapeType.SPHERE, -1.0, 1.0, "#3b82f6"),
        _obj("cylinder-1", "Green Cylinder", ShapeType.CYLINDER, 0.5, -1.5, "#10b981"),
    ]


class TestFindTarget:
    def test_by_name(self, objects):
        assert find_target(objects, "blue ball").id == "ball-1"

    def test_by_english_color(self, objects):
        assert find_target(objects, "the green one").id == "cylinder-1"

    def test_by_korean_color(self, objects):
        assert find_target(objects, "빨간 거").id == "box-1"

    def test_by_shape(self, objects):
        assert find_target(objects, "that sphere").id == "ball-1"
        assert find_target(objects, "상자").id == "box-1"

    def test_empty_query_takes_first_eligible(self, objects):
        assert find_target(objects, "").id == "box-1"
        assert find_target(objects, None).id == "box-1"

    def test_no_match(self, objects):
        assert find_target(objects, "purple pyramid") is None

    def test_never_returns_attached(self, objects):
        held = [
            _obj("box-1", "Red Box", ShapeType.BOX, 1.0, 0.0, "#ef4444", attached=True),
            _obj("box-2", "Red Crate", ShapeType.BOX, 2.0, 0.0, "#ef4444"),
        ]
        for query in ("red box", "red", "box", ""):
            found = find_target(held, query)
            assert found is not None
            assert not found.is_attached

    def test_all_attached(self):
        held = [_obj("box-1", "Red Box", ShapeType.BOX, 1.0, 0.0, "#ef4444", attached=True)]
        assert find_target(held, "red box") is None
        assert find_target(held, "") is None


class TestHeading:
    def test_forward_is_minus_z(self):
        assert heading_to(Vector3(), Vector3(0, 0, -1)) == pytest.approx(0.0)

    def test_right_is_plus_x(self):
        assert heading_to(Vector3(), Vector3(1, 0, 0)) == pytest.approx(90.0)

    def test_behind(self):
        assert abs(heading_to(Vector3(), Vector3(0, 0, 1))) == pytest.approx(180.0)


class TestPickPlan:
    def test_far_target_starts_with_navigate(self, planner_settings, motion_settings):
        target = _obj("t", "Thing", ShapeType.BOX, 2.0, 0.0, "#fff")
        plan = create_pick_plan(_actor(), target, planner_settings, motion_settings)
        assert plan.kinds == [
            StepKind.NAVIGATE,
            StepKind.ALIGN,
            StepKind.SQUAT,
            StepKind.REACH,
            StepKind.GRASP,
            StepKind.LIFT,
        ]
        nav = plan.steps[0]
        assert nav.duration_ms == pytest.approx(1000.0)
        assert nav.target == Vector3(2.0, GROUND_Y, 0.0)
        assert nav.heading == pytest.approx(90.0)

    def test_near_target_starts_with_align(self, planner_settings, motion_settings):
        target = _obj("t", "Thing", ShapeType.BOX, 0.3, 0.2, "#fff")
        plan = create_pick_plan(_actor(), target, planner_settings, motion_settings)
        assert plan.kinds[0] == StepKind.ALIGN
        assert len(plan) == 5

    def test_threshold_boundary_is_not_navigated(self, planner_settings, motion_settings):
        target = _obj("t", "Thing", ShapeType.BOX, 0.0, -0.5, "#fff")
        plan = create_pick_plan(_actor(), target, planner_settings, motion_settings)
        assert plan.kinds[0] == StepKind.ALIGN

    def test_single_grasp_for_target_and_ends_with_lift(self, objects, planner_settings, motion_settings):
        for target in objects:
            plan = create_pick_plan(_actor(), target, planner_settings, motion_settings)
            grasps = [s for s in plan.steps if isinstance(s, GraspStep)]
            assert len(grasps) == 1
            assert grasps[0].object_id == target.id
            assert plan.kinds[-1] == StepKind.LIFT

    def test_phase_durations(self, planner_settings, motion_settings):
        target = _obj("t", "Thing", ShapeType.BOX, 0.1, 0.0, "#fff")
        plan = create_pick_plan(_actor(), target, planner_settings, motion_settings)
        assert [s.duration_ms for s in plan.steps] == [300.0, 500.0, 400.0, 100.0, 600.0]

    def test_carries_target_description(self, objects, planner_settings, motion_settings):
        plan = create_pick_plan(_actor(), objects[0], planner_settings, motion_settings)
        assert plan.target_name == "Red Box"
        assert plan.target_color == "#ef4444"

    def test_unique_plan_ids(self, objects, planner_settings, motion_settings):
        ids = {create_pick_plan(_actor(), objects[0], planner_settings, motion_settings).plan_id for _ in range(20)}
        assert len(ids) == 20

    def test_settings_from_config(self, isolated_config):
        from motion_engine.config.engine_config import get_engine_config

        get_engine_config().set("planner", "ms_per_unit", 250.0)
        target = _obj("t", "Thing", ShapeType.BOX, 2.0, 0.0, "#fff")
        plan = create_pick_plan(_actor(), target)
        assert plan.steps[0].duration_ms == pytest.approx(500.0)


class TestDropAndMovePlans:
    def test_drop_plan_shape(self, planner_settings):
        plan = create_drop_plan(_actor(), planner_settings)
        assert plan.kinds == [StepKind.SQUAT, StepKind.DROP, StepKind.STAND]
        assert [s.duration_ms for s in plan.steps] == [500.0, 100.0, 600.0]

    def test_move_plan_projects_to_ground(self, planner_settings, motion_settings):
        plan = create_move_plan(_actor(), Vector3(3.0, 5.0, 4.0), planner_settings, motion_settings)
        assert len(plan) == 1
        step = plan.steps[0]
        assert isinstance(step, NavigateStep)
        assert step.target == Vector3(3.0, GROUND_Y, 4.0)
        assert step.duration_ms == pytest.approx(2500.0)
        assert step.heading == pytest.approx(math.degrees(math.atan2(3.0, -4.0)))

    def test_move_to_own_position_keeps_heading(self, planner_settings, motion_settings):
        plan = create_move_plan(_actor(heading=33.0), Vector3(0, 0, 0), planner_settings, motion_settings)
        assert plan.steps[0].heading == 33.0
        assert plan.steps[0].duration_ms == 0.0
