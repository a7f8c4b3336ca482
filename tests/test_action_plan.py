"""Tests for action step records and plan serialization."""

import pytest

from motion_engine.model.pose import Vector3
from motion_engine.planning.action_plan import (
    DEFAULT_STEP_MS,
    ActionPlan,
    AlignStep,
    DropStep,
    GraspStep,
    NavigateStep,
    SquatStep,
    StandStep,
    StepKind,
    is_well_formed,
    step_from_dict,
    step_to_dict,
)


class TestSteps:
    def test_kinds(self):
        assert NavigateStep(target=Vector3()).kind == StepKind.NAVIGATE
        assert GraspStep(object_id="x").kind == StepKind.GRASP
        assert StandStep().kind == StepKind.STAND

    def test_default_duration(self):
        assert SquatStep().duration_ms == DEFAULT_STEP_MS

    def test_steps_are_immutable(self):
        step = GraspStep(object_id="box-1")
        with pytest.raises(AttributeError):
            step.object_id = "other"

    def test_well_formed(self):
        assert is_well_formed(NavigateStep(target=Vector3(1, 0, 1)))
        assert is_well_formed(AlignStep(heading=0.0))
        assert is_well_formed(DropStep())
        assert not is_well_formed(NavigateStep(target=None))
        assert not is_well_formed(AlignStep(heading=None))
        assert not is_well_formed(GraspStep(object_id=None))
        assert not is_well_formed(GraspStep(object_id=""))


class TestStepDicts:
    def test_navigate_to_dict(self):
        data = step_to_dict(NavigateStep(target=Vector3(1.0, -0.35, 2.0), heading=45.0, duration_ms=800))
        assert data == {
            "type": "navigate",
            "duration": 800,
            "target_position": [1.0, -0.35, 2.0],
            "target_rotation": 45.0,
        }

    def test_from_dict_missing_required_field(self):
        step = step_from_dict({"type": "grasp"})
        assert isinstance(step, GraspStep)
        assert step.object_id is None
        assert not is_well_formed(step)

    def test_from_dict_default_duration(self):
        assert step_from_dict({"type": "lift"}).duration_ms == DEFAULT_STEP_MS

    def test_from_dict_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown step type"):
            step_from_dict({"type": "jump"})

    def test_align_from_dict(self):
        step = step_from_dict({"type": "align", "target_rotation": 90, "duration": 300})
        assert step == AlignStep(heading=90.0, duration_ms=300.0)


class TestActionPlan:
    def _plan(self):
        return ActionPlan(
            plan_id="pick-1",
            steps=[
                NavigateStep(target=Vector3(1.0, -0.35, 0.0), heading=90.0, duration_ms=1000),
                AlignStep(heading=90.0, duration_ms=300),
                GraspStep(object_id="box-1", duration_ms=100),
            ],
            target_name="Red Box",
            target_color="#ef4444",
        )

    def test_steps_stored_as_tuple(self):
        plan = self._plan()
        assert isinstance(plan.steps, tuple)
        assert len(plan) == 3

    def test_kinds_and_total_duration(self):
        plan = self._plan()
        assert plan.kinds == [StepKind.NAVIGATE, StepKind.ALIGN, StepKind.GRASP]
        assert plan.total_duration_ms == 1400.0

    def test_dict_roundtrip(self):
        plan = self._plan()
        assert ActionPlan.from_dict(plan.to_dict()) == plan
