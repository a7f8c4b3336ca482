"""
Shared test fixtures for the motion engine test suite.

Every test gets an isolated EngineConfig pointing at a temporary file, so
nothing reads or writes the repository's data/ directory.
"""

import pytest

from motion_engine.config import engine_config
from motion_engine.config.engine_config import MotionSettings, PlannerSettings, TimingSettings
from motion_engine.control.executor import ActionExecutor
from motion_engine.control.scheduler import ManualScheduler
from motion_engine.model.pose import Vector3
from motion_engine.model.scene import Actor, PickableObject, SceneState, ShapeType


GROUND_Y = -0.35
OBJECT_Y = -1.5
TICK_S = 0.016


# ---------------------------------------------------------------------------
# Config isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Fresh EngineConfig singleton backed by tmp_path/engine_config.json."""
    path = tmp_path / "engine_config.json"
    monkeypatch.setenv(engine_config.CONFIG_ENV_VAR, str(path))
    engine_config.EngineConfig._instance = None
    yield path
    engine_config.EngineConfig._instance = None


# ---------------------------------------------------------------------------
# Scene and execution fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def manual_scheduler():
    return ManualScheduler()


@pytest.fixture
def scene():
    """One robot at the origin and the three demo objects."""
    s = SceneState()
    s.add_actor(Actor(id="robot", name="Robot", position=Vector3(0.0, GROUND_Y, 0.0)))
    s.add_object(PickableObject("box-1", "Red Box", ShapeType.BOX, Vector3(1.0, OBJECT_Y, 0.0), "#ef4444"))
    s.add_object(PickableObject("ball-1", "Blue Ball", ShapeType.SPHERE, Vector3(-1.0, OBJECT_Y, 1.0), "#3b82f6"))
    s.add_object(
        PickableObject("cylinder-1", "Green Cylinder", ShapeType.CYLINDER, Vector3(0.5, OBJECT_Y, -1.5), "#10b981")
    )
    return s


@pytest.fixture
def executor(scene, manual_scheduler):
    return ActionExecutor(
        scene,
        manual_scheduler,
        timing=TimingSettings(),
        motion=MotionSettings(),
    )


@pytest.fixture
def planner_settings():
    return PlannerSettings()


@pytest.fixture
def motion_settings():
    return MotionSettings()
