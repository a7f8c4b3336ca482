"""Engine configuration."""

from motion_engine.config.engine_config import (
    DEFAULTS,
    EngineConfig,
    MotionSettings,
    PlannerSettings,
    TimingSettings,
    get_engine_config,
)

__all__ = [
    "DEFAULTS",
    "EngineConfig",
    "MotionSettings",
    "PlannerSettings",
    "TimingSettings",
    "get_engine_config",
]
