"""
Central configuration for motion engine timing, planning and motion constants.

Singleton config loader that reads from data/engine_config.json (or the file
named by the MOTION_ENGINE_CONFIG environment variable).
Modules should use `get_engine_config()` or the typed settings views below
instead of hardcoding values.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "data"
_CONFIG_FILE = _CONFIG_DIR / "engine_config.json"
CONFIG_ENV_VAR = "MOTION_ENGINE_CONFIG"

# ── Defaults ──────────────────────────────────────────────────────────────

DEFAULTS: dict[str, Any] = {
    "timing": {
        "tick_ms": 16.0,
        "stride_ms": 600.0,
        "default_step_ms": 500.0,
    },
    "planner": {
        "nav_threshold": 0.5,
        "ms_per_unit": 500.0,
        "align_ms": 300.0,
        "squat_ms": 500.0,
        "reach_ms": 400.0,
        "grasp_ms": 100.0,
        "lift_ms": 600.0,
        "drop_ms": 100.0,
        "stand_ms": 600.0,
    },
    "motion": {
        "ground_y": -0.35,
        "squat_depth": 0.4,
        "bob_amplitude": 0.03,
        "object_ground_y": -1.5,
        "default_weight": 0.3,
        "heavy_weight_threshold": 0.5,
    },
}


def _config_file() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return _CONFIG_FILE


def _deep_merge(base: dict, overlay: dict) -> None:
    for key, value in overlay.items():
        if isinstance(base.get(key), dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def _changed(reference: dict, current: dict) -> dict:
    """Subset of *current* that differs from *reference*, nested."""
    out = {}
    for key, value in current.items():
        ref = reference.get(key)
        if isinstance(value, dict) and isinstance(ref, dict):
            nested = _changed(ref, value)
            if nested:
                out[key] = nested
        elif key not in reference or value != ref:
            out[key] = value
    return out


class EngineConfig:
    """Process-wide engine configuration backed by a JSON file.

    Unknown sections and keys in the file are kept; missing ones come from
    DEFAULTS.  Every mutation is written back immediately.
    """

    _instance: Optional[EngineConfig] = None
    _lock = threading.Lock()

    def __new__(cls) -> EngineConfig:
        with cls._lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._ready = False
                cls._instance = instance
            return cls._instance

    def __init__(self):
        if self._ready:
            return
        self._path = _config_file()
        self._data: dict[str, Any] = self._read()
        self._ready = True

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        data = copy.deepcopy(DEFAULTS)
        if not self._path.exists():
            return data
        try:
            _deep_merge(data, json.loads(self._path.read_text()))
            logger.info("Loaded engine config from %s", self._path)
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable engine config %s: %s", self._path, e)
        return data

    def _write(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(self._data, indent=2))
        except OSError as e:
            logger.warning("Could not write engine config %s: %s", self._path, e)

    def get(self, section: str, key: Optional[str] = None) -> Any:
        """Copy of one value, or of the whole *section* when *key* is omitted."""
        with self._lock:
            values = self._data.get(section, {})
            return copy.deepcopy(values if key is None else values.get(key))

    def get_all(self) -> dict[str, Any]:
        with self._lock:
            return copy.deepcopy(self._data)

    def get_defaults(self) -> dict[str, Any]:
        return copy.deepcopy(DEFAULTS)

    def set(self, section: str, key: str, value: Any) -> None:
        with self._lock:
            self._data.setdefault(section, {})[key] = value
            self._write()

    def update(self, data: dict[str, Any]) -> None:
        """Merge a nested dict of overrides, e.g. ``{"motion": {"squat_depth": 0.5}}``."""
        with self._lock:
            _deep_merge(self._data, data)
            self._write()

    def reset(self) -> None:
        with self._lock:
            self._data = copy.deepcopy(DEFAULTS)
            self._write()

    def diff(self) -> dict[str, Any]:
        """Overrides currently in effect relative to DEFAULTS."""
        with self._lock:
            return _changed(DEFAULTS, self._data)


def get_engine_config() -> EngineConfig:
    """Get the singleton EngineConfig instance."""
    return EngineConfig()


# ── Typed views ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimingSettings:
    tick_ms: float = 16.0
    stride_ms: float = 600.0
    default_step_ms: float = 500.0

    @classmethod
    def from_config(cls, cfg: Optional[EngineConfig] = None) -> TimingSettings:
        sec = (cfg or get_engine_config()).get("timing")
        return cls(**{k: float(sec[k]) for k in cls.__dataclass_fields__ if k in sec})


@dataclass(frozen=True)
class PlannerSettings:
    nav_threshold: float = 0.5
    ms_per_unit: float = 500.0
    align_ms: float = 300.0
    squat_ms: float = 500.0
    reach_ms: float = 400.0
    grasp_ms: float = 100.0
    lift_ms: float = 600.0
    drop_ms: float = 100.0
    stand_ms: float = 600.0

    @classmethod
    def from_config(cls, cfg: Optional[EngineConfig] = None) -> PlannerSettings:
        sec = (cfg or get_engine_config()).get("planner")
        return cls(**{k: float(sec[k]) for k in cls.__dataclass_fields__ if k in sec})


@dataclass(frozen=True)
class MotionSettings:
    ground_y: float = -0.35
    squat_depth: float = 0.4
    bob_amplitude: float = 0.03
    object_ground_y: float = -1.5
    default_weight: float = 0.3
    heavy_weight_threshold: float = 0.5

    @classmethod
    def from_config(cls, cfg: Optional[EngineConfig] = None) -> MotionSettings:
        sec = (cfg or get_engine_config()).get("motion")
        return cls(**{k: float(sec[k]) for k in cls.__dataclass_fields__ if k in sec})
