"""
Keyframed pose sequences.

Build a sequence from keyframes at normalized times and sample it at an
elapsed time::

    seq = MotionSequence(duration_ms=900)
    seq.add_keyframe(Keyframe(time=0.0, pose=idle()))
    seq.add_keyframe(Keyframe(time=0.5, pose=raised, easing="ease_out"))
    seq.add_keyframe(Keyframe(time=1.0, pose=idle()))

    pose, position = seq.sample(450.0)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from motion_engine.model.pose import Pose, Vector3
from motion_engine.motion.easing import get_easing
from motion_engine.motion.interpolation import lerp_pose, lerp_vec3

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Keyframe:
    time: float  # normalized 0-1
    pose: Pose
    position: Optional[Vector3] = None
    easing: str = "ease_in_out"  # curve used to arrive at this frame


class MotionSequence:
    """Keyframe track with a fixed duration, optionally looping."""

    def __init__(self, duration_ms: float, loop: bool = False, label: str = ""):
        if duration_ms <= 0:
            raise ValueError(f"duration_ms must be positive, got {duration_ms}")
        self.duration_ms = float(duration_ms)
        self.loop = loop
        self.label = label
        self._keyframes: List[Keyframe] = []

    def add_keyframe(self, frame: Keyframe) -> None:
        """Append a keyframe. Times must be in [0, 1] and strictly increasing."""
        if not 0.0 <= frame.time <= 1.0:
            raise ValueError(f"Keyframe time must be in [0, 1], got {frame.time}")
        if self._keyframes and frame.time <= self._keyframes[-1].time:
            raise ValueError(
                f"Keyframes must be in increasing time order: "
                f"{frame.time} <= {self._keyframes[-1].time}"
            )
        get_easing(frame.easing)
        self._keyframes.append(frame)

    @property
    def keyframes(self) -> List[Keyframe]:
        return list(self._keyframes)

    def normalized_time(self, elapsed_ms: float) -> float:
        if self.loop:
            return (elapsed_ms % self.duration_ms) / self.duration_ms
        return min(max(elapsed_ms, 0.0) / self.duration_ms, 1.0)

    def is_finished(self, elapsed_ms: float) -> bool:
        return not self.loop and elapsed_ms >= self.duration_ms

    def sample(self, elapsed_ms: float) -> tuple[Pose, Optional[Vector3]]:
        """Pose (and position, when both bracketing frames carry one) at *elapsed_ms*."""
        if not self._keyframes:
            raise ValueError("Sequence has no keyframes")
        frames = self._keyframes
        if len(frames) == 1:
            return frames[0].pose, frames[0].position

        t = self.normalized_time(elapsed_ms)
        if t <= frames[0].time:
            return frames[0].pose, frames[0].position
        if t >= frames[-1].time:
            return frames[-1].pose, frames[-1].position

        prev, nxt = frames[0], frames[-1]
        for i in range(len(frames) - 1):
            if frames[i].time <= t <= frames[i + 1].time:
                prev, nxt = frames[i], frames[i + 1]
                break

        span = nxt.time - prev.time
        local = (t - prev.time) / span if span > 0 else 1.0
        eased = get_easing(nxt.easing)(local)

        pose = lerp_pose(prev.pose, nxt.pose, eased)
        position = None
        if prev.position is not None and nxt.position is not None:
            position = lerp_vec3(prev.position, nxt.position, eased)
        return pose, position


def wave_sequence(
    base: Pose,
    side: str = "right",
    waves: int = 3,
    beat_ms: float = 300.0,
    raised_pitch: float = 90.0,
) -> MotionSequence:
    """Raise the arm on *side* and toggle it *waves* times, ending back at *base*."""
    if side not in ("left", "right"):
        raise ValueError(f"side must be 'left' or 'right', got {side!r}")
    waves = max(1, int(waves))
    joint = f"{side}_arm.shoulder_pitch"
    rest_pitch = base.get(joint)
    raised = base.with_joint(joint, raised_pitch)

    beats = 2 * waves
    seq = MotionSequence(duration_ms=beat_ms * beats, label=f"wave_{side}")
    seq.add_keyframe(Keyframe(time=0.0, pose=base))
    for beat in range(1, beats + 1):
        pose = raised if beat % 2 == 1 else base.with_joint(joint, rest_pitch)
        seq.add_keyframe(Keyframe(time=beat / beats, pose=pose, easing="ease_out"))
    logger.debug("Built %s with %d keyframes", seq.label, beats + 1)
    return seq
