"""Tests for keyframed motion sequences."""

import pytest

from motion_engine.model.pose import ArmAngles, Pose, Vector3
from motion_engine.motion.keyframes import Keyframe, MotionSequence, wave_sequence


def _raised(pitch=90.0):
    return Pose(right_arm=ArmAngles(shoulder_pitch=pitch))


class TestMotionSequence:
    def test_rejects_non_positive_duration(self):
        with pytest.raises(ValueError):
            MotionSequence(duration_ms=0)

    def test_rejects_time_out_of_range(self):
        seq = MotionSequence(duration_ms=100)
        with pytest.raises(ValueError, match=r"\[0, 1\]"):
            seq.add_keyframe(Keyframe(time=1.5, pose=Pose()))

    def test_rejects_non_increasing_times(self):
        seq = MotionSequence(duration_ms=100)
        seq.add_keyframe(Keyframe(time=0.5, pose=Pose()))
        with pytest.raises(ValueError, match="increasing"):
            seq.add_keyframe(Keyframe(time=0.5, pose=Pose()))

    def test_rejects_unknown_easing(self):
        seq = MotionSequence(duration_ms=100)
        with pytest.raises(KeyError):
            seq.add_keyframe(Keyframe(time=0.0, pose=Pose(), easing="wobble"))

    def test_sample_empty_raises(self):
        with pytest.raises(ValueError):
            MotionSequence(duration_ms=100).sample(0.0)

    def test_sample_endpoints_and_middle(self):
        seq = MotionSequence(duration_ms=1000)
        seq.add_keyframe(Keyframe(time=0.0, pose=Pose()))
        seq.add_keyframe(Keyframe(time=1.0, pose=_raised(), easing="linear"))
        assert seq.sample(0.0)[0] == Pose()
        assert seq.sample(1000.0)[0] == _raised()
        assert seq.sample(2000.0)[0] == _raised()
        mid, _ = seq.sample(500.0)
        assert mid.right_arm.shoulder_pitch == pytest.approx(45.0)

    def test_easing_applies_per_segment(self):
        seq = MotionSequence(duration_ms=1000)
        seq.add_keyframe(Keyframe(time=0.0, pose=Pose()))
        seq.add_keyframe(Keyframe(time=1.0, pose=_raised(), easing="ease_out"))
        pose, _ = seq.sample(500.0)
        assert pose.right_arm.shoulder_pitch == pytest.approx(67.5)

    def test_position_only_when_both_frames_have_one(self):
        seq = MotionSequence(duration_ms=100)
        seq.add_keyframe(Keyframe(time=0.0, pose=Pose(), position=Vector3(0, 0, 0)))
        seq.add_keyframe(Keyframe(time=0.5, pose=Pose(), position=Vector3(2, 0, 0), easing="linear"))
        seq.add_keyframe(Keyframe(time=1.0, pose=Pose()))
        _, pos = seq.sample(25.0)
        assert pos.x == pytest.approx(1.0)
        _, pos = seq.sample(75.0)
        assert pos is None

    def test_finished(self):
        seq = MotionSequence(duration_ms=300)
        assert not seq.is_finished(299.0)
        assert seq.is_finished(300.0)

    def test_loop_wraps_and_never_finishes(self):
        seq = MotionSequence(duration_ms=100, loop=True)
        seq.add_keyframe(Keyframe(time=0.0, pose=Pose()))
        seq.add_keyframe(Keyframe(time=1.0, pose=_raised(), easing="linear"))
        assert seq.normalized_time(150.0) == pytest.approx(0.5)
        assert not seq.is_finished(10_000.0)
        assert seq.sample(150.0)[0].right_arm.shoulder_pitch == pytest.approx(45.0)


class TestWaveSequence:
    def test_structure(self):
        seq = wave_sequence(Pose(), side="left", waves=2, beat_ms=250)
        assert seq.duration_ms == 1000
        assert len(seq.keyframes) == 5
        assert seq.label == "wave_left"

    def test_alternates_and_returns_to_base(self):
        base = Pose(right_arm=ArmAngles(shoulder_pitch=10.0, elbow_flex=5.0))
        seq = wave_sequence(base, waves=3, beat_ms=300)
        pitches = [k.pose.right_arm.shoulder_pitch for k in seq.keyframes]
        assert pitches == [10.0, 90.0, 10.0, 90.0, 10.0, 90.0, 10.0]
        assert seq.sample(seq.duration_ms)[0] == base

    def test_bad_side(self):
        with pytest.raises(ValueError):
            wave_sequence(Pose(), side="up")
