"""Tests for the pose value type and the scene container."""

import numpy as np
import pytest

from motion_engine.model.pose import JOINT_NAMES, NUM_JOINTS, ArmAngles, Pose, Vector3, neutral_pose
from motion_engine.model.scene import Actor, PickableObject, SceneState, ShapeType


class TestVector3:
    def test_array_roundtrip(self):
        v = Vector3(1.0, -2.0, 3.5)
        np.testing.assert_array_equal(v.to_array(), [1.0, -2.0, 3.5])
        assert Vector3.from_array(v.to_array()) == v

    def test_from_array_wrong_shape(self):
        with pytest.raises(ValueError, match="3 components"):
            Vector3.from_array([1.0, 2.0])

    def test_planar_distance_ignores_height(self):
        a = Vector3(0.0, -0.35, 0.0)
        b = Vector3(3.0, -1.5, 4.0)
        assert a.planar_distance_to(b) == pytest.approx(5.0)

    def test_with_y(self):
        assert Vector3(1.0, 2.0, 3.0).with_y(-0.35) == Vector3(1.0, -0.35, 3.0)


class TestPose:
    def test_neutral_is_all_zero(self):
        arr = neutral_pose().to_array()
        assert arr.shape == (NUM_JOINTS,)
        assert np.all(arr == 0.0)

    def test_array_order_matches_joint_names(self):
        pose = Pose(right_arm=ArmAngles(elbow_flex=42.0))
        arr = pose.to_array()
        assert arr[JOINT_NAMES.index("right_arm.elbow_flex")] == 42.0

    def test_from_array_wrong_shape(self):
        with pytest.raises(ValueError):
            Pose.from_array(np.zeros(5))

    def test_get_and_with_joint(self):
        pose = neutral_pose().with_joint("left_leg.knee_flex", 30.0)
        assert pose.get("left_leg.knee_flex") == 30.0
        assert pose.get("right_leg.knee_flex") == 0.0

    def test_with_joint_unknown_name(self):
        with pytest.raises(KeyError):
            neutral_pose().with_joint("tail.wag", 10.0)

    def test_with_torso_keeps_limbs(self):
        pose = Pose(left_arm=ArmAngles(shoulder_pitch=20.0)).with_torso(pitch=15.0)
        assert pose.torso.pitch == 15.0
        assert pose.torso.roll == 0.0
        assert pose.left_arm.shoulder_pitch == 20.0

    def test_from_partial_dict_fills_missing_with_zero(self):
        pose = Pose.from_dict({"left_arm": {"shoulder_pitch": 45}, "torso": {"bogus": 1}})
        assert pose.left_arm.shoulder_pitch == 45.0
        assert pose.left_arm.elbow_flex == 0.0
        assert pose.right_leg.knee_flex == 0.0
        assert pose.torso == neutral_pose().torso

    def test_dict_roundtrip(self):
        pose = Pose.from_array(np.arange(NUM_JOINTS, dtype=float))
        assert Pose.from_dict(pose.to_dict()) == pose


class TestSceneState:
    def _scene(self):
        scene = SceneState()
        scene.add_actor(Actor(id="a1", position=Vector3(2.0, -0.35, 1.0)))
        scene.add_object(PickableObject("o1", "Red Box", ShapeType.BOX, Vector3(1.0, -1.5, 0.0), "#ef4444"))
        scene.add_object(PickableObject("o2", "Blue Ball", ShapeType.SPHERE, Vector3(0.0, -1.5, 0.0), "#3b82f6"))
        return scene

    def test_get_missing_actor_raises(self):
        with pytest.raises(KeyError):
            SceneState().get_actor("nobody")

    def test_update_actor_replaces_record(self):
        scene = self._scene()
        before = scene.get_actor("a1")
        after = scene.update_actor("a1", heading=90.0)
        assert after.heading == 90.0
        assert before.heading == 0.0
        assert scene.get_actor("a1") is after

    def test_attach_sets_both_sides(self):
        scene = self._scene()
        assert scene.attach("a1", "o1") is True
        assert scene.get_actor("a1").holding_object_id == "o1"
        assert scene.get_object("o1").is_attached

    def test_attach_refused_while_holding(self):
        scene = self._scene()
        scene.attach("a1", "o1")
        assert scene.attach("a1", "o2") is False
        assert scene.get_actor("a1").holding_object_id == "o1"
        assert not scene.get_object("o2").is_attached

    def test_detach_places_object_under_actor(self):
        scene = self._scene()
        scene.attach("a1", "o1")
        released = scene.detach("a1", ground_y=-1.5)
        assert released == "o1"
        obj = scene.get_object("o1")
        assert not obj.is_attached
        assert obj.position == Vector3(2.0, -1.5, 1.0)
        assert not scene.get_actor("a1").is_holding

    def test_detach_when_empty_handed(self):
        assert self._scene().detach("a1", ground_y=-1.5) is None

    def test_snapshot_message(self):
        scene = self._scene()
        scene.attach("a1", "o2")
        snap = scene.snapshot()
        assert [a.id for a in snap.actors] == ["a1"]
        assert snap.actors[0].holding_object_id == "o2"
        assert snap.actors[0].pose["left_arm"]["shoulder_pitch"] == 0.0
        balls = [o for o in snap.objects if o.id == "o2"]
        assert balls[0].is_attached
        assert balls[0].shape == "sphere"
