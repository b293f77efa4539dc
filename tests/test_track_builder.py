"""Track builder tests: skeleton flattening and per-bone track contents."""

import logging
import math

import numpy as np
import pytest
from scipy.spatial.transform import Rotation as R

from bvh_sdk_python.loader.bvh_parser import parse_bvh_text
from bvh_sdk_python.tracks.track_builder import (
    AnimationClip,
    QuaternionTrack,
    VectorTrack,
    build_clip,
    build_skeleton,
    flatten,
)


@pytest.fixture
def clip(parsed_sample) -> AnimationClip:
    return build_clip(parsed_sample.root)


class TestFlatten:
    def test_preorder_with_end_sites(self, parsed_sample):
        flat = flatten(parsed_sample.root)
        assert flat == parsed_sample.nodes

    def test_single_node(self, single_joint_text):
        motion = parse_bvh_text(single_joint_text)
        assert [n.name for n in flatten(motion.root)] == ["hip", "ENDSITE"]


class TestSkeleton:
    def test_bones_and_parents(self, parsed_sample):
        bones = build_skeleton(parsed_sample.root)
        assert [b.name for b in bones] == ["hip", "spine", "ENDSITE", "leg", "foot", "ENDSITE"]
        assert [b.parent for b in bones] == [-1, 0, 1, 0, 3, 4]
        assert [b.index for b in bones] == list(range(6))

    def test_end_sites_keep_offset(self, parsed_sample):
        bones = build_skeleton(parsed_sample.root)
        end_sites = [b for b in bones if b.is_end_site]
        assert len(end_sites) == 2
        np.testing.assert_allclose(end_sites[0].offset, [0.0, 3.0, 0.0])
        np.testing.assert_allclose(end_sites[1].offset, [0.0, 0.0, 1.0])

    def test_offset_is_copied(self, parsed_sample):
        bones = build_skeleton(parsed_sample.root)
        bones[0].offset[0] = 99.0
        assert parsed_sample.root.offset[0] == 1.0


class TestClip:
    def test_clip_metadata(self, clip):
        assert clip.name == "animation"
        assert clip.duration == pytest.approx(0.5)

    def test_custom_name(self, parsed_sample):
        assert build_clip(parsed_sample.root, name="walk").name == "walk"

    def test_two_tracks_per_animated_bone(self, clip):
        assert len(clip.tracks) == 8
        assert len(clip.position_tracks) == 4
        assert len(clip.rotation_tracks) == 4
        assert [t.bone_name for t in clip.position_tracks] == ["hip", "spine", "leg", "foot"]

    def test_end_sites_have_no_tracks(self, clip):
        assert clip.tracks_for("ENDSITE") == []

    def test_bindings(self, clip):
        pos, rot = clip.tracks_for("hip")
        assert isinstance(pos, VectorTrack)
        assert isinstance(rot, QuaternionTrack)
        assert pos.binding == ".bones[hip].position"
        assert rot.binding == ".bones[hip].quaternion"

    def test_times(self, clip):
        for track in clip.tracks:
            np.testing.assert_allclose(track.times, [0.0, 0.5])

    def test_position_adds_offset_per_sample(self, clip):
        pos, _ = clip.tracks_for("hip")
        assert pos.values.shape == (2, 3)
        np.testing.assert_allclose(pos.values, [[11.0, 22.0, 33.0], [12.0, 23.0, 34.0]])

    def test_position_without_position_channels(self, clip):
        pos, _ = clip.tracks_for("spine")
        np.testing.assert_allclose(pos.values, [[0.0, 5.0, 0.0], [0.0, 5.0, 0.0]])

    def test_rotation_verbatim(self, parsed_sample, clip):
        _, rot = clip.tracks_for("spine")
        spine = parsed_sample.nodes[1]
        assert rot.values.shape == (2, 4)
        for value, kf in zip(rot.values, spine.frames):
            np.testing.assert_array_equal(value, kf.rotation.as_array())

    def test_rotations_match_scipy(self, clip):
        _, rot = clip.tracks_for("leg")
        np.testing.assert_allclose(
            R.from_quat(rot.values[0]).as_matrix(),
            R.from_euler("XYZ", [4.0, 5.0, 6.0], degrees=True).as_matrix(),
            atol=1e-12,
        )

    def test_as_rotation(self, clip):
        _, rot = clip.tracks_for("hip")
        rotations = rot.as_rotation()
        assert len(rotations) == 2
        np.testing.assert_allclose(
            rotations[1].as_euler("ZXY", degrees=True), [90.0, 0.0, 0.0], atol=1e-9
        )

    def test_single_joint_example(self, single_joint_text):
        clip = build_clip(parse_bvh_text(single_joint_text).root)
        _, rot = clip.tracks_for("hip")
        s = math.sqrt(0.5)
        np.testing.assert_allclose(rot.values, [[s, 0.0, 0.0, s]])
        assert clip.duration == 0.0

    def test_no_frames(self, single_joint_text):
        text = single_joint_text.replace("Frames: 1", "Frames: 0").rsplit("\n", 1)[0]
        clip = build_clip(parse_bvh_text(text).root)
        pos, rot = clip.tracks_for("hip")
        assert pos.values.shape == (0, 3)
        assert rot.values.shape == (0, 4)
        assert clip.duration == 0.0
        with pytest.raises(ValueError, match="no samples"):
            rot.as_rotation()


class TestDuplicateNames:
    def test_duplicates_kept_and_flagged(self, sample_text, caplog):
        motion = parse_bvh_text(sample_text.replace("JOINT foot", "JOINT leg"))
        with caplog.at_level(logging.WARNING, logger="bvh_sdk_python"):
            clip = build_clip(motion.root)
        assert "Duplicate bone names" in caplog.text
        assert len(clip.tracks) == 8
        assert len(clip.tracks_for("leg")) == 4
