"""
Track builder - converts a parsed BVH hierarchy into a neutral skeleton
description and per-bone keyframe tracks.

The output is engine agnostic: an ordered bone list with parent links and
bind-pose offsets, plus one position track and one quaternion track for
every bone that carries motion data. Adapters for a specific renderer bind
tracks to joints by `bone_name` (or by the `binding` path string).
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List

import numpy as np
from scipy.spatial.transform import Rotation as R

log = logging.getLogger("bvh_sdk_python")


@dataclass
class Bone:
    """One entry of the flattened skeleton (end sites included)."""

    name: str
    index: int
    parent: int  # preorder index of the parent, -1 for the root
    offset: np.ndarray
    is_end_site: bool = False


@dataclass
class VectorTrack:
    """Time -> local position samples for one bone."""

    bone_name: str
    times: np.ndarray  # (F,)
    values: np.ndarray  # (F, 3)

    @property
    def binding(self):
        return f".bones[{self.bone_name}].position"


@dataclass
class QuaternionTrack:
    """Time -> local rotation samples for one bone, (x, y, z, w)."""

    bone_name: str
    times: np.ndarray  # (F,)
    values: np.ndarray  # (F, 4)

    @property
    def binding(self):
        return f".bones[{self.bone_name}].quaternion"

    def as_rotation(self):
        """
        Return the samples as a scipy Rotation (one rotation per frame).

        Raises:
            ValueError: If the track has no samples
        """
        if len(self.values) == 0:
            raise ValueError(f"Track {self.binding} has no samples")
        return R.from_quat(self.values)


@dataclass
class AnimationClip:
    """Named set of bone tracks."""

    name: str
    duration: float
    tracks: list = field(default_factory=list)

    def tracks_for(self, bone_name):
        """All tracks bound to `bone_name` (more than two if names repeat)."""
        return [t for t in self.tracks if t.bone_name == bone_name]

    @property
    def position_tracks(self) -> List[VectorTrack]:
        return [t for t in self.tracks if isinstance(t, VectorTrack)]

    @property
    def rotation_tracks(self) -> List[QuaternionTrack]:
        return [t for t in self.tracks if isinstance(t, QuaternionTrack)]


def flatten(root):
    """Return every node of the tree in preorder, end sites included."""
    flat = [root]
    for child in root.children:
        flat.extend(flatten(child))
    return flat


def build_skeleton(root):
    """
    Convert the node tree to an ordered bone list.

    Args:
        root: Root Node of a parsed hierarchy

    Returns:
        List of Bone in preorder. Parent links are preorder indices into
        the same list.
    """
    bones = []

    def visit(node, parent):
        index = len(bones)
        bones.append(Bone(
            name=node.name,
            index=index,
            parent=parent,
            offset=np.array(node.offset, dtype=np.float64),
            is_end_site=node.is_end_site,
        ))
        for child in node.children:
            visit(child, index)

    visit(root, -1)
    return bones


def build_clip(root, name="animation"):
    """
    Build position and quaternion tracks from the keyframes in the tree.

    Position samples are the keyframe's local position plus the node's
    offset, added per sample. Rotation samples are the keyframe rotations
    as-is. End sites produce no tracks.

    Args:
        root: Root Node with populated keyframes
        name: Clip name

    Returns:
        AnimationClip with two tracks per non-end-site bone, in preorder
    """
    nodes = [n for n in flatten(root) if not n.is_end_site]

    duplicates = [k for k, v in Counter(n.name for n in nodes).items() if v > 1]
    if duplicates:
        log.warning(
            "Duplicate bone names, track binding by name is ambiguous: %s",
            ", ".join(sorted(duplicates)),
        )

    tracks = []
    duration = 0.0
    for node in nodes:
        count = len(node.frames)
        times = np.empty(count, dtype=np.float64)
        positions = np.empty((count, 3), dtype=np.float64)
        rotations = np.empty((count, 4), dtype=np.float64)

        for j, frame in enumerate(node.frames):
            times[j] = frame.time
            positions[j] = frame.local_position + node.offset
            rotations[j] = frame.rotation.as_array()

        if count:
            duration = max(duration, float(times[-1]))

        tracks.append(VectorTrack(node.name, times, positions))
        tracks.append(QuaternionTrack(node.name, times.copy(), rotations))

    log.debug("Built clip %r: %d tracks, %.3fs", name, len(tracks), duration)
    return AnimationClip(name=name, duration=duration, tracks=tracks)
