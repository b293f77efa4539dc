"""
BVH SDK Python - BVH motion capture parsing to skeleton + keyframe tracks.

This package parses BVH text (a joint hierarchy followed by per-frame
channel values) and converts it to an engine-neutral skeleton description
and per-bone position / rotation tracks.

Main classes:
    - BvhLoader: Parses BVH text and builds the skeleton and clip
    - Quat: Immutable (x, y, z, w) quaternion used for joint rotations
    - AnimationClip: Position and quaternion tracks, one pair per bone

Example usage:
    from bvh_sdk_python import BvhLoader, compute_forward_kinematics

    loader = BvhLoader()
    animation = loader.load_text(text)

    for bone in animation.skeleton:
        print(bone.name, bone.parent, bone.offset)

    for track in animation.clip.tracks:
        # track.times: (F,), track.values: (F, 3) or (F, 4) xyzw
        print(track.binding, track.values.shape)

    # Global transforms, shape (F, J, 4) and (F, J, 3)
    rotations, positions = compute_forward_kinematics(
        animation.skeleton, animation.clip)
"""

import logging

from .loader import (
    BvhAnimation,
    BvhLoader,
    BvhMotion,
    BvhParseError,
    ErrorKind,
    Keyframe,
    Node,
    NodeKind,
    load_bvh_text,
    parse_bvh,
    parse_bvh_text,
)
from .tracks import (
    AnimationClip,
    Bone,
    QuaternionTrack,
    VectorTrack,
    build_clip,
    build_skeleton,
    flatten,
)
from .utils import Quat, compute_forward_kinematics

log = logging.getLogger("bvh_sdk_python")
log.addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "BvhAnimation",
    "BvhLoader",
    "BvhMotion",
    "BvhParseError",
    "ErrorKind",
    "Keyframe",
    "Node",
    "NodeKind",
    "load_bvh_text",
    "parse_bvh",
    "parse_bvh_text",
    "AnimationClip",
    "Bone",
    "QuaternionTrack",
    "VectorTrack",
    "build_clip",
    "build_skeleton",
    "flatten",
    "Quat",
    "compute_forward_kinematics",
]
