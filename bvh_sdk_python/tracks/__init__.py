"""
Tracks - skeleton and keyframe-track output for parsed BVH hierarchies.
"""

from .track_builder import (
    AnimationClip,
    Bone,
    QuaternionTrack,
    VectorTrack,
    build_clip,
    build_skeleton,
    flatten,
)

__all__ = [
    "AnimationClip",
    "Bone",
    "QuaternionTrack",
    "VectorTrack",
    "build_clip",
    "build_skeleton",
    "flatten",
]
