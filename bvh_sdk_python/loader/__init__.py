"""
Loader - BVH text parsing.

This package provides:
    - bvh_parser: HIERARCHY / MOTION grammar and per-frame channel reading
    - bvh_loader: BvhLoader, the configurable text -> skeleton + clip entry point
    - types: Node, Keyframe and BvhMotion data model
    - errors: BvhParseError and ErrorKind

Example usage:
    from bvh_sdk_python.loader import parse_bvh_text

    motion = parse_bvh_text(text)
    hip = motion.root
    print(hip.name, len(hip.frames), hip.frames[0].rotation)
"""

from .bvh_loader import BvhAnimation, BvhLoader, load_bvh_text
from .bvh_parser import parse_bvh, parse_bvh_text
from .errors import BvhParseError, ErrorKind
from .types import BvhMotion, Keyframe, Node, NodeKind

__all__ = [
    "BvhAnimation",
    "BvhLoader",
    "load_bvh_text",
    "parse_bvh",
    "parse_bvh_text",
    "BvhParseError",
    "ErrorKind",
    "BvhMotion",
    "Keyframe",
    "Node",
    "NodeKind",
]
