"""
BvhLoader - configurable entry point from BVH text to skeleton + tracks.
"""

import logging
from dataclasses import dataclass
from typing import List

from ..tracks.track_builder import AnimationClip, Bone, build_clip, build_skeleton
from .bvh_parser import parse_bvh
from .types import BvhMotion

log = logging.getLogger("bvh_sdk_python")


@dataclass
class BvhAnimation:
    """Everything produced from one BVH document."""

    motion: BvhMotion  # parsed node tree with keyframes
    skeleton: List[Bone]
    clip: AnimationClip


class BvhLoader:
    """
    Parses BVH text and converts it to a skeleton and an animation clip.

    Example usage:
        loader = BvhLoader(strict=True)
        animation = loader.load_text(text)
        for track in animation.clip.tracks:
            print(track.binding, track.values.shape)
    """

    def __init__(
        self,
        strict: bool = False,
        clip_name: str = "animation",
        verbose: bool = False,
    ):
        """
        Initialize the loader.

        Args:
            strict: Validate channel names while parsing the hierarchy and
                reject frame lines with more values than declared channels
            clip_name: Name given to the produced AnimationClip
            verbose: Log parser details at DEBUG level while loading; the
                logger level is restored afterwards
        """
        if not isinstance(clip_name, str) or not clip_name:
            raise ValueError(f"clip_name must be a non-empty string, got {clip_name!r}")

        self.strict = bool(strict)
        self.clip_name = clip_name
        self.verbose = verbose

    def load_lines(self, lines):
        """
        Load BVH from a sequence of lines.

        Returns:
            BvhAnimation

        Raises:
            BvhParseError: If the input is not valid BVH
        """
        previous = log.level
        if self.verbose:
            log.setLevel(logging.DEBUG)
        try:
            motion = parse_bvh(lines, strict=self.strict)
            skeleton = build_skeleton(motion.root)
            clip = build_clip(motion.root, name=self.clip_name)
        finally:
            log.setLevel(previous)
        return BvhAnimation(motion=motion, skeleton=skeleton, clip=clip)

    def load_text(self, text):
        """Load BVH from a string. See load_lines."""
        return self.load_lines(text.splitlines())


def load_bvh_text(text, strict=False, clip_name="animation"):
    """
    Load BVH text with a one-off BvhLoader.

    Args:
        text: Complete BVH document
        strict: See BvhLoader
        clip_name: See BvhLoader

    Returns:
        BvhAnimation
    """
    return BvhLoader(strict=strict, clip_name=clip_name).load_text(text)
