"""
BVH data model - joint tree, per-frame keyframes and the parse result.

Values are stored as read from the file (BVH units, degrees already
converted into quaternions). No coordinate-system conversion is applied.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List

import numpy as np

from ..utils.quat_utils import Quat

END_SITE_NAME = "ENDSITE"

POSITION_CHANNELS = ("Xposition", "Yposition", "Zposition")
ROTATION_CHANNELS = ("Xrotation", "Yrotation", "Zrotation")
CHANNEL_TYPES = POSITION_CHANNELS + ROTATION_CHANNELS


class NodeKind(Enum):
    ROOT = "ROOT"
    JOINT = "JOINT"
    END_SITE = "END_SITE"


@dataclass(eq=False)
class Keyframe:
    """One timestamped sample of a node's local position and rotation."""

    time: float
    local_position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: Quat = field(default_factory=Quat.identity)


@dataclass(eq=False)
class Node:
    """A skeleton joint or end marker.

    `index` is the node's position in discovery (preorder) order and
    `parent` the index of its parent, -1 for the root.
    """

    name: str
    kind: NodeKind
    index: int
    parent: int = -1
    offset: np.ndarray = field(default_factory=lambda: np.zeros(3))
    channels: List[str] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)
    frames: List[Keyframe] = field(default_factory=list)

    @property
    def is_end_site(self):
        return self.kind is NodeKind.END_SITE


@dataclass
class BvhMotion:
    """Parsed BVH hierarchy with populated keyframes."""

    root: Node
    nodes: List[Node]  # discovery order, shared with the frame reader
    frame_count: int
    frame_time: float

    @property
    def channel_count(self) -> int:
        """Number of values expected on each frame line."""
        return sum(len(n.channels) for n in self.nodes if not n.is_end_site)

    @property
    def duration(self) -> float:
        return self.frame_count * self.frame_time

    @property
    def joint_names(self) -> List[str]:
        return [n.name for n in self.nodes if not n.is_end_site]
