"""
BVH text parser - reads the HIERARCHY and MOTION sections.

The hierarchy is parsed by recursive descent. Every node is appended to a
flat list the moment its declaration is read, so the list is the preorder
of the tree by construction. Frame lines are distributed over that same
list: node by node, then channel by channel in declared order.

No coordinate conversion - raw BVH values are returned.
"""

import logging
import math

import numpy as np

from ..utils.quat_utils import Quat
from .errors import BvhParseError, ErrorKind
from .types import (
    CHANNEL_TYPES,
    END_SITE_NAME,
    BvhMotion,
    Keyframe,
    Node,
    NodeKind,
)

log = logging.getLogger("bvh_sdk_python")

_POSITION_AXIS = {"Xposition": 0, "Yposition": 1, "Zposition": 2}
_ROTATION_AXIS = {
    "Xrotation": (1.0, 0.0, 0.0),
    "Yrotation": (0.0, 1.0, 0.0),
    "Zrotation": (0.0, 0.0, 1.0),
}


class LineCursor:
    """
    Explicit read position over an immutable list of lines.

    Lines are trimmed. `next_line` skips blank lines and raises an
    UNEXPECTED_END error naming what was expected when input runs out;
    `next_raw_line` is used for frame data, where a blank line is a frame
    with no values.
    """

    def __init__(self, lines):
        self.lines = tuple(line.strip() for line in lines)
        self.pos = 0

    @property
    def line_number(self):
        """1-based number of the line returned last."""
        return self.pos

    def _skip_blank(self):
        while self.pos < len(self.lines) and not self.lines[self.pos]:
            self.pos += 1

    def has_more(self):
        self._skip_blank()
        return self.pos < len(self.lines)

    def next_raw_line(self):
        """Return the next line without skipping blanks, None when exhausted."""
        if self.pos >= len(self.lines):
            return None
        line = self.lines[self.pos]
        self.pos += 1
        return line

    def next_line(self, expected):
        self._skip_blank()
        if self.pos >= len(self.lines):
            raise BvhParseError(
                ErrorKind.UNEXPECTED_END,
                f"Unexpected end of input, expected {expected}",
                self.pos or None,
            )
        line = self.lines[self.pos]
        self.pos += 1
        return line


def parse_bvh(lines, strict=False):
    """
    Parse BVH lines into a joint tree with per-frame keyframes.

    Args:
        lines: Sequence of text lines (trailing newlines are fine)
        strict: Validate channel names at declaration time and reject
            frame lines carrying more values than declared channels

    Returns:
        BvhMotion with the root node, the discovery-order node list and
        the frame headers

    Raises:
        BvhParseError: On any grammar or data violation. No partial
            result is returned.
    """
    cursor = LineCursor(lines)
    root, nodes = parse_hierarchy(cursor, strict=strict)
    frame_count, frame_time = parse_motion(cursor, nodes, strict=strict)

    if cursor.has_more():
        log.debug("Ignoring %d trailing line(s) after frame data",
                  len(cursor.lines) - cursor.pos)

    motion = BvhMotion(
        root=root,
        nodes=nodes,
        frame_count=frame_count,
        frame_time=frame_time,
    )
    log.info(
        "BVH parsed: %d nodes (%d channels), %d frames at %.6fs",
        len(nodes),
        motion.channel_count,
        frame_count,
        frame_time,
    )
    return motion


def parse_bvh_text(text, strict=False):
    """Parse BVH from a single string. See parse_bvh."""
    return parse_bvh(text.splitlines(), strict=strict)


def parse_hierarchy(cursor, strict=False):
    """
    Parse the HIERARCHY section.

    Returns:
        Tuple of (root Node, list of all nodes in discovery order)
    """
    line = cursor.next_line("HIERARCHY")
    if line.upper() != "HIERARCHY":
        raise BvhParseError(
            ErrorKind.MISSING_KEYWORD,
            f"HIERARCHY expected, got: {line!r}",
            cursor.line_number,
        )

    nodes = []
    root = read_node(cursor, cursor.next_line("ROOT declaration"), nodes,
                     strict=strict)
    log.debug("Hierarchy parsed: %d nodes, root %r", len(nodes), root.name)
    return root, nodes


def _parse_declaration(declaration, parent, line_number):
    """Split a declaration line into (kind, name)."""
    tokens = declaration.split()
    if len(tokens) == 2 and tokens[0].upper() == "END" and tokens[1].upper() == "SITE":
        kind, name = NodeKind.END_SITE, END_SITE_NAME
    elif len(tokens) == 2 and tokens[0].upper() in ("ROOT", "JOINT"):
        kind, name = NodeKind(tokens[0].upper()), tokens[1]
    else:
        raise BvhParseError(
            ErrorKind.MALFORMED_DECLARATION,
            f"Expected node type & name, got: {declaration!r}",
            line_number,
        )

    if parent < 0 and kind is not NodeKind.ROOT:
        raise BvhParseError(
            ErrorKind.MALFORMED_DECLARATION,
            f"Expected ROOT declaration, got: {declaration!r}",
            line_number,
        )
    if parent >= 0 and kind is NodeKind.ROOT:
        raise BvhParseError(
            ErrorKind.MALFORMED_DECLARATION,
            f"ROOT is only allowed at the top of the hierarchy: {declaration!r}",
            line_number,
        )
    return kind, name


def _parse_offset(line, line_number):
    tokens = line.split()
    if tokens[0].upper() != "OFFSET":
        raise BvhParseError(
            ErrorKind.INVALID_OFFSET,
            f"Expected OFFSET, but got: {tokens[0]!r}",
            line_number,
        )
    if len(tokens) != 4:
        raise BvhParseError(
            ErrorKind.INVALID_OFFSET,
            f"OFFSET: Invalid number of values ({len(tokens) - 1})",
            line_number,
        )
    try:
        offset = np.array([float(t) for t in tokens[1:]], dtype=np.float64)
    except ValueError:
        raise BvhParseError(
            ErrorKind.INVALID_OFFSET,
            f"OFFSET: Invalid values: {line!r}",
            line_number,
        ) from None
    if not np.all(np.isfinite(offset)):
        raise BvhParseError(
            ErrorKind.INVALID_OFFSET,
            f"OFFSET: Invalid values: {line!r}",
            line_number,
        )
    return offset


def _parse_channels(line, line_number, strict):
    tokens = line.split()
    if tokens[0].upper() != "CHANNELS":
        raise BvhParseError(
            ErrorKind.MISSING_CHANNELS,
            f"Expected CHANNELS definition, got: {line!r}",
            line_number,
        )
    try:
        count = int(tokens[1])
    except (IndexError, ValueError):
        raise BvhParseError(
            ErrorKind.INVALID_CHANNELS,
            f"CHANNELS: Invalid channel count: {line!r}",
            line_number,
        ) from None
    if count < 0:
        raise BvhParseError(
            ErrorKind.INVALID_CHANNELS,
            f"CHANNELS: Negative channel count: {count}",
            line_number,
        )

    channels = tokens[2:2 + count]
    if len(channels) < count:
        raise BvhParseError(
            ErrorKind.INVALID_CHANNELS,
            f"CHANNELS: Declared {count} channels, found {len(channels)}",
            line_number,
        )
    if len(tokens) - 2 > count:
        if strict:
            raise BvhParseError(
                ErrorKind.INVALID_CHANNELS,
                f"CHANNELS: Declared {count} channels, found {len(tokens) - 2}",
                line_number,
            )
        log.warning("Line %d: ignoring %d channel name(s) past the declared %d",
                    line_number, len(tokens) - 2 - count, count)

    if strict:
        for channel in channels:
            if channel not in CHANNEL_TYPES:
                raise BvhParseError(
                    ErrorKind.INVALID_CHANNEL_TYPE,
                    f"invalid channel type: {channel!r}",
                    line_number,
                )
    return channels


def read_node(cursor, declaration, nodes, parent=-1, strict=False):
    """
    Recursively parse one node definition and its children.

    Args:
        cursor: LineCursor positioned just after `declaration`
        declaration: Line holding the node type and name, e.g. "JOINT hip"
        nodes: Flat list collecting every node in discovery order
        parent: Discovery index of the parent node, -1 for the root
        strict: Validate channel names eagerly

    Returns:
        The parsed Node, including its children
    """
    kind, name = _parse_declaration(declaration, parent, cursor.line_number)
    node = Node(name=name, kind=kind, index=len(nodes), parent=parent)
    nodes.append(node)

    # opening bracket
    if cursor.next_line("'{'") != "{":
        raise BvhParseError(
            ErrorKind.MISSING_BRACE,
            f"Expected opening {{ after {declaration!r}",
            cursor.line_number,
        )

    node.offset = _parse_offset(cursor.next_line("OFFSET"), cursor.line_number)

    if node.is_end_site:
        # end sites carry an offset only
        if cursor.next_line("'}'") != "}":
            raise BvhParseError(
                ErrorKind.MISSING_BRACE,
                "Expected closing } after End Site OFFSET",
                cursor.line_number,
            )
        return node

    node.channels = _parse_channels(
        cursor.next_line("CHANNELS"), cursor.line_number, strict
    )

    while True:
        line = cursor.next_line(f"'}}' closing {name!r}")
        if line == "}":
            return node
        node.children.append(
            read_node(cursor, line, nodes, parent=node.index, strict=strict)
        )


def parse_motion(cursor, nodes, strict=False):
    """
    Parse the MOTION section and populate keyframes on `nodes`.

    Returns:
        Tuple of (frame_count, frame_time)
    """
    line = cursor.next_line("MOTION")
    if line.upper() != "MOTION":
        raise BvhParseError(
            ErrorKind.MISSING_KEYWORD,
            f"MOTION expected, got: {line!r}",
            cursor.line_number,
        )

    # number of frames
    tokens = cursor.next_line("Frames header").split()
    try:
        frame_count = int(tokens[1])
    except (IndexError, ValueError):
        raise BvhParseError(
            ErrorKind.INVALID_HEADER,
            "Failed to read number of frames.",
            cursor.line_number,
        ) from None
    if frame_count < 0:
        raise BvhParseError(
            ErrorKind.INVALID_HEADER,
            f"Negative number of frames: {frame_count}",
            cursor.line_number,
        )

    # frame time
    tokens = cursor.next_line("Frame Time header").split()
    try:
        frame_time = float(tokens[2])
    except (IndexError, ValueError):
        raise BvhParseError(
            ErrorKind.INVALID_HEADER,
            "Failed to read frame time.",
            cursor.line_number,
        ) from None
    if not math.isfinite(frame_time) or frame_time < 0:
        raise BvhParseError(
            ErrorKind.INVALID_HEADER,
            f"Invalid frame time: {tokens[2]!r}",
            cursor.line_number,
        )

    log.debug("Reading %d frames (frame time %s)", frame_count, frame_time)
    has_channels = any(n.channels for n in nodes)
    for i in range(frame_count):
        line = cursor.next_raw_line()
        if line is None:
            if has_channels:
                raise BvhParseError(
                    ErrorKind.UNEXPECTED_END,
                    f"Expected {frame_count} frames, got {i}",
                    cursor.line_number,
                )
            # empty frames at the end of the input leave no lines behind
            line = ""
        read_frame_data(line.split(), i * frame_time, nodes,
                        strict=strict, line_number=cursor.line_number)

    return frame_count, frame_time


def _take_value(tokens, pos, node, channel, line_number):
    if pos >= len(tokens):
        raise BvhParseError(
            ErrorKind.UNEXPECTED_END,
            f"Frame data ended at value {pos} while reading "
            f"{node.name}.{channel}",
            line_number,
        )
    try:
        value = float(tokens[pos])
    except ValueError:
        value = math.nan
    if not math.isfinite(value):
        raise BvhParseError(
            ErrorKind.INVALID_CHANNEL_VALUE,
            f"Invalid value {tokens[pos]!r} for {node.name}.{channel}",
            line_number,
        )
    return value


def read_frame_data(tokens, frame_time, nodes, strict=False, line_number=None):
    """
    Distribute one frame's values over the hierarchy.

    Visits `nodes` in discovery order and appends exactly one Keyframe to
    every non-end-site node, consuming values left to right in declared
    channel order. Rotation channels are in degrees and are composed as
    ``rotation = rotation * increment``.

    Args:
        tokens: Whitespace-split values of one frame line
        frame_time: Playback time of this keyframe
        nodes: Node list in discovery order (from parse_hierarchy)
        strict: Reject leftover values instead of logging them
        line_number: Source line, used in error messages

    Raises:
        BvhParseError: On a bad channel or value. No node is modified.
    """
    pos = 0
    keyframes = []
    for node in nodes:
        if node.is_end_site:  # end sites have no motion data
            continue

        position = np.zeros(3)
        rotation = Quat.identity()
        for channel in node.channels:
            if channel in _POSITION_AXIS:
                position[_POSITION_AXIS[channel]] = _take_value(
                    tokens, pos, node, channel, line_number)
            elif channel in _ROTATION_AXIS:
                angle = math.radians(
                    _take_value(tokens, pos, node, channel, line_number))
                rotation = rotation * Quat.from_axis_angle(
                    _ROTATION_AXIS[channel], angle)
            else:
                raise BvhParseError(
                    ErrorKind.INVALID_CHANNEL_TYPE,
                    f"invalid channel type: {channel!r} on {node.name!r}",
                    line_number,
                )
            pos += 1

        keyframes.append(
            (node, Keyframe(time=frame_time, local_position=position, rotation=rotation))
        )

    if pos < len(tokens):
        if strict:
            raise BvhParseError(
                ErrorKind.EXTRA_TOKENS,
                f"Frame has {len(tokens)} values, expected {pos}",
                line_number,
            )
        log.warning("Line %s: ignoring %d extra frame value(s)",
                    line_number, len(tokens) - pos)

    # nodes only change once the whole line has been read
    for node, keyframe in keyframes:
        node.frames.append(keyframe)
