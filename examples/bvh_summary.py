#!/usr/bin/env python3
"""
Example: BVH file summary.

This script demonstrates how to use BvhLoader to parse a BVH file into a
skeleton and keyframe tracks, and how to run forward kinematics on the
result.

Usage:
    python bvh_summary.py --bvh_file path/to/motion.bvh --fk

Output:
    - Prints the joint hierarchy and frame statistics
    - Optionally prints global joint positions of the first frame
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from bvh_sdk_python import BvhLoader, BvhParseError, compute_forward_kinematics


def print_hierarchy(skeleton):
    depth = {}
    for bone in skeleton:
        depth[bone.index] = 0 if bone.parent < 0 else depth[bone.parent] + 1
        label = "End Site" if bone.is_end_site else bone.name
        x, y, z = bone.offset
        print(f"  {'  ' * depth[bone.index]}{label}  offset=({x:.3f}, {y:.3f}, {z:.3f})")


def main(argv=None):
    parser = argparse.ArgumentParser(description="BVH file summary")

    parser.add_argument(
        "--bvh_file",
        type=str,
        required=True,
        help="Path to BVH motion file",
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Validate channel names eagerly and reject extra frame values",
    )

    parser.add_argument(
        "--fk",
        action="store_true",
        default=False,
        help="Print global joint positions of the first frame",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Print verbose output",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(name)s] %(levelname)s: %(message)s",
    )

    loader = BvhLoader(strict=args.strict, verbose=args.verbose)

    print(f"Loading BVH file: {args.bvh_file}")
    start_time = time.time()
    try:
        animation = loader.load_text(Path(args.bvh_file).read_text())
    except BvhParseError as e:
        print(f"Failed to parse {args.bvh_file}: {e}")
        return 1
    elapsed = time.time() - start_time

    motion = animation.motion
    print(f"Parsed in {elapsed:.3f}s")
    print(f"Frames: {motion.frame_count}, frame time: {motion.frame_time}s, "
          f"duration: {motion.duration:.3f}s")
    print(f"Joints: {len(motion.joint_names)}, channels per frame: {motion.channel_count}")

    print("\nHierarchy:")
    print_hierarchy(animation.skeleton)

    print(f"\nClip '{animation.clip.name}': {len(animation.clip.tracks)} tracks")

    if args.fk and motion.frame_count > 0:
        _, positions = compute_forward_kinematics(animation.skeleton, animation.clip)
        print("\nGlobal positions (first frame):")
        for bone in animation.skeleton:
            if bone.is_end_site:
                continue
            x, y, z = positions[0, bone.index]
            print(f"  {bone.name}: ({x:.3f}, {y:.3f}, {z:.3f})")

    return 0


if __name__ == "__main__":
    sys.exit(main())
