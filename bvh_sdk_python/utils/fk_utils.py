"""
Forward kinematics utilities for parsed BVH animation.

Converts the local per-bone tracks of an AnimationClip into global
(skeleton-space) rotations and positions for every frame.
"""

import numpy as np

from .quat_utils import quat_mul_batch, quat_mul_vec_batch


def local_transforms(skeleton, clip):
    """
    Stack the clip's local tracks into per-frame arrays.

    Tracks are matched to bones by preorder position rather than by name,
    so skeletons with repeated joint names are handled. End sites get
    their offset as local position and the identity rotation.

    Args:
        skeleton: List of Bone (from build_skeleton)
        clip: AnimationClip (from build_clip) built from the same tree

    Returns:
        Tuple of (local rotations (F, J, 4) xyzw, local positions (F, J, 3))
    """
    animated = [b for b in skeleton if not b.is_end_site]
    positions = clip.position_tracks
    rotations = clip.rotation_tracks
    if len(positions) != len(animated) or len(rotations) != len(animated):
        raise ValueError(
            f"Clip has {len(positions)} position / {len(rotations)} rotation "
            f"tracks for {len(animated)} animated bones"
        )

    num_frames = len(positions[0].times) if positions else 0
    num_bones = len(skeleton)

    lrot = np.zeros((num_frames, num_bones, 4))
    lrot[..., 3] = 1.0
    lpos = np.zeros((num_frames, num_bones, 3))
    for bone in skeleton:
        lpos[:, bone.index] = bone.offset

    for bone, pos_track, rot_track in zip(animated, positions, rotations):
        lpos[:, bone.index] = pos_track.values
        lrot[:, bone.index] = rot_track.values

    return lrot, lpos


def quat_fk(lrot, lpos, parents):
    """
    Performs Forward Kinematics (FK) on local quaternions and local positions
    to retrieve global representations.

    Args:
        lrot: tensor of local quaternions with shape (..., Nb of joints, 4) in (x, y, z, w) format
        lpos: tensor of local positions with shape (..., Nb of joints, 3)
        parents: list of parent indices, parents always precede children

    Returns:
        tuple of tensors of global quaternion, global positions
    """
    gp, gr = [lpos[..., :1, :]], [lrot[..., :1, :]]
    for i in range(1, len(parents)):
        gp.append(quat_mul_vec_batch(gr[parents[i]], lpos[..., i:i+1, :]) + gp[parents[i]])
        gr.append(quat_mul_batch(gr[parents[i]], lrot[..., i:i+1, :]))

    res = np.concatenate(gr, axis=-2), np.concatenate(gp, axis=-2)
    return res


def compute_forward_kinematics(skeleton, clip):
    """
    Compute global transforms of every bone for every frame.

    The root's global transform is its local transform. Each child composes
    ``parent_rot * local_rot`` and ``parent_pos + rotate(parent_rot, local_pos)``.

    Args:
        skeleton: List of Bone in preorder (from build_skeleton)
        clip: AnimationClip built from the same hierarchy

    Returns:
        Tuple of (global rotations (F, J, 4) xyzw, global positions (F, J, 3))
    """
    lrot, lpos = local_transforms(skeleton, clip)
    parents = [b.parent for b in skeleton]
    return quat_fk(lrot, lpos, parents)
