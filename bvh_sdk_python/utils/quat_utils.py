"""
Quaternion utility functions for BVH keyframe data.

All quaternions are in (x, y, z, w) format, the layout BVH keyframe tracks
are emitted in and the one scipy's Rotation uses by default.
"""

import math
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Quat:
    """
    Minimal immutable quaternion used to accumulate joint rotations.

    Multiplication returns a new value, so composition order is always
    visible at the call site: ``rotation = rotation * increment``.
    """

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    @classmethod
    def identity(cls):
        """Return the identity rotation (0, 0, 0, 1)."""
        return cls(0.0, 0.0, 0.0, 1.0)

    @classmethod
    def from_axis_angle(cls, axis, angle):
        """
        Build a rotation of `angle` radians about `axis`.

        Args:
            axis: (near-)unit rotation axis (ax, ay, az)
            angle: Rotation angle in radians

        Returns:
            Quat (x, y, z, w)
        """
        half = angle * 0.5
        s = math.sin(half)
        return cls(axis[0] * s, axis[1] * s, axis[2] * s, math.cos(half))

    def multiply(self, other):
        """
        Hamilton product ``self * other``.

        Not commutative: ``a.multiply(b)`` applies ``b`` in the frame
        already rotated by ``a``.
        """
        ax, ay, az, aw = self.x, self.y, self.z, self.w
        bx, by, bz, bw = other.x, other.y, other.z, other.w
        return Quat(
            ax * bw + aw * bx + ay * bz - az * by,
            ay * bw + aw * by + az * bx - ax * bz,
            az * bw + aw * bz + ax * by - ay * bx,
            aw * bw - ax * bx - ay * by - az * bz,
        )

    def __mul__(self, other):
        if not isinstance(other, Quat):
            return NotImplemented
        return self.multiply(other)

    def as_tuple(self):
        return (self.x, self.y, self.z, self.w)

    def as_array(self):
        """Return the quaternion as a numpy array (x, y, z, w)."""
        return np.array([self.x, self.y, self.z, self.w], dtype=np.float64)


# Batch quaternion operations for forward kinematics

def quat_mul_batch(a, b):
    """
    Performs quaternion multiplication on arrays of quaternions.

    Args:
        a: tensor of quaternions of shape (..., 4) in (x, y, z, w) format
        b: tensor of quaternions of shape (..., 4) in (x, y, z, w) format

    Returns:
        The resulting quaternions ``a * b``
    """
    ax, ay, az, aw = a[..., 0:1], a[..., 1:2], a[..., 2:3], a[..., 3:4]
    bx, by, bz, bw = b[..., 0:1], b[..., 1:2], b[..., 2:3], b[..., 3:4]

    res = np.concatenate([
        ax * bw + aw * bx + ay * bz - az * by,
        ay * bw + aw * by + az * bx - ax * bz,
        az * bw + aw * bz + ax * by - ay * bx,
        aw * bw - ax * bx - ay * by - az * bz], axis=-1)

    return res


def quat_mul_vec_batch(q, v):
    """
    Rotates an array of 3D vectors by an array of quaternions.

    Args:
        q: tensor of quaternions of shape (..., 4) in (x, y, z, w) format
        v: tensor of vectors of shape (..., 3)

    Returns:
        The resulting array of rotated vectors
    """
    t = 2.0 * np.cross(q[..., :3], v)
    res = v + q[..., 3][..., np.newaxis] * t + np.cross(q[..., :3], t)
    return res
