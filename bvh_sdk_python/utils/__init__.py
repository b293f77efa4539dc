"""
Utility functions for BVH motion processing.

This module provides:
    - quat_utils: Quat value type and batch quaternion math
    - fk_utils: Forward kinematics over built skeletons and clips
"""

from .fk_utils import compute_forward_kinematics, quat_fk
from .quat_utils import Quat, quat_mul_batch, quat_mul_vec_batch

__all__ = [
    "compute_forward_kinematics",
    "quat_fk",
    "Quat",
    "quat_mul_batch",
    "quat_mul_vec_batch",
]
