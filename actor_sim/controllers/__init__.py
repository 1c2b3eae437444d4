"""Planar geometry helpers shared by the follow controllers.

Host attitudes use ``[w, x, y, z]``; transport quaternions use
``(x, y, z, w)``. Angles are radians.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation

# Rotation direction used when the angular error is exactly zero.
ZERO_ERROR_ROTATION_SIGN = -1


def wrap_angle(angle: float) -> float:
    """Wrap ``angle`` into ``(-pi, pi]``."""
    wrapped = math.atan2(math.sin(angle), math.cos(angle))
    if wrapped <= -math.pi:
        wrapped = math.pi
    return wrapped


def rotation_sign(angular_error: float) -> int:
    """Direction to rotate for a signed angular error."""
    if angular_error > 0.0:
        return 1
    if angular_error < 0.0:
        return -1
    return ZERO_ERROR_ROTATION_SIGN


def quaternion_to_yaw(q_xyzw: Sequence[float]) -> float:
    """Yaw of an ``(x, y, z, w)`` quaternion by roll-pitch-yaw extraction.

    Input is not validated: non-unit quaternions are normalized, a zero
    quaternion yields 0.0 and non-finite components yield NaN.
    """
    q = np.asarray(q_xyzw, dtype=float).reshape(4)
    norm = float(np.linalg.norm(q))
    if not np.isfinite(norm):
        return float("nan")
    if norm < 1e-12:
        return 0.0
    return float(Rotation.from_quat(q / norm).as_euler("xyz")[2])


def yaw_to_quaternion(yaw: float) -> tuple[float, float, float, float]:
    """Yaw-only rotation as an ``(x, y, z, w)`` quaternion."""
    x, y, z, w = Rotation.from_euler("xyz", [0.0, 0.0, float(yaw)]).as_quat()
    return (float(x), float(y), float(z), float(w))


def attitude_to_rpy(attitude_quat: np.ndarray) -> np.ndarray:
    """Roll, pitch, yaw of a ``[w, x, y, z]`` attitude."""
    q_wxyz = np.asarray(attitude_quat, dtype=float).reshape(4)
    # scipy stores quaternions as [x, y, z, w].
    q_xyzw = np.array([q_wxyz[1], q_wxyz[2], q_wxyz[3], q_wxyz[0]], dtype=float)
    return Rotation.from_quat(q_xyzw).as_euler("xyz")


def rpy_to_attitude(roll: float, pitch: float, yaw: float) -> np.ndarray:
    """``[w, x, y, z]`` attitude from roll, pitch, yaw."""
    x, y, z, w = Rotation.from_euler("xyz", [roll, pitch, yaw]).as_quat()
    return np.array([w, x, y, z], dtype=float)


def planar_distance(x0: float, y0: float, x1: float, y1: float) -> float:
    return math.hypot(x1 - x0, y1 - y0)


__all__ = [
    "ZERO_ERROR_ROTATION_SIGN",
    "wrap_angle",
    "rotation_sign",
    "quaternion_to_yaw",
    "yaw_to_quaternion",
    "attitude_to_rpy",
    "rpy_to_attitude",
    "planar_distance",
]
