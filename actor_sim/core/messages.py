"""Transport records exchanged with the messaging layer.

Field layout follows the usual robotics message conventions: quaternions are
``(x, y, z, w)`` on the wire.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class VelocityCommand:
    linear_x: float = 0.0
    angular_z: float = 0.0


@dataclass(frozen=True)
class PoseStamped:
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    orientation: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
    frame_id: str = "map"


@dataclass(frozen=True)
class PathCommand:
    poses: tuple[PoseStamped, ...] = ()
    frame_id: str = "map"


@dataclass(frozen=True)
class AbortCommand:
    data: bool = False


@dataclass(frozen=True)
class Odometry:
    """Odometry record published once per tick."""

    frame_id: str
    child_frame_id: str
    stamp: float
    position: tuple[float, float, float]
    orientation: tuple[float, float, float, float]
    linear: tuple[float, float, float] = (0.0, 0.0, 0.0)
    angular: tuple[float, float, float] = (0.0, 0.0, 0.0)
