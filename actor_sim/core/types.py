"""Core datatypes for the actor command plugin."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import numpy as np

WALKING_ANIMATION = "walking"
STANDING_ANIMATION = "standing"


class FollowMode(str, Enum):
    """Static following behavior of one actor instance."""

    VELOCITY = "velocity"
    PATH = "path"


@dataclass
class ActorPose:
    """Host-side actor pose.

    Quaternion convention is ``[w, x, y, z]``.
    """

    position: np.ndarray
    attitude_quat: np.ndarray

    def copy(self) -> ActorPose:
        return ActorPose(
            position=np.asarray(self.position, dtype=float).copy(),
            attitude_quat=np.asarray(self.attitude_quat, dtype=float).copy(),
        )


@dataclass(frozen=True)
class Pose2D:
    """Planar pose used by the follow controllers.

    ``heading`` is in the model frame, i.e. it includes the default rotation.
    """

    x: float
    y: float
    heading: float


@dataclass(frozen=True)
class Waypoint:
    """Single planar waypoint."""

    x: float
    y: float
    yaw: float = 0.0


@dataclass(frozen=True)
class VelocitySample:
    """Velocity request: speed along the facing direction and yaw rate."""

    linear: float = 0.0
    angular: float = 0.0


@dataclass(frozen=True)
class Twist:
    linear_x: float = 0.0
    linear_y: float = 0.0
    angular_z: float = 0.0


@dataclass(frozen=True)
class ControllerOutput:
    """Result of one controller tick."""

    pose: Pose2D
    twist: Twist
    clip: str
    commanded_motion: bool


@dataclass(frozen=True)
class UpdateInfo:
    """Per-step information handed to world-update callbacks."""

    sim_time: float
    step: int = 0


@dataclass
class TrajectoryLog:
    """Scenario outputs collected by the runner."""

    positions: np.ndarray
    headings: np.ndarray
    clips: list[str]
    odometry: list[Any]
    final_waypoint_index: int
    final_time: float
    script_time: float
    follow_mode: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
