"""Abstract interfaces for follow controllers, actor hosts, and transports."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Iterable

from .config import ActorPluginConfig
from .types import ActorPose, ControllerOutput, Pose2D, UpdateInfo

Publisher = Callable[[Any], None]
UpdateCallback = Callable[[UpdateInfo], None]


class FollowController(ABC):
    """Computes the next planar pose and twist for one tick."""

    @abstractmethod
    def compute(
        self,
        pose: Pose2D,
        dt: float,
        target: Any,
        cfg: ActorPluginConfig,
    ) -> ControllerOutput:
        """Compute the controller output for the current pose.

        ``target`` is the shared target state; controllers read a snapshot of
        it and write back bookkeeping through its mutators.
        """


class ActorHost(ABC):
    """Host engine services for one animated actor."""

    name: str

    @abstractmethod
    def world_pose(self) -> ActorPose:
        """Current world pose of the actor."""

    @abstractmethod
    def set_world_pose(self, pose: ActorPose) -> None:
        """Write a new world pose."""

    @abstractmethod
    def skeleton_animations(self) -> Iterable[str]:
        """Names of the animation clips available to the actor."""

    @abstractmethod
    def set_custom_trajectory(self, clip: str, duration: float) -> None:
        """Install a custom trajectory playing ``clip``."""

    @abstractmethod
    def set_trajectory_clip(self, clip: str) -> None:
        """Switch the clip played by the installed custom trajectory."""

    @abstractmethod
    def script_time(self) -> float:
        """Current animation clock."""

    @abstractmethod
    def set_script_time(self, value: float) -> None:
        """Set the animation clock."""

    @abstractmethod
    def connect_world_update_begin(self, callback: UpdateCallback) -> Any:
        """Register ``callback`` to run once per simulation step; returns a handle."""

    def disconnect(self, handle: Any) -> None:
        """Drop a connection returned by ``connect_world_update_begin`` (default no-op)."""


class Transport(ABC):
    """Messaging layer delivering commands and carrying odometry."""

    @abstractmethod
    def ok(self) -> bool:
        """Whether the transport is initialized and running."""

    @abstractmethod
    def subscribe(self, topic: str, callback: Callable[[Any], Any]) -> Any:
        """Deliver every message on ``topic`` to ``callback``; returns a handle."""

    @abstractmethod
    def advertise(self, topic: str) -> Publisher:
        """Return a callable publishing one message on ``topic``."""

    def shutdown(self) -> None:
        """Release transport resources held for this actor (default no-op)."""
