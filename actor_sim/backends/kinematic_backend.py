"""In-memory kinematic actor host (default)."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import numpy as np

from ..controllers import rpy_to_attitude
from ..core.interfaces import ActorHost, UpdateCallback
from ..core.types import STANDING_ANIMATION, WALKING_ANIMATION, ActorPose, UpdateInfo


class KinematicActorHost(ActorHost):
    """Host that stores the actor pose and steps simulated time on request.

    ``step(dt)`` advances simulated time and invokes every world-update
    callback sequentially, which is all the plugin needs from an engine.
    """

    def __init__(
        self,
        name: str = "actor",
        position: Iterable[float] = (0.0, 0.0, 0.0),
        yaw: float = 0.0,
        roll: float = 0.0,
        animations: Iterable[str] = (WALKING_ANIMATION, STANDING_ANIMATION),
    ) -> None:
        self.name = name
        self._pose = ActorPose(
            position=np.asarray(tuple(position), dtype=float).reshape(3),
            attitude_quat=rpy_to_attitude(float(roll), 0.0, float(yaw)),
        )
        self._animations = tuple(animations)
        self._trajectory: dict[str, Any] | None = None
        self._script_time = 0.0
        self._callbacks: dict[int, UpdateCallback] = {}
        self._next_handle = 0
        self.sim_time = 0.0
        self.steps = 0

    @property
    def trajectory(self) -> dict[str, Any] | None:
        return None if self._trajectory is None else dict(self._trajectory)

    def world_pose(self) -> ActorPose:
        return self._pose.copy()

    def set_world_pose(self, pose: ActorPose) -> None:
        self._pose = pose.copy()

    def skeleton_animations(self) -> tuple[str, ...]:
        return self._animations

    def set_custom_trajectory(self, clip: str, duration: float) -> None:
        self._trajectory = {"type": str(clip), "duration": float(duration)}

    def set_trajectory_clip(self, clip: str) -> None:
        if self._trajectory is None:
            raise RuntimeError("KinematicActorHost.set_custom_trajectory() must be called before set_trajectory_clip().")
        self._trajectory["type"] = str(clip)

    def script_time(self) -> float:
        return self._script_time

    def set_script_time(self, value: float) -> None:
        self._script_time = float(value)

    def connect_world_update_begin(self, callback: UpdateCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._callbacks[handle] = callback
        return handle

    def disconnect(self, handle: Any) -> None:
        self._callbacks.pop(handle, None)

    def step(self, dt: float) -> None:
        """Advance simulated time by ``dt`` and run the update callbacks."""
        if dt < 0.0:
            raise ValueError(f"dt must be non-negative, got {dt}")
        self.sim_time += float(dt)
        self.steps += 1
        info = UpdateInfo(sim_time=self.sim_time, step=self.steps)
        for callback in list(self._callbacks.values()):
            callback(info)
