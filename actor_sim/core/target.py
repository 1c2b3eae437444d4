"""Target state shared between ingestion workers and the simulation tick."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Sequence

from .types import FollowMode, VelocitySample, Waypoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetSnapshot:
    """Consistent read-only view of ``TargetState`` taken by the tick."""

    waypoints: tuple[Waypoint, ...]
    index: int
    target: Waypoint | None
    aborted: bool
    pending_velocities: int
    generation: int

    @property
    def has_next(self) -> bool:
        return self.index < len(self.waypoints) - 1


class TargetState:
    """Lock-guarded target of one actor.

    Every command is applied inside a single critical section, so the tick
    never observes a half-applied update. ``generation`` increases whenever
    the waypoint list is replaced; tick-side mutators take the generation of
    the snapshot they were computed from and do nothing if a newer list has
    arrived in the meantime.
    """

    def __init__(self, mode: FollowMode | str = FollowMode.VELOCITY) -> None:
        self._lock = threading.Lock()
        self._mode = FollowMode(mode)
        self._waypoints: list[Waypoint] = []
        self._index = 0
        self._target: Waypoint | None = None
        self._aborted = False
        self._velocity = VelocitySample()
        self._pending: deque[VelocitySample] = deque()
        self._generation = 0

    @property
    def mode(self) -> FollowMode:
        return self._mode

    def snapshot(self) -> TargetSnapshot:
        with self._lock:
            return TargetSnapshot(
                waypoints=tuple(self._waypoints),
                index=self._index,
                target=self._target,
                aborted=self._aborted,
                pending_velocities=len(self._pending),
                generation=self._generation,
            )

    # ----------------------------
    # Ingestion side
    # ----------------------------
    def reset(self, initial: Waypoint) -> None:
        """Target the given pose and forget every pending command."""
        with self._lock:
            self._waypoints = [initial]
            self._index = 0
            self._target = initial
            self._aborted = False
            self._velocity = VelocitySample()
            self._pending.clear()
            self._generation += 1

    def replace_path(self, waypoints: Sequence[Waypoint]) -> None:
        with self._lock:
            self._waypoints = list(waypoints)
            self._index = 0
            self._aborted = False
            self._target = self._waypoints[0] if self._waypoints else None
            self._generation += 1
        logger.debug(f"Path replaced with {len(waypoints)} waypoint(s)")

    def set_aborted(self, aborted: bool) -> None:
        with self._lock:
            self._aborted = bool(aborted)

    def push_velocity(self, sample: VelocitySample) -> None:
        with self._lock:
            self._pending.append(sample)

    # ----------------------------
    # Tick side
    # ----------------------------
    def pop_velocity(self) -> VelocitySample:
        """Take at most one pending sample as the held command and return it."""
        with self._lock:
            if self._pending:
                self._velocity = self._pending.popleft()
            return self._velocity

    def advance_index(self, generation: int) -> Waypoint | None:
        """Move to the next waypoint; None if there is none or the list changed."""
        with self._lock:
            if generation != self._generation:
                return None
            if self._index >= len(self._waypoints) - 1:
                return None
            self._index += 1
            self._target = self._waypoints[self._index]
            return self._target

    def hold(self, x: float, y: float, generation: int) -> bool:
        """Drop the waypoint list and target the given position."""
        with self._lock:
            if generation != self._generation:
                return False
            yaw = self._target.yaw if self._target is not None else 0.0
            self._waypoints = []
            self._index = 0
            self._target = Waypoint(x=float(x), y=float(y), yaw=yaw)
            return True
