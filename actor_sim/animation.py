"""Walking/standing animation bookkeeping for one actor.

The animation clock is advanced in proportion to distance traveled so the
walking cycle stays visually consistent with the actual speed.
"""

from __future__ import annotations

import logging

from .core.interfaces import ActorHost
from .core.types import STANDING_ANIMATION, WALKING_ANIMATION

logger = logging.getLogger(__name__)

REQUIRED_CLIPS = (WALKING_ANIMATION, STANDING_ANIMATION)


class AnimationCoordinator:
    """Selects the active clip and drives the host's animation clock."""

    def __init__(self, host: ActorHost, factor: float = 4.0, trajectory_duration: float = 1.0) -> None:
        self.host = host
        self.factor = float(factor)
        self.trajectory_duration = float(trajectory_duration)
        self.clip = STANDING_ANIMATION
        self.clock = 0.0
        self.installed = False

    def install(self) -> bool:
        """Install the custom trajectory if both clips exist on the host."""
        available = set(self.host.skeleton_animations())
        for clip in REQUIRED_CLIPS:
            if clip not in available:
                logger.error(f"Skeleton animation {clip} not found.")
                self.installed = False
                return False

        self.clip = STANDING_ANIMATION
        self.host.set_custom_trajectory(self.clip, self.trajectory_duration)
        self.installed = True
        return True

    def select(self, clip: str) -> None:
        if clip not in REQUIRED_CLIPS:
            raise ValueError(f"Unknown animation clip '{clip}'. Available: {', '.join(REQUIRED_CLIPS)}")
        if clip != self.clip:
            logger.debug(f"{self.host.name}: animation {self.clip} -> {clip}")
        self.clip = clip
        if self.installed:
            self.host.set_trajectory_clip(clip)

    def advance(self, delta: float) -> float:
        """Advance the animation clock by ``delta`` and return the new value."""
        if delta < 0.0:
            raise ValueError(f"Animation clock only moves forward, got delta={delta}")
        self.clock += float(delta)
        self.host.set_script_time(self.host.script_time() + float(delta))
        return self.clock

    def advance_by_distance(self, distance: float) -> float:
        return self.advance(float(distance) * self.factor)
