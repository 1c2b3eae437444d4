"""Built-in follow controllers for the actor command plugin."""

from __future__ import annotations

import logging
import math

from ..controllers import planar_distance, rotation_sign, wrap_angle
from ..core.config import ActorPluginConfig
from ..core.interfaces import FollowController
from ..core.target import TargetState
from ..core.types import STANDING_ANIMATION, WALKING_ANIMATION, ControllerOutput, Pose2D, Twist

logger = logging.getLogger(__name__)


def _hold(pose: Pose2D) -> ControllerOutput:
    return ControllerOutput(pose=pose, twist=Twist(), clip=STANDING_ANIMATION, commanded_motion=False)


class PathFollower(FollowController):
    """Turn-then-move waypoint follower.

    Each tick either rotates in place at ``angular_velocity`` (heading error
    above ``angular_tolerance``) or translates at ``linear_velocity`` toward
    the current waypoint with the heading snapped to the bearing. A
    translating step stops at the waypoint rather than overshooting it.
    """

    def compute(
        self,
        pose: Pose2D,
        dt: float,
        target: TargetState,
        cfg: ActorPluginConfig,
    ) -> ControllerOutput:
        snap = target.snapshot()

        if snap.aborted or not snap.waypoints or snap.target is None:
            target.hold(pose.x, pose.y, snap.generation)
            return _hold(pose)

        dx = snap.target.x - pose.x
        dy = snap.target.y - pose.y
        if planar_distance(0.0, 0.0, dx, dy) < cfg.linear_tolerance:
            # Single-step lookahead: at most one waypoint is consumed per tick.
            nxt = target.advance_index(snap.generation) if snap.has_next else None
            if nxt is None:
                return _hold(pose)
            logger.debug(f"Waypoint {snap.index} reached, heading to ({nxt.x:.2f}, {nxt.y:.2f})")
            dx = nxt.x - pose.x
            dy = nxt.y - pose.y

        length = math.hypot(dx, dy)
        if length == 0.0:
            return _hold(pose)
        ux, uy = dx / length, dy / length

        angular_error = wrap_angle(math.atan2(uy, ux) + cfg.default_rotation - pose.heading)

        if abs(angular_error) > cfg.angular_tolerance:
            sign = rotation_sign(angular_error)
            new_pose = Pose2D(
                x=pose.x,
                y=pose.y,
                heading=wrap_angle(pose.heading + sign * cfg.angular_velocity * dt),
            )
            twist = Twist(angular_z=sign * cfg.angular_velocity)
        else:
            # Never step past the waypoint, or coarse ticks oscillate around it.
            step = min(cfg.linear_velocity * dt, length)
            new_pose = Pose2D(
                x=pose.x + ux * step,
                y=pose.y + uy * step,
                heading=wrap_angle(pose.heading + angular_error),
            )
            twist = Twist(
                linear_x=ux * cfg.linear_velocity,
                linear_y=uy * cfg.linear_velocity,
                angular_z=angular_error / dt if dt > 0.0 else 0.0,
            )

        return ControllerOutput(pose=new_pose, twist=twist, clip=WALKING_ANIMATION, commanded_motion=True)


class VelocityFollower(FollowController):
    """Integrates the held velocity command; one queued sample is consumed per tick."""

    def compute(
        self,
        pose: Pose2D,
        dt: float,
        target: TargetState,
        cfg: ActorPluginConfig,
    ) -> ControllerOutput:
        sample = target.pop_velocity()

        facing = pose.heading - cfg.default_rotation
        vx = sample.linear * math.cos(facing)
        vy = sample.linear * math.sin(facing)
        new_pose = Pose2D(
            x=pose.x + vx * dt,
            y=pose.y + vy * dt,
            heading=wrap_angle(pose.heading + sample.angular * dt),
        )

        moving = sample.linear != 0.0 or sample.angular != 0.0
        return ControllerOutput(
            pose=new_pose,
            twist=Twist(linear_x=vx, linear_y=vy, angular_z=sample.angular),
            clip=WALKING_ANIMATION if moving else STANDING_ANIMATION,
            commanded_motion=moving,
        )
