"""Odometry records built from controller output."""

from __future__ import annotations

from .controllers import yaw_to_quaternion
from .core.interfaces import Publisher
from .core.messages import Odometry
from .core.types import Pose2D, Twist


def build_odometry(
    pose: Pose2D,
    twist: Twist,
    default_rotation: float = 0.0,
    frame_id: str = "map",
    child_frame_id: str = "",
    stamp: float = 0.0,
) -> Odometry:
    """Pure transform from planar pose/twist to an ``Odometry`` record.

    The orientation is the yaw-only rotation ``heading - default_rotation``,
    so consumers see the logical heading rather than the model frame.
    """
    return Odometry(
        frame_id=frame_id,
        child_frame_id=child_frame_id,
        stamp=float(stamp),
        position=(float(pose.x), float(pose.y), 0.0),
        orientation=yaw_to_quaternion(pose.heading - default_rotation),
        linear=(float(twist.linear_x), float(twist.linear_y), 0.0),
        angular=(0.0, 0.0, float(twist.angular_z)),
    )


class OdometryPublisher:
    """Emits one odometry record per tick on a transport publisher."""

    def __init__(
        self,
        publish: Publisher,
        default_rotation: float = 0.0,
        frame_id: str = "map",
        child_frame_id: str = "",
    ) -> None:
        self._publish = publish
        self.default_rotation = float(default_rotation)
        self.frame_id = frame_id
        self.child_frame_id = child_frame_id
        self.published = 0

    def publish(self, pose: Pose2D, twist: Twist, stamp: float) -> Odometry:
        msg = build_odometry(
            pose,
            twist,
            default_rotation=self.default_rotation,
            frame_id=self.frame_id,
            child_frame_id=self.child_frame_id,
            stamp=stamp,
        )
        # Delivery is best effort; the transport owns retries.
        self._publish(msg)
        self.published += 1
        return msg
