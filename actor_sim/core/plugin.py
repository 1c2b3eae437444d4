"""Actor command plugin: velocity/path following driven by the host's tick.

Threading model
- The host calls ``on_update`` once per simulation step, never concurrently
  with itself.
- Velocity, path and abort commands each arrive on their own
  ``CommandQueue`` and are applied to ``TargetState`` by a dedicated
  ``QueueWorker``.
- ``TargetState`` is the only object shared between the tick and the workers.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from ..animation import AnimationCoordinator
from ..controllers import attitude_to_rpy, planar_distance, quaternion_to_yaw, rpy_to_attitude
from ..odometry import OdometryPublisher
from .config import ActorPluginConfig, normalize_actor_config
from .interfaces import ActorHost, FollowController, Transport
from .messages import AbortCommand, PathCommand, VelocityCommand
from .queues import CommandQueue, QueueWorker
from .registry import create_controller, register_builtin_components
from .target import TargetState
from .types import ActorPose, FollowMode, Pose2D, UpdateInfo, VelocitySample, Waypoint

logger = logging.getLogger(__name__)


class ActorCommandPlugin:
    """Per-actor controller following velocity commands or waypoint paths."""

    def __init__(self) -> None:
        self.cfg = ActorPluginConfig()
        self.host: ActorHost | None = None
        self.transport: Transport | None = None
        self.name = ""
        self.controller: FollowController | None = None
        self.target: TargetState | None = None
        self.animation: AnimationCoordinator | None = None
        self.odometry: OdometryPublisher | None = None
        self.queues: dict[str, CommandQueue] = {}
        self.workers: list[QueueWorker] = []
        self.last_update = 0.0
        self.active = False
        self._connections: list[Any] = []
        self._shut_down = False

    def __enter__(self) -> ActorCommandPlugin:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.shutdown()

    # ----------------------------
    # Lifecycle
    # ----------------------------
    def load(
        self,
        host: ActorHost,
        transport: Transport,
        cfg: ActorPluginConfig | Mapping[str, Any] | None = None,
    ) -> bool:
        """Configure the plugin for ``host`` and start ingestion.

        Returns False and leaves the plugin inert when the follow mode is
        unknown or the transport is not running. Loading an already active
        plugin is refused; call ``shutdown()`` first.
        """
        if self.active:
            logger.warning(f"Actor '{self.name}' is already loaded, ignoring load()")
            return False

        try:
            self.cfg = cfg if isinstance(cfg, ActorPluginConfig) else normalize_actor_config(cfg)
            register_builtin_components()
            self.controller = create_controller(self.cfg.follow_mode)
        except (TypeError, ValueError) as exc:
            logger.error(f"Unable to load actor plugin: {exc}")
            return False

        if not transport.ok():
            logger.critical(
                "Messaging transport has not been initialized, unable to load plugin. "
                "Start the transport before loading actors."
            )
            return False

        self.host = host
        self.transport = transport
        self.name = host.name
        self.target = TargetState(FollowMode(self.cfg.follow_mode))
        self.animation = AnimationCoordinator(host, factor=self.cfg.animation_factor)
        self.reset()

        handlers = {
            "velocity": (self.cfg.vel_topic, self.on_velocity),
            "path": (self.cfg.path_topic, self.on_path),
            "abort": (self.cfg.abort_topic, self.on_abort),
        }
        for kind, (topic, handler) in handlers.items():
            queue = CommandQueue(f"{self.name}/{kind}", handler)
            transport.subscribe(topic, queue.push)
            self.queues[kind] = queue

        self.odometry = OdometryPublisher(
            transport.advertise(self.name + self.cfg.odom_topic_suffix),
            default_rotation=self.cfg.default_rotation,
            frame_id=self.cfg.odom_frame,
            child_frame_id=self.name,
        )

        for queue in self.queues.values():
            worker = QueueWorker(queue, timeout=self.cfg.queue_timeout)
            worker.start()
            self.workers.append(worker)

        self._connections.append(host.connect_world_update_begin(self.on_update))
        self.active = True
        logger.info(
            f"Actor '{self.name}' loaded in {self.cfg.follow_mode} mode "
            f"(vel={self.cfg.vel_topic}, path={self.cfg.path_topic}, abort={self.cfg.abort_topic})"
        )
        return True

    def reset(self) -> None:
        """Target the current pose and (re)install the animation trajectory."""
        if self.host is None or self.target is None or self.animation is None:
            raise RuntimeError("ActorCommandPlugin.load() must be called before reset().")

        self.last_update = 0.0
        pose = self.host.world_pose()
        rpy = attitude_to_rpy(pose.attitude_quat)
        self.target.reset(Waypoint(x=float(pose.position[0]), y=float(pose.position[1]), yaw=float(rpy[2])))
        self.animation.install()

    def shutdown(self) -> None:
        """Stop ingestion and detach from the host; idempotent."""
        if self._shut_down:
            return
        self._shut_down = True
        self.active = False

        for worker in self.workers:
            worker.stop()

        if self.host is not None:
            for handle in self._connections:
                self.host.disconnect(handle)
        self._connections.clear()

        if self.transport is not None:
            self.transport.shutdown()
        if self.name:
            logger.info(f"Actor '{self.name}' shut down")

    # ----------------------------
    # Command handlers (worker threads)
    # ----------------------------
    def on_velocity(self, msg: VelocityCommand) -> None:
        if self.target is None:
            return
        if self.target.mode is not FollowMode.VELOCITY:
            logger.debug(f"Actor '{self.name}' is in {self.target.mode.value} mode, ignoring velocity command")
            return
        self.target.push_velocity(VelocitySample(linear=float(msg.linear_x), angular=float(msg.angular_z)))

    def on_path(self, msg: PathCommand) -> None:
        if self.target is None:
            return
        waypoints = [
            Waypoint(
                x=float(p.position[0]),
                y=float(p.position[1]),
                yaw=quaternion_to_yaw(p.orientation),
            )
            for p in msg.poses
        ]
        self.target.replace_path(waypoints)
        logger.info(f"Actor '{self.name}' received path with {len(waypoints)} waypoint(s)")

    def on_abort(self, msg: AbortCommand) -> None:
        if self.target is None:
            return
        self.target.set_aborted(bool(msg.data))
        logger.info(f"Actor '{self.name}' abort={bool(msg.data)}")

    # ----------------------------
    # Tick
    # ----------------------------
    def on_update(self, info: UpdateInfo) -> None:
        """Advance the actor by one simulation step.

        Errors are logged and swallowed here so a failed tick never breaks
        the host's stepping.
        """
        if not self.active:
            return
        try:
            self._update(info)
        except Exception:
            logger.exception(f"Actor '{self.name}' update failed at t={info.sim_time:.3f}")
        finally:
            # A failed tick still consumes its time slice.
            self.last_update = float(info.sim_time)

    def _update(self, info: UpdateInfo) -> None:
        dt = float(info.sim_time) - self.last_update
        if dt < 0.0:
            logger.warning(f"Actor '{self.name}': simulation time went backwards (dt={dt:.4f}), using dt=0")
            dt = 0.0

        world = self.host.world_pose()
        roll, pitch, yaw = attitude_to_rpy(world.attitude_quat)
        pose = Pose2D(x=float(world.position[0]), y=float(world.position[1]), heading=float(yaw))

        out = self.controller.compute(pose, dt, self.target, self.cfg)
        self.animation.select(out.clip)
        self.odometry.publish(out.pose, out.twist, stamp=float(info.sim_time))

        position = world.position.copy()
        position[0] = out.pose.x
        position[1] = out.pose.y
        self.host.set_world_pose(
            ActorPose(position=position, attitude_quat=rpy_to_attitude(roll, pitch, out.pose.heading))
        )

        traveled = planar_distance(pose.x, pose.y, out.pose.x, out.pose.y)
        if math.isfinite(traveled):
            self.animation.advance_by_distance(traveled)
