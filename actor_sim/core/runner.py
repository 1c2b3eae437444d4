"""Scenario runner: drive one actor plugin on the in-memory host."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np

from ..controllers import attitude_to_rpy
from .config import ActorPluginConfig, normalize_actor_config
from .messages import AbortCommand, PathCommand, VelocityCommand
from .plugin import ActorCommandPlugin
from .registry import create_host, create_transport, register_builtin_components
from .types import STANDING_ANIMATION, WALKING_ANIMATION, TrajectoryLog

logger = logging.getLogger(__name__)


def _topic_for(msg: Any, cfg: ActorPluginConfig) -> str:
    if isinstance(msg, VelocityCommand):
        return cfg.vel_topic
    if isinstance(msg, PathCommand):
        return cfg.path_topic
    if isinstance(msg, AbortCommand):
        return cfg.abort_topic
    raise ValueError(f"Unsupported command type '{type(msg).__name__}'")


def run_scenario(
    cfg: ActorPluginConfig | Mapping[str, Any] | None = None,
    *,
    steps: int,
    dt: float,
    initial_position: Sequence[float] = (0.0, 0.0, 0.0),
    initial_yaw: float = 0.0,
    commands: Mapping[int, Sequence[Any]] | None = None,
    animations: Sequence[str] = (WALKING_ANIMATION, STANDING_ANIMATION),
    host_name: str = "actor",
    host_backend: str = "kinematic",
    transport_name: str = "inprocess",
    settle_timeout: float = 2.0,
) -> TrajectoryLog:
    """Run ``steps`` ticks of ``dt`` seconds and return the collected log.

    ``commands`` maps a step index to messages delivered right before that
    step; the runner waits for ingestion to settle so runs are deterministic.
    """
    cfg_norm = cfg if isinstance(cfg, ActorPluginConfig) else normalize_actor_config(cfg)
    commands = dict(commands or {})

    register_builtin_components()
    host = create_host(
        host_backend,
        name=host_name,
        position=tuple(initial_position),
        yaw=float(initial_yaw),
        animations=tuple(animations),
    )
    transport = create_transport(transport_name)

    plugin = ActorCommandPlugin()
    if not plugin.load(host, transport, cfg_norm):
        raise RuntimeError(f"Actor plugin failed to load for '{host_name}'; see log for details.")

    logger.info(f"Scenario: {steps} steps, dt={dt:.3f} s, follow_mode={cfg_norm.follow_mode}")

    positions = [np.asarray(host.world_pose().position, dtype=float).copy()]
    headings = [float(attitude_to_rpy(host.world_pose().attitude_quat)[2])]
    clips: list[str] = []
    odom_topic = host_name + cfg_norm.odom_topic_suffix

    with plugin:
        for step in range(int(steps)):
            for msg in commands.get(step, ()):
                transport.deliver(_topic_for(msg, cfg_norm), msg)
            for queue in plugin.queues.values():
                if not queue.wait_until_idle(settle_timeout):
                    logger.warning(f"Queue '{queue.name}' did not settle within {settle_timeout:.2f} s")

            host.step(dt)

            pose = host.world_pose()
            positions.append(np.asarray(pose.position, dtype=float).copy())
            headings.append(float(attitude_to_rpy(pose.attitude_quat)[2]))
            clips.append(plugin.animation.clip if plugin.animation is not None else "")

        odometry = transport.published(odom_topic)
        final_index = plugin.target.snapshot().index if plugin.target is not None else 0

    trajectory = np.vstack(positions)
    logger.info(
        f"Scenario completed: final position [{trajectory[-1, 0]:.2f}, {trajectory[-1, 1]:.2f}], "
        f"waypoint index {final_index}"
    )

    return TrajectoryLog(
        positions=trajectory,
        headings=np.asarray(headings, dtype=float),
        clips=clips,
        odometry=odometry,
        final_waypoint_index=int(final_index),
        final_time=float(host.sim_time),
        script_time=float(host.script_time()),
        follow_mode=cfg_norm.follow_mode,
        metadata={"host": host_backend, "transport": transport_name},
    )
