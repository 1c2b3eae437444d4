"""Config loading and normalization for the actor command plugin."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

from .types import FollowMode

_ANGLE_KEYS = ("angular_tolerance", "angular_velocity", "default_rotation")
_NON_NEGATIVE_KEYS = (
    "linear_tolerance",
    "linear_velocity",
    "angular_tolerance",
    "angular_velocity",
    "animation_factor",
    "queue_timeout",
)


@dataclass
class ActorPluginConfig:
    """Normalized config used by the plugin for the lifetime of one actor."""

    follow_mode: str = FollowMode.VELOCITY.value
    vel_topic: str = "/cmd_vel"
    path_topic: str = "/cmd_path"
    abort_topic: str = "/abort_goal"
    linear_tolerance: float = 0.1
    linear_velocity: float = 1.0
    angular_tolerance: float = math.radians(5.0)
    angular_velocity: float = math.radians(10.0)
    animation_factor: float = 4.0
    default_rotation: float = 0.0
    odom_topic_suffix: str = "/odom"
    odom_frame: str = "map"
    queue_timeout: float = 0.01


def load_actor_config(path: Path) -> dict[str, Any]:
    """Load actor YAML config from disk.

    Missing files are handled gracefully and return an empty config.
    """
    if not path.exists():
        return {}

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def normalize_actor_config(raw: Mapping[str, Any] | None = None, **overrides: Any) -> ActorPluginConfig:
    """Normalize a raw mapping (plus explicit overrides) into one config object.

    Options may live under an ``actor`` section or at the top level. Angle
    options also accept a ``*_deg`` variant in degrees. Overrides win over
    the mapping; ``None`` overrides are ignored.
    """
    raw = dict(raw or {})
    section = dict(raw.get("actor", raw) or {})
    section.update({k: v for k, v in overrides.items() if v is not None})

    for key in _ANGLE_KEYS:
        deg_key = f"{key}_deg"
        if key not in section and section.get(deg_key) is not None:
            section[key] = math.radians(float(section[deg_key]))

    defaults = ActorPluginConfig()
    values: dict[str, Any] = {}
    for f in fields(ActorPluginConfig):
        default = getattr(defaults, f.name)
        value = section.get(f.name, default)
        values[f.name] = str(value) if isinstance(default, str) else float(value)

    mode = values["follow_mode"].lower().strip()
    valid_modes = {m.value for m in FollowMode}
    if mode not in valid_modes:
        raise ValueError(
            f"Unknown follow_mode '{values['follow_mode']}'. Available: {', '.join(sorted(valid_modes))}"
        )
    values["follow_mode"] = mode

    for key in _NON_NEGATIVE_KEYS:
        if values[key] < 0.0 or not math.isfinite(values[key]):
            raise ValueError(f"{key} must be a finite non-negative number, got {values[key]}")

    return ActorPluginConfig(**values)
