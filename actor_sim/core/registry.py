"""Component registries for follow controllers, actor hosts, and transports."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .interfaces import ActorHost, FollowController, Transport

ControllerFactory = Callable[[], FollowController]
HostFactory = Callable[..., ActorHost]
TransportFactory = Callable[..., Transport]

CONTROLLERS: dict[str, ControllerFactory] = {}
HOSTS: dict[str, HostFactory] = {}
TRANSPORTS: dict[str, TransportFactory] = {}

_BUILTINS_REGISTERED = False


def _normalize_name(name: str) -> str:
    return str(name).lower().strip()


def register_controller(name: str, factory: ControllerFactory) -> None:
    CONTROLLERS[_normalize_name(name)] = factory


def register_host(name: str, factory: HostFactory) -> None:
    HOSTS[_normalize_name(name)] = factory


def register_transport(name: str, factory: TransportFactory) -> None:
    TRANSPORTS[_normalize_name(name)] = factory


def create_controller(name: str) -> FollowController:
    key = _normalize_name(name)
    if key not in CONTROLLERS:
        available = ", ".join(sorted(CONTROLLERS)) or "none"
        raise ValueError(f"Unknown follow mode '{name}'. Available: {available}")
    return CONTROLLERS[key]()


def create_host(name: str, /, **kwargs: Any) -> ActorHost:
    key = _normalize_name(name)
    if key not in HOSTS:
        available = ", ".join(sorted(HOSTS)) or "none"
        raise ValueError(f"Unknown host '{name}'. Available: {available}")
    return HOSTS[key](**kwargs)


def create_transport(name: str, **kwargs: Any) -> Transport:
    key = _normalize_name(name)
    if key not in TRANSPORTS:
        available = ", ".join(sorted(TRANSPORTS)) or "none"
        raise ValueError(f"Unknown transport '{name}'. Available: {available}")
    return TRANSPORTS[key](**kwargs)


def register_builtin_components() -> None:
    """Register built-in controllers/hosts/transports once."""
    global _BUILTINS_REGISTERED
    if _BUILTINS_REGISTERED:
        return

    from ..backends.inprocess_transport import InProcessTransport
    from ..backends.kinematic_backend import KinematicActorHost
    from ..controllers.basic import PathFollower, VelocityFollower

    register_controller("velocity", VelocityFollower)
    register_controller("path", PathFollower)

    register_host("kinematic", KinematicActorHost)

    register_transport("inprocess", InProcessTransport)

    _BUILTINS_REGISTERED = True
