"""Loopback transport that keeps every topic inside the current process."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from ..core.interfaces import Publisher, Transport

logger = logging.getLogger(__name__)


class InProcessTransport(Transport):
    """Topic bus with synchronous delivery.

    ``deliver`` stands in for a message arriving from the network: it calls
    every subscriber of the topic on the caller's thread. Published messages
    are also recorded per topic for inspection.
    """

    def __init__(self, running: bool = True) -> None:
        self._running = bool(running)
        self._lock = threading.Lock()
        self._subscribers: dict[str, list[Callable[[Any], Any]]] = defaultdict(list)
        self._published: dict[str, list[Any]] = defaultdict(list)

    def ok(self) -> bool:
        with self._lock:
            return self._running

    def subscribe(self, topic: str, callback: Callable[[Any], Any]) -> tuple[str, int]:
        with self._lock:
            self._subscribers[topic].append(callback)
            return (topic, len(self._subscribers[topic]) - 1)

    def advertise(self, topic: str) -> Publisher:
        def _publish(msg: Any) -> None:
            with self._lock:
                if not self._running:
                    return
                self._published[topic].append(msg)
            self.deliver(topic, msg)

        return _publish

    def deliver(self, topic: str, msg: Any) -> int:
        """Hand ``msg`` to every subscriber of ``topic``; returns how many got it."""
        with self._lock:
            if not self._running:
                logger.debug(f"Transport stopped, dropping message on {topic}")
                return 0
            callbacks = list(self._subscribers.get(topic, ()))
        for callback in callbacks:
            callback(msg)
        return len(callbacks)

    def published(self, topic: str) -> list[Any]:
        with self._lock:
            return list(self._published.get(topic, ()))

    def shutdown(self) -> None:
        with self._lock:
            self._running = False
            self._subscribers.clear()
