"""Command inboxes drained by dedicated worker threads.

Threading model
- Transport callbacks call ``CommandQueue.push`` from any thread.
- One ``QueueWorker`` per queue loops ``drain(timeout)`` and runs the
  handler on its own thread, so the simulation tick never blocks on
  ingestion.
- ``disable()`` wakes a blocked ``drain`` and drops further pushes.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class CommandQueue:
    """Unbounded thread-safe FIFO of pending commands."""

    def __init__(self, name: str, handler: Handler | None = None) -> None:
        self.name = name
        self._handler = handler
        self._items: deque[Any] = deque()
        self._cond = threading.Condition()
        self._enabled = True
        # Pushed but not yet fully handled (queued or in the current batch).
        self._unfinished = 0

    @property
    def enabled(self) -> bool:
        with self._cond:
            return self._enabled

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def push(self, item: Any) -> bool:
        """Enqueue ``item`` without blocking; returns False once disabled."""
        with self._cond:
            if not self._enabled:
                logger.debug(f"Queue '{self.name}' disabled, dropping {type(item).__name__}")
                return False
            self._items.append(item)
            self._unfinished += 1
            self._cond.notify_all()
        return True

    def drain(self, timeout: float) -> int:
        """Handle every item available now, waiting up to ``timeout`` s if empty.

        Returns the number of items handed to the handler.
        """
        with self._cond:
            if self._enabled and not self._items:
                self._cond.wait(max(0.0, float(timeout)))
            if not self._enabled or not self._items:
                return 0
            batch = list(self._items)
            self._items.clear()

        handled = 0
        try:
            if self._handler is None:
                logger.warning(f"Queue '{self.name}' has no handler, dropped {len(batch)} item(s)")
                return 0
            for item in batch:
                try:
                    self._handler(item)
                except Exception:
                    logger.exception(f"Handler for queue '{self.name}' failed on {type(item).__name__}")
                handled += 1
            return handled
        finally:
            self._task_done(len(batch))

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block until every pushed item has been handled or dropped."""
        deadline = None if timeout is None else time.monotonic() + float(timeout)
        with self._cond:
            while self._unfinished > 0:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0.0:
                    return False
                self._cond.wait(remaining)
            return True

    def clear(self) -> None:
        with self._cond:
            self._unfinished -= len(self._items)
            self._items.clear()
            self._cond.notify_all()

    def disable(self) -> None:
        with self._cond:
            self._enabled = False
            self._unfinished -= len(self._items)
            self._items.clear()
            self._cond.notify_all()

    def _task_done(self, count: int) -> None:
        with self._cond:
            self._unfinished -= count
            self._cond.notify_all()


class QueueWorker:
    """Daemon thread bound to one ``CommandQueue``."""

    def __init__(self, queue: CommandQueue, timeout: float = 0.01) -> None:
        self.queue = queue
        self.timeout = float(timeout)
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lifecycle_lock = threading.Lock()
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the drain loop in a thread."""
        with self._lifecycle_lock:
            if self._thread is not None or self._stopped:
                return
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self.working_loop,
                name=f"{self.queue.name}-worker",
                daemon=True,
            )
            self._thread.start()
        logger.debug(f"Worker for queue '{self.queue.name}' started")

    def stop(self) -> None:
        """Disable the queue and join the thread; safe to call more than once."""
        with self._lifecycle_lock:
            if self._stopped:
                return
            self._stopped = True
            self._stop_event.set()
            self.queue.clear()
            self.queue.disable()
            thread = self._thread

        if thread is not None and thread is not threading.current_thread():
            thread.join()
        logger.debug(f"Worker for queue '{self.queue.name}' stopped")

    def working_loop(self) -> None:
        while not self._stop_event.is_set() and self.queue.enabled:
            self.queue.drain(self.timeout)
