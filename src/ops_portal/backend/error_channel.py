from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from ..core.enums import Operation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorEvent:
    """A failed backend operation, as broadcast to diagnostics listeners."""

    path: str
    operation: Operation
    payload: Optional[dict] = None
    reason: str = ""
    occurred_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "operation": self.operation.value,
            "requestResourceData": self.payload,
            "reason": self.reason,
            "occurredAt": self.occurred_at.strftime("%Y-%m-%d %H:%M:%S"),
        }


ErrorListener = Callable[[ErrorEvent], Any]


class ErrorChannel:
    """In-process publish/subscribe channel for backend failures.

    Subsystems subscribe explicitly at startup and call the returned
    unsubscribe function at shutdown. A listener that raises is logged and
    skipped; it never prevents delivery to the other listeners.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: list[ErrorListener] = []

    def subscribe(self, listener: ErrorListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: ErrorEvent) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Error listener failed for %s %s", event.operation.value, event.path)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)


class LoggingErrorListener:
    def __init__(self, log: Optional[logging.Logger] = None):
        self._log = log or logger

    def __call__(self, event: ErrorEvent) -> None:
        self._log.warning(
            "Backend %s failed on %s: %s",
            event.operation.value,
            event.path,
            event.reason or "unknown error",
        )


class RecentErrorBuffer:
    """Keeps the last ``size`` events for the diagnostics endpoint."""

    def __init__(self, size: int = 50):
        self._events: deque[ErrorEvent] = deque(maxlen=int(size))
        self._lock = threading.Lock()

    def __call__(self, event: ErrorEvent) -> None:
        with self._lock:
            self._events.append(event)

    def snapshot(self) -> list[ErrorEvent]:
        """Newest first."""
        with self._lock:
            return list(reversed(self._events))

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
