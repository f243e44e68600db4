from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, Optional, Sequence, TypeVar

from ..core.enums import Operation
from .error_channel import ErrorChannel, ErrorEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")

SnapshotListener = Callable[["LiveQuery[T]"], Any]


class LiveQuery(Generic[T]):
    """Push-updated result of one query.

    Mirrors what a view needs: the latest ``data``, a local ``error`` flag for
    graceful degradation, and ``loading`` until the first snapshot arrives.
    """

    def __init__(
        self,
        hub: "LiveQueryHub",
        collection: str,
        fetch: Callable[[], Sequence[T]],
        listener: Optional[SnapshotListener] = None,
    ):
        self._hub = hub
        self.collection = collection
        self._fetch = fetch
        self._listener = listener
        self._lock = threading.Lock()
        self.data: Optional[list[T]] = None
        self.error: Optional[Exception] = None
        self.loading = True
        self.closed = False
        self._issued = 0
        self._applied = 0

    def refresh(self) -> None:
        """Re-run the fetch; a result older than the last applied one is dropped."""
        if self.closed:
            return
        with self._lock:
            self._issued += 1
            seq = self._issued
        try:
            rows = list(self._fetch())
        except Exception as e:
            with self._lock:
                if seq < self._applied:
                    return
                self._applied = seq
                self.error = e
                self.loading = False
            logger.warning("Live query on %s failed: %s", self.collection, e)
            self._hub.report_read_failure(self.collection, e)
        else:
            with self._lock:
                if seq < self._applied:
                    logger.debug("Dropping stale snapshot %d of %s", seq, self.collection)
                    return
                self._applied = seq
                self.data = rows
                self.error = None
                self.loading = False
        if self._listener is not None:
            try:
                self._listener(self)
            except Exception:
                logger.exception("Snapshot listener failed for %s", self.collection)

    def close(self) -> None:
        """Unsubscribe; no further snapshots are delivered."""
        if not self.closed:
            self.closed = True
            self._hub.unsubscribe(self)


class LiveQueryHub:
    """Fan-out of fresh snapshots to every query watching a collection.

    Writers call ``notify(collection)`` after a successful write; each
    subscriber re-runs its own fetch. No ordering is guaranteed between
    collections.
    """

    def __init__(self, channel: ErrorChannel):
        self._channel = channel
        self._lock = threading.Lock()
        self._subs: dict[str, list[LiveQuery]] = {}

    def watch(
        self,
        collection: str,
        fetch: Callable[[], Sequence[T]],
        listener: Optional[SnapshotListener] = None,
    ) -> LiveQuery[T]:
        query: LiveQuery[T] = LiveQuery(self, collection, fetch, listener)
        with self._lock:
            self._subs.setdefault(collection, []).append(query)
        query.refresh()
        return query

    def unsubscribe(self, query: LiveQuery) -> None:
        with self._lock:
            subs = self._subs.get(query.collection, [])
            if query in subs:
                subs.remove(query)

    def notify(self, collection: str) -> None:
        with self._lock:
            subs = list(self._subs.get(collection, []))
        for query in subs:
            query.refresh()

    def subscriber_count(self, collection: str) -> int:
        with self._lock:
            return len(self._subs.get(collection, []))

    def report_read_failure(self, collection: str, error: Exception) -> None:
        self._channel.publish(
            ErrorEvent(path=collection, operation=Operation.LIST, reason=str(error) or error.__class__.__name__)
        )

    def close_all(self) -> None:
        with self._lock:
            subs = [q for qs in self._subs.values() for q in qs]
            self._subs.clear()
        for q in subs:
            q.closed = True
