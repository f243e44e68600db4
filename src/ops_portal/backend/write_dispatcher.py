from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from ..core.constants import DEFAULT_WRITE_WORKERS
from ..core.enums import Operation
from ..core.exceptions import WriteConflictError, WriteError
from .error_channel import ErrorChannel, ErrorEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteResult:
    value: Any = None
    error: Optional[WriteError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def conflict(self) -> bool:
        return self.error is not None and self.error.event.reason.startswith("conflict")


class WriteHandle:
    """Handle on a dispatched write.

    The caller decides the policy: ``wait()`` for flows that must know the
    outcome, ``detach()`` for optimistic flows that only rely on the error
    channel.
    """

    def __init__(self, future: "Future[WriteResult]", *, path: str, operation: Operation):
        self._future = future
        self.path = path
        self.operation = operation

    @classmethod
    def completed(cls, value: Any = None, *, path: str, operation: Operation) -> "WriteHandle":
        """A handle for a command that needed no write (e.g. repeated decision)."""
        fut: Future[WriteResult] = Future()
        fut.set_result(WriteResult(value=value))
        return cls(fut, path=path, operation=operation)

    def wait(self, timeout: Optional[float] = None) -> WriteResult:
        return self._future.result(timeout=timeout)

    def done(self) -> bool:
        return self._future.done()

    def detach(self) -> None:
        # The outcome is already routed to the error channel by the dispatcher.
        return None


class WriteDispatcher:
    """Runs backend writes off the caller's thread.

    Every failed write is logged and published on the error channel with its
    path, operation and attempted payload; it is never raised to the caller.
    ``after_success`` hooks run on the worker before the handle resolves, so a
    caller that waits also observes the live-query fan-out of its own write.
    """

    def __init__(
        self,
        channel: ErrorChannel,
        *,
        executor: Optional[Executor] = None,
        max_workers: int = DEFAULT_WRITE_WORKERS,
    ):
        self._channel = channel
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=int(max_workers), thread_name_prefix="ops-portal-write"
        )

    def dispatch(
        self,
        *,
        path: str,
        operation: Operation,
        payload: Optional[dict],
        write: Callable[[], Any],
        after_success: Iterable[Callable[[], Any]] = (),
    ) -> WriteHandle:
        hooks = list(after_success)
        future = self._executor.submit(self._run, path, operation, payload, write, hooks)
        return WriteHandle(future, path=path, operation=operation)

    def _run(
        self,
        path: str,
        operation: Operation,
        payload: Optional[dict],
        write: Callable[[], Any],
        hooks: list[Callable[[], Any]],
    ) -> WriteResult:
        try:
            value = write()
        except WriteConflictError as e:
            return self._fail(path, operation, payload, f"conflict: {e}")
        except Exception as e:
            logger.exception("Write %s on %s raised", operation.value, path)
            return self._fail(path, operation, payload, str(e) or e.__class__.__name__)

        for hook in hooks:
            try:
                hook()
            except Exception:
                logger.exception("Post-write hook failed for %s", path)
        return WriteResult(value=value)

    def _fail(self, path: str, operation: Operation, payload: Optional[dict], reason: str) -> WriteResult:
        event = ErrorEvent(path=path, operation=operation, payload=payload, reason=reason)
        logger.warning("Write %s on %s failed: %s", operation.value, path, reason)
        self._channel.publish(event)
        return WriteResult(error=WriteError(event))

    def shutdown(self, wait: bool = True) -> None:
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
