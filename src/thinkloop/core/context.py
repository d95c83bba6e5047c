"""
Cancellation and deadline token threaded through every call of an agent run.

A :class:`RunContext` is created by the caller of :meth:`thinkloop.agent.Agent.run` and handed down
to the prediction pipeline, the LLM backend, pipeline stages and tools.  Long-running collaborators
should call :meth:`RunContext.raise_if_cancelled` before and after blocking work and size their own
timeouts with :meth:`RunContext.remaining`.
"""

from __future__ import annotations

import threading
import time


class RunCancelled(RuntimeError):
    """Raised when a run is cancelled or its deadline passes.  Never retried."""


class RunContext:
    """Carries a cancellation flag and an optional monotonic deadline."""

    def __init__(self, timeout: float | None = None, deadline: float | None = None) -> None:
        if timeout is not None and deadline is not None:
            raise ValueError("pass either timeout or deadline, not both")
        if timeout is not None:
            deadline = time.monotonic() + timeout
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "RunContext":
        """Return a context that is never cancelled by a deadline."""
        return cls()

    def cancel(self) -> None:
        """Cancel the run; safe to call from another thread."""
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or *None* if there is no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        """Raise :class:`RunCancelled` if the run was cancelled or has expired."""
        if self.cancelled:
            raise RunCancelled("run cancelled")
        if self.expired:
            raise RunCancelled("run deadline exceeded")
