"""Cooperative cancellation for outbound API calls."""

from __future__ import annotations

import threading
import time

__all__ = ["CancelToken", "DEFAULT_TIMEOUT_SECONDS"]

DEFAULT_TIMEOUT_SECONDS = 60.0


class CancelToken:
    """Deadline plus explicit cancel flag, checked before every request.

    Usage:
        cancel = CancelToken.with_timeout(300)
        ...
        if cancel.cancelled:
            return partial_result
        client.post_json(url, body, timeout=cancel.timeout())
    """

    def __init__(self, deadline: float | None = None) -> None:
        # deadline is a time.monotonic() value
        self._deadline = deadline
        self._event = threading.Event()

    @classmethod
    def with_timeout(cls, seconds: float) -> CancelToken:
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> float | None:
        """Seconds until the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def timeout(self, default: float = DEFAULT_TIMEOUT_SECONDS) -> float:
        """Per-request timeout bounded by the remaining deadline."""
        remaining = self.remaining()
        if remaining is None:
            return default
        return min(default, remaining)
