"""
Shared cancellation for a single search call.

One CancellationToken is created per search and passed to every task. The
first failure cancels it and becomes its cause; later failures are
ignored. Tasks check the token before each remote call, so no new requests
are issued once a search has failed, while requests already in flight are
left to finish.
"""

import threading

from czsnoop.errors import SearchCancelledError


class CancellationToken:
    """Thread-safe cancel-with-cause signal, first error wins."""

    def __init__(self):
        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._cause: BaseException | None = None

    def cancel(self, cause: BaseException) -> bool:
        """
        Cancel the search with the given cause.

        Returns:
            True if this call cancelled the token, False if it was already cancelled
        """
        with self._lock:
            if self._cause is not None:
                return False
            self._cause = cause
            self._cancelled.set()
            return True

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def cause(self) -> BaseException | None:
        with self._lock:
            return self._cause

    def raise_if_cancelled(self) -> None:
        """Raise SearchCancelledError if another task already failed."""
        if self._cancelled.is_set():
            raise SearchCancelledError(f"search cancelled: {self.cause}")

    def raise_cause(self) -> None:
        """Re-raise the error that cancelled the token, if any."""
        cause = self.cause
        if cause is not None:
            raise cause
