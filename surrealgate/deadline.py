"""Caller-supplied deadline signal for bounding waits."""

from __future__ import annotations

import asyncio
import time

from .errors import DeadlineExceeded


class Deadline:
    """One-shot signal that fires on timeout or explicit cancellation.

    ``Deadline(None)`` only fires through :meth:`cancel`. Once fired the
    reason never changes. :meth:`cancel` must run on the event loop thread.
    """

    def __init__(self, timeout: float | None = None) -> None:
        if timeout is not None and timeout < 0:
            raise ValueError("Deadline timeout must be non-negative.")
        self._timeout = timeout
        self._expires_at = None if timeout is None else time.monotonic() + timeout
        self._event = asyncio.Event()
        self._reason: DeadlineExceeded | None = None

    @classmethod
    def after(cls, seconds: float) -> Deadline:
        """Deadline that fires ``seconds`` from now."""

        return cls(seconds)

    @property
    def timeout(self) -> float | None:
        return self._timeout

    @property
    def expired(self) -> bool:
        self._check_expiry()
        return self._reason is not None

    @property
    def reason(self) -> DeadlineExceeded | None:
        """Error describing why the deadline fired, if it has."""

        self._check_expiry()
        return self._reason

    def remaining(self) -> float | None:
        """Seconds until expiry; ``None`` when unbounded, ``0.0`` once fired."""

        if self.expired:
            return 0.0
        if self._expires_at is None:
            return None
        return max(0.0, self._expires_at - time.monotonic())

    def cancel(self, reason: str = "cancelled") -> None:
        """Fire the deadline now; later calls keep the first reason."""

        self._fire(DeadlineExceeded(reason))

    async def wait(self) -> DeadlineExceeded:
        """Suspend until the deadline fires and return its reason."""

        reason = self.reason
        if reason is not None:
            return reason
        try:
            await asyncio.wait_for(self._event.wait(), self.remaining())
        except asyncio.TimeoutError:
            return self._fire(self._timeout_error())
        # Only cancel() sets the event, so the first reason is already recorded.
        return self._fire(DeadlineExceeded())

    def _check_expiry(self) -> None:
        if self._reason is None and self._expires_at is not None and time.monotonic() >= self._expires_at:
            self._fire(self._timeout_error())

    def _timeout_error(self) -> DeadlineExceeded:
        return DeadlineExceeded(f"deadline of {self._timeout:g}s exceeded")

    def _fire(self, reason: DeadlineExceeded) -> DeadlineExceeded:
        if self._reason is not None:
            return self._reason
        self._reason = reason
        self._event.set()
        return reason

    def __repr__(self) -> str:
        if self._reason is not None:
            return f"<Deadline fired: {self._reason.reason}>"
        if self._timeout is None:
            return "<Deadline unbounded>"
        return f"<Deadline {self.remaining():.3f}s left>"


__all__ = ["Deadline"]
