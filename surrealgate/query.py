"""Deadline-bounded execution of blocking driver calls."""

from __future__ import annotations

import asyncio
import functools
import logging
import threading
from typing import Any, Callable

from .config import ConnectionSettings
from .deadline import Deadline
from .errors import DeadlineExceeded
from .models import QueryRequest
from .session import Session

LOG = logging.getLogger(__name__)


class DeadlineQueryExecutor:
    """Runs session calls on a worker thread and stops waiting at the deadline.

    The driver offers no way to cancel a call in flight, so a fired deadline
    only ends the caller's wait. The worker runs to completion on its own and
    whatever it produces afterwards is discarded.
    """

    def __init__(self, *, default_timeout: float | None = None) -> None:
        self._default_timeout = default_timeout

    @classmethod
    def from_settings(cls, settings: ConnectionSettings) -> DeadlineQueryExecutor:
        """Executor whose implicit deadline follows ``query_timeout``."""

        return cls(default_timeout=settings.query_timeout)

    @property
    def default_timeout(self) -> float | None:
        return self._default_timeout

    async def execute(self, session: Session, request: QueryRequest, deadline: Deadline | None = None) -> Any:
        """Return the driver's result for ``request`` or raise its error.

        Raises ``DeadlineExceeded`` when ``deadline`` fires first.
        """

        call = functools.partial(session.query, request)
        return await _race(call, self._resolve(deadline), label=request.statement)

    async def create(self, session: Session, thing: str, data: Any, deadline: Deadline | None = None) -> Any:
        """Create a record under the same deadline semantics as :meth:`execute`."""

        call = functools.partial(session.create, thing, data)
        return await _race(call, self._resolve(deadline), label=f"create {thing}")

    def _resolve(self, deadline: Deadline | None) -> Deadline:
        if deadline is not None:
            return deadline
        return Deadline(self._default_timeout)


async def execute_with_deadline(session: Session, request: QueryRequest, deadline: Deadline) -> Any:
    """Run one query, bounded by ``deadline``."""

    return await DeadlineQueryExecutor().execute(session, request, deadline)


async def create_with_deadline(session: Session, thing: str, data: Any, deadline: Deadline) -> Any:
    """Create one record, bounded by ``deadline``."""

    return await DeadlineQueryExecutor().create(session, thing, data, deadline)


async def _race(call: Callable[[], Any], deadline: Deadline, *, label: str) -> Any:
    reason = deadline.reason
    if reason is not None:
        raise DeadlineExceeded(reason.reason)
    loop = asyncio.get_running_loop()
    outcome = _dispatch(loop, call, label)
    waiter = loop.create_task(deadline.wait())
    try:
        await asyncio.wait((outcome, waiter), return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        if not outcome.done():
            _abandon(outcome, label)
        elif not outcome.cancelled():
            outcome.exception()
        raise
    finally:
        waiter.cancel()
    # When both resolve in the same wake-up the driver's answer wins.
    if outcome.done():
        return outcome.result()
    _abandon(outcome, label)
    # A fresh error per call; a shared deadline's reason must not collect tracebacks.
    raise DeadlineExceeded(waiter.result().reason)


def _dispatch(loop: asyncio.AbstractEventLoop, call: Callable[[], Any], label: str) -> asyncio.Future[Any]:
    """Start ``call`` on a daemon thread; its outcome lands in the returned future."""

    slot: asyncio.Future[Any] = loop.create_future()

    def _deliver(result: Any, error: BaseException | None) -> None:
        if slot.done():
            return
        if error is not None:
            slot.set_exception(error)
        else:
            slot.set_result(result)

    def _worker() -> None:
        try:
            result = call()
        except Exception as exc:
            outcome: tuple[Any, BaseException | None] = (None, exc)
        else:
            outcome = (result, None)
        try:
            loop.call_soon_threadsafe(_deliver, *outcome)
        except RuntimeError:
            # Loop already closed; nobody is left to receive the outcome.
            LOG.debug("Dropping outcome for closed event loop", extra={"statement": label})

    threading.Thread(target=_worker, name="surrealgate-query", daemon=True).start()
    return slot


def _abandon(outcome: asyncio.Future[Any], label: str) -> None:
    LOG.debug("Abandoning in-flight call", extra={"statement": label})
    outcome.add_done_callback(functools.partial(_discard, label=label))


def _discard(future: asyncio.Future[Any], *, label: str) -> None:
    if future.cancelled():
        return
    error = future.exception()
    LOG.debug("Discarded late outcome", extra={"statement": label, "failed": error is not None})


__all__ = [
    "DeadlineQueryExecutor",
    "create_with_deadline",
    "execute_with_deadline",
]
