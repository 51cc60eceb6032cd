"""DriverLoop — the driver's own execution context.

PyMongo's async client runs on an asyncio event loop. Each connection owns
one loop running on a daemon thread, so commands can be issued from any
thread (sync or async code) without blocking it. :meth:`DriverLoop.execute`
is the single async primitive the dispatcher relies on: it starts one
driver coroutine and invokes a completion function exactly once, on the
loop thread, with ``(result, None)`` or ``(None, error)``.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

Completion = Callable[[Any, BaseException | None], None]


def _outcome(task: asyncio.Future[Any]) -> tuple[Any, BaseException | None]:
    if task.cancelled():
        return None, asyncio.CancelledError()
    exc = task.exception()
    if exc is not None:
        return None, exc
    return task.result(), None


class DriverLoop:
    """An asyncio event loop on a dedicated daemon thread.

    Parameters:
        name: Thread name (shows up in logs and debuggers).
    """

    def __init__(self, name: str = "mongochan-driver") -> None:
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._started = threading.Event()
        self._stopped = False
        self._thread.start()
        self._started.wait()

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.call_soon(self._started.set)
        self._loop.run_forever()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return not self._stopped and self._thread.is_alive()

    def in_loop_thread(self) -> bool:
        return threading.current_thread() is self._thread

    def execute(self, operation: Callable[[], Awaitable[Any]], done: Completion) -> None:
        """Start *operation* on the loop; call *done* once when it settles.

        *operation* is a zero-argument coroutine factory, invoked on the
        loop thread. Returns immediately.
        """
        if not self.running:
            raise RuntimeError("driver loop is closed")

        def _start() -> None:
            task = self._loop.create_task(_awaitable(operation))
            task.add_done_callback(lambda t: done(*_outcome(t)))

        self._loop.call_soon_threadsafe(_start)

    def call(self, operation: Callable[[], Awaitable[_T]], timeout: float | None = None) -> _T:
        """Run *operation* on the loop and block until it finishes.

        Used for connection setup/teardown only. Must not be called from
        the loop thread itself.
        """
        if self.in_loop_thread():
            raise RuntimeError("DriverLoop.call() would deadlock on the driver thread")
        future = asyncio.run_coroutine_threadsafe(_awaitable(operation), self._loop)
        return future.result(timeout=timeout)

    def stop(self) -> None:
        """Cancel pending driver tasks, stop the loop, and join its thread."""
        if self._stopped:
            return
        if self.in_loop_thread():
            raise RuntimeError("DriverLoop.stop() cannot run on the driver thread")
        try:
            asyncio.run_coroutine_threadsafe(_cancel_pending(), self._loop).result()
        finally:
            self._stopped = True
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join()
            self._loop.close()
            logger.debug("Driver loop %s stopped", self._thread.name)


async def _awaitable(operation: Callable[[], Awaitable[_T]]) -> _T:
    return await operation()


async def _cancel_pending() -> None:
    current = asyncio.current_task()
    pending = [t for t in asyncio.all_tasks() if t is not current and not t.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
