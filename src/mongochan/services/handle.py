"""CompletionHandle — one-shot result slot for commands issued without a callback.

One producer (the dispatcher's completion function, running on the
driver thread) writes exactly one :class:`CommandResult`; one consumer
reads it exactly once, either by blocking a thread (:meth:`wait`),
by awaiting it from any event loop (``await handle``), or by polling
(:meth:`done` then :meth:`take`).

Three states never overlap: pending (``done()`` is False), completed with
``ok=True`` (the value may be ``NOT_FOUND``), completed with ``ok=False``.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Generator
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any

from mongochan.errors import HandleCompletedError, HandleConsumedError, HandleEmptyError
from mongochan.services.result import CommandResult


class CompletionHandle:
    """Single-slot, single-write container for one command's outcome."""

    def __init__(self, op: str) -> None:
        self.op = op
        self._future: Future[CommandResult] = Future()
        self._lock = threading.Lock()
        self._consumed = False

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else "done" if self.done() else "pending"
        return f"<CompletionHandle op={self.op!r} {state}>"

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def complete(self, result: CommandResult) -> None:
        """Write the single result.

        Raises:
            HandleCompletedError: The handle already holds a result.
        """
        with self._lock:
            if self._future.done():
                raise HandleCompletedError(f"handle for {self.op!r} is already complete")
            self._future.set_result(result)

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    def done(self) -> bool:
        """True once a result has been written."""
        return self._future.done()

    def take(self) -> CommandResult:
        """Read the result without waiting.

        Raises:
            HandleEmptyError: No result has been written yet.
            HandleConsumedError: The result was already read.
        """
        with self._lock:
            if not self._future.done():
                raise HandleEmptyError(f"handle for {self.op!r} is not complete yet")
            return self._consume()

    def wait(self, timeout: float | None = None) -> CommandResult:
        """Block the current thread until the result is available, then read it.

        Must not be called from the driver's own thread.

        Raises:
            TimeoutError: *timeout* elapsed first (the handle stays readable).
            HandleConsumedError: The result was already read.
        """
        try:
            self._future.result(timeout=timeout)
        except FutureTimeoutError as exc:
            raise TimeoutError(f"handle for {self.op!r} not complete after {timeout}s") from exc
        with self._lock:
            return self._consume()

    def __await__(self) -> Generator[Any, None, CommandResult]:
        return self._wait_async().__await__()

    async def _wait_async(self) -> CommandResult:
        # shield: a cancelled awaiter must not cancel the producer's slot.
        await asyncio.shield(asyncio.wrap_future(self._future))
        with self._lock:
            return self._consume()

    def _consume(self) -> CommandResult:
        if self._consumed:
            raise HandleConsumedError(f"handle for {self.op!r} was already read")
        self._consumed = True
        return self._future.result()
