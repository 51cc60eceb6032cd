"""Dual-mode command dispatch over the driver's single-completion primitive.

Every command goes through the same stages:

1. bound      — the signature binder resolved positionals, options, callback
2. validated  — native arguments coerced, projection/sort built; any
                :class:`~mongochan.errors.ValidationError` is raised here,
                on the caller's thread, and nothing is dispatched
3. dispatched — exactly one driver operation is started via
                :func:`dispatch`
4. completed  — the driver calls the completion function exactly once;
                the decoded value or the error is handed to the caller's
                callback, or written into the returned CompletionHandle

Stages 1-2 live in :mod:`mongochan.services.operations`; this module owns
3-4.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import structlog

from mongochan.errors import OperationError
from mongochan.services.handle import CompletionHandle
from mongochan.services.result import CommandResult
from mongochan.services.telemetry import finish_span, inject_meta, start_span

if TYPE_CHECKING:
    from mongochan.infrastructure.connection import Connection

logger = structlog.get_logger(__name__)

Callback = Callable[[Any, OperationError | None], Any]
Decoder = Callable[[Any], Any]


def dispatch(
    conn: Connection,
    op: str,
    coll: Any,
    operation: Callable[[], Awaitable[Any]],
    decode: Decoder,
    callback: Callback | None,
) -> CompletionHandle | None:
    """Issue one driver operation and route its outcome.

    Args:
        conn: Open connection whose driver loop runs the operation.
        op: Command name for results, errors, and logs.
        coll: Target collection name.
        operation: Zero-argument coroutine factory performing the driver call
            with already-built wire documents.
        decode: Turns the driver's raw result into the native value.
        callback: ``callback(value, error)``; when None a handle is returned.

    Returns:
        The CompletionHandle in handle mode, None in callback mode.
    """
    name = str(coll)
    span = start_span(op, collection=name)
    handle = CompletionHandle(op) if callback is None else None

    def complete(result: Any, error: BaseException | None) -> None:
        value: Any = None
        if error is None:
            try:
                value = decode(result)
            except Exception as exc:
                error = exc
        failure = None if error is None else OperationError(op, name, error)

        finish_span(span, ok=failure is None)
        if failure is None:
            logger.debug("command.completed", op=op, collection=name)
        else:
            logger.warning("command.failed", op=op, collection=name, error=str(failure))

        if callback is not None:
            try:
                callback(value, failure)
            except Exception:
                logger.exception("command.callback_failed", op=op, collection=name)
        elif handle is not None:
            outcome = (
                CommandResult.success(op, value)
                if failure is None
                else CommandResult.failure(op, failure)
            )
            handle.complete(inject_meta(outcome, span))

    logger.debug(
        "command.dispatched",
        op=op,
        collection=name,
        mode="handle" if handle is not None else "callback",
    )
    conn.runtime.execute(operation, complete)
    return handle
