"""Error taxonomy for mongochan.

Two families with different delivery rules:

- :class:`ValidationError` and its subclasses are raised synchronously on
  the calling thread, before any driver operation is issued.
- :class:`OperationError` wraps a failure reported by the driver. It is
  data: delivered through the callback's error slot or written into a
  :class:`~mongochan.services.handle.CompletionHandle`, never raised on
  the calling thread.

A "not found" single-result fetch is not an error at all; see
:data:`mongochan.domain.types.NOT_FOUND`.
"""

from __future__ import annotations

from typing import Any


class MongochanError(Exception):
    """Base exception for all mongochan failures."""


# --- Validation (synchronous) ---


class ValidationError(MongochanError, ValueError):
    """Command arguments failed structural validation before dispatch."""


class SortDirectionError(ValidationError):
    """A sort specification carried a direction other than asc/desc/1/-1."""

    def __init__(self, value: Any, spec: Any) -> None:
        self.value = value
        self.spec = spec
        super().__init__(f"Can't sort {value!r} (sort spec: {spec!r})")


class DocumentShapeError(ValidationError):
    """A native value does not have the shape a command requires."""

    def __init__(self, value: Any, expected: str) -> None:
        self.value = value
        self.expected = expected
        super().__init__(f"Expected {expected}, got {type(value).__name__}: {value!r}")


class OptionValueError(ValidationError):
    """A named option carried a value outside its domain."""

    def __init__(self, option: str, value: Any, reason: str) -> None:
        self.option = option
        self.value = value
        super().__init__(f"Invalid value for option {option!r}: {value!r} ({reason})")


class SignatureError(ValidationError, TypeError):
    """A command was called with arguments its signature cannot bind."""


# --- Driver failures (delivered, never raised) ---


class OperationError(MongochanError):
    """A driver-reported failure for one dispatched command."""

    def __init__(self, op: str, collection: str | None, cause: BaseException) -> None:
        self.op = op
        self.collection = collection
        self.cause = cause
        self.__cause__ = cause
        target = "<unknown>" if collection is None else collection
        super().__init__(f"{op} failed for '{target}': {type(cause).__name__}: {cause}")


# --- Completion handle misuse ---


class HandleStateError(MongochanError, RuntimeError):
    """A completion handle was used out of protocol."""


class HandleEmptyError(HandleStateError):
    """Non-blocking read of a handle that has not been completed yet."""


class HandleConsumedError(HandleStateError):
    """The handle's single value was already read."""


class HandleCompletedError(HandleStateError):
    """A second write was attempted on a completed handle."""
