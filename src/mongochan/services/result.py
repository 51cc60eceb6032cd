"""CommandResult and CommandError — the completion-handle contract.

INVARIANT: a completion handle only ever carries a CommandResult.
``ok=True`` with ``value=NOT_FOUND`` is a successful empty fetch and must
never be read as a failure; ``ok=False`` always carries an ``error``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from mongochan.errors import OperationError


class CommandError(BaseModel):
    """Structured error payload within a CommandResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)
    exception: Any = Field(default=None, exclude=True, repr=False)

    @classmethod
    def from_exception(cls, exc: OperationError) -> CommandError:
        return cls(
            code=type(exc.cause).__name__,
            message=str(exc.cause),
            detail={"op": exc.op, "collection": exc.collection},
            exception=exc,
        )


class CommandResult(BaseModel):
    """Outcome of one dispatched command.

    Attributes:
        ok: Whether the driver reported success.
        op: Command name (e.g. ``"fetch"``).
        value: Decoded result on success (may be ``NOT_FOUND``).
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry spans).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    value: Any = None
    error: CommandError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(cls, op: str, value: Any) -> CommandResult:
        return cls(ok=True, op=op, value=value)

    @classmethod
    def failure(cls, op: str, exc: OperationError) -> CommandResult:
        return cls(ok=False, op=op, error=CommandError.from_exception(exc))

    def unwrap(self) -> Any:
        """Return the value, or raise the carried OperationError."""
        if self.ok:
            return self.value
        if self.error is None:
            raise OperationError(self.op, None, RuntimeError("failed without an error payload"))
        exc = self.error.exception
        if isinstance(exc, BaseException):
            raise exc
        collection = self.error.detail.get("collection")
        raise OperationError(self.op, collection, RuntimeError(self.error.message))
