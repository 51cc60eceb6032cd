"""Rich/JSON output helpers.

The CLI renders CommandResult for humans (Rich tables and fields) or
machines (--json). JSON goes through ``bson.json_util`` so ObjectIds,
dates and binary values survive as MongoDB extended JSON.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from bson import json_util
from pydantic import BaseModel

from mongochan.domain.types import NOT_FOUND

if TYPE_CHECKING:
    from mongochan.services.result import CommandResult


class OutputSettings(BaseModel):
    """Output switches resolved from the CLI flags."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    max_rows: int = 50


def plain_value(value: Any) -> Any:
    """Turn a result value into plain data (models dumped, sentinel to None)."""
    if value is NOT_FOUND:
        return None
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


def result_payload(result: CommandResult) -> dict[str, Any]:
    """Serializable view of a CommandResult."""
    payload: dict[str, Any] = {"ok": result.ok, "op": result.op}
    if result.ok:
        payload["value"] = plain_value(result.value)
        if result.value is NOT_FOUND:
            payload["not_found"] = True
    elif result.error is not None:
        payload["error"] = result.error.model_dump()
    if result.meta:
        payload["meta"] = result.meta
    return payload


def dumps(value: Any, *, indent: int | None = None) -> str:
    """Extended-JSON encode a value."""
    return json_util.dumps(value, indent=indent)


def format_result(result: CommandResult, *, settings: OutputSettings | None = None) -> str:
    """Format a CommandResult for display.

    Args:
        result: The command result to format.
        settings: Output switches; defaults to human-readable output.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return dumps(result_payload(result), indent=2)

    from mongochan.output.renderers import render_quiet, render_result

    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose, max_rows=settings.max_rows)
