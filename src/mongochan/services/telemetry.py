"""Telemetry primitives — Span, start_span, finish_span.

Near-zero overhead when disabled (single ContextVar.get per dispatch).
When enabled via --verbose, every dispatched command gets a span opened
on the calling thread and closed by its completion function on the
driver thread; handle-mode results carry it in ``CommandResult.meta``.
"""

from __future__ import annotations

import time
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

import structlog

from mongochan.services.result import CommandResult

logger = structlog.get_logger("mongochan.telemetry")

# ── Context variables ────────────────────────────────────────────────

_verbose_enabled: ContextVar[bool] = ContextVar("_verbose_enabled", default=False)


# ── Span ─────────────────────────────────────────────────────────────


@dataclass
class Span:
    """Timing span for one dispatched command."""

    name: str
    start_time: float = field(default_factory=time.perf_counter)
    end_time: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time) * 1000

    def end(self) -> None:
        self.end_time = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.annotations:
            result["annotations"] = self.annotations
        return result


# ── Span lifecycle ───────────────────────────────────────────────────


def start_span(name: str, **annotations: Any) -> Span | None:
    """Open a span for a command, or return None when telemetry is off."""
    if not _verbose_enabled.get():
        return None
    return Span(name=name, annotations=dict(annotations))


def finish_span(span: Span | None, *, ok: bool) -> None:
    """Close and log a span. No-op for None."""
    if span is None:
        return
    span.end()
    logger.debug(
        "span.complete",
        span_name=span.name,
        duration_ms=round(span.duration_ms, 2),
        ok=ok,
    )


def inject_meta(result: CommandResult, span: Span | None) -> CommandResult:
    """Create a new CommandResult with span data merged into meta.

    Uses model_copy(update=...) since CommandResult is frozen.
    """
    if span is None:
        return result
    telemetry = {"telemetry": span.to_dict()}
    existing_meta = result.meta or {}
    merged_meta = {**existing_meta, **telemetry}
    return result.model_copy(update={"meta": merged_meta})


# ── Public helpers ───────────────────────────────────────────────────


def enable_telemetry() -> None:
    """Enable verbose telemetry (called by AppContext at startup)."""
    _verbose_enabled.set(True)


def disable_telemetry() -> None:
    """Disable verbose telemetry."""
    _verbose_enabled.set(False)


def telemetry_enabled() -> bool:
    return _verbose_enabled.get()
