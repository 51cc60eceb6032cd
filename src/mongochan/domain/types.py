"""Shared value types: sort directions, the not-found sentinel, write status."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Final

from pydantic import BaseModel


class SortDirection(StrEnum):
    """Symbolic sort directions accepted by :func:`~mongochan.domain.query.sorting`."""

    ASC = "asc"
    DESC = "desc"


class NotFound:
    """Type of the :data:`NOT_FOUND` singleton."""

    _instance: NotFound | None = None

    def __new__(cls) -> NotFound:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __reduce__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND: Final = NotFound()
"""Successful single-result fetch that matched nothing.

Distinct from ``None`` (no value delivered yet) and from any error.
"""


class WriteStatus(BaseModel):
    """Decoded outcome of a replace/update write.

    Attributes:
        acknowledged: Whether the server acknowledged the write.
        matched_count: Documents matching the filter (None if unacknowledged).
        modified_count: Documents actually modified (None if unacknowledged).
        upserted_id: ``_id`` of the upserted document, if an upsert happened.
    """

    model_config = {"frozen": True}

    acknowledged: bool
    matched_count: int | None = None
    modified_count: int | None = None
    upserted_id: Any = None
