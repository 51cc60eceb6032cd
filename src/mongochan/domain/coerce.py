"""Native/wire value coercion.

Native values are what application code works with: ``dict`` with string
keys, ``list``/``tuple``, scalars, and ``None``. Wire values are what the
driver exchanges: ``bson.son.SON`` documents and ``list`` arrays.

Coercion is structural and recursive. Mapping key order is preserved at
every level. Anything that is not a mapping, a sequence, or ``None``
(ObjectId, datetime, Binary, Decimal128, numbers, strings, ...) passes
through untouched in both directions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bson.son import SON

from mongochan.domain.types import WriteStatus
from mongochan.errors import DocumentShapeError

# str/bytes are sequences to Python but scalars on the wire.
_ATOMIC_SEQUENCES = (str, bytes, bytearray, memoryview)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and not isinstance(value, _ATOMIC_SEQUENCES)


def to_wire(value: Any) -> Any:
    """Coerce a native value to its wire representation."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return SON((str(k), to_wire(v)) for k, v in value.items())
    if _is_sequence(value):
        return [to_wire(v) for v in value]
    return value


def from_wire(value: Any) -> Any:
    """Coerce a wire value (as returned by the driver) to a native value."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return {str(k): from_wire(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_wire(v) for v in value]
    return value


def to_wire_document(value: Any, *, what: str = "document") -> SON:
    """Coerce a native mapping, rejecting any other shape.

    Raises:
        DocumentShapeError: *value* is not a mapping.
    """
    if not isinstance(value, Mapping):
        raise DocumentShapeError(value, f"a mapping for {what}")
    return to_wire(value)


def to_wire_documents(value: Any, *, what: str = "documents") -> list[SON]:
    """Coerce a native sequence of mappings for a batch write.

    Raises:
        DocumentShapeError: *value* is not a non-empty sequence, or an element is
            not a mapping.
    """
    if not _is_sequence(value) or not value:
        raise DocumentShapeError(value, f"a non-empty sequence of mappings for {what}")
    return [to_wire_document(item, what=what) for item in value]


def decode_write_status(result: Any) -> WriteStatus:
    """Decode a driver update/replace result into a :class:`WriteStatus`.

    Unacknowledged writes report every count as absent instead of raising
    (the driver refuses to read counts from an unacknowledged result).
    """
    if result is None or not getattr(result, "acknowledged", False):
        return WriteStatus(acknowledged=False)
    return WriteStatus(
        acknowledged=True,
        matched_count=getattr(result, "matched_count", None),
        modified_count=getattr(result, "modified_count", None),
        upserted_id=from_wire(getattr(result, "upserted_id", None)),
    )


def decode_deleted_count(result: Any) -> int | None:
    """Decode a driver delete result into the number of removed documents."""
    if result is None or not getattr(result, "acknowledged", False):
        return None
    return int(result.deleted_count)
