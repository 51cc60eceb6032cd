"""Projection and sort document builders."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from bson.son import SON

from mongochan.domain.types import SortDirection
from mongochan.errors import DocumentShapeError, SortDirectionError

ID_FIELD = "_id"


def projection(fields: Sequence[Any]) -> SON:
    """Build a projection document from an ordered list of field names.

    An empty list projects every field. Otherwise each field maps to ``1``
    and ``_id`` is excluded unless it was asked for by name.

    Examples:
        >>> projection([])
        SON([])
        >>> projection(["name"])
        SON([('_id', 0), ('name', 1)])
        >>> projection(["_id", "name"])
        SON([('_id', 1), ('name', 1)])
    """
    if isinstance(fields, (str, bytes)) or not isinstance(fields, Sequence):
        raise DocumentShapeError(fields, "a sequence of field names for projection")
    if not fields:
        return SON()

    names = [str(f) for f in fields]
    doc = SON()
    if ID_FIELD not in names:
        doc[ID_FIELD] = 0
    for name in names:
        doc[name] = 1
    return doc


def _direction(value: Any, spec: Mapping[Any, Any]) -> int:
    # bool is an int subclass; True must not read as ascending.
    if isinstance(value, bool):
        raise SortDirectionError(value, spec)
    if isinstance(value, int):
        if value in (1, -1):
            return value
        raise SortDirectionError(value, spec)
    if value == SortDirection.ASC:
        return 1
    if value == SortDirection.DESC:
        return -1
    raise SortDirectionError(value, spec)


def sorting(spec: Mapping[Any, Any]) -> SON:
    """Build a sort document from a ``{field: direction}`` mapping.

    Directions are ``"asc"``/``"desc"`` (or :class:`SortDirection`) and
    ``1``/``-1``. Field order follows the mapping's iteration order.

    Raises:
        SortDirectionError: A direction is anything else.
    """
    if not isinstance(spec, Mapping):
        raise DocumentShapeError(spec, "a mapping of field to direction for sort")
    return SON((str(field), _direction(value, spec)) for field, value in spec.items())
