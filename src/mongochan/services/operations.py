"""Database commands with callback or completion-handle delivery.

Each command takes ``(conn, coll, ...positionals...)``, then named options
(as keywords or as ``name, value`` pairs in the tail) and an optional
callback anywhere in the tail. With a callback the command returns None
and later calls ``callback(value, error)`` on the driver thread; without
one it returns a :class:`~mongochan.services.handle.CompletionHandle`.

Validation errors (bad sort direction, malformed documents, bad skip or
limit) are raised immediately and nothing is sent to the driver.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from bson.son import SON

from mongochan.domain.coerce import (
    decode_deleted_count,
    decode_write_status,
    from_wire,
    to_wire_document,
    to_wire_documents,
)
from mongochan.domain.query import projection, sorting
from mongochan.domain.signature import command
from mongochan.domain.types import NOT_FOUND
from mongochan.errors import OptionValueError
from mongochan.services.dispatch import Callback, dispatch
from mongochan.services.handle import CompletionHandle

if TYPE_CHECKING:
    from mongochan.infrastructure.connection import Connection


def _non_negative(value: Any, option: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise OptionValueError(option, value, "expected an integer")
    if value < 0:
        raise OptionValueError(option, value, "must not be negative")
    return value


def _filter(where: Any) -> SON:
    return to_wire_document(where, what="where")


def _first(docs: list[Any]) -> Any:
    return NOT_FOUND if not docs else from_wire(docs[0])


def _as_int(value: Any) -> int:
    return int(value)


# --- Writes ---


@command("conn", "coll", "data", many=False)
def insert(
    conn: Connection,
    coll: Any,
    data: Any,
    *,
    many: bool,
    callback: Callback | None,
) -> CompletionHandle | None:
    """Insert *data* into *coll*.

    With ``many=True`` *data* must be a sequence of mappings and a batch
    insert is performed. Delivers the inserted document(s), ``_id`` included.
    """
    collection = conn.collection(coll)
    if many:
        docs = to_wire_documents(data, what="insert")
        return dispatch(
            conn,
            "insert_many",
            coll,
            lambda: collection.insert_many(docs),
            lambda _result: from_wire(docs),
            callback,
        )
    doc = to_wire_document(data, what="insert")
    return dispatch(
        conn,
        "insert",
        coll,
        lambda: collection.insert_one(doc),
        lambda _result: from_wire(doc),
        callback,
    )


@command("conn", "coll", "data")
def insert_many(
    conn: Connection,
    coll: Any,
    data: Any,
    *,
    callback: Callback | None,
) -> CompletionHandle | None:
    """Batch insert; same as ``insert(..., many=True)``."""
    return insert(conn, coll, data, many=True, callback=callback)


@command("conn", "coll", "replacement", where={}, upsert=False)
def replace_one(
    conn: Connection,
    coll: Any,
    replacement: Any,
    *,
    where: Mapping[str, Any],
    upsert: bool,
    callback: Callback | None,
) -> CompletionHandle | None:
    """Replace the first document matching *where* with *replacement*.

    Performs an upsert when ``upsert=True``. Delivers a
    :class:`~mongochan.domain.types.WriteStatus`.
    """
    query = _filter(where)
    doc = to_wire_document(replacement, what="replacement")
    collection = conn.collection(coll)
    return dispatch(
        conn,
        "replace_one",
        coll,
        lambda: collection.replace_one(query, doc, upsert=bool(upsert)),
        decode_write_status,
        callback,
    )


@command("conn", "coll", where={}, one=False)
def remove(
    conn: Connection,
    coll: Any,
    *,
    where: Mapping[str, Any],
    one: bool,
    callback: Callback | None,
) -> CompletionHandle | None:
    """Remove documents matching *where*; only the first one when ``one=True``.

    Delivers the number of removed documents.
    """
    query = _filter(where)
    collection = conn.collection(coll)
    delete = collection.delete_one if one else collection.delete_many
    return dispatch(
        conn,
        "remove",
        coll,
        lambda: delete(query),
        decode_deleted_count,
        callback,
    )


@command("conn", "coll", where={})
def remove_one(
    conn: Connection,
    coll: Any,
    *,
    where: Mapping[str, Any],
    callback: Callback | None,
) -> CompletionHandle | None:
    """Remove the first document matching *where*."""
    return remove(conn, coll, where=where, one=True, callback=callback)


@command("conn", "coll")
def drop_collection(
    conn: Connection,
    coll: Any,
    *,
    callback: Callback | None,
) -> CompletionHandle | None:
    """Drop *coll*. Delivers the collection name on success."""
    collection = conn.collection(coll)
    return dispatch(
        conn,
        "drop_collection",
        coll,
        collection.drop,
        lambda _result: coll,
        callback,
    )


# --- Reads ---


@command(
    "conn",
    "coll",
    where={},
    only=[],
    sort={},
    skip=0,
    limit=0,
    count=False,
    one=False,
    explain=False,
)
def fetch(
    conn: Connection,
    coll: Any,
    *,
    where: Mapping[str, Any],
    only: list[str],
    sort: Mapping[str, Any],
    skip: int,
    limit: int,
    count: bool,
    one: bool,
    explain: bool,
    callback: Callback | None,
) -> CompletionHandle | None:
    """Fetch documents from *coll*.

    Options:
        where: Filter document.
        only: Field names to project (``_id`` excluded unless listed).
        sort: ``{field: "asc" | "desc" | 1 | -1}``.
        skip: Number of documents to skip.
        limit: Maximum number of documents (0 = unbounded).
        count: Deliver the number of matching documents instead;
            every other option but *where* is ignored.
        one: Deliver only the first match, or ``NOT_FOUND``.
        explain: Deliver the query plan instead of documents.
    """
    query = _filter(where)
    collection = conn.collection(coll)

    if count:
        return dispatch(
            conn,
            "fetch_count",
            coll,
            lambda: collection.count_documents(query),
            _as_int,
            callback,
        )

    proj = projection(only)
    order = sorting(sort)
    skip = _non_negative(skip, "skip")
    limit = 1 if one else _non_negative(limit, "limit")

    def cursor() -> Any:
        cur = collection.find(query, proj or None)
        if order:
            cur = cur.sort(list(order.items()))
        if skip:
            cur = cur.skip(skip)
        if limit:
            cur = cur.limit(limit)
        return cur

    if explain:

        async def run_explain() -> Any:
            return await cursor().explain()

        return dispatch(conn, "fetch_explain", coll, run_explain, from_wire, callback)

    async def run_find() -> list[Any]:
        return await cursor().to_list(None)

    if one:
        return dispatch(conn, "fetch_one", coll, run_find, _first, callback)
    return dispatch(conn, "fetch", coll, run_find, from_wire, callback)


@command("conn", "coll", where={})
def fetch_count(
    conn: Connection,
    coll: Any,
    *,
    where: Mapping[str, Any],
    callback: Callback | None,
) -> CompletionHandle | None:
    """Count the documents in *coll*, optionally restricted by *where*."""
    return fetch(conn, coll, where=where, count=True, callback=callback)


@command("conn", "coll", where={}, only=[], explain=False)
def fetch_one(
    conn: Connection,
    coll: Any,
    *,
    where: Mapping[str, Any],
    only: list[str],
    explain: bool,
    callback: Callback | None,
) -> CompletionHandle | None:
    """Fetch the first document matching *where*, or ``NOT_FOUND``.

    ``NOT_FOUND`` is delivered the same way in both modes and is never an error.
    """
    return fetch(
        conn, coll, where=where, only=only, one=True, explain=explain, callback=callback
    )
