"""mongochan — non-blocking MongoDB commands with callbacks or completion handles.

Every command runs on the connection's driver loop and returns at once.
Pass a callback to receive ``(value, error)`` when it completes, or omit
it to get a :class:`CompletionHandle` you can ``wait()`` on or ``await``::

    import mongochan as mc

    with mc.connect("app") as conn:
        mc.insert(conn, "users", {"name": "John", "age": 40}).wait()
        adults = mc.fetch(conn, "users", where={"age": {"$gte": 18}}).wait().unwrap()
        mc.fetch_one(conn, "users", lambda doc, err: print(doc, err), where={"name": "Jane"})
"""

from __future__ import annotations

from mongochan.domain.types import NOT_FOUND, SortDirection, WriteStatus
from mongochan.errors import (
    DocumentShapeError,
    HandleStateError,
    MongochanError,
    OperationError,
    OptionValueError,
    SignatureError,
    SortDirectionError,
    ValidationError,
)
from mongochan.infrastructure.connection import (
    Connection,
    close,
    collection,
    connect,
    open_connection,
)
from mongochan.services.handle import CompletionHandle
from mongochan.services.operations import (
    drop_collection,
    fetch,
    fetch_count,
    fetch_one,
    insert,
    insert_many,
    remove,
    remove_one,
    replace_one,
)
from mongochan.services.result import CommandError, CommandResult

__version__ = "0.3.0"

__all__ = [
    "NOT_FOUND",
    "CommandError",
    "CommandResult",
    "CompletionHandle",
    "Connection",
    "DocumentShapeError",
    "HandleStateError",
    "MongochanError",
    "OperationError",
    "OptionValueError",
    "SignatureError",
    "SortDirection",
    "SortDirectionError",
    "ValidationError",
    "WriteStatus",
    "__version__",
    "close",
    "collection",
    "connect",
    "drop_collection",
    "fetch",
    "fetch_count",
    "fetch_one",
    "insert",
    "insert_many",
    "open_connection",
    "remove",
    "remove_one",
    "replace_one",
]
