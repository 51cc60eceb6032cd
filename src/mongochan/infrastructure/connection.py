"""Connection lifecycle: connect, close, collection lookup.

A :class:`Connection` is the immutable pair (driver client, selected
database) plus the :class:`DriverLoop` the client runs on. It is shared
read-only by every in-flight command; closing it is explicit.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import TYPE_CHECKING, Any

import structlog
from pymongo import AsyncMongoClient

from mongochan.infrastructure.runtime import DriverLoop

if TYPE_CHECKING:
    from mongochan.config.settings import MongochanSettings

logger = structlog.get_logger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 27017


@dataclass(frozen=True)
class Connection:
    """Open handle to one database.

    Attributes:
        client: The async driver client.
        db: The selected database object.
        runtime: Event loop thread the client runs on.
    """

    client: Any
    db: Any
    runtime: DriverLoop

    @property
    def database(self) -> str:
        return str(self.db.name)

    def collection(self, name: Any) -> Any:
        """Look up a collection of the selected database."""
        return self.db.get_collection(str(name))

    def close(self) -> None:
        close(self)

    def __enter__(self) -> Connection:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        close(self)


async def _open_client(uri: str, options: dict[str, Any]) -> AsyncMongoClient[Any]:
    # Built on the loop thread so the client binds to the driver loop.
    return AsyncMongoClient(uri, **options)


def connect(
    database: Any,
    *,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    client: Any = None,
    **client_options: Any,
) -> Connection:
    """Connect to *database* and return a ready :class:`Connection`.

    Args:
        database: Database name.
        host: Server host.
        port: Server port.
        client: Pre-built async client (anything with ``get_database(name)``
            and an async ``close()``); when given, host/port are ignored and
            the connection takes ownership of it.
        client_options: Extra keyword arguments for ``AsyncMongoClient``.

    Examples::

        conn = connect("local-database")
        conn = connect("some-database", host="192.168.10.10", port=27017)
    """
    runtime = DriverLoop(name=f"mongochan-{database}")
    try:
        if client is None:
            uri = f"mongodb://{host}:{port}"
            client = runtime.call(lambda: _open_client(uri, client_options))
        db = client.get_database(str(database))
    except BaseException:
        runtime.stop()
        raise
    logger.info("connection.opened", database=str(database), host=host, port=port)
    return Connection(client=client, db=db, runtime=runtime)


def open_connection(settings: MongochanSettings, **client_options: Any) -> Connection:
    """Connect using the ``[connection]`` section of resolved settings."""
    cfg = settings.connection
    return connect(cfg.database, host=cfg.host, port=cfg.port, **client_options)


def close(conn: Connection) -> None:
    """Close the client and stop the driver loop. Idempotent.

    Returns once every driver resource is released. In-flight commands
    are cancelled and complete with an error.
    """
    runtime = conn.runtime
    if not runtime.running:
        return
    try:
        runtime.call(conn.client.close)
    finally:
        runtime.stop()
    logger.info("connection.closed", database=conn.database)


def collection(conn: Connection, name: Any) -> Any:
    """Get a collection from the connection's database."""
    return conn.collection(name)
