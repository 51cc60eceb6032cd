"""Commands: insert, remove, replace, drop."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import click

from mongochan.commands._base import JSON_DOCUMENTS, JSON_OBJECT, McCommand
from mongochan.services import operations

if TYPE_CHECKING:
    from mongochan.commands._context import AppContext


@click.command(
    cls=McCommand,
    examples="""\
  mongochan insert users '{"name": "John", "age": 40}'
  mongochan insert users '[{"name": "Jane"}, {"name": "Johnny"}]' --many""",
)
@click.argument("coll")
@click.argument("data", type=JSON_DOCUMENTS)
@click.option("--many", is_flag=True, help="DATA is an array; insert every element.")
@click.pass_obj
def insert(app: AppContext, coll: str, data: Any, many: bool) -> None:
    """Insert DATA (extended JSON) into collection COLL."""
    if isinstance(data, list) and not many:
        raise click.UsageError("DATA is an array; pass --many for a batch insert")
    if isinstance(data, Mapping) and many:
        raise click.UsageError("--many expects DATA to be an array")
    app.emit(app.run(operations.insert, coll, data, many=many))


@click.command(
    cls=McCommand,
    examples="""\
  mongochan remove users --where '{"age": {"$lt": 10}}'
  mongochan remove users --where '{"name": "John"}' --one""",
)
@click.argument("coll")
@click.option("--where", type=JSON_OBJECT, default="{}", help="Filter document (extended JSON).")
@click.option("--one", is_flag=True, help="Remove only the first match.")
@click.pass_obj
def remove(app: AppContext, coll: str, where: dict[str, Any], one: bool) -> None:
    """Remove documents from collection COLL."""
    app.emit(app.run(operations.remove, coll, where=where, one=one))


@click.command(
    cls=McCommand,
    examples="""\
  mongochan replace users '{"name": "John", "age": 41}' --where '{"name": "John"}'
  mongochan replace users '{"name": "Ann"}' --where '{"name": "Ann"}' --upsert""",
)
@click.argument("coll")
@click.argument("replacement", type=JSON_OBJECT)
@click.option("--where", type=JSON_OBJECT, default="{}", help="Filter document (extended JSON).")
@click.option("--upsert", is_flag=True, help="Insert REPLACEMENT when nothing matches.")
@click.pass_obj
def replace(
    app: AppContext,
    coll: str,
    replacement: dict[str, Any],
    where: dict[str, Any],
    upsert: bool,
) -> None:
    """Replace the first document in COLL matching --where."""
    app.emit(app.run(operations.replace_one, coll, replacement, where=where, upsert=upsert))


@click.command(cls=McCommand, examples="  mongochan drop users")
@click.argument("coll")
@click.pass_obj
def drop(app: AppContext, coll: str) -> None:
    """Drop collection COLL."""
    app.emit(app.run(operations.drop_collection, coll))
