"""Command: fetch documents, counts, or query plans."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from mongochan.commands._base import JSON_OBJECT, McCommand, parse_sort
from mongochan.services import operations

if TYPE_CHECKING:
    from mongochan.commands._context import AppContext

_FETCH_EXAMPLES = """\
  mongochan fetch users
  mongochan fetch users --where '{"age": {"$gte": 10}}'
  mongochan fetch users --only name --only age --sort age:desc --limit 5
  mongochan fetch users --where '{"name": "Jane"}' --one
  mongochan fetch users --where '{"age": {"$lt": 18}}' --count
  mongochan --json fetch users --one --explain"""


@click.command(cls=McCommand, examples=_FETCH_EXAMPLES)
@click.argument("coll")
@click.option("--where", type=JSON_OBJECT, default="{}", help="Filter document (extended JSON).")
@click.option("--only", multiple=True, help="Project this field (repeatable).")
@click.option(
    "--sort",
    multiple=True,
    callback=parse_sort,
    help="Sort by FIELD[:asc|desc|1|-1] (repeatable).",
)
@click.option("--skip", default=0, type=click.IntRange(min=0), help="Documents to skip.")
@click.option("--limit", default=0, type=click.IntRange(min=0), help="Max documents (0 = all).")
@click.option("--one", is_flag=True, help="Only the first matching document.")
@click.option("--count", "count_only", is_flag=True, help="Count matching documents.")
@click.option("--explain", is_flag=True, help="Show the query plan instead of documents.")
@click.pass_obj
def fetch(
    app: AppContext,
    coll: str,
    where: dict[str, Any],
    only: tuple[str, ...],
    sort: dict[str, Any],
    skip: int,
    limit: int,
    one: bool,
    count_only: bool,
    explain: bool,
) -> None:
    """Fetch documents from collection COLL."""
    result = app.run(
        operations.fetch,
        coll,
        where=where,
        only=list(only),
        sort=sort,
        skip=skip,
        limit=limit,
        count=count_only,
        one=one,
        explain=explain,
    )
    app.emit(result)
