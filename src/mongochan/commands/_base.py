"""Custom Click base classes and parameter types.

Provides McCommand and McGroup that accept an ``examples`` parameter.
When ``--examples`` is passed, the command prints usage examples and exits.
This keeps ``--help`` concise while making examples available on demand.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import click
from bson import json_util


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class McCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class McGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = McCommand`` so all subcommands automatically
    accept the ``examples`` parameter without explicit ``cls=`` each time.
    """

    command_class = McCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class ExtendedJson(click.ParamType):
    """MongoDB extended JSON (``{"$oid": ...}``, ``{"$date": ...}``) via bson.json_util.

    Parameters:
        expect: ``"object"`` for a single document, ``"array"`` for a list of
            documents, ``"any"`` for either.
    """

    name = "json"

    def __init__(self, expect: str = "object") -> None:
        self.expect = expect

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> Any:
        if not isinstance(value, str):
            return value
        try:
            parsed = json_util.loads(value)
        except ValueError as exc:
            self.fail(f"invalid JSON: {exc}", param, ctx)
        if self.expect == "object" and not isinstance(parsed, Mapping):
            self.fail("expected a JSON object", param, ctx)
        if self.expect == "array" and not isinstance(parsed, list):
            self.fail("expected a JSON array", param, ctx)
        return parsed


JSON_OBJECT = ExtendedJson("object")
JSON_DOCUMENTS = ExtendedJson("any")


def parse_sort(
    _ctx: click.Context, _param: click.Parameter, values: tuple[str, ...]
) -> dict[str, Any]:
    """Click callback: ``("age:desc", "name")`` -> ``{"age": "desc", "name": "asc"}``.

    Integer directions (``1``/``-1``) are converted; anything else is left
    for the sort builder to accept or reject.
    """
    spec: dict[str, Any] = {}
    for item in values:
        field, sep, direction = item.rpartition(":")
        if not sep:
            field, direction = direction, "asc"
        if not field:
            raise click.BadParameter(f"missing field name in {item!r}")
        try:
            spec[field] = int(direction)
        except ValueError:
            spec[field] = direction
    return spec
