"""Root CLI group for mongochan with global flags and command registration."""

from __future__ import annotations

import click

from mongochan import __version__
from mongochan.commands import register_commands
from mongochan.commands._base import McGroup
from mongochan.commands._context import AppContext
from mongochan.config.settings import MongochanSettings

_ROOT_EXAMPLES = """\
  mongochan fetch users --where '{"age": {"$gte": 10}}'
  mongochan -d shop --host 10.0.0.5 fetch orders --count
  mongochan --json insert users '{"name": "John", "age": 40}'"""


@click.group(cls=McGroup, invoke_without_command=True, examples=_ROOT_EXAMPLES)
@click.version_option(version=__version__, prog_name="mongochan")
@click.option("--host", default=None, help="Server host (default 127.0.0.1).")
@click.option("--port", default=None, type=click.IntRange(1, 65535), help="Server port.")
@click.option("-d", "--database", default=None, help="Database name.")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.option("--timeout", default=None, type=float, help="Seconds to wait for a result.")
@click.pass_context
def cli(
    ctx: click.Context,
    host: str | None,
    port: int | None,
    database: str | None,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
    timeout: float | None,
) -> None:
    """mongochan — MongoDB commands with callbacks or completion handles."""
    ctx.ensure_object(dict)
    flags = {"timeout": timeout} if timeout is not None else {}
    settings = MongochanSettings.from_cli(
        config_path=config_path,
        host=host,
        port=port,
        database=database,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        **flags,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
