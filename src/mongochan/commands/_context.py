"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy connection setup, synchronous
validation-error mapping, and centralized result emission
(stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import click

from mongochan.errors import ValidationError
from mongochan.infrastructure.connection import close, open_connection
from mongochan.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from mongochan.config.settings import MongochanSettings
    from mongochan.infrastructure.connection import Connection
    from mongochan.services.handle import CompletionHandle
    from mongochan.services.result import CommandResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Subcommands access it via ``@click.pass_obj``.  The connection is
    lazily opened on first use so ``--help`` and ``--version`` never
    start a driver loop.
    """

    def __init__(self, settings: MongochanSettings) -> None:
        self.settings = settings
        self._connection: Connection | None = None

        # Configure structured logging
        from mongochan.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        # Enable telemetry context var when verbose
        if settings.verbose:
            from mongochan.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def connection(self) -> Connection:
        """The database connection (opened lazily on first access)."""
        if self._connection is None:
            self._connection = open_connection(self.settings)
        return self._connection

    def close(self) -> None:
        """Close the connection if one was opened."""
        if self._connection is not None:
            close(self._connection)
            self._connection = None

    def run(
        self,
        operation: Callable[..., CompletionHandle | None],
        *args: Any,
        **kwargs: Any,
    ) -> CommandResult:
        """Issue a command in handle mode and wait for its result.

        Validation errors become usage errors (exit code 2); nothing is
        sent to the server in that case.
        """
        try:
            handle = operation(self.connection, *args, **kwargs)
        except ValidationError as exc:
            raise click.UsageError(str(exc)) from exc
        if handle is None:
            raise click.ClickException(f"{operation.__name__} returned no completion handle")
        try:
            return handle.wait(timeout=self.settings.timeout)
        except TimeoutError as exc:
            raise click.ClickException(str(exc)) from exc

    def emit(self, result: CommandResult) -> None:
        """Format and output a CommandResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            max_rows=self.settings.output.max_rows,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
