"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``MONGOCHAN_*`` prefix (``__`` for nested sections)
  3. TOML file    — ``mongochan.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from mongochan.config.discovery import find_config, read_config
from mongochan.config.models import ConnectionConfig, OutputConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``mongochan.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = read_config(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class MongochanSettings(BaseSettings):
    """Unified settings for the mongochan CLI and ``open_connection``.

    Attributes:
        config_path: Resolved ``mongochan.toml``, or None when none was found.
        timeout: Seconds the CLI waits on a completion handle.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "MONGOCHAN_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    timeout: float = 30.0

    # --- TOML sections ---
    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        start: Path | None = None,
        host: str | None = None,
        port: int | None = None,
        database: str | None = None,
        **cli_flags: Any,
    ) -> MongochanSettings:
        """Construct settings from a CLI invocation.

        Discovers ``mongochan.toml`` via walk-up from *start* (or uses the
        explicit *config_path*), then merges CLI flags as highest-priority
        overrides. ``host``/``port``/``database`` override the
        ``[connection]`` section field by field.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            settings = cls(config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

        overrides = {
            key: value
            for key, value in (("host", host), ("port", port), ("database", database))
            if value is not None
        }
        if overrides:
            connection = settings.connection.model_copy(update=overrides)
            settings = settings.model_copy(update={"connection": connection})
        return settings
