"""Locating and reading ``mongochan.toml``.

The file is found by walking up from the working directory, the way git
finds ``.git/``. ``MONGOCHAN_CONFIG`` pins an explicit file and disables
the walk; ``--config`` on the CLI bypasses discovery entirely.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

CONFIG_FILENAME = "mongochan.toml"
CONFIG_ENV_VAR = "MONGOCHAN_CONFIG"


def _walk_up(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), or None.

    A ``MONGOCHAN_CONFIG`` naming a missing file yields None rather than
    falling back to the walk.
    """
    pinned = os.environ.get(CONFIG_ENV_VAR)
    if pinned:
        path = Path(pinned)
        return path if path.is_file() else None
    return _walk_up((start or Path.cwd()).resolve())


def read_config(path: Path | None) -> dict[str, Any]:
    """Parse *path* into raw section tables; empty when there is no file.

    Raises:
        click.ClickException: The file is not valid TOML.
    """
    if path is None or not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc
