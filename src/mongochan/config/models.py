"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, mongochan.toml only contains
overrides. A bare install connects to ``test`` on 127.0.0.1:27017.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- mongochan.toml sections ---


class ConnectionConfig(BaseModel):
    """[connection] section."""

    model_config = {"frozen": True}

    host: str = "127.0.0.1"
    port: int = Field(default=27017, ge=1, le=65535)
    database: str = "test"


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    max_rows: int = Field(default=50, ge=1)
