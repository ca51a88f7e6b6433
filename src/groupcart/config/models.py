"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, groupcart.toml only contains
overrides. A fresh install needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """[database] section."""

    model_config = {"frozen": True}

    # None means the default SQLite file under the data root.
    url: str | None = None
    echo: bool = False
    busy_timeout_ms: int = Field(default=5000, ge=0)
    # Only applied to non-SQLite engines (e.g. "SERIALIZABLE" on PostgreSQL).
    isolation_level: str | None = None


class GroupCartConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
