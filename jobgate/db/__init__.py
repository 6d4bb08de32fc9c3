"""Persistence layer for coordinator jobs and actions."""

from __future__ import annotations

import os
from typing import Optional

from ..config import JobGateConfig, load_config
from .coordinator_db import CoordinatorDB
from .models import (
    CoordinatorAction,
    CoordinatorActionStatus,
    CoordinatorJob,
    action_id,
)
from .queries import ActionQuery, named_query


def normalize_database_url(database_url: str) -> str:
    """Select the async driver for plain ``sqlite://`` and ``postgres://`` URLs."""

    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return database_url


def get_database(
    database_url: Optional[str] = None, config: Optional[JobGateConfig] = None
) -> CoordinatorDB:
    """Factory function to obtain a :class:`CoordinatorDB`.

    The URL can be provided explicitly, via environment variable
    ``JOBGATE_DATABASE_URL`` or ``DATABASE_URL``, or from loaded
    configuration.
    """

    config = config or load_config()
    database_url = (
        database_url
        or os.getenv("JOBGATE_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or config.database.url
    )
    if not database_url:
        raise ValueError(
            "No database configured; pass a URL or set JOBGATE_DATABASE_URL"
        )
    return CoordinatorDB(
        normalize_database_url(database_url),
        echo=config.database.echo,
        query_config=config.query,
    )


__all__ = [
    "ActionQuery",
    "CoordinatorAction",
    "CoordinatorActionStatus",
    "CoordinatorDB",
    "CoordinatorJob",
    "action_id",
    "get_database",
    "named_query",
    "normalize_database_url",
]
