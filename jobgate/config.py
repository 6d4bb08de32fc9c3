from __future__ import annotations

import os
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """Connection settings for the action store."""

    url: Optional[str] = None
    echo: bool = False


class QueryConfig(BaseModel):
    """Defaults applied to coordinator action queries."""

    default_length: int = Field(default=50, ge=0)
    max_length: Optional[int] = Field(default=None, ge=1)
    validate_status: bool = True


class VerifierConfig(BaseModel):
    """Settings for the ``<parameters>`` verifier."""

    strict_names: bool = False


class JobGateConfig(BaseModel):
    """Top-level configuration model."""

    database: DatabaseConfig = DatabaseConfig()
    query: QueryConfig = QueryConfig()
    verifier: VerifierConfig = VerifierConfig()


def load_config(path: Optional[str] = None) -> JobGateConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to JOBGATE_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("JOBGATE_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = JobGateConfig(**data)
    else:
        config = JobGateConfig()

    env_db_url = os.getenv("JOBGATE_DATABASE_URL") or os.getenv("DATABASE_URL")
    if env_db_url:
        config.database.url = env_db_url
    return config
