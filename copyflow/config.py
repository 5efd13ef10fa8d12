from __future__ import annotations

import os
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class ContextConfig(BaseModel):
    """Settings for the context digest fed to later generation steps."""

    max_excerpt_chars: Optional[int] = Field(default=None, gt=0)


class CopyflowConfig(BaseModel):
    """Top-level configuration model."""

    database_url: Optional[str] = None
    context: ContextConfig = ContextConfig()


def load_config(path: Optional[str] = None) -> CopyflowConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to COPYFLOW_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("COPYFLOW_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = CopyflowConfig(**data)
    else:
        config = CopyflowConfig()

    env_db_url = os.getenv("COPYFLOW_DATABASE_URL") or os.getenv("DATABASE_URL")
    if env_db_url:
        config.database_url = env_db_url
    return config
