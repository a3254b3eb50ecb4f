"""
Engine configuration.

Reads tunables from VAULT_ENGINE_* environment variables (a .env file is
honoured via python-dotenv):

    VAULT_ENGINE_STALE_AFTER_DAYS = <int, default 90>
    VAULT_ENGINE_TOTP_WINDOW = <int, default 1>
    VAULT_ENGINE_BACKUP_CODE_COUNT = <int, default 10>
    VAULT_ENGINE_MAX_FILE_SIZE = <bytes, default 52428800>
    VAULT_ENGINE_ALLOWED_MIME_TYPES = <comma-separated list>

Key derivation parameters are not configurable.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger("vault_engine.config")

ENV_PREFIX = "VAULT_ENGINE_"

DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024

DEFAULT_ALLOWED_MIME_TYPES = (
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    "application/zip",
    "application/x-zip-compressed",
    "text/plain",
    "application/json",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)


class EngineConfig(BaseModel):
    """Validated engine settings."""

    stale_after_days: int = Field(default=90, ge=1)
    totp_window: int = Field(default=1, ge=0, le=10)
    backup_code_count: int = Field(default=10, ge=1, le=50)
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=1)
    allowed_mime_types: frozenset[str] = Field(
        default_factory=lambda: frozenset(DEFAULT_ALLOWED_MIME_TYPES)
    )

    model_config = {"frozen": True}

    @field_validator("allowed_mime_types", mode="before")
    @classmethod
    def split_mime_types(cls, v):
        """Accept a comma-separated string as well as any iterable."""
        if isinstance(v, str):
            v = [item.strip() for item in v.split(",")]
        types = frozenset(item.lower() for item in v if item)
        if not types:
            raise ValueError("allowed_mime_types cannot be empty")
        return types

    @classmethod
    def create(cls, **values) -> EngineConfig:
        """
        Build a config, translating validation errors to ConfigError.

        Raises:
            ConfigError: If any value is out of range
        """
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid engine configuration: {e}") from e

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> EngineConfig:
        """
        Create EngineConfig from VAULT_ENGINE_* environment variables.

        Unset variables keep their defaults.

        Raises:
            ConfigError: If a variable holds an invalid value
        """
        load_dotenv(dotenv_path)

        values = {}
        for name in cls.model_fields:
            raw = os.environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                values[name] = raw
        config = cls.create(**values)
        logger.debug("Loaded engine configuration from environment (%d override(s))", len(values))
        return config
