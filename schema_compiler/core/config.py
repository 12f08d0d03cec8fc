"""Compiler configuration using Pydantic Settings.

Configuration is loaded from environment variables prefixed with
`SCHEMA_COMPILER_`.

Optionally, you may point `ENV_FILE` at a local env file (for development).
"""

import logging
import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Compiler settings with type validation.

    Only ambient behavior is configurable here. The compilation rules
    themselves (closed objects by default, presence-based keyword checks)
    are fixed.
    """

    model_config = SettingsConfigDict(
        env_file=os.getenv("ENV_FILE") or None, env_prefix="SCHEMA_COMPILER_", extra="ignore"
    )

    # Logging
    log_level: str = "INFO"
    structured_logs: bool = False

    # oneOf rejects values matched by more than one member when enabled
    exclusive_one_of: bool = False

    # Prometheus counters for conversions
    metrics_enabled: bool = False

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize log_level and check it names a logging level."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(
                f"log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL, got '{v}'"
            )
        return level


settings = Settings()
