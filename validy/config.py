"""Configuration management for validy.

This module handles environment variable loading and provides type-safe
configuration access using Pydantic Settings. Only presentation and
diagnostics are configurable; the validation policy itself is fixed by
each host class declaration.
"""

import logging
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ValidySettings(BaseSettings):
    """Library settings loaded from environment variables and `.env` file.

    All values are read with the ``VALIDY_`` prefix, e.g.
    ``VALIDY_ERROR_SEPARATOR="; "``.

    Attributes:
        error_separator: String placed between serialized ``key: value``
            entries in strict-mode failure messages. Empty by default, which
            concatenates entries without a delimiter.
        log_level: Level applied to the ``validy`` logger by
            ``configure_logging`` (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_failures: Emit a debug record for every recorded failure
    """

    model_config = SettingsConfigDict(
        env_prefix="VALIDY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    error_separator: str = Field(
        default="",
        description="Delimiter between serialized error entries",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level for the validy logger",
    )

    log_failures: bool = Field(
        default=True,
        description="Emit a debug log record for each recorded validation failure",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate log level is one of the allowed values.

        Args:
            value: Log level string to validate

        Returns:
            Uppercase log level string

        Raises:
            ValueError: If log level is not one of the allowed values
        """
        allowed_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in allowed_levels:
            raise ValueError(
                f"log_level must be one of {allowed_levels}, got {value}"
            )
        return upper_value

    def configure_logging(self) -> None:
        """Apply ``log_level`` to the package logger.

        Handlers are left to the application; only the level is set.
        """
        logging.getLogger("validy").setLevel(self.log_level)


_settings: Optional[ValidySettings] = None


def get_settings() -> ValidySettings:
    """Get the shared settings instance.

    Loads settings from `.env` (if present) and environment variables on
    first call and returns the same instance on subsequent calls.

    Returns:
        ValidySettings instance

    Raises:
        pydantic.ValidationError: If a configured value is invalid
    """
    global _settings
    if _settings is None:
        _settings = ValidySettings()
        logger.debug(
            f"Settings loaded: "
            f"ERROR_SEPARATOR={_settings.error_separator!r}, "
            f"LOG_LEVEL={_settings.log_level}, "
            f"LOG_FAILURES={_settings.log_failures}"
        )
    return _settings


def reload_settings() -> ValidySettings:
    """Reload settings from environment variables.

    Useful for testing or when the environment changes at runtime.

    Returns:
        New ValidySettings instance
    """
    global _settings
    _settings = ValidySettings()
    return _settings
