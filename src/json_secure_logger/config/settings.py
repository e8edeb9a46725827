"""
Pydantic Settings configuration for json-secure-logger.

Loads configuration from ``SECURE_LOGGER_*`` environment variables. The
size limits default to the CloudWatch Logs event cap: 256 KiB, i.e. 131072
UTF-16 code units.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from json_secure_logger.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Emitter settings loaded from environment variables."""

    # Size bounding
    max_payload_length: int = Field(131072, ge=1)
    truncated_payload_length: int = Field(40000, ge=1)

    # Serialization
    indent: int = Field(2, ge=0, le=8)
    # Key under which the runtime version is stamped into every payload
    runtime_key: str = Field("python", pattern=r"^[A-Za-z0-9_.-]+$")

    # Emitter behaviour
    log_debug: bool = Field(True)

    # Diagnostic channel
    log_format: Literal["console", "json"] = Field("console")
    debug: bool = Field(False)

    model_config = SettingsConfigDict(
        env_prefix="SECURE_LOGGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure only one Settings instance is created,
    avoiding repeated environment variable parsing.

    Raises:
        ConfigurationError: If the environment holds invalid values.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
