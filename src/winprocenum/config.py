"""
Configuration for winprocenum.

Loaded from environment variables prefixed with ``WINPROCENUM_`` and an
optional ``.env`` file in the working directory.
"""

import codecs
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from winprocenum.enumerator import DEFAULT_PID_CAPACITY
from winprocenum.resolver import DEFAULT_MODULE_CAPACITY, DEFAULT_NAME_CAPACITY


class Settings(BaseSettings):
    """Run-time settings, validated on load."""

    # Fixed buffer capacities, never grown during a run
    PID_CAPACITY: int = Field(
        default=DEFAULT_PID_CAPACITY, description="Max pids read from EnumProcesses"
    )
    MODULE_CAPACITY: int = Field(
        default=DEFAULT_MODULE_CAPACITY, description="Max module handles read from EnumProcessModules"
    )
    NAME_CAPACITY: int = Field(
        default=DEFAULT_NAME_CAPACITY, description="Base name buffer size in bytes"
    )

    NAME_ENCODING: str = Field(default="utf-8", description="Codec for module base names")

    # Logging
    LOG_LEVEL: str = Field(default="WARNING", description="Log level")

    model_config = SettingsConfigDict(
        env_prefix="WINPROCENUM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("PID_CAPACITY", "MODULE_CAPACITY", "NAME_CAPACITY")
    @classmethod
    def validate_capacity(cls, v: int) -> int:
        if v < 1:
            raise ValueError("capacity must be at least 1")
        return v

    @field_validator("NAME_ENCODING")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        try:
            codecs.lookup(v)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {v}") from e
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v_upper


@lru_cache()
def get_settings() -> Settings:
    """Get the settings instance, loaded once per process."""
    return Settings()
