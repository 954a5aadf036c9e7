"""Application configuration using pydantic-settings.

Only the command line reads settings. Engine functions take every input as
an argument and never consult configuration.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Settings loaded from RULES_ENGINE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="RULES_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: LogLevel = "WARNING"
    debug: bool = False  # Forces DEBUG logging

    # Output
    show_breakdown: bool = True  # Print the full roll description

    @property
    def effective_log_level(self) -> str:
        """Log level after applying the debug switch."""
        return "DEBUG" if self.debug else self.log_level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
