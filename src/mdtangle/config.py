"""Configuration management for mdtangle."""

from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables (MDTANGLE_*)."""

    # Output
    output_dir: str = "."
    encoding: str = "utf-8"

    # Rendering
    line_directives: bool = True
    max_expansion_depth: Optional[int] = None  # None: no limit

    # Logging
    log_level: LogLevel = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        """Accept level names in any case."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    class Config:
        env_prefix = "MDTANGLE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
