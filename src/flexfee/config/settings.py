# src/flexfee/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables and a .env file with validation.

The evaluation engine never reads settings; only the adapters and the
command line entry do.

Files that USE this module:
- flexfee.app (loads settings for logging and output configuration)
- flexfee.adapters.persistence.rule_store (default rule file and strictness)

Files that this module USES:
- flexfee.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import logging  # Resolve log level names
from pathlib import Path  # Object-oriented filesystem paths
from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from flexfee.shared.validators import validate_output_format


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Rules ---
    rules_file: Path = Field(
        default=Path("./data/fee_rules.json"), alias="FLEXFEE_RULES_FILE"
    )
    # Unknown condition tags raise instead of never matching
    strict_conditions: bool = Field(default=False, alias="FLEXFEE_STRICT_CONDITIONS")

    # --- Output ---
    output_format: str = Field(default="json", alias="FLEXFEE_OUTPUT_FORMAT")

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="FLEXFEE_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT", ge=0)

    @property
    def log_level_value(self) -> int:
        """Numeric logging level for logging.basicConfig."""
        return logging.getLevelName(self.log_level)

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        """Validate output format."""
        v = v.lower()
        if not validate_output_format(v):
            raise ValueError("FLEXFEE_OUTPUT_FORMAT must be 'json' or 'text'")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return v


# Global settings instance
settings = Settings()
