"""
Configuration Models

Pydantic models for application settings validation.
"""

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_CONFIG_PATH = Path("config/app_params.json")
LOG_LEVEL_ENV = "CAREERPATH_LOG_LEVEL"


class ModelRouting(BaseModel):
    """Gemini model used for each kind of call.

    Extraction is high-volume and simple, so it goes to Flash; analysis and
    chat go to Pro.
    """

    extraction: str = Field(default="gemini-2.5-flash", min_length=1)
    analysis: str = Field(default="gemini-3-pro-preview", min_length=1)
    chat: str = Field(default="gemini-3-pro-preview", min_length=1)


class AppParams(BaseModel):
    """Application parameters configuration model."""

    models: ModelRouting = Field(default_factory=ModelRouting)
    log_level: str = Field(default="INFO")
    log_file: str = Field(default="logs/careerpath.log")
    env_file: str = Field(default=".env")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {', '.join(valid_levels)}")
        return v.upper()

    @classmethod
    def load(cls, config_path: Path | str | None = None) -> "AppParams":
        """Load application parameters from config file.

        Without an explicit path, config/app_params.json is used when present
        and built-in defaults otherwise. CAREERPATH_LOG_LEVEL overrides the
        configured log level.

        Args:
            config_path: Path to app_params.json

        Returns:
            AppParams: Validated configuration

        Raises:
            FileNotFoundError: If an explicitly given config file doesn't exist
            ValueError: If config validation fails
        """
        if config_path is None:
            path = DEFAULT_CONFIG_PATH
            if not path.exists():
                return cls._apply_env_overrides({})
        else:
            path = Path(config_path)
            if not path.exists():
                raise FileNotFoundError(
                    f"Config file not found: {path}. "
                    f"Copy {path.stem}.example.json to {path.name}"
                )

        with open(path, "r", encoding="utf-8") as f:
            config_data = json.load(f)

        return cls._apply_env_overrides(config_data)

    @classmethod
    def _apply_env_overrides(cls, config_data: dict) -> "AppParams":
        log_level = os.getenv(LOG_LEVEL_ENV)
        if log_level:
            config_data = {**config_data, "log_level": log_level}
        return cls(**config_data)
