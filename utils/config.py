"""
Configuration Utility - Settings Management

Centralized configuration loading using pydantic-settings. Values are read, in
priority order, from keyword arguments, environment variables, a .env file and
finally the per-user TOML config file:

    Linux:   $XDG_CONFIG_HOME/fema-web-declaration/fema-web-declaration.toml
             (~/.config/fema-web-declaration/fema-web-declaration.toml)
    macOS:   ~/Library/Application Support/fema-web-declaration/fema-web-declaration.toml
    Windows: %APPDATA%\\fema-web-declaration\\config\\fema-web-declaration.toml

The TOML file uses lowercase keys (debug, num_years_previous, csv).

Usage:
    from utils.config import get_settings

    settings = get_settings()
    years = settings.NUM_YEARS_PREVIOUS
"""

import os
import sys
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from utils.errors import ConfigurationError

APP_NAME = "fema-web-declaration"
CONFIG_FILE_ENV = "FEMA_CONFIG_FILE"

# TOML keys that do not map onto a field by upper-casing
TOML_KEY_ALIASES = {
    "csv": "CSV_PATH",
}


def _home() -> Path:
    # Before 3.12 Path.home() returns Path("~") instead of raising
    home = Path.home()
    if home == Path("~"):
        raise RuntimeError("Could not determine home directory.")
    return home


def config_dir(app_name: str = APP_NAME) -> Path:
    """Resolve the platform configuration directory for the application.

    Raises:
        ConfigurationError: If no home directory can be determined
    """
    try:
        if sys.platform == "win32":
            appdata = os.environ.get("APPDATA")
            base = Path(appdata) if appdata else _home() / "AppData" / "Roaming"
            return base / app_name / "config"

        if sys.platform == "darwin":
            return _home() / "Library" / "Application Support" / app_name

        xdg = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else _home() / ".config"
        return base / app_name

    except RuntimeError as e:
        raise ConfigurationError(f"Failed to resolve configuration directory: {e}") from e


def config_file_path() -> Path:
    """Return the TOML config file path, honouring the FEMA_CONFIG_FILE override."""
    override = os.environ.get(CONFIG_FILE_ENV)
    if override:
        return Path(override)
    return config_dir() / f"{APP_NAME}.toml"


class TomlFileSettingsSource(PydanticBaseSettingsSource):
    """Settings source reading the per-user TOML config file.

    A missing file yields no values; an unreadable or malformed one is fatal.
    """

    def __init__(self, settings_cls: type[BaseSettings], path: Path) -> None:
        super().__init__(settings_cls)
        self.path = path

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        # Values are produced in bulk by __call__
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        if not self.path.is_file():
            return {}

        try:
            data = tomllib.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(f"Failed to read config file {self.path}: {e}") from e

        values: dict[str, Any] = {}
        for key, value in data.items():
            name = TOML_KEY_ALIASES.get(key.lower(), key.upper())
            if name in self.settings_cls.model_fields:
                values[name] = value
        return values


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Extraction Configuration
    DEBUG: bool = Field(default=False)
    NUM_YEARS_PREVIOUS: int = Field(default=3, gt=0)
    CSV_PATH: Optional[Path] = Field(default=Path("out.csv"))

    # API Configuration
    API_BASE: str = Field(default="https://www.fema.gov/api/open/v1/FemaWebDeclarationAreas")
    API_TIMEOUT: float = Field(default=30.0, gt=0)
    PAGE_SIZE: int = Field(default=1000, gt=0, le=1000)
    MAX_CONCURRENT_PAGES: int = Field(default=1, ge=1)

    # Scheduler Configuration
    RUN_ONCE: bool = Field(default=True)
    EXTRACT_SCHEDULE_CRON: str = Field(default="0 3 * * *")

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: str = Field(default="text")
    LOG_FILE: Optional[Path] = Field(default=None)

    # Application Metadata
    APP_NAME: str = Field(default=APP_NAME)
    APP_VERSION: str = Field(default="0.1.0")

    @field_validator("CSV_PATH", "LOG_FILE", mode="before")
    @classmethod
    def empty_path_is_none(cls, v: Any) -> Any:
        """Treat an empty string as "not configured"."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("text", "json"):
            raise ValueError("LOG_FORMAT must be 'text' or 'json'")
        return v

    @property
    def effective_log_level(self) -> str:
        """DEBUG overrides LOG_LEVEL."""
        return "DEBUG" if self.DEBUG else self.LOG_LEVEL.upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlFileSettingsSource(settings_cls, config_file_path()),
            file_secret_settings,
        )


def load_settings(**overrides: Any) -> Settings:
    """Build a Settings instance from all sources.

    Raises:
        ConfigurationError: If any source is unreadable or a value is invalid
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Singleton Settings instance
    """
    return load_settings()
