"""Configuration loader for The Wall backend."""
from __future__ import annotations

import logging
import os
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

LOGGER = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_ENV_FILE = REPO_ROOT / ".env"

ENV_OVERRIDES = {
    "WALLBOARD_DATABASE_URL": ("database", "url"),
    "WALLBOARD_ADMIN_PASSWORD": ("auth", "bootstrap_admin_password"),
    "WALLBOARD_JWT_SECRET": ("auth", "jwt", "secret_key"),
    "WALLBOARD_API_URL": ("client", "api_base_url"),
}


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded."""


class _FrozenModel(BaseModel):
    """Base model enforcing immutability for config sections."""

    model_config = ConfigDict(frozen=True)


class ApplicationConfig(_FrozenModel):
    """Service identity settings."""

    name: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)


class NotesConfig(_FrozenModel):
    """Limits applied to submitted notes."""

    message_max_length: int = Field(500, ge=1)
    name_max_length: int = Field(50, ge=1)
    default_name: str = Field("Anonymous", min_length=1)


class GridLayoutConfig(_FrozenModel):
    """Grid-with-jitter placement used when notes first enter the canvas."""

    columns: int = Field(4, ge=1)
    cell_width: float = Field(360.0, gt=0)
    cell_height: float = Field(280.0, gt=0)
    jitter: float = Field(40.0, ge=0)
    origin_x: float = 0.0
    origin_y: float = 0.0


class CanvasConfig(_FrozenModel):
    """Geometry and timing constants for the infinite canvas."""

    note_width: float = Field(280.0, gt=0)
    note_height: float = Field(200.0, gt=0)
    marker_padding: float = Field(50.0, ge=0)
    marker_min_spacing: float = Field(60.0, ge=0)
    animation_duration_ms: float = Field(800.0, ge=0)
    frame_interval_ms: float = Field(16.0, gt=0)
    preview_length: int = Field(60, ge=1)
    layout: GridLayoutConfig = Field(default_factory=GridLayoutConfig)


class DatabaseConfig(_FrozenModel):
    """Note and admin persistence settings."""

    url: str = Field(..., min_length=1)
    echo: bool = False


class AuthJWTConfig(_FrozenModel):
    """JWT signing settings for admin sessions."""

    secret_key: str = Field(..., min_length=32)
    algorithm: str = Field("HS256", min_length=1)
    access_token_expires_minutes: int = Field(..., ge=1)

    @property
    def access_token_ttl(self) -> timedelta:
        """Return the configured access token lifetime."""

        return timedelta(minutes=self.access_token_expires_minutes)


class AuthConfig(_FrozenModel):
    """Admin password gate configuration."""

    admin_username: str = Field("admin", min_length=1)
    bootstrap_admin_password: Optional[str] = Field(default=None, min_length=1)
    password_schemes: List[str] = Field(default_factory=lambda: ["bcrypt"], min_length=1)
    jwt: AuthJWTConfig


class UIConfig(_FrozenModel):
    """Browser-facing settings."""

    allowed_origins: List[str] = Field(default_factory=list)


class ClientConfig(_FrozenModel):
    """Settings for the HTTP client and its local fallback store."""

    api_base_url: str = Field(..., min_length=1)
    fallback_path: str = Field(..., min_length=1)
    timeout_seconds: float = Field(5.0, gt=0)


class AppConfig(_FrozenModel):
    """Top-level application configuration composed from config.yaml."""

    app: ApplicationConfig
    notes: NotesConfig = Field(default_factory=NotesConfig)
    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    database: DatabaseConfig
    auth: AuthConfig
    ui: UIConfig = Field(default_factory=UIConfig)
    client: ClientConfig

    @model_validator(mode="after")
    def _validate_name_limit(self) -> "AppConfig":
        if len(self.notes.default_name) > self.notes.name_max_length:
            msg = "notes.default_name cannot exceed notes.name_max_length"
            raise ValueError(msg)
        return self

    @staticmethod
    def default_path() -> Path:
        """Return the default location of the configuration file.

        Returns:
            Path: Absolute path to config.yaml at the repository root.
        """
        return REPO_ROOT / "config.yaml"


def _determine_env_file_path() -> Optional[Path]:
    """Return the path to the environment file if one should be loaded."""

    override = os.getenv("WALLBOARD_ENV_FILE")
    if override:
        candidate = Path(override).expanduser()
        if candidate.exists():
            return candidate
        LOGGER.warning("Configured environment file override does not exist: %s", candidate)
        return None
    if DEFAULT_ENV_FILE.exists():
        return DEFAULT_ENV_FILE
    return None


def _strip_inline_comment(value: str) -> str:
    """Remove inline comments from an environment value when unquoted."""

    comment_index = value.find("#")
    if comment_index == -1:
        return value
    return value[:comment_index].rstrip()


def _load_env_file(path: Path) -> None:
    """Populate ``os.environ`` with values read from a ``.env`` file."""

    try:
        with path.open("r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if line.lower().startswith("export "):
                    line = line[7:].lstrip()
                if "=" not in line:
                    continue
                key, raw_value = line.split("=", 1)
                key = key.strip()
                if not key:
                    continue
                existing_value = os.environ.get(key)
                if existing_value is not None and existing_value.strip() != "":
                    continue
                value = raw_value.strip()
                if not value:
                    os.environ[key] = ""
                    continue
                if value[0] in {'"', "'"} and value[-1] == value[0]:
                    os.environ[key] = value[1:-1]
                    continue
                os.environ[key] = _strip_inline_comment(value)
    except OSError:
        LOGGER.warning("Unable to read environment file at %s", path)


def _apply_environment_overrides(raw_content: Dict[str, Any]) -> Dict[str, Any]:
    """Merge environment-based overrides into the raw configuration mapping.

    Args:
        raw_content: Parsed YAML configuration prior to Pydantic validation.

    Returns:
        Dict[str, Any]: Configuration mapping with environment overrides applied.
    """

    env_file_path = _determine_env_file_path()
    if env_file_path is not None:
        _load_env_file(env_file_path)

    for env_name, keys in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is None or not value.strip():
            continue
        section = raw_content
        for key in keys[:-1]:
            nested = section.get(key)
            if not isinstance(nested, dict):
                nested = {}
                section[key] = nested
            section = nested
        section[keys[-1]] = value.strip()
        LOGGER.info("Configuration value %s overridden from environment", ".".join(keys))
    return raw_content


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Read YAML content from disk.

    Args:
        path: Location of the YAML file.

    Returns:
        Dict[str, Any]: Parsed YAML content.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        LOGGER.error("Configuration file missing at %s", path)
        raise ConfigError("Configuration file not found") from exc
    except yaml.YAMLError as exc:
        LOGGER.error("Invalid YAML syntax in %s", path)
        raise ConfigError("Invalid YAML syntax") from exc
    if not isinstance(data, dict):
        LOGGER.error("Configuration root must be a mapping: %s", path)
        raise ConfigError("Configuration root must be a mapping")
    return data


@lru_cache(maxsize=1)
def load_config(path: Optional[Path] = None) -> AppConfig:
    """Load application configuration from YAML.

    Args:
        path: Optional override path to the YAML file.

    Returns:
        AppConfig: Parsed configuration object.

    Raises:
        ConfigError: If the configuration cannot be loaded or validated.
    """
    config_path = path or AppConfig.default_path()
    raw_content = _read_yaml(config_path)
    raw_content = _apply_environment_overrides(raw_content)
    try:
        return AppConfig(**raw_content)
    except ValidationError as exc:
        LOGGER.error("Invalid configuration values: %s", exc)
        raise ConfigError("Configuration validation failed") from exc
