"""
Application configuration models and helpers.

Every utility reads the same YAML file. Sections are optional so the
astronomy script does not need Netatmo credentials and vice versa; the
scripts ask for the section they need through ``AppSettings.require``.
Environment variables prefixed with ``WXKIT_`` override values from the file,
using ``__`` to reach nested keys (``WXKIT_NETATMO__CLIENT_SECRET``).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import AnyHttpUrl, BaseModel, Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from wxkit.core.exceptions import ConfigurationError

APP_NAME = "wxkit"


def default_config_dir() -> Path:
    """Return the per-user configuration directory for wxkit."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base).expanduser() if base else Path.home() / ".config"
    return root / APP_NAME


def default_config_path() -> Path:
    return default_config_dir() / "config.yaml"


def default_credential_path() -> Path:
    return default_config_dir() / "netatmo-auth.json"


class HttpSettings(BaseModel):
    """Transport settings shared by every outbound request."""

    timeout_seconds: float = Field(10.0, gt=0)
    retry_attempts: int = Field(3, ge=1)
    retry_backoff_seconds: float = Field(1.0, ge=0)


class OAuthSettings(BaseModel):
    """OAuth flow configuration."""

    state_ttl_seconds: int = Field(
        900,
        gt=0,
        description="How long an issued authorization state stays valid.",
    )


class CredentialSettings(BaseModel):
    """Where and how the Netatmo credential record is persisted."""

    path: Path = Field(default_factory=default_credential_path)
    reauthorize_on_corrupt: bool = Field(
        False,
        description=(
            "Delete an unreadable credential file and run the authorization "
            "flow instead of failing."
        ),
    )
    encryption_secret: Optional[str] = Field(
        None,
        description="Secret used to derive the key encrypting the stored tokens.",
    )

    @field_validator("path", mode="after")
    @classmethod
    def _expand_path(cls, value: Path) -> Path:
        return value.expanduser()


class NetatmoSettings(BaseModel):
    """Client identity and target device for the Netatmo weather API."""

    client_id: str = Field(..., min_length=1)
    client_secret: str = Field(..., min_length=1)
    redirect_uri: AnyHttpUrl
    device_id: str = Field(..., min_length=1)
    scopes: tuple[str, ...] = ("read_station",)
    api_base_url: AnyHttpUrl = Field("https://api.netatmo.com", validate_default=True)

    @field_validator("scopes", mode="before")
    @classmethod
    def _split_scopes(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        """Support providing scopes as a comma or space separated string."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(value)
        return tuple(scope for scope in value.replace(",", " ").split() if scope)

    @property
    def base_url(self) -> str:
        return str(self.api_base_url).rstrip("/")


class TimeAndDateSettings(BaseModel):
    """API credentials for the timeanddate.com astronomy service."""

    access_key: str = Field(..., min_length=1)
    secret_key: str = Field(..., min_length=1)
    base_url: AnyHttpUrl = Field("https://api.xmltime.com", validate_default=True)


class ForecastSettings(BaseModel):
    """National Weather Service forecast office and product endpoint."""

    office: str = Field("PHI", min_length=3, max_length=3)
    base_url: AnyHttpUrl = Field("https://forecast.weather.gov", validate_default=True)

    @field_validator("office")
    @classmethod
    def _upper_office(cls, value: str) -> str:
        return value.upper()


class SpeechSettings(BaseModel):
    """Google Text-to-Speech voice configuration."""

    api_key: str = Field(..., min_length=1)
    language_code: str = "en-US"
    voice_name: str = "en-US-Wavenet-H"
    audio_encoding: str = "OGG_OPUS"
    speaking_rate: float = 1.0
    pitch: float = 0.0


class AppSettings(BaseSettings):
    """Root settings object shared by the command-line utilities."""

    model_config = SettingsConfigDict(
        env_prefix="WXKIT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    log_level: str = "WARNING"
    http: HttpSettings = Field(default_factory=HttpSettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    credentials: CredentialSettings = Field(default_factory=CredentialSettings)
    netatmo: Optional[NetatmoSettings] = None
    timeanddate: Optional[TimeAndDateSettings] = None
    forecast: ForecastSettings = Field(default_factory=ForecastSettings)
    speech: Optional[SpeechSettings] = None

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Values from the YAML file arrive as init kwargs; the environment wins.
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    def require(self, section: str) -> Any:
        """Return a configuration section or fail with a readable message."""
        value = getattr(self, section, None)
        if value is None:
            raise ConfigurationError(
                f"Missing '{section}' section in the configuration file."
            )
        return value


def _read_yaml(path: Path, *, required: bool) -> Dict[str, Any]:
    if not path.exists():
        if required:
            raise ConfigurationError(f"Configuration file {path} does not exist.")
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Could not read configuration file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Configuration file {path} must contain a mapping at the top level."
        )
    return data


def load_settings(config_path: Optional[Path] = None) -> AppSettings:
    """Build settings from a YAML file plus ``WXKIT_`` environment overrides.

    An explicit ``config_path`` must exist. The default location is optional
    so that configuration can come entirely from the environment.
    """
    path = Path(config_path).expanduser() if config_path else default_config_path()
    data = _read_yaml(path, required=config_path is not None)
    try:
        return AppSettings(**data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration in {path}:\n{exc}") from exc


__all__ = [
    "AppSettings",
    "CredentialSettings",
    "ForecastSettings",
    "HttpSettings",
    "NetatmoSettings",
    "OAuthSettings",
    "SpeechSettings",
    "TimeAndDateSettings",
    "default_config_dir",
    "default_config_path",
    "default_credential_path",
    "load_settings",
]
