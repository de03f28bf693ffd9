"""
Centralized configuration management.

Configuration is read from, in priority order (later overrides earlier):
1) `env.example` in the project root (committed, safe placeholders)
2) `.env` in the project root (developer-local secrets, MUST NOT be committed)
3) System environment variables (highest priority)

The raw values are turned into an immutable `AppConfig` once at startup. The
application receives that object explicitly and never looks values up again.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values
from loguru import logger
from pydantic import BaseModel, ConfigDict, field_validator

from dogcam.domain.auth.allow_list import AllowList
from dogcam.utils.app_errors import ConfigError

PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent

REQUIRED_KEYS = ("GOOGLE_CLIENT_ID", "GOOGLE_CLIENT_SECRET", "ALLOWED_EMAILS", "SESSION_SECRET")

DEFAULT_STREAM_IMAGE = "public/dog.png"
DEFAULT_STREAM_FPS = 10
DEFAULT_SESSION_MAX_AGE = 14 * 24 * 60 * 60


class EnvironConfig:
    """
    Read-only view over the env files and the process environment.
    """

    def __init__(self, root: Path = PROJECT_ROOT):
        self._root = root
        self._config: dict[str, str | None] = {}
        self._load_config()

    def _load_config(self):
        example_path = self._root / "env.example"
        if example_path.exists():
            self._config.update(dotenv_values(example_path))
            logger.info("Loaded environment variables from {}", example_path)

        local_path = self._root / ".env"
        if local_path.exists():
            self._config.update(dotenv_values(local_path))
            logger.info("Loaded and overrode environment variables from {}", local_path)

        self._config.update(os.environ)

    def get(self, key, default=None):
        return self._config.get(key, default)


def resolve_stream_image(value: str | None) -> Path:
    """Absolute paths are kept; relative ones are resolved against the package directory."""
    path = Path(value or DEFAULT_STREAM_IMAGE)
    if path.is_absolute():
        return path
    return PACKAGE_DIR / path


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    GOOGLE_CLIENT_ID: str
    GOOGLE_CLIENT_SECRET: str
    ALLOWED_EMAILS: frozenset[str]
    SESSION_SECRET: str

    HOST: str = "0.0.0.0"
    PORT: int = 3000
    WORKERS: int = 1

    STREAM_IMAGE: Path = PACKAGE_DIR / DEFAULT_STREAM_IMAGE
    STREAM_FPS: int = DEFAULT_STREAM_FPS

    SESSION_HTTPS_ONLY: bool = False
    SESSION_MAX_AGE: int = DEFAULT_SESSION_MAX_AGE
    # Absolute OAuth callback URL; derived from the incoming request when unset
    OAUTH_CALLBACK_URL: str | None = None

    DEBUG: bool = False
    API_DISABLED: tuple[str, ...] = ()

    @field_validator("ALLOWED_EMAILS", mode="before")
    @classmethod
    def _normalize_emails(cls, value):
        if isinstance(value, str):
            return AllowList.from_csv(value).emails
        return frozenset(x.strip().lower() for x in value if x.strip())

    @field_validator("STREAM_FPS")
    @classmethod
    def _floor_fps(cls, value: int) -> int:
        return max(1, value)

    @property
    def allow_list(self) -> AllowList:
        return AllowList(self.ALLOWED_EMAILS)

    @property
    def stream_image_name(self) -> str:
        return self.STREAM_IMAGE.name


def _get_str(source: Mapping, key: str) -> str:
    return (source.get(key) or "").strip()


def _get_int(source: Mapping, key: str, default: int) -> int:
    raw = _get_str(source, key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got '{raw}'") from None


def _get_bool(source: Mapping, key: str, default: bool = False) -> bool:
    raw = _get_str(source, key).lower()
    if not raw:
        return default
    return raw in {"true", "yes", "on", "1"}


def load_app_config(environ: Mapping | None = None) -> AppConfig:
    """Build the process-wide configuration.

    Raises:
        ConfigError: a required key is missing or empty, or a numeric key is invalid.
    """
    source = EnvironConfig() if environ is None else environ

    missing = [key for key in REQUIRED_KEYS if not _get_str(source, key)]
    if missing:
        raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

    allowed_emails = AllowList.from_csv(_get_str(source, "ALLOWED_EMAILS")).emails
    if not allowed_emails:
        raise ConfigError("ALLOWED_EMAILS does not contain any email address")

    return AppConfig(
        GOOGLE_CLIENT_ID=_get_str(source, "GOOGLE_CLIENT_ID"),
        GOOGLE_CLIENT_SECRET=_get_str(source, "GOOGLE_CLIENT_SECRET"),
        ALLOWED_EMAILS=allowed_emails,
        SESSION_SECRET=_get_str(source, "SESSION_SECRET"),
        HOST=_get_str(source, "HOST") or "0.0.0.0",
        PORT=_get_int(source, "PORT", 3000),
        WORKERS=max(1, _get_int(source, "WORKERS", 1)),
        STREAM_IMAGE=resolve_stream_image(_get_str(source, "STREAM_IMAGE")),
        STREAM_FPS=_get_int(source, "STREAM_FPS", DEFAULT_STREAM_FPS),
        SESSION_HTTPS_ONLY=_get_bool(source, "SESSION_HTTPS_ONLY"),
        SESSION_MAX_AGE=_get_int(source, "SESSION_MAX_AGE", DEFAULT_SESSION_MAX_AGE),
        OAUTH_CALLBACK_URL=_get_str(source, "OAUTH_CALLBACK_URL") or None,
        DEBUG=_get_bool(source, "DEBUG"),
        API_DISABLED=tuple(x.strip() for x in _get_str(source, "API_DISABLED").split(",") if x.strip()),
    )
