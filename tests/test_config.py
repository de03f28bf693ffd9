"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from dogcam.config import (
    DEFAULT_STREAM_IMAGE,
    PACKAGE_DIR,
    AppConfig,
    EnvironConfig,
    load_app_config,
)
from dogcam.utils.app_errors import ConfigError

REQUIRED = {
    "GOOGLE_CLIENT_ID": "cid",
    "GOOGLE_CLIENT_SECRET": "csecret",
    "ALLOWED_EMAILS": "a@x.com,b@x.com",
    "SESSION_SECRET": "ssecret",
}


class TestLoadAppConfig:
    def test_defaults(self):
        config = load_app_config(REQUIRED)

        assert config.PORT == 3000
        assert config.STREAM_FPS == 10
        assert config.STREAM_IMAGE == PACKAGE_DIR / DEFAULT_STREAM_IMAGE
        assert config.stream_image_name == "dog.png"
        assert config.SESSION_HTTPS_ONLY is False
        assert config.OAUTH_CALLBACK_URL is None

    @pytest.mark.parametrize("missing", sorted(REQUIRED))
    def test_missing_required_key_is_fatal(self, missing: str):
        environ = {k: v for k, v in REQUIRED.items() if k != missing}

        with pytest.raises(ConfigError) as exc_info:
            load_app_config(environ)

        assert missing in exc_info.value.errmesg

    def test_empty_required_value_counts_as_missing(self):
        with pytest.raises(ConfigError) as exc_info:
            load_app_config({**REQUIRED, "SESSION_SECRET": "  "})

        assert "SESSION_SECRET" in exc_info.value.errmesg

    def test_allow_list_without_emails_is_fatal(self):
        with pytest.raises(ConfigError):
            load_app_config({**REQUIRED, "ALLOWED_EMAILS": " , ,"})

    def test_allowed_emails_are_normalized(self):
        config = load_app_config({**REQUIRED, "ALLOWED_EMAILS": "A@X.com, b@x.com "})

        assert config.ALLOWED_EMAILS == frozenset({"a@x.com", "b@x.com"})
        assert config.allow_list.is_allowed("B@X.COM")

    @pytest.mark.parametrize("raw,expected", [("0", 1), ("-5", 1), ("1", 1), ("25", 25)])
    def test_fps_is_floored_at_one(self, raw: str, expected: int):
        assert load_app_config({**REQUIRED, "STREAM_FPS": raw}).STREAM_FPS == expected

    def test_invalid_integer_is_fatal(self):
        with pytest.raises(ConfigError) as exc_info:
            load_app_config({**REQUIRED, "STREAM_FPS": "fast"})

        assert "STREAM_FPS" in exc_info.value.errmesg

    def test_stream_image_paths(self, tmp_path: Path):
        absolute = tmp_path / "cam.jpg"

        assert load_app_config({**REQUIRED, "STREAM_IMAGE": str(absolute)}).STREAM_IMAGE == absolute
        assert (
            load_app_config({**REQUIRED, "STREAM_IMAGE": "images/cam.jpg"}).STREAM_IMAGE
            == PACKAGE_DIR / "images/cam.jpg"
        )

    def test_optional_values(self):
        config = load_app_config(
            {
                **REQUIRED,
                "PORT": "8080",
                "SESSION_HTTPS_ONLY": "true",
                "OAUTH_CALLBACK_URL": "https://cam.example.com/auth/google/callback",
                "API_DISABLED": "health, pages",
                "DEBUG": "1",
            }
        )

        assert config.PORT == 8080
        assert config.SESSION_HTTPS_ONLY is True
        assert config.OAUTH_CALLBACK_URL == "https://cam.example.com/auth/google/callback"
        assert config.API_DISABLED == ("health", "pages")
        assert config.DEBUG is True


def test_app_config_is_immutable():
    config = load_app_config(REQUIRED)

    with pytest.raises(ValidationError):
        config.STREAM_FPS = 30  # type: ignore[misc]


def test_app_config_accepts_csv_allow_list():
    config = AppConfig(
        GOOGLE_CLIENT_ID="cid",
        GOOGLE_CLIENT_SECRET="cs",
        ALLOWED_EMAILS="A@x.com,b@x.com",
        SESSION_SECRET="s",
        STREAM_FPS=0,
    )

    assert config.ALLOWED_EMAILS == frozenset({"a@x.com", "b@x.com"})
    assert config.STREAM_FPS == 1


class TestEnvironConfig:
    def test_priority_env_example_then_dotenv_then_environ(self, tmp_path: Path, monkeypatch):
        (tmp_path / "env.example").write_text("PORT=1000\nSTREAM_FPS=5\nHOST=example\n")
        (tmp_path / ".env").write_text("PORT=2000\nSTREAM_FPS=6\n")
        monkeypatch.delenv("PORT", raising=False)
        monkeypatch.delenv("HOST", raising=False)
        monkeypatch.setenv("STREAM_FPS", "7")

        environ = EnvironConfig(tmp_path)

        assert environ.get("HOST") == "example"
        assert environ.get("PORT") == "2000"
        assert environ.get("STREAM_FPS") == "7"

    def test_missing_key(self, tmp_path: Path):
        environ = EnvironConfig(tmp_path)

        assert environ.get("DOGCAM_SURELY_UNSET_KEY") is None
        assert environ.get("DOGCAM_SURELY_UNSET_KEY", "x") == "x"
