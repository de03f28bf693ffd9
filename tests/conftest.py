from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from dogcam.config import AppConfig
from dogcam.main import create_app
from tests.helpers import ALLOWED_EMAILS, SESSION_SECRET, cookie_header, make_session_cookie


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    path = tmp_path / "dog.jpg"
    path.write_bytes(b"\xff\xd8" + bytes(range(256)) + bytes(240) + b"\xff\xd9")
    return path


@pytest.fixture
def app_config(image_file: Path) -> AppConfig:
    return AppConfig(
        GOOGLE_CLIENT_ID="client-id",
        GOOGLE_CLIENT_SECRET="client-secret",
        ALLOWED_EMAILS=ALLOWED_EMAILS,
        SESSION_SECRET=SESSION_SECRET,
        STREAM_IMAGE=image_file,
        STREAM_FPS=10,
        SESSION_MAX_AGE=3600,
    )


@pytest.fixture
def test_app(app_config: AppConfig) -> FastAPI:
    return create_app(app_config)


@pytest_asyncio.fixture
async def client(test_app: FastAPI):
    transport = ASGITransport(app=test_app)  # type: ignore[arg-type]
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def user_session() -> dict:
    return {"user": {"user_id": "1234", "display_name": "Alice <Admin>", "email": "a@x.com"}}


@pytest.fixture
def auth_headers(user_session: dict) -> dict[str, str]:
    return cookie_header(make_session_cookie(user_session))
