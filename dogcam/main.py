import sys
import time
import traceback
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from fastapi.staticfiles import StaticFiles
from granian import Granian
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.sessions import SessionMiddleware

from dogcam.api.errors import app_error_handler, login_required_handler, validation_exception_handler
from dogcam.api.utils import api_failure, init_logger, load_routes
from dogcam.config import PACKAGE_DIR, AppConfig, load_app_config
from dogcam.utils.app_errors import AppError, AppErrorCode, ConfigError, LoginRequired


class HTTPLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore
        start_time = time.time()
        request_id = str(uuid.uuid4())[:8]

        logger.info(f"[{request_id}] {request.method} {request.url.path}")

        try:
            response = await call_next(request)

            # For streams this is the time to the response headers
            process_time = (time.time() - start_time) * 1000

            logger.info(
                f"[{request_id}] {request.method} {request.url.path} - "
                f"Status: {response.status_code} - "
                f"Duration: {process_time:.2f}ms"
            )

            return response

        except Exception as exc:
            process_time = (time.time() - start_time) * 1000

            logger.error(
                f"[{request_id}] Unhandled exception in {request.method} {request.url.path} - "
                f"Duration: {process_time:.2f}ms - "
                f"Error: {type(exc).__name__}: {exc}\n"
                f"Traceback:\n{traceback.format_exc()}"
            )

            failure = api_failure(
                errcode=AppErrorCode.E_INTERNAL_ERROR.value,
                errmesg=f"Internal server error (request_id: {request_id})",
            )
            return ORJSONResponse(
                status_code=500,
                content=failure.model_dump(),
            )


@asynccontextmanager
async def lifespan(server: FastAPI):
    app_config: AppConfig = server.state.config
    init_logger(app_config.DEBUG)

    logger.info("Application startup...")
    logger.info(
        "Streaming {} at {} fps to {} allowed users",
        app_config.STREAM_IMAGE,
        app_config.STREAM_FPS,
        len(app_config.ALLOWED_EMAILS),
    )

    yield

    logger.info("Application shutdown...")


def create_app(app_config: AppConfig | None = None) -> FastAPI:
    """Build the application around one immutable configuration."""
    if app_config is None:
        app_config = load_app_config()

    app = FastAPI(
        version="1.0",
        title="DogCam",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )
    app.state.config = app_config

    app.add_middleware(HTTPLoggingMiddleware)

    app.add_middleware(
        SessionMiddleware,  # type: ignore
        secret_key=app_config.SESSION_SECRET,
        max_age=app_config.SESSION_MAX_AGE,
        same_site="lax",
        https_only=app_config.SESSION_HTTPS_ONLY,
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore
    app.add_exception_handler(LoginRequired, login_required_handler)  # type: ignore
    app.add_exception_handler(AppError, app_error_handler)  # type: ignore

    app.mount("/public", StaticFiles(directory=PACKAGE_DIR / "public"), name="public")

    load_routes(app, app_config.API_DISABLED)

    return app


def build_granian_kwargs(app_config: AppConfig):
    kwargs = {
        "interface": "asgi",
        "address": app_config.HOST,
        "port": app_config.PORT,
        "workers": app_config.WORKERS,
        "reload": app_config.DEBUG,
        "factory": True,
    }

    return kwargs


def main():
    init_logger()

    try:
        app_config = load_app_config()
    except ConfigError as exc:
        logger.error("{} - see env.example", exc.errmesg)
        sys.exit(1)

    init_logger(app_config.DEBUG)
    logger.info("DogCam on http://localhost:{}", app_config.PORT)

    Granian("dogcam.main:create_app", **build_granian_kwargs(app_config)).serve()


if __name__ == "__main__":
    main()
