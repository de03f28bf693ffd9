import inspect
import sys
from functools import lru_cache
from importlib import import_module
from os import environ
from pathlib import Path
from typing import Any, Literal
from uuid import uuid4

from fastapi import APIRouter, FastAPI
from fastapi.responses import ORJSONResponse
from loguru import logger
from pydantic import BaseModel, Field

from dogcam.utils.app_errors import AppErrorCode

ROUTERS_DIR = Path(__file__).parent / "routers"


def format_error(ex: BaseException) -> str:
    from traceback import TracebackException

    return "".join(TracebackException.from_exception(ex).format())


class ApiResponse(BaseModel):
    version: str | None = Field(default_factory=lambda: environ.get("BUILD_COMMIT", "dev"))


class ApiFailure(ApiResponse):
    success: Literal[False] = False
    errcode: str = AppErrorCode.E_INTERNAL_ERROR.value
    erresid: str = Field(default_factory=lambda: uuid4().hex[:10])
    errmesg: str = "We are sorry, an error occurred."


def api_failure(errcode: str | None = None, errmesg: Exception | str | None = None, *, trace: Any = None):
    if not errcode:
        errcode = ApiFailure.model_fields["errcode"].default

    if isinstance(errmesg, Exception):
        errmesg = format_error(errmesg)

    if not errmesg:
        errmesg = ApiFailure.model_fields["errmesg"].default

    failure = ApiFailure(errcode=errcode, errmesg=errmesg)

    caller_frame = inspect.stack()[1]
    module = inspect.getmodule(caller_frame.frame)
    module_name = module.__name__ if module and getattr(module, "__name__", None) else caller_frame.filename
    caller_info = f"{module_name}:{caller_frame.function}:{caller_frame.lineno}"

    logger.warning(
        f"{failure.errcode} {failure.erresid}\n{failure.errmesg} "
        f"caller={caller_info} trace={trace}"
    )

    return failure


def make_response(failure: ApiFailure, *, status_code: int = 500) -> ORJSONResponse:
    return ORJSONResponse(status_code=status_code, content=failure.model_dump())


def load_routes(app: FastAPI, disabled_routes: tuple[str, ...] = ()):
    """Include the `router` of every module under `dogcam/api/routers`."""
    logger.debug("disabled routes: {}", disabled_routes)

    for path in sorted(ROUTERS_DIR.glob("*.py")):
        if path.name == "__init__.py":
            continue

        name = f"dogcam.api.routers.{path.stem}"
        if path.stem in disabled_routes:
            logger.warning("disabled route module {}", name)
            continue

        module = import_module(name)
        if not hasattr(module, "router"):
            continue

        app.include_router(module.router)
        logger.info("Added routes in {}", name)

        for route_info in get_all_routes_info(module.router):
            methods = ",".join(route_info["methods"])
            logger.info("Loaded route: {:<12} {:<40} {}", methods, route_info["path"], route_info["endpoint"])


def get_all_routes_info(router: APIRouter):
    """Describe the routes declared on a router, before it is included anywhere."""
    routes_info = []

    for route in router.routes:
        if hasattr(route, "methods"):
            endpoint_name = route.endpoint.__name__ if hasattr(route.endpoint, "__name__") else str(route.endpoint)
            routes_info.append(
                {
                    "methods": sorted(route.methods),
                    "path": route.path,
                    "name": route.name,
                    "endpoint": endpoint_name,
                }
            )

    return routes_info


@lru_cache
def get_worker_info():
    project_root = Path(__file__).parent.parent.parent
    worker_name = environ.get("WORKER_NAME", project_root.name)

    parts = environ.get("BUILD_COMMIT", "").split("-")
    commit_id = parts[1] if len(parts) > 1 else "dev"

    return worker_name, commit_id, uuid4().hex[:8]


def init_logger(debug: bool = False):
    logger.remove()

    worker_name, commit_id, _ = get_worker_info()

    if debug:
        logger_level = "DEBUG"
        logger_format = (
            f"<yellow>{worker_name}:{commit_id}</yellow> | "
            "<green>{time:MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )
    else:
        logger_level = "INFO"
        logger_format = (
            f"{worker_name}:{commit_id} | "
            "{time:MM-DD HH:mm:ss.SSS} | "
            "{level: <8} | "
            "{name}:{function}:{line} | "
            "{message}"
        )
    logger.add(sys.stderr, level=logger_level, format=logger_format)
