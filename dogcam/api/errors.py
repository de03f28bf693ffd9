from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse, RedirectResponse
from loguru import logger

from dogcam.api.utils import ApiFailure, api_failure, make_response
from dogcam.utils.app_errors import AppError, AppErrorCode, HttpStatusCode, LoginRequired

LOGIN_PATH = "/login"


async def login_required_handler(request: Request, exc: LoginRequired) -> RedirectResponse:
    """Unauthenticated requests are sent to the login page, never to an error page."""
    logger.debug("Login required for {} {}", request.method, request.url.path)
    return RedirectResponse(LOGIN_PATH, status_code=HttpStatusCode.FOUND.value)


async def app_error_handler(request: Request, exc: AppError) -> ORJSONResponse:
    """
    Custom exception handler for AppError.
    Converts AppError to ApiFailure and returns it as JSON.
    """
    log_msg = f"{exc.errcode} {exc.erresid} msg={exc.errmesg} caller={exc.caller_info}"
    if exc.status_code >= HttpStatusCode.INTERNAL_SERVER_ERROR:
        logger.error(log_msg)
    else:
        logger.warning(log_msg)

    failure = ApiFailure(errcode=exc.errcode, errmesg=exc.errmesg, erresid=exc.erresid)
    return make_response(failure, status_code=exc.status_code)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> ORJSONResponse:
    errors = exc.errors()

    logger.warning(
        "Validation error: path={} method={} errors={}",
        request.url.path,
        request.method,
        errors,
    )

    failure = api_failure(AppErrorCode.E_INVALID_PARAMS.value, errmesg=str(errors))
    return make_response(failure, status_code=422)
