import sys
from enum import Enum, IntEnum
from uuid import uuid4


class AppErrorCode(str, Enum):
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_CONFIG = "E_CONFIG"
    E_LOGIN_REQUIRED = "E_LOGIN_REQUIRED"
    E_OAUTH_FAILED = "E_OAUTH_FAILED"
    E_STREAM_SOURCE = "E_STREAM_SOURCE"


class HttpStatusCode(IntEnum):
    FOUND = 302
    UNAUTHORIZED = 401
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502


class AppError(Exception):
    """Application error carrying an error code, a message and an HTTP status.

    The raise site is captured in ``caller_info`` so handlers can log where the
    error came from, and ``erresid`` ties the log line to the response body.
    """

    def __init__(
        self,
        errcode: AppErrorCode | str = AppErrorCode.E_INTERNAL_ERROR,
        errmesg: str = "We are sorry, an error occurred.",
        status_code: int = HttpStatusCode.INTERNAL_SERVER_ERROR,
    ):
        super().__init__(errmesg)
        self.errcode = errcode.value if isinstance(errcode, AppErrorCode) else errcode
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.erresid = uuid4().hex[:10]

        # Skip subclass __init__ frames to report the real raise site
        frame = sys._getframe(1)
        while frame.f_back is not None and frame.f_code.co_name == "__init__":
            frame = frame.f_back
        module_name = frame.f_globals.get("__name__", frame.f_code.co_filename)
        self.caller_info = f"{module_name}:{frame.f_code.co_name}:{frame.f_lineno}"

    def __str__(self) -> str:
        return f"{self.errcode}: {self.errmesg}"


class ConfigError(AppError):
    def __init__(self, errmesg: str):
        super().__init__(AppErrorCode.E_CONFIG, errmesg, HttpStatusCode.INTERNAL_SERVER_ERROR)


class LoginRequired(AppError):
    """Raised by the auth gate; handled as a redirect to the login page."""

    def __init__(self, errmesg: str = "Login required"):
        super().__init__(AppErrorCode.E_LOGIN_REQUIRED, errmesg, HttpStatusCode.UNAUTHORIZED)


class OAuthError(AppError):
    def __init__(self, errmesg: str):
        super().__init__(AppErrorCode.E_OAUTH_FAILED, errmesg, HttpStatusCode.BAD_GATEWAY)


class StreamSourceError(AppError):
    def __init__(self, errmesg: str = "Stream image not found"):
        super().__init__(
            AppErrorCode.E_STREAM_SOURCE, errmesg, HttpStatusCode.INTERNAL_SERVER_ERROR
        )
