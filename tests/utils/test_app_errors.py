from dogcam.utils.app_errors import AppError, LoginRequired, StreamSourceError


def require_login():
    raise LoginRequired()


def test_caller_info_points_at_raise_site():
    try:
        require_login()
    except LoginRequired as exc:
        error = exc

    line = require_login.__code__.co_firstlineno + 1
    assert error.caller_info == f"{__name__}:require_login:{line}"
    assert error.errcode == "E_LOGIN_REQUIRED"
    assert error.status_code == 401


def test_caller_info_skips_nested_subclass_init():
    class MissingFrame(StreamSourceError):
        def __init__(self):
            super().__init__("frame missing")

    error = MissingFrame()

    assert error.caller_info.startswith(f"{__name__}:test_caller_info_skips_nested_subclass_init:")
    assert str(error) == "E_STREAM_SOURCE: frame missing"


def test_base_error_defaults():
    error = AppError()

    assert error.errcode == "E_INTERNAL_ERROR"
    assert error.status_code == 500
    assert len(error.erresid) == 10
    assert error.caller_info.startswith(f"{__name__}:test_base_error_defaults:")
