from .allow_list import AllowList, authorize_profile
from .identity import (
    SESSION_STATE_KEY,
    SESSION_USER_KEY,
    Identity,
    ProviderProfile,
    login_user,
    logout_user,
    session_identity,
)

__all__ = [
    "SESSION_STATE_KEY",
    "SESSION_USER_KEY",
    "AllowList",
    "Identity",
    "ProviderProfile",
    "authorize_profile",
    "login_user",
    "logout_user",
    "session_identity",
]
