"""Authenticated identity and its place in the cookie session."""

from collections.abc import MutableMapping
from typing import Any

from loguru import logger
from pydantic import BaseModel, ValidationError

SESSION_USER_KEY = "user"
SESSION_STATE_KEY = "oauth_state"


class ProviderProfile(BaseModel):
    """Profile returned by the identity provider, before the allow-list check."""

    id: str
    display_name: str = ""
    email: str = ""


class Identity(BaseModel):
    user_id: str
    display_name: str
    email: str


def login_user(session: MutableMapping[str, Any], identity: Identity) -> None:
    session.clear()
    session[SESSION_USER_KEY] = identity.model_dump()


def logout_user(session: MutableMapping[str, Any]) -> None:
    session.clear()


def session_identity(session: MutableMapping[str, Any]) -> Identity | None:
    data = session.get(SESSION_USER_KEY)
    if not data:
        return None

    try:
        return Identity.model_validate(data)
    except ValidationError:
        logger.warning("Discarding malformed session identity")
        return None
