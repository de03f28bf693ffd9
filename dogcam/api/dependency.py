from typing import Annotated

from fastapi import Depends, Request
from loguru import logger

from dogcam.config import AppConfig
from dogcam.domain.auth import Identity, session_identity
from dogcam.services.google_oauth import GoogleOAuthClient
from dogcam.utils.app_errors import LoginRequired


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_current_user(request: Request) -> Identity:
    """Gate for protected routes: the session must hold an approved identity."""
    identity = session_identity(request.session)
    if identity is None:
        raise LoginRequired()

    logger.debug("Authenticated user_id: {}", identity.user_id)
    request.state.user = identity
    return identity


def get_oauth_client(config: Annotated[AppConfig, Depends(get_app_config)]) -> GoogleOAuthClient:
    return GoogleOAuthClient(config.GOOGLE_CLIENT_ID, config.GOOGLE_CLIENT_SECRET)


AppConfigDep = Annotated[AppConfig, Depends(get_app_config)]
CurrentUser = Annotated[Identity, Depends(get_current_user)]
OAuthClientDep = Annotated[GoogleOAuthClient, Depends(get_oauth_client)]
