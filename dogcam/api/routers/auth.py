"""Google login flow and logout."""

import secrets

from fastapi import APIRouter, Query, Request
from fastapi.responses import RedirectResponse
from loguru import logger

from dogcam.api.dependency import AppConfigDep, CurrentUser, OAuthClientDep
from dogcam.api.errors import LOGIN_PATH
from dogcam.config import AppConfig
from dogcam.domain.auth import SESSION_STATE_KEY, authorize_profile, login_user, logout_user
from dogcam.utils.app_errors import HttpStatusCode, OAuthError

router = APIRouter()

CALLBACK_ROUTE_NAME = "google_callback"


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=HttpStatusCode.FOUND.value)


def _callback_url(request: Request, config: AppConfig) -> str:
    if config.OAUTH_CALLBACK_URL:
        return config.OAUTH_CALLBACK_URL
    return str(request.url_for(CALLBACK_ROUTE_NAME))


@router.get("/auth/google")
async def google_login(request: Request, config: AppConfigDep, oauth: OAuthClientDep):
    state = secrets.token_urlsafe(24)
    request.session[SESSION_STATE_KEY] = state
    return _redirect(oauth.authorization_url(_callback_url(request, config), state))


@router.get("/auth/google/callback", name=CALLBACK_ROUTE_NAME)
async def google_callback(
    request: Request,
    config: AppConfigDep,
    oauth: OAuthClientDep,
    code: str | None = Query(default=None),
    state: str | None = Query(default=None),
    error: str | None = Query(default=None),
):
    """Finish the login. Every failure goes back to the login page with no identity stored."""
    expected_state = request.session.pop(SESSION_STATE_KEY, None)

    if error:
        logger.info("Provider denied login: {}", error)
        return _redirect(LOGIN_PATH)

    if not code or not state or not expected_state or not secrets.compare_digest(state, expected_state):
        logger.warning("Rejected OAuth callback with missing code or mismatched state")
        return _redirect(LOGIN_PATH)

    try:
        profile = await oauth.authenticate(code, _callback_url(request, config))
    except OAuthError as exc:
        logger.warning("{} {} msg={} caller={}", exc.errcode, exc.erresid, exc.errmesg, exc.caller_info)
        return _redirect(LOGIN_PATH)

    identity = authorize_profile(profile, config.allow_list)
    if identity is None:
        return _redirect(LOGIN_PATH)

    login_user(request.session, identity)
    logger.info("User logged in: user_id={}", identity.user_id)
    return _redirect("/")


@router.get("/logout")
async def logout(request: Request, user: CurrentUser):
    logout_user(request.session)
    logger.info("User logged out: user_id={}", user.user_id)
    return _redirect(LOGIN_PATH)
