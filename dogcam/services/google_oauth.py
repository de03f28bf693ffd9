"""Google OAuth 2.0 authorization-code client."""

from urllib.parse import urlencode

import httpx
from loguru import logger

from dogcam.domain.auth import ProviderProfile
from dogcam.utils.app_errors import OAuthError

GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
GOOGLE_SCOPES = ("openid", "email", "profile")


class GoogleOAuthClient:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        timeout: float = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = httpx.Timeout(timeout, connect=5)
        self.transport = transport

    def authorization_url(self, redirect_uri: str, state: str) -> str:
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "scope": " ".join(GOOGLE_SCOPES),
            "state": state,
        }
        return f"{GOOGLE_AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Exchange an authorization code for an access token."""
        data = {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": redirect_uri,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(GOOGLE_TOKEN_URL, data=data)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise OAuthError(f"Token exchange rejected: HTTP {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise OAuthError(f"Token exchange failed: {type(exc).__name__}") from exc

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        if not access_token:
            raise OAuthError("Token response without access_token")

        return access_token

    async def fetch_profile(self, access_token: str) -> ProviderProfile:
        """Fetch the OpenID userinfo of the token owner."""
        headers = {"Authorization": f"Bearer {access_token}"}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(GOOGLE_USERINFO_URL, headers=headers)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise OAuthError(f"Userinfo rejected: HTTP {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise OAuthError(f"Userinfo request failed: {type(exc).__name__}") from exc

        if not isinstance(payload, dict) or not payload.get("sub"):
            raise OAuthError("Userinfo response without subject")

        logger.debug("Fetched provider profile for sub={}", payload["sub"])
        # An unverified email never reaches the allow-list check
        email = payload.get("email") or ""
        if payload.get("email_verified") is False:
            email = ""

        return ProviderProfile(
            id=str(payload["sub"]),
            display_name=payload.get("name") or "",
            email=email,
        )

    async def authenticate(self, code: str, redirect_uri: str) -> ProviderProfile:
        access_token = await self.exchange_code(code, redirect_uri)
        return await self.fetch_profile(access_token)
