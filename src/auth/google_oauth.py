"""
Google OAuth 2.0 authorization code flow.

The assistant sends the authorization URL to the chat; Google redirects the
user to the callback route with a code, which is exchanged here for tokens.
Access tokens are refreshed with the stored refresh token.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence
from urllib.parse import urlencode

import httpx

from src.config import get_settings

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

# Listing calendars needs readonly; creating events needs calendar.events
CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/userinfo.email",
]


@dataclass
class OAuthTokens:
    """Token endpoint response."""

    access_token: str
    refresh_token: Optional[str]
    expires_in: int
    token_type: str
    scope: str

    @property
    def expiry(self) -> datetime:
        return datetime.now(timezone.utc) + timedelta(seconds=self.expires_in)


@dataclass
class GoogleUserInfo:
    email: str
    name: Optional[str] = None


class GoogleOAuthFlow:
    """
    Google OAuth 2.0 client.

    Usage:
        flow = GoogleOAuthFlow()
        url = flow.get_authorization_url(state="opaque-state")
        tokens = await flow.exchange_code(code)
        user_info = await flow.get_user_info(tokens.access_token)
        fresh = await flow.refresh_token(tokens.refresh_token)
    """

    def __init__(self, timeout: Optional[float] = None):
        settings = get_settings()
        self.client_id = settings.google_oauth_client_id
        self.client_secret = settings.google_oauth_client_secret
        self.redirect_uri = settings.google_oauth_redirect_uri
        self.timeout = timeout or settings.external_call_timeout

        if not self.client_id or not self.client_secret:
            logger.warning(
                "Google OAuth not configured. Set GOOGLE_OAUTH_CLIENT_ID and "
                "GOOGLE_OAUTH_CLIENT_SECRET in environment."
            )

    def get_authorization_url(
        self, state: str, scopes: Optional[Sequence[str]] = None
    ) -> str:
        """
        Build the consent URL.

        Args:
            state: Opaque value tying the callback to a conversation
            scopes: Scopes to request (CALENDAR_SCOPES if None)
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(scopes or CALENDAR_SCOPES),
            "access_type": "offline",
            "prompt": "consent",
            "state": state,
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> OAuthTokens:
        """
        Exchange an authorization code for tokens.

        Raises:
            httpx.HTTPStatusError: If the exchange is rejected
        """
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.redirect_uri,
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(GOOGLE_TOKEN_URL, data=data)
            response.raise_for_status()
            token_data = response.json()

        logger.info("Exchanged authorization code for tokens")

        return OAuthTokens(
            access_token=token_data["access_token"],
            refresh_token=token_data.get("refresh_token"),
            expires_in=token_data["expires_in"],
            token_type=token_data["token_type"],
            scope=token_data.get("scope", ""),
        )

    async def refresh_token(self, refresh_token: str) -> OAuthTokens:
        """
        Get a new access token.

        Raises:
            httpx.HTTPStatusError: If the refresh is rejected
        """
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(GOOGLE_TOKEN_URL, data=data)
            response.raise_for_status()
            token_data = response.json()

        logger.info("Refreshed access token")

        return OAuthTokens(
            access_token=token_data["access_token"],
            refresh_token=refresh_token,
            expires_in=token_data["expires_in"],
            token_type=token_data["token_type"],
            scope=token_data.get("scope", ""),
        )

    async def get_user_info(self, access_token: str) -> GoogleUserInfo:
        """
        Fetch the email of the account that granted access.

        Raises:
            httpx.HTTPStatusError: If the request fails
        """
        headers = {"Authorization": f"Bearer {access_token}"}

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(GOOGLE_USERINFO_URL, headers=headers)
            response.raise_for_status()
            user_data = response.json()

        return GoogleUserInfo(email=user_data["email"], name=user_data.get("name"))
