"""
Credentials for the Google Calendar API.

Builds google-auth OAuth credentials from tokens stored per conversation.
"""

import logging
from typing import Optional

from google.oauth2.credentials import Credentials

from src.config import get_settings

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


def get_oauth_credentials(
    access_token: str,
    refresh_token: Optional[str] = None,
    token_uri: str = DEFAULT_TOKEN_URI,
    scopes: Optional[list[str]] = None,
) -> Credentials:
    """
    Create credentials from OAuth tokens.

    With a refresh token, google-auth renews the access token itself when
    the API rejects it as expired.

    Args:
        access_token: Valid access token
        refresh_token: Refresh token for automatic renewal (optional)
        token_uri: Google's token endpoint
        scopes: Granted OAuth scopes (optional)

    Returns:
        Google credentials object
    """
    settings = get_settings()

    return Credentials(
        token=access_token,
        refresh_token=refresh_token,
        token_uri=token_uri,
        client_id=settings.google_oauth_client_id,
        client_secret=settings.google_oauth_client_secret,
        scopes=scopes or None,
    )


def get_oauth_credentials_from_dict(credentials_dict: dict) -> Credentials:
    """
    Create credentials from a dictionary.

    Args:
        credentials_dict: Dict with keys: token, refresh_token, token_uri, scopes
    """
    return get_oauth_credentials(
        access_token=credentials_dict["token"],
        refresh_token=credentials_dict.get("refresh_token"),
        token_uri=credentials_dict.get("token_uri", DEFAULT_TOKEN_URI),
        scopes=credentials_dict.get("scopes"),
    )
