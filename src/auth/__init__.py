"""
Authentication module for the Calendar Assistant.

Provides OAuth 2.0 authorization for Google Calendar access, one grant per
conversation.
"""

from src.auth.google_oauth import (
    CALENDAR_SCOPES,
    GoogleOAuthFlow,
    GoogleUserInfo,
    OAuthTokens,
)
from src.auth.service import AuthService, AuthStartResult
from src.auth.token_storage import (
    credentials_info,
    delete_user_token,
    get_user_token,
    get_valid_token,
    save_user_token,
)

__all__ = [
    # OAuth flow
    "CALENDAR_SCOPES",
    "GoogleOAuthFlow",
    "GoogleUserInfo",
    "OAuthTokens",
    # Service
    "AuthService",
    "AuthStartResult",
    # Token storage
    "credentials_info",
    "delete_user_token",
    "get_user_token",
    "get_valid_token",
    "save_user_token",
]
