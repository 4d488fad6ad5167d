"""
Token storage and retrieval for OAuth tokens.

Persists per-conversation OAuth tokens and refreshes expired access tokens
on read.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.google_oauth import GOOGLE_TOKEN_URL, GoogleOAuthFlow, GoogleUserInfo, OAuthTokens
from src.models.tokens import UserToken

logger = logging.getLogger(__name__)


async def get_user_token(
    session: AsyncSession,
    conversation_id: int,
    provider: str = "google",
) -> Optional[UserToken]:
    """Get a conversation's stored token, or None."""
    stmt = select(UserToken).where(
        UserToken.conversation_id == conversation_id,
        UserToken.provider == provider,
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def save_user_token(
    session: AsyncSession,
    conversation_id: int,
    tokens: OAuthTokens,
    user_info: Optional[GoogleUserInfo],
    provider: str = "google",
) -> UserToken:
    """
    Save or update a conversation's OAuth tokens.

    An existing refresh token is kept when the provider does not send a new one.
    """
    existing = await get_user_token(session, conversation_id, provider)
    email = user_info.email if user_info else None

    if existing:
        existing.access_token = tokens.access_token
        if tokens.refresh_token:
            existing.refresh_token = tokens.refresh_token
        existing.token_expiry = tokens.expiry
        existing.scopes = tokens.scope
        if email:
            existing.email = email
        existing.updated_at = datetime.now(timezone.utc)

        await session.commit()
        logger.info(f"[{conversation_id}] Updated OAuth token")
        return existing

    user_token = UserToken(
        conversation_id=conversation_id,
        provider=provider,
        email=email,
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        token_expiry=tokens.expiry,
        scopes=tokens.scope,
    )
    session.add(user_token)
    await session.commit()
    await session.refresh(user_token)

    logger.info(f"[{conversation_id}] Stored new OAuth token")
    return user_token


async def delete_user_token(
    session: AsyncSession,
    conversation_id: int,
    provider: str = "google",
) -> bool:
    """
    Delete a conversation's OAuth token.

    Returns:
        True if a token was deleted, False if none was stored
    """
    token = await get_user_token(session, conversation_id, provider)
    if token is None:
        return False

    await session.delete(token)
    await session.commit()
    logger.info(f"[{conversation_id}] Deleted OAuth token")
    return True


async def get_valid_token(
    session: AsyncSession,
    conversation_id: int,
    flow: GoogleOAuthFlow,
    provider: str = "google",
) -> Optional[UserToken]:
    """
    Get a conversation's token, refreshing the access token if needed.

    Returns:
        The token, or None if none is stored or the refresh failed
    """
    token = await get_user_token(session, conversation_id, provider)
    if token is None:
        return None

    if token.needs_refresh:
        if not token.refresh_token:
            logger.warning(f"[{conversation_id}] Token expired and no refresh token")
            return None

        try:
            new_tokens = await flow.refresh_token(token.refresh_token)
        except httpx.HTTPError as e:
            logger.error(f"[{conversation_id}] Failed to refresh token: {e}")
            return None

        token.access_token = new_tokens.access_token
        token.token_expiry = new_tokens.expiry
        if new_tokens.refresh_token:
            token.refresh_token = new_tokens.refresh_token
        token.updated_at = datetime.now(timezone.utc)
        await session.commit()
        logger.info(f"[{conversation_id}] Refreshed access token")

    return token


def credentials_info(token: UserToken) -> dict:
    """Credentials dict in the shape google-auth expects."""
    return {
        "token": token.access_token,
        "refresh_token": token.refresh_token,
        "token_uri": GOOGLE_TOKEN_URL,
        "scopes": token.scope_list,
    }
