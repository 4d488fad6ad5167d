"""
Authorization boundary used by the conversation controller.

start_auth() either reports that the conversation already holds usable
credentials or returns a consent URL. The OAuth callback route finishes the
flow through complete_auth().
"""

import logging
import secrets
import time
from dataclasses import dataclass
from typing import AsyncContextManager, Callable, Optional, Sequence

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.google_oauth import GoogleOAuthFlow, GoogleUserInfo
from src.auth.token_storage import (
    credentials_info,
    delete_user_token,
    get_user_token,
    get_valid_token,
    save_user_token,
)
from src.database import get_async_db_context
from src.services.exceptions import AuthorizationError

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]

SUPPORTED_PROVIDERS = ("google",)

# Seconds a consent link stays valid
PENDING_STATE_TTL = 600.0


@dataclass
class AuthStartResult:
    """completed is True when no consent step is needed."""

    completed: bool
    redirect_url: Optional[str] = None


class AuthService:
    """
    Per-conversation OAuth authorization.

    Outstanding flows are tracked by their opaque state value in memory; a
    restart drops them and the user simply runs /auth again. Each
    conversation keeps only its latest state, and states expire after
    state_ttl seconds.
    """

    def __init__(
        self,
        flow: Optional[GoogleOAuthFlow] = None,
        session_factory: SessionFactory = get_async_db_context,
        state_ttl: float = PENDING_STATE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._flow = flow or GoogleOAuthFlow()
        self._session_factory = session_factory
        self._state_ttl = state_ttl
        self._clock = clock
        # state -> (conversation id, issued at)
        self._pending_states: dict[str, tuple[int, float]] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending_states)

    def _forget_states(self, conversation_id: Optional[int] = None) -> None:
        """Drop expired states, and every state of conversation_id if given."""
        now = self._clock()
        self._pending_states = {
            state: (conv, issued)
            for state, (conv, issued) in self._pending_states.items()
            if conv != conversation_id and now - issued < self._state_ttl
        }

    async def start_auth(
        self,
        conversation_id: int,
        provider: str = "google",
        scopes: Optional[Sequence[str]] = None,
    ) -> AuthStartResult:
        """
        Begin authorization for a conversation.

        Raises:
            ValueError: Unsupported provider
        """
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(f"Unsupported auth provider: {provider}")

        async with self._session_factory() as session:
            token = await get_valid_token(session, conversation_id, self._flow, provider)

        if token is not None:
            logger.info(f"[{conversation_id}] Already authorized with {provider}")
            return AuthStartResult(completed=True)

        self._forget_states(conversation_id)
        state = secrets.token_urlsafe(24)
        self._pending_states[state] = (conversation_id, self._clock())
        logger.info(f"[{conversation_id}] Started {provider} authorization")
        return AuthStartResult(
            completed=False,
            redirect_url=self._flow.get_authorization_url(state, scopes),
        )

    async def complete_auth(self, state: str, code: str) -> int:
        """
        Finish a flow started by start_auth.

        Returns:
            The conversation id the flow belongs to

        Raises:
            AuthorizationError: Unknown state or rejected code
        """
        self._forget_states()
        pending = self._pending_states.pop(state, None)
        if pending is None:
            raise AuthorizationError("Unknown or expired authorization request.")
        conversation_id, _ = pending

        try:
            tokens = await self._flow.exchange_code(code)
        except httpx.HTTPError as e:
            logger.error(f"[{conversation_id}] Code exchange failed: {e}")
            raise AuthorizationError(
                "Failed to complete Google authorization.",
                original_error=e,
            ) from e

        user_info: Optional[GoogleUserInfo] = None
        try:
            user_info = await self._flow.get_user_info(tokens.access_token)
        except httpx.HTTPError as e:
            logger.warning(f"[{conversation_id}] Could not fetch account email: {e}")

        async with self._session_factory() as session:
            await save_user_token(session, conversation_id, tokens, user_info)

        logger.info(f"[{conversation_id}] Authorization completed")
        return conversation_id

    async def get_email(self, conversation_id: int) -> Optional[str]:
        async with self._session_factory() as session:
            token = await get_user_token(session, conversation_id)
        return token.email if token else None

    async def get_credentials(self, conversation_id: int) -> Optional[dict]:
        """Credentials dict for the calendar client, refreshed if needed."""
        async with self._session_factory() as session:
            token = await get_valid_token(session, conversation_id, self._flow)
            if token is None:
                return None
            return credentials_info(token)

    async def revoke(self, conversation_id: int) -> bool:
        """Forget the conversation's stored token and any outstanding flow."""
        self._forget_states(conversation_id)
        async with self._session_factory() as session:
            return await delete_user_token(session, conversation_id)
