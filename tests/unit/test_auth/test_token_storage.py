"""Tests for OAuth token storage."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from src.auth.google_oauth import GoogleUserInfo, OAuthTokens
from src.auth.token_storage import (
    credentials_info,
    delete_user_token,
    get_user_token,
    get_valid_token,
    save_user_token,
)


def tokens(access="access-1", refresh="refresh-1", expires_in=3600) -> OAuthTokens:
    return OAuthTokens(
        access_token=access,
        refresh_token=refresh,
        expires_in=expires_in,
        token_type="Bearer",
        scope="https://www.googleapis.com/auth/calendar.readonly "
              "https://www.googleapis.com/auth/calendar.events",
    )


@pytest.fixture
def flow():
    flow = MagicMock()
    flow.refresh_token = AsyncMock(return_value=tokens(access="access-2", refresh=None))
    return flow


class TestSaveUserToken:
    """Tests for inserting and updating tokens."""

    @pytest.mark.asyncio
    async def test_save_new(self, token_session_factory, chat_id):
        async with token_session_factory() as session:
            saved = await save_user_token(
                session, chat_id, tokens(), GoogleUserInfo(email="sam@example.com")
            )

        assert saved.id is not None
        async with token_session_factory() as session:
            stored = await get_user_token(session, chat_id)
        assert stored.email == "sam@example.com"
        assert stored.access_token == "access-1"
        assert len(stored.scope_list) == 2

    @pytest.mark.asyncio
    async def test_update_keeps_refresh_token_and_email(self, token_session_factory, chat_id):
        async with token_session_factory() as session:
            await save_user_token(
                session, chat_id, tokens(), GoogleUserInfo(email="sam@example.com")
            )
        async with token_session_factory() as session:
            await save_user_token(session, chat_id, tokens(access="access-2", refresh=None), None)

        async with token_session_factory() as session:
            stored = await get_user_token(session, chat_id)
        assert stored.access_token == "access-2"
        assert stored.refresh_token == "refresh-1"
        assert stored.email == "sam@example.com"

    @pytest.mark.asyncio
    async def test_tokens_are_per_conversation(self, token_session_factory, chat_id):
        async with token_session_factory() as session:
            await save_user_token(session, chat_id, tokens(), None)

        async with token_session_factory() as session:
            assert await get_user_token(session, chat_id + 1) is None


class TestDeleteUserToken:
    @pytest.mark.asyncio
    async def test_delete(self, token_session_factory, chat_id):
        async with token_session_factory() as session:
            await save_user_token(session, chat_id, tokens(), None)

        async with token_session_factory() as session:
            assert await delete_user_token(session, chat_id) is True
            assert await delete_user_token(session, chat_id) is False
            assert await get_user_token(session, chat_id) is None


class TestGetValidToken:
    """Tests for refresh on read."""

    @pytest.mark.asyncio
    async def test_fresh_token_is_not_refreshed(self, token_session_factory, flow, chat_id):
        async with token_session_factory() as session:
            await save_user_token(session, chat_id, tokens(), None)
            token = await get_valid_token(session, chat_id, flow)

        assert token.access_token == "access-1"
        flow.refresh_token.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_expired_token_is_refreshed(self, token_session_factory, flow, chat_id):
        async with token_session_factory() as session:
            await save_user_token(session, chat_id, tokens(expires_in=-60), None)

        async with token_session_factory() as session:
            token = await get_valid_token(session, chat_id, flow)

        assert token.access_token == "access-2"
        assert token.refresh_token == "refresh-1"
        flow.refresh_token.assert_awaited_once_with("refresh-1")

    @pytest.mark.asyncio
    async def test_failed_refresh(self, token_session_factory, flow, chat_id):
        flow.refresh_token.side_effect = httpx.ConnectError("offline")
        async with token_session_factory() as session:
            await save_user_token(session, chat_id, tokens(expires_in=-60), None)
            assert await get_valid_token(session, chat_id, flow) is None

    @pytest.mark.asyncio
    async def test_expired_without_refresh_token(self, token_session_factory, flow, chat_id):
        async with token_session_factory() as session:
            await save_user_token(session, chat_id, tokens(refresh=None, expires_in=-60), None)
            assert await get_valid_token(session, chat_id, flow) is None

    @pytest.mark.asyncio
    async def test_missing(self, token_session_factory, flow, chat_id):
        async with token_session_factory() as session:
            assert await get_valid_token(session, chat_id, flow) is None


class TestCredentialsInfo:
    @pytest.mark.asyncio
    async def test_shape(self, token_session_factory, chat_id):
        async with token_session_factory() as session:
            token = await save_user_token(session, chat_id, tokens(), None)

        info = credentials_info(token)

        assert info["token"] == "access-1"
        assert info["refresh_token"] == "refresh-1"
        assert info["token_uri"] == "https://oauth2.googleapis.com/token"
        assert "https://www.googleapis.com/auth/calendar.events" in info["scopes"]
