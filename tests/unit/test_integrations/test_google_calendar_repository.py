"""Tests for Google Calendar repository."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.integrations.google_calendar.adapter import GoogleCalendarAdapter
from src.integrations.google_calendar.exceptions import (
    GoogleCalendarAuthError,
    GoogleCalendarValidationError,
)
from src.integrations.google_calendar.repository import GoogleCalendarRepository

CREDENTIALS = {"token": "access", "refresh_token": "refresh", "scopes": ["calendar"]}


@pytest.fixture
def mock_client():
    return MagicMock()


@pytest.fixture
def credentials_loader():
    return AsyncMock(return_value=CREDENTIALS)


@pytest.fixture
def client_factory(mock_client):
    return MagicMock(return_value=mock_client)


@pytest.fixture
def repository(credentials_loader, client_factory):
    repo = GoogleCalendarRepository(
        credentials_loader,
        api_endpoint="http://localhost:9000",
        adapter=GoogleCalendarAdapter(default_timezone="UTC"),
        client_factory=client_factory,
    )
    yield repo


class TestListCalendars:
    @pytest.mark.asyncio
    async def test_converts_entries(self, repository, mock_client, credentials_loader, chat_id):
        mock_client.list_all_calendars.return_value = [
            {"id": "primary", "summary": "Me"},
            {"id": "work", "summary": "Work", "timeZone": "Europe/Berlin"},
        ]

        calendars = await repository.list_calendars(chat_id)

        assert [c.id for c in calendars] == ["primary", "work"]
        assert calendars[1].timezone == "Europe/Berlin"
        credentials_loader.assert_awaited_once_with(chat_id)

    @pytest.mark.asyncio
    async def test_builds_client_from_stored_credentials(
        self, repository, mock_client, client_factory, chat_id
    ):
        mock_client.list_all_calendars.return_value = []

        with patch(
            "src.integrations.google_calendar.repository.get_oauth_credentials_from_dict"
        ) as mock_credentials:
            await repository.list_calendars(chat_id)

        mock_credentials.assert_called_once_with(CREDENTIALS)
        client_factory.assert_called_once_with(
            mock_credentials.return_value, api_endpoint="http://localhost:9000"
        )

    @pytest.mark.asyncio
    async def test_no_credentials(self, credentials_loader, client_factory, chat_id):
        credentials_loader.return_value = None
        repo = GoogleCalendarRepository(credentials_loader, client_factory=client_factory)

        with pytest.raises(GoogleCalendarAuthError):
            await repo.list_calendars(chat_id)

        client_factory.assert_not_called()


class TestCreateEvent:
    @pytest.mark.asyncio
    async def test_creates_and_returns_event(self, repository, mock_client, chat_id, make_event):
        mock_client.insert_event.return_value = {"id": "evt-1", "summary": "Lunch"}

        created = await repository.create_event(chat_id, "work", make_event())

        assert created.id == "evt-1"
        assert created.calendar_id == "work"
        kwargs = mock_client.insert_event.call_args.kwargs
        assert kwargs["calendar_id"] == "work"
        assert kwargs["body"]["summary"] == "Lunch"
        assert kwargs["body"]["start"] == {"dateTime": "2024-06-11T12:00:00Z"}

    @pytest.mark.asyncio
    async def test_empty_response(self, repository, mock_client, chat_id, make_event):
        mock_client.insert_event.return_value = {}

        assert await repository.create_event(chat_id, "primary", make_event()) is None

    @pytest.mark.asyncio
    async def test_invalid_times_fail_before_calling_google(
        self, repository, mock_client, chat_id, make_event
    ):
        with pytest.raises(GoogleCalendarValidationError):
            await repository.create_event(chat_id, "primary", make_event(start_time="noon"))

        mock_client.insert_event.assert_not_called()


class TestClose:
    @pytest.mark.asyncio
    async def test_close_shuts_down_executor(self, credentials_loader):
        repo = GoogleCalendarRepository(credentials_loader)
        executor = repo._executor

        await repo.close()

        assert repo._executor is None
        assert executor._shutdown is True
