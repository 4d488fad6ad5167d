"""Tests for Google Calendar API client."""

from unittest.mock import MagicMock, patch

import pytest
from googleapiclient.errors import HttpError
from tenacity import wait_none

from src.integrations.google_calendar.client import (
    GoogleCalendarClient,
    _handle_http_error,
    _is_retryable_error,
)
from src.integrations.google_calendar.exceptions import (
    GoogleCalendarAuthError,
    GoogleCalendarError,
    GoogleCalendarNotFoundError,
    GoogleCalendarQuotaError,
    GoogleCalendarRateLimitError,
    GoogleCalendarServerError,
    GoogleCalendarValidationError,
)


def make_http_error(status: int, message: str = "Error") -> HttpError:
    """Create a mock HttpError for testing."""
    resp = MagicMock()
    resp.status = status
    return HttpError(resp=resp, content=message.encode())


class TestIsRetryableError:
    """Tests for retry decision logic."""

    def test_retryable_google_calendar_error(self):
        assert _is_retryable_error(GoogleCalendarQuotaError("Quota exceeded")) is True
        assert _is_retryable_error(GoogleCalendarServerError("503")) is True

    def test_non_retryable_google_calendar_error(self):
        assert _is_retryable_error(GoogleCalendarAuthError("Auth failed")) is False
        assert _is_retryable_error(GoogleCalendarValidationError("Bad time")) is False

    def test_http_status_codes(self):
        for status in [429, 500, 503]:
            assert _is_retryable_error(make_http_error(status)) is True
        for status in [400, 401, 403, 404]:
            assert _is_retryable_error(make_http_error(status)) is False

    def test_other_exceptions(self):
        assert _is_retryable_error(ValueError("test")) is False


class TestHandleHttpError:
    """Tests for HTTP error to exception mapping."""

    @pytest.mark.parametrize(
        "status,message,expected",
        [
            (400, "bad", GoogleCalendarValidationError),
            (401, "unauthorized", GoogleCalendarAuthError),
            (403, "quota exceeded", GoogleCalendarQuotaError),
            (403, "rate limit", GoogleCalendarQuotaError),
            (403, "forbidden", GoogleCalendarAuthError),
            (404, "missing", GoogleCalendarNotFoundError),
            (429, "slow down", GoogleCalendarRateLimitError),
            (502, "bad gateway", GoogleCalendarServerError),
            (409, "conflict", GoogleCalendarError),
        ],
    )
    def test_mapping(self, status, message, expected):
        error = make_http_error(status, message)
        with pytest.raises(expected) as exc_info:
            _handle_http_error(error)
        assert exc_info.value.original_error is error

    def test_401_message(self):
        with pytest.raises(GoogleCalendarAuthError) as exc_info:
            _handle_http_error(make_http_error(401))
        assert "credentials may be invalid or expired" in str(exc_info.value)


@pytest.fixture
def service():
    return MagicMock()


@pytest.fixture
def client(service):
    with patch("src.integrations.google_calendar.client.build", return_value=service):
        yield GoogleCalendarClient(credentials=MagicMock())


class TestClientInit:
    def test_endpoint_override(self):
        with patch("src.integrations.google_calendar.client.build") as mock_build:
            GoogleCalendarClient(credentials=MagicMock(), api_endpoint="http://localhost:9000")

        assert mock_build.call_args.kwargs["client_options"] == {
            "api_endpoint": "http://localhost:9000"
        }
        assert mock_build.call_args.args == ("calendar", "v3")

    def test_default_endpoint(self):
        with patch("src.integrations.google_calendar.client.build") as mock_build:
            GoogleCalendarClient(credentials=MagicMock())

        assert mock_build.call_args.kwargs["client_options"] is None


class TestListCalendars:
    """Tests for calendar list paging."""

    def test_includes_hidden_and_deleted(self, client, service):
        service.calendarList().list().execute.return_value = {"items": []}

        client.list_calendars()

        kwargs = service.calendarList().list.call_args.kwargs
        assert kwargs["showDeleted"] is True
        assert kwargs["showHidden"] is True
        assert kwargs["maxResults"] == 250

    def test_list_all_follows_pages(self, client, service):
        service.calendarList().list().execute.side_effect = [
            {"items": [{"id": "a"}], "nextPageToken": "p2"},
            {"items": [{"id": "b"}]},
        ]

        calendars = client.list_all_calendars()

        assert [c["id"] for c in calendars] == ["a", "b"]
        assert service.calendarList().list.call_args.kwargs["pageToken"] == "p2"

    def test_not_found(self, client, service):
        service.calendarList().list().execute.side_effect = make_http_error(404)

        with pytest.raises(GoogleCalendarNotFoundError):
            client.list_calendars()


class TestInsertEvent:
    """Tests for event insertion."""

    def test_inserts(self, client, service):
        service.events().insert().execute.return_value = {"id": "evt-1"}

        result = client.insert_event("work", {"summary": "Lunch"})

        assert result == {"id": "evt-1"}
        service.events().insert.assert_called_with(calendarId="work", body={"summary": "Lunch"})

    def test_auth_error_is_not_retried(self, client, service):
        service.events().insert().execute.side_effect = make_http_error(401)

        with pytest.raises(GoogleCalendarAuthError):
            client.insert_event("primary", {})

        assert service.events().insert().execute.call_count == 1

    def test_server_error_is_retried(self, client, service):
        service.events().insert().execute.side_effect = [
            make_http_error(503),
            {"id": "evt-2"},
        ]

        with patch.object(GoogleCalendarClient.insert_event.retry, "wait", wait_none()):
            result = client.insert_event("primary", {})

        assert result == {"id": "evt-2"}
