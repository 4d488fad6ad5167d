"""Tests for Google Calendar adapter."""

import pytest

from src.agents.state import CandidateEvent
from src.integrations.google_calendar.adapter import GoogleCalendarAdapter
from src.integrations.google_calendar.exceptions import GoogleCalendarValidationError


@pytest.fixture
def adapter() -> GoogleCalendarAdapter:
    return GoogleCalendarAdapter(default_timezone="America/New_York")


def event(**overrides) -> CandidateEvent:
    data = {
        "title": "Lunch",
        "start_time": "2024-06-11T12:00:00Z",
        "end_time": "2024-06-11T13:00:00Z",
    }
    data.update(overrides)
    return CandidateEvent(**data)


class TestToGoogleEvent:
    """Tests for insert body construction."""

    def test_minimal_event(self, adapter):
        assert adapter.to_google_event(event()) == {
            "summary": "Lunch",
            "start": {"dateTime": "2024-06-11T12:00:00Z"},
            "end": {"dateTime": "2024-06-11T13:00:00Z"},
        }

    def test_optional_fields(self, adapter):
        body = adapter.to_google_event(event(
            description="With Sam",
            location="Cafe",
            attendee_emails=["sam@example.com"],
            visibility="private",
        ))

        assert body["description"] == "With Sam"
        assert body["location"] == "Cafe"
        assert body["attendees"] == [{"email": "sam@example.com"}]
        assert body["visibility"] == "private"

    def test_offset_is_kept(self, adapter):
        body = adapter.to_google_event(event(
            start_time="2024-06-11T14:00:00-04:00", end_time="2024-06-11T15:00:00-04:00"
        ))
        assert body["start"] == {"dateTime": "2024-06-11T14:00:00-04:00"}

    def test_naive_time_gets_default_timezone(self, adapter):
        body = adapter.to_google_event(event(
            start_time="2024-06-11T12:00:00", end_time="2024-06-11T13:00:00"
        ))
        assert body["start"] == {
            "dateTime": "2024-06-11T12:00:00",
            "timeZone": "America/New_York",
        }

    def test_all_day(self, adapter):
        body = adapter.to_google_event(event(start_time="2024-06-11", end_time="2024-06-12"))
        assert body["start"] == {"date": "2024-06-11"}
        assert body["end"] == {"date": "2024-06-12"}

    def test_invalid_time(self, adapter):
        with pytest.raises(GoogleCalendarValidationError):
            adapter.to_google_event(event(start_time="tomorrow noon"))


class TestCalendarListEntry:
    def test_summary_override_wins(self):
        ref = GoogleCalendarAdapter.from_calendar_list_entry({
            "id": "work",
            "summary": "Work",
            "summaryOverride": "Office",
            "timeZone": "Europe/Berlin",
        })
        assert ref.id == "work"
        assert ref.display_name == "Office"
        assert ref.timezone == "Europe/Berlin"

    def test_missing_summary(self):
        assert GoogleCalendarAdapter.from_calendar_list_entry({"id": "x"}).display_name == ""


class TestToCreatedEvent:
    def test_converts(self):
        created = GoogleCalendarAdapter.to_created_event(
            {"id": "evt-1", "summary": "Lunch", "htmlLink": "https://calendar/evt-1"}, "work"
        )
        assert created.id == "evt-1"
        assert created.calendar_id == "work"
        assert created.html_link == "https://calendar/evt-1"

    @pytest.mark.parametrize("response", [None, {}, {"summary": "no id"}])
    def test_no_event(self, response):
        assert GoogleCalendarAdapter.to_created_event(response, "primary") is None
