"""
Mapping between assistant types and Google Calendar API format.

Handles:
- Event times: timed events with or without an explicit UTC offset,
  and date-only (all-day) events
- Attendees and visibility
- Calendar list entries to CalendarRef snapshots
"""

from typing import Optional

from dateutil.parser import isoparse

from src.agents.state import CalendarRef, CandidateEvent
from src.integrations.base import CreatedEvent
from src.integrations.google_calendar.exceptions import GoogleCalendarValidationError

DATE_ONLY_LENGTH = len("YYYY-MM-DD")


class GoogleCalendarAdapter:
    """Maps between assistant types and Google Calendar API format."""

    def __init__(self, default_timezone: str = "UTC"):
        self.default_timezone = default_timezone

    def to_google_event(self, event: CandidateEvent) -> dict:
        """
        Convert a candidate event to a Google Calendar insert body.

        Raises:
            GoogleCalendarValidationError: Start or end is not ISO 8601
        """
        google_event: dict = {
            "summary": event.title,
            "start": self._time_field(event.start_time),
            "end": self._time_field(event.end_time),
        }

        if event.description:
            google_event["description"] = event.description

        if event.location:
            google_event["location"] = event.location

        if event.attendee_emails:
            google_event["attendees"] = [
                {"email": email} for email in event.attendee_emails
            ]

        if event.visibility != "default":
            google_event["visibility"] = event.visibility

        return google_event

    def _time_field(self, value: str) -> dict:
        try:
            parsed = isoparse(value)
        except ValueError as e:
            raise GoogleCalendarValidationError(
                f"Invalid event time: {value!r}",
                original_error=e,
            )

        if len(value) == DATE_ONLY_LENGTH:
            return {"date": value}

        if parsed.tzinfo is None:
            # Naive local time is interpreted in the configured timezone
            return {"dateTime": value, "timeZone": self.default_timezone}

        return {"dateTime": value}

    @staticmethod
    def from_calendar_list_entry(entry: dict) -> CalendarRef:
        """Convert a calendarList item to a CalendarRef snapshot."""
        return CalendarRef(
            id=entry["id"],
            display_name=entry.get("summaryOverride") or entry.get("summary", ""),
            description=entry.get("description"),
            timezone=entry.get("timeZone"),
        )

    @staticmethod
    def to_created_event(
        google_event: Optional[dict], calendar_id: str
    ) -> Optional[CreatedEvent]:
        """Convert an insert response; None if Google returned no event."""
        if not google_event or not google_event.get("id"):
            return None

        return CreatedEvent(
            id=google_event["id"],
            calendar_id=calendar_id,
            title=google_event.get("summary", ""),
            html_link=google_event.get("htmlLink"),
        )
