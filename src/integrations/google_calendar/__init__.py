"""
Google Calendar integration for the Calendar Assistant.

Lists the user's calendars and inserts confirmed events.
"""

from src.integrations.google_calendar.adapter import GoogleCalendarAdapter
from src.integrations.google_calendar.client import GoogleCalendarClient
from src.integrations.google_calendar.exceptions import (
    GoogleCalendarAuthError,
    GoogleCalendarError,
    GoogleCalendarNotFoundError,
    GoogleCalendarQuotaError,
    GoogleCalendarRateLimitError,
    GoogleCalendarServerError,
    GoogleCalendarValidationError,
)
from src.integrations.google_calendar.repository import GoogleCalendarRepository

__all__ = [
    "GoogleCalendarAdapter",
    "GoogleCalendarClient",
    "GoogleCalendarError",
    "GoogleCalendarAuthError",
    "GoogleCalendarNotFoundError",
    "GoogleCalendarQuotaError",
    "GoogleCalendarRateLimitError",
    "GoogleCalendarServerError",
    "GoogleCalendarValidationError",
    "GoogleCalendarRepository",
]
