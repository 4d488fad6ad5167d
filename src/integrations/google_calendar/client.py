"""
Google Calendar API client wrapper with retry and error handling.

Covers the two calls the assistant makes: listing the user's calendars and
inserting an event.
"""

import logging
from typing import Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build, Resource
from googleapiclient.errors import HttpError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception,
)

from src.integrations.google_calendar.exceptions import (
    GoogleCalendarError,
    GoogleCalendarAuthError,
    GoogleCalendarQuotaError,
    GoogleCalendarNotFoundError,
    GoogleCalendarRateLimitError,
    GoogleCalendarServerError,
    GoogleCalendarValidationError,
)

logger = logging.getLogger(__name__)


def _is_retryable_error(exception: Exception) -> bool:
    """Check if an exception should trigger a retry."""
    if isinstance(exception, GoogleCalendarError):
        return exception.retryable
    if isinstance(exception, HttpError):
        return exception.resp.status in (429, 500, 503)
    return False


def _handle_http_error(error: HttpError) -> None:
    """Convert HttpError to appropriate GoogleCalendarError."""
    status = error.resp.status
    message = str(error)

    if status == 400:
        raise GoogleCalendarValidationError(
            f"Invalid request: {message}",
            original_error=error,
        )
    elif status == 401:
        raise GoogleCalendarAuthError(
            "Authentication failed - credentials may be invalid or expired",
            original_error=error,
        )
    elif status == 403:
        if "quota" in message.lower() or "rate limit" in message.lower():
            raise GoogleCalendarQuotaError(
                "API quota exceeded",
                original_error=error,
            )
        raise GoogleCalendarAuthError(
            "Access denied - check granted scopes and calendar permissions",
            original_error=error,
        )
    elif status == 404:
        raise GoogleCalendarNotFoundError(
            "Calendar not found",
            original_error=error,
        )
    elif status == 429:
        raise GoogleCalendarRateLimitError(
            "Rate limit exceeded - too many requests",
            original_error=error,
        )
    elif status >= 500:
        raise GoogleCalendarServerError(
            f"Google Calendar unavailable ({status})",
            original_error=error,
        )
    else:
        raise GoogleCalendarError(
            f"Google Calendar API error ({status}): {message}",
            original_error=error,
        )


class GoogleCalendarClient:
    """
    Wrapper around Google Calendar API v3.

    Provides:
    - Automatic retry with exponential backoff
    - Consistent error handling
    - Pagination handling for the calendar list
    """

    def __init__(self, credentials: Credentials, api_endpoint: Optional[str] = None):
        """
        Initialize the client.

        Args:
            credentials: Google OAuth2 credentials
            api_endpoint: Optional API root override (e.g. a local emulator)
        """
        client_options = {"api_endpoint": api_endpoint} if api_endpoint else None
        self._service: Resource = build(
            "calendar",
            "v3",
            credentials=credentials,
            cache_discovery=False,
            client_options=client_options,
        )

    @property
    def service(self) -> Resource:
        """Get the underlying Google API service."""
        return self._service

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception(_is_retryable_error),
        reraise=True,
    )
    def list_calendars(
        self,
        max_results: int = 250,
        page_token: Optional[str] = None,
    ) -> dict:
        """
        List one page of the user's calendar list.

        Hidden and deleted calendars are included so indexes stay stable.

        Returns:
            API response with items and nextPageToken
        """
        try:
            return self._service.calendarList().list(
                maxResults=max_results,
                pageToken=page_token,
                showDeleted=True,
                showHidden=True,
            ).execute()
        except HttpError as e:
            _handle_http_error(e)

    def list_all_calendars(self) -> list[dict]:
        """List the whole calendar list with automatic pagination."""
        all_calendars = []
        page_token = None

        while True:
            response = self.list_calendars(page_token=page_token)
            all_calendars.extend(response.get("items", []))

            page_token = response.get("nextPageToken")
            if not page_token:
                break

        logger.debug(f"Listed {len(all_calendars)} calendars")
        return all_calendars

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception(_is_retryable_error),
        reraise=True,
    )
    def insert_event(self, calendar_id: str, body: dict) -> dict:
        """
        Create a new event.

        Args:
            calendar_id: Calendar to create event in
            body: Event data in Google Calendar format

        Returns:
            Created event with ID
        """
        try:
            result = self._service.events().insert(
                calendarId=calendar_id,
                body=body,
            ).execute()
            logger.info(f"Created event {result.get('id')} in {calendar_id}")
            return result
        except HttpError as e:
            _handle_http_error(e)
