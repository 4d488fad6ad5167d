"""
Custom exceptions for Google Calendar operations.

Provides structured error handling with retryable flags.
"""


class GoogleCalendarError(Exception):
    """Base exception for Google Calendar operations."""

    retryable: bool = False

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class GoogleCalendarAuthError(GoogleCalendarError):
    """
    Authentication or authorization failure.

    Causes:
    - No stored token for the conversation
    - Expired credentials that could not be refreshed
    - Insufficient scopes
    """

    retryable = False


class GoogleCalendarQuotaError(GoogleCalendarError):
    """
    API quota exceeded.

    Retryable after backoff.
    """

    retryable = True


class GoogleCalendarNotFoundError(GoogleCalendarError):
    """
    Calendar not found.

    Usually a calendar id that the LLM made up or that was deleted after
    the account was connected.
    """

    retryable = False


class GoogleCalendarRateLimitError(GoogleCalendarError):
    """
    Rate limit hit (429 response).

    Retryable after exponential backoff.
    """

    retryable = True


class GoogleCalendarServerError(GoogleCalendarError):
    """
    Google returned a 5xx response.

    Retryable after exponential backoff.
    """

    retryable = True


class GoogleCalendarValidationError(GoogleCalendarError):
    """
    Invalid event data.

    Causes:
    - Start or end time that is not ISO 8601
    - Rejected by the API (400)
    """

    retryable = False
