"""
Exceptions raised by the calendar assistant services.

Every exception carries a user-facing message; the conversation controller
turns them into replies.
"""


class AssistantError(Exception):
    """Base exception for assistant operations."""

    def __init__(self, message: str, original_error: Exception | None = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class NotAuthenticatedError(AssistantError):
    """The conversation has no connected calendar account."""


class UnknownAccountError(AssistantError):
    """The account id is not connected to this conversation."""


class InvalidIndexError(AssistantError):
    """A calendar index is outside the account's calendar list."""


class NoPendingProposalError(AssistantError):
    """There is no proposal waiting for confirmation or edit."""


class ExtractionFailedError(AssistantError):
    """
    Every extraction model failed.

    original_error holds the failure of the last model tried.
    """


class CreateFailedError(AssistantError):
    """
    The calendar did not create the event.

    Causes:
    - The API response carried no event
    - Network or service error
    - The call timed out
    """


class CalendarDisabledError(AssistantError):
    """
    The target calendar is disabled for the account.

    Not a real failure: the event is skipped on purpose.
    """


class AuthorizationError(AssistantError):
    """
    An OAuth callback could not be completed.

    Causes:
    - Unknown or already used state value
    - Code exchange rejected by the provider
    """
