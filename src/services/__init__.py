"""
Service layer for the Calendar Assistant.

Provides:
- Session state with its JSON snapshot
- Calendar directory (accounts, calendars, disabled calendars)
- Pending proposals (src.services.proposals)
- Event creation against the connected accounts (src.services.calendar_mutation)
"""

from src.services.exceptions import (
    AssistantError,
    AuthorizationError,
    CalendarDisabledError,
    CreateFailedError,
    ExtractionFailedError,
    InvalidIndexError,
    NoPendingProposalError,
    NotAuthenticatedError,
    UnknownAccountError,
)
from src.services.session_state import PersistResult, SessionState
from src.services.calendar_directory import CalendarDirectory

__all__ = [
    # Errors
    "AssistantError",
    "AuthorizationError",
    "CalendarDisabledError",
    "CreateFailedError",
    "ExtractionFailedError",
    "InvalidIndexError",
    "NoPendingProposalError",
    "NotAuthenticatedError",
    "UnknownAccountError",
    # State
    "PersistResult",
    "SessionState",
    # Directory
    "CalendarDirectory",
]
