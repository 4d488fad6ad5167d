"""
Data models shared by the calendar assistant.

Design Rationale:
- Pydantic models for validation and JSON serialization of session state
- ISO 8601 strings for event times, passed through to the calendar untouched
- Aliases on CalendarRef keep the snapshot layout of the Google calendar list
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


Visibility = Literal["default", "public", "private", "confidential"]

DEFAULT_CALENDAR_ID = "primary"


# ============================================================================
# Calendars and Accounts
# ============================================================================

class CalendarRef(BaseModel):
    """Snapshot of one calendar taken when the account was authenticated."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    display_name: str = Field(default="", alias="summary")
    description: Optional[str] = None
    timezone: Optional[str] = Field(default=None, alias="timeZone")


class Account(BaseModel):
    """
    A calendar account connected to one conversation.

    account_id is a small per-conversation sequence number, not a global
    identity.
    """

    account_id: int = Field(alias="accountId")
    email: Optional[str] = None
    calendars: list[CalendarRef] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @property
    def label(self) -> str:
        """Header shown to the user for this account."""
        if self.email:
            return f"Account {self.account_id} ({self.email})"
        return f"Account {self.account_id}"


# ============================================================================
# Candidate Events and Proposals
# ============================================================================

class CandidateEvent(BaseModel):
    """An LLM-proposed event that has not been written to a calendar yet."""

    title: str
    description: Optional[str] = None
    start_time: str  # ISO 8601
    end_time: str  # ISO 8601
    location: Optional[str] = None
    visibility: Visibility = "default"
    attendee_emails: list[str] = Field(default_factory=list)
    calendar_id: str = DEFAULT_CALENDAR_ID
    account_id: Optional[int] = None


class PendingProposal(BaseModel):
    """Candidate events awaiting confirmation or edit for one conversation."""

    events: list[CandidateEvent]
    original_text: str
    last_extraction_json: Optional[str] = None
    edit_history: list[str] = Field(default_factory=list)


# ============================================================================
# Structured Extraction Schema (filled by the LLM)
# ============================================================================

class ExtractedEvent(BaseModel):
    """One calendar event extracted from the user's text."""

    title: str = Field(description="Title of the event")
    start_time: str = Field(description="Start time in ISO format")
    end_time: str = Field(description="End time in ISO format")
    description: str = Field(description="Description of the event")
    account_id: int = Field(description="The account ID to use for this event")
    calendar: Optional[str] = Field(
        default=None,
        description="Optional calendar ID, defaults to 'primary'",
    )


class ExtractionResult(BaseModel):
    """Extract calendar events from user text with proper formatting."""

    events: list[ExtractedEvent] = Field(
        description="Array of calendar events extracted from user text",
        min_length=1,
    )
