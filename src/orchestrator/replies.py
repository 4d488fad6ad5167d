"""
Reply types and user-facing message text.
"""

from dataclasses import dataclass, field
from typing import Sequence

from src.agents.state import CandidateEvent

# Callback actions carried by inline buttons
ACTION_CONFIRM = "confirm"
ACTION_EDIT = "edit"


@dataclass(frozen=True)
class Button:
    label: str
    action: str


@dataclass
class Reply:
    """One outbound message, optionally with inline action buttons."""

    text: str
    buttons: list[Button] = field(default_factory=list)


CONFIRM_EDIT_BUTTONS = [
    Button(label="Confirm", action=ACTION_CONFIRM),
    Button(label="Edit", action=ACTION_EDIT),
]

WELCOME_MESSAGE = (
    "Welcome! Send me a description of your calendar event and I'll help add it "
    "to your Google Calendar.\n\n"
    "Commands:\n"
    "/auth - Authenticate with Google Calendar\n"
    "/confirm - Confirm adding the proposed event(s)\n"
    "/edit <new description> - Edit the proposed event(s)\n"
    "/calendars [enabled] - List your connected calendars\n"
    "/disable <account_id> <calendar> - Stop adding events to a calendar\n"
    "/enable <account_id> <calendar> - Resume adding events to a calendar\n"
    "/clear - Remove all connected accounts"
)

# Proposal flow
PROPOSAL_CTA = "If these look good, type /confirm to add the events, or /edit to modify."
REVISED_PROPOSAL_CTA = "If these look good, type /confirm to add the events."
CONFIRM_PROMPT = "Please confirm your events:"
NO_PENDING_FOR_CONFIRM_COMMAND = "No pending events. Send an event description first."
NO_PENDING_TO_EDIT = (
    "No pending events available to edit. Please provide an event description first."
)
NO_PENDING_TO_CONFIRM = "No pending events to confirm."
EDIT_INSTRUCTIONS = "Please send your updated event description using /edit command."
EXTRACTION_FAILED = (
    "Error parsing event description. Please ensure your description is clear "
    "and try again."
)
EDIT_EXTRACTION_FAILED = "Error parsing updated event description. Please try again."
EVENTS_CONFIRMED = "Events confirmed and added to your calendar."
CREATE_FAILED = "There was an error adding the event. Please try again."

# Accounts and calendars
NO_CALENDARS = (
    "No authenticated calendars found. Please use /auth to connect your Google Calendar."
)
ENABLED_CALENDARS_HEADER = "Enabled Calendars:\n"
ALL_CALENDARS_HEADER = "Authenticated Calendars and Accounts:\n"
ACCOUNTS_CLEARED = (
    "All authenticated accounts have been cleared. Use /auth to authenticate again."
)
AUTH_URL_TEMPLATE = "Please authenticate with Google Calendar by visiting this URL: {url}"
ALREADY_AUTHENTICATED = "You're already authenticated with Google Calendar.\n\nCalendars:\n\n"
AUTH_COMPLETED = "Google Calendar connected.\n\nCalendars:\n\n"
AUTH_FAILED = "Could not connect to Google Calendar. Please try /auth again."
NOT_AUTHENTICATED = "No authenticated Google account found. Use /auth to authenticate."

UNRECOGNIZED_COMMAND = (
    "Unrecognized command. Please send an event description or use a valid command."
)
GENERIC_ERROR = "Something went wrong. Please try again."


def format_events_reply(events: Sequence[CandidateEvent], confirm_message: str) -> str:
    """
    Render a proposal listing.

    Example:
        Proposed events:

        Event 1:
        Title: Lunch
        Start: 2024-06-11T12:00:00Z
        End: 2024-06-11T13:00:00Z
        Description: Lunch with Sam

        If these look good, type /confirm to add the events.
    """
    reply = "Proposed events:"
    for index, event in enumerate(events, start=1):
        reply += (
            f"\n\nEvent {index}:\n"
            f"Title: {event.title}\n"
            f"Start: {event.start_time}\n"
            f"End: {event.end_time}\n"
            f"Description: {event.description or ''}"
        )
    return f"{reply}\n\n{confirm_message}"


def disabled_message(calendar_id: str, account_id: int) -> str:
    return f"Calendar {calendar_id} for account {account_id} has been disabled."


def enabled_message(calendar_id: str, account_id: int, changed: bool) -> str:
    if changed:
        return f"Calendar {calendar_id} for account {account_id} has been enabled."
    return f"Calendar {calendar_id} for account {account_id} is not disabled."


def event_added_message(calendar_id: str, title: str) -> str:
    return f"Event added to calendar ({calendar_id}): {title}"
