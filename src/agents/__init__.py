"""
Agent module for the Calendar Assistant.

Data models shared across the assistant and the LLM-backed event
extraction adapter live here.
"""

from src.agents.state import (
    DEFAULT_CALENDAR_ID,
    Account,
    CalendarRef,
    CandidateEvent,
    ExtractedEvent,
    ExtractionResult,
    PendingProposal,
    Visibility,
)

__all__ = [
    "DEFAULT_CALENDAR_ID",
    "Account",
    "CalendarRef",
    "CandidateEvent",
    "ExtractedEvent",
    "ExtractionResult",
    "PendingProposal",
    "Visibility",
]
