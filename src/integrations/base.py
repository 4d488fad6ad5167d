"""
Calendar gateway protocol and base types.

Defines the interface the assistant uses to reach a calendar provider.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from src.agents.state import CalendarRef, CandidateEvent


@dataclass
class CreatedEvent:
    """
    Normalized result of an event insert, mapped from the provider's
    response by adapters.
    """

    id: str
    calendar_id: str
    title: str
    html_link: Optional[str] = None


class CalendarGateway(Protocol):
    """
    Protocol for calendar providers.

    Implementations:
    - GoogleCalendarRepository: Uses Google Calendar API

    Both methods are async; credentials are looked up per conversation.
    """

    @abstractmethod
    async def list_calendars(self, conversation_id: int) -> Sequence[CalendarRef]:
        """
        List every calendar visible to the conversation's credentials.

        Args:
            conversation_id: Conversation whose credentials are used

        Returns:
            Calendars in provider order
        """
        ...

    @abstractmethod
    async def create_event(
        self,
        conversation_id: int,
        calendar_id: str,
        event: CandidateEvent,
    ) -> Optional[CreatedEvent]:
        """
        Insert an event.

        Args:
            conversation_id: Conversation whose credentials are used
            calendar_id: Calendar to insert into
            event: Event to create

        Returns:
            Created event, or None if the provider returned nothing
        """
        ...
