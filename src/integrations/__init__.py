"""
External service integrations for the Calendar Assistant.

Calendar providers implement CalendarGateway; the messaging transport lives
in src.integrations.telegram.
"""

from src.integrations.base import CalendarGateway, CreatedEvent

__all__ = ["CalendarGateway", "CreatedEvent"]
