"""
Google Calendar gateway implementation.

Implements the CalendarGateway protocol using Google Calendar API.
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Awaitable, Callable, Optional, Sequence

from src.agents.state import CalendarRef, CandidateEvent
from src.integrations.base import CalendarGateway, CreatedEvent
from src.integrations.google_calendar.adapter import GoogleCalendarAdapter
from src.integrations.google_calendar.auth import get_oauth_credentials_from_dict
from src.integrations.google_calendar.client import GoogleCalendarClient
from src.integrations.google_calendar.exceptions import GoogleCalendarAuthError

logger = logging.getLogger(__name__)

CredentialsLoader = Callable[[int], Awaitable[Optional[dict]]]


class GoogleCalendarRepository(CalendarGateway):
    """
    CalendarGateway implementation using Google Calendar API.

    Credentials are loaded per conversation from the token store. The Google
    API client is synchronous, so calls run in a thread pool.
    """

    def __init__(
        self,
        credentials_loader: CredentialsLoader,
        executor: Optional[ThreadPoolExecutor] = None,
        api_endpoint: Optional[str] = None,
        adapter: Optional[GoogleCalendarAdapter] = None,
        client_factory: Callable[..., GoogleCalendarClient] = GoogleCalendarClient,
    ):
        """
        Initialize the repository.

        Args:
            credentials_loader: Async callable returning a credentials dict
                for a conversation, or None if it never authorized
            executor: Thread pool for running sync API calls (creates default if None)
            api_endpoint: Optional API root override
            adapter: Event/calendar mapper
            client_factory: Builds a client from credentials
        """
        self._credentials_loader = credentials_loader
        self._executor = executor or ThreadPoolExecutor(max_workers=4)
        self._api_endpoint = api_endpoint or None
        self._adapter = adapter or GoogleCalendarAdapter()
        self._client_factory = client_factory

    async def _client_for(self, conversation_id: int) -> GoogleCalendarClient:
        credentials_dict = await self._credentials_loader(conversation_id)
        if not credentials_dict:
            raise GoogleCalendarAuthError(
                f"No Google credentials stored for conversation {conversation_id}"
            )
        credentials = get_oauth_credentials_from_dict(credentials_dict)
        return self._client_factory(credentials, api_endpoint=self._api_endpoint)

    async def _run_in_executor(self, func, *args, **kwargs):
        """Run a synchronous function in the thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor,
            partial(func, *args, **kwargs),
        )

    async def list_calendars(self, conversation_id: int) -> Sequence[CalendarRef]:
        """
        List the conversation's calendars.

        Raises:
            GoogleCalendarAuthError: No credentials for the conversation
            GoogleCalendarError: API failure after retries
        """
        client = await self._client_for(conversation_id)
        entries = await self._run_in_executor(client.list_all_calendars)

        calendars = [self._adapter.from_calendar_list_entry(entry) for entry in entries]
        logger.info(f"[{conversation_id}] Retrieved {len(calendars)} calendars")
        return calendars

    async def create_event(
        self,
        conversation_id: int,
        calendar_id: str,
        event: CandidateEvent,
    ) -> Optional[CreatedEvent]:
        """
        Create an event in Google Calendar.

        Returns:
            Created event, or None if Google returned no event

        Raises:
            GoogleCalendarAuthError: No credentials for the conversation
            GoogleCalendarValidationError: Event times are not ISO 8601
            GoogleCalendarError: API failure after retries
        """
        body = self._adapter.to_google_event(event)
        client = await self._client_for(conversation_id)

        google_event = await self._run_in_executor(
            client.insert_event,
            calendar_id=calendar_id,
            body=body,
        )

        created = self._adapter.to_created_event(google_event, calendar_id)
        if created is not None:
            logger.info(
                f"[{conversation_id}] Created event '{event.title}' with ID {created.id}"
            )
        return created

    async def close(self):
        """Clean up resources."""
        if self._executor:
            self._executor.shutdown(wait=False)
            self._executor = None
