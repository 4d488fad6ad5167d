"""
Event creation against the connected calendar accounts.

Picks the target account, refuses disabled calendars without calling the
calendar service, and reports every other failure as CreateFailedError.
"""

import asyncio
import logging
from typing import Optional

from src.agents.state import DEFAULT_CALENDAR_ID, Account, CandidateEvent
from src.integrations.base import CalendarGateway, CreatedEvent
from src.services.calendar_directory import CalendarDirectory
from src.services.exceptions import (
    CalendarDisabledError,
    CreateFailedError,
    NotAuthenticatedError,
)

logger = logging.getLogger(__name__)


class CalendarMutationAdapter:
    """Creates confirmed candidate events through a CalendarGateway."""

    def __init__(
        self,
        directory: CalendarDirectory,
        gateway: CalendarGateway,
        timeout: float = 60.0,
    ):
        self._directory = directory
        self._gateway = gateway
        self._timeout = timeout

    def select_account(
        self,
        conversation_id: int,
        event: CandidateEvent,
        account_id: Optional[int] = None,
    ) -> Account:
        """
        Return the conversation's connected account.

        A conversation holds a single Google credential, so every event goes
        to account 0. An explicit or extracted account_id naming any other
        account is ignored.

        Raises:
            NotAuthenticatedError: No accounts connected
        """
        accounts = self._directory.accounts(conversation_id)
        if not accounts:
            raise NotAuthenticatedError(
                "No authenticated Google account found. Use /auth to authenticate."
            )

        account = accounts[0]
        requested = account_id if account_id is not None else event.account_id
        if requested is not None and requested != account.account_id:
            logger.warning(
                f"[{conversation_id}] Ignoring account {requested} for "
                f"'{event.title}'; using account {account.account_id}"
            )
        return account

    async def create_event(
        self,
        conversation_id: int,
        event: CandidateEvent,
        account_id: Optional[int] = None,
    ) -> CreatedEvent:
        """
        Create one event.

        The timeout only stops waiting for the calendar service. The insert
        runs in a worker thread with its own retries, so an event reported
        as timed out may still appear in the calendar.

        Returns:
            The created event as returned by the calendar service

        Raises:
            NotAuthenticatedError: No accounts connected
            CalendarDisabledError: Target calendar is disabled; nothing was sent
            CreateFailedError: The calendar service failed or timed out
        """
        account = self.select_account(conversation_id, event, account_id)
        calendar_id = event.calendar_id or DEFAULT_CALENDAR_ID

        if self._directory.is_disabled(conversation_id, account.account_id, calendar_id):
            logger.info(
                f"[{conversation_id}] Skipping '{event.title}': calendar "
                f"{calendar_id} disabled for account {account.account_id}"
            )
            raise CalendarDisabledError(
                f"Calendar {calendar_id} for Account {account.account_id} is "
                f"currently disabled. Skipping event: {event.title}"
            )

        try:
            created = await asyncio.wait_for(
                self._gateway.create_event(conversation_id, calendar_id, event),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"[{conversation_id}] Creating '{event.title}' timed out")
            raise CreateFailedError(
                "There was an error adding the event. Please try again.",
                original_error=e,
            ) from e
        except Exception as e:
            logger.error(
                f"[{conversation_id}] Error creating event '{event.title}': {e}",
                exc_info=True,
            )
            raise CreateFailedError(
                "There was an error adding the event. Please try again.",
                original_error=e,
            ) from e

        if created is None:
            logger.error(f"[{conversation_id}] Calendar returned no event for '{event.title}'")
            raise CreateFailedError("There was an error adding the event. Please try again.")

        logger.info(
            f"[{conversation_id}] Created event '{event.title}' in {calendar_id} "
            f"(account {account.account_id})"
        )
        return created
