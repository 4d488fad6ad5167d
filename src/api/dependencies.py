"""
FastAPI dependency injection providers.

Builds the assistant's services once at startup and hands them to routes.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException

from src.agents.extraction import EventExtractor
from src.auth.service import AuthService
from src.config import Settings
from src.integrations.google_calendar import GoogleCalendarAdapter, GoogleCalendarRepository
from src.integrations.telegram import TelegramBot
from src.orchestrator.controller import ConversationController
from src.services.calendar_directory import CalendarDirectory
from src.services.calendar_mutation import CalendarMutationAdapter
from src.services.proposals import ProposalStore
from src.services.session_state import SessionState

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Wired application services."""

    state: SessionState
    directory: CalendarDirectory
    proposals: ProposalStore
    mutation: CalendarMutationAdapter
    auth_service: AuthService
    gateway: GoogleCalendarRepository
    controller: ConversationController
    bot: Optional[TelegramBot] = None


_services: Optional[Services] = None


def build_services(settings: Settings) -> Services:
    """Create and wire every service; the session snapshot is loaded here."""
    state = SessionState(settings.session_state_path)
    state.load()

    directory = CalendarDirectory(state)
    auth_service = AuthService()
    gateway = GoogleCalendarRepository(
        credentials_loader=auth_service.get_credentials,
        api_endpoint=settings.google_calendar_api_endpoint,
        adapter=GoogleCalendarAdapter(default_timezone=settings.default_timezone),
    )
    proposals = ProposalStore(state, directory, EventExtractor())
    mutation = CalendarMutationAdapter(
        directory, gateway, timeout=settings.external_call_timeout
    )
    controller = ConversationController(
        state, directory, proposals, mutation, auth_service, gateway
    )
    bot = TelegramBot(settings.telegram_bot_token, controller) if settings.telegram_bot_token else None

    return Services(
        state=state,
        directory=directory,
        proposals=proposals,
        mutation=mutation,
        auth_service=auth_service,
        gateway=gateway,
        controller=controller,
        bot=bot,
    )


def init_services(services: Services) -> None:
    """Register services at application startup."""
    global _services
    _services = services
    logger.info("Services initialized")


def reset_services() -> None:
    global _services
    _services = None


def get_services() -> Services:
    """
    Dependency injection for the wired services.

    Raises:
        HTTPException: If services are not initialized
    """
    if _services is None:
        logger.error("Services not initialized")
        raise HTTPException(
            status_code=503,
            detail="Service temporarily unavailable - services not initialized",
        )
    return _services
