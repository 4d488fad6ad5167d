"""
Conversation controller.

Routes every inbound message and button press for a conversation to the
directory, proposal store and mutation adapter, and turns their outcomes
(including AssistantError failures) into replies. Messages for the same
conversation are processed one at a time in arrival order.

States per conversation:
    Unauthenticated -> AuthPending -> Authenticated{NoProposal | ProposalPending}
"""

import asyncio
import logging
from collections import defaultdict
from typing import Optional

from src.agents.state import CandidateEvent
from src.auth.service import AuthService
from src.integrations.base import CalendarGateway
from src.orchestrator import replies
from src.orchestrator.commands import (
    AuthCommand,
    CalendarsCommand,
    ClearCommand,
    Command,
    ConfirmCommand,
    DisableCommand,
    EditCommand,
    EnableCommand,
    FreeText,
    InvalidUsage,
    StartCommand,
    UnknownCommand,
    parse_command,
)
from src.orchestrator.replies import CONFIRM_EDIT_BUTTONS, Reply
from src.services.calendar_directory import CalendarDirectory
from src.services.calendar_mutation import CalendarMutationAdapter
from src.services.exceptions import (
    AssistantError,
    CalendarDisabledError,
    CreateFailedError,
    ExtractionFailedError,
    NoPendingProposalError,
    NotAuthenticatedError,
)
from src.services.proposals import ProposalStore
from src.services.session_state import SessionState

logger = logging.getLogger(__name__)


class ConversationController:
    """
    Per-conversation command and state machine.

    Usage:
        controller = ConversationController(state, directory, proposals,
                                            mutation, auth_service, gateway)
        for reply in await controller.handle_text(chat_id, "/calendars"):
            await transport.send(chat_id, reply)
    """

    def __init__(
        self,
        state: SessionState,
        directory: CalendarDirectory,
        proposals: ProposalStore,
        mutation: CalendarMutationAdapter,
        auth_service: AuthService,
        gateway: CalendarGateway,
    ):
        self._state = state
        self._directory = directory
        self._proposals = proposals
        self._mutation = mutation
        self._auth = auth_service
        self._gateway = gateway
        self._locks: defaultdict[int, asyncio.Lock] = defaultdict(asyncio.Lock)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def handle_text(self, conversation_id: int, text: str) -> list[Reply]:
        """Handle one inbound text message."""
        if not text or not text.strip():
            return []

        command = parse_command(text)
        logger.info(f"[{conversation_id}] Handling {type(command).__name__}")

        async with self._locks[conversation_id]:
            return await self._guarded(conversation_id, self._dispatch(conversation_id, command))

    async def handle_action(self, conversation_id: int, action: str) -> list[Reply]:
        """Handle a button press carrying an action tag."""
        logger.info(f"[{conversation_id}] Handling action '{action}'")

        async with self._locks[conversation_id]:
            if action == replies.ACTION_CONFIRM:
                return await self._guarded(conversation_id, self._confirm_action(conversation_id))
            if action == replies.ACTION_EDIT:
                return [Reply(replies.EDIT_INSTRUCTIONS)]

        logger.warning(f"[{conversation_id}] Ignoring unknown action '{action}'")
        return []

    async def complete_authorization(self, conversation_id: int) -> tuple[bool, list[Reply]]:
        """
        Connect calendars after the OAuth callback stored a token.

        Returns:
            Whether the calendars were connected, and the replies for the chat
        """
        async with self._locks[conversation_id]:
            try:
                return await self._connect_calendars(conversation_id, replies.AUTH_COMPLETED)
            except Exception as e:
                logger.error(f"[{conversation_id}] Unhandled error: {e}", exc_info=True)
                return False, [Reply(replies.GENERIC_ERROR)]

    async def _guarded(self, conversation_id: int, coro) -> list[Reply]:
        """Convert errors raised while handling a message into replies."""
        try:
            return await coro
        except AssistantError as e:
            logger.info(f"[{conversation_id}] {type(e).__name__}: {e.message}")
            return [Reply(e.message)]
        except Exception as e:
            logger.error(f"[{conversation_id}] Unhandled error: {e}", exc_info=True)
            return [Reply(replies.GENERIC_ERROR)]

    async def _dispatch(self, conversation_id: int, command: Command) -> list[Reply]:
        if isinstance(command, StartCommand):
            return [Reply(replies.WELCOME_MESSAGE)]
        if isinstance(command, AuthCommand):
            return await self._auth_command(conversation_id)
        if isinstance(command, DisableCommand):
            return self._disable_command(conversation_id, command)
        if isinstance(command, EnableCommand):
            return self._enable_command(conversation_id, command)
        if isinstance(command, CalendarsCommand):
            return self._calendars_command(conversation_id, command)
        if isinstance(command, ConfirmCommand):
            return self._confirm_command(conversation_id)
        if isinstance(command, EditCommand):
            return await self._edit_command(conversation_id, command)
        if isinstance(command, ClearCommand):
            return await self._clear_command(conversation_id)
        if isinstance(command, InvalidUsage):
            return [Reply(command.message)]
        if isinstance(command, UnknownCommand):
            return [Reply(replies.UNRECOGNIZED_COMMAND)]
        if isinstance(command, FreeText):
            return await self._free_text(conversation_id, command)

        raise TypeError(f"Unhandled command: {command!r}")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def _auth_command(self, conversation_id: int) -> list[Reply]:
        self._state.pending_auth.add(conversation_id)

        result = await self._auth.start_auth(conversation_id, provider="google")
        if not result.completed:
            return [Reply(replies.AUTH_URL_TEMPLATE.format(url=result.redirect_url))]

        _, reply_list = await self._connect_calendars(
            conversation_id, replies.ALREADY_AUTHENTICATED
        )
        return reply_list

    async def _connect_calendars(
        self, conversation_id: int, header: str
    ) -> tuple[bool, list[Reply]]:
        try:
            calendars = await self._gateway.list_calendars(conversation_id)
        except Exception as e:
            logger.error(f"[{conversation_id}] Failed to list calendars: {e}", exc_info=True)
            return False, [Reply(replies.AUTH_FAILED)]

        email = await self._auth.get_email(conversation_id)

        self._directory.store_calendars(conversation_id, calendars, email=email)
        self._state.pending_auth.discard(conversation_id)
        self._persist(conversation_id)

        listing = self._directory.render_directory(
            self._directory.accounts(conversation_id),
            conversation_id,
            show_disabled_marker=True,
        )
        return True, [Reply(header + listing)]

    def _disable_command(self, conversation_id: int, command: DisableCommand) -> list[Reply]:
        self._directory.require_account(conversation_id, command.account_id)
        calendar_id = self._directory.resolve_calendar_identifier(
            conversation_id, command.account_id, command.calendar, strict=True
        )

        self._directory.set_disabled(conversation_id, command.account_id, calendar_id, True)
        self._persist(conversation_id)
        return [Reply(replies.disabled_message(calendar_id, command.account_id))]

    def _enable_command(self, conversation_id: int, command: EnableCommand) -> list[Reply]:
        self._directory.require_account(conversation_id, command.account_id)
        calendar_id = self._directory.resolve_calendar_identifier(
            conversation_id, command.account_id, command.calendar, strict=True
        )

        changed = self._directory.set_disabled(
            conversation_id, command.account_id, calendar_id, False
        )
        self._persist(conversation_id)
        return [Reply(replies.enabled_message(calendar_id, command.account_id, changed))]

    def _calendars_command(self, conversation_id: int, command: CalendarsCommand) -> list[Reply]:
        accounts = self._directory.accounts(conversation_id)
        if not accounts:
            return [Reply(replies.NO_CALENDARS)]

        listing = self._directory.render_directory(
            accounts,
            conversation_id,
            show_disabled_marker=True,
            enabled_only=command.enabled_only,
        )
        header = (
            replies.ENABLED_CALENDARS_HEADER
            if command.enabled_only
            else replies.ALL_CALENDARS_HEADER
        )
        return [Reply(header + listing)]

    def _confirm_command(self, conversation_id: int) -> list[Reply]:
        if not self._proposals.has_pending(conversation_id):
            return [Reply(replies.NO_PENDING_FOR_CONFIRM_COMMAND)]
        return [Reply(replies.CONFIRM_PROMPT, buttons=list(CONFIRM_EDIT_BUTTONS))]

    async def _edit_command(self, conversation_id: int, command: EditCommand) -> list[Reply]:
        try:
            events = await self._proposals.revise_proposal(conversation_id, command.text)
        except NoPendingProposalError:
            return [Reply(replies.NO_PENDING_TO_EDIT)]
        except ExtractionFailedError:
            return [Reply(replies.EDIT_EXTRACTION_FAILED)]

        return [
            Reply(
                replies.format_events_reply(events, replies.REVISED_PROPOSAL_CTA),
                buttons=list(CONFIRM_EDIT_BUTTONS),
            )
        ]

    async def _clear_command(self, conversation_id: int) -> list[Reply]:
        self._directory.clear(conversation_id)
        self._state.pending_auth.discard(conversation_id)
        self._persist(conversation_id)

        await self._auth.revoke(conversation_id)
        return [Reply(replies.ACCOUNTS_CLEARED)]

    async def _free_text(self, conversation_id: int, command: FreeText) -> list[Reply]:
        self._proposals.discard(conversation_id)
        try:
            events = await self._proposals.start_proposal(conversation_id, command.text)
        except ExtractionFailedError:
            return [Reply(replies.EXTRACTION_FAILED)]

        return [
            Reply(
                replies.format_events_reply(events, replies.PROPOSAL_CTA),
                buttons=list(CONFIRM_EDIT_BUTTONS),
            )
        ]

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def _confirm_action(self, conversation_id: int) -> list[Reply]:
        try:
            events = self._proposals.confirm_and_clear(conversation_id)
        except NoPendingProposalError:
            return [Reply(replies.NO_PENDING_TO_CONFIRM)]

        results = []
        for event in events:
            results.append(Reply(await self._commit_event(conversation_id, event)))

        results.append(Reply(replies.EVENTS_CONFIRMED))
        return results

    async def _commit_event(self, conversation_id: int, event: CandidateEvent) -> str:
        """Create one event and describe the outcome; never raises AssistantError."""
        try:
            created = await self._mutation.create_event(conversation_id, event)
        except CalendarDisabledError as e:
            return e.message
        except NotAuthenticatedError:
            return replies.NOT_AUTHENTICATED
        except CreateFailedError:
            return replies.CREATE_FAILED

        return replies.event_added_message(created.calendar_id, event.title)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _persist(self, conversation_id: Optional[int] = None) -> None:
        result = self._state.persist()
        if not result.ok:
            logger.warning(f"[{conversation_id}] Session snapshot not saved: {result.error}")
