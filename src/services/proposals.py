"""
Pending proposals: extracted events waiting for the user to confirm or edit.

At most one proposal exists per conversation. Edits re-run extraction with
the original text, the accumulated edit history and the previous JSON
proposal, and only replace the stored proposal when extraction succeeds.
"""

import logging
from datetime import date
from typing import Callable, Optional

from src.agents.extraction import EventExtractor
from src.agents.prompts import build_edit_instruction
from src.agents.state import CandidateEvent, PendingProposal
from src.services.calendar_directory import CalendarDirectory
from src.services.exceptions import NoPendingProposalError
from src.services.session_state import SessionState

logger = logging.getLogger(__name__)


class ProposalStore:
    """Start, revise, confirm and discard per-conversation proposals."""

    def __init__(
        self,
        state: SessionState,
        directory: CalendarDirectory,
        extractor: EventExtractor,
        today: Callable[[], date] = date.today,
    ):
        self._state = state
        self._directory = directory
        self._extractor = extractor
        self._today = today

    def get(self, conversation_id: int) -> Optional[PendingProposal]:
        return self._state.proposals.get(conversation_id)

    def has_pending(self, conversation_id: int) -> bool:
        return conversation_id in self._state.proposals

    async def start_proposal(
        self, conversation_id: int, free_text: str
    ) -> list[CandidateEvent]:
        """
        Extract events from free text and store them as the pending proposal.

        Any earlier proposal is replaced. On extraction failure nothing is
        stored and ExtractionFailedError propagates.
        """
        outcome = await self._extractor.extract(
            free_text,
            accounts=self._directory.enabled_accounts(conversation_id),
            current_date=self._today(),
        )

        self._state.proposals[conversation_id] = PendingProposal(
            events=outcome.events,
            original_text=free_text,
            last_extraction_json=outcome.json_proposal,
            edit_history=[],
        )
        logger.info(
            f"[{conversation_id}] Stored proposal with {len(outcome.events)} events"
        )
        return outcome.events

    async def revise_proposal(
        self, conversation_id: int, edit_text: str
    ) -> list[CandidateEvent]:
        """
        Re-extract the pending proposal with an additional edit.

        Raises:
            NoPendingProposalError: Nothing to edit
            ExtractionFailedError: Extraction failed; the proposal is unchanged
        """
        proposal = self._state.proposals.get(conversation_id)
        if proposal is None:
            raise NoPendingProposalError(
                "No pending events available to edit. "
                "Please provide an event description first."
            )

        instruction = build_edit_instruction(
            original_text=proposal.original_text,
            latest_edit=edit_text,
            previous_edits=proposal.edit_history,
        )
        outcome = await self._extractor.extract(
            instruction,
            accounts=self._directory.enabled_accounts(conversation_id),
            current_date=self._today(),
            prior_proposal_json=proposal.last_extraction_json,
        )

        self._state.proposals[conversation_id] = proposal.model_copy(
            update={
                "events": outcome.events,
                "edit_history": [*proposal.edit_history, edit_text],
                "last_extraction_json": "\n".join(
                    part for part in (proposal.last_extraction_json, outcome.json_proposal) if part
                ),
            }
        )
        logger.info(
            f"[{conversation_id}] Revised proposal "
            f"(edit {len(proposal.edit_history) + 1}, {len(outcome.events)} events)"
        )
        return outcome.events

    def confirm_and_clear(self, conversation_id: int) -> list[CandidateEvent]:
        """
        Take the pending events for creation and drop the proposal.

        Raises:
            NoPendingProposalError: Nothing to confirm
        """
        proposal = self._state.proposals.pop(conversation_id, None)
        if proposal is None:
            raise NoPendingProposalError("No pending events to confirm.")
        return list(proposal.events)

    def discard(self, conversation_id: int) -> None:
        self._state.proposals.pop(conversation_id, None)
