"""
Event extraction from free text.

Asks an LLM for structured candidate events and falls back through a
priority-ordered list of models until one returns a valid result.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Literal, Optional, Sequence

from langchain_core.messages import HumanMessage, SystemMessage

from src.agents.llm import get_llm
from src.agents.prompts import build_extraction_system_prompt
from src.agents.state import (
    DEFAULT_CALENDAR_ID,
    Account,
    CandidateEvent,
    ExtractionResult,
)
from src.config import get_settings
from src.services.exceptions import ExtractionFailedError

logger = logging.getLogger(__name__)


class MalformedExtractionError(Exception):
    """The model answered, but not with a valid ExtractionResult."""


@dataclass
class ExtractionOutcome:
    """Candidate events plus their JSON echo for prompt grounding."""

    events: list[CandidateEvent]
    json_proposal: str


@dataclass
class ModelFailure:
    """Why one model in the fallback list was skipped."""

    model: str
    kind: Literal["malformed", "transport"]
    error: Exception


def render_calendars_for_prompt(accounts: Sequence[Account]) -> str:
    """List each account's calendars with their ids for the system prompt."""
    if not accounts:
        return "No accounts connected."

    lines = []
    for account in accounts:
        lines.append(f"{account.label}:")
        if not account.calendars:
            lines.append("- No calendars found.")
        for calendar in account.calendars:
            lines.append(f"- {calendar.display_name} (ID: {calendar.id})")
    return "\n".join(lines)


def to_candidate_events(result: ExtractionResult) -> list[CandidateEvent]:
    """Map extracted events to candidate events, applying defaults."""
    return [
        CandidateEvent(
            title=event.title,
            description=event.description,
            start_time=event.start_time,
            end_time=event.end_time,
            calendar_id=event.calendar or DEFAULT_CALENDAR_ID,
            account_id=event.account_id,
            visibility="default",
            attendee_emails=[],
        )
        for event in result.events
    ]


def to_json_proposal(events: Sequence[CandidateEvent]) -> str:
    return json.dumps(
        [event.model_dump(exclude_none=True) for event in events],
        indent=2,
    )


class EventExtractor:
    """
    Extraction adapter.

    Usage:
        extractor = EventExtractor()
        outcome = await extractor.extract(
            "lunch tomorrow at noon",
            accounts=directory.enabled_accounts(chat_id),
            current_date=date.today(),
        )
    """

    def __init__(
        self,
        models: Optional[Sequence[str]] = None,
        timezone: Optional[str] = None,
        timeout: Optional[float] = None,
        llm_factory: Callable[..., Any] = get_llm,
    ):
        settings = get_settings()
        self.models = list(models or settings.extraction_models)
        self.timezone = timezone or settings.default_timezone
        self.timeout = timeout or settings.external_call_timeout
        self._llm_factory = llm_factory

    async def extract(
        self,
        free_text: str,
        accounts: Sequence[Account],
        current_date: date,
        prior_proposal_json: Optional[str] = None,
    ) -> ExtractionOutcome:
        """
        Extract candidate events from free text.

        Args:
            free_text: The user's description (or combined edit instruction)
            accounts: Accounts with their enabled calendars
            current_date: Date relative expressions are resolved against
            prior_proposal_json: Earlier proposal JSON, supplied during edits

        Returns:
            ExtractionOutcome with the mapped events and their JSON echo

        Raises:
            ExtractionFailedError: Every model failed
        """
        system_prompt = build_extraction_system_prompt(
            today=current_date,
            calendars=render_calendars_for_prompt(accounts),
            timezone=self.timezone,
            previous_proposal=prior_proposal_json,
        )
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=free_text),
        ]

        result = await self._extract_with_fallback(messages)
        events = to_candidate_events(result)

        logger.info(f"Extracted {len(events)} candidate events")
        return ExtractionOutcome(events=events, json_proposal=to_json_proposal(events))

    async def _extract_with_fallback(self, messages: list) -> ExtractionResult:
        """Try each model in order; the first valid structured result wins."""
        failures: list[ModelFailure] = []

        for model in self.models:
            try:
                return await self._invoke_model(model, messages)
            except MalformedExtractionError as e:
                failures.append(ModelFailure(model=model, kind="malformed", error=e))
                logger.warning(f"Model {model} returned malformed output: {e}")
            except asyncio.TimeoutError as e:
                failures.append(ModelFailure(model=model, kind="transport", error=e))
                logger.warning(f"Model {model} timed out after {self.timeout}s")
            except Exception as e:
                failures.append(ModelFailure(model=model, kind="transport", error=e))
                logger.error(f"Error with model {model}: {e}", exc_info=True)

        last_error = failures[-1].error if failures else None
        raise ExtractionFailedError(
            "All models failed to extract calendar events.",
            original_error=last_error,
        )

    async def _invoke_model(self, model: str, messages: list) -> ExtractionResult:
        llm = self._llm_factory(model=model, timeout=self.timeout)
        structured_llm = llm.with_structured_output(ExtractionResult, include_raw=True)

        response = await asyncio.wait_for(
            structured_llm.ainvoke(messages),
            timeout=self.timeout,
        )

        parsed = response.get("parsed")
        parsing_error = response.get("parsing_error")
        if parsing_error is not None:
            raise MalformedExtractionError(str(parsing_error))
        if not isinstance(parsed, ExtractionResult):
            raise MalformedExtractionError(
                f"Model {model} failed to use the extraction tool correctly"
            )
        return parsed
