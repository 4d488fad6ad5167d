"""Event extraction prompts."""

from datetime import date
from typing import Optional

EXTRACTION_SYSTEM_PROMPT = """You are an assistant that extracts calendar event details from natural language.
Current Date: {today} ({weekday})
Available accounts and calendars:
{calendars}

When extracting event information, follow these rules:
1. If the time zone is not specified, assume the default timezone: {timezone}
2. When a user proposes relative dates (e.g. next week on Wednesday), make sure your date math is correct (if today is Tuesday 18th, then next week on Wednesday is the 26th, 7 days would be Tuesday 25th + 1 for Wednesday 26th)
3. If the user indicates a time zone (can be an informal remark like 'in NYC time') then use the ISO notation where the times the user specifies are used directly (e.g. 2pm) in the ISO format, and the ISO timezone suffix aligns with what the user specifies
4. For the "calendar" field, if it cannot be inferred from the user query, default to "primary"
5. For the "calendar" field, other than "primary" you are ONLY allowed to choose calendar ID values listed under Available accounts and calendars
"""

PREVIOUS_PROPOSAL_SECTION = "\nPrevious JSON proposal: {proposal}\n"


def build_extraction_system_prompt(
    today: date,
    calendars: str,
    timezone: str = "UTC",
    previous_proposal: Optional[str] = None,
) -> str:
    """Build the system prompt for event extraction.

    Args:
        today: Current date used to resolve relative dates
        calendars: Rendered listing of the conversation's enabled calendars
        timezone: Default timezone (IANA name)
        previous_proposal: JSON of earlier proposals, included during edits

    Returns:
        Complete system prompt string
    """
    prompt = EXTRACTION_SYSTEM_PROMPT.format(
        today=today.isoformat(),
        weekday=today.strftime("%A"),
        calendars=calendars.rstrip("\n") or "No accounts connected.",
        timezone=timezone,
    )
    if previous_proposal:
        prompt += PREVIOUS_PROPOSAL_SECTION.format(proposal=previous_proposal)
    return prompt


def build_edit_instruction(
    original_text: str,
    latest_edit: str,
    previous_edits: list[str],
) -> str:
    """Combine the original description with every requested change, newest first."""
    instruction = (
        f"Original description: {original_text}\n"
        f"User requested changes:\n"
        f"Latest edit: {latest_edit}\n"
    )
    if previous_edits:
        instruction += "Previously requested changes: " + "\n".join(previous_edits) + "\n"
    return instruction
