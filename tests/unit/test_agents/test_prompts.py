"""Unit tests for prompt templates."""

from datetime import date

from src.agents.prompts import build_edit_instruction, build_extraction_system_prompt


class TestExtractionSystemPrompt:
    """Test extraction prompt construction."""

    def test_includes_date_and_weekday(self):
        prompt = build_extraction_system_prompt(
            today=date(2024, 6, 10),
            calendars="Account 0:\n- Personal (ID: primary)",
        )

        assert "Current Date: 2024-06-10 (Monday)" in prompt

    def test_includes_calendars_and_timezone(self):
        prompt = build_extraction_system_prompt(
            today=date(2024, 6, 10),
            calendars="Account 0:\n- Work (ID: work)\n",
            timezone="Europe/Berlin",
        )

        assert "Account 0:\n- Work (ID: work)\n\nWhen extracting" in prompt
        assert "assume the default timezone: Europe/Berlin" in prompt
        assert 'default to "primary"' in prompt

    def test_empty_calendars(self):
        prompt = build_extraction_system_prompt(today=date(2024, 6, 10), calendars="")
        assert "No accounts connected." in prompt

    def test_previous_proposal_only_when_given(self):
        without = build_extraction_system_prompt(today=date(2024, 6, 10), calendars="x")
        with_prior = build_extraction_system_prompt(
            today=date(2024, 6, 10), calendars="x", previous_proposal="[1]"
        )

        assert "Previous JSON proposal" not in without
        assert with_prior.endswith("Previous JSON proposal: [1]\n")


class TestEditInstruction:
    """Test edit instruction construction."""

    def test_first_edit(self):
        assert build_edit_instruction("lunch tomorrow", "make it 1pm", []) == (
            "Original description: lunch tomorrow\n"
            "User requested changes:\n"
            "Latest edit: make it 1pm\n"
        )

    def test_earlier_edits_listed(self):
        instruction = build_edit_instruction("lunch", "add Sam", ["make it 1pm", "at the cafe"])

        assert instruction.endswith(
            "Latest edit: add Sam\n"
            "Previously requested changes: make it 1pm\nat the cafe\n"
        )
