"""Prompt templates for Calendar Assistant."""

from src.agents.prompts.extraction_prompts import (
    EXTRACTION_SYSTEM_PROMPT,
    build_edit_instruction,
    build_extraction_system_prompt,
)

__all__ = [
    "EXTRACTION_SYSTEM_PROMPT",
    "build_edit_instruction",
    "build_extraction_system_prompt",
]
