"""
Conversation orchestration for the Calendar Assistant.

The orchestrator parses each inbound message into a command, runs it against
the session services and returns the replies to send.

Usage:
    from src.orchestrator import ConversationController

    controller = ConversationController(state, directory, proposals,
                                        mutation, auth_service, gateway)
    replies = await controller.handle_text(chat_id, "lunch tomorrow at noon")
    replies = await controller.handle_action(chat_id, "confirm")
"""

from src.orchestrator.commands import Command, parse_command
from src.orchestrator.controller import ConversationController
from src.orchestrator.replies import Button, Reply

__all__ = [
    "Button",
    "Command",
    "ConversationController",
    "Reply",
    "parse_command",
]
