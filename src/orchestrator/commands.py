"""
Command parsing for inbound chat text.

Every message is parsed exactly once into one of the command variants below.
The command word is the first whitespace-separated token with any
"@botname" suffix removed; matching is exact and case-sensitive, so
"/editing" is an unknown command rather than an edit.
"""

from dataclasses import dataclass
from typing import Union

COMMAND_MARKER = "/"

DISABLE_USAGE = "Invalid format. Please use: /disable <account_id> <calendar_id>"
ENABLE_USAGE = "Invalid format. Please use: /enable <account_id> <calendar_id>"
INVALID_ACCOUNT_ID = "Invalid account id provided."
EMPTY_EDIT = "Please provide the update changes after the /edit command."


@dataclass(frozen=True)
class StartCommand:
    pass


@dataclass(frozen=True)
class AuthCommand:
    pass


@dataclass(frozen=True)
class DisableCommand:
    account_id: int
    calendar: str


@dataclass(frozen=True)
class EnableCommand:
    account_id: int
    calendar: str


@dataclass(frozen=True)
class CalendarsCommand:
    enabled_only: bool = False


@dataclass(frozen=True)
class ConfirmCommand:
    pass


@dataclass(frozen=True)
class EditCommand:
    text: str


@dataclass(frozen=True)
class ClearCommand:
    pass


@dataclass(frozen=True)
class UnknownCommand:
    name: str


@dataclass(frozen=True)
class InvalidUsage:
    """A known command with bad arguments; message is the reply."""

    message: str


@dataclass(frozen=True)
class FreeText:
    text: str


Command = Union[
    StartCommand,
    AuthCommand,
    DisableCommand,
    EnableCommand,
    CalendarsCommand,
    ConfirmCommand,
    EditCommand,
    ClearCommand,
    UnknownCommand,
    InvalidUsage,
    FreeText,
]


def _split_command(text: str) -> tuple[str, str]:
    """Return (command word without @botname, remaining argument text)."""
    parts = text.split(maxsplit=1)
    head = parts[0]
    args = parts[1].strip() if len(parts) > 1 else ""
    name = head.split("@", 1)[0]
    return name, args


def _parse_toggle(args: str, usage: str, variant) -> Command:
    parts = args.split()
    if len(parts) < 2:
        return InvalidUsage(usage)
    try:
        account_id = int(parts[0])
    except ValueError:
        return InvalidUsage(INVALID_ACCOUNT_ID)
    return variant(account_id=account_id, calendar=parts[1])


def parse_command(text: str) -> Command:
    """
    Parse inbound text into a command variant.

    Text that does not start with "/" is FreeText.

    Examples:
        >>> parse_command("/disable 0 2")
        DisableCommand(account_id=0, calendar='2')
        >>> parse_command("/calendars@my_bot enabled")
        CalendarsCommand(enabled_only=True)
        >>> parse_command("lunch tomorrow at noon")
        FreeText(text='lunch tomorrow at noon')
    """
    stripped = text.strip()
    if not stripped.startswith(COMMAND_MARKER):
        return FreeText(text=text)

    name, args = _split_command(stripped)

    if name == "/start":
        return StartCommand()
    if name == "/auth":
        return AuthCommand()
    if name == "/disable":
        return _parse_toggle(args, DISABLE_USAGE, DisableCommand)
    if name == "/enable":
        return _parse_toggle(args, ENABLE_USAGE, EnableCommand)
    if name == "/calendars":
        return CalendarsCommand(enabled_only=args == "enabled")
    if name == "/confirm":
        return ConfirmCommand()
    if name == "/edit":
        if not args:
            return InvalidUsage(EMPTY_EDIT)
        return EditCommand(text=args)
    if name == "/clear":
        return ClearCommand()

    return UnknownCommand(name=name)
