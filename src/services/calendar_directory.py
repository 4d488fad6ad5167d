"""
Calendar directory: connected accounts, their calendars, and which of those
calendars are disabled.

Calendars are addressed either by raw id (e.g. "primary") or by the 1-based
index shown in the rendered listing.
"""

import logging
from typing import Optional, Sequence

from src.agents.state import Account, CalendarRef
from src.services.exceptions import (
    InvalidIndexError,
    NotAuthenticatedError,
    UnknownAccountError,
)
from src.services.session_state import SessionState

logger = logging.getLogger(__name__)


def _parse_index(identifier: str) -> Optional[int]:
    try:
        return int(identifier.strip())
    except ValueError:
        return None


class CalendarDirectory:
    """Lookup and mutation of per-conversation accounts and disabled calendars."""

    def __init__(self, state: SessionState):
        self._state = state

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def accounts(self, conversation_id: int) -> list[Account]:
        """Connected accounts in the order they were added (empty if none)."""
        return list(self._state.accounts.get(conversation_id, []))

    def is_authenticated(self, conversation_id: int) -> bool:
        return bool(self._state.accounts.get(conversation_id))

    def get_account(self, conversation_id: int, account_id: int) -> Optional[Account]:
        for account in self._state.accounts.get(conversation_id, []):
            if account.account_id == account_id:
                return account
        return None

    def require_account(self, conversation_id: int, account_id: int) -> Account:
        """
        Get an account or fail loudly.

        Raises:
            NotAuthenticatedError: The conversation has no accounts
            UnknownAccountError: No account with this id
        """
        if not self.is_authenticated(conversation_id):
            raise NotAuthenticatedError("No authenticated accounts found.")
        account = self.get_account(conversation_id, account_id)
        if account is None:
            raise UnknownAccountError(f"Account {account_id} not found.")
        return account

    def store_calendars(
        self,
        conversation_id: int,
        calendars: Sequence[CalendarRef],
        email: Optional[str] = None,
    ) -> Account:
        """
        Record the calendars fetched after authentication.

        A conversation holds one Google credential, so it has a single
        account with id 0. Re-authorizing the same account (or one whose
        email is unknown) refreshes its calendars in place. Authorizing a
        different account replaces account 0 and drops its disabled set.
        """
        accounts = self._state.accounts.get(conversation_id, [])
        current = accounts[0] if accounts else None

        if current is not None and (
            not email or not current.email or current.email == email
        ):
            updated = current.model_copy(
                update={"calendars": list(calendars), "email": email or current.email}
            )
            self._state.accounts[conversation_id] = [updated]
            logger.info(
                f"[{conversation_id}] Refreshed {len(calendars)} calendars "
                f"for account {updated.account_id}"
            )
            return updated

        if current is not None:
            logger.info(
                f"[{conversation_id}] Replacing account {current.email} with {email}"
            )
            self._state.disabled.pop(conversation_id, None)

        account = Account(account_id=0, email=email, calendars=list(calendars))
        self._state.accounts[conversation_id] = [account]
        logger.info(
            f"[{conversation_id}] Connected account 0 with {len(calendars)} calendars"
        )
        return account

    def clear(self, conversation_id: int) -> None:
        """Forget every account and disabled calendar of a conversation."""
        self._state.accounts.pop(conversation_id, None)
        self._state.disabled.pop(conversation_id, None)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve_calendar_identifier(
        self,
        conversation_id: int,
        account_id: int,
        identifier: str,
        strict: bool = True,
    ) -> str:
        """
        Resolve a user-supplied calendar identifier to a calendar id.

        Integer identifiers are 1-based indexes into the account's calendar
        list. Anything else is returned unchanged.

        Strict mode raises on a bad index or account; lenient mode returns the
        identifier unchanged instead.

        Raises:
            NotAuthenticatedError: Strict mode, no accounts connected
            UnknownAccountError: Strict mode, account id not connected
            InvalidIndexError: Strict mode, index outside [1, len]
        """
        index = _parse_index(identifier)
        if index is None:
            return identifier

        accounts = self._state.accounts.get(conversation_id)
        if not accounts:
            if strict:
                raise NotAuthenticatedError("No authenticated accounts found.")
            return identifier

        account = self.get_account(conversation_id, account_id)
        if account is None:
            if strict:
                raise UnknownAccountError(f"Account {account_id} not found.")
            return identifier

        calendar_count = len(account.calendars)
        if not 1 <= index <= calendar_count:
            if strict:
                raise InvalidIndexError(
                    "Invalid calendar index. Please provide a number between "
                    f"1 and {calendar_count}."
                )
            return identifier

        return account.calendars[index - 1].id

    # ------------------------------------------------------------------
    # Disabled calendars
    # ------------------------------------------------------------------

    def set_disabled(
        self,
        conversation_id: int,
        account_id: int,
        calendar_id: str,
        disabled: bool,
    ) -> bool:
        """
        Mark or unmark a calendar as disabled.

        Returns:
            True if the disabled set changed
        """
        per_account = self._state.disabled.setdefault(conversation_id, {})
        calendar_ids = per_account.setdefault(account_id, set())

        if disabled:
            if calendar_id in calendar_ids:
                return False
            calendar_ids.add(calendar_id)
            return True

        if calendar_id not in calendar_ids:
            return False
        calendar_ids.discard(calendar_id)
        return True

    def is_disabled(self, conversation_id: int, account_id: int, calendar_id: str) -> bool:
        per_account = self._state.disabled.get(conversation_id, {})
        return calendar_id in per_account.get(account_id, set())

    def enabled_accounts(self, conversation_id: int) -> list[Account]:
        """Copies of the accounts with disabled calendars left out."""
        return [
            account.model_copy(
                update={
                    "calendars": [
                        cal for cal in account.calendars
                        if not self.is_disabled(conversation_id, account.account_id, cal.id)
                    ]
                }
            )
            for account in self.accounts(conversation_id)
        ]

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render_directory(
        self,
        accounts: Sequence[Account],
        conversation_id: int,
        show_disabled_marker: bool,
        enabled_only: bool = False,
    ) -> str:
        """
        Render accounts and calendars as text.

        The index on each line is the one accepted by
        resolve_calendar_identifier, so it is kept even when disabled
        calendars are left out.
        """
        if not accounts:
            return "No accounts connected.\n"

        lines = []
        for account in accounts:
            lines.append(f"{account.label}:")
            if not account.calendars:
                lines.append("- No calendars found.")
                continue

            for index, calendar in enumerate(account.calendars, start=1):
                disabled = self.is_disabled(conversation_id, account.account_id, calendar.id)
                if enabled_only and disabled:
                    continue
                line = f"- {index}. {calendar.display_name} (ID: {calendar.id})"
                if show_disabled_marker and disabled:
                    line += " (Disabled)"
                lines.append(line)

        return "\n".join(lines) + "\n"
