"""
Process-wide session state for the calendar assistant.

Holds, per conversation:
- connected accounts and their calendar snapshots
- disabled calendars per account
- the pending proposal
- whether an OAuth flow has been started

Accounts and disabled calendars are persisted to a JSON snapshot that is
loaded once at startup and rewritten wholesale after every mutating command.
Proposals and pending-auth markers live in memory only.

Snapshot layout:
    {
      "<conversation_id>": {
        "accounts": [{"accountId": 0, "email": "...", "calendars": [...]}],
        "disabledCalendars": {"0": ["calendar-id", ...]}
      }
    }
"""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from src.agents.state import Account, PendingProposal

logger = logging.getLogger(__name__)


@dataclass
class PersistResult:
    """Outcome of writing the snapshot. Failures never fail the command."""

    ok: bool
    error: Optional[Exception] = None


class SessionState:
    """
    In-memory session store with an optional JSON snapshot.

    Created empty, hydrated with load(), and only accessed through the
    calendar directory and proposal store.
    """

    def __init__(self, snapshot_path: str | Path | None = None):
        self._snapshot_path = Path(snapshot_path) if snapshot_path else None
        self.accounts: dict[int, list[Account]] = {}
        self.disabled: dict[int, dict[int, set[str]]] = {}
        self.proposals: dict[int, PendingProposal] = {}
        self.pending_auth: set[int] = set()

    @property
    def snapshot_path(self) -> Optional[Path]:
        return self._snapshot_path

    # ------------------------------------------------------------------
    # Snapshot serialization
    # ------------------------------------------------------------------

    def to_snapshot(self) -> dict:
        """Serialize accounts and disabled calendars to the snapshot layout."""
        snapshot = {}
        for conversation_id, accounts in self.accounts.items():
            disabled = self.disabled.get(conversation_id, {})
            snapshot[str(conversation_id)] = {
                "accounts": [
                    account.model_dump(by_alias=True, exclude_none=True)
                    for account in accounts
                ],
                "disabledCalendars": {
                    str(account_id): sorted(calendar_ids)
                    for account_id, calendar_ids in disabled.items()
                },
            }
        return snapshot

    def restore(self, snapshot: dict) -> None:
        """Replace accounts and disabled calendars with a snapshot's content."""
        accounts: dict[int, list[Account]] = {}
        disabled: dict[int, dict[int, set[str]]] = {}

        for raw_id, chat_data in snapshot.items():
            conversation_id = int(raw_id)
            chat_accounts = [
                Account.model_validate(account_data)
                for account_data in chat_data.get("accounts") or []
            ]
            if len(chat_accounts) > 1:
                # Only one credential is stored per conversation
                logger.warning(
                    f"[{conversation_id}] Snapshot lists {len(chat_accounts)} accounts; "
                    f"keeping account {chat_accounts[0].account_id}"
                )
                chat_accounts = chat_accounts[:1]
            accounts[conversation_id] = chat_accounts
            disabled[conversation_id] = {
                int(account_id): set(ids) if isinstance(ids, list) else set()
                for account_id, ids in (chat_data.get("disabledCalendars") or {}).items()
            }

        self.accounts = accounts
        self.disabled = disabled

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> None:
        """
        Hydrate from the snapshot file.

        A missing file means empty state. An unreadable file is logged and
        also leaves the state empty.
        """
        if self._snapshot_path is None or not self._snapshot_path.exists():
            logger.info("No session snapshot found, starting with empty state")
            return

        try:
            data = json.loads(self._snapshot_path.read_text(encoding="utf-8"))
            self.restore(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Failed to load session snapshot {self._snapshot_path}: {e}")
            return

        logger.info(
            f"Loaded session snapshot with {len(self.accounts)} conversations"
        )

    def persist(self) -> PersistResult:
        """
        Rewrite the snapshot file with the current state.

        Returns a PersistResult; errors are logged here and must not change
        the outcome of the command that triggered the write.
        """
        if self._snapshot_path is None:
            return PersistResult(ok=True)

        try:
            self._snapshot_path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self._snapshot_path.with_suffix(self._snapshot_path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(self.to_snapshot(), indent=2), encoding="utf-8")
            os.replace(tmp_path, self._snapshot_path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save session snapshot: {e}")
            return PersistResult(ok=False, error=e)

        return PersistResult(ok=True)
