"""
OAuth token storage model.

One row per conversation and provider. Clearing a conversation deletes the
row, so the next /auth starts a fresh authorization.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import BaseModel

REFRESH_BUFFER = timedelta(minutes=5)


class UserToken(BaseModel):
    """
    OAuth tokens granted for a conversation.

    Attributes:
        conversation_id: Chat the tokens belong to
        provider: OAuth provider (currently only 'google')
        email: Account email reported by the provider
        access_token: Current access token
        refresh_token: Refresh token for obtaining new access tokens
        token_expiry: When the access token expires
        scopes: OAuth scopes granted (space-separated)
    """

    __tablename__ = "user_tokens"

    conversation_id: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        index=True,
        doc="Chat id of the conversation that authorized access"
    )

    provider: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="google",
        doc="OAuth provider (google)"
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        doc="Account email from OAuth provider"
    )

    access_token: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        doc="OAuth access token"
    )

    refresh_token: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="OAuth refresh token"
    )

    token_expiry: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="When the access token expires"
    )

    scopes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        doc="OAuth scopes granted (space-separated)"
    )

    __table_args__ = (
        Index(
            "ix_user_tokens_conversation_provider",
            "conversation_id",
            "provider",
            unique=True,
        ),
    )

    @property
    def scope_list(self) -> list[str]:
        return self.scopes.split(" ") if self.scopes else []

    @property
    def needs_refresh(self) -> bool:
        """True if the token is expired or expires within five minutes."""
        if self.token_expiry is None:
            return False
        expiry = self.token_expiry
        # SQLite drops tzinfo on read
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)
        return datetime.now(timezone.utc) >= expiry - REFRESH_BUFFER

    def __repr__(self) -> str:
        return (
            f"<UserToken(conversation_id={self.conversation_id}, "
            f"provider={self.provider}, email={self.email})>"
        )
