"""
Base model definitions for SQLAlchemy.

Provides:
- Base declarative base
- BaseModel with an integer primary key and audit timestamps
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all models."""


class BaseModel(Base):
    """
    Base model with common fields for all entities.

    Provides:
    - id: Integer primary key
    - created_at: Timestamp of record creation (UTC)
    - updated_at: Timestamp of last update (UTC, auto-updates)
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Row identifier"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        doc="Timestamp of record creation (UTC)"
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
        doc="Timestamp of last update (UTC)"
    )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"
