"""
Pytest configuration and fixtures for Calendar Assistant tests.

Provides session state, a calendar directory with a connected account,
candidate event factories and an in-memory token database.
"""

from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from src.agents.state import CalendarRef, CandidateEvent
from src.models.base import Base
from src.services.calendar_directory import CalendarDirectory
from src.services.session_state import SessionState

CHAT_ID = 4242


@pytest.fixture
def chat_id() -> int:
    return CHAT_ID


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "authCache.json"


@pytest.fixture
def session_state(snapshot_path: Path) -> SessionState:
    """Empty session state backed by a temporary snapshot file."""
    return SessionState(snapshot_path)


@pytest.fixture
def directory(session_state: SessionState) -> CalendarDirectory:
    return CalendarDirectory(session_state)


@pytest.fixture
def sample_calendars() -> list[CalendarRef]:
    return [
        CalendarRef(id="primary", display_name="Personal"),
        CalendarRef(id="work", display_name="Work", timezone="Europe/Berlin"),
    ]


@pytest.fixture
def connected_directory(
    directory: CalendarDirectory,
    sample_calendars: list[CalendarRef],
    chat_id: int,
) -> CalendarDirectory:
    """Directory with account 0 holding the sample calendars."""
    directory.store_calendars(chat_id, sample_calendars, email="sam@example.com")
    return directory


@pytest.fixture
def make_event():
    """Factory for candidate events."""

    def _make_event(
        title: str = "Lunch",
        calendar_id: str = "primary",
        account_id: int | None = 0,
        **overrides,
    ) -> CandidateEvent:
        data = {
            "title": title,
            "description": f"{title} description",
            "start_time": "2024-06-11T12:00:00Z",
            "end_time": "2024-06-11T13:00:00Z",
            "calendar_id": calendar_id,
            "account_id": account_id,
        }
        data.update(overrides)
        return CandidateEvent(**data)

    return _make_event


@pytest_asyncio.fixture
async def token_session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """
    Session factory bound to a fresh in-memory SQLite database.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    import src.models.tokens  # noqa: F401  registers UserToken

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        yield factory
    finally:
        await engine.dispose()
