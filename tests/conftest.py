"""
Pytest Fixtures

Shared realms, applications and database handles for realm loader tests.

Usage:
    pytest tests/ -v

The database handle is a real SQLAlchemy session factory over in-memory
SQLite (aiosqlite), so no external services are needed.
"""

# pylint: disable=redefined-outer-name

from typing import Any, AsyncGenerator
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from realmgate.security.environment import (
    SecurityEnvironment,
    SecurityManager,
    register_security_environment,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# =============================================================================
# REALM DOUBLES
# =============================================================================


class RecordingRealm:
    """Bindable realm that records every bind/unbind into a shared journal."""

    def __init__(self, name: str, journal: list[tuple[str, str, Any]]) -> None:
        self._name = name
        self.journal = journal
        self.handle: Any = None

    @property
    def name(self) -> str:
        return self._name

    def bind(self, handle: Any) -> None:
        self.journal.append(("bind", self._name, handle))
        self.handle = handle

    def unbind(self, handle: Any) -> None:
        self.journal.append(("unbind", self._name, handle))
        self.handle = None


class PlainRealm:
    """Realm without the bind/unbind capability."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.touched = False

    def authenticate(self, token: str) -> bool:
        self.touched = True
        return False


class FailingRealm(RecordingRealm):
    """Bindable realm whose bind and unbind raise."""

    def bind(self, handle: Any) -> None:
        self.journal.append(("bind", self._name, handle))
        raise RuntimeError(f"{self._name} cannot reach the user table")

    def unbind(self, handle: Any) -> None:
        self.journal.append(("unbind", self._name, handle))
        raise RuntimeError(f"{self._name} failed to close its DAOs")


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def journal() -> list[tuple[str, str, Any]]:
    """Ordered record of realm calls."""
    return []


@pytest.fixture
def handle() -> object:
    """Opaque stand-in for a database handle."""
    return object()


@pytest.fixture
def mock_logger() -> MagicMock:
    """Injected logger that records calls instead of printing."""
    return MagicMock()


@pytest.fixture
def recording_realm(journal):
    """Factory for bindable realms sharing the journal."""

    def _make(name: str) -> RecordingRealm:
        return RecordingRealm(name, journal)

    return _make


@pytest.fixture
def failing_realm(journal):
    """Factory for bindable realms that fail to bind and unbind."""

    def _make(name: str) -> FailingRealm:
        return FailingRealm(name, journal)

    return _make


@pytest.fixture
def plain_realm():
    """Factory for realms without the bind capability."""
    return PlainRealm


@pytest.fixture
def mixed_realms(journal) -> list[Any]:
    """R1 (bindable), R2 (not bindable), R3 (bindable)."""
    return [
        RecordingRealm("R1", journal),
        PlainRealm("R2"),
        RecordingRealm("R3", journal),
    ]


@pytest.fixture
def make_app():
    """Build an application with a security manager holding the given realms."""

    def _make(realms=()) -> FastAPI:
        application = FastAPI()
        register_security_environment(
            application, SecurityEnvironment(SecurityManager(realms))
        )
        return application

    return _make


@pytest_asyncio.fixture
async def sessionmaker() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Real session factory over in-memory SQLite."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        echo=False,
    )
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()
