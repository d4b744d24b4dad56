"""
Bindable Realms

The capability a security realm needs in order to be handed the shared
database handle, plus a base class for realms that query the database.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Optional, Protocol, runtime_checkable

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from realmgate.core.exceptions import InvalidArgumentError, RealmNotBoundError
from realmgate.core.logging import get_logger


@runtime_checkable
class BindableRealm(Protocol):
    """A realm that can accept and release a database handle.

    Any object exposing ``name``, ``bind`` and ``unbind`` qualifies; realms
    without them are skipped by the realm loader.
    """

    @property
    def name(self) -> str:
        """Identifying name of the realm."""
        ...

    def bind(self, handle: Any) -> None:
        """Start using ``handle`` for database access."""
        ...

    def unbind(self, handle: Any) -> None:
        """Stop using ``handle`` and release anything built from it."""
        ...


class DatabaseRealm:
    """Base class for realms backed by a SQLAlchemy session factory.

    Subclasses look up users, roles and permissions through ``session()``
    and may override ``on_bind`` / ``on_unbind`` to build or tear down
    repositories that depend on the handle.
    """

    def __init__(
        self,
        name: str,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ) -> None:
        self._name = name
        self._sessionmaker: Optional[async_sessionmaker[AsyncSession]] = None
        self._logger = logger or get_logger(__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self._name!r}, bound={self.is_bound})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_bound(self) -> bool:
        return self._sessionmaker is not None

    @property
    def sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        """The bound session factory.

        Raises:
            RealmNotBoundError: If no handle has been bound yet
        """
        if self._sessionmaker is None:
            raise RealmNotBoundError(self._name)
        return self._sessionmaker

    def bind(self, handle: async_sessionmaker[AsyncSession]) -> None:
        """Accept the shared session factory.

        Binding again replaces the previous handle. If ``on_bind`` raises,
        the realm keeps whatever handle it held before the call.

        Raises:
            InvalidArgumentError: If handle is None
        """
        if handle is None:
            raise InvalidArgumentError(
                f"Cannot bind realm '{self._name}' to a null handle",
                argument="handle",
            )
        previous = self._sessionmaker
        self._sessionmaker = handle
        try:
            self.on_bind(handle)
        except Exception:
            self._sessionmaker = previous
            raise
        self._logger.debug("Realm bound to database handle", realm=self._name)

    def unbind(self, handle: async_sessionmaker[AsyncSession]) -> None:
        """Release the session factory if it is the one this realm holds."""
        if self._sessionmaker is None:
            self._logger.debug("Realm already unbound", realm=self._name)
            return
        if handle is not self._sessionmaker:
            self._logger.warning(
                "Ignoring unbind with a handle this realm does not hold",
                realm=self._name,
            )
            return
        self.on_unbind(handle)
        self._sessionmaker = None
        self._logger.debug("Realm released database handle", realm=self._name)

    def on_bind(self, handle: async_sessionmaker[AsyncSession]) -> None:
        """Hook called after the handle is stored."""

    def on_unbind(self, handle: async_sessionmaker[AsyncSession]) -> None:
        """Hook called before the handle is dropped."""

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Open a session from the bound factory.

        Raises:
            RealmNotBoundError: If no handle has been bound yet
        """
        async with self.sessionmaker() as session:
            yield session
