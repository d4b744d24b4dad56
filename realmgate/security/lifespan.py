"""
Lifespan Integration

Drives a RealmLoader from a FastAPI / Starlette lifespan.

Usage:
    loader = RealmLoader(sessionmaker)
    app = FastAPI(lifespan=realm_lifespan(loader))

or nested inside an application's own lifespan:

    async with realm_lifespan(loader)(app):
        yield
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any

from realmgate.config.constants import LifecyclePhase
from realmgate.security.environment import LifecycleEvent
from realmgate.security.loader import RealmLoader


def realm_lifespan(
    loader: RealmLoader,
) -> Callable[[Any], AbstractAsyncContextManager[None]]:
    """Build a lifespan that binds realms on startup and unbinds on shutdown.

    Shutdown runs even if the application body raises. A failure while
    binding aborts startup and nothing is unbound.
    """

    @asynccontextmanager
    async def lifespan(app: Any) -> AsyncGenerator[None, None]:
        loader.on_environment_ready(LifecycleEvent(app=app, phase=LifecyclePhase.READY))
        try:
            yield
        finally:
            loader.on_environment_torndown(
                LifecycleEvent(app=app, phase=LifecyclePhase.TORNDOWN)
            )

    return lifespan
