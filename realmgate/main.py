"""
realmgate Application Entry Point

FastAPI application whose security realms receive the database handle once
the application is up and release it before the database is closed.

Startup order:
- Database engine and session factory
- Security environment with the configured realms
- Realm loader binds the session factory to the selected realms

Shutdown runs the same steps in reverse.
"""

from collections.abc import AsyncGenerator, Iterable
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI

from realmgate import __version__
from realmgate.config.settings import settings
from realmgate.core.exceptions import ConfigurationError
from realmgate.db.session import close_db, init_db
from realmgate.security.environment import (
    SecurityEnvironment,
    SecurityManager,
    get_security_manager,
    register_security_environment,
)
from realmgate.security.lifespan import realm_lifespan
from realmgate.security.loader import RealmLoader
from realmgate.security.selector import is_bindable


def create_application(
    realms: Iterable[Any] = (),
    database_url: Optional[str] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        realms: Realms for the security manager, in evaluation order
        database_url: Override for settings.DATABASE_URL
    """
    configured_realms = tuple(realms)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan events."""
        # Startup
        sessionmaker = await init_db(database_url)
        try:
            register_security_environment(
                app, SecurityEnvironment(SecurityManager(configured_realms))
            )
            loader = RealmLoader(sessionmaker, settings.REALM_SELECTOR)
            app.state.realm_loader = loader
            async with realm_lifespan(loader)(app):
                yield
        finally:
            # Shutdown
            await close_db()

    application = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Security realms backed by a shared database handle.\n\n"
            "The handle is bound to the configured realms on startup and "
            "released on shutdown."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    @application.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Health check with realm binding status."""
        try:
            manager = get_security_manager(application)
        except ConfigurationError as e:
            return {
                "status": "degraded",
                "service": settings.APP_NAME,
                "version": __version__,
                "realms": [],
                "error": e.to_dict()["error"],
            }

        loader = getattr(application.state, "realm_loader", None)
        realm_status = []
        for realm in manager.realms:
            bindable = is_bindable(realm)
            realm_status.append(
                {
                    "name": realm.name if bindable else type(realm).__name__,
                    "bindable": bindable,
                    "bound": getattr(realm, "is_bound", None),
                }
            )
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": __version__,
            "environment": settings.APP_ENV,
            "realm_selector": loader.selector.value if loader else None,
            "realms": realm_status,
        }

    return application


app = create_application()
