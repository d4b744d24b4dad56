"""
Realm Loader

Hands the shared database handle to the security realms once the hosting
application's environment is ready, and asks them to release it when the
environment is torn down.

This has to run after the security environment is registered on the
application and while the application object is available, so it is driven
by the application's lifespan rather than by module import.
"""

from collections.abc import Callable
from typing import Any, Optional, Union

import structlog

from realmgate.config.constants import DEFAULT_REALM_SELECTOR, RealmSelector
from realmgate.core.exceptions import (
    InvalidArgumentError,
    RealmBindError,
    RealmLifecycleError,
    RealmUnbindError,
)
from realmgate.core.logging import clear_log_context, get_logger, log_context
from realmgate.security.environment import (
    LifecycleEvent,
    RealmSecurityManager,
    get_security_manager,
)
from realmgate.security.realm import BindableRealm
from realmgate.security.selector import select_realms

RealmStrategy = Callable[[BindableRealm, Any], None]
SecurityManagerAccessor = Callable[[Any], RealmSecurityManager]


def bind_with_handle(realm: BindableRealm, handle: Any) -> None:
    """Default bind strategy: give the realm the handle."""
    realm.bind(handle)


def unbind_with_handle(realm: BindableRealm, handle: Any) -> None:
    """Default unbind strategy: ask the realm to release the handle."""
    realm.unbind(handle)


def _resolve_selector(
    selector: Union[RealmSelector, str, None],
    logger: structlog.stdlib.BoundLogger,
) -> RealmSelector:
    if selector is None:
        logger.info(
            "No realm selector specified, using default",
            selector=DEFAULT_REALM_SELECTOR.value,
        )
        return DEFAULT_REALM_SELECTOR
    if isinstance(selector, RealmSelector):
        return selector
    if isinstance(selector, str):
        try:
            return RealmSelector(selector.strip().lower())
        except ValueError as e:
            raise InvalidArgumentError(
                f"Unknown realm selector '{selector}'",
                argument="selector",
                details={"allowed": [s.value for s in RealmSelector]},
            ) from e
    raise InvalidArgumentError(
        f"Realm selector must be a RealmSelector or string, got {type(selector).__name__}",
        argument="selector",
    )


class RealmLoader:
    """Binds a database handle to the realms of the active security manager.

    The loader keeps no record of which realms it bound: every lifecycle
    event re-reads the security manager and re-applies the selector. If the
    realm set changes between startup and shutdown, shutdown acts on the
    realms present at that time.

    Subclasses may override ``get_security_manager``, ``on_bind_realm`` and
    ``on_unbind_realm``; the same behaviour can be supplied as strategies to
    the constructor instead.
    """

    def __init__(
        self,
        resource_handle: Any,
        selector: Union[RealmSelector, str, None] = None,
        *,
        bind_strategy: Optional[RealmStrategy] = None,
        unbind_strategy: Optional[RealmStrategy] = None,
        security_manager_accessor: Optional[SecurityManagerAccessor] = None,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ) -> None:
        """Initialize the loader.

        Args:
            resource_handle: Database handle passed to every selected realm
            selector: Which bindable realms to use, defaults to ALL
            bind_strategy: Called as ``(realm, handle)`` to bind a realm
            unbind_strategy: Called as ``(realm, handle)`` to unbind a realm
            security_manager_accessor: Called with the application to find
                the security manager
            logger: Structured logger, defaults to the module logger

        Raises:
            InvalidArgumentError: If resource_handle is None or the
                selector is not recognised
        """
        if resource_handle is None:
            raise InvalidArgumentError(
                "resource_handle is a required argument",
                argument="resource_handle",
            )
        self._logger = logger or get_logger(__name__)
        self._resource_handle = resource_handle
        self._selector = _resolve_selector(selector, self._logger)
        self._bind_strategy = bind_strategy or bind_with_handle
        self._unbind_strategy = unbind_strategy or unbind_with_handle
        self._security_manager_accessor = security_manager_accessor or get_security_manager

    @property
    def resource_handle(self) -> Any:
        return self._resource_handle

    @property
    def selector(self) -> RealmSelector:
        return self._selector

    def get_resource_handle(self) -> Any:
        """Get the handle this loader distributes."""
        return self._resource_handle

    # -------------------------------------------------------------------------
    # Extension points
    # -------------------------------------------------------------------------

    def get_security_manager(self, app: Any) -> RealmSecurityManager:
        """Find the security manager holding the realms.

        Raises:
            ConfigurationError: If the application has no usable manager
        """
        return self._security_manager_accessor(app)

    def on_bind_realm(self, realm: BindableRealm) -> None:
        """Bind one realm. Overrides should normally call this implementation."""
        self._logger.debug("Initializing realm with database handle", realm=realm.name)
        self._bind_strategy(realm, self._resource_handle)

    def on_unbind_realm(self, realm: BindableRealm) -> None:
        """Unbind one realm. Overrides should normally call this implementation."""
        self._logger.debug("Releasing realm's database handle", realm=realm.name)
        self._unbind_strategy(realm, self._resource_handle)

    # -------------------------------------------------------------------------
    # Lifecycle entry points
    # -------------------------------------------------------------------------

    def on_environment_ready(self, event: LifecycleEvent) -> list[str]:
        """Bind the selected realms once the environment is available.

        Args:
            event: Lifecycle event carrying the application

        Returns:
            Names of the realms bound, in order

        Raises:
            ConfigurationError: If no security manager can be found
            RealmBindError: If a realm fails to bind; later realms are skipped
        """
        return self._process(
            event,
            action=self.on_bind_realm,
            error_class=RealmBindError,
            verb="bind",
        )

    def on_environment_torndown(self, event: LifecycleEvent) -> list[str]:
        """Unbind the selected realms when the environment goes away.

        Args:
            event: Lifecycle event carrying the application

        Returns:
            Names of the realms unbound, in order

        Raises:
            ConfigurationError: If no security manager can be found
            RealmUnbindError: If a realm fails to unbind; later realms are skipped
        """
        return self._process(
            event,
            action=self.on_unbind_realm,
            error_class=RealmUnbindError,
            verb="unbind",
        )

    def _process(
        self,
        event: LifecycleEvent,
        action: Callable[[BindableRealm], None],
        error_class: type[RealmLifecycleError],
        verb: str,
    ) -> list[str]:
        manager = self.get_security_manager(event.app)
        realms = select_realms(manager.realms, self._selector)

        log_context(lifecycle_phase=event.phase.value, realm_selector=self._selector.value)
        try:
            self._logger.info(f"Starting realm {verb}", total_realms=len(realms))

            processed: list[str] = []
            for idx, realm in enumerate(realms):
                try:
                    action(realm)
                except RealmLifecycleError:
                    raise
                except Exception as e:
                    self._logger.error(
                        f"Realm {verb} failed",
                        realm=realm.name,
                        error=str(e),
                        realms_processed=idx,
                        realms_remaining=len(realms) - idx - 1,
                    )
                    raise error_class(realm.name, original_error=e) from e
                processed.append(realm.name)

            self._logger.info(f"Realm {verb} complete", realms=processed)
            return processed
        finally:
            clear_log_context("lifecycle_phase", "realm_selector")
