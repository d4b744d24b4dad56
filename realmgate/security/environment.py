"""
Security Environment

The security manager that owns the active realms, the environment object
that publishes it on the hosting application, and the accessor the realm
loader uses to find it at lifecycle time.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from realmgate.config.constants import LifecyclePhase, SECURITY_ENVIRONMENT_STATE_KEY
from realmgate.core.exceptions import ConfigurationError


@runtime_checkable
class RealmSecurityManager(Protocol):
    """A security manager exposing its realms in a fixed order."""

    @property
    def realms(self) -> Sequence[Any]: ...


class SecurityManager:
    """Ordered holder of the application's realms."""

    def __init__(self, realms: Iterable[Any] = ()) -> None:
        self._realms: tuple[Any, ...] = tuple(realms)

    def __repr__(self) -> str:
        return f"SecurityManager(realms={list(self._realms)!r})"

    @property
    def realms(self) -> tuple[Any, ...]:
        return self._realms

    def set_realms(self, realms: Iterable[Any]) -> None:
        """Replace the realm collection."""
        self._realms = tuple(realms)


@dataclass
class SecurityEnvironment:
    """What the hosting application publishes for security components."""

    security_manager: Any


@dataclass(frozen=True)
class LifecycleEvent:
    """Notification that the application environment is ready or torn down.

    Attributes:
        app: Environment access point (FastAPI / Starlette application)
        phase: Which lifecycle moment this event marks
    """

    app: Any
    phase: LifecyclePhase


def register_security_environment(app: Any, environment: SecurityEnvironment) -> None:
    """Publish the security environment on the application's state."""
    setattr(app.state, SECURITY_ENVIRONMENT_STATE_KEY, environment)


def get_security_environment(app: Any) -> SecurityEnvironment:
    """Get the security environment registered on the application.

    Raises:
        ConfigurationError: If the application has no security environment
    """
    state = getattr(app, "state", None)
    environment = getattr(state, SECURITY_ENVIRONMENT_STATE_KEY, None)
    if environment is None:
        raise ConfigurationError(
            "No security environment is registered on the application",
            details={"state_key": SECURITY_ENVIRONMENT_STATE_KEY},
        )
    return environment


def get_security_manager(app: Any) -> RealmSecurityManager:
    """Get the active security manager from the application.

    Args:
        app: Environment access point carried by the lifecycle event

    Returns:
        Security manager exposing an ordered ``realms`` collection

    Raises:
        ConfigurationError: If no environment or security manager is
            registered, or the manager has no realm collection
    """
    environment = get_security_environment(app)
    manager = getattr(environment, "security_manager", None)
    if manager is None:
        raise ConfigurationError("The security environment has no security manager")

    realms = getattr(manager, "realms", None)
    if realms is None or isinstance(realms, (str, bytes)) or not isinstance(realms, Iterable):
        raise ConfigurationError(
            "The security manager does not expose a realm collection",
            details={"security_manager_type": type(manager).__name__},
        )
    return manager
