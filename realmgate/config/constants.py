"""
Application Constants

Centralized constants used throughout the application.
"""

from enum import Enum


class RealmSelector(str, Enum):
    """Which bindable realms in the security manager are initialized."""

    ALL = "all"  # Every bindable realm, in security manager order
    FIRST = "first"  # Only the first bindable realm encountered


DEFAULT_REALM_SELECTOR = RealmSelector.ALL


class LifecyclePhase(str, Enum):
    """Moments in the hosting application's lifecycle."""

    READY = "ready"
    TORNDOWN = "torndown"


# Attribute on the application's state where the security environment lives
SECURITY_ENVIRONMENT_STATE_KEY = "security_environment"
