"""Core utilities module."""

from realmgate.core.exceptions import (
    RealmGateException,
    InvalidArgumentError,
    ConfigurationError,
    RealmLifecycleError,
    RealmBindError,
    RealmUnbindError,
    RealmNotBoundError,
)

__all__ = [
    "RealmGateException",
    "InvalidArgumentError",
    "ConfigurationError",
    "RealmLifecycleError",
    "RealmBindError",
    "RealmUnbindError",
    "RealmNotBoundError",
]
