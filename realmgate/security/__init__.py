"""Realm loading: bind the database handle to security realms."""

from realmgate.config.constants import RealmSelector
from realmgate.security.environment import (
    LifecycleEvent,
    RealmSecurityManager,
    SecurityEnvironment,
    SecurityManager,
    get_security_manager,
    register_security_environment,
)
from realmgate.security.lifespan import realm_lifespan
from realmgate.security.loader import RealmLoader
from realmgate.security.realm import BindableRealm, DatabaseRealm
from realmgate.security.selector import is_bindable, select_realms

__all__ = [
    "BindableRealm",
    "DatabaseRealm",
    "LifecycleEvent",
    "RealmLoader",
    "RealmSecurityManager",
    "RealmSelector",
    "SecurityEnvironment",
    "SecurityManager",
    "get_security_manager",
    "is_bindable",
    "realm_lifespan",
    "register_security_environment",
    "select_realms",
]
