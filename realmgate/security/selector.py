"""
Realm Selection

Picks which realms of a security manager take part in realm loading.
"""

from collections.abc import Iterable
from typing import Any

from realmgate.config.constants import RealmSelector
from realmgate.core.exceptions import InvalidArgumentError
from realmgate.security.realm import BindableRealm


def is_bindable(realm: Any) -> bool:
    """Check whether a realm can accept a database handle."""
    return isinstance(realm, BindableRealm)


def select_realms(realms: Iterable[Any], selector: RealmSelector) -> list[BindableRealm]:
    """Filter realms to the bindable ones chosen by the selector.

    Order is preserved; the input is not modified.

    Args:
        realms: Realms in security manager order
        selector: Selection policy

    Returns:
        Selected bindable realms, possibly empty

    Raises:
        InvalidArgumentError: If the selector has no selection rule
    """
    bindable = (realm for realm in realms if is_bindable(realm))

    if selector == RealmSelector.ALL:
        return list(bindable)
    if selector == RealmSelector.FIRST:
        first = next(bindable, None)
        return [] if first is None else [first]

    raise InvalidArgumentError(
        f"No selection rule for realm selector {selector!r}",
        argument="selector",
    )
