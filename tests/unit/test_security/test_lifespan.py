"""
Lifespan Integration Tests

Unit tests for driving a RealmLoader from an application lifespan.
"""

import pytest

from realmgate.core.exceptions import RealmBindError
from realmgate.security.lifespan import realm_lifespan
from realmgate.security.loader import RealmLoader


class TestRealmLifespan:
    """Tests for realm_lifespan."""

    @pytest.mark.asyncio
    async def test_binds_on_enter_and_unbinds_on_exit(
        self, make_app, mixed_realms, journal, handle
    ) -> None:
        """Realms are bound inside the lifespan and unbound after it."""
        app = make_app(mixed_realms)
        lifespan = realm_lifespan(RealmLoader(handle))

        async with lifespan(app):
            assert [(op, name) for op, name, _ in journal] == [
                ("bind", "R1"),
                ("bind", "R3"),
            ]

        assert [(op, name) for op, name, _ in journal[2:]] == [
            ("unbind", "R1"),
            ("unbind", "R3"),
        ]

    @pytest.mark.asyncio
    async def test_unbinds_when_body_raises(
        self, make_app, mixed_realms, journal, handle
    ) -> None:
        """Teardown still runs when the application fails while serving."""
        app = make_app(mixed_realms)
        lifespan = realm_lifespan(RealmLoader(handle))

        with pytest.raises(KeyError):
            async with lifespan(app):
                raise KeyError("boom")

        assert [op for op, _, _ in journal] == ["bind", "bind", "unbind", "unbind"]

    @pytest.mark.asyncio
    async def test_bind_failure_aborts_startup(
        self, make_app, failing_realm, recording_realm, journal, handle
    ) -> None:
        """A failing bind propagates and nothing is unbound."""
        app = make_app([failing_realm("BAD"), recording_realm("R2")])
        lifespan = realm_lifespan(RealmLoader(handle))
        entered = False

        with pytest.raises(RealmBindError):
            async with lifespan(app):
                entered = True

        assert entered is False
        assert journal == [("bind", "BAD", handle)]
