"""
Settings Tests

Unit tests for loading realm settings from the environment.
"""

import pytest
from pydantic import ValidationError

from realmgate.config.constants import RealmSelector
from realmgate.config.settings import Settings


class TestRealmSelectorSetting:
    """Tests for REALM_SELECTOR."""

    def test_unset_means_loader_default(self, monkeypatch) -> None:
        """Without REALM_SELECTOR the loader applies its own default."""
        monkeypatch.delenv("REALM_SELECTOR", raising=False)
        assert Settings(_env_file=None).REALM_SELECTOR is None

    def test_parsed_from_environment(self, monkeypatch) -> None:
        """REALM_SELECTOR=first becomes RealmSelector.FIRST."""
        monkeypatch.setenv("REALM_SELECTOR", "first")
        assert Settings(_env_file=None).REALM_SELECTOR is RealmSelector.FIRST

    def test_unknown_value_rejected_at_load(self, monkeypatch) -> None:
        """A bad selector fails when settings load, not at startup."""
        monkeypatch.setenv("REALM_SELECTOR", "named")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
