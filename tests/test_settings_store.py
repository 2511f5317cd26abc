"""
Tests for the SQLite-backed settings store.
"""

import pytest
from typing import Dict
from unittest.mock import patch

from venturevoyage.models.idea import BusinessIdea
from venturevoyage.models.profile import UserProfile
from venturevoyage.utils.constants import SettingsKeys
from venturevoyage.utils.settings_store import SettingsStore


@pytest.fixture
def settings(tmp_path):
    """Fixture providing a SettingsStore on a temporary database."""
    store = SettingsStore(tmp_path / "settings.db")
    yield store
    store.close()


class TestPrimitiveValues:
    """Tests for the typed accessors."""

    def test_string(self, settings):
        """Test strings round-trip and missing keys read as None."""
        settings.save_string("name", "Ada")

        assert settings.get_string("name") == "Ada"
        assert settings.get_string("missing") is None

    def test_bool(self, settings):
        """Test booleans round-trip and missing keys read as False."""
        settings.save_bool("flag", True)

        assert settings.get_bool("flag") is True
        assert settings.get_bool("missing") is False

    def test_int(self, settings):
        """Test integers round-trip and a stored bool is not an int."""
        settings.save_int("count", 7)
        settings.save_bool("flag", True)

        assert settings.get_int("count") == 7
        assert settings.get_int("flag") == 0
        assert settings.get_int("missing") == 0

    def test_float(self, settings):
        """Test floats round-trip and integers widen to float."""
        settings.save_float("ratio", 0.25)
        settings.save_int("count", 3)

        assert settings.get_float("ratio") == 0.25
        assert settings.get_float("count") == 3.0
        assert settings.get_float("missing") == 0.0

    def test_wrong_type_reads_as_default(self, settings):
        """Test a string stored under a key read as bool gives the default."""
        settings.save_string("flag", "yes")

        assert settings.get_bool("flag") is False


class TestStructuredValues:
    """Tests for JSON-encoded records."""

    def test_model_round_trip(self, settings):
        """Test a pydantic model comes back when its type is supplied."""
        profile = UserProfile(id="u1", email="ada@example.com", skills=["Programming"])
        settings.save("profile", profile)

        assert settings.get("profile", UserProfile) == profile

    def test_decode_failure_returns_none(self, settings):
        """Test a value that does not match the expected type reads as None."""
        settings.save("profile", {"email": "no id"})

        with patch('venturevoyage.utils.settings_store.logger') as mock_logger:
            assert settings.get("profile", UserProfile) is None
        mock_logger.error.assert_called_once()

    def test_raw_dict(self, settings):
        """Test values read without a type come back as plain JSON data."""
        settings.save("data", {"a": [1, 2]})

        assert settings.get("data") == {"a": [1, 2]}
        assert settings.get("data", Dict[str, list]) == {"a": [1, 2]}

    def test_unencodable_value_is_skipped(self, settings):
        """Test a value that cannot be encoded is logged and not stored."""
        with patch('venturevoyage.utils.settings_store.logger') as mock_logger:
            settings.save("bad", object())

        assert not settings.exists("bad")
        mock_logger.error.assert_called_once()

    def test_remove_and_exists(self, settings):
        """Test remove deletes a key and is idempotent."""
        settings.save_string("key", "value")
        assert settings.exists("key")

        settings.remove("key")
        settings.remove("key")
        assert not settings.exists("key")

    def test_persists_across_connections(self, tmp_path):
        """Test values survive closing and reopening the database."""
        path = tmp_path / "nested" / "settings.db"
        with SettingsStore(path) as store:
            store.save_string("key", "value")

        with SettingsStore(path) as store:
            assert store.get_string("key") == "value"


class TestAppSettings:
    """Tests for the app-specific properties."""

    def test_onboarding_flag(self, settings):
        """Test onboarding completion defaults to False and persists."""
        assert settings.has_completed_onboarding is False

        settings.has_completed_onboarding = True

        assert settings.has_completed_onboarding is True
        assert settings.get_bool(SettingsKeys.HAS_COMPLETED_ONBOARDING) is True

    def test_business_ideas(self, settings):
        """Test ideas are stored as a list and default to empty."""
        assert settings.business_ideas == []

        ideas = [BusinessIdea(title="One"), BusinessIdea(title="Two", saved=True)]
        settings.business_ideas = ideas

        assert settings.business_ideas == ideas

    def test_selected_idea_id(self, settings):
        """Test setting the selected id to None removes it."""
        settings.selected_business_idea_id = "abc"
        assert settings.selected_business_idea_id == "abc"

        settings.selected_business_idea_id = None
        assert settings.selected_business_idea_id is None
        assert not settings.exists(SettingsKeys.SELECTED_BUSINESS_IDEA_ID)

    def test_user_profile(self, settings):
        """Test the profile round-trips and can be cleared."""
        profile = UserProfile(id="u1", first_name="Ada")
        settings.user_profile = profile
        assert settings.user_profile == profile

        settings.user_profile = None
        assert settings.user_profile is None

    def test_clear_all_keeps_api_overrides(self, settings):
        """Test clear_all removes app data but keeps the API key and model."""
        settings.has_completed_onboarding = True
        settings.business_ideas = [BusinessIdea(title="One")]
        settings.selected_business_idea_id = "abc"
        settings.google_ai_api_key = "override-key"
        settings.google_ai_model = "gemini-2.0-pro"

        settings.clear_all()

        assert settings.has_completed_onboarding is False
        assert settings.business_ideas == []
        assert settings.selected_business_idea_id is None
        assert settings.google_ai_api_key == "override-key"
        assert settings.google_ai_model == "gemini-2.0-pro"

    def test_export_all(self, settings):
        """Test export_all returns every stored key with its decoded value."""
        settings.save_string("b", "two")
        settings.save_int("a", 1)

        assert settings.export_all() == {"a": 1, "b": "two"}


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
