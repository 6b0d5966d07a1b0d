"""Settings validation tests."""

import pytest
from pydantic import ValidationError

from shelflife.config import Settings


def test_defaults_match_generation_contract():
    """Test the generation call defaults."""
    settings = Settings(_env_file=None)
    assert settings.recipe_generation_timeout == 15.0
    assert settings.recipe_temperature == 0.7
    assert settings.recipe_max_output_tokens == 2048


def test_recipe_generation_enabled_follows_api_key():
    """Test generation is only enabled with a Gemini key."""
    assert Settings(_env_file=None, gemini_api_key=None).recipe_generation_enabled is False
    assert Settings(_env_file=None, gemini_api_key="abc").recipe_generation_enabled is True


def test_unknown_timezone_rejected():
    """Test a misspelled timezone fails at startup, not at the first expiry check."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, timezone="Europe/Atlantis")


def test_production_requires_real_secret():
    """Test production refuses the default JWT secret."""
    with pytest.raises(ValidationError):
        Settings(
            _env_file=None,
            environment="production",
            database_url="postgresql://u:p@db:5432/shelflife",
        )
