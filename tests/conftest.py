"""Pytest configuration and shared fixtures."""

from unittest.mock import AsyncMock

import pytest

from grocerylist.config import Settings, get_settings
from grocerylist.logging_config import clear_context

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require external services)"
    )
    config.addinivalue_line("markers", "slow: marks tests as slow running")


@pytest.fixture(autouse=True)
def reset_state(monkeypatch):
    """Isolate tests from the environment, cached settings and log context."""
    for var in (
        "CATEGORIZER_URL",
        "CATEGORIZER_API_KEY",
        "CATEGORIZER_TIMEOUT",
        "CATEGORIZER_MAX_RETRIES",
        "UNITLESS_DEFAULT_UNITS",
        "LIST_DEFAULT_NAME",
        "ENVIRONMENT",
        "LOG_LEVEL",
        "LOG_FORMAT",
        "EXCLUDE_HOUSEHOLD_STAPLES",
        "HOUSEHOLD_STAPLES",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    clear_context()
    yield
    get_settings.cache_clear()
    clear_context()


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def local_settings():
    """Settings without a remote categorizer."""
    return Settings(_env_file=None, categorizer_url="", categorizer_timeout=1.0)


@pytest.fixture
def remote_settings():
    """Settings pointing at a fake categorizer."""
    return Settings(
        _env_file=None,
        categorizer_url="http://categorizer.test/api",
        categorizer_api_key="test-key",
        categorizer_timeout=1.0,
        categorizer_max_retries=2,
    )


# =============================================================================
# Recipe Fixtures
# =============================================================================


@pytest.fixture
def pasta_recipe():
    """A recipe with raw ingredient lines."""
    return {
        "title": "Weeknight Pasta",
        "ingredient_groups": [
            {
                "name": "Sauce",
                "ingredients": [
                    "2 tablespoons extra virgin olive oil",
                    "1 cup onion, diced",
                    "3 cloves garlic, minced",
                    "1 (28 oz) can crushed tomatoes",
                    "salt to taste",
                ],
            },
            {
                "name": "Pasta",
                "ingredients": ["1 lb spaghetti", "1/2 cup grated parmesan cheese"],
            },
        ],
    }


@pytest.fixture
def soup_recipe():
    """A recipe with structured ingredients, as an AI parse returns them."""
    return {
        "title": "Tomato Soup",
        "ingredient_groups": [
            {
                "name": "Main",
                "ingredients": [
                    {"name": "onions", "amount": "1/2", "unit": "cup", "preparation": "chopped"},
                    {"name": "garlic", "amount": 2},
                    {"name": "olive oil", "amount": "1", "unit": "tbsp"},
                    {"name": "vegetable broth", "amount": "4", "unit": "cups"},
                    {"name": "heavy cream (removed)", "amount": "1/2", "unit": "cup"},
                ],
            }
        ],
    }


@pytest.fixture
def mock_provider():
    """Category provider returning a fixed AI answer."""
    provider = AsyncMock()
    provider.categorize = AsyncMock(
        return_value={
            "onion": "Produce",
            "garlic": "Produce",
            "olive oil": "Pantry",
        }
    )
    return provider
