"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Only the shopping list generator and the categorizer adapter read these;
    the parsing and normalization functions take no configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # External AI categorizer (optional, rule-based fallback when unset)
    categorizer_url: str = ""
    categorizer_api_key: str = ""
    categorizer_timeout: float = 10.0  # seconds for the whole categorize call
    categorizer_max_retries: int = 3

    # Aggregation
    # Unit-less ingredients with these normalized names are assumed to use the unit
    unitless_default_units: dict[str, str] = Field(default_factory=lambda: {"garlic": "clove"})
    list_default_name: str = "Grocery List"

    # Household staples
    exclude_household_staples: bool = False
    household_staples: list[str] = Field(default_factory=list)  # empty uses the built-in staples

    # Logging (defaults for configure_logging)
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = ""  # "json" or "text"; empty auto-detects

    @property
    def has_remote_categorizer(self) -> bool:
        """Check if an external categorizer endpoint is configured."""
        return bool(self.categorizer_url.strip())

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
