"""Feature flags and runtime settings.

Two separate questions decide whether a feature's views are shown:

- available: is the feature part of this deployment/tier? Read from the
  environment (FEATURE_VESTING, FEATURE_VALUATION); users cannot change it.
- enabled: has the user switched it on? A persisted preference.

Flags are resolved once by the host application and passed down as plain
values. The calculators never read settings.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (and an optional .env file)."""

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Feature availability (tier-controlled)
    feature_vesting: bool = False
    feature_valuation: bool = False

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "console"] = "console"


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the process-wide settings instance.

    Settings are read from the environment (and .env) on first call and
    cached until reset_settings().

    Returns:
        The cached Settings
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment.

    Used by tests that change environment variables.
    """
    global _settings
    _settings = None


def resolve_flag(
    explicit: Optional[bool],
    persisted: Optional[bool],
    default: bool,
) -> bool:
    """Merge an explicit override, a persisted preference and a default.

    The first value that is not None wins: explicit, then persisted, then
    default.

    Args:
        explicit: Override for this run (e.g. an environment variable)
        persisted: Stored user preference
        default: Built-in default

    Returns:
        The effective flag value
    """
    if explicit is not None:
        return explicit
    if persisted is not None:
        return persisted
    return default


class FeatureFlags(BaseModel):
    """Resolved feature switches handed to the composition root."""

    model_config = ConfigDict(frozen=True)

    vesting_available: bool = False
    valuation_available: bool = False
    vesting_enabled: bool = True
    valuation_enabled: bool = True

    @property
    def vesting_active(self) -> bool:
        return self.vesting_available and self.vesting_enabled

    @property
    def valuation_active(self) -> bool:
        return self.valuation_available and self.valuation_enabled

    @classmethod
    def resolve(
        cls,
        settings: Optional[Settings] = None,
        vesting_enabled: Optional[bool] = None,
        valuation_enabled: Optional[bool] = None,
        persisted_vesting: Optional[bool] = None,
        persisted_valuation: Optional[bool] = None,
    ) -> "FeatureFlags":
        """Resolve flags from settings plus user preferences.

        Args:
            settings: Deployment settings (default: get_settings())
            vesting_enabled: Explicit override for the vesting preference
            valuation_enabled: Explicit override for the valuation preference
            persisted_vesting: Stored vesting preference, if any
            persisted_valuation: Stored valuation preference, if any

        Preferences default to enabled; availability comes from settings only.
        """
        settings = settings or get_settings()
        return cls(
            vesting_available=settings.feature_vesting,
            valuation_available=settings.feature_valuation,
            vesting_enabled=resolve_flag(vesting_enabled, persisted_vesting, True),
            valuation_enabled=resolve_flag(valuation_enabled, persisted_valuation, True),
        )
