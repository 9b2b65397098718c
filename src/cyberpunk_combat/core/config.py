"""Configuration management for the combat engine.

Settings are loaded with pydantic-settings from environment variables and
an optional .env file. The rules block exposes the few table constants a
table may want to house-rule (dice used for attacks and hit locations,
the armor cleanse threshold, maximum health).

Example:
    >>> from cyberpunk_combat.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.rules.attack_die
    '1d10e10'

Environment Variables:
    CYBERPUNK_COMBAT_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    CYBERPUNK_COMBAT_JSON_LOGS: Emit JSON log lines instead of console output
    CYBERPUNK_COMBAT_RULES_ATTACK_DIE: Base die of every to-hit roll
    CYBERPUNK_COMBAT_RULES_LOCATION_DIE: Die rolled against hit-location tables
    CYBERPUNK_COMBAT_RULES_ARMOR_CLEANSE_THRESHOLD: Coverage size above which foreign locations are dropped
    CYBERPUNK_COMBAT_RULES_MAX_HEALTH: Damage cap in wound slots
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cyberpunk_combat.core.exceptions import ConfigurationError


class RulesSettings(BaseSettings):
    """Table-level rules constants.

    Attributes:
        attack_die: Base die of to-hit rolls, exploding on its maximum face.
        location_die: Die rolled against an actor's hit-location table.
        armor_cleanse_threshold: Armor coverage maps larger than this drop
            locations unknown to the new owner when re-fitted.
        max_health: Maximum accumulated damage (10 wound states of 4 slots).
        default_zone_width: Default suppressive fire zone width in meters.
    """

    model_config = SettingsConfigDict(
        env_prefix="CYBERPUNK_COMBAT_RULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    attack_die: str = Field(
        default="1d10e10",
        description="Base die of every to-hit roll",
    )
    location_die: str = Field(
        default="1d10",
        description="Die rolled against hit-location tables",
    )
    armor_cleanse_threshold: int = Field(
        default=20,
        ge=1,
        description="Coverage size above which foreign locations are dropped",
    )
    max_health: int = Field(
        default=40,
        ge=4,
        description="Damage cap in wound slots",
    )
    default_zone_width: int = Field(
        default=2,
        ge=2,
        description="Default suppressive fire zone width",
    )

    @field_validator("attack_die", "location_die", mode="after")
    @classmethod
    def validate_single_die(cls, value: str) -> str:
        """Ensure die settings describe dice, not bare numbers.

        Args:
            value: The configured die formula.

        Returns:
            The validated formula.

        Raises:
            ConfigurationError: If the formula contains no die.
        """
        if "d" not in value.lower():
            raise ConfigurationError(
                f"Die setting must contain a die, got {value!r}",
                config_key="rules",
            )
        return value


class Settings(BaseSettings):
    """Main engine settings.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Logging level.
        json_logs: Emit JSON log lines.
        rules: Rules constants.
    """

    model_config = SettingsConfigDict(
        env_prefix="CYBERPUNK_COMBAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Cyberpunk 2020 Combat Engine",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )

    rules: RulesSettings = Field(default_factory=RulesSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the engine settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load engine settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "RulesSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
