"""Core infrastructure: configuration, logging, exceptions and rules tables.

Submodules:
    config: pydantic-settings configuration with a cached accessor
    logging: structlog setup and context binding
    exceptions: Package exception hierarchy
    constants: Rules tables (armor bonuses, range DCs, penalties, labels)
"""

from __future__ import annotations

from cyberpunk_combat.core.config import RulesSettings, Settings, clear_settings_cache, get_settings
from cyberpunk_combat.core.exceptions import (
    CombatEngineError,
    CombatError,
    ConfigurationError,
    DiceRollError,
    EntityNotFoundError,
    EntityStoreError,
    RulesEngineError,
    ValidationError,
)
from cyberpunk_combat.core.logging import (
    bind_context,
    bound_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Config
    "RulesSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Exceptions
    "CombatEngineError",
    "RulesEngineError",
    "CombatError",
    "DiceRollError",
    "EntityStoreError",
    "EntityNotFoundError",
    "ConfigurationError",
    "ValidationError",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "bound_context",
    "clear_context",
]
