"""Custom exception hierarchy for the Cyberpunk 2020 combat engine.

Every exception raised by this package inherits from CombatEngineError so
callers can catch engine failures at a single boundary while still getting
domain-specific context attached to the message.

Precondition failures of an attack (no ammo, no charges, weapon not owned)
are NOT exceptions; they are reported through the attack outcome. The
classes below cover programmer errors and missing documents.

Example:
    >>> from cyberpunk_combat.core.exceptions import DiceRollError
    >>> raise DiceRollError("Unbalanced parentheses", expression="(1d10+")
"""

from __future__ import annotations

from typing import Any


class CombatEngineError(Exception):
    """Base exception for all combat engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Rules Engine Exceptions
# =============================================================================


class RulesEngineError(CombatEngineError):
    """Base exception for rules resolution errors.

    Raised when stat preparation, modifier aggregation or attack
    resolution hits a state it cannot recover from.
    """


class CombatError(RulesEngineError):
    """Raised when an attack cannot be resolved.

    This covers internal failures during a single action, such as a
    random source that returns no dice for a to-hit roll.
    """

    def __init__(
        self,
        message: str,
        *,
        actor_id: str | None = None,
        item_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize combat error with attacker context.

        Args:
            message: Human-readable error description.
            actor_id: Identifier of the attacking actor.
            item_id: Identifier of the weapon or technique item.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if actor_id:
            combined_details["actor_id"] = actor_id
        if item_id:
            combined_details["item_id"] = item_id
        super().__init__(message, details=combined_details)


class DiceRollError(RulesEngineError):
    """Raised when a dice formula cannot be evaluated.

    This typically occurs when a formula is malformed after variable
    substitution or the dice backend rejects it.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize dice roll error with expression context.

        Args:
            message: Human-readable error description.
            expression: The dice expression that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expression:
            combined_details["expression"] = expression
        super().__init__(message, details=combined_details)


# =============================================================================
# Entity Store Exceptions
# =============================================================================


class EntityStoreError(CombatEngineError):
    """Base exception for actor and item persistence errors."""


class EntityNotFoundError(EntityStoreError):
    """Raised when an actor or item cannot be found in the store."""

    def __init__(
        self,
        message: str,
        *,
        entity_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not-found error with the missing identifier.

        Args:
            message: Human-readable error description.
            entity_id: Identifier of the missing actor or item.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if entity_id:
            combined_details["entity_id"] = entity_id
        super().__init__(message, details=combined_details)


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(CombatEngineError):
    """Raised when engine configuration is invalid.

    This includes invalid environment values or incompatible
    combinations of rules settings.
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(CombatEngineError):
    """Raised when a store update path or value is rejected.

    This wraps pydantic validation failures raised while applying an
    update map so callers only need to handle package exceptions.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name (or dotted path) of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


__all__ = [
    # Base exception
    "CombatEngineError",
    # Rules exceptions
    "RulesEngineError",
    "CombatError",
    "DiceRollError",
    # Store exceptions
    "EntityStoreError",
    "EntityNotFoundError",
    # Configuration exceptions
    "ConfigurationError",
    "ValidationError",
]
