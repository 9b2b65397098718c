"""Random source for combat rolls.

The engine never rolls dice itself; it asks a RandomSource to evaluate a
formula. The default source uses the d20 library. Formulas may reference
named values as ``@name`` or ``@dotted.path`` which are substituted with
numbers before evaluation, and use d20's explode operator (``1d10e10``).

Natural-face checks (fumbles on a 1, monoblade criticals on a 10) are
pure functions over the rolled dice, never over the formula text.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from cyberpunk_combat.core.exceptions import DiceRollError
from cyberpunk_combat.core.logging import get_logger
from cyberpunk_combat.models.rolls import DiceGroup, DieResult, RollOutcome


logger = get_logger(__name__)

_VARIABLE_PATTERN = re.compile(r"@([A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)")


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can evaluate a dice formula."""

    def roll(
        self,
        formula: str,
        variables: Mapping[str, Any] | None = None,
    ) -> RollOutcome:
        """Evaluate a formula.

        Args:
            formula: Dice formula, optionally referencing ``@variables``.
            variables: Values for referenced variables.

        Returns:
            The rolled outcome.
        """
        ...


# =============================================================================
# Variable Substitution
# =============================================================================


def _lookup(variables: Mapping[str, Any], path: str) -> Any:
    if path in variables:
        return variables[path]
    current: Any = variables
    for part in path.split("."):
        if isinstance(current, Mapping):
            if part not in current:
                return None
            current = current[part]
        else:
            current = getattr(current, part, None)
        if current is None:
            return None
    return current


def _format_number(value: float) -> str:
    text = str(int(value)) if float(value).is_integer() else str(value)
    return f"({text})" if value < 0 else text


def substitute_variables(formula: str, variables: Mapping[str, Any] | None = None) -> str:
    """Replace ``@name`` references with numbers.

    Unknown or non-numeric references become 0 and are logged, since
    formulas come from user-edited item data.

    Args:
        formula: Formula text.
        variables: Flat or nested mapping of values.

    Returns:
        The formula with every reference replaced.

    Example:
        >>> substitute_variables("1d6+@strengthBonus", {"strengthBonus": -1})
        '1d6+(-1)'
    """
    variables = variables or {}

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        value = _lookup(variables, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.warning("Unknown formula variable", variable=name, formula=formula)
            return "0"
        return _format_number(value)

    return _VARIABLE_PATTERN.sub(replace, formula)


# =============================================================================
# d20-backed Source
# =============================================================================


class D20RandomSource:
    """RandomSource backed by the d20 library.

    Example:
        >>> source = D20RandomSource()
        >>> outcome = source.roll("1d10e10 + @ref", {"ref": 7})
        >>> outcome.total >= 8
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the random source.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            import random

            random.seed(seed)
        logger.debug("D20RandomSource initialized", seed=seed)

    def roll(
        self,
        formula: str,
        variables: Mapping[str, Any] | None = None,
    ) -> RollOutcome:
        """Evaluate a formula with d20.

        Args:
            formula: Dice formula, optionally referencing ``@variables``.
            variables: Values for referenced variables.

        Returns:
            The rolled outcome with per-die results.

        Raises:
            DiceRollError: If the formula is empty or d20 rejects it.
        """
        if not formula or not formula.strip():
            raise DiceRollError("Empty dice formula", expression=formula)

        expression = substitute_variables(formula, variables)

        try:
            import d20

            result = d20.roll(expression)
        except Exception as exc:
            raise DiceRollError(
                f"Invalid dice formula: {exc}",
                expression=expression,
            ) from exc

        outcome = RollOutcome(
            formula=expression,
            total=int(result.total),
            dice=self._extract_dice(result.expr),
        )
        logger.debug("Dice rolled", formula=expression, total=outcome.total)
        return outcome

    def _extract_dice(self, expr: Any) -> list[DiceGroup]:
        """Walk a d20 expression tree collecting dice groups in order.

        Args:
            expr: The d20 expression tree.

        Returns:
            One DiceGroup per dice term.
        """
        import d20

        groups: list[DiceGroup] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                explodes = any(
                    getattr(op, "op", None) == "e" for op in (node.operations or [])
                )
                results = [
                    DieResult(
                        result=die.number,
                        exploded=explodes and die.number == node.size,
                    )
                    for die in node.values
                    if die.kept
                ]
                groups.append(DiceGroup(faces=node.size, results=results))
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return groups


# =============================================================================
# Natural Face Checks
# =============================================================================


def first_die(roll: RollOutcome) -> DieResult | None:
    """The first face of the first dice group, if any."""
    if not roll.dice or not roll.dice[0].results:
        return None
    return roll.dice[0].results[0]


def is_natural_min(roll: RollOutcome) -> bool:
    """Whether the first die shows a natural 1."""
    die = first_die(roll)
    return die is not None and die.result == 1


def is_natural_max(roll: RollOutcome) -> bool:
    """Whether the first die shows its highest face."""
    die = first_die(roll)
    return die is not None and die.result == roll.dice[0].faces


# Module-level default source
_default_source: RandomSource | None = None


def default_random_source() -> RandomSource:
    """Return the shared d20-backed random source."""
    global _default_source  # noqa: PLW0603
    if _default_source is None:
        _default_source = D20RandomSource()
    return _default_source


__all__ = [
    "RandomSource",
    "D20RandomSource",
    "substitute_variables",
    "first_die",
    "is_natural_min",
    "is_natural_max",
    "default_random_source",
]
