"""Rolled dice as plain data.

A RollOutcome records the formula that was evaluated, its total, and for
every dice group the faces rolled in order. An exploded die is followed
by the extra die it triggered.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DieResult(BaseModel):
    """One face shown by one die."""

    model_config = ConfigDict(frozen=True)

    result: int
    exploded: bool = False


class DiceGroup(BaseModel):
    """All dice of one ``NdM`` term."""

    model_config = ConfigDict(frozen=True)

    faces: int = Field(ge=1)
    results: list[DieResult] = Field(default_factory=list)


class RollOutcome(BaseModel):
    """Result of evaluating a formula.

    Attributes:
        formula: The formula after variable substitution.
        total: Integer total.
        dice: Dice groups in formula order.
    """

    model_config = ConfigDict(frozen=True)

    formula: str
    total: int
    dice: list[DiceGroup] = Field(default_factory=list)

    @classmethod
    def fixed(cls, value: int) -> RollOutcome:
        """A roll with no dice, used for forced hit locations."""
        return cls(formula=str(value), total=value)

    @property
    def values(self) -> list[int]:
        """Every face rolled, flattened."""
        return [die.result for group in self.dice for die in group.results]


__all__ = [
    "DieResult",
    "DiceGroup",
    "RollOutcome",
]
