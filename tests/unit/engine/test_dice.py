"""Tests for the random source and natural-face checks."""

from __future__ import annotations

import pytest

from cyberpunk_combat.core.exceptions import DiceRollError
from cyberpunk_combat.engine.dice import (
    D20RandomSource,
    RandomSource,
    default_random_source,
    first_die,
    is_natural_max,
    is_natural_min,
    substitute_variables,
)
from cyberpunk_combat.models.rolls import DiceGroup, DieResult, RollOutcome


def _outcome(*faces: int, size: int = 10) -> RollOutcome:
    return RollOutcome(
        formula=f"1d{size}",
        total=sum(faces),
        dice=[DiceGroup(faces=size, results=[DieResult(result=f) for f in faces])],
    )


class TestSubstituteVariables:
    """Tests for @variable substitution."""

    def test_flat_variable(self) -> None:
        """Test a flat variable is replaced by its value."""
        assert substitute_variables("1d6+@strengthBonus", {"strengthBonus": 2}) == "1d6+2"

    def test_negative_values_are_parenthesized(self) -> None:
        """Test negative values keep the formula well-formed."""
        assert substitute_variables("1d6+@strengthBonus", {"strengthBonus": -1}) == "1d6+(-1)"

    def test_dotted_path(self) -> None:
        """Test dotted paths walk nested mappings."""
        variables = {"stats": {"body": {"total": 8}}}

        assert substitute_variables("1d10+@stats.body.total", variables) == "1d10+8"

    def test_unknown_variable_becomes_zero(self) -> None:
        """Test unknown references are replaced by zero."""
        assert substitute_variables("2d6+@missing", {}) == "2d6+0"

    def test_no_variables(self) -> None:
        """Test formulas without references pass through."""
        assert substitute_variables("1d10e10 + 7") == "1d10e10 + 7"


class TestD20RandomSource:
    """Tests for the d20-backed source."""

    def test_satisfies_protocol(self) -> None:
        """Test the source is a RandomSource."""
        assert isinstance(D20RandomSource(), RandomSource)

    def test_roll_with_modifier(self) -> None:
        """Test a die plus modifier stays within bounds."""
        outcome = D20RandomSource(seed=42).roll("1d10+@ref", {"ref": 7})

        assert outcome.formula == "1d10+7"
        assert 8 <= outcome.total <= 17
        assert outcome.dice[0].faces == 10
        assert len(outcome.dice[0].results) == 1

    def test_multiple_dice_groups(self) -> None:
        """Test each dice term becomes its own group."""
        outcome = D20RandomSource(seed=7).roll("2d6+1d4")

        assert [group.faces for group in outcome.dice] == [6, 4]
        assert len(outcome.values) == 3
        assert 3 <= outcome.total <= 16

    def test_exploding_die_marks_maximum(self) -> None:
        """Test every maximum face of an exploding die is marked."""
        outcome = D20RandomSource(seed=3).roll("1d10e10")

        results = outcome.dice[0].results
        assert all(die.exploded == (die.result == 10) for die in results)
        assert outcome.total == sum(die.result for die in results)

    def test_empty_formula_raises(self) -> None:
        """Test an empty formula is rejected."""
        with pytest.raises(DiceRollError):
            D20RandomSource().roll("  ")

    def test_invalid_formula_raises(self) -> None:
        """Test malformed formulas raise DiceRollError."""
        with pytest.raises(DiceRollError) as exc_info:
            D20RandomSource().roll("2d6+")

        assert exc_info.value.details["expression"] == "2d6+"

    def test_default_source_is_shared(self) -> None:
        """Test the module default source is a singleton."""
        assert default_random_source() is default_random_source()


class TestNaturalFaces:
    """Tests for natural-face checks."""

    def test_natural_one(self) -> None:
        """Test a first face of 1 is a natural minimum."""
        assert is_natural_min(_outcome(1))
        assert not is_natural_min(_outcome(2))

    def test_natural_max_after_explosion(self) -> None:
        """Test the first face decides, not the total."""
        roll = _outcome(10, 4)

        assert is_natural_max(roll)
        assert not is_natural_min(roll)

    def test_fixed_roll_has_no_first_die(self) -> None:
        """Test rolls without dice are never natural."""
        roll = RollOutcome.fixed(1)

        assert first_die(roll) is None
        assert not is_natural_min(roll)
        assert not is_natural_max(roll)
