"""Tests for actors and transient combat models."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError

from cyberpunk_combat.models.actor import Actor
from cyberpunk_combat.models.combat import (
    AttackContext,
    AttackOutcome,
    AttackResult,
    DamageRoll,
    ModifierTerm,
    SaveResult,
    render_formula,
)
from cyberpunk_combat.models.enums import AttackProtocol, Condition, PreconditionFailure
from cyberpunk_combat.models.rolls import RollOutcome


def _damage(location: str, total: int) -> DamageRoll:
    return DamageRoll(location=location, formula="2d6", roll=RollOutcome.fixed(total))


def _save(save: str, success: bool, condition: Condition) -> SaveResult:
    return SaveResult(
        save=save,
        threshold=7,
        roll=RollOutcome.fixed(3),
        success=success,
        condition=condition,
    )


class TestActor:
    """Tests for the Actor document."""

    def test_default_hit_locations(self) -> None:
        """Test actors get the human hit-location table."""
        actor = Actor(name="Rogue")

        assert set(actor.hit_locations) == {"Head", "Torso", "rArm", "lArm", "lLeg", "rLeg"}
        assert list(actor.hit_locations["Torso"].faces) == [2, 3, 4]

    def test_unknown_conditions_dropped(self) -> None:
        """Test status ids the engine does not model are ignored."""
        actor = Actor(name="Rogue", conditions=["prone", "on-fire"])

        assert actor.conditions == {Condition.PRONE}

    def test_find_skill_ignores_case(self, solo: Any) -> None:
        """Test skills are found by name regardless of case."""
        assert solo.find_skill("HANDGUN").level == 4
        assert solo.find_skill("Pilot") is None

    def test_items_of_kind(self, solo: Any) -> None:
        """Test filtering owned items by kind."""
        assert {i.id for i in solo.items_of_kind("ordnance")} == {"grenade"}
        assert "vest" in {i.id for i in solo.equipped_items()}

    def test_damage_cannot_be_negative(self) -> None:
        """Test persisted damage is validated."""
        with pytest.raises(ValidationError):
            Actor(name="Rogue", damage=-1)


class TestAttackContext:
    """Tests for the attack context."""

    def test_target_count(self, solo: Any) -> None:
        """Test explicit ids win over a supplied count."""
        weapon = solo.get_item("rifle")

        assert AttackContext(attacker=solo, weapon=weapon).target_count == 1
        assert AttackContext(attacker=solo, weapon=weapon, targets_count=3).target_count == 3
        assert (
            AttackContext(attacker=solo, weapon=weapon, targets_count=3, target_ids=["a", "b"]).target_count
            == 2
        )

    def test_target_actors_per_index(self, solo: Any, ganger: Any) -> None:
        """Test each index resolves its own target, falling back to target."""
        context = AttackContext(
            attacker=solo, weapon=solo.get_item("rifle"), target=solo, targets=[ganger]
        )

        assert context.target_count == 1
        assert context.target_at(0).id == "ganger"
        assert context.target_id_at(0) == "ganger"
        assert context.target_at(1).id == "solo"
        assert context.target_id_at(1) is None

    def test_unknown_field_rejected(self, solo: Any) -> None:
        """Test typos in context fields are rejected."""
        with pytest.raises(ValidationError):
            AttackContext(attacker=solo, weapon=solo.get_item("rifle"), hip_fire=True)


class TestResults:
    """Tests for attack results and outcomes."""

    def test_render_formula(self) -> None:
        """Test terms render with explicit signs."""
        terms = [ModifierTerm(label="reflex", value=7), ModifierTerm(label="hipfire", value=-2)]

        assert render_formula("1d10e10", terms) == "1d10e10 + 7 - 2"
        assert render_formula("1d10", []) == "1d10"

    def test_damage_kept_per_location(self) -> None:
        """Test damage instances group by location and total up."""
        result = AttackResult(
            template="multi-hit",
            protocol=AttackProtocol.FULL_AUTO,
            weapon_name="Ronin",
        )
        result.add_damage(_damage("Torso", 7))
        result.add_damage(_damage("Torso", 4))
        result.add_damage(_damage("Head", 9))

        assert result.damage_by_location() == {"Torso": 11, "Head": 9}
        assert result.total_damage == 20
        assert result.model_dump()["total_damage"] == 20

    def test_outcome_ok(self) -> None:
        """Test outcomes with a failure are not ok."""
        assert AttackOutcome(actor_id="a", item_id="w").ok
        assert not AttackOutcome(actor_id="a", item_id="w", failure=PreconditionFailure.NO_AMMO).ok


class TestSaveResult:
    """Tests for applying save results to conditions."""

    def test_failed_save_adds_condition(self) -> None:
        """Test failure adds the governed condition."""
        result = _save("stun", False, Condition.SHOCKED)

        assert result.apply({Condition.PRONE}) == {Condition.PRONE, Condition.SHOCKED}

    def test_made_save_clears_condition(self) -> None:
        """Test success removes a stun or poison condition."""
        result = _save("poison", True, Condition.POISONED)

        assert result.apply({Condition.POISONED}) == set()

    def test_input_not_mutated(self) -> None:
        """Test apply returns a new set."""
        conditions = {Condition.SHOCKED}

        _save("stun", True, Condition.SHOCKED).apply(conditions)

        assert conditions == {Condition.SHOCKED}
