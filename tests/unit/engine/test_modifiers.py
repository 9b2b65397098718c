"""Tests for attack modifier aggregation."""

from __future__ import annotations

from typing import Any

from cyberpunk_combat.engine.modifiers import (
    build_modifiers,
    effective_rof,
    full_auto_bonus,
    minimum_body_penalty,
    resolve_attack_skill,
)
from cyberpunk_combat.engine.stats import prepare_actor
from cyberpunk_combat.models.combat import AttackContext, MinimumBodyPenalty
from cyberpunk_combat.models.enums import Condition, FireMode, RangeBracket, StatName
from cyberpunk_combat.models.items import OrdnanceData, WeaponData


def _labels(modifiers: Any) -> list[str]:
    return [term.label for term in modifiers.terms]


class TestMinimumBody:
    """Tests for the minimum body penalty."""

    def test_no_penalty_when_strong_enough(self) -> None:
        """Test a wielder at or above the minimum has no penalty."""
        assert minimum_body_penalty(8, 8) == MinimumBodyPenalty()
        assert minimum_body_penalty(0, 2) == MinimumBodyPenalty()

    def test_deficit_penalty(self) -> None:
        """Test each missing point costs two and halves rof."""
        penalty = minimum_body_penalty(10, 7)

        assert penalty.deficit == 3
        assert penalty.accuracy_penalty == -6
        assert penalty.rof_multiplier == 0.5

    def test_effective_rof_floor(self) -> None:
        """Test effective rof rounds down but never below one."""
        halved = minimum_body_penalty(10, 7)

        assert effective_rof(30, halved) == 15
        assert effective_rof(3, halved) == 1
        assert effective_rof(1, halved) == 1
        assert effective_rof(20, MinimumBodyPenalty()) == 20


class TestFullAutoBonus:
    """Tests for the full auto to-hit modifier."""

    def test_close_range_bonus(self) -> None:
        """Test close range adds one per ten rounds."""
        assert full_auto_bonus(RangeBracket.CLOSE, 30, 30) == 3

    def test_longer_ranges_penalize(self) -> None:
        """Test medium and beyond subtract instead."""
        assert full_auto_bonus(RangeBracket.MEDIUM, 30, 30) == -3
        assert full_auto_bonus(RangeBracket.EXTREME, 25, 30) == -2

    def test_point_blank_is_zero(self) -> None:
        """Test point blank has no full auto modifier."""
        assert full_auto_bonus(RangeBracket.POINT_BLANK, 30, 30) == 0

    def test_limited_by_ammo(self) -> None:
        """Test the bonus uses the smaller of ammo and rof."""
        assert full_auto_bonus(RangeBracket.CLOSE, 9, 30) == 0


class TestAttackSkill:
    """Tests for attack skill resolution."""

    def test_explicit_skill(self) -> None:
        """Test an explicit attack skill wins."""
        assert resolve_attack_skill(WeaponData(attack_skill="Karate", weapon_type="Melee")) == "Karate"

    def test_weapon_type_default(self) -> None:
        """Test the weapon type's first default skill is used."""
        assert resolve_attack_skill(WeaponData(weapon_type="SMG")) == "Submachinegun"
        assert resolve_attack_skill(WeaponData(weapon_type="Melee")) == "Fencing"

    def test_no_default(self) -> None:
        """Test exotics and ordnance have no default skill."""
        assert resolve_attack_skill(WeaponData(weapon_type="Exotic")) is None
        assert resolve_attack_skill(OrdnanceData()) is None


class TestBuildModifiers:
    """Tests for build_modifiers."""

    def test_ranged_order(self, solo: Any) -> None:
        """Test terms follow stat, skill, situation, extra, accuracy order."""
        attacker = prepare_actor(solo)
        pistol = solo.get_item("pistol")
        context = AttackContext(
            attacker=solo,
            weapon=pistol,
            target_area="Head",
            aim_rounds=2,
            hipfire=True,
            extra_mod=-1,
        )

        modifiers = build_modifiers(context, pistol.payload, attacker)

        assert _labels(modifiers) == [
            "reflex",
            "Handgun",
            "target_area",
            "aim_rounds",
            "hipfire",
            "extra_mod",
            "accuracy",
        ]
        assert modifiers.total == 8 + 4 - 4 + 2 - 2 - 1 + 1
        assert modifiers.formula("1d10e10") == "1d10e10 + 8 + 4 - 4 + 2 - 2 - 1 + 1"

    def test_every_situational_flag(self, solo: Any) -> None:
        """Test each situational flag adds its own term."""
        attacker = prepare_actor(solo)
        rifle = solo.get_item("rifle")
        context = AttackContext(
            attacker=solo,
            weapon=rifle,
            ambush=True,
            blinded=True,
            dual_wield=True,
            fast_draw=True,
            ricochet=True,
            running=True,
            turning_to_face=True,
        )

        values = {t.label: t.value for t in build_modifiers(context, rifle.payload, attacker).terms}

        assert values["ambush"] == 5
        assert values["blinded"] == -3
        assert values["dual_wield"] == -3
        assert values["fast_draw"] == -3
        assert values["ricochet"] == -5
        assert values["running"] == -3
        assert values["turning_to_face"] == -2

    def test_blinded_condition_uses_luck(self, solo: Any) -> None:
        """Test a blinded attacker rolls luck instead of reflex."""
        solo.conditions = {Condition.BLINDED}
        attacker = prepare_actor(solo)
        pistol = solo.get_item("pistol")

        modifiers = build_modifiers(AttackContext(attacker=solo, weapon=pistol), pistol.payload, attacker)

        assert modifiers.stat == StatName.LUCK
        assert modifiers.terms[0].value == 6

    def test_condition_penalties(self, solo: Any) -> None:
        """Test attacker conditions append their penalties."""
        solo.conditions = {Condition.ACTION_SURGE, Condition.GRAPPLING}
        attacker = prepare_actor(solo)
        pistol = solo.get_item("pistol")

        modifiers = build_modifiers(AttackContext(attacker=solo, weapon=pistol), pistol.payload, attacker)

        assert _labels(modifiers)[-2:] == ["action-surge", "grappling"]
        assert modifiers.terms[-1].value == -2

    def test_burst_bonus_by_range(self, solo: Any) -> None:
        """Test the burst bonus applies at close and medium only."""
        attacker = prepare_actor(solo)
        rifle = solo.get_item("rifle")

        def labels(bracket: RangeBracket) -> list[str]:
            context = AttackContext(
                attacker=solo,
                weapon=rifle,
                fire_mode=FireMode.THREE_ROUND_BURST,
                range=bracket,
            )
            return _labels(build_modifiers(context, rifle.payload, attacker))

        assert "three_round_burst" in labels(RangeBracket.MEDIUM)
        assert "three_round_burst" not in labels(RangeBracket.LONG)

    def test_melee_has_no_ranged_terms(self, solo: Any) -> None:
        """Test melee weapons ignore ranged situational flags."""
        attacker = prepare_actor(solo)
        katana = solo.get_item("katana")
        context = AttackContext(attacker=solo, weapon=katana, hipfire=True, aim_rounds=3)

        modifiers = build_modifiers(context, katana.payload, attacker)

        assert _labels(modifiers) == ["reflex", "Melee", "extra_mod"]

    def test_minimum_body_term(self, solo: Any) -> None:
        """Test a heavy weapon adds the minimum body penalty last."""
        rifle = solo.get_item("rifle")
        rifle.payload.minimum_body = 11
        attacker = prepare_actor(solo)

        modifiers = build_modifiers(AttackContext(attacker=solo, weapon=rifle), rifle.payload, attacker)

        assert modifiers.terms[-1].label == "minimum_body"
        assert modifiers.terms[-1].value == -6
        assert modifiers.minimum_body.deficit == 3
