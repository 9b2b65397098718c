"""Tests for item documents."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from cyberpunk_combat.models.enums import ItemKind, Reliability, WeaponType
from cyberpunk_combat.models.items import (
    ArmorCoverage,
    ArmorData,
    CyberwareData,
    GearData,
    OrdnanceData,
    SkillData,
    WeaponData,
    active_weapon,
    armor_coverage,
    make_item,
)


class TestPayloadDiscrimination:
    """Tests for the kind-tagged payload union."""

    def test_weapon(self) -> None:
        """Test weapon dicts validate into WeaponData."""
        item = make_item("Avenger", {"kind": "weapon", "weapon_type": "Pistol", "reliability": "very"})

        assert isinstance(item.payload, WeaponData)
        assert item.kind == ItemKind.WEAPON
        assert item.payload.weapon_type == WeaponType.PISTOL
        assert item.payload.reliability == Reliability.VERY

    @pytest.mark.parametrize(
        ("kind", "payload_type"),
        [
            ("armor", ArmorData),
            ("cyberware", CyberwareData),
            ("skill", SkillData),
            ("ordnance", OrdnanceData),
            ("drug", GearData),
            ("vehicle", GearData),
        ],
    )
    def test_other_kinds(self, kind: str, payload_type: type) -> None:
        """Test each kind lands in its payload class."""
        assert isinstance(make_item("Thing", {"kind": kind}).payload, payload_type)

    def test_unknown_kind_rejected(self) -> None:
        """Test unknown kinds fail validation."""
        with pytest.raises(ValidationError):
            make_item("Thing", {"kind": "spell"})

    def test_negative_ammo_rejected(self) -> None:
        """Test assignment is validated."""
        item = make_item("Avenger", {"kind": "weapon", "shots_left": 3})

        with pytest.raises(ValidationError):
            item.payload.shots_left = -1


class TestWeapons:
    """Tests for weapon helpers."""

    def test_has_damage(self) -> None:
        """Test empty and zero formulas deal no damage."""
        assert WeaponData(damage="2d6").has_damage
        assert not WeaponData(damage="0").has_damage
        assert not OrdnanceData(damage=" ").has_damage

    def test_exotic_uses_charges(self) -> None:
        """Test exotics count charges instead of rounds."""
        taser = WeaponData(weapon_type="Exotic", charges=3, shots_left=9)

        assert taser.is_exotic
        assert taser.ammo_field == "charges"
        assert taser.ammo_left == 3
        assert WeaponData(shots_left=9).ammo_left == 9

    def test_monoblade(self) -> None:
        """Test the monoblade damage class is recognized."""
        assert WeaponData(weapon_type="Melee", damage_type="monoblade").is_monoblade

    def test_active_weapon_in_cyberware(self) -> None:
        """Test hosted weapons are found and get nested update paths."""
        arm = make_item(
            "Cyberarm",
            {"kind": "cyberware", "is_weapon": True, "weapon": {"shots_left": 4}},
        )

        assert active_weapon(arm).shots_left == 4
        assert arm.hosted_weapon
        assert arm.weapon_update_path("shots_left") == "payload.weapon.shots_left"

    def test_inactive_hosted_weapon(self) -> None:
        """Test cyberware with a disabled weapon is not weapon-bearing."""
        arm = make_item(
            "Cyberarm",
            {"kind": "cyberware", "is_weapon": False, "weapon": {"shots_left": 4}},
        )

        assert active_weapon(arm) is None
        assert arm.weapon_update_path("shots_left") == "payload.shots_left"

    def test_ordnance_circle_default(self) -> None:
        """Test ordnance without a template detonates as a circle."""
        assert OrdnanceData().is_circle
        assert not OrdnanceData(template_type="beam").is_circle


class TestArmorAndSkills:
    """Tests for armor coverage and skills."""

    def test_coverage_effective(self) -> None:
        """Test ablation never drives stopping power negative."""
        assert ArmorCoverage(stopping_power=10, ablation=4).effective == 6
        assert ArmorCoverage(stopping_power=3, ablation=8).effective == 0

    def test_armor_coverage_from_cyberware(self) -> None:
        """Test cyberarmor exposes its coverage map only when active."""
        plating = make_item(
            "Plating",
            {"kind": "cyberware", "is_armor": True, "armor": {"coverage": {"Torso": {"stopping_power": 20}}}},
        )
        inactive = make_item("Plating", {"kind": "cyberware", "is_armor": False})

        assert armor_coverage(plating)["Torso"].stopping_power == 20
        assert armor_coverage(inactive) == {}

    def test_skill_levels(self) -> None:
        """Test improvement points add and chips override."""
        assert SkillData(level=4, ip_level=1).effective_level == 5
        assert SkillData(level=4, is_chipped=True, chip_level=2).effective_level == 2
