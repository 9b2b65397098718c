"""Tests for hit-location and damage resolution."""

from __future__ import annotations

from typing import Any

from cyberpunk_combat.engine.locations import resolve_damage, resolve_location, roll_located_damage
from cyberpunk_combat.engine.stats import prepare_actor
from cyberpunk_combat.models.actor import Actor, HitLocation


class TestResolveLocation:
    """Tests for resolve_location."""

    def test_rolled_against_standard_table(self, rng: Any) -> None:
        """Test without a target the human table is used."""
        rng.push(7)

        hit = resolve_location(None, None, rng)

        assert hit.location == "lLeg"
        assert hit.roll.total == 7
        assert rng.formulas == ["1d10"]

    def test_rolled_against_target_table(self, rng: Any) -> None:
        """Test a target's own hit-location table is used."""
        drone = Actor(
            name="Drone",
            hit_locations={
                "Rotor": HitLocation(location=[1, 3]),
                "Chassis": HitLocation(location=[4, 10]),
            },
        )
        rng.push(2)

        assert resolve_location(prepare_actor(drone), None, rng).location == "Rotor"

    def test_forced_area_does_not_roll(self, rng: Any, ganger: Any) -> None:
        """Test an aimed location reports its first face without rolling."""
        hit = resolve_location(ganger, "RightLeg", rng)

        assert hit.location == "rLeg"
        assert hit.roll.total == 9
        assert hit.roll.dice == []
        assert rng.formulas == []

    def test_forced_area_by_key(self, rng: Any) -> None:
        """Test data keys are accepted as aimed locations."""
        assert resolve_location(None, "Torso", rng).roll.total == 2

    def test_forced_area_missing_from_table(self, rng: Any) -> None:
        """Test an aimed location the target lacks is still used."""
        hit = resolve_location(None, "Tail", rng)

        assert hit.location == "Tail"
        assert hit.roll.total == 0

    def test_face_outside_table(self, rng: Any) -> None:
        """Test a face no location covers falls back to the face itself."""
        stub = Actor(name="Stub", hit_locations={"Core": HitLocation(location=[1, 5])})
        rng.push(8)

        assert resolve_location(stub, None, rng).location == "8"


class TestResolveDamage:
    """Tests for damage rolls."""

    def test_damage_with_variables(self, rng: Any) -> None:
        """Test formula variables are substituted before rolling."""
        rng.push(3, 5)

        damage = resolve_damage("2d6+@strengthBonus", {"strengthBonus": 2}, "Torso", rng)

        assert damage.location == "Torso"
        assert damage.formula == "2d6+@strengthBonus"
        assert damage.roll.formula == "2d6+2"
        assert damage.total == 10

    def test_location_rolled_before_damage(self, rng: Any) -> None:
        """Test the location die is consumed before the damage dice."""
        rng.push(1, 6, 6)

        damage = roll_located_damage("2d6", None, None, None, rng)

        assert damage.location == "Head"
        assert damage.total == 12
        assert rng.formulas == ["1d10", "2d6"]
