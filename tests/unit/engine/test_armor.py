"""Tests for armor layering and re-fitting."""

from __future__ import annotations

from typing import Any

import pytest

from cyberpunk_combat.engine.armor import fit_armor, layer_bonus, merge_armor, stack_armor
from cyberpunk_combat.models.actor import Actor
from cyberpunk_combat.models.items import make_item


class TestLayerBonus:
    """Tests for the layering bonus table."""

    @pytest.mark.parametrize(
        ("difference", "bonus"),
        [
            (0, 5),
            (4, 5),
            (5, 4),
            (8, 4),
            (9, 3),
            (14, 3),
            (15, 3),
            (20, 3),
            (21, 2),
            (26, 2),
            (27, 0),
            (40, 0),
        ],
    )
    def test_boundaries(self, difference: int, bonus: int) -> None:
        """Test each band edge of the bonus table."""
        assert layer_bonus(difference) == bonus


class TestMergeArmor:
    """Tests for combining two layers."""

    def test_zero_layer_adds_nothing(self) -> None:
        """Test an unarmored location takes the new layer as-is."""
        assert merge_armor(0, 14) == 14
        assert merge_armor(14, 0) == 14

    def test_equal_layers(self) -> None:
        """Test two equal layers get the full bonus."""
        assert merge_armor(10, 10) == 15

    def test_far_apart_layers(self) -> None:
        """Test the bonus shrinks as layers diverge."""
        assert merge_armor(10, 20) == 23
        assert merge_armor(5, 40) == 40

    def test_commutative(self) -> None:
        """Test layer order does not change a single merge."""
        for a, b in [(3, 18), (12, 25), (20, 20), (1, 30)]:
            assert merge_armor(a, b) == merge_armor(b, a)


class TestStackArmor:
    """Tests for folding armor into hit locations."""

    def test_layers_stack_per_location(self) -> None:
        """Test two pieces over the torso stack, other locations do not."""
        actor = Actor(name="Rogue")
        vest = make_item("Vest", {"kind": "armor", "coverage": {"Torso": {"stopping_power": 10}}})
        jacket = make_item(
            "Jacket",
            {
                "kind": "armor",
                "coverage": {
                    "Torso": {"stopping_power": 10},
                    "lArm": {"stopping_power": 10},
                },
            },
        )

        stack_armor(actor, [vest, jacket])

        assert actor.hit_locations["Torso"].stopping_power == 15
        assert actor.hit_locations["lArm"].stopping_power == 10
        assert actor.hit_locations["Head"].stopping_power == 0

    def test_ablation_reduces_layer(self) -> None:
        """Test ablated stopping power is used when merging."""
        actor = Actor(name="Rogue")
        vest = make_item(
            "Vest",
            {"kind": "armor", "coverage": {"Torso": {"stopping_power": 18, "ablation": 4}}},
        )

        stack_armor(actor, [vest])

        assert actor.hit_locations["Torso"].stopping_power == 14

    def test_unknown_location_is_skipped(self) -> None:
        """Test coverage for locations the actor lacks is ignored."""
        actor = Actor(name="Rogue")
        barding = make_item("Barding", {"kind": "armor", "coverage": {"Tail": {"stopping_power": 8}}})

        stack_armor(actor, [barding])

        assert "Tail" not in actor.hit_locations


class TestFitArmor:
    """Tests for fitting armor to a new owner."""

    def test_fills_missing_locations(self, ganger: Any) -> None:
        """Test every owner location gets a coverage entry."""
        vest = make_item("Vest", {"kind": "armor", "coverage": {"Torso": {"stopping_power": 10}}})

        assert fit_armor(vest, ganger) is True

        assert set(vest.payload.coverage) == set(ganger.hit_locations)
        assert vest.payload.coverage["Head"].stopping_power == 0
        assert vest.payload.coverage["Torso"].stopping_power == 10
        assert vest.payload.last_owner_id == "ganger"

    def test_same_owner_is_noop(self, ganger: Any) -> None:
        """Test fitting twice to the same owner does nothing."""
        vest = make_item("Vest", {"kind": "armor"})
        fit_armor(vest, ganger)

        assert fit_armor(vest, ganger) is False

    def test_large_maps_drop_foreign_locations(self, ganger: Any) -> None:
        """Test coverage maps above the cleanse threshold are pruned."""
        coverage = {f"Limb{i}": {"stopping_power": 4} for i in range(20)}
        coverage["Torso"] = {"stopping_power": 12}
        suit = make_item("Borg Shell", {"kind": "armor", "coverage": coverage})

        fit_armor(suit, ganger)

        assert set(suit.payload.coverage) == set(ganger.hit_locations)
        assert suit.payload.coverage["Torso"].stopping_power == 12

    def test_small_maps_keep_foreign_locations(self, ganger: Any) -> None:
        """Test small coverage maps keep locations the owner lacks."""
        barding = make_item("Barding", {"kind": "armor", "coverage": {"Tail": {"stopping_power": 8}}})

        fit_armor(barding, ganger)

        assert "Tail" in barding.payload.coverage

    def test_non_armor_ignored(self, ganger: Any) -> None:
        """Test non-armor items are never fitted."""
        knife = make_item("Knife", {"kind": "weapon", "weapon_type": "Melee"})

        assert fit_armor(knife, ganger) is False
