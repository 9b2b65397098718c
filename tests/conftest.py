"""Pytest configuration and shared fixtures.

This module provides common fixtures for the combat engine test suite:
a scripted random source that hands out queued die faces, a sample solo
and target, and an engine wired to an in-memory store.
"""

from __future__ import annotations

import re
from collections import deque
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator


_DICE_TERM = re.compile(r"(\d*)d(\d+)(?:e(\d+))?")


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from cyberpunk_combat.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Dice Fixtures
# =============================================================================


class ScriptedRandomSource:
    """RandomSource that reads die faces from a queue.

    Every ``NdM`` term of a formula takes N faces from the front of the
    queue; an exploding term (``1d10e10``) keeps taking faces while it
    rolls the exploding value. The remaining arithmetic is evaluated with
    d20 so totals match the real source.
    """

    def __init__(self, *faces: int) -> None:
        self.faces: deque[int] = deque(faces)
        self.formulas: list[str] = []

    def push(self, *faces: int) -> None:
        self.faces.extend(faces)

    @property
    def remaining(self) -> int:
        return len(self.faces)

    def _next(self, expression: str, size: int) -> int:
        if not self.faces:
            raise AssertionError(f"No scripted face left for {expression!r}")
        face = self.faces.popleft()
        if not 1 <= face <= size:
            raise AssertionError(f"Scripted face {face} does not fit d{size} in {expression!r}")
        return face

    def roll(self, formula: str, variables: Mapping[str, Any] | None = None) -> Any:
        import d20

        from cyberpunk_combat.core.exceptions import DiceRollError
        from cyberpunk_combat.engine.dice import substitute_variables
        from cyberpunk_combat.models.rolls import DiceGroup, DieResult, RollOutcome

        expression = substitute_variables(formula, variables)
        self.formulas.append(expression)
        groups: list[DiceGroup] = []

        def replace(match: re.Match[str]) -> str:
            count = int(match.group(1) or 1)
            size = int(match.group(2))
            explode_on = int(match.group(3)) if match.group(3) else None
            results: list[DieResult] = []
            for _ in range(count):
                face = self._next(expression, size)
                while face == explode_on:
                    results.append(DieResult(result=face, exploded=True))
                    face = self._next(expression, size)
                results.append(DieResult(result=face))
            groups.append(DiceGroup(faces=size, results=results))
            return str(sum(die.result for die in results))

        arithmetic = _DICE_TERM.sub(replace, expression)
        try:
            total = d20.roll(arithmetic).total
        except d20.RollError as exc:
            raise DiceRollError(f"Invalid dice formula: {exc}", expression=expression) from exc
        return RollOutcome(formula=expression, total=int(total), dice=groups)


@pytest.fixture
def rng() -> ScriptedRandomSource:
    """Provide an empty scripted random source.

    Returns:
        ScriptedRandomSource; tests push the faces they expect to be rolled.
    """
    return ScriptedRandomSource()


# =============================================================================
# Actor Fixtures
# =============================================================================


@pytest.fixture
def solo_items() -> list[Any]:
    """Provide the solo's skills, weapons and armor.

    Returns:
        Items with fixed ids so tests can address them.
    """
    from cyberpunk_combat.models.items import make_item

    def skill(name: str, level: int, stat: str = "reflex", **extra: Any) -> Any:
        return make_item(
            name,
            {"kind": "skill", "level": level, "stat": stat, **extra},
            id=f"skill-{name.lower()}",
        )

    return [
        skill("Handgun", 4),
        skill("Rifle", 6),
        skill("Melee", 3),
        skill("Karate", 3, is_martial=True),
        skill("Brawling", 2, is_martial=True),
        skill("Awareness", 2, stat="intelligence", is_chipped=True, chip_level=5),
        make_item(
            "Militech Arms Avenger",
            {
                "kind": "weapon",
                "weapon_type": "Pistol",
                "rof": 2,
                "shots": 12,
                "shots_left": 12,
                "damage": "2d6+1",
                "accuracy": 1,
                "reliability": "very",
                "caliber": "medium",
            },
            id="pistol",
            equipped=True,
        ),
        make_item(
            "Militech Ronin Light Assault",
            {
                "kind": "weapon",
                "weapon_type": "Rifle",
                "attack_type": "Auto",
                "rof": 30,
                "shots": 30,
                "shots_left": 30,
                "damage": "2d6",
                "range": 400,
                "caliber": "assault",
            },
            id="rifle",
            equipped=True,
        ),
        make_item(
            "Kendachi Monoblade",
            {
                "kind": "weapon",
                "weapon_type": "Melee",
                "attack_type": "Mono",
                "attack_skill": "Melee",
                "damage": "2d6",
                "damage_type": "monoblade",
                "range": 1,
            },
            id="katana",
            equipped=True,
        ),
        make_item(
            "Martial Arts",
            {
                "kind": "weapon",
                "weapon_type": "Melee",
                "attack_type": "Martial",
                "damage": "0",
                "range": 1,
            },
            id="martial",
        ),
        make_item(
            "Fragmentation Grenade",
            {
                "kind": "ordnance",
                "damage": "3d6",
                "range": 30,
                "charges": 1,
                "template_type": "circle",
                "remove_on_zero": True,
            },
            id="grenade",
        ),
        make_item(
            "Kevlar Vest",
            {
                "kind": "armor",
                "coverage": {"Torso": {"stopping_power": 10}},
            },
            id="vest",
            equipped=True,
        ),
    ]


@pytest.fixture
def solo(solo_items: list[Any]) -> Any:
    """Create the attacking solo.

    Reflex 8, body 8 (strength bonus +1), intelligence 6.

    Returns:
        Actor instance.
    """
    from cyberpunk_combat.models.actor import Actor

    return Actor.model_validate(
        {
            "id": "solo",
            "name": "Morgan Blackhand",
            "stats": {
                "intelligence": {"base": 6},
                "reflex": {"base": 8},
                "technique": {"base": 5},
                "cool": {"base": 7},
                "attractiveness": {"base": 5},
                "luck": {"base": 6},
                "movement": {"base": 6},
                "body": {"base": 8},
                "empathy": {"base": 6},
            },
            "items": [item.model_dump() for item in solo_items],
        }
    )


@pytest.fixture
def ganger() -> Any:
    """Create an unarmed target with body 6.

    Returns:
        Actor instance.
    """
    from cyberpunk_combat.models.actor import Actor

    return Actor.model_validate(
        {
            "id": "ganger",
            "name": "Maelstrom Ganger",
            "stats": {"reflex": {"base": 6}, "body": {"base": 6}},
        }
    )


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def store(solo: Any, ganger: Any) -> Any:
    """Create an in-memory store holding the solo and the ganger.

    Returns:
        InMemoryEntityStore instance.
    """
    from cyberpunk_combat.storage.store import InMemoryEntityStore

    return InMemoryEntityStore([solo, ganger])


@pytest.fixture
def sink() -> Any:
    """Create a collecting presentation sink.

    Returns:
        CollectingSink instance.
    """
    from cyberpunk_combat.engine.presentation import CollectingSink

    return CollectingSink()


@pytest.fixture
def engine(store: Any, rng: ScriptedRandomSource, sink: Any) -> Any:
    """Create a combat engine using the scripted random source.

    The fumble table shares the scripted source, so a fumble consumes one
    more queued face after the action's own rolls.

    Returns:
        CombatEngine instance.
    """
    from cyberpunk_combat.engine.dispatcher import CombatEngine

    return CombatEngine(store, random_source=rng, sink=sink)
