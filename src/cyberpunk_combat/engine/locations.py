"""Hit-location and damage resolution.

Each successful hit picks a body location, either forced by an aimed
shot or rolled against the target's hit-location table, and rolls its
own damage. Damage is kept per location rather than as one total.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from cyberpunk_combat.core.config import get_settings
from cyberpunk_combat.core.constants import DEFAULT_HIT_LOCATIONS, HIT_LOCATION_ALIASES
from cyberpunk_combat.core.logging import get_logger
from cyberpunk_combat.engine.dice import RandomSource
from cyberpunk_combat.models.actor import Actor
from cyberpunk_combat.models.combat import DamageRoll, LocationRoll
from cyberpunk_combat.models.rolls import RollOutcome


logger = get_logger(__name__)


def _location_table(target: Actor | None) -> dict[str, list[int]]:
    if target is not None and target.hit_locations:
        return {name: area.location for name, area in target.hit_locations.items()}
    return {name: list(faces) for name, faces in DEFAULT_HIT_LOCATIONS.items()}


def _face_lookup(target: Actor | None) -> dict[int, str]:
    if target is not None and target.hit_loc_lookup:
        return target.hit_loc_lookup
    lookup: dict[int, str] = {}
    for name, faces in _location_table(target).items():
        for face in range(faces[0], faces[-1] + 1):
            lookup[face] = name
    return lookup


def resolve_location(
    target: Actor | None,
    forced_area: str | None,
    rng: RandomSource,
) -> LocationRoll:
    """Pick the body location a hit lands on.

    A forced area (aimed shot) is used as given, reporting the first die
    face of that location. Otherwise the location die is rolled against
    the target's table, or the standard human table without a target.

    Args:
        target: Target actor, if known.
        forced_area: Aimed-at location, display or data name.
        rng: Random source.

    Returns:
        The location and the roll that selected it.
    """
    if forced_area:
        area = HIT_LOCATION_ALIASES.get(forced_area, forced_area)
        faces = _location_table(target).get(area)
        if not faces:
            logger.warning("Aimed location missing from table", area=area)
            return LocationRoll(location=area, roll=RollOutcome.fixed(0))
        return LocationRoll(location=area, roll=RollOutcome.fixed(faces[0]))

    roll = rng.roll(get_settings().rules.location_die)
    location = _face_lookup(target).get(roll.total)
    if location is None:
        logger.warning("Location die face not in table", face=roll.total)
        location = str(roll.total)
    return LocationRoll(location=location, roll=roll)


def resolve_damage(
    formula: str,
    variables: Mapping[str, Any] | None,
    location: str,
    rng: RandomSource,
) -> DamageRoll:
    """Roll one damage instance against a location.

    Args:
        formula: Damage formula, may reference ``@variables``.
        variables: Values such as ``strengthBonus``.
        location: Location the damage applies to.
        rng: Random source.

    Returns:
        The damage with its per-die breakdown.
    """
    roll = rng.roll(formula, variables)
    return DamageRoll(location=location, formula=formula, roll=roll)


def roll_located_damage(
    formula: str,
    variables: Mapping[str, Any] | None,
    target: Actor | None,
    forced_area: str | None,
    rng: RandomSource,
) -> DamageRoll:
    """Resolve a location, then roll damage against it."""
    hit = resolve_location(target, forced_area, rng)
    return resolve_damage(formula, variables, hit.location, rng)


__all__ = [
    "resolve_location",
    "resolve_damage",
    "roll_located_damage",
]
