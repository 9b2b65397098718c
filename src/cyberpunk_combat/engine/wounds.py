"""Wound states, thresholds and wound-driven stat loss.

Damage is tracked in wound slots, four per wound state. Wound state
degrades reflex, intelligence and cool, and lowers the stun and death
save thresholds.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from cyberpunk_combat.core.constants import (
    DEATH_THRESHOLD_OFFSET,
    WOUND_CONDITIONS,
    WOUND_SLOTS_PER_STATE,
)
from cyberpunk_combat.models.enums import Condition


if TYPE_CHECKING:
    from collections.abc import Callable

    from cyberpunk_combat.models.actor import Actor, Stat, Stats


def wound_state(damage: int) -> int:
    """Wound state for accumulated damage.

    Example:
        >>> wound_state(0), wound_state(4), wound_state(5)
        (0, 1, 2)
    """
    if damage <= 0:
        return 0
    return math.ceil(damage / WOUND_SLOTS_PER_STATE)


def stun_threshold(body_total: int, damage: int) -> int:
    """Stun saves succeed on a 1d10 roll below this value."""
    return body_total - wound_state(damage) + 1


def death_threshold(body_total: int, damage: int) -> int:
    return stun_threshold(body_total, damage) + DEATH_THRESHOLD_OFFSET


def _degrade(stat: Stat, change: Callable[[int], int]) -> None:
    new_total = change(stat.total)
    stat.wound_mod = -(stat.total - new_total)
    stat.total = new_total


def apply_wound_penalties(stats: Stats, state: int) -> None:
    """Degrade already-computed stat totals for a wound state.

    Serious wounds cost two reflex; critical wounds halve reflex,
    intelligence and cool; mortal wounds cut them to a third. Each
    degraded stat records the loss in ``wound_mod``.

    Args:
        stats: Stat block with totals already computed.
        state: Current wound state.
    """
    if state >= 4:
        for stat in (stats.reflex, stats.intelligence, stats.cool):
            _degrade(stat, lambda total: math.ceil(total / 3))
    elif state == 3:
        for stat in (stats.reflex, stats.intelligence, stats.cool):
            _degrade(stat, lambda total: math.ceil(total / 2))
    elif state == 2:
        _degrade(stats.reflex, lambda total: total - 2)


def wound_condition(state: int) -> Condition | None:
    """Condition marker for a wound state; states past mortal 6 keep it."""
    if state <= 0:
        return None
    index = min(state, len(WOUND_CONDITIONS)) - 1
    return Condition(WOUND_CONDITIONS[index])


def sync_wound_condition(actor: Actor) -> Condition | None:
    """Replace the actor's wound marker with the one for its damage.

    Args:
        actor: Actor whose conditions are updated in place.

    Returns:
        The active wound marker, or None when unhurt.
    """
    markers = {Condition(value) for value in WOUND_CONDITIONS}
    current = wound_condition(wound_state(actor.damage))
    conditions = {c for c in actor.conditions if c not in markers}
    if current is not None:
        conditions.add(current)
    actor.conditions = conditions
    return current


def clamp_damage(damage: int, max_health: int) -> int:
    """Keep accumulated damage within [0, max_health]."""
    return max(0, min(damage, max_health))


__all__ = [
    "wound_state",
    "clamp_damage",
    "stun_threshold",
    "death_threshold",
    "apply_wound_penalties",
    "wound_condition",
    "sync_wound_condition",
]
