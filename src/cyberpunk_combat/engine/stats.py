"""Derived-stat calculation.

``prepare_actor`` is the data-preparation pass run before an actor is
used in combat. It works on a deep copy and recomputes every derived
value from persisted fields, so calling it any number of times gives
the same result and never accumulates onto a previous pass.
"""

from __future__ import annotations

import math

from cyberpunk_combat.core.logging import get_logger
from cyberpunk_combat.engine.armor import stack_armor
from cyberpunk_combat.engine.lookups import body_type_modifier
from cyberpunk_combat.engine.wounds import apply_wound_penalties, wound_state
from cyberpunk_combat.models.actor import Actor, Humanity
from cyberpunk_combat.models.items import ArmorData, CyberwareData, armor_coverage


logger = get_logger(__name__)


def build_hit_location_index(actor: Actor) -> dict[int, str]:
    """Map location-die faces to location names, resetting stopping power.

    Args:
        actor: Actor whose hit locations are reset in place.

    Returns:
        Face to location name.
    """
    lookup: dict[int, str] = {}
    for name, area in actor.hit_locations.items():
        area.stopping_power = 0
        for face in area.faces:
            lookup[face] = name
    return lookup


def resolve_skill_level(actor: Actor, skill_name: str | None) -> int:
    """Level an actor rolls with for a skill; missing skills are 0.

    Example:
        >>> resolve_skill_level(Actor(name="Morgan"), "Handgun")
        0
    """
    if not skill_name:
        return 0
    skill = actor.find_skill(skill_name)
    return skill.effective_level if skill is not None else 0


def prepare_actor(actor: Actor) -> Actor:
    """Compute every derived value of an actor.

    Steps, in order: stat totals from base and temp modifiers; hit
    location index; effective luck; reflex encumbrance and armor
    stacking; movement, body and carry weight; wound degradation;
    humanity.

    Args:
        actor: Actor as persisted.

    Returns:
        A prepared copy; the input is not modified.
    """
    prepared = actor.model_copy(deep=True)
    stats = prepared.stats

    for stat in stats.all():
        stat.total = stat.base + stat.temp_mod
        stat.armor_mod = None
        stat.wound_mod = None

    prepared.hit_loc_lookup = build_hit_location_index(prepared)

    luck = stats.luck
    luck.effective = max(0, luck.total - luck.spent)

    equipped = prepared.equipped_items()
    worn = [item for item in equipped if isinstance(item.payload, ArmorData)]
    cyberarmor = [
        item
        for item in equipped
        if isinstance(item.payload, CyberwareData) and armor_coverage(item)
    ]

    reflex = stats.reflex
    reflex.armor_mod = -sum(item.payload.encumbrance for item in worn)
    stack_armor(prepared, worn)
    stack_armor(prepared, cyberarmor)
    reflex.total = reflex.base + reflex.temp_mod + reflex.armor_mod

    movement = stats.movement
    movement.run = movement.total * 3
    movement.leap = movement.run // 4

    body = stats.body
    body.carry = body.total * 10
    body.lift = body.total * 40
    body.modifier = body_type_modifier(body.total)

    prepared.carry_weight = sum(item.weight for item in equipped)

    state = wound_state(prepared.damage)
    apply_wound_penalties(stats, state)

    empathy = stats.empathy
    loss = sum(
        item.payload.humanity_loss
        for item in equipped
        if isinstance(item.payload, CyberwareData)
    )
    base_humanity = empathy.base * 10
    empathy.humanity = Humanity(base=base_humanity, loss=loss, total=base_humanity - loss)
    empathy.total = empathy.base + empathy.temp_mod - math.floor(loss / 10)

    logger.debug(
        "Actor prepared",
        actor_id=prepared.id,
        wound_state=state,
        reflex=reflex.total,
        body=body.total,
    )
    return prepared


__all__ = [
    "build_hit_location_index",
    "resolve_skill_level",
    "prepare_actor",
]
