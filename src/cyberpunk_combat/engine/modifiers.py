"""Attack modifier aggregation.

Turns an AttackContext and the attacker's conditions into the ordered
list of additive terms that follow the attack die in a to-hit roll. The
order is kept stable for display; it does not affect the sum.
"""

from __future__ import annotations

import math

from cyberpunk_combat.core import constants as c
from cyberpunk_combat.engine.lookups import default_attack_skill, is_ranged
from cyberpunk_combat.engine.stats import resolve_skill_level
from cyberpunk_combat.models.actor import Actor
from cyberpunk_combat.models.combat import (
    AttackContext,
    AttackModifiers,
    MinimumBodyPenalty,
    ModifierTerm,
)
from cyberpunk_combat.models.enums import Condition, FireMode, RangeBracket, StatName
from cyberpunk_combat.models.items import AttackProfile, WeaponData


def minimum_body_penalty(minimum_body: int, body_total: int) -> MinimumBodyPenalty:
    """Penalty for a wielder whose body is below the weapon's minimum.

    Example:
        >>> minimum_body_penalty(8, 5).accuracy_penalty
        -6
    """
    deficit = minimum_body - body_total if minimum_body else 0
    if deficit <= 0:
        return MinimumBodyPenalty()
    return MinimumBodyPenalty(
        deficit=deficit,
        accuracy_penalty=c.MINIMUM_BODY_PENALTY_PER_POINT * deficit,
        rof_multiplier=c.MINIMUM_BODY_ROF_MULTIPLIER,
    )


def effective_rof(rof: int, penalty: MinimumBodyPenalty) -> int:
    """Rate of fire after the minimum body penalty, at least 1."""
    return max(1, math.floor(rof * penalty.rof_multiplier))


def resolve_attack_skill(weapon: AttackProfile) -> str | None:
    """Explicit attack skill, else the weapon type's first default skill."""
    if weapon.attack_skill:
        return weapon.attack_skill
    weapon_type = weapon.weapon_type if isinstance(weapon, WeaponData) else None
    return default_attack_skill(weapon_type)


def full_auto_bonus(bracket: RangeBracket, shots_left: int, rof: int) -> int:
    """Full auto to-hit modifier: one point per ten rounds, signed by range."""
    magnitude = min(shots_left, rof) // c.FULL_AUTO_ROUNDS_PER_BONUS
    if bracket == RangeBracket.CLOSE:
        return magnitude
    if bracket == RangeBracket.POINT_BLANK:
        return 0
    return -magnitude


def ranged_terms(context: AttackContext, weapon: AttackProfile) -> list[ModifierTerm]:
    """Situational terms of a ranged attack, in display order."""
    terms: list[ModifierTerm] = []

    def push(label: str, value: int) -> None:
        terms.append(ModifierTerm(label=label, value=value))

    if context.target_area:
        push("target_area", c.TARGET_AREA_PENALTY)
    if context.aim_rounds > 0:
        push("aim_rounds", context.aim_rounds)
    if context.ambush:
        push("ambush", c.AMBUSH_BONUS)
    if context.blinded:
        push("blinded", c.BLINDED_PENALTY)
    if context.dual_wield:
        push("dual_wield", c.DUAL_WIELD_PENALTY)
    if context.fast_draw:
        push("fast_draw", c.FAST_DRAW_PENALTY)
    if context.hipfire:
        push("hipfire", c.HIPFIRE_PENALTY)
    if context.ricochet:
        push("ricochet", c.RICOCHET_PENALTY)
    if context.running:
        push("running", c.RUNNING_PENALTY)
    if context.turning_to_face:
        push("turning_to_face", c.TURNING_TO_FACE_PENALTY)

    if isinstance(weapon, WeaponData):
        if context.fire_mode == FireMode.FULL_AUTO:
            push("full_auto", full_auto_bonus(context.range, weapon.shots_left, weapon.rof))
        elif context.fire_mode == FireMode.THREE_ROUND_BURST and context.range in (
            RangeBracket.CLOSE,
            RangeBracket.MEDIUM,
        ):
            push("three_round_burst", c.THREE_ROUND_BURST_BONUS)

    push("extra_mod", context.extra_mod)
    return terms


def melee_terms(context: AttackContext) -> list[ModifierTerm]:
    return [ModifierTerm(label="extra_mod", value=context.extra_mod)]


def build_modifiers(
    context: AttackContext,
    weapon: AttackProfile,
    attacker: Actor,
) -> AttackModifiers:
    """Build the ordered to-hit terms for an attack.

    Order: base stat (luck when blinded, else reflex), attack skill,
    ranged or melee situational terms, accuracy, then the attacker's
    condition penalties and the minimum body penalty.

    Args:
        context: The attack being resolved.
        weapon: Weapon or ordnance statistics.
        attacker: Prepared attacking actor.

    Returns:
        The aggregated modifiers.
    """
    stat_name = StatName.LUCK if attacker.has_condition(Condition.BLINDED) else StatName.REFLEX
    terms = [ModifierTerm(label=stat_name.value, value=attacker.stats.get(stat_name).total)]

    skill_name = resolve_attack_skill(weapon)
    if skill_name:
        terms.append(ModifierTerm(label=skill_name, value=resolve_skill_level(attacker, skill_name)))

    ranged = not isinstance(weapon, WeaponData) or is_ranged(weapon)
    terms.extend(ranged_terms(context, weapon) if ranged else melee_terms(context))

    if weapon.accuracy:
        terms.append(ModifierTerm(label="accuracy", value=weapon.accuracy))

    condition_penalties = (
        (Condition.FAST_DRAW, c.FAST_DRAW_PENALTY),
        (Condition.ACTION_SURGE, c.ACTION_SURGE_PENALTY),
        (Condition.RESTRAINED, c.RESTRAINED_PENALTY),
        (Condition.GRAPPLING, c.GRAPPLING_PENALTY),
    )
    for condition, penalty in condition_penalties:
        if attacker.has_condition(condition):
            terms.append(ModifierTerm(label=condition.value, value=penalty))

    penalty = minimum_body_penalty(weapon.minimum_body, attacker.stats.body.total)
    if penalty.accuracy_penalty:
        terms.append(ModifierTerm(label="minimum_body", value=penalty.accuracy_penalty))

    return AttackModifiers(
        stat=stat_name,
        skill_name=skill_name,
        terms=terms,
        minimum_body=penalty,
    )


__all__ = [
    "minimum_body_penalty",
    "effective_rof",
    "resolve_attack_skill",
    "full_auto_bonus",
    "ranged_terms",
    "melee_terms",
    "build_modifiers",
]
