"""Fumbles, saves and stat/skill checks.

The fumble table is the default fumble hook of the combat engine: a 1d10
whose severity bands shift with weapon reliability. Saves are roll-under
checks against the stun or death threshold. Stat and skill checks use the
exploding attack die and fail on a natural 1, which also rolls a fumble.

None of these functions mutate actors; callers apply the returned
results through the entity store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from cyberpunk_combat.core.config import get_settings
from cyberpunk_combat.core.constants import (
    ACTION_SURGE_PENALTY,
    FAST_DRAW_PENALTY,
    FUMBLE_TABLES,
)
from cyberpunk_combat.core.exceptions import RulesEngineError
from cyberpunk_combat.core.logging import get_logger
from cyberpunk_combat.engine.dice import default_random_source, is_natural_min
from cyberpunk_combat.engine.wounds import death_threshold, stun_threshold
from cyberpunk_combat.models.combat import (
    CheckResult,
    FumbleResult,
    ModifierTerm,
    SaveKind,
    SaveResult,
    render_formula,
)
from cyberpunk_combat.models.enums import Condition, FumbleSeverity, Reliability, StatName


if TYPE_CHECKING:
    from cyberpunk_combat.engine.dice import RandomSource
    from cyberpunk_combat.models.actor import Actor


logger = get_logger(__name__)

_SEVERITIES = list(FumbleSeverity)


# =============================================================================
# Fumbles
# =============================================================================


@runtime_checkable
class FumbleHook(Protocol):
    """Side effect fired once per action on a natural 1."""

    def trigger(self, actor: Actor, reliability: Reliability | None = None) -> FumbleResult | None:
        ...


def fumble_severity(face: int, reliability: Reliability | str | None = None) -> FumbleSeverity:
    """Severity of a fumble roll.

    Very reliable weapons never reach a turning point; unreliable ones
    never merely stumble.

    Example:
        >>> fumble_severity(8, Reliability.VERY)
        <FumbleSeverity.LOSS: 'loss'>
    """
    bands = FUMBLE_TABLES.get(str(reliability or Reliability.STANDARD), FUMBLE_TABLES["standard"])
    for highest, index in bands:
        if face <= highest:
            return _SEVERITIES[index]
    return _SEVERITIES[bands[-1][1]]


class FumbleTable:
    """Fumble hook rolling 1d10 on the reliability-keyed table.

    Example:
        >>> table = FumbleTable()
        >>> result = table.trigger(actor, Reliability.UNRELIABLE)
        >>> result.severity != FumbleSeverity.STUMBLE
        True
    """

    def __init__(self, random_source: RandomSource | None = None) -> None:
        self._rng = random_source or default_random_source()

    def trigger(self, actor: Actor, reliability: Reliability | None = None) -> FumbleResult:
        """Roll the fumble table for an actor.

        Args:
            actor: Actor who fumbled.
            reliability: Weapon reliability; None for non-weapon checks.

        Returns:
            The rolled severity.
        """
        reliability = Reliability(reliability or Reliability.STANDARD)
        roll = self._rng.roll("1d10")
        severity = fumble_severity(roll.total, reliability)
        logger.info(
            "Fumble rolled",
            actor_id=actor.id,
            reliability=reliability.value,
            face=roll.total,
            severity=severity.value,
        )
        return FumbleResult(
            actor_id=actor.id,
            reliability=reliability,
            roll=roll,
            severity=severity,
        )


# =============================================================================
# Saves
# =============================================================================


def _save_formula(penalty: int) -> str:
    if not penalty:
        return "1d10"
    return render_formula("1d10", [ModifierTerm(label="penalty", value=penalty)])


def _roll_save(
    save: SaveKind,
    threshold: int,
    condition: Condition,
    rng: RandomSource,
    penalty: int,
) -> SaveResult:
    roll = rng.roll(_save_formula(penalty))
    result = SaveResult(
        save=save,
        threshold=threshold,
        roll=roll,
        success=roll.total < threshold,
        condition=condition,
    )
    logger.info(
        "Save rolled",
        save=save,
        threshold=threshold,
        total=roll.total,
        success=result.success,
    )
    return result


def roll_stun_save(actor: Actor, rng: RandomSource, *, penalty: int = 0) -> SaveResult:
    """Stun (shock) save; failure leaves the actor shocked.

    Args:
        actor: Prepared actor.
        rng: Random source.
        penalty: Added to the roll, so positive values make the save harder.

    Returns:
        The save result.
    """
    threshold = stun_threshold(actor.stats.body.total, actor.damage)
    return _roll_save("stun", threshold, Condition.SHOCKED, rng, penalty)


def roll_poison_save(actor: Actor, rng: RandomSource, *, penalty: int = 0) -> SaveResult:
    """Poison save against the stun threshold; failure poisons."""
    threshold = stun_threshold(actor.stats.body.total, actor.damage)
    return _roll_save("poison", threshold, Condition.POISONED, rng, penalty)


def roll_death_save(actor: Actor, rng: RandomSource, *, penalty: int = 0) -> SaveResult:
    """Death save; failure kills."""
    threshold = death_threshold(actor.stats.body.total, actor.damage)
    return _roll_save("death", threshold, Condition.DEAD, rng, penalty)


# =============================================================================
# Stat & Skill Checks
# =============================================================================


def _condition_terms(actor: Actor) -> list[ModifierTerm]:
    terms = []
    if actor.has_condition(Condition.ACTION_SURGE):
        terms.append(ModifierTerm(label=Condition.ACTION_SURGE.value, value=ACTION_SURGE_PENALTY))
    if actor.has_condition(Condition.FAST_DRAW):
        terms.append(ModifierTerm(label=Condition.FAST_DRAW.value, value=FAST_DRAW_PENALTY))
    return terms


def _roll_check(
    name: str,
    actor: Actor,
    terms: list[ModifierTerm],
    difficulty: int,
    rng: RandomSource,
    fumble_hook: FumbleHook | None,
) -> CheckResult:
    roll = rng.roll(render_formula(get_settings().rules.attack_die, terms))
    natural_one = is_natural_min(roll)
    success = not natural_one and roll.total >= difficulty

    fumble = None
    if natural_one and fumble_hook is not None:
        fumble = fumble_hook.trigger(actor, None)

    logger.info(
        "Check rolled",
        check=name,
        actor_id=actor.id,
        difficulty=difficulty,
        total=roll.total,
        success=success,
    )
    return CheckResult(
        name=name,
        difficulty=difficulty,
        roll=roll,
        success=success,
        fumble=fumble,
    )


def roll_stat_check(
    actor: Actor,
    stat: StatName | str,
    difficulty: int,
    rng: RandomSource,
    *,
    extra_mod: int = 0,
    fumble_hook: FumbleHook | None = None,
) -> CheckResult:
    """Roll a stat against a difficulty.

    Args:
        actor: Prepared actor.
        stat: Stat to roll.
        difficulty: Total needed to succeed.
        rng: Random source.
        extra_mod: Free-form modifier.
        fumble_hook: Rolled on a natural 1.

    Returns:
        The check result.
    """
    stat_name = StatName(stat)
    terms = [ModifierTerm(label=stat_name.value, value=actor.stats.get(stat_name).total)]
    terms.extend(_condition_terms(actor))
    if extra_mod:
        terms.append(ModifierTerm(label="extra_mod", value=extra_mod))
    return _roll_check(stat_name.value, actor, terms, difficulty, rng, fumble_hook)


def roll_skill_check(
    actor: Actor,
    skill_name: str,
    difficulty: int,
    rng: RandomSource,
    *,
    extra_mod: int = 0,
    fumble_hook: FumbleHook | None = None,
) -> CheckResult:
    """Roll a skill plus its governing stat against a difficulty.

    A slotted chip replaces the trained level.

    Args:
        actor: Prepared actor.
        skill_name: Skill item name.
        difficulty: Total needed to succeed.
        rng: Random source.
        extra_mod: Free-form modifier.
        fumble_hook: Rolled on a natural 1.

    Returns:
        The check result.

    Raises:
        RulesEngineError: If the actor has no such skill.
    """
    skill = actor.find_skill(skill_name)
    if skill is None:
        raise RulesEngineError(
            f"Unknown skill: {skill_name}",
            details={"actor_id": actor.id},
        )

    terms = [ModifierTerm(label=skill_name, value=skill.effective_level)]
    if skill.stat is not None:
        terms.append(ModifierTerm(label=skill.stat.value, value=actor.stats.get(skill.stat).total))
    if extra_mod:
        terms.append(ModifierTerm(label="extra_mod", value=extra_mod))
    terms.extend(_condition_terms(actor))
    return _roll_check(skill_name, actor, terms, difficulty, rng, fumble_hook)


__all__ = [
    "FumbleHook",
    "FumbleTable",
    "fumble_severity",
    "roll_stun_save",
    "roll_poison_save",
    "roll_death_save",
    "roll_stat_check",
    "roll_skill_check",
]
