"""Combat resolution engine for Cyberpunk 2020.

Submodules:
    dice: RandomSource protocol and the d20-backed source
    stats: Derived-stat preparation
    armor: Armor layering and re-fitting
    wounds: Wound states, thresholds and stat degradation
    modifiers: To-hit modifier aggregation
    locations: Hit-location and damage resolution
    checks: Fumble table, saves, stat and skill checks
    presentation: Presentation sink protocol
    dispatcher: CombatEngine and the fire-mode protocols

Example:
    >>> from cyberpunk_combat.engine import CombatEngine
    >>> from cyberpunk_combat.storage import InMemoryEntityStore
    >>> engine = CombatEngine(InMemoryEntityStore([solo]))
    >>> outcome = engine.attack(AttackContext(attacker=solo, weapon=pistol))
"""

from __future__ import annotations

from cyberpunk_combat.engine.armor import fit_armor, layer_bonus, merge_armor, stack_armor
from cyberpunk_combat.engine.checks import (
    FumbleHook,
    FumbleTable,
    fumble_severity,
    roll_death_save,
    roll_poison_save,
    roll_skill_check,
    roll_stat_check,
    roll_stun_save,
)
from cyberpunk_combat.engine.dice import (
    D20RandomSource,
    RandomSource,
    default_random_source,
    is_natural_max,
    is_natural_min,
)
from cyberpunk_combat.engine.dispatcher import CombatEngine, select_protocol
from cyberpunk_combat.engine.locations import resolve_damage, resolve_location
from cyberpunk_combat.engine.modifiers import build_modifiers, minimum_body_penalty
from cyberpunk_combat.engine.presentation import CollectingSink, PresentationSink
from cyberpunk_combat.engine.stats import prepare_actor
from cyberpunk_combat.engine.wounds import (
    apply_wound_penalties,
    death_threshold,
    stun_threshold,
    wound_state,
)


__all__ = [
    # Dice
    "RandomSource",
    "D20RandomSource",
    "default_random_source",
    "is_natural_min",
    "is_natural_max",
    # Stats, armor, wounds
    "prepare_actor",
    "merge_armor",
    "layer_bonus",
    "stack_armor",
    "fit_armor",
    "wound_state",
    "stun_threshold",
    "death_threshold",
    "apply_wound_penalties",
    # Attacks
    "build_modifiers",
    "minimum_body_penalty",
    "resolve_location",
    "resolve_damage",
    "select_protocol",
    "CombatEngine",
    # Checks
    "FumbleHook",
    "FumbleTable",
    "fumble_severity",
    "roll_stun_save",
    "roll_poison_save",
    "roll_death_save",
    "roll_stat_check",
    "roll_skill_check",
    # Presentation
    "PresentationSink",
    "CollectingSink",
]
