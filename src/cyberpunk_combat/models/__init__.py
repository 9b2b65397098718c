"""Pydantic V2 schemas for actors, items and combat results.

Submodules:
    enums: Closed vocabularies (stats, weapon types, fire modes, conditions)
    items: Item envelope with a tagged payload union
    actor: Actors, stats and hit locations
    rolls: Rolled dice as data
    combat: Attack context, modifiers, results, saves and checks

Example:
    >>> from cyberpunk_combat.models import Actor, make_item
    >>> solo = Actor(name="Morgan Blackhand")
    >>> rifle = make_item("Militech Ronin", {"kind": "weapon", "weapon_type": "Rifle"})
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from cyberpunk_combat.models.enums import (
    AttackProtocol,
    Condition,
    CyberTerminus,
    FireMode,
    FumbleSeverity,
    ItemKind,
    MartialAction,
    MeleeDamageType,
    PreconditionFailure,
    RangeBracket,
    Reliability,
    StatName,
    TemplateType,
    WeaponType,
)

# =============================================================================
# Items & Actors
# =============================================================================
from cyberpunk_combat.models.items import (
    ArmorCoverage,
    ArmorData,
    AttackProfile,
    CyberwareData,
    GearData,
    Item,
    OrdnanceData,
    SkillData,
    WeaponData,
    active_weapon,
    armor_coverage,
    make_item,
)
from cyberpunk_combat.models.actor import (
    Actor,
    HitLocation,
    Stat,
    Stats,
    default_hit_locations,
)

# =============================================================================
# Rolls & Combat
# =============================================================================
from cyberpunk_combat.models.rolls import DiceGroup, DieResult, RollOutcome
from cyberpunk_combat.models.combat import (
    AttackContext,
    AttackModifiers,
    AttackOutcome,
    AttackResult,
    CheckResult,
    DamageRoll,
    FumbleResult,
    LocationRoll,
    MinimumBodyPenalty,
    ModifierTerm,
    SaveResult,
    ScatterResult,
)


__all__ = [
    # Enums
    "AttackProtocol",
    "Condition",
    "CyberTerminus",
    "FireMode",
    "FumbleSeverity",
    "ItemKind",
    "MartialAction",
    "MeleeDamageType",
    "PreconditionFailure",
    "RangeBracket",
    "Reliability",
    "StatName",
    "TemplateType",
    "WeaponType",
    # Items
    "ArmorCoverage",
    "ArmorData",
    "AttackProfile",
    "CyberwareData",
    "GearData",
    "Item",
    "OrdnanceData",
    "SkillData",
    "WeaponData",
    "active_weapon",
    "armor_coverage",
    "make_item",
    # Actors
    "Actor",
    "HitLocation",
    "Stat",
    "Stats",
    "default_hit_locations",
    # Rolls
    "DiceGroup",
    "DieResult",
    "RollOutcome",
    # Combat
    "AttackContext",
    "AttackModifiers",
    "AttackOutcome",
    "AttackResult",
    "CheckResult",
    "DamageRoll",
    "FumbleResult",
    "LocationRoll",
    "MinimumBodyPenalty",
    "ModifierTerm",
    "SaveResult",
    "ScatterResult",
]
