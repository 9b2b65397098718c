"""Closed vocabularies used across the combat engine.

Enum values match the keys stored in character and item documents so that
raw document data validates directly into the models.
"""

from __future__ import annotations

from enum import StrEnum


class StatName(StrEnum):
    """Actor statistics."""

    INTELLIGENCE = "intelligence"
    REFLEX = "reflex"
    TECHNIQUE = "technique"
    COOL = "cool"
    ATTRACTIVENESS = "attractiveness"
    LUCK = "luck"
    MOVEMENT = "movement"
    BODY = "body"
    EMPATHY = "empathy"


class ItemKind(StrEnum):
    """Item document types."""

    SKILL = "skill"
    WEAPON = "weapon"
    ARMOR = "armor"
    CYBERWARE = "cyberware"
    ORDNANCE = "ordnance"
    VEHICLE = "vehicle"
    MISC = "misc"
    AMMO = "ammo"
    PROGRAM = "program"
    ROLE = "role"
    TOOL = "tool"
    DRUG = "drug"


class WeaponType(StrEnum):
    """Weapon classes, each with default attack skills."""

    PISTOL = "Pistol"
    SMG = "SMG"
    SHOTGUN = "Shotgun"
    RIFLE = "Rifle"
    HEAVY = "Heavy"
    BOW = "Bow"
    CROSSBOW = "Crossbow"
    MELEE = "Melee"
    EXOTIC = "Exotic"


class Reliability(StrEnum):
    """Weapon reliability, keys the fumble table."""

    VERY = "very"
    STANDARD = "standard"
    UNRELIABLE = "unreliable"


class FireMode(StrEnum):
    """Ways of discharging a ranged weapon."""

    FULL_AUTO = "FullAuto"
    THREE_ROUND_BURST = "ThreeRoundBurst"
    SUPPRESSIVE = "Suppressive"
    SINGLE_SHOT = "SingleShot"


class RangeBracket(StrEnum):
    """Range brackets, each with a fixed to-hit DC."""

    POINT_BLANK = "RangePointBlank"
    CLOSE = "RangeClose"
    MEDIUM = "RangeMedium"
    LONG = "RangeLong"
    EXTREME = "RangeExtreme"


class MartialAction(StrEnum):
    """Martial arts techniques."""

    DODGE = "Dodge"
    BLOCK_PARRY = "BlockParry"
    STRIKE = "Strike"
    KICK = "Kick"
    DISARM = "Disarm"
    SWEEP_TRIP = "SweepTrip"
    GRAPPLE = "Grapple"
    HOLD = "Hold"
    CHOKE = "Choke"
    THROW = "Throw"
    ESCAPE = "Escape"


class CyberTerminus(StrEnum):
    """Cyberlimb damage multipliers for melee."""

    NONE = "NoCyberlimb"
    X2 = "CyberTerminusX2"
    X3 = "CyberTerminusX3"


class TemplateType(StrEnum):
    """Area shapes for ordnance."""

    CIRCLE = "circle"
    CONE = "cone"
    BEAM = "beam"


class MeleeDamageType(StrEnum):
    """Melee weapon damage classes."""

    BLUNT = "blunt"
    EDGED = "edged"
    SPIKE = "spike"
    MONOBLADE = "monoblade"


class Condition(StrEnum):
    """Actor status flags read or written by the engine."""

    BLINDED = "blinded"
    FAST_DRAW = "fast-draw"
    ACTION_SURGE = "action-surge"
    RESTRAINED = "restrained"
    GRAPPLING = "grappling"
    PRONE = "prone"
    SHOCKED = "shocked"
    POISONED = "poisoned"
    UNCONSCIOUS = "unconscious"
    STABILIZED = "stabilized"
    DEAD = "dead"
    LIGHTLY_WOUNDED = "lightly-wounded"
    SERIOUSLY_WOUNDED = "seriously-wounded"
    CRITICALLY_WOUNDED = "critically-wounded"
    MORTALLY_WOUNDED_0 = "mortally-wounded-0"
    MORTALLY_WOUNDED_1 = "mortally-wounded-1"
    MORTALLY_WOUNDED_2 = "mortally-wounded-2"
    MORTALLY_WOUNDED_3 = "mortally-wounded-3"
    MORTALLY_WOUNDED_4 = "mortally-wounded-4"
    MORTALLY_WOUNDED_5 = "mortally-wounded-5"
    MORTALLY_WOUNDED_6 = "mortally-wounded-6"


class FumbleSeverity(StrEnum):
    """Outcome tiers of the fumble table."""

    STUMBLE = "stumble"
    LOSS = "loss"
    MARK = "mark"
    TURNING_POINT = "turning_point"


class AttackProtocol(StrEnum):
    """Resolution branches selected by the dispatch gate."""

    SINGLE_SHOT = "single_shot"
    THREE_ROUND_BURST = "three_round_burst"
    FULL_AUTO = "full_auto"
    SUPPRESSIVE = "suppressive"
    MELEE_STRIKE = "melee_strike"
    MARTIAL_TECHNIQUE = "martial_technique"
    AREA_ORDNANCE = "area_ordnance"


class PreconditionFailure(StrEnum):
    """Reasons an attack aborts before any roll."""

    NOT_OWNED = "NotOwned"
    NO_AMMO = "NoAmmo"
    NO_CHARGES = "NoCharges"


__all__ = [
    "StatName",
    "ItemKind",
    "WeaponType",
    "Reliability",
    "FireMode",
    "RangeBracket",
    "MartialAction",
    "CyberTerminus",
    "TemplateType",
    "MeleeDamageType",
    "Condition",
    "FumbleSeverity",
    "AttackProtocol",
    "PreconditionFailure",
]
