"""Rules constants for Cyberpunk 2020 combat.

Tables here are keyed by the string values of the enums in
cyberpunk_combat.models.enums, so both raw strings and enum members can
be used for lookups.
"""

from __future__ import annotations

import math

# =============================================================================
# Armor
# =============================================================================

ARMOR_LAYER_BONUS: tuple[tuple[int, int], ...] = (
    (27, 0),
    (21, 2),
    (15, 3),
    (9, 3),
    (5, 4),
    (0, 5),
)
"""(minimum SP difference, bonus added to the higher layer), checked in order."""

ARMOR_CLEANSE_THRESHOLD = 20
"""Coverage maps larger than this are pruned to the new owner's locations."""

# =============================================================================
# Wounds
# =============================================================================

WOUND_SLOTS_PER_STATE = 4
"""Damage points per wound state."""

MAX_HEALTH = 40
"""Damage cap: ten wound states of four slots."""

DEATH_THRESHOLD_OFFSET = 3
"""Death save threshold sits this far above the stun threshold."""

WOUND_CONDITIONS: tuple[str, ...] = (
    "lightly-wounded",
    "seriously-wounded",
    "critically-wounded",
    "mortally-wounded-0",
    "mortally-wounded-1",
    "mortally-wounded-2",
    "mortally-wounded-3",
    "mortally-wounded-4",
    "mortally-wounded-5",
    "mortally-wounded-6",
)
"""Condition marker for wound states 1 through 10."""

# =============================================================================
# Hit Locations
# =============================================================================

DEFAULT_HIT_LOCATIONS: dict[str, tuple[int, ...]] = {
    "Head": (1,),
    "Torso": (2, 4),
    "rArm": (5,),
    "lArm": (6,),
    "lLeg": (7, 8),
    "rLeg": (9, 10),
}

HIT_LOCATION_ALIASES: dict[str, str] = {
    "Head": "Head",
    "Torso": "Torso",
    "LeftArm": "lArm",
    "RightArm": "rArm",
    "LeftLeg": "lLeg",
    "RightLeg": "rLeg",
}
"""Targeted-area names mapped to hit-location keys."""

# =============================================================================
# Ranged Combat
# =============================================================================

RANGE_DCS: dict[str, int] = {
    "RangePointBlank": 10,
    "RangeClose": 15,
    "RangeMedium": 20,
    "RangeLong": 25,
    "RangeExtreme": 30,
}

RANGE_LABELS: dict[str, str] = {
    "RangePointBlank": "Point Blank",
    "RangeClose": "Close (<{range}m)",
    "RangeMedium": "Medium (<{range}m)",
    "RangeLong": "Long (<{range}m)",
    "RangeExtreme": "Extreme (<{range}m)",
}

FIRE_MODE_LABELS: dict[str, str] = {
    "FullAuto": "Full Auto",
    "ThreeRoundBurst": "Three-Round Burst",
    "SingleShot": "Single Shot",
    "Suppressive": "Suppressive Fire",
}

AUTOMATIC_ATTACK_TYPES: frozenset[str] = frozenset({"Auto", "Autoshotgun"})
"""Attack types that can use every fire mode."""

MELEE_ATTACK_TYPES: frozenset[str] = frozenset({"Melee", "Mono", "Martial", "Beast"})

MARTIAL_ATTACK_TYPE = "Martial"

FULL_AUTO_ROUNDS_PER_BONUS = 10
"""Full auto to-hit modifier is one point per this many rounds."""

THREE_ROUND_BURST_SIZE = 3
THREE_ROUND_BURST_BONUS = 3

TARGET_AREA_PENALTY = -4
AMBUSH_BONUS = 5
BLINDED_PENALTY = -3
DUAL_WIELD_PENALTY = -3
FAST_DRAW_PENALTY = -3
HIPFIRE_PENALTY = -2
RICOCHET_PENALTY = -5
RUNNING_PENALTY = -3
TURNING_TO_FACE_PENALTY = -2

ACTION_SURGE_PENALTY = -3
RESTRAINED_PENALTY = -2
GRAPPLING_PENALTY = -2

MINIMUM_BODY_PENALTY_PER_POINT = -2
MINIMUM_BODY_ROF_MULTIPLIER = 0.5

DEFAULT_SUPPRESSIVE_DAMAGE = "1d6"
SUPPRESSIVE_HITS_DIE = "1d6"
BURST_HITS_DIE = "1d3"
MIN_ZONE_WIDTH = 2

# =============================================================================
# Melee & Martial Arts
# =============================================================================

UNTRAINED_MARTIAL_ART = "Brawling"

MARTIAL_DAMAGE_FORMULAS: dict[str, str] = {
    "Strike": "1d3",
    "Kick": "1d6",
    "Throw": "1d6",
    "Choke": "1d6",
}
"""Techniques without an entry deal no damage."""

CYBER_TERMINUS_MULTIPLIERS: dict[str, int] = {
    "NoCyberlimb": 1,
    "CyberTerminusX2": 2,
    "CyberTerminusX3": 3,
}

# =============================================================================
# Skills
# =============================================================================

DEFAULT_ATTACK_SKILLS: dict[str, tuple[str, ...]] = {
    "Pistol": ("Handgun",),
    "SMG": ("Submachinegun",),
    "Shotgun": ("Rifle",),
    "Rifle": ("Rifle",),
    "Heavy": ("HeavyWeapons",),
    "Bow": ("Archery",),
    "Crossbow": ("Archery",),
    "Melee": ("Fencing", "Melee", "Brawling"),
    "Exotic": (),
}

# =============================================================================
# Ordnance Scatter
# =============================================================================

SCATTER_DIRECTIONS: dict[int, tuple[str, float]] = {
    1: ("S", math.pi / 2),
    2: ("SW", 3 * math.pi / 4),
    3: ("S", math.pi / 2),
    4: ("SE", math.pi / 4),
    5: ("W", math.pi),
    6: ("E", 0.0),
    7: ("NW", -3 * math.pi / 4),
    8: ("N", -math.pi / 2),
    9: ("NE", -math.pi / 4),
    10: ("N", -math.pi / 2),
}
"""1d10 face to (compass label, angle in radians); y grows downwards."""

# =============================================================================
# Fumbles
# =============================================================================

FUMBLE_TABLES: dict[str, tuple[tuple[int, int], ...]] = {
    "very": ((7, 0), (9, 1), (10, 2)),
    "standard": ((4, 0), (7, 1), (9, 2), (10, 3)),
    "unreliable": ((4, 1), (7, 2), (10, 3)),
}
"""Per reliability: (highest 1d10 face, severity index), checked in order."""

# =============================================================================
# Presentation
# =============================================================================

EFFECT_LABELS: dict[str, str] = {
    "confusion": "Confusion",
    "poisoned": "Poisoned",
    "tearing": "Tearing",
    "unconscious": "Unconscious",
    "stunAt2": "Stun at -2",
    "stunAt4": "Stun at -4",
    "burning": "Burning",
    "acid": "Acid",
    "microwave": "Microwave",
}

EFFECT_ICONS: dict[str, str] = {
    "confusion": "confused",
    "poisoned": "poisoned",
    "tearing": "tearing",
    "unconscious": "unconscious",
    "stunAt2": "shocked",
    "stunAt4": "shocked",
    "burning": "burning",
    "acid": "acid",
    "microwave": "microwave",
}

MELEE_DAMAGE_TYPE_LABELS: dict[str, str] = {
    "blunt": "Blunt",
    "edged": "Edged",
    "spike": "Spike",
    "monoblade": "Monoblade",
}

WEAPON_SUBTYPE_LABELS: dict[str, str] = {
    "Pistol": "Pistol",
    "SMG": "SMG",
    "Shotgun": "Shotgun",
    "Rifle": "Rifle",
    "Heavy": "Heavy Weapon",
    "Bow": "Bow",
    "Crossbow": "Crossbow",
}

CALIBER_LABELS: dict[str, str] = {
    "light": "Light",
    "medium": "Medium",
    "heavy": "Heavy",
    "veryHeavy": "Very Heavy",
    "assault": "Assault",
    "sniper": "Sniper",
    "antiMateriel": "Anti-Materiel",
}

ORDNANCE_LINE_LABEL = "Ordnance"

# =============================================================================
# Chat Templates & Notifications
# =============================================================================

MULTI_HIT_TEMPLATE = "multi-hit"
SUPPRESSIVE_TEMPLATE = "suppressive"
MELEE_HIT_TEMPLATE = "melee-hit"
MARTIAL_TEMPLATE = "martial"
ORDNANCE_HIT_TEMPLATE = "ordnance-hit"
FUMBLE_TEMPLATE = "fumble"
SAVE_TEMPLATE = "save-roll"
CHECK_TEMPLATE = "skill-check"

STRIKE_LABEL = "Strike"

PRECONDITION_MESSAGES: dict[str, str] = {
    "NotOwned": "This item isn't owned by anyone.",
    "NoAmmo": "Out of ammo, reload first.",
    "NoCharges": "No charges left.",
}
