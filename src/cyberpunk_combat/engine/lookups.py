"""Static rules lookups.

Small pure functions over the tables in cyberpunk_combat.core.constants:
body type modifier, strength damage bonus, range brackets and their DCs,
default attack skills and display labels.
"""

from __future__ import annotations

from cyberpunk_combat.core.constants import (
    AUTOMATIC_ATTACK_TYPES,
    CALIBER_LABELS,
    DEFAULT_ATTACK_SKILLS,
    EFFECT_ICONS,
    EFFECT_LABELS,
    FIRE_MODE_LABELS,
    MELEE_ATTACK_TYPES,
    MELEE_DAMAGE_TYPE_LABELS,
    ORDNANCE_LINE_LABEL,
    RANGE_DCS,
    RANGE_LABELS,
    WEAPON_SUBTYPE_LABELS,
)
from cyberpunk_combat.core.logging import get_logger
from cyberpunk_combat.models.enums import FireMode, RangeBracket, WeaponType
from cyberpunk_combat.models.items import Item, OrdnanceData, WeaponData, active_weapon


logger = get_logger(__name__)


# =============================================================================
# Body
# =============================================================================


def body_type_modifier(body: int) -> int:
    """Body type modifier (BTM) for a body total.

    Example:
        >>> body_type_modifier(6)
        2
    """
    if body <= 2:
        return 0
    if body <= 4:
        return 1
    if body <= 7:
        return 2
    if body <= 9:
        return 3
    if body == 10:
        return 4
    return 5


def strength_damage_bonus(body: int) -> int:
    """Melee damage bonus for a body total.

    Example:
        >>> strength_damage_bonus(2)
        -2
        >>> strength_damage_bonus(13)
        5
    """
    btm = body_type_modifier(body)
    if btm < 5:
        return btm - 2
    if body <= 12:
        return 4
    if body <= 14:
        return 5
    return 8


# =============================================================================
# Range
# =============================================================================


def range_dc(bracket: RangeBracket | str) -> int:
    """To-hit DC of a range bracket; unknown brackets fall back to close."""
    dc = RANGE_DCS.get(str(bracket))
    if dc is None:
        logger.warning("Unknown range bracket", bracket=str(bracket))
        return RANGE_DCS[RangeBracket.CLOSE]
    return dc


def resolve_range(bracket: RangeBracket | str, weapon_range: int) -> float:
    """Distance in meters represented by a bracket for a weapon.

    Example:
        >>> resolve_range(RangeBracket.MEDIUM, 50)
        25.0
    """
    match RangeBracket(bracket):
        case RangeBracket.POINT_BLANK:
            return 1.0
        case RangeBracket.CLOSE:
            return weapon_range / 4
        case RangeBracket.MEDIUM:
            return weapon_range / 2
        case RangeBracket.LONG:
            return float(weapon_range)
        case RangeBracket.EXTREME:
            return weapon_range * 2.0


def range_bracket_for_distance(distance: float, weapon_range: int) -> RangeBracket:
    """Pick the bracket a measured distance falls into.

    Example:
        >>> range_bracket_for_distance(10, 50)
        <RangeBracket.CLOSE: 'RangeClose'>
    """
    if distance <= 1:
        return RangeBracket.POINT_BLANK
    if distance <= weapon_range / 4:
        return RangeBracket.CLOSE
    if distance <= weapon_range / 2:
        return RangeBracket.MEDIUM
    if distance <= weapon_range:
        return RangeBracket.LONG
    return RangeBracket.EXTREME


def range_label(bracket: RangeBracket | str, actual_range: float) -> str:
    """Display label of a bracket, e.g. ``Close (<12.5m)``."""
    template = RANGE_LABELS.get(str(bracket))
    if template is None:
        return str(bracket)
    shown = int(actual_range) if float(actual_range).is_integer() else actual_range
    return template.format(range=shown)


def fire_mode_label(fire_mode: FireMode | str) -> str:
    return FIRE_MODE_LABELS.get(str(fire_mode), str(fire_mode))


# =============================================================================
# Weapons
# =============================================================================


def default_attack_skill(weapon_type: WeaponType | str | None) -> str | None:
    """First default skill of a weapon type, if any."""
    if weapon_type is None:
        return None
    skills = DEFAULT_ATTACK_SKILLS.get(str(weapon_type), ())
    return skills[0] if skills else None


def is_ranged(weapon: WeaponData) -> bool:
    """Whether a weapon attacks at range.

    Melee weapons, and exotic weapons with a melee-like attack type,
    are melee-class.
    """
    if weapon.weapon_type == WeaponType.MELEE:
        return False
    if weapon.weapon_type == WeaponType.EXOTIC and weapon.attack_type in MELEE_ATTACK_TYPES:
        return False
    return True


def available_fire_modes(weapon: WeaponData) -> list[FireMode]:
    """Fire modes a weapon can use; automatics get every mode."""
    if weapon.attack_type in AUTOMATIC_ATTACK_TYPES:
        return [
            FireMode.FULL_AUTO,
            FireMode.SUPPRESSIVE,
            FireMode.THREE_ROUND_BURST,
            FireMode.SINGLE_SHOT,
        ]
    return [FireMode.SINGLE_SHOT]


# =============================================================================
# Labels
# =============================================================================


def effect_label(effect: str | None) -> str | None:
    if not effect:
        return None
    return EFFECT_LABELS.get(effect, effect)


def effect_icon(effect: str | None) -> str | None:
    if not effect:
        return None
    return EFFECT_ICONS.get(effect)


def weapon_line_type(item: Item) -> str:
    """Short weapon description line for chat cards.

    Ordnance and exotics show their effect, melee weapons their damage
    class, ranged weapons caliber and subtype.
    """
    if isinstance(item.payload, OrdnanceData):
        label = effect_label(item.payload.effect)
        return f"{ORDNANCE_LINE_LABEL} · {label}" if label else ORDNANCE_LINE_LABEL

    weapon = active_weapon(item)
    if weapon is None:
        return ""

    if weapon.weapon_type == WeaponType.EXOTIC:
        label = effect_label(weapon.effect)
        return f"Exotic · {label}" if label else "Exotic"

    if weapon.weapon_type == WeaponType.MELEE:
        label = MELEE_DAMAGE_TYPE_LABELS.get(weapon.damage_type)
        return f"Melee · {label}" if label else "Melee"

    subtype = WEAPON_SUBTYPE_LABELS.get(str(weapon.weapon_type), str(weapon.weapon_type))
    caliber = CALIBER_LABELS.get(weapon.caliber) if weapon.caliber else None
    return f"{caliber} {subtype}" if caliber else subtype


__all__ = [
    "body_type_modifier",
    "strength_damage_bonus",
    "range_dc",
    "resolve_range",
    "range_bracket_for_distance",
    "range_label",
    "fire_mode_label",
    "default_attack_skill",
    "is_ranged",
    "available_fire_modes",
    "effect_label",
    "effect_icon",
    "weapon_line_type",
]
