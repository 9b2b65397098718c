"""Item documents as a tagged union.

Every item shares one envelope (id, name, image, equipped flag, weight)
and carries a kind-specific payload. The payload's ``kind`` field is the
discriminator, so raw document dictionaries validate into the right
payload class.

Weapons can live on a weapon item or nested inside a cyberware item;
``active_weapon`` hides that difference and ``weapon_update_path`` gives
the store path for mutating the right one.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from cyberpunk_combat.models.enums import (
    ItemKind,
    MeleeDamageType,
    Reliability,
    StatName,
    TemplateType,
    WeaponType,
)


# =============================================================================
# Payload Base
# =============================================================================


class ItemPayload(BaseModel):
    """Base class for all kind-specific item payloads."""

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )


class AttackProfile(ItemPayload):
    """Fields shared by everything that makes a to-hit roll.

    Attributes:
        attack_skill: Explicit attack skill name; empty means use the
            weapon type's default skill.
        accuracy: Weapon accuracy added to the to-hit roll.
        range: Weapon range in meters.
        damage: Damage formula; empty or "0" means effect only.
        reliability: Reliability rating, keys the fumble table.
        effect: Optional exotic effect key (e.g. "stunAt2").
        minimum_body: Body total required to wield without penalty.
    """

    attack_skill: str = Field(default="", description="Explicit attack skill")
    accuracy: int = Field(default=0, description="Weapon accuracy")
    range: Annotated[int, Field(ge=0, description="Range in meters")] = 50
    damage: str = Field(default="", description="Damage formula")
    reliability: Reliability = Field(default=Reliability.STANDARD)
    effect: str | None = Field(default=None, description="Exotic effect key")
    minimum_body: Annotated[int, Field(ge=0, description="Minimum body")] = 0

    @property
    def has_damage(self) -> bool:
        """Whether the damage formula deals damage at all."""
        return self.damage.strip() not in ("", "0")


# =============================================================================
# Payloads
# =============================================================================


class WeaponData(AttackProfile):
    """Weapon statistics.

    Attributes:
        weapon_type: Weapon class.
        attack_type: Ammunition or delivery class (Auto, Mono, Martial, ...).
        rof: Rate of fire.
        shots: Magazine capacity.
        shots_left: Rounds loaded.
        charges: Remaining charges of an exotic weapon.
        loaded_ammo_type: Type of the loaded rounds.
        damage_type: Damage class, for melee weapons a MeleeDamageType.
        caliber: Caliber class of a ranged weapon.
    """

    kind: Literal["weapon"] = "weapon"
    weapon_type: WeaponType = Field(default=WeaponType.PISTOL)
    attack_type: str = Field(default="", description="Attack type")
    rof: Annotated[int, Field(ge=1, description="Rate of fire")] = 1
    shots: Annotated[int, Field(ge=0, description="Magazine capacity")] = 0
    shots_left: Annotated[int, Field(ge=0, description="Rounds loaded")] = 0
    charges: Annotated[int, Field(ge=0, description="Exotic charges")] = 0
    loaded_ammo_type: str = Field(default="standard")
    damage_type: str = Field(default="")
    caliber: str = Field(default="")
    damage: str = Field(default="1d6", description="Damage formula")

    @property
    def is_exotic(self) -> bool:
        return self.weapon_type == WeaponType.EXOTIC

    @property
    def is_monoblade(self) -> bool:
        return self.damage_type == MeleeDamageType.MONOBLADE

    @property
    def ammo_field(self) -> str:
        """Name of the counter this weapon consumes when fired."""
        return "charges" if self.is_exotic else "shots_left"

    @property
    def ammo_left(self) -> int:
        return self.charges if self.is_exotic else self.shots_left


class ArmorCoverage(BaseModel):
    """Protection an armor piece gives one hit location."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    stopping_power: Annotated[int, Field(ge=0)] = 0
    ablation: Annotated[int, Field(ge=0)] = 0

    @property
    def effective(self) -> int:
        """Stopping power left after ablation."""
        return max(0, self.stopping_power - self.ablation)


class ArmorData(ItemPayload):
    """Worn armor.

    Attributes:
        coverage: Per hit-location protection.
        encumbrance: Reflex penalty while worn.
        armor_type: "soft" or "hard".
        last_owner_id: Actor the coverage map was last fitted to.
    """

    kind: Literal["armor"] = "armor"
    coverage: dict[str, ArmorCoverage] = Field(default_factory=dict)
    encumbrance: Annotated[int, Field(ge=0)] = 0
    armor_type: Literal["soft", "hard"] = "soft"
    last_owner_id: str | None = Field(default=None)


class CyberwareData(ItemPayload):
    """Cyberware, optionally hosting a weapon or armor.

    Attributes:
        cyberware_type: Free-form cyberware category.
        humanity_loss: Humanity cost while installed.
        is_weapon: Whether ``weapon`` is active.
        weapon: Hosted weapon statistics.
        is_armor: Whether ``armor`` is active.
        armor: Hosted armor coverage.
    """

    kind: Literal["cyberware"] = "cyberware"
    cyberware_type: str = Field(default="")
    humanity_loss: Annotated[float, Field(ge=0)] = 0.0
    is_weapon: bool = False
    weapon: WeaponData | None = None
    is_armor: bool = False
    armor: ArmorData | None = None


class SkillData(ItemPayload):
    """A trained skill.

    Attributes:
        level: Trained level.
        ip_level: Improvement-point level added to the trained level.
        is_chipped: Whether a skillchip is slotted.
        chip_level: Level granted by the chip; replaces trained level.
        stat: Governing stat.
        is_role_skill: Whether this is the role's special ability.
        is_martial: Whether this is a martial art.
    """

    kind: Literal["skill"] = "skill"
    level: Annotated[int, Field(ge=0)] = 0
    ip_level: Annotated[int, Field(ge=0)] = 0
    is_chipped: bool = False
    chip_level: Annotated[int, Field(ge=0)] = 0
    stat: StatName | None = None
    is_role_skill: bool = False
    is_martial: bool = False

    @property
    def effective_level(self) -> int:
        """Level used for rolls; a chip overrides training."""
        if self.is_chipped:
            return self.chip_level
        return self.level + self.ip_level


class OrdnanceData(AttackProfile):
    """Grenades, mines, rockets and other area ordnance.

    Attributes:
        charges: Remaining uses.
        template_type: Area shape; circles always detonate.
        remove_on_zero: Delete the item when charges run out.
    """

    kind: Literal["ordnance"] = "ordnance"
    charges: Annotated[int, Field(ge=0)] = 1
    template_type: TemplateType | None = None
    remove_on_zero: bool = False

    @property
    def is_circle(self) -> bool:
        return (self.template_type or TemplateType.CIRCLE) == TemplateType.CIRCLE


class GearData(ItemPayload):
    """Items with no combat role."""

    kind: Literal["vehicle", "misc", "ammo", "program", "role", "tool", "drug"] = "misc"


Payload = Annotated[
    WeaponData | ArmorData | CyberwareData | SkillData | OrdnanceData | GearData,
    Field(discriminator="kind"),
]


# =============================================================================
# Item Envelope
# =============================================================================


class Item(BaseModel):
    """An item document.

    Attributes:
        id: Unique item identifier.
        name: Display name.
        img: Image path for chat cards.
        equipped: Whether the item is worn or installed.
        weight: Carry weight.
        payload: Kind-specific data.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str = Field(min_length=1, max_length=120)
    img: str = Field(default="")
    equipped: bool = False
    weight: Annotated[float, Field(ge=0)] = 0.0
    payload: Payload

    @property
    def kind(self) -> ItemKind:
        return ItemKind(self.payload.kind)

    @property
    def hosted_weapon(self) -> bool:
        """Whether the weapon data is nested inside cyberware."""
        return isinstance(self.payload, CyberwareData) and self.payload.is_weapon

    def weapon_update_path(self, field: str) -> str:
        """Store path for a weapon field on this item.

        Args:
            field: Weapon field name (e.g. "shots_left").

        Returns:
            "payload.weapon.<field>" for cyberware weapons, else "payload.<field>".
        """
        if self.hosted_weapon:
            return f"payload.weapon.{field}"
        return f"payload.{field}"


def active_weapon(item: Item) -> WeaponData | None:
    """Return the weapon payload of an item regardless of host.

    Args:
        item: Any item.

    Returns:
        The weapon statistics, or None if the item is not weapon-bearing.
    """
    payload = item.payload
    if isinstance(payload, WeaponData):
        return payload
    if isinstance(payload, CyberwareData) and payload.is_weapon:
        return payload.weapon
    return None


def armor_coverage(item: Item) -> dict[str, ArmorCoverage]:
    """Return the coverage map of worn armor or cyberarmor.

    Args:
        item: Any item.

    Returns:
        The coverage map, empty when the item gives no protection.
    """
    payload = item.payload
    if isinstance(payload, ArmorData):
        return payload.coverage
    if isinstance(payload, CyberwareData) and payload.is_armor and payload.armor is not None:
        return payload.armor.coverage
    return {}


def make_item(name: str, payload: dict[str, Any] | ItemPayload, **fields: Any) -> Item:
    """Build an item from a payload dict or model.

    Args:
        name: Item name.
        payload: Payload data including its ``kind``.
        **fields: Extra envelope fields (equipped, weight, img, id).

    Returns:
        The validated Item.

    Example:
        >>> pistol = make_item("Militech Arms Avenger", {"kind": "weapon", "rof": 2})
    """
    return Item.model_validate({"name": name, "payload": payload, **fields})


__all__ = [
    "ItemPayload",
    "AttackProfile",
    "WeaponData",
    "ArmorCoverage",
    "ArmorData",
    "CyberwareData",
    "SkillData",
    "OrdnanceData",
    "GearData",
    "Payload",
    "Item",
    "active_weapon",
    "armor_coverage",
    "make_item",
]
