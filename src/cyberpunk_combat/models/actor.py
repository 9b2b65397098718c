"""Actor documents: stats, hit locations, damage and owned items.

Only ``base``, ``temp_mod``, ``spent`` luck, ``damage``, conditions and
item ownership are authoritative. Totals, armor and wound modifiers,
stopping power and the other derived values are recomputed by
``cyberpunk_combat.engine.stats.prepare_actor`` and are excluded from
``model_dump`` so they never get persisted.
"""

from __future__ import annotations

from typing import Annotated
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cyberpunk_combat.core.constants import DEFAULT_HIT_LOCATIONS
from cyberpunk_combat.models.enums import Condition, ItemKind, StatName
from cyberpunk_combat.models.items import Item, SkillData


# =============================================================================
# Stats
# =============================================================================


class Stat(BaseModel):
    """A single statistic.

    Attributes:
        base: Rolled or bought value.
        temp_mod: Temporary modifier.
        total: Derived effective value.
        armor_mod: Derived encumbrance penalty (reflex only).
        wound_mod: Derived wound penalty.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    base: Annotated[int, Field(ge=0)] = 5
    temp_mod: int = 0
    total: int = Field(default=0, exclude=True)
    armor_mod: int | None = Field(default=None, exclude=True)
    wound_mod: int | None = Field(default=None, exclude=True)


class LuckStat(Stat):
    """Luck, partially spendable."""

    spent: Annotated[int, Field(ge=0)] = 0
    effective: int = Field(default=0, exclude=True)


class MovementStat(Stat):
    """Movement allowance with derived run and leap distances."""

    run: int = Field(default=0, exclude=True)
    leap: int = Field(default=0, exclude=True)


class BodyStat(Stat):
    """Body type with derived carry, lift and body type modifier."""

    carry: int = Field(default=0, exclude=True)
    lift: int = Field(default=0, exclude=True)
    modifier: int = Field(default=0, exclude=True)


class Humanity(BaseModel):
    """Derived humanity record."""

    base: int = 0
    loss: float = 0.0
    total: float = 0.0


class EmpathyStat(Stat):
    """Empathy with the derived humanity record."""

    humanity: Humanity = Field(default_factory=Humanity, exclude=True)


class Stats(BaseModel):
    """The full stat block."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    intelligence: Stat = Field(default_factory=Stat)
    reflex: Stat = Field(default_factory=Stat)
    technique: Stat = Field(default_factory=Stat)
    cool: Stat = Field(default_factory=Stat)
    attractiveness: Stat = Field(default_factory=Stat)
    luck: LuckStat = Field(default_factory=LuckStat)
    movement: MovementStat = Field(default_factory=MovementStat)
    body: BodyStat = Field(default_factory=BodyStat)
    empathy: EmpathyStat = Field(default_factory=EmpathyStat)

    def get(self, name: StatName | str) -> Stat:
        """Look up a stat by name."""
        return getattr(self, StatName(name).value)

    def all(self) -> list[Stat]:
        return [self.get(name) for name in StatName]


# =============================================================================
# Hit Locations
# =============================================================================


class HitLocation(BaseModel):
    """A body region on the location die.

    Attributes:
        location: Single face, or inclusive [start, end] faces.
        stopping_power: Derived armor protection.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    location: list[int] = Field(min_length=1, max_length=2)
    stopping_power: int = Field(default=0, ge=0, exclude=True)

    @property
    def faces(self) -> range:
        start = self.location[0]
        end = self.location[-1]
        return range(start, end + 1)


def default_hit_locations() -> dict[str, HitLocation]:
    """Build the standard human hit-location table."""
    return {
        name: HitLocation(location=list(faces))
        for name, faces in DEFAULT_HIT_LOCATIONS.items()
    }


# =============================================================================
# Actor
# =============================================================================


class Actor(BaseModel):
    """A combatant.

    Attributes:
        id: Unique actor identifier.
        name: Display name.
        stats: Stat block.
        hit_locations: Body regions keyed by location name.
        damage: Accumulated damage in wound slots.
        items: Owned items.
        conditions: Active status flags.
        hit_loc_lookup: Derived location-die face to location name.
        carry_weight: Derived weight of equipped items.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str = Field(min_length=1, max_length=120)
    stats: Stats = Field(default_factory=Stats)
    hit_locations: dict[str, HitLocation] = Field(default_factory=default_hit_locations)
    damage: Annotated[int, Field(ge=0)] = 0
    items: list[Item] = Field(default_factory=list)
    conditions: set[Condition] = Field(default_factory=set)

    hit_loc_lookup: dict[int, str] = Field(default_factory=dict, exclude=True)
    carry_weight: float = Field(default=0.0, exclude=True)

    @field_validator("conditions", mode="before")
    @classmethod
    def drop_unknown_conditions(cls, value: object) -> object:
        """Ignore status ids this engine does not model."""
        if isinstance(value, (list, set, tuple)):
            known = {c.value for c in Condition}
            return {v for v in value if str(v) in known}
        return value

    def get_item(self, item_id: str) -> Item | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def owns(self, item: Item) -> bool:
        return self.get_item(item.id) is not None

    def equipped_items(self) -> list[Item]:
        return [item for item in self.items if item.equipped]

    def items_of_kind(self, kind: ItemKind) -> list[Item]:
        return [item for item in self.items if item.kind == kind]

    def find_skill(self, name: str) -> SkillData | None:
        """Find a skill payload by item name, ignoring case.

        Args:
            name: Skill name.

        Returns:
            The skill payload or None.
        """
        wanted = name.strip().lower()
        for item in self.items:
            if isinstance(item.payload, SkillData) and item.name.lower() == wanted:
                return item.payload
        return None

    def has_condition(self, condition: Condition) -> bool:
        return condition in self.conditions


__all__ = [
    "Stat",
    "LuckStat",
    "MovementStat",
    "BodyStat",
    "Humanity",
    "EmpathyStat",
    "Stats",
    "HitLocation",
    "default_hit_locations",
    "Actor",
]
