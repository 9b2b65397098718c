"""Transient combat data: attack context, modifiers and results.

None of these models are persisted. An AttackContext lives for one call
to the dispatcher; AttackResult payloads go to the presentation sink.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from cyberpunk_combat.models.actor import Actor
from cyberpunk_combat.models.enums import (
    AttackProtocol,
    Condition,
    CyberTerminus,
    FireMode,
    FumbleSeverity,
    MartialAction,
    PreconditionFailure,
    RangeBracket,
    Reliability,
    StatName,
)
from cyberpunk_combat.models.items import Item
from cyberpunk_combat.models.rolls import RollOutcome


# =============================================================================
# Attack Context
# =============================================================================


class AttackContext(BaseModel):
    """Everything the dispatcher needs for one attack.

    Attributes:
        attacker: The attacking actor.
        weapon: Weapon, cyberware weapon, ordnance or martial technique item.
        fire_mode: Requested fire mode for ranged weapons.
        range: Range bracket to the target.
        target: Target actor, used for its hit-location table.
        targets: Target actors for full auto and suppressive fire; each
            result uses its own target's hit-location table.
        target_ids: Identifiers of all targets (full auto).
        targets_count: Number of targets when no ids are given.
        target_area: Forced hit location (aimed shot).
        aim_rounds: Rounds spent aiming.
        ambush: Attacker is ambushing.
        blinded: Attacker cannot see the target.
        dual_wield: Attacker fires two weapons.
        fast_draw: Fast draw / snap shot.
        hipfire: Firing from the hip.
        ricochet: Indirect ricochet shot.
        running: Attacker is running.
        turning_to_face: Attacker turns to face the target.
        cyber_terminus: Cyberlimb melee damage multiplier.
        extra_mod: Free-form modifier.
        rounds_fired: Requested suppressive rounds.
        zone_width: Suppressive fire zone width.
        action: Martial arts technique.
        martial_art: Martial art used for techniques.
        actual_distance: Measured distance for ordnance range labels.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    attacker: Actor
    weapon: Item
    fire_mode: FireMode = FireMode.SINGLE_SHOT
    range: RangeBracket = RangeBracket.CLOSE
    target: Actor | None = None
    targets: list[Actor] = Field(default_factory=list)
    target_ids: list[str] = Field(default_factory=list)
    targets_count: Annotated[int, Field(ge=1)] | None = None
    target_area: str | None = None
    aim_rounds: Annotated[int, Field(ge=0)] = 0
    ambush: bool = False
    blinded: bool = False
    dual_wield: bool = False
    fast_draw: bool = False
    hipfire: bool = False
    ricochet: bool = False
    running: bool = False
    turning_to_face: bool = False
    cyber_terminus: CyberTerminus = CyberTerminus.NONE
    extra_mod: int = 0
    rounds_fired: Annotated[int, Field(ge=1)] | None = None
    zone_width: int | None = None
    action: MartialAction = MartialAction.STRIKE
    martial_art: str = "Brawling"
    actual_distance: Annotated[float, Field(ge=0)] | None = None

    @property
    def target_count(self) -> int:
        """Explicit id list length, else target list length, else supplied count, else 1."""
        if self.target_ids:
            return len(self.target_ids)
        if self.targets:
            return len(self.targets)
        return self.targets_count or 1

    def target_at(self, index: int) -> Actor | None:
        """Target actor of the index-th result, falling back to ``target``."""
        if index < len(self.targets):
            return self.targets[index]
        return self.target

    def target_id_at(self, index: int) -> str | None:
        if index < len(self.target_ids):
            return self.target_ids[index]
        if index < len(self.targets):
            return self.targets[index].id
        return None


# =============================================================================
# Modifiers
# =============================================================================


class ModifierTerm(BaseModel):
    """One additive term of a to-hit roll."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: int


def render_formula(base_die: str, terms: Iterable[ModifierTerm]) -> str:
    """Render additive terms after a base die as a roll formula.

    Example:
        >>> render_formula("1d10e10", [ModifierTerm(label="reflex", value=7),
        ...     ModifierTerm(label="hipfire", value=-2)])
        '1d10e10 + 7 - 2'
    """
    parts = [base_die]
    for term in terms:
        sign = "-" if term.value < 0 else "+"
        parts.append(f"{sign} {abs(term.value)}")
    return " ".join(parts)


class MinimumBodyPenalty(BaseModel):
    """Penalty for wielding a weapon above the wielder's body."""

    model_config = ConfigDict(frozen=True)

    deficit: int = 0
    accuracy_penalty: int = 0
    rof_multiplier: float = 1.0


class AttackModifiers(BaseModel):
    """Ordered to-hit terms plus the values derived along the way.

    Attributes:
        stat: Stat used as the attack base.
        skill_name: Resolved attack skill, if any.
        terms: Ordered additive terms.
        minimum_body: Minimum body penalty.
    """

    model_config = ConfigDict(frozen=True)

    stat: StatName
    skill_name: str | None = None
    terms: list[ModifierTerm] = Field(default_factory=list)
    minimum_body: MinimumBodyPenalty = Field(default_factory=MinimumBodyPenalty)

    @property
    def total(self) -> int:
        return sum(term.value for term in self.terms)

    def formula(self, base_die: str) -> str:
        return render_formula(base_die, self.terms)


# =============================================================================
# Results
# =============================================================================


class DamageRoll(BaseModel):
    """One damage instance against one location."""

    model_config = ConfigDict(frozen=True)

    location: str
    formula: str
    roll: RollOutcome

    @property
    def total(self) -> int:
        return self.roll.total


class LocationRoll(BaseModel):
    """A resolved hit location and the roll that chose it."""

    model_config = ConfigDict(frozen=True)

    location: str
    roll: RollOutcome


class ScatterResult(BaseModel):
    """Where a missed grenade lands relative to its aim point."""

    model_config = ConfigDict(frozen=True)

    direction: str
    distance: int
    dx: float
    dy: float
    direction_roll: RollOutcome
    distance_roll: RollOutcome


class FumbleResult(BaseModel):
    """Outcome of the fumble table."""

    model_config = ConfigDict(frozen=True)

    actor_id: str
    reliability: Reliability
    roll: RollOutcome
    severity: FumbleSeverity


class AttackResult(BaseModel):
    """Payload for one chat card.

    Full auto and suppressive fire produce one result per target; every
    other protocol produces exactly one.
    """

    template: str
    protocol: AttackProtocol
    weapon_name: str
    weapon_image: str = ""
    weapon_type: str = ""
    fire_mode_label: str = ""
    range: RangeBracket | None = None
    range_label: str = ""
    dc: int | None = None
    attack_roll: RollOutcome | None = None
    hit: bool | None = None
    fumble: bool = False
    rounds_fired: int = 0
    rounds_hit: int = 0
    hits_roll: RollOutcome | None = None
    area_damages: dict[str, list[DamageRoll]] = Field(default_factory=dict)
    ammo_remaining: int | None = None
    loaded_ammo_type: str = "standard"
    damage_type: str = ""
    has_damage: bool = True
    effect: str | None = None
    effect_label: str | None = None
    effect_icon: str | None = None
    target_id: str | None = None
    hit_location: str | None = None
    save_dc: int | None = None
    zone_width: int | None = None
    martial_action: MartialAction | None = None
    scatter: ScatterResult | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_damage(self) -> int:
        """Sum of every damage instance."""
        return sum(d.total for hits in self.area_damages.values() for d in hits)

    def damage_by_location(self) -> dict[str, int]:
        return {
            location: sum(d.total for d in hits)
            for location, hits in self.area_damages.items()
        }

    def add_damage(self, damage: DamageRoll) -> None:
        self.area_damages.setdefault(damage.location, []).append(damage)


class AttackOutcome(BaseModel):
    """Everything one dispatcher call produced.

    Attributes:
        actor_id: Attacker identifier.
        item_id: Weapon identifier.
        protocol: Selected protocol, None when aborted at the gate.
        failure: Precondition failure that aborted the attack.
        results: Chat card payloads.
        fumble: Fumble table result, at most one per call.
        ammo_remaining: Ammo or charges left after the commit.
        item_deleted: Whether depleted ordnance was removed.
    """

    actor_id: str
    item_id: str
    protocol: AttackProtocol | None = None
    failure: PreconditionFailure | None = None
    results: list[AttackResult] = Field(default_factory=list)
    fumble: FumbleResult | None = None
    ammo_remaining: int | None = None
    item_deleted: bool = False

    @property
    def ok(self) -> bool:
        return self.failure is None


# =============================================================================
# Saves & Checks
# =============================================================================


SaveKind = Literal["stun", "poison", "death"]


class SaveResult(BaseModel):
    """A roll-under save against a body-derived threshold.

    Attributes:
        save: Which save was rolled.
        threshold: The roll must come in under this value.
        roll: The save roll including any penalty.
        success: Whether the save was made.
        condition: Condition the save governs.
    """

    model_config = ConfigDict(frozen=True)

    save: SaveKind
    threshold: int
    roll: RollOutcome
    success: bool
    condition: Condition

    def apply(self, conditions: set[Condition]) -> set[Condition]:
        """Conditions after the save.

        A failed save adds its condition. A made stun or poison save
        clears it; death is never cleared by a save.
        """
        updated = set(conditions)
        if not self.success:
            updated.add(self.condition)
        elif self.save != "death":
            updated.discard(self.condition)
        return updated


class CheckResult(BaseModel):
    """A stat or skill check against a difficulty."""

    model_config = ConfigDict(frozen=True)

    name: str
    difficulty: int
    roll: RollOutcome
    success: bool
    fumble: FumbleResult | None = None


__all__ = [
    "AttackContext",
    "ModifierTerm",
    "MinimumBodyPenalty",
    "AttackModifiers",
    "DamageRoll",
    "LocationRoll",
    "ScatterResult",
    "FumbleResult",
    "AttackResult",
    "AttackOutcome",
    "SaveKind",
    "SaveResult",
    "CheckResult",
    "render_formula",
]
