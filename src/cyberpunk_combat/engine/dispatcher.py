"""Fire-mode dispatcher: the combat engine entry point.

One call to ``CombatEngine.attack`` resolves one attack action:

1. The dispatch gate checks ownership and ammunition and selects exactly
   one protocol (``select_protocol``).
2. The protocol handler makes every roll for the action and records the
   ammunition it spends and whether a fumble is owed. It never writes to
   the store.
3. The commit step fires the fumble hook at most once, writes the
   ammunition or charge change, deletes depleted ordnance, and publishes
   the chat payloads.

A random source failure in step 2 or in the fumble hook therefore
leaves every document untouched. Precondition failures return an outcome with ``failure`` set
and a warning notification instead of raising.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from cyberpunk_combat.core import constants as c
from cyberpunk_combat.core.config import get_settings
from cyberpunk_combat.core.exceptions import CombatError, RulesEngineError
from cyberpunk_combat.core.logging import bound_context, get_logger
from cyberpunk_combat.engine.checks import (
    FumbleHook,
    FumbleTable,
    roll_death_save,
    roll_poison_save,
    roll_skill_check,
    roll_stat_check,
    roll_stun_save,
)
from cyberpunk_combat.engine.dice import (
    RandomSource,
    default_random_source,
    is_natural_max,
    is_natural_min,
)
from cyberpunk_combat.engine.locations import resolve_damage, resolve_location, roll_located_damage
from cyberpunk_combat.engine.lookups import (
    effect_icon,
    effect_label,
    fire_mode_label,
    is_ranged,
    range_dc,
    range_label,
    resolve_range,
    strength_damage_bonus,
    weapon_line_type,
)
from cyberpunk_combat.engine.modifiers import build_modifiers, effective_rof
from cyberpunk_combat.engine.presentation import CollectingSink, PresentationSink
from cyberpunk_combat.engine.stats import prepare_actor, resolve_skill_level
from cyberpunk_combat.engine.wounds import clamp_damage, sync_wound_condition
from cyberpunk_combat.models.actor import Actor
from cyberpunk_combat.models.combat import (
    AttackContext,
    AttackModifiers,
    AttackOutcome,
    AttackResult,
    CheckResult,
    ModifierTerm,
    SaveResult,
    ScatterResult,
    render_formula,
)
from cyberpunk_combat.models.enums import (
    AttackProtocol,
    CyberTerminus,
    FireMode,
    PreconditionFailure,
    StatName,
)
from cyberpunk_combat.models.items import (
    AttackProfile,
    Item,
    OrdnanceData,
    WeaponData,
    active_weapon,
)
from cyberpunk_combat.models.rolls import RollOutcome


if TYPE_CHECKING:
    from cyberpunk_combat.storage.store import EntityStore


logger = get_logger(__name__)


# =============================================================================
# Dispatch Gate
# =============================================================================


FIRE_MODE_PROTOCOLS: dict[FireMode, AttackProtocol] = {
    FireMode.SINGLE_SHOT: AttackProtocol.SINGLE_SHOT,
    FireMode.THREE_ROUND_BURST: AttackProtocol.THREE_ROUND_BURST,
    FireMode.FULL_AUTO: AttackProtocol.FULL_AUTO,
    FireMode.SUPPRESSIVE: AttackProtocol.SUPPRESSIVE,
}


def select_protocol(item: Item, fire_mode: FireMode) -> AttackProtocol | PreconditionFailure:
    """Pick the protocol for an owned item, or the reason it cannot attack.

    Melee-class weapons skip the ammunition check. Ordnance and exotic
    weapons need charges, everything else loaded rounds.

    Args:
        item: Weapon, cyberware weapon or ordnance item.
        fire_mode: Requested fire mode, used for ranged weapons only.

    Returns:
        The protocol to run or a precondition failure.

    Raises:
        CombatError: If the item cannot attack at all.
    """
    if isinstance(item.payload, OrdnanceData):
        if item.payload.charges <= 0:
            return PreconditionFailure.NO_CHARGES
        return AttackProtocol.AREA_ORDNANCE

    weapon = active_weapon(item)
    if weapon is None:
        raise CombatError(f"{item.name} is not a weapon", item_id=item.id)

    if not is_ranged(weapon):
        if weapon.attack_type == c.MARTIAL_ATTACK_TYPE:
            return AttackProtocol.MARTIAL_TECHNIQUE
        return AttackProtocol.MELEE_STRIKE

    if weapon.ammo_left <= 0:
        return PreconditionFailure.NO_CHARGES if weapon.is_exotic else PreconditionFailure.NO_AMMO
    return FIRE_MODE_PROTOCOLS[FireMode(fire_mode)]


def apply_cyber_terminus(formula: str, terminus: CyberTerminus | str | None) -> str:
    """Multiply a melee damage formula for a cyberlimb strike.

    Example:
        >>> apply_cyber_terminus("1d6+@strengthBonus", CyberTerminus.X2)
        '(1d6+@strengthBonus)*2'
    """
    multiplier = c.CYBER_TERMINUS_MULTIPLIERS.get(str(terminus or CyberTerminus.NONE), 1)
    if multiplier == 1:
        return formula
    return f"({formula})*{multiplier}"


def roll_data(attacker: Actor, **extra: Any) -> dict[str, Any]:
    """Variables available to damage formulas."""
    return {
        "stats": {stat.value: {"total": attacker.stats.get(stat).total} for stat in StatName},
        "strengthBonus": strength_damage_bonus(attacker.stats.body.total),
        **extra,
    }


# =============================================================================
# Per-call State
# =============================================================================


@dataclass
class _Attack:
    """Working state of one attack; discarded after the commit."""

    context: AttackContext
    attacker: Actor
    item: Item
    weapon: AttackProfile
    modifiers: AttackModifiers
    results: list[AttackResult] = field(default_factory=list)
    ammo_spent: int = 0
    fumble_owed: bool = False

    @property
    def ammo_left(self) -> int:
        if isinstance(self.weapon, OrdnanceData):
            return self.weapon.charges
        if isinstance(self.weapon, WeaponData):
            return self.weapon.ammo_left
        return 0

    @property
    def has_effect(self) -> bool:
        if isinstance(self.weapon, OrdnanceData):
            return bool(self.weapon.effect)
        return isinstance(self.weapon, WeaponData) and self.weapon.is_exotic and bool(self.weapon.effect)


# =============================================================================
# Combat Engine
# =============================================================================


class CombatEngine:
    """Resolves attacks, saves, checks and damage for actors in a store.

    Example:
        >>> engine = CombatEngine(store)
        >>> outcome = engine.attack(AttackContext(attacker=solo, weapon=rifle,
        ...     fire_mode=FireMode.FULL_AUTO, range=RangeBracket.CLOSE))
        >>> outcome.results[0].rounds_fired
        30
    """

    def __init__(
        self,
        store: EntityStore,
        *,
        random_source: RandomSource | None = None,
        sink: PresentationSink | None = None,
        fumble_hook: FumbleHook | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            store: Actor and item persistence.
            random_source: Dice roller; defaults to the d20-backed source.
            sink: Receiver of chat payloads; defaults to a CollectingSink.
            fumble_hook: Fumble side effect; defaults to the fumble table.
        """
        self.store = store
        self.rng = random_source or default_random_source()
        self.sink = sink or CollectingSink()
        self.fumble_hook = fumble_hook or FumbleTable(self.rng)
        self._protocols: dict[AttackProtocol, Callable[[_Attack], None]] = {
            AttackProtocol.SINGLE_SHOT: self._single_shot,
            AttackProtocol.THREE_ROUND_BURST: self._three_round_burst,
            AttackProtocol.FULL_AUTO: self._full_auto,
            AttackProtocol.SUPPRESSIVE: self._suppressive,
            AttackProtocol.MELEE_STRIKE: self._melee_strike,
            AttackProtocol.MARTIAL_TECHNIQUE: self._martial_technique,
            AttackProtocol.AREA_ORDNANCE: self._area_ordnance,
        }
        logger.debug("CombatEngine initialized", sink=type(self.sink).__name__)

    # -------------------------------------------------------------------------
    # Attack
    # -------------------------------------------------------------------------

    def attack(self, context: AttackContext) -> AttackOutcome:
        """Resolve one attack action.

        Args:
            context: The attack to resolve.

        Returns:
            Outcome with one result per chat card, or a precondition failure.

        Raises:
            EntityNotFoundError: If the attacker is not in the store.
            DiceRollError: If a formula cannot be rolled; nothing is committed.
        """
        stored = self.store.get(context.attacker.id)
        item_id = context.weapon.id

        with bound_context(actor_id=stored.id, item_id=item_id):
            item = stored.get_item(item_id)
            if item is None:
                return self._abort(stored.id, item_id, PreconditionFailure.NOT_OWNED)

            selected = select_protocol(item, context.fire_mode)
            if isinstance(selected, PreconditionFailure):
                return self._abort(stored.id, item_id, selected)

            attacker = prepare_actor(stored)
            weapon = item.payload if isinstance(item.payload, OrdnanceData) else active_weapon(item)
            if weapon is None:
                raise CombatError("Item lost its weapon", actor_id=stored.id, item_id=item_id)

            attack = _Attack(
                context=context,
                attacker=attacker,
                item=item,
                weapon=weapon,
                modifiers=build_modifiers(context, weapon, attacker),
            )
            logger.info("Attack started", protocol=selected.value, weapon=item.name)
            self._protocols[selected](attack)
            return self._commit(stored, attack, selected)

    def _abort(self, actor_id: str, item_id: str, failure: PreconditionFailure) -> AttackOutcome:
        message = c.PRECONDITION_MESSAGES[failure.value]
        logger.warning("Attack aborted", failure=failure.value)
        self.sink.notify("warning", message)
        return AttackOutcome(actor_id=actor_id, item_id=item_id, failure=failure)

    def _commit(self, owner: Actor, attack: _Attack, protocol: AttackProtocol) -> AttackOutcome:
        """Write the action's side effects, then publish its results."""
        outcome = AttackOutcome(
            actor_id=owner.id,
            item_id=attack.item.id,
            protocol=protocol,
            results=attack.results,
        )

        # Fumble rolls resolve before any store write.
        if attack.fumble_owed:
            outcome.fumble = self.fumble_hook.trigger(owner, attack.weapon.reliability)

        if isinstance(attack.weapon, OrdnanceData):
            charges = max(0, attack.weapon.charges - attack.ammo_spent)
            outcome.ammo_remaining = charges
            if charges == 0 and attack.weapon.remove_on_zero:
                self.store.delete_item(owner.id, attack.item.id)
                outcome.item_deleted = True
            else:
                self.store.update_item(owner.id, attack.item.id, {"payload.charges": charges})
        elif isinstance(attack.weapon, WeaponData) and is_ranged(attack.weapon):
            remaining = max(0, attack.weapon.ammo_left - attack.ammo_spent)
            outcome.ammo_remaining = remaining
            if attack.ammo_spent:
                path = attack.item.weapon_update_path(attack.weapon.ammo_field)
                self.store.update_item(owner.id, attack.item.id, {path: remaining})

        if outcome.fumble is not None:
            self.sink.publish(c.FUMBLE_TEMPLATE, outcome.fumble)

        for result in attack.results:
            self.sink.publish(result.template, result)

        logger.info(
            "Attack committed",
            protocol=protocol.value,
            ammo_spent=attack.ammo_spent,
            ammo_remaining=outcome.ammo_remaining,
            fumble=attack.fumble_owed,
            item_deleted=outcome.item_deleted,
        )
        return outcome

    # -------------------------------------------------------------------------
    # Shared steps
    # -------------------------------------------------------------------------

    def _roll_to_hit(self, attack: _Attack, *, fumble_eligible: bool = True) -> RollOutcome:
        roll = self.rng.roll(attack.modifiers.formula(get_settings().rules.attack_die))
        if fumble_eligible and is_natural_min(roll):
            attack.fumble_owed = True
        logger.debug("To-hit rolled", formula=roll.formula, total=roll.total)
        return roll

    def _result(self, attack: _Attack, template: str, protocol: AttackProtocol, **fields: Any) -> AttackResult:
        weapon = attack.weapon
        effect = weapon.effect if attack.has_effect else None
        ranged = isinstance(weapon, OrdnanceData) or (isinstance(weapon, WeaponData) and is_ranged(weapon))
        fields.setdefault("has_damage", weapon.has_damage)
        fields.setdefault("damage_type", weapon.damage_type if isinstance(weapon, WeaponData) else "")
        fields.setdefault(
            "loaded_ammo_type",
            weapon.loaded_ammo_type if isinstance(weapon, WeaponData) and ranged else "standard",
        )
        return AttackResult(
            template=template,
            protocol=protocol,
            weapon_name=attack.item.name,
            weapon_image=attack.item.img,
            weapon_type=weapon_line_type(attack.item),
            effect=effect,
            effect_label=effect_label(effect),
            effect_icon=effect_icon(effect),
            **fields,
        )

    def _range_fields(self, attack: _Attack) -> dict[str, Any]:
        bracket = attack.context.range
        distance = resolve_range(bracket, attack.weapon.range)
        return {
            "range": bracket,
            "range_label": range_label(bracket, distance),
            "dc": range_dc(bracket),
        }

    def _located_damage(
        self,
        attack: _Attack,
        result: AttackResult,
        formula: str,
        hits: int,
        target: Actor | None = None,
    ) -> None:
        variables = roll_data(attack.attacker)
        target = target or attack.context.target
        for _ in range(hits):
            result.add_damage(
                roll_located_damage(
                    formula,
                    variables,
                    target,
                    attack.context.target_area,
                    self.rng,
                )
            )

    # -------------------------------------------------------------------------
    # Protocols
    # -------------------------------------------------------------------------

    def _single_shot(self, attack: _Attack) -> None:
        ranged = self._range_fields(attack)
        roll = self._roll_to_hit(attack)
        fumble = is_natural_min(roll)
        hit = roll.total >= ranged["dc"] and not fumble
        rounds_fired = min(attack.ammo_left, 1)

        result = self._result(
            attack,
            c.MULTI_HIT_TEMPLATE,
            AttackProtocol.SINGLE_SHOT,
            fire_mode_label=fire_mode_label(FireMode.SINGLE_SHOT),
            attack_roll=roll,
            hit=hit,
            fumble=fumble,
            rounds_fired=rounds_fired,
            rounds_hit=1 if hit else 0,
            ammo_remaining=attack.ammo_left - rounds_fired,
            **ranged,
        )
        if hit:
            location = resolve_location(attack.context.target, attack.context.target_area, self.rng)
            result.hit_location = location.location
            if attack.weapon.has_damage:
                result.add_damage(
                    resolve_damage(
                        attack.weapon.damage,
                        roll_data(attack.attacker),
                        location.location,
                        self.rng,
                    )
                )

        attack.ammo_spent = rounds_fired
        attack.results.append(result)

    def _three_round_burst(self, attack: _Attack) -> None:
        ranged = self._range_fields(attack)
        roll = self._roll_to_hit(attack)
        fumble = is_natural_min(roll)
        hit = roll.total >= ranged["dc"] and not fumble
        rof = effective_rof(attack.weapon.rof, attack.modifiers.minimum_body)
        rounds_fired = min(attack.ammo_left, rof, c.THREE_ROUND_BURST_SIZE)

        result = self._result(
            attack,
            c.MULTI_HIT_TEMPLATE,
            AttackProtocol.THREE_ROUND_BURST,
            fire_mode_label=fire_mode_label(FireMode.THREE_ROUND_BURST),
            attack_roll=roll,
            hit=hit,
            fumble=fumble,
            rounds_fired=rounds_fired,
            ammo_remaining=attack.ammo_left - rounds_fired,
            **ranged,
        )
        if hit:
            hits_roll = self.rng.roll(c.BURST_HITS_DIE)
            result.hits_roll = hits_roll
            result.rounds_hit = hits_roll.total
            if attack.weapon.has_damage:
                self._located_damage(attack, result, attack.weapon.damage, result.rounds_hit)

        attack.ammo_spent = rounds_fired
        attack.results.append(result)

    def _full_auto(self, attack: _Attack) -> None:
        context = attack.context
        ranged = self._range_fields(attack)
        targets = context.target_count
        per_target = effective_rof(attack.weapon.rof, attack.modifiers.minimum_body) // targets
        remaining = attack.ammo_left

        for index in range(targets):
            roll = self._roll_to_hit(attack, fumble_eligible=index == 0)
            fumble = is_natural_min(roll)
            rounds_fired = min(remaining, per_target)
            remaining -= rounds_fired
            rounds_hit = 0 if fumble else max(0, min(rounds_fired, roll.total - ranged["dc"]))

            result = self._result(
                attack,
                c.MULTI_HIT_TEMPLATE,
                AttackProtocol.FULL_AUTO,
                fire_mode_label=fire_mode_label(FireMode.FULL_AUTO),
                attack_roll=roll,
                hit=rounds_hit > 0,
                fumble=fumble,
                rounds_fired=rounds_fired,
                rounds_hit=rounds_hit,
                ammo_remaining=remaining,
                target_id=context.target_id_at(index),
                **ranged,
            )
            if attack.weapon.has_damage:
                self._located_damage(
                    attack, result, attack.weapon.damage, rounds_hit, context.target_at(index)
                )
            attack.results.append(result)

        attack.ammo_spent = attack.ammo_left - remaining

    def _suppressive(self, attack: _Attack) -> None:
        context = attack.context
        rof = effective_rof(attack.weapon.rof, attack.modifiers.minimum_body)
        rounds = max(1, min(context.rounds_fired or rof, attack.ammo_left))
        width = max(c.MIN_ZONE_WIDTH, context.zone_width or get_settings().rules.default_zone_width)
        save_dc = math.ceil(rounds / width)
        formula = attack.weapon.damage if attack.weapon.has_damage else c.DEFAULT_SUPPRESSIVE_DAMAGE

        # Fixed before any roll so every target sees the same burst.
        attack.ammo_spent = rounds

        for index in range(context.target_count):
            hits_roll = self.rng.roll(c.SUPPRESSIVE_HITS_DIE)
            result = self._result(
                attack,
                c.SUPPRESSIVE_TEMPLATE,
                AttackProtocol.SUPPRESSIVE,
                fire_mode_label=fire_mode_label(FireMode.SUPPRESSIVE),
                rounds_fired=rounds,
                rounds_hit=hits_roll.total,
                hits_roll=hits_roll,
                save_dc=save_dc,
                zone_width=width,
                ammo_remaining=attack.ammo_left - rounds,
                target_id=context.target_id_at(index),
            )
            self._located_damage(attack, result, formula, hits_roll.total, context.target_at(index))
            attack.results.append(result)

    def _melee_strike(self, attack: _Attack) -> None:
        weapon = attack.weapon
        roll = self._roll_to_hit(attack)

        martial_bonus = 0
        skill_name = attack.modifiers.skill_name
        skill = attack.attacker.find_skill(skill_name) if skill_name else None
        if skill is not None and skill.is_martial:
            martial_bonus = resolve_skill_level(attack.attacker, skill_name)

        base = weapon.damage
        if isinstance(weapon, WeaponData) and weapon.is_monoblade and is_natural_max(roll):
            base = f"({base})*2"
        formula = f"{base}+@strengthBonus"
        if martial_bonus > 0:
            formula += "+@martialDamageBonus"
        formula = apply_cyber_terminus(formula, attack.context.cyber_terminus)

        result = self._result(
            attack,
            c.MELEE_HIT_TEMPLATE,
            AttackProtocol.MELEE_STRIKE,
            fire_mode_label=c.STRIKE_LABEL,
            attack_roll=roll,
            fumble=is_natural_min(roll),
        )
        location = resolve_location(attack.context.target, attack.context.target_area, self.rng)
        result.hit_location = location.location
        if weapon.has_damage:
            result.add_damage(
                resolve_damage(
                    formula,
                    roll_data(attack.attacker, martialDamageBonus=martial_bonus),
                    location.location,
                    self.rng,
                )
            )
        attack.results.append(result)

    def _martial_technique(self, attack: _Attack) -> None:
        context = attack.context
        art = context.martial_art
        level = resolve_skill_level(attack.attacker, art)
        terms = [
            ModifierTerm(label=StatName.REFLEX.value, value=attack.attacker.stats.reflex.total),
            ModifierTerm(label=art, value=level),
        ]
        roll = self.rng.roll(render_formula(get_settings().rules.attack_die, terms))
        logger.debug("Martial roll", action=context.action.value, art=art, total=roll.total)

        base = c.MARTIAL_DAMAGE_FORMULAS.get(context.action.value)
        result = self._result(
            attack,
            c.MARTIAL_TEMPLATE,
            AttackProtocol.MARTIAL_TECHNIQUE,
            fire_mode_label=context.action.value,
            attack_roll=roll,
            martial_action=context.action,
            has_damage=base is not None,
        )
        if base is not None:
            formula = apply_cyber_terminus(
                f"{base}+@strengthBonus+@martialDamageBonus",
                context.cyber_terminus,
            )
            bonus = level if art != c.UNTRAINED_MARTIAL_ART else 0
            location = resolve_location(context.target, context.target_area, self.rng)
            result.hit_location = location.location
            result.add_damage(
                resolve_damage(
                    formula,
                    roll_data(attack.attacker, martialDamageBonus=bonus),
                    location.location,
                    self.rng,
                )
            )
        attack.results.append(result)

    def _area_ordnance(self, attack: _Attack) -> None:
        ordnance = attack.weapon
        if not isinstance(ordnance, OrdnanceData):
            raise RulesEngineError("Area ordnance needs an ordnance item")

        context = attack.context
        ranged = self._range_fields(attack)
        if context.actual_distance is not None:
            ranged["range_label"] = range_label(context.range, context.actual_distance)

        roll = self._roll_to_hit(attack)
        fumble = is_natural_min(roll)
        hit = roll.total >= ranged["dc"] and not fumble

        result = self._result(
            attack,
            c.ORDNANCE_HIT_TEMPLATE,
            AttackProtocol.AREA_ORDNANCE,
            fire_mode_label=c.ORDNANCE_LINE_LABEL,
            attack_roll=roll,
            hit=hit,
            fumble=fumble,
            rounds_fired=1,
            rounds_hit=1 if hit else 0,
            ammo_remaining=max(0, ordnance.charges - 1),
            **ranged,
        )
        if not hit and ordnance.is_circle:
            result.scatter = self._scatter()
        if (hit or ordnance.is_circle) and ordnance.has_damage:
            result.add_damage(
                resolve_damage(ordnance.damage, roll_data(attack.attacker), "aoe", self.rng)
            )

        attack.ammo_spent = 1
        attack.results.append(result)

    def _scatter(self) -> ScatterResult:
        direction_roll = self.rng.roll("1d10")
        distance_roll = self.rng.roll("1d10")
        direction = c.SCATTER_DIRECTIONS.get(direction_roll.total)
        if direction is None:
            logger.warning("Scatter face not in table", face=direction_roll.total)
            direction = c.SCATTER_DIRECTIONS[10]
        label, angle = direction
        distance = distance_roll.total
        return ScatterResult(
            direction=label,
            distance=distance,
            dx=round(math.cos(angle) * distance, 6),
            dy=round(math.sin(angle) * distance, 6),
            direction_roll=direction_roll,
            distance_roll=distance_roll,
        )

    # -------------------------------------------------------------------------
    # Damage, reload, saves and checks
    # -------------------------------------------------------------------------

    def prepare(self, actor_id: str) -> Actor:
        """Prepared copy of a stored actor."""
        return prepare_actor(self.store.get(actor_id))

    def apply_damage(self, actor_id: str, amount: int) -> int:
        """Add damage to an actor, clamped to maximum health.

        Negative amounts heal. The wound condition marker follows the
        new damage total.

        Args:
            actor_id: Actor taking damage.
            amount: Wound slots of damage.

        Returns:
            The actor's new damage total.
        """
        draft = self.store.get(actor_id).model_copy(deep=True)
        draft.damage = clamp_damage(draft.damage + amount, get_settings().rules.max_health)
        marker = sync_wound_condition(draft)
        self.store.update(actor_id, {"damage": draft.damage, "conditions": draft.conditions})
        logger.info(
            "Damage applied",
            actor_id=actor_id,
            amount=amount,
            damage=draft.damage,
            wound=marker.value if marker else None,
        )
        return draft.damage

    def heal(self, actor_id: str, amount: int) -> int:
        return self.apply_damage(actor_id, -abs(amount))

    def reload(self, actor_id: str, item_id: str, ammo_type: str | None = None) -> int:
        """Refill a weapon's magazine.

        Args:
            actor_id: Owner of the weapon.
            item_id: Weapon or cyberware weapon item.
            ammo_type: Ammunition type to load; keeps the current one if None.

        Returns:
            Rounds now loaded.

        Raises:
            CombatError: If the item has no magazine.
        """
        item = self.store.get_item(actor_id, item_id)
        weapon = active_weapon(item)
        if weapon is None or weapon.shots <= 0:
            raise CombatError("Item cannot be reloaded", actor_id=actor_id, item_id=item_id)

        changes: dict[str, Any] = {item.weapon_update_path("shots_left"): weapon.shots}
        if ammo_type:
            changes[item.weapon_update_path("loaded_ammo_type")] = ammo_type
        self.store.update_item(actor_id, item_id, changes)
        logger.info("Weapon reloaded", actor_id=actor_id, item_id=item_id, shots=weapon.shots)
        return weapon.shots

    def stun_save(self, actor_id: str, penalty: int = 0) -> SaveResult:
        return self._save(actor_id, roll_stun_save, penalty)

    def poison_save(self, actor_id: str, penalty: int = 0) -> SaveResult:
        return self._save(actor_id, roll_poison_save, penalty)

    def death_save(self, actor_id: str, penalty: int = 0) -> SaveResult:
        return self._save(actor_id, roll_death_save, penalty)

    def _save(
        self,
        actor_id: str,
        roll: Callable[..., SaveResult],
        penalty: int,
    ) -> SaveResult:
        actor = self.store.get(actor_id)
        result = roll(prepare_actor(actor), self.rng, penalty=penalty)
        self.store.update(actor_id, {"conditions": result.apply(actor.conditions)})
        self.sink.publish(c.SAVE_TEMPLATE, result)
        return result

    def stat_check(self, actor_id: str, stat: StatName | str, difficulty: int, extra_mod: int = 0) -> CheckResult:
        """Roll a stat check for a stored actor and publish it."""
        actor = self.prepare(actor_id)
        result = roll_stat_check(
            actor, stat, difficulty, self.rng, extra_mod=extra_mod, fumble_hook=self.fumble_hook
        )
        self._publish_check(result)
        return result

    def skill_check(self, actor_id: str, skill_name: str, difficulty: int, extra_mod: int = 0) -> CheckResult:
        """Roll a skill check for a stored actor and publish it."""
        actor = self.prepare(actor_id)
        result = roll_skill_check(
            actor, skill_name, difficulty, self.rng, extra_mod=extra_mod, fumble_hook=self.fumble_hook
        )
        self._publish_check(result)
        return result

    def _publish_check(self, result: CheckResult) -> None:
        self.sink.publish(c.CHECK_TEMPLATE, result)
        if result.fumble is not None:
            self.sink.publish(c.FUMBLE_TEMPLATE, result.fumble)


__all__ = [
    "FIRE_MODE_PROTOCOLS",
    "select_protocol",
    "apply_cyber_terminus",
    "roll_data",
    "CombatEngine",
]
