"""Armor layering and re-fitting.

Layered armor does not simply add up: two non-zero layers give the higher
stopping power plus a bonus that shrinks as the layers grow apart.

Armor coverage maps are fitted to an owner's hit-location table when the
armor changes hands (``fit_armor``); this happens once per ownership
change, not on every preparation pass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from cyberpunk_combat.core.config import get_settings
from cyberpunk_combat.core.constants import ARMOR_LAYER_BONUS
from cyberpunk_combat.core.logging import get_logger
from cyberpunk_combat.models.items import ArmorCoverage, ArmorData, armor_coverage


if TYPE_CHECKING:
    from collections.abc import Iterable

    from cyberpunk_combat.models.actor import Actor
    from cyberpunk_combat.models.items import Item


logger = get_logger(__name__)


def layer_bonus(difference: int) -> int:
    """Stacking bonus for two layers differing by ``difference`` SP.

    Example:
        >>> layer_bonus(0), layer_bonus(9), layer_bonus(27)
        (5, 3, 0)
    """
    for threshold, bonus in ARMOR_LAYER_BONUS:
        if difference >= threshold:
            return bonus
    return ARMOR_LAYER_BONUS[-1][1]


def merge_armor(current: int, incoming: int) -> int:
    """Combine a location's stopping power with one more layer.

    Args:
        current: Stopping power already at the location.
        incoming: Stopping power of the new layer.

    Returns:
        The combined stopping power.

    Example:
        >>> merge_armor(0, 5)
        5
        >>> merge_armor(10, 10)
        15
        >>> merge_armor(10, 20)
        23
    """
    if current == 0 or incoming == 0:
        return current + incoming
    return max(current, incoming) + layer_bonus(abs(current - incoming))


def stack_armor(actor: Actor, pieces: Iterable[Item]) -> None:
    """Fold each piece's coverage into the actor's hit locations.

    Layers are processed in order. Locations the actor does not have are
    skipped; ablation reduces a layer before it is merged.

    Args:
        actor: Actor whose hit-location stopping power is updated in place.
        pieces: Equipped armor and cyberarmor items.
    """
    for item in pieces:
        for area, coverage in armor_coverage(item).items():
            location = actor.hit_locations.get(area)
            if location is None:
                continue
            location.stopping_power = merge_armor(location.stopping_power, coverage.effective)


def fit_armor(item: Item, owner: Actor) -> bool:
    """Fit an armor item's coverage map to a new owner.

    Does nothing when the armor already belongs to ``owner``. Otherwise
    records the owner, prunes locations unknown to the owner when the
    coverage map is larger than the cleanse threshold, and adds a zero
    entry for every owner location the armor lacks.

    Args:
        item: Armor item, fitted in place.
        owner: Actor taking ownership.

    Returns:
        True if the coverage map was re-fitted.
    """
    payload = item.payload
    if not isinstance(payload, ArmorData):
        return False
    if payload.last_owner_id == owner.id:
        return False

    payload.last_owner_id = owner.id
    coverage = dict(payload.coverage)

    threshold = get_settings().rules.armor_cleanse_threshold
    if len(coverage) > threshold:
        foreign = [area for area in coverage if area not in owner.hit_locations]
        for area in foreign:
            del coverage[area]
        if foreign:
            logger.warning(
                "Dropped armor locations unknown to new owner",
                item_id=item.id,
                owner_id=owner.id,
                dropped=foreign,
            )

    for area in owner.hit_locations:
        if area not in coverage:
            coverage[area] = ArmorCoverage()

    payload.coverage = coverage
    logger.info("Armor fitted", item_id=item.id, owner_id=owner.id, locations=len(coverage))
    return True


__all__ = [
    "layer_bonus",
    "merge_armor",
    "stack_armor",
    "fit_armor",
]
