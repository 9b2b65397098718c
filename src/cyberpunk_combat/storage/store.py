"""Entity store for actors and their items.

The engine reads actors by id and writes changes as ``{path: value}``
maps, e.g. ``{"payload.shots_left": 4}`` on an item or ``{"damage": 12}``
on an actor. Each update call is atomic: every path is applied to a deep
copy first and only if all of them validate are they applied to the
stored document.

Item ownership is exclusive. Adding or transferring an item removes it
from any previous owner and re-fits armor to the new one.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cyberpunk_combat.core.exceptions import EntityNotFoundError, ValidationError
from cyberpunk_combat.core.logging import get_logger
from cyberpunk_combat.engine.armor import fit_armor
from cyberpunk_combat.models.actor import Actor
from cyberpunk_combat.models.items import Item


logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


# =============================================================================
# Path Updates
# =============================================================================


def _child(node: Any, key: str, path: str) -> Any:
    if isinstance(node, BaseModel):
        if key not in type(node).model_fields:
            raise ValidationError(f"Unknown field '{key}'", field_name=path)
        value = getattr(node, key)
    elif isinstance(node, dict):
        if key not in node:
            raise ValidationError(f"Unknown key '{key}'", field_name=path)
        value = node[key]
    else:
        raise ValidationError(f"Cannot descend into '{key}'", field_name=path)

    if value is None:
        raise ValidationError(f"'{key}' is empty", field_name=path)
    return value


def _assign(node: Any, key: str, value: Any, path: str) -> Any:
    if isinstance(node, BaseModel):
        if key not in type(node).model_fields:
            raise ValidationError(f"Unknown field '{key}'", field_name=path)
        old = getattr(node, key)
        try:
            setattr(node, key, value)
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid value for '{path}'",
                field_name=path,
                invalid_value=value,
                details={"errors": exc.error_count()},
            ) from exc
        return old
    if isinstance(node, dict):
        old = node.get(key)
        node[key] = value
        return old
    raise ValidationError(f"Cannot assign '{key}'", field_name=path)


def _apply(model: BaseModel, changes: Mapping[str, Any]) -> dict[str, Any]:
    previous: dict[str, Any] = {}
    for path, value in changes.items():
        parts = path.split(".")
        node: Any = model
        for part in parts[:-1]:
            node = _child(node, part, path)
        previous[path] = _assign(node, parts[-1], value, path)
    return previous


def apply_updates(model: ModelT, changes: Mapping[str, Any]) -> dict[str, Any]:
    """Apply dotted-path changes to a model, all or nothing.

    Args:
        model: Document to update in place.
        changes: Dotted path to new value.

    Returns:
        Dotted path to the value it replaced.

    Raises:
        ValidationError: If any path is unknown or any value invalid; the
            model is left unchanged.

    Example:
        >>> apply_updates(item, {"payload.shots_left": 4})
        {'payload.shots_left': 6}
    """
    _apply(model.model_copy(deep=True), changes)
    return _apply(model, changes)


# =============================================================================
# Store
# =============================================================================


@runtime_checkable
class EntityStore(Protocol):
    """Actor persistence used by the combat engine."""

    def get(self, actor_id: str) -> Actor:
        ...

    def update(self, actor_id: str, changes: Mapping[str, Any]) -> dict[str, Any]:
        ...

    def update_item(
        self,
        actor_id: str,
        item_id: str,
        changes: Mapping[str, Any],
    ) -> dict[str, Any]:
        ...

    def delete_item(self, actor_id: str, item_id: str) -> Item:
        ...


class InMemoryEntityStore:
    """Dictionary-backed entity store.

    Stored actors are held by reference; ``get`` returns the live
    document, so callers that want a scratch copy must copy it.

    Example:
        >>> store = InMemoryEntityStore([Actor(name="Johnny")])
        >>> len(store)
        1
    """

    def __init__(self, actors: Iterable[Actor] = ()) -> None:
        self._actors: dict[str, Actor] = {}
        for actor in actors:
            self.add(actor)

    def __contains__(self, actor_id: object) -> bool:
        return actor_id in self._actors

    def __len__(self) -> int:
        return len(self._actors)

    def __iter__(self) -> Iterator[Actor]:
        return iter(self._actors.values())

    # -------------------------------------------------------------------------
    # Actors
    # -------------------------------------------------------------------------

    def add(self, actor: Actor) -> Actor:
        """Store an actor, taking ownership of its items.

        Args:
            actor: Actor to store.

        Returns:
            The stored actor.
        """
        for item in actor.items:
            self._release(item.id, keep=actor.id)
            fit_armor(item, actor)
        self._actors[actor.id] = actor
        logger.debug("Actor stored", actor_id=actor.id, items=len(actor.items))
        return actor

    def find(self, actor_id: str) -> Actor | None:
        return self._actors.get(actor_id)

    def get(self, actor_id: str) -> Actor:
        """Get an actor.

        Raises:
            EntityNotFoundError: If no actor has this id.
        """
        actor = self._actors.get(actor_id)
        if actor is None:
            raise EntityNotFoundError("Actor not found", entity_id=actor_id)
        return actor

    def remove(self, actor_id: str) -> Actor:
        actor = self.get(actor_id)
        del self._actors[actor_id]
        return actor

    def update(self, actor_id: str, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Atomically apply path changes to an actor.

        Args:
            actor_id: Actor to update.
            changes: Dotted path to new value.

        Returns:
            Dotted path to the replaced value.

        Raises:
            EntityNotFoundError: If the actor does not exist.
            ValidationError: If any change is rejected.
        """
        previous = apply_updates(self.get(actor_id), changes)
        logger.debug("Actor updated", actor_id=actor_id, paths=list(changes))
        return previous

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def get_item(self, actor_id: str, item_id: str) -> Item:
        """Get an item owned by an actor.

        Raises:
            EntityNotFoundError: If the actor or the item does not exist.
        """
        item = self.get(actor_id).get_item(item_id)
        if item is None:
            raise EntityNotFoundError(
                "Item not found",
                entity_id=item_id,
                details={"actor_id": actor_id},
            )
        return item

    def update_item(
        self,
        actor_id: str,
        item_id: str,
        changes: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Atomically apply path changes to an owned item.

        Paths are relative to the item, e.g. ``payload.weapon.shots_left``.
        """
        previous = apply_updates(self.get_item(actor_id, item_id), changes)
        logger.debug("Item updated", actor_id=actor_id, item_id=item_id, paths=list(changes))
        return previous

    def add_item(self, actor_id: str, item: Item) -> Item:
        """Give an item to an actor, removing it from any other owner.

        Armor is re-fitted to the new owner's hit locations.
        """
        owner = self.get(actor_id)
        self._release(item.id, keep=actor_id)
        if not owner.owns(item):
            owner.items.append(item)
        fit_armor(item, owner)
        logger.info("Item added", actor_id=actor_id, item_id=item.id, kind=item.kind.value)
        return item

    def transfer_item(self, item_id: str, from_actor_id: str, to_actor_id: str) -> Item:
        """Move an item between actors.

        Raises:
            EntityNotFoundError: If either actor or the item does not exist.
        """
        item = self.get_item(from_actor_id, item_id)
        self.get(to_actor_id)
        return self.add_item(to_actor_id, item)

    def delete_item(self, actor_id: str, item_id: str) -> Item:
        """Remove an item from its owner and return it."""
        owner = self.get(actor_id)
        item = self.get_item(actor_id, item_id)
        owner.items = [i for i in owner.items if i.id != item_id]
        logger.info("Item deleted", actor_id=actor_id, item_id=item_id)
        return item

    def _release(self, item_id: str, *, keep: str) -> None:
        for actor in self._actors.values():
            if actor.id != keep and actor.get_item(item_id) is not None:
                actor.items = [i for i in actor.items if i.id != item_id]
                logger.debug("Item released", actor_id=actor.id, item_id=item_id)


__all__ = [
    "apply_updates",
    "EntityStore",
    "InMemoryEntityStore",
]
