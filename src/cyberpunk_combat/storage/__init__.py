"""Actor and item persistence used by the combat engine."""

from cyberpunk_combat.storage.store import (
    EntityStore,
    InMemoryEntityStore,
    apply_updates,
)

__all__ = [
    "EntityStore",
    "InMemoryEntityStore",
    "apply_updates",
]
