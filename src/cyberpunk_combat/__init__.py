"""Cyberpunk 2020 combat resolution and condition engine.

Resolves attacks for the Cyberpunk 2020 tabletop ruleset: seven attack
protocols (single shot, three-round burst, full auto, suppressive fire,
melee strike, martial technique, area ordnance), to-hit modifier
aggregation, armor layering, wound-driven stat loss, hit locations and
per-location damage.

The engine never owns randomness or persistence: dice come from a
RandomSource (d20 by default), documents from an EntityStore, and
results go to a PresentationSink.

Example:
    >>> from cyberpunk_combat import (
    ...     Actor, AttackContext, CombatEngine, FireMode, InMemoryEntityStore, make_item
    ... )
    >>> rifle = make_item("Militech Ronin", {"kind": "weapon", "weapon_type": "Rifle",
    ...     "attack_type": "Auto", "rof": 30, "shots": 30, "shots_left": 30, "damage": "5d6"})
    >>> solo = Actor(name="Morgan Blackhand", items=[rifle])
    >>> engine = CombatEngine(InMemoryEntityStore([solo]))
    >>> outcome = engine.attack(AttackContext(attacker=solo, weapon=rifle,
    ...     fire_mode=FireMode.FULL_AUTO))

Modules:
    core: Configuration, logging, exceptions and rules tables.
    models: Pydantic V2 schemas for actors, items and results.
    engine: Derived stats, armor, wounds, modifiers and the dispatcher.
    storage: Entity store.
"""

from __future__ import annotations

# Core
from cyberpunk_combat.core.config import Settings, get_settings
from cyberpunk_combat.core.exceptions import CombatEngineError
from cyberpunk_combat.core.logging import configure_logging, get_logger

# Models
from cyberpunk_combat.models import (
    Actor,
    AttackContext,
    AttackOutcome,
    AttackResult,
    FireMode,
    Item,
    RangeBracket,
    make_item,
)

# Engine
from cyberpunk_combat.engine import (
    CollectingSink,
    CombatEngine,
    D20RandomSource,
    FumbleTable,
    prepare_actor,
)

# Storage
from cyberpunk_combat.storage import InMemoryEntityStore


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "CombatEngineError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "Actor",
    "AttackContext",
    "AttackOutcome",
    "AttackResult",
    "FireMode",
    "Item",
    "RangeBracket",
    "make_item",
    # Engine
    "CollectingSink",
    "CombatEngine",
    "D20RandomSource",
    "FumbleTable",
    "prepare_actor",
    # Storage
    "InMemoryEntityStore",
]
