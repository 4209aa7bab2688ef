"""World-facing contracts and their in-memory implementations."""

from world.state import EventQueue, InMemoryEntityCatalog, InMemoryWorldState, state_hash
from world.types import (
    AddEventIntent,
    EntityCatalog,
    EntityKind,
    EntityRef,
    EntityStatus,
    EventScheduler,
    MigrationIntent,
    RegionLeaveIntent,
    SchedulerIntent,
    TriggerEventIntent,
    WorldState,
)

__all__ = [
    "AddEventIntent",
    "EntityCatalog",
    "EntityKind",
    "EntityRef",
    "EntityStatus",
    "EventQueue",
    "EventScheduler",
    "InMemoryEntityCatalog",
    "InMemoryWorldState",
    "MigrationIntent",
    "RegionLeaveIntent",
    "SchedulerIntent",
    "TriggerEventIntent",
    "WorldState",
    "state_hash",
]
