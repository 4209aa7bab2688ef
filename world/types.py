"""Boundary contracts between the rule engine and the simulation runtime.

The rule engine never owns the world: it reads scalars and entity statuses
through these protocols and hands scheduling intents to an
:class:`EventScheduler`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union


class EntityKind(str, Enum):
    """Kinds of game entities a rule may reference by id."""

    PROJECT = "Project"
    PROCESS = "Process"
    EVENT = "Event"
    FLAG = "Flag"
    REGION = "Region"


class EntityStatus(str, Enum):
    """Lifecycle status reported by the entity catalog."""

    INACTIVE = "inactive"
    ACTIVE = "active"
    FINISHED = "finished"
    STALLED = "stalled"
    HALTED = "halted"


@dataclass(frozen=True)
class EntityRef:
    """Typed reference to a game entity."""

    kind: EntityKind
    id: str

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"


@dataclass(frozen=True)
class TriggerEventIntent:
    event_id: str
    delay_months: float = 0.0


@dataclass(frozen=True)
class AddEventIntent:
    event_id: str


@dataclass(frozen=True)
class RegionLeaveIntent:
    region_id: str


@dataclass(frozen=True)
class MigrationIntent:
    region_id: str


SchedulerIntent = Union[TriggerEventIntent, AddEventIntent, RegionLeaveIntent, MigrationIntent]


class EntityCatalog(Protocol):
    """Read access to entities plus their presence flags (unlocked, set)."""

    def entity_exists(self, kind: EntityKind, entity_id: str) -> bool:  # pragma: no cover - protocol
        ...

    def entity_status(self, kind: EntityKind, entity_id: str) -> EntityStatus:  # pragma: no cover - protocol
        ...

    def has_flag(self, kind: EntityKind, entity_id: str) -> bool:  # pragma: no cover - protocol
        ...

    def set_flag(self, kind: EntityKind, entity_id: str) -> None:  # pragma: no cover - protocol
        ...


class WorldState(Protocol):
    """Named numeric fields of the running simulation."""

    def has_scalar(self, name: str) -> bool:  # pragma: no cover - protocol
        ...

    def read_scalar(self, name: str) -> float:  # pragma: no cover - protocol
        ...

    def write_scalar(self, name: str, value: float) -> None:  # pragma: no cover - protocol
        ...

    def read_ratio(self, kind: str, entity_id: str) -> float:  # pragma: no cover - protocol
        ...


class EventScheduler(Protocol):
    """Receives the scheduling intents emitted by effect application."""

    def submit(self, intent: SchedulerIntent) -> None:  # pragma: no cover - protocol
        ...


__all__ = [
    "AddEventIntent",
    "EntityCatalog",
    "EntityKind",
    "EntityRef",
    "EntityStatus",
    "EventScheduler",
    "MigrationIntent",
    "RegionLeaveIntent",
    "SchedulerIntent",
    "TriggerEventIntent",
    "WorldState",
]
