"""In-memory world state, entity catalog and event queue.

These are reference implementations of the protocols in :mod:`world.types`.
The demo script and the test-suite drive the rule engine through them; a
real simulation runtime provides its own.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Set, Tuple

from world.types import EntityKind, EntityStatus, SchedulerIntent


@dataclass
class InMemoryWorldState:
    """Dictionary-backed scalars and mix-share ratios.

    Only declared scalars may be read or written; reading an undeclared
    name raises :class:`KeyError`.
    """

    scalars: Dict[str, float] = field(default_factory=dict)
    ratios: Dict[Tuple[str, str], float] = field(default_factory=dict)

    @classmethod
    def from_names(cls, names: Iterable[str], *, initial: float = 0.0) -> "InMemoryWorldState":
        return cls(scalars={name: initial for name in names})

    def has_scalar(self, name: str) -> bool:
        return name in self.scalars

    def read_scalar(self, name: str) -> float:
        return self.scalars[name]

    def write_scalar(self, name: str, value: float) -> None:
        if name not in self.scalars:
            raise KeyError(name)
        self.scalars[name] = float(value)

    def set_ratio(self, kind: str, entity_id: str, value: float) -> None:
        self.ratios[(kind, entity_id)] = float(value)

    def read_ratio(self, kind: str, entity_id: str) -> float:
        # Entities absent from the mix hold no share.
        return self.ratios.get((kind, entity_id), 0.0)

    def to_payload(self) -> Dict[str, object]:
        return {
            "scalars": dict(sorted(self.scalars.items())),
            "ratios": {f"{kind}:{entity_id}": value for (kind, entity_id), value in sorted(self.ratios.items())},
        }


@dataclass
class CatalogEntry:
    status: EntityStatus = EntityStatus.INACTIVE
    flagged: bool = False


class InMemoryEntityCatalog:
    """Registry of game entities keyed by kind and id."""

    def __init__(self, entities: Optional[Mapping[EntityKind, Iterable[str]]] = None) -> None:
        self._entries: Dict[EntityKind, Dict[str, CatalogEntry]] = {kind: {} for kind in EntityKind}
        for kind, ids in (entities or {}).items():
            for entity_id in ids:
                self.add(kind, entity_id)

    def add(
        self,
        kind: EntityKind,
        entity_id: str,
        *,
        status: EntityStatus = EntityStatus.INACTIVE,
        flagged: bool = False,
    ) -> None:
        self._entries[kind][entity_id] = CatalogEntry(status=status, flagged=flagged)

    def remove(self, kind: EntityKind, entity_id: str) -> None:
        self._entries[kind].pop(entity_id, None)

    def set_status(self, kind: EntityKind, entity_id: str, status: EntityStatus) -> None:
        self._require(kind, entity_id).status = status

    def entity_exists(self, kind: EntityKind, entity_id: str) -> bool:
        return entity_id in self._entries[kind]

    def entity_status(self, kind: EntityKind, entity_id: str) -> EntityStatus:
        return self._require(kind, entity_id).status

    def has_flag(self, kind: EntityKind, entity_id: str) -> bool:
        return self._require(kind, entity_id).flagged

    def set_flag(self, kind: EntityKind, entity_id: str) -> None:
        self._require(kind, entity_id).flagged = True

    def ids(self, kind: EntityKind) -> Set[str]:
        return set(self._entries[kind])

    def to_payload(self) -> Dict[str, object]:
        return {
            kind.value: {
                entity_id: {"status": entry.status.value, "flagged": entry.flagged}
                for entity_id, entry in sorted(entries.items())
            }
            for kind, entries in self._entries.items()
        }

    def _require(self, kind: EntityKind, entity_id: str) -> CatalogEntry:
        try:
            return self._entries[kind][entity_id]
        except KeyError as exc:
            raise KeyError(f"{kind.value} '{entity_id}' is not in the catalog") from exc


class EventQueue:
    """Collects scheduler intents in submission order."""

    def __init__(self) -> None:
        self._pending: List[SchedulerIntent] = []

    def submit(self, intent: SchedulerIntent) -> None:
        self._pending.append(intent)

    @property
    def pending(self) -> List[SchedulerIntent]:
        return list(self._pending)

    def drain(self) -> List[SchedulerIntent]:
        drained, self._pending = self._pending, []
        return drained

    def __len__(self) -> int:
        return len(self._pending)


def state_hash(world: InMemoryWorldState, catalog: Optional[InMemoryEntityCatalog] = None) -> str:
    """Return a deterministic hash for the world (and catalog) contents."""

    payload = {
        "world": world.to_payload(),
        "catalog": catalog.to_payload() if catalog is not None else None,
    }
    return hashlib.sha256(json.dumps(payload, sort_keys=True).encode("utf8")).hexdigest()


__all__ = [
    "CatalogEntry",
    "EventQueue",
    "InMemoryEntityCatalog",
    "InMemoryWorldState",
    "state_hash",
]
