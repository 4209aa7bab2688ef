"""Effect handler registry and the built-in handlers for every effect kind.

Handlers receive the already-resolved target of the effect (a scalar name or
an :class:`~world.types.EntityRef`), so by the time one runs its target is
known to exist. Handlers that schedule something return the intent instead
of submitting it; the engine submits intents once the whole batch succeeds.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional, Protocol, TypeVar, Union

from world.types import (
    AddEventIntent,
    EntityRef,
    MigrationIntent,
    RegionLeaveIntent,
    SchedulerIntent,
    TriggerEventIntent,
)

from .errors import RuleRuntimeError
from .registry import CHANGE, DELAY_MONTHS, PERCENT_CHANGE, EffectKind
from .schema import Effect

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .engine import RuleContext

LOGGER = logging.getLogger(__name__)

Target = Union[str, EntityRef]


class EffectHandler(Protocol):
    """Callable protocol for effect handlers."""

    def __call__(
        self, context: "RuleContext", effect: Effect, target: Target
    ) -> Optional[SchedulerIntent]:  # pragma: no cover - protocol
        ...


HandlerT = TypeVar("HandlerT", bound=EffectHandler)


class EffectRegistry:
    """Registry keeping the mapping between effect kinds and callables."""

    def __init__(self) -> None:
        self._handlers: Dict[EffectKind, EffectHandler] = {}

    def register(self, *kinds: EffectKind):
        def decorator(func: HandlerT) -> HandlerT:
            for kind in kinds:
                if kind in self._handlers:
                    raise ValueError(f"Handler already registered for effect '{kind.value}'")
                self._handlers[kind] = func
            return func

        return decorator

    def get(self, kind: EffectKind) -> EffectHandler:
        try:
            return self._handlers[kind]
        except KeyError as exc:
            raise RuleRuntimeError(f"No handler registered for effect '{kind.value}'") from exc

    def apply(self, context: "RuleContext", effect: Effect, target: Target) -> Optional[SchedulerIntent]:
        return self.get(effect.kind)(context, effect, target)

    def kinds(self):
        return frozenset(self._handlers)


registry = EffectRegistry()


@registry.register(EffectKind.LOCAL_VARIABLE, EffectKind.WORLD_VARIABLE, EffectKind.PLAYER_VARIABLE)
def add_change(context: "RuleContext", effect: Effect, target: Target) -> None:
    """Add ``Change`` to the targeted scalar."""

    name = str(target)
    current = context.world.read_scalar(name)
    updated = current + effect.param(CHANGE)
    context.world.write_scalar(name, updated)
    LOGGER.debug("%s: %s %s -> %s", effect.kind.value, name, current, updated)


@registry.register(EffectKind.DEMAND, EffectKind.OUTPUT, EffectKind.RESOURCE, EffectKind.OUTPUT_FOR_FEATURE)
def scale_by_percent(context: "RuleContext", effect: Effect, target: Target) -> None:
    """Multiply the targeted scalar by ``1 + PercentChange / 100``."""

    name = str(target)
    current = context.world.read_scalar(name)
    updated = current * (1 + effect.param(PERCENT_CHANGE) / 100)
    context.world.write_scalar(name, updated)
    LOGGER.debug("%s: %s %s -> %s", effect.kind.value, name, current, updated)


@registry.register(EffectKind.UNLOCKS_PROJECT, EffectKind.UNLOCKS_PROCESS, EffectKind.SET_FLAG)
def set_presence_flag(context: "RuleContext", effect: Effect, target: Target) -> None:
    """Unlock the referenced project/process or set the referenced flag."""

    assert isinstance(target, EntityRef)
    context.catalog.set_flag(target.kind, target.id)
    LOGGER.debug("%s: flagged %s", effect.kind.value, target)


@registry.register(EffectKind.TRIGGER_EVENT)
def trigger_event(context: "RuleContext", effect: Effect, target: Target) -> SchedulerIntent:
    assert isinstance(target, EntityRef)
    return TriggerEventIntent(event_id=target.id, delay_months=effect.param(DELAY_MONTHS))


@registry.register(EffectKind.ADD_EVENT)
def add_event(context: "RuleContext", effect: Effect, target: Target) -> SchedulerIntent:
    assert isinstance(target, EntityRef)
    return AddEventIntent(event_id=target.id)


@registry.register(EffectKind.REGION_LEAVE)
def region_leave(context: "RuleContext", effect: Effect, target: Target) -> SchedulerIntent:
    assert isinstance(target, EntityRef)
    return RegionLeaveIntent(region_id=target.id)


@registry.register(EffectKind.MIGRATION)
def migration(context: "RuleContext", effect: Effect, target: Target) -> SchedulerIntent:
    assert isinstance(target, EntityRef)
    return MigrationIntent(region_id=target.id)


__all__ = [
    "EffectHandler",
    "EffectRegistry",
    "Target",
    "add_change",
    "add_event",
    "migration",
    "region_leave",
    "registry",
    "scale_by_percent",
    "set_presence_flag",
    "trigger_event",
]
