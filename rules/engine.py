"""Evaluation of conditions and application of effects against a world."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence

from world.types import (
    EntityCatalog,
    EntityKind,
    EntityRef,
    EntityStatus,
    EventScheduler,
    SchedulerIntent,
    WorldState,
)

from .effects import EffectRegistry, Target, registry
from .errors import RuleRuntimeError, UnknownScalarError, UnresolvedSubjectError
from .registry import REGISTRY, ConditionKind, EffectKind, SchemaRegistry
from .scalars import (
    CONDITION_NAMESPACES,
    DEMAND,
    EFFECT_NAMESPACES,
    LOCAL,
    OUTPUT,
    RESOURCE,
    RESOURCE_DEMAND,
    RUNS_PLAYED,
    scalar_name,
)
from .schema import Condition, Effect

LOGGER = logging.getLogger(__name__)

PROCESS_FEATURE_RATIO = "ProcessFeature"

_PROJECT_STATUS = {
    ConditionKind.PROJECT_ACTIVE: EntityStatus.ACTIVE,
    ConditionKind.PROJECT_INACTIVE: EntityStatus.INACTIVE,
    ConditionKind.PROJECT_FINISHED: EntityStatus.FINISHED,
    ConditionKind.PROJECT_STALLED: EntityStatus.STALLED,
    ConditionKind.PROJECT_HALTED: EntityStatus.HALTED,
}

_REGION_EFFECTS = frozenset({EffectKind.REGION_LEAVE, EffectKind.MIGRATION})
_INTENT_EFFECTS = frozenset({EffectKind.TRIGGER_EVENT, EffectKind.ADD_EVENT}) | _REGION_EFFECTS


@dataclass(frozen=True)
class EngineConfig:
    """Tunable evaluation constants used by :class:`RuleEngine`."""

    # Reading of OutputDemandGap/ResourceDemandGap when demand is zero.
    zero_demand_gap: float = math.inf


@dataclass
class RuleContext:
    """Everything a rule needs from the running simulation for one call."""

    world: WorldState
    catalog: EntityCatalog
    scheduler: Optional[EventScheduler] = None
    region: Optional[str] = None

    def for_region(self, region: Optional[str]) -> "RuleContext":
        """Return a context bound to ``region`` for local variables and region effects."""

        return replace(self, region=region)


class RuleEngine:
    """Evaluates :class:`Condition` objects and applies :class:`Effect` objects."""

    def __init__(
        self,
        effect_registry: Optional[EffectRegistry] = None,
        *,
        config: Optional[EngineConfig] = None,
        schemas: SchemaRegistry = REGISTRY,
    ) -> None:
        self._registry = effect_registry or registry
        self._config = config or EngineConfig()
        self._schemas = schemas

    # -------------------------------------------------------------- conditions
    def evaluate(self, condition: Condition, context: RuleContext) -> bool:
        """Evaluate ``condition``; raises :class:`RuleRuntimeError` subclasses
        when its subject cannot be resolved against the world."""

        reading = self._read(condition, context)
        if self._schemas.lookup_condition(condition.kind).comparable:
            assert condition.comparator is not None and condition.value is not None
            return condition.comparator.compare(reading, condition.value)
        return reading != 0.0

    def check(self, condition: Condition, context: RuleContext) -> bool:
        """Like :meth:`evaluate`, but an unresolvable condition counts as false."""

        try:
            return self.evaluate(condition, context)
        except RuleRuntimeError as exc:
            LOGGER.warning(
                "Condition %s(%s) treated as false: %s", condition.kind.value, condition.subject, exc
            )
            return False

    def evaluate_all(self, conditions: Iterable[Condition], context: RuleContext) -> bool:
        return all(self.check(condition, context) for condition in conditions)

    # ----------------------------------------------------------------- effects
    def apply_effect(self, effect: Effect, context: RuleContext) -> List[SchedulerIntent]:
        return self.apply_all([effect], context)

    def apply_all(self, effects: Sequence[Effect], context: RuleContext) -> List[SchedulerIntent]:
        """Apply ``effects`` in order, all or nothing.

        Every target is resolved before the first write, so a dangling entity
        or undeclared scalar anywhere in the batch leaves the world untouched.
        Intents are submitted to the scheduler after the last write.
        """

        targets = [self._resolve_target(effect, context) for effect in effects]
        intents: List[SchedulerIntent] = []
        for effect, target in zip(effects, targets):
            intent = self._registry.apply(context, effect, target)
            if intent is not None:
                intents.append(intent)
        for intent in intents:
            assert context.scheduler is not None
            context.scheduler.submit(intent)
        return intents

    # ------------------------------------------------------------------ helpers
    def _read(self, condition: Condition, context: RuleContext) -> float:
        kind = condition.kind
        subject = condition.subject
        namespace = CONDITION_NAMESPACES.get(kind)
        if namespace is not None:
            region = self._require_region(context) if namespace == LOCAL else None
            return self._read_scalar(context, scalar_name(namespace, subject, region))
        if kind == ConditionKind.OUTPUT_DEMAND_GAP:
            return self._gap(context, scalar_name(OUTPUT, subject), scalar_name(DEMAND, subject))
        if kind == ConditionKind.RESOURCE_DEMAND_GAP:
            return self._gap(context, scalar_name(RESOURCE, subject), scalar_name(RESOURCE_DEMAND, subject))
        if kind == ConditionKind.PROCESS_MIX_SHARE:
            self._require_entity(context, EntityKind.PROCESS, subject)
            return context.world.read_ratio(EntityKind.PROCESS.value, subject)
        if kind == ConditionKind.PROCESS_MIX_SHARE_FEATURE:
            return context.world.read_ratio(PROCESS_FEATURE_RATIO, subject)
        if kind in _PROJECT_STATUS:
            self._require_entity(context, EntityKind.PROJECT, subject)
            status = context.catalog.entity_status(EntityKind.PROJECT, subject)
            return 1.0 if status == _PROJECT_STATUS[kind] else 0.0
        if kind == ConditionKind.FLAG:
            self._require_entity(context, EntityKind.FLAG, subject)
            return 1.0 if context.catalog.has_flag(EntityKind.FLAG, subject) else 0.0
        if kind == ConditionKind.RUNS_PLAYED:
            return self._read_scalar(context, RUNS_PLAYED)
        raise RuleRuntimeError(f"Unsupported condition kind '{kind}'")  # pragma: no cover

    def _gap(self, context: RuleContext, supply_name: str, demand_name: str) -> float:
        supply = self._read_scalar(context, supply_name)
        demand = self._read_scalar(context, demand_name)
        if demand == 0:
            return self._config.zero_demand_gap
        return supply / demand

    def _resolve_target(self, effect: Effect, context: RuleContext) -> Target:
        self._check_params(effect)
        kind = effect.kind
        namespace = EFFECT_NAMESPACES.get(kind)
        if namespace is not None:
            region = self._require_region(context) if namespace == LOCAL else None
            name = scalar_name(namespace, effect.subject, region)
            if not context.world.has_scalar(name):
                raise UnknownScalarError(name)
            return name

        if kind in _REGION_EFFECTS:
            target = EntityRef(EntityKind.REGION, self._require_region(context))
        else:
            entity = self._schemas.lookup_effect(kind).entity
            assert entity is not None and effect.subject is not None
            self._require_entity(context, entity, effect.subject)
            target = EntityRef(entity, effect.subject)
        if kind in _INTENT_EFFECTS and context.scheduler is None:
            raise RuleRuntimeError(f"Effect '{kind.value}' needs an event scheduler")
        return target

    @staticmethod
    def _check_params(effect: Effect) -> None:
        for name in effect.params:
            try:
                number = effect.param(name)
            except (TypeError, ValueError, OverflowError) as exc:
                raise RuleRuntimeError(f"Effect '{effect.kind.value}' param '{name}' is not a number") from exc
            if not math.isfinite(number):
                raise RuleRuntimeError(f"Effect '{effect.kind.value}' param '{name}' is not finite")

    @staticmethod
    def _read_scalar(context: RuleContext, name: str) -> float:
        if not context.world.has_scalar(name):
            raise UnknownScalarError(name)
        return context.world.read_scalar(name)

    @staticmethod
    def _require_entity(context: RuleContext, kind: EntityKind, entity_id: Optional[str]) -> None:
        if entity_id is None or not context.catalog.entity_exists(kind, entity_id):
            raise UnresolvedSubjectError(kind.value, entity_id)

    @staticmethod
    def _require_region(context: RuleContext) -> str:
        region = context.region
        if region is None or not context.catalog.entity_exists(EntityKind.REGION, region):
            raise UnresolvedSubjectError(EntityKind.REGION.value, region)
        return region


__all__ = ["EngineConfig", "RuleContext", "RuleEngine"]
