"""Static catalog of condition and effect kinds.

Each kind declares whether it takes a comparator, the domain its subject
ranges over (a :class:`ChoiceSet` or an :class:`~world.types.EntityKind`),
and the named parameters it requires. The table is compiled in and the
module-level :data:`REGISTRY` is built once at import.
"""

from __future__ import annotations

import math
import operator
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Type, Union

from world.types import EntityKind

from .catalog import Byproduct, Output, ProcessFeature, Resource, unit_of

CHANGE = "Change"
PERCENT_CHANGE = "PercentChange"
DELAY_MONTHS = "DelayMonths"


class Comparator(str, Enum):
    LT = "<"
    LE = "<="
    EQ = "=="
    NE = "!="
    GE = ">="
    GT = ">"

    def compare(self, left: float, right: float) -> bool:
        return _COMPARATOR_FUNCS[self](left, right)


_COMPARATOR_FUNCS: Dict[Comparator, Callable[[float, float], bool]] = {
    Comparator.LT: operator.lt,
    Comparator.LE: operator.le,
    Comparator.EQ: operator.eq,
    Comparator.NE: operator.ne,
    Comparator.GE: operator.ge,
    Comparator.GT: operator.gt,
}


class ConditionKind(str, Enum):
    LOCAL_VARIABLE = "LocalVariable"
    WORLD_VARIABLE = "WorldVariable"
    DEMAND = "Demand"
    OUTPUT = "Output"
    OUTPUT_DEMAND_GAP = "OutputDemandGap"
    RESOURCE = "Resource"
    RESOURCE_DEMAND_GAP = "ResourceDemandGap"
    PROCESS_MIX_SHARE = "ProcessMixShare"
    PROCESS_MIX_SHARE_FEATURE = "ProcessMixShareFeature"
    PROJECT_ACTIVE = "ProjectActive"
    PROJECT_INACTIVE = "ProjectInactive"
    PROJECT_FINISHED = "ProjectFinished"
    PROJECT_STALLED = "ProjectStalled"
    PROJECT_HALTED = "ProjectHalted"
    FLAG = "Flag"
    RUNS_PLAYED = "RunsPlayed"


class EffectKind(str, Enum):
    LOCAL_VARIABLE = "LocalVariable"
    WORLD_VARIABLE = "WorldVariable"
    PLAYER_VARIABLE = "PlayerVariable"
    DEMAND = "Demand"
    OUTPUT = "Output"
    OUTPUT_FOR_FEATURE = "OutputForFeature"
    RESOURCE = "Resource"
    TRIGGER_EVENT = "TriggerEvent"
    ADD_EVENT = "AddEvent"
    UNLOCKS_PROJECT = "UnlocksProject"
    UNLOCKS_PROCESS = "UnlocksProcess"
    SET_FLAG = "SetFlag"
    REGION_LEAVE = "RegionLeave"
    MIGRATION = "Migration"


class ParamType(str, Enum):
    NUMBER = "number"

    def accepts(self, value: Any) -> bool:
        # bool is an int subclass but never a valid number payload.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        try:
            return math.isfinite(float(value))
        except OverflowError:
            return False


@dataclass(frozen=True)
class ChoiceSet:
    """Named, ordered set of legal subject values."""

    name: str
    values: Tuple[str, ...]

    @classmethod
    def from_enum(cls, enum_cls: Type[Enum]) -> "ChoiceSet":
        return cls(enum_cls.__name__, tuple(member.value for member in enum_cls))

    @classmethod
    def of(cls, name: str, *values: str) -> "ChoiceSet":
        return cls(name, tuple(values))

    def __contains__(self, value: object) -> bool:
        return value in self.values

    def __iter__(self):
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)


Domain = Union[ChoiceSet, EntityKind, None]
_NO_PARAMS: Mapping[str, ParamType] = MappingProxyType({})


class _DomainMixin:
    choices: Optional[ChoiceSet]
    entity: Optional[EntityKind]

    @property
    def domain(self) -> Domain:
        return self.choices if self.choices is not None else self.entity

    def to_payload(self) -> Dict[str, object]:
        return {
            "kind": self.kind.value,  # type: ignore[attr-defined]
            "comparable": self.comparable,  # type: ignore[attr-defined]
            "choices": list(self.choices.values) if self.choices is not None else None,
            "entity": self.entity.value if self.entity is not None else None,
            "params": {name: kind.value for name, kind in self.params.items()},  # type: ignore[attr-defined]
        }


@dataclass(frozen=True)
class ConditionSchema(_DomainMixin):
    kind: ConditionKind
    comparable: bool = False
    choices: Optional[ChoiceSet] = None
    entity: Optional[EntityKind] = None

    @property
    def params(self) -> Mapping[str, ParamType]:
        return _NO_PARAMS


@dataclass(frozen=True)
class EffectSchema(_DomainMixin):
    kind: EffectKind
    choices: Optional[ChoiceSet] = None
    entity: Optional[EntityKind] = None
    params: Mapping[str, ParamType] = field(default_factory=lambda: _NO_PARAMS)

    @property
    def comparable(self) -> bool:
        return False


OUTPUTS = ChoiceSet.from_enum(Output)
RESOURCES = ChoiceSet.from_enum(Resource)
PROCESS_FEATURES = ChoiceSet.from_enum(ProcessFeature)

_NUMBER = ParamType.NUMBER


def _params(*names: str) -> Mapping[str, ParamType]:
    return MappingProxyType({name: _NUMBER for name in names})


CONDITION_TABLE: Tuple[ConditionSchema, ...] = (
    ConditionSchema(
        ConditionKind.LOCAL_VARIABLE,
        comparable=True,
        choices=ChoiceSet.of(
            "LocalVariable",
            "Population", "Health", "Safety", "Outlook", "Contentedness", "Habitability",
        ),
    ),
    ConditionSchema(
        ConditionKind.WORLD_VARIABLE,
        comparable=True,
        choices=ChoiceSet.of(
            "WorldVariable",
            "Year", "Population", "Emissions", "Biodiversity", "Temperature",
            "Precipitation", "SeaLevelRise", "Outlook", "Contentedness", "ResourceIntensity",
        ),
    ),
    ConditionSchema(ConditionKind.DEMAND, comparable=True, choices=OUTPUTS),
    ConditionSchema(ConditionKind.OUTPUT, comparable=True, choices=OUTPUTS),
    ConditionSchema(ConditionKind.OUTPUT_DEMAND_GAP, comparable=True, choices=OUTPUTS),
    ConditionSchema(ConditionKind.RESOURCE, comparable=True, choices=RESOURCES),
    ConditionSchema(ConditionKind.RESOURCE_DEMAND_GAP, comparable=True, choices=RESOURCES),
    ConditionSchema(ConditionKind.PROCESS_MIX_SHARE, comparable=True, entity=EntityKind.PROCESS),
    ConditionSchema(ConditionKind.PROCESS_MIX_SHARE_FEATURE, comparable=True, choices=PROCESS_FEATURES),
    ConditionSchema(ConditionKind.PROJECT_ACTIVE, entity=EntityKind.PROJECT),
    ConditionSchema(ConditionKind.PROJECT_INACTIVE, entity=EntityKind.PROJECT),
    ConditionSchema(ConditionKind.PROJECT_FINISHED, entity=EntityKind.PROJECT),
    ConditionSchema(ConditionKind.PROJECT_STALLED, entity=EntityKind.PROJECT),
    ConditionSchema(ConditionKind.PROJECT_HALTED, entity=EntityKind.PROJECT),
    ConditionSchema(ConditionKind.FLAG, entity=EntityKind.FLAG),
    ConditionSchema(ConditionKind.RUNS_PLAYED, comparable=True),
)

EFFECT_TABLE: Tuple[EffectSchema, ...] = (
    EffectSchema(
        EffectKind.LOCAL_VARIABLE,
        choices=ChoiceSet.of(
            "LocalVariable",
            "Population", "Health", "Safety", "Outlook", "BaseHabitability",
        ),
        params=_params(CHANGE),
    ),
    EffectSchema(
        EffectKind.WORLD_VARIABLE,
        choices=ChoiceSet.of(
            "WorldVariable",
            "Population", "Emissions", "Health", "Safety", "Biodiversity",
            "Temperature", "Precipitation", "SeaLevelRise", "Outlook",
        ),
        params=_params(CHANGE),
    ),
    EffectSchema(
        EffectKind.PLAYER_VARIABLE,
        choices=ChoiceSet.of("PlayerVariable", "PoliticalCapital"),
        params=_params(CHANGE),
    ),
    EffectSchema(EffectKind.DEMAND, choices=OUTPUTS, params=_params(PERCENT_CHANGE)),
    EffectSchema(EffectKind.OUTPUT, choices=OUTPUTS, params=_params(PERCENT_CHANGE)),
    EffectSchema(EffectKind.OUTPUT_FOR_FEATURE, choices=PROCESS_FEATURES, params=_params(PERCENT_CHANGE)),
    EffectSchema(EffectKind.RESOURCE, choices=RESOURCES, params=_params(PERCENT_CHANGE)),
    EffectSchema(EffectKind.TRIGGER_EVENT, entity=EntityKind.EVENT, params=_params(DELAY_MONTHS)),
    EffectSchema(EffectKind.ADD_EVENT, entity=EntityKind.EVENT),
    EffectSchema(EffectKind.UNLOCKS_PROJECT, entity=EntityKind.PROJECT),
    EffectSchema(EffectKind.UNLOCKS_PROCESS, entity=EntityKind.PROCESS),
    EffectSchema(EffectKind.SET_FLAG, entity=EntityKind.FLAG),
    EffectSchema(EffectKind.REGION_LEAVE),
    EffectSchema(EffectKind.MIGRATION),
)


class SchemaRegistry:
    """Immutable lookup from every condition/effect kind to its schema."""

    def __init__(
        self,
        conditions: Iterable[ConditionSchema] = CONDITION_TABLE,
        effects: Iterable[EffectSchema] = EFFECT_TABLE,
    ) -> None:
        self._conditions: Mapping[ConditionKind, ConditionSchema] = MappingProxyType(
            {schema.kind: schema for schema in conditions}
        )
        self._effects: Mapping[EffectKind, EffectSchema] = MappingProxyType(
            {schema.kind: schema for schema in effects}
        )
        missing = [kind.value for kind in ConditionKind if kind not in self._conditions]
        missing += [kind.value for kind in EffectKind if kind not in self._effects]
        if missing:
            raise ValueError(f"Schema table does not cover kinds: {', '.join(missing)}")

    def lookup_condition(self, kind: ConditionKind) -> ConditionSchema:
        return self._conditions[ConditionKind(kind)]

    def lookup_effect(self, kind: EffectKind) -> EffectSchema:
        return self._effects[EffectKind(kind)]

    def condition_kinds(self) -> FrozenSet[ConditionKind]:
        return frozenset(self._conditions)

    def effect_kinds(self) -> FrozenSet[EffectKind]:
        return frozenset(self._effects)

    def describe(self) -> Dict[str, Any]:
        """Return the registry as plain data for populating editor widgets."""

        return {
            "conditions": [self._conditions[kind].to_payload() for kind in ConditionKind],
            "effects": [self._effects[kind].to_payload() for kind in EffectKind],
            "comparators": [comparator.value for comparator in Comparator],
            "units": {
                catalog.__name__: {member.value: unit_of(member) for member in catalog}
                for catalog in (Output, Resource, Byproduct, ProcessFeature)
            },
        }


REGISTRY = SchemaRegistry()


def lookup_condition(kind: ConditionKind) -> ConditionSchema:
    return REGISTRY.lookup_condition(kind)


def lookup_effect(kind: EffectKind) -> EffectSchema:
    return REGISTRY.lookup_effect(kind)


def condition_kinds() -> FrozenSet[ConditionKind]:
    return REGISTRY.condition_kinds()


def effect_kinds() -> FrozenSet[EffectKind]:
    return REGISTRY.effect_kinds()


__all__ = [
    "CHANGE",
    "CONDITION_TABLE",
    "ChoiceSet",
    "Comparator",
    "ConditionKind",
    "ConditionSchema",
    "DELAY_MONTHS",
    "Domain",
    "EFFECT_TABLE",
    "EffectKind",
    "EffectSchema",
    "OUTPUTS",
    "PERCENT_CHANGE",
    "PROCESS_FEATURES",
    "ParamType",
    "REGISTRY",
    "RESOURCES",
    "SchemaRegistry",
    "condition_kinds",
    "effect_kinds",
    "lookup_condition",
    "lookup_effect",
]
