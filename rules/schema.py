"""Pydantic models for conditions, effects and probability tiers.

Conditions and effects share one interchange record shape::

    {"kind": str, "subject": str | null, "comparator": str | null,
     "value": number | null, "params": {str: number}}

``ConditionDraft``/``EffectDraft`` accept any record with a known kind, so the
editor can hold half-written rules. ``Condition``/``Effect`` add the schema
gate: constructing one that violates its kind's schema raises a pydantic
``ValidationError`` whose error type is the violation code.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator
from pydantic_core import PydanticCustomError

from world.types import EntityRef

from .errors import SchemaViolation
from .registry import REGISTRY, Comparator, ConditionKind, EffectKind
from .validator import validate


class _RuleRecord(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    subject: Optional[str] = Field(
        default=None,
        description="Choice value or entity id, depending on the kind's domain.",
    )
    comparator: Optional[Comparator] = None
    value: Optional[float] = None
    params: Dict[str, Any] = Field(default_factory=dict)

    def to_record(self) -> Dict[str, Any]:
        """Return the interchange record for this instance."""

        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls, record: Dict[str, Any], *, catalog: Any = None):
        context = {"catalog": catalog} if catalog is not None else None
        return cls.model_validate(record, context=context)

    @property
    def entity_ref(self) -> Optional[EntityRef]:
        schema = self._kind_schema()
        if schema.entity is None or not self.subject:
            return None
        return EntityRef(schema.entity, self.subject)

    def _kind_schema(self):  # pragma: no cover - overridden
        raise NotImplementedError


class ConditionDraft(_RuleRecord):
    """A possibly incomplete condition as authored in the editor."""

    kind: ConditionKind

    def _kind_schema(self):
        return REGISTRY.lookup_condition(self.kind)


class EffectDraft(_RuleRecord):
    """A possibly incomplete effect as authored in the editor."""

    kind: EffectKind

    def _kind_schema(self):
        return REGISTRY.lookup_effect(self.kind)


def _raise_first(violations: List[SchemaViolation]) -> None:
    if not violations:
        return
    first = violations[0]
    raise PydanticCustomError(
        first.code.value,
        "{message}",
        {"message": first.message, "param": first.param},
    )


def _catalog_from(info: ValidationInfo) -> Any:
    if isinstance(info.context, dict):
        return info.context.get("catalog")
    return None


class Condition(ConditionDraft):
    """A schema-conformant predicate over the world state."""

    @model_validator(mode="after")
    def _enforce_schema(self, info: ValidationInfo) -> "Condition":
        _raise_first(validate(self, REGISTRY, _catalog_from(info)))
        return self


class Effect(EffectDraft):
    """A schema-conformant world mutation."""

    @model_validator(mode="after")
    def _enforce_schema(self, info: ValidationInfo) -> "Effect":
        _raise_first(validate(self, REGISTRY, _catalog_from(info)))
        return self

    def param(self, name: str) -> float:
        return float(self.params[name])


class Probability(str, Enum):
    """Likelihood tier of a rule set, ordered from never to always."""

    IMPOSSIBLE = "Impossible"
    IMPROBABLE = "Improbable"
    RARE = "Rare"
    UNLIKELY = "Unlikely"
    RANDOM = "Random"
    LIKELY = "Likely"
    GUARANTEED = "Guaranteed"

    @property
    def rank(self) -> int:
        return list(Probability).index(self)

    @property
    def weight(self) -> float:
        return PROBABILITY_WEIGHTS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Probability):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Probability):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Probability):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Probability):
            return NotImplemented
        return self.rank >= other.rank


PROBABILITY_WEIGHTS: Dict[Probability, float] = {
    Probability.IMPOSSIBLE: 0.0,
    Probability.IMPROBABLE: 0.05,
    Probability.RARE: 0.1,
    Probability.UNLIKELY: 0.25,
    Probability.RANDOM: 0.5,
    Probability.LIKELY: 0.75,
    Probability.GUARANTEED: 1.0,
}


class RuleSetKind(str, Enum):
    """The content construct a rule set belongs to."""

    EVENT = "event"
    PROJECT = "project"
    PROCESS = "process"


class RuleSetDraft(BaseModel):
    """Editor-side rule set whose conditions and effects may be incomplete."""

    model_config = ConfigDict(extra="forbid")
    rule_id: str = Field(..., min_length=1)
    name: str = ""
    version: str = "1"
    kind: RuleSetKind = RuleSetKind.EVENT
    conditions: List[ConditionDraft] = Field(default_factory=list)
    effects: List[EffectDraft] = Field(default_factory=list)
    probability: Probability = Probability.GUARANTEED


__all__ = [
    "Condition",
    "ConditionDraft",
    "Effect",
    "EffectDraft",
    "PROBABILITY_WEIGHTS",
    "Probability",
    "RuleSetDraft",
    "RuleSetKind",
]
