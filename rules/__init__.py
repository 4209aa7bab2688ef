"""Public package interface for the condition/effect rule engine."""

from .engine import EngineConfig, RuleContext, RuleEngine
from .errors import (
    RuleNotFoundError,
    RuleRuntimeError,
    RuleValidationError,
    RuleVersionMismatchError,
    SchemaViolation,
    UnknownScalarError,
    UnresolvedSubjectError,
    ViolationCode,
)
from .loader import RuleRepository
from .registry import (
    REGISTRY,
    Comparator,
    ConditionKind,
    ConditionSchema,
    EffectKind,
    EffectSchema,
    SchemaRegistry,
    condition_kinds,
    effect_kinds,
    lookup_condition,
    lookup_effect,
)
from .ruleset import RuleSet, RuleSetCollection, get_rule_json_schema
from .scalars import declared_scalars, scalar_name
from .schema import (
    Condition,
    ConditionDraft,
    Effect,
    EffectDraft,
    Probability,
    RuleSetDraft,
    RuleSetKind,
)
from .selection import EventSelector, TickReport
from .validator import validate, validate_ruleset

__all__ = [
    "Comparator",
    "Condition",
    "ConditionDraft",
    "ConditionKind",
    "ConditionSchema",
    "Effect",
    "EffectDraft",
    "EffectKind",
    "EffectSchema",
    "EngineConfig",
    "EventSelector",
    "Probability",
    "REGISTRY",
    "RuleContext",
    "RuleEngine",
    "RuleNotFoundError",
    "RuleRepository",
    "RuleRuntimeError",
    "RuleSet",
    "RuleSetCollection",
    "RuleSetDraft",
    "RuleSetKind",
    "RuleValidationError",
    "RuleVersionMismatchError",
    "SchemaRegistry",
    "SchemaViolation",
    "TickReport",
    "UnknownScalarError",
    "UnresolvedSubjectError",
    "ViolationCode",
    "condition_kinds",
    "declared_scalars",
    "effect_kinds",
    "get_rule_json_schema",
    "lookup_condition",
    "lookup_effect",
    "scalar_name",
    "validate",
    "validate_ruleset",
]
