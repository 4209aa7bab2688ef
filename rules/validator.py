"""Exhaustive schema checks for condition and effect instances.

Model construction (:mod:`rules.schema`) stops at the first violation; the
editor calls :func:`validate` instead to list every problem of a partially
authored rule at once.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Protocol, Union

from world.types import EntityKind

from .errors import RuleValidationError, SchemaViolation, ViolationCode
from .registry import (
    REGISTRY,
    Comparator,
    ConditionKind,
    ConditionSchema,
    EffectKind,
    EffectSchema,
    ParamType,
    SchemaRegistry,
)


class ExistenceCatalog(Protocol):
    def entity_exists(self, kind: EntityKind, entity_id: str) -> bool:  # pragma: no cover - protocol
        ...


RuleSchema = Union[ConditionSchema, EffectSchema]


def check_fields(
    schema: RuleSchema,
    *,
    subject: Optional[str],
    comparator: Any,
    value: Any,
    params: Mapping[str, Any],
    catalog: Optional[ExistenceCatalog] = None,
) -> List[SchemaViolation]:
    """Return every violation of ``schema`` by the given field values, in a stable order."""

    violations: List[SchemaViolation] = []
    kind = schema.kind.value

    if schema.comparable:
        for name, present in (("comparator", comparator), ("value", value)):
            if present is None:
                violations.append(
                    SchemaViolation(
                        ViolationCode.MISSING_COMPARATOR,
                        f"{kind} requires a {name}",
                        param=name,
                    )
                )
        if comparator is not None and not _is_comparator(comparator):
            violations.append(
                SchemaViolation(
                    ViolationCode.PARAM_TYPE_MISMATCH,
                    f"{kind} comparator {comparator!r} is not one of {_COMPARATORS}",
                    param="comparator",
                )
            )
        if value is not None and not ParamType.NUMBER.accepts(value):
            violations.append(
                SchemaViolation(
                    ViolationCode.PARAM_TYPE_MISMATCH,
                    f"{kind} value must be a finite number, got {value!r}",
                    param="value",
                )
            )
    else:
        for name, present in (("comparator", comparator), ("value", value)):
            if present is not None:
                violations.append(
                    SchemaViolation(
                        ViolationCode.UNEXPECTED_COMPARATOR,
                        f"{kind} does not take a {name}",
                        param=name,
                    )
                )

    subject_problem = _subject_problem(schema, subject, catalog)
    if subject_problem is not None:
        violations.append(
            SchemaViolation(ViolationCode.SUBJECT_NOT_IN_DOMAIN, subject_problem, param="subject")
        )

    for name, param_type in schema.params.items():
        if name not in params:
            violations.append(
                SchemaViolation(ViolationCode.MISSING_PARAM, f"{kind} requires param '{name}'", param=name)
            )
        elif not param_type.accepts(params[name]):
            violations.append(
                SchemaViolation(
                    ViolationCode.PARAM_TYPE_MISMATCH,
                    f"{kind} param '{name}' must be a {param_type.value}, got {params[name]!r}",
                    param=name,
                )
            )
    for name in sorted(set(params) - set(schema.params)):
        violations.append(
            SchemaViolation(ViolationCode.UNEXPECTED_PARAM, f"{kind} does not take param '{name}'", param=name)
        )
    return violations


_COMPARATORS = ", ".join(comparator.value for comparator in Comparator)


def _is_comparator(comparator: Any) -> bool:
    try:
        Comparator(comparator)
    except ValueError:
        return False
    return True


def _subject_problem(
    schema: RuleSchema, subject: Optional[str], catalog: Optional[ExistenceCatalog]
) -> Optional[str]:
    kind = schema.kind.value
    if schema.choices is not None:
        if subject not in schema.choices:
            return f"{kind} subject {subject!r} is not one of {schema.choices.name}"
        return None
    if schema.entity is not None:
        if not isinstance(subject, str) or not subject:
            return f"{kind} requires a {schema.entity.value} reference"
        if catalog is not None and not catalog.entity_exists(schema.entity, subject):
            return f"{schema.entity.value} '{subject}' does not exist"
        return None
    if subject is not None:
        return f"{kind} does not take a subject"
    return None


def validate(
    instance: Any,
    registry: SchemaRegistry = REGISTRY,
    catalog: Optional[ExistenceCatalog] = None,
    *,
    kind_type: Optional[str] = None,
) -> List[SchemaViolation]:
    """Return all schema violations of a condition or effect (empty list = valid).

    ``instance`` is a draft/model exposing ``kind``, ``subject``,
    ``comparator``, ``value`` and ``params``, or a raw interchange record.
    Records need ``kind_type`` (``"condition"`` or ``"effect"``) because the
    two kind enumerations share names.
    """

    if isinstance(instance, Mapping):
        fields = dict(instance)
        raw_kind = fields.get("kind")
        if kind_type not in ("condition", "effect"):
            raise ValueError("kind_type must be 'condition' or 'effect' for mapping instances")
        try:
            if kind_type == "condition":
                schema: RuleSchema = registry.lookup_condition(ConditionKind(raw_kind))
            else:
                schema = registry.lookup_effect(EffectKind(raw_kind))
        except ValueError as exc:
            raise RuleValidationError(f"Unknown {kind_type} kind {raw_kind!r}") from exc
        comparator = fields.get("comparator")
        params = fields.get("params") or {}
    else:
        fields = {
            "subject": instance.subject,
            "value": instance.value,
        }
        comparator = instance.comparator
        params = instance.params
        if isinstance(instance.kind, ConditionKind):
            schema = registry.lookup_condition(instance.kind)
        else:
            schema = registry.lookup_effect(instance.kind)

    return check_fields(
        schema,
        subject=fields.get("subject"),
        comparator=comparator,
        value=fields.get("value"),
        params=params,
        catalog=catalog,
    )


def validate_ruleset(
    ruleset: Any,
    registry: SchemaRegistry = REGISTRY,
    catalog: Optional[ExistenceCatalog] = None,
) -> List[SchemaViolation]:
    """Validate every condition and effect of a rule set draft, tagging locations."""

    if isinstance(ruleset, Mapping):
        conditions = ruleset.get("conditions") or []
        effects = ruleset.get("effects") or []
    else:
        conditions, effects = ruleset.conditions, ruleset.effects

    violations: List[SchemaViolation] = []
    for index, condition in enumerate(conditions):
        for violation in validate(condition, registry, catalog, kind_type="condition"):
            violations.append(violation.at(f"conditions[{index}]"))
    for index, effect in enumerate(effects):
        for violation in validate(effect, registry, catalog, kind_type="effect"):
            violations.append(violation.at(f"effects[{index}]"))
    return violations


__all__ = ["ExistenceCatalog", "check_fields", "validate", "validate_ruleset"]
