"""Schema violations and exceptions raised by the rules subsystem."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from core.errors import SimulationError


class ViolationCode(str, Enum):
    """Machine-readable identifiers for schema violations."""

    MISSING_COMPARATOR = "missing_comparator"
    UNEXPECTED_COMPARATOR = "unexpected_comparator"
    SUBJECT_NOT_IN_DOMAIN = "subject_not_in_domain"
    MISSING_PARAM = "missing_param"
    UNEXPECTED_PARAM = "unexpected_param"
    PARAM_TYPE_MISMATCH = "param_type_mismatch"


@dataclass(frozen=True)
class SchemaViolation:
    """A single way in which a rule instance disagrees with its kind's schema."""

    code: ViolationCode
    message: str
    param: Optional[str] = None
    location: Optional[str] = None

    def at(self, location: str) -> "SchemaViolation":
        return replace(self, location=location)

    def to_payload(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "param": self.param,
            "location": self.location,
        }


class RuleValidationError(ValueError):
    """Raised when rule content payloads are malformed."""


class RuleNotFoundError(KeyError):
    """Raised when a requested rule set identifier cannot be resolved."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"Rule set '{rule_id}' not found")
        self.rule_id = rule_id


class RuleVersionMismatchError(RuleValidationError):
    """Raised when the requested rule set version does not match the stored one."""

    def __init__(self, rule_id: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Rule set '{rule_id}' version mismatch: expected {expected}, found {actual}"
        )
        self.rule_id = rule_id
        self.expected = expected
        self.actual = actual


class RuleRuntimeError(SimulationError):
    """Raised when a rule cannot be evaluated or applied against the live world."""

    error_code = "ERR_RULE_RUNTIME"


class UnresolvedSubjectError(RuleRuntimeError):
    """A rule references an entity (or region) the catalog does not know."""

    error_code = "ERR_UNRESOLVED_SUBJECT"

    def __init__(self, kind: str, subject: Optional[str]) -> None:
        super().__init__(f"{kind} subject '{subject}' cannot be resolved")
        self.kind = kind
        self.subject = subject


class UnknownScalarError(RuleRuntimeError):
    """A rule reads or writes a world scalar that was never declared."""

    error_code = "ERR_UNKNOWN_SCALAR"

    def __init__(self, name: str) -> None:
        super().__init__(f"World scalar '{name}' is not declared")
        self.name = name


__all__ = [
    "RuleNotFoundError",
    "RuleRuntimeError",
    "RuleValidationError",
    "RuleVersionMismatchError",
    "SchemaViolation",
    "UnknownScalarError",
    "UnresolvedSubjectError",
    "ViolationCode",
]
