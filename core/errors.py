"""Base exception types shared by the rule engine and the world collaborators."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ErrorDetails:
    """Structured metadata associated with an exception."""

    code: str
    message: str


class SimulationError(Exception):
    """Base class for errors raised while a simulation tick is running."""

    error_code = "ERR_SIMULATION"

    def __init__(self, message: str, *, details: ErrorDetails | None = None) -> None:
        super().__init__(message)
        self.details = details or ErrorDetails(code=self.error_code, message=message)

    @property
    def code(self) -> str:
        return self.details.code


__all__ = ["ErrorDetails", "SimulationError"]
