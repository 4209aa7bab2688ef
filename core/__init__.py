"""Ambient helpers shared across the rule engine: errors and logging."""

from .errors import ErrorDetails, SimulationError
from .logging_config import setup_logging

__all__ = ["ErrorDetails", "SimulationError", "setup_logging"]
