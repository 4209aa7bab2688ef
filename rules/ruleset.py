"""Rule sets: events, project unlock gates and process availability gates."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel

from world.types import SchedulerIntent

from .engine import RuleContext, RuleEngine
from .schema import Condition, Effect, Probability, RuleSetKind

LOGGER = logging.getLogger(__name__)


class RuleSet(BaseModel):
    """Conjunctive conditions plus ordered effects, weighted by a probability tier."""

    model_config = ConfigDict(extra="forbid")
    rule_id: str = Field(..., min_length=1)
    name: str = ""
    version: str = Field(default="1", min_length=1)
    kind: RuleSetKind = RuleSetKind.EVENT
    conditions: List[Condition] = Field(default_factory=list)
    effects: List[Effect] = Field(default_factory=list)
    probability: Probability = Probability.GUARANTEED

    def is_triggerable(self, context: RuleContext, engine: Optional[RuleEngine] = None) -> bool:
        """True when every condition holds; an empty condition list always holds.

        Conditions whose subject cannot be resolved count as false.
        """

        engine = engine or RuleEngine()
        return engine.evaluate_all(self.conditions, context)

    def apply(self, context: RuleContext, engine: Optional[RuleEngine] = None) -> List[SchedulerIntent]:
        """Apply the effects in order; on error nothing has been applied."""

        engine = engine or RuleEngine()
        intents = engine.apply_all(self.effects, context)
        LOGGER.debug(
            "Applied rule set %s (%d effects, %d intents)", self.rule_id, len(self.effects), len(intents)
        )
        return intents


class RuleSetCollection(RootModel[List[RuleSet]]):
    """Helper root model to validate arrays of rule sets."""


def get_rule_json_schema() -> Dict[str, Any]:
    """Return the JSON schema used to validate rule set payloads."""

    return RuleSet.model_json_schema()


__all__ = ["RuleSet", "RuleSetCollection", "get_rule_json_schema"]
