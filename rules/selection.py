"""Probability-weighted firing of rule sets for one simulation tick."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import numpy as np

from world.types import SchedulerIntent

from .engine import RuleContext, RuleEngine
from .errors import RuleRuntimeError
from .ruleset import RuleSet

LOGGER = logging.getLogger(__name__)


@dataclass
class TickReport:
    """Outcome of :meth:`EventSelector.run` for a single tick."""

    fired: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    intents: List[SchedulerIntent] = field(default_factory=list)


class EventSelector:
    """Rolls triggerable rule sets against their probability weights.

    The generator is seeded from a :class:`numpy.random.SeedSequence` so a
    run with the same seed fires the same rule sets.
    """

    def __init__(self, *, seed: Optional[int] = None, engine: Optional[RuleEngine] = None) -> None:
        self._seed_sequence = np.random.SeedSequence(seed)
        self._rng = np.random.Generator(np.random.PCG64(self._seed_sequence))
        self._engine = engine or RuleEngine()

    def reset(self) -> None:
        self._rng = np.random.Generator(np.random.PCG64(self._seed_sequence))

    def roll(self, rule: RuleSet) -> bool:
        # random() is in [0, 1): weight 1.0 always passes, weight 0.0 never does.
        return bool(self._rng.random() < rule.probability.weight)

    def candidates(self, rules: Iterable[RuleSet], context: RuleContext) -> List[RuleSet]:
        return [rule for rule in rules if rule.is_triggerable(context, self._engine)]

    def run(self, rules: Iterable[RuleSet], context: RuleContext) -> TickReport:
        """Fire every triggerable rule set whose roll succeeds.

        Rule sets are processed in the given order; one failing to apply is
        logged and skipped, leaving the world as it was before that rule set.
        """

        report = TickReport()
        for rule in self.candidates(rules, context):
            if not self.roll(rule):
                continue
            try:
                report.intents.extend(rule.apply(context, self._engine))
            except RuleRuntimeError as exc:
                LOGGER.warning("Skipping rule set %s: %s", rule.rule_id, exc)
                report.skipped.append(rule.rule_id)
                continue
            report.fired.append(rule.rule_id)
        return report


__all__ = ["EventSelector", "TickReport"]
