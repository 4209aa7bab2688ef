import pytest

from rules.engine import RuleContext
from rules.errors import UnresolvedSubjectError
from rules.ruleset import RuleSet, get_rule_json_schema
from rules.schema import Condition, Effect, Probability, RuleSetKind
from world.state import state_hash
from world.types import EntityKind


def test_empty_conditions_are_always_triggerable(context: RuleContext) -> None:
    rule = RuleSet(rule_id="always", probability=Probability.RARE)
    assert rule.is_triggerable(context) is True


def test_conditions_are_conjunctive(context: RuleContext) -> None:
    rule = RuleSet(
        rule_id="heatwave",
        conditions=[
            Condition(kind="WorldVariable", subject="Temperature", comparator=">=", value=1.5),
            Condition(kind="WorldVariable", subject="Year", comparator=">", value=2030),
        ],
    )
    context.world.write_scalar("world.Temperature", 1.6)
    context.world.write_scalar("world.Year", 2025)
    assert rule.is_triggerable(context) is False
    context.world.write_scalar("world.Year", 2031)
    assert rule.is_triggerable(context) is True


def test_unresolved_condition_makes_rule_untriggerable(context: RuleContext) -> None:
    rule = RuleSet(
        rule_id="fusion.done",
        conditions=[Condition(kind="ProjectFinished", subject="fusion")],
    )
    context.catalog.remove(EntityKind.PROJECT, "fusion")
    assert rule.is_triggerable(context) is False


def test_effects_observe_earlier_effects(context: RuleContext) -> None:
    rule = RuleSet(
        rule_id="compound",
        effects=[
            Effect(kind="Output", subject="Fuel", params={"PercentChange": 50}),
            Effect(kind="Output", subject="Fuel", params={"PercentChange": -50}),
        ],
    )
    context.world.write_scalar("output.Fuel", 100.0)
    rule.apply(context)
    assert context.world.read_scalar("output.Fuel") == pytest.approx(75.0)


def test_apply_is_atomic(context: RuleContext, queue) -> None:
    rule = RuleSet(
        rule_id="broken",
        effects=[
            Effect(kind="WorldVariable", subject="Temperature", params={"Change": 0.1}),
            Effect(kind="UnlocksProject", subject="fusion"),
            Effect(kind="SetFlag", subject="vegan_mandate"),
        ],
    )
    context.catalog.remove(EntityKind.FLAG, "vegan_mandate")
    before = state_hash(context.world, context.catalog)
    with pytest.raises(UnresolvedSubjectError):
        rule.apply(context)
    assert state_hash(context.world, context.catalog) == before
    assert not context.catalog.has_flag(EntityKind.PROJECT, "fusion")


def test_project_gate_from_payload(catalog) -> None:
    rule = RuleSet.model_validate(
        {
            "rule_id": "solar_subsidy.unlock",
            "kind": "project",
            "conditions": [{"kind": "ProcessMixShareFeature", "subject": "IsSolar", "comparator": "<", "value": 0.2}],
            "effects": [{"kind": "UnlocksProject", "subject": "solar_subsidy"}],
            "probability": "Likely",
        },
        context={"catalog": catalog},
    )
    assert rule.kind is RuleSetKind.PROJECT
    assert rule.probability is Probability.LIKELY
    assert rule.version == "1"


def test_json_schema_is_exposed() -> None:
    schema = get_rule_json_schema()
    assert "conditions" in schema["properties"]
    assert "effects" in schema["properties"]
