import math

import pytest

from rules.engine import EngineConfig, RuleContext, RuleEngine
from rules.errors import RuleRuntimeError, UnknownScalarError, UnresolvedSubjectError
from rules.registry import EffectKind
from rules.ruleset import RuleSet
from rules.schema import Condition, Effect
from rules.selection import EventSelector
from world.state import state_hash
from world.types import AddEventIntent, EntityKind, EntityStatus, MigrationIntent, TriggerEventIntent


def test_year_comparator_boundary(context: RuleContext) -> None:
    engine = RuleEngine()
    condition = Condition(kind="WorldVariable", subject="Year", comparator=">=", value=2050)
    context.world.write_scalar("world.Year", 2050)
    assert engine.evaluate(condition, context) is True
    context.world.write_scalar("world.Year", 2049)
    assert engine.evaluate(condition, context) is False


def test_evaluation_is_idempotent(context: RuleContext) -> None:
    engine = RuleEngine()
    condition = Condition(kind="Resource", subject="Water", comparator="<", value=10)
    context.world.write_scalar("resource.Water", 4)
    before = state_hash(context.world, context.catalog)
    first = engine.evaluate(condition, context)
    second = engine.evaluate(condition, context)
    assert first is second is True
    assert state_hash(context.world, context.catalog) == before


def test_local_variable_reads_bound_region(context: RuleContext) -> None:
    engine = RuleEngine()
    condition = Condition(kind="LocalVariable", subject="Health", comparator="<=", value=0.5)
    context.world.write_scalar("local.north_america.Health", 0.4)
    assert engine.evaluate(condition, context) is True
    with pytest.raises(UnresolvedSubjectError):
        engine.evaluate(condition, context.for_region(None))


def test_output_demand_gap(context: RuleContext) -> None:
    engine = RuleEngine()
    condition = Condition(kind="OutputDemandGap", subject="Electricity", comparator="<", value=0.9)
    context.world.write_scalar("output.Electricity", 80)
    context.world.write_scalar("demand.Electricity", 100)
    assert engine.evaluate(condition, context) is True
    context.world.write_scalar("demand.Electricity", 0)
    assert engine.evaluate(condition, context) is False
    capped = RuleEngine(config=EngineConfig(zero_demand_gap=0.0))
    assert capped.evaluate(condition, context) is True


def test_resource_demand_gap_uses_resource_demand(context: RuleContext) -> None:
    engine = RuleEngine()
    condition = Condition(kind="ResourceDemandGap", subject="Land", comparator=">", value=1)
    context.world.write_scalar("resource.Land", 150)
    context.world.write_scalar("resource_demand.Land", 100)
    assert engine.evaluate(condition, context) is True


def test_process_mix_share(context: RuleContext) -> None:
    engine = RuleEngine()
    context.world.set_ratio("Process", "solar_pv", 0.3)
    context.world.set_ratio("ProcessFeature", "IsSolar", 0.35)
    assert engine.evaluate(
        Condition(kind="ProcessMixShare", subject="solar_pv", comparator=">", value=0.25), context
    )
    assert not engine.evaluate(
        Condition(kind="ProcessMixShare", subject="coal_power", comparator=">", value=0.0), context
    )
    assert engine.evaluate(
        Condition(kind="ProcessMixShareFeature", subject="IsSolar", comparator="==", value=0.35), context
    )


def test_project_status_conditions(context: RuleContext) -> None:
    engine = RuleEngine()
    context.catalog.set_status(EntityKind.PROJECT, "fusion", EntityStatus.STALLED)
    assert engine.evaluate(Condition(kind="ProjectStalled", subject="fusion"), context)
    assert not engine.evaluate(Condition(kind="ProjectActive", subject="fusion"), context)
    assert engine.evaluate(Condition(kind="ProjectInactive", subject="solar_subsidy"), context)


def test_unresolved_subject_is_reported_and_checked_false(context: RuleContext, caplog) -> None:
    engine = RuleEngine()
    condition = Condition(kind="ProjectFinished", subject="fusion")
    context.catalog.remove(EntityKind.PROJECT, "fusion")
    with pytest.raises(UnresolvedSubjectError) as exc:
        engine.evaluate(condition, context)
    assert exc.value.code == "ERR_UNRESOLVED_SUBJECT"
    with caplog.at_level("WARNING", logger="rules.engine"):
        assert engine.check(condition, context) is False
    assert "treated as false" in caplog.text


def test_flag_and_runs_played(context: RuleContext) -> None:
    engine = RuleEngine()
    flag = Condition(kind="Flag", subject="vegan_mandate")
    assert engine.evaluate(flag, context) is False
    context.catalog.set_flag(EntityKind.FLAG, "vegan_mandate")
    assert engine.evaluate(flag, context) is True
    context.world.write_scalar("meta.RunsPlayed", 3)
    assert engine.evaluate(Condition(kind="RunsPlayed", comparator=">", value=2), context)


def test_ratio_effect_scales_output(context: RuleContext) -> None:
    context.world.write_scalar("output.Fuel", 100.0)
    RuleEngine().apply_effect(Effect(kind="Output", subject="Fuel", params={"PercentChange": -25}), context)
    assert context.world.read_scalar("output.Fuel") == pytest.approx(75.0)


def test_direct_effect_adds_change(context: RuleContext) -> None:
    context.world.write_scalar("world.Temperature", 1.2)
    RuleEngine().apply_effect(
        Effect(kind="WorldVariable", subject="Temperature", params={"Change": 0.1}), context
    )
    assert context.world.read_scalar("world.Temperature") == pytest.approx(1.3)


def test_player_and_local_effects(context: RuleContext) -> None:
    engine = RuleEngine()
    engine.apply_all(
        [
            Effect(kind="PlayerVariable", subject="PoliticalCapital", params={"Change": 5}),
            Effect(kind="LocalVariable", subject="Outlook", params={"Change": -1}),
        ],
        context,
    )
    assert context.world.read_scalar("player.PoliticalCapital") == 5
    assert context.world.read_scalar("local.north_america.Outlook") == -1


def test_unlock_and_flag_effects(context: RuleContext) -> None:
    engine = RuleEngine()
    engine.apply_all(
        [
            Effect(kind="UnlocksProject", subject="fusion"),
            Effect(kind="UnlocksProcess", subject="solar_pv"),
            Effect(kind="SetFlag", subject="vegan_mandate"),
        ],
        context,
    )
    assert context.catalog.has_flag(EntityKind.PROJECT, "fusion")
    assert context.catalog.has_flag(EntityKind.PROCESS, "solar_pv")
    assert context.catalog.has_flag(EntityKind.FLAG, "vegan_mandate")


def test_event_effects_emit_intents(context: RuleContext, queue) -> None:
    intents = RuleEngine().apply_all(
        [
            Effect(kind="TriggerEvent", subject="heatwave", params={"DelayMonths": 6}),
            Effect(kind="AddEvent", subject="crop_failure"),
            Effect(kind="Migration"),
        ],
        context,
    )
    expected = [
        TriggerEventIntent(event_id="heatwave", delay_months=6.0),
        AddEventIntent(event_id="crop_failure"),
        MigrationIntent(region_id="north_america"),
    ]
    assert intents == expected
    assert queue.drain() == expected


def test_failed_batch_leaves_world_unchanged(context: RuleContext, queue) -> None:
    context.world.write_scalar("world.Temperature", 1.2)
    context.catalog.remove(EntityKind.EVENT, "crop_failure")
    before = state_hash(context.world, context.catalog)
    with pytest.raises(UnresolvedSubjectError):
        RuleEngine().apply_all(
            [
                Effect(kind="WorldVariable", subject="Temperature", params={"Change": 0.1}),
                Effect(kind="TriggerEvent", subject="heatwave", params={"DelayMonths": 1}),
                Effect(kind="AddEvent", subject="crop_failure"),
            ],
            context,
        )
    assert state_hash(context.world, context.catalog) == before
    assert context.world.read_scalar("world.Temperature") == 1.2
    assert len(queue) == 0


def test_undeclared_scalar_is_unknown(catalog) -> None:
    from world.state import InMemoryWorldState

    context = RuleContext(world=InMemoryWorldState(), catalog=catalog)
    with pytest.raises(UnknownScalarError) as exc:
        RuleEngine().apply_effect(
            Effect(kind="Demand", subject="Steel", params={"PercentChange": 5}), context
        )
    assert exc.value.name == "demand.Steel"
    assert RuleEngine().check(
        Condition(kind="Demand", subject="Steel", comparator=">", value=0), context
    ) is False


def test_intent_effects_need_a_scheduler(context: RuleContext) -> None:
    detached = RuleContext(world=context.world, catalog=context.catalog)
    with pytest.raises(RuleRuntimeError) as exc:
        RuleEngine().apply_effect(Effect(kind="AddEvent", subject="heatwave"), detached)
    assert exc.value.code == "ERR_RULE_RUNTIME"


def test_infinite_gap_compares_above_any_threshold(context: RuleContext) -> None:
    assert EngineConfig().zero_demand_gap == math.inf
    condition = Condition(kind="OutputDemandGap", subject="Steel", comparator=">=", value=1)
    assert RuleEngine().evaluate(condition, context) is True


def _oversized_change(subject: str) -> Effect:
    # Skips the construction gate, like content built with model_construct.
    return Effect.model_construct(kind=EffectKind.WORLD_VARIABLE, subject=subject, params={"Change": 10**400})


def test_unconvertible_param_fails_before_any_write(context: RuleContext, queue) -> None:
    context.world.write_scalar("world.Temperature", 1.2)
    before = state_hash(context.world, context.catalog)
    with pytest.raises(RuleRuntimeError):
        RuleEngine().apply_all(
            [
                Effect(kind="WorldVariable", subject="Temperature", params={"Change": 0.1}),
                Effect(kind="AddEvent", subject="heatwave"),
                _oversized_change("Outlook"),
            ],
            context,
        )
    assert state_hash(context.world, context.catalog) == before
    assert context.world.read_scalar("world.Temperature") == 1.2
    assert len(queue) == 0


def test_selector_skips_rule_set_with_unconvertible_param(context: RuleContext) -> None:
    context.world.write_scalar("world.Temperature", 1.2)
    before = state_hash(context.world, context.catalog)
    rule = RuleSet(
        rule_id="overflow",
        effects=[
            Effect(kind="WorldVariable", subject="Temperature", params={"Change": 0.1}),
            _oversized_change("Outlook"),
        ],
    )
    report = EventSelector(seed=1).run([rule], context)
    assert report.skipped == ["overflow"]
    assert report.fired == []
    assert state_hash(context.world, context.catalog) == before
