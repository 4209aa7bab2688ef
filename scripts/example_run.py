
from core.logging_config import setup_logging
from rules import EventSelector, RuleContext, RuleSet, declared_scalars
from world import EntityKind, EventQueue, InMemoryEntityCatalog, InMemoryWorldState

RULES = [
    {
        "rule_id": "heatwave",
        "name": "Heatwave",
        "conditions": [
            {"kind": "WorldVariable", "subject": "Temperature", "comparator": ">=", "value": 1.5},
        ],
        "effects": [
            {"kind": "WorldVariable", "subject": "Outlook", "params": {"Change": -2}},
            {"kind": "Demand", "subject": "Electricity", "params": {"PercentChange": 10}},
            {"kind": "TriggerEvent", "subject": "crop_failure", "params": {"DelayMonths": 6}},
        ],
        "probability": "Likely",
    },
    {
        "rule_id": "solar_subsidy",
        "name": "Solar subsidy",
        "kind": "project",
        "conditions": [
            {"kind": "WorldVariable", "subject": "Year", "comparator": ">=", "value": 2030},
        ],
        "effects": [{"kind": "UnlocksProject", "subject": "solar_subsidy"}],
    },
]


def main():
    logger = setup_logging()
    world = InMemoryWorldState.from_names(declared_scalars(regions=["north_america"]))
    catalog = InMemoryEntityCatalog(
        {
            EntityKind.PROJECT: ["solar_subsidy"],
            EntityKind.EVENT: ["crop_failure"],
            EntityKind.REGION: ["north_america"],
        }
    )
    queue = EventQueue()
    context = RuleContext(world=world, catalog=catalog, scheduler=queue)
    rules = [RuleSet.model_validate(payload, context={"catalog": catalog}) for payload in RULES]
    selector = EventSelector(seed=42)

    world.write_scalar("world.Year", 2022)
    world.write_scalar("world.Temperature", 1.2)
    world.write_scalar("demand.Electricity", 100.0)
    for _ in range(12):
        report = selector.run(rules, context)
        logger.info(
            "Year=%s temp=%.2f fired=%s queued=%s",
            world.read_scalar("world.Year"),
            world.read_scalar("world.Temperature"),
            report.fired,
            queue.drain(),
        )
        world.write_scalar("world.Year", world.read_scalar("world.Year") + 1)
        world.write_scalar("world.Temperature", world.read_scalar("world.Temperature") + 0.05)

if __name__ == "__main__":
    main()
