import pytest

from rules.scalars import declared_scalars, scalar_name
from world.state import EventQueue, InMemoryEntityCatalog, InMemoryWorldState, state_hash
from world.types import AddEventIntent, EntityKind, EntityStatus


def test_declared_scalars_cover_rule_namespaces() -> None:
    names = set(declared_scalars(regions=["europe"]))
    assert {"world.Year", "output.Fuel", "demand.Fuel", "resource.Land", "resource_demand.Land"} <= names
    assert {"player.PoliticalCapital", "feature_output.IsSolar", "meta.RunsPlayed"} <= names
    assert {"local.europe.Habitability", "local.europe.BaseHabitability"} <= names
    assert not any(name.startswith("local.") for name in declared_scalars())


def test_scalar_name_scopes_local_variables() -> None:
    assert scalar_name("world", "Temperature") == "world.Temperature"
    assert scalar_name("local", "Health", "asia") == "local.asia.Health"
    with pytest.raises(ValueError):
        scalar_name("local", "Health")


def test_world_rejects_undeclared_scalars() -> None:
    world = InMemoryWorldState.from_names(["world.Year"], initial=2022)
    assert world.read_scalar("world.Year") == 2022
    with pytest.raises(KeyError):
        world.write_scalar("world.Mood", 1.0)
    assert world.read_ratio("Process", "unknown") == 0.0


def test_catalog_status_and_flags() -> None:
    catalog = InMemoryEntityCatalog({EntityKind.PROJECT: ["fusion"]})
    assert catalog.entity_status(EntityKind.PROJECT, "fusion") is EntityStatus.INACTIVE
    catalog.set_status(EntityKind.PROJECT, "fusion", EntityStatus.ACTIVE)
    catalog.set_flag(EntityKind.PROJECT, "fusion")
    assert catalog.has_flag(EntityKind.PROJECT, "fusion")
    assert catalog.ids(EntityKind.PROJECT) == {"fusion"}
    with pytest.raises(KeyError):
        catalog.entity_status(EntityKind.PROJECT, "missing")


def test_state_hash_tracks_changes() -> None:
    world = InMemoryWorldState.from_names(["world.Year"])
    catalog = InMemoryEntityCatalog({EntityKind.FLAG: ["f"]})
    initial = state_hash(world, catalog)
    assert state_hash(world, catalog) == initial
    catalog.set_flag(EntityKind.FLAG, "f")
    assert state_hash(world, catalog) != initial


def test_event_queue_drains_in_order() -> None:
    queue = EventQueue()
    queue.submit(AddEventIntent("a"))
    queue.submit(AddEventIntent("b"))
    assert len(queue) == 2
    assert queue.drain() == [AddEventIntent("a"), AddEventIntent("b")]
    assert queue.pending == []
