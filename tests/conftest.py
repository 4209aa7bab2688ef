import sys
from pathlib import Path

import pytest

# Ensure the project root is available on the Python path when running the tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rules.engine import RuleContext  # noqa: E402
from rules.scalars import declared_scalars  # noqa: E402
from world.state import EventQueue, InMemoryEntityCatalog, InMemoryWorldState  # noqa: E402
from world.types import EntityKind  # noqa: E402


@pytest.fixture
def catalog() -> InMemoryEntityCatalog:
    return InMemoryEntityCatalog(
        {
            EntityKind.PROJECT: ["fusion", "solar_subsidy"],
            EntityKind.PROCESS: ["coal_power", "solar_pv"],
            EntityKind.EVENT: ["heatwave", "crop_failure"],
            EntityKind.FLAG: ["vegan_mandate"],
            EntityKind.REGION: ["north_america"],
        }
    )


@pytest.fixture
def world() -> InMemoryWorldState:
    return InMemoryWorldState.from_names(declared_scalars(regions=["north_america"]))


@pytest.fixture
def queue() -> EventQueue:
    return EventQueue()


@pytest.fixture
def context(world: InMemoryWorldState, catalog: InMemoryEntityCatalog, queue: EventQueue) -> RuleContext:
    return RuleContext(world=world, catalog=catalog, scheduler=queue, region="north_america")
