"""Names of the world scalars that conditions read and effects write."""

from __future__ import annotations

from typing import Iterable, List, Optional

from .registry import REGISTRY, ConditionKind, EffectKind, SchemaRegistry

WORLD = "world"
LOCAL = "local"
PLAYER = "player"
DEMAND = "demand"
OUTPUT = "output"
RESOURCE = "resource"
RESOURCE_DEMAND = "resource_demand"
FEATURE_OUTPUT = "feature_output"
RUNS_PLAYED = "meta.RunsPlayed"

CONDITION_NAMESPACES = {
    ConditionKind.LOCAL_VARIABLE: LOCAL,
    ConditionKind.WORLD_VARIABLE: WORLD,
    ConditionKind.DEMAND: DEMAND,
    ConditionKind.OUTPUT: OUTPUT,
    ConditionKind.RESOURCE: RESOURCE,
}

EFFECT_NAMESPACES = {
    EffectKind.LOCAL_VARIABLE: LOCAL,
    EffectKind.WORLD_VARIABLE: WORLD,
    EffectKind.PLAYER_VARIABLE: PLAYER,
    EffectKind.DEMAND: DEMAND,
    EffectKind.OUTPUT: OUTPUT,
    EffectKind.RESOURCE: RESOURCE,
    EffectKind.OUTPUT_FOR_FEATURE: FEATURE_OUTPUT,
}


def scalar_name(namespace: str, subject: str, region: Optional[str] = None) -> str:
    """Build the world scalar name for ``subject`` inside ``namespace``.

    Local variables are scoped by region: ``local.<region>.<subject>``.
    """

    if namespace == LOCAL:
        if region is None:
            raise ValueError("local scalars need a region")
        return f"{LOCAL}.{region}.{subject}"
    return f"{namespace}.{subject}"


def declared_scalars(regions: Iterable[str] = (), registry: SchemaRegistry = REGISTRY) -> List[str]:
    """Every scalar name a rule can reach, for seeding a fresh world state."""

    regions = list(regions)
    names = set()

    def add(namespace: str, subjects: Iterable[str]) -> None:
        for subject in subjects:
            if namespace == LOCAL:
                names.update(scalar_name(LOCAL, subject, region) for region in regions)
            else:
                names.add(scalar_name(namespace, subject))

    for kind, namespace in CONDITION_NAMESPACES.items():
        add(namespace, registry.lookup_condition(kind).choices or ())
    for kind, namespace in EFFECT_NAMESPACES.items():
        add(namespace, registry.lookup_effect(kind).choices or ())
    add(RESOURCE_DEMAND, registry.lookup_condition(ConditionKind.RESOURCE_DEMAND_GAP).choices or ())
    names.add(RUNS_PLAYED)
    return sorted(names)


__all__ = [
    "CONDITION_NAMESPACES",
    "DEMAND",
    "EFFECT_NAMESPACES",
    "FEATURE_OUTPUT",
    "LOCAL",
    "OUTPUT",
    "PLAYER",
    "RESOURCE",
    "RESOURCE_DEMAND",
    "RUNS_PLAYED",
    "WORLD",
    "declared_scalars",
    "scalar_name",
]
