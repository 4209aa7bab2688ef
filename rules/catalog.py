"""Canonical content enumerations that rule kinds range over.

Every condition or effect kind whose subject is "any output" (or resource,
or process feature) takes its choices from these enums, so extending an enum
extends every kind that ranges over it.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Type


class Output(str, Enum):
    FUEL = "Fuel"
    ELECTRICITY = "Electricity"
    PLANT_CALORIES = "PlantCalories"
    ANIMAL_CALORIES = "AnimalCalories"
    CONCRETE = "Concrete"
    STEEL = "Steel"
    MINERALS = "Minerals"


class Resource(str, Enum):
    SUN = "Sun"
    WIND = "Wind"
    SOIL = "Soil"
    WATER = "Water"
    BIOMASS = "Biomass"
    LUMBER = "Lumber"
    COAL = "Coal"
    OIL = "Oil"
    URANIUM = "Uranium"
    LITHIUM = "Lithium"
    LABOR = "Labor"
    FUEL = "Fuel"
    ELECTRICITY = "Electricity"
    PLANT_CALORIES = "PlantCalories"
    MINERALS = "Minerals"
    CO2 = "CO2"
    CONCRETE = "Concrete"
    STEEL = "Steel"
    LAND = "Land"


class Byproduct(str, Enum):
    CO2 = "CO2"
    METHANE = "Methane"
    POLLUTION = "Pollution"
    BIODIVERSITY = "Biodiversity"


class ProcessFeature(str, Enum):
    BUILDS_SOIL = "BuildsSoil"
    DEGRADES_SOIL = "DegradesSoil"
    USES_PESTICIDES = "UsesPesticides"
    USES_SYN_FERTILIZER = "UsesSynFertilizer"
    USES_LIVESTOCK = "UsesLivestock"
    IS_INTERMITTENT = "IsIntermittent"
    IS_NUCLEAR = "IsNuclear"
    IS_SOLAR = "IsSolar"
    IS_CCS = "IsCCS"


OUTPUT_UNITS: Dict[Output, str] = {
    Output.FUEL: "barrels",
    Output.ELECTRICITY: "TWh",
    Output.PLANT_CALORIES: "kcals",
    Output.ANIMAL_CALORIES: "kcals",
    Output.CONCRETE: "tons",
    Output.STEEL: "tons",
    Output.MINERALS: "tons",
}

RESOURCE_UNITS: Dict[Resource, str] = {
    Resource.SUN: "units",
    Resource.WIND: "units",
    Resource.SOIL: "units",
    Resource.WATER: "m3",
    Resource.BIOMASS: "units",
    Resource.LUMBER: "units",
    Resource.COAL: "tons",
    Resource.OIL: "units",
    Resource.URANIUM: "units",
    Resource.LITHIUM: "units",
    Resource.LABOR: "hours",
    Resource.FUEL: "barrels",
    Resource.ELECTRICITY: "TWh",
    Resource.PLANT_CALORIES: "kcals",
    Resource.MINERALS: "tons",
    Resource.CO2: "tons",
    Resource.CONCRETE: "tons",
    Resource.STEEL: "tons",
    Resource.LAND: "ha",
}

BYPRODUCT_UNITS: Dict[Byproduct, str] = {
    Byproduct.CO2: "tons",
    Byproduct.METHANE: "tons",
    Byproduct.POLLUTION: "ppm",
    Byproduct.BIODIVERSITY: "e/msy",
}

FEATURE_DESCRIPTIONS: Dict[ProcessFeature, str] = {
    ProcessFeature.BUILDS_SOIL: "For agriculture; does the process improve soil health",
    ProcessFeature.DEGRADES_SOIL: "For agriculture; does the process harm soil health",
    ProcessFeature.USES_PESTICIDES: "For agriculture; does the process use a significant amount of pesticides",
    ProcessFeature.USES_SYN_FERTILIZER: "For agriculture; does the process use a significant amount of synthetic fertilizer",
    ProcessFeature.USES_LIVESTOCK: "For agriculture; does the process use a significant amount of livestock",
    ProcessFeature.IS_INTERMITTENT: "For electricity sources; if the supply is intermittent",
    ProcessFeature.IS_NUCLEAR: "For electricity sources, if the supply is nuclear",
    ProcessFeature.IS_SOLAR: "For electricity sources, if the supply is solar",
    ProcessFeature.IS_CCS: "Whether this process produces CO2 that is then stored/transported/used",
}


def unit_of(member: Enum) -> str:
    """Return the display unit (or feature description) for a catalog member."""

    tables: Dict[Type[Enum], Dict] = {
        Output: OUTPUT_UNITS,
        Resource: RESOURCE_UNITS,
        Byproduct: BYPRODUCT_UNITS,
        ProcessFeature: FEATURE_DESCRIPTIONS,
    }
    return tables[type(member)][member]


__all__ = [
    "BYPRODUCT_UNITS",
    "Byproduct",
    "FEATURE_DESCRIPTIONS",
    "OUTPUT_UNITS",
    "Output",
    "ProcessFeature",
    "RESOURCE_UNITS",
    "Resource",
    "unit_of",
]
