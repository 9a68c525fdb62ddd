from __future__ import annotations

from dataclasses import dataclass

from doughpilot.core.config import settings as app_settings
from doughpilot.services.formula_types import CalculationResult

SUPPORTED_UNIT_SYSTEMS = {"metric", "imperial"}

GRAM_TO_OZ = 0.035274
LITERS_TO_CU_IN = 61.0237


@dataclass(frozen=True)
class DisplayUnits:
    unit_system: str
    weight_unit: str
    volume_unit: str


@dataclass(frozen=True)
class DisplayIngredient:
    id: str
    name: str
    weight: float


@dataclass(frozen=True)
class DisplayResult:
    units: DisplayUnits
    main_flour: float
    main_water: float
    total_flour: float
    total_water: float
    total_dough: float
    pan_volume: float
    ingredients: tuple[DisplayIngredient, ...]


def resolve_unit_system(override: str | None, preferred: str | None = None) -> str:
    value = (override or preferred or app_settings.default_unit_system).lower()
    if value in SUPPORTED_UNIT_SYSTEMS:
        return value
    return "metric"


def to_imperial_weight(grams: float) -> float:
    return grams * GRAM_TO_OZ


def to_display_result(result: CalculationResult, unit_system: str) -> DisplayResult:
    """Express a result in the chosen unit system. Metric values pass through unchanged."""
    if unit_system == "imperial":

        def weight(grams: float) -> float:
            return round(to_imperial_weight(grams), 2)

        units = DisplayUnits(unit_system="imperial", weight_unit="oz", volume_unit="in3")
        pan_volume = round(result.pan_volume / 1000 * LITERS_TO_CU_IN, 1)
    else:

        def weight(grams: float) -> float:
            return grams

        units = DisplayUnits(unit_system="metric", weight_unit="g", volume_unit="cm3")
        pan_volume = round(result.pan_volume, 1)

    return DisplayResult(
        units=units,
        main_flour=weight(result.main_flour),
        main_water=weight(result.main_water),
        total_flour=weight(result.total_flour),
        total_water=weight(result.total_water),
        total_dough=weight(result.total_dough),
        pan_volume=pan_volume,
        ingredients=tuple(
            DisplayIngredient(id=item.ingredient.id, name=item.ingredient.name, weight=weight(item.weight))
            for item in result.ingredients
        ),
    )
