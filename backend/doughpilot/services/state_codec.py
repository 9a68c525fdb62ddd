"""Read and write persisted calculator records.

Records come from browser storage or a document store and may be partial,
hold numbers as form strings, or predate the current schema. Each field falls
back to its default on its own; a record is never rejected as a whole.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any

from doughpilot.core.config import settings as app_settings
from doughpilot.services.formula_types import (
    CalculationMode,
    Composition,
    FormulaInput,
    GlobalSettings,
    Ingredient,
    PanGeometry,
    PrefermentIngredient,
    SimpleIngredient,
)
from doughpilot.services.presets import DEFAULT_INGREDIENTS, Preset
from doughpilot.services.units import resolve_unit_system

DEFAULT_PAN = PanGeometry(x=20, y=10, z=10)
_LEGACY_MODES = {"pan": CalculationMode.VOLUME}


@dataclass(frozen=True)
class PersistedState:
    formula: FormulaInput
    unit_system: str = "metric"
    custom_presets: tuple[Preset, ...] = field(default_factory=tuple)


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _as_positive(value: Any, default: float) -> float:
    number = _as_float(value, default)
    return number if number > 0 else default


_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        return default
    if isinstance(value, (int, float)):
        return value != 0
    return default


def _parse_pan(raw: Any) -> PanGeometry:
    if not isinstance(raw, dict):
        return DEFAULT_PAN
    return PanGeometry(
        x=_as_positive(raw.get("x"), DEFAULT_PAN.x),
        y=_as_positive(raw.get("y"), DEFAULT_PAN.y),
        z=_as_positive(raw.get("z"), DEFAULT_PAN.z),
    )


def _default_settings() -> GlobalSettings:
    return GlobalSettings(
        gr_per_liter=app_settings.default_gr_per_liter,
        density=app_settings.default_density,
        hydration=app_settings.default_hydration,
    )


def _parse_settings(raw: Any) -> GlobalSettings:
    defaults = _default_settings()
    if not isinstance(raw, dict):
        return defaults
    hydration = _as_float(raw.get("hydration"), defaults.hydration)
    return GlobalSettings(
        gr_per_liter=_as_positive(raw.get("grPerLiter"), defaults.gr_per_liter),
        density=_as_positive(raw.get("density"), defaults.density),
        hydration=hydration if hydration >= 0 else defaults.hydration,
    )


def _parse_ingredient(raw: Any, index: int) -> Ingredient | None:
    if not isinstance(raw, dict):
        return None
    name = str(raw.get("name") or "").strip()[:120]
    if not name:
        return None

    ingredient_id = str(raw.get("id") or f"ingredient_{index}")[:60]
    # stored percents are trusted as-is; the engine rejects sums that go non-positive
    percent = _as_float(raw.get("percent"), 0.0)
    is_liquid = _as_bool(raw.get("isLiquid"), False)

    if raw.get("type") == "preferment":
        composition = raw.get("composition")
        if not isinstance(composition, dict):
            composition = {}
        return PrefermentIngredient(
            id=ingredient_id,
            name=name,
            percent=percent,
            composition=Composition(
                flour=_as_float(composition.get("flour"), 1.0),
                water=_as_float(composition.get("water"), 0.0),
            ),
            is_liquid=is_liquid,
        )
    return SimpleIngredient(id=ingredient_id, name=name, percent=percent, is_liquid=is_liquid)


def _parse_ingredients(raw: Any) -> tuple[Ingredient, ...]:
    if not isinstance(raw, list):
        return DEFAULT_INGREDIENTS

    ingredients: list[Ingredient] = []
    seen_ids: set[str] = set()
    for index, item in enumerate(raw):
        ingredient = _parse_ingredient(item, index)
        if ingredient is None or ingredient.id in seen_ids:
            continue
        seen_ids.add(ingredient.id)
        ingredients.append(ingredient)
    return tuple(ingredients)


def _parse_mode(record: dict[str, Any]) -> CalculationMode:
    raw = record.get("calculationMode") or record.get("mode")
    if isinstance(raw, str):
        if raw in _LEGACY_MODES:
            return _LEGACY_MODES[raw]
        try:
            return CalculationMode(raw)
        except ValueError:
            pass
    return CalculationMode.VOLUME


def _parse_flour_target(record: dict[str, Any]) -> float:
    raw = record.get("targetFlourInput", record.get("manualFlour"))
    target = _as_float(raw, app_settings.default_flour_target)
    return target if target >= 0 else app_settings.default_flour_target


def parse_preset(raw: Any) -> Preset | None:
    if not isinstance(raw, dict):
        return None
    name = str(raw.get("name") or "").strip()[:120]
    if not name:
        return None
    return Preset(
        name=name,
        description=str(raw.get("description") or ""),
        pan=_parse_pan(raw.get("pan")),
        settings=_parse_settings(raw.get("settings")),
        # catalog entries are clamped like an edit would be
        ingredients=tuple(
            replace(item, percent=max(0.0, item.percent)) for item in _parse_ingredients(raw.get("ingredients"))
        ),
    )


def load_state(record: Any) -> PersistedState:
    if not isinstance(record, dict):
        record = {}

    formula = FormulaInput(
        mode=_parse_mode(record),
        pan=_parse_pan(record.get("pan")),
        flour_target=_parse_flour_target(record),
        settings=_parse_settings(record.get("settings")),
        ingredients=_parse_ingredients(record.get("ingredients")),
    )

    presets: list[Preset] = []
    raw_presets = record.get("customPresets")
    if isinstance(raw_presets, list):
        presets = [preset for preset in (parse_preset(item) for item in raw_presets) if preset]

    unit_system = record.get("unitSystem")
    return PersistedState(
        formula=formula,
        unit_system=resolve_unit_system(unit_system if isinstance(unit_system, str) else None),
        custom_presets=tuple(presets),
    )


def dump_ingredient(ingredient: Ingredient) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": ingredient.id,
        "name": ingredient.name,
        "percent": ingredient.percent,
        "isLiquid": ingredient.is_liquid,
        "type": ingredient.type,
    }
    if isinstance(ingredient, PrefermentIngredient):
        payload["composition"] = {"flour": ingredient.composition.flour, "water": ingredient.composition.water}
    return payload


def _dump_pan(pan: PanGeometry) -> dict[str, float]:
    return {"x": pan.x, "y": pan.y, "z": pan.z}


def _dump_settings(settings: GlobalSettings) -> dict[str, float]:
    return {"grPerLiter": settings.gr_per_liter, "density": settings.density, "hydration": settings.hydration}


def dump_preset(preset: Preset) -> dict[str, Any]:
    return {
        "name": preset.name,
        "description": preset.description,
        "pan": _dump_pan(preset.pan),
        "settings": _dump_settings(preset.settings),
        "ingredients": [dump_ingredient(item) for item in preset.ingredients],
    }


def dump_state(state: PersistedState) -> dict[str, Any]:
    formula = state.formula
    return {
        "pan": _dump_pan(formula.pan),
        "settings": _dump_settings(formula.settings),
        "ingredients": [dump_ingredient(item) for item in formula.ingredients],
        "calculationMode": formula.mode.value,
        "targetFlourInput": formula.flour_target,
        "unitSystem": state.unit_system,
        "customPresets": [dump_preset(preset) for preset in state.custom_presets],
    }
