from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from doughpilot.services.formula_engine import round_grams, total_percentage
from doughpilot.services.formula_types import (
    Composition,
    FormulaInput,
    GlobalSettings,
    Ingredient,
    PanGeometry,
    PrefermentIngredient,
    SimpleIngredient,
)
from doughpilot.services.mode_reconciler import volume_mode_flour


class PresetConflictError(ValueError):
    """Raised when a custom preset would shadow a built-in one."""


@dataclass(frozen=True)
class Preset:
    name: str
    pan: PanGeometry
    settings: GlobalSettings
    ingredients: tuple[Ingredient, ...]
    description: str = ""


def _yudane(percent: float = 20) -> PrefermentIngredient:
    return PrefermentIngredient(id="yudane", name="Yudane", percent=percent, composition=Composition(flour=1, water=2))


DEFAULT_INGREDIENTS: tuple[Ingredient, ...] = (
    SimpleIngredient(id="sugar", name="Sugar", percent=6),
    SimpleIngredient(id="butter", name="Butter", percent=5),
    SimpleIngredient(id="salt", name="Salt", percent=1.7),
    SimpleIngredient(id="yeast", name="Yeast", percent=0.6),
    _yudane(),
    SimpleIngredient(id="milk", name="Milk", percent=10, is_liquid=True),
)

_STANDARD_PAN = PanGeometry(x=20, y=10, z=10)

BUILT_IN_PRESETS: tuple[Preset, ...] = (
    Preset(
        name="Standard Shokupan",
        description="Classic soft Japanese milk bread",
        pan=_STANDARD_PAN,
        settings=GlobalSettings(gr_per_liter=286, density=1.0, hydration=70),
        ingredients=DEFAULT_INGREDIENTS,
    ),
    Preset(
        name="Premium Shokupan",
        description="Richer, fluffier, higher fat content",
        pan=_STANDARD_PAN,
        settings=GlobalSettings(gr_per_liter=280, density=1.01, hydration=70),
        ingredients=(
            SimpleIngredient(id="sugar", name="Sugar", percent=6),
            SimpleIngredient(id="butter", name="Butter", percent=6),
            SimpleIngredient(id="salt", name="Salt", percent=1.7),
            SimpleIngredient(id="yeast", name="Instant Yeast", percent=0.8),
            SimpleIngredient(id="milk", name="Milk", percent=30, is_liquid=True),
            _yudane(),
        ),
    ),
    Preset(
        name="Lean Bread",
        description="Simple flour, water, salt, yeast",
        pan=_STANDARD_PAN,
        settings=GlobalSettings(gr_per_liter=290, density=1.0, hydration=68),
        ingredients=(
            SimpleIngredient(id="salt", name="Salt", percent=2),
            SimpleIngredient(id="yeast", name="Yeast", percent=0.5),
        ),
    ),
    Preset(
        name="Brioche",
        description="Rich, egg and butter heavy bread",
        pan=_STANDARD_PAN,
        settings=GlobalSettings(gr_per_liter=260, density=1.05, hydration=60),
        ingredients=(
            SimpleIngredient(id="sugar", name="Sugar", percent=15),
            SimpleIngredient(id="butter", name="Butter", percent=30),
            SimpleIngredient(id="salt", name="Salt", percent=1.8),
            SimpleIngredient(id="yeast", name="Instant Yeast", percent=1.0),
            SimpleIngredient(id="eggs", name="Eggs", percent=30, is_liquid=True),
            SimpleIngredient(id="milk", name="Milk", percent=20, is_liquid=True),
        ),
    ),
)

BUILT_IN_PRESET_NAMES = frozenset(preset.name for preset in BUILT_IN_PRESETS)


def is_built_in(name: str) -> bool:
    return name in BUILT_IN_PRESET_NAMES


def find_built_in(name: str) -> Preset | None:
    for preset in BUILT_IN_PRESETS:
        if preset.name == name:
            return preset
    return None


def apply_preset(formula: FormulaInput, preset: Preset) -> FormulaInput:
    """Load a preset's pan, settings and ingredients.

    The mode is kept, and the flour target is re-derived from the preset's pan so
    that switching to flour mode afterwards starts from the same dough.
    """
    percentage = total_percentage(preset.ingredients, preset.settings.hydration_fraction)
    flour = volume_mode_flour(preset.pan, preset.settings, percentage)
    return replace(
        formula,
        pan=preset.pan,
        settings=preset.settings,
        ingredients=tuple(preset.ingredients),
        flour_target=round_grams(flour),
    )


def snapshot_preset(formula: FormulaInput, name: str, description: str = "") -> Preset:
    name = name.strip()
    if not name:
        raise ValueError("Preset name cannot be empty")
    if is_built_in(name):
        raise PresetConflictError(f"Cannot overwrite built-in preset '{name}'")
    return Preset(
        name=name,
        description=description,
        pan=formula.pan,
        settings=formula.settings,
        ingredients=tuple(formula.ingredients),
    )


def merge_custom_presets(remote: Iterable[Preset], local: Iterable[Preset]) -> tuple[Preset, ...]:
    """Remote entries win on name conflicts; local-only entries are kept."""
    merged: dict[str, Preset] = {}
    for preset in remote:
        merged[preset.name] = preset
    for preset in local:
        merged.setdefault(preset.name, preset)
    return tuple(merged.values())
