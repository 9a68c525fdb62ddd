from __future__ import annotations

import math
from collections.abc import Iterable

from doughpilot.services.dimensions import resolve_dimensions, suggested_volume_cm3
from doughpilot.services.formula_types import (
    Breakdown,
    CalculatedIngredient,
    CalculationResult,
    FormulaInput,
    Ingredient,
    PrefermentIngredient,
)


class FormulaError(ValueError):
    """Base class for formulas the engine refuses to compute."""

    code = "formula_error"


class ConfigurationError(FormulaError):
    """Raised when a pre-ferment composition cannot be expanded."""

    code = "configuration_error"

    def __init__(self, ingredient_id: str, ingredient_name: str, reason: str):
        self.ingredient_id = ingredient_id
        self.ingredient_name = ingredient_name
        super().__init__(f"Pre-ferment '{ingredient_name}' ({ingredient_id}) is misconfigured: {reason}")


class DegenerateFormulaError(FormulaError):
    """Raised when the percentage denominator is not positive."""

    code = "degenerate_formula"

    def __init__(self, total_percentage: float):
        self.total_percentage = total_percentage
        super().__init__(f"Total percentage must be positive, got {total_percentage:.4f}")


def round_grams(value: float) -> int:
    """Round half up to whole grams."""
    return int(math.floor(value + 0.5))


def total_percentage(ingredients: Iterable[Ingredient], hydration: float) -> float:
    """Flour (1.0) + hydration fraction + every simple ingredient's fraction.

    Pre-ferments are excluded: their flour is a share of total flour and their
    water follows from their composition.
    """
    total = 1 + hydration
    for ingredient in ingredients:
        if isinstance(ingredient, PrefermentIngredient):
            continue
        total += ingredient.percent / 100

    if total <= 0:
        raise DegenerateFormulaError(total)
    return total


def expand_preferment(ingredient: PrefermentIngredient, total_flour: float) -> CalculatedIngredient:
    composition = ingredient.composition
    if composition.flour <= 0:
        raise ConfigurationError(ingredient.id, ingredient.name, "flour part must be greater than zero")
    if composition.water < 0:
        raise ConfigurationError(ingredient.id, ingredient.name, "water part cannot be negative")

    preferment_flour = total_flour * (ingredient.percent / 100)
    preferment_water = preferment_flour * (composition.water / composition.flour)
    return CalculatedIngredient(
        ingredient=ingredient,
        weight=round_grams(preferment_flour + preferment_water),
        breakdown=Breakdown(flour=preferment_flour, water=preferment_water),
    )


def compute_formula(formula: FormulaInput) -> CalculationResult:
    """Resolve every ingredient weight for one input snapshot.

    Raises ConfigurationError for a pre-ferment with a zero flour part and
    DegenerateFormulaError when the percentages sum to a non-positive value.
    """
    settings = formula.settings
    hydration = settings.hydration_fraction
    percentage = total_percentage(formula.ingredients, hydration)

    dimensions = resolve_dimensions(formula.anchor, settings)
    if dimensions.total_flour is not None:
        total_flour = dimensions.total_flour
    else:
        total_flour = (dimensions.dough_target or 0.0) / percentage

    preferment_flour_total = 0.0
    preferment_water_total = 0.0
    assigned_liquid_total = 0
    calculated: list[CalculatedIngredient] = []

    for ingredient in formula.ingredients:
        if isinstance(ingredient, PrefermentIngredient):
            item = expand_preferment(ingredient, total_flour)
            preferment_flour_total += item.breakdown.flour
            preferment_water_total += item.breakdown.water
        else:
            item = CalculatedIngredient(
                ingredient=ingredient,
                weight=round_grams(total_flour * (ingredient.percent / 100)),
            )
            if ingredient.is_liquid:
                assigned_liquid_total += item.weight
        calculated.append(item)

    total_target_water = total_flour * hydration
    water_supplied = preferment_water_total + assigned_liquid_total
    main_water = round_grams(max(0.0, total_target_water - water_supplied))
    main_flour = round_grams(max(0.0, total_flour - preferment_flour_total))

    pan_volume = dimensions.pan_volume_cm3
    if pan_volume is None:
        # unrounded dough target, so the displayed volume does not inherit rounding drift
        pan_volume = suggested_volume_cm3(total_flour * percentage, settings)

    return CalculationResult(
        main_flour=main_flour,
        main_water=main_water,
        total_flour=round_grams(total_flour),
        total_water=round_grams(total_target_water),
        actual_hydration=settings.hydration,
        total_dough=main_flour + main_water + sum(item.weight for item in calculated),
        pan_volume=pan_volume,
        total_percentage=percentage,
        ingredients=tuple(calculated),
    )
