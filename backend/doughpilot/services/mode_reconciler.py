from __future__ import annotations

from dataclasses import replace

from doughpilot.services.dimensions import scale_pan_to_liters, scale_pan_to_volume, suggested_volume_cm3
from doughpilot.services.formula_engine import round_grams, total_percentage
from doughpilot.services.formula_types import (
    CalculationMode,
    FlourAnchored,
    FormulaInput,
    GlobalSettings,
    PanGeometry,
    VolumeAnchored,
)

DIMENSION_DECIMALS = 2


def volume_mode_flour(pan: PanGeometry, settings: GlobalSettings, percentage: float) -> float:
    return pan.liters * settings.gr_per_liter * settings.density / percentage


def _to_flour(formula: FormulaInput) -> FormulaInput:
    percentage = total_percentage(formula.ingredients, formula.settings.hydration_fraction)
    flour = volume_mode_flour(formula.pan, formula.settings, percentage)
    return replace(formula, mode=CalculationMode.FLOUR, flour_target=round_grams(flour))


def _to_volume(formula: FormulaInput) -> FormulaInput:
    percentage = total_percentage(formula.ingredients, formula.settings.hydration_fraction)
    target_volume = suggested_volume_cm3(formula.flour_target * percentage, formula.settings)
    pan = scale_pan_to_volume(formula.pan, target_volume, decimals=DIMENSION_DECIMALS)
    return replace(formula, mode=CalculationMode.VOLUME, pan=pan)


def switch_mode(formula: FormulaInput, mode: CalculationMode) -> FormulaInput:
    """Move the anchor to `mode`, carrying the current dough size across."""
    anchor = formula.anchor
    if isinstance(anchor, VolumeAnchored):
        if mode is CalculationMode.VOLUME:
            return formula
        return _to_flour(formula)
    if isinstance(anchor, FlourAnchored):
        if mode is CalculationMode.FLOUR:
            return formula
        return _to_volume(formula)
    raise TypeError(f"Unsupported anchor: {anchor!r}")


def apply_settings_change(formula: FormulaInput, settings: GlobalSettings) -> FormulaInput:
    """Replace the settings.

    While flour-anchored the current suggested pan volume is held fixed and the
    flour target is re-derived for the new settings.
    """
    anchor = formula.anchor
    if isinstance(anchor, VolumeAnchored):
        return replace(formula, settings=settings)
    if isinstance(anchor, FlourAnchored):
        old_percentage = total_percentage(formula.ingredients, formula.settings.hydration_fraction)
        anchor_liters = suggested_volume_cm3(anchor.flour_target * old_percentage, formula.settings) / 1000
        if anchor_liters <= 0:
            return replace(formula, settings=settings)

        new_percentage = total_percentage(formula.ingredients, settings.hydration_fraction)
        new_flour = anchor_liters * settings.gr_per_liter * settings.density / new_percentage
        return replace(formula, settings=settings, flour_target=round_grams(new_flour))
    raise TypeError(f"Unsupported anchor: {anchor!r}")


def apply_liters_edit(formula: FormulaInput, liters: float) -> FormulaInput:
    """Drive the pan geometry from a liters value; degenerate volumes are ignored."""
    return replace(formula, pan=scale_pan_to_liters(formula.pan, liters))


def apply_dimension_edit(formula: FormulaInput, axis: str, value: float) -> FormulaInput:
    return replace(formula, pan=formula.pan.with_dimension(axis, value))
