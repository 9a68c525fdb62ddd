from dataclasses import replace

import pytest

from doughpilot.services.formula_engine import compute_formula, round_grams, total_percentage
from doughpilot.services.formula_types import CalculationMode, FormulaInput, GlobalSettings, PanGeometry
from doughpilot.services.mode_reconciler import (
    apply_dimension_edit,
    apply_liters_edit,
    apply_settings_change,
    switch_mode,
    volume_mode_flour,
)
from doughpilot.services.presets import DEFAULT_INGREDIENTS


@pytest.fixture()
def volume_formula() -> FormulaInput:
    return FormulaInput(
        mode=CalculationMode.VOLUME,
        pan=PanGeometry(x=20, y=10, z=10),
        flour_target=500,
        settings=GlobalSettings(),
        ingredients=DEFAULT_INGREDIENTS,
    )


def test_volume_to_flour_carries_rounded_flour(volume_formula: FormulaInput) -> None:
    switched = switch_mode(volume_formula, CalculationMode.FLOUR)

    assert switched.mode is CalculationMode.FLOUR
    assert switched.flour_target == 296
    assert switched.pan == volume_formula.pan


def test_mode_round_trip_restores_pan(volume_formula: FormulaInput) -> None:
    there = switch_mode(volume_formula, CalculationMode.FLOUR)
    back = switch_mode(there, CalculationMode.VOLUME)

    assert back.mode is CalculationMode.VOLUME
    assert back.pan.x == pytest.approx(20, abs=0.01)
    assert back.pan.y == pytest.approx(10, abs=0.01)
    assert back.pan.z == pytest.approx(10, abs=0.01)


def test_flour_to_volume_rescales_pan_to_suggested_volume(volume_formula: FormulaInput) -> None:
    flour_formula = replace(volume_formula, mode=CalculationMode.FLOUR, flour_target=500)
    suggested = compute_formula(flour_formula).pan_volume

    switched = switch_mode(flour_formula, CalculationMode.VOLUME)

    assert switched.pan.volume_cm3 == pytest.approx(suggested, rel=1e-3)
    assert switched.pan == PanGeometry(x=23.82, y=11.91, z=11.91)


def test_switching_to_current_mode_is_a_no_op(volume_formula: FormulaInput) -> None:
    assert switch_mode(volume_formula, CalculationMode.VOLUME) is volume_formula

    flour_formula = replace(volume_formula, mode=CalculationMode.FLOUR)
    assert switch_mode(flour_formula, CalculationMode.FLOUR) is flour_formula


def test_degenerate_pan_is_kept_when_switching_to_volume(volume_formula: FormulaInput) -> None:
    flour_formula = replace(volume_formula, mode=CalculationMode.FLOUR, pan=PanGeometry(x=0, y=10, z=10))

    switched = switch_mode(flour_formula, CalculationMode.VOLUME)

    assert switched.pan == PanGeometry(x=0, y=10, z=10)


def test_settings_change_in_volume_mode_keeps_pan_and_flour(volume_formula: FormulaInput) -> None:
    updated = apply_settings_change(volume_formula, GlobalSettings(gr_per_liter=300, density=1.0, hydration=75))

    assert updated.pan == volume_formula.pan
    assert updated.flour_target == volume_formula.flour_target
    assert updated.settings.gr_per_liter == 300


def test_settings_change_in_flour_mode_holds_suggested_volume(volume_formula: FormulaInput) -> None:
    flour_formula = replace(volume_formula, mode=CalculationMode.FLOUR, flour_target=500)

    denser = apply_settings_change(flour_formula, GlobalSettings(gr_per_liter=300, density=1.0, hydration=70))
    wetter = apply_settings_change(flour_formula, GlobalSettings(gr_per_liter=286, density=1.0, hydration=80))

    assert denser.flour_target == 524
    assert wetter.flour_target == 475
    assert compute_formula(wetter).pan_volume == pytest.approx(compute_formula(flour_formula).pan_volume, rel=2e-3)


def test_liters_edit_rescales_pan_without_rounding(volume_formula: FormulaInput) -> None:
    updated = apply_liters_edit(volume_formula, 3.0)

    assert updated.pan.volume_cm3 == pytest.approx(3000.0, abs=1e-6)


def test_zero_liters_edit_is_ignored(volume_formula: FormulaInput) -> None:
    assert apply_liters_edit(volume_formula, 0).pan == volume_formula.pan


def test_dimension_edit_updates_one_axis(volume_formula: FormulaInput) -> None:
    updated = apply_dimension_edit(volume_formula, "z", 12)

    assert updated.pan == PanGeometry(x=20, y=10, z=12)
    assert updated.pan.liters == pytest.approx(2.4)

    with pytest.raises(ValueError):
        apply_dimension_edit(volume_formula, "w", 12)


@pytest.mark.parametrize(
    "pan",
    [
        PanGeometry(x=20, y=10, z=10),
        PanGeometry(x=20, y=3, z=4),
        PanGeometry(x=8, y=8, z=6),
        PanGeometry(x=35, y=12, z=11),
    ],
)
def test_mode_round_trip_error_is_bounded_by_flour_rounding(volume_formula: FormulaInput, pan: PanGeometry) -> None:
    formula = replace(volume_formula, pan=pan)
    percentage = total_percentage(formula.ingredients, formula.settings.hydration_fraction)
    exact_flour = volume_mode_flour(pan, formula.settings, percentage)
    # the whole-gram flour target rescales every side by the same factor
    linear_drift = abs((round_grams(exact_flour) / exact_flour) ** (1 / 3) - 1)

    back = switch_mode(switch_mode(formula, CalculationMode.FLOUR), CalculationMode.VOLUME)

    for axis in ("x", "y", "z"):
        original = getattr(pan, axis)
        assert abs(getattr(back.pan, axis) - original) <= original * linear_drift + 0.005 + 1e-9
