import pytest

from doughpilot.services.formula_types import CalculationMode, FormulaInput, GlobalSettings, PanGeometry
from doughpilot.services.presets import (
    BUILT_IN_PRESET_NAMES,
    BUILT_IN_PRESETS,
    Preset,
    PresetConflictError,
    apply_preset,
    find_built_in,
    is_built_in,
    merge_custom_presets,
    snapshot_preset,
)


@pytest.fixture()
def flour_formula() -> FormulaInput:
    return FormulaInput(
        mode=CalculationMode.FLOUR,
        pan=PanGeometry(x=30, y=12, z=12),
        flour_target=900,
        settings=GlobalSettings(gr_per_liter=300, density=1.1, hydration=80),
        ingredients=(),
    )


def test_built_in_catalog() -> None:
    assert BUILT_IN_PRESET_NAMES == {"Standard Shokupan", "Premium Shokupan", "Lean Bread", "Brioche"}
    assert is_built_in("Brioche")
    assert not is_built_in("brioche")
    assert find_built_in("Lean Bread") is BUILT_IN_PRESETS[2]
    assert find_built_in("Focaccia") is None


def test_apply_preset_keeps_mode_and_recomputes_flour(flour_formula: FormulaInput) -> None:
    standard = find_built_in("Standard Shokupan")
    assert standard is not None

    loaded = apply_preset(flour_formula, standard)

    assert loaded.mode is CalculationMode.FLOUR
    assert loaded.pan == standard.pan
    assert loaded.settings == standard.settings
    assert loaded.ingredients == standard.ingredients
    assert loaded.flour_target == 296


def test_snapshot_preset_copies_current_inputs(flour_formula: FormulaInput) -> None:
    preset = snapshot_preset(flour_formula, "  Big Loaf ", "for the long pan")

    assert preset == Preset(
        name="Big Loaf",
        description="for the long pan",
        pan=flour_formula.pan,
        settings=flour_formula.settings,
        ingredients=(),
    )


def test_snapshot_refuses_built_in_names(flour_formula: FormulaInput) -> None:
    with pytest.raises(PresetConflictError):
        snapshot_preset(flour_formula, "Brioche")


def test_snapshot_requires_a_name(flour_formula: FormulaInput) -> None:
    with pytest.raises(ValueError):
        snapshot_preset(flour_formula, "  ")


def test_merge_prefers_remote_entries() -> None:
    pan = PanGeometry(x=20, y=10, z=10)
    remote_a = Preset(name="A", pan=pan, settings=GlobalSettings(hydration=65), ingredients=())
    local_a = Preset(name="A", pan=pan, settings=GlobalSettings(hydration=75), ingredients=())
    local_b = Preset(name="B", pan=pan, settings=GlobalSettings(), ingredients=())

    merged = merge_custom_presets([remote_a], [local_a, local_b])

    assert merged == (remote_a, local_b)
