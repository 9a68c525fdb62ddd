import pytest

from doughpilot.services.formula_engine import compute_formula
from doughpilot.services.formula_types import CalculationMode, FormulaInput, GlobalSettings, PanGeometry
from doughpilot.services.presets import DEFAULT_INGREDIENTS
from doughpilot.services.units import resolve_unit_system, to_display_result, to_imperial_weight


@pytest.fixture()
def baseline_result():
    return compute_formula(
        FormulaInput(
            mode=CalculationMode.VOLUME,
            pan=PanGeometry(x=20, y=10, z=10),
            flour_target=500,
            settings=GlobalSettings(),
            ingredients=DEFAULT_INGREDIENTS,
        )
    )


def test_resolve_unit_system() -> None:
    assert resolve_unit_system(None) == "metric"
    assert resolve_unit_system("IMPERIAL") == "imperial"
    assert resolve_unit_system(None, preferred="imperial") == "imperial"
    assert resolve_unit_system("metric", preferred="imperial") == "metric"
    assert resolve_unit_system("stones") == "metric"


def test_imperial_weight_conversion() -> None:
    assert to_imperial_weight(1000) == pytest.approx(35.274)


def test_metric_display_passes_weights_through(baseline_result) -> None:
    display = to_display_result(baseline_result, "metric")

    assert display.units.weight_unit == "g"
    assert display.units.volume_unit == "cm3"
    assert display.main_flour == baseline_result.main_flour
    assert display.total_dough == baseline_result.total_dough
    assert display.pan_volume == 2000.0


def test_imperial_display_converts_weights_and_volume(baseline_result) -> None:
    display = to_display_result(baseline_result, "imperial")

    assert display.units.weight_unit == "oz"
    assert display.units.volume_unit == "in3"
    assert display.total_dough == pytest.approx(19.19)
    assert display.pan_volume == pytest.approx(122.0)
    assert [item.id for item in display.ingredients] == [item.ingredient.id for item in baseline_result.ingredients]
    assert display.ingredients[0].weight == pytest.approx(0.63)
