import pytest

from doughpilot.services.formula_types import Composition, PrefermentIngredient, SimpleIngredient
from doughpilot.services.ingredient_list import (
    add_ingredient,
    adjust_ingredient_percent,
    clamp_percent,
    new_ingredient_id,
    remove_ingredient,
    set_ingredient_percent,
)
from doughpilot.services.presets import DEFAULT_INGREDIENTS


def test_clamp_percent() -> None:
    assert clamp_percent(-3) == 0.0
    assert clamp_percent(1.74) == 1.7
    assert clamp_percent(12) == 12.0


def test_new_ingredient_id_skips_collisions() -> None:
    assert new_ingredient_id(set(), now_ms=1000) == "custom_1000"
    assert new_ingredient_id({"custom_1000", "custom_1001"}, now_ms=1000) == "custom_1002"


def test_add_simple_ingredient_appends_at_end() -> None:
    updated = add_ingredient(DEFAULT_INGREDIENTS, name="  Honey ", percent=3.25, now_ms=42)

    assert len(updated) == len(DEFAULT_INGREDIENTS) + 1
    added = updated[-1]
    assert added == SimpleIngredient(id="custom_42", name="Honey", percent=3.2, is_liquid=False)


def test_add_preferment_ingredient() -> None:
    updated = add_ingredient(
        (),
        name="Tangzhong",
        percent=5,
        composition=Composition(flour=1, water=5),
        now_ms=7,
    )

    assert updated == (
        PrefermentIngredient(id="custom_7", name="Tangzhong", percent=5.0, composition=Composition(flour=1, water=5)),
    )


def test_add_ingredient_requires_name() -> None:
    with pytest.raises(ValueError):
        add_ingredient(DEFAULT_INGREDIENTS, name="   ", percent=3)


def test_remove_ingredient_keeps_order() -> None:
    updated = remove_ingredient(DEFAULT_INGREDIENTS, "salt")

    assert [item.id for item in updated] == ["sugar", "butter", "yeast", "yudane", "milk"]


def test_remove_unknown_ingredient_raises() -> None:
    with pytest.raises(KeyError):
        remove_ingredient(DEFAULT_INGREDIENTS, "rye")


def test_set_percent_clamps_negative_values() -> None:
    updated = set_ingredient_percent(DEFAULT_INGREDIENTS, "sugar", -4)

    assert updated[0].percent == 0.0
    assert updated[1:] == DEFAULT_INGREDIENTS[1:]


def test_adjust_percent_steps_by_tenths() -> None:
    up = adjust_ingredient_percent(DEFAULT_INGREDIENTS, "salt", 0.1)
    down = adjust_ingredient_percent(DEFAULT_INGREDIENTS, "yeast", -1.0)

    assert up[2].percent == 1.8
    assert down[3].percent == 0.0


def test_adjust_preferment_percent_keeps_composition() -> None:
    updated = adjust_ingredient_percent(DEFAULT_INGREDIENTS, "yudane", 5)

    yudane = updated[4]
    assert isinstance(yudane, PrefermentIngredient)
    assert yudane.percent == 25.0
    assert yudane.composition == Composition(flour=1, water=2)


def test_adjust_unknown_ingredient_raises() -> None:
    with pytest.raises(KeyError):
        adjust_ingredient_percent(DEFAULT_INGREDIENTS, "rye", 1)
