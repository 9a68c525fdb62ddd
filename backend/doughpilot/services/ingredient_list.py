from __future__ import annotations

import time
from dataclasses import replace

from doughpilot.services.formula_types import Composition, Ingredient, PrefermentIngredient, SimpleIngredient


def clamp_percent(value: float) -> float:
    return max(0.0, round(value, 1))


def new_ingredient_id(existing_ids: set[str], now_ms: int | None = None) -> str:
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    candidate = f"custom_{stamp}"
    while candidate in existing_ids:
        stamp += 1
        candidate = f"custom_{stamp}"
    return candidate


def add_ingredient(
    ingredients: tuple[Ingredient, ...],
    *,
    name: str,
    percent: float,
    is_liquid: bool = False,
    composition: Composition | None = None,
    now_ms: int | None = None,
) -> tuple[Ingredient, ...]:
    name = name.strip()
    if not name:
        raise ValueError("Ingredient name cannot be empty")

    ingredient_id = new_ingredient_id({item.id for item in ingredients}, now_ms=now_ms)
    ingredient: Ingredient
    if composition is not None:
        ingredient = PrefermentIngredient(
            id=ingredient_id,
            name=name,
            percent=clamp_percent(percent),
            composition=composition,
        )
    else:
        ingredient = SimpleIngredient(
            id=ingredient_id,
            name=name,
            percent=clamp_percent(percent),
            is_liquid=is_liquid,
        )
    return (*ingredients, ingredient)


def remove_ingredient(ingredients: tuple[Ingredient, ...], ingredient_id: str) -> tuple[Ingredient, ...]:
    remaining = tuple(item for item in ingredients if item.id != ingredient_id)
    if len(remaining) == len(ingredients):
        raise KeyError(ingredient_id)
    return remaining


def set_ingredient_percent(
    ingredients: tuple[Ingredient, ...],
    ingredient_id: str,
    percent: float,
) -> tuple[Ingredient, ...]:
    found = False
    updated: list[Ingredient] = []
    for item in ingredients:
        if item.id == ingredient_id:
            item = replace(item, percent=clamp_percent(percent))
            found = True
        updated.append(item)
    if not found:
        raise KeyError(ingredient_id)
    return tuple(updated)


def adjust_ingredient_percent(
    ingredients: tuple[Ingredient, ...],
    ingredient_id: str,
    delta: float,
) -> tuple[Ingredient, ...]:
    for item in ingredients:
        if item.id == ingredient_id:
            return set_ingredient_percent(ingredients, ingredient_id, item.percent + delta)
    raise KeyError(ingredient_id)
