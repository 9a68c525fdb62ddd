import json
import logging
from dataclasses import replace

from fastapi import APIRouter, HTTPException, status
from pydantic import ValidationError

from doughpilot.schemas.formula import (
    CalculateRequest,
    CalculationRead,
    DimensionChangeRequest,
    FormulaErrorRead,
    FormulaRead,
    IngredientAddRequest,
    IngredientRemoveRequest,
    LitersChangeRequest,
    ModeSwitchRequest,
    PercentChangeRequest,
    SettingsChangeRequest,
)
from doughpilot.services.formula_engine import ConfigurationError, FormulaError, compute_formula
from doughpilot.services.formula_types import FormulaInput
from doughpilot.services.ingredient_list import (
    add_ingredient,
    adjust_ingredient_percent,
    remove_ingredient,
    set_ingredient_percent,
)
from doughpilot.services.mode_reconciler import (
    apply_dimension_edit,
    apply_liters_edit,
    apply_settings_change,
    switch_mode,
)
from doughpilot.services.observability import observability_tracker
from doughpilot.services.units import resolve_unit_system, to_display_result

logger = logging.getLogger("doughpilot.formula")

router = APIRouter(prefix="/formulas", tags=["formulas"])


def rejected(exc: FormulaError) -> HTTPException:
    ingredient_id = exc.ingredient_id if isinstance(exc, ConfigurationError) else None
    observability_tracker.record_rejection(exc.code)
    logger.warning(json.dumps({"event": "formula_rejected", "code": exc.code, "ingredient_id": ingredient_id}))
    detail = FormulaErrorRead(code=exc.code, message=str(exc), ingredient_id=ingredient_id)
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail.model_dump())


def formula_response(formula: FormulaInput) -> FormulaRead:
    try:
        return FormulaRead.from_domain(formula)
    except ValidationError as exc:
        observability_tracker.record_rejection("invalid_formula")
        logger.warning(json.dumps({"event": "formula_rejected", "code": "invalid_formula"}))
        detail = FormulaErrorRead(code="invalid_formula", message="Edited formula is out of range")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail.model_dump()) from exc


def _ingredient_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ingredient not found")


@router.post("/calculate", response_model=CalculationRead)
def calculate(payload: CalculateRequest) -> CalculationRead:
    try:
        result = compute_formula(payload.to_domain())
    except FormulaError as exc:
        raise rejected(exc) from exc

    observability_tracker.record_calculation()
    display = None
    if payload.unit_system is not None:
        display = to_display_result(result, resolve_unit_system(payload.unit_system))
    return CalculationRead.from_domain(result, display)


@router.post("/mode", response_model=FormulaRead)
def change_mode(payload: ModeSwitchRequest) -> FormulaRead:
    try:
        formula = switch_mode(payload.formula.to_domain(), payload.mode)
    except FormulaError as exc:
        raise rejected(exc) from exc
    return formula_response(formula)


@router.post("/settings", response_model=FormulaRead)
def change_settings(payload: SettingsChangeRequest) -> FormulaRead:
    try:
        formula = apply_settings_change(payload.formula.to_domain(), payload.settings.to_domain())
    except FormulaError as exc:
        raise rejected(exc) from exc
    return formula_response(formula)


@router.post("/liters", response_model=FormulaRead)
def change_liters(payload: LitersChangeRequest) -> FormulaRead:
    return formula_response(apply_liters_edit(payload.formula.to_domain(), payload.liters))


@router.post("/pan", response_model=FormulaRead)
def change_dimension(payload: DimensionChangeRequest) -> FormulaRead:
    return formula_response(apply_dimension_edit(payload.formula.to_domain(), payload.axis, payload.value))


@router.post("/ingredients", response_model=FormulaRead, status_code=status.HTTP_201_CREATED)
def create_ingredient(payload: IngredientAddRequest) -> FormulaRead:
    formula = payload.formula.to_domain()
    composition = payload.composition.to_domain() if payload.composition else None
    try:
        ingredients = add_ingredient(
            formula.ingredients,
            name=payload.name,
            percent=payload.percent,
            is_liquid=payload.is_liquid,
            composition=composition,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return formula_response(replace(formula, ingredients=ingredients))


@router.delete("/ingredients/{ingredient_id}", response_model=FormulaRead)
def delete_ingredient(ingredient_id: str, payload: IngredientRemoveRequest) -> FormulaRead:
    formula = payload.formula.to_domain()
    try:
        ingredients = remove_ingredient(formula.ingredients, ingredient_id)
    except KeyError as exc:
        raise _ingredient_not_found() from exc
    return formula_response(replace(formula, ingredients=ingredients))


@router.post("/ingredients/{ingredient_id}/percent", response_model=FormulaRead)
def change_ingredient_percent(ingredient_id: str, payload: PercentChangeRequest) -> FormulaRead:
    formula = payload.formula.to_domain()
    try:
        if payload.delta is not None:
            ingredients = adjust_ingredient_percent(formula.ingredients, ingredient_id, payload.delta)
        else:
            ingredients = set_ingredient_percent(formula.ingredients, ingredient_id, payload.percent or 0.0)
    except KeyError as exc:
        raise _ingredient_not_found() from exc
    return formula_response(replace(formula, ingredients=ingredients))
