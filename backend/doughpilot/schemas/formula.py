from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, Field, computed_field, model_validator

from doughpilot.core.config import settings as app_settings
from doughpilot.services.formula_types import (
    CalculatedIngredient,
    CalculationMode,
    CalculationResult,
    Composition,
    FormulaInput,
    GlobalSettings,
    Ingredient,
    PanGeometry,
    PrefermentIngredient,
    SimpleIngredient,
)
from doughpilot.services.units import DisplayResult

MAX_DIMENSION_CM = 1000
MAX_PERCENT = 1000
MAX_FLOUR_TARGET = 1_000_000


# Read models carry no upper bounds: reconciled formulas and stored records can
# legitimately leave the ranges a request is allowed to start from.


class PanRead(BaseModel):
    x: float = Field(default=20.0, ge=0)
    y: float = Field(default=10.0, ge=0)
    z: float = Field(default=10.0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def liters(self) -> float:
        return round(self.x * self.y * self.z / 1000, 4)

    def to_domain(self) -> PanGeometry:
        return PanGeometry(x=self.x, y=self.y, z=self.z)

    @classmethod
    def from_domain(cls, pan: PanGeometry) -> PanRead:
        return cls(x=pan.x, y=pan.y, z=pan.z)


class PanPayload(PanRead):
    x: float = Field(default=20.0, ge=0, le=MAX_DIMENSION_CM)
    y: float = Field(default=10.0, ge=0, le=MAX_DIMENSION_CM)
    z: float = Field(default=10.0, ge=0, le=MAX_DIMENSION_CM)


class SettingsRead(BaseModel):
    gr_per_liter: float = Field(default=app_settings.default_gr_per_liter, gt=0)
    density: float = Field(default=app_settings.default_density, gt=0)
    hydration: float = Field(default=app_settings.default_hydration, ge=0)

    def to_domain(self) -> GlobalSettings:
        return GlobalSettings(gr_per_liter=self.gr_per_liter, density=self.density, hydration=self.hydration)

    @classmethod
    def from_domain(cls, value: GlobalSettings) -> SettingsRead:
        return cls(gr_per_liter=value.gr_per_liter, density=value.density, hydration=value.hydration)


class SettingsPayload(SettingsRead):
    gr_per_liter: float = Field(default=app_settings.default_gr_per_liter, gt=0, le=2000)
    density: float = Field(default=app_settings.default_density, gt=0, le=10)
    hydration: float = Field(default=app_settings.default_hydration, ge=0, le=300)


class CompositionRead(BaseModel):
    flour: float = 1.0
    water: float = 0.0

    def to_domain(self) -> Composition:
        return Composition(flour=self.flour, water=self.water)


class CompositionPayload(CompositionRead):
    # a zero flour part is accepted here so the engine can name the offending pre-ferment
    flour: float = Field(default=1.0, ge=0, le=MAX_PERCENT)
    water: float = Field(default=0.0, ge=0, le=MAX_PERCENT)


class SimpleIngredientRead(BaseModel):
    id: str = Field(min_length=1, max_length=60)
    name: str = Field(min_length=1, max_length=120)
    percent: float = Field(ge=0)
    is_liquid: bool = False
    type: Literal["simple"] = "simple"


class PrefermentIngredientRead(BaseModel):
    id: str = Field(min_length=1, max_length=60)
    name: str = Field(min_length=1, max_length=120)
    percent: float = Field(ge=0)
    is_liquid: bool = False
    type: Literal["preferment"]
    composition: CompositionRead = Field(default_factory=CompositionRead)


class SimpleIngredientPayload(SimpleIngredientRead):
    percent: float = Field(ge=0, le=MAX_PERCENT)


class PrefermentIngredientPayload(PrefermentIngredientRead):
    percent: float = Field(ge=0, le=MAX_PERCENT)
    composition: CompositionPayload = Field(default_factory=CompositionPayload)


IngredientRead = Union[PrefermentIngredientRead, SimpleIngredientRead]
IngredientPayload = Union[PrefermentIngredientPayload, SimpleIngredientPayload]


def ingredient_to_domain(payload: IngredientRead) -> Ingredient:
    if isinstance(payload, PrefermentIngredientRead):
        return PrefermentIngredient(
            id=payload.id,
            name=payload.name,
            percent=payload.percent,
            composition=payload.composition.to_domain(),
            is_liquid=payload.is_liquid,
        )
    return SimpleIngredient(id=payload.id, name=payload.name, percent=payload.percent, is_liquid=payload.is_liquid)


def ingredient_from_domain(ingredient: Ingredient) -> IngredientRead:
    if isinstance(ingredient, PrefermentIngredient):
        return PrefermentIngredientRead(
            id=ingredient.id,
            name=ingredient.name,
            percent=ingredient.percent,
            is_liquid=ingredient.is_liquid,
            type="preferment",
            composition=CompositionRead(flour=ingredient.composition.flour, water=ingredient.composition.water),
        )
    return SimpleIngredientRead(
        id=ingredient.id,
        name=ingredient.name,
        percent=ingredient.percent,
        is_liquid=ingredient.is_liquid,
    )


def _check_unique_ids(ingredients: list) -> None:
    ids = [item.id for item in ingredients]
    if len(ids) != len(set(ids)):
        raise ValueError("Ingredient ids must be unique")


class FormulaRead(BaseModel):
    mode: CalculationMode = CalculationMode.VOLUME
    pan: PanRead = Field(default_factory=PanRead)
    flour_target: float = Field(default=app_settings.default_flour_target, ge=0)
    settings: SettingsRead = Field(default_factory=SettingsRead)
    ingredients: list[IngredientRead] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, formula: FormulaInput) -> FormulaRead:
        return cls(
            mode=formula.mode,
            pan=PanRead.from_domain(formula.pan),
            flour_target=formula.flour_target,
            settings=SettingsRead.from_domain(formula.settings),
            ingredients=[ingredient_from_domain(item) for item in formula.ingredients],
        )


class FormulaPayload(BaseModel):
    mode: CalculationMode = CalculationMode.VOLUME
    pan: PanPayload = Field(default_factory=PanPayload)
    flour_target: float = Field(default=app_settings.default_flour_target, ge=0, le=MAX_FLOUR_TARGET)
    settings: SettingsPayload = Field(default_factory=SettingsPayload)
    ingredients: list[IngredientPayload] = Field(default_factory=list, max_length=100)

    @model_validator(mode="after")
    def _unique_ingredient_ids(self) -> FormulaPayload:
        _check_unique_ids(self.ingredients)
        return self

    def to_domain(self) -> FormulaInput:
        return FormulaInput(
            mode=self.mode,
            pan=self.pan.to_domain(),
            flour_target=self.flour_target,
            settings=self.settings.to_domain(),
            ingredients=tuple(ingredient_to_domain(item) for item in self.ingredients),
        )


class CalculateRequest(FormulaPayload):
    unit_system: str | None = Field(default=None, max_length=10)


class ModeSwitchRequest(BaseModel):
    formula: FormulaPayload
    mode: CalculationMode


class SettingsChangeRequest(BaseModel):
    formula: FormulaPayload
    settings: SettingsPayload


class LitersChangeRequest(BaseModel):
    formula: FormulaPayload
    liters: float = Field(ge=0, le=1000)


class DimensionChangeRequest(BaseModel):
    formula: FormulaPayload
    axis: Literal["x", "y", "z"]
    value: float = Field(ge=0, le=MAX_DIMENSION_CM)


class IngredientAddRequest(BaseModel):
    formula: FormulaPayload
    name: str = Field(min_length=1, max_length=120)
    percent: float = Field(default=0.0, ge=-MAX_PERCENT, le=MAX_PERCENT)
    is_liquid: bool = False
    composition: CompositionPayload | None = None


class IngredientRemoveRequest(BaseModel):
    formula: FormulaPayload


class PercentChangeRequest(BaseModel):
    formula: FormulaPayload
    percent: float | None = Field(default=None, ge=-MAX_PERCENT, le=MAX_PERCENT)
    delta: float | None = Field(default=None, ge=-MAX_PERCENT, le=MAX_PERCENT)

    @model_validator(mode="after")
    def _exactly_one_change(self) -> PercentChangeRequest:
        if (self.percent is None) == (self.delta is None):
            raise ValueError("Provide exactly one of percent or delta")
        return self


class BreakdownRead(BaseModel):
    flour: float
    water: float


class CalculatedIngredientRead(BaseModel):
    id: str
    name: str
    type: str
    percent: float
    is_liquid: bool
    composition: CompositionRead | None = None
    weight: int
    breakdown: BreakdownRead | None = None

    @classmethod
    def from_domain(cls, item: CalculatedIngredient) -> CalculatedIngredientRead:
        ingredient = item.ingredient
        composition = None
        if isinstance(ingredient, PrefermentIngredient):
            composition = CompositionRead(flour=ingredient.composition.flour, water=ingredient.composition.water)
        breakdown = None
        if item.breakdown is not None:
            breakdown = BreakdownRead(flour=item.breakdown.flour, water=item.breakdown.water)
        return cls(
            id=ingredient.id,
            name=ingredient.name,
            type=ingredient.type,
            percent=ingredient.percent,
            is_liquid=ingredient.is_liquid,
            composition=composition,
            weight=item.weight,
            breakdown=breakdown,
        )


class DisplayIngredientRead(BaseModel):
    id: str
    name: str
    weight: float


class DisplayRead(BaseModel):
    unit_system: str
    weight_unit: str
    volume_unit: str
    main_flour: float
    main_water: float
    total_flour: float
    total_water: float
    total_dough: float
    pan_volume: float
    ingredients: list[DisplayIngredientRead] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, display: DisplayResult) -> DisplayRead:
        return cls(
            unit_system=display.units.unit_system,
            weight_unit=display.units.weight_unit,
            volume_unit=display.units.volume_unit,
            main_flour=display.main_flour,
            main_water=display.main_water,
            total_flour=display.total_flour,
            total_water=display.total_water,
            total_dough=display.total_dough,
            pan_volume=display.pan_volume,
            ingredients=[
                DisplayIngredientRead(id=item.id, name=item.name, weight=item.weight) for item in display.ingredients
            ],
        )


class CalculationRead(BaseModel):
    main_flour: int
    main_water: int
    total_flour: int
    total_water: int
    actual_hydration: float
    total_dough: int
    pan_volume: float
    total_percentage: float
    ingredients: list[CalculatedIngredientRead] = Field(default_factory=list)
    display: DisplayRead | None = None

    @classmethod
    def from_domain(cls, result: CalculationResult, display: DisplayResult | None = None) -> CalculationRead:
        return cls(
            main_flour=result.main_flour,
            main_water=result.main_water,
            total_flour=result.total_flour,
            total_water=result.total_water,
            actual_hydration=result.actual_hydration,
            total_dough=result.total_dough,
            pan_volume=result.pan_volume,
            total_percentage=result.total_percentage,
            ingredients=[CalculatedIngredientRead.from_domain(item) for item in result.ingredients],
            display=DisplayRead.from_domain(display) if display else None,
        )


class FormulaErrorRead(BaseModel):
    code: str
    message: str
    ingredient_id: str | None = None
