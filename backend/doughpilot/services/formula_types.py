from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Union


class CalculationMode(str, Enum):
    VOLUME = "volume"
    FLOUR = "flour"


@dataclass(frozen=True)
class PanGeometry:
    """Pan dimensions in centimeters. Liters is always derived from x*y*z."""

    x: float
    y: float
    z: float

    @property
    def volume_cm3(self) -> float:
        return self.x * self.y * self.z

    @property
    def liters(self) -> float:
        return self.volume_cm3 / 1000

    def with_dimension(self, axis: str, value: float) -> PanGeometry:
        if axis not in ("x", "y", "z"):
            raise ValueError(f"Unknown pan dimension: {axis}")
        return replace(self, **{axis: value})


@dataclass(frozen=True)
class GlobalSettings:
    gr_per_liter: float = 286.0
    density: float = 1.0
    hydration: float = 70.0

    @property
    def hydration_fraction(self) -> float:
        return self.hydration / 100

    @property
    def dough_per_liter(self) -> float:
        return self.gr_per_liter * self.density


@dataclass(frozen=True)
class Composition:
    """Flour and water parts by weight, e.g. 1:2 for a yudane."""

    flour: float
    water: float


@dataclass(frozen=True)
class Breakdown:
    flour: float
    water: float


@dataclass(frozen=True)
class SimpleIngredient:
    id: str
    name: str
    percent: float
    is_liquid: bool = False

    @property
    def type(self) -> str:
        return "simple"


@dataclass(frozen=True)
class PrefermentIngredient:
    id: str
    name: str
    percent: float
    composition: Composition
    is_liquid: bool = False

    @property
    def type(self) -> str:
        return "preferment"


Ingredient = Union[SimpleIngredient, PrefermentIngredient]


@dataclass(frozen=True)
class VolumeAnchored:
    pan: PanGeometry


@dataclass(frozen=True)
class FlourAnchored:
    flour_target: float


Anchor = Union[VolumeAnchored, FlourAnchored]


@dataclass(frozen=True)
class FormulaInput:
    """A full snapshot of calculator inputs. Callers build a new one per edit."""

    mode: CalculationMode
    pan: PanGeometry
    flour_target: float
    settings: GlobalSettings
    ingredients: tuple[Ingredient, ...] = ()

    @property
    def anchor(self) -> Anchor:
        if self.mode is CalculationMode.FLOUR:
            return FlourAnchored(flour_target=self.flour_target)
        return VolumeAnchored(pan=self.pan)


@dataclass(frozen=True)
class CalculatedIngredient:
    ingredient: Ingredient
    weight: int
    breakdown: Breakdown | None = None


@dataclass(frozen=True)
class CalculationResult:
    main_flour: int
    main_water: int
    total_flour: int
    total_water: int
    actual_hydration: float
    total_dough: int
    pan_volume: float
    total_percentage: float
    ingredients: tuple[CalculatedIngredient, ...] = field(default_factory=tuple)
