from __future__ import annotations

from pydantic import BaseModel, Field

from doughpilot.schemas.formula import (
    FormulaPayload,
    IngredientRead,
    PanRead,
    SettingsRead,
    ingredient_from_domain,
)
from doughpilot.services.presets import Preset


class PresetRead(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str = ""
    pan: PanRead = Field(default_factory=PanRead)
    settings: SettingsRead = Field(default_factory=SettingsRead)
    ingredients: list[IngredientRead] = Field(default_factory=list)
    built_in: bool = False

    @classmethod
    def from_domain(cls, preset: Preset, built_in: bool = False) -> PresetRead:
        return cls(
            name=preset.name,
            description=preset.description,
            pan=PanRead.from_domain(preset.pan),
            settings=SettingsRead.from_domain(preset.settings),
            ingredients=[ingredient_from_domain(item) for item in preset.ingredients],
            built_in=built_in,
        )


class PresetSnapshotRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str = Field(default="", max_length=500)
    formula: FormulaPayload


class PresetLoadRequest(BaseModel):
    formula: FormulaPayload = Field(default_factory=FormulaPayload)
