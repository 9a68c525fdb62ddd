from doughpilot.models.formula_state import FormulaState
from doughpilot.models.preset import CustomPreset

__all__ = [
    "CustomPreset",
    "FormulaState",
]
