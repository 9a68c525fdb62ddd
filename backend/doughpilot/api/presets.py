from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from doughpilot.api.formulas import formula_response, rejected
from doughpilot.core.database import get_db
from doughpilot.schemas.formula import FormulaRead
from doughpilot.schemas.preset import PresetLoadRequest, PresetRead, PresetSnapshotRequest
from doughpilot.services.formula_engine import FormulaError
from doughpilot.services.preset_store import (
    delete_custom_preset,
    get_custom_preset,
    list_custom_presets,
    save_custom_preset,
)
from doughpilot.services.presets import (
    BUILT_IN_PRESETS,
    PresetConflictError,
    apply_preset,
    find_built_in,
    is_built_in,
    snapshot_preset,
)

router = APIRouter(prefix="/presets", tags=["presets"])


@router.get("", response_model=list[PresetRead])
def list_presets(db: Session = Depends(get_db)) -> list[PresetRead]:
    presets = [PresetRead.from_domain(preset, built_in=True) for preset in BUILT_IN_PRESETS]
    presets.extend(PresetRead.from_domain(preset) for preset in list_custom_presets(db))
    return presets


@router.post("", response_model=PresetRead, status_code=status.HTTP_201_CREATED)
def save_preset(payload: PresetSnapshotRequest, db: Session = Depends(get_db)) -> PresetRead:
    try:
        preset = snapshot_preset(payload.formula.to_domain(), payload.name, payload.description)
        save_custom_preset(db, preset)
    except PresetConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return PresetRead.from_domain(preset)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_preset(name: str, db: Session = Depends(get_db)) -> Response:
    if is_built_in(name):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Built-in presets cannot be deleted")
    if not delete_custom_preset(db, name):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preset not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{name}/load", response_model=FormulaRead)
def load_preset(name: str, payload: PresetLoadRequest, db: Session = Depends(get_db)) -> FormulaRead:
    preset = find_built_in(name) or get_custom_preset(db, name)
    if preset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Preset not found")

    try:
        formula = apply_preset(payload.formula.to_domain(), preset)
    except FormulaError as exc:
        raise rejected(exc) from exc
    return formula_response(formula)
