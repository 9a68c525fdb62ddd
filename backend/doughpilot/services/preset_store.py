from __future__ import annotations

import json
from collections.abc import Iterable

from sqlalchemy.orm import Session

from doughpilot.models.preset import CustomPreset
from doughpilot.services.presets import Preset, PresetConflictError, is_built_in, merge_custom_presets
from doughpilot.services.state_codec import dump_preset, parse_preset


def _to_preset(row: CustomPreset) -> Preset | None:
    try:
        payload = json.loads(row.payload_json)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    payload["name"] = row.name
    payload["description"] = row.description
    return parse_preset(payload)


def list_custom_presets(db: Session) -> list[Preset]:
    rows = db.query(CustomPreset).order_by(CustomPreset.name.asc()).all()
    return [preset for preset in (_to_preset(row) for row in rows) if preset]


def get_custom_preset(db: Session, name: str) -> Preset | None:
    row = db.query(CustomPreset).filter(CustomPreset.name == name).first()
    return _to_preset(row) if row else None


def save_custom_preset(db: Session, preset: Preset) -> Preset:
    """Insert or replace a custom preset by name. Built-in names are refused."""
    if is_built_in(preset.name):
        raise PresetConflictError(f"Cannot overwrite built-in preset '{preset.name}'")

    payload_json = json.dumps(dump_preset(preset))
    row = db.query(CustomPreset).filter(CustomPreset.name == preset.name).first()
    if row is None:
        row = CustomPreset(name=preset.name, description=preset.description, payload_json=payload_json)
        db.add(row)
    else:
        row.description = preset.description
        row.payload_json = payload_json
    db.commit()
    return preset


def delete_custom_preset(db: Session, name: str) -> bool:
    row = db.query(CustomPreset).filter(CustomPreset.name == name).first()
    if row is None:
        return False
    db.delete(row)
    db.commit()
    return True


def merge_local_presets(db: Session, local: Iterable[Preset]) -> list[Preset]:
    """Adopt local-only presets; stored presets win on name conflicts."""
    stored = list_custom_presets(db)
    stored_names = {preset.name for preset in stored}
    merged = merge_custom_presets(stored, (preset for preset in local if not is_built_in(preset.name)))
    for preset in merged:
        if preset.name not in stored_names:
            save_custom_preset(db, preset)
    return list(merged)
