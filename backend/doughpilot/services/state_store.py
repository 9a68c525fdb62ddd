from __future__ import annotations

import json
from typing import Any

from sqlalchemy.orm import Session

from doughpilot.core.config import settings
from doughpilot.models.formula_state import FormulaState
from doughpilot.services.preset_store import list_custom_presets, merge_local_presets
from doughpilot.services.state_codec import PersistedState, dump_state, load_state


def read_state(db: Session, state_key: str | None = None) -> PersistedState:
    key = state_key or settings.state_key
    row = db.query(FormulaState).filter(FormulaState.state_key == key).first()

    record: Any = None
    if row is not None:
        try:
            record = json.loads(row.payload_json)
        except json.JSONDecodeError:
            record = None

    state = load_state(record)
    return PersistedState(
        formula=state.formula,
        unit_system=state.unit_system,
        custom_presets=tuple(list_custom_presets(db)),
    )


def write_state(db: Session, record: Any, state_key: str | None = None) -> PersistedState:
    """Normalize a client record, merge its presets into the store and persist it."""
    key = state_key or settings.state_key
    incoming = load_state(record)
    presets = merge_local_presets(db, incoming.custom_presets)
    state = PersistedState(formula=incoming.formula, unit_system=incoming.unit_system, custom_presets=tuple(presets))

    payload = dump_state(state)
    payload.pop("customPresets", None)
    payload_json = json.dumps(payload)

    row = db.query(FormulaState).filter(FormulaState.state_key == key).first()
    if row is None:
        db.add(FormulaState(state_key=key, payload_json=payload_json))
    else:
        row.payload_json = payload_json
    db.commit()
    return state
