from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from doughpilot.core.database import get_db
from doughpilot.services.state_codec import dump_state
from doughpilot.services.state_store import read_state, write_state

router = APIRouter(prefix="/state", tags=["state"])


@router.get("")
def get_state(db: Session = Depends(get_db)) -> dict[str, Any]:
    return dump_state(read_state(db))


@router.put("")
def put_state(record: Any = Body(default=None), db: Session = Depends(get_db)) -> dict[str, Any]:
    return dump_state(write_state(db, record))
