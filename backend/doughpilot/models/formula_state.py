from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from doughpilot.core.database import Base


class FormulaState(Base):
    __tablename__ = "formula_states"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    state_key: Mapped[str] = mapped_column(String(60), nullable=False, unique=True)
    payload_json: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
