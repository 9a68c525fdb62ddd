"""initial schema

Revision ID: 20261017_01
Revises: 
Create Date: 2026-10-17 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261017_01"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "custom_presets",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("payload_json", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )
    op.create_index(op.f("ix_custom_presets_id"), "custom_presets", ["id"], unique=False)

    op.create_table(
        "formula_states",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("state_key", sa.String(length=60), nullable=False),
        sa.Column("payload_json", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("state_key"),
    )
    op.create_index(op.f("ix_formula_states_id"), "formula_states", ["id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_formula_states_id"), table_name="formula_states")
    op.drop_table("formula_states")
    op.drop_index(op.f("ix_custom_presets_id"), table_name="custom_presets")
    op.drop_table("custom_presets")
