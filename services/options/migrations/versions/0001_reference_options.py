"""Create one table per reference option kind.

Each table carries the same columns; names are unique among rows that have
not been soft-deleted, enforced by a partial unique index.
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from app.models.catalog import OPTION_KINDS

# revision identifiers, used by Alembic.
revision = "0001_reference_options"
down_revision = None
branch_labels = None
depends_on = None


def _id_column(kind) -> sa.Column:
    if kind.is_integer_keyed:
        return sa.Column(kind.id_column, sa.Integer(), primary_key=True, autoincrement=True)
    return sa.Column(kind.id_column, sa.String(length=64), primary_key=True)


def upgrade() -> None:
    active = sa.text("deleted_at IS NULL")
    for kind in OPTION_KINDS:
        op.create_table(
            kind.table,
            _id_column(kind),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("description", sa.String(length=255), nullable=True),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
            sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        )
        op.create_index(f"ix_{kind.table}_created_at", kind.table, ["created_at"])
        op.create_index(f"ix_{kind.table}_deleted_at", kind.table, ["deleted_at"])
        op.create_index(
            f"uq_{kind.table}_name_active",
            kind.table,
            ["name"],
            unique=True,
            postgresql_where=active,
            sqlite_where=active,
        )


def downgrade() -> None:
    for kind in reversed(OPTION_KINDS):
        op.drop_index(f"uq_{kind.table}_name_active", table_name=kind.table)
        op.drop_index(f"ix_{kind.table}_deleted_at", table_name=kind.table)
        op.drop_index(f"ix_{kind.table}_created_at", table_name=kind.table)
        op.drop_table(kind.table)
