"""Durable session entries

Revision ID: 20261019_session_entries
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_session_entries"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "session_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("session_key", sa.String(64), nullable=False),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("value", sa.Text(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("session_key", "name", name="uq_session_entries_key_name"),
        sqlite_autoincrement=True,
    )

    with op.batch_alter_table("session_entries", schema=None) as batch_op:
        batch_op.create_index("ix_session_entries_session_key", ["session_key"], unique=False)


def downgrade():
    with op.batch_alter_table("session_entries", schema=None) as batch_op:
        batch_op.drop_index("ix_session_entries_session_key")

    op.drop_table("session_entries")
