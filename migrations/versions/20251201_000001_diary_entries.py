"""diary entries + emotion marks

Revision ID: 20251201_000001
Revises:
Create Date: 2025-12-01 00:00:01

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20251201_000001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "diary_entries",
        sa.Column("pk", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("id", sa.String(length=32), nullable=False, unique=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("entry_date", sa.String(length=10), nullable=False),
        sa.Column("title", sa.Text(), nullable=False, server_default=""),
        sa.Column("note", sa.Text(), nullable=False, server_default=""),
        sa.Column("emotion_marker", sa.String(length=32), nullable=False),
        sa.Column("emotion_category", sa.String(length=16), nullable=False, server_default="neutral"),
        sa.Column("mood", sa.String(length=64), nullable=False, server_default=""),
        sa.Column("weather", sa.String(length=20), nullable=True),
        sa.Column("activities", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("ai_comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.UniqueConstraint("user_id", "entry_date", name="uq_diary_entries_user_date"),
    )
    op.create_index("ix_diary_entries_user_id", "diary_entries", ["user_id"])
    op.create_index("ix_diary_entries_user_created", "diary_entries", ["user_id", "created_at"])

    op.create_table(
        "emotion_marks",
        sa.Column("user_id", sa.Integer(), primary_key=True),
        sa.Column("entry_date", sa.String(length=10), primary_key=True),
        sa.Column("emotion_marker", sa.String(length=32), nullable=False),
        sa.Column("emotion_category", sa.String(length=16), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("emotion_marks")
    op.drop_index("ix_diary_entries_user_created", table_name="diary_entries")
    op.drop_index("ix_diary_entries_user_id", table_name="diary_entries")
    op.drop_table("diary_entries")
