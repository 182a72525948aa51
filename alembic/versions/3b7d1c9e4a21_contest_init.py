"""contest init

Revision ID: 3b7d1c9e4a21
Revises:
Create Date: 2026-10-16 10:12:41.204517

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b7d1c9e4a21'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "questions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column(
            "options",
            sa.JSON(),
            nullable=False,
            comment="option texts keyed A-D",
        ),
        sa.Column("correct_answer", sa.String(1), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "correct_answer IN ('A', 'B', 'C', 'D')",
            name="ck_questions_correct_answer",
        ),
    )

    op.create_table(
        "submissions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("mobile", sa.String(20), nullable=False),
        sa.Column("panchayath", sa.String(200), nullable=False),
        sa.Column(
            "reference_id",
            sa.String(64),
            nullable=True,
            comment="mobile or submission id of the referrer",
        ),
        sa.Column(
            "answers",
            sa.JSON(),
            nullable=False,
            comment="question id -> selected option",
        ),
        sa.Column("score", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.UniqueConstraint("mobile", name="uq_submissions_mobile"),
    )

    op.create_index("ix_submissions_reference_id", "submissions", ["reference_id"])
    op.create_index("ix_submissions_created_at", "submissions", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_submissions_created_at", table_name="submissions")
    op.drop_index("ix_submissions_reference_id", table_name="submissions")
    op.drop_table("submissions")
    op.drop_table("questions")
