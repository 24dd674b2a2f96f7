"""Add interview_questions

Revision ID: 002_interview_questions
Revises: 001_initial
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002_interview_questions"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "interview_questions",
        sa.Column("question_id", sa.String(length=36), nullable=False),
        sa.Column("resume_id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=255), nullable=False),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=True),
        sa.Column("difficulty", sa.String(length=16), nullable=True),
        sa.Column("suggested_answer", sa.Text(), nullable=True),
        sa.Column("tips", sa.Text(), nullable=True),
        sa.Column("tags", sa.Text(), nullable=True),
        sa.Column("is_bookmarked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["resume_id"], ["resumes.resume_id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.user_id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("question_id"),
    )
    op.create_index(op.f("ix_interview_questions_resume_id"), "interview_questions", ["resume_id"], unique=False)
    op.create_index(op.f("ix_interview_questions_user_id"), "interview_questions", ["user_id"], unique=False)
    op.create_index(
        "ix_interview_questions_category_difficulty",
        "interview_questions",
        ["category", "difficulty"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_interview_questions_category_difficulty", table_name="interview_questions")
    op.drop_index(op.f("ix_interview_questions_user_id"), table_name="interview_questions")
    op.drop_index(op.f("ix_interview_questions_resume_id"), table_name="interview_questions")
    op.drop_table("interview_questions")
