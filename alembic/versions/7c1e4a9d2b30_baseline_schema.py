"""baseline_schema

Revision ID: 7c1e4a9d2b30
Revises:
Create Date: 2026-10-17 09:12:44.118203

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7c1e4a9d2b30"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_UTC_NOW_ISO = sa.text("""to_char((now() AT TIME ZONE 'UTC'), 'YYYY-MM-DD"T"HH24:MI:SS"Z"')""")


def upgrade() -> None:
  """Upgrade schema."""
  op.create_table(
    "lectures",
    sa.Column("id", sa.String(), nullable=False),
    sa.Column("teacher_id", sa.String(), nullable=False),
    sa.Column("title", sa.String(), nullable=False),
    sa.Column("raw_transcript", sa.Text(), nullable=True),
    sa.Column("structured_content", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column("tags", postgresql.ARRAY(sa.String()), nullable=True),
    sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.PrimaryKeyConstraint("id"),
  )
  op.create_index(op.f("ix_lectures_teacher_id"), "lectures", ["teacher_id"], unique=False)

  op.create_table(
    "teacher_jobs",
    sa.Column("job_id", sa.String(), nullable=False),
    sa.Column("job_type", sa.String(), nullable=False),
    sa.Column("status", sa.String(), nullable=False),
    sa.Column("teacher_id", sa.String(), nullable=False),
    sa.Column("lecture_id", sa.String(), nullable=False),
    sa.Column("input_payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column("result_payload", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
    sa.Column("error_message", sa.Text(), nullable=True),
    sa.Column("created_at", sa.String(), server_default=_UTC_NOW_ISO, nullable=False),
    sa.Column("updated_at", sa.String(), server_default=_UTC_NOW_ISO, nullable=False),
    sa.Column("completed_at", sa.String(), nullable=True),
    sa.PrimaryKeyConstraint("job_id"),
  )
  op.create_index(op.f("ix_teacher_jobs_job_type"), "teacher_jobs", ["job_type"], unique=False)
  op.create_index(op.f("ix_teacher_jobs_status"), "teacher_jobs", ["status"], unique=False)
  op.create_index(op.f("ix_teacher_jobs_teacher_id"), "teacher_jobs", ["teacher_id"], unique=False)
  op.create_index("ix_teacher_jobs_lecture_type_created", "teacher_jobs", ["lecture_id", "job_type", "created_at"], unique=False)

  for table_name, items_column in (("teacher_quizzes", "questions"), ("teacher_flashcards", "cards")):
    op.create_table(
      table_name,
      sa.Column("id", sa.String(), nullable=False),
      sa.Column("lecture_id", sa.String(), nullable=False),
      sa.Column("teacher_id", sa.String(), nullable=False),
      sa.Column("title", sa.String(), nullable=False),
      sa.Column(items_column, postgresql.JSONB(astext_type=sa.Text()), nullable=False),
      sa.Column("is_published", sa.Boolean(), nullable=False),
      sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
      sa.ForeignKeyConstraint(["lecture_id"], ["lectures.id"], ondelete="CASCADE"),
      sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f(f"ix_{table_name}_lecture_id"), table_name, ["lecture_id"], unique=False)
    op.create_index(op.f(f"ix_{table_name}_teacher_id"), table_name, ["teacher_id"], unique=False)

  op.create_table(
    "lesson_plans",
    sa.Column("id", sa.String(), nullable=False),
    sa.Column("teacher_id", sa.String(), nullable=False),
    sa.Column("lecture_id", sa.String(), nullable=True),
    sa.Column("title", sa.String(), nullable=False),
    sa.Column("topic", sa.String(), nullable=False),
    sa.Column("content", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.ForeignKeyConstraint(["lecture_id"], ["lectures.id"], ondelete="SET NULL"),
    sa.PrimaryKeyConstraint("id"),
  )
  op.create_index(op.f("ix_lesson_plans_lecture_id"), "lesson_plans", ["lecture_id"], unique=False)
  op.create_index(op.f("ix_lesson_plans_teacher_id"), "lesson_plans", ["teacher_id"], unique=False)

  op.create_table(
    "teacher_activities",
    sa.Column("id", sa.String(), nullable=False),
    sa.Column("teacher_id", sa.String(), nullable=False),
    sa.Column("lecture_id", sa.String(), nullable=True),
    sa.Column("activity_type", sa.String(), nullable=False),
    sa.Column("title", sa.String(), nullable=False),
    sa.Column("content", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    sa.ForeignKeyConstraint(["lecture_id"], ["lectures.id"], ondelete="SET NULL"),
    sa.PrimaryKeyConstraint("id"),
  )
  op.create_index(op.f("ix_teacher_activities_lecture_id"), "teacher_activities", ["lecture_id"], unique=False)
  op.create_index(op.f("ix_teacher_activities_teacher_id"), "teacher_activities", ["teacher_id"], unique=False)


def downgrade() -> None:
  """Downgrade schema."""
  op.drop_table("teacher_activities")
  op.drop_table("lesson_plans")
  op.drop_table("teacher_flashcards")
  op.drop_table("teacher_quizzes")
  op.drop_table("teacher_jobs")
  op.drop_table("lectures")
