from __future__ import annotations

from sqlalchemy import Index, String, Text, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from nextclass.core.database import Base

_UTC_NOW_ISO = text("""to_char((now() AT TIME ZONE 'UTC'), 'YYYY-MM-DD"T"HH24:MI:SS"Z"')""")


class TeacherJob(Base):
  __tablename__ = "teacher_jobs"
  __table_args__ = (Index("ix_teacher_jobs_lecture_type_created", "lecture_id", "job_type", "created_at"),)

  job_id: Mapped[str] = mapped_column(String, primary_key=True)
  job_type: Mapped[str] = mapped_column(String, nullable=False, index=True)
  status: Mapped[str] = mapped_column(String, nullable=False, index=True)
  teacher_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
  lecture_id: Mapped[str] = mapped_column(String, nullable=False)
  input_payload: Mapped[dict] = mapped_column(JSONB, nullable=False)
  result_payload: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
  error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
  created_at: Mapped[str] = mapped_column(String, nullable=False, server_default=_UTC_NOW_ISO)
  updated_at: Mapped[str] = mapped_column(String, nullable=False, server_default=_UTC_NOW_ISO)
  completed_at: Mapped[str | None] = mapped_column(String, nullable=True)
