from __future__ import annotations

from datetime import datetime

from sqlalchemy import ARRAY, Boolean, DateTime, ForeignKey, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from nextclass.core.database import Base


class Lecture(Base):
  __tablename__ = "lectures"

  id: Mapped[str] = mapped_column(String, primary_key=True)
  teacher_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
  title: Mapped[str] = mapped_column(String, nullable=False)
  raw_transcript: Mapped[str | None] = mapped_column(Text, nullable=True)
  # Holds generated artifacts keyed by name; "material_didatico" is the didactic markdown.
  structured_content: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
  tags: Mapped[list[str] | None] = mapped_column(ARRAY(String), nullable=True)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
  updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class TeacherQuiz(Base):
  __tablename__ = "teacher_quizzes"

  id: Mapped[str] = mapped_column(String, primary_key=True)
  lecture_id: Mapped[str] = mapped_column(ForeignKey("lectures.id", ondelete="CASCADE"), nullable=False, index=True)
  teacher_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
  title: Mapped[str] = mapped_column(String, nullable=False)
  questions: Mapped[list] = mapped_column(JSONB, nullable=False)
  is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TeacherFlashcardSet(Base):
  __tablename__ = "teacher_flashcards"

  id: Mapped[str] = mapped_column(String, primary_key=True)
  lecture_id: Mapped[str] = mapped_column(ForeignKey("lectures.id", ondelete="CASCADE"), nullable=False, index=True)
  teacher_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
  title: Mapped[str] = mapped_column(String, nullable=False)
  cards: Mapped[list] = mapped_column(JSONB, nullable=False)
  is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class LessonPlan(Base):
  __tablename__ = "lesson_plans"

  id: Mapped[str] = mapped_column(String, primary_key=True)
  teacher_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
  lecture_id: Mapped[str | None] = mapped_column(ForeignKey("lectures.id", ondelete="SET NULL"), nullable=True, index=True)
  title: Mapped[str] = mapped_column(String, nullable=False)
  topic: Mapped[str] = mapped_column(String, nullable=False)
  content: Mapped[dict] = mapped_column(JSONB, nullable=False)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TeacherActivity(Base):
  __tablename__ = "teacher_activities"

  id: Mapped[str] = mapped_column(String, primary_key=True)
  teacher_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
  lecture_id: Mapped[str | None] = mapped_column(ForeignKey("lectures.id", ondelete="SET NULL"), nullable=True, index=True)
  activity_type: Mapped[str] = mapped_column(String, nullable=False)
  title: Mapped[str] = mapped_column(String, nullable=False)
  content: Mapped[dict] = mapped_column(JSONB, nullable=False)
  created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())
