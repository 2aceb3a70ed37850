"""Postgres-backed repositories for lectures and published study content."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete

from nextclass.core.database import require_session_factory
from nextclass.schema.lectures import Lecture, LessonPlan, TeacherActivity, TeacherFlashcardSet, TeacherQuiz
from nextclass.storage.lectures_repo import MATERIAL_KEY, LectureRecord, LecturesRepository, PublishedContentRepository
from nextclass.utils.ids import generate_record_id

logger = logging.getLogger(__name__)


class PostgresLecturesRepository(LecturesRepository):
  """Read lectures and write their didactic material."""

  def __init__(self) -> None:
    self._session_factory = require_session_factory()

  async def get_lecture(self, lecture_id: str) -> LectureRecord | None:
    async with self._session_factory() as session:
      row = await session.get(Lecture, lecture_id)
      if row is None:
        return None
      return LectureRecord(lecture_id=row.id, teacher_id=row.teacher_id, title=row.title, raw_transcript=row.raw_transcript, tags=tuple(row.tags or ()), structured_content=dict(row.structured_content or {}))

  async def get_material(self, lecture_id: str) -> str | None:
    lecture = await self.get_lecture(lecture_id)
    return lecture.material if lecture is not None else None

  async def save_material(self, lecture_id: str, markdown: str) -> None:
    async with self._session_factory() as session:
      row = await session.get(Lecture, lecture_id)
      if row is None:
        raise LookupError(f"Lecture not found: {lecture_id}")
      # Reassign the dict so SQLAlchemy sees the JSONB change.
      content = dict(row.structured_content or {})
      content[MATERIAL_KEY] = markdown
      row.structured_content = content
      await session.commit()


class PostgresPublishedContentRepository(PublishedContentRepository):
  """Write quizzes, flashcards, lesson plans and activities derived from jobs."""

  def __init__(self) -> None:
    self._session_factory = require_session_factory()

  async def replace_quiz(self, *, lecture_id: str, teacher_id: str, title: str, questions: list[dict[str, Any]]) -> str:
    record_id = generate_record_id()
    # Two separate commits: a crash in between leaves the lecture without a quiz until the next run.
    async with self._session_factory() as session:
      await session.execute(delete(TeacherQuiz).where(TeacherQuiz.lecture_id == lecture_id))
      await session.commit()
    async with self._session_factory() as session:
      session.add(TeacherQuiz(id=record_id, lecture_id=lecture_id, teacher_id=teacher_id, title=title, questions=questions, is_published=False))
      await session.commit()
    logger.info("Replaced quiz for lecture %s with %s (%d questions)", lecture_id, record_id, len(questions))
    return record_id

  async def replace_flashcards(self, *, lecture_id: str, teacher_id: str, title: str, cards: list[dict[str, Any]]) -> str:
    record_id = generate_record_id()
    async with self._session_factory() as session:
      await session.execute(delete(TeacherFlashcardSet).where(TeacherFlashcardSet.lecture_id == lecture_id))
      await session.commit()
    async with self._session_factory() as session:
      session.add(TeacherFlashcardSet(id=record_id, lecture_id=lecture_id, teacher_id=teacher_id, title=title, cards=cards, is_published=False))
      await session.commit()
    logger.info("Replaced flashcards for lecture %s with %s (%d cards)", lecture_id, record_id, len(cards))
    return record_id

  async def create_lesson_plan(self, *, teacher_id: str, lecture_id: str | None, title: str, topic: str, content: dict[str, Any]) -> str:
    record_id = generate_record_id()
    async with self._session_factory() as session:
      session.add(LessonPlan(id=record_id, teacher_id=teacher_id, lecture_id=lecture_id, title=title, topic=topic, content=content))
      await session.commit()
    return record_id

  async def create_activity(self, *, teacher_id: str, lecture_id: str | None, activity_type: str, title: str, content: dict[str, Any]) -> str:
    record_id = generate_record_id()
    async with self._session_factory() as session:
      session.add(TeacherActivity(id=record_id, teacher_id=teacher_id, lecture_id=lecture_id, activity_type=activity_type, title=title, content=content))
      await session.commit()
    return record_id
