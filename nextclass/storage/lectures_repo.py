"""Storage interfaces and records for lectures and their published study content."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

MATERIAL_KEY = "material_didatico"


@dataclass(frozen=True)
class LectureRecord:
  """Lecture fields the job subsystem reads."""

  lecture_id: str
  teacher_id: str
  title: str
  raw_transcript: str | None = None
  tags: tuple[str, ...] = ()
  structured_content: dict[str, Any] = field(default_factory=dict)

  @property
  def material(self) -> str | None:
    value = self.structured_content.get(MATERIAL_KEY)
    return value if isinstance(value, str) else None


class LecturesRepository(Protocol):
  """Repository contract for lecture reads and material writes."""

  async def get_lecture(self, lecture_id: str) -> LectureRecord | None:
    """Fetch a lecture by identifier."""

  async def get_material(self, lecture_id: str) -> str | None:
    """Return the lecture's didactic markdown, or None when missing."""

  async def save_material(self, lecture_id: str, markdown: str) -> None:
    """Store didactic markdown for a lecture, keeping other structured content."""


class PublishedContentRepository(Protocol):
  """Repository contract for records derived from completed jobs."""

  async def replace_quiz(self, *, lecture_id: str, teacher_id: str, title: str, questions: list[dict[str, Any]]) -> str:
    """Delete existing quizzes for the lecture, then insert one. Returns the new id."""

  async def replace_flashcards(self, *, lecture_id: str, teacher_id: str, title: str, cards: list[dict[str, Any]]) -> str:
    """Delete existing flashcard sets for the lecture, then insert one. Returns the new id."""

  async def create_lesson_plan(self, *, teacher_id: str, lecture_id: str | None, title: str, topic: str, content: dict[str, Any]) -> str:
    """Insert a lesson plan and return its id."""

  async def create_activity(self, *, teacher_id: str, lecture_id: str | None, activity_type: str, title: str, content: dict[str, Any]) -> str:
    """Insert an activity and return its id."""
