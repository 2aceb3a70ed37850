"""In-memory doubles shared by unit and integration tests."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field, replace
from typing import Any

from nextclass.jobs.models import ALLOWED_PREDECESSORS, TERMINAL_STATUSES, JobRecord, JobStatus, JobType
from nextclass.storage.lectures_repo import MATERIAL_KEY, LectureRecord

TEACHER_UID = "teacher-1"
OTHER_UID = "teacher-2"


def _now() -> str:
  return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime())


def make_job(job_type: JobType = JobType.GENERATE_QUIZ, *, job_id: str = "job-1", lecture_id: str = "lecture-1", status: JobStatus = JobStatus.PENDING, **overrides: Any) -> JobRecord:
  payload = {"title": "Termodinâmica", "transcript": "Calor e trabalho.", "topic": "Primeira lei", "tags": ["fisica"]}
  record = JobRecord(job_id=job_id, job_type=job_type, teacher_id=TEACHER_UID, lecture_id=lecture_id, input_payload=payload, created_at=_now(), updated_at=_now(), status=status)
  return replace(record, **overrides)


def make_lecture(*, lecture_id: str = "lecture-1", teacher_id: str = TEACHER_UID, material: str | None = None, transcript: str | None = "Calor e trabalho.") -> LectureRecord:
  content = {MATERIAL_KEY: material} if material is not None else {}
  return LectureRecord(lecture_id=lecture_id, teacher_id=teacher_id, title="Termodinâmica", raw_transcript=transcript, tags=("fisica",), structured_content=content)


class InMemoryJobsRepository:
  """Job store double that enforces the same guarded transitions as Postgres."""

  def __init__(self, *records: JobRecord) -> None:
    self.jobs: dict[str, JobRecord] = {record.job_id: record for record in records}
    self.transitions: list[tuple[str, JobStatus]] = []
    self.fail_create = False

  async def create_job(self, record: JobRecord) -> None:
    if self.fail_create:
      raise RuntimeError("database unavailable")
    self.jobs[record.job_id] = record

  async def get_job(self, job_id: str) -> JobRecord | None:
    return self.jobs.get(job_id)

  async def transition_job(self, job_id: str, *, target: JobStatus, result_payload: dict[str, Any] | None = None, error_message: str | None = None) -> JobRecord | None:
    current = self.jobs.get(job_id)
    if current is None or current.status not in ALLOWED_PREDECESSORS[target]:
      return None
    now = _now()
    updated = replace(
      current,
      status=target,
      updated_at=now,
      result_payload=result_payload if result_payload is not None else current.result_payload,
      error_message=error_message if error_message is not None else current.error_message,
      completed_at=now if target in TERMINAL_STATUSES else current.completed_at,
    )
    self.jobs[job_id] = updated
    self.transitions.append((job_id, target))
    return updated

  async def list_jobs_for_lecture(self, lecture_id: str, *, job_type: JobType | None = None, limit: int = 20) -> list[JobRecord]:
    records = [record for record in self.jobs.values() if record.lecture_id == lecture_id and (job_type is None or record.job_type == job_type)]
    return sorted(records, key=lambda record: record.created_at, reverse=True)[:limit]


class InMemoryLecturesRepository:
  def __init__(self, *lectures: LectureRecord) -> None:
    self.lectures: dict[str, LectureRecord] = {lecture.lecture_id: lecture for lecture in lectures}
    self.saved: list[tuple[str, str]] = []

  async def get_lecture(self, lecture_id: str) -> LectureRecord | None:
    return self.lectures.get(lecture_id)

  async def get_material(self, lecture_id: str) -> str | None:
    lecture = self.lectures.get(lecture_id)
    return lecture.material if lecture is not None else None

  async def save_material(self, lecture_id: str, markdown: str) -> None:
    lecture = self.lectures[lecture_id]
    self.lectures[lecture_id] = replace(lecture, structured_content={**lecture.structured_content, MATERIAL_KEY: markdown})
    self.saved.append((lecture_id, markdown))


@dataclass
class InMemoryPublishedContentRepository:
  quizzes: dict[str, dict[str, Any]] = field(default_factory=dict)
  flashcards: dict[str, dict[str, Any]] = field(default_factory=dict)
  lesson_plans: dict[str, dict[str, Any]] = field(default_factory=dict)
  activities: dict[str, dict[str, Any]] = field(default_factory=dict)

  async def replace_quiz(self, *, lecture_id: str, teacher_id: str, title: str, questions: list[dict[str, Any]]) -> str:
    self.quizzes = {key: value for key, value in self.quizzes.items() if value["lecture_id"] != lecture_id}
    record_id = f"quiz-{len(self.quizzes) + 1}"
    self.quizzes[record_id] = {"lecture_id": lecture_id, "teacher_id": teacher_id, "title": title, "questions": questions}
    return record_id

  async def replace_flashcards(self, *, lecture_id: str, teacher_id: str, title: str, cards: list[dict[str, Any]]) -> str:
    self.flashcards = {key: value for key, value in self.flashcards.items() if value["lecture_id"] != lecture_id}
    record_id = f"cards-{len(self.flashcards) + 1}"
    self.flashcards[record_id] = {"lecture_id": lecture_id, "teacher_id": teacher_id, "title": title, "cards": cards}
    return record_id

  async def create_lesson_plan(self, *, teacher_id: str, lecture_id: str | None, title: str, topic: str, content: dict[str, Any]) -> str:
    record_id = f"plan-{len(self.lesson_plans) + 1}"
    self.lesson_plans[record_id] = {"teacher_id": teacher_id, "lecture_id": lecture_id, "title": title, "topic": topic, "content": content}
    return record_id

  async def create_activity(self, *, teacher_id: str, lecture_id: str | None, activity_type: str, title: str, content: dict[str, Any]) -> str:
    record_id = f"activity-{len(self.activities) + 1}"
    self.activities[record_id] = {"teacher_id": teacher_id, "lecture_id": lecture_id, "activity_type": activity_type, "title": title, "content": content}
    return record_id


class FakeCompletionClient:
  """Completion double returning canned text, raising, or stalling."""

  def __init__(self, response: str = "", *, error: Exception | None = None, delay: float = 0.0) -> None:
    self.response = response
    self.error = error
    self.delay = delay
    self.calls: list[tuple[str, str]] = []

  async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
    self.calls.append((system_prompt, user_prompt))
    if self.delay:
      await asyncio.sleep(self.delay)
    if self.error is not None:
      raise self.error
    return self.response


class RecordingEnqueuer:
  def __init__(self, *, error: Exception | None = None) -> None:
    self.error = error
    self.enqueued: list[str] = []

  async def enqueue(self, job_id: str) -> None:
    if self.error is not None:
      raise self.error
    self.enqueued.append(job_id)
