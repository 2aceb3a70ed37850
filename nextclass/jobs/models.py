"""Job persistence models and status state machine."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class JobStatus(str, enum.Enum):
  """Lifecycle states of a generation job."""

  PENDING = "PENDING"
  PROCESSING = "PROCESSING"
  COMPLETED = "COMPLETED"
  FAILED = "FAILED"


class JobType(str, enum.Enum):
  """Generation strategies a job can request."""

  GENERATE_QUIZ = "GENERATE_QUIZ"
  GENERATE_FLASHCARDS = "GENERATE_FLASHCARDS"
  GENERATE_LESSON_PLAN = "GENERATE_LESSON_PLAN"
  GENERATE_MULTIPLE_CHOICE_ACTIVITY = "GENERATE_MULTIPLE_CHOICE_ACTIVITY"
  GENERATE_OPEN_ENDED_ACTIVITY = "GENERATE_OPEN_ENDED_ACTIVITY"
  GENERATE_SUGGESTIONS = "GENERATE_SUGGESTIONS"
  GENERATE_LECTURE_MATERIAL = "GENERATE_LECTURE_MATERIAL"


TERMINAL_STATUSES: frozenset[JobStatus] = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})

# Statuses a job may be in for a write of the key status to be accepted.
ALLOWED_PREDECESSORS: dict[JobStatus, frozenset[JobStatus]] = {
  JobStatus.PENDING: frozenset(),
  JobStatus.PROCESSING: frozenset({JobStatus.PENDING, JobStatus.PROCESSING}),
  JobStatus.COMPLETED: frozenset({JobStatus.PROCESSING}),
  JobStatus.FAILED: frozenset({JobStatus.PENDING, JobStatus.PROCESSING}),
}


def can_transition(current: JobStatus, target: JobStatus) -> bool:
  """Return True when moving from current to target keeps the job monotonic."""
  return current in ALLOWED_PREDECESSORS[target]


@dataclass
class JobRecord:
  """Persistence model for generation jobs."""

  job_id: str
  job_type: JobType
  teacher_id: str
  lecture_id: str
  input_payload: dict[str, Any]
  created_at: str
  updated_at: str
  status: JobStatus = JobStatus.PENDING
  result_payload: dict[str, Any] | None = None
  error_message: str | None = None
  completed_at: str | None = None

  @property
  def is_terminal(self) -> bool:
    return self.status in TERMINAL_STATUSES
