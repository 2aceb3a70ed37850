"""Storage interfaces for generation jobs."""

from __future__ import annotations

from typing import Any, Protocol

from nextclass.jobs.models import JobRecord, JobStatus, JobType


class JobsRepository(Protocol):
  """Repository contract for job persistence."""

  async def create_job(self, record: JobRecord) -> None:
    """Persist an initial job record."""

  async def get_job(self, job_id: str) -> JobRecord | None:
    """Fetch a job by identifier."""

  async def transition_job(self, job_id: str, *, target: JobStatus, result_payload: dict[str, Any] | None = None, error_message: str | None = None) -> JobRecord | None:
    """Move a job to target only when its current status is an allowed predecessor.

    Returns the updated record, or None when the job is missing or the guard rejected the write.
    """

  async def list_jobs_for_lecture(self, lecture_id: str, *, job_type: JobType | None = None, limit: int = 20) -> list[JobRecord]:
    """Return the most recent jobs for a lecture, newest first."""
