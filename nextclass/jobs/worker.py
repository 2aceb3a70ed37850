"""Runner that executes one generation job end to end."""

from __future__ import annotations

import logging
from typing import Any

from nextclass.jobs.dispatch import JobProcessorRegistry
from nextclass.jobs.errors import JobError, JobNotFoundError
from nextclass.jobs.models import JobRecord, JobStatus
from nextclass.storage.jobs_repo import JobsRepository

GENERIC_FAILURE_MESSAGE = "Unexpected error while processing the job."


class JobRunner:
  """Drive a job through PROCESSING to a terminal status."""

  def __init__(self, *, jobs_repo: JobsRepository, registry: JobProcessorRegistry) -> None:
    self._jobs_repo = jobs_repo
    self._registry = registry
    self._logger = logging.getLogger(__name__)

  async def run(self, job_id: str) -> JobRecord:
    """Run a job and return the stored record.

    Only JobNotFoundError escapes. Every other failure is persisted as FAILED and the
    failed record is returned. A job that is already terminal is returned untouched.
    """
    job = await self._jobs_repo.get_job(job_id)
    if job is None:
      raise JobNotFoundError(job_id)
    if job.is_terminal:
      self._logger.info("Job %s already %s; skipping", job_id, job.status.value)
      return job

    processing = await self._jobs_repo.transition_job(job_id, target=JobStatus.PROCESSING)
    if processing is None:
      return await self._current(job_id, JobStatus.PROCESSING)

    self._logger.info("Processing job %s (%s) for lecture %s", job_id, processing.job_type.value, processing.lecture_id)
    try:
      handler = self._registry.resolve(processing.job_type)
      result = await handler.run(processing)
    except JobError as exc:
      self._logger.warning("Job %s failed: %s", job_id, exc)
      return await self._fail(job_id, str(exc))
    except Exception:  # noqa: BLE001
      self._logger.error("Job %s crashed", job_id, exc_info=True)
      return await self._fail(job_id, GENERIC_FAILURE_MESSAGE)

    return await self._complete(job_id, result)

  async def _complete(self, job_id: str, result: dict[str, Any]) -> JobRecord:
    try:
      completed = await self._jobs_repo.transition_job(job_id, target=JobStatus.COMPLETED, result_payload=result)
    except Exception:  # noqa: BLE001
      self._logger.error("Failed to persist result for job %s", job_id, exc_info=True)
      return await self._fail(job_id, GENERIC_FAILURE_MESSAGE)
    if completed is None:
      return await self._current(job_id, JobStatus.COMPLETED)
    self._logger.info("Job %s completed", job_id)
    return completed

  async def _fail(self, job_id: str, message: str) -> JobRecord:
    failed = await self._jobs_repo.transition_job(job_id, target=JobStatus.FAILED, error_message=message)
    if failed is None:
      return await self._current(job_id, JobStatus.FAILED)
    return failed

  async def _current(self, job_id: str, target: JobStatus) -> JobRecord:
    """Return the stored record after a guarded write was rejected."""
    current = await self._jobs_repo.get_job(job_id)
    if current is None:
      raise JobNotFoundError(job_id)
    self._logger.warning("Job %s transition to %s rejected; current status %s", job_id, target.value, current.status.value)
    return current
