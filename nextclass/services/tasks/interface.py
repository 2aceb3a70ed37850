from __future__ import annotations

from typing import Protocol

RUN_JOB_PATH = "/internal/tasks/run-job"


class TaskEnqueuer(Protocol):
  """Interface for handing a job to the runner endpoint."""

  async def enqueue(self, job_id: str) -> None:
    """Enqueue a job for processing."""
    ...
