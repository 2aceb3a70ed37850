"""Dependency-injected job handler registry."""

from __future__ import annotations

from typing import Any, Protocol

from nextclass.jobs.models import JobRecord, JobType


class JobHandler(Protocol):
  """Processor contract for one job type."""

  job_type: JobType

  async def run(self, job: JobRecord) -> dict[str, Any]:
    """Execute the job and return its result payload."""


class JobProcessorRegistry:
  """Registry mapping job types to handlers."""

  def __init__(self, handlers: dict[JobType, JobHandler]) -> None:
    self._handlers = dict(handlers)

  @classmethod
  def from_handlers(cls, handlers: list[JobHandler]) -> JobProcessorRegistry:
    return cls({handler.job_type: handler for handler in handlers})

  def resolve(self, job_type: JobType) -> JobHandler:
    """Resolve the handler for a job type."""
    handler = self._handlers.get(job_type)
    if handler is None:
      raise ValueError(f"Unsupported job type: {job_type.value}")
    return handler

  def validate_complete(self) -> None:
    """Raise when any JobType member lacks a handler."""
    missing = [job_type.value for job_type in JobType if job_type not in self._handlers]
    if missing:
      raise ValueError(f"No handler registered for job types: {', '.join(missing)}")
