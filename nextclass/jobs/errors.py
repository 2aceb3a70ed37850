"""Error taxonomy for job processing."""

from __future__ import annotations


class JobError(Exception):
  """Base class for failures that end a job in FAILED."""


class JobNotFoundError(JobError):
  """Raised when a job id does not reference a stored job."""

  def __init__(self, job_id: str) -> None:
    super().__init__(f"Job not found: {job_id}")
    self.job_id = job_id


class CompletionTimeoutError(JobError):
  """Raised when the completion call exceeds its time bound."""

  def __init__(self, timeout_seconds: float) -> None:
    super().__init__(f"Completion timeout: no response within {timeout_seconds:g}s")
    self.timeout_seconds = timeout_seconds


class CompletionServiceError(JobError):
  """Raised when the completion service answers with a non-2xx status."""

  def __init__(self, message: str, *, status_code: int | None = None) -> None:
    super().__init__(message)
    self.status_code = status_code


class CompletionRateLimitError(CompletionServiceError):
  """Completion service rejected the call with HTTP 429."""

  def __init__(self) -> None:
    super().__init__("Completion service rate limit reached (HTTP 429). Wait a few seconds and try again.", status_code=429)


class CompletionCreditsError(CompletionServiceError):
  """Completion service rejected the call with HTTP 402."""

  def __init__(self) -> None:
    super().__init__("Completion service reported insufficient credits (HTTP 402).", status_code=402)


class MalformedResultError(JobError):
  """Raised when completion text cannot be parsed or fails content validation."""
