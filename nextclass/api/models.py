from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

MAX_MARKDOWN_CHARS = 2_000_000


class JobCreateRequest(BaseModel):
  """Request body for dispatching a generation job."""

  lecture_id: StrictStr = Field(alias="lectureId", min_length=1)
  model_config = ConfigDict(populate_by_name=True, extra="forbid")


class JobCreateResponse(BaseModel):
  success: bool
  job_id: StrictStr = Field(alias="jobId")
  model_config = ConfigDict(populate_by_name=True)


class JobStatusResponse(BaseModel):
  """Owner view of a job's lifecycle and result."""

  job_id: StrictStr = Field(alias="jobId")
  type: StrictStr
  status: StrictStr
  result: dict[str, Any] | None = None
  error: StrictStr | None = None
  created_at: StrictStr = Field(alias="createdAt")
  updated_at: StrictStr = Field(alias="updatedAt")
  completed_at: StrictStr | None = Field(default=None, alias="completedAt")
  model_config = ConfigDict(populate_by_name=True)


class RunJobRequest(BaseModel):
  """Body posted by the task queue to the runner endpoint."""

  job_id: StrictStr = Field(alias="jobId", min_length=1)
  model_config = ConfigDict(populate_by_name=True)


class RunJobResponse(BaseModel):
  success: bool


class MaterialFixResponse(BaseModel):
  """Outcome of a maintenance pass over stored lecture material."""

  success: bool
  changes_made: bool = Field(alias="changesMade")
  original_length: int = Field(alias="originalLength")
  fixed_length: int = Field(alias="fixedLength")
  model_config = ConfigDict(populate_by_name=True)


class MarkdownRequest(BaseModel):
  markdown: str = Field(max_length=MAX_MARKDOWN_CHARS)
  model_config = ConfigDict(extra="forbid")

  @field_validator("markdown")
  @classmethod
  def _reject_nul(cls, value: str) -> str:
    if "\x00" in value:
      raise ValueError("markdown must not contain NUL characters.")
    return value


class MarkdownResponse(BaseModel):
  markdown: str


class HtmlResponse(BaseModel):
  html: str


class JobListResponse(BaseModel):
  jobs: list[JobStatusResponse]
