"""Base class for job agents."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from nextclass.ai.json_parser import decode_result, parse_json_payload
from nextclass.ai.providers.base import CompletionClient
from nextclass.jobs.errors import CompletionTimeoutError
from nextclass.jobs.models import JobRecord, JobType
from nextclass.services.material_pipeline import SanitizerConfig
from nextclass.storage.lectures_repo import LecturesRepository, PublishedContentRepository

ResultT = TypeVar("ResultT")


@dataclass(frozen=True)
class AgentDependencies:
  """Collaborators shared by every agent."""

  client: CompletionClient
  lectures: LecturesRepository
  published: PublishedContentRepository
  sanitizer: SanitizerConfig
  timeout_seconds: float
  material_min_chars: int = 200


@dataclass(frozen=True)
class Prompt:
  system: str
  user: str


class BaseJobAgent(ABC, Generic[ResultT]):
  """Agent that turns one job into a completion call, a typed result and a side effect."""

  name: str
  job_type: JobType
  result_type: type[ResultT]

  def __init__(self, deps: AgentDependencies) -> None:
    self._deps = deps
    self._logger = logging.getLogger(f"{__name__}.{self.name}")

  async def run(self, job: JobRecord) -> dict[str, Any]:
    """Execute the job and return its result payload."""
    prompt = self.build_prompt(job)
    text = await self._complete(prompt)
    result = self.parse(text)
    return await self.persist(job, result)

  @abstractmethod
  def build_prompt(self, job: JobRecord) -> Prompt:
    """Build the completion prompt from the job input payload."""

  @abstractmethod
  async def persist(self, job: JobRecord, result: ResultT) -> dict[str, Any]:
    """Store the result and return the job result payload."""

  def parse(self, text: str) -> ResultT:
    """Decode completion text into the agent's result contract."""
    return decode_result(parse_json_payload(text), self.result_type)

  async def _complete(self, prompt: Prompt) -> str:
    timeout = self._deps.timeout_seconds
    self._logger.info("Calling completion for %s (timeout %gs)", self.job_type.value, timeout)
    # wait_for cancels the in-flight request when the bound is hit.
    try:
      return await asyncio.wait_for(self._deps.client.complete(system_prompt=prompt.system, user_prompt=prompt.user), timeout=timeout)
    except asyncio.TimeoutError as exc:
      raise CompletionTimeoutError(timeout) from exc


def lecture_title(job: JobRecord, fallback: str) -> str:
  title = job.input_payload.get("title")
  return title if isinstance(title, str) and title.strip() else fallback
