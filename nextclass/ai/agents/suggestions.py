"""Lecture improvement suggestions agent."""

from __future__ import annotations

from typing import Any

from nextclass.ai.agents.base import BaseJobAgent, Prompt
from nextclass.ai.agents.prompts import SUGGESTIONS_SYSTEM_PROMPT, user_prompt
from nextclass.ai.contracts import SuggestionsResult
from nextclass.jobs.models import JobRecord, JobType


class SuggestionsAgent(BaseJobAgent[SuggestionsResult]):
  """Suggest improvements for a lecture; nothing is persisted beyond the job result."""

  name = "SuggestionsAgent"
  job_type = JobType.GENERATE_SUGGESTIONS
  result_type = SuggestionsResult

  def build_prompt(self, job: JobRecord) -> Prompt:
    return Prompt(system=SUGGESTIONS_SYSTEM_PROMPT, user=user_prompt("Sugira melhorias para a aula abaixo.", job.input_payload))

  async def persist(self, job: JobRecord, result: SuggestionsResult) -> dict[str, Any]:
    _ = job
    return {"suggestions": list(result.suggestions)}
