"""Activity generation agents (multiple choice and open ended)."""

from __future__ import annotations

from typing import Any, ClassVar

from nextclass.ai.agents.base import BaseJobAgent, Prompt, ResultT
from nextclass.ai.agents.prompts import MULTIPLE_CHOICE_SYSTEM_PROMPT, OPEN_ENDED_SYSTEM_PROMPT, user_prompt
from nextclass.ai.contracts import MultipleChoiceActivityResult, OpenEndedActivityResult, to_payload
from nextclass.jobs.models import JobRecord, JobType


class _ActivityAgent(BaseJobAgent[ResultT]):
  """Shared persistence for activity agents."""

  activity_type: ClassVar[str]
  system_prompt: ClassVar[str]
  task: ClassVar[str]

  def build_prompt(self, job: JobRecord) -> Prompt:
    return Prompt(system=self.system_prompt, user=user_prompt(self.task, job.input_payload))

  async def persist(self, job: JobRecord, result: ResultT) -> dict[str, Any]:
    title = result.title
    activity_id = await self._deps.published.create_activity(teacher_id=job.teacher_id, lecture_id=job.lecture_id, activity_type=self.activity_type, title=title, content=to_payload(result))
    self._logger.info("Job %s stored %s activity %s", job.job_id, self.activity_type, activity_id)
    return {"activity_id": activity_id, "title": title}


class MultipleChoiceActivityAgent(_ActivityAgent[MultipleChoiceActivityResult]):
  name = "MultipleChoiceActivityAgent"
  job_type = JobType.GENERATE_MULTIPLE_CHOICE_ACTIVITY
  result_type = MultipleChoiceActivityResult
  activity_type = "multiple_choice"
  system_prompt = MULTIPLE_CHOICE_SYSTEM_PROMPT
  task = "Crie uma atividade de múltipla escolha para a aula abaixo."


class OpenEndedActivityAgent(_ActivityAgent[OpenEndedActivityResult]):
  name = "OpenEndedActivityAgent"
  job_type = JobType.GENERATE_OPEN_ENDED_ACTIVITY
  result_type = OpenEndedActivityResult
  activity_type = "open_ended"
  system_prompt = OPEN_ENDED_SYSTEM_PROMPT
  task = "Crie uma atividade dissertativa para a aula abaixo."
