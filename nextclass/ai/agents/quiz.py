"""Quiz generation agent."""

from __future__ import annotations

from typing import Any

from nextclass.ai.agents.base import BaseJobAgent, Prompt, lecture_title
from nextclass.ai.agents.prompts import QUIZ_SYSTEM_PROMPT, user_prompt
from nextclass.ai.contracts import QuizResult, to_payload
from nextclass.jobs.models import JobRecord, JobType


class QuizAgent(BaseJobAgent[QuizResult]):
  """Generate a multiple-choice quiz and replace the lecture's current quiz."""

  name = "QuizAgent"
  job_type = JobType.GENERATE_QUIZ
  result_type = QuizResult

  def build_prompt(self, job: JobRecord) -> Prompt:
    return Prompt(system=QUIZ_SYSTEM_PROMPT, user=user_prompt("Gere de 5 a 10 questões de quiz para a aula abaixo.", job.input_payload))

  async def persist(self, job: JobRecord, result: QuizResult) -> dict[str, Any]:
    questions = to_payload(result)["questions"]
    quiz_id = await self._deps.published.replace_quiz(lecture_id=job.lecture_id, teacher_id=job.teacher_id, title=lecture_title(job, "Quiz"), questions=questions)
    self._logger.info("Job %s stored quiz %s with %d questions", job.job_id, quiz_id, len(questions))
    return {"questions": questions, "quiz_id": quiz_id}
