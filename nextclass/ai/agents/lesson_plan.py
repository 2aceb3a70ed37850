"""Lesson plan generation agent."""

from __future__ import annotations

from typing import Any

from nextclass.ai.agents.base import BaseJobAgent, Prompt, lecture_title
from nextclass.ai.agents.prompts import LESSON_PLAN_SYSTEM_PROMPT, user_prompt
from nextclass.ai.contracts import LessonPlanResult, to_payload
from nextclass.jobs.models import JobRecord, JobType


class LessonPlanAgent(BaseJobAgent[LessonPlanResult]):
  name = "LessonPlanAgent"
  job_type = JobType.GENERATE_LESSON_PLAN
  result_type = LessonPlanResult

  def build_prompt(self, job: JobRecord) -> Prompt:
    return Prompt(system=LESSON_PLAN_SYSTEM_PROMPT, user=user_prompt("Elabore um plano de aula a partir da aula abaixo.", job.input_payload))

  async def persist(self, job: JobRecord, result: LessonPlanResult) -> dict[str, Any]:
    topic = job.input_payload.get("topic") or lecture_title(job, result.title)
    plan_id = await self._deps.published.create_lesson_plan(teacher_id=job.teacher_id, lecture_id=job.lecture_id, title=result.title, topic=str(topic), content=to_payload(result))
    return {"lesson_plan_id": plan_id, "title": result.title}
