"""Flashcard generation agent."""

from __future__ import annotations

from typing import Any

from nextclass.ai.agents.base import BaseJobAgent, Prompt, lecture_title
from nextclass.ai.agents.prompts import FLASHCARDS_SYSTEM_PROMPT, user_prompt
from nextclass.ai.contracts import FlashcardResult, to_payload
from nextclass.jobs.models import JobRecord, JobType


class FlashcardsAgent(BaseJobAgent[FlashcardResult]):
  """Generate flashcards and replace the lecture's current set."""

  name = "FlashcardsAgent"
  job_type = JobType.GENERATE_FLASHCARDS
  result_type = FlashcardResult

  def build_prompt(self, job: JobRecord) -> Prompt:
    return Prompt(system=FLASHCARDS_SYSTEM_PROMPT, user=user_prompt("Gere de 10 a 15 flashcards para a aula abaixo.", job.input_payload))

  async def persist(self, job: JobRecord, result: FlashcardResult) -> dict[str, Any]:
    cards = to_payload(result)["cards"]
    set_id = await self._deps.published.replace_flashcards(lecture_id=job.lecture_id, teacher_id=job.teacher_id, title=lecture_title(job, "Flashcards"), cards=cards)
    self._logger.info("Job %s stored flashcard set %s with %d cards", job.job_id, set_id, len(cards))
    return {"cards": cards, "flashcard_set_id": set_id}
