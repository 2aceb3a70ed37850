"""Lecture material generation agent."""

from __future__ import annotations

import re
from typing import Any

from nextclass.ai.agents.base import BaseJobAgent, Prompt
from nextclass.ai.agents.prompts import MATERIAL_SYSTEM_PROMPT, user_prompt
from nextclass.jobs.errors import MalformedResultError
from nextclass.jobs.models import JobRecord, JobType
from nextclass.services.material_pipeline import sanitize_material
from nextclass.services.reference_validator import validate_references

# A whole answer wrapped in a single ```markdown fence.
_WRAPPER_FENCE_RE = re.compile(r"^\s*```(?:markdown|md)[^\S\n]*\n(?P<body>.*)\n```\s*$", re.DOTALL | re.IGNORECASE)


class LectureMaterialAgent(BaseJobAgent[str]):
  """Write didactic material for a lecture and store it sanitized."""

  name = "LectureMaterialAgent"
  job_type = JobType.GENERATE_LECTURE_MATERIAL
  result_type = str

  def build_prompt(self, job: JobRecord) -> Prompt:
    return Prompt(system=MATERIAL_SYSTEM_PROMPT, user=user_prompt("Escreva o material didático da aula abaixo.", job.input_payload))

  def parse(self, text: str) -> str:
    wrapped = _WRAPPER_FENCE_RE.match(text)
    if wrapped:
      text = wrapped.group("body")
    try:
      markdown = sanitize_material(text, self._deps.sanitizer).strip()
    except ValueError as exc:
      raise MalformedResultError(f"Material JSON could not be converted: {exc}") from exc
    minimum = self._deps.material_min_chars
    if len(markdown) < minimum:
      raise MalformedResultError(f"Material too short after sanitization ({len(markdown)} chars, minimum {minimum}).")
    references = validate_references(markdown)
    if not references.valid:
      raise MalformedResultError(references.rejection_message)
    return markdown

  async def persist(self, job: JobRecord, result: str) -> dict[str, Any]:
    await self._deps.lectures.save_material(job.lecture_id, result)
    self._logger.info("Job %s saved %d chars of material to lecture %s", job.job_id, len(result), job.lecture_id)
    return {"lecture_id": job.lecture_id, "material_length": len(result)}
