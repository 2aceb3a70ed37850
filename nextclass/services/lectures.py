"""Lecture ownership checks and material maintenance operations."""

from __future__ import annotations

import logging
from collections.abc import Callable

from fastapi import HTTPException, status

from nextclass.api.models import MaterialFixResponse
from nextclass.core.security import Principal
from nextclass.services.material_pipeline import SanitizerConfig, fix_latex, fix_mermaid_html, remove_broken_mermaid, sanitize_material
from nextclass.storage.lectures_repo import LectureRecord, LecturesRepository

logger = logging.getLogger(__name__)

MaterialFix = Callable[[str, SanitizerConfig], str]

# Maintenance operations addressable by URL segment.
MATERIAL_FIXES: dict[str, MaterialFix] = {
  "fix-latex": fix_latex,
  "fix-mermaid-html": fix_mermaid_html,
  "remove-broken-mermaid": remove_broken_mermaid,
  "sanitize": sanitize_material,
}


async def require_owned_lecture(lectures_repo: LecturesRepository, lecture_id: str, principal: Principal) -> LectureRecord:
  """Return the lecture when it exists and belongs to the caller."""
  lecture = await lectures_repo.get_lecture(lecture_id)
  if lecture is None:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lecture not found.")
  if lecture.teacher_id != principal.uid:
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied.")
  return lecture


async def apply_material_fix(operation: str, lecture_id: str, principal: Principal, config: SanitizerConfig, *, lectures_repo: LecturesRepository) -> MaterialFixResponse:
  """Run one sanitizer pass over stored material, writing only when it changed."""
  fix = MATERIAL_FIXES.get(operation)
  if fix is None:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown material operation: {operation}")

  lecture = await require_owned_lecture(lectures_repo, lecture_id, principal)
  original = lecture.material
  if not original:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lecture has no material.")

  fixed = fix(original, config)
  changed = fixed != original
  if changed:
    await lectures_repo.save_material(lecture_id, fixed)
    logger.info("Material %s on lecture %s: %d -> %d chars", operation, lecture_id, len(original), len(fixed))
  return MaterialFixResponse(success=True, changes_made=changed, original_length=len(original), fixed_length=len(fixed))
