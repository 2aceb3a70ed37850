from typing import Annotated

from fastapi import APIRouter, Depends

from nextclass.api.deps import get_lectures_repo, get_sanitizer_config
from nextclass.api.models import MaterialFixResponse
from nextclass.core.security import Principal, get_current_principal
from nextclass.services.lectures import apply_material_fix
from nextclass.services.material_pipeline import SanitizerConfig
from nextclass.storage.lectures_repo import LecturesRepository

router = APIRouter()


@router.post("/{lecture_id}/material/{operation}", response_model=MaterialFixResponse)
async def fix_material(
  lecture_id: str,
  operation: str,
  principal: Annotated[Principal, Depends(get_current_principal)],
  config: Annotated[SanitizerConfig, Depends(get_sanitizer_config)],
  lectures_repo: Annotated[LecturesRepository, Depends(get_lectures_repo)],
) -> MaterialFixResponse:
  """Re-run one sanitizer pass (fix-latex, fix-mermaid-html, remove-broken-mermaid, sanitize) over stored material."""
  return await apply_material_fix(operation, lecture_id, principal, config, lectures_repo=lectures_repo)
