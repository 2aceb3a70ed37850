from typing import Annotated

from fastapi import APIRouter, Depends

from nextclass.api.deps import get_sanitizer_config
from nextclass.api.models import HtmlResponse, MarkdownRequest, MarkdownResponse
from nextclass.core.security import Principal, get_current_principal
from nextclass.services.html_rendering import render_markdown_html
from nextclass.services.material_pipeline import SanitizerConfig, sanitize_material

router = APIRouter()


@router.post("/sanitize", response_model=MarkdownResponse)
async def sanitize_content(
  request: MarkdownRequest,
  principal: Annotated[Principal, Depends(get_current_principal)],
  config: Annotated[SanitizerConfig, Depends(get_sanitizer_config)],
) -> MarkdownResponse:
  """Run the full sanitizer pipeline over caller-supplied markdown."""
  _ = principal
  return MarkdownResponse(markdown=sanitize_material(request.markdown, config))


@router.post("/render", response_model=HtmlResponse)
async def render_content(request: MarkdownRequest, principal: Annotated[Principal, Depends(get_current_principal)]) -> HtmlResponse:
  """Render markdown to allow-listed HTML."""
  _ = principal
  return HtmlResponse(html=render_markdown_html(request.markdown))
