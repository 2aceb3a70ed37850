"""Composed sanitizer pipeline for lecture material."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from nextclass.config import Settings
from nextclass.services.educational_json import convert_educational_json_to_markdown, is_educational_json, load_educational_json
from nextclass.services.latex_sanitizer import DEFAULT_MAX_PASSES, sanitize_latex
from nextclass.services.mermaid_sanitizer import DEFAULT_HEADER, DEFAULT_MIN_CHARS, remove_mermaid_html, validate_and_fix_mermaid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SanitizerConfig:
  """Tunables shared by every sanitizer pass."""

  latex_max_passes: int = DEFAULT_MAX_PASSES
  mermaid_min_chars: int = DEFAULT_MIN_CHARS
  mermaid_default_header: str = DEFAULT_HEADER

  @classmethod
  def from_settings(cls, settings: Settings) -> SanitizerConfig:
    return cls(latex_max_passes=settings.latex_max_passes, mermaid_min_chars=settings.mermaid_min_chars)


def fix_latex(markdown: str, config: SanitizerConfig) -> str:
  return sanitize_latex(markdown, max_passes=config.latex_max_passes)


def fix_mermaid_html(markdown: str, config: SanitizerConfig) -> str:
  _ = config
  return remove_mermaid_html(markdown)


def remove_broken_mermaid(markdown: str, config: SanitizerConfig) -> str:
  return validate_and_fix_mermaid(markdown, min_chars=config.mermaid_min_chars, default_header=config.mermaid_default_header)


def sanitize_material(text: str, config: SanitizerConfig) -> str:
  """Run every pass over material text, converting educational JSON first."""
  markdown = text
  if is_educational_json(markdown):
    markdown = convert_educational_json_to_markdown(load_educational_json(markdown))
    logger.info("Material arrived as educational JSON; converted to markdown")
  markdown = fix_mermaid_html(markdown, config)
  markdown = remove_broken_mermaid(markdown, config)
  return fix_latex(markdown, config)
