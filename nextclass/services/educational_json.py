"""Convert structured educational-material JSON into markdown.

Completions sometimes answer a material request with a JSON document of typed blocks
(``{"educational_material": {"header": {...}, "body": [...]}}`` or just the inner
object) instead of markdown. The converter maps each block onto markdown so the rest
of the pipeline only ever sees one format.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from typing import Any

from nextclass.ai.json_parser import sanitize_json

logger = logging.getLogger(__name__)

MATERIAL_TITLE = "### **Material Didático de Engenharia**"
REFERENCES_HEADING = "## Fontes e Referências"

_WHITESPACE_RE = re.compile(r"\s+")
_ARROW_BREAK_RE = re.compile(r"\s*-->\s*")
_HEADER_BREAK_RE = re.compile(r"^((?:flowchart|graph)\s+(?:TD|TB|BT|RL|LR))\s+")


def is_educational_json(text: str) -> bool:
  """Return True when text is a JSON object carrying a block ``body`` array."""
  cleaned = sanitize_json(text)
  if not cleaned.startswith("{"):
    return False
  try:
    parsed = json.loads(cleaned)
  except json.JSONDecodeError:
    return False
  return _material_root(parsed) is not None


def load_educational_json(text: str) -> dict[str, Any]:
  """Parse fenced or bare educational JSON text into its material object."""
  parsed = json.loads(sanitize_json(text))
  material = _material_root(parsed)
  if material is None:
    raise ValueError("Educational material JSON is missing its body array.")
  return material


def convert_educational_json_to_markdown(payload: dict[str, Any]) -> str:
  """Render an educational material object (or its wrapper) as markdown."""
  material = _material_root(payload)
  if material is None:
    raise ValueError("Educational material JSON is missing its body array.")

  parts: list[str] = []
  header = material.get("header")
  if isinstance(header, dict):
    parts.append(MATERIAL_TITLE)
    for key, label in (("discipline", "Disciplina"), ("topic", "Tópico"), ("professor", "Professor")):
      if header.get(key):
        parts.append(f"**{label}:** {header[key]}")

  for block in material["body"]:
    if not isinstance(block, dict):
      continue
    rendered = _convert_block(block)
    if rendered:
      parts.append(rendered)

  markdown = "\n\n".join(parts).strip()
  logger.debug("Converted educational JSON with %d blocks to %d chars of markdown", len(material["body"]), len(markdown))
  return markdown


def _material_root(parsed: Any) -> dict[str, Any] | None:
  if not isinstance(parsed, dict):
    return None
  material = parsed.get("educational_material", parsed)
  if isinstance(material, dict) and isinstance(material.get("body"), list):
    return material
  return None


def _text(block: dict[str, Any], *keys: str) -> str:
  for key in keys:
    value = block.get(key)
    if isinstance(value, str) and value:
      return value
  return ""


def _heading(block: dict[str, Any]) -> str:
  level = block.get("level")
  level = level if isinstance(level, int) and 1 <= level <= 6 else 2
  return f"{'#' * level} {_text(block, 'text', 'content')}".rstrip()


def _paragraph(block: dict[str, Any]) -> str:
  return _text(block, "text", "content")


def _formula(block: dict[str, Any]) -> str:
  formula = _text(block, "formula", "content", "text").strip()
  return f"$${formula}$$" if formula else ""


def _diagram(block: dict[str, Any]) -> str:
  code = _text(block, "code", "content").strip()
  if not code:
    return ""
  if "\n" not in code:
    # Single-line diagrams need statement breaks before mermaid can parse them.
    code = _WHITESPACE_RE.sub(" ", code)
    code = _HEADER_BREAK_RE.sub(lambda match: match.group(1) + "\n    ", code)
    code = _ARROW_BREAK_RE.sub(" --> ", code)
  fence = f"```mermaid\n{code}\n```"
  caption = _text(block, "caption")
  return f"{caption}\n\n{fence}" if caption else fence


def _code(block: dict[str, Any]) -> str:
  language = _text(block, "language")
  return f"```{language}\n{_text(block, 'code', 'content')}\n```"


def _items(block: dict[str, Any]) -> list[str]:
  items = block.get("items")
  if not isinstance(items, list):
    return []
  return [str(item) for item in items]


def _bullet_list(block: dict[str, Any]) -> str:
  return "\n".join(f"- {item}" for item in _items(block))


def _numbered_list(block: dict[str, Any]) -> str:
  return "\n".join(f"{index}. {item}" for index, item in enumerate(_items(block), start=1))


def _callout(block: dict[str, Any]) -> str:
  lines: list[str] = []
  title = _text(block, "title")
  if title:
    lines.extend([f"**{title}**", ""])
  lines.extend(_text(block, "message", "content", "text").splitlines() or [""])
  return "\n".join(f"> {line}".rstrip() for line in lines)


def _table(block: dict[str, Any]) -> str:
  return _text(block, "content", "text")


def _references(block: dict[str, Any]) -> str:
  references = block.get("references")
  if isinstance(references, list) and references:
    lines = []
    for index, reference in enumerate(references, start=1):
      if isinstance(reference, dict):
        lines.append(f"[{reference.get('number', index)}] {reference.get('citation', '')}".rstrip())
      else:
        lines.append(f"[{index}] {reference}")
    return f"{REFERENCES_HEADING}\n\n" + "\n".join(lines)
  content = _text(block, "content")
  return f"{REFERENCES_HEADING}\n\n{content}" if content else REFERENCES_HEADING


_BLOCK_CONVERTERS: dict[str, Callable[[dict[str, Any]], str]] = {
  "heading": _heading,
  "paragraph": _paragraph,
  "formula": _formula,
  "latex": _formula,
  "diagram": _diagram,
  "mermaid": _diagram,
  "code": _code,
  "list": _bullet_list,
  "bullet_list": _bullet_list,
  "numbered_list": _numbered_list,
  "callout": _callout,
  "highlight": _callout,
  "note": _callout,
  "table": _table,
  "references": _references,
  "reference_section": _references,
}


def _convert_block(block: dict[str, Any]) -> str:
  converter = _BLOCK_CONVERTERS.get(str(block.get("type", "")))
  if converter is None:
    return _text(block, "text", "content")
  return converter(block)
