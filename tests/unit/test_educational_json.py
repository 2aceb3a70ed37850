"""Unit tests for educational JSON to markdown conversion."""

from __future__ import annotations

import json

import pytest

from nextclass.services.educational_json import MATERIAL_TITLE, REFERENCES_HEADING, convert_educational_json_to_markdown, is_educational_json, load_educational_json


def _material(*blocks: dict) -> dict:
  return {"educational_material": {"header": {"discipline": "Física II", "topic": "Termodinâmica"}, "body": list(blocks)}}


def test_detects_fenced_and_bare_material() -> None:
  payload = json.dumps(_material({"type": "paragraph", "text": "Olá"}))
  assert is_educational_json(payload)
  assert is_educational_json(f"```json\n{payload}\n```")
  assert not is_educational_json("## Markdown comum")
  assert not is_educational_json('{"questions": []}')


def test_load_rejects_objects_without_body() -> None:
  with pytest.raises(ValueError):
    load_educational_json('{"educational_material": {"header": {}}}')


def test_header_and_blocks_render_in_order() -> None:
  markdown = convert_educational_json_to_markdown(
    _material(
      {"type": "heading", "level": 2, "text": "Primeira lei"},
      {"type": "paragraph", "text": "A energia se conserva."},
      {"type": "formula", "formula": "\\Delta U = Q - W"},
      {"type": "list", "items": ["Calor", "Trabalho"]},
      {"type": "numbered_list", "items": ["Medir", "Calcular"]},
    )
  )
  assert markdown.startswith(MATERIAL_TITLE)
  assert "**Disciplina:** Física II" in markdown
  assert "**Tópico:** Termodinâmica" in markdown
  assert markdown.index("## Primeira lei") < markdown.index("A energia se conserva.")
  assert "$$\\Delta U = Q - W$$" in markdown
  assert "- Calor\n- Trabalho" in markdown
  assert "1. Medir\n2. Calcular" in markdown


def test_single_line_diagram_gets_statement_breaks() -> None:
  markdown = convert_educational_json_to_markdown({"body": [{"type": "diagram", "code": "flowchart TD A[Calor] --> B[Trabalho]"}]})
  assert "```mermaid\nflowchart TD\n    A[Calor] --> B[Trabalho]\n```" in markdown


def test_callout_quotes_every_line() -> None:
  markdown = convert_educational_json_to_markdown({"body": [{"type": "callout", "title": "Atenção", "message": "Linha um\nLinha dois"}]})
  assert markdown == "> **Atenção**\n>\n> Linha um\n> Linha dois"


def test_references_are_numbered() -> None:
  markdown = convert_educational_json_to_markdown({"body": [{"type": "references", "references": [{"number": 1, "citation": "Halliday, Fundamentos de Física."}, "Çengel, Termodinâmica."]}]})
  assert markdown == f"{REFERENCES_HEADING}\n\n[1] Halliday, Fundamentos de Física.\n[2] Çengel, Termodinâmica."


def test_unknown_block_falls_back_to_text() -> None:
  markdown = convert_educational_json_to_markdown({"body": [{"type": "sidebar", "content": "Curiosidade"}, "not a block"]})
  assert markdown == "Curiosidade"
