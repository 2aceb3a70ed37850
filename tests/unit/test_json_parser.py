"""Unit tests for lenient completion JSON parsing and result contracts."""

from __future__ import annotations

import pytest

from nextclass.ai.contracts import FlashcardResult, LessonPlanResult, QuizResult, to_payload
from nextclass.ai.json_parser import decode_result, parse_json_payload, parse_json_with_fallback, sanitize_json
from nextclass.jobs.errors import MalformedResultError


def test_sanitize_json_strips_fences_and_control_chars() -> None:
  assert sanitize_json('```json\n{"a": 1}\n```') == '{"a": 1}'
  assert sanitize_json('```\n{"a":\x07 1}\n```  ') == '{"a": 1}'


def test_fallback_extracts_object_from_chatty_output() -> None:
  assert parse_json_with_fallback('Claro! Aqui está: {"a": [1, 2]} Espero ter ajudado.') == {"a": [1, 2]}


def test_fallback_removes_trailing_commas() -> None:
  assert parse_json_with_fallback('{"a": [1, 2,],}') == {"a": [1, 2]}


def test_fallback_ignores_braces_inside_strings() -> None:
  assert parse_json_with_fallback('texto {"a": "}{"} fim') == {"a": "}{"}


@pytest.mark.parametrize("raw", ["", "```json\n```", "sem json aqui", "[1, 2]"])
def test_payload_rejects_unusable_text(raw: str) -> None:
  with pytest.raises(MalformedResultError):
    parse_json_payload(raw)


def test_quiz_contract_uses_wire_names() -> None:
  payload = parse_json_payload('```json\n{"questions": [{"question": "Q?", "options": ["a", "b"], "correctAnswer": 1, "extra": true}]}\n```')
  result = decode_result(payload, QuizResult)
  assert result.questions[0].correct_answer == 1
  assert to_payload(result) == {"questions": [{"question": "Q?", "options": ["a", "b"], "correctAnswer": 1, "explanation": None}]}


def test_missing_fields_are_malformed() -> None:
  with pytest.raises(MalformedResultError):
    decode_result({"questions": [{"question": "Q?"}]}, QuizResult)
  with pytest.raises(MalformedResultError):
    decode_result({"cards": []}, FlashcardResult)


def test_lesson_plan_defaults_resources() -> None:
  result = decode_result({"title": "Plano", "objectives": ["Entender"], "steps": [{"title": "Abertura", "description": "Pergunta", "durationMinutes": 10}]}, LessonPlanResult)
  assert result.resources == []
  assert result.steps[0].duration_minutes == 10
