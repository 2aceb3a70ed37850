"""Lenient JSON parsing helpers for completion outputs."""

from __future__ import annotations

import json
import re
from typing import Any, TypeVar

import msgspec

from nextclass.jobs.errors import MalformedResultError

_FENCE_OPEN_RE = re.compile(r"^\s*```(?:json)?[^\S\n]*\n?", re.IGNORECASE)
_FENCE_CLOSE_RE = re.compile(r"\n?```\s*$")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")

StructT = TypeVar("StructT")


def sanitize_json(raw: str) -> str:
  """Strip code fences and control characters from completion text."""
  text = _FENCE_OPEN_RE.sub("", raw, count=1)
  text = _FENCE_CLOSE_RE.sub("", text, count=1)
  text = _CONTROL_CHARS_RE.sub("", text)
  return text.strip()


def parse_json_with_fallback(raw: str) -> Any:
  """Parse JSON with minimal recovery for chatty or slightly broken output."""
  # Prefer strict parsing so valid JSON is preserved without mutation.
  try:
    return json.loads(raw)
  except json.JSONDecodeError as exc:
    last_error = exc

  # Extract the first JSON object/array to ignore leading or trailing text.
  candidate = _extract_json_block(raw)
  if candidate is None:
    raise last_error

  try:
    return json.loads(candidate)
  except json.JSONDecodeError as exc:
    last_error = exc

  # Strip trailing commas that commonly appear in model output.
  try:
    return json.loads(_TRAILING_COMMA_RE.sub(r"\1", candidate))
  except json.JSONDecodeError:
    raise last_error from None


def parse_json_payload(raw: str) -> dict[str, Any]:
  """Return the JSON object in completion text or raise MalformedResultError."""
  cleaned = sanitize_json(raw)
  if not cleaned:
    raise MalformedResultError("Completion returned an empty response.")
  try:
    parsed = parse_json_with_fallback(cleaned)
  except json.JSONDecodeError as exc:
    # The raw text is not kept; only the parser position goes into the message.
    raise MalformedResultError(f"Completion returned invalid JSON: {exc.msg} at position {exc.pos}.") from exc
  if not isinstance(parsed, dict):
    raise MalformedResultError(f"Completion returned JSON {type(parsed).__name__}, expected an object.")
  return parsed


def decode_result(payload: dict[str, Any], struct_type: type[StructT]) -> StructT:
  """Validate a parsed payload against a msgspec result contract."""
  try:
    return msgspec.convert(payload, type=struct_type)
  except msgspec.ValidationError as exc:
    raise MalformedResultError(f"Completion result is missing required fields: {exc}") from exc


def _extract_json_block(raw: str) -> str | None:
  """Locate the first balanced JSON object/array for recovery parsing."""
  start_index: int | None = None
  depth = 0
  in_string = False
  escape = False

  for index, char in enumerate(raw):
    if start_index is None:
      if char in "{[":
        start_index = index
        depth = 1
      continue

    if in_string:
      if escape:
        escape = False
      elif char == "\\":
        escape = True
      elif char == '"':
        in_string = False
      continue

    if char == '"':
      in_string = True
    elif char in "{[":
      depth += 1
    elif char in "}]":
      depth -= 1
      if depth == 0:
        return raw[start_index : index + 1]

  return None
