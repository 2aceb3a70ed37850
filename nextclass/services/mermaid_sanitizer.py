"""Repair or remove fenced mermaid diagrams in generated markdown.

Two passes live here. ``remove_mermaid_html`` only rewrites HTML inside mermaid fences.
``validate_and_fix_mermaid`` cleans each diagram (ASCII arrows and letters, safe labels,
no subgraphs, a diagram keyword on top) and deletes any block that is still too small or
too sparsely connected to render. A deleted block leaves nothing behind; the client
shows its own fallback message.
"""

from __future__ import annotations

import re
from collections.abc import Callable

DEFAULT_MIN_CHARS = 20
DEFAULT_HEADER = "flowchart TD"

# Body runs to the closing fence or to the end of input for truncated output.
_BLOCK_RE = re.compile(r"```mermaid[^\S\n]*\n(?P<body>.*?)(?P<close>\n?```|\Z)(?P<tail>[^\S\n]*\n?)", re.DOTALL)

_BR_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_SUP_RE = re.compile(r"<sup>(.*?)</sup>", re.IGNORECASE | re.DOTALL)
_SUB_RE = re.compile(r"<sub>(.*?)</sub>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"</?[A-Za-z][A-Za-z0-9-]*(?:\s[^<>]*)?/?>")

_ARROWS = {"→": "-->", "⟶": "-->", "←": "<--", "⟵": "<--", "↔": "<-->", "⇒": "==>", "⇐": "<==", "⇔": "<==>"}
_GREEK = {
  "Δ": "Delta",
  "∆": "Delta",
  "Ω": "Omega",
  "Σ": "Sigma",
  "α": "alpha",
  "β": "beta",
  "γ": "gamma",
  "θ": "theta",
  "λ": "lambda",
  "μ": "mu",
  "π": "pi",
  "σ": "sigma",
  "ω": "omega",
  "ε": "epsilon",
  "ρ": "rho",
  "φ": "phi",
  "τ": "tau",
  "η": "eta",
}
_SCRIPT_CHARS_RE = re.compile("[¹²³⁴⁵⁶⁷⁸⁹⁰⁺⁻₀₁₂₃₄₅₆₇₈₉₊₋]")
_MATH_SYMBOLS_RE = re.compile("[×÷±≈≠≤≥∞∫∂∑∏√]")
_LABEL_RE = re.compile(r"\[([^\[\]]*)\]")
_LABEL_ILLEGAL_RE = re.compile(r"[<>\"'&()]")
_INNER_SPACE_RE = re.compile(r"[ \t]+")

_HEADER_RE = re.compile(r"^(?:flowchart|graph|sequenceDiagram|classDiagram|stateDiagram-v2|stateDiagram|erDiagram|gantt|mindmap)\b")
_GLUED_HEADER_RE = re.compile(r"^(flowchart|graph)(TD|TB|BT|RL|LR)\b")
_SEQUENCE_HINT_RE = re.compile(r"^(?:participant|actor)\s", re.MULTILINE)
_SEQUENCE_BLOCKS = frozenset({"loop", "alt", "opt", "par", "critical", "break", "rect", "box"})

_NODE_RE = re.compile(r"\[([^\]]+)\]")
_EDGE_RE = re.compile(r"-\.->|<\|--|--\|>|-->|---|==>|<==|<--|->|\.\.>|<\.\.|--[ox*]|[o*]--|--")


def remove_mermaid_html(markdown: str) -> str:
  """Rewrite HTML inside mermaid fences; HTML elsewhere is left alone."""

  def _replace(match: re.Match[str]) -> str:
    return _splice_body(match, _strip_html(match.group("body")))

  return _BLOCK_RE.sub(_replace, markdown)


def validate_and_fix_mermaid(markdown: str, *, min_chars: int = DEFAULT_MIN_CHARS, default_header: str = DEFAULT_HEADER) -> str:
  """Clean every mermaid block and delete the ones that still fail validation."""
  return _BLOCK_RE.sub(_block_fixer(min_chars=min_chars, default_header=default_header), markdown)


def is_valid_diagram(code: str, *, min_chars: int = DEFAULT_MIN_CHARS) -> bool:
  """Return True when cleaned diagram code is renderable by our rules."""
  stripped = code.strip()
  if len(stripped) < min_chars:
    return False
  first_line = _first_statement(stripped.splitlines())
  if first_line is None or not _HEADER_RE.match(first_line):
    return False
  if re.search(r"^\s*subgraph\b", stripped, re.MULTILINE) or _TAG_RE.search(stripped):
    return False
  nodes = len(_NODE_RE.findall(stripped))
  edges = len(_EDGE_RE.findall(stripped))
  return edges >= max(1, nodes - 1)


def clean_diagram(code: str, *, default_header: str = DEFAULT_HEADER) -> str:
  """Return diagram code with characters and constructs that break rendering removed."""
  code = _strip_html(code)
  for source, target in _ARROWS.items():
    code = code.replace(source, target)
  for source, target in _GREEK.items():
    code = code.replace(source, target)
  code = _SCRIPT_CHARS_RE.sub("", code)
  code = _MATH_SYMBOLS_RE.sub(" ", code)
  code = _LABEL_RE.sub(_clean_label, code)

  lines = [_normalize_line(line) for line in code.splitlines()]
  lines = [line for line in lines if line.strip()]
  lines = _ensure_header(lines, default_header)
  lines = _flatten_subgraphs(lines)
  return "\n".join(lines)


def _block_fixer(*, min_chars: int, default_header: str) -> Callable[[re.Match[str]], str]:
  def _fix(match: re.Match[str]) -> str:
    cleaned = clean_diagram(match.group("body"), default_header=default_header)
    if not is_valid_diagram(cleaned, min_chars=min_chars):
      return ""
    newline = "\n" if "\n" in match.group("tail") else ""
    return f"```mermaid\n{cleaned}\n```{newline}"

  return _fix


def _splice_body(match: re.Match[str], body: str) -> str:
  whole = match.group(0)
  offset = match.start()
  return whole[: match.start("body") - offset] + body + whole[match.end("body") - offset :]


def _strip_html(code: str) -> str:
  code = _BR_RE.sub(" ", code)
  code = _SUP_RE.sub(lambda match: "^" + match.group(1), code)
  code = _SUB_RE.sub(lambda match: "_" + match.group(1), code)
  return _TAG_RE.sub("", code)


def _clean_label(match: re.Match[str]) -> str:
  label = _LABEL_ILLEGAL_RE.sub("", match.group(1))
  return "[" + _INNER_SPACE_RE.sub(" ", label).strip() + "]"


def _normalize_line(line: str) -> str:
  # Leading indentation is structural for mindmaps; only the rest is collapsed.
  body = line.lstrip()
  indent = line[: len(line) - len(body)].replace("\t", "    ")
  return indent + _INNER_SPACE_RE.sub(" ", body).rstrip()


def _first_statement(lines: list[str]) -> str | None:
  for line in lines:
    stripped = line.strip()
    if stripped and not stripped.startswith("%%"):
      return stripped
  return None


def _ensure_header(lines: list[str], default_header: str) -> list[str]:
  for index, line in enumerate(lines):
    stripped = line.strip()
    if stripped.startswith("%%"):
      continue
    glued = _GLUED_HEADER_RE.match(stripped)
    if glued:
      stripped = f"{glued.group(1)} {glued.group(2)}{stripped[glued.end() :]}"
    if _HEADER_RE.match(stripped):
      return lines[:index] + [stripped] + lines[index + 1 :]
    header = "sequenceDiagram" if _SEQUENCE_HINT_RE.search("\n".join(line.strip() for line in lines)) else default_header
    return lines[:index] + [header] + lines[index:]
  return lines


def _flatten_subgraphs(lines: list[str]) -> list[str]:
  """Drop subgraph wrappers and their direction lines, keeping the statements inside."""
  header = _first_statement(lines) or ""
  is_sequence = header.startswith("sequenceDiagram")
  stack: list[str] = []
  flattened: list[str] = []
  for line in lines:
    stripped = line.strip()
    keyword = stripped.split(" ", 1)[0].rstrip(";")
    if keyword == "subgraph":
      stack.append("subgraph")
      continue
    if keyword == "end" and stripped.rstrip(";") == "end":
      if not stack:
        # Stray end without an opener.
        continue
      if stack.pop() == "subgraph":
        continue
      flattened.append(line)
      continue
    if keyword == "direction" and "subgraph" in stack:
      continue
    if is_sequence and keyword in _SEQUENCE_BLOCKS:
      stack.append("block")
    flattened.append(line)
  # Unterminated sequence blocks render as errors; close them.
  flattened.extend("end" for item in stack if item == "block")
  return flattened
