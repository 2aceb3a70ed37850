"""Markdown-to-HTML rendering with an allow-list sanitizer at the boundary."""

from __future__ import annotations

import html as html_lib
import re

import markdown
import nh3

ALLOWED_TAGS: frozenset[str] = frozenset(
  {
    "p",
    "br",
    "strong",
    "em",
    "u",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "ul",
    "ol",
    "li",
    "a",
    "pre",
    "code",
    "blockquote",
    "table",
    "thead",
    "tbody",
    "tr",
    "td",
    "th",
    "img",
    "div",
    "span",
    "sup",
    "sub",
  }
)
ALLOWED_ATTRIBUTES: frozenset[str] = frozenset({"href", "src", "alt", "class", "target", "rel"})

_TAG_ATTRIBUTES = {"a": {"href", "target", "rel"}, "img": {"src", "alt"}}

_MARKDOWN_EXTENSIONS = ["fenced_code", "tables"]
_CODE_RE = re.compile(r"(```.*?(?:```|\Z)|`[^`\n]*`)", re.DOTALL)
_MATH_RE = re.compile(r"\$\$.+?\$\$|(?<![\\$])\$(?!\$)[^$\n]+?(?<!\\)\$", re.DOTALL)


def sanitize_html(html: str) -> str:
  """Keep allow-listed tags and attributes; drop scripts and event handlers."""
  # Attributes are allowed per tag, and only where the tag uses them.
  attributes = {tag: {"class"} | (_TAG_ATTRIBUTES.get(tag, set()) & ALLOWED_ATTRIBUTES) for tag in ALLOWED_TAGS}
  # nh3 refuses "rel" in the allow-list while it manages rel itself.
  return nh3.clean(html, tags=set(ALLOWED_TAGS), attributes=attributes, link_rel=None)


def render_markdown_html(markdown_text: str) -> str:
  """Render markdown to sanitized HTML with math spans passed through verbatim."""
  masked, placeholders = _mask_math(markdown_text)
  rendered = markdown.markdown(masked, extensions=_MARKDOWN_EXTENSIONS)
  for index, segment in enumerate(placeholders):
    rendered = rendered.replace(_placeholder(index), html_lib.escape(segment, quote=False))
  return sanitize_html(rendered)


def _placeholder(index: int) -> str:
  return f"NCMATHSEGMENT{index}X"


def _mask_math(markdown_text: str) -> tuple[str, list[str]]:
  """Swap math spans outside code for opaque tokens markdown will not rewrite."""
  placeholders: list[str] = []

  def _replace(match: re.Match[str]) -> str:
    placeholders.append(match.group(0))
    return _placeholder(len(placeholders) - 1)

  pieces = _CODE_RE.split(markdown_text)
  # Odd indexes are code captured by the split.
  for index in range(0, len(pieces), 2):
    pieces[index] = _MATH_RE.sub(_replace, pieces[index])
  return "".join(pieces), placeholders
