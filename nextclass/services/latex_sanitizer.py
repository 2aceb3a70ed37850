"""Delimiter repair for LaTeX formulas embedded in generated markdown.

Completion output regularly carries broken math: inline formulas that never close,
display blocks wrapped in a second pair of delimiters, commands such as ``\\frac`` written
straight into prose. The repair here is heuristic. It pairs ``$``/``$$`` delimiters with a
small scanner, decides where an unterminated formula ends by looking for the first run of
prose words, and rewrites only inside or directly around math. Fenced and inline code are
never touched.
"""

from __future__ import annotations

import re

DEFAULT_MAX_PASSES = 5

_TEXT = "text"
_INLINE = "inline"
_DISPLAY = "display"

_Token = tuple[str, str]

# Fenced blocks (terminated or running to end of input) and inline code spans.
_PROTECTED_RE = re.compile(r"(```.*?(?:```|\Z)|`[^`\n]*`)", re.DOTALL)
_BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")
_WORD_RE = re.compile(r"\S+")
_PROSE_WORD_RE = re.compile(r"^[^\W\d_]+[.,;:!?]?$")
_TRAILING_COMMAND_RE = re.compile(r"\\[A-Za-z]+$")
# Plain-dollar amounts: "$5", "$10,50" followed by a break, never by "$" or a letter.
_AMOUNT_RE = re.compile(r"\d+(?:[.,]\d+)*(?=[\s.,;:!?)]|\Z)")
_UNTIL_DOLLAR_RE = re.compile(r"[^$\n]*")
_FORMULA_CHARS = frozenset("=+-*/^_\\<>{}")

_TYPO_FIXES = (("\\cdotpt", "\\cdot"),)

# Bare words that read as math when they appear inside a formula.
_MATH_WORDS = frozenset({"sin", "cos", "tan", "cot", "sec", "csc", "log", "ln", "exp", "max", "min", "lim", "sup", "inf", "det", "mod", "arg", "sinh", "cosh", "tanh"})
# Short words that still mark the start of prose in pt-BR and English text.
_SHORT_PROSE_WORDS = frozenset({"é", "de", "da", "do", "em", "no", "na", "os", "as", "um", "se", "ou", "ao", "is", "of", "to", "in", "on", "at", "or", "an", "by", "be"})
_OPERATOR_SUFFIXES = tuple("=+-*/^_<>(,|")

_ORPHAN_COMMANDS = (
  "frac",
  "dfrac",
  "tfrac",
  "sqrt",
  "dot",
  "ddot",
  "vec",
  "hat",
  "bar",
  "overline",
  "text",
  "mathrm",
  "mathbf",
  "cdot",
  "times",
  "div",
  "pm",
  "approx",
  "neq",
  "leq",
  "geq",
  "infty",
  "sum",
  "int",
  "partial",
  "nabla",
  "Delta",
  "delta",
  "alpha",
  "beta",
  "gamma",
  "theta",
  "lambda",
  "mu",
  "pi",
  "rho",
  "sigma",
  "omega",
  "Omega",
  "epsilon",
  "varepsilon",
  "phi",
  "tau",
  "eta",
)
_BRACE_GROUP = r"\{(?:[^{}]|\{[^{}]*\})*\}"
_ORPHAN_RE = re.compile(r"\\(?:" + "|".join(sorted(_ORPHAN_COMMANDS, key=len, reverse=True)) + r")(?![A-Za-z])(?:" + _BRACE_GROUP + r")*(?:[_^](?:" + _BRACE_GROUP + r"|[A-Za-z0-9]))*")


def sanitize_latex(markdown: str, *, max_passes: int = DEFAULT_MAX_PASSES) -> str:
  """Repair math delimiters until a fixed point or max_passes, then balance ``$$``."""
  current = markdown
  for _ in range(max_passes):
    repaired = _repair_pass(current)
    if repaired == current:
      break
    current = repaired
  return _drop_unmatched_display(current)


def count_display_delimiters(markdown: str) -> int:
  """Count ``$$`` occurrences outside code."""
  return sum(_count_display(piece) for piece in _prose_pieces(markdown))


def _repair_pass(markdown: str) -> str:
  pieces = _PROTECTED_RE.split(markdown)
  for index in range(0, len(pieces), 2):
    pieces[index] = _repair_segment(_fix_typos(pieces[index]))
  return "".join(pieces)


def _prose_pieces(markdown: str) -> list[str]:
  return _PROTECTED_RE.split(markdown)[::2]


def _fix_typos(segment: str) -> str:
  for wrong, right in _TYPO_FIXES:
    segment = segment.replace(wrong, right)
  return segment


def _tokenize(segment: str) -> list[_Token]:
  """Split prose into text runs and ``$``/``$$`` delimiter tokens."""
  tokens: list[_Token] = []
  text_start = 0
  index = 0
  length = len(segment)
  while index < length:
    char = segment[index]
    if char == "\\":
      # Escaped characters, \$ included, are literal.
      index += 2
      continue
    if char != "$":
      index += 1
      continue
    if segment.startswith("$$", index):
      kind, width = _DISPLAY, 2
    elif _is_currency(segment, index):
      index += 1
      continue
    else:
      kind, width = _INLINE, 1
    if index > text_start:
      tokens.append((_TEXT, segment[text_start:index]))
    tokens.append((kind, segment[index : index + width]))
    index += width
    text_start = index
  if text_start < length:
    tokens.append((_TEXT, segment[text_start:]))
  return tokens


def _is_currency(segment: str, index: int) -> bool:
  """Return True for the ``$`` of R$ or US$ amounts and of plain ``$5`` prices."""
  for prefix in ("US", "R"):
    start = index - len(prefix)
    if start >= 0 and segment[start:index] == prefix and (start == 0 or not segment[start - 1].isalnum()):
      return True
  amount = _AMOUNT_RE.match(segment, index + 1)
  if amount is None:
    return False
  # "$5 + x$" is still a formula.
  tail = _UNTIL_DOLLAR_RE.match(segment, amount.end()).group()
  return not any(char in _FORMULA_CHARS for char in tail)


def _repair_segment(segment: str) -> str:
  if "$" not in segment and "\\" not in segment:
    return segment

  tokens = _tokenize(segment)
  out: list[str] = []
  index = 0
  while index < len(tokens):
    kind, value = tokens[index]
    if kind == _TEXT:
      out.append(_wrap_orphans(value))
      index += 1
    elif kind == _DISPLAY:
      index = _emit_display(tokens, index, out)
    else:
      index = _emit_inline(tokens, index, out)
  return "".join(out)


def _find_display_close(tokens: list[_Token], start: int) -> int | None:
  """Return the index of the ``$$`` closing the one at start, if any."""
  for index in range(start + 1, len(tokens)):
    kind, value = tokens[index]
    if kind == _DISPLAY:
      return index
    # Display math never spans a paragraph break.
    if kind == _TEXT and _BLANK_LINE_RE.search(value):
      return None
  return None


def _display_body(tokens: list[_Token], start: int, end: int) -> str:
  # Single $ inside display math are dropped.
  return "".join(value for kind, value in tokens[start + 1 : end] if kind == _TEXT)


def _emit_display(tokens: list[_Token], index: int, out: list[str]) -> int:
  close = _find_display_close(tokens, index)
  if close is None:
    # Unmatched opener; drop it and keep scanning what follows.
    return index + 1
  out.append("$$" + _display_body(tokens, index, close) + "$$")
  _space_after_close(tokens, close + 1, out)
  return close + 1


def _is_blank(token: _Token | None) -> bool:
  return token is not None and token[0] == _TEXT and token[1].strip(" \t") == ""


def _token_at(tokens: list[_Token], index: int) -> _Token | None:
  return tokens[index] if 0 <= index < len(tokens) else None


def _unwrap_display(tokens: list[_Token], index: int, out: list[str]) -> int | None:
  """Handle ``$ $$x$$ $`` by emitting the display block without its wrapper."""
  cursor = index + 1
  if _is_blank(_token_at(tokens, cursor)):
    cursor += 1
  opener = _token_at(tokens, cursor)
  if opener is None or opener[0] != _DISPLAY:
    return None
  close = _find_display_close(tokens, cursor)
  if close is None:
    return None
  after = close + 1
  if _is_blank(_token_at(tokens, after)):
    after += 1
  wrapper = _token_at(tokens, after)
  if wrapper is None or wrapper[0] != _INLINE:
    return None
  out.append("$$" + _display_body(tokens, cursor, close) + "$$")
  _space_after_close(tokens, after + 1, out)
  return after + 1


def _emit_inline(tokens: list[_Token], index: int, out: list[str]) -> int:
  unwrapped = _unwrap_display(tokens, index, out)
  if unwrapped is not None:
    return unwrapped

  following = _token_at(tokens, index + 1)
  if following is None or following[0] != _TEXT:
    # "$" at the end or directly before "$$" has nothing to delimit.
    return index + 1

  text = following[1]
  newline = text.find("\n")
  closer = _token_at(tokens, index + 2)
  if newline == -1 and closer is not None and closer[0] == _INLINE and _ends_formula(_token_at(tokens, index + 3)):
    math = text.strip()
    out.append("$" + math + "$" if math else text)
    _space_after_close(tokens, index + 3, out)
    return index + 3

  # Unterminated, or the next "$" is glued to a word and opens another formula.
  content = text if newline == -1 else text[:newline]
  extent = _math_extent(content)
  math = content[:extent].strip()
  prose = content[extent:]

  if math:
    out.append("$" + math + "$")
    prose = _space_before_word(prose)
  else:
    # Opener without any formula after it.
    prose = content

  remainder = "" if newline == -1 else text[newline:]
  rest = prose + remainder
  if math and not rest and closer is not None:
    # Keep the repaired formula from touching the delimiter that follows.
    rest = " "
  tokens[index + 1] = (_TEXT, rest)
  # When a closer existed it now opens the next formula.
  return index + 1


def _ends_formula(after: _Token | None) -> bool:
  """Return True unless the token after a closing ``$`` starts with a letter or digit."""
  if after is None or after[0] != _TEXT:
    return True
  return not after[1][:1].isalnum()


def _space_before_word(prose: str) -> str:
  if prose and (prose[0].isupper() or prose[0] == "\\"):
    return " " + prose
  return prose


def _space_after_close(tokens: list[_Token], next_index: int, out: list[str]) -> None:
  """Insert one space between a closing delimiter and a capital word, command or delimiter."""
  token = _token_at(tokens, next_index)
  if token is None:
    return
  kind, value = token
  if kind == _TEXT:
    tokens[next_index] = (_TEXT, _space_before_word(value))
  else:
    out.append(" ")


def _math_extent(content: str) -> int:
  """Return the index in content where the formula ends and prose begins."""
  words = list(_WORD_RE.finditer(content))
  depths = _brace_depths(content, words)
  anchor = next((position for position, word in enumerate(words) if depths[position] == 0 and _is_prose_anchor(word.group())), None)
  if anchor is None:
    return len(content.rstrip())

  last_math = anchor - 1
  while last_math >= 0 and _is_connective(words[last_math].group()) and not _follows_operator(words, last_math):
    last_math -= 1
  if last_math < 0:
    return 0
  return words[last_math].end()


def _brace_depths(content: str, words: list[re.Match[str]]) -> list[int]:
  depths: list[int] = []
  depth = 0
  cursor = 0
  for word in words:
    for char in content[cursor : word.start()]:
      depth = _step_depth(depth, char)
    depths.append(depth)
    for char in word.group():
      depth = _step_depth(depth, char)
    cursor = word.end()
  return depths


def _step_depth(depth: int, char: str) -> int:
  if char == "{":
    return depth + 1
  if char == "}":
    return max(0, depth - 1)
  return depth


def _is_prose_anchor(word: str) -> bool:
  if not _PROSE_WORD_RE.match(word):
    return False
  bare = word.rstrip(".,;:!?").lower()
  if bare in _MATH_WORDS:
    return False
  return len(bare) >= 3 or bare in _SHORT_PROSE_WORDS


def _is_connective(word: str) -> bool:
  bare = word.rstrip(".,;:!?")
  if len(bare) == 1 and bare.isalpha() and bare.islower():
    return True
  return bare.lower() in _SHORT_PROSE_WORDS


def _follows_operator(words: list[re.Match[str]], position: int) -> bool:
  if position == 0:
    return False
  previous = words[position - 1].group()
  return previous.endswith(_OPERATOR_SUFFIXES) or _TRAILING_COMMAND_RE.search(previous) is not None


def _wrap_orphans(prose: str) -> str:
  """Wrap LaTeX commands found outside any delimiter in inline math."""
  if "\\" not in prose:
    return prose
  return _ORPHAN_RE.sub(lambda match: "$" + match.group(0) + "$", prose)


def _count_display(piece: str) -> int:
  return sum(1 for kind, _ in _tokenize(piece) if kind == _DISPLAY)


def _drop_unmatched_display(markdown: str) -> str:
  """Remove the last ``$$`` outside code when the total count is odd."""
  pieces = _PROTECTED_RE.split(markdown)
  total = sum(_count_display(pieces[index]) for index in range(0, len(pieces), 2))
  if total % 2 == 0:
    return markdown

  # Split with one capture group always yields prose at even indexes, ending with prose.
  for index in range(len(pieces) - 1, -1, -2):
    tokens = _tokenize(pieces[index])
    positions = [position for position, (kind, _) in enumerate(tokens) if kind == _DISPLAY]
    if positions:
      del tokens[positions[-1]]
      pieces[index] = "".join(value for _, value in tokens)
      break
  return "".join(pieces)
