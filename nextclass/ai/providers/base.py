"""Completion client contract."""

from __future__ import annotations

from typing import Protocol


class CompletionClient(Protocol):
  """Async text completion for a system/user prompt pair."""

  async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
    """Return the raw completion text."""
