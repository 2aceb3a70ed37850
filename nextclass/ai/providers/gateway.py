"""OpenAI-compatible gateway completion client using the openai SDK."""

from __future__ import annotations

import logging
from typing import Final

import openai
from openai import AsyncOpenAI

from nextclass.config import Settings
from nextclass.jobs.errors import CompletionCreditsError, CompletionRateLimitError, CompletionServiceError, CompletionTimeoutError

logger = logging.getLogger(__name__)


class GatewayCompletionClient:
  """Chat-completions client for the configured AI gateway."""

  _TEMPERATURE: Final[float] = 0.3

  def __init__(self, *, api_key: str, base_url: str, model: str, timeout_seconds: float) -> None:
    self.model = model
    self._timeout_seconds = timeout_seconds
    # Retries are disabled: a failed job is re-run by dispatching a new one.
    self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout_seconds, max_retries=0)

  async def complete(self, *, system_prompt: str, user_prompt: str) -> str:
    """Return completion text or raise a mapped completion error."""
    try:
      response = await self._client.chat.completions.create(
        model=self.model,
        messages=[{"role": "system", "content": system_prompt}, {"role": "user", "content": user_prompt}],
        temperature=self._TEMPERATURE,
      )
    except openai.APITimeoutError as exc:
      raise CompletionTimeoutError(self._timeout_seconds) from exc
    except openai.RateLimitError as exc:
      raise CompletionRateLimitError() from exc
    except openai.APIStatusError as exc:
      raise _map_status_error(exc) from exc
    except openai.APIConnectionError as exc:
      raise CompletionServiceError(f"Completion service unreachable: {exc}") from exc

    if not response.choices:
      raise CompletionServiceError("Completion service returned no choices.")
    content = response.choices[0].message.content or ""
    if response.usage:
      logger.info("Completion usage model=%s prompt_tokens=%s completion_tokens=%s", self.model, response.usage.prompt_tokens, response.usage.completion_tokens)
    logger.debug("Completion response (%d chars)", len(content))
    return content


def _map_status_error(exc: openai.APIStatusError) -> CompletionServiceError:
  if exc.status_code == 429:
    return CompletionRateLimitError()
  if exc.status_code == 402:
    return CompletionCreditsError()
  logger.error("Completion service error status=%s", exc.status_code)
  return CompletionServiceError(f"Completion service error (HTTP {exc.status_code}).", status_code=exc.status_code)


def build_completion_client(settings: Settings) -> GatewayCompletionClient:
  """Construct the gateway client from settings."""
  if not settings.completion_api_key:
    raise ValueError("NEXTCLASS_COMPLETION_API_KEY must be set to call the completion gateway.")
  return GatewayCompletionClient(api_key=settings.completion_api_key, base_url=settings.completion_base_url, model=settings.completion_model, timeout_seconds=settings.completion_timeout_seconds)
