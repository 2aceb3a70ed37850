"""Completion provider implementations."""

from nextclass.ai.providers.base import CompletionClient
from nextclass.ai.providers.gateway import GatewayCompletionClient, build_completion_client

__all__ = ["CompletionClient", "GatewayCompletionClient", "build_completion_client"]
