"""Test configuration: environment defaults and shared fixtures."""

from __future__ import annotations

import os

import pytest

# Settings are read at import time by nextclass.main; CORS origins are mandatory.
os.environ.setdefault("NEXTCLASS_ALLOWED_ORIGINS", "http://localhost:3000")
os.environ.setdefault("NEXTCLASS_TASK_SECRET", "test-task-secret")
os.environ.setdefault("NEXTCLASS_COMPLETION_API_KEY", "test-completion-key")


@pytest.fixture
def anyio_backend():
  return "asyncio"
