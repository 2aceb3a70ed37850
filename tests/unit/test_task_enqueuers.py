from __future__ import annotations

import json
from dataclasses import replace
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from nextclass.config import get_settings
from nextclass.services.tasks.factory import get_task_enqueuer
from nextclass.services.tasks.gcp import CloudTasksEnqueuer
from nextclass.services.tasks.interface import RUN_JOB_PATH
from nextclass.services.tasks.local import LocalHttpEnqueuer


@pytest.mark.anyio
async def test_local_task_dispatch_posts_job_id() -> None:
  """Verify that the local enqueuer posts to the runner endpoint with the task secret."""
  settings = replace(get_settings(), base_url="http://localhost:8080", task_secret="test-task-secret", task_service_provider="local-http")

  with patch("nextclass.services.tasks.local.httpx.AsyncClient") as mock_client_cls:
    mock_client = AsyncMock()
    mock_client_cls.return_value.__aenter__.return_value = mock_client
    mock_client.post.return_value = Mock(status_code=200)

    enqueuer = get_task_enqueuer(settings)
    assert isinstance(enqueuer, LocalHttpEnqueuer)
    await enqueuer.enqueue("job-123")

    mock_client.post.assert_called_once()
    args, kwargs = mock_client.post.call_args
    assert args[0] == f"http://localhost:8080{RUN_JOB_PATH}"
    assert kwargs["json"] == {"jobId": "job-123"}
    assert kwargs["headers"] == {"authorization": "Bearer test-task-secret"}
    assert kwargs["timeout"] == settings.completion_timeout_seconds + 60.0


@pytest.mark.anyio
async def test_local_dispatch_tolerates_failed_job_response() -> None:
  settings = replace(get_settings(), base_url="http://localhost:8080", task_secret="test-task-secret")

  with patch("nextclass.services.tasks.local.httpx.AsyncClient") as mock_client_cls:
    mock_client = AsyncMock()
    mock_client_cls.return_value.__aenter__.return_value = mock_client
    mock_client.post.return_value = Mock(status_code=500)

    await LocalHttpEnqueuer(settings).enqueue("job-123")


@pytest.mark.anyio
async def test_local_dispatch_raises_on_rejected_secret() -> None:
  settings = replace(get_settings(), base_url="http://localhost:8080", task_secret="test-task-secret")
  request = httpx.Request("POST", f"http://localhost:8080{RUN_JOB_PATH}")
  rejected = httpx.Response(401, request=request, json={"error": "Invalid task secret."})

  with patch("nextclass.services.tasks.local.httpx.AsyncClient") as mock_client_cls:
    mock_client = AsyncMock()
    mock_client_cls.return_value.__aenter__.return_value = mock_client
    mock_client.post.return_value = rejected

    with pytest.raises(httpx.HTTPStatusError):
      await LocalHttpEnqueuer(settings).enqueue("job-123")


@pytest.mark.anyio
async def test_local_dispatch_requires_base_url() -> None:
  settings = replace(get_settings(), base_url=None)
  with pytest.raises(RuntimeError, match="Base URL"):
    await LocalHttpEnqueuer(settings).enqueue("job-123")


@pytest.mark.anyio
async def test_cloud_tasks_enqueue_builds_authenticated_request() -> None:
  settings = replace(
    get_settings(),
    task_service_provider="gcp",
    cloud_tasks_queue_path="projects/p/locations/l/queues/q",
    base_url="https://engine.example.org/",
    task_secret="test-task-secret",
    cloud_run_invoker_service_account="invoker@p.iam.gserviceaccount.com",
  )

  with patch("nextclass.services.tasks.gcp.tasks_v2.CloudTasksAsyncClient") as mock_client_cls:
    mock_client = mock_client_cls.return_value
    mock_client.create_task = AsyncMock(return_value=Mock())

    enqueuer = get_task_enqueuer(settings)
    assert isinstance(enqueuer, CloudTasksEnqueuer)
    await enqueuer.enqueue("job-456")

    request = mock_client.create_task.call_args.kwargs["request"]
    assert request["parent"] == "projects/p/locations/l/queues/q"
    http_request = request["task"]["http_request"]
    assert http_request["url"] == f"https://engine.example.org{RUN_JOB_PATH}"
    assert http_request["headers"]["Authorization"] == "Bearer test-task-secret"
    assert json.loads(http_request["body"]) == {"jobId": "job-456"}
    assert http_request["oidc_token"] == {"service_account_email": "invoker@p.iam.gserviceaccount.com"}


@pytest.mark.anyio
async def test_cloud_tasks_requires_queue_path() -> None:
  settings = replace(get_settings(), task_service_provider="gcp", cloud_tasks_queue_path=None)
  with patch("nextclass.services.tasks.gcp.tasks_v2.CloudTasksAsyncClient"):
    with pytest.raises(RuntimeError, match="queue path"):
      await CloudTasksEnqueuer(settings).enqueue("job-456")
