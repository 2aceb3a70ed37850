from __future__ import annotations

import json
import logging

from google.cloud import tasks_v2

from nextclass.config import Settings
from nextclass.services.tasks.interface import RUN_JOB_PATH, TaskEnqueuer

logger = logging.getLogger(__name__)


class CloudTasksEnqueuer(TaskEnqueuer):
  """Enqueues tasks to Google Cloud Tasks."""

  def __init__(self, settings: Settings) -> None:
    self.settings = settings
    self.client = tasks_v2.CloudTasksAsyncClient()

  def _build_task(self, job_id: str) -> dict:
    if not self.settings.task_secret:
      raise RuntimeError("Task secret not configured.")
    if not self.settings.base_url:
      raise RuntimeError("Base URL not configured.")

    http_request: dict = {
      "http_method": tasks_v2.HttpMethod.POST,
      "url": f"{self.settings.base_url.rstrip('/')}{RUN_JOB_PATH}",
      "headers": {"Content-Type": "application/json", "Authorization": f"Bearer {self.settings.task_secret}"},
      "body": json.dumps({"jobId": job_id}).encode(),
    }
    # Cloud Run services behind IAM need an OIDC token from the invoker account.
    if self.settings.cloud_run_invoker_service_account:
      http_request["oidc_token"] = {"service_account_email": self.settings.cloud_run_invoker_service_account}
    return {"http_request": http_request}

  async def enqueue(self, job_id: str) -> None:
    """Enqueue a job to Cloud Tasks."""
    if not self.settings.cloud_tasks_queue_path:
      raise RuntimeError("Cloud Tasks queue path not configured.")

    task = self._build_task(job_id)
    try:
      response = await self.client.create_task(request={"parent": self.settings.cloud_tasks_queue_path, "task": task})
    except Exception:
      logger.error("Failed to enqueue task for job %s", job_id, exc_info=True)
      raise
    logger.info("Enqueued task %s for job %s", response.name, job_id)
