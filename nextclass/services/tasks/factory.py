from __future__ import annotations

from nextclass.config import Settings
from nextclass.services.tasks.gcp import CloudTasksEnqueuer
from nextclass.services.tasks.interface import TaskEnqueuer
from nextclass.services.tasks.local import LocalHttpEnqueuer


def get_task_enqueuer(settings: Settings) -> TaskEnqueuer:
  """Factory to get the configured task enqueuer."""
  if settings.task_service_provider == "gcp":
    return CloudTasksEnqueuer(settings)
  return LocalHttpEnqueuer(settings)
