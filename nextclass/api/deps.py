"""FastAPI dependency providers for repositories and services."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from nextclass.ai.providers import build_completion_client
from nextclass.config import Settings, get_settings
from nextclass.jobs.worker import JobRunner
from nextclass.services.jobs import build_job_runner
from nextclass.services.material_pipeline import SanitizerConfig
from nextclass.services.tasks.factory import get_task_enqueuer
from nextclass.services.tasks.interface import TaskEnqueuer
from nextclass.storage.factory import _get_jobs_repo, _get_lectures_repo, _get_published_repo
from nextclass.storage.jobs_repo import JobsRepository
from nextclass.storage.lectures_repo import LecturesRepository, PublishedContentRepository


def get_sanitizer_config(request: Request) -> SanitizerConfig:
  """Return the config built at startup, or a settings-derived one outside lifespan."""
  config = getattr(request.app.state, "sanitizer_config", None)
  if config is None:
    config = SanitizerConfig.from_settings(get_settings())
    request.app.state.sanitizer_config = config
  return config


def get_jobs_repo(settings: Annotated[Settings, Depends(get_settings)]) -> JobsRepository:
  return _get_jobs_repo(settings)


def get_lectures_repo(settings: Annotated[Settings, Depends(get_settings)]) -> LecturesRepository:
  return _get_lectures_repo(settings)


def get_published_repo(settings: Annotated[Settings, Depends(get_settings)]) -> PublishedContentRepository:
  return _get_published_repo(settings)


def get_enqueuer(settings: Annotated[Settings, Depends(get_settings)]) -> TaskEnqueuer:
  return get_task_enqueuer(settings)


def get_job_runner(
  settings: Annotated[Settings, Depends(get_settings)],
  sanitizer: Annotated[SanitizerConfig, Depends(get_sanitizer_config)],
  jobs_repo: Annotated[JobsRepository, Depends(get_jobs_repo)],
  lectures_repo: Annotated[LecturesRepository, Depends(get_lectures_repo)],
  published_repo: Annotated[PublishedContentRepository, Depends(get_published_repo)],
) -> JobRunner:
  """Build a runner for one invocation of the runner endpoint."""
  return build_job_runner(settings, sanitizer, jobs_repo=jobs_repo, lectures_repo=lectures_repo, published_repo=published_repo, client=build_completion_client(settings))
