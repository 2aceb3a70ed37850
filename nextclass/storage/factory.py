"""Repository construction helpers."""

from __future__ import annotations

from nextclass.config import Settings
from nextclass.storage.jobs_repo import JobsRepository
from nextclass.storage.lectures_repo import LecturesRepository, PublishedContentRepository
from nextclass.storage.postgres_jobs_repo import PostgresJobsRepository
from nextclass.storage.postgres_lectures_repo import PostgresLecturesRepository, PostgresPublishedContentRepository


def _get_jobs_repo(settings: Settings) -> JobsRepository:
  """Return the jobs repository for the configured database."""
  _ = settings
  return PostgresJobsRepository()


def _get_lectures_repo(settings: Settings) -> LecturesRepository:
  _ = settings
  return PostgresLecturesRepository()


def _get_published_repo(settings: Settings) -> PublishedContentRepository:
  _ = settings
  return PostgresPublishedContentRepository()
