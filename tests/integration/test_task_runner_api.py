from __future__ import annotations

import json

import pytest
from httpx import ASGITransport, AsyncClient

from nextclass.api.deps import get_job_runner
from nextclass.config import get_settings
from nextclass.jobs.models import JobStatus, JobType
from nextclass.main import app
from nextclass.services.jobs import build_job_runner
from nextclass.services.material_pipeline import SanitizerConfig
from nextclass.services.tasks.interface import RUN_JOB_PATH
from tests.support import FakeCompletionClient, InMemoryJobsRepository, InMemoryLecturesRepository, InMemoryPublishedContentRepository, make_job, make_lecture

AUTH = {"authorization": "Bearer test-task-secret"}


@pytest.fixture
def jobs():
  repo = InMemoryJobsRepository(make_job(JobType.GENERATE_SUGGESTIONS, job_id="job-ok"), make_job(JobType.GENERATE_QUIZ, job_id="job-bad"))
  yield repo
  app.dependency_overrides.clear()


def _install_runner(jobs: InMemoryJobsRepository, response: str) -> None:
  runner = build_job_runner(
    get_settings(),
    SanitizerConfig(),
    jobs_repo=jobs,
    lectures_repo=InMemoryLecturesRepository(make_lecture()),
    published_repo=InMemoryPublishedContentRepository(),
    client=FakeCompletionClient(response),
  )
  app.dependency_overrides[get_job_runner] = lambda: runner


@pytest.mark.anyio
async def test_runner_rejects_missing_or_wrong_secret(jobs) -> None:
  _install_runner(jobs, "{}")
  async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
    missing = await ac.post(RUN_JOB_PATH, json={"jobId": "job-ok"})
    wrong = await ac.post(RUN_JOB_PATH, json={"jobId": "job-ok"}, headers={"authorization": "Bearer nope"})

  assert missing.status_code == 401
  assert wrong.status_code == 401
  assert jobs.jobs["job-ok"].status == JobStatus.PENDING


@pytest.mark.anyio
async def test_runner_completes_job(jobs) -> None:
  _install_runner(jobs, json.dumps({"suggestions": ["Inclua exercícios resolvidos."]}))
  async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
    response = await ac.post(RUN_JOB_PATH, json={"jobId": "job-ok"}, headers=AUTH)

  assert response.status_code == 200
  assert response.json() == {"success": True}
  assert jobs.jobs["job-ok"].status == JobStatus.COMPLETED
  assert jobs.jobs["job-ok"].result_payload == {"suggestions": ["Inclua exercícios resolvidos."]}


@pytest.mark.anyio
async def test_runner_reports_failed_job(jobs) -> None:
  _install_runner(jobs, '{"questions": []}')
  async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
    response = await ac.post(RUN_JOB_PATH, json={"jobId": "job-bad"}, headers=AUTH)

  assert response.status_code == 500
  assert response.json()["error"] == jobs.jobs["job-bad"].error_message
  assert jobs.jobs["job-bad"].status == JobStatus.FAILED


@pytest.mark.anyio
async def test_runner_unknown_job(jobs) -> None:
  _install_runner(jobs, "{}")
  async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
    response = await ac.post(RUN_JOB_PATH, json={"jobId": "missing"}, headers=AUTH)

  assert response.status_code == 404
  assert response.json()["error"] == "Job not found: missing"
