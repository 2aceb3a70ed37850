import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Query

from nextclass.api.deps import get_enqueuer, get_jobs_repo, get_lectures_repo
from nextclass.api.models import JobCreateRequest, JobCreateResponse, JobListResponse, JobStatusResponse
from nextclass.config import Settings, get_settings
from nextclass.core.security import Principal, get_current_principal
from nextclass.services import jobs as job_service
from nextclass.services.tasks.interface import TaskEnqueuer
from nextclass.storage.jobs_repo import JobsRepository
from nextclass.storage.lectures_repo import LecturesRepository

router = APIRouter()
logger = logging.getLogger("nextclass.api.routes.jobs")


@router.post("/{kind}", response_model=JobCreateResponse)
async def create_job(  # noqa: B008
  kind: str,
  request: JobCreateRequest,
  background_tasks: BackgroundTasks,
  settings: Annotated[Settings, Depends(get_settings)],
  principal: Annotated[Principal, Depends(get_current_principal)],
  jobs_repo: Annotated[JobsRepository, Depends(get_jobs_repo)],
  lectures_repo: Annotated[LecturesRepository, Depends(get_lectures_repo)],
  enqueuer: Annotated[TaskEnqueuer, Depends(get_enqueuer)],
) -> JobCreateResponse:
  """Create a generation job for a lecture and dispatch it in the background."""
  job_type = job_service.resolve_job_kind(kind)
  return await job_service.create_job(job_type, request.lecture_id, principal, settings, background_tasks, jobs_repo=jobs_repo, lectures_repo=lectures_repo, enqueuer=enqueuer)


@router.get("/{job_id}", response_model=JobStatusResponse)
async def get_job_status(
  job_id: str,
  principal: Annotated[Principal, Depends(get_current_principal)],
  jobs_repo: Annotated[JobsRepository, Depends(get_jobs_repo)],
) -> JobStatusResponse:
  """Return the status and result of a job owned by the caller."""
  return await job_service.get_job_status(job_id, principal, jobs_repo=jobs_repo)


@router.get("", response_model=JobListResponse)
async def list_lecture_jobs(
  principal: Annotated[Principal, Depends(get_current_principal)],
  jobs_repo: Annotated[JobsRepository, Depends(get_jobs_repo)],
  lectures_repo: Annotated[LecturesRepository, Depends(get_lectures_repo)],
  lecture_id: Annotated[str, Query(alias="lectureId", min_length=1)],
  kind: Annotated[str | None, Query()] = None,
  limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> JobListResponse:
  """List recent jobs for one of the caller's lectures."""
  job_type = job_service.resolve_job_kind(kind) if kind else None
  return await job_service.list_lecture_jobs(lecture_id, principal, job_type=job_type, limit=limit, jobs_repo=jobs_repo, lectures_repo=lectures_repo)
