"""Job creation, status reads and background dispatch."""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import BackgroundTasks, HTTPException, status

from nextclass.ai.agents import ALL_AGENTS, AgentDependencies
from nextclass.ai.providers.base import CompletionClient
from nextclass.api.models import JobCreateResponse, JobListResponse, JobStatusResponse
from nextclass.config import Settings
from nextclass.core.security import Principal
from nextclass.jobs.dispatch import JobProcessorRegistry
from nextclass.jobs.errors import JobNotFoundError
from nextclass.jobs.models import JobRecord, JobStatus, JobType
from nextclass.jobs.worker import JobRunner
from nextclass.services.lectures import require_owned_lecture
from nextclass.services.material_pipeline import SanitizerConfig
from nextclass.services.tasks.interface import TaskEnqueuer
from nextclass.storage.jobs_repo import JobsRepository
from nextclass.storage.lectures_repo import LectureRecord, LecturesRepository, PublishedContentRepository
from nextclass.utils.ids import generate_job_id

logger = logging.getLogger(__name__)

_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
ENQUEUE_FAILED_MESSAGE = "Failed to enqueue job for processing."

# URL kinds accepted by the dispatch endpoint.
JOB_KINDS: dict[str, JobType] = {
  "quiz": JobType.GENERATE_QUIZ,
  "flashcards": JobType.GENERATE_FLASHCARDS,
  "lesson-plan": JobType.GENERATE_LESSON_PLAN,
  "multiple-choice-activity": JobType.GENERATE_MULTIPLE_CHOICE_ACTIVITY,
  "open-ended-activity": JobType.GENERATE_OPEN_ENDED_ACTIVITY,
  "suggestions": JobType.GENERATE_SUGGESTIONS,
  "lecture-material": JobType.GENERATE_LECTURE_MATERIAL,
}


def resolve_job_kind(kind: str) -> JobType:
  job_type = JOB_KINDS.get(kind)
  if job_type is None:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown job kind: {kind}")
  return job_type


def build_input_payload(lecture: LectureRecord, *, transcript_chars: int) -> dict[str, Any]:
  """Snapshot the lecture fields a job needs at creation time."""
  transcript = (lecture.raw_transcript or "")[:transcript_chars]
  topic = lecture.structured_content.get("topic") or lecture.title
  return {"title": lecture.title, "transcript": transcript, "topic": topic, "tags": list(lecture.tags)}


async def create_job(
  job_type: JobType,
  lecture_id: str,
  principal: Principal,
  settings: Settings,
  background_tasks: BackgroundTasks,
  *,
  jobs_repo: JobsRepository,
  lectures_repo: LecturesRepository,
  enqueuer: TaskEnqueuer,
) -> JobCreateResponse:
  """Create a PENDING job for an owned lecture and schedule its processing."""
  lecture = await require_owned_lecture(lectures_repo, lecture_id, principal)

  timestamp = time.strftime(_DATE_FORMAT, time.gmtime())
  record = JobRecord(
    job_id=generate_job_id(),
    job_type=job_type,
    teacher_id=principal.uid,
    lecture_id=lecture.lecture_id,
    input_payload=build_input_payload(lecture, transcript_chars=settings.transcript_prompt_chars),
    created_at=timestamp,
    updated_at=timestamp,
  )
  try:
    await jobs_repo.create_job(record)
  except Exception as exc:
    logger.error("Failed to create %s job for lecture %s", job_type.value, lecture_id, exc_info=True)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to create job.") from exc

  logger.info("Created job %s (%s) for lecture %s", record.job_id, job_type.value, lecture_id)
  trigger_job_processing(background_tasks, record.job_id, enqueuer=enqueuer, jobs_repo=jobs_repo)
  return JobCreateResponse(success=True, job_id=record.job_id)


async def get_job_status(job_id: str, principal: Principal, *, jobs_repo: JobsRepository) -> JobStatusResponse:
  """Fetch the status and result of a job owned by the caller."""
  record = await jobs_repo.get_job(job_id)
  if record is None:
    raise JobNotFoundError(job_id)
  if record.teacher_id != principal.uid:
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied.")
  return _job_status_from_record(record)


async def list_lecture_jobs(lecture_id: str, principal: Principal, *, job_type: JobType | None = None, limit: int = 20, jobs_repo: JobsRepository, lectures_repo: LecturesRepository) -> JobListResponse:
  """List recent jobs for a lecture owned by the caller, newest first."""
  await require_owned_lecture(lectures_repo, lecture_id, principal)
  records = await jobs_repo.list_jobs_for_lecture(lecture_id, job_type=job_type, limit=limit)
  return JobListResponse(jobs=[_job_status_from_record(record) for record in records])


def _job_status_from_record(record: JobRecord) -> JobStatusResponse:
  return JobStatusResponse(
    job_id=record.job_id,
    type=record.job_type.value,
    status=record.status.value,
    result=record.result_payload,
    error=record.error_message,
    created_at=record.created_at,
    updated_at=record.updated_at,
    completed_at=record.completed_at,
  )


def trigger_job_processing(background_tasks: BackgroundTasks, job_id: str, *, enqueuer: TaskEnqueuer, jobs_repo: JobsRepository) -> None:
  """Schedule background processing via the configured task enqueuer."""

  async def _dispatch() -> None:
    try:
      await enqueuer.enqueue(job_id)
    except Exception as exc:  # noqa: BLE001
      logger.error("Failed to enqueue job %s: %s", job_id, exc, exc_info=True)
      # Mark the job as failed on enqueue errors so pending jobs do not stay pending forever.
      failed = await jobs_repo.transition_job(job_id, target=JobStatus.FAILED, error_message=ENQUEUE_FAILED_MESSAGE)
      if failed is None:
        logger.warning("Job %s left the PENDING state before the enqueue failure was recorded", job_id)

  # Do not block the API response on the network call to the task queue.
  background_tasks.add_task(_dispatch)


def build_job_registry(deps: AgentDependencies) -> JobProcessorRegistry:
  """Instantiate one agent per job type and check nothing is missing."""
  registry = JobProcessorRegistry.from_handlers([agent_cls(deps) for agent_cls in ALL_AGENTS])
  registry.validate_complete()
  return registry


def build_job_runner(
  settings: Settings,
  sanitizer: SanitizerConfig,
  *,
  jobs_repo: JobsRepository,
  lectures_repo: LecturesRepository,
  published_repo: PublishedContentRepository,
  client: CompletionClient,
) -> JobRunner:
  """Wire the runner with its agents and collaborators."""
  deps = AgentDependencies(
    client=client,
    lectures=lectures_repo,
    published=published_repo,
    sanitizer=sanitizer,
    timeout_seconds=settings.completion_timeout_seconds,
    material_min_chars=settings.material_min_chars,
  )
  return JobRunner(jobs_repo=jobs_repo, registry=build_job_registry(deps))
