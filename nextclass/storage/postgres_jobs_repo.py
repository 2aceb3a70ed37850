"""Postgres-backed repository for generation jobs using SQLAlchemy."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select, update

from nextclass.core.database import require_session_factory
from nextclass.jobs.models import ALLOWED_PREDECESSORS, TERMINAL_STATUSES, JobRecord, JobStatus, JobType
from nextclass.schema.jobs import TeacherJob
from nextclass.storage.jobs_repo import JobsRepository


def _now_iso() -> str:
  return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


class PostgresJobsRepository(JobsRepository):
  """Persist jobs to Postgres using SQLAlchemy."""

  def __init__(self) -> None:
    self._session_factory = require_session_factory()

  async def create_job(self, record: JobRecord) -> None:
    async with self._session_factory() as session:
      job = TeacherJob(
        job_id=record.job_id,
        job_type=record.job_type.value,
        status=record.status.value,
        teacher_id=record.teacher_id,
        lecture_id=record.lecture_id,
        input_payload=record.input_payload,
        result_payload=record.result_payload,
        error_message=record.error_message,
        created_at=record.created_at,
        updated_at=record.updated_at,
        completed_at=record.completed_at,
      )
      session.add(job)
      await session.commit()

  async def get_job(self, job_id: str) -> JobRecord | None:
    async with self._session_factory() as session:
      row = await session.get(TeacherJob, job_id)
      if row is None:
        return None
      return self._model_to_record(row)

  async def transition_job(self, job_id: str, *, target: JobStatus, result_payload: dict[str, Any] | None = None, error_message: str | None = None) -> JobRecord | None:
    allowed = [status.value for status in ALLOWED_PREDECESSORS[target]]
    if not allowed:
      return None

    now = _now_iso()
    values: dict[str, Any] = {"status": target.value, "updated_at": now}
    if result_payload is not None:
      values["result_payload"] = result_payload
    if error_message is not None:
      values["error_message"] = error_message
    if target in TERMINAL_STATUSES:
      values["completed_at"] = now

    # Single conditional UPDATE so two runners cannot both record a terminal status.
    stmt = update(TeacherJob).where(TeacherJob.job_id == job_id, TeacherJob.status.in_(allowed)).values(**values).returning(TeacherJob)
    async with self._session_factory() as session:
      row = (await session.execute(stmt)).scalar_one_or_none()
      await session.commit()
      if row is None:
        return None
      return self._model_to_record(row)

  async def list_jobs_for_lecture(self, lecture_id: str, *, job_type: JobType | None = None, limit: int = 20) -> list[JobRecord]:
    async with self._session_factory() as session:
      stmt = select(TeacherJob).where(TeacherJob.lecture_id == lecture_id)
      if job_type is not None:
        stmt = stmt.where(TeacherJob.job_type == job_type.value)
      stmt = stmt.order_by(TeacherJob.created_at.desc()).limit(limit)
      rows = (await session.execute(stmt)).scalars().all()
      return [self._model_to_record(row) for row in rows]

  def _model_to_record(self, row: TeacherJob) -> JobRecord:
    return JobRecord(
      job_id=row.job_id,
      job_type=JobType(row.job_type),
      status=JobStatus(row.status),
      teacher_id=row.teacher_id,
      lecture_id=row.lecture_id,
      input_payload=row.input_payload,
      result_payload=row.result_payload,
      error_message=row.error_message,
      created_at=row.created_at,
      updated_at=row.updated_at,
      completed_at=row.completed_at,
    )
