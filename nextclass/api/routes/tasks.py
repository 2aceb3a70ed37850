from __future__ import annotations

import logging
import secrets
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, status
from fastapi.responses import JSONResponse

from nextclass.api.deps import get_job_runner
from nextclass.api.models import RunJobRequest, RunJobResponse
from nextclass.config import Settings, get_settings
from nextclass.jobs.models import JobStatus
from nextclass.jobs.worker import JobRunner

router = APIRouter(prefix="/tasks", tags=["tasks"])
logger = logging.getLogger(__name__)


def require_task_secret(settings: Annotated[Settings, Depends(get_settings)], authorization: Annotated[str | None, Header()] = None) -> None:
  """Reject callers that do not present the shared task secret."""
  # Secure-by-default: without a configured secret nothing may run jobs.
  if not settings.task_secret:
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Task authentication is not configured.")
  if not secrets.compare_digest((authorization or "").encode(), f"Bearer {settings.task_secret}".encode()):
    logger.warning("Unauthorized access attempt to /run-job")
    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid task secret.")


@router.post("/run-job", response_model=RunJobResponse, dependencies=[Depends(require_task_secret)])
async def run_job_task(payload: RunJobRequest, runner: Annotated[JobRunner, Depends(get_job_runner)]) -> RunJobResponse | JSONResponse:
  """Run a job to completion within this request.

  Unknown jobs propagate JobNotFoundError (404). A job that ends FAILED answers 500
  with its stored error message; the failure is already persisted at that point.
  """
  logger.info("Received task for job %s", payload.job_id)
  record = await runner.run(payload.job_id)
  if record.status == JobStatus.FAILED:
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": record.error_message or "Job failed."})
  return RunJobResponse(success=True)
