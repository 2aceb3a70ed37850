from __future__ import annotations

from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from nextclass.api.routes import content, jobs, materials, tasks
from nextclass.config import get_settings
from nextclass.core.database import get_db
from nextclass.core.exceptions import global_exception_handler, http_exception_handler, job_not_found_exception_handler, request_validation_exception_handler
from nextclass.core.lifespan import lifespan
from nextclass.core.middleware import RequestLoggingMiddleware
from nextclass.jobs.errors import JobNotFoundError

settings = get_settings()

app = FastAPI(lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)

app.add_middleware(CORSMiddleware, allow_origins=settings.allowed_origins, allow_credentials=True, allow_methods=["GET", "POST", "OPTIONS"], allow_headers=["content-type", "authorization"], expose_headers=["content-length"])


# Add exception handlers
app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(JobNotFoundError, job_not_found_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

# Add middleware
app.add_middleware(RequestLoggingMiddleware)


@app.get("/health", include_in_schema=False)
async def health_check() -> dict[str, str]:
  """Return a simple health status."""
  return {"status": "ok", "version": "0.1.0"}


@app.get("/health/ready", include_in_schema=False)
async def readiness_check(db: Annotated[AsyncSession, Depends(get_db)]) -> dict[str, str]:
  """Confirm the database answers before taking traffic."""
  await db.execute(text("SELECT 1"))
  return {"status": "ready"}


app.include_router(jobs.router, prefix="/v1/jobs", tags=["jobs"])
app.include_router(materials.router, prefix="/v1/lectures", tags=["materials"])
app.include_router(content.router, prefix="/v1/content", tags=["content"])
app.include_router(tasks.router, prefix="/internal", tags=["tasks"])
