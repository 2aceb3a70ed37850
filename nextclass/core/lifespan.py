import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from nextclass.core.firebase import initialize_firebase
from nextclass.core.logging import initialize_logging
from nextclass.services.material_pipeline import SanitizerConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Configure logging, Firebase and the shared sanitizer config."""
  from nextclass.config import get_settings

  settings = get_settings()
  logger = logging.getLogger("nextclass.core.lifespan")

  initialize_logging(settings)
  logger.info("Startup complete - logging verified.")

  # Built once and passed by reference to every sanitizer caller.
  app.state.sanitizer_config = SanitizerConfig.from_settings(settings)

  try:
    initialize_firebase()
  except Exception:  # noqa: BLE001
    logger.warning("Firebase initialization failed; authenticated routes will reject requests.", exc_info=True)

  yield

  from nextclass.core.database import dispose_db_engine

  await dispose_db_engine()
