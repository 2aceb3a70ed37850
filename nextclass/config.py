"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from nextclass.utils.env import default_env_path, load_env_file

load_env_file(default_env_path(), override=False)

_MIN_COMPLETION_TIMEOUT_SECONDS = 60
_MAX_COMPLETION_TIMEOUT_SECONDS = 120


@dataclass(frozen=True)
class Settings:
  """Typed settings for the NextClass engine."""

  environment: str
  allowed_origins: tuple[str, ...]
  debug: bool
  log_max_bytes: int
  log_backup_count: int
  log_http_4xx: bool
  pg_dsn: str | None
  pg_connect_timeout: int
  firebase_project_id: str | None
  firebase_service_account_json_path: str | None
  completion_api_key: str | None
  completion_base_url: str
  completion_model: str
  completion_timeout_seconds: float
  cloud_tasks_queue_path: str | None
  task_service_provider: str
  base_url: str | None
  task_secret: str | None
  cloud_run_invoker_service_account: str | None
  latex_max_passes: int
  mermaid_min_chars: int
  material_min_chars: int
  transcript_prompt_chars: int


@dataclass(frozen=True)
class DatabaseSettings:
  """Typed settings for database connectivity."""

  debug: bool
  pg_dsn: str | None
  pg_connect_timeout: int


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  if not raw:
    raise ValueError("NEXTCLASS_ALLOWED_ORIGINS must be set to one or more origins.")

  origins = [origin.strip() for origin in raw.split(",") if origin.strip()]

  if not origins:
    raise ValueError("NEXTCLASS_ALLOWED_ORIGINS must include at least one origin.")

  if "*" in origins:
    raise ValueError("NEXTCLASS_ALLOWED_ORIGINS must not include wildcard origins.")

  return tuple(origins)


def _parse_bool(raw: str | None) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None:
    return False

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _positive_int(name: str, default: str) -> int:
  value = int(os.getenv(name, default))
  if value <= 0:
    raise ValueError(f"{name} must be a positive integer.")
  return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("NEXTCLASS_ENV", "development").lower()

  # Toggle verbose error output and diagnostics in non-production environments.
  debug = _parse_bool(os.getenv("NEXTCLASS_DEBUG"))

  log_max_bytes = _positive_int("NEXTCLASS_LOG_MAX_BYTES", "5242880")  # 5MB default
  log_backup_count = int(os.getenv("NEXTCLASS_LOG_BACKUP_COUNT", "10"))
  if log_backup_count < 0:
    raise ValueError("NEXTCLASS_LOG_BACKUP_COUNT must be zero or a positive integer.")

  # Allow opt-in logging of 4xx HTTPExceptions for diagnostics.
  log_http_4xx = _parse_bool(os.getenv("NEXTCLASS_LOG_HTTP_4XX"))

  # Completion calls are bounded; the runner treats anything slower as a timeout failure.
  completion_timeout_seconds = float(os.getenv("NEXTCLASS_COMPLETION_TIMEOUT_SECONDS", "120"))
  if not _MIN_COMPLETION_TIMEOUT_SECONDS <= completion_timeout_seconds <= _MAX_COMPLETION_TIMEOUT_SECONDS:
    raise ValueError(f"NEXTCLASS_COMPLETION_TIMEOUT_SECONDS must be between {_MIN_COMPLETION_TIMEOUT_SECONDS} and {_MAX_COMPLETION_TIMEOUT_SECONDS}.")

  task_service_provider = os.getenv("NEXTCLASS_TASK_SERVICE_PROVIDER", "local-http").strip().lower()
  if task_service_provider not in {"local-http", "gcp"}:
    raise ValueError("NEXTCLASS_TASK_SERVICE_PROVIDER must be 'local-http' or 'gcp'.")

  latex_max_passes = _positive_int("NEXTCLASS_LATEX_MAX_PASSES", "5")
  if latex_max_passes > 5:
    raise ValueError("NEXTCLASS_LATEX_MAX_PASSES must not exceed 5.")

  return Settings(
    environment=environment,
    allowed_origins=_parse_origins(os.getenv("NEXTCLASS_ALLOWED_ORIGINS")),
    debug=debug,
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    log_http_4xx=log_http_4xx,
    pg_dsn=os.getenv("NEXTCLASS_PG_DSN") or os.getenv("DATABASE_URL"),
    pg_connect_timeout=_positive_int("NEXTCLASS_PG_CONNECT_TIMEOUT", "5"),
    firebase_project_id=_optional_str(os.getenv("FIREBASE_PROJECT_ID")),
    firebase_service_account_json_path=_optional_str(os.getenv("FIREBASE_SERVICE_ACCOUNT_JSON_PATH")),
    completion_api_key=_optional_str(os.getenv("NEXTCLASS_COMPLETION_API_KEY")),
    completion_base_url=(os.getenv("NEXTCLASS_COMPLETION_BASE_URL") or "https://openrouter.ai/api/v1").strip(),
    completion_model=(os.getenv("NEXTCLASS_COMPLETION_MODEL") or "google/gemini-2.5-flash").strip(),
    completion_timeout_seconds=completion_timeout_seconds,
    cloud_tasks_queue_path=_optional_str(os.getenv("NEXTCLASS_CLOUD_TASKS_QUEUE_PATH")),
    task_service_provider=task_service_provider,
    base_url=_optional_str(os.getenv("NEXTCLASS_BASE_URL")),
    task_secret=_optional_str(os.getenv("NEXTCLASS_TASK_SECRET")),
    cloud_run_invoker_service_account=_optional_str(os.getenv("NEXTCLASS_CLOUD_RUN_INVOKER_SERVICE_ACCOUNT")),
    latex_max_passes=latex_max_passes,
    mermaid_min_chars=_positive_int("NEXTCLASS_MERMAID_MIN_CHARS", "20"),
    material_min_chars=_positive_int("NEXTCLASS_MATERIAL_MIN_CHARS", "200"),
    transcript_prompt_chars=_positive_int("NEXTCLASS_TRANSCRIPT_PROMPT_CHARS", "3000"),
  )


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
  """Load database settings without requiring web-runtime configuration like CORS."""
  # Keep database configuration isolated so migrations don't require unrelated env vars.
  debug = _parse_bool(os.getenv("NEXTCLASS_DEBUG"))
  pg_connect_timeout = _positive_int("NEXTCLASS_PG_CONNECT_TIMEOUT", "5")
  pg_dsn = os.getenv("NEXTCLASS_PG_DSN") or os.getenv("DATABASE_URL")
  return DatabaseSettings(debug=debug, pg_dsn=pg_dsn, pg_connect_timeout=pg_connect_timeout)


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value
