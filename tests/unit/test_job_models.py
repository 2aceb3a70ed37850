"""Unit tests for the job status state machine and handler registry."""

from __future__ import annotations

import pytest

from nextclass.ai.agents import ALL_AGENTS
from nextclass.jobs.dispatch import JobProcessorRegistry
from nextclass.jobs.models import JobStatus, JobType, can_transition
from tests.support import make_job


@pytest.mark.parametrize(
  ("current", "target", "allowed"),
  [
    (JobStatus.PENDING, JobStatus.PROCESSING, True),
    (JobStatus.PROCESSING, JobStatus.PROCESSING, True),
    (JobStatus.PROCESSING, JobStatus.COMPLETED, True),
    (JobStatus.PENDING, JobStatus.FAILED, True),
    (JobStatus.PENDING, JobStatus.COMPLETED, False),
    (JobStatus.COMPLETED, JobStatus.PROCESSING, False),
    (JobStatus.COMPLETED, JobStatus.FAILED, False),
    (JobStatus.FAILED, JobStatus.COMPLETED, False),
    (JobStatus.PROCESSING, JobStatus.PENDING, False),
  ],
)
def test_transitions_are_monotonic(current: JobStatus, target: JobStatus, allowed: bool) -> None:
  assert can_transition(current, target) is allowed


def test_terminal_flag() -> None:
  assert not make_job(status=JobStatus.PROCESSING).is_terminal
  assert make_job(status=JobStatus.FAILED).is_terminal


def test_every_job_type_has_an_agent() -> None:
  assert {agent.job_type for agent in ALL_AGENTS} == set(JobType)


class _Handler:
  def __init__(self, job_type: JobType) -> None:
    self.job_type = job_type

  async def run(self, job):
    return {}


def test_registry_reports_missing_handlers() -> None:
  registry = JobProcessorRegistry.from_handlers([_Handler(JobType.GENERATE_QUIZ)])
  assert registry.resolve(JobType.GENERATE_QUIZ).job_type == JobType.GENERATE_QUIZ
  with pytest.raises(ValueError, match="GENERATE_FLASHCARDS"):
    registry.validate_complete()
  with pytest.raises(ValueError, match="Unsupported job type"):
    registry.resolve(JobType.GENERATE_SUGGESTIONS)
