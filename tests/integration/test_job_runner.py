"""End-to-end runner tests against in-memory stores and a fake completion client."""

from __future__ import annotations

import json

import pytest

from nextclass.ai.agents import AgentDependencies
from nextclass.config import get_settings
from nextclass.jobs.errors import CompletionRateLimitError, JobNotFoundError
from nextclass.jobs.models import JobStatus, JobType
from nextclass.jobs.worker import GENERIC_FAILURE_MESSAGE, JobRunner
from nextclass.services.jobs import build_job_registry, build_job_runner
from nextclass.services.material_pipeline import SanitizerConfig
from nextclass.storage.lectures_repo import MATERIAL_KEY
from tests.support import FakeCompletionClient, InMemoryJobsRepository, InMemoryLecturesRepository, InMemoryPublishedContentRepository, make_job, make_lecture


def _quiz_response(count: int) -> str:
  questions = [{"question": f"Pergunta {index}?", "options": ["A", "B", "C", "D"], "correctAnswer": index % 4, "explanation": "Porque sim."} for index in range(count)]
  return "```json\n" + json.dumps({"questions": questions}) + "\n```"


def _runner(jobs: InMemoryJobsRepository, client: FakeCompletionClient, *, lectures: InMemoryLecturesRepository | None = None, published: InMemoryPublishedContentRepository | None = None) -> JobRunner:
  return build_job_runner(
    get_settings(),
    SanitizerConfig(),
    jobs_repo=jobs,
    lectures_repo=lectures or InMemoryLecturesRepository(make_lecture()),
    published_repo=published or InMemoryPublishedContentRepository(),
    client=client,
  )


@pytest.mark.anyio
async def test_quiz_job_completes_and_replaces_quiz() -> None:
  jobs = InMemoryJobsRepository(make_job(JobType.GENERATE_QUIZ))
  published = InMemoryPublishedContentRepository()
  published.quizzes["quiz-old"] = {"lecture_id": "lecture-1", "teacher_id": "teacher-1", "title": "Antigo", "questions": []}
  client = FakeCompletionClient(_quiz_response(10))

  record = await _runner(jobs, client, published=published).run("job-1")

  assert record.status == JobStatus.COMPLETED
  assert len(record.result_payload["questions"]) == 10
  assert record.result_payload["questions"][0]["correctAnswer"] == 0
  assert record.completed_at is not None
  assert list(published.quizzes) == [record.result_payload["quiz_id"]]
  assert jobs.transitions == [("job-1", JobStatus.PROCESSING), ("job-1", JobStatus.COMPLETED)]
  system_prompt, user_prompt = client.calls[0]
  assert "Termodinâmica" in user_prompt
  assert "correctAnswer" in system_prompt


@pytest.mark.anyio
async def test_flashcards_job_stores_cards() -> None:
  jobs = InMemoryJobsRepository(make_job(JobType.GENERATE_FLASHCARDS))
  published = InMemoryPublishedContentRepository()
  client = FakeCompletionClient('{"cards": [{"front": "Calor", "back": "Energia em trânsito."}]}')

  record = await _runner(jobs, client, published=published).run("job-1")

  assert record.status == JobStatus.COMPLETED
  assert record.result_payload["cards"] == [{"front": "Calor", "back": "Energia em trânsito.", "category": None}]
  assert record.result_payload["flashcard_set_id"] in published.flashcards


@pytest.mark.anyio
async def test_activity_and_plan_jobs_create_records() -> None:
  jobs = InMemoryJobsRepository(
    make_job(JobType.GENERATE_OPEN_ENDED_ACTIVITY, job_id="job-open"),
    make_job(JobType.GENERATE_LESSON_PLAN, job_id="job-plan"),
  )
  published = InMemoryPublishedContentRepository()
  activity = FakeCompletionClient('{"title": "Atividade", "questions": [{"prompt": "Explique a primeira lei.", "expectedAnswer": "Conservação."}]}')
  plan = FakeCompletionClient('{"title": "Plano", "objectives": ["Aplicar"], "steps": [{"title": "Abertura", "description": "Problema inicial"}]}')

  open_record = await _runner(jobs, activity, published=published).run("job-open")
  plan_record = await _runner(jobs, plan, published=published).run("job-plan")

  assert open_record.result_payload == {"activity_id": "activity-1", "title": "Atividade"}
  assert published.activities["activity-1"]["activity_type"] == "open_ended"
  assert plan_record.result_payload == {"lesson_plan_id": "plan-1", "title": "Plano"}
  assert published.lesson_plans["plan-1"]["topic"] == "Primeira lei"


@pytest.mark.anyio
async def test_suggestions_job_returns_list() -> None:
  jobs = InMemoryJobsRepository(make_job(JobType.GENERATE_SUGGESTIONS))
  record = await _runner(jobs, FakeCompletionClient('{"suggestions": ["Inclua um exemplo numérico."]}')).run("job-1")
  assert record.result_payload == {"suggestions": ["Inclua um exemplo numérico."]}


@pytest.mark.anyio
async def test_material_job_saves_sanitized_markdown() -> None:
  jobs = InMemoryJobsRepository(make_job(JobType.GENERATE_LECTURE_MATERIAL))
  lectures = InMemoryLecturesRepository(make_lecture())
  body = "## Primeira lei\n\n" + "A energia interna varia com calor e trabalho. " * 6 + "\n\nO balanço é $\\Delta U = Q - W e vale sempre.\n\n```mermaid\nflowchart TD\nA[Sozinho]\n```\n"
  client = FakeCompletionClient("```markdown\n" + body + "\n```")

  record = await _runner(jobs, client, lectures=lectures).run("job-1")

  assert record.status == JobStatus.COMPLETED
  saved = lectures.lectures["lecture-1"].structured_content[MATERIAL_KEY]
  assert saved.startswith("## Primeira lei")
  assert "$\\Delta U = Q - W$ e vale sempre." in saved
  assert "```mermaid" not in saved
  assert record.result_payload == {"lecture_id": "lecture-1", "material_length": len(saved)}


@pytest.mark.anyio
async def test_short_material_fails_without_saving() -> None:
  jobs = InMemoryJobsRepository(make_job(JobType.GENERATE_LECTURE_MATERIAL))
  lectures = InMemoryLecturesRepository(make_lecture())

  record = await _runner(jobs, FakeCompletionClient("## Curto"), lectures=lectures).run("job-1")

  assert record.status == JobStatus.FAILED
  assert "too short" in record.error_message
  assert lectures.saved == []


@pytest.mark.anyio
async def test_material_citing_too_many_low_quality_sites_is_rejected() -> None:
  jobs = InMemoryJobsRepository(make_job(JobType.GENERATE_LECTURE_MATERIAL))
  lectures = InMemoryLecturesRepository(make_lecture())
  sites = ["brasilescola.uol.com.br/fisica", "todamateria.com.br/energia", "pt.wikipedia.org/wiki/Calor", "youtube.com/watch?v=aula", "quora.com/calor", "brainly.com.br/tarefa/7"]
  references = "".join(f"[{index}] Fonte {index}. https://{site}\n" for index, site in enumerate(sites, start=1))
  body = "## Primeira lei\n\n" + "A energia interna varia com calor e trabalho. " * 6 + "\n\n## Referências\n\n" + references

  record = await _runner(jobs, FakeCompletionClient(body), lectures=lectures).run("job-1")

  assert record.status == JobStatus.FAILED
  assert record.error_message == "Material rejeitado: 6 fontes não confiáveis (máx: 5)"
  assert lectures.saved == []


@pytest.mark.anyio
async def test_timeout_fails_job_without_result() -> None:
  jobs = InMemoryJobsRepository(make_job(JobType.GENERATE_QUIZ))
  client = FakeCompletionClient(_quiz_response(3), delay=1.0)
  deps = AgentDependencies(client=client, lectures=InMemoryLecturesRepository(), published=InMemoryPublishedContentRepository(), sanitizer=SanitizerConfig(), timeout_seconds=0.05)
  runner = JobRunner(jobs_repo=jobs, registry=build_job_registry(deps))

  record = await runner.run("job-1")

  assert record.status == JobStatus.FAILED
  assert "timeout" in record.error_message.lower()
  assert record.result_payload is None


@pytest.mark.anyio
async def test_malformed_output_fails_job() -> None:
  jobs = InMemoryJobsRepository(make_job(JobType.GENERATE_QUIZ))
  record = await _runner(jobs, FakeCompletionClient("Desculpe, não consegui gerar o quiz.")).run("job-1")
  assert record.status == JobStatus.FAILED
  assert "invalid JSON" in record.error_message


@pytest.mark.anyio
async def test_rate_limit_message_is_stored() -> None:
  jobs = InMemoryJobsRepository(make_job(JobType.GENERATE_QUIZ))
  record = await _runner(jobs, FakeCompletionClient(error=CompletionRateLimitError())).run("job-1")
  assert record.status == JobStatus.FAILED
  assert "429" in record.error_message


@pytest.mark.anyio
async def test_unexpected_errors_store_generic_message() -> None:
  jobs = InMemoryJobsRepository(make_job(JobType.GENERATE_QUIZ))
  record = await _runner(jobs, FakeCompletionClient(error=RuntimeError("connection pool exhausted"))).run("job-1")
  assert record.status == JobStatus.FAILED
  assert record.error_message == GENERIC_FAILURE_MESSAGE


@pytest.mark.anyio
async def test_completed_job_is_not_rerun() -> None:
  jobs = InMemoryJobsRepository(make_job(JobType.GENERATE_QUIZ))
  first = FakeCompletionClient(_quiz_response(10))
  await _runner(jobs, first).run("job-1")
  stored = jobs.jobs["job-1"].result_payload

  second = FakeCompletionClient(_quiz_response(2))
  record = await _runner(jobs, second).run("job-1")

  assert record.status == JobStatus.COMPLETED
  assert record.result_payload == stored
  assert second.calls == []


@pytest.mark.anyio
async def test_unknown_job_raises() -> None:
  with pytest.raises(JobNotFoundError):
    await _runner(InMemoryJobsRepository(), FakeCompletionClient()).run("missing")
