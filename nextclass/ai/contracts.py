"""Msgspec contracts for structured completion results."""

from __future__ import annotations

from typing import Annotated

import msgspec

NonEmptyStr = Annotated[str, msgspec.Meta(min_length=1)]


class ResultStruct(msgspec.Struct, rename="camel"):
  """Base for completion result contracts; unknown fields are ignored."""


class QuizQuestion(ResultStruct):
  question: NonEmptyStr
  options: Annotated[list[str], msgspec.Meta(min_length=2)]
  correct_answer: int | str
  explanation: str | None = None


class QuizResult(ResultStruct):
  questions: Annotated[list[QuizQuestion], msgspec.Meta(min_length=1)]


class Flashcard(ResultStruct):
  front: NonEmptyStr
  back: NonEmptyStr
  category: str | None = None


class FlashcardResult(ResultStruct):
  cards: Annotated[list[Flashcard], msgspec.Meta(min_length=1)]


class LessonStep(ResultStruct):
  title: NonEmptyStr
  description: str
  duration_minutes: int | None = None


class LessonPlanResult(ResultStruct):
  title: NonEmptyStr
  objectives: Annotated[list[str], msgspec.Meta(min_length=1)]
  steps: Annotated[list[LessonStep], msgspec.Meta(min_length=1)]
  assessment: str | None = None
  resources: list[str] = []


class MultipleChoiceItem(ResultStruct):
  question: NonEmptyStr
  options: Annotated[list[str], msgspec.Meta(min_length=2)]
  correct_answer: int | str
  explanation: str | None = None


class MultipleChoiceActivityResult(ResultStruct):
  title: NonEmptyStr
  questions: Annotated[list[MultipleChoiceItem], msgspec.Meta(min_length=1)]
  instructions: str | None = None


class OpenEndedItem(ResultStruct):
  prompt: NonEmptyStr
  expected_answer: str | None = None
  rubric: str | None = None


class OpenEndedActivityResult(ResultStruct):
  title: NonEmptyStr
  questions: Annotated[list[OpenEndedItem], msgspec.Meta(min_length=1)]
  instructions: str | None = None


class SuggestionsResult(ResultStruct):
  suggestions: Annotated[list[NonEmptyStr], msgspec.Meta(min_length=1)]


def to_payload(result: msgspec.Struct) -> dict:
  """Return JSON-ready builtins with the wire (camelCase) field names."""
  return msgspec.to_builtins(result)
