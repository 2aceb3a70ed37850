"""Job agents."""

from nextclass.ai.agents.activity import MultipleChoiceActivityAgent, OpenEndedActivityAgent
from nextclass.ai.agents.base import AgentDependencies, BaseJobAgent, Prompt
from nextclass.ai.agents.flashcards import FlashcardsAgent
from nextclass.ai.agents.lesson_plan import LessonPlanAgent
from nextclass.ai.agents.material import LectureMaterialAgent
from nextclass.ai.agents.quiz import QuizAgent
from nextclass.ai.agents.suggestions import SuggestionsAgent

ALL_AGENTS: tuple[type[BaseJobAgent], ...] = (QuizAgent, FlashcardsAgent, LessonPlanAgent, MultipleChoiceActivityAgent, OpenEndedActivityAgent, SuggestionsAgent, LectureMaterialAgent)

__all__ = [
  "ALL_AGENTS",
  "AgentDependencies",
  "BaseJobAgent",
  "FlashcardsAgent",
  "LectureMaterialAgent",
  "LessonPlanAgent",
  "MultipleChoiceActivityAgent",
  "OpenEndedActivityAgent",
  "Prompt",
  "QuizAgent",
  "SuggestionsAgent",
]
