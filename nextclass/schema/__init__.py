"""Schema package exports."""

from .jobs import TeacherJob
from .lectures import Lecture, LessonPlan, TeacherActivity, TeacherFlashcardSet, TeacherQuiz

__all__ = ["Lecture", "LessonPlan", "TeacherActivity", "TeacherFlashcardSet", "TeacherJob", "TeacherQuiz"]
