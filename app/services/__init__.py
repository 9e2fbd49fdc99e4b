from .attempt import AttemptService
from .quiz import QuizService

__all__ = ["AttemptService", "QuizService"]
