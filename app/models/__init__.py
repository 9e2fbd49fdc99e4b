from .attempt import Attempt, AttemptResponse
from .choice import Choice
from .question import Question
from .quiz import Quiz, QuizStatus
from .user import User

__all__ = [
    "Attempt",
    "AttemptResponse",
    "Choice",
    "Question",
    "Quiz",
    "QuizStatus",
    "User",
]
