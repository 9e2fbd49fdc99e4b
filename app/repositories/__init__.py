from .attempt_repository import AttemptRepository
from .choice_repository import ChoiceRepository
from .question_repository import QuestionRepository
from .quiz_repository import QuizRepository
from .user_repository import UserRepository

__all__ = [
    "AttemptRepository",
    "ChoiceRepository",
    "QuestionRepository",
    "QuizRepository",
    "UserRepository",
]
