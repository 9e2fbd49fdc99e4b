import logging
from typing import List, Optional, Sequence

from sqlalchemy.orm import Session

from app.core.auth import require_user
from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.core.gateway import Gateway
from app.domain.quiz_domain import QuizDomain
from app.repositories.choice_repository import ChoiceRepository
from app.repositories.question_repository import QuestionRepository
from app.repositories.quiz_repository import QuizRepository
from app.schemas.quiz import (
    QuestionCreate,
    QuizCreate,
    QuizDetailResponse,
    QuizSummaryResponse,
    QuizUpdate,
)

logger = logging.getLogger(__name__)

METADATA_FIELDS = ("title", "description", "instructions")


class QuizService:
    """Keeps Quiz, Question and Choice rows consistent and enforces authorship"""

    def __init__(self, db: Session):
        self.gateway = Gateway(db)
        self.quizzes = QuizRepository(self.gateway)
        self.questions = QuestionRepository(self.gateway)
        self.choices = ChoiceRepository(self.gateway)

    def _insert_questions(self, quiz_id: str, questions: Sequence[QuestionCreate]) -> None:
        question_ids = self.questions.create_batch(
            QuizDomain.question_rows(quiz_id, questions)
        )
        self.choices.create_batch(QuizDomain.choice_rows(question_ids, questions))

    def _require_owner(self, user_id: str, quiz_id: str, action: str) -> None:
        if not self.quizzes.is_owner(quiz_id, user_id):
            logger.warning(f"⛔ User {user_id} may not {action} quiz {quiz_id}")
            raise AuthorizationError(f"You do not have permission to {action} this quiz")

    def create_quiz(self, author_id: Optional[str], quiz: QuizCreate) -> QuizDetailResponse:
        """Create a quiz with its questions and choices as one atomic unit"""
        author_id = require_user(author_id)
        QuizDomain.validate_questions(quiz.questions)

        with self.gateway.transaction():
            created = self.quizzes.create(
                {
                    "title": quiz.title,
                    "description": quiz.description,
                    "instructions": quiz.instructions,
                    "created_by": author_id,
                }
            )
            quiz_id = created.id
            self._insert_questions(quiz_id, quiz.questions)

        logger.info(
            f"✅ Quiz {quiz_id} created by {author_id} with {len(quiz.questions)} questions"
        )
        return self.get_quiz_detail(quiz_id)

    def update_quiz(
        self, requester_id: Optional[str], quiz_id: str, quiz_update: QuizUpdate
    ) -> QuizDetailResponse:
        """Apply a partial update; a present ``questions`` list replaces all questions"""
        requester_id = require_user(requester_id)
        self._require_owner(requester_id, quiz_id, "edit")

        fields_set = quiz_update.model_fields_set
        metadata = {
            field: getattr(quiz_update, field)
            for field in METADATA_FIELDS
            if field in fields_set
        }
        if "title" in metadata and not metadata["title"]:
            raise ValidationError("Title is required")

        replace_questions = quiz_update.questions is not None
        if replace_questions:
            QuizDomain.validate_questions(quiz_update.questions)

        with self.gateway.transaction():
            if metadata:
                self.quizzes.update(quiz_id, metadata)
            if replace_questions:
                removed = self.questions.delete_all_by_quiz(quiz_id)
                self._insert_questions(quiz_id, quiz_update.questions)
                if not metadata:
                    self.quizzes.touch(quiz_id)
                logger.info(
                    f"🔁 Quiz {quiz_id}: replaced {removed} questions with "
                    f"{len(quiz_update.questions)}"
                )

        logger.info(f"✅ Quiz {quiz_id} updated by {requester_id}")
        return self.get_quiz_detail(quiz_id)

    def delete_quiz(self, requester_id: Optional[str], quiz_id: str) -> None:
        """Soft delete; questions, choices and attempts stay in place"""
        requester_id = require_user(requester_id)
        self._require_owner(requester_id, quiz_id, "delete")
        self.quizzes.delete(quiz_id)
        logger.info(f"🗑️ Quiz {quiz_id} deleted by {requester_id}")

    def get_quiz_detail(self, quiz_id: str) -> QuizDetailResponse:
        """Quiz with ordered questions, each with its ordered choices"""
        quiz = self.quizzes.get_by_id(quiz_id)
        if quiz is None:
            raise NotFoundError("Quiz not found")

        questions = self.questions.list_by_quiz(quiz_id)
        choices = self.choices.list_by_questions([q.id for q in questions])
        return QuizDomain.to_detail(quiz, questions, QuizDomain.group_choices(choices))

    def list_quizzes(self) -> List[QuizSummaryResponse]:
        return QuizDomain.to_summary_list(self.quizzes.list_all())

    def list_my_quizzes(self, user_id: Optional[str]) -> List[QuizSummaryResponse]:
        user_id = require_user(user_id)
        return QuizDomain.to_summary_list(self.quizzes.list_by_user(user_id))
