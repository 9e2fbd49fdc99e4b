from typing import List, Optional, Tuple

from sqlalchemy import distinct, func, insert, select, update

from app.core import clock
from app.core.exceptions import NotFoundError
from app.core.gateway import Gateway
from app.models.question import Question
from app.models.quiz import Quiz, QuizStatus

QuizWithCount = Tuple[Quiz, int]


class QuizRepository:
    """Repository for quiz metadata.

    Deleted quizzes stay in the table with ``is_active = DELETED`` and are
    invisible to every read below.
    """

    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    @staticmethod
    def _active():
        return Quiz.is_active == int(QuizStatus.ACTIVE)

    def create(self, quiz_data: dict) -> Quiz:
        """Create a new active quiz from title/description/instructions/created_by"""
        quiz_id = self.gateway.new_id()
        now = clock.now_ts()
        self.gateway.mutate(
            insert(Quiz).values(
                id=quiz_id,
                title=quiz_data["title"],
                description=quiz_data.get("description") or None,
                instructions=quiz_data.get("instructions") or None,
                created_by=quiz_data["created_by"],
                created_at=now,
                updated_at=now,
                is_active=int(QuizStatus.ACTIVE),
            )
        )
        return self.get_by_id(quiz_id)

    def get_by_id(self, quiz_id: str) -> Optional[Quiz]:
        """Get an active quiz by ID"""
        return self.gateway.query_first(
            select(Quiz).where(Quiz.id == quiz_id, self._active())
        )

    def _list_with_counts(self, *criteria) -> List[QuizWithCount]:
        statement = (
            select(Quiz, func.count(distinct(Question.id)).label("question_count"))
            .outerjoin(Question, Question.quiz_id == Quiz.id)
            .where(self._active(), *criteria)
            .group_by(Quiz.id)
            .order_by(Quiz.created_at.desc())
        )
        return [(row[0], row[1]) for row in self.gateway.query_rows(statement)]

    def list_all(self) -> List[QuizWithCount]:
        """All active quizzes with their question counts, newest first"""
        return self._list_with_counts()

    def list_by_user(self, user_id: str) -> List[QuizWithCount]:
        """Active quizzes authored by ``user_id``, newest first"""
        return self._list_with_counts(Quiz.created_by == user_id)

    def update(self, quiz_id: str, update_data: dict) -> Quiz:
        """Update title/description/instructions.

        Absent keys are untouched; an explicit None clears description or
        instructions; an empty dict returns the quiz without writing.
        """
        values = {
            field: update_data[field]
            for field in ("title", "description", "instructions")
            if field in update_data
        }
        if not values:
            quiz = self.get_by_id(quiz_id)
            if quiz is None:
                raise NotFoundError(f"Quiz {quiz_id} not found")
            return quiz

        values["updated_at"] = clock.now_ts()
        result = self.gateway.mutate(
            update(Quiz).where(Quiz.id == quiz_id, self._active()).values(**values)
        )
        if result.changed_count == 0:
            raise NotFoundError(f"Quiz {quiz_id} not found")
        return self.get_by_id(quiz_id)

    def touch(self, quiz_id: str) -> None:
        """Refresh updated_at, e.g. after the question set changed"""
        self.gateway.mutate(
            update(Quiz)
            .where(Quiz.id == quiz_id, self._active())
            .values(updated_at=clock.now_ts())
        )

    def delete(self, quiz_id: str) -> None:
        """Soft delete: flip the status, never remove the row"""
        result = self.gateway.mutate(
            update(Quiz)
            .where(Quiz.id == quiz_id, self._active())
            .values(is_active=int(QuizStatus.DELETED), updated_at=clock.now_ts())
        )
        if result.changed_count == 0:
            raise NotFoundError(f"Quiz {quiz_id} not found")

    def exists(self, quiz_id: str) -> bool:
        return self.get_by_id(quiz_id) is not None

    def is_owner(self, quiz_id: str, user_id: str) -> bool:
        """False when the quiz is missing, deleted, or authored by someone else"""
        quiz = self.get_by_id(quiz_id)
        return quiz is not None and quiz.created_by == user_id
