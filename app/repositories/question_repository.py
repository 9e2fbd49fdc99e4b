from typing import List, Optional, Sequence

from sqlalchemy import delete, insert, select, update

from app.core import clock
from app.core.exceptions import NotFoundError
from app.core.gateway import Gateway
from app.models.choice import Choice
from app.models.question import Question


class QuestionRepository:
    """Repository for questions, always scoped to a quiz"""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    def _insert_statement(self, question_data: dict, question_id: str, now: int):
        return insert(Question).values(
            id=question_id,
            quiz_id=question_data["quiz_id"],
            question_text=question_data["question_text"],
            question_order=question_data["question_order"],
            points=question_data.get("points") or 1,
            created_at=now,
            updated_at=now,
        )

    def create(
        self,
        quiz_id: str,
        question_text: str,
        question_order: int,
        points: Optional[int] = None,
    ) -> Question:
        """Create a single question (points default to 1)"""
        question_id = self.gateway.new_id()
        self.gateway.mutate(
            self._insert_statement(
                {
                    "quiz_id": quiz_id,
                    "question_text": question_text,
                    "question_order": question_order,
                    "points": points,
                },
                question_id,
                clock.now_ts(),
            )
        )
        return self.get_by_id(question_id)

    def create_batch(self, questions: Sequence[dict]) -> List[str]:
        """Insert many questions atomically and return their ids in input order"""
        now = clock.now_ts()
        question_ids = [self.gateway.new_id() for _ in questions]
        self.gateway.batch(
            [
                self._insert_statement(question_data, question_id, now)
                for question_data, question_id in zip(questions, question_ids)
            ]
        )
        return question_ids

    def get_by_id(self, question_id: str) -> Optional[Question]:
        return self.gateway.query_first(
            select(Question).where(Question.id == question_id)
        )

    def list_by_quiz(self, quiz_id: str) -> List[Question]:
        """Questions of a quiz in display/scoring order"""
        return self.gateway.query(
            select(Question)
            .where(Question.quiz_id == quiz_id)
            .order_by(Question.question_order.asc())
        )

    def update(self, question_id: str, update_data: dict) -> Question:
        """Update question_text / question_order / points; empty dict is a no-op"""
        values = {
            field: update_data[field]
            for field in ("question_text", "question_order", "points")
            if field in update_data
        }
        if not values:
            question = self.get_by_id(question_id)
            if question is None:
                raise NotFoundError(f"Question {question_id} not found")
            return question

        values["updated_at"] = clock.now_ts()
        result = self.gateway.mutate(
            update(Question).where(Question.id == question_id).values(**values)
        )
        if result.changed_count == 0:
            raise NotFoundError(f"Question {question_id} not found")
        return self.get_by_id(question_id)

    def reorder(self, quiz_id: str, question_orders: Sequence[dict]) -> None:
        """Apply new question_order values atomically.

        Every update is also filtered on quiz_id, so an id belonging to
        another quiz is left alone.
        """
        now = clock.now_ts()
        self.gateway.batch(
            [
                update(Question)
                .where(
                    Question.id == item["question_id"], Question.quiz_id == quiz_id
                )
                .values(question_order=item["order"], updated_at=now)
                for item in question_orders
            ]
        )

    def delete(self, question_id: str) -> None:
        """Hard delete a question together with its choices"""
        with self.gateway.transaction():
            self.gateway.mutate(delete(Choice).where(Choice.question_id == question_id))
            result = self.gateway.mutate(
                delete(Question).where(Question.id == question_id)
            )
            if result.changed_count == 0:
                raise NotFoundError(f"Question {question_id} not found")

    def delete_all_by_quiz(self, quiz_id: str) -> int:
        """Hard delete every question of a quiz and their choices"""
        question_ids = select(Question.id).where(Question.quiz_id == quiz_id)
        results = self.gateway.batch(
            [
                delete(Choice).where(Choice.question_id.in_(question_ids)),
                delete(Question).where(Question.quiz_id == quiz_id),
            ]
        )
        return results[-1].changed_count
