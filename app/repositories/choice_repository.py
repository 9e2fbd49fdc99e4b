from typing import List, Optional, Sequence

from sqlalchemy import delete, insert, select, update

from app.core import clock
from app.core.exceptions import NotFoundError
from app.core.gateway import Gateway
from app.models.choice import Choice


class ChoiceRepository:
    """Repository for answer choices, always scoped to a question"""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    def _insert_statement(self, choice_data: dict, choice_id: str, now: int):
        return insert(Choice).values(
            id=choice_id,
            question_id=choice_data["question_id"],
            choice_text=choice_data["choice_text"],
            choice_order=choice_data["choice_order"],
            is_correct=bool(choice_data.get("is_correct", False)),
            created_at=now,
            updated_at=now,
        )

    def create(
        self, question_id: str, choice_text: str, choice_order: int, is_correct: bool
    ) -> Choice:
        """Create a single choice"""
        choice_id = self.gateway.new_id()
        self.gateway.mutate(
            self._insert_statement(
                {
                    "question_id": question_id,
                    "choice_text": choice_text,
                    "choice_order": choice_order,
                    "is_correct": is_correct,
                },
                choice_id,
                clock.now_ts(),
            )
        )
        return self.get_by_id(choice_id)

    def create_batch(self, choices: Sequence[dict]) -> List[str]:
        """Insert many choices atomically and return their ids in input order.

        Each dict carries question_id, choice_text, choice_order and is_correct.
        """
        now = clock.now_ts()
        choice_ids = [self.gateway.new_id() for _ in choices]
        self.gateway.batch(
            [
                self._insert_statement(choice_data, choice_id, now)
                for choice_data, choice_id in zip(choices, choice_ids)
            ]
        )
        return choice_ids

    def get_by_id(self, choice_id: str) -> Optional[Choice]:
        return self.gateway.query_first(select(Choice).where(Choice.id == choice_id))

    def list_by_question(self, question_id: str) -> List[Choice]:
        """Choices of one question ordered by choice_order"""
        return self.gateway.query(
            select(Choice)
            .where(Choice.question_id == question_id)
            .order_by(Choice.choice_order.asc())
        )

    def list_by_questions(self, question_ids: Sequence[str]) -> List[Choice]:
        """Choices of several questions in one round trip"""
        if not question_ids:
            return []
        return self.gateway.query(
            select(Choice)
            .where(Choice.question_id.in_(list(question_ids)))
            .order_by(Choice.question_id, Choice.choice_order.asc())
        )

    def update(self, choice_id: str, update_data: dict) -> Choice:
        """Update choice_text / choice_order / is_correct.

        Keys absent from ``update_data`` are left untouched; an empty dict
        returns the current row without writing.
        """
        values = {
            field: update_data[field]
            for field in ("choice_text", "choice_order", "is_correct")
            if field in update_data
        }
        if not values:
            choice = self.get_by_id(choice_id)
            if choice is None:
                raise NotFoundError(f"Choice {choice_id} not found")
            return choice

        values["updated_at"] = clock.now_ts()
        result = self.gateway.mutate(
            update(Choice).where(Choice.id == choice_id).values(**values)
        )
        if result.changed_count == 0:
            raise NotFoundError(f"Choice {choice_id} not found")
        return self.get_by_id(choice_id)

    def delete(self, choice_id: str) -> None:
        result = self.gateway.mutate(delete(Choice).where(Choice.id == choice_id))
        if result.changed_count == 0:
            raise NotFoundError(f"Choice {choice_id} not found")

    def delete_all_by_question(self, question_id: str) -> int:
        """Delete every choice of a question, returning how many were removed"""
        result = self.gateway.mutate(
            delete(Choice).where(Choice.question_id == question_id)
        )
        return result.changed_count
