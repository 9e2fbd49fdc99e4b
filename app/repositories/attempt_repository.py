from typing import List, Optional, Sequence

from sqlalchemy import insert, select, update

from app.core import clock
from app.core.gateway import Gateway
from app.models.attempt import Attempt, AttemptResponse


class AttemptRepository:
    """Repository for attempts and their per-question response rows"""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    def create(self, attempt_data: dict) -> Attempt:
        """Create an in-progress attempt from user_id/quiz_id/total_points/question_ids"""
        attempt_id = self.gateway.new_id()
        self.gateway.mutate(
            insert(Attempt).values(
                id=attempt_id,
                user_id=attempt_data["user_id"],
                quiz_id=attempt_data["quiz_id"],
                score=0,
                total_points=attempt_data["total_points"],
                question_ids=attempt_data.get("question_ids"),
                percentage=0.0,
                started_at=clock.now_ts(),
                submitted_at=None,
                time_taken_seconds=None,
            )
        )
        return self.get_by_id(attempt_id)

    def get_by_id(self, attempt_id: str) -> Optional[Attempt]:
        return self.gateway.query_first(select(Attempt).where(Attempt.id == attempt_id))

    def list_by_user(self, user_id: str) -> List[Attempt]:
        """Attempts of a user, newest first"""
        return self.gateway.query(
            select(Attempt)
            .where(Attempt.user_id == user_id)
            .order_by(Attempt.started_at.desc())
        )

    def list_by_quiz(self, quiz_id: str) -> List[Attempt]:
        """Attempts against a quiz, newest first"""
        return self.gateway.query(
            select(Attempt)
            .where(Attempt.quiz_id == quiz_id)
            .order_by(Attempt.started_at.desc())
        )

    def insert_responses(self, responses: Sequence[dict]) -> List[str]:
        """Write response rows in one atomic batch, returning their ids.

        Rows are numbered in the given order unless ``response_order`` is set.
        """
        response_ids = [self.gateway.new_id() for _ in responses]
        self.gateway.batch(
            [
                insert(AttemptResponse).values(
                    id=response_id,
                    attempt_id=response["attempt_id"],
                    question_id=response["question_id"],
                    choice_id=response.get("choice_id"),
                    is_correct=bool(response["is_correct"]),
                    points_earned=response["points_earned"],
                    response_order=response.get("response_order", position),
                )
                for position, (response, response_id) in enumerate(
                    zip(responses, response_ids), start=1
                )
            ]
        )
        return response_ids

    def list_responses(self, attempt_id: str) -> List[AttemptResponse]:
        """Responses of an attempt in the quiz order they were submitted in"""
        return self.gateway.query(
            select(AttemptResponse)
            .where(AttemptResponse.attempt_id == attempt_id)
            .order_by(AttemptResponse.response_order, AttemptResponse.id)
        )

    def finalize(self, attempt_id: str, result_data: dict) -> bool:
        """Record the final score, only if the attempt is still in progress.

        Returns False when no row was updated, i.e. the attempt was already
        submitted (possibly by a concurrent request) or does not exist.
        """
        result = self.gateway.mutate(
            update(Attempt)
            .where(Attempt.id == attempt_id, Attempt.submitted_at.is_(None))
            .values(
                score=result_data["score"],
                percentage=result_data["percentage"],
                submitted_at=result_data["submitted_at"],
                time_taken_seconds=result_data["time_taken_seconds"],
            )
        )
        return result.changed_count == 1

    def is_owner(self, attempt_id: str, user_id: str) -> bool:
        attempt = self.get_by_id(attempt_id)
        return attempt is not None and attempt.user_id == user_id
