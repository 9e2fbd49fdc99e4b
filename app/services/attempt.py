import logging
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from app.core import clock
from app.core.auth import require_user
from app.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.core.gateway import Gateway
from app.domain.quiz_domain import QuizDomain
from app.domain.scoring import QuestionResult, first_correct_choice_id, score_attempt
from app.models.attempt import Attempt
from app.repositories.attempt_repository import AttemptRepository
from app.repositories.choice_repository import ChoiceRepository
from app.repositories.question_repository import QuestionRepository
from app.repositories.quiz_repository import QuizRepository
from app.schemas.attempt import (
    AnswerRecord,
    AnswerSubmission,
    AttemptRecord,
    AttemptResultsResponse,
    QuestionResultResponse,
    ScoringResultResponse,
    SubmissionResponse,
)

logger = logging.getLogger(__name__)


class AttemptService:
    """Attempt lifecycle: InProgress -> Submitted, scored exactly once"""

    def __init__(self, db: Session):
        self.gateway = Gateway(db)
        self.attempts = AttemptRepository(self.gateway)
        self.quizzes = QuizRepository(self.gateway)
        self.questions = QuestionRepository(self.gateway)
        self.choices = ChoiceRepository(self.gateway)

    def _load_owned_attempt(
        self, user_id: str, attempt_id: str, action: str, reveal_missing: bool = True
    ) -> Attempt:
        """Load an attempt owned by ``user_id``.

        With ``reveal_missing=False`` a missing attempt is reported like one
        owned by someone else, so reads do not disclose which ids exist.
        """
        attempt = self.attempts.get_by_id(attempt_id)
        if attempt is None and reveal_missing:
            raise NotFoundError("Attempt not found")
        if attempt is None or attempt.user_id != user_id:
            logger.warning(f"⛔ User {user_id} may not {action} attempt {attempt_id}")
            raise AuthorizationError(
                f"You do not have permission to {action} this attempt"
            )
        return attempt

    def start(self, user_id: Optional[str], quiz_id: str) -> AttemptRecord:
        """Start an attempt against an active, scoreable quiz"""
        user_id = require_user(user_id)
        if not self.quizzes.exists(quiz_id):
            raise NotFoundError("Quiz not found")

        questions = self.questions.list_by_quiz(quiz_id)
        if not questions:
            raise ValidationError("Cannot start attempt: Quiz has no questions")

        choices_by_question = QuizDomain.group_choices(
            self.choices.list_by_questions([q.id for q in questions])
        )
        for question in questions:
            if not choices_by_question.get(question.id):
                raise ValidationError(
                    f'Cannot start attempt: Question "{question.question_text[:50]}" '
                    "has no choices"
                )

        total_points = sum(question.points or 0 for question in questions)
        attempt = self.attempts.create(
            {
                "user_id": user_id,
                "quiz_id": quiz_id,
                "total_points": total_points,
                "question_ids": [question.id for question in questions],
            }
        )
        logger.info(f"▶️ Attempt {attempt.id} started by {user_id} on quiz {quiz_id}")
        return AttemptRecord.model_validate(attempt)

    def submit(
        self,
        user_id: Optional[str],
        attempt_id: str,
        responses: Sequence[AnswerSubmission],
    ) -> SubmissionResponse:
        """Score and finalize an attempt; a second submission is a conflict"""
        user_id = require_user(user_id)
        attempt = self._load_owned_attempt(user_id, attempt_id, "submit")
        if attempt.is_submitted:
            raise ConflictError("Attempt has already been submitted")

        started_at = attempt.started_at
        questions = self.questions.list_by_quiz(attempt.quiz_id)
        if self._questions_changed(attempt, questions):
            logger.warning(f"⚠️ Quiz {attempt.quiz_id} changed during attempt {attempt_id}")
            raise ConflictError(
                "The quiz was edited after this attempt started; start a new attempt"
            )

        choices_by_question = QuizDomain.group_choices(
            self.choices.list_by_questions([q.id for q in questions])
        )
        response_map: Dict[str, Optional[str]] = {
            response.question_id: response.choice_id for response in responses
        }
        result = score_attempt(questions, choices_by_question, response_map)
        if result.total_points != attempt.total_points:
            logger.warning(
                f"⚠️ Quiz {attempt.quiz_id} points changed during attempt {attempt_id}"
            )
            raise ConflictError(
                "The quiz was edited after this attempt started; start a new attempt"
            )

        now = clock.now_ts()
        with self.gateway.transaction():
            self.attempts.insert_responses(
                [
                    {
                        "attempt_id": attempt_id,
                        "question_id": question_result.question_id,
                        "choice_id": question_result.selected_choice_id,
                        "is_correct": question_result.is_correct,
                        "points_earned": question_result.points_earned,
                        "response_order": position,
                    }
                    for position, question_result in enumerate(
                        result.question_results, start=1
                    )
                ]
            )
            finalized = self.attempts.finalize(
                attempt_id,
                {
                    "score": result.score,
                    "percentage": result.percentage,
                    "submitted_at": now,
                    "time_taken_seconds": max(now - started_at, 0),
                },
            )
            if not finalized:
                # Lost the race against a concurrent submission
                logger.warning(f"⚠️ Attempt {attempt_id} was submitted concurrently")
                raise ConflictError("Attempt has already been submitted")

        logger.info(
            f"✅ Attempt {attempt_id} submitted: {result.score}/{result.total_points} "
            f"({result.percentage:.1f}%)"
        )
        return SubmissionResponse(
            attempt=AttemptRecord.model_validate(self.attempts.get_by_id(attempt_id)),
            scoring_result=ScoringResultResponse.model_validate(result),
        )

    @staticmethod
    def _questions_changed(attempt, questions) -> bool:
        """True when the quiz's question set differs from the one at start"""
        if attempt.question_ids is None:
            return any(question.created_at > attempt.started_at for question in questions)
        return [question.id for question in questions] != list(attempt.question_ids)

    def get_attempt(self, user_id: Optional[str], attempt_id: str) -> AttemptRecord:
        user_id = require_user(user_id)
        return AttemptRecord.model_validate(
            self._load_owned_attempt(user_id, attempt_id, "view", reveal_missing=False)
        )

    def get_results(self, user_id: Optional[str], attempt_id: str) -> AttemptResultsResponse:
        """Stored responses plus per-question detail.

        ``correct_choice_id`` is looked up from the question's current choices
        and is None when the question no longer exists.
        """
        user_id = require_user(user_id)
        attempt = self._load_owned_attempt(
            user_id, attempt_id, "view", reveal_missing=False
        )
        responses = self.attempts.list_responses(attempt_id)

        choices_by_question = QuizDomain.group_choices(
            self.choices.list_by_questions([r.question_id for r in responses])
        )
        question_results: List[QuestionResultResponse] = []
        for response in responses:
            question_result = QuestionResult(
                question_id=response.question_id,
                is_correct=bool(response.is_correct),
                points_earned=response.points_earned,
                selected_choice_id=response.choice_id,
                correct_choice_id=first_correct_choice_id(
                    choices_by_question.get(response.question_id, [])
                ),
            )
            question_results.append(QuestionResultResponse.model_validate(question_result))

        return AttemptResultsResponse(
            attempt=AttemptRecord.model_validate(attempt),
            responses=[AnswerRecord.model_validate(r) for r in responses],
            question_results=question_results,
        )

    def list_for_user(self, user_id: Optional[str]) -> List[AttemptRecord]:
        """All of a user's attempts, newest first"""
        user_id = require_user(user_id)
        return [
            AttemptRecord.model_validate(attempt)
            for attempt in self.attempts.list_by_user(user_id)
        ]
