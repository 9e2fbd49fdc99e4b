#!/usr/bin/env python3
"""
Pytest tests for AttemptService
Start/submit lifecycle, exactly-once scoring and results
"""

from types import SimpleNamespace
from unittest.mock import patch

import pytest
from sqlalchemy import func, select

from app.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from app.models.attempt import Attempt, AttemptResponse
from app.schemas.attempt import AnswerSubmission
from app.schemas.quiz import QuizUpdate
from app.services.attempt import AttemptService
from app.services.quiz import QuizService
from tests.factories import make_question, make_quiz


def answers(*pairs):
    return [AnswerSubmission(question_id=q, choice_id=c) for q, c in pairs]


def correct_choice(question):
    return next(c.id for c in question.choices if c.is_correct)


def wrong_choice(question):
    return next(c.id for c in question.choices if not c.is_correct)


class AttemptTestBase:
    @pytest.fixture(autouse=True)
    def _setup(self, db, gateway, users, clock):
        self.gateway = gateway
        self.clock = clock
        self.quiz_service = QuizService(db)
        self.service = AttemptService(db)

    def count(self, model):
        return self.gateway.query(select(func.count()).select_from(model))[0]

    def create_quiz(self, points=(1, 2), author="alice"):
        return self.quiz_service.create_quiz(author, make_quiz(points=points))


class TestStartAttempt(AttemptTestBase):
    def test_start_sets_total_points(self):
        quiz = self.create_quiz(points=(1, 2, 3))

        attempt = self.service.start("bob", quiz.id)

        assert attempt.user_id == "bob"
        assert attempt.quiz_id == quiz.id
        assert attempt.total_points == 6
        assert attempt.score == 0
        assert attempt.percentage == 0
        assert attempt.started_at == self.clock.now
        assert attempt.submitted_at is None

    def test_requires_authentication(self):
        quiz = self.create_quiz()

        with pytest.raises(AuthorizationError):
            self.service.start(None, quiz.id)
        assert self.count(Attempt) == 0

    def test_missing_or_deleted_quiz(self):
        quiz = self.create_quiz()
        self.quiz_service.delete_quiz("alice", quiz.id)

        with pytest.raises(NotFoundError):
            self.service.start("bob", "missing")
        with pytest.raises(NotFoundError):
            self.service.start("bob", quiz.id)

    def test_quiz_without_questions(self):
        quiz_id = self.quiz_service.quizzes.create({"title": "Empty", "created_by": "alice"}).id

        with pytest.raises(ValidationError, match="no questions"):
            self.service.start("bob", quiz_id)
        assert self.count(Attempt) == 0

    def test_question_without_choices(self):
        """An unscoreable quiz never gets an attempt row"""
        quiz_id = self.quiz_service.quizzes.create({"title": "Broken", "created_by": "alice"}).id
        self.quiz_service.questions.create(quiz_id, "Where are the choices?", 1)

        with pytest.raises(ValidationError, match="has no choices"):
            self.service.start("bob", quiz_id)
        assert self.count(Attempt) == 0


class TestSubmitAttempt(AttemptTestBase):
    def test_full_correct_run(self):
        quiz = self.create_quiz(points=(1, 2))
        attempt = self.service.start("bob", quiz.id)
        q1, q2 = quiz.questions
        self.clock.advance(90)

        submission = self.service.submit(
            "bob",
            attempt.id,
            answers((q1.id, correct_choice(q1)), (q2.id, correct_choice(q2))),
        )

        result = submission.scoring_result
        assert result.score == 3
        assert result.total_points == 3
        assert result.percentage == 100
        assert [r.is_correct for r in result.question_results] == [True, True]
        assert submission.attempt.score == 3
        assert submission.attempt.percentage == 100
        assert submission.attempt.submitted_at == self.clock.now
        assert submission.attempt.time_taken_seconds == 90

    def test_partial_and_unanswered(self):
        quiz = self.create_quiz(points=(2, 3))
        attempt = self.service.start("bob", quiz.id)
        q1, q2 = quiz.questions

        submission = self.service.submit("bob", attempt.id, answers((q1.id, correct_choice(q1))))

        result = submission.scoring_result
        assert result.score == 2
        assert result.total_points == 5
        assert result.percentage == 40
        unanswered = result.question_results[1]
        assert unanswered.question_id == q2.id
        assert unanswered.selected_choice_id is None
        assert unanswered.is_correct is False
        assert unanswered.points_earned == 0

    def test_one_response_row_per_question(self):
        quiz = self.create_quiz(points=(1, 1, 1))
        attempt = self.service.start("bob", quiz.id)
        q1 = quiz.questions[0]

        self.service.submit("bob", attempt.id, answers((q1.id, wrong_choice(q1))))

        rows = self.service.attempts.list_responses(attempt.id)
        assert len(rows) == 3
        assert {r.question_id for r in rows} == {q.id for q in quiz.questions}
        assert sum(r.points_earned for r in rows) == 0

    def test_unknown_question_ids_are_ignored(self):
        quiz = self.create_quiz(points=(1,))
        attempt = self.service.start("bob", quiz.id)

        submission = self.service.submit("bob", attempt.id, answers(("not-a-question", "x")))

        assert submission.scoring_result.score == 0
        assert len(self.service.attempts.list_responses(attempt.id)) == 1

    def test_second_submit_is_conflict(self):
        quiz = self.create_quiz(points=(1, 2))
        attempt = self.service.start("bob", quiz.id)
        q1, q2 = quiz.questions
        self.service.submit("bob", attempt.id, answers((q1.id, correct_choice(q1))))

        with pytest.raises(ConflictError):
            self.service.submit(
                "bob",
                attempt.id,
                answers((q1.id, correct_choice(q1)), (q2.id, correct_choice(q2))),
            )

        stored = self.service.get_attempt("bob", attempt.id)
        assert stored.score == 1
        assert self.count(AttemptResponse) == 2

    def test_racing_submit_loses_at_finalize(self):
        """Both requests read an in-progress attempt; only one may finalize"""
        quiz = self.create_quiz(points=(1, 2))
        attempt = self.service.start("bob", quiz.id)
        q1, q2 = quiz.questions
        stale_view = SimpleNamespace(
            id=attempt.id,
            user_id="bob",
            quiz_id=quiz.id,
            started_at=attempt.started_at,
            total_points=attempt.total_points,
            question_ids=[q1.id, q2.id],
            submitted_at=None,
            is_submitted=False,
        )
        self.service.submit("bob", attempt.id, answers((q1.id, wrong_choice(q1))))

        with patch.object(self.service.attempts, "get_by_id", return_value=stale_view):
            with pytest.raises(ConflictError):
                self.service.submit(
                    "bob",
                    attempt.id,
                    answers((q1.id, correct_choice(q1)), (q2.id, correct_choice(q2))),
                )

        stored = self.service.get_attempt("bob", attempt.id)
        assert stored.score == 0
        # The loser's response rows were rolled back with it
        assert self.count(AttemptResponse) == 2

    def test_other_user_cannot_submit(self):
        quiz = self.create_quiz()
        attempt = self.service.start("bob", quiz.id)

        with pytest.raises(AuthorizationError):
            self.service.submit("alice", attempt.id, [])
        assert self.service.get_attempt("bob", attempt.id).submitted_at is None

    def test_missing_attempt(self):
        with pytest.raises(NotFoundError):
            self.service.submit("bob", "missing", [])

    def test_anonymous_submit(self):
        with pytest.raises(AuthorizationError):
            self.service.submit(None, "anything", [])

    def test_quiz_replaced_mid_attempt_is_conflict(self):
        quiz = self.create_quiz()
        attempt = self.service.start("bob", quiz.id)
        self.clock.advance(10)
        self.quiz_service.update_quiz(
            "alice", quiz.id, QuizUpdate(questions=[make_question(points=5)])
        )

        with pytest.raises(ConflictError, match="edited"):
            self.service.submit("bob", attempt.id, [])
        assert self.service.get_attempt("bob", attempt.id).submitted_at is None

    def test_quiz_replaced_in_the_same_second_is_conflict(self):
        """The question set is compared by id, not by timestamp"""
        quiz = self.create_quiz(points=(1, 2))
        attempt = self.service.start("bob", quiz.id)
        detail = self.quiz_service.update_quiz(
            "alice", quiz.id, QuizUpdate(questions=[make_question(points=5)])
        )
        new_question = detail.questions[0]

        with pytest.raises(ConflictError, match="edited"):
            self.service.submit(
                "bob", attempt.id, answers((new_question.id, correct_choice(new_question)))
            )

        stored = self.service.get_attempt("bob", attempt.id)
        assert stored.submitted_at is None
        assert stored.score == 0
        assert stored.total_points == 3
        assert self.count(AttemptResponse) == 0

    def test_points_changed_mid_attempt_is_conflict(self):
        quiz = self.create_quiz(points=(1, 2))
        attempt = self.service.start("bob", quiz.id)
        q1 = quiz.questions[0]
        self.quiz_service.questions.update(q1.id, {"points": 10})

        with pytest.raises(ConflictError):
            self.service.submit("bob", attempt.id, answers((q1.id, correct_choice(q1))))

        assert self.service.get_attempt("bob", attempt.id).submitted_at is None

    def test_metadata_edit_mid_attempt_is_fine(self):
        quiz = self.create_quiz(points=(1,))
        attempt = self.service.start("bob", quiz.id)
        self.clock.advance(10)
        self.quiz_service.update_quiz("alice", quiz.id, QuizUpdate(title="Renamed"))

        submission = self.service.submit("bob", attempt.id, [])

        assert submission.attempt.submitted_at is not None


class TestAttemptResults(AttemptTestBase):
    def _submitted(self):
        quiz = self.create_quiz(points=(1, 2))
        attempt = self.service.start("bob", quiz.id)
        q1, q2 = quiz.questions
        self.service.submit(
            "bob", attempt.id, answers((q1.id, correct_choice(q1)), (q2.id, wrong_choice(q2)))
        )
        return quiz, attempt

    def test_results_include_correct_choices(self):
        quiz, attempt = self._submitted()
        q1, q2 = quiz.questions

        results = self.service.get_results("bob", attempt.id)

        assert results.attempt.score == 1
        assert len(results.responses) == 2
        by_question = {r.question_id: r for r in results.question_results}
        assert by_question[q1.id].is_correct is True
        assert by_question[q2.id].is_correct is False
        assert by_question[q2.id].selected_choice_id == wrong_choice(q2)
        assert by_question[q2.id].correct_choice_id == correct_choice(q2)

    def test_results_are_private(self):
        _, attempt = self._submitted()

        with pytest.raises(AuthorizationError):
            self.service.get_results("alice", attempt.id)
        with pytest.raises(AuthorizationError):
            self.service.get_attempt("alice", attempt.id)

    def test_missing_and_foreign_attempts_look_alike(self):
        """Reads don't disclose whether an attempt id exists"""
        _, attempt = self._submitted()

        for attempt_id in (attempt.id, "missing"):
            with pytest.raises(AuthorizationError):
                self.service.get_results("alice", attempt_id)
            with pytest.raises(AuthorizationError):
                self.service.get_attempt("alice", attempt_id)

    def test_results_follow_quiz_order(self):
        quiz = self.create_quiz(points=(1, 2, 3, 4))
        attempt = self.service.start("bob", quiz.id)
        last = quiz.questions[-1]
        self.service.submit("bob", attempt.id, answers((last.id, correct_choice(last))))

        results = self.service.get_results("bob", attempt.id)

        expected = [q.id for q in quiz.questions]
        assert [r.question_id for r in results.responses] == expected
        assert [r.question_id for r in results.question_results] == expected

    def test_results_survive_question_replacement(self):
        """Submitted responses stay readable after the quiz is rewritten"""
        quiz, attempt = self._submitted()
        self.clock.advance(5)
        self.quiz_service.update_quiz("alice", quiz.id, QuizUpdate(questions=[make_question()]))

        results = self.service.get_results("bob", attempt.id)

        assert {r.question_id for r in results.responses} == {q.id for q in quiz.questions}
        assert all(r.correct_choice_id is None for r in results.question_results)
        assert results.attempt.score == 1

    def test_attempts_survive_quiz_deletion(self):
        quiz, attempt = self._submitted()
        self.quiz_service.delete_quiz("alice", quiz.id)

        results = self.service.get_results("bob", attempt.id)

        assert results.attempt.id == attempt.id
        assert [a.id for a in self.service.list_for_user("bob")] == [attempt.id]

    def test_list_for_user_newest_first(self):
        quiz = self.create_quiz()
        first = self.service.start("bob", quiz.id)
        self.clock.advance(30)
        second = self.service.start("bob", quiz.id)
        self.service.start("alice", quiz.id)

        assert [a.id for a in self.service.list_for_user("bob")] == [second.id, first.id]
        with pytest.raises(AuthorizationError):
            self.service.list_for_user(None)
