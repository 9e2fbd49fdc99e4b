"""Attempt scoring.

``score_attempt`` is a pure function: it never touches storage and returns the
same result for the same arguments. Questions and choices only need ``id``
plus ``points`` / ``is_correct`` attributes, so ORM rows and plain dataclasses
both work.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence


@dataclass(frozen=True)
class QuestionResult:
    question_id: str
    is_correct: bool
    points_earned: int
    selected_choice_id: Optional[str]
    correct_choice_id: Optional[str]


@dataclass(frozen=True)
class ScoringResult:
    score: int
    total_points: int
    percentage: float
    question_results: List[QuestionResult] = field(default_factory=list)


def compute_percentage(score: int, total_points: int) -> float:
    """score / total_points as 0-100, and 0 when there is nothing to earn"""
    if total_points <= 0:
        return 0.0
    return score / total_points * 100


def first_correct_choice_id(choices: Sequence[Any]) -> Optional[str]:
    for choice in choices:
        if choice.is_correct:
            return choice.id
    return None


def score_attempt(
    questions: Sequence[Any],
    choices_by_question: Mapping[str, Sequence[Any]],
    responses: Mapping[str, Optional[str]],
) -> ScoringResult:
    """Grade one attempt.

    Args:
        questions: questions in quiz order, each with ``id`` and ``points``
        choices_by_question: question id -> its choices (``id``, ``is_correct``)
        responses: question id -> selected choice id; missing means unanswered

    Returns:
        ScoringResult with one QuestionResult per question, in quiz order
    """
    score = 0
    total_points = 0
    results = []

    for question in questions:
        points = question.points or 0
        total_points += points
        selected_choice_id = responses.get(question.id) or None
        choices = choices_by_question.get(question.id) or []

        if not choices:
            # Unscoreable question: never earns points
            results.append(
                QuestionResult(
                    question_id=question.id,
                    is_correct=False,
                    points_earned=0,
                    selected_choice_id=selected_choice_id,
                    correct_choice_id=None,
                )
            )
            continue

        selected = None
        if selected_choice_id is not None:
            selected = next((c for c in choices if c.id == selected_choice_id), None)

        is_correct = selected is not None and bool(selected.is_correct)
        points_earned = points if is_correct else 0
        score += points_earned

        results.append(
            QuestionResult(
                question_id=question.id,
                is_correct=is_correct,
                points_earned=points_earned,
                selected_choice_id=selected_choice_id,
                correct_choice_id=first_correct_choice_id(choices),
            )
        )

    return ScoringResult(
        score=score,
        total_points=total_points,
        percentage=compute_percentage(score, total_points),
        question_results=results,
    )
