from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from app.core.exceptions import ValidationError
from app.models.choice import Choice
from app.models.question import Question
from app.models.quiz import Quiz, QuizStatus
from app.schemas.quiz import (
    ChoiceResponse,
    QuestionCreate,
    QuestionResponse,
    QuizDetailResponse,
    QuizResponse,
    QuizSummaryResponse,
)

MIN_CHOICES = 2
MAX_CHOICES = 4


class QuizDomain:
    """Domain rules and mapping for Quiz/Question/Choice"""

    @staticmethod
    def validate_questions(questions: Sequence[QuestionCreate]) -> None:
        """Structural invariants of a question set.

        At least one question; every question has 2-4 choices and at least
        one of them is correct. Raises ValidationError naming the first
        offending question (1-based).
        """
        if not questions:
            raise ValidationError("At least one question is required")

        for position, question in enumerate(questions, start=1):
            count = len(question.choices)
            if count < MIN_CHOICES:
                raise ValidationError(
                    f"Question {position} must have at least {MIN_CHOICES} choices"
                )
            if count > MAX_CHOICES:
                raise ValidationError(
                    f"Question {position} can have at most {MAX_CHOICES} choices"
                )
            if not any(choice.is_correct for choice in question.choices):
                raise ValidationError(
                    f"Question {position} must have at least one correct choice"
                )
            if question.points is not None and question.points <= 0:
                raise ValidationError(f"Question {position} must be worth at least 1 point")

    @staticmethod
    def question_rows(quiz_id: str, questions: Sequence[QuestionCreate]) -> List[dict]:
        """Question insert data; question_order is the 1-based input position"""
        return [
            {
                "quiz_id": quiz_id,
                "question_text": question.question_text,
                "question_order": index + 1,
                "points": question.points or 1,
            }
            for index, question in enumerate(questions)
        ]

    @staticmethod
    def choice_rows(
        question_ids: Sequence[str], questions: Sequence[QuestionCreate]
    ) -> List[dict]:
        """Choice insert data mapped onto freshly created question ids"""
        rows = []
        for question_id, question in zip(question_ids, questions):
            for index, choice in enumerate(question.choices):
                rows.append(
                    {
                        "question_id": question_id,
                        "choice_text": choice.choice_text,
                        "choice_order": index + 1,
                        "is_correct": choice.is_correct,
                    }
                )
        return rows

    @staticmethod
    def group_choices(choices: Sequence[Choice]) -> Dict[str, List[Choice]]:
        """question id -> choices, keeping the incoming order"""
        grouped: Dict[str, List[Choice]] = defaultdict(list)
        for choice in choices:
            grouped[choice.question_id].append(choice)
        return dict(grouped)

    @staticmethod
    def to_response(quiz: Quiz) -> QuizResponse:
        return QuizResponse(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            instructions=quiz.instructions,
            created_by=quiz.created_by,
            created_at=quiz.created_at,
            updated_at=quiz.updated_at,
            is_active=quiz.status == QuizStatus.ACTIVE,
        )

    @staticmethod
    def to_summary_list(rows: Sequence[Tuple[Quiz, int]]) -> List[QuizSummaryResponse]:
        return [
            QuizSummaryResponse(
                **QuizDomain.to_response(quiz).model_dump(), question_count=count
            )
            for quiz, count in rows
        ]

    @staticmethod
    def to_detail(
        quiz: Quiz,
        questions: Sequence[Question],
        choices_by_question: Dict[str, List[Choice]],
    ) -> QuizDetailResponse:
        return QuizDetailResponse(
            **QuizDomain.to_response(quiz).model_dump(),
            questions=[
                QuestionResponse(
                    id=question.id,
                    quiz_id=question.quiz_id,
                    question_text=question.question_text,
                    question_order=question.question_order,
                    points=question.points,
                    choices=[
                        ChoiceResponse.model_validate(choice)
                        for choice in choices_by_question.get(question.id, [])
                    ],
                )
                for question in questions
            ],
        )
