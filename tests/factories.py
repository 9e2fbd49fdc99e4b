"""Builders for quiz payloads used across the test modules"""

from app.schemas.quiz import ChoiceCreate, QuestionCreate, QuizCreate


def make_question(text="What is 2 + 2?", points=None, correct_index=0, count=3):
    return QuestionCreate(
        question_text=text,
        points=points,
        choices=[
            ChoiceCreate(choice_text=f"Option {i + 1}", is_correct=(i == correct_index))
            for i in range(count)
        ],
    )


def make_quiz(title="Arithmetic", points=(1, 2), **kwargs):
    """Quiz with one question per entry in ``points``"""
    return QuizCreate(
        title=title,
        description=kwargs.pop("description", "Basic sums"),
        instructions=kwargs.pop("instructions", None),
        questions=[
            make_question(text=f"Question {i + 1}", points=p, **kwargs)
            for i, p in enumerate(points)
        ],
    )
