from typing import List, Optional

from pydantic import BaseModel, Field


class AnswerSubmission(BaseModel):
    question_id: str = Field(..., min_length=1)
    choice_id: Optional[str] = Field(None, description="Omit to leave unanswered")


class AttemptSubmit(BaseModel):
    responses: List[AnswerSubmission] = Field(default_factory=list)


class AttemptRecord(BaseModel):
    id: str
    user_id: str
    quiz_id: str
    score: int
    total_points: int
    percentage: float
    started_at: int
    submitted_at: Optional[int] = None
    time_taken_seconds: Optional[int] = None

    class Config:
        from_attributes = True


class AnswerRecord(BaseModel):
    id: str
    attempt_id: str
    question_id: str
    choice_id: Optional[str] = None
    is_correct: bool
    points_earned: int

    class Config:
        from_attributes = True


class QuestionResultResponse(BaseModel):
    question_id: str
    is_correct: bool
    points_earned: int
    selected_choice_id: Optional[str] = None
    correct_choice_id: Optional[str] = None

    class Config:
        from_attributes = True


class ScoringResultResponse(BaseModel):
    score: int
    total_points: int
    percentage: float
    question_results: List[QuestionResultResponse]

    class Config:
        from_attributes = True


class SubmissionResponse(BaseModel):
    attempt: AttemptRecord
    scoring_result: ScoringResultResponse


class AttemptResultsResponse(BaseModel):
    attempt: AttemptRecord
    responses: List[AnswerRecord]
    question_results: List[QuestionResultResponse]
