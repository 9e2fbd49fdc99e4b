from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator

T = TypeVar("T")


def _strip(v):
    return v.strip() if isinstance(v, str) else v


def _blank_to_none(v):
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class SuccessResponse(BaseModel, Generic[T]):
    success: bool = True
    data: T


class ChoiceCreate(BaseModel):
    choice_text: str = Field(..., min_length=1, max_length=500)
    is_correct: bool = False

    @field_validator("choice_text", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class QuestionCreate(BaseModel):
    question_text: str = Field(..., min_length=1, max_length=1000)
    points: Optional[int] = Field(None, gt=0, description="Defaults to 1")
    choices: List[ChoiceCreate] = Field(
        default_factory=list, description="2 to 4 choices, at least one correct"
    )

    @field_validator("question_text", mode="before")
    @classmethod
    def strip_text(cls, v):
        return _strip(v)


class QuizCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    instructions: Optional[str] = Field(None, max_length=500)
    questions: List[QuestionCreate] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return _strip(v)

    @field_validator("description", "instructions", mode="before")
    @classmethod
    def clean_optional(cls, v):
        return _blank_to_none(v)


class QuizUpdate(BaseModel):
    """Partial update; only fields present in the request are applied.

    An explicit null clears description/instructions. When ``questions`` is
    present the whole question set is replaced.
    """

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    instructions: Optional[str] = Field(None, max_length=500)
    questions: Optional[List[QuestionCreate]] = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v):
        return _strip(v)

    @field_validator("description", "instructions", mode="before")
    @classmethod
    def clean_optional(cls, v):
        return _blank_to_none(v)


class ChoiceResponse(BaseModel):
    id: str
    question_id: str
    choice_text: str
    choice_order: int
    is_correct: bool

    class Config:
        from_attributes = True


class QuestionResponse(BaseModel):
    id: str
    quiz_id: str
    question_text: str
    question_order: int
    points: int
    choices: List[ChoiceResponse] = []


class QuizResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    created_by: str
    created_at: int
    updated_at: int
    is_active: bool

    class Config:
        from_attributes = True


class QuizSummaryResponse(QuizResponse):
    question_count: int = 0


class QuizDetailResponse(QuizResponse):
    questions: List[QuestionResponse] = []
