from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.database import get_db
from app.schemas.attempt import AttemptRecord
from app.schemas.quiz import (
    QuizCreate,
    QuizDetailResponse,
    QuizSummaryResponse,
    QuizUpdate,
    SuccessResponse,
)
from app.services.attempt import AttemptService
from app.services.quiz import QuizService

router = APIRouter(prefix="/quizzes", tags=["quiz"])


@router.post(
    "",
    response_model=SuccessResponse[QuizDetailResponse],
    status_code=status.HTTP_201_CREATED,
)
def create_quiz(
    quiz: QuizCreate,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """
    Create a quiz with its questions and choices

    Questions keep the order in which they are sent, as do the choices of
    each question. Every question needs 2-4 choices with at least one correct.
    """
    service = QuizService(db)
    return SuccessResponse(data=service.create_quiz(user_id, quiz))


@router.get("", response_model=SuccessResponse[List[QuizSummaryResponse]])
def list_quizzes(db: Session = Depends(get_db)):
    """List active quizzes, newest first, with question counts"""
    service = QuizService(db)
    return SuccessResponse(data=service.list_quizzes())


@router.get("/mine", response_model=SuccessResponse[List[QuizSummaryResponse]])
def list_my_quizzes(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """List the current user's active quizzes"""
    service = QuizService(db)
    return SuccessResponse(data=service.list_my_quizzes(user_id))


@router.get("/{quiz_id}", response_model=SuccessResponse[QuizDetailResponse])
def get_quiz(quiz_id: str, db: Session = Depends(get_db)):
    """Get a quiz with its questions and choices"""
    service = QuizService(db)
    return SuccessResponse(data=service.get_quiz_detail(quiz_id))


@router.patch("/{quiz_id}", response_model=SuccessResponse[QuizDetailResponse])
def update_quiz(
    quiz_id: str,
    quiz_update: QuizUpdate,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """
    Update a quiz (owner only)

    Only the fields sent are changed. Sending `questions` replaces the whole
    question set; earlier question and choice ids stop resolving.
    """
    service = QuizService(db)
    return SuccessResponse(data=service.update_quiz(user_id, quiz_id, quiz_update))


@router.delete("/{quiz_id}", response_model=SuccessResponse[dict])
def delete_quiz(
    quiz_id: str,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """Soft delete a quiz (owner only)"""
    service = QuizService(db)
    service.delete_quiz(user_id, quiz_id)
    return SuccessResponse(data={"id": quiz_id})


@router.post(
    "/{quiz_id}/attempts",
    response_model=SuccessResponse[AttemptRecord],
    status_code=status.HTTP_201_CREATED,
)
def start_attempt(
    quiz_id: str,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """Start an attempt on a quiz"""
    service = AttemptService(db)
    return SuccessResponse(data=service.start(user_id, quiz_id))
