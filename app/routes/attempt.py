from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_id
from app.core.database import get_db
from app.schemas.attempt import (
    AttemptRecord,
    AttemptResultsResponse,
    AttemptSubmit,
    SubmissionResponse,
)
from app.schemas.quiz import SuccessResponse
from app.services.attempt import AttemptService

router = APIRouter(prefix="/attempts", tags=["attempt"])


@router.get("", response_model=SuccessResponse[List[AttemptRecord]])
def list_my_attempts(
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """List the current user's attempts, newest first"""
    service = AttemptService(db)
    return SuccessResponse(data=service.list_for_user(user_id))


@router.get("/{attempt_id}", response_model=SuccessResponse[AttemptRecord])
def get_attempt(
    attempt_id: str,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    service = AttemptService(db)
    return SuccessResponse(data=service.get_attempt(user_id, attempt_id))


@router.post("/{attempt_id}/submit", response_model=SuccessResponse[SubmissionResponse])
def submit_attempt(
    attempt_id: str,
    submission: AttemptSubmit,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """
    Submit answers for an attempt

    Questions without an entry are recorded as unanswered. An attempt can be
    submitted once; later submissions return a `conflict` error.
    """
    service = AttemptService(db)
    return SuccessResponse(
        data=service.submit(user_id, attempt_id, submission.responses)
    )


@router.get(
    "/{attempt_id}/results", response_model=SuccessResponse[AttemptResultsResponse]
)
def get_attempt_results(
    attempt_id: str,
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """Get a submitted attempt's per-question results"""
    service = AttemptService(db)
    return SuccessResponse(data=service.get_results(user_id, attempt_id))
