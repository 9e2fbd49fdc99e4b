from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthorizationError
from app.core.gateway import Gateway
from app.repositories.user_repository import UserRepository


def get_current_user_id(request: Request, db: Session = Depends(get_db)) -> Optional[str]:
    """Resolve the authenticated user id, or None.

    The id arrives in the header named by ``settings.USER_ID_HEADER``; it only
    counts if it belongs to an active user.
    """
    user_id = request.headers.get(settings.USER_ID_HEADER)
    if not user_id:
        return None
    user = UserRepository(Gateway(db)).get_by_id(user_id.strip())
    return user.id if user else None


def require_user(user_id: Optional[str]) -> str:
    """Reject anonymous callers before any storage access"""
    if not user_id:
        raise AuthorizationError("Authentication required", authenticated=False)
    return user_id
