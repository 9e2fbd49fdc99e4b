from typing import Optional

from sqlalchemy import insert, select

from app.core import clock
from app.core.gateway import Gateway
from app.models.user import User


class UserRepository:
    """Minimal access to the users table; accounts are managed elsewhere"""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get an active user by ID"""
        return self.gateway.query_first(
            select(User).where(User.id == user_id, User.is_active == 1)
        )

    def create(self, user_data: dict) -> User:
        user_id = user_data.get("id") or self.gateway.new_id()
        now = clock.now_ts()
        self.gateway.mutate(
            insert(User).values(
                id=user_id,
                first_name=user_data["first_name"],
                last_name=user_data["last_name"],
                username=user_data.get("username"),
                email=user_data.get("email"),
                password_hash=user_data["password_hash"],
                created_at=now,
                updated_at=now,
                is_active=1,
            )
        )
        return self.get_by_id(user_id)
