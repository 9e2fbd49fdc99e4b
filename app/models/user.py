from sqlalchemy import Column, Integer, String

from app.core.database import Base


class User(Base):
    """Account row; owned by the external auth collaborator"""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    username = Column(String, unique=True, nullable=True, index=True)
    email = Column(String, unique=True, nullable=True, index=True)
    password_hash = Column(String, nullable=False)
    created_at = Column(Integer, nullable=False)
    updated_at = Column(Integer, nullable=False)
    last_login_at = Column(Integer, nullable=True)
    is_active = Column(Integer, default=1)
