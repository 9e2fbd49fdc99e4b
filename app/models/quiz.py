from enum import IntEnum

from sqlalchemy import Column, ForeignKey, Integer, String, Text

from app.core.database import Base


class QuizStatus(IntEnum):
    """Stored in quizzes.is_active"""

    DELETED = 0
    ACTIVE = 1


class Quiz(Base):
    __tablename__ = "quizzes"

    id = Column(String(36), primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    instructions = Column(Text, nullable=True)
    created_by = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(Integer, nullable=False, index=True)
    updated_at = Column(Integer, nullable=False)
    is_active = Column(Integer, default=int(QuizStatus.ACTIVE), index=True)

    @property
    def status(self) -> QuizStatus:
        return QuizStatus(self.is_active)
