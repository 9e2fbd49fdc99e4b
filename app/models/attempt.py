from sqlalchemy import JSON, Boolean, Column, Float, ForeignKey, Integer, String

from app.core.database import Base


class Attempt(Base):
    __tablename__ = "attempts"

    id = Column(String(36), primary_key=True)
    user_id = Column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    quiz_id = Column(
        String(36), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    score = Column(Integer, nullable=False)
    total_points = Column(Integer, nullable=False)
    percentage = Column(Float, nullable=False)
    started_at = Column(Integer, nullable=False)
    # NULL while the attempt is in progress
    submitted_at = Column(Integer, nullable=True, index=True)
    time_taken_seconds = Column(Integer, nullable=True)
    # Ordered ids of the questions the attempt was started against
    question_ids = Column(JSON, nullable=True)

    @property
    def is_submitted(self) -> bool:
        return self.submitted_at is not None


class AttemptResponse(Base):
    __tablename__ = "attempt_responses"

    id = Column(String(36), primary_key=True)
    attempt_id = Column(
        String(36), ForeignKey("attempts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Historical references: kept even after the quiz replaces its questions
    question_id = Column(String(36), nullable=False, index=True)
    choice_id = Column(String(36), nullable=True)
    is_correct = Column(Boolean, nullable=False)
    points_earned = Column(Integer, nullable=False)
    # Position of the question in the quiz at submission time
    response_order = Column(Integer, nullable=True)
