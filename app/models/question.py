from sqlalchemy import Column, ForeignKey, Index, Integer, String, Text

from app.core.database import Base


class Question(Base):
    __tablename__ = "questions"

    id = Column(String(36), primary_key=True)
    quiz_id = Column(
        String(36), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    question_text = Column(Text, nullable=False)
    # 1-based position within the quiz
    question_order = Column(Integer, nullable=False)
    points = Column(Integer, default=1)
    created_at = Column(Integer, nullable=False)
    updated_at = Column(Integer, nullable=False)

    __table_args__ = (
        Index("idx_questions_quiz_order", "quiz_id", "question_order"),
    )
