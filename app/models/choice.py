from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, Text

from app.core.database import Base


class Choice(Base):
    __tablename__ = "choices"

    id = Column(String(36), primary_key=True)
    question_id = Column(
        String(36),
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    choice_text = Column(Text, nullable=False)
    # 1..4 within the question
    choice_order = Column(Integer, nullable=False)
    is_correct = Column(Boolean, default=False)
    created_at = Column(Integer, nullable=False)
    updated_at = Column(Integer, nullable=False)

    __table_args__ = (
        Index("idx_choices_question_order", "question_id", "choice_order"),
    )
