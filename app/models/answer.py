from uuid import uuid4

from sqlalchemy import String, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

class Answer(Base):
    __tablename__ = "answer"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    answer: Mapped[str] = mapped_column(String, nullable=False)
    is_true: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    question_id: Mapped[str] = mapped_column(String(36), ForeignKey("question.id", ondelete="CASCADE"), nullable=False)

    question: Mapped["Question"] = relationship("Question", back_populates="answers", passive_deletes=True)
