from uuid import uuid4

from sqlalchemy import String, Boolean, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

class ResultQuestion(Base):
    __tablename__ = "result_question"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    result_id: Mapped[str] = mapped_column(String(36), ForeignKey("result.id", ondelete="CASCADE"), nullable=False)
    question_id: Mapped[str] = mapped_column(String(36), ForeignKey("question.id", ondelete="CASCADE"), nullable=False)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    result: Mapped["Result"] = relationship("Result", back_populates="questions", passive_deletes=True)
    answers: Mapped[list["ResultAnswer"]] = relationship(
        "ResultAnswer",
        back_populates="result_question",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
