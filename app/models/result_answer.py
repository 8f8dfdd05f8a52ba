from uuid import uuid4

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

class ResultAnswer(Base):
    __tablename__ = "result_answer"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    result_question_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("result_question.id", ondelete="CASCADE"), nullable=False
    )
    answer_id: Mapped[str] = mapped_column(String(36), ForeignKey("answer.id", ondelete="CASCADE"), nullable=False)

    result_question: Mapped["ResultQuestion"] = relationship(
        "ResultQuestion", back_populates="answers", passive_deletes=True
    )
