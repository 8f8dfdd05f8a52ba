from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import String, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

class Result(Base):
    __tablename__ = "result"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    student_id: Mapped[str] = mapped_column(String(36), ForeignKey("student.id", ondelete="CASCADE"), nullable=False)
    test_id: Mapped[str] = mapped_column(String(36), ForeignKey("test.id", ondelete="CASCADE"), nullable=False)
    correct_answers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    student: Mapped["Student"] = relationship("Student", passive_deletes=True)
    test: Mapped["Test"] = relationship("Test", passive_deletes=True)
    questions: Mapped[list["ResultQuestion"]] = relationship(
        "ResultQuestion",
        back_populates="result",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
