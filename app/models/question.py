from uuid import uuid4

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

class Question(Base):
    __tablename__ = "question"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    question: Mapped[str] = mapped_column(String, nullable=False)
    test_id: Mapped[str] = mapped_column(String(36), ForeignKey("test.id", ondelete="CASCADE"), nullable=False)

    test: Mapped["Test"] = relationship("Test", back_populates="questions", passive_deletes=True)
    answers: Mapped[list["Answer"]] = relationship(
        "Answer",
        back_populates="question",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
