from typing import Optional
from uuid import uuid4

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

class Test(Base):
    __tablename__ = "test"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    time_limit: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    subject_id: Mapped[str] = mapped_column(String(36), ForeignKey("subject.id", ondelete="CASCADE"), nullable=False)

    subject: Mapped["Subject"] = relationship("Subject", passive_deletes=True)
    questions: Mapped[list["Question"]] = relationship(
        "Question",
        back_populates="test",
        cascade="all, delete-orphan",
        passive_deletes=True
    )
