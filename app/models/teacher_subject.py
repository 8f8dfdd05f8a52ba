from uuid import uuid4

from sqlalchemy import String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

class TeacherSubject(Base):
    __tablename__ = "teacher_subject"
    __table_args__ = (UniqueConstraint("teacher_id", "subject_id", name="uq_teacher_subject"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    teacher_id: Mapped[str] = mapped_column(String(36), ForeignKey("teacher.id", ondelete="CASCADE"), nullable=False)
    subject_id: Mapped[str] = mapped_column(String(36), ForeignKey("subject.id", ondelete="CASCADE"), nullable=False)

    teacher: Mapped["Teacher"] = relationship("Teacher", passive_deletes=True)
    subject: Mapped["Subject"] = relationship("Subject", passive_deletes=True)
