from typing import Optional
from uuid import uuid4

from sqlalchemy import String, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

class Student(Base):
    __tablename__ = "student"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    telegram: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    login: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    hashed_refresh_token: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    group_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("group.id", ondelete="SET NULL"), nullable=True)
    image_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("image.id", ondelete="SET NULL"), nullable=True)

    group: Mapped[Optional["Group"]] = relationship("Group")
    image: Mapped[Optional["Image"]] = relationship("Image")
