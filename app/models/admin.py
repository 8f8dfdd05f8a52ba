from typing import Optional
from uuid import uuid4

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

class Admin(Base):
    __tablename__ = "admin"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    login: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    hashed_refresh_token: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    role_id: Mapped[int] = mapped_column(Integer, ForeignKey("role.id", ondelete="RESTRICT"), nullable=False)
    image_id: Mapped[Optional[str]] = mapped_column(String(36), ForeignKey("image.id", ondelete="SET NULL"), nullable=True)

    role: Mapped["Role"] = relationship("Role")
    image: Mapped[Optional["Image"]] = relationship("Image")
