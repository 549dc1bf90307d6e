from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from academy.core.config import DEFAULT_TIMEZONE
from academy.db.base_class import Base


class AcademyClass(Base):
    __tablename__ = "classes"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    timezone: Mapped[str] = mapped_column(
        String(64), nullable=False, default=DEFAULT_TIMEZONE
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    program_id: Mapped[int | None] = mapped_column(
        ForeignKey("programs.id", ondelete="SET NULL"), index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    program = relationship("Program", back_populates="classes")

    teachers = relationship(
        "ClassTeacher", back_populates="academy_class", cascade="all, delete-orphan"
    )
    members = relationship(
        "ClassMember", back_populates="academy_class", cascade="all, delete-orphan"
    )
    sessions = relationship(
        "TrainingSession",
        back_populates="academy_class",
        cascade="all, delete-orphan",
    )
