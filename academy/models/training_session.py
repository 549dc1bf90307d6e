from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String, Text, DateTime, func
from sqlalchemy.orm import relationship

from academy.db.base_class import Base

SESSION_STATUSES = ("PLANNED", "COMPLETED", "CANCELLED")


class TrainingSession(Base):
    __tablename__ = "training_sessions"

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)  # "HH:MM" in the class timezone
    duration = Column(Integer, nullable=False)  # minutes
    status = Column(String(20), nullable=False, default="PLANNED")
    materials_visible = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    academy_class = relationship("AcademyClass", back_populates="sessions")
