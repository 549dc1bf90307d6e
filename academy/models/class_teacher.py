from sqlalchemy import Boolean, Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from academy.db.base_class import Base


class ClassTeacher(Base):
    """Ownership link between a teacher and a class."""

    __tablename__ = "class_teachers"

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(
        Integer, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    teacher_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    is_primary = Column(Boolean, nullable=False, default=False)

    __table_args__ = (
        UniqueConstraint("class_id", "teacher_id", name="uq_class_teachers_class_teacher"),
    )

    academy_class = relationship("AcademyClass", back_populates="teachers")
    teacher = relationship("User", back_populates="teaching_assignments")
