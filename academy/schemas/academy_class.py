from datetime import datetime

from pydantic import BaseModel, Field

from academy.core.config import DEFAULT_TIMEZONE
from academy.schemas.user import UserSummary


class TeacherAssignment(BaseModel):
    id: int
    is_primary: bool = False


class ClassCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    start_date: datetime
    end_date: datetime
    timezone: str = DEFAULT_TIMEZONE
    program_id: int | None = None
    teachers: list[TeacherAssignment] = Field(min_length=1)


class ClassAdminUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    start_date: datetime
    end_date: datetime
    timezone: str = DEFAULT_TIMEZONE
    program_id: int | None = None
    # None keeps the current assignments
    teachers: list[TeacherAssignment] | None = None


class ClassUpdate(BaseModel):
    """Fields a class teacher may edit."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    start_date: datetime
    end_date: datetime


class ClassStatusUpdate(BaseModel):
    is_active: bool


class ClassTeacherRead(BaseModel):
    id: int
    name: str
    email: str
    is_primary: bool


class ClassMemberRead(BaseModel):
    id: int
    user: UserSummary
    joined_at: datetime

    class Config:
        from_attributes = True


class ClassRead(BaseModel):
    id: int
    name: str
    description: str | None = None
    start_date: datetime
    end_date: datetime
    timezone: str
    is_active: bool
    program_id: int | None = None

    class Config:
        from_attributes = True


class ClassDetail(ClassRead):
    teachers: list[ClassTeacherRead] = []
    members: list[ClassMemberRead] = []


class TeacherClassRow(ClassRead):
    is_primary: bool
    member_count: int
    session_count: int
    teachers: list[ClassTeacherRead]


def class_teachers(academy_class) -> list[ClassTeacherRead]:
    return [
        ClassTeacherRead(
            id=ct.teacher.id,
            name=ct.teacher.name,
            email=ct.teacher.email,
            is_primary=ct.is_primary,
        )
        for ct in sorted(academy_class.teachers, key=lambda ct: (not ct.is_primary, ct.teacher_id))
    ]


def class_detail(academy_class) -> ClassDetail:
    return ClassDetail(
        **ClassRead.model_validate(academy_class).model_dump(),
        teachers=class_teachers(academy_class),
        members=[ClassMemberRead.model_validate(m) for m in academy_class.members],
    )
