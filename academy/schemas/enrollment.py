from datetime import datetime

from pydantic import BaseModel, Field

from academy.schemas.user import UserSummary


class EnrollmentCreate(BaseModel):
    student_ids: list[int] = Field(min_length=1)


class EnrollmentResult(BaseModel):
    message: str
    enrolled_count: int
    already_enrolled_count: int


class EnrollmentOut(BaseModel):
    id: int
    class_id: int
    user_id: int
    joined_at: datetime
    user: UserSummary

    class Config:
        from_attributes = True


class MyEnrollment(BaseModel):
    class_id: int
    class_name: str
    start_date: datetime
    end_date: datetime
    timezone: str
    is_active: bool
    joined_at: datetime
