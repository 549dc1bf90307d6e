from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from academy.core.config import DEFAULT_TIMEZONE
from academy.core.security import check_password_bytes


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=8, max_length=72)
    timezone: str = DEFAULT_TIMEZONE
    is_student: bool = False
    is_teacher: bool = False
    is_admin: bool = False
    is_active: bool = True
    access_expiry: datetime | None = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        return check_password_bytes(v)


class UserUpdate(BaseModel):
    """Full replacement of the editable profile; omitted role flags reset to False."""

    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    timezone: str = DEFAULT_TIMEZONE
    is_student: bool = False
    is_teacher: bool = False
    is_admin: bool = False
    # None keeps the current status
    is_active: bool | None = None
    access_expiry: datetime | None = None


class UserStatusUpdate(BaseModel):
    is_active: bool


class UserRead(BaseModel):
    id: int
    email: str
    name: str
    timezone: str
    is_student: bool
    is_teacher: bool
    is_admin: bool
    is_active: bool
    access_expiry: datetime | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class UserStatusRead(BaseModel):
    id: int
    email: str
    is_active: bool

    class Config:
        from_attributes = True


class UserSummary(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True
