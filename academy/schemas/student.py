from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from academy.core.config import DEFAULT_TIMEZONE
from academy.core.security import check_password_bytes


class StudentCreate(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    # generated when omitted
    password: str | None = Field(default=None, min_length=8, max_length=72)
    timezone: str = DEFAULT_TIMEZONE
    access_expiry: datetime | None = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str | None) -> str | None:
        return v if v is None else check_password_bytes(v)


class StudentUpdate(BaseModel):
    """Partial update; only the fields sent are changed."""

    email: EmailStr | None = None
    name: str | None = Field(default=None, min_length=1, max_length=255)
    timezone: str | None = None
    access_expiry: datetime | None = None
    # resets the password when present
    password: str | None = Field(default=None, min_length=8, max_length=72)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str | None) -> str | None:
        return v if v is None else check_password_bytes(v)


class StudentClassRef(BaseModel):
    id: int
    name: str


class StudentRead(BaseModel):
    id: int
    email: str
    name: str
    timezone: str
    is_active: bool
    access_expiry: datetime | None = None
    created_at: datetime
    classes: list[StudentClassRef] = []

    class Config:
        from_attributes = True


class StudentCreated(StudentRead):
    # only present when the password was generated server-side
    generated_password: str | None = None
