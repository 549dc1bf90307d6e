from pydantic import BaseModel, Field, field_validator

from academy.core.roles import Role
from academy.core.security import check_password_bytes


class LoginRequest(BaseModel):
    # exact match against the stored address, no normalization
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class SwitchRoleRequest(BaseModel):
    # plain str so an unknown role is reported as "Invalid role" (400)
    role: str


class SwitchRoleResponse(BaseModel):
    success: bool
    role: Role
    message: str


class SessionUpdateRequest(BaseModel):
    current_role: str


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=8, max_length=72)

    @field_validator("new_password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        return check_password_bytes(v)
