from datetime import datetime

from pydantic import BaseModel, model_validator

from academy.core.config import DEFAULT_TIMEZONE
from academy.core.roles import ROLE_PRIORITY, Role, has_role


class SessionToken(BaseModel):
    """
    Logical contents of a signed session.

    Carries the role flags as they were at login and the persona the session
    is currently acting as. ``current_role`` must always be a granted role.
    """

    id: int
    email: str
    name: str
    timezone: str = DEFAULT_TIMEZONE
    is_student: bool = False
    is_teacher: bool = False
    is_admin: bool = False
    access_expiry: datetime | None = None
    current_role: Role
    issued_at: datetime
    expires_at: datetime

    class Config:
        frozen = True

    @model_validator(mode="after")
    def _current_role_is_granted(self):
        if not has_role(self, self.current_role):
            raise ValueError(f"role {self.current_role.value!r} is not granted to this session")
        return self

    @property
    def roles(self) -> list[str]:
        # STUDENT, TEACHER, ADMIN order
        return [role.value.upper() for role in reversed(ROLE_PRIORITY) if has_role(self, role)]


class SessionRead(BaseModel):
    id: int
    email: str
    name: str
    timezone: str
    is_student: bool
    is_teacher: bool
    is_admin: bool
    access_expiry: datetime | None = None
    roles: list[str]
    current_role: Role
    expires_at: datetime

    @classmethod
    def from_token(cls, token: SessionToken) -> "SessionRead":
        return cls(
            **token.model_dump(exclude={"issued_at"}),
            roles=token.roles,
        )
