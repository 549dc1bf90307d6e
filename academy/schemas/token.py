from datetime import datetime

from pydantic import BaseModel

from academy.core.roles import Role


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    current_role: Role
    roles: list[str]
    expires_at: datetime
