from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ProgramBase(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    teacher_name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: datetime
    end_date: datetime
    price: Optional[float] = Field(default=None, ge=0)
    payment_conditions: Optional[str] = None
    schedule_info: Optional[str] = None
    is_active: bool = True


class ProgramCreate(ProgramBase):
    pass


class ProgramUpdate(ProgramBase):
    pass


class ProgramRead(ProgramBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
