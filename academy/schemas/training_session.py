from datetime import date as date_type, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class TrainingSessionCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    date: date_type
    start_time: str = Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    duration: int = Field(gt=0, le=24 * 60)
    status: Literal["PLANNED", "COMPLETED", "CANCELLED"] = "PLANNED"
    materials_visible: bool = False


class TrainingSessionRead(BaseModel):
    id: int
    class_id: int
    title: str
    description: Optional[str]
    date: date_type
    start_time: str
    duration: int
    status: str
    materials_visible: bool
    created_at: datetime

    class Config:
        from_attributes = True
