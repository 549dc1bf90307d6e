from datetime import datetime

from academy.core.clock import as_utc
from academy.core.errors import ValidationError


def ensure_date_range(start: datetime, end: datetime) -> None:
    if as_utc(start) >= as_utc(end):
        raise ValidationError("End date must be after start date")
