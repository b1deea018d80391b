from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


MIN_RATING = 1
MAX_RATING = 5


class RatingRecord(BaseModel):
    id: int
    from_user_id: int
    to_user_id: int
    job_id: int | None = None
    value: int
    review: str | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
        frozen = True


class RatingCreate(BaseModel):
    to_user_id: int
    job_id: int | None = None
    value: int
    review: str | None = Field(default=None, max_length=5000)
