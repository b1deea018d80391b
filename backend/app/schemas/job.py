from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator


JOB_OPEN = "open"
JOB_IN_PROGRESS = "in_progress"
JOB_COMPLETED = "completed"
JOB_CANCELLED = "cancelled"

JOB_STATUSES = (JOB_OPEN, JOB_IN_PROGRESS, JOB_COMPLETED, JOB_CANCELLED)
ACTIVE_JOB_STATUSES = frozenset({JOB_OPEN, JOB_IN_PROGRESS})
FINISHED_JOB_STATUSES = frozenset({JOB_COMPLETED, JOB_CANCELLED})

JobStatus = Literal["open", "in_progress", "completed", "cancelled"]


class JobRecord(BaseModel):
    id: int
    employer_id: int
    title: str
    description: str
    location: str
    skills: list[str] = Field(default_factory=list)
    hourly_rate: int | None = None
    job_type: str
    status: JobStatus = JOB_OPEN
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime | None = None

    class Config:
        from_attributes = True
        frozen = True

    @field_validator("skills", mode="before")
    @classmethod
    def _none_skills(cls, value):
        return value or []


class JobCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1, max_length=255)
    skills: list[str] = Field(default_factory=list)
    hourly_rate: int | None = Field(default=None, ge=0)
    job_type: str = Field(min_length=1, max_length=50)
    status: JobStatus = JOB_OPEN
    start_date: datetime | None = None
    end_date: datetime | None = None


class JobUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    skills: list[str] | None = None
    hourly_rate: int | None = Field(default=None, ge=0)
    job_type: str | None = Field(default=None, min_length=1, max_length=50)
    status: JobStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None


class MatchedJobOut(JobRecord):
    matched_skills: list[str] = Field(default_factory=list)
