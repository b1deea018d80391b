from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.job import JobRecord
from app.schemas.user import WorkerSummary


APP_PENDING = "pending"
APP_UNDER_REVIEW = "under_review"
APP_INTERVIEW = "interview"
APP_ACCEPTED = "accepted"
APP_REJECTED = "rejected"

APPLICATION_STATUSES = (APP_PENDING, APP_UNDER_REVIEW, APP_INTERVIEW, APP_ACCEPTED, APP_REJECTED)
TERMINAL_APPLICATION_STATUSES = frozenset({APP_ACCEPTED, APP_REJECTED})

ApplicationStatus = Literal["pending", "under_review", "interview", "accepted", "rejected"]

# Fields a worker may change on their own application.
WORKER_EDITABLE_FIELDS = frozenset({"cover_letter"})


class ApplicationRecord(BaseModel):
    id: int
    job_id: int
    worker_id: int
    cover_letter: str | None = None
    resume_url: str | None = None
    available_to_start: datetime | None = None
    expected_rate: int | None = None
    preferred_hours: str | None = None
    reference_info: str | None = None
    status: ApplicationStatus = APP_PENDING
    applied_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
        frozen = True


class ApplicationCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    job_id: int
    cover_letter: str | None = Field(default=None, max_length=10000)
    resume_url: str | None = Field(default=None, max_length=1000)
    available_to_start: datetime | None = None
    expected_rate: int | None = Field(default=None, ge=0)
    preferred_hours: str | None = Field(default=None, max_length=255)
    reference_info: str | None = None


class ApplicationPatch(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: ApplicationStatus | None = None
    cover_letter: str | None = Field(default=None, max_length=10000)
    resume_url: str | None = Field(default=None, max_length=1000)
    available_to_start: datetime | None = None
    expected_rate: int | None = Field(default=None, ge=0)
    preferred_hours: str | None = Field(default=None, max_length=255)
    reference_info: str | None = None


class WorkerApplicationOut(ApplicationRecord):
    job_title: str | None = None
    company_name: str | None = None
    location: str | None = None
    hourly_rate: int = 0
    employer_id: int | None = None


class EmployerApplicationOut(ApplicationRecord):
    job: JobRecord | None = None
    worker: WorkerSummary | None = None
