from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator


ROLE_WORKER = "worker"
ROLE_EMPLOYER = "employer"
ROLE_ADMIN = "admin"

UserRole = Literal["worker", "employer", "admin"]


class UserRecord(BaseModel):
    id: int
    username: str
    email: str
    password_hash: str
    full_name: str
    phone_number: str = ""
    role: UserRole
    profile_picture: str | None = None
    bio: str | None = None
    location: str | None = None
    rating: float = 0.0
    is_verified: bool = False
    created_at: datetime | None = None

    class Config:
        from_attributes = True
        frozen = True


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    full_name: str
    phone_number: str = ""
    role: UserRole
    profile_picture: str | None = None
    bio: str | None = None
    location: str | None = None
    rating: float = 0.0
    is_verified: bool = False
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class WorkerSummary(BaseModel):
    id: int
    username: str
    full_name: str
    profile_picture: str | None = None


class WorkerProfileRecord(BaseModel):
    id: int
    user_id: int
    skills: list[str] = Field(default_factory=list)
    experience: int | None = None
    hourly_rate: int | None = None
    availability: dict[str, Any] | None = None

    class Config:
        from_attributes = True
        frozen = True

    @field_validator("skills", mode="before")
    @classmethod
    def _none_skills(cls, value):
        return value or []


class WorkerProfileIn(BaseModel):
    skills: list[str] = Field(default_factory=list)
    experience: int | None = Field(default=None, ge=0)
    hourly_rate: int | None = Field(default=None, ge=0)
    availability: dict[str, Any] | None = None


class WorkerProfileUpdate(BaseModel):
    skills: list[str] | None = None
    experience: int | None = Field(default=None, ge=0)
    hourly_rate: int | None = Field(default=None, ge=0)
    availability: dict[str, Any] | None = None


class EmployerProfileRecord(BaseModel):
    id: int
    user_id: int
    company_name: str
    industry: str
    company_size: str | None = None
    website: str | None = None

    class Config:
        from_attributes = True
        frozen = True


class EmployerProfileIn(BaseModel):
    company_name: str = Field(min_length=1, max_length=255)
    industry: str = Field(min_length=1, max_length=255)
    company_size: str | None = None
    website: str | None = None


class EmployerProfileUpdate(BaseModel):
    company_name: str | None = Field(default=None, min_length=1, max_length=255)
    industry: str | None = Field(default=None, min_length=1, max_length=255)
    company_size: str | None = None
    website: str | None = None


class WorkerWithProfileOut(UserOut):
    profile: WorkerProfileRecord | None = None


class EmployerWithProfileOut(UserOut):
    profile: EmployerProfileRecord | None = None
