from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.types import JSON

from app.database import Base


class Job(Base):
    __tablename__ = "jobs"
    __table_args__ = (
        Index("idx_jobs_employer", "employer_id"),
        Index("idx_jobs_status", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(255), nullable=False)
    skills = Column(JSON)
    hourly_rate = Column(Integer)
    job_type = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default="open")
    start_date = Column(DateTime)
    end_date = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
