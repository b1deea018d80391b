from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer
from sqlalchemy.types import JSON

from app.database import Base


class WorkerProfile(Base):
    __tablename__ = "worker_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    skills = Column(JSON)
    experience = Column(Integer)
    hourly_rate = Column(Integer)
    availability = Column(JSON)
