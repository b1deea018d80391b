from __future__ import annotations

from sqlalchemy import Column, ForeignKey, Integer, String

from app.database import Base


class EmployerProfile(Base):
    __tablename__ = "employer_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    company_name = Column(String(255), nullable=False)
    industry = Column(String(255), nullable=False)
    company_size = Column(String(50))
    website = Column(String(1000))
