from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text, func

from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(120), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(512), nullable=False)
    full_name = Column(String(255), nullable=False)
    phone_number = Column(String(32), nullable=False, default="")
    role = Column(String(20), nullable=False, index=True)
    profile_picture = Column(String(1000))
    bio = Column(Text)
    location = Column(String(255))
    rating = Column(Float, nullable=False, default=0.0)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())
