from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, Text, func

from app.database import Base


class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (Index("idx_ratings_recipient", "to_user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    from_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    to_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    job_id = Column(Integer, ForeignKey("jobs.id"))
    value = Column(Integer, nullable=False)
    review = Column(Text)
    created_at = Column(DateTime, server_default=func.now())
