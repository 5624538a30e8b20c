"""LessonSession model."""

import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Time
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base


SESSION_TYPES = ("PERSONAL", "GROUP")


class LessonSession(Base):
    """A single lesson held with a client on a given date."""

    __tablename__ = "sessions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    instructor_id = Column(String, ForeignKey("instructors.id"), nullable=False, index=True)
    client_id = Column(String, ForeignKey("clients.id"), nullable=False, index=True)
    session_date = Column(Date, nullable=False, index=True)
    session_start_time = Column(Time, nullable=True)
    session_type = Column(String(20), nullable=False)
    memo = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    client = relationship("Client", back_populates="sessions")
    report = relationship("Report", back_populates="session", uselist=False)
