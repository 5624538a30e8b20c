"""Report model for lesson feedback."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base


class Report(Base):
    """Lesson report; at most one per session."""

    __tablename__ = "reports"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    instructor_id = Column(String, ForeignKey("instructors.id"), nullable=False, index=True)
    client_id = Column(String, ForeignKey("clients.id"), nullable=False, index=True)
    session_id = Column(String, ForeignKey("sessions.id"), nullable=False, unique=True)
    summary_items = Column(String(1000), nullable=True)
    strength_note = Column(String(1000), nullable=True)
    improve_note = Column(String(1000), nullable=True)
    next_goal = Column(String(500), nullable=True)
    homework = Column(String(1000), nullable=True)
    pain_change = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    client = relationship("Client", back_populates="reports")
    session = relationship("LessonSession", back_populates="report")
    photos = relationship("ReportPhoto", back_populates="report", cascade="all, delete-orphan")
    share_links = relationship("ReportShare", back_populates="report")
