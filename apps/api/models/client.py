"""Client model."""

from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from database import Base


class Client(Base):
    """Lesson client managed by an instructor."""

    __tablename__ = "clients"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    instructor_id = Column(String, ForeignKey("instructors.id"), nullable=False, index=True)
    name = Column(String(80), nullable=False)
    phone = Column(String(40), nullable=True)
    flags_note = Column(String(500), nullable=True)
    note = Column(String(1000), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    instructor = relationship("Instructor", back_populates="clients")
    sessions = relationship("LessonSession", back_populates="client", cascade="all, delete-orphan")
    reports = relationship("Report", back_populates="client")
    homeworks = relationship("HomeworkAssignment", back_populates="client", cascade="all, delete-orphan")
    profile = relationship("ClientProfile", back_populates="client", uselist=False, cascade="all, delete-orphan")
    tracking_logs = relationship("ClientTrackingLog", back_populates="client", cascade="all, delete-orphan")
    progress_photos = relationship("ClientProgressPhoto", back_populates="client", cascade="all, delete-orphan")
