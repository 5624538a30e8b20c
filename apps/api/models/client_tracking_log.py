"""ClientTrackingLog model."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base


class ClientTrackingLog(Base):
    """Append-only snapshot of a client's profile notes at a point in time."""

    __tablename__ = "client_tracking_logs"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    instructor_id = Column(String, ForeignKey("instructors.id"), nullable=False, index=True)
    client_id = Column(String, ForeignKey("clients.id"), nullable=False, index=True)
    pain_note = Column(String(1000), nullable=True)
    goal_note = Column(String(1000), nullable=True)
    surgery_history = Column(String(1000), nullable=True)
    before_class_memo = Column(String(1000), nullable=True)
    after_class_memo = Column(String(1000), nullable=True)
    next_lesson_plan = Column(String(1000), nullable=True)
    homework_given = Column(String(1000), nullable=True)
    homework_reminder_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    client = relationship("Client", back_populates="tracking_logs")
