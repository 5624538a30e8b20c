"""ClientProfile model: one editable background sheet per client."""

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base


class ClientProfile(Base):
    """Pain, goals and class notes kept alongside a client."""

    __tablename__ = "client_profiles"

    client_id = Column(String, ForeignKey("clients.id"), primary_key=True)
    pain_note = Column(String(1000), nullable=True)
    goal_note = Column(String(1000), nullable=True)
    surgery_history = Column(String(1000), nullable=True)
    before_class_memo = Column(String(1000), nullable=True)
    after_class_memo = Column(String(1000), nullable=True)
    next_lesson_plan = Column(String(1000), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="profile")
