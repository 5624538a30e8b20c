"""ClientProgressPhoto model for before/after images of a client."""

import uuid

from sqlalchemy import Column, Date, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base

PROGRESS_PHOTO_PHASES = ("BEFORE", "AFTER", "ETC")


class ClientProgressPhoto(Base):
    """Client-level image; bytes live in photo storage under storage_path."""

    __tablename__ = "client_progress_photos"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    instructor_id = Column(String, ForeignKey("instructors.id"), nullable=False, index=True)
    client_id = Column(String, ForeignKey("clients.id"), nullable=False, index=True)
    phase = Column(String(20), nullable=False, default="ETC")
    note = Column(String(500), nullable=True)
    taken_on = Column(Date, nullable=True)
    file_name = Column(String(255), nullable=False)
    content_type = Column(String(120), nullable=False)
    storage_path = Column(String(1000), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    client = relationship("Client", back_populates="progress_photos")
