"""ReportPhoto model for images attached to a report."""

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from database import Base


class ReportPhoto(Base):
    """Uploaded image; bytes live in photo storage under storage_path."""

    __tablename__ = "report_photos"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    report_id = Column(String, ForeignKey("reports.id"), nullable=False, index=True)
    file_name = Column(String(255), nullable=False)
    content_type = Column(String(120), nullable=False)
    storage_path = Column(String(1000), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    report = relationship("Report", back_populates="photos")
