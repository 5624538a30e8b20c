"""Instructor model."""

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from database import Base


class Instructor(Base):
    """Instructor who owns clients, sessions and reports."""

    __tablename__ = "instructors"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(120), unique=True, nullable=False, index=True)
    display_name = Column(String(80), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    auth_users = relationship("AuthUser", back_populates="instructor", cascade="all, delete-orphan")
    clients = relationship("Client", back_populates="instructor", cascade="all, delete-orphan")
