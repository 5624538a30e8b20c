"""AuthUser model holding login credentials."""

import uuid

from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship

from database import Base


class AuthUser(Base):
    """Username/password credential bound to one instructor."""

    __tablename__ = "auth_users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(80), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    instructor_id = Column(String, ForeignKey("instructors.id"), nullable=False, index=True)

    instructor = relationship("Instructor", back_populates="auth_users", lazy="joined")
