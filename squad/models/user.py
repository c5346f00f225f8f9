import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from squad.core.database import Base, UTCDateTime


def utcnow():
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    attendances = relationship("Attendance", back_populates="user", passive_deletes=True)
    created_events = relationship("Event", back_populates="creator")
