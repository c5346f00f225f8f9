from sqlalchemy import Column, Date, ForeignKey, String, Time
from sqlalchemy.orm import relationship

from squad.core.database import Base, UTCDateTime
from squad.models.user import new_id, utcnow


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    date = Column(Date, nullable=False, index=True)
    time_from = Column(Time, nullable=False)
    time_to = Column(Time, nullable=False)
    location = Column(String(255), nullable=False)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    creator = relationship("User", back_populates="created_events")
    attendances = relationship(
        "Attendance",
        back_populates="event",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Attendance.created_at",
    )
