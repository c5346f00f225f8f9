from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from squad.core.database import Base, UTCDateTime
from squad.models.user import new_id, utcnow


class Attendance(Base):
    __tablename__ = "attendances"
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_attendances_user_event"),)

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(16), nullable=False)  # "confirmed" or "declined"
    additional_players = Column(Integer, nullable=False, default=0)
    comment = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="attendances")
    event = relationship("Event", back_populates="attendances")
    equipment = relationship(
        "Equipment",
        back_populates="attendance",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Equipment.created_at",
    )


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(String(36), primary_key=True, default=new_id)
    attendance_id = Column(String(36), ForeignKey("attendances.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(32), nullable=False)  # "ball", "pump" or "overboots"
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)

    attendance = relationship("Attendance", back_populates="equipment")
