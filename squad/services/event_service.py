import logging
from typing import Dict, Iterable, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session, selectinload

from squad.models.attendance import Attendance
from squad.models.event import Event
from squad.models.user import utcnow
from squad.schemas import event_schemas
from squad.schemas.attendance_schemas import AttendanceStatus

logger = logging.getLogger(__name__)


def total_participants(attendances: Iterable[Attendance]) -> int:
    """Each confirmed attendance counts its user plus the extra players they bring."""
    return sum(
        1 + (attendance.additional_players or 0)
        for attendance in attendances
        if attendance.status == AttendanceStatus.CONFIRMED.value
    )


def get_event(db: Session, event_id: str) -> Optional[Event]:
    return db.get(Event, event_id)


def list_events(db: Session) -> List[Event]:
    return (
        db.query(Event)
        .options(
            selectinload(Event.attendances).selectinload(Attendance.user),
            selectinload(Event.attendances).selectinload(Attendance.equipment),
        )
        .order_by(Event.date.asc(), Event.time_from.asc())
        .all()
    )


def list_events_with_totals(db: Session) -> List[event_schemas.EventWithAttendances]:
    return [
        event_schemas.EventWithAttendances.model_validate(event).model_copy(
            update={"total_participants": total_participants(event.attendances)}
        )
        for event in list_events(db)
    ]


def create_event(db: Session, event_in: event_schemas.EventCreate, creator_id: str) -> Event:
    db_event = Event(**event_in.model_dump(), created_by=creator_id)
    db.add(db_event)
    db.commit()
    db.refresh(db_event)
    logger.info("Event %s (%s) created by %s", db_event.id, db_event.title, creator_id)
    return db_event


def update_event(db: Session, event_id: str, event_update: event_schemas.EventUpdate) -> Event:
    db_event = get_event(db, event_id)
    if not db_event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")

    update_data = event_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        setattr(db_event, key, value)
    db_event.updated_at = utcnow()

    db.commit()
    db.refresh(db_event)
    return db_event


def delete_event(db: Session, event_id: str) -> None:
    db_event = get_event(db, event_id)
    if db_event is None:
        # Already gone; deleting is idempotent
        return
    # Attendances and their equipment go with the event (ORM cascade + ON DELETE CASCADE)
    db.delete(db_event)
    db.commit()
    logger.info("Event %s deleted", event_id)


def equipment_summary(db: Session, event_id: str) -> Dict[str, List[dict]]:
    """Maps each equipment type to the confirmed attendees bringing it."""
    attendances = (
        db.query(Attendance)
        .options(selectinload(Attendance.user), selectinload(Attendance.equipment))
        .filter(
            Attendance.event_id == event_id,
            Attendance.status == AttendanceStatus.CONFIRMED.value,
        )
        .order_by(Attendance.created_at)
        .all()
    )

    summary: Dict[str, List[dict]] = {}
    for attendance in attendances:
        for item in attendance.equipment:
            summary.setdefault(item.type, []).append(
                {"user_name": attendance.user.name, "user_id": attendance.user_id}
            )
    return summary
