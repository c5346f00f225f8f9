import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from squad.models.attendance import Attendance, Equipment
from squad.models.user import User, utcnow
from squad.schemas import attendance_schemas
from squad.schemas.attendance_schemas import AttendanceStatus
from squad.services import event_service

logger = logging.getLogger(__name__)


def get_attendance(db: Session, user_id: str, event_id: str) -> Optional[Attendance]:
    return (
        db.query(Attendance)
        .filter(Attendance.user_id == user_id, Attendance.event_id == event_id)
        .first()
    )


def get_attendance_detail(db: Session, attendance_id: str) -> Optional[Attendance]:
    return (
        db.query(Attendance)
        .options(selectinload(Attendance.user), selectinload(Attendance.equipment))
        .filter(Attendance.id == attendance_id)
        .populate_existing()
        .first()
    )


def _apply_submission(attendance: Attendance, submission: attendance_schemas.AttendanceSubmit) -> None:
    attendance.status = submission.status
    attendance.additional_players = submission.additional_players or 0
    attendance.comment = submission.comment or None


def _insert_attendance(
    db: Session, user: User, event_id: str, submission: attendance_schemas.AttendanceSubmit
) -> Optional[Attendance]:
    """Inserts a new row, or returns None when another request inserted the pair first."""
    attendance = Attendance(user_id=user.id, event_id=event_id)
    _apply_submission(attendance, submission)
    db.add(attendance)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        logger.info("Attendance for user %s / event %s created concurrently, updating instead", user.id, event_id)
        return None
    return attendance


def _update_attendance(db: Session, attendance: Attendance, submission: attendance_schemas.AttendanceSubmit) -> None:
    _apply_submission(attendance, submission)
    attendance.updated_at = utcnow()
    # Equipment is replaced wholesale on every resubmission
    db.query(Equipment).filter(Equipment.attendance_id == attendance.id).delete(synchronize_session=False)


def upsert_attendance(
    db: Session, user: User, event_id: str, submission: attendance_schemas.AttendanceSubmit
) -> Attendance:
    if event_service.get_event(db, event_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")

    attendance = get_attendance(db, user.id, event_id)
    if attendance is None:
        attendance = _insert_attendance(db, user, event_id, submission)
        if attendance is None:
            attendance = get_attendance(db, user.id, event_id)
            if attendance is None:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Attendance could not be saved")
            _update_attendance(db, attendance, submission)
    else:
        _update_attendance(db, attendance, submission)

    if submission.status == AttendanceStatus.CONFIRMED.value and submission.equipment:
        db.add_all(Equipment(attendance_id=attendance.id, type=item) for item in submission.equipment)

    db.commit()
    logger.info("Attendance %s: user %s -> %s for event %s", attendance.id, user.id, submission.status, event_id)
    return get_attendance_detail(db, attendance.id)


def delete_attendance(db: Session, user: User, event_id: str) -> None:
    # Only ever the caller's own row; missing rows are not an error
    db.query(Attendance).filter(
        Attendance.user_id == user.id, Attendance.event_id == event_id
    ).delete(synchronize_session=False)
    db.commit()
