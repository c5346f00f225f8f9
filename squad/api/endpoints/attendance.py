from fastapi import Depends, Path
from sqlalchemy.orm import Session

from squad.api.dependencies import get_db
from squad.models.user import User
from squad.schemas import attendance_schemas
from squad.services import attendance_service, auth_service


def submit_attendance(
    submission: attendance_schemas.AttendanceSubmit,
    event_id: str = Path(..., description="The ID of the event"),
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
):
    attendance = attendance_service.upsert_attendance(db, current_user, event_id, submission)
    return {"attendance": attendance_schemas.AttendanceRead.model_validate(attendance)}


def delete_attendance(
    event_id: str = Path(..., description="The ID of the event"),
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user),
):
    attendance_service.delete_attendance(db, current_user, event_id)
    return {"message": "Attendance deleted"}
