from fastapi import Depends, Path
from sqlalchemy.orm import Session

from squad.api.dependencies import get_db
from squad.models.user import User
from squad.schemas import event_schemas
from squad.services import auth_service, event_service


def list_events(db: Session = Depends(get_db)):
    return {"events": event_service.list_events_with_totals(db)}


def create_event(
    event_in: event_schemas.EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.require_admin),
):
    event = event_service.create_event(db, event_in, creator_id=current_user.id)
    return {"event": event_schemas.EventRead.model_validate(event)}


def update_event(
    event_in: event_schemas.EventUpdate,
    event_id: str = Path(..., description="The ID of the event"),
    db: Session = Depends(get_db),
):
    event = event_service.update_event(db, event_id, event_in)
    return {"event": event_schemas.EventRead.model_validate(event)}


def delete_event(
    event_id: str = Path(..., description="The ID of the event"),
    db: Session = Depends(get_db),
):
    event_service.delete_event(db, event_id)
    return {"message": "Event deleted"}


def get_event_equipment(
    event_id: str = Path(..., description="The ID of the event"),
    db: Session = Depends(get_db),
):
    return {"equipment": event_service.equipment_summary(db, event_id)}
