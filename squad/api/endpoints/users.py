from fastapi import Depends, Path
from sqlalchemy.orm import Session

from squad.api.dependencies import get_db
from squad.schemas import user_schemas
from squad.services import user_service


def list_users(db: Session = Depends(get_db)):
    users = user_service.list_users(db)
    return {"users": [user_schemas.UserListItem.model_validate(user) for user in users]}


def update_user_status(
    status_in: user_schemas.UserStatusUpdate,
    user_id: str = Path(..., description="The ID of the user"),
    db: Session = Depends(get_db),
):
    user = user_service.set_user_status(db, user_id, status_in.is_active)
    return {"user": user_schemas.UserRead.model_validate(user)}
