from fastapi import Depends
from sqlalchemy.orm import Session

from squad.api.dependencies import get_db, get_settings_dependency
from squad.core.config import Settings
from squad.models.user import User
from squad.schemas import auth_schemas, user_schemas
from squad.services import auth_service


def login(
    credentials: auth_schemas.LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
):
    return auth_service.login(db, credentials, settings)


def register(
    request: auth_schemas.RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
):
    return auth_service.register(db, request, settings)


def read_me(current_user: User = Depends(auth_service.get_current_user)):
    return {"user": user_schemas.UserRead.model_validate(current_user)}
