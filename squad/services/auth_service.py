import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from squad.api.dependencies import get_db, get_settings_dependency
from squad.core import security
from squad.core.config import Settings
from squad.models.user import User
from squad.schemas import auth_schemas, user_schemas
from squad.services import user_service

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def resolve_identity(db: Session, token: Optional[str], settings: Settings) -> Optional[User]:
    """
    Turns a bearer token into the user it names.

    Returns None instead of raising when the token is missing, malformed,
    badly signed or expired, or when the user no longer exists or has been
    deactivated. Callers always get a freshly loaded, active row or nothing.
    """
    if not token:
        return None
    token_data = security.decode_access_token(token, settings)
    if token_data is None:
        return None
    user = user_service.get_user(db, token_data.user_id)
    if user is None or not user.is_active:
        return None
    return user


def issue_token(user: User, settings: Settings) -> str:
    return security.create_access_token(
        data={"userId": user.id, "email": user.email, "is_admin": user.is_admin},
        settings=settings,
    )


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = user_service.get_user_by_email(db, email or "")
    if user is None:
        security.dummy_verify()
        return None
    if not security.verify_password(password or "", user.password_hash):
        return None
    if not user.is_active:
        return None
    return user


def login(db: Session, credentials: auth_schemas.LoginRequest, settings: Settings) -> auth_schemas.AuthResponse:
    user = authenticate(db, credentials.email, credentials.password)
    if user is None:
        logger.warning("Failed login for %s", credentials.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    logger.info("User %s logged in", user.email)
    return auth_schemas.AuthResponse(token=issue_token(user, settings), user=user_schemas.UserRead.model_validate(user))


def register(db: Session, request: auth_schemas.RegisterRequest, settings: Settings) -> auth_schemas.AuthResponse:
    user = user_service.create_user(
        db,
        user_schemas.UserCreate(email=request.email, password=request.password, name=request.name),
    )
    return auth_schemas.AuthResponse(token=issue_token(user, settings), user=user_schemas.UserRead.model_validate(user))


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dependency),
) -> User:
    token = credentials.credentials if credentials else None
    user = resolve_identity(db, token, settings)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    # Only the freshly loaded row decides, never the token's is_admin claim
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


def get_cookie_user(request: Request, db: Session, settings: Settings) -> Optional[User]:
    """Identity for the server-rendered pages, read from the token cookie."""
    return resolve_identity(db, request.cookies.get(settings.token_cookie_name), settings)
