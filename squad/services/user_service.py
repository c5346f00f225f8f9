import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from squad.core import security
from squad.models.user import User, utcnow
from squad.schemas import user_schemas

logger = logging.getLogger(__name__)


def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def list_users(db: Session) -> List[User]:
    return db.query(User).order_by(User.name).all()


def create_user(db: Session, user_in: user_schemas.UserCreate) -> User:
    email = user_in.email.strip().lower()
    if get_user_by_email(db, email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    db_user = User(
        email=email,
        name=user_in.name.strip(),
        password_hash=security.get_password_hash(user_in.password),
        is_admin=user_in.is_admin,
        is_active=True,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Created user %s (admin=%s)", db_user.email, db_user.is_admin)
    return db_user


def set_user_status(db: Session, user_id: str, is_active: bool) -> User:
    db_user = get_user(db, user_id)
    if not db_user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if db_user.is_admin and not is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Admin accounts cannot be deactivated")

    db_user.is_active = is_active
    db_user.updated_at = utcnow()
    db.commit()
    db.refresh(db_user)
    logger.info("User %s is_active=%s", db_user.email, is_active)
    return db_user
