from typing import Iterator

from fastapi import Request
from sqlalchemy.orm import Session

from squad.core.config import Settings
from squad.core.database import Database


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_settings_dependency(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Iterator[Session]:
    db = get_database(request).new_session()
    try:
        yield db
    finally:
        db.close()
