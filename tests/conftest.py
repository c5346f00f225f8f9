import os

# Cheap hashes for the whole test run; must be set before squad is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from squad.core import security
from squad.core.config import Settings
from squad.core.database import Database
from squad.main import create_app
from squad.models.user import User
from squad.services import auth_service

TEST_PASSWORD = "correct-horse"


@pytest.fixture
def settings():
    return Settings(database_url="sqlite://", secret_key="test-secret", bcrypt_rounds=4)


@pytest.fixture
def database(settings):
    database = Database(settings.database_url).open()
    database.create_all()
    yield database
    database.close()


@pytest.fixture
def db_session(database):
    session = database.new_session()
    yield session
    session.close()


@pytest.fixture
def app(settings, database):
    return create_app(settings=settings, database=database)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db_session):
    def _make_user(name="Player", email=None, is_admin=False, is_active=True, password=TEST_PASSWORD):
        user = User(
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            name=name,
            password_hash=security.get_password_hash(password),
            is_admin=is_admin,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user(name="Alice Admin", email="admin@example.com", is_admin=True)


@pytest.fixture
def player(make_user):
    return make_user(name="Bob Player", email="bob@example.com")


@pytest.fixture
def other_player(make_user):
    return make_user(name="Carla Keeper", email="carla@example.com")


@pytest.fixture
def auth_headers(settings):
    def _auth_headers(user):
        return {"Authorization": f"Bearer {auth_service.issue_token(user, settings)}"}

    return _auth_headers


@pytest.fixture
def training_event(client, admin, auth_headers):
    response = client.post(
        "/api/events",
        json={
            "title": "Training",
            "date": "2024-06-01",
            "time_from": "18:00",
            "time_to": "20:00",
            "location": "Field A",
        },
        headers=auth_headers(admin),
    )
    assert response.status_code == 201
    return response.json()["event"]


@pytest.fixture
def password():
    return TEST_PASSWORD
