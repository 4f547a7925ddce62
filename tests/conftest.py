from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from survey_tracker.auth.jwt import create_access_token
from survey_tracker.core.config import get_config
from survey_tracker.core.dependencies import get_db_session
from survey_tracker.core.security import hash_password
from survey_tracker.domain.enums import Gender, UserRole
from survey_tracker.main import app
from survey_tracker.models import Base, Client, User


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'survey_tracker_test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(role: str = "surveyor", first_name: str = "Noa", password: str = "password123", **extra) -> User:
        counter["n"] += 1
        user = User(
            email=extra.pop("email", f"user{counter['n']}@example.com"),
            first_name=first_name,
            last_name=extra.pop("last_name", "Cohen"),
            role=UserRole(role),
            gender=Gender(extra.pop("gender", "female")),
            hashed_password=hash_password(password),
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_client(db_session):
    def _make_client(name: str = "Acme") -> Client:
        client = Client(name=name)
        db_session.add(client)
        db_session.commit()
        return client

    return _make_client


@pytest.fixture
def api_client(session_factory):
    def _override_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db_session] = _override_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_header():
    def _auth_header(user: User) -> dict[str, str]:
        token = create_access_token(
            user_id=user.id,
            role=user.role.value,
            gender=user.gender.value,
            secret=get_config().JWT_SECRET,
        )
        return {"Authorization": f"Bearer {token}"}

    return _auth_header
