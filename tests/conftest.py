import os

# Point the application engine at SQLite before any project module is imported
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from auth import create_access_token
from db import Base, get_db
from main import app
import models


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_profile(db):
    counter = {"n": 0}

    def _make(role=models.Role.STAFF, **overrides):
        counter["n"] += 1
        values = {
            "email": f"user{counter['n']}@example.com",
            "role": role,
            "name": f"User {counter['n']}",
            "location": "Tel Aviv",
            "positions": [],
            "workplace_types": [],
            "screening_questions": [],
        }
        values.update(overrides)
        profile = models.Profile(**values)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return _make


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(profile):
        return {"Authorization": f"Bearer {create_access_token(profile)}"}

    return _headers
