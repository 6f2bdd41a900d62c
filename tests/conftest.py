"""Shared fixtures: an in-memory SQLite database and a test client bound to it."""

import os

# Must be set before the application settings are first imported
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from student_registry.core.database import Base, get_db
from student_registry.main import app
from student_registry.models import Student  # noqa: F401  registers the table


def make_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def override_for(engine):
    """Build a get_db replacement bound to ``engine``."""
    TestingSession = sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    def override_get_db():
        session = TestingSession()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return override_get_db


@pytest.fixture
def engine():
    engine = make_engine()
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_db] = override_for(engine)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client():
    """Client whose database has no students table, so every query fails."""
    engine = make_engine()
    app.dependency_overrides[get_db] = override_for(engine)
    yield TestClient(app)
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def registration():
    """A complete, valid registration form."""
    return {
        "roll_number": "21CS045",
        "name": "Anil Sharma",
        "father_name": "Ramesh Sharma",
        "address": "12 MG Road, Hyderabad",
        "age": "18",
        "phone": "9876543210",
        "email": "anil@example.com",
        "father_phone": "9876500000",
        "father_email": "",
        "eamcet_rank": "1520",
        "ssc_marks": "9.5",
        "inter_marks": "",
        "achievements": "",
        "remarks": "",
        "identification_mark": "Mole on left hand",
        "blood_group": "B+",
    }
