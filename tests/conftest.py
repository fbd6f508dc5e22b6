"""
Test configuration for pytest
"""

import os

# Test environment variables, set before teachflow reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEBUG"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"

from datetime import datetime
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import teachflow.models  # noqa: F401
from teachflow.core.auth import create_access_token, hash_password
from teachflow.core.context import Caller
from teachflow.core.database import get_session
from teachflow.models import ClassRecord, Contractor, Student, User

TEST_PASSWORD = "password123"
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)

# One shared in-memory SQLite connection for the app and the test
test_engine = create_engine(
    "sqlite://",
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a clean database session for each test"""
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session

    SQLModel.metadata.drop_all(test_engine)


def make_user(db: Session, email: str, name: str, timezone: str = "America/Sao_Paulo") -> User:
    user = User(
        email=email,
        password_hash=TEST_PASSWORD_HASH,
        name=name,
        default_currency="BRL",
        timezone=timezone,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_contractor(db: Session, user: User, **overrides) -> Contractor:
    values = dict(
        user_id=user.id,
        name="Escola Alfa",
        default_hourly_rate=Decimal("50.00"),
        currency="BRL",
        payment_terms_days=30,
    )
    values.update(overrides)
    contractor = Contractor(**values)
    db.add(contractor)
    db.commit()
    db.refresh(contractor)
    return contractor


def make_student(db: Session, user: User, contractor: Contractor = None, **overrides) -> Student:
    values = dict(
        user_id=user.id,
        contractor_id=contractor.id if contractor else None,
        name="Ana Souza",
        email="ana@example.com",
    )
    values.update(overrides)
    student = Student(**values)
    db.add(student)
    db.commit()
    db.refresh(student)
    return student


def make_class(db: Session, user: User, student: Student, contractor: Contractor, **overrides) -> ClassRecord:
    start_time = overrides.pop("start_time", datetime(2024, 1, 1, 13, 0))
    duration = overrides.pop("duration_minutes", 60)
    class_record = ClassRecord(
        user_id=user.id,
        student_id=student.id,
        contractor_id=contractor.id,
        start_time=start_time,
        duration_minutes=duration,
        end_time=ClassRecord.compute_end_time(start_time, duration),
        **overrides,
    )
    db.add(class_record)
    db.commit()
    db.refresh(class_record)
    return class_record


@pytest.fixture
def user(db: Session) -> User:
    """Teacher whose data the tests act on"""
    return make_user(db, "teacher@example.com", "Maria Teacher")


@pytest.fixture
def other_user(db: Session) -> User:
    """A second tenant"""
    return make_user(db, "other@example.com", "Other Teacher")


@pytest.fixture
def caller(user: User) -> Caller:
    return Caller.from_user(user)


@pytest.fixture
def other_caller(other_user: User) -> Caller:
    return Caller.from_user(other_user)


@pytest.fixture
def contractor(db: Session, user: User) -> Contractor:
    return make_contractor(db, user)


@pytest.fixture
def student(db: Session, user: User, contractor: Contractor) -> Student:
    return make_student(db, user, contractor)


@pytest.fixture
def scheduled_class(db: Session, user: User, student: Student, contractor: Contractor) -> ClassRecord:
    return make_class(db, user, student, contractor)


@pytest.fixture
def foreign_contractor(db: Session, other_user: User) -> Contractor:
    return make_contractor(db, other_user, name="Other School")


@pytest.fixture
def foreign_student(db: Session, other_user: User, foreign_contractor: Contractor) -> Student:
    return make_student(db, other_user, foreign_contractor, name="Someone Else", email="else@example.com")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email)}"}


@pytest.fixture
def client(db: Session) -> Generator[TestClient, None, None]:
    """API client bound to the test database session"""
    from teachflow.main import app

    def override_get_session():
        yield db

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
