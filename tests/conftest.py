import os

# Must be set before app modules read settings.
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"

import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token, hash_password
from app.db.session import Base, get_db
from app.main import app
from app.models.booking import Booking
from app.models.user import User
from app.models import audit_log, refresh_token, review, room, room_lock  # noqa: F401  (register tables)

API = "/api/v1"

engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session):
    def _get_test_db():
        s = TestingSessionLocal()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(db: Session, email: str = "guest@example.com", password: str = "Secret123!",
              role: str = "user", name: str = "Test Guest") -> User:
    u = User(
        id=str(uuid.uuid4()),
        email=email,
        name=name,
        role=role,
        password_hash=hash_password(password),
        is_active=True,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def make_booking(db: Session, check_in: date, check_out: date, room_category: str = "deluxe-room",
                 room_title: str = "Deluxe-201", status: str = "confirmed", user: User | None = None,
                 email: str = "guest@example.com", total_price: int = 20000) -> Booking:
    b = Booking(
        id=str(uuid.uuid4()),
        booking_id="BK-" + uuid.uuid4().hex[:8].upper(),
        user_id=user.id if user else None,
        first_name="Ana",
        last_name="Cruz",
        email=user.email if user else email,
        phone="+63 900 000 0000",
        room_title=room_title,
        room_category=room_category,
        check_in=check_in,
        check_out=check_out,
        nights=(check_out - check_in).days,
        guests=2,
        base_price=total_price,
        tax_and_fees=0,
        total_price=total_price,
        status=status,
        payment_status="pending",
    )
    db.add(b)
    db.commit()
    db.refresh(b)
    return b


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def guest(db: Session) -> User:
    return make_user(db)


@pytest.fixture
def admin(db: Session) -> User:
    return make_user(db, email="admin@example.com", role="admin", name="Hotel Admin")
