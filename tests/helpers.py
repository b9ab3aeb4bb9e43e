# tests/helpers.py
import uuid

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.roles import Role
from app.core.security import get_password_hash
from app.models.content import Event
from app.models.nursery import Nursery, NurseryLocation
from app.models.user import User

DEFAULT_PASSWORD = "Passw0rd!123"


def csrf_header(token: str) -> dict:
    return {"X-CSRF-Token": token}


def session_cookie(client) -> str | None:
    return client.cookies.get(settings.SESSION_COOKIE_NAME)


def create_nursery(db: Session, *, location: NurseryLocation) -> Nursery:
    nursery = Nursery(
        name=f"{location.value.title()} Nursery",
        location=location,
        address=f"1 High Street, {location.value.title()}",
        phone_number="020 0000 0000",
        email=f"{location.value}@example.com",
        description="",
        hero_image="",
    )
    db.add(nursery)
    db.commit()
    db.refresh(nursery)
    return nursery


def create_user(
    db: Session,
    *,
    role: Role = Role.REGULAR,
    nursery_id: int | None = None,
    username: str | None = None,
    password: str = DEFAULT_PASSWORD,
    is_active: bool = True,
) -> User:
    username = username or f"{role.value}_{uuid.uuid4().hex[:6]}"
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=get_password_hash(password),
        first_name="Test",
        last_name=role.value.title(),
        role=role,
        nursery_id=nursery_id,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_event(db: Session, *, nursery_id: int, created_by: int, title: str = "Sports Day") -> Event:
    event = Event(
        title=title,
        date="2026-06-01",
        time="10:00 AM",
        location="Garden",
        description="Annual sports day",
        nursery_id=nursery_id,
        created_by=created_by,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def login(client, user: User, password: str = DEFAULT_PASSWORD) -> str:
    """로그인 후 세션에 묶인 CSRF 토큰 반환"""
    r = client.post("/auth/login", json={"username": user.username, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["csrfToken"]
