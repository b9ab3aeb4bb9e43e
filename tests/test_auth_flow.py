"""
인증 기본 플로우 통합 테스트.
- 로그인(username / email) → 세션 쿠키 + CSRF 토큰 발급 → /auth/me
- 로그인 실패는 사유와 무관하게 동일한 응답, 존재하지 않는 아이디도 해시 연산 수행
- 로그아웃 멱등성, 세션 고정 방지, 만료/변경된 세션 폐기
"""

from datetime import timedelta

from sqlalchemy import select

from app.core.config import settings
from app.core.roles import Role
from app.db.base import utcnow
from app.models.auth_session import AuthSession
from app.models.user import User
from tests.helpers import DEFAULT_PASSWORD, create_user, csrf_header, login, session_cookie


def test_login_sets_session_cookie_and_returns_principal(client, db, nurseries):
    user = create_user(db, role=Role.NURSERY_ADMIN, nursery_id=nurseries[1].id)

    r = client.post("/auth/login", json={"username": user.username, "password": DEFAULT_PASSWORD})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    assert body["user"]["username"] == user.username
    assert body["user"]["role"] == "nursery_admin"
    assert body["user"]["nurseryId"] == nurseries[1].id
    assert body["csrfToken"]

    # 민감 정보 미포함
    assert "password" not in r.text.lower()
    assert user.password_hash not in r.text

    set_cookie = r.headers["set-cookie"]
    assert settings.SESSION_COOKIE_NAME in set_cookie
    assert "httponly" in set_cookie.lower()
    assert session_cookie(client)

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["id"] == user.id


def test_login_with_email(client, db):
    user = create_user(db, role=Role.SUPER_ADMIN)
    r = client.post("/auth/login", json={"username": user.email, "password": DEFAULT_PASSWORD})
    assert r.status_code == 200, r.text
    assert r.json()["user"]["role"] == "super_admin"


def test_login_failures_are_indistinguishable(client, db, monkeypatch):
    user = create_user(db, role=Role.STAFF, nursery_id=None)
    inactive = create_user(db, role=Role.REGULAR, is_active=False)

    dummy_calls = []
    import app.services.auth as auth_service
    original = auth_service.dummy_verify_password
    monkeypatch.setattr(auth_service, "dummy_verify_password", lambda: dummy_calls.append(1) or original())

    unknown = client.post("/auth/login", json={"username": "nobody", "password": "whatever"})
    wrong = client.post("/auth/login", json={"username": user.username, "password": "wrong-password"})
    disabled = client.post("/auth/login", json={"username": inactive.username, "password": DEFAULT_PASSWORD})

    for r in (unknown, wrong, disabled):
        assert r.status_code == 401
        assert r.json() == {"success": False, "message": "Invalid username or password"}

    # 존재하지 않는 아이디도 해시 검증 비용을 지불
    assert dummy_calls == [1]
    assert session_cookie(client) is None


def test_me_without_session_is_401(client):
    r = client.get("/auth/me")
    assert r.status_code == 401
    assert r.json() == {"success": False, "message": "Authentication required"}


def test_logout_is_idempotent(client, db):
    user = create_user(db, role=Role.SUPER_ADMIN)

    # 세션 없이 로그아웃 -> 성공
    r0 = client.post("/auth/logout")
    assert r0.status_code == 200
    assert r0.json()["success"] is True

    token = login(client, user)
    r1 = client.post("/auth/logout", headers=csrf_header(token))
    assert r1.status_code == 200
    assert client.get("/auth/me").status_code == 401

    # 이미 삭제된 세션으로 다시 로그아웃 -> 성공
    r2 = client.post("/auth/logout", headers=csrf_header(token))
    assert r2.status_code == 200

    assert db.scalars(select(AuthSession).where(AuthSession.user_id == user.id)).all() == []


def test_logout_with_valid_session_requires_csrf(client, db):
    user = create_user(db, role=Role.SUPER_ADMIN)
    login(client, user)

    r = client.post("/auth/logout")
    assert r.status_code == 400
    assert r.json()["success"] is False
    # 세션은 그대로 유지
    assert client.get("/auth/me").status_code == 200


def test_relogin_replaces_session(make_client, db):
    user = create_user(db, role=Role.SUPER_ADMIN)
    c = make_client()
    login(c, user)
    old_sid = session_cookie(c)

    login(c, user)
    new_sid = session_cookie(c)
    assert new_sid != old_sid

    # 이전 세션 ID 로는 더 이상 인증되지 않음
    other = make_client()
    r = other.get("/auth/me", headers={"Cookie": f"{settings.SESSION_COOKIE_NAME}={old_sid}"})
    assert r.status_code == 401


def test_expired_session_is_unauthenticated(client, db):
    user = create_user(db, role=Role.SUPER_ADMIN)
    login(client, user)

    row = db.scalar(select(AuthSession).where(AuthSession.user_id == user.id))
    row.expires_at = utcnow() - timedelta(seconds=1)
    db.commit()

    assert client.get("/auth/me").status_code == 401


def test_role_change_invalidates_session(client, db, nurseries):
    user = create_user(db, role=Role.NURSERY_ADMIN, nursery_id=nurseries[0].id)
    login(client, user)
    assert client.get("/auth/me").status_code == 200

    # 다른 경로(DB 직접 수정)로 소속이 바뀐 경우에도 이전 스냅샷 세션은 폐기
    db.expire_all()
    stored = db.get(User, user.id)
    stored.nursery_id = nurseries[1].id
    db.commit()

    assert client.get("/auth/me").status_code == 401
    db.expire_all()
    assert db.scalars(select(AuthSession).where(AuthSession.user_id == user.id)).all() == []


def test_deactivated_user_loses_session(client, db):
    user = create_user(db, role=Role.SUPER_ADMIN)
    login(client, user)

    db.expire_all()
    stored = db.get(User, user.id)
    stored.is_active = False
    db.commit()

    assert client.get("/auth/me").status_code == 401
