"""
요청 횟수 제한 테스트.
- 토큰 버킷 순수 함수: 한도 내 허용, 소진 후 거부, 시간 경과 후 회복, 클라이언트별 독립
- 로그인 연속 실패는 한도 이후 429 (비밀번호 대입 방지)
- 일반 API 한도 초과도 429, 헬스 체크는 제한 없음
"""

from app.core.config import settings
from app.core.rate_limit import RATE_LIMIT_MESSAGE, check_rate_limit
from app.core.roles import Role
from tests.helpers import DEFAULT_PASSWORD, create_user


def test_allows_within_limit():
    bucket: dict = {}
    allowed, retry = check_rate_limit(bucket, "client-a", 5, 60, now=0.0)
    assert allowed is True
    assert retry == 0.0


def test_denies_after_exhaustion_then_refills():
    bucket: dict = {}
    for _ in range(5):
        assert check_rate_limit(bucket, "client-a", 5, 60, now=0.0)[0]

    allowed, retry = check_rate_limit(bucket, "client-a", 5, 60, now=0.0)
    assert allowed is False
    assert retry > 0

    # 5회 / 60초 -> 12초마다 1회 회복
    assert check_rate_limit(bucket, "client-a", 5, 60, now=13.0)[0]


def test_clients_are_independent():
    bucket: dict = {}
    for _ in range(5):
        check_rate_limit(bucket, "client-a", 5, 60, now=0.0)
    assert check_rate_limit(bucket, "client-b", 5, 60, now=0.0)[0]


def test_zero_limit_disables():
    bucket: dict = {}
    for _ in range(50):
        assert check_rate_limit(bucket, "any", 0, 60, now=0.0)[0]


def test_repeated_bad_logins_are_throttled(client, db):
    user = create_user(db, role=Role.NURSERY_ADMIN)
    bad = {"username": user.username, "password": "wrong-password"}

    statuses = [client.post("/auth/login", json=bad).status_code for _ in range(settings.LOGIN_RATE_LIMIT_REQUESTS)]
    assert set(statuses) == {401}

    r = client.post("/auth/login", json=bad)
    assert r.status_code == 429
    assert r.json() == {"success": False, "message": RATE_LIMIT_MESSAGE}
    assert int(r.headers["Retry-After"]) >= 1

    # 한도에 걸린 뒤에는 올바른 비밀번호도 거부
    good = client.post("/auth/login", json={"username": user.username, "password": DEFAULT_PASSWORD})
    assert good.status_code == 429


def test_api_limit_applies_to_other_routes(client, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_REQUESTS", 3)

    statuses = [client.get("/auth/me").status_code for _ in range(3)]
    assert set(statuses) == {401}

    r = client.get("/auth/me")
    assert r.status_code == 429
    assert r.json()["success"] is False

    # 헬스 체크는 제한 대상 아님
    assert client.get("/health").status_code == 200
