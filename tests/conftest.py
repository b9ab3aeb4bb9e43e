import os

# 앱 import 전에 설정 (bcrypt 비용 낮춤, 앱 기본 엔진은 메모리 DB)
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app as fastapi_app
from app.core.config import settings
from app.core.deps import get_db
from app.core.rate_limit import reset_rate_limits
from app.db.base import Base

# ✅ 모델 import (Base.metadata에 테이블 등록)
import app.models  # noqa: F401

from app.models.nursery import NurseryLocation
from tests.helpers import create_nursery


TEST_DB_URL = settings.TEST_DATABASE_URL or os.getenv("TEST_DATABASE_URL") or "sqlite://"

if TEST_DB_URL.startswith("sqlite"):
    # 메모리 SQLite 는 커넥션 하나를 모든 스레드가 공유해야 같은 DB 를 본다
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(TEST_DB_URL, pool_pre_ping=True)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """테스트 전체 시작/종료 때만 스키마 생성/삭제"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    """각 테스트마다 데이터 초기화 (테이블은 유지, row만 삭제)"""
    yield
    # FK 의존성 역순으로 삭제
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture(autouse=True)
def reset_request_limits():
    """요청 횟수 제한 버킷은 프로세스 전역이므로 테스트마다 비움"""
    reset_rate_limits()
    yield
    reset_rate_limits()


@pytest.fixture()
def db():
    """테스트에서 직접 DB 조작할 때 쓰는 세션"""
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client():
    fastapi_app.dependency_overrides[get_db] = override_get_db
    with TestClient(fastapi_app) as c:
        yield c
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def make_client():
    """쿠키 저장소가 분리된 클라이언트(= 서로 다른 브라우저)를 여러 개 만들 때 사용"""
    fastapi_app.dependency_overrides[get_db] = override_get_db
    clients = []

    def _make() -> TestClient:
        c = TestClient(fastapi_app)
        clients.append(c)
        return c

    yield _make
    for c in clients:
        c.close()
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def nurseries(db):
    """지점 3곳 (hayes, uxbridge, hounslow)"""
    return (
        create_nursery(db, location=NurseryLocation.HAYES),
        create_nursery(db, location=NurseryLocation.UXBRIDGE),
        create_nursery(db, location=NurseryLocation.HOUNSLOW),
    )
