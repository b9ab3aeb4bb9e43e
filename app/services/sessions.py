"""
services/sessions.py

서버 측 로그인 세션 저장소(SessionStore).

브라우저 쿠키에는 session_id 만 담기고,
로그인 사용자 / 권한 스냅샷 / CSRF 토큰 / 범위 선택 상태는 sessions 테이블에 저장된다.

주요 기능:
- 세션 생성 (로그인 시)
- 유효 세션 조회 (만료되지 않은 레코드만)
- 세션 삭제 (로그아웃, 멱등)
- 사용자 전체 세션 삭제 (권한 변경 / 비활성화 시)
- 만료 세션 정리
- 범위 선택 값 저장

설계 원칙:
- 각 함수는 단일 SQL 문으로 동작하고 스스로 commit 한다
  (로그아웃 DELETE 와 동시 요청의 SELECT 는 항상 "완전히 유효" 또는 "완전히 삭제" 중 하나만 관찰)
- DB 오류는 InfrastructureError 로 변환 (절대 "비로그인"으로 취급하지 않음)

관련 파일:
- app.models.auth_session  : AuthSession 모델
- app.services.csrf        : 세션에 묶인 CSRF 토큰
- app.services.auth        : 로그인 / 로그아웃 / 현재 사용자 조회

"""

import logging
from contextlib import contextmanager
from datetime import timedelta

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import InfrastructureError
from app.core.security import new_csrf_token, new_session_id
from app.db.base import utcnow
from app.models.auth_session import AuthSession
from app.models.user import User

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(db: Session):
    """DB 오류를 롤백 후 InfrastructureError 로 변환한다."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("session store failure", extra={"error": type(e).__name__}, exc_info=True)
        raise InfrastructureError() from e


"""
세션 생성

- 로그인 성공 시 호출
- 세션 ID / CSRF 토큰은 서로 독립적인 난수
- role / nursery_id 는 로그인 시점 값으로 스냅샷

"""

def create_session(db: Session, user: User) -> AuthSession:
    now = utcnow()
    auth_session = AuthSession(
        session_id=new_session_id(),
        user_id=user.id,
        role=user.role,
        nursery_id=user.nursery_id,
        csrf_token=new_csrf_token(),
        created_at=now,
        expires_at=now + timedelta(minutes=settings.SESSION_MAX_AGE_MINUTES),
    )
    with store_errors(db):
        db.add(auth_session)
        db.commit()
        db.refresh(auth_session)
    return auth_session


"""
유효 세션 조회

- 레코드가 없거나 만료되었으면 None
- 쿠키가 있다는 사실만으로는 아무것도 신뢰하지 않음

"""

def get_session(db: Session, session_id: str | None) -> AuthSession | None:
    if not session_id:
        return None
    with store_errors(db):
        return db.scalar(
            select(AuthSession).where(
                AuthSession.session_id == session_id,
                AuthSession.expires_at > utcnow(),
            )
        )


def destroy_session(db: Session, session_id: str | None) -> None:
    # 없는 세션 삭제도 정상 처리 (로그아웃 멱등성)
    if not session_id:
        return
    with store_errors(db):
        db.execute(delete(AuthSession).where(AuthSession.session_id == session_id))
        db.commit()


def destroy_user_sessions(db: Session, user_id: int) -> int:
    with store_errors(db):
        result = db.execute(delete(AuthSession).where(AuthSession.user_id == user_id))
        db.commit()
    return result.rowcount or 0


def purge_expired(db: Session) -> int:
    with store_errors(db):
        result = db.execute(delete(AuthSession).where(AuthSession.expires_at <= utcnow()))
        db.commit()
    return result.rowcount or 0


def set_selected_nursery(db: Session, session_id: str, selected_nursery_id: int | None) -> None:
    with store_errors(db):
        db.execute(
            update(AuthSession)
            .where(AuthSession.session_id == session_id)
            .values(selected_nursery_id=selected_nursery_id)
        )
        db.commit()
