"""
services/csrf.py

세션에 묶인 CSRF 토큰 발급/검증 서비스.

토큰 정책: 세션당 1개 고정 (fixed-per-session)
- 로그인 시 세션과 함께 생성되고, 세션 삭제 시 함께 사라진다
- 재발급 요청은 항상 같은 토큰을 돌려준다
  -> 탭 A가 받은 토큰이 탭 B의 재발급 요청 때문에 무효화되는 경쟁 상태가 없음
- 검증은 "요청 쿠키의 세션에 현재 묶여 있는 토큰"과의 상수 시간 비교

따라서 다른 세션의 토큰을 가져와도, 세션 쿠키만 탈취해도 검증을 통과할 수 없다.

"""

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.core.security import new_csrf_token, tokens_match
from app.models.auth_session import AuthSession
from app.services import sessions

# 요청 헤더 이름 (두 번째는 이전 클라이언트 호환용)
CSRF_HEADER_NAMES = ("X-CSRF-Token", "CSRF-Token")

# CSRF 검증이 필요 없는 HTTP 메서드
SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def issue_token(db: Session, session_id: str) -> str | None:
    """세션에 묶인 토큰을 반환한다. 세션이 유효하지 않으면 None."""
    auth_session = sessions.get_session(db, session_id)
    if auth_session is None:
        return None
    if auth_session.csrf_token:
        return auth_session.csrf_token

    # 토큰 없는 세션: 조건부 UPDATE 로 한 번만 생성하고, 동시에 생성된 값이 있으면 그것을 사용
    with sessions.store_errors(db):
        db.execute(
            update(AuthSession)
            .where(AuthSession.session_id == session_id, AuthSession.csrf_token.is_(None))
            .values(csrf_token=new_csrf_token())
        )
        db.commit()
        db.refresh(auth_session)
    return auth_session.csrf_token


def validate(auth_session: AuthSession | None, presented: str | None) -> bool:
    """요청에 제시된 토큰이 이 세션에 묶인 토큰과 같은지 검사."""
    if auth_session is None:
        return False
    return tokens_match(auth_session.csrf_token, presented)


def token_from_headers(headers) -> str | None:
    for name in CSRF_HEADER_NAMES:
        value = headers.get(name)
        if value:
            return value
    return None
