"""
services/auth.py

인증(Authentication) 서비스.

로그인 / 로그아웃 / 현재 사용자(Principal) 조회를 담당한다.
HTTP 쿠키나 응답 형식은 라우터(app.routers.auth)가 처리하고,
이 파일은 DB 와 세션 저장소만 다룬다.

설계 원칙:
- "아이디 없음" / "비밀번호 틀림" / "비활성 계정" 은 모두 동일한 InvalidCredentials
- 아이디가 없어도 더미 해시 검증을 수행하여 응답 시간 차이를 없앰
- 로그인마다 새 세션 ID 발급 (기존 세션 재사용 금지)
- 세션의 권한 스냅샷과 현재 User 가 다르면 세션을 폐기하고 비로그인 처리
- DB 장애는 InfrastructureError 로 전파 (비로그인으로 바꾸지 않음)

관련 파일:
- app.services.sessions    : 세션 저장소
- app.core.security        : 비밀번호 검증
- app.core.policy          : Principal

"""

import logging

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.core.errors import InvalidCredentials
from app.core.policy import Principal
from app.core.roles import NURSERY_BOUND_ROLES
from app.core.security import dummy_verify_password, verify_password
from app.models.auth_session import AuthSession
from app.models.user import User
from app.services import sessions

logger = logging.getLogger(__name__)


def principal_from_user(user: User) -> Principal:
    return Principal(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=user.role,
        nursery_id=user.nursery_id,
    )


def _check_password(password: str, password_hash: str, user_id: int) -> bool:
    try:
        return verify_password(password, password_hash)
    except ValueError:
        # 해시 형식 손상: 로그인 실패로만 처리
        logger.error("unreadable password hash", extra={"user_id": user_id})
        return False


"""
로그인

- username 또는 email 로 사용자 조회
- 성공 시 (Principal, AuthSession) 반환
- 실패 시 InvalidCredentials (사유 구분 없음)

"""

def login(db: Session, username: str, password: str) -> tuple[Principal, AuthSession]:
    identifier = (username or "").strip()

    with sessions.store_errors(db):
        user = db.scalar(
            select(User).where(or_(User.username == identifier, User.email == identifier))
        )

    if user is None:
        dummy_verify_password()
        logger.info("login failed", extra={"reason": "unknown_user"})
        raise InvalidCredentials()

    if not _check_password(password, user.password_hash, user.id):
        logger.info("login failed", extra={"reason": "bad_password", "user_id": user.id})
        raise InvalidCredentials()

    if not user.is_active:
        logger.info("login failed", extra={"reason": "inactive", "user_id": user.id})
        raise InvalidCredentials()

    if user.role in NURSERY_BOUND_ROLES and user.nursery_id is None:
        # 로그인은 허용하지만 이후 모든 어린이집 범위 요청은 거부됨
        logger.warning("nursery-bound account without nursery", extra={"user_id": user.id})

    sessions.purge_expired(db)
    auth_session = sessions.create_session(db, user)

    logger.info("login succeeded", extra={"user_id": user.id, "role": user.role.value})
    return principal_from_user(user), auth_session


def logout(db: Session, session_id: str | None) -> None:
    sessions.destroy_session(db, session_id)


"""
현재 세션 + 사용자 조회

- 세션이 없거나 만료 -> None
- 사용자 삭제 / 비활성화 / 권한·소속 변경 -> 세션 폐기 후 None
- 그 외 (AuthSession, Principal)

"""

def current_session(db: Session, session_id: str | None) -> tuple[AuthSession, Principal] | None:
    auth_session = sessions.get_session(db, session_id)
    if auth_session is None:
        return None

    with sessions.store_errors(db):
        user = db.get(User, auth_session.user_id)

    stale = (
        user is None
        or not user.is_active
        or user.role != auth_session.role
        or user.nursery_id != auth_session.nursery_id
    )
    if stale:
        logger.info("stale session destroyed", extra={"user_id": auth_session.user_id})
        sessions.destroy_session(db, auth_session.session_id)
        return None

    return auth_session, principal_from_user(user)


def current_principal(db: Session, session_id: str | None) -> Principal | None:
    found = current_session(db, session_id)
    return found[1] if found else None
