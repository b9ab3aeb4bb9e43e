"""
deps.py

FastAPI 의존성(Dependency) 모음 및 서버 측 RouteGuard.

모든 관리자 API 는 require_access(...) 가 돌려주는 의존성을 거쳐야 하며,
이 의존성은 다음 순서로 요청을 검사한다.

1. 세션 쿠키 -> 서버 세션 조회 -> Principal   (없으면 401)
2. 상태 변경 메서드(POST/PUT/PATCH/DELETE) 이면 CSRF 토큰 검증   (실패 시 400)
3. policy.decide(principal, min_role, 대상 어린이집)   (거부 시 401/403)
4. 통과 시 AccessContext(principal, 세션, 현재 범위) 를 핸들러에 전달

거부 사유는 로그에만 정확히 남기고(extra={"reason": ...}),
응답 본문은 항상 일반화된 메시지를 사용한다.

관련 파일:
- app.core.policy          : 허용/거부 판단
- app.services.auth        : 세션 -> Principal
- app.services.csrf        : CSRF 헤더 이름 / 안전 메서드
- app.services.scope       : 세션에 저장된 범위 재검증

"""

import logging
from dataclasses import dataclass
from typing import Callable, Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core import policy
from app.core.config import settings
from app.core.errors import AccessDenied, CsrfValidationFailed, DenyReason, Unauthenticated
from app.core.policy import Principal
from app.core.roles import Role
from app.db.session import SessionLocal
from app.models.auth_session import AuthSession
from app.services import auth as auth_service
from app.services import csrf
from app.services.scope import NurseryScope, resolve_scope

logger = logging.getLogger(__name__)

NurseryResolver = Callable[[Request], "int | None"]


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_id(request: Request) -> str | None:
    return request.cookies.get(settings.SESSION_COOKIE_NAME)


@dataclass(frozen=True)
class AccessContext:
    """RouteGuard 를 통과한 요청의 인증 정보."""

    principal: Principal
    session: AuthSession
    scope: NurseryScope


def get_optional_principal(
    session_id: str | None = Depends(get_session_id),
    db: Session = Depends(get_db),
) -> Principal | None:
    return auth_service.current_principal(db, session_id)


"""
대상 어린이집 ID 추출기

- path_nursery("nursery_id")  : /admin/nurseries/{nursery_id}/... 경로 변수
- query_nursery("nursery_id") : ?nursery_id=... 쿼리 파라미터
- 숫자가 아니면 None (이후 FastAPI 파라미터 검증에서 422)

"""

def _as_int(value) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def path_nursery(param: str = "nursery_id") -> NurseryResolver:
    def _resolve(request: Request) -> int | None:
        return _as_int(request.path_params.get(param))
    return _resolve


def query_nursery(param: str = "nursery_id") -> NurseryResolver:
    def _resolve(request: Request) -> int | None:
        return _as_int(request.query_params.get(param))
    return _resolve


def _deny(request: Request, reason: DenyReason, principal: Principal | None = None, target=None):
    logger.warning(
        "access denied",
        extra={
            "reason": reason.value,
            "user_id": principal.id if principal else None,
            "role": principal.role.value if principal else None,
            "target_nursery_id": target,
            "method": request.method,
            "path": request.url.path,
        },
    )
    if reason == DenyReason.UNAUTHENTICATED:
        raise Unauthenticated()
    raise AccessDenied(reason)


"""
서버 RouteGuard 의존성 팩토리

- min_role : 필요한 최소 권한 (None 이면 로그인만 요구)
- nursery  : 대상 어린이집 ID 추출기 (None 이면 어린이집 검사 생략)

"""

def require_access(min_role: Role | None = None, nursery: NurseryResolver | None = None):
    def _guard(request: Request, db: Session = Depends(get_db)) -> AccessContext:
        found = auth_service.current_session(db, get_session_id(request))
        if found is None:
            _deny(request, DenyReason.UNAUTHENTICATED)
        auth_session, principal = found

        if request.method not in csrf.SAFE_METHODS:
            presented = csrf.token_from_headers(request.headers)
            if not csrf.validate(auth_session, presented):
                logger.warning(
                    "csrf validation failed",
                    extra={"user_id": principal.id, "method": request.method, "path": request.url.path},
                )
                raise CsrfValidationFailed()

        target = nursery(request) if nursery else None
        decision = policy.decide(principal, min_role, target)
        if not decision.allowed:
            _deny(request, decision.reason, principal, target)

        scope = resolve_scope(principal, auth_session.selected_nursery_id)
        return AccessContext(principal=principal, session=auth_session, scope=scope)
    return _guard


get_current_staff = require_access(Role.STAFF)
get_current_nursery_admin = require_access(Role.NURSERY_ADMIN)
get_current_super_admin = require_access(Role.SUPER_ADMIN)
