"""
auth.py

인증(Authentication) API 모음.

이 파일은 관리자 대시보드의 로그인 / 로그아웃 / 현재 사용자 조회 /
CSRF 토큰 발급 흐름을 담당한다.
서버 측 세션 방식을 사용하며, 브라우저에는 세션 ID 만 HttpOnly 쿠키로 전달된다.

주요 기능:
- CSRF 토큰 발급
- 로그인 (세션 생성 + 세션 쿠키 설정)
- 로그아웃 (세션 삭제, 멱등)
- 현재 로그인 사용자 조회

설계 원칙:
- 로그인 실패 사유는 구분하지 않음 ("Invalid username or password")
- 로그인 시 기존 세션은 폐기하고 새 세션 ID 발급
- 응답에 비밀번호 해시 등 민감 정보 포함 금지
- 유효한 세션이 있는 로그아웃 요청은 CSRF 토큰 필요

관련 파일:
- app.services.auth        : 로그인 / 세션 -> Principal
- app.services.csrf        : CSRF 토큰 발급/검증
- app.core.config          : 세션 쿠키 옵션

"""

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_db, get_optional_principal, get_session_id
from app.core.errors import CsrfValidationFailed, Unauthenticated
from app.core.policy import Principal
from app.core.security import new_csrf_token
from app.schemas.auth import CsrfTokenResponse, LoginRequest
from app.services import auth as auth_service
from app.services import csrf

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        secure=settings.COOKIE_SECURE,        # 로컬 False / HTTPS 운영 True
        samesite=settings.COOKIE_SAMESITE,    # "lax" 추천
        domain=settings.COOKIE_DOMAIN,        # 보통 None
        path="/",
        max_age=settings.SESSION_MAX_AGE_MINUTES * 60,
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        domain=settings.COOKIE_DOMAIN,
    )


"""
CSRF 토큰 발급 API

- 유효한 세션이 있으면 그 세션에 묶인 토큰을 반환 (여러 번 호출해도 동일)
- 세션이 없으면 어디에도 묶이지 않은 임의 토큰을 반환
  (로그인 전 화면 초기화용, 이 토큰으로 통과할 수 있는 요청은 없음)

"""

@router.get("/csrf-token", response_model=CsrfTokenResponse)
def get_csrf_token(
    session_id: str | None = Depends(get_session_id),
    db: Session = Depends(get_db),
):
    token = csrf.issue_token(db, session_id) if session_id else None
    return {"success": True, "csrfToken": token or new_csrf_token()}


"""
로그인 API

- username 또는 email + 비밀번호 인증
- 세션 ID 는 HttpOnly Cookie 로 설정
- 세션에 묶인 CSRF 토큰은 응답 바디로 반환

"""

@router.post("/login")
def login(
    data: LoginRequest,
    response: Response,
    session_id: str | None = Depends(get_session_id),
    db: Session = Depends(get_db),
):
    principal, auth_session = auth_service.login(db, data.username, data.password)

    # 세션 고정 공격 방지: 이전 세션은 폐기
    if session_id:
        auth_service.logout(db, session_id)

    _set_session_cookie(response, auth_session.session_id)
    return {
        "success": True,
        "user": principal.to_dict(),
        "csrfToken": auth_session.csrf_token,
    }


"""
로그아웃 API

- 세션이 없거나 이미 만료된 경우에도 성공 (멱등)
- 유효한 세션이 있으면 CSRF 토큰 검증 후 삭제
- 세션 쿠키 삭제

"""

@router.post("/logout")
def logout(
    request: Request,
    response: Response,
    session_id: str | None = Depends(get_session_id),
    db: Session = Depends(get_db),
):
    found = auth_service.current_session(db, session_id)
    if found is not None:
        auth_session, principal = found
        if not csrf.validate(auth_session, csrf.token_from_headers(request.headers)):
            logger.warning("csrf validation failed", extra={"user_id": principal.id, "path": request.url.path})
            raise CsrfValidationFailed()
        auth_service.logout(db, auth_session.session_id)
        logger.info("logout", extra={"user_id": principal.id})

    _clear_session_cookie(response)
    return {"success": True, "message": "Logged out"}


"""
현재 로그인 사용자 조회 API

- 세션이 없거나 만료되었으면 401
- 비밀번호 해시는 절대 포함하지 않음

"""

@router.get("/me")
def me(principal: Principal | None = Depends(get_optional_principal)):
    if principal is None:
        raise Unauthenticated()
    return {"success": True, "user": principal.to_dict()}
