"""
client/route_guard.py

클라이언트 측 인증 상태(AuthProvider)와 화면 보호(RouteGuard).

서버 RouteGuard 가 최종 권한 판단자이며,
이 파일은 "어떤 화면을 그릴지"만 결정한다.
(로딩 / 화면 표시 / 로그인 화면으로 이동 / 접근 거부 / 재시도)

권한 판단은 서버와 동일한 app.core.policy.decide 를 그대로 사용한다.

설계 원칙:
- 인증 상태는 AuthProvider 인스턴스가 소유 (모듈 전역 싱글톤 없음)
  -> async with 로 생성/종료 시점을 명시
- 화면 이동마다 새 검사를 시작하고 세대 번호(generation)를 부여
  -> 늦게 끝난 이전 검사의 결과는 무시 (가장 최근 이동이 항상 이김)
- 서버 오류 / 네트워크 오류는 비로그인으로 바꾸지 않고 RETRY 화면

인증 상태 전이:
UNCHECKED -> CHECKING -> AUTHENTICATED | UNAUTHENTICATED | ERROR

"""

import logging
from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote

from app.client.auth_proxy import AuthProxy, AuthTransportError
from app.core.errors import DenyReason
from app.core.policy import Principal, decide
from app.core.roles import Role

logger = logging.getLogger(__name__)


class AuthStatus(str, Enum):
    UNCHECKED = "unchecked"
    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"
    ERROR = "error"


class GuardView(str, Enum):
    LOADING = "loading"
    RENDER = "render"
    REDIRECT_LOGIN = "redirect_login"
    ACCESS_DENIED = "access_denied"
    RETRY = "retry"


@dataclass(frozen=True)
class RouteRequirement:
    path: str
    min_role: Role | None = None
    nursery_id: int | None = None


@dataclass(frozen=True)
class GuardOutcome:
    generation: int
    path: str
    view: GuardView
    reason: DenyReason | None = None
    redirect_to: str | None = None


class AuthProvider:
    """로그인 사용자 상태를 보관하고 서버와 동기화한다."""

    def __init__(self, proxy: AuthProxy):
        self.proxy = proxy
        self.status = AuthStatus.UNCHECKED
        self.principal: Principal | None = None
        self._checks = 0

    async def __aenter__(self) -> "AuthProvider":
        return self

    async def __aexit__(self, *exc) -> None:
        self.principal = None
        self.status = AuthStatus.UNCHECKED
        await self.proxy.aclose()

    async def refresh(self) -> Principal | None:
        """서버에 현재 사용자를 묻는다. 더 최근 검사가 시작되었으면 상태는 갱신하지 않는다."""
        self._checks += 1
        check = self._checks
        self.status = AuthStatus.CHECKING
        try:
            principal = await self.proxy.me()
        except AuthTransportError:
            if check == self._checks:
                self.status = AuthStatus.ERROR
            raise

        if check == self._checks:
            self.principal = principal
            self.status = AuthStatus.AUTHENTICATED if principal else AuthStatus.UNAUTHENTICATED
        return principal

    async def login(self, username: str, password: str) -> bool:
        principal = await self.proxy.login(username, password)
        self._checks += 1
        self.principal = principal
        self.status = AuthStatus.AUTHENTICATED if principal else AuthStatus.UNAUTHENTICATED
        return principal is not None

    async def logout(self) -> None:
        self._checks += 1
        try:
            await self.proxy.logout()
        finally:
            self.principal = None
            self.status = AuthStatus.UNAUTHENTICATED


class RouteGuard:
    def __init__(self, provider: AuthProvider, login_path: str = "/admin/login"):
        self.provider = provider
        self.login_path = login_path
        self._generation = 0
        self.current = GuardOutcome(generation=0, path="", view=GuardView.LOADING)

    def _outcome(self, generation: int, requirement: RouteRequirement, principal: Principal | None) -> GuardOutcome:
        decision = decide(principal, requirement.min_role, requirement.nursery_id)
        if decision.allowed:
            return GuardOutcome(generation, requirement.path, GuardView.RENDER)
        if decision.reason == DenyReason.UNAUTHENTICATED:
            return GuardOutcome(
                generation,
                requirement.path,
                GuardView.REDIRECT_LOGIN,
                reason=decision.reason,
                redirect_to=f"{self.login_path}?redirect={quote(requirement.path, safe='')}",
            )
        return GuardOutcome(generation, requirement.path, GuardView.ACCESS_DENIED, reason=decision.reason)

    """
    화면 이동 처리

    - 이동 즉시 LOADING 으로 바꾸고 서버에 현재 사용자를 확인
    - 확인이 끝났을 때 더 최근 이동이 있었다면 None 을 반환하고 아무것도 바꾸지 않음
    - 그렇지 않으면 판단 결과를 current 에 반영하고 반환

    """

    async def navigate(self, requirement: RouteRequirement) -> GuardOutcome | None:
        self._generation += 1
        generation = self._generation
        self.current = GuardOutcome(generation, requirement.path, GuardView.LOADING)

        try:
            principal = await self.provider.refresh()
        except AuthTransportError:
            if generation != self._generation:
                return None
            logger.warning("auth check failed", extra={"path": requirement.path})
            self.current = GuardOutcome(generation, requirement.path, GuardView.RETRY)
            return self.current

        if generation != self._generation:
            logger.debug("superseded auth check ignored", extra={"path": requirement.path})
            return None

        self.current = self._outcome(generation, requirement, principal)
        return self.current
