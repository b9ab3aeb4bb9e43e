"""
client/auth_proxy.py

관리자 대시보드 클라이언트가 서버 인증 API 와 통신하기 위한 얇은 프록시.

httpx.AsyncClient 하나를 감싸며,
세션 쿠키는 클라이언트 쿠키 저장소에, CSRF 토큰은 프록시 인스턴스에 캐시한다.
(모듈 전역 캐시 없음 -> 프록시 인스턴스마다 독립)

주요 기능:
- CSRF 토큰 조회 및 캐시
- 로그인 / 로그아웃 / 현재 사용자 조회
- 상태 변경 요청에 CSRF 헤더 자동 첨부
  (토큰 불일치로 400 이 오면 토큰을 새로 받아 한 번만 재시도)

응답 해석:
- 401            -> "비로그인" (None)
- 5xx / 네트워크  -> AuthTransportError (비로그인으로 취급하지 않음)

"""

import logging

import httpx

from app.core.policy import Principal

logger = logging.getLogger(__name__)

CSRF_HEADER = "X-CSRF-Token"
MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class AuthTransportError(Exception):
    """서버에 도달하지 못했거나 서버 오류(5xx)가 발생한 경우."""


class AuthProxy:
    def __init__(self, base_url: str = "http://testserver", *, transport: httpx.AsyncBaseTransport | None = None):
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport)
        self._csrf_token: str | None = None

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AuthProxy":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise AuthTransportError(str(e)) from e
        if response.status_code >= 500:
            raise AuthTransportError(f"{method} {path} -> {response.status_code}")
        return response

    async def fetch_csrf_token(self) -> str:
        if self._csrf_token:
            return self._csrf_token
        response = await self._send("GET", "/auth/csrf-token")
        token = response.json().get("csrfToken")
        if not token:
            raise AuthTransportError("CSRF token not found in response")
        self._csrf_token = token
        return token

    def clear_csrf_token(self) -> None:
        self._csrf_token = None

    async def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        method = method.upper()
        if method not in MUTATING_METHODS:
            return await self._send(method, path, **kwargs)

        headers = dict(kwargs.pop("headers", None) or {})
        headers[CSRF_HEADER] = await self.fetch_csrf_token()
        response = await self._send(method, path, headers=headers, **kwargs)

        if response.status_code == 400 and "Security validation" in response.json().get("message", ""):
            # 캐시된 토큰이 이전 세션의 것일 수 있음
            logger.info("csrf token rejected, refetching")
            self.clear_csrf_token()
            headers[CSRF_HEADER] = await self.fetch_csrf_token()
            response = await self._send(method, path, headers=headers, **kwargs)
        return response

    async def login(self, username: str, password: str) -> Principal | None:
        response = await self._send("POST", "/auth/login", json={"username": username, "password": password})
        if response.status_code == 401:
            return None
        response.raise_for_status()
        data = response.json()
        self._csrf_token = data.get("csrfToken")
        return Principal.from_dict(data["user"])

    async def logout(self) -> None:
        try:
            await self.request("POST", "/auth/logout")
        finally:
            self.clear_csrf_token()

    async def me(self) -> Principal | None:
        response = await self._send("GET", "/auth/me")
        if response.status_code == 401:
            return None
        response.raise_for_status()
        data = response.json()
        if not data.get("success") or not data.get("user"):
            return None
        return Principal.from_dict(data["user"])

    async def set_scope(self, nursery_id: int | None) -> dict:
        response = await self.request("PUT", "/admin/scope", json={"nursery_id": nursery_id})
        response.raise_for_status()
        return response.json()["data"]
