"""
rate_limit.py

클라이언트(IP)별 요청 횟수 제한.

- 일반 API   : RATE_LIMIT_REQUESTS 회 / RATE_LIMIT_WINDOW_SECONDS (기본 100회 / 15분)
- 로그인 API : LOGIN_RATE_LIMIT_REQUESTS 회 / 같은 시간 창 (비밀번호 대입 방지)
- 초과 시 429 {"success": false, "message": "Too many requests, please try again later."}
- 한도 값이 0 이면 해당 제한 비활성화
- /health, /db-ping, 문서 경로는 제한하지 않음

토큰 버킷 계산은 순수 함수 check_rate_limit 로 분리되어 있어
미들웨어 없이 단위 테스트할 수 있다.

NOTE:
- 버킷은 프로세스 메모리에 저장 (워커가 여러 개면 워커별로 따로 계산)
- 프록시 뒤에서는 uvicorn --proxy-headers 로 실제 클라이언트 IP 를 전달해야 함

"""

import logging
import threading
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.core.config import settings

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Too many requests, please try again later."

EXEMPT_PATHS = frozenset({"/health", "/db-ping", "/docs", "/redoc", "/openapi.json"})
LOGIN_PATH = "/auth/login"

# {client_key: (남은 토큰 수, 마지막 갱신 시각)}
_api_buckets: dict[str, tuple[float, float]] = {}
_login_buckets: dict[str, tuple[float, float]] = {}
_lock = threading.Lock()


def check_rate_limit(
    bucket: dict[str, tuple[float, float]],
    key: str,
    max_requests: int,
    window_seconds: float,
    now: float | None = None,
) -> tuple[bool, float]:
    """토큰 버킷 검사. (허용 여부, 다음 토큰까지 남은 초) 를 반환하고 bucket 을 갱신한다."""
    if max_requests <= 0 or window_seconds <= 0:
        return True, 0.0
    if now is None:
        now = time.monotonic()

    # 창 하나 이상 갱신이 없던 키는 가득 찬 상태와 같으므로 제거
    stale = [k for k, (_, ts) in bucket.items() if now - ts > window_seconds]
    for k in stale:
        del bucket[k]

    refill_rate = max_requests / window_seconds
    if key in bucket:
        tokens, last = bucket[key]
        tokens = min(float(max_requests), tokens + (now - last) * refill_rate)
    else:
        tokens = float(max_requests)

    if tokens >= 1.0:
        bucket[key] = (tokens - 1.0, now)
        return True, 0.0

    bucket[key] = (tokens, now)
    return False, (1.0 - tokens) / refill_rate


def reset_rate_limits() -> None:
    with _lock:
        _api_buckets.clear()
        _login_buckets.clear()


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _too_many(request: Request, key: str, retry_after: float) -> JSONResponse:
    logger.warning(
        "rate limit exceeded",
        extra={"client": key, "path": request.url.path, "retry_after": round(retry_after, 1)},
    )
    return JSONResponse(
        status_code=429,
        content={"success": False, "message": RATE_LIMIT_MESSAGE},
        headers={"Retry-After": str(int(retry_after) + 1)},
    )


class RateLimitMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if path in EXEMPT_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        key = _client_key(request)
        window = settings.RATE_LIMIT_WINDOW_SECONDS
        with _lock:
            allowed, retry_after = check_rate_limit(
                _api_buckets, key, settings.RATE_LIMIT_REQUESTS, window
            )
            if allowed and path == LOGIN_PATH and request.method == "POST":
                allowed, retry_after = check_rate_limit(
                    _login_buckets, key, settings.LOGIN_RATE_LIMIT_REQUESTS, window
                )
        if not allowed:
            return _too_many(request, key, retry_after)

        return await call_next(request)
