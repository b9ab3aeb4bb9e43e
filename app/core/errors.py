"""
errors.py

인증/인가 계층의 예외(Exception) 정의 파일.

내부적으로는 거부 사유를 정확히 구분(DenyReason)하여 로그에 남기고,
클라이언트에게는 의도적으로 일반화된 메시지만 전달한다.
(권한 부족 / 다른 어린이집 접근을 구분해서 알려주면 조직 구조가 노출됨)

HTTP 상태 코드 매핑:
- Unauthenticated       : 401
- AccessDenied          : 403 (사유와 무관하게 동일 메시지)
- CsrfValidationFailed  : 400 ("security validation" 메시지)
- InvalidCredentials    : 401 (로그인 시에만, 아이디/비밀번호 구분 없음)
- InfrastructureError   : 500 (DB 장애 등, 비로그인으로 취급하지 않음)

관련 파일:
- app.main               : 예외 핸들러 등록
- app.core.policy        : DenyReason 생성
- app.core.deps          : RouteGuard 에서 예외 발생

"""

from enum import Enum


class DenyReason(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    INSUFFICIENT_ROLE = "insufficient_role"
    WRONG_NURSERY = "wrong_nursery"
    SCOPE_INTEGRITY = "scope_integrity"       # NURSERY_ADMIN / STAFF 인데 nursery_id 없음
    ROLE_NOT_PERMITTED = "role_not_permitted"  # 범위 선택 변경 권한 없음


class AppError(Exception):
    """모든 애플리케이션 예외의 기반 클래스.

    message 는 그대로 클라이언트에게 노출되므로 민감한 정보를 담지 않는다.
    """

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message}


class Unauthenticated(AppError):
    status_code = 401
    message = "Authentication required"


class AccessDenied(AppError):
    status_code = 403
    message = "Access denied"

    def __init__(self, reason: DenyReason) -> None:
        # reason 은 로그 전용, 응답 메시지는 항상 동일
        super().__init__()
        self.reason = reason


class CsrfValidationFailed(AppError):
    status_code = 400
    message = "Security validation failed. Please refresh the page and try again."


class InvalidCredentials(AppError):
    status_code = 401
    message = "Invalid username or password"


class InfrastructureError(AppError):
    status_code = 500
    message = "Service temporarily unavailable. Please try again."
