"""
policy.py

인가(Authorization) 판단 순수 함수 모음.

이 파일은 "누가(principal) / 어떤 최소 권한이 필요한 기능에(required_role) /
어느 어린이집 데이터에(target_nursery_id)" 접근하려 하는지를 받아
허용(Allow) 또는 거부(Deny + 사유)를 결정한다.

DB, HTTP, 세션에 전혀 의존하지 않으므로
서버 RouteGuard(app.core.deps)와 클라이언트 RouteGuard(app.client.route_guard)가
동일한 판단 로직을 그대로 재사용한다.

판단 순서 (순서가 곧 거부 사유의 우선순위):
1. principal 없음                                   -> UNAUTHENTICATED
2. required_role 보다 낮은 권한                      -> INSUFFICIENT_ROLE
3. SUPER_ADMIN                                       -> 항상 허용 (전체 범위)
4. NURSERY_ADMIN / STAFF 인데 nursery_id 없음         -> SCOPE_INTEGRITY
5. 대상 어린이집이 지정되었고 본인 소속과 다름         -> WRONG_NURSERY
   NURSERY_ADMIN 뿐 아니라 STAFF, REGULAR 에도 동일하게 적용된다.
   REGULAR 는 소속이 없으므로 어린이집을 지정한 요청은 항상 WRONG_NURSERY.
6. 그 외                                             -> 허용

관련 파일:
- app.core.roles          : 권한 서열 테이블
- app.core.errors         : DenyReason
- app.services.scope      : 어린이집 범위(NurseryScope) 계산

"""

from dataclasses import dataclass

from app.core.errors import DenyReason
from app.core.roles import NURSERY_BOUND_ROLES, Role, has_min_role


@dataclass(frozen=True)
class Principal:
    """인증된 사용자. 비밀번호 해시는 절대 포함하지 않는다."""

    id: int
    username: str
    email: str
    first_name: str
    last_name: str
    role: Role
    nursery_id: int | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role.value,
            "nurseryId": self.nursery_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Principal":
        return cls(
            id=int(data["id"]),
            username=data["username"],
            email=data["email"],
            first_name=data.get("firstName", ""),
            last_name=data.get("lastName", ""),
            role=Role(data["role"]),
            nursery_id=data.get("nurseryId"),
        )


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenyReason | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason) -> "Decision":
        return cls(allowed=False, reason=reason)


def decide(
    principal: Principal | None,
    required_role: Role | None = None,
    target_nursery_id: int | None = None,
) -> Decision:
    if principal is None:
        return Decision.deny(DenyReason.UNAUTHENTICATED)

    if required_role is not None and not has_min_role(principal.role, required_role):
        return Decision.deny(DenyReason.INSUFFICIENT_ROLE)

    if principal.role == Role.SUPER_ADMIN:
        return Decision.allow()

    # 소속 없는 NURSERY_ADMIN / STAFF 는 데이터 무결성 오류 -> 절대 "전체"로 해석하지 않음
    if principal.role in NURSERY_BOUND_ROLES and principal.nursery_id is None:
        return Decision.deny(DenyReason.SCOPE_INTEGRITY)

    if target_nursery_id is not None and target_nursery_id != principal.nursery_id:
        return Decision.deny(DenyReason.WRONG_NURSERY)

    return Decision.allow()
