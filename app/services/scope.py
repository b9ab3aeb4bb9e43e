"""
services/scope.py

어린이집 범위(NurseryScope) 선택 및 필터링 로직.

관리자 대시보드는 "어느 어린이집의 데이터를 볼 것인가"를 세션 단위로 선택한다.
이 파일은 그 선택을 계산/검증하고, 목록 조회 쿼리에 범위 필터를 적용한다.

범위 종류:
- ALL     : 전체 어린이집 (SUPER_ADMIN 만 가능)
- SINGLE  : 특정 어린이집 1곳
- NONE    : 접근 가능한 어린이집 없음 (REGULAR, 소속 누락 계정)

설계 원칙:
- SUPER_ADMIN 이 아닌 사용자는 본인 소속 외의 범위로 절대 변경 불가
  (UI에서 선택 버튼을 숨기는 것과 무관하게 서버에서 거부)
- 목록 조회는 사용자가 보낸 nursery_id 가 아니라
  서버가 다시 계산한 범위(resolve_scope)로만 필터링
- HTTP / FastAPI 의존성 없음

관련 파일:
- app.core.policy         : Principal
- app.routers.admin       : 범위 조회/변경 API
- app.routers.events 등    : 범위 기반 목록 조회

"""

from dataclasses import dataclass
from enum import Enum

from sqlalchemy import false

from app.core.errors import AccessDenied, DenyReason
from app.core.policy import Principal
from app.core.roles import NURSERY_BOUND_ROLES, Role

# "전체 어린이집" 선택을 나타내는 값 (요청/응답 및 세션 저장용)
ALL_NURSERIES = -1


class ScopeKind(str, Enum):
    ALL = "all"
    SINGLE = "single"
    NONE = "none"


@dataclass(frozen=True)
class NurseryScope:
    kind: ScopeKind
    nursery_id: int | None = None

    @classmethod
    def all(cls) -> "NurseryScope":
        return cls(ScopeKind.ALL)

    @classmethod
    def single(cls, nursery_id: int) -> "NurseryScope":
        return cls(ScopeKind.SINGLE, nursery_id)

    @classmethod
    def none(cls) -> "NurseryScope":
        return cls(ScopeKind.NONE)

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "nurseryId": self.nursery_id}


"""
로그인 직후 기본 범위 계산

- SUPER_ADMIN                   : ALL
- NURSERY_ADMIN / STAFF         : SINGLE(본인 소속)
- 그 외 / 소속 누락 계정         : NONE

"""

def current_scope(principal: Principal) -> NurseryScope:
    if principal.role == Role.SUPER_ADMIN:
        return NurseryScope.all()
    if principal.role in NURSERY_BOUND_ROLES and principal.nursery_id is not None:
        return NurseryScope.single(principal.nursery_id)
    return NurseryScope.none()


"""
범위 변경 시도

- requested 가 None 또는 ALL_NURSERIES 이면 "전체" 요청
- SUPER_ADMIN 은 어떤 어린이집이든, 전체든 선택 가능
- 그 외 권한은 본인 소속 어린이집을 다시 선택하는 것만 허용
- 허용되지 않으면 AccessDenied(ROLE_NOT_PERMITTED)

"""

def try_set_scope(principal: Principal, requested: int | None) -> NurseryScope:
    wants_all = requested is None or requested == ALL_NURSERIES

    if principal.role == Role.SUPER_ADMIN:
        return NurseryScope.all() if wants_all else NurseryScope.single(requested)

    fixed = current_scope(principal)
    if not wants_all and fixed.kind == ScopeKind.SINGLE and fixed.nursery_id == requested:
        return fixed

    raise AccessDenied(DenyReason.ROLE_NOT_PERMITTED)


"""
세션에 저장된 선택 값으로부터 현재 범위를 다시 계산

- 세션 값은 신뢰하지 않고 매 요청마다 try_set_scope 로 재검증
- 재검증에 실패하면(예: 권한이 바뀐 경우) 기본 범위로 되돌림

"""

def resolve_scope(principal: Principal, selected_nursery_id: int | None) -> NurseryScope:
    if selected_nursery_id is None:
        return current_scope(principal)
    try:
        return try_set_scope(principal, selected_nursery_id)
    except AccessDenied:
        return current_scope(principal)


def apply_scope(stmt, nursery_column, scope: NurseryScope):
    """select() 문에 범위 필터를 적용한다."""
    if scope.kind == ScopeKind.ALL:
        return stmt
    if scope.kind == ScopeKind.SINGLE:
        return stmt.where(nursery_column == scope.nursery_id)
    return stmt.where(false())
