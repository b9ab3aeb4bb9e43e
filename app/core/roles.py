"""
roles.py

사용자 권한(Role) 정의 및 권한 서열 테이블.

권한 서열은 이 파일 한 곳에서만 정의하며
서버 측 RouteGuard(app.core.deps)와
클라이언트 측 RouteGuard(app.client.route_guard)가 모두 이 테이블을 사용한다.

- SUPER_ADMIN   : 전체 어린이집 관리 (nursery_id 없음)
- NURSERY_ADMIN : 소속 어린이집 1곳 관리 (nursery_id 필수)
- STAFF         : 소속 어린이집 1곳 조회/일부 관리
- REGULAR       : 일반 사용자 (어린이집 소속 없음)

"""

from enum import Enum


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    NURSERY_ADMIN = "nursery_admin"
    STAFF = "staff"
    REGULAR = "regular"


ROLE_LEVEL = {
    Role.REGULAR: 0,
    Role.STAFF: 1,
    Role.NURSERY_ADMIN: 2,
    Role.SUPER_ADMIN: 3,
}

# 소속 어린이집(nursery_id)이 반드시 있어야 하는 권한
NURSERY_BOUND_ROLES = frozenset({Role.NURSERY_ADMIN, Role.STAFF})


def has_min_role(role: Role, min_role: Role) -> bool:
    return ROLE_LEVEL[role] >= ROLE_LEVEL[min_role]
