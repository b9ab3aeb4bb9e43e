"""
인가 판단(policy.decide) 단위 테스트.
- 권한 단조성: 같은 소속에서 권한이 높아져도 허용이 거부로 바뀌지 않는다
- 어린이집 격리: SUPER_ADMIN 이 아니면 다른 어린이집은 항상 WRONG_NURSERY
- SUPER_ADMIN 은 어떤 조합에서도 허용
- 거부 사유 우선순위
"""

import itertools

import pytest

from app.core.errors import DenyReason
from app.core.policy import Principal, decide
from app.core.roles import ROLE_LEVEL, Role

REQUIRED = [None, Role.REGULAR, Role.STAFF, Role.NURSERY_ADMIN, Role.SUPER_ADMIN]
TARGETS = [None, 1, 2]


def principal(role: Role, nursery_id: int | None = None) -> Principal:
    return Principal(
        id=1,
        username=role.value,
        email=f"{role.value}@example.com",
        first_name="Test",
        last_name="User",
        role=role,
        nursery_id=nursery_id,
    )


def typical(role: Role) -> Principal:
    # 소속이 필요한 권한은 1번 어린이집 소속
    return principal(role, 1 if role in (Role.NURSERY_ADMIN, Role.STAFF) else None)


def test_unauthenticated_is_denied_first():
    for required, target in itertools.product(REQUIRED, TARGETS):
        assert decide(None, required, target).reason == DenyReason.UNAUTHENTICATED


def test_role_monotonicity():
    roles = sorted(Role, key=ROLE_LEVEL.get)
    for low, high in itertools.combinations(roles, 2):
        for required, target in itertools.product(REQUIRED, TARGETS):
            if decide(typical(low), required, target).allowed:
                assert decide(typical(high), required, target).allowed, (low, high, required, target)


@pytest.mark.parametrize("role", [Role.NURSERY_ADMIN, Role.STAFF, Role.REGULAR])
def test_nursery_containment(role):
    p = typical(role)
    other = 2
    d = decide(p, None, other)
    assert not d.allowed
    assert d.reason == DenyReason.WRONG_NURSERY


def test_super_admin_universality():
    sa = principal(Role.SUPER_ADMIN)
    for required, target in itertools.product(REQUIRED, TARGETS + [999]):
        assert decide(sa, required, target).allowed


def test_insufficient_role():
    d = decide(typical(Role.STAFF), Role.SUPER_ADMIN)
    assert not d.allowed
    assert d.reason == DenyReason.INSUFFICIENT_ROLE


@pytest.mark.parametrize("role", [Role.NURSERY_ADMIN, Role.STAFF])
def test_missing_nursery_is_integrity_error(role):
    p = principal(role, None)
    # 대상 어린이집이 없어도 "전체"로 해석하지 않는다
    assert decide(p, None, None).reason == DenyReason.SCOPE_INTEGRITY
    assert decide(p, Role.STAFF, 1).reason == DenyReason.SCOPE_INTEGRITY


def test_role_check_precedes_integrity_check():
    p = principal(Role.STAFF, None)
    assert decide(p, Role.SUPER_ADMIN, 1).reason == DenyReason.INSUFFICIENT_ROLE


def test_own_nursery_allowed():
    assert decide(typical(Role.NURSERY_ADMIN), Role.NURSERY_ADMIN, 1).allowed
    assert decide(typical(Role.STAFF), Role.STAFF, 1).allowed


def test_principal_dict_roundtrip_has_no_password():
    p = typical(Role.NURSERY_ADMIN)
    data = p.to_dict()
    assert "password" not in " ".join(data.keys()).lower()
    assert data["nurseryId"] == 1
    assert Principal.from_dict(data) == p


def test_wrong_nursery_covers_staff_and_regular():
    assert decide(typical(Role.STAFF), Role.STAFF, 2).reason == DenyReason.WRONG_NURSERY
    # 소속 없는 REGULAR 는 어느 어린이집을 지정해도 거부, 지정하지 않으면 허용
    regular = typical(Role.REGULAR)
    for target in (1, 2):
        assert decide(regular, None, target).reason == DenyReason.WRONG_NURSERY
    assert decide(regular, Role.REGULAR, None).allowed
