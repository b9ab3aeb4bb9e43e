"""
클라이언트 RouteGuard / AuthProxy 테스트.
- 빠른 연속 화면 이동: 늦게 끝난 이전 검사 결과는 무시되고 마지막 이동의 판단이 남는다
- 서버 오류는 로그인 화면이 아니라 RETRY
- 실제 앱(ASGI)과 AuthProxy 를 연결한 로그인 / 범위 변경 / 로그아웃 흐름
"""

import asyncio

import httpx

from app.client.auth_proxy import AuthProxy, AuthTransportError
from app.client.route_guard import AuthProvider, AuthStatus, GuardView, RouteGuard, RouteRequirement
from app.core.errors import DenyReason
from app.core.policy import Principal
from app.core.roles import Role
from app.main import app as fastapi_app
from tests.helpers import DEFAULT_PASSWORD, create_user


def principal(role: Role, nursery_id: int | None = None) -> Principal:
    return Principal(
        id=7, username="p", email="p@example.com", first_name="P", last_name="Q",
        role=role, nursery_id=nursery_id,
    )


class ScriptedProxy:
    """me() 호출마다 (대기 이벤트, 결과) 를 순서대로 사용하는 가짜 프록시"""

    def __init__(self, script):
        self.script = list(script)
        self.closed = False

    async def me(self):
        gate, result = self.script.pop(0)
        if gate is not None:
            await gate.wait()
        if isinstance(result, Exception):
            raise result
        return result

    async def aclose(self):
        self.closed = True


def test_rapid_navigation_latest_check_wins():
    async def scenario():
        slow = asyncio.Event()
        proxy = ScriptedProxy([
            (slow, principal(Role.SUPER_ADMIN)),           # 첫 이동: 늦게 끝남
            (None, principal(Role.STAFF, 2)),              # 두 번째 이동: 즉시 끝남
        ])
        guard = RouteGuard(AuthProvider(proxy))

        first = asyncio.create_task(guard.navigate(RouteRequirement("/admin/settings", Role.STAFF)))
        await asyncio.sleep(0)
        second = await guard.navigate(RouteRequirement("/admin/settings", Role.SUPER_ADMIN))

        slow.set()
        superseded = await first
        return guard, second, superseded

    guard, second, superseded = asyncio.run(scenario())
    assert superseded is None
    assert second.view == GuardView.ACCESS_DENIED
    assert second.reason == DenyReason.INSUFFICIENT_ROLE
    assert guard.current == second
    # 늦게 끝난 이전 검사가 로그인 상태를 덮어쓰지 않음
    assert guard.provider.principal.role == Role.STAFF


def test_rapid_navigation_between_nurseries_ends_in_wrong_nursery():
    async def scenario():
        slow = asyncio.Event()
        admin = principal(Role.NURSERY_ADMIN, 1)
        proxy = ScriptedProxy([
            (slow, admin),      # /admin/nurseries/1/events: 허용될 검사, 늦게 끝남
            (None, admin),      # /admin/nurseries/2/events: 즉시 끝남
        ])
        guard = RouteGuard(AuthProvider(proxy))

        own = asyncio.create_task(
            guard.navigate(RouteRequirement("/admin/nurseries/1/events", Role.STAFF, nursery_id=1))
        )
        await asyncio.sleep(0)
        other = await guard.navigate(RouteRequirement("/admin/nurseries/2/events", Role.STAFF, nursery_id=2))

        slow.set()
        superseded = await own
        return guard, other, superseded

    guard, other, superseded = asyncio.run(scenario())
    assert superseded is None
    assert other.view == GuardView.ACCESS_DENIED
    assert other.reason == DenyReason.WRONG_NURSERY
    assert guard.current == other
    assert guard.current.path == "/admin/nurseries/2/events"


def test_unauthenticated_redirects_to_login():
    proxy = ScriptedProxy([(None, None)])
    guard = RouteGuard(AuthProvider(proxy))
    outcome = asyncio.run(guard.navigate(RouteRequirement("/admin/events", Role.STAFF)))
    assert outcome.view == GuardView.REDIRECT_LOGIN
    assert outcome.redirect_to == "/admin/login?redirect=%2Fadmin%2Fevents"
    assert guard.provider.status == AuthStatus.UNAUTHENTICATED


def test_transport_error_is_retry_not_logout():
    proxy = ScriptedProxy([(None, AuthTransportError("503"))])
    provider = AuthProvider(proxy)
    provider.principal = principal(Role.SUPER_ADMIN)
    guard = RouteGuard(provider)

    outcome = asyncio.run(guard.navigate(RouteRequirement("/admin/users", Role.SUPER_ADMIN)))
    assert outcome.view == GuardView.RETRY
    assert provider.status == AuthStatus.ERROR
    assert provider.principal is not None


def test_wrong_nursery_is_access_denied():
    proxy = ScriptedProxy([(None, principal(Role.NURSERY_ADMIN, 2))])
    guard = RouteGuard(AuthProvider(proxy))
    outcome = asyncio.run(guard.navigate(RouteRequirement("/admin/nurseries/3", Role.STAFF, nursery_id=3)))
    assert outcome.view == GuardView.ACCESS_DENIED
    assert outcome.reason == DenyReason.WRONG_NURSERY


def test_provider_lifecycle_closes_proxy():
    proxy = ScriptedProxy([])

    async def scenario():
        async with AuthProvider(proxy) as provider:
            provider.principal = principal(Role.STAFF, 1)
        return provider

    provider = asyncio.run(scenario())
    assert proxy.closed
    assert provider.principal is None
    assert provider.status == AuthStatus.UNCHECKED


def test_proxy_against_app(client, db, nurseries):
    n1, n2, _ = nurseries
    sa = create_user(db, role=Role.SUPER_ADMIN)
    username = sa.username
    n2_id = n2.id

    async def scenario():
        proxy = AuthProxy(transport=httpx.ASGITransport(app=fastapi_app))
        async with AuthProvider(proxy) as provider:
            guard = RouteGuard(provider)
            before = await guard.navigate(RouteRequirement("/admin/users", Role.SUPER_ADMIN))

            assert await provider.login(username, "wrong") is False
            assert await provider.login(username, DEFAULT_PASSWORD) is True
            after = await guard.navigate(RouteRequirement("/admin/users", Role.SUPER_ADMIN))

            scope = await proxy.set_scope(n2_id)

            # 캐시된 토큰이 무효가 되어도 한 번 재발급 후 성공
            proxy._csrf_token = "stale-token"
            scope_all = await proxy.set_scope(None)

            await provider.logout()
            final = await guard.navigate(RouteRequirement("/admin/users", Role.SUPER_ADMIN))
        return before, after, scope, scope_all, final

    before, after, scope, scope_all, final = asyncio.run(scenario())
    assert before.view == GuardView.REDIRECT_LOGIN
    assert after.view == GuardView.RENDER
    assert scope["scope"] == {"kind": "single", "nurseryId": n2_id}
    assert scope_all["scope"]["kind"] == "all"
    assert final.view == GuardView.REDIRECT_LOGIN
