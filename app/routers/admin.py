"""
admin.py

관리자 대시보드 공통 API 모음.

주요 기능:
- 어린이집 범위(scope) 조회 / 변경
- 사용자 계정 관리 (SUPER_ADMIN)
- 활동 로그 조회 (전체: SUPER_ADMIN / 어린이집별: NURSERY_ADMIN 이상)
- 사이트 설정 조회 / 변경 (SUPER_ADMIN)
- 문의 내역 조회 (SUPER_ADMIN)

설계 원칙:
- 모든 엔드포인트는 require_access(RouteGuard) 를 거침
- 목록 조회는 세션에 저장된 범위를 서버가 재검증한 값(ctx.scope)으로만 필터링
- 사용자 권한/소속/활성 상태가 바뀌면 해당 사용자의 기존 세션을 모두 폐기

관련 파일:
- app.core.deps            : require_access
- app.services.scope       : 범위 계산/검증
- app.services.sessions    : 세션 폐기
- app.services.activity_log: 활동 로그 기록

"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.deps import (
    AccessContext,
    get_current_staff,
    get_current_super_admin,
    get_db,
    path_nursery,
    require_access,
)
from app.core.errors import AccessDenied, InfrastructureError
from app.core.roles import NURSERY_BOUND_ROLES, Role
from app.core.security import get_password_hash
from app.db.base import utcnow
from app.models.activity_log import ActionType, ActivityLog
from app.models.contact import ContactSubmission
from app.models.nursery import Nursery
from app.models.setting import SiteSetting
from app.models.user import User
from app.schemas.admin import (
    ActivityLogResponse,
    ContactResponse,
    NurseryResponse,
    ScopeUpdateRequest,
    SettingsUpdateRequest,
)
from app.schemas.user import UserCreate, UserResponse, UserUpdate
from app.services import sessions
from app.services.activity_log import write_activity_log
from app.services.scope import ALL_NURSERIES, ScopeKind, apply_scope, try_set_scope

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


# ---------------------------------------------------------------------------
# 어린이집 범위(scope)
# ---------------------------------------------------------------------------

def _scope_payload(db: Session, ctx_scope) -> dict:
    stmt = apply_scope(select(Nursery), Nursery.id, ctx_scope).order_by(Nursery.id)
    return {
        "scope": ctx_scope.to_dict(),
        "nurseries": [NurseryResponse.model_validate(n) for n in db.scalars(stmt).all()],
    }


# 현재 범위와 선택 가능한 어린이집 목록
@router.get("/scope")
def get_scope(
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_staff),
):
    return {"success": True, "data": _scope_payload(db, ctx.scope)}


"""
범위 변경 API

- nursery_id 가 없거나 -1 이면 "전체 어린이집"
- SUPER_ADMIN 만 다른 어린이집 / 전체 선택 가능
- 그 외 권한은 본인 소속 재선택만 허용 (그 외 요청은 403)

"""

@router.put("/scope")
def set_scope(
    data: ScopeUpdateRequest,
    request: Request,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_staff),
):
    try:
        scope = try_set_scope(ctx.principal, data.nursery_id)
    except AccessDenied as e:
        logger.warning(
            "access denied",
            extra={"reason": e.reason.value, "user_id": ctx.principal.id, "path": request.url.path},
        )
        raise

    if scope.kind == ScopeKind.SINGLE and db.get(Nursery, scope.nursery_id) is None:
        raise HTTPException(status_code=404, detail="Nursery not found")

    selected = scope.nursery_id if scope.kind == ScopeKind.SINGLE else ALL_NURSERIES
    sessions.set_selected_nursery(db, ctx.session.session_id, selected)

    return {"success": True, "message": "Scope updated", "data": _scope_payload(db, scope)}


# ---------------------------------------------------------------------------
# 사용자 관리 (SUPER_ADMIN)
# ---------------------------------------------------------------------------

def _check_role_nursery(db: Session, role: Role, nursery_id: int | None) -> None:
    # 권한과 소속 어린이집 조합 검증
    if role in NURSERY_BOUND_ROLES:
        if nursery_id is None:
            raise HTTPException(status_code=400, detail=f"{role.value} requires a nursery")
        if db.get(Nursery, nursery_id) is None:
            raise HTTPException(status_code=404, detail="Nursery not found")
    elif nursery_id is not None:
        raise HTTPException(status_code=400, detail=f"{role.value} cannot belong to a nursery")


@router.get("/users")
def list_users(
    role: Role | None = Query(default=None),
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_super_admin),
):
    stmt = select(User).order_by(User.id)
    if role is not None:
        stmt = stmt.where(User.role == role)
    users = db.scalars(stmt).all()
    return {"success": True, "data": [UserResponse.model_validate(u) for u in users]}


@router.post("/users", status_code=201)
def create_user(
    data: UserCreate,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_super_admin),
):
    _check_role_nursery(db, data.role, data.nursery_id)

    user = User(
        username=data.username,
        email=data.email,
        password_hash=get_password_hash(data.password),
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
        nursery_id=data.nursery_id,
        is_active=True,
    )
    try:
        db.add(user)
        db.flush()
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.CREATE_USER,
            nursery=db.get(Nursery, user.nursery_id) if user.nursery_id else None,
            resource_id=user.id,
            description=f"Created user '{user.username}' ({user.role.value})",
        )
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Username or email already registered")
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "User created", "data": UserResponse.model_validate(user)}


"""
사용자 수정 API

- 보낸 필드만 변경 (부분 수정)
- 본인 권한 변경 / 본인 비활성화 금지
- 권한 / 소속 / 활성 상태 / 비밀번호가 바뀌면 대상 사용자의 세션 전부 폐기

"""

@router.put("/users/{user_id}")
def update_user(
    user_id: int,
    data: UserUpdate,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_super_admin),
):
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    fields = data.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No changes provided")

    if user.id == ctx.principal.id:
        if fields.get("role") is not None and fields["role"] != user.role:
            raise HTTPException(status_code=400, detail="Cannot change your own role")
        if fields.get("is_active") is False:
            raise HTTPException(status_code=400, detail="Cannot deactivate yourself")

    new_role = fields.get("role") or user.role
    # 소속 없는 권한으로 바꾸면서 nursery_id 를 생략한 경우 자동으로 비움
    if "nursery_id" in fields:
        new_nursery_id = fields["nursery_id"]
    elif new_role in NURSERY_BOUND_ROLES:
        new_nursery_id = user.nursery_id
    else:
        new_nursery_id = None
    _check_role_nursery(db, new_role, new_nursery_id)

    revoke = (
        new_role != user.role
        or new_nursery_id != user.nursery_id
        or fields.get("is_active") is False
        or bool(fields.get("password"))
    )

    try:
        if "email" in fields and fields["email"] is not None:
            user.email = fields["email"]
        if fields.get("first_name") is not None:
            user.first_name = fields["first_name"]
        if fields.get("last_name") is not None:
            user.last_name = fields["last_name"]
        if fields.get("password"):
            user.password_hash = get_password_hash(fields["password"])
        if fields.get("is_active") is not None:
            user.is_active = fields["is_active"]
        user.role = new_role
        user.nursery_id = new_nursery_id

        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.UPDATE_USER,
            nursery=db.get(Nursery, user.nursery_id) if user.nursery_id else None,
            resource_id=user.id,
            description=f"Updated user '{user.username}' ({', '.join(sorted(fields))})",
        )
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=400, detail="Email already registered")
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    if revoke:
        revoked = sessions.destroy_user_sessions(db, user.id)
        logger.info("user sessions revoked", extra={"user_id": user.id, "count": revoked})

    return {"success": True, "message": "User updated", "data": UserResponse.model_validate(user)}


# ---------------------------------------------------------------------------
# 활동 로그
# ---------------------------------------------------------------------------

def _log_page(db: Session, stmt, limit: int, offset: int) -> dict:
    logs = db.scalars(stmt.order_by(desc(ActivityLog.created_at), desc(ActivityLog.id)).limit(limit).offset(offset)).all()
    return {
        "success": True,
        "data": [ActivityLogResponse.model_validate(log) for log in logs],
        "meta": {"limit": limit, "offset": offset},
    }


# 전체 활동 로그 (SUPER_ADMIN, 선택된 범위 적용)
@router.get("/activity-logs")
def list_activity_logs(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_super_admin),
):
    stmt = select(ActivityLog)
    if ctx.scope.kind != ScopeKind.ALL:
        stmt = apply_scope(stmt, ActivityLog.nursery_id, ctx.scope)
    return _log_page(db, stmt, limit, offset)


# 어린이집별 활동 로그 (NURSERY_ADMIN 이상, 본인 소속만)
@router.get("/nurseries/{nursery_id}/activity-logs")
def list_nursery_activity_logs(
    nursery_id: int,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(require_access(Role.NURSERY_ADMIN, path_nursery())),
):
    if db.get(Nursery, nursery_id) is None:
        raise HTTPException(status_code=404, detail="Nursery not found")
    return _log_page(db, select(ActivityLog).where(ActivityLog.nursery_id == nursery_id), limit, offset)


# ---------------------------------------------------------------------------
# 사이트 설정 (SUPER_ADMIN)
# ---------------------------------------------------------------------------

def _settings_dict(db: Session) -> dict:
    return {s.key: s.value for s in db.scalars(select(SiteSetting).order_by(SiteSetting.key)).all()}


@router.get("/settings")
def get_settings(
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_super_admin),
):
    return {"success": True, "data": _settings_dict(db)}


@router.put("/settings")
@router.post("/settings")
def update_settings(
    data: SettingsUpdateRequest,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_super_admin),
):
    try:
        for key, value in data.settings.items():
            row = db.get(SiteSetting, key)
            if row is None:
                db.add(SiteSetting(key=key, value=value, updated_by=ctx.principal.id))
            else:
                row.value = value
                row.updated_by = ctx.principal.id
                row.updated_at = utcnow()
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.UPDATE_SETTINGS,
            description=f"Updated site settings ({', '.join(sorted(data.settings))})",
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Settings updated", "data": _settings_dict(db)}


# ---------------------------------------------------------------------------
# 문의 내역 (SUPER_ADMIN)
# ---------------------------------------------------------------------------

@router.get("/contact-submissions")
def list_contact_submissions(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_super_admin),
):
    rows = db.scalars(
        select(ContactSubmission)
        .order_by(desc(ContactSubmission.created_at), desc(ContactSubmission.id))
        .limit(limit)
        .offset(offset)
    ).all()
    return {
        "success": True,
        "data": [ContactResponse.model_validate(r) for r in rows],
        "meta": {"limit": limit, "offset": offset},
    }
