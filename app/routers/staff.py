"""
staff.py

어린이집 교직원 소개(StaffMember) 관리 API 모음.

StaffMember 는 공개 페이지에 노출되는 소개 정보이며
관리자 대시보드 로그인 계정(User, role=staff)과는 별개이다.

권한:
- 조회 : STAFF 이상
- 등록 / 수정 / 삭제 : NURSERY_ADMIN 이상 (본인 소속 어린이집만)

"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.deps import (
    AccessContext,
    get_current_nursery_admin,
    get_current_staff,
    get_db,
    path_nursery,
    require_access,
)
from app.core.errors import InfrastructureError
from app.core.roles import Role
from app.models.activity_log import ActionType
from app.models.content import StaffMember
from app.schemas.content import StaffMemberCreate, StaffMemberResponse, StaffMemberUpdate
from app.services.activity_log import write_activity_log
from app.services.content import apply_update, get_in_scope, get_nursery, list_for_nursery, list_in_scope
from app.services.scope import current_scope

router = APIRouter(prefix="/admin", tags=["staff"])


@router.get("/nurseries/{nursery_id}/staff")
def list_nursery_staff(
    nursery_id: int,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(require_access(Role.STAFF, path_nursery())),
):
    if get_nursery(db, nursery_id) is None:
        raise HTTPException(status_code=404, detail="Nursery not found")

    members = list_for_nursery(db, StaffMember, nursery_id, StaffMember.name.asc())
    return {"success": True, "data": [StaffMemberResponse.model_validate(m) for m in members]}


@router.post("/nurseries/{nursery_id}/staff", status_code=201)
def create_staff_member(
    nursery_id: int,
    data: StaffMemberCreate,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(require_access(Role.NURSERY_ADMIN, path_nursery())),
):
    nursery = get_nursery(db, nursery_id)
    if nursery is None:
        raise HTTPException(status_code=404, detail="Nursery not found")

    member = StaffMember(**data.model_dump(), nursery_id=nursery.id, created_by=ctx.principal.id)
    try:
        db.add(member)
        db.flush()
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.CREATE_STAFF,
            nursery=nursery,
            resource_id=member.id,
            description=f"Added staff member '{member.name}'",
        )
        db.commit()
        db.refresh(member)
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Staff member created", "data": StaffMemberResponse.model_validate(member)}


@router.get("/staff")
def list_staff(
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_staff),
):
    members = list_in_scope(db, StaffMember, ctx.scope, StaffMember.name.asc())
    return {
        "success": True,
        "data": [StaffMemberResponse.model_validate(m) for m in members],
        "meta": {"scope": ctx.scope.to_dict()},
    }


@router.put("/staff/{member_id}")
def update_staff_member(
    member_id: int,
    data: StaffMemberUpdate,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_nursery_admin),
):
    member = get_in_scope(db, StaffMember, member_id, current_scope(ctx.principal))
    if member is None:
        raise HTTPException(status_code=404, detail="Staff member not found")

    changed = apply_update(member, data)
    if not changed:
        raise HTTPException(status_code=400, detail="No changes provided")

    try:
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.UPDATE_STAFF,
            nursery=get_nursery(db, member.nursery_id),
            resource_id=member.id,
            description=f"Updated staff member '{member.name}' ({', '.join(changed)})",
        )
        db.commit()
        db.refresh(member)
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Staff member updated", "data": StaffMemberResponse.model_validate(member)}


@router.delete("/staff/{member_id}")
def delete_staff_member(
    member_id: int,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_nursery_admin),
):
    member = get_in_scope(db, StaffMember, member_id, current_scope(ctx.principal))
    if member is None:
        raise HTTPException(status_code=404, detail="Staff member not found")

    try:
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.DELETE_STAFF,
            nursery=get_nursery(db, member.nursery_id),
            resource_id=member.id,
            description=f"Removed staff member '{member.name}'",
        )
        db.delete(member)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Staff member deleted"}
