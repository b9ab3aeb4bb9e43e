"""
events.py

어린이집 행사(Event) 관리 API 모음.

주요 기능:
- 특정 어린이집 행사 목록 조회 / 생성 (경로에 어린이집 ID 포함)
- 현재 선택된 범위(scope)의 행사 목록 조회
- 행사 수정 / 삭제

권한:
- 조회 : STAFF 이상
- 변경 : NURSERY_ADMIN 이상
- NURSERY_ADMIN / STAFF 는 본인 소속 어린이집만 접근 가능
  (경로의 어린이집이 다르면 403, ID 로 지정한 행사가 범위 밖이면 404)

관련 파일:
- app.core.deps            : require_access (RouteGuard)
- app.services.content     : 범위 기반 조회
- app.services.activity_log: 활동 로그 기록

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
from app.models.content import Event
from app.schemas.content import EventCreate, EventResponse, EventUpdate
from app.services.activity_log import write_activity_log
from app.services.content import apply_update, get_in_scope, get_nursery, list_for_nursery, list_in_scope
from app.services.scope import current_scope

router = APIRouter(prefix="/admin", tags=["events"])


# 특정 어린이집의 행사 목록
@router.get("/nurseries/{nursery_id}/events")
def list_nursery_events(
    nursery_id: int,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(require_access(Role.STAFF, path_nursery())),
):
    if get_nursery(db, nursery_id) is None:
        raise HTTPException(status_code=404, detail="Nursery not found")

    events = list_for_nursery(db, Event, nursery_id, Event.date.asc())
    return {"success": True, "data": [EventResponse.model_validate(e) for e in events]}


# 행사 생성
@router.post("/nurseries/{nursery_id}/events", status_code=201)
def create_event(
    nursery_id: int,
    data: EventCreate,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(require_access(Role.NURSERY_ADMIN, path_nursery())),
):
    nursery = get_nursery(db, nursery_id)
    if nursery is None:
        raise HTTPException(status_code=404, detail="Nursery not found")

    event = Event(**data.model_dump(), nursery_id=nursery.id, created_by=ctx.principal.id)
    try:
        db.add(event)
        db.flush()
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.CREATE_EVENT,
            nursery=nursery,
            resource_id=event.id,
            description=f"Created event '{event.title}'",
        )
        db.commit()
        db.refresh(event)
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Event created", "data": EventResponse.model_validate(event)}


# 현재 선택된 범위의 행사 목록
@router.get("/events")
def list_events(
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_staff),
):
    events = list_in_scope(db, Event, ctx.scope, Event.date.asc())
    return {
        "success": True,
        "data": [EventResponse.model_validate(e) for e in events],
        "meta": {"scope": ctx.scope.to_dict()},
    }


# 행사 수정
@router.put("/events/{event_id}")
def update_event(
    event_id: int,
    data: EventUpdate,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_nursery_admin),
):
    event = get_in_scope(db, Event, event_id, current_scope(ctx.principal))
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")

    changed = apply_update(event, data)
    if not changed:
        raise HTTPException(status_code=400, detail="No changes provided")

    try:
        event.updated_by = ctx.principal.id
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.UPDATE_EVENT,
            nursery=get_nursery(db, event.nursery_id),
            resource_id=event.id,
            description=f"Updated event '{event.title}' ({', '.join(changed)})",
        )
        db.commit()
        db.refresh(event)
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Event updated", "data": EventResponse.model_validate(event)}


# 행사 삭제
@router.delete("/events/{event_id}")
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_nursery_admin),
):
    event = get_in_scope(db, Event, event_id, current_scope(ctx.principal))
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")

    try:
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.DELETE_EVENT,
            nursery=get_nursery(db, event.nursery_id),
            resource_id=event.id,
            description=f"Deleted event '{event.title}'",
        )
        db.delete(event)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Event deleted"}
