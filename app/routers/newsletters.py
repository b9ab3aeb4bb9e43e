"""
newsletters.py

어린이집 소식지(Newsletter) 관리 API 모음.

PDF 파일 업로드 및 썸네일 생성은 이 백엔드 범위 밖이며 pdf_url 만 저장한다.

권한:
- 조회 : STAFF 이상
- 발행 / 수정 / 삭제 : NURSERY_ADMIN 이상 (본인 소속 어린이집만)

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
from app.models.content import Newsletter
from app.schemas.content import NewsletterCreate, NewsletterResponse, NewsletterUpdate
from app.services.activity_log import write_activity_log
from app.services.content import apply_update, get_in_scope, get_nursery, list_for_nursery, list_in_scope
from app.services.scope import current_scope

router = APIRouter(prefix="/admin", tags=["newsletters"])


@router.get("/nurseries/{nursery_id}/newsletters")
def list_nursery_newsletters(
    nursery_id: int,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(require_access(Role.STAFF, path_nursery())),
):
    if get_nursery(db, nursery_id) is None:
        raise HTTPException(status_code=404, detail="Nursery not found")

    items = list_for_nursery(db, Newsletter, nursery_id, Newsletter.publish_date.desc())
    return {"success": True, "data": [NewsletterResponse.model_validate(n) for n in items]}


@router.post("/nurseries/{nursery_id}/newsletters", status_code=201)
def publish_newsletter(
    nursery_id: int,
    data: NewsletterCreate,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(require_access(Role.NURSERY_ADMIN, path_nursery())),
):
    nursery = get_nursery(db, nursery_id)
    if nursery is None:
        raise HTTPException(status_code=404, detail="Nursery not found")

    newsletter = Newsletter(**data.model_dump(), nursery_id=nursery.id, published_by=ctx.principal.id)
    try:
        db.add(newsletter)
        db.flush()
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.CREATE_NEWSLETTER,
            nursery=nursery,
            resource_id=newsletter.id,
            description=f"Published newsletter '{newsletter.title}'",
        )
        db.commit()
        db.refresh(newsletter)
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Newsletter published", "data": NewsletterResponse.model_validate(newsletter)}


@router.get("/newsletters")
def list_newsletters(
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_staff),
):
    items = list_in_scope(db, Newsletter, ctx.scope, Newsletter.publish_date.desc())
    return {
        "success": True,
        "data": [NewsletterResponse.model_validate(n) for n in items],
        "meta": {"scope": ctx.scope.to_dict()},
    }


@router.put("/newsletters/{newsletter_id}")
def update_newsletter(
    newsletter_id: int,
    data: NewsletterUpdate,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_nursery_admin),
):
    newsletter = get_in_scope(db, Newsletter, newsletter_id, current_scope(ctx.principal))
    if newsletter is None:
        raise HTTPException(status_code=404, detail="Newsletter not found")

    changed = apply_update(newsletter, data)
    if not changed:
        raise HTTPException(status_code=400, detail="No changes provided")

    try:
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.UPDATE_NEWSLETTER,
            nursery=get_nursery(db, newsletter.nursery_id),
            resource_id=newsletter.id,
            description=f"Updated newsletter '{newsletter.title}' ({', '.join(changed)})",
        )
        db.commit()
        db.refresh(newsletter)
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Newsletter updated", "data": NewsletterResponse.model_validate(newsletter)}


@router.delete("/newsletters/{newsletter_id}")
def delete_newsletter(
    newsletter_id: int,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_nursery_admin),
):
    newsletter = get_in_scope(db, Newsletter, newsletter_id, current_scope(ctx.principal))
    if newsletter is None:
        raise HTTPException(status_code=404, detail="Newsletter not found")

    try:
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.DELETE_NEWSLETTER,
            nursery=get_nursery(db, newsletter.nursery_id),
            resource_id=newsletter.id,
            description=f"Deleted newsletter '{newsletter.title}'",
        )
        db.delete(newsletter)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Newsletter deleted"}
