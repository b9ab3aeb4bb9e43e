"""
gallery.py

어린이집 갤러리 이미지 관리 API 모음.

이미지 파일 자체의 업로드/썸네일 생성은 이 백엔드 범위 밖이며,
이미 업로드된 이미지의 URL 과 설명(caption)만 등록한다.

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
from app.models.content import GalleryImage
from app.schemas.content import GalleryImageCreate, GalleryImageResponse, GalleryImageUpdate
from app.services.activity_log import write_activity_log
from app.services.content import apply_update, get_in_scope, get_nursery, list_for_nursery, list_in_scope
from app.services.scope import current_scope

router = APIRouter(prefix="/admin", tags=["gallery"])


@router.get("/nurseries/{nursery_id}/gallery")
def list_nursery_gallery(
    nursery_id: int,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(require_access(Role.STAFF, path_nursery())),
):
    if get_nursery(db, nursery_id) is None:
        raise HTTPException(status_code=404, detail="Nursery not found")

    images = list_for_nursery(db, GalleryImage, nursery_id, GalleryImage.created_at.desc())
    return {"success": True, "data": [GalleryImageResponse.model_validate(i) for i in images]}


@router.post("/nurseries/{nursery_id}/gallery", status_code=201)
def upload_gallery_image(
    nursery_id: int,
    data: GalleryImageCreate,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(require_access(Role.NURSERY_ADMIN, path_nursery())),
):
    nursery = get_nursery(db, nursery_id)
    if nursery is None:
        raise HTTPException(status_code=404, detail="Nursery not found")

    image = GalleryImage(**data.model_dump(), nursery_id=nursery.id, uploaded_by=ctx.principal.id)
    try:
        db.add(image)
        db.flush()
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.UPLOAD_GALLERY,
            nursery=nursery,
            resource_id=image.id,
            description=f"Uploaded gallery image '{image.caption or image.image_url}'",
        )
        db.commit()
        db.refresh(image)
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Image uploaded", "data": GalleryImageResponse.model_validate(image)}


@router.get("/gallery")
def list_gallery(
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_staff),
):
    images = list_in_scope(db, GalleryImage, ctx.scope, GalleryImage.created_at.desc())
    return {
        "success": True,
        "data": [GalleryImageResponse.model_validate(i) for i in images],
        "meta": {"scope": ctx.scope.to_dict()},
    }


# 이미지 설명(caption) 수정
@router.put("/gallery/{image_id}")
def update_gallery_image(
    image_id: int,
    data: GalleryImageUpdate,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_nursery_admin),
):
    image = get_in_scope(db, GalleryImage, image_id, current_scope(ctx.principal))
    if image is None:
        raise HTTPException(status_code=404, detail="Image not found")

    if not apply_update(image, data):
        raise HTTPException(status_code=400, detail="No changes provided")

    try:
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.UPDATE_GALLERY,
            nursery=get_nursery(db, image.nursery_id),
            resource_id=image.id,
            description="Updated gallery image caption",
        )
        db.commit()
        db.refresh(image)
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Image updated", "data": GalleryImageResponse.model_validate(image)}


@router.delete("/gallery/{image_id}")
def delete_gallery_image(
    image_id: int,
    db: Session = Depends(get_db),
    ctx: AccessContext = Depends(get_current_nursery_admin),
):
    image = get_in_scope(db, GalleryImage, image_id, current_scope(ctx.principal))
    if image is None:
        raise HTTPException(status_code=404, detail="Image not found")

    try:
        write_activity_log(
            db,
            actor=ctx.principal,
            action=ActionType.DELETE_GALLERY,
            nursery=get_nursery(db, image.nursery_id),
            resource_id=image.id,
            description=f"Deleted gallery image '{image.caption or image.image_url}'",
        )
        db.delete(image)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    return {"success": True, "message": "Image deleted"}
