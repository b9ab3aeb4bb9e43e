"""
public.py

공개(비로그인) API 모음.

웹사이트의 지점별 페이지가 사용하는 읽기 전용 데이터와
문의 폼 제출을 담당한다. 인증 / CSRF 검사를 하지 않는다.

주요 기능:
- 어린이집 목록 / 지점 상세 조회
- 지점별 행사 / 갤러리 / 소식지 / 교직원 조회
- 문의 폼 제출

"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.core.errors import InfrastructureError
from app.models.contact import ContactSubmission
from app.models.content import Event, GalleryImage, Newsletter, StaffMember
from app.models.nursery import Nursery, NurseryLocation
from app.schemas.admin import ContactCreate, NurseryResponse
from app.schemas.content import (
    EventResponse,
    GalleryImageResponse,
    NewsletterResponse,
    StaffMemberResponse,
)
from app.services.content import list_for_nursery

logger = logging.getLogger(__name__)

router = APIRouter(tags=["public"])


def _nursery_by_location(db: Session, location: str) -> Nursery:
    try:
        loc = NurseryLocation(location.lower())
    except ValueError:
        raise HTTPException(status_code=404, detail="Nursery not found")

    nursery = db.scalar(select(Nursery).where(Nursery.location == loc))
    if not nursery:
        raise HTTPException(status_code=404, detail="Nursery not found")
    return nursery


@router.get("/nurseries")
def list_nurseries(db: Session = Depends(get_db)):
    nurseries = db.scalars(select(Nursery).order_by(Nursery.id)).all()
    return {"success": True, "data": [NurseryResponse.model_validate(n) for n in nurseries]}


@router.get("/nurseries/{location}")
def get_nursery(location: str, db: Session = Depends(get_db)):
    nursery = _nursery_by_location(db, location)
    return {"success": True, "data": NurseryResponse.model_validate(nursery)}


@router.get("/nurseries/{location}/events")
def list_public_events(location: str, db: Session = Depends(get_db)):
    nursery = _nursery_by_location(db, location)
    events = list_for_nursery(db, Event, nursery.id, Event.date.asc())
    return {"success": True, "data": [EventResponse.model_validate(e) for e in events]}


@router.get("/nurseries/{location}/gallery")
def list_public_gallery(location: str, db: Session = Depends(get_db)):
    nursery = _nursery_by_location(db, location)
    images = list_for_nursery(db, GalleryImage, nursery.id, GalleryImage.created_at.desc())
    return {"success": True, "data": [GalleryImageResponse.model_validate(i) for i in images]}


@router.get("/nurseries/{location}/newsletters")
def list_public_newsletters(location: str, db: Session = Depends(get_db)):
    nursery = _nursery_by_location(db, location)
    items = list_for_nursery(db, Newsletter, nursery.id, Newsletter.publish_date.desc())
    return {"success": True, "data": [NewsletterResponse.model_validate(n) for n in items]}


@router.get("/nurseries/{location}/staff")
def list_public_staff(location: str, db: Session = Depends(get_db)):
    nursery = _nursery_by_location(db, location)
    members = list_for_nursery(db, StaffMember, nursery.id, StaffMember.name.asc())
    return {"success": True, "data": [StaffMemberResponse.model_validate(m) for m in members]}


"""
문의 폼 제출 API

- 지점 값이 알 수 없는 값이면 "general" 로 저장
- 이메일 발송은 이 백엔드 범위 밖

"""

@router.post("/contact", status_code=201)
def submit_contact(data: ContactCreate, db: Session = Depends(get_db)):
    location = data.nursery_location.lower()
    if location not in {loc.value for loc in NurseryLocation}:
        location = NurseryLocation.GENERAL.value

    submission = ContactSubmission(
        name=data.name,
        email=data.email,
        phone=data.phone,
        nursery_location=location,
        message=data.message,
    )
    try:
        db.add(submission)
        db.commit()
        db.refresh(submission)
    except SQLAlchemyError as e:
        db.rollback()
        raise InfrastructureError() from e

    logger.info("contact submitted", extra={"submission_id": submission.id, "nursery_location": location})
    return {"success": True, "message": "Thank you for your message", "data": {"id": submission.id}}
