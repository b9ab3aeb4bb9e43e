"""
content.py

어린이집별 콘텐츠 모델 정의 파일.

행사(Event), 갤러리 이미지(GalleryImage), 소식지(Newsletter), 교직원(StaffMember)은
모두 특정 어린이집(nursery_id)에 소속된다.
모든 조회/수정은 app.services.scope 의 범위(scope) 필터를 거쳐야 한다.

설계 원칙:
- nursery_id 는 NOT NULL (소속 없는 콘텐츠 없음)
- 생성/수정 주체를 created_by / updated_by 등으로 기록

"""

import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, utcnow


class Event(Base):
    """어린이집 행사. date / time 은 화면 표기용 문자열 그대로 저장한다."""

    __tablename__ = "events"
    __table_args__ = (
        Index("ix_events_nursery_id", "nursery_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    date: Mapped[str] = mapped_column(String(20), nullable=False)   # YYYY-MM-DD
    time: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    nursery_id: Mapped[int] = mapped_column(Integer, ForeignKey("nurseries.id"), nullable=False)
    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    updated_by: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class GalleryImage(Base):
    __tablename__ = "gallery_images"
    __table_args__ = (
        Index("ix_gallery_images_nursery_id", "nursery_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    caption: Mapped[str | None] = mapped_column(String(255), nullable=True)

    nursery_id: Mapped[int] = mapped_column(Integer, ForeignKey("nurseries.id"), nullable=False)
    uploaded_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, nullable=False)


class Newsletter(Base):
    """소식지. 실제 PDF 파일 업로드는 이 백엔드 범위 밖이며 URL만 보관한다."""

    __tablename__ = "newsletters"
    __table_args__ = (
        Index("ix_newsletters_nursery_id", "nursery_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    pdf_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    tags: Mapped[str | None] = mapped_column(String(255), nullable=True)

    nursery_id: Mapped[int] = mapped_column(Integer, ForeignKey("nurseries.id"), nullable=False)
    published_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    publish_date: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)


class StaffMember(Base):
    """공개 페이지에 노출되는 교직원 소개. 로그인 계정(User)과는 별개이다."""

    __tablename__ = "staff_members"
    __table_args__ = (
        Index("ix_staff_members_nursery_id", "nursery_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    job_title: Mapped[str] = mapped_column(String(100), nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)

    nursery_id: Mapped[int] = mapped_column(Integer, ForeignKey("nurseries.id"), nullable=False)
    created_by: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
