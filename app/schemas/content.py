from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


DateStr = str  # 'YYYY-MM-DD'


def _reject_null(value):
    # 생략은 "변경 없음", 명시적 null 은 NOT NULL 컬럼에 허용하지 않음
    if value is None:
        raise ValueError("must not be null")
    return value


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    date: DateStr = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$", examples=["2026-03-01"])
    time: str = Field(..., min_length=1, max_length=20, examples=["10:00 AM"])
    location: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    date: Optional[DateStr] = Field(default=None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    time: Optional[str] = Field(default=None, min_length=1, max_length=20)
    location: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, min_length=1)

    @field_validator("title", "date", "time", "location", "description")
    @classmethod
    def reject_null(cls, value):
        return _reject_null(value)


class EventResponse(BaseModel):
    id: int
    title: str
    date: DateStr
    time: str
    location: str
    description: str
    nursery_id: int
    created_by: int
    updated_by: Optional[int]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GalleryImageCreate(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=500)
    caption: Optional[str] = Field(default=None, max_length=255)


class GalleryImageUpdate(BaseModel):
    caption: Optional[str] = Field(default=None, max_length=255)


class GalleryImageResponse(BaseModel):
    id: int
    image_url: str
    caption: Optional[str]
    nursery_id: int
    uploaded_by: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NewsletterCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    pdf_url: Optional[str] = Field(default=None, max_length=500)
    tags: Optional[str] = Field(default=None, max_length=255)


class NewsletterUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1)
    pdf_url: Optional[str] = Field(default=None, max_length=500)
    tags: Optional[str] = Field(default=None, max_length=255)

    @field_validator("title", "content")
    @classmethod
    def reject_null(cls, value):
        return _reject_null(value)


class NewsletterResponse(BaseModel):
    id: int
    title: str
    content: str
    pdf_url: Optional[str]
    tags: Optional[str]
    nursery_id: int
    published_by: int
    publish_date: datetime

    model_config = ConfigDict(from_attributes=True)


class StaffMemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    job_title: str = Field(..., min_length=1, max_length=100)
    bio: Optional[str] = None


class StaffMemberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    job_title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    bio: Optional[str] = None

    @field_validator("name", "job_title")
    @classmethod
    def reject_null(cls, value):
        return _reject_null(value)


class StaffMemberResponse(BaseModel):
    id: int
    name: str
    job_title: str
    bio: Optional[str]
    nursery_id: int
    created_by: int

    model_config = ConfigDict(from_attributes=True)
