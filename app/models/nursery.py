import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, utcnow


class NurseryLocation(str, Enum):
    HAYES = "hayes"
    UXBRIDGE = "uxbridge"
    HOUNSLOW = "hounslow"
    GENERAL = "general"


class Nursery(Base):
    """어린이집 지점.

    location 은 공개 페이지 URL(/nurseries/{location})에 사용되므로 고유해야 한다.
    """

    __tablename__ = "nurseries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[NurseryLocation] = mapped_column(
        SAEnum(NurseryLocation, name="nursery_location", values_callable=lambda e: [m.value for m in e]),
        unique=True,
        nullable=False,
    )
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(30), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    hero_image: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
