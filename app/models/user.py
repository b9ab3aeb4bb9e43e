"""
user.py

사용자(User) 모델 정의 파일.

이 파일은 관리자 대시보드에 로그인하는 사용자의 기본 정보와
권한(Role), 소속 어린이집(nursery_id), 활성 상태를 관리한다.

모든 인증, 권한, 어린이집 범위(scope) 판단의 기준이 되는 핵심 모델이다.

"""

import datetime

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.roles import Role
from app.db.base import Base, utcnow


"""
사용자(User) 모델

- username / email 은 고유 식별자 (로그인은 둘 다 허용)
- role 을 통해 접근 권한 제어
- nursery_id 는 NURSERY_ADMIN / STAFF 에만 존재
- is_active=False 이면 로그인 및 기존 세션 사용 불가

"""

class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    role: Mapped[Role] = mapped_column(
        SAEnum(Role, name="role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=Role.REGULAR,
    )
    nursery_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("nurseries.id"), nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    updated_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
