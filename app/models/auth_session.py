"""
auth_session.py

로그인 세션(AuthSession) 모델 정의 파일.

브라우저에는 session_id 만 HttpOnly 쿠키로 전달되고,
세션의 실제 상태(로그인 사용자, 권한 스냅샷, CSRF 토큰, 선택된 어린이집 범위)는
모두 서버 DB에만 저장된다.

설계 원칙:
- 서버 레코드가 없거나 만료된 세션은 "비로그인"과 동일하게 취급
- role / nursery_id 는 로그인 시점 스냅샷 (이후 User 변경 시 세션 폐기)
- csrf_token 은 세션당 1개로 고정 (세션과 함께 생성/삭제)

"""

import datetime

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.roles import Role
from app.db.base import Base, utcnow


class AuthSession(Base):
    __tablename__ = "sessions"
    __table_args__ = (
        Index("ix_sessions_user_id", "user_id"),
        Index("ix_sessions_expires_at", "expires_at"),
    )

    session_id: Mapped[str] = mapped_column(String(128), primary_key=True)

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role: Mapped[Role] = mapped_column(
        SAEnum(Role, name="role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    nursery_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    csrf_token: Mapped[str | None] = mapped_column(String(128), nullable=True)

    # 어린이집 범위 선택 상태 (None=기본 범위, -1=전체)
    selected_nursery_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    expires_at: Mapped[datetime.datetime] = mapped_column(DateTime, nullable=False)
