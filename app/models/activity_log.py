"""

activity_log.py

관리자(Admin) 행위 기록(Audit Log) 모델 정의 파일.

이 파일은 관리자 대시보드에서 수행된 주요 변경 행위
(사용자 생성/수정, 행사·갤러리·소식지·교직원 변경, 사이트 설정 변경)를
DB에 영구적으로 기록하기 위한 로그 테이블을 정의한다.

설계 원칙:
- 실제 데이터 변경과 로그 기록을 분리
- 로그 데이터는 수정/삭제하지 않는 것을 전제로 설계
- 행위자 정보(username, role)와 어린이집 이름은 기록 시점 값으로 복사 저장
  (이후 사용자/어린이집 정보가 바뀌어도 로그는 그대로 유지)

"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.roles import Role
from app.db.base import Base, utcnow



#  관리자 행위 유형 Enum

class ActionType(str, Enum):
    CREATE_USER = "create_user"
    UPDATE_USER = "update_user"
    CREATE_EVENT = "create_event"
    UPDATE_EVENT = "update_event"
    DELETE_EVENT = "delete_event"
    UPLOAD_GALLERY = "upload_gallery"
    UPDATE_GALLERY = "update_gallery"
    DELETE_GALLERY = "delete_gallery"
    CREATE_NEWSLETTER = "create_newsletter"
    UPDATE_NEWSLETTER = "update_newsletter"
    DELETE_NEWSLETTER = "delete_newsletter"
    CREATE_STAFF = "create_staff"
    UPDATE_STAFF = "update_staff"
    DELETE_STAFF = "delete_staff"
    UPDATE_SETTINGS = "update_settings"


"""
관리자 행위 로그 모델

- user_id       : 행위를 수행한 사용자 ID
- username      : 행위자 username (기록 시점)
- user_role     : 행위자 권한 (기록 시점)
- nursery_id    : 관련 어린이집 ID (없을 수 있음)
- nursery_name  : 관련 어린이집 이름 (기록 시점)
- action_type   : 수행된 행위 유형
- resource_id   : 변경된 리소스 ID (없을 수 있음)
- description   : 사람이 읽을 수 있는 설명
- created_at    : 행위 발생 시각 (UTC)

"""

class ActivityLog(Base):
    __tablename__ = "activity_logs"
    __table_args__ = (
        Index("ix_activity_logs_nursery_id", "nursery_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    user_role: Mapped[Role] = mapped_column(
        SAEnum(Role, name="role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    nursery_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("nurseries.id"), nullable=True)
    nursery_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    action_type: Mapped[ActionType] = mapped_column(
        SAEnum(ActionType, name="action_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    resource_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
