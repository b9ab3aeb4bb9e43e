"""
services/activity_log.py

관리자 활동 로그 기록 서비스.

관리자가 사용자 / 행사 / 갤러리 / 소식지 / 교직원 / 사이트 설정을 변경할 때
ActivityLog 테이블에 "누가, 어느 어린이집에서, 무엇을" 했는지 기록한다.

설계 원칙:
- 행위자 이름 / 권한 / 어린이집 이름은 기록 시점 값으로 복사 (이후 변경과 무관)
- 로그 데이터는 수정/삭제하지 않음

"""

from sqlalchemy.orm import Session

from app.core.policy import Principal
from app.models.activity_log import ActionType, ActivityLog
from app.models.nursery import Nursery


"""
활동 로그 기록 함수

- actor       : 행위를 수행한 사용자
- action      : 행위 유형
- nursery     : 대상 어린이집 (사용자/설정 변경처럼 어린이집과 무관하면 None)
- resource_id : 대상 레코드 ID (선택)
- description : 사람이 읽는 설명

NOTE:
- db.commit()은 호출 측(라우터)에서 수행

"""
def write_activity_log(
    db: Session,
    *,
    actor: Principal,
    action: ActionType,
    description: str,
    nursery: Nursery | None = None,
    resource_id=None,
):
    log = ActivityLog(
        user_id=actor.id,
        username=actor.username,
        user_role=actor.role,
        nursery_id=nursery.id if nursery else None,
        nursery_name=nursery.name if nursery else None,
        action_type=action,
        resource_id=resource_id,
        description=description,
    )
    db.add(log)
