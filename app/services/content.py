"""
services/content.py

어린이집별 콘텐츠(행사 / 갤러리 / 소식지 / 교직원) 조회 로직 모음.

라우터는 이 파일의 함수로 DB 를 조회하고,
결과가 없을 때의 HTTP 응답(404)은 라우터가 결정한다.

설계 원칙:
- HTTP / FastAPI 의존성 없음
- 트랜잭션 제어는 라우터에서 수행
- ID 로 조회할 때도 항상 범위(scope) 필터를 함께 적용
  -> 다른 어린이집 레코드와 존재하지 않는 레코드를 구분할 수 없음

관련 파일:
- app.models.content       : Event / GalleryImage / Newsletter / StaffMember
- app.services.scope       : 범위 필터
- app.routers.events 등    : 콘텐츠 관리 API

"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.nursery import Nursery
from app.services.scope import NurseryScope, apply_scope


def get_nursery(db: Session, nursery_id: int) -> Nursery | None:
    return db.get(Nursery, nursery_id)


def list_for_nursery(db: Session, model, nursery_id: int, order_by):
    return db.scalars(
        select(model).where(model.nursery_id == nursery_id).order_by(order_by)
    ).all()


def list_in_scope(db: Session, model, scope: NurseryScope, order_by):
    stmt = apply_scope(select(model), model.nursery_id, scope)
    return db.scalars(stmt.order_by(order_by)).all()


def get_in_scope(db: Session, model, resource_id: int, scope: NurseryScope):
    stmt = apply_scope(select(model).where(model.id == resource_id), model.nursery_id, scope)
    return db.scalar(stmt)


"""
부분 수정 적용

- 요청에서 실제로 보낸 필드만 반영 (exclude_unset)
- 값이 바뀐 필드 이름 목록을 반환 (활동 로그 설명용)

"""

def apply_update(obj, data) -> list[str]:
    changed = []
    for field, value in data.model_dump(exclude_unset=True).items():
        if getattr(obj, field) != value:
            setattr(obj, field, value)
            changed.append(field)
    return changed
