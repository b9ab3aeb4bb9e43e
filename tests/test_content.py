"""
어린이집별 콘텐츠 관리 통합 테스트.
- 생성 시 활동 로그 기록 (행위자 / 어린이집 이름 포함)
- 범위 목록은 본인 소속 데이터만
- 다른 어린이집 레코드는 존재하지 않는 레코드와 같은 404
"""

from sqlalchemy import select

from app.core.roles import Role
from app.models.activity_log import ActionType, ActivityLog
from app.models.content import Event
from tests.helpers import create_event, create_user, csrf_header, login

EVENT = {
    "title": "Summer Fair",
    "date": "2026-07-10",
    "time": "2:00 PM",
    "location": "Main Hall",
    "description": "Games and food",
}


def test_nursery_admin_event_lifecycle(client, db, nurseries):
    n1 = nurseries[0]
    admin = create_user(db, role=Role.NURSERY_ADMIN, nursery_id=n1.id)
    token = login(client, admin)

    created = client.post(f"/admin/nurseries/{n1.id}/events", json=EVENT, headers=csrf_header(token))
    assert created.status_code == 201, created.text
    event_id = created.json()["data"]["id"]
    assert created.json()["data"]["created_by"] == admin.id

    updated = client.put(f"/admin/events/{event_id}", json={"title": "Summer Fair 2026"}, headers=csrf_header(token))
    assert updated.status_code == 200, updated.text
    assert updated.json()["data"]["title"] == "Summer Fair 2026"
    assert updated.json()["data"]["updated_by"] == admin.id

    unchanged = client.put(f"/admin/events/{event_id}", json={"title": "Summer Fair 2026"}, headers=csrf_header(token))
    assert unchanged.status_code == 400

    deleted = client.delete(f"/admin/events/{event_id}", headers=csrf_header(token))
    assert deleted.status_code == 200
    db.expire_all()
    assert db.get(Event, event_id) is None

    logs = db.scalars(select(ActivityLog).order_by(ActivityLog.id)).all()
    assert [log.action_type for log in logs] == [
        ActionType.CREATE_EVENT,
        ActionType.UPDATE_EVENT,
        ActionType.DELETE_EVENT,
    ]
    assert all(log.nursery_name == n1.name and log.username == admin.username for log in logs)


def test_scoped_list_and_foreign_rows_are_404(client, db, nurseries):
    n1, n2, _ = nurseries
    sa = create_user(db, role=Role.SUPER_ADMIN)
    mine = create_event(db, nursery_id=n1.id, created_by=sa.id, title="mine")
    theirs = create_event(db, nursery_id=n2.id, created_by=sa.id, title="theirs")

    admin = create_user(db, role=Role.NURSERY_ADMIN, nursery_id=n1.id)
    token = login(client, admin)

    listed = client.get("/admin/events")
    assert listed.status_code == 200
    assert [e["title"] for e in listed.json()["data"]] == ["mine"]
    assert listed.json()["meta"]["scope"] == {"kind": "single", "nurseryId": n1.id}

    foreign = client.put(f"/admin/events/{theirs.id}", json={"title": "hijack"}, headers=csrf_header(token))
    missing = client.put("/admin/events/999999", json={"title": "hijack"}, headers=csrf_header(token))
    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json()

    assert client.delete(f"/admin/events/{theirs.id}", headers=csrf_header(token)).status_code == 404
    assert client.delete(f"/admin/events/{mine.id}", headers=csrf_header(token)).status_code == 200

    db.expire_all()
    assert db.get(Event, theirs.id).title == "theirs"


def test_unknown_nursery_is_404_for_super_admin(client, db):
    sa = create_user(db, role=Role.SUPER_ADMIN)
    login(client, sa)
    assert client.get("/admin/nurseries/999999/events").status_code == 404


def test_gallery_newsletters_staff(client, db, nurseries):
    n1, n2, _ = nurseries
    admin = create_user(db, role=Role.NURSERY_ADMIN, nursery_id=n1.id)
    token = login(client, admin)
    h = csrf_header(token)

    img = client.post(f"/admin/nurseries/{n1.id}/gallery", json={"image_url": "/img/a.jpg", "caption": "Art"}, headers=h)
    assert img.status_code == 201, img.text
    image_id = img.json()["data"]["id"]
    assert client.put(f"/admin/gallery/{image_id}", json={"caption": "Painting"}, headers=h).status_code == 200

    news = client.post(
        f"/admin/nurseries/{n1.id}/newsletters",
        json={"title": "Spring", "content": "News", "tags": "spring"},
        headers=h,
    )
    assert news.status_code == 201, news.text

    member = client.post(
        f"/admin/nurseries/{n1.id}/staff",
        json={"name": "Jamie", "job_title": "Room Leader"},
        headers=h,
    )
    assert member.status_code == 201, member.text

    assert [i["caption"] for i in client.get("/admin/gallery").json()["data"]] == ["Painting"]
    assert [n["title"] for n in client.get("/admin/newsletters").json()["data"]] == ["Spring"]
    assert [m["name"] for m in client.get("/admin/staff").json()["data"]] == ["Jamie"]

    # 다른 어린이집에는 등록 불가
    other = client.post(f"/admin/nurseries/{n2.id}/staff", json={"name": "X", "job_title": "Y"}, headers=h)
    assert other.status_code == 403

    assert client.delete(f"/admin/gallery/{image_id}", headers=h).status_code == 200
    assert client.get("/admin/gallery").json()["data"] == []


def test_nursery_activity_logs_are_scoped(client, db, nurseries):
    n1, n2, _ = nurseries
    admin = create_user(db, role=Role.NURSERY_ADMIN, nursery_id=n1.id)
    token = login(client, admin)
    client.post(f"/admin/nurseries/{n1.id}/events", json=EVENT, headers=csrf_header(token))

    own = client.get(f"/admin/nurseries/{n1.id}/activity-logs")
    assert own.status_code == 200
    assert [log["action_type"] for log in own.json()["data"]] == ["create_event"]

    assert client.get(f"/admin/nurseries/{n2.id}/activity-logs").status_code == 403


def test_explicit_null_on_required_fields_is_422(client, db, nurseries):
    n1 = nurseries[0]
    admin = create_user(db, role=Role.NURSERY_ADMIN, nursery_id=n1.id)
    h = csrf_header(login(client, admin))

    event_id = client.post(f"/admin/nurseries/{n1.id}/events", json=EVENT, headers=h).json()["data"]["id"]
    news_id = client.post(
        f"/admin/nurseries/{n1.id}/newsletters", json={"title": "Spring", "content": "News"}, headers=h
    ).json()["data"]["id"]
    member_id = client.post(
        f"/admin/nurseries/{n1.id}/staff", json={"name": "Jamie", "job_title": "Room Leader"}, headers=h
    ).json()["data"]["id"]
    image_id = client.post(
        f"/admin/nurseries/{n1.id}/gallery", json={"image_url": "/img/a.jpg", "caption": "Art"}, headers=h
    ).json()["data"]["id"]

    cases = [
        (f"/admin/events/{event_id}", {"title": None}),
        (f"/admin/events/{event_id}", {"date": None}),
        (f"/admin/newsletters/{news_id}", {"content": None}),
        (f"/admin/staff/{member_id}", {"job_title": None}),
    ]
    for path, body in cases:
        r = client.put(path, json=body, headers=h)
        assert r.status_code == 422, (path, body, r.text)
        assert r.json()["success"] is False

    # 선택 필드는 null 로 비울 수 있음
    cleared = client.put(f"/admin/gallery/{image_id}", json={"caption": None}, headers=h)
    assert cleared.status_code == 200, cleared.text
    assert cleared.json()["data"]["caption"] is None
    bio = client.put(f"/admin/staff/{member_id}", json={"bio": "Loves music"}, headers=h)
    assert bio.status_code == 200

    db.expire_all()
    assert db.get(Event, event_id).title == EVENT["title"]
    update_logs = db.scalars(
        select(ActivityLog).where(ActivityLog.action_type.in_([ActionType.UPDATE_EVENT, ActionType.UPDATE_NEWSLETTER]))
    ).all()
    assert update_logs == []
