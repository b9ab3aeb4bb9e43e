from app.core.roles import Role
from tests.helpers import create_event, create_user


def test_list_nurseries(client, nurseries):
    r = client.get("/nurseries")
    assert r.status_code == 200
    assert [n["location"] for n in r.json()["data"]] == ["hayes", "uxbridge", "hounslow"]


def test_nursery_pages(client, db, nurseries):
    n1, n2, _ = nurseries
    author = create_user(db, role=Role.SUPER_ADMIN)
    create_event(db, nursery_id=n1.id, created_by=author.id, title="Hayes picnic")
    create_event(db, nursery_id=n2.id, created_by=author.id, title="Uxbridge picnic")

    assert client.get("/nurseries/hayes").json()["data"]["name"] == n1.name
    events = client.get("/nurseries/hayes/events").json()["data"]
    assert [e["title"] for e in events] == ["Hayes picnic"]
    assert client.get("/nurseries/hayes/gallery").json()["data"] == []
    assert client.get("/nurseries/hayes/newsletters").json()["data"] == []
    assert client.get("/nurseries/hayes/staff").json()["data"] == []


def test_unknown_location_is_404(client, nurseries):
    r = client.get("/nurseries/atlantis")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Nursery not found"}


def test_contact_validation(client):
    r = client.post("/contact", json={"name": "x", "email": "not-an-email", "message": "hi"})
    assert r.status_code == 422
    assert r.json()["success"] is False

    ok = client.post("/contact", json={"name": "x", "email": "x@example.com", "message": "hi", "nursery_location": "mars"})
    assert ok.status_code == 201
