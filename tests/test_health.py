def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"

def test_db_ping(client):
    r = client.get("/db-ping")
    assert r.status_code == 200
    body = r.json()
    assert body["db"] == "ok"
    assert body["value"] == 1

def test_unknown_route_uses_error_envelope(client):
    r = client.get("/no-such-route")
    assert r.status_code == 404
    assert r.json() == {"success": False, "message": "Not Found"}

def test_validation_error_uses_error_envelope(client):
    r = client.post("/auth/login", json={"username": "someone"})
    assert r.status_code == 422
    body = r.json()
    assert body["success"] is False
    assert body["message"] == "Invalid request"
    assert body["errors"]
