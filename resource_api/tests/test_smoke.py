def test_health_and_version(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body.get("status") == "ok"
    assert "T" in body.get("timestamp", "")

    v = client.get("/version")
    assert v.status_code == 200
    assert v.json().get("app") == "resource-api"


def test_create_then_fetch(client, laptop):
    res = client.post("/api/resources", json=laptop)
    assert res.status_code == 201
    data = res.json()["data"]
    assert data["id"] is not None
    assert data["price"] == 999.99

    got = client.get(f"/api/resources/{data['id']}")
    assert got.status_code == 200
    assert got.json()["data"]["name"] == "Laptop"


def test_security_headers(client, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    r = client.get("/health")
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "SAMEORIGIN"
    assert r.headers["Referrer-Policy"] == "no-referrer"
    assert "max-age" in r.headers["Strict-Transport-Security"]

    monkeypatch.setenv("APP_ENV", "development")
    assert "Strict-Transport-Security" not in client.get("/health").headers
