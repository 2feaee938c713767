"""Health, root and cross-cutting HTTP behaviour"""

async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["environment"] == "test"
    assert body["uptime"] >= 0
    assert "timestamp" in body

async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "running"
    assert response.json()["version"] == "1.0.0"

async def test_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert "X-Process-Time" in response.headers

async def test_unknown_route_uses_error_format(client):
    response = await client.get("/api/nothing-here")
    assert response.status_code == 404
    body = response.json()
    assert body["message"] == "Not Found"
    assert body["code"] == "HTTP_ERROR"
    assert body["request_id"]

async def test_database_ping(app):
    assert await app.state.db.ping() is True
