"""Tests — health probes, request middleware and app-level error handlers."""


def test_ready(client):
    res = client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}


def test_live_reports_checks(client):
    res = client.get("/api/v1/health/live")
    assert res.status_code == 200
    data = res.get_json()
    assert data["status"] == "ok"
    assert data["checks"]["database"]["status"] == "ok"
    assert data["checks"]["weather"]["status"] == "configured"
    assert data["checks"]["app"]["testing"] is True


def test_response_headers(client):
    res = client.get("/api/v1/health/ready", headers={"X-Request-ID": "abc123"})
    assert res.headers["X-Request-ID"] == "abc123"
    assert "X-Request-Duration-Ms" in res.headers
    assert res.headers["X-Content-Type-Options"] == "nosniff"


def test_unknown_route_is_json_404(client):
    res = client.get("/api/v1/nope")
    assert res.status_code == 404
    assert res.get_json()["path"] == "/api/v1/nope"


def test_method_not_allowed_is_json(client):
    res = client.patch("/api/v1/health/ready")
    assert res.status_code == 405
    assert res.get_json() == {"error": "Method not allowed"}
