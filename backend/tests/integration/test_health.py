"""Smoke tests for the health endpoint and error envelope."""

from __future__ import annotations

from tests.helpers.assertions import assert_problem


def test_health_ok(client):
    """GIVEN the app WHEN /health is requested THEN it reports ok with a timestamp."""
    resp = client.get("/health")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "ok"
    assert "timestamp" in body
    assert resp.headers.get("X-Request-ID")


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-ID": "req-123"})

    assert resp.headers["X-Request-ID"] == "req-123"


def test_unknown_route_is_problem_json(client):
    resp = client.get("/does-not-exist")

    body = assert_problem(resp, 404, "not_found")
    assert body["detail"] == "Route '/does-not-exist' not found"


def test_request_id_is_fresh_for_each_request(client):
    """GIVEN two requests in one test WHEN each sends its own id THEN each is echoed."""
    first = client.get("/health", headers={"X-Request-ID": "req-first"})
    second = client.get("/health", headers={"X-Request-ID": "req-second"})
    third = client.get("/health")

    assert first.headers["X-Request-ID"] == "req-first"
    assert second.headers["X-Request-ID"] == "req-second"
    assert third.headers["X-Request-ID"] not in {"req-first", "req-second"}
