import logging

import pytest
from fastapi.testclient import TestClient

from portfolio.api.app import create_app


def test_health() -> None:
    client = TestClient(create_app())
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
    assert "timestamp" in resp.json()


def test_owner_user_is_seeded_and_upsert_merges_fields() -> None:
    client = TestClient(create_app())

    owner = client.get("/api/users/employer")
    assert owner.status_code == 200
    assert owner.json()["email"] == "employer@tylerbustard.ca"
    assert owner.json()["firstName"] == "Admin"

    created = client.put("/api/users/visitor", json={"email": "v@example.com", "firstName": "Vera"})
    assert created.status_code == 200
    assert created.json()["firstName"] == "Vera"

    updated = client.put("/api/users/visitor", json={"lastName": "Lee"})
    assert updated.json()["firstName"] == "Vera"
    assert updated.json()["lastName"] == "Lee"

    assert client.get("/api/users/nobody").status_code == 404


def test_contact_messages_are_appended() -> None:
    client = TestClient(create_app())

    resp = client.post(
        "/api/contact",
        json={"name": "Ada", "email": "ada@example.com", "subject": "Hello", "message": "Loved the site"},
    )
    assert resp.status_code == 200
    assert resp.json()["id"] > 0

    client.post("/api/contact", json={"name": "Bob", "email": "bob@example.com", "message": "Hi"})
    messages = client.get("/api/contact").json()
    assert [row["name"] for row in messages] == ["Ada", "Bob"]
    assert messages[1]["subject"] == ""

    assert client.post("/api/contact", json={"name": "NoBody", "email": "x@example.com"}).status_code == 422


def test_sql_queries_are_appended() -> None:
    client = TestClient(create_app())
    assert client.post("/api/sql-queries", json={"query": "SELECT 1"}).status_code == 200
    assert client.post("/api/sql-queries", json={"query": ""}).status_code == 422
    assert [row["query"] for row in client.get("/api/sql-queries").json()] == ["SELECT 1"]


def test_api_requests_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="portfolio.api.requests")
    client = TestClient(create_app())

    resp = client.get("/api/videos")
    assert resp.status_code == 200
    assert resp.json() == []

    client.get("/health")
    lines = [record.getMessage() for record in caplog.records if record.name == "portfolio.api.requests"]
    assert len(lines) == 1
    assert lines[0].startswith("GET /api/videos 200 in ")
    assert lines[0].endswith(":: []")
